"""Helpers for JSON records embedded in item prose."""

from __future__ import annotations

from typing import Any

import orjson


def embedded_record_span(content: str) -> tuple[int, int] | None:
    """Return the (start, end) slice bounded by the first ``{`` and last ``}``."""
    start = content.find("{")
    if start == -1:
        return None
    end = content.rfind("}")
    if end <= start:
        return None
    return start, end + 1


def parse_embedded_record(content: str) -> dict[str, Any] | None:
    """Parse the embedded record of an item and return its ``data`` object.

    Prose before and after the braces is tolerated. Returns None when the
    braces do not bound valid JSON or the ``data.attributes`` shape is missing.
    """
    span = embedded_record_span(content)
    if span is None:
        return None

    try:
        parsed = orjson.loads(content[span[0] : span[1]])
    except orjson.JSONDecodeError:
        return None

    if not isinstance(parsed, dict):
        return None
    data = parsed.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("attributes"), dict):
        return None
    return data


def record_name(data: dict[str, Any]) -> str | None:
    """Primary name of a parsed record (``name`` falling back to ``shortname``)."""
    attributes = data.get("attributes") or {}
    name = attributes.get("name") or attributes.get("shortname")
    if not isinstance(name, str):
        return None
    return name.strip() or None
