"""Structured JSON logging for index builds and queries.

Each line is a single orjson-encoded object carrying the trace ids and the
index operation from ``observability.context``. Fields passed through
``extra=`` are copied as-is, except for oversized values and a handful of
credential-like keys.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path
import sys
from typing import IO, TYPE_CHECKING, Any

import orjson

from ember_docs_search.observability.context import get_trace_context


if TYPE_CHECKING:
    from ember_docs_search.config import Settings


# Attributes every LogRecord carries; anything else arrived via ``extra``
_RESERVED = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, correlated with the active span."""

    REDACT_KEYS = frozenset({"password", "token", "api_key", "secret", "authorization"})
    MAX_MESSAGE_LEN = 2000
    MAX_FIELD_LEN = 500

    def format(self, record: logging.LogRecord) -> str:
        entry = self._base_entry(record)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(self._extra_fields(record))
        return orjson.dumps(entry, default=self._json_default).decode("utf-8")

    def _base_entry(self, record: logging.LogRecord) -> dict[str, Any]:
        ctx = get_trace_context()
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _clip(record.getMessage(), self.MAX_MESSAGE_LEN),
            "trace_id": ctx.get("trace_id", ""),
            "span_id": ctx.get("span_id", ""),
        }
        # ember_docs_search.search.ranker -> ranker
        _, _, component = record.name.rpartition(".")
        if component != record.name:
            entry["component"] = component
        for key, value in ctx.items():
            if key not in ("trace_id", "span_id"):
                entry[key] = value
        return entry

    def _extra_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        for key, value in vars(record).items():
            if key in _RESERVED or key.startswith("_"):
                continue
            if key.lower() in self.REDACT_KEYS:
                fields[key] = "[REDACTED]"
            elif isinstance(value, str):
                fields[key] = _clip(value, self.MAX_FIELD_LEN)
            else:
                fields[key] = value
        return fields

    def _json_default(self, value: Any) -> Any:
        if isinstance(value, (set, frozenset)):
            try:
                return sorted(value)
            except TypeError:
                return list(value)
        if isinstance(value, (bytes, bytearray)):
            return value.decode("utf-8", errors="replace")
        if isinstance(value, (Path, Exception)):
            return str(value)
        return repr(value)


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _level(name: str, default: int = logging.INFO) -> int:
    return getattr(logging, name.upper(), default)


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    *,
    logger_levels: dict[str, str] | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Replace the root handlers with a single stream handler.

    Args:
        level: Root log level name
        json_output: Emit JSON lines when True, plain text otherwise
        logger_levels: Per-logger level overrides (logger name -> level name)
        stream: Destination stream; stderr by default

    Returns:
        The installed handler
    """
    root = logging.getLogger()
    root.setLevel(_level(level))
    for existing in root.handlers[:]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)

    for logger_name, logger_level in (logger_levels or {}).items():
        logging.getLogger(logger_name).setLevel(_level(logger_level))
    return handler


def configure_logging_from_settings(settings: Settings, **overrides: Any) -> logging.Handler:
    """``configure_logging`` driven by ``Settings.log_level`` and ``Settings.log_json``."""
    return configure_logging(settings.log_level, settings.log_json, **overrides)
