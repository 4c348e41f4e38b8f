"""Excerpt extraction around the densest cluster of query term hits.

Smart Defaults:
- Picks the run of hits with the most members (earliest run wins ties)
- Trims window edges to word boundaries and marks clipped edges with "..."
- Collapses embedded API records and fenced code to short placeholders
"""

from __future__ import annotations

from collections.abc import Sequence
import re
from typing import NamedTuple


API_DATA_PLACEHOLDER = "[API Data]"
CODE_PLACEHOLDER = "[Code Example]"
NO_PREVIEW = "No preview available"
ELLIPSIS = "..."

CODE_FENCE_PATTERN = re.compile(r"```[\s\S]*?```")
EXCESS_NEWLINES_PATTERN = re.compile(r"\n{3,}")
WHITESPACE_PATTERN = re.compile(r"\s")

# How far into a clipped edge we look for a word boundary
BOUNDARY_SEARCH = 50
FALLBACK_BEFORE = 100
FALLBACK_AFTER = 300
MIN_PREVIEW_LINE = 30
MAX_PREVIEW_LINE = 350


class TermHit(NamedTuple):
    """First occurrence of a query term in lowercased content."""

    term: str
    position: int


def find_best_cluster(hits: Sequence[TermHit], max_gap: int = 500) -> list[TermHit]:
    """Longest run of position-sorted hits whose consecutive gaps stay below ``max_gap``."""
    ordered = sorted(hits, key=lambda hit: hit.position)
    if not ordered:
        return []

    best: list[TermHit] = [ordered[0]]
    current: list[TermHit] = [ordered[0]]
    for hit in ordered[1:]:
        if hit.position - current[-1].position < max_gap:
            current.append(hit)
        else:
            current = [hit]
        if len(current) > len(best):
            best = list(current)
    return best


def _matching_brace(text: str, start: int) -> int:
    """Index just past the brace closing the one at ``start`` (len(text) when unbalanced)."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
    return len(text)


def collapse_record_blocks(text: str, placeholder: str = API_DATA_PLACEHOLDER) -> str:
    """Replace every brace block that holds a ``"data"`` key with a placeholder."""
    parts: list[str] = []
    cursor = 0
    while True:
        start = text.find("{", cursor)
        if start == -1:
            parts.append(text[cursor:])
            break
        end = _matching_brace(text, start)
        parts.append(text[cursor:start])
        block = text[start:end]
        parts.append(placeholder if '"data"' in block else block)
        cursor = end
    return "".join(parts)


def clean_excerpt(text: str) -> str:
    """Collapse records, code fences and runs of blank lines."""
    text = collapse_record_blocks(text)
    text = CODE_FENCE_PATTERN.sub(CODE_PLACEHOLDER, text)
    text = EXCESS_NEWLINES_PATTERN.sub("\n\n", text)
    return text.strip()


def _window(content: str, start: int, end: int, *, trim_words: bool) -> str:
    start = max(0, start)
    end = min(len(content), end)
    excerpt = content[start:end]

    if start > 0:
        if trim_words:
            boundary = WHITESPACE_PATTERN.search(excerpt)
            if boundary and 0 < boundary.start() < BOUNDARY_SEARCH:
                excerpt = excerpt[boundary.start() + 1 :]
        excerpt = ELLIPSIS + excerpt

    if end < len(content):
        if trim_words:
            boundaries = [match.start() for match in WHITESPACE_PATTERN.finditer(excerpt)]
            if boundaries and boundaries[-1] > len(excerpt) - BOUNDARY_SEARCH:
                excerpt = excerpt[: boundaries[-1]]
        excerpt = excerpt + ELLIPSIS

    return excerpt


def extract_excerpt(
    content: str,
    terms: Sequence[str],
    hits: Sequence[TermHit] | None = None,
    *,
    cluster_gap: int = 500,
    before: int = 150,
    after: int = 400,
) -> str:
    """Select the most informative window of an item for display.

    Args:
        content: Full item content.
        terms: Lowercase query terms.
        hits: First-occurrence positions recorded while scoring.
        cluster_gap: Maximum gap between consecutive hits of one cluster.
        before: Characters kept before the chosen cluster.
        after: Characters kept after the chosen cluster's first hit.

    Returns:
        A cleaned excerpt, or a preview line / sentinel when no term is found.
    """
    if hits:
        cluster = find_best_cluster(hits, cluster_gap)
        anchor = cluster[0].position
        return clean_excerpt(_window(content, anchor - before, anchor + after, trim_words=True))

    content_lower = content.lower()
    for term in terms:
        if not term:
            continue
        position = content_lower.find(term.lower())
        if position != -1:
            return clean_excerpt(
                _window(content, position - FALLBACK_BEFORE, position + FALLBACK_AFTER, trim_words=False)
            )

    for line in content.split("\n"):
        trimmed = line.strip()
        if trimmed and not re.match(r"^[#\-=]+", trimmed) and not trimmed.startswith("{") and len(trimmed) > MIN_PREVIEW_LINE:
            return trimmed[:MAX_PREVIEW_LINE]

    return NO_PREVIEW
