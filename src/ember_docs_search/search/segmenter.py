"""Corpus segmentation into named sections of items.

The corpus grammar is line based:

- ``# section-name`` (lowercase letters and hyphens only) opens a section;
  the header line becomes the first line of the section's first item.
- A line of three or more dashes closes the current item and opens the next
  one in the same section, once the current item holds real content.
- Everything else is appended verbatim to the current item.

Segmentation never raises: malformed input simply yields fewer or odd
sections.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
import re

from ember_docs_search.domain.model import Item
from ember_docs_search.search.records import parse_embedded_record, record_name
from ember_docs_search.utils.front_matter import front_matter_title


logger = logging.getLogger(__name__)

SECTION_HEADER_PATTERN = re.compile(r"^# [a-z-]+$")
SEPARATOR_PATTERN = re.compile(r"^-{3,}$")
MARKDOWN_HEADER_PATTERN = re.compile(r"^#+\s+(.+)$")
SENTENCE_PATTERN = re.compile(r"^([^.!?]+[.!?])")

# Headers and lines that are rarely meaningful titles
GENERIC_TITLE_PATTERNS = (
    re.compile(r"^for (all|any|most|some)", re.IGNORECASE),
    re.compile(r"^in (this|these|all|any)", re.IGNORECASE),
    re.compile(r"^with (this|these|all|any)", re.IGNORECASE),
    re.compile(r"^using (this|these|all|any)", re.IGNORECASE),
    re.compile(r"^(note|warning|tip|important):", re.IGNORECASE),
    re.compile(r"^(here|there|this|that) (is|are)", re.IGNORECASE),
    re.compile(r"^https?://", re.IGNORECASE),
    re.compile(r"^[0-9.]+$"),
    re.compile(r"^[-*+]\s"),
)

MAX_TITLE_LENGTH = 100
UNTITLED = "Untitled"

Sections = Mapping[str, tuple[Item, ...]]


class _SectionBuilder:
    """Accumulates lines for the item currently being read."""

    def __init__(self) -> None:
        self.sections: dict[str, list[Item]] = {}
        self.name: str | None = None
        self.buffer: list[str] = []
        self.start = 0
        self.has_content = False

    def open_section(self, name: str, header: str, line_no: int) -> None:
        self.flush()
        self.name = name
        self.buffer = [header]
        self.start = line_no
        self.has_content = False

    def split_item(self, line_no: int) -> None:
        self.flush()
        self.buffer = []
        self.start = line_no + 1
        self.has_content = False

    def append(self, line: str) -> None:
        self.buffer.append(line)
        if line.strip():
            self.has_content = True

    def flush(self) -> None:
        if self.name is None or not self.buffer:
            return
        item = Item(content="\n".join(self.buffer), start_offset=self.start)
        self.sections.setdefault(self.name, []).append(item)
        self.buffer = []


def segment_corpus(text: str) -> dict[str, tuple[Item, ...]]:
    """Split raw corpus text into sections of items in a single pass.

    Args:
        text: The full corpus

    Returns:
        Mapping of section name to its items in corpus order. Sections
        without items are never created.
    """
    builder = _SectionBuilder()

    for line_no, line in enumerate(text.split("\n")):
        if SECTION_HEADER_PATTERN.match(line):
            builder.open_section(line[2:].strip(), line, line_no)
        elif builder.name is None:
            # Preamble before the first section header
            continue
        elif SEPARATOR_PATTERN.match(line) and builder.has_content:
            builder.split_item(line_no)
        else:
            builder.append(line)

    builder.flush()

    sections = {name: tuple(items) for name, items in builder.sections.items()}
    logger.debug(
        "Segmented corpus into %d sections (%d items)",
        len(sections),
        sum(len(items) for items in sections.values()),
    )
    return sections


def _is_generic(text: str) -> bool:
    return any(pattern.search(text) for pattern in GENERIC_TITLE_PATTERNS)


def extract_title(content: str) -> str:
    """Derive a display title for an item.

    Tries, in order: front matter ``title``, the first non-generic markdown
    header (the bare section header line is never a title), the name of an
    embedded API record, and the first meaningful line of prose.
    """
    title = front_matter_title(content)
    if title:
        return title

    lines = content.split("\n")

    for line in lines:
        if SECTION_HEADER_PATTERN.match(line):
            continue
        header_match = MARKDOWN_HEADER_PATTERN.match(line)
        if header_match:
            candidate = header_match.group(1).strip()
            if len(candidate) > 3 and not _is_generic(candidate):
                return candidate

    data = parse_embedded_record(content)
    if data is not None:
        name = record_name(data)
        if name:
            return name

    for line in lines:
        trimmed = line.strip()
        if (
            not trimmed
            or re.match(r"^[-=]+$", trimmed)
            or trimmed.startswith(("{", "[", "```", "#"))
            or re.match(r"^https?://", trimmed)
        ):
            continue
        if _is_generic(trimmed):
            continue
        if len(trimmed) > 10:
            sentence_match = SENTENCE_PATTERN.match(trimmed)
            if sentence_match:
                return sentence_match.group(1).strip()[:MAX_TITLE_LENGTH]
            return trimmed[:MAX_TITLE_LENGTH]

    return UNTITLED


def categorize_section(
    section_name: str,
    api_section: str = "api-docs",
    community_section: str = "community-bloggers",
) -> str:
    """Human readable category for a section name."""
    if section_name == api_section:
        return "API Documentation"
    if section_name == community_section:
        return "Community Articles"
    return "Guides & Tutorials"
