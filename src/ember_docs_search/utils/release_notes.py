"""Release notes parsing for Ember CHANGELOG style bodies.

A release body looks like::

    Short description of the release.

    ### CHANGELOG

    - [#20950](https://github.com/emberjs/ember.js/pull/20950) [FEATURE] Add renderComponent
    - [#20988](https://github.com/emberjs/ember.js/pull/20988) [BUGFIX] Fix memory leak

Only bullet items carrying the requested tag are extracted.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
import logging
import re
from typing import Any

from ember_docs_search.domain.model import ReleaseInfo


logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description available in release notes."

BULLET_PATTERN = re.compile(r"^[-*]\s")
BULLET_PREFIX_PATTERN = re.compile(r"^[-*]\s+")
HEADER_PATTERN = re.compile(r"^#+\s")
PR_LINKS_PATTERN = re.compile(r"^(\[#\d+\]\([^)]+\)\s*/?\s*)+")
ANY_TAG_PATTERN = re.compile(
    r"\[(FEATURE|ENHANCEMENT|BUGFIX|BREAKING|CLEANUP|INTERNAL|DEPRECATION)\]\s*", re.IGNORECASE
)

FEATURE_TAGS = re.compile(r"\[(FEATURE|ENHANCEMENT)\]", re.IGNORECASE)
BUGFIX_TAGS = re.compile(r"\[BUGFIX\]", re.IGNORECASE)
BREAKING_TAGS = re.compile(r"\[BREAKING\]", re.IGNORECASE)

MAX_DESCRIPTION_LINES = 3
MAX_DESCRIPTION_LENGTH = 300


class ReleaseNotesParser:
    """Extracts description and tagged change lists from a release body."""

    def __init__(self, max_items: int = 10, min_length: int = 10, max_length: int = 200) -> None:
        self.max_items = max_items
        self.min_length = min_length
        self.max_length = max_length

    def _extract_tagged(self, body: str, tag_pattern: re.Pattern[str]) -> list[str]:
        items: list[str] = []
        for line in body.split("\n"):
            if not BULLET_PATTERN.match(line) or not tag_pattern.search(line):
                continue
            item = BULLET_PREFIX_PATTERN.sub("", line).strip()
            item = PR_LINKS_PATTERN.sub("", item).strip()
            item = ANY_TAG_PATTERN.sub("", item, count=1).strip()
            if self.min_length <= len(item) <= self.max_length:
                items.append(item)
        return items[: self.max_items]

    def extract_description(self, body: str) -> str:
        """First paragraph lines before any header or list item (at most 300 chars)."""
        lines: list[str] = []
        for line in body.split("\n"):
            if HEADER_PATTERN.match(line) or BULLET_PATTERN.match(line):
                break
            if line.strip():
                lines.append(line.strip())
            if len(lines) >= MAX_DESCRIPTION_LINES:
                break
        description = " ".join(lines)[:MAX_DESCRIPTION_LENGTH]
        return description or NO_DESCRIPTION

    def extract_features(self, body: str) -> list[str]:
        return self._extract_tagged(body, FEATURE_TAGS)

    def extract_bug_fixes(self, body: str) -> list[str]:
        return self._extract_tagged(body, BUGFIX_TAGS)

    def extract_breaking_changes(self, body: str) -> list[str]:
        return self._extract_tagged(body, BREAKING_TAGS)

    def parse_release(self, release: Mapping[str, Any], version: str) -> ReleaseInfo:
        """Build a ReleaseInfo from a release payload (``body``, ``published_at``, ``html_url``)."""
        body = release.get("body") or ""
        return ReleaseInfo(
            version=version,
            release_date=_release_date(release.get("published_at")),
            description=self.extract_description(body),
            features=self.extract_features(body),
            bug_fixes=self.extract_bug_fixes(body),
            breaking_changes=self.extract_breaking_changes(body),
            url=release.get("html_url"),
        )


def _release_date(published_at: Any) -> str | None:
    """ISO date part of an ISO-8601 timestamp, or None when missing or unparseable."""
    if not published_at:
        return None
    try:
        return datetime.fromisoformat(str(published_at).replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        logger.debug("Ignoring unparseable release date %r", published_at)
        return None
