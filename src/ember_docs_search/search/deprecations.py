"""Deprecation detection and warning generation.

The classifier is a table of named rules. Each rule pairs a compiled
pattern with an intent:

- ``signal``: any match marks the text as describing a deprecated API
- ``since``: first match yields the version the API was deprecated in
- ``reason``: first match yields a free-text reason
- ``alternative``: first match (in table order) yields the modern replacement

Lookups go through two tiers: records detected from corpus content (filled
only while an index is built) and a small seeded table of well-known
deprecations used as fallback.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
import re
from typing import Any, NamedTuple

from ember_docs_search.domain.model import DeprecationRecord, WarningFormat
from ember_docs_search.utils.front_matter import parse_front_matter


logger = logging.getLogger(__name__)


class ClassifierRule(NamedTuple):
    name: str
    pattern: re.Pattern[str]
    intent: str


_QUOTED_TARGET = r"([`'\"]?[^`'\".,\n]+[`'\"]?)"

CLASSIFIER_RULES: tuple[ClassifierRule, ...] = (
    ClassifierRule("deprecated", re.compile(r"\bdeprecated\b", re.IGNORECASE), "signal"),
    ClassifierRule("legacy", re.compile(r"\blegacy\b", re.IGNORECASE), "signal"),
    ClassifierRule("no-longer-recommended", re.compile(r"\bno longer recommended\b", re.IGNORECASE), "signal"),
    ClassifierRule("not-preferred", re.compile(r"\bnot preferred\b", re.IGNORECASE), "signal"),
    ClassifierRule("should-not-be-used", re.compile(r"\bshould not be used\b", re.IGNORECASE), "signal"),
    ClassifierRule("avoid-using", re.compile(r"\bavoid using\b", re.IGNORECASE), "signal"),
    ClassifierRule(
        "since-version",
        re.compile(r"deprecated\s+(?:since|in)\s+(?:ember\s+)?v?(\d+\.\d+(?:\.\d+)?)", re.IGNORECASE),
        "since",
    ),
    ClassifierRule(
        "reason",
        re.compile(
            r"deprecated[^.]*?\b(?:because|since(?!\s+(?:ember\s+)?v?\d)|as|reason:?)\s+([^.]+)",
            re.IGNORECASE,
        ),
        "reason",
    ),
    ClassifierRule(
        "use-instead",
        re.compile(rf"\b(?:instead,?\s+use|use|try|prefer)\s+{_QUOTED_TARGET}", re.IGNORECASE),
        "alternative",
    ),
    ClassifierRule(
        "replaced-by",
        re.compile(rf"\b(?:replaced\s+by|superseded\s+by)\s+{_QUOTED_TARGET}", re.IGNORECASE),
        "alternative",
    ),
    ClassifierRule(
        "modern-alternative",
        re.compile(rf"\bmodern\s+alternative:?\s+{_QUOTED_TARGET}", re.IGNORECASE),
        "alternative",
    ),
)

# Backtick-quoted capitalized identifiers in deprecation guides
GUIDE_IDENTIFIER_PATTERN = re.compile(r"`([A-Z][a-zA-Z]+)`")
# Optional backtick-wrapped identifier at the start of a result title
TITLE_IDENTIFIER_PATTERN = re.compile(r"`?([A-Z][a-zA-Z]+)`?")
BROAD_DEPRECATION_PATTERN = re.compile(r"\b(deprecated|legacy|no longer recommended)\b", re.IGNORECASE)

_NATIVE_PROXY_REASON = "Native Proxy is now available in all supported environments"

SEEDED_DEPRECATIONS: dict[str, DeprecationRecord] = {
    "arrayproxy": DeprecationRecord(
        name="ArrayProxy",
        reason=_NATIVE_PROXY_REASON,
        modern_alternative="Use tracked properties and native arrays for reactive data",
        category="legacy-proxy",
        severity="warning",
    ),
    "objectproxy": DeprecationRecord(
        name="ObjectProxy",
        reason=_NATIVE_PROXY_REASON,
        modern_alternative="Use tracked properties with plain objects",
        category="legacy-proxy",
        severity="warning",
    ),
    "promiseproxymixin": DeprecationRecord(
        name="PromiseProxyMixin",
        reason=_NATIVE_PROXY_REASON,
        modern_alternative="Use ember-async-data or ember-concurrency with tracked properties",
        category="legacy-proxy",
        severity="warning",
    ),
    "evented": DeprecationRecord(
        name="Evented",
        reason="Legacy event system from pre-modern Ember",
        modern_alternative="Use native event system or ember-concurrency for complex flows",
        category="legacy-events",
        severity="info",
    ),
}

SEVERITY_ICONS = {"warning": "⚠️", "info": "ℹ️"}


def _first_group(intent: str, text: str) -> str | None:
    for rule in CLASSIFIER_RULES:
        if rule.intent != intent:
            continue
        match = rule.pattern.search(text)
        if match:
            return match.group(1)
    return None


def _item_parts(item: Any) -> tuple[str | None, str | None]:
    """Return (content, link) for an Item or a plain mapping."""
    if isinstance(item, Mapping):
        content = item.get("content")
        link = item.get("link")
    else:
        content = getattr(item, "content", None)
        link = getattr(item, "link", None)

    if not isinstance(content, str):
        return None, None
    if not link:
        metadata, _ = parse_front_matter(content)
        link = metadata.get("link") or metadata.get("url")
    return content, str(link) if link else None


class DeprecationRegistry:
    """Two-tier deprecation lookup plus content classifier."""

    def __init__(self, seeded: Mapping[str, DeprecationRecord] | None = None) -> None:
        self._detected: dict[str, DeprecationRecord] = {}
        seeded = SEEDED_DEPRECATIONS if seeded is None else seeded
        self._seeded = {key.lower(): value for key, value in seeded.items()}

    def __len__(self) -> int:
        return len(self._detected)

    def analyze_content(self, name: str, text: str | None) -> DeprecationRecord | None:
        """Classify free text describing ``name``.

        Returns None unless at least one signal rule matches.
        """
        if not text:
            return None

        if not any(rule.pattern.search(text) for rule in CLASSIFIER_RULES if rule.intent == "signal"):
            return None

        reason = _first_group("reason", text)
        alternative = _first_group("alternative", text)
        if alternative is not None:
            alternative = re.sub(r"[`'\"]", "", alternative).strip() or None

        return DeprecationRecord(
            name=name,
            status="deprecated",
            since=_first_group("since", text),
            reason=reason.strip() if reason else None,
            modern_alternative=alternative,
            severity="warning",
        )

    def register(self, name: str, record: DeprecationRecord | None) -> None:
        """Upsert into the content-derived tier."""
        if not name or record is None:
            return
        key = name.lower()
        if key in self._detected:
            logger.debug("Replacing detected deprecation for %s", name)
        self._detected[key] = record

    def is_deprecated(self, name: str | None) -> bool:
        if not name:
            return False
        key = name.lower()
        return key in self._detected or key in self._seeded

    def get_record(self, name: str | None) -> DeprecationRecord | None:
        """Content-derived record first, seeded record as fallback."""
        if not name:
            return None
        key = name.lower()
        return self._detected.get(key) or self._seeded.get(key)

    def analyze_documentation(self, sections: Any) -> None:
        """Register deprecations found in every section whose name mentions deprecation.

        Tolerates missing or malformed input: anything that is not a mapping
        of section name to items is ignored.
        """
        if not isinstance(sections, Mapping):
            return

        for section_name, items in sections.items():
            if not isinstance(section_name, str) or "deprecation" not in section_name.lower():
                continue
            if not isinstance(items, Iterable):
                continue

            for item in items:
                content, link = _item_parts(item)
                if not content:
                    continue
                for identifier in GUIDE_IDENTIFIER_PATTERN.findall(content):
                    record = self.analyze_content(identifier, content)
                    if record is None:
                        continue
                    if link:
                        record = record.model_copy(update={"deprecation_guide_link": link})
                    self.register(identifier, record)

        logger.info("Deprecation registry holds %d detected entries", len(self._detected))

    def check_result(self, title: str | None, content: str | None = None) -> DeprecationRecord | None:
        """Deprecation status of a search result.

        A resolved record is returned when the title names a deprecated API;
        otherwise a low-confidence ``possibly-deprecated`` marker when the
        content mentions deprecation keywords.
        """
        if not title:
            return None

        match = TITLE_IDENTIFIER_PATTERN.search(title)
        if match and self.is_deprecated(match.group(1)):
            return self.get_record(match.group(1))

        if content and BROAD_DEPRECATION_PATTERN.search(content):
            return DeprecationRecord(status="possibly-deprecated", severity="info")

        return None

    def generate_warning(self, name: str, format: WarningFormat = "banner") -> str:
        """Render a deprecation warning, or an empty string when ``name`` is not deprecated."""
        record = self.get_record(name)
        if record is None:
            return ""

        icon = SEVERITY_ICONS.get(record.severity, SEVERITY_ICONS["warning"])

        if format == "short":
            since = f" (since v{record.since})" if record.since else ""
            return f"{icon} **Deprecated**{since}"

        if format == "inline":
            message = f"{icon} **Deprecated**"
            if record.since:
                message += f" since v{record.since}"
            if record.modern_alternative:
                message += f" - Use {record.modern_alternative} instead"
            return message

        display_name = record.name or name
        lines = [f"> {icon} **DEPRECATION WARNING**", ">"]
        headline = f"> **`{display_name}` is deprecated**"
        if record.since:
            headline += f" since Ember v{record.since}"
        lines.extend([headline, ">"])
        if record.reason:
            lines.extend([f"> {record.reason}", ">"])
        if record.modern_alternative:
            lines.extend([f"> **Modern Alternative:** {record.modern_alternative}", ">"])
        if record.deprecation_guide_link:
            lines.append(f"> [View Deprecation Guide]({record.deprecation_guide_link})")
        return "\n" + "\n".join(lines) + "\n\n"
