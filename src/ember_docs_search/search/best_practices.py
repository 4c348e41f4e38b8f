"""Topic-scoped best-practice retrieval.

Candidates are community articles plus every guide section; the API section
is never searched. Topic terms match through their singular and plural
forms. Strong keywords qualify content as best-practice material; weak
keywords only add weight once a strong keyword is present, so common words
never qualify content on their own.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import logging
import re

from ember_docs_search.config import Settings
from ember_docs_search.domain.model import BestPracticeEntry, Item
from ember_docs_search.search.morphology import matches_any_form
from ember_docs_search.search.segmenter import extract_title
from ember_docs_search.utils.url_builder import LinkBuilder


logger = logging.getLogger(__name__)

STRONG_KEYWORDS: tuple[str, ...] = (
    "best practice",
    "recommended approach",
    "anti-pattern",
    "migration guide",
    "idiomatic",
    "modern pattern",
    "prefer",
    "avoid",
)

WEAK_KEYWORDS: tuple[str, ...] = (
    "tip",
    "performance",
    "recommended",
    "should",
    "modern",
    "pattern",
    "convention",
)

ANTI_PATTERN_MARKERS: tuple[str, ...] = ("avoid", "don't", "anti-pattern", "bad practice")

MIN_TERM_LENGTH = 3
BODY_SCAN_LINES = 50
BODY_OUTPUT_LINES = 30
ANTI_PATTERN_WINDOW = 3
ANTI_PATTERN_MIN_LENGTH = 10
ANTI_PATTERN_MAX_LENGTH = 200
MAX_EXAMPLES = 3
MAX_ANTI_PATTERNS = 3

STRUCTURAL_LINE_PATTERN = re.compile(r"^[#\-=]+$")
TOP_LEVEL_HEADER_PATTERN = re.compile(r"^# [^#]")


@dataclass
class PracticeSection:
    """Focused extract of one candidate item."""

    content: str = ""
    examples: list[str] = field(default_factory=list)
    anti_patterns: list[str] = field(default_factory=list)


def topic_terms(topic: str) -> list[str]:
    """Lowercase topic terms longer than two characters."""
    return [term for term in topic.lower().split() if len(term) >= MIN_TERM_LENGTH]


def score_candidate(content_lower: str, terms: Sequence[str], settings: Settings) -> int:
    """Best-practice score of lowercased content; 0 when no topic term matches."""
    matched = [term for term in terms if matches_any_form(term, content_lower)]
    if not matched:
        return 0

    score = len(matched) * settings.bp_term_match_weight
    if len(matched) == len(terms):
        score += settings.bp_all_terms_bonus

    strong = sum(1 for keyword in STRONG_KEYWORDS if keyword in content_lower)
    score += strong * settings.bp_strong_keyword_weight
    if strong:
        weak = sum(1 for keyword in WEAK_KEYWORDS if keyword in content_lower)
        score += weak * settings.bp_weak_keyword_weight

    return score


def extract_practice_section(content: str, terms: Sequence[str]) -> PracticeSection:
    """Pull the topical body, code examples and anti-patterns out of an item.

    Collection starts at the first line (outside code) mentioning a topic
    term and stops at the next top-level header.
    """
    lines = content.split("\n")
    body: list[str] = []
    examples: list[str] = []
    anti_patterns: list[str] = []
    current_example: list[str] = []
    in_code_block = False
    relevant = False

    for index, line in enumerate(lines):
        stripped = line.strip()

        if stripped.startswith("```"):
            if not in_code_block:
                in_code_block = True
                current_example = [line]
            else:
                in_code_block = False
                current_example.append(line)
                if relevant and len(current_example) > 2:
                    examples.append("\n".join(current_example))
                current_example = []
            continue

        if in_code_block:
            current_example.append(line)
            continue

        if relevant and TOP_LEVEL_HEADER_PATTERN.match(line):
            break

        line_lower = line.lower()
        if not relevant:
            relevant = any(matches_any_form(term, line_lower) for term in terms)

        if not relevant or len(body) >= BODY_SCAN_LINES:
            continue

        if any(marker in line_lower for marker in ANTI_PATTERN_MARKERS):
            window = " ".join(lines[index : index + ANTI_PATTERN_WINDOW]).strip()
            if ANTI_PATTERN_MIN_LENGTH < len(window) < ANTI_PATTERN_MAX_LENGTH and window not in anti_patterns:
                anti_patterns.append(window)

        if stripped and not STRUCTURAL_LINE_PATTERN.match(line) and not stripped.startswith("{"):
            body.append(line)

    return PracticeSection(
        content="\n".join(body[:BODY_OUTPUT_LINES]).strip(),
        examples=examples[:MAX_EXAMPLES],
        anti_patterns=anti_patterns[:MAX_ANTI_PATTERNS],
    )


def candidate_items(sections: Mapping[str, Sequence[Item]], settings: Settings) -> list[Item]:
    """Community items first, then every guide section in corpus order."""
    candidates = list(sections.get(settings.community_section, ()))
    for section_name in settings.guide_sections(list(sections)):
        candidates.extend(sections[section_name])
    return candidates


def find_best_practices(
    sections: Mapping[str, Sequence[Item]],
    topic: str,
    *,
    settings: Settings,
    links: LinkBuilder,
) -> list[BestPracticeEntry]:
    """Ranked best-practice entries for a topic (at most ``settings.max_best_practices``)."""
    terms = topic_terms(topic)
    if not terms:
        return []

    scored: list[tuple[int, BestPracticeEntry]] = []
    seen_titles: set[str] = set()

    for item in candidate_items(sections, settings):
        score = score_candidate(item.content.lower(), terms, settings)
        if score == 0 or score < settings.bp_min_threshold:
            continue

        title = extract_title(item.content)
        if title.lower() in seen_titles:
            continue
        seen_titles.add(title.lower())

        section = extract_practice_section(item.content, terms)
        if not section.content:
            continue

        scored.append(
            (
                score,
                BestPracticeEntry(
                    title=title,
                    content=section.content,
                    examples=section.examples,
                    anti_patterns=section.anti_patterns,
                    references=[links.section_link(settings.community_section, title)],
                ),
            )
        )

    scored.sort(key=lambda pair: pair[0], reverse=True)
    logger.debug("Topic %r produced %d best-practice candidates", topic, len(scored))
    return [entry for _, entry in scored[: settings.max_best_practices]]
