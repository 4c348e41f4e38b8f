"""Free-text relevance ranking over corpus items.

Scoring per item (weights come from ``Settings``):

1. Exact phrase: the whole lowercase query is a substring of the content.
2. Per term: occurrences x term weight, plus a title bonus once per term
   found in the derived title.
3. All terms matched: fixed bonus, plus a proximity bonus when the first
   occurrences of the terms sit within the proximity threshold.

An item is admitted when its score reaches the absolute floor and either
two distinct terms (the exact phrase counts as one) matched or the score
also reaches the single-term floor.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import logging
from typing import get_args

from ember_docs_search.config import Settings
from ember_docs_search.domain.model import Item, ScoredResult, SearchCategory
from ember_docs_search.search.deprecations import DeprecationRegistry
from ember_docs_search.search.phrase import proximity_bonus
from ember_docs_search.search.segmenter import categorize_section, extract_title
from ember_docs_search.search.snippet import TermHit, extract_excerpt
from ember_docs_search.utils.url_builder import LinkBuilder


logger = logging.getLogger(__name__)

CATEGORIES: tuple[str, ...] = get_args(SearchCategory)


@dataclass(frozen=True)
class ItemScore:
    """Scoring breakdown of one item against one query."""

    score: int
    matched_terms: tuple[str, ...]
    query_terms_matched: int
    hits: tuple[TermHit, ...]

    @property
    def distinct_matches(self) -> int:
        return len(set(self.matched_terms))


def tokenize_query(query: str) -> list[str]:
    """Lowercase whitespace split; no minimum term length."""
    return query.lower().split()


def select_sections(section_names: Sequence[str], category: str, settings: Settings) -> list[str]:
    """Section names searched for a category filter (empty for unknown categories)."""
    if category == "all":
        return list(section_names)
    if category == "api":
        return [settings.api_section]
    if category == "guides":
        return settings.guide_sections(list(section_names))
    if category == "community":
        return [settings.community_section]
    return []


def score_item(content: str, title: str, query: str, terms: Sequence[str], settings: Settings) -> ItemScore:
    """Score one item against a lowercase query and its terms."""
    content_lower = content.lower()
    title_lower = title.lower()
    query_lower = query.lower().strip()

    score = 0
    matched: list[str] = []
    hits: list[TermHit] = []
    terms_matched = 0

    if query_lower and query_lower in content_lower:
        score += settings.exact_phrase_bonus
        matched.append(query_lower)

    for term in terms:
        occurrences = content_lower.count(term)
        if occurrences == 0:
            continue
        terms_matched += 1
        matched.append(term)
        if term in title_lower:
            score += settings.title_match_bonus
        score += occurrences * settings.term_match_weight
        hits.append(TermHit(term, content_lower.find(term)))

    if terms and terms_matched == len(terms):
        score += settings.all_terms_bonus
        score += proximity_bonus(
            (hit.position for hit in hits),
            settings.proximity_threshold,
            settings.proximity_bonus_divisor,
        )

    return ItemScore(
        score=score,
        matched_terms=tuple(matched),
        query_terms_matched=terms_matched,
        hits=tuple(hits),
    )


def is_admissible(item_score: ItemScore, settings: Settings) -> bool:
    """Absolute floor plus either two distinct matches or the single-term floor."""
    if item_score.score < settings.min_score:
        return False
    return item_score.distinct_matches >= 2 or item_score.score >= settings.min_score_single_term


def rank(
    sections: Mapping[str, Sequence[Item]],
    query: str,
    category: SearchCategory,
    limit: int,
    *,
    registry: DeprecationRegistry,
    settings: Settings,
    links: LinkBuilder,
) -> list[ScoredResult]:
    """Score every item of the selected sections and return the best ``limit`` results."""
    terms = tokenize_query(query)
    if not terms or limit <= 0:
        return []
    if category not in CATEGORIES:
        logger.debug("Unknown search category %r; expected one of %s", category, ", ".join(CATEGORIES))
        return []

    results: list[ScoredResult] = []
    for section_name in select_sections(list(sections), category, settings):
        for item in sections.get(section_name, ()):
            title = extract_title(item.content)
            item_score = score_item(item.content, title, query, terms, settings)
            if not is_admissible(item_score, settings):
                continue

            excerpt = extract_excerpt(
                item.content,
                terms,
                item_score.hits,
                cluster_gap=settings.excerpt_cluster_gap,
                before=settings.excerpt_before,
                after=settings.excerpt_after,
            )
            results.append(
                ScoredResult(
                    title=title,
                    section_category=categorize_section(
                        section_name, settings.api_section, settings.community_section
                    ),
                    excerpt=excerpt,
                    score=item_score.score,
                    matched_term_count=item_score.distinct_matches,
                    total_term_count=len(terms),
                    source_ref=links.section_link(section_name, title),
                    entity_ref=links.entity_link_from_content(item.content),
                    deprecation=registry.check_result(title, item.content),
                )
            )

    # sorted() is stable: equal scores keep corpus scan order
    results = sorted(results, key=lambda result: result.score, reverse=True)
    logger.debug("Query %r matched %d items in category %s", query, len(results), category)
    return results[:limit]
