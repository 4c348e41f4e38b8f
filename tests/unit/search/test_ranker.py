"""Unit tests for free-text relevance ranking."""

import pytest

from ember_docs_search.search.ranker import CATEGORIES, ItemScore, is_admissible, rank, score_item, select_sections
from ember_docs_search.search.segmenter import segment_corpus


def _rank(text, query, settings, links, registry, category="all", limit=5):
    return rank(segment_corpus(text), query, category, limit, registry=registry, settings=settings, links=links)


@pytest.mark.unit
class TestScoreItem:
    """Tests for per-item scoring."""

    def test_full_breakdown(self, settings):
        content = "Tracked properties update templates. tracked properties"

        item_score = score_item(
            content, "Tracked Properties", "tracked properties", ["tracked", "properties"], settings
        )

        # phrase 50 + 2 terms x (2 occurrences x 2 + title 10) + all terms 20 + proximity (200 - 8) // 10
        assert item_score.score == 50 + 14 + 14 + 20 + 19
        assert item_score.query_terms_matched == 2
        assert item_score.distinct_matches == 3

    def test_no_proximity_for_partial_match(self, settings):
        item_score = score_item("only tracked here", "Other", "tracked properties", ["tracked", "properties"], settings)

        assert item_score.score == 2
        assert item_score.query_terms_matched == 1

    def test_counting_is_literal_substring(self, settings):
        item_score = score_item("route routes router", "x", "route", ["route"], settings)

        # phrase 50 + 3 occurrences x 2 + all terms 20
        assert item_score.score == 76


@pytest.mark.unit
class TestAdmission:
    def test_absolute_floor(self, settings):
        assert not is_admissible(ItemScore(9, ("a", "b"), 2, ()), settings)

    def test_two_distinct_matches_pass_at_floor(self, settings):
        assert is_admissible(ItemScore(12, ("a", "b"), 2, ()), settings)

    def test_single_match_needs_single_term_floor(self, settings):
        assert not is_admissible(ItemScore(24, ("a",), 1, ()), settings)
        assert is_admissible(ItemScore(25, ("a",), 1, ()), settings)


@pytest.mark.unit
class TestSelectSections:
    def test_categories(self, settings):
        names = ["api-docs", "guides", "tutorials", "community-bloggers"]

        assert select_sections(names, "all", settings) == names
        assert select_sections(names, "api", settings) == ["api-docs"]
        assert select_sections(names, "guides", settings) == ["guides", "tutorials"]
        assert select_sections(names, "community", settings) == ["community-bloggers"]
        assert select_sections(names, "blogs", settings) == []

    def test_every_declared_category_selects_sections(self, settings):
        names = ["api-docs", "guides", "community-bloggers"]

        assert CATEGORIES == ("all", "api", "guides", "community")
        assert all(select_sections(names, category, settings) for category in CATEGORIES)


@pytest.mark.unit
class TestRank:
    """Tests for end-to-end ranking over segmented corpora."""

    def test_adjacent_terms_outrank_scattered_terms(self, settings, links, registry):
        scattered = "tracked " + "filler " * 100 + "properties"
        text = f"# guides\n# Adjacent\nUse tracked properties for state.\n---\n# Scattered\n{scattered}"

        results = _rank(text, "tracked properties", settings, links, registry)

        assert [result.title for result in results] == ["Adjacent", "Scattered"]
        assert results[0].score > results[1].score

    def test_results_respect_floors_and_order(self, corpus_text, settings, links, registry):
        results = _rank(corpus_text, "component template", settings, links, registry, limit=10)

        assert results
        scores = [result.score for result in results]
        assert scores == sorted(scores, reverse=True)
        for result in results:
            assert result.score >= settings.min_score
            assert result.matched_term_count >= 2 or result.score >= settings.min_score_single_term
            assert result.total_term_count == 2

    def test_phrase_match_counts_as_matched_term(self, settings, links, registry):
        text = "# guides\n# Phrase\nUse tracked properties for state.\n---\n# Split\ntracked state and properties"

        results = _rank(text, "tracked properties", settings, links, registry)

        counts = {result.title: result.matched_term_count for result in results}
        assert counts == {"Phrase": 3, "Split": 2}

    def test_equal_scores_keep_corpus_order(self, settings, links, registry):
        text = "# guides\n# First Entry\nsame words here\n---\n# Second Entry\nsame words here"

        results = _rank(text, "same words", settings, links, registry)

        assert [result.title for result in results] == ["First Entry", "Second Entry"]

    def test_api_category_and_result_fields(self, corpus_text, settings, links, registry):
        results = _rank(corpus_text, "router", settings, links, registry, category="api")

        assert [result.title for result in results] == ["Ember.Router"]
        result = results[0]
        assert result.section_category == "API Documentation"
        assert result.source_ref == "https://api.emberjs.com/ember/release/classes/Ember"
        assert result.entity_ref == "https://api.emberjs.com/ember/release/classes/Ember.Router"
        assert "[API Data]" in result.excerpt

    def test_deprecated_title_is_flagged(self, corpus_text, settings, links, registry):
        results = _rank(corpus_text, "arrayproxy", settings, links, registry, category="api")

        assert results[0].title == "ArrayProxy"
        assert results[0].deprecation is not None
        assert results[0].deprecation.is_resolved

    def test_community_category_excludes_api(self, corpus_text, settings, links, registry):
        assert _rank(corpus_text, "router", settings, links, registry, category="community") == []

    def test_limit(self, corpus_text, settings, links, registry):
        assert len(_rank(corpus_text, "component", settings, links, registry, limit=1)) == 1

    @pytest.mark.parametrize(("query", "category", "limit"), [("", "all", 5), ("   ", "all", 5), ("router", "blogs", 5), ("router", "all", 0)])
    def test_degenerate_queries(self, corpus_text, settings, links, registry, query, category, limit):
        assert _rank(corpus_text, query, settings, links, registry, category=category, limit=limit) == []
