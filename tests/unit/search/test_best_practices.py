"""Unit tests for topic-scoped best-practice retrieval."""

import pytest

from ember_docs_search.search.best_practices import (
    extract_practice_section,
    find_best_practices,
    score_candidate,
    topic_terms,
)
from ember_docs_search.search.segmenter import segment_corpus


def _find(text, topic, settings, links):
    return find_best_practices(segment_corpus(text), topic, settings=settings, links=links)


@pytest.mark.unit
class TestScoring:
    def test_topic_terms_drop_short_words(self):
        assert topic_terms("Use of JS components") == ["use", "components"]

    def test_strong_keyword_qualifies(self, settings):
        # term 10 + all terms 10 + "best practice" 5
        assert score_candidate("best practice for component architecture.", ["components"], settings) == 25

    def test_weak_keywords_alone_do_not_qualify(self, settings):
        score = score_candidate("component tip: performance should follow convention", ["component"], settings)

        assert score == 20

    def test_weak_keywords_count_after_strong(self, settings):
        score = score_candidate("prefer this component tip", ["component"], settings)

        # 10 + 10 + prefer 5 + tip 2
        assert score == 27

    def test_unmatched_topic_scores_zero(self, settings):
        assert score_candidate("best practice for routing", ["components"], settings) == 0


@pytest.mark.unit
class TestExtractPracticeSection:
    """Tests for focused sub-section extraction."""

    def test_starts_at_topic_and_stops_at_next_header(self):
        content = "# Intro\nUnrelated opening.\n# Components\nKeep components small.\n# Other Topic\nNot included."

        section = extract_practice_section(content, ["components"])

        assert section.content == "# Components\nKeep components small."

    def test_examples_only_after_onset(self):
        content = (
            "```js\nbefore();\n```\n"
            "Components should be small.\n"
            "```js\nexport default class Foo extends Component {}\n```\n"
            "```\n```\n"
        )

        section = extract_practice_section(content, ["component"])

        assert section.examples == ["```js\nexport default class Foo extends Component {}\n```"]

    def test_code_lines_are_not_body(self):
        content = "Components matter.\n```js\n# not a header\n```\nMore about components."

        section = extract_practice_section(content, ["component"])

        assert section.content == "Components matter.\nMore about components."

    def test_anti_patterns_are_windowed_and_unique(self):
        content = (
            "Components guide.\n"
            "Avoid mutating arguments.\n"
            "Arguments are read-only.\n"
            "Avoid.\n"
        )

        section = extract_practice_section(content, ["component"])

        assert section.anti_patterns == [
            "Avoid mutating arguments. Arguments are read-only. Avoid.",
        ]

    def test_caps_examples_and_body(self):
        code = "```js\nline();\n```\n"
        content = "Components.\n" + code * 5 + "\n".join(f"component line {n}" for n in range(80))

        section = extract_practice_section(content, ["component"])

        assert len(section.examples) == 3
        assert len(section.content.split("\n")) == 30


@pytest.mark.unit
class TestFindBestPractices:
    """Tests for the end-to-end matcher."""

    def test_singular_and_plural_topics_find_same_entry(self, settings, links):
        text = "# community-bloggers\nBest practice for component architecture."

        plural = _find(text, "components", settings, links)
        singular = _find(text, "component", settings, links)

        assert [entry.title for entry in plural] == ["Best practice for component architecture."]
        assert [entry.title for entry in singular] == [entry.title for entry in plural]

    def test_topic_ending_in_s_is_not_stemmed_into_other_words(self, settings, links):
        text = "# community-bloggers\n# Build Pipeline\nBest practice: build small bundles, prefer composition."

        assert _find(text, "bus", settings, links) == []

    def test_duplicate_titles_keep_first_scanned(self, settings, links):
        text = (
            "# community-bloggers\n# Component Tips\nBest practice: prefer small components. First.\n"
            "---\n# component tips\nBest practice: prefer small components. Second.\n"
        )

        entries = _find(text, "components", settings, links)

        assert len(entries) == 1
        assert "First." in entries[0].content

    def test_api_section_is_never_searched(self, settings, links):
        text = "# api-docs\n# Component Patterns\nBest practice: prefer small components."

        assert _find(text, "components", settings, links) == []

    def test_guides_are_candidates(self, settings, links):
        text = "# guides\n# Component Patterns\nBest practice: prefer small components."

        entries = _find(text, "components", settings, links)

        assert [entry.title for entry in entries] == ["Component Patterns"]
        assert entries[0].references == ["https://guides.emberjs.com/release"]

    def test_shared_corpus_entry(self, corpus_text, settings, links):
        entries = _find(corpus_text, "components", settings, links)

        assert [entry.title for entry in entries] == ["Octane Component Patterns"]
        entry = entries[0]
        assert "Nothing else here" not in entry.content
        assert len(entry.examples) == 1
        assert "@tracked count" in entry.examples[0]
        assert any("two-way bindings" in anti for anti in entry.anti_patterns)

    def test_results_are_ranked_and_capped(self, settings, links):
        weak = "# Weak Entry\nBest practice: components."
        strong = "# Strong Entry\nBest practice: prefer idiomatic components, avoid anti-pattern code."
        items = [weak] + [strong.replace("Strong", f"Strong {n}") for n in range(6)]
        text = "# community-bloggers\n" + "\n---\n".join(items)

        entries = _find(text, "components", settings, links)

        assert len(entries) == settings.max_best_practices
        assert all(entry.title.startswith("Strong") for entry in entries)

    def test_short_or_missing_topic(self, corpus_text, settings, links):
        assert _find(corpus_text, "ui", settings, links) == []
        assert _find(corpus_text, "", settings, links) == []
