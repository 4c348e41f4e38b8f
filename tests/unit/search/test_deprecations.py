"""Unit tests for the deprecation classifier and registry."""

import pytest

from ember_docs_search.domain.model import DeprecationRecord, Item
from ember_docs_search.search.deprecations import DeprecationRegistry


@pytest.mark.unit
class TestAnalyzeContent:
    """Tests for rule-based classification of free text."""

    def test_no_signal_returns_none(self, registry):
        assert registry.analyze_content("Component", "A reusable UI element.") is None
        assert registry.analyze_content("Component", "") is None
        assert registry.analyze_content("Component", None) is None

    def test_signal_words_need_word_boundaries(self, registry):
        assert registry.analyze_content("Thing", "Works with legacyMode enabled.") is None

    @pytest.mark.parametrize(
        "text",
        [
            "This mixin is legacy.",
            "This API is no longer recommended.",
            "Observers are not preferred in new code.",
            "This helper should not be used.",
            "Avoid using this in templates.",
        ],
    )
    def test_signal_phrases(self, registry, text):
        record = registry.analyze_content("Thing", text)

        assert record is not None
        assert record.status == "deprecated"
        assert record.severity == "warning"

    def test_extracts_since_version(self, registry):
        record = registry.analyze_content("Thing", "Deprecated since Ember 3.28 in favour of native classes.")

        assert record.since == "3.28"
        assert record.reason is None

    def test_extracts_reason(self, registry):
        record = registry.analyze_content("Thing", "This is deprecated because native Proxy is available.")

        assert record.reason == "native Proxy is available"

    def test_extracts_alternative_and_strips_quotes(self, registry):
        record = registry.analyze_content("Thing", "Deprecated. Use `@tracked` properties instead.")

        assert record.modern_alternative == "@tracked"

    def test_unquoted_alternative_runs_to_sentence_end(self, registry):
        record = registry.analyze_content("Thing", "Deprecated. Use tracked properties instead.")

        assert record.modern_alternative == "tracked properties instead"

    def test_replaced_by_alternative(self, registry):
        record = registry.analyze_content("Thing", "Deprecated, replaced by RouterService.")

        assert record.modern_alternative == "RouterService"


@pytest.mark.unit
class TestRegistryLookups:
    """Tests for the two-tier lookup."""

    def test_seeded_records_are_known(self, registry):
        assert registry.is_deprecated("ArrayProxy")
        assert registry.is_deprecated("promiseproxymixin")
        assert registry.get_record("Evented").severity == "info"

    def test_unknown_names(self, registry):
        assert not registry.is_deprecated("Component")
        assert not registry.is_deprecated(None)
        assert registry.get_record("") is None

    def test_detected_records_take_precedence(self, registry):
        detected = DeprecationRecord(name="ArrayProxy", since="5.0")

        registry.register("ArrayProxy", detected)

        assert registry.get_record("arrayproxy") is detected
        assert len(registry) == 1

    def test_register_overwrites(self, registry):
        registry.register("Thing", DeprecationRecord(name="Thing", since="1.0"))
        registry.register("THING", DeprecationRecord(name="Thing", since="2.0"))

        assert registry.get_record("thing").since == "2.0"
        assert len(registry) == 1

    def test_register_ignores_missing_record(self, registry):
        registry.register("Thing", None)

        assert not registry.is_deprecated("Thing")

    def test_empty_seed_table(self):
        registry = DeprecationRegistry(seeded={})

        assert not registry.is_deprecated("ArrayProxy")


@pytest.mark.unit
class TestAnalyzeDocumentation:
    """Tests for harvesting deprecation guides."""

    def test_registers_identifiers_with_guide_link(self, registry):
        sections = {
            "deprecations": [
                {
                    "content": "`LegacyThing` is deprecated since Ember 4.1. Use `NewThing` instead.",
                    "link": "https://deprecations.emberjs.com/v4.x#legacy-thing",
                }
            ]
        }

        registry.analyze_documentation(sections)

        record = registry.get_record("LegacyThing")
        assert record is not None
        assert record.since == "4.1"
        assert record.modern_alternative == "NewThing"
        assert record.deprecation_guide_link == "https://deprecations.emberjs.com/v4.x#legacy-thing"

    def test_accepts_items_and_front_matter_links(self, registry):
        content = "---\nlink: https://example.com/guide\n---\n`OldMixin` is legacy."
        registry.analyze_documentation({"ember-deprecations": (Item(content=content),)})

        assert registry.get_record("OldMixin").deprecation_guide_link == "https://example.com/guide"

    def test_ignores_sections_without_deprecation_in_name(self, registry):
        registry.analyze_documentation({"guides": [{"content": "`OldThing` is deprecated."}]})

        assert not registry.is_deprecated("OldThing")

    @pytest.mark.parametrize("sections", [None, "text", 42, {"deprecations": None}, {"deprecations": [None, 3]}])
    def test_invalid_input_is_a_no_op(self, registry, sections):
        registry.analyze_documentation(sections)

        assert len(registry) == 0


@pytest.mark.unit
class TestCheckResult:
    def test_title_naming_deprecated_api(self, registry):
        record = registry.check_result("`ArrayProxy` class", "content")

        assert record is not None
        assert record.is_resolved
        assert record.name == "ArrayProxy"

    def test_keyword_marker_for_content(self, registry):
        record = registry.check_result("Component Basics", "Some parts are legacy now.")

        assert record is not None
        assert record.status == "possibly-deprecated"
        assert record.severity == "info"
        assert record.reason is None
        assert not record.is_resolved

    def test_clean_result(self, registry):
        assert registry.check_result("Component Basics", "Modern components.") is None
        assert registry.check_result("", "deprecated") is None


@pytest.mark.unit
class TestGenerateWarning:
    """Tests for warning rendering."""

    def test_short_format_is_compact(self, registry):
        warning = registry.generate_warning("ArrayProxy", "short")

        assert warning == "⚠️ **Deprecated**"
        assert len(warning) < 100

    def test_short_format_with_since(self, registry):
        registry.register("Thing", DeprecationRecord(name="Thing", since="4.1"))

        assert registry.generate_warning("Thing", "short") == "⚠️ **Deprecated** (since v4.1)"

    def test_inline_format(self, registry):
        registry.register("Thing", DeprecationRecord(name="Thing", since="4.1", modern_alternative="NewThing"))

        assert registry.generate_warning("thing", "inline") == "⚠️ **Deprecated** since v4.1 - Use NewThing instead"

    def test_banner_format(self, registry):
        registry.register(
            "Thing",
            DeprecationRecord(
                name="Thing",
                since="4.1",
                reason="It leaks",
                modern_alternative="NewThing",
                deprecation_guide_link="https://example.com/guide",
            ),
        )

        banner = registry.generate_warning("Thing")

        assert banner.startswith("\n> ⚠️ **DEPRECATION WARNING**")
        assert "> **`Thing` is deprecated** since Ember v4.1" in banner
        assert "> It leaks" in banner
        assert "> **Modern Alternative:** NewThing" in banner
        assert "[View Deprecation Guide](https://example.com/guide)" in banner

    def test_info_severity_icon(self, registry):
        assert registry.generate_warning("Evented", "short").startswith("ℹ️")

    def test_not_deprecated_is_empty(self, registry):
        assert registry.generate_warning("Component", "short") == ""
        assert registry.generate_warning("Component") == ""
