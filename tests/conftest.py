"""Shared test fixtures and configuration."""

from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


# Environment overrides that could leak in from a developer shell
SCORING_ENV_KEYS = (
    "EMBER_DOCS_MIN_SCORE",
    "EMBER_DOCS_MIN_SCORE_SINGLE_TERM",
    "EMBER_DOCS_API_SECTION",
    "EMBER_DOCS_COMMUNITY_SECTION",
    "EMBER_DOCS_BP_MIN_THRESHOLD",
    "EMBER_DOCS_DEFAULT_SEARCH_LIMIT",
)

from ember_docs_search.config import Settings
from ember_docs_search.documentation_index import DocumentationIndex, build_index
from ember_docs_search.search.deprecations import DeprecationRegistry
from ember_docs_search.utils.url_builder import DocsLinkBuilder
from tests.fixtures.ember_corpus import EMBER_CORPUS


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep tests independent of EMBER_DOCS_* variables set in the shell."""
    for key in SCORING_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def links(settings: Settings) -> DocsLinkBuilder:
    return DocsLinkBuilder.from_settings(settings)


@pytest.fixture
def registry() -> DeprecationRegistry:
    return DeprecationRegistry()


@pytest.fixture
def corpus_text() -> str:
    return EMBER_CORPUS


@pytest.fixture
def ember_index(corpus_text: str, settings: Settings, links: DocsLinkBuilder) -> DocumentationIndex:
    """Index built from the shared Ember corpus."""
    return build_index(corpus_text, settings, links)
