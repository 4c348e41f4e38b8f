"""Documentation Index - build once, query many.

``build_index`` turns raw corpus text into an immutable ``DocumentationIndex``
handle; the query functions below are pure reads over that handle. The
``DocumentationSearchEngine`` holds the active handle for long-lived callers
and swaps in a freshly built one on reload, so readers never observe a
partially built index.

Interface:
- search(index, query, category, limit) -> list[ScoredResult]
- get_entity(index, name, kind) -> EntityReference | None
- get_best_practices(index, topic) -> list[BestPracticeEntry]
- get_deprecation_warning(index, name, format) -> str
- get_version_info(index, version, release) -> VersionInfo
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
import re
import threading
from typing import Any

from ember_docs_search.config import Settings
from ember_docs_search.domain.model import (
    BestPracticeEntry,
    EntityReference,
    Item,
    ScoredResult,
    SearchCategory,
    VersionInfo,
    WarningFormat,
)
from ember_docs_search.observability.context import bind_operation
from ember_docs_search.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEXED_ENTITY_KEYS,
    INDEXED_ITEMS,
    QUERY_LATENCY,
    track_latency,
)
from ember_docs_search.observability.tracing import create_span
from ember_docs_search.search.best_practices import find_best_practices
from ember_docs_search.search.deprecations import DeprecationRegistry
from ember_docs_search.search.entities import EntityIndex, index_entities
from ember_docs_search.search.ranker import rank
from ember_docs_search.search.segmenter import segment_corpus
from ember_docs_search.utils.release_notes import ReleaseNotesParser
from ember_docs_search.utils.url_builder import DocsLinkBuilder, LinkBuilder


logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"ember-(\d+\.\d+\.\d+)", re.IGNORECASE)
UNKNOWN_VERSION = "unknown"
DEFAULT_FEATURES = (
    "Modern component model",
    "Octane edition features",
    "TypeScript support",
    "Glimmer rendering engine",
)


@dataclass(frozen=True)
class DocumentationIndex:
    """Everything one corpus load produced. Read-only once built."""

    sections: Mapping[str, tuple[Item, ...]]
    entities: EntityIndex
    registry: DeprecationRegistry
    settings: Settings
    links: LinkBuilder
    release_parser: ReleaseNotesParser = field(default_factory=ReleaseNotesParser)

    @classmethod
    def empty(cls, settings: Settings | None = None, links: LinkBuilder | None = None) -> DocumentationIndex:
        """Index with no sections; every query degrades to "no match"."""
        settings = settings or Settings()
        return cls(
            sections={},
            entities=EntityIndex(),
            registry=DeprecationRegistry(),
            settings=settings,
            links=links or DocsLinkBuilder.from_settings(settings),
        )

    @property
    def item_count(self) -> int:
        return sum(len(items) for items in self.sections.values())


def build_index(
    corpus: str,
    settings: Settings | None = None,
    links: LinkBuilder | None = None,
) -> DocumentationIndex:
    """Segment the corpus, index API entities and collect deprecations.

    Args:
        corpus: Full corpus text (UTF-8 decoded)
        settings: Scoring and link configuration; defaults to environment settings
        links: Link builder; defaults to ``DocsLinkBuilder`` configured from settings

    Returns:
        A fully built DocumentationIndex. Malformed records are skipped,
        never raised.
    """
    settings = settings or Settings()
    links = links or DocsLinkBuilder.from_settings(settings)

    with bind_operation("build"), create_span("docs_index.build", attributes={"corpus.length": len(corpus)}) as span:
        with track_latency(INDEX_BUILD_LATENCY):
            sections = segment_corpus(corpus)
            registry = DeprecationRegistry()
            entities = index_entities(sections.get(settings.api_section, ()), registry)
            registry.analyze_documentation(sections)

        index = DocumentationIndex(
            sections=sections,
            entities=entities,
            registry=registry,
            settings=settings,
            links=links,
        )
        span.set_attribute("index.sections", len(sections))
        span.set_attribute("index.items", index.item_count)
        span.set_attribute("index.entity_keys", len(entities))

    INDEXED_ITEMS.clear()
    for section_name, items in sections.items():
        INDEXED_ITEMS.labels(section=section_name).set(len(items))
    INDEXED_ENTITY_KEYS.set(len(entities))

    logger.info(
        "Built documentation index: %d sections, %d items, %d entity keys, %d detected deprecations",
        len(sections),
        index.item_count,
        len(entities),
        len(registry),
    )
    return index


@contextmanager
def _observed(operation: str) -> Iterator[None]:
    with bind_operation(operation), track_latency(QUERY_LATENCY, operation=operation):
        yield


def search(
    index: DocumentationIndex,
    query: str,
    category: SearchCategory = "all",
    limit: int | None = None,
) -> list[ScoredResult]:
    """Free-text search over the selected category, best results first."""
    if limit is None:
        limit = index.settings.default_search_limit
    with _observed("search"):
        return rank(
            index.sections,
            query,
            category,
            limit,
            registry=index.registry,
            settings=index.settings,
            links=index.links,
        )


def get_entity(index: DocumentationIndex, name: str, kind: str | None = None) -> EntityReference | None:
    """Case-insensitive entity lookup by name, module path or last name segment.

    Falls back to scanning API items when no key matches. A record whose kind
    differs from ``kind`` is not returned.
    """
    with _observed("get_entity"):
        record = index.entities.get(name) or index.entities.find_in_items(name)
        if record is None:
            return None
        if kind is not None and record.kind != kind:
            return None
        return EntityReference(
            **dict(record),
            api_url=index.links.entity_link(record.name, record.kind),
            deprecation=index.registry.get_record(record.name),
        )


def get_best_practices(index: DocumentationIndex, topic: str) -> list[BestPracticeEntry]:
    with _observed("get_best_practices"):
        return find_best_practices(index.sections, topic, settings=index.settings, links=index.links)


def get_deprecation_warning(index: DocumentationIndex, name: str, format: WarningFormat = "banner") -> str:
    """Rendered warning for a deprecated name; empty string otherwise."""
    with _observed("get_deprecation_warning"):
        return index.registry.generate_warning(name, format)


def detect_version(index: DocumentationIndex) -> str:
    """First ``ember-X.Y.Z`` token found in the API section."""
    for item in index.sections.get(index.settings.api_section, ()):
        match = VERSION_PATTERN.search(item.content)
        if match:
            return match.group(1)
    return UNKNOWN_VERSION


def get_version_info(
    index: DocumentationIndex,
    version: str | None = None,
    release: Mapping[str, Any] | None = None,
) -> VersionInfo:
    """Version summary from the corpus, optionally enriched with a release payload."""
    with _observed("get_version_info"):
        current = detect_version(index)
        description = (
            f"Information about Ember.js version {version}" if version else f"Latest indexed version: {current}"
        )
        links = index.links.version_links()
        release_info = None
        if release is not None:
            release_info = index.release_parser.parse_release(release, version or current)
            if release_info.url and release_info.url not in links:
                links.append(release_info.url)

        return VersionInfo(
            current=current,
            description=description,
            features=list(DEFAULT_FEATURES),
            migration_guide=f"For migration guides, see {index.links.upgrade_guide_link()}",
            links=links,
            release=release_info,
        )


class DocumentationSearchEngine:
    """Holder of the active DocumentationIndex.

    Loads are serialized by a lock and idempotent unless forced; the new
    index replaces the old one in a single assignment. Before the first load
    every query runs against an empty index.
    """

    def __init__(self, settings: Settings | None = None, links: LinkBuilder | None = None) -> None:
        self.settings = settings or Settings()
        self.links = links or DocsLinkBuilder.from_settings(self.settings)
        self._lock = threading.Lock()
        self._loaded = False
        self._index = DocumentationIndex.empty(self.settings, self.links)

    @property
    def index(self) -> DocumentationIndex:
        return self._index

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self, corpus: str, force: bool = False) -> DocumentationIndex:
        """Build and publish an index from corpus text.

        A second call is a no-op returning the active index unless ``force``
        is set.
        """
        with self._lock:
            if self._loaded and not force:
                logger.debug("Documentation index already loaded; skipping rebuild")
                return self._index
            index = build_index(corpus, self.settings, self.links)
            self._index = index
            self._loaded = True
            return index

    def search(self, query: str, category: SearchCategory = "all", limit: int | None = None) -> list[ScoredResult]:
        return search(self._index, query, category, limit)

    def get_entity(self, name: str, kind: str | None = None) -> EntityReference | None:
        return get_entity(self._index, name, kind)

    def get_best_practices(self, topic: str) -> list[BestPracticeEntry]:
        return get_best_practices(self._index, topic)

    def get_deprecation_warning(self, name: str, format: WarningFormat = "banner") -> str:
        return get_deprecation_warning(self._index, name, format)

    def get_version_info(
        self, version: str | None = None, release: Mapping[str, Any] | None = None
    ) -> VersionInfo:
        return get_version_info(self._index, version, release)


def create_documentation_search_engine(
    settings: Settings | None = None, links: LinkBuilder | None = None
) -> DocumentationSearchEngine:
    """Factory function for creating documentation search engines.

    Args:
        settings: Configuration; defaults to environment settings
        links: Link builder; defaults to ``DocsLinkBuilder``

    Returns:
        An unloaded DocumentationSearchEngine
    """
    return DocumentationSearchEngine(settings, links)
