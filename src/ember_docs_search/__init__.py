"""Ember documentation search.

In-memory index over a semi-structured documentation corpus (markdown prose
with embedded JSON API records) answering relevance search, entity lookup,
best-practice retrieval, deprecation warnings and version information.
"""

from ember_docs_search.config import Settings
from ember_docs_search.documentation_index import (
    DocumentationIndex,
    DocumentationSearchEngine,
    build_index,
    create_documentation_search_engine,
    get_best_practices,
    get_deprecation_warning,
    get_entity,
    get_version_info,
    search,
)


__all__ = [
    "DocumentationIndex",
    "DocumentationSearchEngine",
    "Settings",
    "build_index",
    "create_documentation_search_engine",
    "get_best_practices",
    "get_deprecation_warning",
    "get_entity",
    "get_version_info",
    "search",
]
