"""Domain layer - immutable value objects with no infrastructure dependencies.

Contains the records the index is built from (items, API entities,
deprecations) and the ephemeral results handed to the presentation layer.
"""

from ember_docs_search.domain.model import (
    BestPracticeEntry,
    DeprecationRecord,
    EntityRecord,
    EntityReference,
    Item,
    MethodDoc,
    PropertyDoc,
    ReleaseInfo,
    ScoredResult,
    SearchCategory,
    VersionInfo,
    WarningFormat,
)


__all__ = [
    "BestPracticeEntry",
    "DeprecationRecord",
    "EntityRecord",
    "EntityReference",
    "Item",
    "MethodDoc",
    "PropertyDoc",
    "ReleaseInfo",
    "ScoredResult",
    "SearchCategory",
    "VersionInfo",
    "WarningFormat",
]
