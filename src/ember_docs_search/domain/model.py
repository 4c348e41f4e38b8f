"""Domain models for the documentation index.

Value objects are immutable (frozen=True) and carry no infrastructure
dependencies. Everything here is built once per corpus load and then only
read by query operations.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


DeprecationStatus = Literal["deprecated", "possibly-deprecated"]
Severity = Literal["warning", "info"]
WarningFormat = Literal["banner", "inline", "short"]
SearchCategory = Literal["all", "api", "guides", "community"]


class Item(BaseModel):
    """One logical document inside a section.

    ``start_offset`` is the 0-based line index where the item begins in the
    raw corpus.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    start_offset: int = 0


class MethodDoc(BaseModel):
    """Method entry of an API record."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = ""
    description: str | None = None
    params: list[dict[str, Any]] | None = None
    returns: dict[str, Any] | None = Field(default=None, alias="return")


class PropertyDoc(BaseModel):
    """Property entry of an API record."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    type: str | None = None
    description: str | None = None


class EntityRecord(BaseModel):
    """Structured API record (class, module, ...) extracted from the api section."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: str | None = None
    module: str | None = None
    description: str | None = None
    source_file: str | None = None
    source_line: int | None = None
    extends_name: str | None = None
    methods: list[MethodDoc] = Field(default_factory=list)
    properties: list[PropertyDoc] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict)


class DeprecationRecord(BaseModel):
    """Deprecation details for one API name.

    Records with status ``possibly-deprecated`` are low-confidence markers
    and never carry reason or alternative.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    status: DeprecationStatus = "deprecated"
    since: str | None = None
    reason: str | None = None
    modern_alternative: str | None = None
    severity: Severity = "warning"
    category: str | None = None
    deprecation_guide_link: str | None = None

    @property
    def is_resolved(self) -> bool:
        """True for a full record, False for a content-keyword marker."""
        return self.status == "deprecated"


class EntityReference(EntityRecord):
    """Entity lookup result enriched for the presentation layer."""

    api_url: str | None = None
    deprecation: DeprecationRecord | None = None


class ScoredResult(BaseModel):
    """A single ranked search hit. Produced per query, never persisted."""

    model_config = ConfigDict(frozen=True)

    title: str
    section_category: str
    excerpt: str
    score: int
    # Distinct matched entries; an exact phrase match counts as one of them
    matched_term_count: int
    total_term_count: int
    source_ref: str
    entity_ref: str | None = None
    deprecation: DeprecationRecord | None = None


class BestPracticeEntry(BaseModel):
    """Focused best-practice extract for a topic."""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    examples: list[str] = Field(default_factory=list)
    anti_patterns: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)


class ReleaseInfo(BaseModel):
    """Structured view of one published release."""

    model_config = ConfigDict(frozen=True)

    version: str
    release_date: str | None = None
    description: str
    features: list[str] = Field(default_factory=list)
    bug_fixes: list[str] = Field(default_factory=list)
    breaking_changes: list[str] = Field(default_factory=list)
    url: str | None = None


class VersionInfo(BaseModel):
    """Version summary derived from the indexed corpus."""

    model_config = ConfigDict(frozen=True)

    current: str
    description: str
    features: list[str] = Field(default_factory=list)
    migration_guide: str
    links: list[str] = Field(default_factory=list)
    release: ReleaseInfo | None = None
