"""Centralized configuration for ember-docs-search using Pydantic Settings."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Scoring weights and admission floors live here so they can be tuned
    without touching the ranking code. Every variable is prefixed with
    ``EMBER_DOCS_`` (e.g. ``EMBER_DOCS_MIN_SCORE=12``).
    """

    model_config = SettingsConfigDict(
        env_prefix="EMBER_DOCS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Section names
    api_section: str = Field(default="api-docs", description="Section holding embedded API records")
    community_section: str = Field(default="community-bloggers", description="Section holding community articles")

    # Search ranking
    exact_phrase_bonus: int = Field(default=50, ge=0, description="Bonus when the whole query appears verbatim")
    title_match_bonus: int = Field(default=10, ge=0, description="Bonus per query term found in the derived title")
    term_match_weight: int = Field(default=2, ge=0, description="Score per occurrence of a query term")
    all_terms_bonus: int = Field(default=20, ge=0, description="Bonus when every query term matched")
    proximity_threshold: int = Field(default=200, ge=1, description="Character span below which proximity scores")
    proximity_bonus_divisor: int = Field(default=10, ge=1, description="Divisor applied to the proximity slack")
    min_score: int = Field(default=10, ge=0, description="Absolute floor for an admitted search result")
    min_score_single_term: int = Field(
        default=25, ge=0, description="Floor for results that matched fewer than two distinct terms"
    )
    default_search_limit: int = Field(default=5, ge=1, description="Default number of search results")

    # Excerpts
    excerpt_cluster_gap: int = Field(default=500, ge=1, description="Maximum gap between hits of one cluster")
    excerpt_before: int = Field(default=150, ge=0, description="Context kept before the best cluster")
    excerpt_after: int = Field(default=400, ge=1, description="Context kept after the best cluster start")

    # Best practices
    bp_term_match_weight: int = Field(default=10, ge=0, description="Score per matched topic term")
    bp_all_terms_bonus: int = Field(default=10, ge=0, description="Bonus when every topic term matched")
    bp_strong_keyword_weight: int = Field(default=5, ge=0, description="Score per strong keyword")
    bp_weak_keyword_weight: int = Field(default=2, ge=0, description="Score per weak keyword")
    bp_min_threshold: int = Field(default=25, ge=0, description="Minimum score of a best-practice candidate")
    max_best_practices: int = Field(default=5, ge=1, description="Maximum best-practice entries returned")

    # Link targets
    api_docs_base: str = Field(default="https://api.emberjs.com/ember", description="API reference base URL")
    guides_base: str = Field(default="https://guides.emberjs.com/release", description="Guides base URL")
    releases_url: str = Field(default="https://emberjs.com/releases", description="Release overview page")
    blog_url: str = Field(default="https://blog.emberjs.com", description="Project blog")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_floors(self) -> "Settings":
        if self.min_score_single_term < self.min_score:
            raise ValueError(
                "MIN_SCORE_SINGLE_TERM must be greater than or equal to MIN_SCORE; "
                f"got {self.min_score_single_term} < {self.min_score}"
            )
        return self

    def guide_sections(self, section_names: list[str]) -> list[str]:
        """Section names that are neither API reference nor community content."""
        excluded = {self.api_section, self.community_section}
        return [name for name in section_names if name not in excluded]
