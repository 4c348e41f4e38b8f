"""Link targets for search results, entities and version information.

The index never hardcodes URLs: it calls whatever ``LinkBuilder`` it was
built with. ``DocsLinkBuilder`` is the default implementation for the
public Ember documentation sites.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol

from ember_docs_search.search.records import parse_embedded_record, record_name


if TYPE_CHECKING:
    from ember_docs_search.config import Settings


_CLASS_NAME_PATTERN = re.compile(r"^([A-Z][a-zA-Z0-9]*)")


class LinkBuilder(Protocol):
    """Link derivation supplied by the presentation side."""

    def section_link(self, section_name: str, title: str) -> str: ...

    def entity_link(self, name: str, kind: str | None) -> str: ...

    def entity_link_from_content(self, content: str) -> str | None: ...

    def version_links(self) -> list[str]: ...

    def upgrade_guide_link(self, version: str | None = None) -> str: ...

    def release_notes_link(self, version: str) -> str: ...


class DocsLinkBuilder:
    """Canonical links into the API reference and guides."""

    def __init__(
        self,
        api_docs_base: str = "https://api.emberjs.com/ember",
        guides_base: str = "https://guides.emberjs.com/release",
        releases_url: str = "https://emberjs.com/releases",
        blog_url: str = "https://blog.emberjs.com",
        api_section: str = "api-docs",
    ) -> None:
        self.api_docs_base = api_docs_base.rstrip("/")
        self.guides_base = guides_base.rstrip("/")
        self.releases_url = releases_url
        self.blog_url = blog_url
        self.api_section = api_section

    @classmethod
    def from_settings(cls, settings: Settings) -> DocsLinkBuilder:
        return cls(
            api_docs_base=settings.api_docs_base,
            guides_base=settings.guides_base,
            releases_url=settings.releases_url,
            blog_url=settings.blog_url,
            api_section=settings.api_section,
        )

    def section_link(self, section_name: str, title: str) -> str:
        """Link for an item: the class page for API items, the guides root otherwise."""
        if section_name == self.api_section:
            match = _CLASS_NAME_PATTERN.match(title)
            if match:
                return f"{self.api_docs_base}/release/classes/{match.group(1)}"
            return self.api_docs_base
        return self.guides_base

    def entity_link(self, name: str, kind: str | None) -> str:
        if kind == "class":
            return f"{self.api_docs_base}/release/classes/{name}"
        if kind == "module":
            return f"{self.api_docs_base}/release/modules/{name}"
        return self.api_docs_base

    def entity_link_from_content(self, content: str) -> str | None:
        """Reference link for an item embedding a class or module record."""
        data = parse_embedded_record(content)
        if data is None:
            return None
        name = record_name(data)
        kind = data.get("type")
        if not name or kind not in ("class", "module"):
            return None
        return self.entity_link(name, kind)

    def version_links(self) -> list[str]:
        return [
            self.guides_base,
            f"{self.api_docs_base}/release",
            self.releases_url,
            self.blog_url,
        ]

    def upgrade_guide_link(self, version: str | None = None) -> str:
        if version:
            return f"{self.guides_base}/upgrading/current-edition/"
        return f"{self.guides_base}/upgrading/"

    def release_notes_link(self, version: str) -> str:
        return f"https://github.com/emberjs/ember.js/releases/tag/v{version}"
