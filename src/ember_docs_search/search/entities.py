"""API entity indexing.

Each item of the api section may embed one JSON:API style record::

    {"data": {"id": "...", "type": "class",
              "attributes": {"name": "ArrayProxy", "module": "@ember/array/proxy", ...}}}

A record is stored once and reachable through several lowercase keys: its
name, its module path and, for dotted names, the last segment.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import logging
from typing import Any, TypeVar

from pydantic import ValidationError

from ember_docs_search.domain.model import EntityRecord, Item, MethodDoc, PropertyDoc
from ember_docs_search.observability.metrics import ENTITY_KEY_COLLISIONS, MALFORMED_RECORDS
from ember_docs_search.search.deprecations import DeprecationRegistry
from ember_docs_search.search.records import parse_embedded_record, record_name


logger = logging.getLogger(__name__)

MemberDoc = TypeVar("MemberDoc", MethodDoc, PropertyDoc)


def _as_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _member_docs(model: type[MemberDoc], entries: Any, owner: str) -> list[MemberDoc]:
    """Validate method/property entries one by one, dropping only the bad ones."""
    if not isinstance(entries, list):
        return []
    docs: list[MemberDoc] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            docs.append(model.model_validate(entry))
        except ValidationError:
            logger.debug("Skipping %s entry of %s with unexpected shape: %r", model.__name__, owner, entry)
    return docs


def build_entity(data: dict[str, Any]) -> EntityRecord | None:
    """Build an EntityRecord from a parsed ``data`` object, or None without a name."""
    name = record_name(data)
    if not name:
        return None

    attributes = data["attributes"]
    methods = _member_docs(MethodDoc, attributes.get("methods"), name)
    properties = _member_docs(PropertyDoc, attributes.get("properties"), name)

    return EntityRecord(
        name=name,
        kind=_as_str(data.get("type")),
        module=_as_str(attributes.get("module")),
        description=_as_str(attributes.get("description")),
        source_file=_as_str(attributes.get("file")),
        source_line=_as_int(attributes.get("line")),
        extends_name=_as_str(attributes.get("extends")),
        methods=methods,
        properties=properties,
        raw=data,
    )


def _parse_item(item: Item) -> EntityRecord | None:
    data = parse_embedded_record(item.content.strip())
    if data is None:
        return None
    try:
        return build_entity(data)
    except ValidationError as exc:
        logger.debug("Skipping API record with unexpected shape at line %d: %s", item.start_offset, exc)
        return None


def index_keys(record: EntityRecord) -> list[str]:
    """Lowercase lookup keys for a record, primary name first."""
    keys = [record.name.lower()]
    if record.module:
        keys.append(record.module.lower())
    if "." in record.name:
        keys.append(record.name.rsplit(".", 1)[-1].lower())
    return list(dict.fromkeys(keys))


class EntityIndex:
    """Case-insensitive multi-key lookup table of API records."""

    def __init__(self, api_items: Iterable[Item] = ()) -> None:
        self._entries: dict[str, EntityRecord] = {}
        self._items = tuple(api_items)
        self.malformed = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._entries

    def keys(self) -> Iterator[str]:
        return iter(self._entries)

    def records(self) -> list[EntityRecord]:
        """Distinct records in indexing order."""
        seen: dict[int, EntityRecord] = {}
        for record in self._entries.values():
            seen.setdefault(id(record), record)
        return list(seen.values())

    def add(self, record: EntityRecord) -> None:
        for key in index_keys(record):
            existing = self._entries.get(key)
            if existing is not None and existing is not record:
                ENTITY_KEY_COLLISIONS.inc()
                logger.warning(
                    "Entity key %r for %s overwrites %s",
                    key,
                    record.name,
                    existing.name,
                )
            self._entries[key] = record

    def get(self, name: str | None) -> EntityRecord | None:
        if not name:
            return None
        return self._entries.get(name.strip().lower())

    def find_in_items(self, name: str | None) -> EntityRecord | None:
        """Scan raw api items for a record declaring ``name`` when no key matches.

        Only the record's own keys and its method and property names count;
        text that merely appears in descriptions or JSON field names does not.
        """
        if not name:
            return None
        key = name.strip().lower()
        if not key:
            return None
        for item in self._items:
            if key not in item.content.lower():
                continue
            record = _parse_item(item)
            if record is not None and key in declared_names(record):
                return record
        return None


def declared_names(record: EntityRecord) -> set[str]:
    """Lowercase names a record answers to: its index keys plus member names."""
    names = set(index_keys(record))
    names.update(method.name.lower() for method in record.methods if method.name)
    names.update(prop.name.lower() for prop in record.properties if prop.name)
    return names


def index_entities(items: Iterable[Item], registry: DeprecationRegistry | None = None) -> EntityIndex:
    """Index every parseable API record and feed descriptions to the deprecation registry.

    Items whose record is missing or malformed are skipped; indexing always
    continues with the next item.
    """
    items = tuple(items)
    index = EntityIndex(items)

    for item in items:
        record = _parse_item(item)
        if record is None:
            if "{" in item.content:
                index.malformed += 1
                MALFORMED_RECORDS.inc()
                logger.debug("Skipping unparseable API item at line %d", item.start_offset)
            continue

        if registry is not None:
            registry.register(record.name, registry.analyze_content(record.name, record.description or ""))

        index.add(record)

    logger.info(
        "Indexed %d API entries (%d records, %d malformed items)",
        len(index),
        len(index.records()),
        index.malformed,
    )
    return index
