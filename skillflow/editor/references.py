"""
Entity reference registry.

Lookup tables of known sounds, animations, characters and so on, supplied
by whoever scanned the project. The editor only reads them.
"""

from types import MappingProxyType
from typing import Any, Iterable, Mapping

from skillflow.schema import EntityReference, EntityType

EntityReferences = Mapping[EntityType, tuple[EntityReference, ...]]


def default_entity_references() -> EntityReferences:
    """An empty table for every entity type."""
    return MappingProxyType({entity_type: () for entity_type in EntityType})


def freeze_references(
    references: Mapping[EntityType | str, Iterable[EntityReference | Mapping[str, Any]]] | None,
) -> EntityReferences:
    """
    Build a read-only registry from caller-supplied tables.

    Keys may be EntityType members or their string values; entries may be
    EntityReference objects or dicts. Types not present get an empty tuple.
    """
    table: dict[EntityType, tuple[EntityReference, ...]] = {t: () for t in EntityType}
    for key, entries in (references or {}).items():
        entity_type = key if isinstance(key, EntityType) else EntityType(key)
        table[entity_type] = tuple(
            entry if isinstance(entry, EntityReference) else EntityReference.from_dict(entry)
            for entry in entries
        )
    return MappingProxyType(table)
