"""Editor state: the store that keeps tree and graph in sync."""

from .references import EntityReferences, default_entity_references, freeze_references
from .store import SkillEditorStore

__all__ = [
    "SkillEditorStore",
    "EntityReferences",
    "default_entity_references",
    "freeze_references",
]
