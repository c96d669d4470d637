"""
Skill entity definition.

The persisted document: an entity envelope (id/owner/key/version) around a
Skill, whose ``execution_root`` is the action node tree the editor works on.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .common import (
    DEFAULT_OWNER,
    EntityReference,
    EntityType,
    FloatRange,
    Metadata,
    Vector3,
)
from .nodes import ActionNode, ParallelNode


class QualityType(Enum):
    NONE = "None"
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"


class SkillCategory(Enum):
    NONE = "None"
    ALL = "All"
    OFFENSE = "Offense"
    DEFENSE = "Defense"
    UTILITY = "Utility"
    HEALING = "Healing"


class SkillTargetType(Enum):
    SELF = "Self"
    ALLY = "Ally"
    ENEMY = "Enemy"
    ANY = "Any"
    POSITION = "Position"
    NONE = "None"


class SkillIndicatorPosition(Enum):
    CHARACTER = "Character"
    MOUSE = "Mouse"
    FROM_CHARACTER_TO_MOUSE = "FromCharacterToMouse"


@dataclass
class SkillIndicator:
    """Ground decal shown while aiming."""

    model_reference: EntityReference = field(
        default_factory=lambda: EntityReference.empty(EntityType.MODEL)
    )
    position: SkillIndicatorPosition = SkillIndicatorPosition.CHARACTER
    scale: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))

    def to_dict(self) -> dict:
        return {
            "model_reference": self.model_reference.to_dict(),
            "position": self.position.value,
            "scale": self.scale.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SkillIndicator":
        return cls(
            model_reference=EntityReference.from_dict(
                data.get("model_reference", {"type": EntityType.MODEL.value})
            ),
            position=SkillIndicatorPosition(
                data.get("position", SkillIndicatorPosition.CHARACTER.value)
            ),
            scale=Vector3.from_dict(data.get("scale", {"x": 1.0, "y": 1.0, "z": 1.0})),
        )


def default_execution_root() -> ActionNode:
    return ParallelNode(name="Root", children=[], loop=1)


def default_icon_reference(owner: str = DEFAULT_OWNER) -> EntityReference:
    return EntityReference(
        owner=owner,
        type=EntityType.IMAGE,
        key="DefaultIcon",
        version=1,
        id=f"{owner}:Image:DefaultIcon:1",
    )


@dataclass
class Skill:
    """A skill: display data, costs and the execution tree."""

    metadata: Metadata = field(default_factory=Metadata)
    quality: QualityType = QualityType.NONE
    icon_reference: EntityReference = field(default_factory=default_icon_reference)
    categories: list[SkillCategory] = field(default_factory=list)
    mana_cost: float = 0
    cooldown: float = 0
    target_type: SkillTargetType = SkillTargetType.NONE
    execution_root: ActionNode | None = field(default_factory=default_execution_root)
    cast_distance: FloatRange = field(default_factory=lambda: FloatRange(1, 1))
    indicators: list[SkillIndicator] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "metadata": self.metadata.to_dict(),
            "quality": self.quality.value,
            "icon_reference": self.icon_reference.to_dict(),
            "categories": [c.value for c in self.categories],
            "cost": {"mana": self.mana_cost},
            "cooldown": self.cooldown,
            "target_type": self.target_type.value,
            "execution_root": self.execution_root.to_dict() if self.execution_root else None,
            "cast_distance": self.cast_distance.to_dict(),
            "indicators": [i.to_dict() for i in self.indicators],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Skill":
        """Create from dictionary."""
        root = data.get("execution_root")
        return cls(
            metadata=Metadata.from_dict(data.get("metadata", {})),
            quality=QualityType(data.get("quality", QualityType.NONE.value)),
            icon_reference=(
                EntityReference.from_dict(data["icon_reference"])
                if data.get("icon_reference")
                else default_icon_reference()
            ),
            categories=[SkillCategory(c) for c in data.get("categories", [])],
            mana_cost=data.get("cost", {}).get("mana", 0),
            cooldown=data.get("cooldown", 0),
            target_type=SkillTargetType(data.get("target_type", SkillTargetType.NONE.value)),
            execution_root=ActionNode.from_dict(root) if root else None,
            cast_distance=FloatRange.from_dict(data.get("cast_distance", {"min": 1, "max": 1})),
            indicators=[SkillIndicator.from_dict(i) for i in data.get("indicators", [])],
        )


@dataclass
class SkillEntityDefinition:
    """Entity envelope around a Skill, as stored on disk."""

    id: str = ""
    owner: str = DEFAULT_OWNER
    type: str = EntityType.SKILL.value
    key: str = ""
    version: int = 1
    entity: Skill = field(default_factory=Skill)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "owner": self.owner,
            "type": self.type,
            "key": self.key,
            "version": self.version,
            "entity": self.entity.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SkillEntityDefinition":
        """Create from dictionary."""
        return cls(
            id=data.get("id", ""),
            owner=data.get("owner", DEFAULT_OWNER),
            type=data.get("type", EntityType.SKILL.value),
            key=data.get("key", ""),
            version=data.get("version", 1),
            entity=Skill.from_dict(data.get("entity", {})),
        )


def default_skill_definition(owner: str = DEFAULT_OWNER) -> SkillEntityDefinition:
    """An empty skill whose execution root is a Parallel named Root."""
    return SkillEntityDefinition(
        owner=owner,
        entity=Skill(icon_reference=default_icon_reference(owner)),
    )
