"""
Shared value types for skill definitions.

Entity references, vectors, ranges and the enums that several node
payloads use. Everything here serializes to the same JSON shape the
game runtime reads.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class EntityType(Enum):
    """Kinds of entity a reference can point at."""

    MODEL = "Model"
    SKILL = "Skill"
    WEAPON = "Weapon"
    EQUIPMENT = "Equipment"
    IMAGE = "Image"
    STATUS = "Status"
    CURSOR = "Cursor"
    STAT = "Stat"
    QUALITY = "Quality"
    AUDIO_CLIP = "AudioClip"
    SOUND = "Sound"
    SOUND_BANK = "SoundBank"
    DROP_TABLE = "DropTable"
    CHARACTER = "Character"
    ANIMATION_SOURCE = "AnimationSource"
    ANIMATION = "Animation"


class HitType(Enum):
    """What a hit does to its target."""

    DAMAGE = "Damage"
    HEAL = "Heal"
    THREAT = "Threat"
    MANA = "Mana"


class StatType(Enum):
    """Character stats a scaler can read from."""

    VIT = "Vit"
    STR = "Str"
    INT = "Int"
    DEX = "Dex"
    ARMOR = "Armor"
    MAGIC_RESIST = "MagicResist"
    HEALTH = "Health"
    MANA = "Mana"
    DAMAGE_TAKEN_MODIFIER = "DamageTakenModifier"
    DAMAGE_MODIFIER = "DamageModifier"
    MOVEMENT_SPEED = "MovementSpeed"
    MOVEMENT_SPEED_MODIFIER = "MovementSpeedModifier"
    ATTACK_SPEED = "AttackSpeed"
    ATTACK_POWER = "AttackPower"
    ABILITY_POWER = "AbilityPower"
    CRITICAL_CHANCE = "CriticalChance"
    CRITICAL_DAMAGE = "CriticalDamage"
    COOLDOWN_REDUCTION = "CooldownReduction"
    DODGE_CHANCE = "DodgeChance"
    MANA_REGEN = "ManaRegen"
    HEALTH_REGEN = "HealthRegen"
    EXPERIENCE_MODIFIER = "ExperienceModifier"
    GOLD_MODIFIER = "GoldModifier"
    LIFE_STEAL = "LifeSteal"


DEFAULT_OWNER = "Octoio"


@dataclass
class EntityReference:
    """Pointer to another entity definition (sound, animation, character...)."""

    owner: str = DEFAULT_OWNER
    type: EntityType = EntityType.SOUND
    key: str = ""
    version: int = 1
    id: str = ""

    @classmethod
    def empty(cls, entity_type: EntityType, owner: str = DEFAULT_OWNER) -> "EntityReference":
        """Create an unset reference of the given type."""
        return cls(owner=owner, type=entity_type, key="", version=1, id="")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "owner": self.owner,
            "type": self.type.value,
            "key": self.key,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EntityReference":
        """Create from dictionary."""
        return cls(
            owner=data.get("owner", DEFAULT_OWNER),
            type=EntityType(data.get("type", EntityType.SOUND.value)),
            key=data.get("key", ""),
            version=data.get("version", 1),
            id=data.get("id", ""),
        )


@dataclass
class Vector3:
    """3D offset."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Vector3":
        return cls(x=data.get("x", 0.0), y=data.get("y", 0.0), z=data.get("z", 0.0))


@dataclass
class FloatRange:
    """Inclusive min/max range."""

    min: float = 0.0
    max: float = 0.0

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FloatRange":
        return cls(min=data.get("min", 0.0), max=data.get("max", 0.0))


@dataclass
class Metadata:
    """Display title and description."""

    title: str = ""
    description: str = ""

    def to_dict(self) -> dict:
        return {"title": self.title, "description": self.description}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Metadata":
        return cls(title=data.get("title", ""), description=data.get("description", ""))


@dataclass
class SkillEffectScaling:
    """How an effect scales with one of the caster's stats."""

    base: float = 0.0
    scaling: FloatRange = field(default_factory=FloatRange)
    stat: StatType = StatType.STR

    def to_dict(self) -> dict:
        return {
            "base": self.base,
            "scaling": self.scaling.to_dict(),
            "stat": self.stat.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SkillEffectScaling":
        return cls(
            base=data.get("base", 0.0),
            scaling=FloatRange.from_dict(data.get("scaling", {})),
            stat=StatType(data.get("stat", StatType.STR.value)),
        )
