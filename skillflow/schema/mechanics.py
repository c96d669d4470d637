"""
Combat payload types: targeting, hit/status effects and requirements.

Also holds the targeting defaults applied when an author switches a
target mechanic in the editor.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .common import (
    EntityReference,
    EntityType,
    HitType,
    SkillEffectScaling,
)


class SkillEffectTargetMechanicType(Enum):
    """Shape of the area an effect lands on."""

    SELF = "Self"
    TEAM = "Team"
    SELECTED = "Selected"
    CIRCLE = "Circle"
    RECTANGLE = "Rectangle"


class CharacterTeam(Enum):
    ALLY = "Ally"
    ENEMY = "Enemy"
    NEUTRAL = "Neutral"


class SkillEffectTarget(Enum):
    """Which characters inside the mechanic are affected."""

    ALLY = "Ally"
    ENEMY = "Enemy"
    ANY = "Any"


class StatusDurationType(Enum):
    CHRONO = "Chrono"
    LOGICAL = "Logical"
    ROOM = "Room"
    DUNGEON = "Dungeon"


class RequirementType(Enum):
    CHARACTER = "Character"
    WEAPON_CATEGORY = "WeaponCategory"


class RequirementOperator(Enum):
    """How the predicates of a Requirement node combine."""

    ALL = "All"
    ANY = "Any"


@dataclass
class TargetMechanic:
    """
    Targeting shape for an effect.

    Only the fields relevant to ``type`` are serialized: ``team`` for Team,
    ``hit_count``/``radius`` for Circle, ``hit_count``/``width``/``height``
    for Rectangle.
    """

    type: SkillEffectTargetMechanicType = SkillEffectTargetMechanicType.SELF
    team: CharacterTeam | None = None
    hit_count: int | None = None
    radius: float | None = None
    width: float | None = None
    height: float | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"type": self.type.value}
        if self.team is not None:
            data["team"] = self.team.value
        for key in ("hit_count", "radius", "width", "height"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TargetMechanic":
        return cls(
            type=SkillEffectTargetMechanicType(
                data.get("type", SkillEffectTargetMechanicType.SELF.value)
            ),
            team=CharacterTeam(data["team"]) if data.get("team") else None,
            hit_count=data.get("hit_count"),
            radius=data.get("radius"),
            width=data.get("width"),
            height=data.get("height"),
        )


@dataclass
class StatusDuration:
    type: StatusDurationType = StatusDurationType.CHRONO
    value: float = 0.0

    def to_dict(self) -> dict:
        return {"type": self.type.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StatusDuration":
        return cls(
            type=StatusDurationType(data.get("type", StatusDurationType.CHRONO.value)),
            value=data.get("value", 0.0),
        )


@dataclass
class HitEffect:
    """Payload of a Hit node."""

    hit_type: HitType = HitType.DAMAGE
    scalers: list[SkillEffectScaling] = field(default_factory=list)
    target_mechanic: TargetMechanic = field(default_factory=TargetMechanic)
    target: SkillEffectTarget = SkillEffectTarget.ENEMY
    hit_sound: EntityReference = field(
        default_factory=lambda: EntityReference.empty(EntityType.SOUND)
    )
    can_crit: bool = True
    can_miss: bool = True

    def to_dict(self) -> dict:
        return {
            "hit_type": self.hit_type.value,
            "scalers": [s.to_dict() for s in self.scalers],
            "target_mechanic": self.target_mechanic.to_dict(),
            "target": self.target.value,
            "hit_sound": self.hit_sound.to_dict(),
            "can_crit": self.can_crit,
            "can_miss": self.can_miss,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HitEffect":
        return cls(
            hit_type=HitType(data.get("hit_type", HitType.DAMAGE.value)),
            scalers=[SkillEffectScaling.from_dict(s) for s in data.get("scalers", [])],
            target_mechanic=TargetMechanic.from_dict(data.get("target_mechanic", {})),
            target=SkillEffectTarget(data.get("target", SkillEffectTarget.ENEMY.value)),
            hit_sound=EntityReference.from_dict(
                data.get("hit_sound", {"type": EntityType.SOUND.value})
            ),
            can_crit=data.get("can_crit", True),
            can_miss=data.get("can_miss", True),
        )


@dataclass
class StatusEffect:
    """Payload of a Status node."""

    target_mechanic: TargetMechanic = field(default_factory=TargetMechanic)
    target: SkillEffectTarget = SkillEffectTarget.ALLY
    durations: list[StatusDuration] = field(default_factory=list)
    scalers: list[SkillEffectScaling] = field(default_factory=list)
    status: EntityReference = field(
        default_factory=lambda: EntityReference.empty(EntityType.STATUS)
    )

    def to_dict(self) -> dict:
        return {
            "target_mechanic": self.target_mechanic.to_dict(),
            "target": self.target.value,
            "durations": [d.to_dict() for d in self.durations],
            "scalers": [s.to_dict() for s in self.scalers],
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StatusEffect":
        return cls(
            target_mechanic=TargetMechanic.from_dict(data.get("target_mechanic", {})),
            target=SkillEffectTarget(data.get("target", SkillEffectTarget.ALLY.value)),
            durations=[StatusDuration.from_dict(d) for d in data.get("durations", [])],
            scalers=[SkillEffectScaling.from_dict(s) for s in data.get("scalers", [])],
            status=EntityReference.from_dict(
                data.get("status", {"type": EntityType.STATUS.value})
            ),
        )


@dataclass
class Requirement:
    """A single predicate: the caster is a character type or wields a weapon category."""

    type: RequirementType = RequirementType.CHARACTER
    character: str | None = None
    weapon_category: str | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"type": self.type.value}
        if self.type == RequirementType.CHARACTER:
            data["character"] = self.character
        else:
            data["weapon_category"] = self.weapon_category
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Requirement":
        return cls(
            type=RequirementType(data.get("type", RequirementType.CHARACTER.value)),
            character=data.get("character"),
            weapon_category=data.get("weapon_category"),
        )


@dataclass
class RequirementEvaluation:
    """ALL/ANY over a list of requirements."""

    operator: RequirementOperator = RequirementOperator.ALL
    requirements: list[Requirement] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "operator": self.operator.value,
            "requirements": [r.to_dict() for r in self.requirements],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequirementEvaluation":
        return cls(
            operator=RequirementOperator(data.get("operator", RequirementOperator.ALL.value)),
            requirements=[Requirement.from_dict(r) for r in data.get("requirements", [])],
        )


def make_target_mechanic(mechanic_type: SkillEffectTargetMechanicType) -> TargetMechanic:
    """Create a target mechanic of the given type with its default shape."""
    if mechanic_type == SkillEffectTargetMechanicType.TEAM:
        return TargetMechanic(type=mechanic_type, team=CharacterTeam.ALLY)
    if mechanic_type == SkillEffectTargetMechanicType.CIRCLE:
        return TargetMechanic(type=mechanic_type, hit_count=1, radius=5)
    if mechanic_type == SkillEffectTargetMechanicType.RECTANGLE:
        return TargetMechanic(type=mechanic_type, hit_count=1, width=5, height=5)
    return TargetMechanic(type=mechanic_type)


def default_target_for(mechanic_type: SkillEffectTargetMechanicType) -> SkillEffectTarget:
    """Pick the target that usually goes with a mechanic."""
    if mechanic_type == SkillEffectTargetMechanicType.TEAM:
        return SkillEffectTarget.ALLY
    if mechanic_type in (
        SkillEffectTargetMechanicType.CIRCLE,
        SkillEffectTargetMechanicType.RECTANGLE,
    ):
        return SkillEffectTarget.ENEMY
    if mechanic_type == SkillEffectTargetMechanicType.SELECTED:
        return SkillEffectTarget.ANY
    return SkillEffectTarget.ENEMY


def default_targeting(
    mechanic_type: SkillEffectTargetMechanicType = SkillEffectTargetMechanicType.SELF,
) -> dict:
    """Target plus target mechanic, as they appear inside an effect payload."""
    return {
        "target": default_target_for(mechanic_type).value,
        "target_mechanic": make_target_mechanic(mechanic_type).to_dict(),
    }
