"""
Action node schema.

An execution tree is built from ActionNode variants. Sequence and Parallel
hold an ordered list of children, Requirement gates at most one child, and
every other variant is a leaf with a type-specific payload.

The variant registry (NODE_CLASSES) and the default payload table
(NODE_DEFAULTS) are both keyed by ActionNodeType and checked against it
at import time, so adding a type without wiring it up fails loudly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Mapping

from skillflow.exceptions import SchemaError

from .common import DEFAULT_OWNER, EntityReference, EntityType, Vector3
from .mechanics import HitEffect, RequirementEvaluation, StatusEffect


class ActionNodeType(Enum):
    """Discriminant of the ActionNode tagged union."""

    SEQUENCE = "Sequence"
    PARALLEL = "Parallel"
    DELAY = "Delay"
    ANIMATION = "Animation"
    SOUND = "Sound"
    HIT = "Hit"
    STATUS = "Status"
    SUMMON = "Summon"
    PROJECTILE = "Projectile"
    REQUIREMENT = "Requirement"

    @classmethod
    def from_string(cls, value: "str | ActionNodeType") -> "ActionNodeType":
        """Convert string to ActionNodeType."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise SchemaError(f"Unknown action node type: {value!r}", node_type=str(value))


class NodeCategory(Enum):
    """Structural role of a node type."""

    CONTAINER = "container"
    GATING = "gating"
    LEAF = "leaf"


CONTAINER_TYPES = frozenset({ActionNodeType.SEQUENCE, ActionNodeType.PARALLEL})
GATING_TYPES = frozenset({ActionNodeType.REQUIREMENT})

# Keys that describe tree structure rather than a node's own fields
STRUCTURAL_KEYS = frozenset({"children", "child"})


def category_of(node_type: "ActionNodeType | str") -> NodeCategory:
    """Return whether a node type is a container, the gating node, or a leaf."""
    node_type = ActionNodeType.from_string(node_type)
    if node_type in CONTAINER_TYPES:
        return NodeCategory.CONTAINER
    if node_type in GATING_TYPES:
        return NodeCategory.GATING
    return NodeCategory.LEAF


def is_container(node_type: "ActionNodeType | str") -> bool:
    return category_of(node_type) == NodeCategory.CONTAINER


def is_gating(node_type: "ActionNodeType | str") -> bool:
    return category_of(node_type) == NodeCategory.GATING


@dataclass
class ActionNode:
    """
    Base of all action node variants.

    Subclasses set ``node_type`` and implement ``payload()`` (their own
    fields, serialized) and ``_from_payload()``. Children are handled here
    so the converter never needs to know individual variants.
    """

    node_type: ClassVar[ActionNodeType]

    name: str = ""

    @property
    def type(self) -> ActionNodeType:
        return self.node_type

    @property
    def category(self) -> NodeCategory:
        return category_of(self.node_type)

    def payload(self) -> dict:
        """Type-specific fields, excluding children."""
        return {}

    def child_nodes(self) -> list["ActionNode"]:
        """Children in order (empty for leaves)."""
        return []

    def fields(self) -> dict:
        """The node's own fields: type, name and payload, without children."""
        return {"type": self.node_type.value, "name": self.name, **self.payload()}

    def to_dict(self) -> dict:
        """Convert to the persisted tree shape, recursively."""
        return self.fields()

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "ActionNode":
        return cls(name=data.get("name", ""))

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "ActionNode":
        """Create the right variant from a persisted node dictionary."""
        if "type" not in data:
            raise SchemaError("Action node is missing its 'type' field")
        node_type = ActionNodeType.from_string(data["type"])
        return NODE_CLASSES[node_type]._from_payload(data)


@dataclass
class ContainerNode(ActionNode):
    """Sequence/Parallel: ordered children, repeated ``loop`` times."""

    children: list[ActionNode] = field(default_factory=list)
    loop: int = 1

    def payload(self) -> dict:
        return {"loop": self.loop}

    def child_nodes(self) -> list[ActionNode]:
        return list(self.children)

    def to_dict(self) -> dict:
        data = self.fields()
        data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "ContainerNode":
        return cls(
            name=data.get("name", ""),
            children=[ActionNode.from_dict(c) for c in data.get("children") or []],
            loop=data.get("loop", 1),
        )


@dataclass
class SequenceNode(ContainerNode):
    node_type: ClassVar[ActionNodeType] = ActionNodeType.SEQUENCE


@dataclass
class ParallelNode(ContainerNode):
    node_type: ClassVar[ActionNodeType] = ActionNodeType.PARALLEL


@dataclass
class RequirementNode(ActionNode):
    """Runs ``child`` only when ``requirements`` evaluate true."""

    node_type: ClassVar[ActionNodeType] = ActionNodeType.REQUIREMENT

    requirements: RequirementEvaluation = field(default_factory=RequirementEvaluation)
    child: ActionNode | None = None

    def payload(self) -> dict:
        return {"requirements": self.requirements.to_dict()}

    def child_nodes(self) -> list[ActionNode]:
        return [self.child] if self.child is not None else []

    def to_dict(self) -> dict:
        data = self.fields()
        if self.child is not None:
            data["child"] = self.child.to_dict()
        return data

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "RequirementNode":
        child = data.get("child")
        return cls(
            name=data.get("name", ""),
            requirements=RequirementEvaluation.from_dict(data.get("requirements", {})),
            child=ActionNode.from_dict(child) if child else None,
        )


@dataclass
class DelayNode(ActionNode):
    node_type: ClassVar[ActionNodeType] = ActionNodeType.DELAY

    delay: float = 1.0

    def payload(self) -> dict:
        return {"delay": self.delay}

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "DelayNode":
        return cls(name=data.get("name", ""), delay=data.get("delay", 1.0))


@dataclass
class AnimationNode(ActionNode):
    node_type: ClassVar[ActionNodeType] = ActionNodeType.ANIMATION

    show_progress: bool = False
    duration: float = 1.0
    animations: list[EntityReference] = field(default_factory=list)

    def payload(self) -> dict:
        return {
            "show_progress": self.show_progress,
            "duration": self.duration,
            "animations": [a.to_dict() for a in self.animations],
        }

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "AnimationNode":
        return cls(
            name=data.get("name", ""),
            show_progress=data.get("show_progress", False),
            duration=data.get("duration", 1.0),
            animations=[EntityReference.from_dict(a) for a in data.get("animations", [])],
        )


@dataclass
class SoundNode(ActionNode):
    node_type: ClassVar[ActionNodeType] = ActionNodeType.SOUND

    sound: EntityReference = field(default_factory=lambda: EntityReference.empty(EntityType.SOUND))

    def payload(self) -> dict:
        return {"sound": self.sound.to_dict()}

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "SoundNode":
        return cls(
            name=data.get("name", ""),
            sound=EntityReference.from_dict(data.get("sound", {"type": EntityType.SOUND.value})),
        )


@dataclass
class HitNode(ActionNode):
    node_type: ClassVar[ActionNodeType] = ActionNodeType.HIT

    hit_effect: HitEffect = field(default_factory=HitEffect)

    def payload(self) -> dict:
        return {"hit_effect": self.hit_effect.to_dict()}

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "HitNode":
        return cls(
            name=data.get("name", ""),
            hit_effect=HitEffect.from_dict(data.get("hit_effect", {})),
        )


@dataclass
class StatusNode(ActionNode):
    node_type: ClassVar[ActionNodeType] = ActionNodeType.STATUS

    status_effect: StatusEffect = field(default_factory=StatusEffect)

    def payload(self) -> dict:
        return {"status_effect": self.status_effect.to_dict()}

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "StatusNode":
        return cls(
            name=data.get("name", ""),
            status_effect=StatusEffect.from_dict(data.get("status_effect", {})),
        )


@dataclass
class SummonNode(ActionNode):
    node_type: ClassVar[ActionNodeType] = ActionNodeType.SUMMON

    summon_entity: EntityReference = field(
        default_factory=lambda: EntityReference.empty(EntityType.CHARACTER)
    )
    position_offset: Vector3 = field(default_factory=Vector3)

    def payload(self) -> dict:
        return {
            "summon_entity": self.summon_entity.to_dict(),
            "position_offset": self.position_offset.to_dict(),
        }

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "SummonNode":
        return cls(
            name=data.get("name", ""),
            summon_entity=EntityReference.from_dict(
                data.get("summon_entity", {"type": EntityType.CHARACTER.value})
            ),
            position_offset=Vector3.from_dict(data.get("position_offset", {})),
        )


@dataclass
class ProjectileNode(ActionNode):
    """Launches a model toward the skill target."""

    node_type: ClassVar[ActionNodeType] = ActionNodeType.PROJECTILE

    projectile: EntityReference = field(
        default_factory=lambda: EntityReference.empty(EntityType.MODEL)
    )
    speed: float = 10.0

    def payload(self) -> dict:
        return {"projectile": self.projectile.to_dict(), "speed": self.speed}

    @classmethod
    def _from_payload(cls, data: Mapping[str, Any]) -> "ProjectileNode":
        return cls(
            name=data.get("name", ""),
            projectile=EntityReference.from_dict(
                data.get("projectile", {"type": EntityType.MODEL.value})
            ),
            speed=data.get("speed", 10.0),
        )


NODE_CLASSES: dict[ActionNodeType, type[ActionNode]] = {
    ActionNodeType.SEQUENCE: SequenceNode,
    ActionNodeType.PARALLEL: ParallelNode,
    ActionNodeType.DELAY: DelayNode,
    ActionNodeType.ANIMATION: AnimationNode,
    ActionNodeType.SOUND: SoundNode,
    ActionNodeType.HIT: HitNode,
    ActionNodeType.STATUS: StatusNode,
    ActionNodeType.SUMMON: SummonNode,
    ActionNodeType.PROJECTILE: ProjectileNode,
    ActionNodeType.REQUIREMENT: RequirementNode,
}


def _container_defaults(owner: str) -> dict:
    return {"loop": 1}


def _delay_defaults(owner: str) -> dict:
    return {"delay": 1.0}


def _animation_defaults(owner: str) -> dict:
    return {"show_progress": False, "duration": 1.0, "animations": []}


def _sound_defaults(owner: str) -> dict:
    return {"sound": EntityReference.empty(EntityType.SOUND, owner).to_dict()}


def _hit_defaults(owner: str) -> dict:
    return {
        "hit_effect": HitEffect(
            hit_sound=EntityReference.empty(EntityType.SOUND, owner),
        ).to_dict()
    }


def _status_defaults(owner: str) -> dict:
    return {
        "status_effect": StatusEffect(
            status=EntityReference.empty(EntityType.STATUS, owner),
        ).to_dict()
    }


def _summon_defaults(owner: str) -> dict:
    return {
        "summon_entity": EntityReference.empty(EntityType.CHARACTER, owner).to_dict(),
        "position_offset": Vector3().to_dict(),
    }


def _projectile_defaults(owner: str) -> dict:
    return {
        "projectile": EntityReference.empty(EntityType.MODEL, owner).to_dict(),
        "speed": 10.0,
    }


def _requirement_defaults(owner: str) -> dict:
    return {"requirements": RequirementEvaluation().to_dict()}


NODE_DEFAULTS: dict[ActionNodeType, Callable[[str], dict]] = {
    ActionNodeType.SEQUENCE: _container_defaults,
    ActionNodeType.PARALLEL: _container_defaults,
    ActionNodeType.DELAY: _delay_defaults,
    ActionNodeType.ANIMATION: _animation_defaults,
    ActionNodeType.SOUND: _sound_defaults,
    ActionNodeType.HIT: _hit_defaults,
    ActionNodeType.STATUS: _status_defaults,
    ActionNodeType.SUMMON: _summon_defaults,
    ActionNodeType.PROJECTILE: _projectile_defaults,
    ActionNodeType.REQUIREMENT: _requirement_defaults,
}


def default_fields(
    node_type: "ActionNodeType | str",
    owner: str = DEFAULT_OWNER,
    name: str | None = None,
) -> dict:
    """
    Build the field dictionary for a freshly created node.

    Args:
        node_type: Variant to create
        owner: Owner written into empty entity references
        name: Display name (defaults to "New <Type>")

    Returns:
        Dict with ``type``, ``name`` and the variant's default payload
    """
    node_type = ActionNodeType.from_string(node_type)
    return {
        "type": node_type.value,
        "name": name if name is not None else f"New {node_type.value}",
        **NODE_DEFAULTS[node_type](owner),
    }


def _check_exhaustive() -> None:
    for table_name, table in (("NODE_CLASSES", NODE_CLASSES), ("NODE_DEFAULTS", NODE_DEFAULTS)):
        missing = set(ActionNodeType) - set(table)
        if missing:
            names = ", ".join(sorted(t.value for t in missing))
            raise SchemaError(f"{table_name} has no entry for: {names}")
    for node_type, node_class in NODE_CLASSES.items():
        if node_class.node_type != node_type:
            raise SchemaError(
                f"NODE_CLASSES maps {node_type.value} to {node_class.__name__}",
                node_type=node_type.value,
            )


_check_exhaustive()
