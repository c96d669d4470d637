"""Skill definition schema: action nodes, effect payloads and the entity envelope."""

from .common import (
    DEFAULT_OWNER,
    EntityReference,
    EntityType,
    FloatRange,
    HitType,
    Metadata,
    SkillEffectScaling,
    StatType,
    Vector3,
)
from .mechanics import (
    CharacterTeam,
    HitEffect,
    Requirement,
    RequirementEvaluation,
    RequirementOperator,
    RequirementType,
    SkillEffectTarget,
    SkillEffectTargetMechanicType,
    StatusDuration,
    StatusDurationType,
    StatusEffect,
    TargetMechanic,
    default_target_for,
    default_targeting,
    make_target_mechanic,
)
from .nodes import (
    NODE_CLASSES,
    NODE_DEFAULTS,
    STRUCTURAL_KEYS,
    ActionNode,
    ActionNodeType,
    AnimationNode,
    ContainerNode,
    DelayNode,
    HitNode,
    NodeCategory,
    ParallelNode,
    ProjectileNode,
    RequirementNode,
    SequenceNode,
    SoundNode,
    StatusNode,
    SummonNode,
    category_of,
    default_fields,
    is_container,
    is_gating,
)
from .skill import (
    QualityType,
    Skill,
    SkillCategory,
    SkillEntityDefinition,
    SkillIndicator,
    SkillIndicatorPosition,
    SkillTargetType,
    default_skill_definition,
)

__all__ = [
    # Common
    "DEFAULT_OWNER",
    "EntityReference",
    "EntityType",
    "FloatRange",
    "HitType",
    "Metadata",
    "SkillEffectScaling",
    "StatType",
    "Vector3",
    # Mechanics
    "CharacterTeam",
    "HitEffect",
    "Requirement",
    "RequirementEvaluation",
    "RequirementOperator",
    "RequirementType",
    "SkillEffectTarget",
    "SkillEffectTargetMechanicType",
    "StatusDuration",
    "StatusDurationType",
    "StatusEffect",
    "TargetMechanic",
    "default_target_for",
    "default_targeting",
    "make_target_mechanic",
    # Nodes
    "NODE_CLASSES",
    "NODE_DEFAULTS",
    "STRUCTURAL_KEYS",
    "ActionNode",
    "ActionNodeType",
    "AnimationNode",
    "ContainerNode",
    "DelayNode",
    "HitNode",
    "NodeCategory",
    "ParallelNode",
    "ProjectileNode",
    "RequirementNode",
    "SequenceNode",
    "SoundNode",
    "StatusNode",
    "SummonNode",
    "category_of",
    "default_fields",
    "is_container",
    "is_gating",
    # Skill
    "QualityType",
    "Skill",
    "SkillCategory",
    "SkillEntityDefinition",
    "SkillIndicator",
    "SkillIndicatorPosition",
    "SkillTargetType",
    "default_skill_definition",
]
