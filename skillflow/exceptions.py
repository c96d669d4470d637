"""Exceptions raised by the skill flow editor."""


class SkillFlowError(Exception):
    """Base class for editor errors."""


class SchemaError(SkillFlowError):
    """Raised when an action node payload cannot be interpreted."""

    def __init__(self, message: str, node_type: str | None = None):
        super().__init__(message)
        self.node_type = node_type


class SkillDefinitionError(SkillFlowError):
    """Raised when a persisted skill definition cannot be loaded."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source
