"""TUI for editing skill execution trees."""

from .app import SkillFlowTUI
from .events import ExportCompleted, GraphChanged, NodeFocused
from .logging import (
    EditorSessionLogger,
    OperationLogger,
    get_log_file,
    setup_session_logging,
    teardown_session_logging,
)

__all__ = [
    "SkillFlowTUI",
    "GraphChanged",
    "NodeFocused",
    "ExportCompleted",
    "setup_session_logging",
    "teardown_session_logging",
    "get_log_file",
    "EditorSessionLogger",
    "OperationLogger",
]
