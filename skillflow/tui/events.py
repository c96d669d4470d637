"""Custom Textual events for TUI updates."""

from dataclasses import dataclass
from typing import Optional

from textual.message import Message


@dataclass
class GraphChanged(Message):
    """Emitted after the store's graph or skill changes."""

    node_count: int
    edge_count: int
    valid: bool

    def __init__(
        self,
        node_count: int,
        edge_count: int,
        valid: bool,
    ) -> None:
        super().__init__()
        self.node_count = node_count
        self.edge_count = edge_count
        self.valid = valid


@dataclass
class NodeFocused(Message):
    """Emitted when the cursor lands on a graph node."""

    node_id: Optional[str]
    fields: dict

    def __init__(
        self,
        node_id: Optional[str],
        fields: Optional[dict] = None,
    ) -> None:
        super().__init__()
        self.node_id = node_id
        self.fields = fields or {}


@dataclass
class ExportCompleted(Message):
    """Emitted after the skill was written to disk (or failed to be)."""

    path: str
    success: bool
    error_message: Optional[str] = None

    def __init__(
        self,
        path: str,
        success: bool,
        error_message: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.path = path
        self.success = success
        self.error_message = error_message
