"""TUI widgets for the skill flow editor."""

from .graph_view import GraphRow, GraphTreeView, graph_rows, row_label
from .node_panel import NodeDetailsPanel
from .status_bar import EditorStatusBar

__all__ = [
    "GraphRow",
    "GraphTreeView",
    "graph_rows",
    "row_label",
    "NodeDetailsPanel",
    "EditorStatusBar",
]
