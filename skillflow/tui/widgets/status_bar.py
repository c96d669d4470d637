"""Status bar showing graph size, validity and the last message."""

from rich.text import Text
from textual.widgets import Static

from ..events import ExportCompleted, GraphChanged


class EditorStatusBar(Static):
    """
    Single status line.

    Format: Nodes: 5 | Edges: 4 | OK | Saved to skill.json
    """

    DEFAULT_CSS = """
    EditorStatusBar {
        background: $surface;
        padding: 0 1;
        height: 3;
        border: solid $primary;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._node_count = 0
        self._edge_count = 0
        self._graph_valid = True
        self._status_message = ""

    def on_mount(self) -> None:
        """Initialize display when mounted."""
        self._refresh_display()

    def on_graph_changed(self, event: GraphChanged) -> None:
        self._node_count = event.node_count
        self._edge_count = event.edge_count
        self._graph_valid = event.valid
        self._refresh_display()

    def on_export_completed(self, event: ExportCompleted) -> None:
        if event.success:
            self._status_message = f"Saved to {event.path}"
        else:
            self._status_message = f"Save failed: {event.error_message or 'unknown error'}"
        self._refresh_display()

    def set_message(self, message: str) -> None:
        self._status_message = message
        self._refresh_display()

    def render_text(self) -> Text:
        """Build the status line."""
        text = Text()
        text.append("Nodes: ", style="bold")
        text.append(f"{self._node_count}")
        text.append(" | Edges: ", style="dim")
        text.append(f"{self._edge_count}")
        text.append(" | ", style="dim")
        if self._graph_valid:
            text.append("OK", style="green bold")
        else:
            text.append("INVALID", style="red bold")
        if self._status_message:
            text.append(f" | {self._status_message[:76]}", style="italic")
        return text

    def _refresh_display(self) -> None:
        self.update(self.render_text())
