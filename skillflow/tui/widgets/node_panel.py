"""Details panel showing the fields of the focused node."""

import json

from rich.syntax import Syntax
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from ..events import NodeFocused


class NodeDetailsPanel(VerticalScroll):
    """
    Shows the focused node's id and fields as JSON.
    """

    DEFAULT_CSS = """
    NodeDetailsPanel {
        border: solid $primary;
        background: $surface;
        padding: 1;
    }

    #details-label {
        text-style: bold underline;
        margin-bottom: 1;
    }

    #details-content {
        width: 100%;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._focused_node_id: str | None = None

    def compose(self) -> ComposeResult:
        """Compose the panel layout."""
        yield Static("Node", id="details-label")
        yield Static("No node selected", id="details-content")

    def on_node_focused(self, event: NodeFocused) -> None:
        """Show the newly focused node."""
        self._focused_node_id = event.node_id
        label = self.query_one("#details-label", Static)
        content = self.query_one("#details-content", Static)

        if event.node_id is None:
            label.update("Node")
            content.update("No node selected")
            return

        label.update(f"Node {event.node_id}")
        content.update(
            Syntax(json.dumps(event.fields, indent=2), "json", theme="monokai", word_wrap=True)
        )
