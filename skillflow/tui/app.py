"""Main TUI application for editing a skill's execution tree."""

import logging
from pathlib import Path
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Tree

from skillflow.editor import SkillEditorStore
from skillflow.exceptions import SkillFlowError

from .events import ExportCompleted, GraphChanged, NodeFocused
from .logging import OperationLogger, get_log_file, setup_session_logging, teardown_session_logging
from .widgets import EditorStatusBar, GraphTreeView, NodeDetailsPanel

logger = logging.getLogger(__name__)


class SkillFlowTUI(App):
    """
    Terminal editor for a skill execution tree.

    Layout:
    - Left panel: graph outline (children in x order, detached nodes last)
    - Right panel: fields of the focused node
    - Bottom: status bar

    Keyboard shortcuts:
    - S/P: add Sequence/Parallel under the focused node
    - D/N/O/H/T/U/J: add Delay/Animation/Sound/Hit/Status/Summon/Projectile
    - R: add Requirement
    - X: delete focused node (its children become detached)
    - [ / ]: move focused node left/right among its siblings
    - G: prune detached nodes
    - Ctrl+S: save
    - Q: quit
    """

    TITLE = "Skill Flow Editor"
    SUB_TITLE = "Edit skill execution trees"

    CSS = """
    #main-container {
        layout: horizontal;
        height: 1fr;
    }

    #graph-view {
        width: 55%;
        height: 100%;
    }

    #node-details {
        width: 45%;
        height: 100%;
    }

    #status-bar {
        height: 3;
    }
    """

    BINDINGS = [
        Binding("s", "add('Sequence')", "Sequence", show=True),
        Binding("p", "add('Parallel')", "Parallel", show=True),
        Binding("r", "add('Requirement')", "Requirement", show=True),
        Binding("d", "add('Delay')", "Delay", show=False),
        Binding("n", "add('Animation')", "Animation", show=False),
        Binding("o", "add('Sound')", "Sound", show=False),
        Binding("h", "add('Hit')", "Hit", show=False),
        Binding("t", "add('Status')", "Status", show=False),
        Binding("u", "add('Summon')", "Summon", show=False),
        Binding("j", "add('Projectile')", "Projectile", show=False),
        Binding("x", "remove", "Delete", show=True),
        Binding("left_square_bracket", "reorder('left')", "Move left", show=True),
        Binding("right_square_bracket", "reorder('right')", "Move right", show=True),
        Binding("g", "prune", "Prune", show=False),
        Binding("ctrl+s", "save", "Save", show=True),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        store: SkillEditorStore,
        save_path: Optional[Path] = None,
        log_dir: Optional[Path] = None,
        **kwargs,
    ) -> None:
        """
        Initialize the TUI.

        Args:
            store: Editor store holding the skill
            save_path: Where Ctrl+S writes the exported skill
            log_dir: Directory for the session log file
        """
        super().__init__(**kwargs)
        self.store = store
        self.save_path = save_path
        self.log_dir = log_dir
        self.selected_id: Optional[str] = None
        self.saved_path: Optional[Path] = None
        self.final_log_file: Optional[Path] = None
        self._op_logger = OperationLogger()
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Header()
        yield Horizontal(
            GraphTreeView(id="graph-view"),
            NodeDetailsPanel(id="node-details"),
            id="main-container",
        )
        yield EditorStatusBar(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is ready."""
        self._session_log_file = setup_session_logging(self.log_dir)
        self._unsubscribe = self.store.subscribe(self._on_store_changed)

        root = self.store.graph.root_candidates()
        self.selected_id = root[0].id if root else None
        self._refresh_view()

        logger.info("TUI mounted and ready")
        logger.info(f"Logging to: {self._session_log_file}")

    # ==================== Store -> widgets ====================

    def _on_store_changed(self, store: SkillEditorStore) -> None:
        self.post_message(
            GraphChanged(
                node_count=len(store.graph.nodes),
                edge_count=len(store.graph.edges),
                valid=store.validate().valid,
            )
        )

    def _refresh_view(self) -> None:
        graph_view = self.query_one("#graph-view", GraphTreeView)
        title = self.store.definition.entity.metadata.title or self.store.definition.key
        graph_view.show_graph(self.store.graph, title=title, select_id=self.selected_id)

        status_bar = self.query_one("#status-bar", EditorStatusBar)
        status_bar.on_graph_changed(
            GraphChanged(
                node_count=len(self.store.graph.nodes),
                edge_count=len(self.store.graph.edges),
                valid=self.store.validate().valid,
            )
        )
        self._show_details()

    def _show_details(self) -> None:
        node = self.store.graph.get_node(self.selected_id) if self.selected_id else None
        event = NodeFocused(node.id, dict(node.data)) if node else NodeFocused(None)
        self.query_one("#node-details", NodeDetailsPanel).on_node_focused(event)

    # ==================== Event Handlers ====================

    def on_graph_changed(self, event: GraphChanged) -> None:
        """Rebuild the outline after a store change."""
        try:
            self._refresh_view()
        except Exception as e:
            logger.error(f"Error handling GraphChanged: {e}")

    def on_export_completed(self, event: ExportCompleted) -> None:
        """Forward export result to the status bar."""
        self.query_one("#status-bar", EditorStatusBar).on_export_completed(event)

    def on_tree_node_highlighted(self, event: Tree.NodeHighlighted) -> None:
        """Track the focused graph node."""
        self.selected_id = event.node.data
        self._show_details()

    # ==================== Actions ====================

    def _status(self, message: str) -> None:
        self.query_one("#status-bar", EditorStatusBar).set_message(message)

    def action_add(self, node_type: str) -> None:
        """Add a node of ``node_type`` under the focused node."""
        parent_id = self.selected_id if self.store.graph.has_node(self.selected_id or "") else None
        new_id = self.store.add_node(node_type, parent_id)
        self._op_logger.log_operation("add", new_id, f"type={node_type} parent={parent_id}", new_id is not None)
        if new_id is None:
            self._status("A Requirement node can only have one child")
            return
        self.selected_id = new_id

    def action_remove(self) -> None:
        """Delete the focused node."""
        if not self.selected_id:
            return
        node_id = self.selected_id
        parent_id = self.store.graph.parent_of(node_id)
        self.store.remove_node(node_id)
        self._op_logger.log_operation("remove", node_id)
        self.selected_id = parent_id

    def action_reorder(self, direction: str) -> None:
        """Move the focused node among its siblings."""
        if not self.selected_id:
            return
        before = self.store.graph
        after = self.store.reorder_node(self.selected_id, direction)
        self._op_logger.log_operation("reorder", self.selected_id, direction, after is not before)

    def action_prune(self) -> None:
        """Remove nodes not reachable from the root."""
        before = len(self.store.graph.nodes)
        self.store.prune_unreachable()
        removed = before - len(self.store.graph.nodes)
        self._op_logger.log_operation("prune", detail=f"removed={removed}", applied=removed > 0)
        if self.selected_id and not self.store.graph.has_node(self.selected_id):
            self.selected_id = None
        self._status(f"Pruned {removed} detached node(s)")

    def action_save(self) -> None:
        """Export the skill and write it to the save path."""
        if self.save_path is None:
            self._status("No save path given")
            return
        path = str(self.save_path)
        try:
            text = self.store.export_json()
            self.save_path.parent.mkdir(parents=True, exist_ok=True)
            self.save_path.write_text(text + "\n", encoding="utf-8")
        except (OSError, SkillFlowError) as e:
            self._op_logger.log_export(path, False, str(e))
            self.post_message(ExportCompleted(path, False, str(e)))
            return
        self.saved_path = self.save_path
        self._op_logger.log_export(path, True)
        self.post_message(ExportCompleted(path, True))

    async def action_quit(self) -> None:
        """Clean up and quit."""
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        self.final_log_file = get_log_file()
        teardown_session_logging()
        self.exit()

    def on_unmount(self) -> None:
        """Called when app is unmounting."""
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        teardown_session_logging()
