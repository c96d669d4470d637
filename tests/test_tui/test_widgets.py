"""Tests for TUI widgets and the editor app."""

import itertools
import json

import pytest

from skillflow.editor import SkillEditorStore
from skillflow.graph import FlowEdge, FlowNode, Graph, Position, add_node, materialize, remove_node
from skillflow.schema import DelayNode, HitNode, RequirementNode, SequenceNode
from skillflow.tui import SkillFlowTUI
from skillflow.tui.widgets import (
    EditorStatusBar,
    GraphTreeView,
    NodeDetailsPanel,
    graph_rows,
    row_label,
)


@pytest.fixture
def ids():
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"


@pytest.fixture
def graph(ids):
    tree = SequenceNode(
        name="Root",
        children=[
            DelayNode(name="Wait"),
            RequirementNode(name="Gate", child=HitNode(name="Slash")),
        ],
    )
    return materialize(tree, id_factory=ids)


class TestGraphRows:
    """Tests for flattening a graph into outline rows."""

    def test_depths(self, graph):
        rows = graph_rows(graph)
        assert [(r.depth, r.node.data["name"]) for r in rows] == [
            (0, "Root"),
            (1, "Wait"),
            (1, "Gate"),
            (2, "Slash"),
        ]
        assert not any(r.detached for r in rows)

    def test_detached_after_root(self, graph):
        """Nodes cut off from the root are listed last."""
        rows = graph_rows(remove_node(graph, "n3"))
        assert [r.node.id for r in rows] == ["n1", "n2", "n4"]
        assert rows[-1].detached
        assert rows[-1].depth == 0

    def test_leaf_child_is_detached(self, graph, ids):
        """A node hanging under a leaf is listed detached, as export drops it."""
        graph, sound_id = add_node(graph, "Sound", "n2", id_factory=ids)
        rows = graph_rows(graph)

        row = next(r for r in rows if r.node.id == sound_id)
        assert row.depth == 0
        assert row.detached
        assert [r.node.id for r in rows if not r.detached] == ["n1", "n2", "n3", "n4"]

    def test_requirement_extra_child_is_detached(self, graph):
        """Only the first child of a Requirement is attached."""
        extra = FlowNode("extra", "Delay", Position(), {"type": "Delay", "name": "Extra", "delay": 1.0})
        graph = Graph(nodes=graph.nodes + (extra,), edges=graph.edges + (FlowEdge.between("n3", "extra"),))

        rows = graph_rows(graph)
        assert [(r.node.id, r.depth, r.detached) for r in rows][-2:] == [
            ("n4", 2, False),
            ("extra", 0, True),
        ]

    def test_row_label(self, graph):
        rows = graph_rows(remove_node(graph, "n3"))
        assert row_label(rows[0]).plain == "Sequence 'Root'"
        assert row_label(rows[1]).plain == "Delay 'Wait' (1.0s)"
        assert row_label(rows[-1]).plain.endswith("[detached]")


class TestWidgets:
    """Tests for widget construction."""

    def test_status_bar_text(self):
        widget = EditorStatusBar()
        widget._node_count = 3
        widget._edge_count = 2
        assert widget.render_text().plain == "Nodes: 3 | Edges: 2 | OK"

        widget._graph_valid = False
        widget._status_message = "Saved to skill.json"
        assert widget.render_text().plain == "Nodes: 3 | Edges: 2 | INVALID | Saved to skill.json"

    def test_details_panel_creation(self):
        widget = NodeDetailsPanel()
        assert widget._focused_node_id is None

    def test_tree_view_creation(self):
        widget = GraphTreeView()
        assert widget.node_for("n1") is None


class TestSkillFlowTUI:
    """Tests driving the app with the Textual pilot."""

    @pytest.mark.asyncio
    async def test_add_node_and_save(self, tmp_path, ids):
        """Key bindings add nodes and ctrl+s writes the skill."""
        store = SkillEditorStore(id_factory=ids)
        save_path = tmp_path / "skill.json"
        app = SkillFlowTUI(store, save_path=save_path, log_dir=tmp_path / "logs")

        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("d")
            await pilot.pause()
            assert len(store.graph.nodes) == 2
            status_bar = app.query_one("#status-bar", EditorStatusBar)
            assert status_bar.render_text().plain.startswith("Nodes: 2 | Edges: ")

            await pilot.press("ctrl+s")
            await pilot.pause()

        assert app.saved_path == save_path
        data = json.loads(save_path.read_text())
        assert data["entity"]["execution_root"]["type"] == "Parallel"

    @pytest.mark.asyncio
    async def test_remove_node(self, tmp_path, ids):
        """Deleting the focused node removes it from the store."""
        store = SkillEditorStore(id_factory=ids)
        app = SkillFlowTUI(store, log_dir=tmp_path / "logs")

        async with app.run_test() as pilot:
            await pilot.pause()
            app.selected_id = "n1"
            await pilot.press("x")
            await pilot.pause()
            assert store.graph.is_empty

    @pytest.mark.asyncio
    async def test_status_bar_follows_store(self, tmp_path, ids):
        """Store changes reach the status bar without breaking the DOM."""
        store = SkillEditorStore(id_factory=ids)
        app = SkillFlowTUI(store, log_dir=tmp_path / "logs")

        async with app.run_test() as pilot:
            await pilot.pause()
            store.add_node("Delay", "n1")
            store.add_node("Sound", "n1")
            await pilot.pause()

            status_bar = app.query_one("#status-bar", EditorStatusBar)
            assert status_bar.render_text().plain.startswith("Nodes: 3 | Edges: 2 | OK")
            assert len(app.query(EditorStatusBar)) == 1

    @pytest.mark.asyncio
    async def test_cursor_follows_selection(self, tmp_path, ids):
        """show_graph puts the cursor on the selected node."""
        store = SkillEditorStore(id_factory=ids)
        child_id = store.add_node("Delay", "n1")
        app = SkillFlowTUI(store, log_dir=tmp_path / "logs")

        async with app.run_test() as pilot:
            await pilot.pause()
            graph_view = app.query_one("#graph-view", GraphTreeView)
            graph_view.show_graph(store.graph, select_id=child_id)
            await pilot.pause()
            await pilot.pause()
            assert graph_view.cursor_node is graph_view.node_for(child_id)
