"""Tests for node lifecycle operations."""

import itertools

import pytest

from skillflow.config import LayoutConfig
from skillflow.graph import (
    Graph,
    Position,
    ReorderDirection,
    add_node,
    connect,
    materialize,
    move_node,
    prune_unreachable,
    reconstruct,
    remove_node,
    reorder_node,
    update_node,
)
from skillflow.schema import ActionNodeType, DelayNode, SequenceNode, SoundNode


@pytest.fixture
def ids():
    """Deterministic id factory."""
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"


@pytest.fixture
def graph(ids):
    """Root sequence (n1) with Delay (n2) and Sound (n3)."""
    tree = SequenceNode(
        name="Root",
        children=[DelayNode(name="Wait"), SoundNode(name="Impact")],
    )
    return materialize(tree, id_factory=ids)


def child_names(graph, node_id):
    return [n.data["name"] for n in graph.children_of(node_id)]


class TestAddNode:
    """Tests for add_node."""

    def test_add_hit_under_root(self, graph, ids):
        """Adding a Hit under the root adds one node and one edge."""
        new_graph, new_id = add_node(graph, ActionNodeType.HIT, "n1", id_factory=ids)

        assert new_id == "n4"
        assert len(new_graph.nodes) == len(graph.nodes) + 1
        assert len(new_graph.edges) == len(graph.edges) + 1
        assert new_graph.has_edge("n1", "n4")

        effect = new_graph.get_node("n4").data["hit_effect"]
        assert effect["can_crit"] is True
        assert effect["can_miss"] is True
        assert effect["scalers"] == []

    def test_new_child_goes_right_of_rightmost(self, graph, ids):
        """Placement is offset from the rightmost sibling and it becomes last."""
        new_graph, new_id = add_node(graph, "Delay", "n1", id_factory=ids)

        rightmost = graph.get_node("n3").position
        assert new_graph.get_node(new_id).position == Position(rightmost.x + 250, rightmost.y + 100)
        assert child_names(new_graph, "n1") == ["Wait", "Impact", "New Delay"]

    def test_first_child_offset(self, ids):
        """A parent's first child goes below and right of it."""
        graph, root_id = add_node(Graph(), "Parallel", id_factory=ids)
        graph, child_id = add_node(graph, "Delay", root_id, id_factory=ids)

        root = graph.get_node(root_id).position
        assert graph.get_node(child_id).position == Position(root.x + 150, root.y + 200)

    def test_no_parent(self, ids):
        """A node without a parent is placed at the fixed spot."""
        graph, new_id = add_node(Graph(), "Sequence", id_factory=ids)

        assert graph.get_node(new_id).position == Position(100, 100)
        assert graph.edges == ()
        assert graph.get_node(new_id).data["name"] == "New Sequence"

    def test_unknown_parent_adds_unconnected(self, graph, ids):
        """An unknown parent id adds a free node."""
        new_graph, new_id = add_node(graph, "Delay", "missing", id_factory=ids)

        assert new_graph.has_node(new_id)
        assert new_graph.edges == graph.edges

    def test_custom_layout(self, graph, ids):
        """Placement offsets come from the layout."""
        layout = LayoutConfig(orphan_x=7, orphan_y=9)
        new_graph, new_id = add_node(graph, "Delay", layout=layout, id_factory=ids)
        assert new_graph.get_node(new_id).position == Position(7, 9)

    def test_full_requirement_rejects_child(self, graph, ids):
        """A Requirement keeps at most one child."""
        graph, gate = add_node(graph, "Requirement", "n1", id_factory=ids)
        graph, first = add_node(graph, "Delay", gate, id_factory=ids)
        assert first is not None

        after, second = add_node(graph, "Delay", gate, id_factory=ids)
        assert second is None
        assert after is graph
        assert len(graph.outgoing(gate)) == 1

    def test_no_children_mirror(self, graph, ids):
        """Parent data is untouched by add_node."""
        new_graph, _ = add_node(graph, "Delay", "n1", id_factory=ids)
        assert new_graph.get_node("n1").data == graph.get_node("n1").data


class TestReorderNode:
    """Tests for reorder_node."""

    def test_swap_left(self, graph):
        """Moving the second child left swaps order."""
        new_graph = reorder_node(graph, "n3", "left")
        assert child_names(new_graph, "n1") == ["Impact", "Wait"]
        assert new_graph.get_node("n3").position.x == graph.get_node("n2").position.x
        assert new_graph.get_node("n2").position.x == graph.get_node("n3").position.x

    def test_involution(self, graph):
        """Right then left restores the original order."""
        there = reorder_node(graph, "n2", ReorderDirection.RIGHT)
        back = reorder_node(there, "n2", ReorderDirection.LEFT)

        assert child_names(back, "n1") == child_names(graph, "n1")
        assert reconstruct(back) == reconstruct(graph)

    def test_boundary_is_noop(self, graph):
        """Moving the first child left returns the same graph."""
        assert reorder_node(graph, "n2", "left") is graph
        assert reorder_node(graph, "n3", "right") is graph

    def test_equal_x_is_noop(self, graph):
        """Siblings at the same x swap to nothing, so the graph is unchanged."""
        stacked = move_node(graph, "n3", 0, 800)
        assert reorder_node(stacked, "n2", "right") is stacked
        assert reorder_node(stacked, "n3", "left") is stacked

    def test_root_is_noop(self, graph):
        """A node without a parent cannot be reordered."""
        assert reorder_node(graph, "n1", "left") is graph

    def test_unknown_node_is_noop(self, graph):
        assert reorder_node(graph, "missing", "right") is graph

    def test_y_unchanged(self, graph):
        """Only x positions are swapped."""
        new_graph = reorder_node(graph, "n2", "right")
        assert new_graph.get_node("n2").position.y == graph.get_node("n2").position.y

    def test_bad_direction(self, graph):
        with pytest.raises(ValueError):
            reorder_node(graph, "n2", "up")


class TestRemoveNode:
    """Tests for remove_node and prune_unreachable."""

    def test_remove_leaf(self, graph):
        """Removing a leaf drops its edge."""
        new_graph = remove_node(graph, "n2")
        assert not new_graph.has_node("n2")
        assert not any(e.target == "n2" for e in new_graph.edges)
        assert [c.name for c in reconstruct(new_graph).children] == ["Impact"]

    def test_descendants_become_orphans(self, ids):
        """Removing a container keeps its children as detached nodes."""
        tree = SequenceNode(
            name="Root",
            children=[SequenceNode(name="Inner", children=[DelayNode(name="Deep")])],
        )
        graph = materialize(tree, id_factory=ids)

        new_graph = remove_node(graph, "n2")
        assert new_graph.has_node("n3")
        assert new_graph.edges == ()
        assert reconstruct(new_graph).children == []

    def test_prune(self, ids):
        """prune_unreachable drops detached nodes."""
        tree = SequenceNode(
            name="Root",
            children=[SequenceNode(name="Inner", children=[DelayNode(name="Deep")])],
        )
        graph = remove_node(materialize(tree, id_factory=ids), "n2")

        pruned = prune_unreachable(graph)
        assert [n.id for n in pruned.nodes] == ["n1"]

    def test_prune_noop(self, graph):
        """A fully connected graph is returned unchanged."""
        assert prune_unreachable(graph) is graph

    def test_remove_unknown(self, graph):
        assert remove_node(graph, "missing") is graph


class TestUpdateNode:
    """Tests for update_node."""

    def test_merge(self, graph):
        """Fields are shallow merged."""
        new_graph = update_node(graph, "n2", {"delay": 2.5, "name": "Long wait"})
        data = new_graph.get_node("n2").data
        assert data["delay"] == 2.5
        assert data["name"] == "Long wait"
        assert reconstruct(new_graph).children[0].delay == 2.5

    def test_protected_keys_ignored(self, graph):
        """type, children and position are not overwritten."""
        new_graph = update_node(
            graph,
            "n1",
            {"type": "Parallel", "children": [], "position": {"x": 9}, "loop": 4},
        )
        node = new_graph.get_node("n1")
        assert node.type == "Sequence"
        assert node.data["type"] == "Sequence"
        assert "children" not in node.data
        assert node.position == graph.get_node("n1").position
        assert node.data["loop"] == 4
        assert new_graph.edges == graph.edges

    def test_unknown_node(self, graph):
        assert update_node(graph, "missing", {"name": "x"}) is graph

    def test_input_graph_unchanged(self, graph):
        """Operations never mutate their input."""
        update_node(graph, "n2", {"delay": 9.0})
        assert graph.get_node("n2").data["delay"] == 1.0


class TestConnect:
    """Tests for connect and move_node."""

    def test_connect_adds_edge(self, graph, ids):
        """Connecting a free node makes it a child."""
        graph, free = add_node(graph, "Delay", id_factory=ids)
        new_graph = connect(graph, "n1", free)
        assert new_graph.has_edge("n1", free)
        assert len(new_graph.edges) == len(graph.edges) + 1

    def test_requirement_second_connection_rejected(self, graph, ids):
        """A Requirement with a child refuses another connection."""
        graph, gate = add_node(graph, "Requirement", "n1", id_factory=ids)
        graph, _ = add_node(graph, "Delay", gate, id_factory=ids)
        graph, free = add_node(graph, "Sound", id_factory=ids)

        assert connect(graph, gate, free) is graph

    def test_duplicate_edge_not_added(self, graph):
        assert connect(graph, "n1", "n2") is graph

    def test_missing_endpoint(self, graph):
        assert connect(graph, "n1", "ghost") is graph
        assert connect(graph, "ghost", "n1") is graph

    def test_move_changes_order(self, graph):
        """Dragging a child past its sibling reorders it."""
        new_graph = move_node(graph, "n2", 900, 800)
        assert child_names(new_graph, "n1") == ["Impact", "Wait"]
        assert new_graph.get_node("n2").position == Position(900, 800)
