"""Tree view of the editor graph, in reconstructed child order."""

from dataclasses import dataclass

from rich.text import Text
from textual.widgets import Tree
from textual.widgets.tree import TreeNode

from skillflow.editor.outline import node_summary
from skillflow.graph import FlowNode, Graph, select_root, tree_children
from skillflow.schema import NodeCategory, category_of


@dataclass
class GraphRow:
    """One line of the outline."""

    depth: int
    node: FlowNode
    detached: bool = False


def graph_rows(graph: Graph) -> list[GraphRow]:
    """
    Flatten a graph into outline rows.

    The root's subtree comes first, with the same children export keeps.
    Every other node (unreachable, or hanging under a leaf or a Requirement
    that already has its child) follows as a detached subtree, in creation
    order.
    """
    rows: list[GraphRow] = []
    visited: set[str] = set()

    def walk(node: FlowNode, depth: int, detached: bool) -> None:
        visited.add(node.id)
        rows.append(GraphRow(depth, node, detached))
        for child in tree_children(graph, node):
            if child.id not in visited:
                walk(child, depth + 1, detached)

    root = select_root(graph)
    if root is not None:
        walk(root, 0, False)

    for node in graph.nodes:
        if node.id not in visited:
            walk(node, 0, True)
    return rows


def row_label(row: GraphRow) -> Text:
    """Styled label for a row."""
    category = category_of(row.node.type)
    styles = {
        NodeCategory.CONTAINER: "bold cyan",
        NodeCategory.GATING: "bold yellow",
        NodeCategory.LEAF: "green",
    }
    text = Text(node_summary(row.node.data), style=styles[category])
    if row.detached and row.depth == 0:
        text.append("  [detached]", style="red dim")
    return text


class GraphTreeView(Tree):
    """
    Outline of the graph as a collapsible tree.

    Each tree node's data is the FlowNode id it shows.
    """

    DEFAULT_CSS = """
    GraphTreeView {
        border: solid $primary;
        background: $surface;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__("Skill", **kwargs)
        self._tree_nodes_by_graph_id: dict[str, TreeNode] = {}

    def show_graph(self, graph: Graph, title: str = "Skill", select_id: str | None = None) -> None:
        """Rebuild the outline from a graph and put the cursor on ``select_id``."""
        self.clear()
        self.root.set_label(title or "Skill")
        self._tree_nodes_by_graph_id = {}

        parents: list[TreeNode] = []
        for row in graph_rows(graph):
            del parents[row.depth:]
            parent = parents[-1] if parents else self.root
            tree_node = parent.add(row_label(row), data=row.node.id, expand=True)
            self._tree_nodes_by_graph_id[row.node.id] = tree_node
            parents.append(tree_node)

        self.root.expand()
        if select_id and select_id in self._tree_nodes_by_graph_id:
            # Line numbers are assigned on the next refresh
            self.call_after_refresh(self._move_cursor_to, select_id)

    def _move_cursor_to(self, node_id: str) -> None:
        tree_node = self._tree_nodes_by_graph_id.get(node_id)
        if tree_node is not None:
            self.move_cursor(tree_node)

    def node_for(self, node_id: str) -> TreeNode | None:
        return self._tree_nodes_by_graph_id.get(node_id)
