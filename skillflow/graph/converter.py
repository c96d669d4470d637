"""
Conversion between execution trees and editor graphs.

materialize() flattens a tree into positioned nodes and edges;
reconstruct() collapses a graph back into a tree. Sibling order on the
way back comes only from node x positions, so materialize lays each
container's children out left to right in tree order.
"""

import copy
import logging
from typing import Any, Mapping

from skillflow.config import LayoutConfig
from skillflow.schema import (
    STRUCTURAL_KEYS,
    ActionNode,
    ActionNodeType,
    NodeCategory,
    category_of,
)

from .models import FlowEdge, FlowNode, Graph, IdFactory, Position, generate_id

logger = logging.getLogger(__name__)

# Keys that belong to the editor, never to the persisted node
EDITOR_KEYS = frozenset({"id", "position"})


def materialize(
    tree: ActionNode,
    layout: LayoutConfig | None = None,
    id_factory: IdFactory | None = None,
) -> Graph:
    """
    Convert an execution tree to a graph.

    Depth-first pre-order: the root sits at the layout anchor, the i-th child
    of a container at (parent.x + i * spacing_x, parent.y + spacing_y), and
    a Requirement's child straight below its gate.

    Args:
        tree: Root action node
        layout: Spacing settings (defaults if not given)
        id_factory: Callable producing fresh node ids

    Returns:
        Graph with one node per tree node and one edge per parent/child pair
    """
    layout = layout or LayoutConfig()
    new_id = id_factory or generate_id
    nodes: list[FlowNode] = []
    edges: list[FlowEdge] = []

    def visit(node: ActionNode, parent_id: str | None, position: Position) -> None:
        node_id = new_id()
        nodes.append(
            FlowNode(
                id=node_id,
                type=node.type.value,
                position=position,
                data=node.fields(),
            )
        )
        if parent_id is not None:
            edges.append(FlowEdge.between(parent_id, node_id))

        category = node.category
        if category == NodeCategory.CONTAINER:
            for index, child in enumerate(node.child_nodes()):
                child_position = Position(
                    x=position.x + index * layout.spacing_x,
                    y=position.y + layout.spacing_y,
                )
                visit(child, node_id, child_position)
        elif category == NodeCategory.GATING:
            for child in node.child_nodes():
                visit(child, node_id, Position(x=position.x, y=position.y + layout.requirement_offset_y))

    visit(tree, None, Position(x=layout.root_x, y=layout.root_y))
    logger.debug(f"Materialized tree into {len(nodes)} nodes and {len(edges)} edges")
    return Graph(nodes=nodes, edges=edges)


def strip_editor_fields(data: Mapping[str, Any]) -> dict:
    """Copy of node data without editor-only keys or stale child mirrors."""
    return {
        key: copy.deepcopy(value)
        for key, value in data.items()
        if key not in EDITOR_KEYS and key not in STRUCTURAL_KEYS
    }


def select_root(graph: Graph) -> FlowNode | None:
    """
    Pick the root of a graph.

    The root is a node that is never an edge target. When edits leave more
    than one such node, the earliest created wins.
    """
    candidates = graph.root_candidates()
    if not candidates:
        return None
    if len(candidates) > 1:
        logger.warning(
            f"Graph has {len(candidates)} unparented nodes; using {candidates[0].id} as root"
        )
    return candidates[0]


def tree_children(graph: Graph, node: FlowNode) -> list[FlowNode]:
    """
    Children of a node as export sees them.

    Containers take every child in x order, a Requirement takes the target
    of its first outgoing edge, and leaves take none.
    """
    category = category_of(node.data.get("type", node.type))
    if category == NodeCategory.CONTAINER:
        return graph.children_of(node.id)
    if category == NodeCategory.GATING:
        index = graph.node_index()
        for edge in graph.outgoing(node.id):
            if edge.target in index:
                return [index[edge.target]]
    return []


def reconstruct_dict(graph: Graph) -> dict | None:
    """
    Convert a graph to the persisted tree dictionary.

    Returns:
        Root node dict, or None for an empty graph or one with no root
    """
    if graph.is_empty:
        return None

    root = select_root(graph)
    if root is None:
        logger.warning("Graph has no root node (every node has a parent)")
        return None

    visited: set[str] = set()

    def build(node: FlowNode) -> dict:
        visited.add(node.id)
        data = strip_editor_fields(node.data)
        data.setdefault("type", node.type)

        # A cycle made with connect() must not recurse forever
        children = [build(c) for c in tree_children(graph, node) if c.id not in visited]
        category = category_of(data["type"])
        if category == NodeCategory.CONTAINER:
            data["children"] = children
        elif category == NodeCategory.GATING and children:
            data["child"] = children[0]
        return data

    return build(root)


def reconstruct(graph: Graph) -> ActionNode | None:
    """
    Convert a graph to an execution tree.

    Nodes not reachable from the root are ignored.

    Returns:
        Root ActionNode, or None for an empty graph or one with no root
    """
    data = reconstruct_dict(graph)
    if data is None:
        return None
    return ActionNode.from_dict(data)


def reachable_ids(graph: Graph) -> set[str]:
    """Ids of nodes export keeps: the root and the children it takes, recursively."""
    root = select_root(graph)
    if root is None:
        return set()
    seen = {root.id}
    stack = [root]
    while stack:
        current = stack.pop()
        for child in tree_children(graph, current):
            if child.id not in seen:
                seen.add(child.id)
                stack.append(child)
    return seen


def node_type_of(node: FlowNode) -> ActionNodeType:
    """ActionNodeType of a flow node."""
    return ActionNodeType.from_string(node.type)
