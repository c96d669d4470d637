"""
Node lifecycle operations on the editor graph.

Each operation takes a Graph and returns the resulting Graph. When an
operation does not apply (unknown id, boundary reorder, rejected
connection) the input graph object is returned unchanged, so callers can
detect a no-op with ``is``.

Children are never mirrored into a parent's data; they are always read
from the edges.
"""

import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Mapping

from skillflow.config import LayoutConfig
from skillflow.schema import DEFAULT_OWNER, STRUCTURAL_KEYS, ActionNodeType, default_fields, is_gating

from .converter import reachable_ids
from .models import FlowEdge, FlowNode, Graph, IdFactory, Position, generate_id

logger = logging.getLogger(__name__)

# Fields update_node never touches: identity, structure, placement
PROTECTED_KEYS = frozenset({"type", "id", "position"}) | STRUCTURAL_KEYS


class ReorderDirection(Enum):
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def from_string(cls, value: "str | ReorderDirection") -> "ReorderDirection":
        if isinstance(value, cls):
            return value
        return cls(value.lower())


def _replace_node(graph: Graph, updated: FlowNode) -> Graph:
    return replace(
        graph,
        nodes=tuple(updated if n.id == updated.id else n for n in graph.nodes),
    )


def _new_node_position(graph: Graph, parent_id: str | None, layout: LayoutConfig) -> Position:
    parent = graph.get_node(parent_id) if parent_id else None
    if parent is None:
        return Position(layout.orphan_x, layout.orphan_y)

    children = graph.children_of(parent.id)
    if children:
        rightmost = children[-1]
        return Position(
            rightmost.position.x + layout.sibling_offset_x,
            rightmost.position.y + layout.sibling_offset_y,
        )
    return Position(
        parent.position.x + layout.first_child_offset_x,
        parent.position.y + layout.first_child_offset_y,
    )


def _requirement_is_full(graph: Graph, node: FlowNode) -> bool:
    return is_gating(node.type) and len(graph.outgoing(node.id)) >= 1


def add_node(
    graph: Graph,
    node_type: "ActionNodeType | str",
    parent_id: str | None = None,
    layout: LayoutConfig | None = None,
    id_factory: IdFactory | None = None,
    owner: str = DEFAULT_OWNER,
    name: str | None = None,
) -> tuple[Graph, str | None]:
    """
    Create a node with default fields, optionally as a child of ``parent_id``.

    The new node goes right of the parent's current rightmost child, or
    below the parent when it has none, so it becomes the last child.

    Args:
        graph: Current graph
        node_type: Variant to create
        parent_id: Parent node id (None for a free-standing node)
        layout: Placement offsets
        id_factory: Callable producing a fresh id
        owner: Owner for empty entity references in the payload
        name: Display name (defaults to "New <Type>")

    Returns:
        (new graph, new node id). The id is None when the parent is a
        Requirement that already has its child; the graph is then unchanged.
    """
    layout = layout or LayoutConfig()
    node_type = ActionNodeType.from_string(node_type)

    parent = graph.get_node(parent_id) if parent_id else None
    if parent_id and parent is None:
        logger.warning(f"Parent {parent_id} not found; adding {node_type.value} unconnected")
    if parent is not None and _requirement_is_full(graph, parent):
        logger.warning(f"Requirement {parent.id} already has a child; {node_type.value} not added")
        return graph, None

    new_id = (id_factory or generate_id)()
    node = FlowNode(
        id=new_id,
        type=node_type.value,
        position=_new_node_position(graph, parent_id, layout),
        data=default_fields(node_type, owner=owner, name=name),
    )

    edges = graph.edges
    if parent is not None:
        edges = edges + (FlowEdge.between(parent.id, new_id),)

    logger.debug(f"Added {node_type.value} node {new_id} (parent={parent_id})")
    return Graph(nodes=graph.nodes + (node,), edges=edges), new_id


def update_node(graph: Graph, node_id: str, partial: Mapping[str, Any]) -> Graph:
    """
    Shallow-merge fields into a node's data.

    Type, structure and position are left alone.
    """
    node = graph.get_node(node_id)
    if node is None:
        logger.warning(f"update_node: node {node_id} not found")
        return graph

    ignored = PROTECTED_KEYS.intersection(partial)
    if ignored:
        logger.debug(f"update_node: ignoring protected keys {sorted(ignored)}")

    data = dict(node.data)
    data.update({k: v for k, v in partial.items() if k not in PROTECTED_KEYS})
    return _replace_node(graph, replace(node, data=data))


def remove_node(graph: Graph, node_id: str) -> Graph:
    """
    Delete a node and every edge touching it.

    Descendants are kept; they become detached and reconstruct() skips them.
    """
    if not graph.has_node(node_id):
        return graph

    return Graph(
        nodes=tuple(n for n in graph.nodes if n.id != node_id),
        edges=tuple(e for e in graph.edges if e.source != node_id and e.target != node_id),
    )


def prune_unreachable(graph: Graph) -> Graph:
    """Drop nodes (and their edges) that cannot be reached from the root."""
    keep = reachable_ids(graph)
    # No root means nothing is reachable; leave the graph for the author to fix
    if not keep or len(keep) == len(graph.nodes):
        return graph

    dropped = len(graph.nodes) - len(keep)
    logger.info(f"Pruned {dropped} unreachable node(s)")
    return Graph(
        nodes=tuple(n for n in graph.nodes if n.id in keep),
        edges=tuple(e for e in graph.edges if e.source in keep and e.target in keep),
    )


def reorder_node(graph: Graph, node_id: str, direction: "ReorderDirection | str") -> Graph:
    """
    Move a node one place left or right among its siblings.

    Swaps position.x with the neighbouring sibling; nothing else changes.
    Roots, nodes already at the edge in that direction and neighbours at
    the same x are no-ops.
    """
    direction = ReorderDirection.from_string(direction)
    node = graph.get_node(node_id)
    if node is None:
        return graph

    parent_id = graph.parent_of(node_id)
    if parent_id is None:
        return graph

    siblings = graph.children_of(parent_id)
    rank = next(i for i, sibling in enumerate(siblings) if sibling.id == node_id)
    target_rank = rank - 1 if direction == ReorderDirection.LEFT else rank + 1
    if target_rank < 0 or target_rank >= len(siblings):
        return graph

    other = siblings[target_rank]
    # Equal x: swapping changes nothing, order stays by creation
    if other.position.x == node.position.x:
        return graph

    moved = replace(node, position=replace(node.position, x=other.position.x))
    swapped = replace(other, position=replace(other.position, x=node.position.x))
    return _replace_node(_replace_node(graph, moved), swapped)


def connect(graph: Graph, source_id: str, target_id: str) -> Graph:
    """
    Add a parent to child edge.

    A Requirement that already has an outgoing edge rejects the connection.
    Duplicate edges and edges to unknown nodes are not added.
    """
    source = graph.get_node(source_id)
    if source is None or not graph.has_node(target_id):
        logger.warning(f"connect: unknown endpoint {source_id} -> {target_id}")
        return graph

    if _requirement_is_full(graph, source):
        logger.warning("Requirement nodes can only have one child connection")
        return graph

    if graph.has_edge(source_id, target_id):
        return graph

    return replace(graph, edges=graph.edges + (FlowEdge.between(source_id, target_id),))


def move_node(graph: Graph, node_id: str, x: float, y: float) -> Graph:
    """Set a node's position. Moving horizontally can change sibling order."""
    node = graph.get_node(node_id)
    if node is None:
        return graph
    return _replace_node(graph, replace(node, position=Position(x, y)))
