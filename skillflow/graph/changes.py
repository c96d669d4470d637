"""
Batch change intents reported by a graph-rendering surface.

A canvas reports node drags, deletions and additions as lists of changes.
These are applied in order through the lifecycle operations, so the
Requirement rule also holds for batched edge additions.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from . import lifecycle
from .models import FlowEdge, FlowNode, Graph, Position

logger = logging.getLogger(__name__)


class ChangeKind(Enum):
    POSITION = "position"
    REMOVE = "remove"
    ADD = "add"


@dataclass(frozen=True)
class NodeChange:
    """One node change: a move, a removal or an addition."""

    kind: ChangeKind
    id: str
    position: Position | None = None
    node: FlowNode | None = None

    @classmethod
    def moved(cls, node_id: str, x: float, y: float) -> "NodeChange":
        return cls(ChangeKind.POSITION, node_id, position=Position(x, y))

    @classmethod
    def removed(cls, node_id: str) -> "NodeChange":
        return cls(ChangeKind.REMOVE, node_id)

    @classmethod
    def added(cls, node: FlowNode) -> "NodeChange":
        return cls(ChangeKind.ADD, node.id, node=node)


@dataclass(frozen=True)
class EdgeChange:
    """One edge change: an addition or a removal."""

    kind: ChangeKind
    id: str
    edge: FlowEdge | None = None

    @classmethod
    def added(cls, source: str, target: str) -> "EdgeChange":
        edge = FlowEdge.between(source, target)
        return cls(ChangeKind.ADD, edge.id, edge=edge)

    @classmethod
    def removed(cls, edge_id: str) -> "EdgeChange":
        return cls(ChangeKind.REMOVE, edge_id)


def apply_node_changes(graph: Graph, changes: Iterable[NodeChange]) -> Graph:
    """Apply node changes in order."""
    for change in changes:
        if change.kind == ChangeKind.POSITION and change.position is not None:
            graph = lifecycle.move_node(graph, change.id, change.position.x, change.position.y)
        elif change.kind == ChangeKind.REMOVE:
            graph = lifecycle.remove_node(graph, change.id)
        elif change.kind == ChangeKind.ADD and change.node is not None:
            if graph.has_node(change.node.id):
                logger.warning(f"Node {change.node.id} already exists; add ignored")
                continue
            graph = Graph(nodes=graph.nodes + (change.node,), edges=graph.edges)
        else:
            logger.warning(f"Ignoring malformed node change: {change}")
    return graph


def apply_edge_changes(graph: Graph, changes: Iterable[EdgeChange]) -> Graph:
    """Apply edge changes in order."""
    for change in changes:
        if change.kind == ChangeKind.REMOVE:
            graph = Graph(
                nodes=graph.nodes,
                edges=tuple(e for e in graph.edges if e.id != change.id),
            )
        elif change.kind == ChangeKind.ADD and change.edge is not None:
            graph = lifecycle.connect(graph, change.edge.source, change.edge.target)
        else:
            logger.warning(f"Ignoring malformed edge change: {change}")
    return graph
