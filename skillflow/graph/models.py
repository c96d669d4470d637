"""
Data models for the editable node graph.

A Graph is the flat form of an execution tree: one FlowNode per action
node, one FlowEdge per parent/child link ("target is a child of source").
Node list order is creation order. Sibling order is not stored; it is
read from position.x.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping

IdFactory = Callable[[], str]


def generate_id(prefix: str = "node_") -> str:
    """Create an opaque node id."""
    return f"{prefix}{uuid.uuid4().hex[:9]}"


def make_id_factory(prefix: str = "node_") -> IdFactory:
    """Id factory bound to a prefix."""
    return lambda: generate_id(prefix)


def edge_id(source: str, target: str) -> str:
    return f"e{source}-{target}"


@dataclass(frozen=True)
class Position:
    """Canvas position of a node."""

    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Position":
        return cls(x=data.get("x", 0.0), y=data.get("y", 0.0))


@dataclass(frozen=True)
class FlowNode:
    """
    A box on the canvas.

    ``data`` holds the action node's own fields (type, name, payload).
    It never contains nested children; structure lives in the edges.
    """

    id: str
    type: str
    position: Position = field(default_factory=Position)
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "position": self.position.to_dict(),
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlowNode":
        return cls(
            id=data["id"],
            type=data["type"],
            position=Position.from_dict(data.get("position", {})),
            data=dict(data.get("data", {})),
        )


@dataclass(frozen=True)
class FlowEdge:
    """Parent to child connection."""

    id: str
    source: str
    target: str

    @classmethod
    def between(cls, source: str, target: str) -> "FlowEdge":
        return cls(id=edge_id(source, target), source=source, target=target)

    def to_dict(self) -> dict:
        return {"id": self.id, "source": self.source, "target": self.target}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlowEdge":
        return cls(
            id=data.get("id") or edge_id(data["source"], data["target"]),
            source=data["source"],
            target=data["target"],
        )


@dataclass(frozen=True)
class Graph:
    """Nodes and edges of the editor canvas."""

    nodes: tuple[FlowNode, ...] = ()
    edges: tuple[FlowEdge, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers, store tuples
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[FlowNode]:
        return iter(self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def get_node(self, node_id: str) -> FlowNode | None:
        """Get a node by id."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def has_node(self, node_id: str) -> bool:
        return self.get_node(node_id) is not None

    def node_index(self) -> dict[str, FlowNode]:
        return {node.id: node for node in self.nodes}

    def outgoing(self, node_id: str) -> list[FlowEdge]:
        """Edges whose source is the node."""
        return [e for e in self.edges if e.source == node_id]

    def incoming(self, node_id: str) -> list[FlowEdge]:
        """Edges whose target is the node."""
        return [e for e in self.edges if e.target == node_id]

    def parent_of(self, node_id: str) -> str | None:
        """Id of the node's parent, or None for a root/orphan."""
        for edge in self.edges:
            if edge.target == node_id:
                return edge.source
        return None

    def children_of(self, node_id: str) -> list[FlowNode]:
        """
        Child nodes ordered by position.x.

        Ties keep creation order. Edges pointing at missing nodes are skipped.
        """
        index = self.node_index()
        order = {node.id: i for i, node in enumerate(self.nodes)}
        children = [index[e.target] for e in self.outgoing(node_id) if e.target in index]
        return sorted(children, key=lambda n: (n.position.x, order[n.id]))

    def root_candidates(self) -> list[FlowNode]:
        """Nodes with no incoming edge, in creation order."""
        targets = {e.target for e in self.edges}
        return [node for node in self.nodes if node.id not in targets]

    def has_edge(self, source: str, target: str) -> bool:
        return any(e.source == source and e.target == target for e in self.edges)

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Graph":
        return cls(
            nodes=tuple(FlowNode.from_dict(n) for n in data.get("nodes", [])),
            edges=tuple(FlowEdge.from_dict(e) for e in data.get("edges", [])),
        )
