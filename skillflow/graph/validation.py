"""
Structural checks for an editor graph.

Reports whether a graph still describes a single tree. Problems that
export would silently paper over (detached nodes, extra roots, edges to
leaves) come back as warnings; problems that make the tree ambiguous come
back as errors.
"""

from dataclasses import dataclass, field

from skillflow.schema import NodeCategory, category_of

from .converter import reachable_ids, select_root
from .models import Graph


@dataclass
class GraphValidationResult:
    """Result of graph validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    root_id: str | None = None
    orphan_ids: list[str] = field(default_factory=list)


def validate_graph(graph: Graph) -> GraphValidationResult:
    """
    Check the tree invariants of a graph.

    Errors: no root, a node with several parents, a Requirement with more
    than one child, edges referencing missing nodes, cycles.
    Warnings: several unparented nodes, nodes unreachable from the root,
    leaves with outgoing edges.

    Args:
        graph: Graph to check

    Returns:
        GraphValidationResult with validation status and any errors/warnings
    """
    result = GraphValidationResult(valid=True)
    if graph.is_empty:
        return result

    index = graph.node_index()
    errors: list[str] = []
    warnings: list[str] = []

    for edge in graph.edges:
        if edge.source not in index or edge.target not in index:
            errors.append(f"Edge {edge.id} references a missing node")

    candidates = graph.root_candidates()
    root = select_root(graph)
    if root is None:
        errors.append("Graph has no root: every node has a parent")
    elif len(candidates) > 1:
        extra = ", ".join(c.id for c in candidates[1:])
        warnings.append(f"Several unparented nodes; {root.id} is the root, ignoring {extra}")
    result.root_id = root.id if root else None

    for node in graph.nodes:
        parents = graph.incoming(node.id)
        if len(parents) > 1:
            errors.append(f"Node {node.id} has {len(parents)} parents")

        children = graph.outgoing(node.id)
        category = category_of(node.type)
        if category == NodeCategory.GATING and len(children) > 1:
            errors.append(f"Requirement {node.id} has {len(children)} children")
        elif category == NodeCategory.LEAF and children:
            warnings.append(f"Leaf {node.id} ({node.type}) has outgoing edges that export ignores")

    if _has_cycle(graph):
        errors.append("Graph contains a cycle")

    if root is not None:
        reachable = reachable_ids(graph)
        result.orphan_ids = [n.id for n in graph.nodes if n.id not in reachable]
        if result.orphan_ids:
            warnings.append(f"{len(result.orphan_ids)} node(s) are not reachable from the root")

    result.valid = not errors
    result.errors = errors
    result.warnings = warnings
    return result


def _has_cycle(graph: Graph) -> bool:
    # Iterative DFS with white/grey/black colouring
    state: dict[str, int] = {}
    for start in graph.nodes:
        if state.get(start.id):
            continue
        stack = [(start.id, iter(graph.outgoing(start.id)))]
        state[start.id] = 1
        while stack:
            node_id, edges = stack[-1]
            edge = next(edges, None)
            if edge is None:
                state[node_id] = 2
                stack.pop()
                continue
            target_state = state.get(edge.target, 0)
            if target_state == 1:
                return True
            if target_state == 0:
                state[edge.target] = 1
                stack.append((edge.target, iter(graph.outgoing(edge.target))))
    return False
