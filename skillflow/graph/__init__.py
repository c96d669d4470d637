"""Editor graph: flow nodes/edges, tree conversion and lifecycle operations."""

from .changes import (
    ChangeKind,
    EdgeChange,
    NodeChange,
    apply_edge_changes,
    apply_node_changes,
)
from .converter import (
    materialize,
    reachable_ids,
    reconstruct,
    reconstruct_dict,
    select_root,
    strip_editor_fields,
    tree_children,
)
from .lifecycle import (
    ReorderDirection,
    add_node,
    connect,
    move_node,
    prune_unreachable,
    remove_node,
    reorder_node,
    update_node,
)
from .models import (
    FlowEdge,
    FlowNode,
    Graph,
    Position,
    edge_id,
    generate_id,
    make_id_factory,
)
from .validation import GraphValidationResult, validate_graph

__all__ = [
    # Models
    "FlowEdge",
    "FlowNode",
    "Graph",
    "Position",
    "edge_id",
    "generate_id",
    "make_id_factory",
    # Converter
    "materialize",
    "reachable_ids",
    "reconstruct",
    "reconstruct_dict",
    "select_root",
    "strip_editor_fields",
    "tree_children",
    # Lifecycle
    "ReorderDirection",
    "add_node",
    "connect",
    "move_node",
    "prune_unreachable",
    "remove_node",
    "reorder_node",
    "update_node",
    # Changes
    "ChangeKind",
    "EdgeChange",
    "NodeChange",
    "apply_edge_changes",
    "apply_node_changes",
    # Validation
    "GraphValidationResult",
    "validate_graph",
]
