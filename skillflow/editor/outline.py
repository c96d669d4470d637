"""Plain-text summaries of nodes and trees for the CLI and TUI."""

from typing import Any, Mapping

from skillflow.schema import ActionNode


def node_summary(fields: Mapping[str, Any]) -> str:
    """
    One-line description of a node's fields.

    Example: "Delay 'Wind up' (1.0s)"
    """
    node_type = fields.get("type", "?")
    name = fields.get("name", "")
    label = f"{node_type} '{name}'" if name else str(node_type)

    detail = ""
    if "loop" in fields and fields.get("loop", 1) != 1:
        detail = f"x{fields['loop']}"
    elif "delay" in fields:
        detail = f"{fields['delay']}s"
    elif "duration" in fields:
        detail = f"{fields['duration']}s"
    elif "sound" in fields:
        detail = fields["sound"].get("key") or "no sound"
    elif "hit_effect" in fields:
        effect = fields["hit_effect"]
        detail = f"{effect.get('hit_type', '?')} -> {effect.get('target', '?')}"
    elif "status_effect" in fields:
        detail = fields["status_effect"].get("status", {}).get("key") or "no status"
    elif "summon_entity" in fields:
        detail = fields["summon_entity"].get("key") or "no entity"
    elif "projectile" in fields:
        detail = fields["projectile"].get("key") or "no model"
    elif "requirements" in fields:
        evaluation = fields["requirements"]
        count = len(evaluation.get("requirements", []))
        detail = f"{evaluation.get('operator', 'All')} of {count}"

    return f"{label} ({detail})" if detail else label


def format_outline(tree: ActionNode | None, indent: str = "  ") -> str:
    """Indented outline of a tree, one node per line."""
    if tree is None:
        return "(empty)"

    lines: list[str] = []

    def walk(node: ActionNode, depth: int) -> None:
        lines.append(f"{indent * depth}{node_summary(node.fields())}")
        for child in node.child_nodes():
            walk(child, depth + 1)

    walk(tree, 0)
    return "\n".join(lines)
