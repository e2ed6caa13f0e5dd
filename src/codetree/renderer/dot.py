"""Graphviz DOT rendering of a dependency tree."""

from __future__ import annotations

from codetree.model import DependencyNodeType, DependencyTree

_FILE_COLOR = "lightblue"
_FUNCTION_COLOR = "lightgreen"
_CYCLIC_COLOR = "lightsalmon"


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def render_dot(tree: DependencyTree) -> str:
    """One DOT node per distinct ``full_path``, one edge per traversal step."""
    lines = [
        "digraph DependencyTree {",
        '  node [shape=box, style=filled, fontname="Arial"];',
        '  edge [fontname="Arial"];',
    ]
    _emit(tree, lines, {}, None)
    lines.append("}")
    return "\n".join(lines) + "\n"


def _emit(node: DependencyTree, lines: list[str], ids: dict[str, int], parent_id: str | None) -> None:
    if node.full_path not in ids:
        ids[node.full_path] = len(ids)
    node_id = f"node{ids[node.full_path]}"

    if node.is_cyclic:
        color = _CYCLIC_COLOR
    elif node.node_type is DependencyNodeType.FILE:
        color = _FILE_COLOR
    else:
        color = _FUNCTION_COLOR

    label = _escape(node.name)
    if node.line > 0:
        label += f"\\n(line {node.line})"
    if node.is_cyclic:
        label += "\\n(cyclic)"

    lines.append(f'  {node_id} [label="{label}", fillcolor="{color}"];')
    if parent_id is not None:
        lines.append(f"  {parent_id} -> {node_id};")

    if not node.is_cyclic:
        for child in node.children:
            _emit(child, lines, ids, node_id)
