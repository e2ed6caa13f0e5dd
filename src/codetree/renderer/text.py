"""Indented box-drawing rendering of a dependency tree."""

from __future__ import annotations

from codetree.model import DependencyNodeType, DependencyTree

_TAGS = {
    DependencyNodeType.FILE: "[File]",
    DependencyNodeType.FUNCTION: "[Function]",
}


def _line_suffix(line: int) -> str:
    return f" (line {line})" if line > 0 else ""


def render_text(tree: DependencyTree) -> str:
    lines: list[str] = []
    _render(tree, lines, "", True)
    return "\n".join(lines) + "\n"


def _render(node: DependencyTree, lines: list[str], indent: str, is_last: bool) -> None:
    marker = "└── " if is_last else "├── "
    cyclic = " (cyclic)" if node.is_cyclic else ""
    lines.append(f"{indent}{marker}{_TAGS[node.node_type]} {node.name}{_line_suffix(node.line)}{cyclic}")

    child_indent = indent + ("    " if is_last else "│   ")

    if node.node_type is DependencyNodeType.FILE and node.functions and not node.is_cyclic:
        lines.append(f"{child_indent}├── [Functions]")
        functions_indent = child_indent + "│   "
        for i, function in enumerate(node.functions):
            fn_marker = "└── " if i == len(node.functions) - 1 else "├── "
            lines.append(f"{functions_indent}{fn_marker}{function.name}{_line_suffix(function.line)}")

    if not node.is_cyclic:
        for i, child in enumerate(node.children):
            _render(child, lines, child_indent, i == len(node.children) - 1)
