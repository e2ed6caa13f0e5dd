"""JSON export of a dependency tree."""

from __future__ import annotations

import json

from codetree.model import DependencyTree


def tree_to_dict(tree: DependencyTree) -> dict:
    d: dict = {
        "type": tree.node_type.value,
        "name": tree.name,
        "path": tree.full_path,
    }
    if tree.line > 0:
        d["line"] = tree.line
    if tree.is_cyclic:
        d["cyclic"] = True
    if tree.functions:
        d["functions"] = [
            {"name": f.name, "line": f.line} if f.line > 0 else {"name": f.name}
            for f in tree.functions
        ]
    if tree.children:
        d["children"] = [tree_to_dict(child) for child in tree.children]
    return d


def render_json(tree: DependencyTree, indent: int | None = 2) -> str:
    return json.dumps(tree_to_dict(tree), indent=indent) + "\n"
