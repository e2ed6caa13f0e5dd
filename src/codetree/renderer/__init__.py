"""Text, DOT and JSON renderings of a dependency tree."""

from __future__ import annotations

from codetree.renderer.dot import render_dot
from codetree.renderer.json_export import render_json, tree_to_dict
from codetree.renderer.text import render_text

__all__ = ["render_dot", "render_json", "render_text", "tree_to_dict"]

RENDERERS = {
    "text": render_text,
    "dot": render_dot,
    "json": render_json,
}
