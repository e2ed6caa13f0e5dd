"""Orchestrator: analyse -> build tree -> render -> write."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from codetree.analyzer import DependencyAnalyzer
from codetree.config import CodeTreeConfig, load_config
from codetree.model import DependencyTree, ProjectIndex
from codetree.renderer import RENDERERS, tree_to_dict

logger = logging.getLogger(__name__)


def resolve_target(project_dir: Path, target: str | os.PathLike[str]) -> Path:
    """*target* as given when it exists, else relative to *project_dir*."""
    path = Path(target)
    if path.is_absolute() or path.exists():
        return path
    candidate = project_dir / path
    if candidate.exists():
        return candidate
    logger.debug("Target %s not found under %s either", target, project_dir)
    return path


def entry_points(index: ProjectIndex) -> list[str]:
    """Files no other file imports (every file when all sit in cycles)."""
    imported = {
        dep
        for path, deps in index.file_dependencies.items()
        for dep in deps
        if dep != path
    }
    roots = [path for path in index.file_dependencies if path not in imported]
    return roots or list(index.file_dependencies)


def _render(trees: list[DependencyTree], fmt: str, single: bool) -> str:
    if fmt == "json" and not single:
        return json.dumps([tree_to_dict(t) for t in trees], indent=2) + "\n"
    render = RENDERERS[fmt]
    return "".join(render(t) for t in trees)


def run(
    project_dir: Path,
    target: str | os.PathLike[str] | None = None,
    *,
    function: str | None = None,
    fmt: str = "text",
    output: Path | None = None,
    config: CodeTreeConfig | None = None,
) -> str:
    """Render the dependency tree of *target* (or of every entry file)."""
    if fmt not in RENDERERS:
        raise ValueError(f"Unknown format {fmt!r}; expected one of {sorted(RENDERERS)}")
    project_dir = Path(project_dir)
    if config is None:
        config = load_config(project_dir)

    analyzer = DependencyAnalyzer(project_dir, config=config)

    if target is None:
        if function:
            raise ValueError("A function tree needs a target file")
        roots = entry_points(analyzer.index)
        logger.debug("Entry files: %d", len(roots))
        trees = [analyzer.analyze_file_dependency_tree(path) for path in roots]
    else:
        path = resolve_target(project_dir, target)
        if function:
            trees = [analyzer.analyze_function_dependency_tree(path, function)]
        else:
            trees = [analyzer.analyze_file_dependency_tree(path)]

    rendered = _render(trees, fmt, single=target is not None)

    if output is not None:
        Path(output).write_text(rendered, encoding="utf-8")
        logger.info("Generated %s", output)

    return rendered
