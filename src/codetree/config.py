"""Project configuration from ``.codetree.toml`` or ``[tool.codetree]``."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".codetree.toml"


@dataclass
class CodeTreeConfig:
    exclude: list[str] = field(default_factory=list)
    use_gitignore: bool = True
    max_depth: int = 10
    function_max_depth: int = 10
    semantic: bool = True
    workers: int | None = None


def _valid(name: str, value) -> bool:
    if name == "exclude":
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    if name in ("use_gitignore", "semantic"):
        return isinstance(value, bool)
    if name in ("max_depth", "function_max_depth"):
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    if name == "workers":
        return value is None or (isinstance(value, int) and not isinstance(value, bool) and value > 0)
    return False


def _read_table(project_dir: Path) -> dict | None:
    # Try .codetree.toml first
    codetree_toml = project_dir / CONFIG_FILE_NAME
    if codetree_toml.exists():
        try:
            with open(codetree_toml, "rb") as f:
                data = tomllib.load(f)
            return data.get("codetree", {})
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring %s: %s", codetree_toml, e)

    # Fall back to [tool.codetree] in pyproject.toml
    pyproject = project_dir / "pyproject.toml"
    if pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                data = tomllib.load(f)
            return data.get("tool", {}).get("codetree")
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("Ignoring %s: %s", pyproject, e)

    return None


def load_config(project_dir: Path) -> CodeTreeConfig:
    """Read configuration for *project_dir*, falling back to defaults."""
    config = CodeTreeConfig()
    table = _read_table(Path(project_dir))
    if not isinstance(table, dict):
        return config

    known = {f.name for f in fields(CodeTreeConfig)}
    for key, value in table.items():
        if key not in known:
            logger.warning("Unknown codetree setting %r ignored", key)
            continue
        if not _valid(key, value):
            logger.warning("Invalid value %r for codetree setting %r; using the default", value, key)
            continue
        setattr(config, key, list(value) if key == "exclude" else value)
    return config
