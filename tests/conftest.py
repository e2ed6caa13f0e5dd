"""Pytest configuration and fixtures."""

from pathlib import Path
from textwrap import dedent

import pytest


@pytest.fixture
def make_project(tmp_path):
    """Write ``{relative_path: source}`` into a fresh directory and return it."""

    def _make(files: dict[str, str], root: Path | None = None) -> Path:
        base = root or tmp_path / "project"
        for rel, content in files.items():
            path = base / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dedent(content), encoding="utf-8")
        base.mkdir(parents=True, exist_ok=True)
        return base

    return _make
