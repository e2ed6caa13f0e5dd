"""Source file discovery."""

from __future__ import annotations

import logging
import os
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from pathlib import Path

from codetree.ignore import GitIgnoreRule, is_ignored

logger = logging.getLogger(__name__)

# Never descended into, whatever the ignore rules say.
_ALWAYS_SKIP = {".git", ".hg", ".svn"}


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Absolute, symlink-free, OS-normalised spelling of *path*."""
    return os.path.normcase(os.path.realpath(os.fspath(path)))


def relative_posix(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """*path* relative to *root* with ``/`` separators (unchanged if outside root)."""
    try:
        rel = os.path.relpath(os.fspath(path), os.fspath(root))
    except ValueError:
        return Path(path).as_posix()
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        return Path(path).as_posix()
    return Path(rel).as_posix()


@dataclass(frozen=True)
class SourceFile:
    """A discovered source file; content is read on demand and not kept."""

    path: str
    extension: str

    def read_text(self) -> str:
        return Path(self.path).read_text(encoding="utf-8")


def iter_source_files(
    root: Path,
    rules: Iterable[GitIgnoreRule],
    extensions: Collection[str],
) -> list[SourceFile]:
    """Return every non-ignored file under *root* with a registered extension."""
    rules = list(rules)
    root_str = normalize_path(root)
    found: list[SourceFile] = []
    skipped = 0

    for dirpath, dirnames, filenames in os.walk(root_str):
        rel_dir = relative_posix(dirpath, root_str)
        rel_dir = "" if rel_dir == "." else rel_dir

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _ALWAYS_SKIP:
                continue
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if rules and is_ignored(rel, rules):
                skipped += 1
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for name in filenames:
            ext = os.path.splitext(name)[1].lower()
            if ext not in extensions:
                continue
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if rules and is_ignored(rel, rules):
                skipped += 1
                continue
            found.append(SourceFile(normalize_path(os.path.join(dirpath, name)), ext))

    found.sort(key=lambda f: f.path)
    logger.debug("Scan of %s: %d source files, %d ignored entries", root_str, len(found), skipped)
    return found
