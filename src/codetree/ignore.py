"""Gitignore-style exclusion rules.

Each non-comment line of an ignore file is compiled into one
:class:`GitIgnoreRule`.  Rules are evaluated in file order and the last rule
that matches a path decides whether it is ignored, so a later ``!pattern``
re-includes something an earlier pattern excluded.

Translation of a glob into a regular expression:

* ``/pattern`` is anchored to the scan root, anything else may start at any
  path segment;
* ``**/`` spans any number of whole segments, a bare ``**`` matches anything;
* ``*`` and ``?`` never cross a ``/``;
* ``[...]`` classes are copied through (``[!...]`` becomes ``[^...]``);
* a ``[`` without a closing ``]`` is matched literally.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".gitignore"


@dataclass(frozen=True)
class GitIgnoreRule:
    """A compiled ignore pattern."""

    pattern: str
    regex: re.Pattern[str]
    negated: bool = False
    directory_only: bool = False

    def matches(self, relative_path: str) -> bool:
        return self.regex.search(normalize_relative(relative_path)) is not None


def normalize_relative(relative_path: str) -> str:
    """Forward slashes, no leading ``./`` or ``/``."""
    path = relative_path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def _translate(glob: str) -> str:
    parts: list[str] = []
    i, n = 0, len(glob)
    while i < n:
        c = glob[i]
        if c == "*":
            if glob.startswith("**/", i):
                parts.append("(?:.*/)?")
                i += 3
            elif glob.startswith("**", i):
                parts.append(".*")
                i += 2
            else:
                parts.append("[^/]*")
                i += 1
        elif c == "?":
            parts.append("[^/]")
            i += 1
        elif c == "[":
            end = glob.find("]", i + 2 if glob.startswith("[!", i) else i + 1)
            if end == -1:
                parts.append(re.escape(c))
                i += 1
                continue
            body = glob[i + 1 : end]
            if body.startswith("!"):
                body = "^" + body[1:]
            parts.append(f"[{body}]")
            i = end + 1
        else:
            parts.append(re.escape(c))
            i += 1
    return "".join(parts)


def compile_pattern(glob: str) -> re.Pattern[str]:
    """Compile one glob (without ``!`` or trailing ``/``) into a regex."""
    anchored = glob.startswith("/")
    body = glob.lstrip("/") if anchored else glob
    translated = _translate(body)
    if anchored:
        source = f"^{translated}$"
    else:
        source = f"(^|/){translated}($|/)"
    try:
        return re.compile(source)
    except re.error:
        logger.debug("Ignore pattern %r is not a valid class; matching literally", glob)
        literal = re.escape(body)
        return re.compile(f"^{literal}$" if anchored else f"(^|/){literal}($|/)")


def compile_rules(lines: Iterable[str]) -> list[GitIgnoreRule]:
    """Compile ignore-file lines, skipping blanks and ``#`` comments."""
    rules: list[GitIgnoreRule] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        glob = line
        negated = glob.startswith("!")
        if negated:
            glob = glob[1:]
        directory_only = glob.endswith("/")
        if directory_only:
            glob = glob.rstrip("/")
        if not glob:
            continue

        rules.append(
            GitIgnoreRule(
                pattern=line,
                regex=compile_pattern(glob),
                negated=negated,
                directory_only=directory_only,
            )
        )
    return rules


def _last_match_ignores(path: str, rules: list[GitIgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(path):
            ignored = not rule.negated
    return ignored


def is_ignored(relative_path: str, rules: Iterable[GitIgnoreRule]) -> bool:
    """Return True if *relative_path* or one of its parent directories is ignored.

    Each directory prefix is judged on its own, as the scan prunes it, and
    the last rule matching the path itself decides the rest.
    """
    rules = list(rules)
    path = normalize_relative(relative_path)
    parts = path.split("/")
    for depth in range(1, len(parts)):
        if _last_match_ignores("/".join(parts[:depth]), rules):
            return True
    return _last_match_ignores(path, rules)


def read_ignore_file(root: Path) -> list[str]:
    """Return the raw lines of ``<root>/.gitignore`` (empty when absent)."""
    path = root / IGNORE_FILE_NAME
    if not path.is_file():
        return []
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return []
