"""Shared lexical machinery for the language front-ends."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from codetree.model import ParsedFunction

logger = logging.getLogger(__name__)

# Keywords that look like calls when followed by a parenthesis.
CONTROL_KEYWORDS = frozenset({"if", "for", "while", "switch", "catch"})

# Directories never searched when resolving imports by file name.
_TREE_SKIP = {"node_modules", "__pycache__", "vendor", "dist", "build", "target"}

_BLANK = re.compile(r"[^\n]")
_BRACE = re.compile(r"[{}]")


def token_pattern(
    *,
    line_comment: str = "//",
    block_comments: bool = True,
    quotes: str = "\"'",
    backtick: bool = False,
    triple_quotes: bool = False,
) -> re.Pattern[str]:
    """Build a regex matching the comments and string literals of a language."""
    alternatives = [re.escape(line_comment) + r"[^\n]*"]
    if block_comments:
        alternatives.append(r"/\*.*?\*/")
    if triple_quotes:
        alternatives.append(r'""".*?"""')
        alternatives.append(r"'''.*?'''")
    for q in quotes:
        alternatives.append(f"{q}(?:\\\\.|[^{q}\\\\\\n])*{q}")
    if backtick:
        alternatives.append(r"`[^`]*`")
    return re.compile("|".join(alternatives), re.DOTALL)


C_TOKENS = token_pattern(backtick=False)
JS_TOKENS = token_pattern(backtick=True)
GO_TOKENS = token_pattern(quotes='"\'', backtick=True)
PY_TOKENS = token_pattern(line_comment="#", block_comments=False, triple_quotes=True)
GENERIC_TOKENS = token_pattern(quotes='"')


def mask_source(
    text: str, tokens: re.Pattern[str], *, comment_prefixes: tuple[str, ...], keep_strings: bool = False
) -> str:
    """Blank out comments (and, unless *keep_strings*, string literals).

    The result has the same length and line structure as *text*, so offsets
    and line numbers computed on it apply to the original.
    """

    def _replace(m: re.Match[str]) -> str:
        token = m.group(0)
        if keep_strings and not token.startswith(comment_prefixes):
            return token
        return _BLANK.sub(" ", token)

    return tokens.sub(_replace, text)


def find_closing_brace(text: str, open_pos: int) -> int:
    """Index of the ``}`` matching the ``{`` at *open_pos*, or -1."""
    depth = 0
    for m in _BRACE.finditer(text, open_pos):
        if m.group(0) == "{":
            depth += 1
        else:
            depth -= 1
            if depth == 0:
                return m.start()
    return -1


def line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def unique(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(items))


def scan_lines(content: str, patterns: Iterable[str], function_name: str) -> int:
    """Return the first 1-based line matching any *patterns* for *function_name*.

    Each pattern carries a ``{name}`` placeholder for the escaped name.
    """
    if not function_name:
        return 0
    name = re.escape(function_name)
    compiled = [re.compile(p.replace("{name}", name)) for p in patterns]
    for lineno, line in enumerate(content.split("\n"), start=1):
        if any(rx.search(line) for rx in compiled):
            return lineno
    return 0


@lru_cache(maxsize=32)
def tree_files(base_path: str) -> tuple[str, ...]:
    """All files below *base_path* (hidden and vendor directories skipped)."""
    found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(base_path):
        dirnames[:] = sorted(
            d for d in dirnames if not d.startswith(".") and d not in _TREE_SKIP
        )
        for name in sorted(filenames):
            found.append(os.path.join(dirpath, name))
    return tuple(found)


def files_named(base_path: Path, filename: str) -> list[Path]:
    """Files below *base_path* whose basename is *filename*."""
    return [Path(f) for f in tree_files(str(base_path)) if os.path.basename(f) == filename]


def read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Could not read %s: %s", path, e)
        return None


# A name, a one-level-nested parameter list, an optional trailer
# (return type, throws clause, qualifiers) and the opening brace.
_PARAMS = r"\((?P<params>[^(){};]*(?:\([^(){};]*\)[^(){};]*)*)\)"
GENERIC_HEADER = re.compile(
    r"(?<![\w$.])(?P<name>[A-Za-z_$][\w$]*)\s*" + _PARAMS + r"(?P<trailer>[^;{}()=]*)\{"
)
CALL_RE = re.compile(
    r"(?P<decl>\b(?:function|func|def|fn|fun)\s+)?(?<![\w$])(?P<name>[A-Za-z_$][\w$]*)\s*\("
)


class BraceFrontEnd:
    """Base for front-ends of brace-delimited languages.

    Subclasses tune the class attributes; the extraction engine is shared.
    """

    language = "generic"
    extensions: tuple[str, ...] = ()
    tokens: re.Pattern[str] = C_TOKENS
    comment_prefixes: tuple[str, ...] = ("//", "/*")
    header_patterns: tuple[re.Pattern[str], ...] = (GENERIC_HEADER,)
    ignored_names: frozenset[str] = CONTROL_KEYWORDS
    ignored_calls: frozenset[str] = CONTROL_KEYWORDS
    line_patterns: tuple[str, ...] = (r"(?<![\w$.]){name}\s*\([^;]*$",)

    def mask(self, content: str, *, keep_strings: bool = False) -> str:
        return mask_source(
            content, self.tokens, comment_prefixes=self.comment_prefixes, keep_strings=keep_strings
        )

    def extract_imports(self, content: str) -> list[str]:
        return []

    def resolve_import_path(
        self, import_name: str, current_file: Path, base_path: Path
    ) -> Path | None:
        return None

    def function_name(self, match: re.Match[str]) -> str:
        return match.group("name")

    def extract_functions(self, content: str) -> list[ParsedFunction]:
        masked = self.mask(content)

        candidates: list[tuple[int, int, int, str]] = []
        for pattern in self.header_patterns:
            for m in pattern.finditer(masked):
                candidates.append((m.start(), m.end() - 1, m.start("name"), self.function_name(m)))
        candidates.sort()

        functions: list[ParsedFunction] = []
        claimed_end = -1
        for start, brace, name_pos, name in candidates:
            if start <= claimed_end or brace <= claimed_end:
                continue
            if not name or name in self.ignored_names:
                continue
            close = find_closing_brace(masked, brace)
            if close == -1:
                continue
            functions.append(
                ParsedFunction(name=name, body=content[brace + 1 : close], line=line_of(masked, name_pos))
            )
            claimed_end = close
        return functions

    def extract_function_calls(self, body: str) -> list[str]:
        masked = self.mask(body)
        calls = []
        for m in CALL_RE.finditer(masked):
            if m.group("decl"):
                continue
            name = m.group("name")
            if name in self.ignored_calls:
                continue
            calls.append(name)
        return unique(calls)

    def get_function_line_number(self, content: str, function_name: str) -> int:
        return scan_lines(self.mask(content), self.line_patterns, function_name)
