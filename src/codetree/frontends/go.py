"""Go front-end (the lexical fallback for the tree-sitter analyzer)."""

from __future__ import annotations

import re
from pathlib import Path

from codetree.frontends._common import (
    GO_TOKENS,
    BraceFrontEnd,
    read_text,
    tree_files,
)

GO_BUILTINS = frozenset(
    {
        "make", "new", "len", "cap", "append", "copy", "delete", "panic",
        "recover", "close", "print", "println", "complex", "real", "imag",
        "min", "max", "clear",
    }
)
GO_KEYWORDS = frozenset({"if", "for", "switch", "select", "func", "return", "go", "defer", "range"})

# Top-level packages of the standard library; imports without a dot in the
# first segment are treated as standard library too.
GO_STDLIB = frozenset(
    {
        "archive", "bufio", "bytes", "cmp", "compress", "container", "context",
        "crypto", "database", "debug", "embed", "encoding", "errors", "expvar",
        "flag", "fmt", "go", "hash", "html", "image", "index", "io", "iter",
        "log", "maps", "math", "mime", "net", "os", "path", "plugin", "reflect",
        "regexp", "runtime", "slices", "sort", "strconv", "strings", "sync",
        "syscall", "testing", "text", "time", "unicode", "unique", "unsafe",
    }
)

_SINGLE_IMPORT = re.compile(r'\bimport\s+(?:[\w.]+\s+)?"([^"]+)"')
_BLOCK_IMPORT = re.compile(r"\bimport\s*\(([^)]*)\)")
_QUOTED = re.compile(r'"([^"]+)"')
_HEADER = re.compile(
    r"\bfunc\s+(?:\([^()]*\)\s*)?(?P<name>[A-Za-z_]\w*)\s*(?:\[[^\]]*\])?\s*"
    r"\([^()]*(?:\([^()]*\)[^()]*)*\)[^{\n]*\{"
)
_MODULE_RE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)


def is_standard_library(import_path: str) -> bool:
    first = import_path.split("/")[0]
    return first in GO_STDLIB or "." not in first


def go_module_root(base_path: Path) -> tuple[Path, str] | None:
    """The directory holding ``go.mod`` and its module path, if any."""
    for candidate in tree_files(str(base_path)):
        path = Path(candidate)
        if path.name != "go.mod":
            continue
        text = read_text(path)
        m = _MODULE_RE.search(text or "")
        if m:
            return path.parent, m.group(1)
    return None


def first_go_file(directory: Path) -> Path | None:
    """First non-test ``.go`` file in *directory* (a test file if that is all)."""
    if not directory.is_dir():
        return None
    files = sorted(p for p in directory.iterdir() if p.suffix == ".go" and p.is_file())
    for path in files:
        if not path.name.endswith("_test.go"):
            return path
    return files[0] if files else None


class GoFrontEnd(BraceFrontEnd):
    language = "go"
    extensions = (".go",)
    tokens = GO_TOKENS
    header_patterns = (_HEADER,)
    ignored_names = frozenset()
    ignored_calls = GO_KEYWORDS | GO_BUILTINS
    line_patterns = (r"\bfunc\s+(?:\([^)]*\)\s*)?{name}\s*[\[(]",)

    def extract_imports(self, content: str) -> list[str]:
        masked = self.mask(content, keep_strings=True)
        found: list[tuple[int, str]] = []
        for m in _SINGLE_IMPORT.finditer(masked):
            found.append((m.start(), m.group(1)))
        for block in _BLOCK_IMPORT.finditer(masked):
            for m in _QUOTED.finditer(block.group(1)):
                found.append((block.start(1) + m.start(), m.group(1)))
        return [name for _, name in sorted(found)]

    def resolve_import_path(
        self, import_name: str, current_file: Path, base_path: Path
    ) -> Path | None:
        if import_name.startswith("."):
            return first_go_file(Path(current_file).parent / import_name)

        module = go_module_root(base_path)
        if module is not None:
            root, module_path = module
            if import_name == module_path:
                return first_go_file(root)
            if import_name.startswith(module_path + "/"):
                return first_go_file(root / import_name[len(module_path) + 1 :])

        if is_standard_library(import_name):
            return None

        last = import_name.rstrip("/").split("/")[-1]
        for candidate in tree_files(str(base_path)):
            path = Path(candidate)
            if path.suffix == ".go" and path.parent.name == last:
                return first_go_file(path.parent)
        return None
