"""JavaScript and TypeScript front-end."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from codetree.frontends._common import (
    CONTROL_KEYWORDS,
    GENERIC_HEADER,
    JS_TOKENS,
    BraceFrontEnd,
    read_text,
    tree_files,
)

logger = logging.getLogger(__name__)

_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")
_TS_FOR_JS = {".js": (".ts", ".tsx"), ".jsx": (".tsx",), ".mjs": (".mts",), ".cjs": (".cts",)}

_IMPORT_RE = re.compile(
    r"""\bimport\s+(?:type\s+)?[\w$*{}\s,]+?\s+from\s*(['"])(?P<from>[^'"]+)\1"""
    r"""|\bimport\s*(['"])(?P<bare>[^'"]+)\3"""
    r"""|\bexport\s+(?:type\s+)?(?:\*(?:\s+as\s+[\w$]+)?|\{[^}]*\})\s*from\s*(['"])(?P<export>[^'"]+)\5"""
    r"""|\brequire\s*\(\s*(['"])(?P<require>[^'"]+)\7\s*\)"""
    r"""|\bimport\s*\(\s*(['"])(?P<dynamic>[^'"]+)\9\s*\)"""
)

_PARAMS = r"\([^(){};]*(?:\([^(){};]*\)[^(){};]*)*\)"
_FUNCTION_DECL = re.compile(
    r"\bfunction\s*\*?\s*(?P<name>[A-Za-z_$][\w$]*)\s*(?:<[^>]*>)?\s*"
    + _PARAMS
    + r"[^;{}()=]*\{"
)
_FUNCTION_EXPR = re.compile(
    r"(?<![\w$.])(?P<name>[A-Za-z_$][\w$]*)\s*[:=]\s*(?:async\s+)?function\b\s*\*?\s*[\w$]*\s*"
    + _PARAMS
    + r"[^;{}()=]*\{"
)
_ARROW = re.compile(
    r"(?<![\w$.])(?P<name>[A-Za-z_$][\w$]*)\s*(?::\s*[^=;{}()]+)?=\s*(?:async\s*)?"
    r"(?:" + _PARAMS + r"|[A-Za-z_$][\w$]*)\s*(?::\s*[^=;{}()]+)?=>\s*\{"
)

_KEYWORDS = CONTROL_KEYWORDS | {"function", "return", "typeof", "new", "await", "super", "constructor"}


class JavaScriptFrontEnd(BraceFrontEnd):
    language = "javascript"
    extensions = _EXTENSIONS
    tokens = JS_TOKENS
    header_patterns = (_FUNCTION_DECL, _FUNCTION_EXPR, _ARROW, GENERIC_HEADER)
    ignored_names = CONTROL_KEYWORDS | {"function", "return", "typeof", "await", "super"}
    ignored_calls = _KEYWORDS | {"require", "import", "catch", "with"}
    line_patterns = (
        r"\bfunction\s*\*?\s*{name}\s*[<(]",
        r"\b(?:const|let|var)\s+{name}\s*=",
        r"(?<![\w$.]){name}\s*[:=]\s*(?:async\s+)?(?:function\b|\()",
        r"^\s*(?:(?:static|async|get|set|public|private|protected|readonly|override)\s+)*{name}\s*\([^;]*$",
    )

    def extract_imports(self, content: str) -> list[str]:
        masked = self.mask(content, keep_strings=True)
        imports = []
        for m in _IMPORT_RE.finditer(masked):
            spec = m.group("from") or m.group("bare") or m.group("export") or m.group("require") or m.group("dynamic")
            if spec:
                imports.append(spec)
        return imports

    def resolve_import_path(
        self, import_name: str, current_file: Path, base_path: Path
    ) -> Path | None:
        current_dir = Path(current_file).parent

        if import_name.startswith("."):
            return _probe(current_dir / import_name)

        found = _from_node_modules(import_name, current_dir, base_path)
        if found is not None:
            return found

        found = _probe(base_path / import_name.lstrip("/"))
        if found is not None:
            return found

        for candidate in tree_files(str(base_path)):
            path = Path(candidate)
            if path.suffix in _EXTENSIONS and path.stem == import_name:
                return path
        return None


def _probe(candidate: Path) -> Path | None:
    """Try *candidate* as given, with each JS/TS extension, then as a directory index."""
    if candidate.is_file():
        return candidate
    for ext in _EXTENSIONS:
        with_ext = candidate.with_name(candidate.name + ext)
        if with_ext.is_file():
            return with_ext
    # TypeScript sources imported under their compiled ``.js`` name.
    for ts_ext in _TS_FOR_JS.get(candidate.suffix, ()):
        swapped = candidate.with_suffix(ts_ext)
        if swapped.is_file():
            return swapped
    if candidate.is_dir():
        for ext in _EXTENSIONS:
            index = candidate / f"index{ext}"
            if index.is_file():
                return index
    return None


def _from_node_modules(spec: str, current_dir: Path, base_path: Path) -> Path | None:
    directory = current_dir
    while True:
        package_dir = directory / "node_modules" / spec
        if package_dir.is_dir():
            main = _package_main(package_dir)
            if main is not None:
                return main
        found = _probe(package_dir)
        if found is not None:
            return found
        if directory == base_path or directory.parent == directory:
            return None
        directory = directory.parent


def _package_main(package_dir: Path) -> Path | None:
    manifest = package_dir / "package.json"
    if not manifest.is_file():
        return None
    text = read_text(manifest)
    if text is None:
        return None
    try:
        main = json.loads(text).get("main")
    except (json.JSONDecodeError, AttributeError) as e:
        logger.debug("Unreadable %s: %s", manifest, e)
        return None
    if not isinstance(main, str) or not main:
        return None
    return _probe(package_dir / main)
