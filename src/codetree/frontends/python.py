"""Python front-end: imports, ``def`` blocks and calls by indentation."""

from __future__ import annotations

import re
from pathlib import Path

from codetree.frontends._common import (
    PY_TOKENS,
    mask_source,
    scan_lines,
    tree_files,
    unique,
)
from codetree.model import ParsedFunction

_IMPORT_RE = re.compile(
    r"^[ \t]*(?:from[ \t]+(?P<module>[\w.]+)[ \t]+import[ \t]+(?P<names>\([^)]*\)|[^\n;]+)"
    r"|import[ \t]+(?P<plain>[^\n;]+))",
    re.MULTILINE,
)
_DEF_RE = re.compile(r"^(?P<indent>[ \t]*)(?:async[ \t]+)?def[ \t]+(?P<name>\w+)[ \t]*\(", re.MULTILINE)
_CALL_RE = re.compile(r"(?P<decl>\b(?:def|class)\s+)?(?<![\w])(?P<name>[A-Za-z_]\w*)\s*\(")

_BUILTINS = frozenset(
    {
        # keywords that can precede a parenthesis
        "if", "elif", "while", "for", "return", "not", "and", "or", "in",
        "with", "assert", "yield", "lambda", "except", "del", "await", "is",
        # builtins
        "print", "len", "int", "str", "float", "bool", "bytes", "list", "dict",
        "set", "frozenset", "tuple", "range", "enumerate", "zip", "map",
        "filter", "isinstance", "issubclass", "hasattr", "getattr", "setattr",
        "super", "type", "open", "sorted", "reversed", "min", "max", "sum",
        "any", "all", "abs", "repr", "iter", "next", "id", "hash", "format",
        "vars", "callable", "object",
    }
)


class PythonFrontEnd:
    language = "python"
    extensions = (".py", ".pyi")

    def _mask(self, content: str) -> str:
        return mask_source(content, PY_TOKENS, comment_prefixes=("#",))

    def extract_imports(self, content: str) -> list[str]:
        imports: list[str] = []
        for m in _IMPORT_RE.finditer(self._mask(content)):
            if m.group("plain") is not None:
                for part in m.group("plain").split(","):
                    name = part.split(" as ")[0].strip()
                    if name:
                        imports.append(name)
                continue

            module = m.group("module")
            if module.strip("."):
                imports.append(module)
                continue
            # ``from . import a, b`` names sibling modules.
            for part in m.group("names").strip("()").replace("\\", " ").split(","):
                name = part.split(" as ")[0].strip()
                if name and name != "*":
                    imports.append(module + name)
        return imports

    def extract_functions(self, content: str) -> list[ParsedFunction]:
        masked = self._mask(content)
        lines = content.split("\n")
        masked_lines = masked.split("\n")

        functions: list[ParsedFunction] = []
        for m in _DEF_RE.finditer(masked):
            indent = len(m.group("indent").expandtabs())
            start = masked.count("\n", 0, m.start())
            end = start + 1
            while end < len(masked_lines):
                text = masked_lines[end]
                if text.strip() and len(text) - len(text.lstrip()) <= indent:
                    # Continuation lines of the signature are deeper or close a bracket.
                    if not text.lstrip().startswith((")", "]", "}")):
                        break
                end += 1
            body = "\n".join(lines[start + 1 : end])
            functions.append(ParsedFunction(name=m.group("name"), body=body, line=start + 1))
        return functions

    def extract_function_calls(self, body: str) -> list[str]:
        calls = []
        for m in _CALL_RE.finditer(self._mask(body)):
            if m.group("decl"):
                continue
            name = m.group("name")
            if name not in _BUILTINS:
                calls.append(name)
        return unique(calls)

    def resolve_import_path(
        self, import_name: str, current_file: Path, base_path: Path
    ) -> Path | None:
        current_dir = Path(current_file).parent

        if import_name.startswith("."):
            stripped = import_name.lstrip(".")
            package_dir = current_dir
            for _ in range(len(import_name) - len(stripped) - 1):
                package_dir = package_dir.parent
            if not stripped:
                init = package_dir / "__init__.py"
                return init if init.is_file() else None
            return _module_file(package_dir, stripped)

        for root in (base_path, current_dir, base_path / "src"):
            found = _module_file(root, import_name)
            if found is not None:
                return found

        first = import_name.split(".")[0]
        for candidate in tree_files(str(base_path)):
            path = Path(candidate)
            if path.name == f"{first}.py" or (path.name == "__init__.py" and path.parent.name == first):
                return path
        return None

    def get_function_line_number(self, content: str, function_name: str) -> int:
        return scan_lines(self._mask(content), (r"^\s*(?:async\s+)?def\s+{name}\s*\(",), function_name)


def _module_file(root: Path, dotted: str) -> Path | None:
    """Longest prefix of *dotted* that names a module or package under *root*."""
    parts = dotted.split(".")
    for size in range(len(parts), 0, -1):
        target = root.joinpath(*parts[:size])
        for candidate in (
            target.with_name(target.name + ".py"),
            target / "__init__.py",
            target.with_name(target.name + ".pyi"),
        ):
            if candidate.is_file():
                return candidate
    return None
