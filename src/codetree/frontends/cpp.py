"""C and C++ front-end."""

from __future__ import annotations

import posixpath
import re
from pathlib import Path

from codetree.frontends._common import (
    CONTROL_KEYWORDS,
    BraceFrontEnd,
    files_named,
)

_INCLUDE_RE = re.compile(r'^\s*#\s*include\s*[<"]([^>"]+)[>"]', re.MULTILINE)

_PARAMS = r"\([^(){};]*(?:\([^(){};]*\)[^(){};]*)*\)"
_NAME = r"(?<![\w.>~:])(?P<name>~?[A-Za-z_][\w]*(?:\s*::\s*~?[A-Za-z_][\w]*)*)"
_HEADER = re.compile(_NAME + r"\s*" + _PARAMS + r"(?P<trailer>[^;{}()=]*)\{")
# Constructors with a member initialiser list.
_CTOR_HEADER = re.compile(
    _NAME + r"\s*" + _PARAMS + r"\s*:\s*(?:[\w:<>]+\s*[({][^(){};]*[)}]\s*,?\s*)+\{"
)

_KEYWORDS = CONTROL_KEYWORDS | {"return", "sizeof", "alignof", "decltype", "static_assert", "defined"}


class CppFrontEnd(BraceFrontEnd):
    language = "cpp"
    extensions = (".c", ".h", ".cpp", ".hpp", ".cc", ".cxx", ".hxx", ".hh")
    header_patterns = (_HEADER, _CTOR_HEADER)
    ignored_names = _KEYWORDS
    ignored_calls = _KEYWORDS
    line_patterns = (r"(?:^|[\s*&:])(?<!~){name}\s*\([^;]*$",)

    def function_name(self, match: re.Match[str]) -> str:
        name = re.split(r"\s*::\s*", match.group("name"))[-1]
        if name.startswith("~"):
            return ""
        return name

    def extract_imports(self, content: str) -> list[str]:
        masked = self.mask(content, keep_strings=True)
        return [m.group(1).strip() for m in _INCLUDE_RE.finditer(masked)]

    def resolve_import_path(
        self, import_name: str, current_file: Path, base_path: Path
    ) -> Path | None:
        include = import_name.replace("\\", "/")
        for candidate in (Path(current_file).parent / include, base_path / include):
            if candidate.is_file():
                return candidate

        matches = files_named(base_path, posixpath.basename(include))
        for path in matches:
            if path.as_posix().endswith("/" + include):
                return path
        return matches[0] if matches else None
