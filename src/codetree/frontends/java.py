"""Java front-end: imports via javalang, bodies via the brace engine."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from codetree.frontends._common import (
    CONTROL_KEYWORDS,
    GENERIC_HEADER,
    BraceFrontEnd,
    read_text,
    tree_files,
)

logger = logging.getLogger(__name__)

# Regex fallback when javalang cannot parse newer syntax.
_IMPORT_RE = re.compile(r"^\s*import\s+(static\s+)?([\w.]+(?:\s*\.\s*\*)?)\s*;", re.MULTILINE)
_PACKAGE_RE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)
_RECORD_TAIL = re.compile(r"\brecord\s+$")

_KEYWORDS = CONTROL_KEYWORDS | {"synchronized", "try", "return", "new", "throw", "else", "do"}


def _package_of(path: Path) -> str:
    source = read_text(path)
    if source is None:
        return ""
    m = _PACKAGE_RE.search(source)
    return m.group(1) if m else ""


class JavaFrontEnd(BraceFrontEnd):
    language = "java"
    extensions = (".java",)
    header_patterns = (GENERIC_HEADER,)
    ignored_names = _KEYWORDS | {"super", "this"}
    ignored_calls = _KEYWORDS | {"super", "this"}
    line_patterns = (
        r"(?:public|private|protected|static|final|abstract|synchronized|native|default|\s)*"
        r"[\w.<>\[\],?]+\s+{name}\s*\([^;]*$",
        r"(?:public|private|protected)\s+{name}\s*\([^;]*$",
    )

    def function_name(self, match: re.Match[str]) -> str:
        # Record headers carry a component list but are types, not methods.
        if _RECORD_TAIL.search(match.string, max(0, match.start() - 40), match.start()):
            return ""
        return match.group("name")

    def extract_imports(self, content: str) -> list[str]:
        import javalang

        try:
            tree = javalang.parse.parse(content)
        except javalang.parser.JavaSyntaxError:
            return self._extract_imports_fallback(content)
        except Exception as e:
            logger.debug("javalang failed (%s: %s); scanning imports by regex", type(e).__name__, e)
            return self._extract_imports_fallback(content)

        imports = []
        for imp in tree.imports:
            imports.append(f"{imp.path}.*" if imp.wildcard else imp.path)
        return imports

    def _extract_imports_fallback(self, content: str) -> list[str]:
        masked = self.mask(content)
        return [re.sub(r"\s+", "", m.group(2)) for m in _IMPORT_RE.finditer(masked)]

    def resolve_import_path(
        self, import_name: str, current_file: Path, base_path: Path
    ) -> Path | None:
        parts = import_name.split(".")
        if len(parts) < 2:
            return None

        if parts[-1] == "*":
            prefix = parts[:-1]
            # ``import static pkg.Type.*`` names a class, ``import pkg.*`` a package.
            found = _find_class(base_path, prefix[-1], ".".join(prefix[:-1]))
            if found is not None:
                return found
            return _first_in_package(base_path, ".".join(prefix))

        found = _find_class(base_path, parts[-1], ".".join(parts[:-1]))
        if found is None and parts[-1][:1].islower() and len(parts) > 2:
            # Static member import: the class is the second-to-last segment.
            found = _find_class(base_path, parts[-2], ".".join(parts[:-2]))
        return found


def _find_class(base_path: Path, class_name: str, package: str) -> Path | None:
    for candidate in tree_files(str(base_path)):
        path = Path(candidate)
        if path.suffix == ".java" and path.stem == class_name and _package_of(path) == package:
            return path
    return None


def _first_in_package(base_path: Path, package: str) -> Path | None:
    for candidate in tree_files(str(base_path)):
        path = Path(candidate)
        if path.suffix == ".java" and _package_of(path) == package:
            return path
    return None
