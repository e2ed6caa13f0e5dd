"""C# front-end: ``using`` directives resolved by namespace and type name."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from codetree.frontends._common import (
    C_TOKENS,
    CONTROL_KEYWORDS,
    GENERIC_HEADER,
    BraceFrontEnd,
    mask_source,
    read_text,
    tree_files,
)

_USING_RE = re.compile(
    r"^\s*(?:global\s+)?using\s+(?:static\s+)?(?:[A-Za-z_]\w*\s*=\s*)?([A-Za-z_][\w.]*)\s*;",
    re.MULTILINE,
)
_KEYWORDS = CONTROL_KEYWORDS | {"foreach", "using", "lock", "return", "new", "nameof", "typeof", "sizeof", "base", "this"}


def _declares_namespace(source: str, namespace: str) -> bool:
    return re.search(rf"\bnamespace\s+{re.escape(namespace)}\s*[{{;]", source) is not None


def _declares_type(source: str, type_name: str) -> bool:
    pattern = rf"\b(?:class|struct|interface|enum|record)\s+{re.escape(type_name)}\b"
    return re.search(pattern, source) is not None


@lru_cache(maxsize=32)
def csharp_sources(base_path: str) -> tuple[tuple[Path, str], ...]:
    """Every ``.cs`` file below *base_path* with comments and strings masked."""
    sources = []
    for candidate in tree_files(base_path):
        path = Path(candidate)
        if path.suffix != ".cs":
            continue
        source = read_text(path)
        if source is not None:
            sources.append((path, mask_source(source, C_TOKENS, comment_prefixes=("//", "/*"))))
    return tuple(sources)


class CSharpFrontEnd(BraceFrontEnd):
    language = "csharp"
    extensions = (".cs",)
    header_patterns = (GENERIC_HEADER,)
    ignored_names = _KEYWORDS
    ignored_calls = _KEYWORDS
    line_patterns = (
        r"(?:public|private|protected|internal|static|virtual|override|async|abstract|sealed|extern|\s)*"
        r"[\w.<>\[\],?]+\s+{name}\s*[<(][^;]*$",
    )

    def extract_imports(self, content: str) -> list[str]:
        return [m.group(1) for m in _USING_RE.finditer(self.mask(content))]

    def resolve_import_path(
        self, import_name: str, current_file: Path, base_path: Path
    ) -> Path | None:
        current = Path(current_file)
        sources = [(path, source) for path, source in csharp_sources(str(base_path)) if path != current]

        # ``using static Ns.Type`` or an alias target naming a type.
        namespace, _, type_name = import_name.rpartition(".")
        if namespace:
            for path, source in sources:
                if _declares_type(source, type_name) and _declares_namespace(source, namespace):
                    return path

        for path, source in sources:
            if _declares_namespace(source, import_name):
                return path
        return None
