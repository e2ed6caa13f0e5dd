"""Front-end protocol: every language parser conforms to this interface."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from codetree.model import ParsedFunction


class LanguageFrontEnd(Protocol):
    """Lexical extractor of imports, functions and calls for one language.

    Implementations never raise on malformed source; they return empty
    results (or ``None`` / ``0``) instead.
    """

    language: str
    extensions: tuple[str, ...]

    def extract_imports(self, content: str) -> list[str]:
        """Return the raw import strings found in *content*, in source order."""
        ...

    def extract_functions(self, content: str) -> list[ParsedFunction]:
        """Return top-level functions and methods with their body text."""
        ...

    def extract_function_calls(self, body: str) -> list[str]:
        """Return the names called from *body*, first occurrence first."""
        ...

    def resolve_import_path(
        self, import_name: str, current_file: Path, base_path: Path
    ) -> Path | None:
        """Map an import string to a file inside *base_path*, or None."""
        ...

    def get_function_line_number(self, content: str, function_name: str) -> int:
        """Return the 1-based declaring line of *function_name*, or 0."""
        ...
