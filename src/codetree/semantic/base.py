"""Semantic analyzer protocol and the placeholder analyzers."""

from __future__ import annotations

from typing import Protocol

from codetree.model import ProjectSemanticModel, SemanticModel


class SemanticAnalyzer(Protocol):
    """Whole-project analyzer producing types, functions and file edges.

    ``analyze_project`` returns ``None`` when the analyzer cannot serve the
    request; the caller then falls back to the lexical front-end.
    """

    language: str
    extensions: tuple[str, ...]
    supported: bool

    def analyze_file(self, file_path: str, content: str) -> SemanticModel | None:
        ...

    def analyze_project(self, file_paths: list[str]) -> ProjectSemanticModel | None:
        ...


class UnsupportedAnalyzer:
    """An analyzer slot with no implementation behind it yet."""

    language = "unknown"
    extensions: tuple[str, ...] = ()
    supported = False

    def analyze_file(self, file_path: str, content: str) -> SemanticModel | None:
        return None

    def analyze_project(self, file_paths: list[str]) -> ProjectSemanticModel | None:
        return None


class PythonSemanticAnalyzer(UnsupportedAnalyzer):
    language = "python"
    extensions = (".py", ".pyi")


class JavaScriptSemanticAnalyzer(UnsupportedAnalyzer):
    language = "javascript"
    extensions = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")


class JavaSemanticAnalyzer(UnsupportedAnalyzer):
    language = "java"
    extensions = (".java",)


class CSharpSemanticAnalyzer(UnsupportedAnalyzer):
    language = "csharp"
    extensions = (".cs",)
