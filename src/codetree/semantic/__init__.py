"""Semantic analyzers (whole-project, syntax-tree based) and their registry."""

from __future__ import annotations

from codetree.semantic.base import (
    CSharpSemanticAnalyzer,
    JavaScriptSemanticAnalyzer,
    JavaSemanticAnalyzer,
    PythonSemanticAnalyzer,
    SemanticAnalyzer,
    UnsupportedAnalyzer,
)
from codetree.semantic.go import GoSemanticAnalyzer

__all__ = [
    "CSharpSemanticAnalyzer",
    "GoSemanticAnalyzer",
    "JavaScriptSemanticAnalyzer",
    "JavaSemanticAnalyzer",
    "PythonSemanticAnalyzer",
    "SemanticAnalyzer",
    "UnsupportedAnalyzer",
    "default_analyzers",
]


def default_analyzers() -> list[SemanticAnalyzer]:
    return [
        GoSemanticAnalyzer(),
        PythonSemanticAnalyzer(),
        JavaScriptSemanticAnalyzer(),
        JavaSemanticAnalyzer(),
        CSharpSemanticAnalyzer(),
    ]
