"""Lexical language front-ends and the extension registry."""

from __future__ import annotations

import logging

from codetree.frontends.base import LanguageFrontEnd
from codetree.frontends.cpp import CppFrontEnd
from codetree.frontends.csharp import CSharpFrontEnd
from codetree.frontends.generic import GenericFrontEnd
from codetree.frontends.go import GoFrontEnd
from codetree.frontends.java import JavaFrontEnd
from codetree.frontends.javascript import JavaScriptFrontEnd
from codetree.frontends.python import PythonFrontEnd

logger = logging.getLogger(__name__)

__all__ = [
    "CSharpFrontEnd",
    "CppFrontEnd",
    "GenericFrontEnd",
    "GoFrontEnd",
    "JavaFrontEnd",
    "JavaScriptFrontEnd",
    "LanguageFrontEnd",
    "PythonFrontEnd",
    "default_frontends",
    "frontends_by_extension",
]


def default_frontends() -> list[LanguageFrontEnd]:
    return [
        JavaScriptFrontEnd(),
        PythonFrontEnd(),
        JavaFrontEnd(),
        CppFrontEnd(),
        GoFrontEnd(),
        CSharpFrontEnd(),
        GenericFrontEnd(),
    ]


def frontends_by_extension(frontends: list[LanguageFrontEnd]) -> dict[str, LanguageFrontEnd]:
    """Map each lowercase extension to its front-end; the first registration wins."""
    mapping: dict[str, LanguageFrontEnd] = {}
    for frontend in frontends:
        for ext in frontend.extensions:
            if ext.lower() in mapping:
                logger.debug("Extension %s already handled by %s", ext, mapping[ext.lower()].language)
                continue
            mapping[ext.lower()] = frontend
    return mapping
