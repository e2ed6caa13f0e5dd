"""Brace-heuristic front-end for languages without a dedicated parser."""

from __future__ import annotations

from codetree.frontends._common import CONTROL_KEYWORDS, GENERIC_TOKENS, BraceFrontEnd


class GenericFrontEnd(BraceFrontEnd):
    """Functions and calls only; imports are never extracted."""

    language = "generic"
    extensions = (".rs", ".kt", ".kts", ".swift", ".scala", ".php", ".dart")
    # No single-quote strings: Rust lifetimes and Kotlin chars would derail masking.
    tokens = GENERIC_TOKENS
    ignored_names = CONTROL_KEYWORDS | {"return", "match", "when", "guard"}
    ignored_calls = CONTROL_KEYWORDS | {"return", "match", "when", "guard"}
    line_patterns = (
        r"\b(?:fn|fun|func|function|def)\s+{name}\b",
        r"(?<![\w$.]){name}\s*\([^;]*\)[^;]*\{",
    )
