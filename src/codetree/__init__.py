"""codetree: cross-language source dependency trees."""

from __future__ import annotations

from codetree.analyzer import DependencyAnalyzer, ScanRootNotFoundError
from codetree.config import CodeTreeConfig, load_config
from codetree.model import DependencyNodeType, DependencyTree, DependencyTreeFunction

__all__ = [
    "CodeTreeConfig",
    "DependencyAnalyzer",
    "DependencyNodeType",
    "DependencyTree",
    "DependencyTreeFunction",
    "ScanRootNotFoundError",
    "load_config",
]
