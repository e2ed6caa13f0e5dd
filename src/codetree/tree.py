"""Dependency tree construction over a :class:`ProjectIndex`.

Every recursive branch receives its own visited set (the ancestors on the
current root-to-node path).  A node whose key is already on that path is a
cyclic leaf; a node at the depth bound is a plain leaf.  Sharing one visited
set between siblings would wrongly flag the common descendant of a diamond
as cyclic, so the sets are immutable and extended per branch.
"""

from __future__ import annotations

import logging
import os

from codetree.model import (
    DependencyNodeType,
    DependencyTree,
    DependencyTreeFunction,
    FunctionInfo,
    ProjectIndex,
    TypeInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10


def _matches(function: FunctionInfo, call: str) -> bool:
    return function.name == call or function.name.endswith("." + call)


class DependencyTreeBuilder:
    def __init__(
        self,
        index: ProjectIndex,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        function_max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.index = index
        self.max_depth = max_depth
        self.function_max_depth = function_max_depth

    # -- files ---------------------------------------------------------------

    def build_file_tree(self, file_path: str) -> DependencyTree:
        return self._file_node(file_path, frozenset(), 0)

    def _file_node(self, path: str, visited: frozenset[str], level: int) -> DependencyTree:
        name = os.path.basename(path)
        if level >= self.max_depth or path in visited:
            return DependencyTree(
                node_type=DependencyNodeType.FILE,
                name=name,
                full_path=path,
                is_cyclic=path in visited,
            )

        branch = visited | {path}
        node = DependencyTree(node_type=DependencyNodeType.FILE, name=name, full_path=path)
        for dependency in self._file_edges(path):
            node.children.append(self._file_node(dependency, branch, level + 1))
        node.functions = [
            DependencyTreeFunction(name=f.name, line=f.line)
            for f in self.index.file_functions.get(path, [])
        ]
        return node

    def _file_edges(self, path: str) -> list[str]:
        edges = list(self.index.file_dependencies.get(path, []))
        for target in self._inheritance_targets(path):
            if target not in edges:
                edges.append(target)
        return edges

    def _inheritance_targets(self, path: str) -> list[str]:
        """Files declaring the base types and interfaces of types in *path*."""
        model = self.index.semantic.files.get(path)
        if model is None:
            return []
        targets: list[str] = []
        for type_info in model.types:
            for base in (*type_info.base_types, *type_info.interfaces):
                found = self._find_type(base)
                if found is None:
                    logger.debug("Base type %s of %s not declared in the project", base, type_info.name)
                    continue
                if found.file_path != path and found.file_path not in targets:
                    targets.append(found.file_path)
        return targets

    def _find_type(self, name: str) -> TypeInfo | None:
        for type_info in self.index.semantic.all_types.values():
            if (
                type_info.name == name
                or type_info.full_name == name
                or type_info.full_name.endswith("." + name)
            ):
                return type_info
        return None

    # -- functions -----------------------------------------------------------

    def build_function_tree(self, file_path: str, function_name: str) -> DependencyTree:
        return self._function_node(file_path, function_name, frozenset(), 0)

    def _function_node(
        self, path: str, function_name: str, visited: frozenset[str], level: int
    ) -> DependencyTree:
        key = f"{path}:{function_name}"
        node = DependencyTree(node_type=DependencyNodeType.FUNCTION, name=function_name, full_path=key)
        if level >= self.function_max_depth or key in visited:
            node.is_cyclic = key in visited
            return node

        function = self._find_in_file(path, function_name)
        if function is None:
            return node
        if function.name != function_name:
            # ``Run`` requested, ``Server.Run`` found: key the branch on the latter.
            return self._function_node(path, function.name, visited, level)
        node.line = function.line

        branch = visited | {key}
        for call in dict.fromkeys(function.calls):
            target = self.resolve_call(call, path)
            if target is None:
                logger.debug("Unresolved call %s in %s", call, key)
                continue
            node.children.append(self._function_node(target.file_path, target.name, branch, level + 1))
        return node

    def _find_in_file(self, path: str, call: str) -> FunctionInfo | None:
        functions = self.index.file_functions.get(path, [])
        for function in functions:
            if function.name == call:
                return function
        for function in functions:
            if _matches(function, call):
                return function
        return None

    def resolve_call(self, call: str, current_file: str) -> FunctionInfo | None:
        """Same file, then the files it depends on, then every file; first match wins."""
        found = self._find_in_file(current_file, call)
        if found is not None:
            return found
        for dependency in self.index.file_dependencies.get(current_file, []):
            found = self._find_in_file(dependency, call)
            if found is not None:
                return found
        for path in self.index.file_functions:
            found = self._find_in_file(path, call)
            if found is not None:
                return found
        return None
