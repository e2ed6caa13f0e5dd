"""Combine per-language semantic models and flatten them into the index."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from codetree.model import FunctionInfo, ProjectSemanticModel, SemanticFunction

logger = logging.getLogger(__name__)


def _merge_into(target: dict, source: dict, what: str) -> None:
    for key, value in source.items():
        if key in target:
            logger.debug("Duplicate %s %s; keeping the first", what, key)
            continue
        target[key] = value


def merge_models(models: Iterable[ProjectSemanticModel]) -> ProjectSemanticModel:
    """Disjoint union of *models*; on a key collision the first model wins."""
    merged = ProjectSemanticModel()
    for model in models:
        _merge_into(merged.files, model.files, "file")
        _merge_into(merged.dependencies, model.dependencies, "dependency entry")
        _merge_into(merged.all_types, model.all_types, "type")
        _merge_into(merged.all_functions, model.all_functions, "function")
    return merged


def _function_info(function: SemanticFunction, name: str) -> FunctionInfo:
    return FunctionInfo(
        name=name,
        full_name=f"{function.file_path}:{name}",
        file_path=function.file_path,
        line=function.line,
        calls=list(dict.fromkeys(call.name for call in function.calls)),
    )


def flatten_functions(
    model: ProjectSemanticModel,
) -> tuple[dict[str, list[FunctionInfo]], dict[str, str]]:
    """Project a semantic model onto the front-end shaped function maps.

    Returns ``(file_functions, function_to_file)``.  Type methods are named
    ``Type.Method`` so they stay distinguishable from free functions.
    """
    file_functions: dict[str, list[FunctionInfo]] = {}
    function_to_file: dict[str, str] = {}

    for path, file_model in model.files.items():
        infos = [_function_info(f, f.name) for f in file_model.functions]
        for type_info in file_model.types:
            infos.extend(_function_info(m, f"{type_info.name}.{m.name}") for m in type_info.methods)
        file_functions[path] = infos
        for info in infos:
            function_to_file[info.full_name] = path
    return file_functions, function_to_file
