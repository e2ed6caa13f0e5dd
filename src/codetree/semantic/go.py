"""Go semantic analyzer built on tree-sitter."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

import tree_sitter_go as tsgo
from tree_sitter import Language, Parser

from codetree.frontends.go import GO_BUILTINS, is_standard_library
from codetree.model import (
    AccessModifier,
    FunctionCallInfo,
    ImportInfo,
    ParameterInfo,
    ProjectSemanticModel,
    SemanticFunction,
    SemanticModel,
    TypeInfo,
    TypeKind,
    VariableInfo,
)
from codetree.scan import normalize_path

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(tsgo.language())

_MODULE_RE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)
_TYPE_NAME_RE = re.compile(r"[A-Za-z_][\w.]*")

# Interface members across tree-sitter-go grammar versions.
_METHOD_ELEMS = {"method_elem", "method_spec"}
_EMBED_ELEMS = {"type_elem", "constraint_elem", "interface_type_name", "type_identifier", "qualified_type"}


def _text(node) -> str:
    return node.text.decode("utf-8") if node is not None else ""


def _line(node) -> int:
    return node.start_point[0] + 1


def _end_line(node) -> int:
    return node.end_point[0] + 1


def _access(name: str) -> AccessModifier:
    return AccessModifier.PUBLIC if name[:1].isupper() else AccessModifier.INTERNAL


def _bare_type(type_text: str) -> str:
    """``*pkg.Type[T]`` -> ``pkg.Type``."""
    m = _TYPE_NAME_RE.search(type_text.lstrip("*&[] "))
    return m.group(0) if m else ""


def _walk(node):
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


class GoSemanticAnalyzer:
    """Types, functions, imports and call sites of Go files."""

    language = "go"
    extensions = (".go",)
    supported = True

    def __init__(self) -> None:
        self._go_mod_cache: dict[str, tuple[str, str] | None] = {}

    def analyze_file(self, file_path: str, content: str) -> SemanticModel:
        tree = Parser(GO_LANGUAGE).parse(content.encode("utf-8"))
        root = tree.root_node
        model = SemanticModel(file_path=file_path, namespace="main")

        for node in root.named_children:
            if node.type == "package_clause":
                for child in node.named_children:
                    if child.type == "package_identifier":
                        model.namespace = _text(child)
            elif node.type == "import_declaration":
                model.imports.extend(_imports(node))
            elif node.type == "type_declaration":
                for spec in node.named_children:
                    if spec.type in ("type_spec", "type_alias"):
                        model.types.append(_type_info(spec, model.namespace, file_path))
            elif node.type in ("var_declaration", "const_declaration"):
                model.variables.extend(_variables(node))

        aliases = {imp.alias or imp.name.rsplit("/", 1)[-1]: imp.name for imp in model.imports}
        types_by_name = {t.name: t for t in model.types}
        for node in root.named_children:
            if node.type == "function_declaration":
                model.functions.append(_function(node, model.namespace, file_path, aliases))
            elif node.type == "method_declaration":
                method = _method(node, model.namespace, file_path, aliases)
                owner = types_by_name.get(method.parent_type)
                if owner is not None:
                    owner.methods.append(method)
                else:
                    method.name = f"{method.parent_type}.{method.name}"
                    model.functions.append(method)
        return model

    def analyze_project(self, file_paths: list[str]) -> ProjectSemanticModel:
        project = ProjectSemanticModel()
        go_files = [p for p in file_paths if os.path.splitext(p)[1].lower() in self.extensions]

        for path in go_files:
            try:
                content = Path(path).read_text(encoding="utf-8")
                model = self.analyze_file(path, content)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping %s: %s", path, e)
                continue
            except Exception as e:
                logger.warning("Could not parse %s: %s", path, e)
                continue
            project.files[path] = model
            for type_info in model.types:
                project.all_types.setdefault(type_info.full_name, type_info)
                for method in type_info.methods:
                    project.all_functions.setdefault(method.full_name, method)
            for function in model.functions:
                project.all_functions.setdefault(function.full_name, function)

        analysed = sorted(project.files)
        for path, model in project.files.items():
            deps: list[str] = []
            for imp in model.imports:
                resolved = self.resolve_import(imp.name, path, analysed)
                if resolved is None:
                    logger.debug("Unresolved Go import %r in %s", imp.name, path)
                    continue
                imp.file_path = resolved
                if resolved != path and resolved not in deps:
                    deps.append(resolved)
            project.dependencies[path] = deps

        logger.debug("Go semantic analysis: %d of %d files", len(project.files), len(go_files))
        return project

    def resolve_import(self, import_path: str, current_file: str, analysed: list[str]) -> str | None:
        """Map a Go import path to one analysed file of the imported package."""
        module = self._find_go_mod(os.path.dirname(current_file))
        if module is None:
            return None
        root, module_path = module

        if import_path == module_path or import_path.startswith(module_path + "/"):
            rest = import_path[len(module_path) :].lstrip("/")
            directory = normalize_path(os.path.join(root, rest)) if rest else root
            return _first_in_dir(analysed, lambda d: d == directory)

        if is_standard_library(import_path):
            return None

        last = import_path.rstrip("/").rsplit("/", 1)[-1]
        return _first_in_dir(analysed, lambda d: os.path.basename(d) == last)

    def _find_go_mod(self, start_dir: str) -> tuple[str, str] | None:
        if start_dir in self._go_mod_cache:
            return self._go_mod_cache[start_dir]
        result = None
        current = start_dir
        while True:
            go_mod = os.path.join(current, "go.mod")
            if os.path.isfile(go_mod):
                try:
                    m = _MODULE_RE.search(Path(go_mod).read_text(encoding="utf-8"))
                except (OSError, UnicodeDecodeError) as e:
                    logger.debug("Could not read %s: %s", go_mod, e)
                    m = None
                result = (normalize_path(current), m.group(1) if m else "")
                break
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent
        self._go_mod_cache[start_dir] = result
        return result


def _first_in_dir(analysed: list[str], accept) -> str | None:
    fallback = None
    for path in analysed:
        if not accept(os.path.dirname(path)):
            continue
        if not path.endswith("_test.go"):
            return path
        fallback = fallback or path
    return fallback


def _imports(declaration) -> list[ImportInfo]:
    imports = []
    for node in _walk(declaration):
        if node.type != "import_spec":
            continue
        path = _text(node.child_by_field_name("path")).strip('"`')
        alias_node = node.child_by_field_name("name")
        alias = _text(alias_node) or None
        imports.append(
            ImportInfo(
                name=path,
                alias=alias if alias not in (".", "_") else None,
                is_wildcard=alias == ".",
            )
        )
    return imports


def _variables(declaration) -> list[VariableInfo]:
    is_const = declaration.type == "const_declaration"
    variables = []
    for node in _walk(declaration):
        if node.type not in ("var_spec", "const_spec"):
            continue
        type_text = _text(node.child_by_field_name("type"))
        for name_node in node.children_by_field_name("name"):
            name = _text(name_node)
            variables.append(
                VariableInfo(
                    name=name,
                    type=type_text,
                    line=_line(node),
                    access=_access(name),
                    is_static=True,
                    is_readonly=is_const,
                    is_const=is_const,
                )
            )
    return variables


def _generic_parameters(node) -> list[str]:
    params_node = node.child_by_field_name("type_parameters")
    if params_node is None:
        return []
    names = []
    for decl in params_node.named_children:
        names.extend(_text(n) for n in decl.children_by_field_name("name"))
    return names


def _type_info(spec, package: str, file_path: str) -> TypeInfo:
    name = _text(spec.child_by_field_name("name"))
    type_node = spec.child_by_field_name("type")
    kind = {
        "struct_type": TypeKind.STRUCT,
        "interface_type": TypeKind.INTERFACE,
        "function_type": TypeKind.DELEGATE,
    }.get(type_node.type if type_node is not None else "", TypeKind.CLASS)

    info = TypeInfo(
        name=name,
        full_name=f"{package}.{name}",
        kind=kind,
        file_path=file_path,
        line=_line(spec),
        end_line=_end_line(spec),
        generic_parameters=_generic_parameters(spec),
        access=_access(name),
        is_abstract=kind is TypeKind.INTERFACE,
    )

    if kind is TypeKind.STRUCT:
        for field_node in _walk(type_node):
            if field_node.type != "field_declaration":
                continue
            field_type = _text(field_node.child_by_field_name("type"))
            names = field_node.children_by_field_name("name")
            if not names:
                # Embedded field.
                base = _bare_type(field_type)
                if base:
                    info.base_types.append(base)
                continue
            for name_node in names:
                field_name = _text(name_node)
                info.fields.append(
                    VariableInfo(name=field_name, type=field_type, line=_line(field_node), access=_access(field_name))
                )
    elif kind is TypeKind.INTERFACE:
        for member in type_node.named_children:
            if member.type in _METHOD_ELEMS:
                method_name = _text(member.child_by_field_name("name"))
                info.methods.append(
                    SemanticFunction(
                        name=method_name,
                        full_name=f"{package}.{name}.{method_name}",
                        file_path=file_path,
                        line=_line(member),
                        end_line=_end_line(member),
                        return_type=_text(member.child_by_field_name("result")),
                        parameters=_parameters(member.child_by_field_name("parameters")),
                        access=_access(method_name),
                        is_abstract=True,
                        parent_type=name,
                    )
                )
            elif member.type in _EMBED_ELEMS:
                embedded = _text(member).strip()
                # Union and approximation constraints are not embedded interfaces.
                if _TYPE_NAME_RE.fullmatch(embedded):
                    info.interfaces.append(embedded)
    return info


def _parameters(params_node) -> list[ParameterInfo]:
    if params_node is None:
        return []
    params = []
    for decl in params_node.named_children:
        if decl.type not in ("parameter_declaration", "variadic_parameter_declaration"):
            continue
        type_text = _text(decl.child_by_field_name("type"))
        if decl.type == "variadic_parameter_declaration":
            type_text = "..." + type_text
        names = decl.children_by_field_name("name")
        if not names:
            params.append(ParameterInfo(name="", type=type_text))
        for name_node in names:
            params.append(ParameterInfo(name=_text(name_node), type=type_text))
    return params


def _calls(body, aliases: dict[str, str], receiver: str = "", receiver_type: str = "") -> list[FunctionCallInfo]:
    calls = []
    if body is None:
        return calls
    for node in _walk(body):
        if node.type != "call_expression":
            continue
        target = node.child_by_field_name("function")
        if target is None:
            continue
        if target.type == "identifier":
            name = _text(target)
            if name in GO_BUILTINS:
                continue
            calls.append(FunctionCallInfo(name=name, full_name=name, line=_line(node)))
        elif target.type == "selector_expression":
            operand = _text(target.child_by_field_name("operand"))
            name = _text(target.child_by_field_name("field"))
            call = FunctionCallInfo(name=name, full_name=f"{operand}.{name}", line=_line(node))
            if operand in aliases:
                call.target_type = aliases[operand]
                call.is_static = True
            elif receiver and operand == receiver:
                call.target_type = receiver_type
            calls.append(call)
    return calls


def _function(node, package: str, file_path: str, aliases: dict[str, str]) -> SemanticFunction:
    name = _text(node.child_by_field_name("name"))
    return SemanticFunction(
        name=name,
        full_name=f"{package}.{name}",
        file_path=file_path,
        line=_line(node),
        end_line=_end_line(node),
        return_type=_text(node.child_by_field_name("result")),
        parameters=_parameters(node.child_by_field_name("parameters")),
        generic_parameters=_generic_parameters(node),
        calls=_calls(node.child_by_field_name("body"), aliases),
        access=_access(name),
        is_static=True,
    )


def _method(node, package: str, file_path: str, aliases: dict[str, str]) -> SemanticFunction:
    name = _text(node.child_by_field_name("name"))
    receiver = _parameters(node.child_by_field_name("receiver"))
    receiver_name = receiver[0].name if receiver else ""
    receiver_type = _bare_type(receiver[0].type) if receiver else ""
    return SemanticFunction(
        name=name,
        full_name=f"{package}.{receiver_type}.{name}",
        file_path=file_path,
        line=_line(node),
        end_line=_end_line(node),
        return_type=_text(node.child_by_field_name("result")),
        parameters=_parameters(node.child_by_field_name("parameters")),
        calls=_calls(node.child_by_field_name("body"), aliases, receiver_name, receiver_type),
        access=_access(name),
        parent_type=receiver_type,
    )
