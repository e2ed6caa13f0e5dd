"""Language-agnostic data model for dependency analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DependencyNodeType(Enum):
    FILE = "file"
    FUNCTION = "function"


class TypeKind(Enum):
    CLASS = "class"
    INTERFACE = "interface"
    STRUCT = "struct"
    ENUM = "enum"
    DELEGATE = "delegate"
    RECORD = "record"


class AccessModifier(Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PROTECTED_INTERNAL = "protected internal"
    PRIVATE_PROTECTED = "private protected"


# ---------------------------------------------------------------------------
# Front-end results
# ---------------------------------------------------------------------------


@dataclass
class ParsedFunction:
    """A function span as cut out of raw source by a front-end."""

    name: str
    body: str
    line: int = 0


@dataclass
class FunctionInfo:
    """A function known to the project index.

    ``full_name`` is ``<file path>:<name>``; ``body`` is empty for functions
    that came from a semantic analyzer.
    """

    name: str
    full_name: str
    file_path: str
    line: int = 0
    body: str = ""
    calls: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Semantic model
# ---------------------------------------------------------------------------


@dataclass
class ImportInfo:
    name: str
    alias: str | None = None
    file_path: str | None = None
    is_wildcard: bool = False
    imported_members: list[str] = field(default_factory=list)


@dataclass
class VariableInfo:
    name: str
    type: str = ""
    line: int = 0
    access: AccessModifier = AccessModifier.PUBLIC
    is_static: bool = False
    is_readonly: bool = False
    is_const: bool = False


@dataclass
class ParameterInfo:
    name: str
    type: str = ""
    is_optional: bool = False
    default_value: str = ""


@dataclass
class FunctionCallInfo:
    """A call site inside a semantically analysed function."""

    name: str
    full_name: str = ""
    line: int = 0
    target_type: str = ""  # import path or receiver type, when known
    is_static: bool = False


@dataclass
class SemanticFunction:
    """A function or method produced by a semantic analyzer (no body text)."""

    name: str
    full_name: str
    file_path: str
    line: int = 0
    end_line: int = 0
    return_type: str = ""
    parameters: list[ParameterInfo] = field(default_factory=list)
    generic_parameters: list[str] = field(default_factory=list)
    calls: list[FunctionCallInfo] = field(default_factory=list)
    access: AccessModifier = AccessModifier.PUBLIC
    is_static: bool = False
    is_async: bool = False
    is_abstract: bool = False
    is_virtual: bool = False
    is_override: bool = False
    parent_type: str = ""


@dataclass
class TypeInfo:
    name: str
    full_name: str
    kind: TypeKind
    file_path: str
    line: int = 0
    end_line: int = 0
    base_types: list[str] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)
    methods: list[SemanticFunction] = field(default_factory=list)
    fields: list[VariableInfo] = field(default_factory=list)
    generic_parameters: list[str] = field(default_factory=list)
    access: AccessModifier = AccessModifier.PUBLIC
    is_abstract: bool = False
    is_sealed: bool = False
    is_static: bool = False


@dataclass
class SemanticModel:
    """Semantic view of one file."""

    file_path: str
    namespace: str = ""
    types: list[TypeInfo] = field(default_factory=list)
    functions: list[SemanticFunction] = field(default_factory=list)
    imports: list[ImportInfo] = field(default_factory=list)
    variables: list[VariableInfo] = field(default_factory=list)


@dataclass
class ProjectSemanticModel:
    """Semantic view of a whole project (or one language's share of it).

    Every path key is a normalised absolute path.
    """

    files: dict[str, SemanticModel] = field(default_factory=dict)
    dependencies: dict[str, list[str]] = field(default_factory=dict)
    all_types: dict[str, TypeInfo] = field(default_factory=dict)
    all_functions: dict[str, SemanticFunction] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Unified index and dependency trees
# ---------------------------------------------------------------------------


@dataclass
class ProjectIndex:
    """Everything the tree builder needs, independent of source language."""

    file_dependencies: dict[str, list[str]] = field(default_factory=dict)
    file_functions: dict[str, list[FunctionInfo]] = field(default_factory=dict)
    function_to_file: dict[str, str] = field(default_factory=dict)
    semantic: ProjectSemanticModel = field(default_factory=ProjectSemanticModel)


@dataclass
class DependencyTreeFunction:
    name: str
    line: int = 0


@dataclass
class DependencyTree:
    """One node of a dependency tree.

    A cyclic node is a terminal marker: it never carries children or a
    function list.
    """

    node_type: DependencyNodeType
    name: str
    full_path: str
    line: int = 0
    is_cyclic: bool = False
    children: list[DependencyTree] = field(default_factory=list)
    functions: list[DependencyTreeFunction] = field(default_factory=list)
