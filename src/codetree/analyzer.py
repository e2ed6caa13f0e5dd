"""Orchestrator: scan -> analyse (semantic or lexical) -> index -> trees."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from codetree.analysis import find_cycles
from codetree.config import CodeTreeConfig
from codetree.frontends import LanguageFrontEnd, default_frontends, frontends_by_extension
from codetree.frontends._common import tree_files
from codetree.frontends.csharp import csharp_sources
from codetree.ignore import GitIgnoreRule, compile_rules, is_ignored, read_ignore_file
from codetree.merge import flatten_functions, merge_models
from codetree.model import DependencyTree, FunctionInfo, ProjectIndex, ProjectSemanticModel
from codetree.scan import SourceFile, iter_source_files, normalize_path, relative_posix
from codetree.semantic import SemanticAnalyzer, default_analyzers
from codetree.tree import DependencyTreeBuilder

logger = logging.getLogger(__name__)


class ScanRootNotFoundError(FileNotFoundError):
    """The directory to analyse does not exist."""


class DependencyAnalyzer:
    """Builds the project index for one root and answers tree queries.

    The scan happens once, on the first call that needs it (or an explicit
    :meth:`initialize`).  Afterwards every query is a read of the index.
    """

    def __init__(
        self,
        base_path: str | os.PathLike[str],
        *,
        config: CodeTreeConfig | None = None,
        frontends: list[LanguageFrontEnd] | None = None,
        analyzers: list[SemanticAnalyzer] | None = None,
    ) -> None:
        self.base_path = Path(base_path)
        self.config = config or CodeTreeConfig()
        self._frontends = frontends if frontends is not None else default_frontends()
        self._by_extension = frontends_by_extension(self._frontends)
        self._analyzers = analyzers if analyzers is not None else default_analyzers()

        self._init_lock = threading.Lock()
        self._map_lock = threading.Lock()
        self._initialized = False
        self._root = normalize_path(self.base_path)
        self._rules: list[GitIgnoreRule] | None = None
        self._index = ProjectIndex()

    # -- setup ---------------------------------------------------------------

    def initialize(self) -> None:
        """Scan and analyse the project; later calls are no-ops."""
        with self._init_lock:
            if self._initialized:
                return
            if not os.path.isdir(self._root):
                raise ScanRootNotFoundError(f"Scan root not found: {self.base_path}")

            tree_files.cache_clear()
            csharp_sources.cache_clear()
            self._rules = None
            sources = iter_source_files(Path(self._root), self._ignore_rules(), self._by_extension.keys())
            groups, lexical = self._partition(sources)
            logger.info(
                "Scanned %s: %d source files, %d for semantic analysis",
                self._root,
                len(sources),
                sum(len(files) for _, files in groups),
            )

            self._index = self._analyze(groups, lexical)
            self._initialized = True

    def _ignore_rules(self) -> list[GitIgnoreRule]:
        if self._rules is None:
            lines = read_ignore_file(Path(self._root)) if self.config.use_gitignore else []
            self._rules = compile_rules([*lines, *self.config.exclude])
        return self._rules

    def _partition(
        self, sources: list[SourceFile]
    ) -> tuple[list[tuple[SemanticAnalyzer, list[SourceFile]]], list[SourceFile]]:
        claimed: dict[str, SemanticAnalyzer] = {}
        active: list[SemanticAnalyzer] = []
        if self.config.semantic:
            for analyzer in self._analyzers:
                if not analyzer.supported:
                    continue
                active.append(analyzer)
                for ext in analyzer.extensions:
                    claimed.setdefault(ext.lower(), analyzer)

        grouped: dict[int, list[SourceFile]] = {}
        lexical: list[SourceFile] = []
        for source in sources:
            analyzer = claimed.get(source.extension)
            if analyzer is None:
                lexical.append(source)
            else:
                grouped.setdefault(id(analyzer), []).append(source)

        groups = [(a, grouped[id(a)]) for a in active if id(a) in grouped]
        return groups, lexical

    def _analyze(
        self,
        groups: list[tuple[SemanticAnalyzer, list[SourceFile]]],
        lexical: list[SourceFile],
    ) -> ProjectIndex:
        file_dependencies: dict[str, list[str]] = {}
        file_functions: dict[str, list[FunctionInfo]] = {}
        models: list[ProjectSemanticModel | None] = [None] * len(groups)

        with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
            semantic_futures = {
                pool.submit(analyzer.analyze_project, [f.path for f in files]): position
                for position, (analyzer, files) in enumerate(groups)
            }
            lexical_futures = [
                pool.submit(self._analyze_source, source, file_dependencies, file_functions)
                for source in lexical
            ]

            for future in as_completed(semantic_futures):
                position = semantic_futures[future]
                analyzer, files = groups[position]
                try:
                    models[position] = future.result()
                except Exception as e:
                    logger.warning("%s semantic analysis failed: %s", analyzer.language, e)
                if models[position] is None:
                    logger.debug("Falling back to the %s front-end for %d files", analyzer.language, len(files))
                    lexical_futures.extend(
                        pool.submit(self._analyze_source, source, file_dependencies, file_functions)
                        for source in files
                    )

            for future in lexical_futures:
                future.result()

        semantic = merge_models(m for m in models if m is not None)
        semantic_functions, _ = flatten_functions(semantic)
        for path in semantic.files:
            file_dependencies[path] = list(semantic.dependencies.get(path, []))
            file_functions[path] = semantic_functions.get(path, [])

        index = ProjectIndex(semantic=semantic)
        for path in sorted(file_dependencies):
            index.file_dependencies[path] = file_dependencies[path]
        for path in sorted(file_functions):
            index.file_functions[path] = file_functions[path]
            for function in file_functions[path]:
                index.function_to_file[function.full_name] = path
        return index

    def _analyze_source(
        self,
        source: SourceFile,
        file_dependencies: dict[str, list[str]],
        file_functions: dict[str, list[FunctionInfo]],
    ) -> None:
        frontend = self._by_extension[source.extension]
        try:
            content = source.read_text()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", source.path, e)
            return

        try:
            dependencies = self._resolve_imports(frontend, frontend.extract_imports(content), source.path)
            functions = self._extract_functions(frontend, content, source.path)
        except Exception as e:
            logger.warning("Could not analyse %s: %s", source.path, e)
            return

        with self._map_lock:
            file_dependencies[source.path] = dependencies
            file_functions[source.path] = functions

    def _resolve_imports(self, frontend: LanguageFrontEnd, imports: list[str], path: str) -> list[str]:
        resolved: list[str] = []
        for name in imports:
            target = frontend.resolve_import_path(name, Path(path), Path(self._root))
            if target is None or not os.path.isfile(target):
                logger.debug("Unresolved import %r in %s", name, path)
                continue
            target_path = normalize_path(target)
            if target_path not in resolved:
                resolved.append(target_path)
        return resolved

    def _extract_functions(self, frontend: LanguageFrontEnd, content: str, path: str) -> list[FunctionInfo]:
        functions = []
        for parsed in frontend.extract_functions(content):
            line = parsed.line or frontend.get_function_line_number(content, parsed.name)
            functions.append(
                FunctionInfo(
                    name=parsed.name,
                    full_name=f"{path}:{parsed.name}",
                    file_path=path,
                    line=line,
                    body=parsed.body,
                    calls=frontend.extract_function_calls(parsed.body),
                )
            )
        return functions

    # -- queries -------------------------------------------------------------

    @property
    def index(self) -> ProjectIndex:
        self.initialize()
        return self._index

    def _builder(self) -> DependencyTreeBuilder:
        return DependencyTreeBuilder(
            self.index,
            max_depth=self.config.max_depth,
            function_max_depth=self.config.function_max_depth,
        )

    def analyze_file_dependency_tree(self, file_path: str | os.PathLike[str]) -> DependencyTree:
        return self._builder().build_file_tree(normalize_path(file_path))

    def analyze_function_dependency_tree(
        self, file_path: str | os.PathLike[str], function_name: str
    ) -> DependencyTree:
        return self._builder().build_function_tree(normalize_path(file_path), function_name)

    def find_import_cycles(self) -> list[list[str]]:
        return find_cycles(self.index.file_dependencies)

    def is_file_ignored(self, file_path: str | os.PathLike[str]) -> bool:
        """Whether *file_path* (absolute, or relative to the root) is excluded."""
        path = os.fspath(file_path)
        if os.path.isabs(path):
            path = relative_posix(normalize_path(path), self._root)
        return is_ignored(path, self._ignore_rules())

    def get_ignore_rules(self) -> list[str]:
        """The original, uncompiled pattern lines in evaluation order."""
        return [rule.pattern for rule in self._ignore_rules()]
