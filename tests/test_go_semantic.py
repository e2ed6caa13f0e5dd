"""Tests for the tree-sitter Go analyzer."""

from codetree.model import AccessModifier, TypeKind
from codetree.scan import normalize_path
from codetree.semantic import GoSemanticAnalyzer, PythonSemanticAnalyzer

MODELS = """\
package models

import (
    "fmt"
    str "strings"
    . "math"
    _ "embed"
)

type Base struct {
    ID int
}

type User[T any] struct {
    Base
    Name, email string
}

type Named interface {
    fmt.Stringer
    Name() string
}

type Handler func(int) error

func (u *User[T]) Greet(prefix string) string {
    u.validate()
    return fmt.Sprintf("%s %s", prefix, str.ToUpper(u.Name))
}

func (u *User[T]) validate() {}

func (o Other) Orphan() {}

func NewUser(name string, extra ...int) *User[int] {
    u := &User[int]{Name: name}
    u.Greet("hi")
    return u
}
"""


class TestAnalyzeFile:
    """Per-file semantic model."""

    def test_package_and_imports(self):
        model = GoSemanticAnalyzer().analyze_file("models.go", MODELS)
        assert model.namespace == "models"
        assert [i.name for i in model.imports] == ["fmt", "strings", "math", "embed"]
        by_name = {i.name: i for i in model.imports}
        assert by_name["strings"].alias == "str"
        assert by_name["math"].is_wildcard
        assert by_name["embed"].alias is None

    def test_default_package(self):
        model = GoSemanticAnalyzer().analyze_file("x.go", "func f() {}\n")
        assert model.namespace == "main"

    def test_types(self):
        model = GoSemanticAnalyzer().analyze_file("models.go", MODELS)
        types = {t.name: t for t in model.types}
        assert types["Base"].kind is TypeKind.STRUCT
        assert types["Named"].kind is TypeKind.INTERFACE
        assert types["Handler"].kind is TypeKind.DELEGATE

        user = types["User"]
        assert user.full_name == "models.User"
        assert user.generic_parameters == ["T"]
        assert user.base_types == ["Base"]
        assert [f.name for f in user.fields] == ["Name", "email"]
        assert user.fields[1].access is AccessModifier.INTERNAL

        named = types["Named"]
        assert named.interfaces == ["fmt.Stringer"]
        assert [m.name for m in named.methods] == ["Name"]

    def test_methods_attach_to_local_types(self):
        model = GoSemanticAnalyzer().analyze_file("models.go", MODELS)
        user = next(t for t in model.types if t.name == "User")
        assert [m.name for m in user.methods] == ["Greet", "validate"]
        greet = user.methods[0]
        assert greet.full_name == "models.User.Greet"
        assert greet.access is AccessModifier.PUBLIC
        assert greet.parameters[0].name == "prefix"
        assert greet.return_type == "string"

        names = [f.name for f in model.functions]
        assert names == ["Other.Orphan", "NewUser"]

    def test_call_sites(self):
        model = GoSemanticAnalyzer().analyze_file("models.go", MODELS)
        user = next(t for t in model.types if t.name == "User")
        calls = {c.name: c for c in user.methods[0].calls}
        assert calls["validate"].target_type == "User"
        assert calls["Sprintf"].target_type == "fmt"
        assert calls["ToUpper"].target_type == "strings"

        new_user = next(f for f in model.functions if f.name == "NewUser")
        assert [c.name for c in new_user.calls] == ["Greet"]
        assert new_user.parameters[1].type == "...int"


class TestAnalyzeProject:
    def test_resolution_through_go_mod(self, make_project):
        root = make_project(
            {
                "go.mod": "module example.com/app\n",
                "main.go": 'package main\n\nimport (\n    "fmt"\n    "example.com/app/models"\n)\n\nfunc main() { fmt.Println(models.New()) }\n',
                "models/a_test.go": "package models\n",
                "models/user.go": "package models\n\nfunc New() int { return 1 }\n",
            }
        )
        paths = sorted(normalize_path(p) for p in root.rglob("*.go"))
        project = GoSemanticAnalyzer().analyze_project(paths)

        main = normalize_path(root / "main.go")
        user = normalize_path(root / "models" / "user.go")
        assert project.dependencies[main] == [user]
        assert "models.New" in project.all_functions
        assert "main.main" in project.all_functions

    def test_standard_library_not_matched_to_local_directory(self, make_project):
        root = make_project(
            {
                "go.mod": "module example.com/app\n",
                "main.go": 'package main\n\nimport "errors"\n\nfunc main() { errors.New("x") }\n',
                "internal/errors/errors.go": "package errors\n\nfunc New(s string) error { return nil }\n",
            }
        )
        paths = sorted(normalize_path(p) for p in root.rglob("*.go"))
        project = GoSemanticAnalyzer().analyze_project(paths)
        assert project.dependencies[normalize_path(root / "main.go")] == []

    def test_without_go_mod_imports_stay_unresolved(self, make_project):
        root = make_project(
            {
                "main.go": 'package main\n\nimport "example.com/app/models"\n',
                "models/user.go": "package models\n",
            }
        )
        paths = sorted(normalize_path(p) for p in root.rglob("*.go"))
        project = GoSemanticAnalyzer().analyze_project(paths)
        assert project.dependencies[normalize_path(root / "main.go")] == []

    def test_non_go_paths_are_ignored(self, make_project):
        root = make_project({"a.go": "package a\n", "b.py": "x = 1\n"})
        paths = [normalize_path(root / "a.go"), normalize_path(root / "b.py")]
        project = GoSemanticAnalyzer().analyze_project(paths)
        assert list(project.files) == [normalize_path(root / "a.go")]


class TestUnsupportedAnalyzers:
    def test_stub_signals_unsupported(self):
        analyzer = PythonSemanticAnalyzer()
        assert not analyzer.supported
        assert analyzer.analyze_project(["a.py"]) is None
        assert analyzer.analyze_file("a.py", "") is None
