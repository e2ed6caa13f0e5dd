"""Tests for the lexical language front-ends."""

import json
import logging
from pathlib import Path

import pytest

from codetree.frontends import (
    CppFrontEnd,
    CSharpFrontEnd,
    GenericFrontEnd,
    GoFrontEnd,
    JavaFrontEnd,
    JavaScriptFrontEnd,
    PythonFrontEnd,
    default_frontends,
    frontends_by_extension,
)
from codetree.frontends import csharp
from codetree.frontends._common import tree_files
from codetree.frontends.csharp import csharp_sources


@pytest.fixture(autouse=True)
def _fresh_tree_cache():
    tree_files.cache_clear()
    csharp_sources.cache_clear()
    yield
    tree_files.cache_clear()
    csharp_sources.cache_clear()


JS_SOURCE = """\
import React from 'react';
import { a, b } from "./util";
import './styles.css';
export * from './reexport';
const fs = require('fs');
// import fake from './commented';
const lazy = import('./lazy');

function add(a, b) {
  return helper(a) + b;
}

const mul = (a, b) => {
  return add(a, b) * 2;
};

class Calc {
  run(x) {
    if (x) {
      return mul(x, x);
    }
  }
}
"""


class TestJavaScriptFrontEnd:
    """ES modules, CommonJS and TypeScript resolution."""

    def test_imports_in_source_order(self):
        assert JavaScriptFrontEnd().extract_imports(JS_SOURCE) == [
            "react",
            "./util",
            "./styles.css",
            "./reexport",
            "fs",
            "./lazy",
        ]

    def test_functions(self):
        functions = JavaScriptFrontEnd().extract_functions(JS_SOURCE)
        assert [f.name for f in functions] == ["add", "mul", "run"]
        assert functions[0].line == 9

    def test_calls(self):
        fe = JavaScriptFrontEnd()
        functions = {f.name: f for f in fe.extract_functions(JS_SOURCE)}
        assert fe.extract_function_calls(functions["add"].body) == ["helper"]
        assert fe.extract_function_calls(functions["mul"].body) == ["add"]
        assert fe.extract_function_calls(functions["run"].body) == ["mul"]

    def test_calls_ignore_strings_and_duplicates(self):
        body = 'log("skip(me)"); go(); go(); obj.method(1);'
        assert JavaScriptFrontEnd().extract_function_calls(body) == ["log", "go", "method"]

    def test_line_number(self):
        fe = JavaScriptFrontEnd()
        assert fe.get_function_line_number(JS_SOURCE, "add") == 9
        assert fe.get_function_line_number(JS_SOURCE, "mul") == 13
        assert fe.get_function_line_number(JS_SOURCE, "missing") == 0

    def test_resolution(self, make_project):
        root = make_project(
            {
                "src/app.js": "",
                "src/util.ts": "",
                "src/lib/index.js": "",
                "node_modules/pkg/package.json": json.dumps({"main": "dist/main.js"}),
                "node_modules/pkg/dist/main.js": "",
            }
        )
        fe = JavaScriptFrontEnd()
        current = root / "src" / "app.js"
        assert fe.resolve_import_path("./util", current, root) == root / "src" / "util.ts"
        assert fe.resolve_import_path("./util.js", current, root) == root / "src" / "util.ts"
        assert fe.resolve_import_path("./lib", current, root) == root / "src" / "lib" / "index.js"
        assert fe.resolve_import_path("pkg", current, root) == root / "node_modules" / "pkg" / "dist" / "main.js"
        assert fe.resolve_import_path("missing", current, root) is None


PY_SOURCE = """\
import os
import pkg.mod as m, json
from . import sibling, other as o
from ..core import thing
from .helpers import fn


def top(a):
    x = helper(a)
    print(x)
    return len(x)


class K:
    def method(self):
        return self.top()

    async def other(self):
        def inner():
            pass
        inner()
"""


class TestPythonFrontEnd:
    def test_imports(self):
        assert PythonFrontEnd().extract_imports(PY_SOURCE) == [
            "os",
            "pkg.mod",
            "json",
            ".sibling",
            ".other",
            "..core",
            ".helpers",
        ]

    def test_functions_by_indentation(self):
        functions = PythonFrontEnd().extract_functions(PY_SOURCE)
        assert [f.name for f in functions] == ["top", "method", "other", "inner"]
        assert functions[0].line == 8
        assert "class K" not in functions[0].body

    def test_calls_skip_builtins_and_definitions(self):
        fe = PythonFrontEnd()
        functions = {f.name: f for f in fe.extract_functions(PY_SOURCE)}
        assert fe.extract_function_calls(functions["top"].body) == ["helper"]
        assert fe.extract_function_calls(functions["method"].body) == ["top"]
        assert fe.extract_function_calls(functions["other"].body) == ["inner"]

    def test_line_number(self):
        assert PythonFrontEnd().get_function_line_number(PY_SOURCE, "method") == 15

    def test_resolution(self, make_project):
        root = make_project(
            {
                "app/__init__.py": "",
                "app/main.py": "",
                "app/helpers.py": "",
                "core/__init__.py": "",
                "pkg/mod.py": "",
            }
        )
        fe = PythonFrontEnd()
        current = root / "app" / "main.py"
        assert fe.resolve_import_path(".helpers", current, root) == root / "app" / "helpers.py"
        assert fe.resolve_import_path(".", current, root) == root / "app" / "__init__.py"
        assert fe.resolve_import_path("..core", current, root) == root / "core" / "__init__.py"
        assert fe.resolve_import_path("pkg.mod", current, root) == root / "pkg" / "mod.py"
        assert fe.resolve_import_path("pkg.mod.Thing", current, root) == root / "pkg" / "mod.py"
        assert fe.resolve_import_path("os", current, root) is None


JAVA_SOURCE = """\
package com.example.app;

import com.example.util.Helper;
import com.example.model.*;
import static com.example.util.Helper.assist;
import java.util.List;

public class Main {
    @Override
    public String toString() {
        return "Main";
    }

    public void run(List<String> items) throws Exception {
        for (String s : items) {
            Helper.assist(s);
        }
        process(items);
    }

    private void process(List<String> items) {
        if (items.isEmpty()) {
            return;
        }
    }
}
"""


class TestJavaFrontEnd:
    def test_imports(self):
        assert JavaFrontEnd().extract_imports(JAVA_SOURCE) == [
            "com.example.util.Helper",
            "com.example.model.*",
            "com.example.util.Helper.assist",
            "java.util.List",
        ]

    def test_imports_survive_unparseable_source(self):
        source = "import a.b.C;\nclass X { void f() { int x = switch (y) { case 1 -> 2; default -> 3; }; } }\n"
        assert JavaFrontEnd().extract_imports(source) == ["a.b.C"]

    def test_unexpected_parser_error_is_logged(self, monkeypatch, caplog):
        def broken(content):
            raise RuntimeError("parser blew up")

        monkeypatch.setattr("javalang.parse.parse", broken)
        with caplog.at_level(logging.DEBUG, logger="codetree"):
            imports = JavaFrontEnd().extract_imports(JAVA_SOURCE)
        assert imports == [
            "com.example.util.Helper",
            "com.example.model.*",
            "com.example.util.Helper.assist",
            "java.util.List",
        ]
        assert "RuntimeError: parser blew up" in caplog.text

    def test_methods_and_calls(self):
        fe = JavaFrontEnd()
        functions = fe.extract_functions(JAVA_SOURCE)
        assert [f.name for f in functions] == ["toString", "run", "process"]
        assert functions[0].line == 10
        by_name = {f.name: f for f in functions}
        assert fe.extract_function_calls(by_name["run"].body) == ["assist", "process"]
        assert fe.extract_function_calls(by_name["process"].body) == ["isEmpty"]

    def test_resolution(self, make_project):
        root = make_project(
            {
                "src/com/example/app/Main.java": "package com.example.app;\n",
                "src/com/example/util/Helper.java": "package com.example.util;\npublic class Helper {}\n",
                "src/com/example/model/User.java": "package com.example.model;\npublic class User {}\n",
            }
        )
        fe = JavaFrontEnd()
        current = root / "src/com/example/app/Main.java"
        helper = root / "src/com/example/util/Helper.java"
        assert fe.resolve_import_path("com.example.util.Helper", current, root) == helper
        assert fe.resolve_import_path("com.example.util.Helper.assist", current, root) == helper
        assert fe.resolve_import_path("com.example.model.*", current, root) == root / "src/com/example/model/User.java"
        assert fe.resolve_import_path("java.util.List", current, root) is None


CPP_SOURCE = """\
#include <vector>
#include "util/helper.h"
// #include "commented.h"

namespace app {

int Widget::compute(int x) const {
    return helper(x) + std::max(x, 1);
}

Widget::Widget(int v) : value_(v), other_(0) {
    init();
}

Widget::~Widget() {
    cleanup();
}

static void free_fn() {
    compute(1);
}

}
"""


class TestCppFrontEnd:
    def test_includes(self):
        assert CppFrontEnd().extract_imports(CPP_SOURCE) == ["vector", "util/helper.h"]

    def test_functions_skip_destructors(self):
        fe = CppFrontEnd()
        functions = fe.extract_functions(CPP_SOURCE)
        assert [f.name for f in functions] == ["compute", "Widget", "free_fn"]
        by_name = {f.name: f for f in functions}
        assert fe.extract_function_calls(by_name["compute"].body) == ["helper", "max"]
        assert fe.extract_function_calls(by_name["Widget"].body) == ["init"]

    def test_resolution_prefers_path_suffix(self, make_project):
        root = make_project(
            {
                "src/main.cpp": "",
                "include/util/helper.h": "",
                "other/helper.h": "",
            }
        )
        fe = CppFrontEnd()
        current = root / "src" / "main.cpp"
        assert fe.resolve_import_path("util/helper.h", current, root) == root / "include" / "util" / "helper.h"
        assert fe.resolve_import_path("vector", current, root) is None


GO_SOURCE = """\
package main

import "fmt"
import (
    "strings"
    alias "example.com/app/util"
    "example.com/app/models"
)

func (s *Server) Start(port int) error {
    fmt.Println("start")
    s.listen(port)
    return helper(len("x"))
}

func helper(n int) int {
    v := make([]int, n)
    return process(v)
}
"""


class TestGoFrontEnd:
    def test_imports(self):
        assert GoFrontEnd().extract_imports(GO_SOURCE) == [
            "fmt",
            "strings",
            "example.com/app/util",
            "example.com/app/models",
        ]

    def test_functions_and_calls(self):
        fe = GoFrontEnd()
        functions = fe.extract_functions(GO_SOURCE)
        assert [f.name for f in functions] == ["Start", "helper"]
        assert functions[1].line == 16
        by_name = {f.name: f for f in functions}
        assert fe.extract_function_calls(by_name["Start"].body) == ["Println", "listen", "helper"]
        assert fe.extract_function_calls(by_name["helper"].body) == ["process"]

    def test_line_number(self):
        assert GoFrontEnd().get_function_line_number(GO_SOURCE, "Start") == 10

    def test_resolution(self, make_project):
        root = make_project(
            {
                "go.mod": "module example.com/app\n\ngo 1.22\n",
                "main.go": "package main\n",
                "util/util.go": "package util\n",
                "util/util_test.go": "package util\n",
                "third/models/models.go": "package models\n",
            }
        )
        fe = GoFrontEnd()
        current = root / "main.go"
        assert fe.resolve_import_path("example.com/app/util", current, root) == root / "util" / "util.go"
        assert fe.resolve_import_path("strings", current, root) is None
        assert fe.resolve_import_path("github.com/x/models", current, root) == root / "third" / "models" / "models.go"


CS_SOURCE = """\
using System;
using static MyApp.Utils.MathHelper;
using Models = MyApp.Models;

namespace MyApp
{
    public class Program
    {
        public static void Main(string[] args)
        {
            Run(args);
        }

        private static int Run(string[] a) { return Compute(a.Length); }
    }
}
"""


class TestCSharpFrontEnd:
    def test_usings(self):
        assert CSharpFrontEnd().extract_imports(CS_SOURCE) == [
            "System",
            "MyApp.Utils.MathHelper",
            "MyApp.Models",
        ]

    def test_methods(self):
        fe = CSharpFrontEnd()
        functions = fe.extract_functions(CS_SOURCE)
        assert [f.name for f in functions] == ["Main", "Run"]
        assert fe.extract_function_calls(functions[0].body) == ["Run"]
        assert fe.extract_function_calls(functions[1].body) == ["Compute"]

    def test_resolution(self, make_project):
        root = make_project(
            {
                "Program.cs": CS_SOURCE,
                "Utils/MathHelper.cs": "namespace MyApp.Utils { public static class MathHelper { } }\n",
                "Models/User.cs": "namespace MyApp.Models;\n\npublic class User { }\n",
            }
        )
        fe = CSharpFrontEnd()
        current = root / "Program.cs"
        assert fe.resolve_import_path("MyApp.Utils.MathHelper", current, root) == root / "Utils" / "MathHelper.cs"
        assert fe.resolve_import_path("MyApp.Models", current, root) == root / "Models" / "User.cs"
        assert fe.resolve_import_path("System", current, root) is None

    def test_sources_read_once_per_tree(self, make_project, monkeypatch):
        root = make_project(
            {
                "Program.cs": CS_SOURCE,
                "Utils/MathHelper.cs": "namespace MyApp.Utils { public static class MathHelper { } }\n",
                "Models/User.cs": "namespace MyApp.Models;\n\npublic class User { }\n",
            }
        )
        reads = []
        original = csharp.read_text

        def counting_read(path):
            reads.append(path)
            return original(path)

        monkeypatch.setattr(csharp, "read_text", counting_read)
        fe = CSharpFrontEnd()
        current = root / "Program.cs"
        for name in ("MyApp.Utils.MathHelper", "MyApp.Models", "System"):
            fe.resolve_import_path(name, current, root)
        assert len(reads) == 3


class TestGenericFrontEnd:
    def test_rust_functions_without_imports(self):
        source = (
            "use std::io;\n\n"
            "fn main() {\n"
            "    let v = compute(2);\n"
            '    println!("{}", v);\n'
            "}\n\n"
            "fn compute(x: i32) -> i32 {\n"
            "    helper(x) * 2\n"
            "}\n"
        )
        fe = GenericFrontEnd()
        assert fe.extract_imports(source) == []
        functions = fe.extract_functions(source)
        assert [f.name for f in functions] == ["main", "compute"]
        assert fe.extract_function_calls(functions[0].body) == ["compute"]
        assert fe.resolve_import_path("std::io", Path("main.rs"), Path(".")) is None


class TestMalformedInput:
    """Front-ends return empty results instead of raising."""

    @pytest.mark.parametrize("frontend", default_frontends(), ids=lambda fe: fe.language)
    def test_garbage(self, frontend):
        garbage = "}{ (( /* unterminated \"string\n def ( func { import"
        assert isinstance(frontend.extract_imports(garbage), list)
        assert isinstance(frontend.extract_functions(garbage), list)
        assert isinstance(frontend.extract_function_calls(garbage), list)
        assert frontend.get_function_line_number(garbage, "x(") == 0


class TestRegistry:
    def test_every_extension_has_one_frontend(self):
        mapping = frontends_by_extension(default_frontends())
        assert mapping[".tsx"].language == "javascript"
        assert mapping[".pyi"].language == "python"
        assert mapping[".hpp"].language == "cpp"
        assert mapping[".kt"].language == "generic"
        assert ".txt" not in mapping
