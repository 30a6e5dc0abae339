import ast
import sys

import pytest

from wiregen.codegen.core.errors import FragmentSyntaxError, NameCollisionError
from wiregen.codegen.core.fragments import DeclarationKind, classify, parse_fragment


def kinds(text):
    return [classify(node, text).kind for node in ast.parse(text).body]


def test_classify_each_kind():
    text = (
        "import os\n"
        "from typing import Any\n"
        "def f():\n    pass\n"
        "async def g():\n    pass\n"
        "class C:\n    pass\n"
        "MAX_SIZE = 1\n"
        "LIMIT: int = 2\n"
        "value = 3\n"
        "'docstring'\n"
        "obj.attr = 4\n"
    )
    assert kinds(text) == [
        DeclarationKind.IMPORT,
        DeclarationKind.IMPORT,
        DeclarationKind.FUNCTION,
        DeclarationKind.FUNCTION,
        DeclarationKind.TYPE,
        DeclarationKind.CONSTANT,
        DeclarationKind.CONSTANT,
        DeclarationKind.VARIABLE,
        DeclarationKind.STATEMENT,
        DeclarationKind.STATEMENT,
    ]


def test_classify_collects_unpacked_names():
    (node,) = ast.parse("a, (b, *c) = 1, (2, 3)").body
    declaration = classify(node)
    assert declaration.kind is DeclarationKind.VARIABLE
    assert declaration.names == ("a", "b", "c")


def test_mixed_case_targets_are_variables():
    (node,) = ast.parse("LIMIT = size = 1").body
    assert classify(node).kind is DeclarationKind.VARIABLE


@pytest.mark.parametrize(
    "text",
    ["if True:\n    X = 1\n", "for i in range(3):\n    pass\n", "del x\n", "x += 1\n"],
)
def test_unsupported_statements(text):
    (node,) = ast.parse(text).body
    with pytest.raises(FragmentSyntaxError) as excinfo:
        classify(node, text)
    assert excinfo.value.lineno == 1
    assert text in str(excinfo.value)


def test_parse_fragment_reports_source():
    with pytest.raises(FragmentSyntaxError) as excinfo:
        parse_fragment("def broken(:\n    pass\n")
    assert excinfo.value.source.startswith("def broken(")
    assert excinfo.value.lineno == 1


def test_accept_registers_names(plain_generator):
    declarations = plain_generator.accept("def helper():\n    return 1\n\nMAX = 2\n")
    assert [d.names for d in declarations] == [("helper",), ("MAX",)]
    assert plain_generator.namespace.is_reserved("helper")
    assert plain_generator.namespace.is_reserved("MAX")


def test_duplicate_declaration_across_fragments(plain_generator):
    plain_generator.accept("Foo = int\n")
    with pytest.raises(NameCollisionError) as excinfo:
        plain_generator.accept("Foo = int\n")
    assert excinfo.value.name == "Foo"
    assert plain_generator.source() == "Foo = int\n"


def test_duplicate_declaration_within_fragment_is_atomic(plain_generator):
    with pytest.raises(NameCollisionError):
        plain_generator.accept("A = 1\nB = 2\nA = 3\n")
    assert not plain_generator.namespace.is_reserved("A")
    assert not plain_generator.namespace.is_reserved("B")
    assert plain_generator.declarations == []


def test_failed_fragment_rolls_back_its_imports(plain_generator):
    with pytest.raises(NameCollisionError):
        plain_generator.accept("import json\nA = 1\nA = 2\n")
    assert plain_generator.importer.imports == []
    assert not plain_generator.namespace.is_reserved("json")


def test_syntax_error_leaves_state_unchanged(plain_generator):
    plain_generator.accept("X = 1\n")
    with pytest.raises(FragmentSyntaxError):
        plain_generator.accept("Y = (\n")
    assert plain_generator.source() == "X = 1\n"


def test_imports_move_to_import_block(plain_generator):
    plain_generator.accept("import json\n\ndef dump(v):\n    return json.dumps(v)\n")
    assert plain_generator.importer.import_module("json") == "json"
    code = plain_generator.source()
    assert code.startswith("import json\n")
    assert code.count("import json") == 1


def test_statements_are_kept_without_names(plain_generator):
    plain_generator.accept("'module docstring'\n")
    assert plain_generator.namespace.names == frozenset()
    assert "module docstring" in plain_generator.source()


@pytest.mark.skipif(sys.version_info < (3, 12), reason="type statements need Python 3.12")
def test_type_alias_statement_declares_a_type(plain_generator):
    text = "type Ids = list[int]\n"
    (node,) = ast.parse(text).body
    declaration = classify(node, text)
    assert declaration.kind is DeclarationKind.TYPE
    assert declaration.names == ("Ids",)

    plain_generator.accept(text)
    assert plain_generator.namespace.is_reserved("Ids")
    with pytest.raises(NameCollisionError):
        plain_generator.accept("class Ids:\n    pass\n")
