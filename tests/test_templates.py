from types import SimpleNamespace

import pytest

from wiregen.codegen.core.errors import TemplateError
from wiregen.codegen.core.schema import FieldSpec, Primitive, PrimitiveType
from wiregen.codegen.core.templates import TemplateEngine, python_literal


@pytest.fixture
def engine():
    return TemplateEngine()


def test_render_mapping(engine):
    assert engine.render_string("{{ name }} = 1\n", {"name": "X"}) == "X = 1\n"


def test_render_dataclass(engine):
    field = FieldSpec(id=1, name="user_id", spec=PrimitiveType(Primitive.I64))
    assert engine.render_string("{{ id }}:{{ name | pascal_case }}", field) == "1:UserId"


def test_render_object_hides_private_attributes(engine):
    data = SimpleNamespace(name="x", _hidden=1)
    assert engine.render_string("{{ name }}", data) == "x"
    with pytest.raises(TemplateError):
        engine.render_string("{{ _hidden }}", data)


def test_functions_win_over_data(engine):
    rendered = engine.render_string(
        "{{ pick() }}", {"pick": "data"}, {"pick": lambda: "function"}
    )
    assert rendered == "function"


def test_undefined_data(engine):
    with pytest.raises(TemplateError, match="Undefined"):
        engine.render_string("{{ missing.attr }}", {})


def test_syntax_error(engine):
    with pytest.raises(TemplateError, match="syntax") as excinfo:
        engine.render_string("{% if %}")
    assert excinfo.value.template == "{% if %}"


def test_wrong_arity_call(engine):
    with pytest.raises(TemplateError):
        engine.render_string("{{ f() }}", None, {"f": lambda value: value})


def test_non_string_keys(engine):
    with pytest.raises(TemplateError):
        engine.render_string("x", {1: 2})


def test_whitespace_control(engine):
    template = "{% for name in names %}\n{{ name }} = 0\n{% endfor %}\n"
    assert engine.render_string(template, {"names": ["A", "B"]}) == "A = 0\nB = 0\n"


def test_compile_is_cached(engine):
    assert engine.compile("{{ x }}") is engine.compile("{{ x }}")


def test_filters(engine):
    assert engine.render_string("{{ 'HTTPServer' | snake_case }}") == "http_server"
    assert engine.render_string("{{ 'user_name' | camel_case }}") == "userName"
    assert engine.render_string("{{ text | indent(2) }}", {"text": "a\nb"}) == "  a\n  b"
    assert engine.render_string("{{ 'note' | comment }}") == "# note"


def test_python_literal():
    assert python_literal("it's") == '"it\'s"'
    assert python_literal([1, "a"]) == "[1, 'a']"
    assert python_literal({"k": [True]}) == "{'k': [True]}"
    assert python_literal({2, 1}) == "{1, 2}"
    assert python_literal(set()) == "set()"
    assert python_literal(None) == "None"
    with pytest.raises(ValueError):
        python_literal(object())


def test_generator_locals_are_per_render(generator):
    assert generator.render("{{ new_var('tmp') }}") == "tmp"
    assert generator.render("{{ new_var('tmp') }}") == "tmp"
    assert not generator.namespace.is_reserved("tmp")


def test_generator_locals_avoid_root_names(plain_generator):
    plain_generator.accept("value = 1\n")
    assert plain_generator.render("{{ new_var('value') }} {{ new_var('value') }}") == "value2 value3"


def test_generator_new_scope(generator):
    template = (
        "{% set a = new_scope() %}{% set b = new_scope() %}"
        "{{ a.new_name('x') }} {{ b.new_name('x') }}"
    )
    assert generator.render(template) == "x x"


def test_import_module_inside_template(plain_generator):
    rendered = plain_generator.render("{{ import_module('foo/bar') }}.{{ import_module('baz/bar') }}")
    assert rendered == "bar.bar2"
    assert len(plain_generator.importer.imports) == 2


def test_undefined_field_appends_nothing(plain_generator):
    with pytest.raises(TemplateError):
        plain_generator.declare_from_template(
            "{% set j = import_module('json') %}X = {{ j }}.dumps({{ missing }})\n", {}
        )
    assert plain_generator.declarations == []
    assert plain_generator.importer.imports == []
    assert not plain_generator.namespace.is_reserved("X")


def test_hook_value_error_becomes_template_error(generator):
    with pytest.raises(TemplateError):
        generator.render("{{ def_name(spec) }}", {"spec": PrimitiveType(Primitive.I32)})


def test_declare_from_template(plain_generator):
    plain_generator.declare_from_template("{{ name }} = 42\n", {"name": "ANSWER"})
    assert plain_generator.source() == "ANSWER = 42\n"


@pytest.mark.parametrize(
    "template, functions",
    [
        ("{{ 1 / 0 }}", None),
        ("{{ broken() }}", {"broken": lambda: None.missing}),
        ("{{ lookup() }}", {"lookup": lambda: {}["key"]}),
    ],
)
def test_any_render_failure_becomes_template_error(engine, template, functions):
    with pytest.raises(TemplateError, match="Failed to render") as excinfo:
        engine.render_string(template, None, functions)
    assert excinfo.value.__cause__ is not None


def test_python_literal_non_finite_floats():
    assert python_literal(float("inf")) == "float('inf')"
    assert python_literal(float("-inf")) == "float('-inf')"
    assert python_literal(float("nan")) == "float('nan')"
    assert python_literal([1.5, float("inf")]) == "[1.5, float('inf')]"
