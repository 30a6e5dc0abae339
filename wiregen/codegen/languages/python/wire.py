"""
Wire codec hooks.

These functions only emit source text that calls into the external codec
module (``GeneratorConfig.wire_module``); none of them encode anything.
Containers are handled by module-level helper functions that the generator
declares once per distinct container type.
"""

from typing import TYPE_CHECKING

from ...core.schema import (
    EnumType,
    ListType,
    MapType,
    Primitive,
    PrimitiveType,
    SetType,
    StructType,
    TypeSpec,
    TypedefType,
)
from .types import check_spec, def_name

if TYPE_CHECKING:
    from .generator import PythonGenerator


WIRE_TYPE_CODES = {
    Primitive.BOOL: "BOOL",
    Primitive.BYTE: "BYTE",
    Primitive.I16: "I16",
    Primitive.I32: "I32",
    Primitive.I64: "I64",
    Primitive.DOUBLE: "DOUBLE",
    Primitive.STRING: "BINARY",
    Primitive.BINARY: "BINARY",
}

# Value constructor / accessor suffix per primitive
WIRE_METHOD_SUFFIXES = {
    Primitive.BOOL: "bool",
    Primitive.BYTE: "byte",
    Primitive.I16: "i16",
    Primitive.I32: "i32",
    Primitive.I64: "i64",
    Primitive.DOUBLE: "double",
    Primitive.STRING: "binary",
    Primitive.BINARY: "binary",
}


def _resolve(spec: TypeSpec) -> TypeSpec:
    spec = check_spec(spec)
    if isinstance(spec, TypedefType):
        return spec.resolve()
    return spec


def type_code(generator: "PythonGenerator", spec: TypeSpec) -> str:
    """Expression naming the wire type tag of ``spec``."""
    wire = generator.wire_alias()
    spec = _resolve(spec)

    if isinstance(spec, PrimitiveType):
        code = WIRE_TYPE_CODES[spec.primitive]
    elif isinstance(spec, StructType):
        code = "STRUCT"
    elif isinstance(spec, EnumType):
        code = "I32"
    elif isinstance(spec, ListType):
        code = "LIST"
    elif isinstance(spec, SetType):
        code = "SET"
    elif isinstance(spec, MapType):
        code = "MAP"
    else:
        raise ValueError(f"No wire type for {spec.name}")

    return f"{wire}.TType.{code}"


def to_wire(generator: "PythonGenerator", spec: TypeSpec, value: str) -> str:
    """Expression building the wire ``Value`` of the expression ``value``."""
    resolved = _resolve(spec)

    if isinstance(resolved, PrimitiveType):
        wire = generator.wire_alias()
        suffix = WIRE_METHOD_SUFFIXES[resolved.primitive]
        if resolved.primitive == Primitive.STRING:
            value = f"({value}).encode('utf-8')"
        return f"{wire}.Value.from_{suffix}({value})"

    if isinstance(resolved, StructType):
        return f"({value}).to_wire()"

    if isinstance(resolved, EnumType):
        wire = generator.wire_alias()
        return f"{wire}.Value.from_i32(int({value}))"

    if isinstance(resolved, (ListType, SetType, MapType)):
        helper = generator.container_helper(resolved)
        return f"{helper.to_wire}({value})"

    raise ValueError(f"Cannot serialize {resolved.name}")


def from_wire(generator: "PythonGenerator", spec: TypeSpec, value: str) -> str:
    """
    Expression reading a ``spec`` back out of the wire ``Value`` ``value``.

    The expression evaluates to the value or lets the codec's decode error
    propagate.
    """
    resolved = _resolve(spec)

    if isinstance(resolved, PrimitiveType):
        suffix = WIRE_METHOD_SUFFIXES[resolved.primitive]
        expression = f"({value}).get_{suffix}()"
        if resolved.primitive == Primitive.STRING:
            expression = f"{expression}.decode('utf-8')"
        return expression

    if isinstance(resolved, StructType):
        return f"{def_name(resolved)}.from_wire({value})"

    if isinstance(resolved, EnumType):
        return f"{def_name(resolved)}(({value}).get_i32())"

    if isinstance(resolved, (ListType, SetType, MapType)):
        helper = generator.container_helper(resolved)
        return f"{helper.from_wire}({value})"

    raise ValueError(f"Cannot deserialize {resolved.name}")
