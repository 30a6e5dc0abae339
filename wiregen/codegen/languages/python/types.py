"""
Python type references for IDL types.

Maps type descriptors onto annotation text. Functions that may need an
import take the generator as their first argument.
"""

from typing import TYPE_CHECKING, FrozenSet, Iterator

from ...core.schema import (
    EnumType,
    FieldSpec,
    ListType,
    MapType,
    Primitive,
    PrimitiveType,
    SetType,
    StructType,
    TypeSpec,
    TypedefType,
    unwrap_typedef,
)
from ...core.templates import python_literal
from .naming import pascal_case, snake_case

if TYPE_CHECKING:
    from .generator import PythonGenerator


PYTHON_TYPE_MAP = {
    Primitive.BOOL: "bool",
    Primitive.BYTE: "int",
    Primitive.I16: "int",
    Primitive.I32: "int",
    Primitive.I64: "int",
    Primitive.DOUBLE: "float",
    Primitive.STRING: "str",
    Primitive.BINARY: "bytes",
}

USER_TYPES = (StructType, EnumType, TypedefType)


def check_spec(spec: TypeSpec) -> TypeSpec:
    if not isinstance(spec, TypeSpec):
        raise ValueError(f"Expected a type descriptor, got {type(spec).__name__}")
    return spec


def def_name(spec: TypeSpec) -> str:
    """
    Name under which a user-declared type is defined.

    The fragment defining the type must use exactly this name; it is the
    name the root namespace registers when the fragment is accepted.
    """
    if not isinstance(check_spec(spec), USER_TYPES):
        raise ValueError(f"def_name requires a user-declared type, got {spec.name}")
    return pascal_case(spec.name)


def type_name(spec: TypeSpec) -> str:
    """Short snake_case name of any type, e.g. ``map_of_string_to_i32``."""
    check_spec(spec)

    if isinstance(spec, PrimitiveType):
        return spec.primitive.value
    if isinstance(spec, ListType):
        return f"list_of_{type_name(spec.value_spec)}"
    if isinstance(spec, SetType):
        return f"set_of_{type_name(spec.value_spec)}"
    if isinstance(spec, MapType):
        return f"map_of_{type_name(spec.key_spec)}_to_{type_name(spec.value_spec)}"
    return snake_case(spec.name)


def base_reference(spec: TypeSpec) -> str:
    check_spec(spec)

    if isinstance(spec, PrimitiveType):
        return PYTHON_TYPE_MAP[spec.primitive]
    if isinstance(spec, ListType):
        return f"list[{base_reference(spec.value_spec)}]"
    if isinstance(spec, SetType):
        if not is_hashable(spec.value_spec):
            return f"list[{base_reference(spec.value_spec)}]"
        return f"set[{base_reference(spec.value_spec)}]"
    if isinstance(spec, MapType):
        key, value = base_reference(spec.key_spec), base_reference(spec.value_spec)
        if not is_hashable(spec.key_spec):
            return f"list[tuple[{key}, {value}]]"
        return f"dict[{key}, {value}]"
    return def_name(spec)


def type_reference(generator: "PythonGenerator", spec: TypeSpec, required: bool = True) -> str:
    """
    Annotation text referring to ``spec``.

    Optional references are wrapped in ``typing.Optional`` exactly once,
    importing ``typing`` under whatever alias the unit assigns it.
    """
    reference = base_reference(spec)
    if required:
        return reference

    typing_alias = generator.importer.import_module("typing")
    return f"{typing_alias}.Optional[{reference}]"


def is_struct_type(spec: TypeSpec) -> bool:
    return isinstance(unwrap_typedef(check_spec(spec)), StructType)


def is_reference_type(spec: TypeSpec) -> bool:
    """Whether values of ``spec`` are mutable containers."""
    return isinstance(unwrap_typedef(check_spec(spec)), (ListType, SetType, MapType))


def is_hashable(spec: TypeSpec, _visiting: FrozenSet[int] = frozenset()) -> bool:
    """
    Whether generated values of ``spec`` can be set members and map keys.

    Containers never are. A struct is when all of its fields are; such
    structs are declared with ``unsafe_hash=True``. Sets of unhashable
    values are represented as lists, and maps with unhashable keys as lists
    of key-value pairs.
    """
    spec = unwrap_typedef(check_spec(spec))
    if isinstance(spec, (ListType, SetType, MapType)):
        return False
    if isinstance(spec, StructType):
        if id(spec) in _visiting:
            return True
        visiting = _visiting | {id(spec)}
        return all(is_hashable(field.spec, visiting) for field in spec.fields)
    return True


def typedef_references(spec: TypeSpec) -> Iterator[TypedefType]:
    """Typedefs named directly by ``spec`` or by the containers inside it."""
    if isinstance(spec, TypedefType):
        yield spec
    elif isinstance(spec, (ListType, SetType)):
        yield from typedef_references(spec.value_spec)
    elif isinstance(spec, MapType):
        yield from typedef_references(spec.key_spec)
        yield from typedef_references(spec.value_spec)


def default_value(generator: "PythonGenerator", field: FieldSpec) -> str:
    """
    The `` = ...`` suffix of a dataclass field, or an empty string.

    Container defaults go through ``dataclasses.field(default_factory=...)``.
    """
    if field.default is not None:
        if is_reference_type(field.spec):
            dataclasses_alias = generator.importer.import_module("dataclasses")
            return (
                f" = {dataclasses_alias}.field("
                f"default_factory=lambda: {python_literal(field.default)})"
            )
        return f" = {python_literal(field.default)}"

    if not field.required:
        return " = None"

    return ""
