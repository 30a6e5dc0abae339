"""
Core type model for code generation.

Converts the front end's resolved IDL description into a normalized
internal format that templates and wire hooks can work with consistently.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
from enum import Enum


class Primitive(Enum):
    """Built-in IDL types."""

    BOOL = "bool"
    BYTE = "byte"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    DOUBLE = "double"
    STRING = "string"
    BINARY = "binary"


class StructKind(Enum):
    STRUCT = "struct"
    UNION = "union"
    EXCEPTION = "exception"


class TypeSpec:
    """Base class for every type descriptor."""

    @property
    def is_user_type(self) -> bool:
        return False


@dataclass(frozen=True)
class PrimitiveType(TypeSpec):
    primitive: Primitive

    @property
    def name(self) -> str:
        return self.primitive.value


@dataclass(frozen=True)
class ListType(TypeSpec):
    value_spec: TypeSpec

    @property
    def name(self) -> str:
        return f"list<{self.value_spec.name}>"


@dataclass(frozen=True)
class SetType(TypeSpec):
    value_spec: TypeSpec

    @property
    def name(self) -> str:
        return f"set<{self.value_spec.name}>"


@dataclass(frozen=True)
class MapType(TypeSpec):
    key_spec: TypeSpec
    value_spec: TypeSpec

    @property
    def name(self) -> str:
        return f"map<{self.key_spec.name}, {self.value_spec.name}>"


@dataclass(eq=False)
class FieldSpec:
    """A single field of a struct, union, exception or argument list."""

    id: int
    name: str
    spec: TypeSpec
    required: bool = False
    default: Any = None
    description: Optional[str] = None


@dataclass(eq=False)
class StructType(TypeSpec):
    """A user-declared struct, union or exception."""

    name: str
    fields: List[FieldSpec] = field(default_factory=list)
    kind: StructKind = StructKind.STRUCT
    description: Optional[str] = None

    @property
    def is_user_type(self) -> bool:
        return True

    @property
    def is_exception(self) -> bool:
        return self.kind == StructKind.EXCEPTION

    @property
    def is_union(self) -> bool:
        return self.kind == StructKind.UNION

    def add_field(self, field: FieldSpec) -> None:
        """Add a field to this struct."""
        self.fields.append(field)

    def get_field(self, name: str) -> Optional[FieldSpec]:
        """Get field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None


@dataclass(frozen=True)
class EnumItem:
    name: str
    value: int


@dataclass(eq=False)
class EnumType(TypeSpec):
    name: str
    items: List[EnumItem] = field(default_factory=list)
    description: Optional[str] = None

    @property
    def is_user_type(self) -> bool:
        return True


@dataclass(eq=False)
class TypedefType(TypeSpec):
    name: str
    target: Optional[TypeSpec] = None
    description: Optional[str] = None

    @property
    def is_user_type(self) -> bool:
        return True

    def resolve(self) -> TypeSpec:
        """Follow typedef chains down to the underlying type."""
        spec: TypeSpec = self
        seen = set()
        while isinstance(spec, TypedefType):
            if id(spec) in seen or spec.target is None:
                raise ValueError(f"Typedef {self.name!r} does not resolve to a type")
            seen.add(id(spec))
            spec = spec.target
        return spec


@dataclass(eq=False)
class ConstantSpec:
    name: str
    spec: TypeSpec
    value: Any


@dataclass(eq=False)
class FunctionSpec:
    name: str
    arguments: List[FieldSpec] = field(default_factory=list)
    return_spec: Optional[TypeSpec] = None
    exceptions: List[FieldSpec] = field(default_factory=list)
    oneway: bool = False


@dataclass(eq=False)
class ServiceSpec:
    name: str
    functions: List[FunctionSpec] = field(default_factory=list)
    parent: Optional[str] = None


@dataclass(eq=False)
class Module:
    """Everything declared by one IDL module."""

    name: str
    types: List[TypeSpec] = field(default_factory=list)
    constants: List[ConstantSpec] = field(default_factory=list)
    services: List[ServiceSpec] = field(default_factory=list)

    def user_types(self) -> Iterator[TypeSpec]:
        """Iterate declarable user types in source order."""
        for spec in self.types:
            if spec.is_user_type:
                yield spec

    def get_type(self, name: str) -> Optional[TypeSpec]:
        for spec in self.types:
            if spec.name == name:
                return spec
        return None


def unwrap_typedef(spec: TypeSpec) -> TypeSpec:
    if isinstance(spec, TypedefType):
        return spec.resolve()
    return spec


_PRIMITIVES = {primitive.value: PrimitiveType(primitive) for primitive in Primitive}


def convert_type_model(model: Dict[str, Any]) -> Module:
    """
    Convert the front end's JSON-compatible description into a Module.

    Type references are primitive names (``"i32"``), names of types declared
    in the same module, or ``{"list": T}``, ``{"set": T}``,
    ``{"map": [K, V]}``.

    Args:
        model: Resolved module description

    Returns:
        Module: Normalized type model

    Raises:
        ValueError: On unknown type names or declaration kinds
    """
    module = Module(name=model.get("name", "module"))
    declared: Dict[str, TypeSpec] = {}

    # First pass: create every user type so references can be resolved
    # regardless of declaration order.
    for decl in model.get("types", []):
        kind = decl.get("kind")
        name = decl["name"]

        if kind in {k.value for k in StructKind}:
            spec: TypeSpec = StructType(
                name=name, kind=StructKind(kind), description=decl.get("description")
            )
        elif kind == "enum":
            spec = EnumType(name=name, description=decl.get("description"))
        elif kind == "typedef":
            spec = TypedefType(name=name, description=decl.get("description"))
        else:
            raise ValueError(f"Unknown declaration kind {kind!r} for {name!r}")

        if name in declared:
            raise ValueError(f"Type {name!r} is declared more than once")
        declared[name] = spec
        module.types.append(spec)

    def resolve(ref: Any) -> TypeSpec:
        """Resolve one type reference."""
        if isinstance(ref, str):
            if ref in _PRIMITIVES:
                return _PRIMITIVES[ref]
            if ref in declared:
                return declared[ref]
            raise ValueError(f"Unknown type reference: {ref!r}")

        if isinstance(ref, dict) and len(ref) == 1:
            ((container, inner),) = ref.items()
            if container == "list":
                return ListType(resolve(inner))
            if container == "set":
                return SetType(resolve(inner))
            if container == "map":
                key, value = inner
                return MapType(resolve(key), resolve(value))

        raise ValueError(f"Invalid type reference: {ref!r}")

    def convert_fields(raw_fields: List[Dict[str, Any]]) -> List[FieldSpec]:
        fields = []
        for position, raw in enumerate(raw_fields, start=1):
            fields.append(
                FieldSpec(
                    id=raw.get("id", position),
                    name=raw["name"],
                    spec=resolve(raw["type"]),
                    required=raw.get("required", False),
                    default=raw.get("default"),
                    description=raw.get("description"),
                )
            )
        return fields

    # Second pass: fill in bodies.
    for decl in model.get("types", []):
        spec = declared[decl["name"]]

        if isinstance(spec, StructType):
            for field_spec in convert_fields(decl.get("fields", [])):
                spec.add_field(field_spec)

        elif isinstance(spec, EnumType):
            next_value = 0
            for item in decl.get("items", []):
                if isinstance(item, str):
                    item = {"name": item}
                value = item.get("value", next_value)
                spec.items.append(EnumItem(name=item["name"], value=value))
                next_value = value + 1

        elif isinstance(spec, TypedefType):
            spec.target = resolve(decl["target"])

    for const in model.get("constants", []):
        module.constants.append(
            ConstantSpec(
                name=const["name"], spec=resolve(const["type"]), value=const["value"]
            )
        )

    for service in model.get("services", []):
        functions = []
        for function in service.get("functions", []):
            return_ref = function.get("returns")
            functions.append(
                FunctionSpec(
                    name=function["name"],
                    arguments=convert_fields(function.get("arguments", [])),
                    return_spec=resolve(return_ref) if return_ref else None,
                    exceptions=convert_fields(function.get("exceptions", [])),
                    oneway=function.get("oneway", False),
                )
            )
        module.services.append(
            ServiceSpec(
                name=service["name"], functions=functions, parent=service.get("parent")
            )
        )

    return module

