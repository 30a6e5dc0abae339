"""
Python code generator implementation.

Generates one Python module per IDL module: dataclasses for structs,
unions and exceptions, IntEnums, type aliases, constants, service argument
and result structs, and helpers for container serialization.
"""

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ....logging_config import get_logger
from ...core.config import GeneratorConfig, load_config
from ...core.generator import CodeGenerator
from ...core.namespace import Namespace
from ...core.naming import NameSanitizer
from ...core.schema import (
    EnumType,
    FieldSpec,
    FunctionSpec,
    ListType,
    MapType,
    Module,
    ServiceSpec,
    SetType,
    StructKind,
    StructType,
    TypeSpec,
    TypedefType,
    convert_type_model,
)
from .naming import constant_case, create_python_sanitizer, pascal_case, snake_case
from .templates import (
    CONSTANT_TEMPLATE,
    ENUM_TEMPLATE,
    LIST_HELPER_TEMPLATE,
    MAP_HELPER_TEMPLATE,
    SET_HELPER_TEMPLATE,
    STRUCT_TEMPLATE,
    TYPEDEF_TEMPLATE,
)
from .types import (
    def_name,
    default_value,
    is_hashable,
    is_reference_type,
    is_struct_type,
    type_name,
    type_reference,
    typedef_references,
)
from .wire import from_wire, to_wire, type_code

logger = get_logger(__name__)


@dataclass(frozen=True)
class ContainerHelper:
    """Names of the generated serialization helpers for one container type."""

    to_wire: str
    from_wire: str


@dataclass(frozen=True)
class StructMember:
    """One field of a generated dataclass, as it appears in the class body."""

    field: FieldSpec
    attribute: str
    annotation: str
    default: str


DECLARATION_TEMPLATES = {
    StructType: STRUCT_TEMPLATE,
    EnumType: ENUM_TEMPLATE,
    TypedefType: TYPEDEF_TEMPLATE,
}

HELPER_TEMPLATES = {
    ListType: LIST_HELPER_TEMPLATE,
    SetType: SET_HELPER_TEMPLATE,
    MapType: MAP_HELPER_TEMPLATE,
}

# Names every generated struct defines in its class body
STRUCT_METHODS = ("to_wire", "from_wire")


class PythonGenerator(CodeGenerator):
    """Code generator for Python modules backed by an external wire codec."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Python generator with configuration."""
        super().__init__(config)

        # Container helpers already declared, keyed by type_name()
        self._helpers: Dict[str, ContainerHelper] = {}

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def create_sanitizer(self) -> NameSanitizer:
        return create_python_sanitizer()

    def wire_alias(self) -> str:
        """Name under which the unit refers to the wire codec module."""
        return self.importer.import_module(self.config.wire_module)

    def template_functions(self, scope: Namespace) -> Dict[str, Callable[..., Any]]:
        functions = super().template_functions(scope)
        functions.update(
            {
                "pascal_case": pascal_case,
                "snake_case": snake_case,
                "constant_case": constant_case,
                "def_name": def_name,
                "type_name": type_name,
                "type_reference": partial(type_reference, self),
                "type_code": partial(type_code, self),
                "to_wire": partial(to_wire, self),
                "from_wire": partial(from_wire, self),
                "default_value": partial(default_value, self),
                "struct_members": self.struct_members,
                "is_hashable": is_hashable,
                "is_struct_type": is_struct_type,
                "is_reference_type": is_reference_type,
                "wire_module": self.config.wire_module,
            }
        )
        return functions

    def container_helper(self, spec: Union[ListType, SetType, MapType]) -> ContainerHelper:
        """
        Return the helpers serializing ``spec``, declaring them on first use.

        Helpers for nested containers are declared before the helpers that
        call them.
        """
        key = type_name(spec)
        helper = self._helpers.get(key)
        if helper is not None:
            return helper

        prefix = self.config.helper_prefix
        helper = ContainerHelper(
            to_wire=f"{prefix}{key}_to_wire", from_wire=f"{prefix}{key}_from_wire"
        )
        self.declare_from_template(
            HELPER_TEMPLATES[type(spec)],
            {
                "spec": spec,
                "to_name": helper.to_wire,
                "from_name": helper.from_wire,
                "hashable": is_hashable(
                    spec.key_spec if isinstance(spec, MapType) else spec.value_spec
                ),
            },
        )
        self._helpers[key] = helper
        logger.debug("Declared container helpers for %s", spec.name)
        return helper

    def struct_members(self, spec: StructType) -> List[StructMember]:
        """
        Attribute names, annotations and defaults for the fields of ``spec``.

        Annotations and defaults are rendered first, so the aliases they
        import are bound before attribute names are chosen. An attribute
        may not shadow a generated method or any top-level name; it gets
        trailing underscores until it is free.
        """
        rendered = [
            (field, type_reference(self, field.spec, field.required), default_value(self, field))
            for field in spec.fields
        ]

        body = self.namespace.child()
        for method in STRUCT_METHODS:
            if not body.is_reserved(method):
                body.reserve(method)

        members = []
        for field, annotation, default in rendered:
            attribute = snake_case(field.name)
            while body.is_reserved(attribute):
                attribute += "_"
            body.reserve(attribute)
            members.append(StructMember(field, attribute, annotation, default))
        return members

    def snapshot(self) -> Dict[str, Any]:
        state = super().snapshot()
        state["helpers"] = dict(self._helpers)
        return state

    def restore(self, state: Dict[str, Any]) -> None:
        super().restore(state)
        self._helpers = dict(state["helpers"])

    # Module generation

    def declare_type(self, spec: TypeSpec) -> None:
        """Declare one user type using its built-in template."""
        template = DECLARATION_TEMPLATES.get(type(spec))
        if template is None:
            raise ValueError(f"{spec.name} is not a declarable user type")
        self.declare_from_template(template, {"spec": spec})

    def declare_service(self, service: ServiceSpec) -> None:
        """Declare the argument and result structs of every service function."""
        for function in service.functions:
            self.declare_type(self._args_struct(service, function))
            if not function.oneway:
                self.declare_type(self._result_struct(service, function))

    @staticmethod
    def _args_struct(service: ServiceSpec, function: FunctionSpec) -> StructType:
        return StructType(
            name=f"{service.name}_{function.name}_args",
            fields=list(function.arguments),
            description=f"Arguments of {service.name}.{function.name}.",
        )

    @staticmethod
    def _result_struct(service: ServiceSpec, function: FunctionSpec) -> StructType:
        fields = []
        if function.return_spec is not None:
            fields.append(FieldSpec(id=0, name="success", spec=function.return_spec))
        for exception in function.exceptions:
            fields.append(
                FieldSpec(id=exception.id, name=exception.name, spec=exception.spec)
            )
        return StructType(
            name=f"{service.name}_{function.name}_result",
            fields=fields,
            kind=StructKind.STRUCT,
            description=f"Result of {service.name}.{function.name}.",
        )

    def generate(self, module: Union[Module, Dict[str, Any]]) -> str:
        """
        Generate the complete unit for one IDL module.

        Structs and enums come first in source order, then typedefs, then
        constants, then service structs. A typedef is a runtime assignment,
        so it follows every class and every typedef its target names.
        """
        if isinstance(module, dict):
            module = convert_type_model(module)

        logger.info("Generating Python code for module %s", module.name)

        typedefs = []
        for spec in module.user_types():
            if isinstance(spec, TypedefType):
                typedefs.append(spec)
            else:
                self.declare_type(spec)

        for spec in typedef_order(typedefs):
            self.declare_type(spec)

        for const in module.constants:
            self.declare_from_template(CONSTANT_TEMPLATE, {"const": const})

        for service in module.services:
            self.declare_service(service)

        return self.source()


def typedef_order(typedefs: Sequence[TypedefType]) -> List[TypedefType]:
    """Order ``typedefs`` so each one follows the typedefs its target names."""
    members = {id(spec) for spec in typedefs}
    visited = set()
    ordered: List[TypedefType] = []

    def visit(spec: TypedefType) -> None:
        if id(spec) in visited:
            return
        visited.add(id(spec))
        for dependency in typedef_references(spec.target):
            if id(dependency) in members:
                visit(dependency)
        ordered.append(spec)

    for spec in typedefs:
        visit(spec)
    return ordered


def create_python_generator(
    config: Optional[Union[GeneratorConfig, Dict[str, Any]]] = None,
) -> PythonGenerator:
    """
    Create a Python generator.

    Args:
        config: GeneratorConfig instance or dict of overrides
    """
    if isinstance(config, GeneratorConfig):
        return PythonGenerator(config)
    return PythonGenerator(load_config(custom_config=config))
