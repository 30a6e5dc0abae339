"""
Core code generation components.

Provides the language-agnostic engine: symbol table, import registry,
template engine, fragment collector and the base generator.
"""

from .generator import CodeGenerator, GenerationResult, generate_code
from .errors import (
    AssemblyError,
    DuplicateImportError,
    FragmentSyntaxError,
    GeneratorError,
    NameCollisionError,
    TemplateError,
)
from .fragments import Declaration, DeclarationCollector, DeclarationKind
from .imports import Importer, ImportSpec
from .namespace import Namespace
from .naming import NameSanitizer, NamingCase
from .schema import (
    ConstantSpec,
    EnumItem,
    EnumType,
    FieldSpec,
    FunctionSpec,
    ListType,
    MapType,
    Module,
    Primitive,
    PrimitiveType,
    ServiceSpec,
    SetType,
    StructKind,
    StructType,
    TypeSpec,
    TypedefType,
    convert_type_model,
)
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    # Errors
    "GeneratorError",
    "TemplateError",
    "FragmentSyntaxError",
    "NameCollisionError",
    "DuplicateImportError",
    "AssemblyError",
    # Engine components
    "Namespace",
    "Importer",
    "ImportSpec",
    "Declaration",
    "DeclarationCollector",
    "DeclarationKind",
    "TemplateEngine",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Type model
    "TypeSpec",
    "Primitive",
    "PrimitiveType",
    "ListType",
    "SetType",
    "MapType",
    "StructKind",
    "StructType",
    "FieldSpec",
    "EnumType",
    "EnumItem",
    "TypedefType",
    "ConstantSpec",
    "FunctionSpec",
    "ServiceSpec",
    "Module",
    "convert_type_model",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
]
