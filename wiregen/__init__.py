"""
wiregen: source synthesis backend for IDL compilers.
"""

from .codegen import (
    GenerationResult,
    GeneratorConfig,
    PythonGenerator,
    convert_type_model,
    create_python_generator,
    generate_module,
    load_config,
)
from .codegen.core.errors import (
    AssemblyError,
    DuplicateImportError,
    FragmentSyntaxError,
    GeneratorError,
    NameCollisionError,
    TemplateError,
)
from .logging_config import configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    "GenerationResult",
    "GeneratorConfig",
    "PythonGenerator",
    "convert_type_model",
    "create_python_generator",
    "generate_module",
    "load_config",
    "GeneratorError",
    "TemplateError",
    "FragmentSyntaxError",
    "NameCollisionError",
    "DuplicateImportError",
    "AssemblyError",
    "configure_logging",
    "get_logger",
    "__version__",
]
