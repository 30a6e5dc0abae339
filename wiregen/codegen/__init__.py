"""
wiregen code generation module.

Synthesizes one source module per IDL module from a resolved type model.
"""

from .core.generator import CodeGenerator, GenerationResult, generate_code
from .core.schema import Module, convert_type_model
from .core.config import GeneratorConfig, ConfigManager, load_config
from .languages.python import PythonGenerator, create_python_generator


def generate_module(model, config=None):
    """
    Generate Python source for one IDL module.

    Args:
        model: Module, or the dict accepted by convert_type_model()
        config: GeneratorConfig or dict of overrides

    Returns:
        GenerationResult with generated code
    """
    return generate_code(create_python_generator(config), model)


__all__ = [
    "CodeGenerator",
    "GenerationResult",
    "PythonGenerator",
    "Module",
    "GeneratorConfig",
    "ConfigManager",
    "convert_type_model",
    "create_python_generator",
    "generate_code",
    "generate_module",
    "load_config",
]
