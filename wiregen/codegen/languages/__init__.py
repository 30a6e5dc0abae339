"""
Language-specific code generators.

Only Python output is implemented.
"""

from .python import PythonGenerator, create_python_generator

__all__ = ["PythonGenerator", "create_python_generator"]
