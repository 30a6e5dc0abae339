"""
Python code generator module.

Generates dataclasses and wire serialization code from IDL type models.
"""

from .generator import ContainerHelper, PythonGenerator, create_python_generator
from .naming import create_python_sanitizer

__all__ = [
    "PythonGenerator",
    "ContainerHelper",
    "create_python_generator",
    "create_python_sanitizer",
]
