"""
Python naming rules for generated modules.

Reserved words can never be declared; builtins are never handed out as
fresh names so generated code does not shadow them.
"""

import builtins
import keyword

from ...core.naming import NameSanitizer, NamingCase


# Hard keywords only; soft keywords such as ``match`` are valid identifiers
PYTHON_RESERVED_WORDS = frozenset(keyword.kwlist)

PYTHON_BUILTIN_TYPES = frozenset(
    name for name in dir(builtins) if not name.startswith("_")
)


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Python."""
    return NameSanitizer(PYTHON_RESERVED_WORDS, PYTHON_BUILTIN_TYPES)


_SANITIZER = create_python_sanitizer()


def pascal_case(name: str) -> str:
    """Class casing for an IDL name, e.g. ``user_profile`` -> ``UserProfile``."""
    return _SANITIZER.sanitize_name(name, NamingCase.PASCAL_CASE)


def snake_case(name: str) -> str:
    """Attribute and function casing, e.g. ``userId`` -> ``user_id``."""
    return _SANITIZER.sanitize_name(name, NamingCase.SNAKE_CASE)


def constant_case(name: str) -> str:
    """Constant casing, e.g. ``maxRetries`` -> ``MAX_RETRIES``."""
    return _SANITIZER.sanitize_name(name, NamingCase.SCREAMING_SNAKE)
