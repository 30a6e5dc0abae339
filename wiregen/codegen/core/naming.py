"""
Naming utilities for safe code generation.

Handles identifier sanitization, case conversion and keyword escaping.
Uniqueness is not tracked here; see namespace.py for that.
"""

import re
from typing import Iterable, List, Optional, Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def split_words(name: str) -> List[str]:
    """
    Split an IDL identifier into lower-case words.

    Handles ALLCAPS, snake_case, kebab-case, camelCase and PascalCase,
    including runs of capitals such as ``HTTPServer``.
    """
    name = _INVALID_CHARS.sub("_", str(name))
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return [part.lower() for part in name.split("_") if part]


def sanitize_identifier(name: str, fallback: str = "name") -> str:
    """Replace invalid characters so that ``name`` is a valid identifier."""
    cleaned = _INVALID_CHARS.sub("_", str(name))

    if not cleaned or not cleaned.strip("_"):
        cleaned = fallback

    # Ensure doesn't start with number
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"

    return cleaned


def to_snake_case(name: str) -> str:
    """Convert to snake_case."""
    return "_".join(split_words(name))


def to_camel_case(name: str) -> str:
    """Convert to camelCase."""
    words = split_words(name)
    if not words:
        return ""
    return words[0] + "".join(word.capitalize() for word in words[1:])


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase."""
    return "".join(word.capitalize() for word in split_words(name))


def to_screaming_snake(name: str) -> str:
    """Convert to SCREAMING_SNAKE_CASE."""
    return to_snake_case(name).upper()


_CONVERTERS = {
    NamingCase.SNAKE_CASE: to_snake_case,
    NamingCase.CAMEL_CASE: to_camel_case,
    NamingCase.PASCAL_CASE: to_pascal_case,
    NamingCase.SCREAMING_SNAKE: to_screaming_snake,
}


class NameSanitizer:
    """Converts IDL names into identifiers that are safe in the target language."""

    def __init__(
        self,
        reserved_words: Optional[Iterable[str]] = None,
        builtin_types: Optional[Iterable[str]] = None,
        suffix_on_conflict: str = "_",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Keywords that can never be used as identifiers
            builtin_types: Builtin names that generated code should not shadow
            suffix_on_conflict: Appended to names that hit a keyword
        """
        self.reserved_words: Set[str] = set(reserved_words or ())
        self.builtin_types: Set[str] = set(builtin_types or ())
        self.suffix_on_conflict = suffix_on_conflict

    def is_keyword(self, name: str) -> bool:
        return name in self.reserved_words

    def is_builtin(self, name: str) -> bool:
        return name in self.builtin_types

    def sanitize_name(
        self, name: str, target_case: NamingCase = NamingCase.SNAKE_CASE
    ) -> str:
        """
        Sanitize a name for safe use in the target language.

        Args:
            name: Original IDL name
            target_case: Desired case style

        Returns:
            Identifier in ``target_case`` that is not a keyword
        """
        converted = _CONVERTERS[target_case](name)
        converted = sanitize_identifier(converted)

        if self.is_keyword(converted):
            converted = f"{converted}{self.suffix_on_conflict}"

        return converted
