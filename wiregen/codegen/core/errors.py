"""
Exception hierarchy for the source-synthesis engine.

Every error aborts generation of the current unit. The generator restores
its state before re-raising, but drivers should still discard it.
"""

from typing import Optional


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class TemplateError(GeneratorError):
    """Raised when a template cannot be parsed or rendered against its data."""

    def __init__(self, message: str, template: Optional[str] = None):
        super().__init__(message)
        self.template = template


class FragmentSyntaxError(GeneratorError):
    """Raised when rendered text is not a valid Python fragment."""

    def __init__(
        self,
        message: str,
        source: str = "",
        lineno: Optional[int] = None,
        offset: Optional[int] = None,
    ):
        super().__init__(f"{message}:\n{source}" if source else message)
        self.source = source
        self.lineno = lineno
        self.offset = offset


class NameCollisionError(GeneratorError):
    """Raised when an identifier is claimed twice in the same scope."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"cannot reserve {name!r}: {reason}")
        self.name = name
        self.reason = reason


class DuplicateImportError(GeneratorError):
    """Raised when a literal import conflicts with a managed import."""

    def __init__(self, module: str, alias: Optional[str], existing: str):
        super().__init__(
            f"cannot import {module!r} as {alias!r}: conflicts with {existing}"
        )
        self.module = module
        self.alias = alias
        self.existing = existing


class AssemblyError(GeneratorError):
    """Internal invariant violation while assembling the final unit."""

    pass
