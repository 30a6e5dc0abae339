"""
Symbol table for generated code.

A Namespace records identifiers already claimed in the output unit. The
root namespace covers the whole module; child namespaces cover a single
function body and see every name claimed by their ancestors.
"""

from typing import AbstractSet, FrozenSet, Iterable, Optional, Set

from ...logging_config import get_logger
from .errors import NameCollisionError
from .naming import NameSanitizer, sanitize_identifier

logger = get_logger(__name__)


class Namespace:
    """A scope of claimed identifiers."""

    def __init__(
        self,
        sanitizer: Optional[NameSanitizer] = None,
        parent: Optional["Namespace"] = None,
    ):
        self.sanitizer = sanitizer or (parent.sanitizer if parent else NameSanitizer())
        self.parent = parent
        self._names: Set[str] = set()

    @property
    def names(self) -> AbstractSet[str]:
        """Names claimed directly in this scope."""
        return frozenset(self._names)

    @property
    def depth(self) -> int:
        return 0 if self.parent is None else self.parent.depth + 1

    def describe(self) -> str:
        return "root scope" if self.parent is None else f"child scope (depth {self.depth})"

    def child(self) -> "Namespace":
        """Return a nested scope. Its reservations are invisible to this one."""
        return Namespace(parent=self)

    def is_reserved(self, name: str) -> bool:
        """Whether ``name`` is claimed here or in any ancestor."""
        scope: Optional[Namespace] = self
        while scope is not None:
            if name in scope._names:
                return True
            scope = scope.parent
        return False

    def reserve(self, name: str) -> None:
        """
        Claim ``name`` in this scope.

        Raises:
            NameCollisionError: If the name is a keyword or is already claimed
                here or by an ancestor.
        """
        if self.sanitizer.is_keyword(name):
            raise NameCollisionError(name, "it is a reserved keyword")

        if name in self._names:
            raise NameCollisionError(name, f"already declared in the {self.describe()}")

        if self.parent is not None and self.parent.is_reserved(name):
            raise NameCollisionError(name, "already declared in an enclosing scope")

        self._names.add(name)
        logger.debug("Reserved %r in %s", name, self.describe())

    def _is_available(self, name: str) -> bool:
        return not (
            self.sanitizer.is_keyword(name)
            or self.sanitizer.is_builtin(name)
            or self.is_reserved(name)
        )

    def new_name(self, preferred: str) -> str:
        """
        Reserve and return a fresh name, preferring ``preferred``.

        Falls back to ``preferred2``, ``preferred3`` and so on. Keywords and
        builtins are never returned. Never raises.
        """
        base = sanitize_identifier(preferred)
        name = base
        counter = 2
        while not self._is_available(name):
            name = f"{base}{counter}"
            counter += 1

        self._names.add(name)
        return name

    def reserve_all(self, names: Iterable[str]) -> None:
        for name in names:
            self.reserve(name)

    def snapshot(self) -> FrozenSet[str]:
        return frozenset(self._names)

    def restore(self, state: FrozenSet[str]) -> None:
        self._names = set(state)
