"""
Import registry for generated code.

Tracks every module the generated unit refers to, hands out aliases that
cannot clash with declared names, and emits one consolidated import block.
"""

import ast
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from ...logging_config import get_logger
from .errors import DuplicateImportError
from .namespace import Namespace
from .naming import sanitize_identifier

logger = get_logger(__name__)

FUTURE_MODULE = "__future__"


@dataclass(frozen=True)
class ImportSpec:
    """One imported module, or one name imported from a module."""

    module: str
    asname: Optional[str] = None
    name: Optional[str] = None  # set for ``from module import name``

    @property
    def bound(self) -> str:
        """The local name this import binds."""
        if self.asname:
            return self.asname
        if self.name is not None:
            return self.name
        return self.module.split(".")[0]

    @property
    def reference(self) -> str:
        """The expression that names the imported module or object."""
        if self.asname or self.is_from_import:
            return self.bound
        return self.module

    @property
    def is_from_import(self) -> bool:
        return self.name is not None

    def describe(self) -> str:
        if self.is_from_import:
            target = f"from {self.module} import {self.name}"
        else:
            target = f"import {self.module}"
        return f"{target} as {self.asname}" if self.asname else target


def normalize_module_path(path: str) -> str:
    """Turn ``foo/bar`` or ``foo.bar`` into the dotted module path ``foo.bar``."""
    parts = [part for part in str(path).replace("/", ".").split(".") if part]
    if not parts:
        raise ValueError(f"invalid module path: {path!r}")
    return ".".join(parts)


class Importer:
    """Registry of imports for one compilation unit."""

    def __init__(self, namespace: Namespace):
        self.namespace = namespace
        self._modules: Dict[str, ImportSpec] = {}
        self._from_imports: Dict[Tuple[str, str], ImportSpec] = {}
        self._bindings: Dict[str, ImportSpec] = {}

    @property
    def imports(self) -> List[ImportSpec]:
        """All registered imports, in insertion order."""
        return list(self._modules.values()) + list(self._from_imports.values())

    def import_module(self, path: str) -> str:
        """
        Import the module at ``path`` and return the name to refer to it by.

        Repeated calls with the same path return the same alias. New aliases
        come from the trailing path component and get a numeric suffix if
        that name is taken.
        """
        module = normalize_module_path(path)

        existing = self._modules.get(module)
        if existing is not None:
            return existing.reference

        base = sanitize_identifier(module.rsplit(".", 1)[-1].lower(), fallback="module")
        alias = self.namespace.new_name(base)

        spec = ImportSpec(module=module, asname=None if alias == module else alias)
        self._register(spec)
        logger.debug("Allocated alias %r for module %r", alias, module)
        return alias

    def add_explicit_import(self, node: Union[ast.Import, ast.ImportFrom]) -> None:
        """
        Reconcile an import statement written literally in a fragment.

        Raises:
            DuplicateImportError: If the import disagrees with an alias
                already handed out, or cannot be reconciled at all.
            NameCollisionError: If the bound name is a declared identifier.
        """
        if isinstance(node, ast.Import):
            for alias in node.names:
                self._add_literal(ImportSpec(module=alias.name, asname=alias.asname))
            return

        module = node.module or ""
        if node.level:
            raise DuplicateImportError(
                "." * node.level + module, None, "relative imports are not supported"
            )

        for alias in node.names:
            if alias.name == "*":
                raise DuplicateImportError(module, "*", "star imports are not supported")
            self._add_literal(
                ImportSpec(module=module, asname=alias.asname, name=alias.name)
            )

    def _add_literal(self, spec: ImportSpec) -> None:
        if spec.is_from_import:
            existing = self._from_imports.get((spec.module, spec.name))
        else:
            existing = self._modules.get(spec.module)

        if existing is not None:
            if existing.bound == spec.bound:
                return
            raise DuplicateImportError(
                spec.module, spec.bound, f"existing alias {existing.bound!r}"
            )

        if spec.module == FUTURE_MODULE:
            self._from_imports[(spec.module, spec.name)] = spec
            return

        other = self._bindings.get(spec.bound)
        if other is not None:
            if self._shares_package_binding(spec, other):
                self._modules[spec.module] = spec
                return
            raise DuplicateImportError(spec.module, spec.bound, other.describe())

        self.namespace.reserve(spec.bound)
        self._register(spec)
        logger.debug("Registered explicit import: %s", spec.describe())

    @staticmethod
    def _shares_package_binding(spec: ImportSpec, other: ImportSpec) -> bool:
        # ``import a.b`` and ``import a.c`` both bind ``a``.
        return not (
            spec.asname
            or other.asname
            or spec.is_from_import
            or other.is_from_import
        )

    def _register(self, spec: ImportSpec) -> None:
        if spec.is_from_import:
            self._from_imports[(spec.module, spec.name)] = spec
        else:
            self._modules[spec.module] = spec
        self._bindings[spec.bound] = spec

    def emit(self) -> List[ast.stmt]:
        """
        Build the consolidated import block.

        ``__future__`` imports come first, then entries sorted by module
        path. Names imported from one module share a single statement.
        """
        statements: List[Tuple[Tuple[bool, str, int], ast.stmt]] = []

        for spec in self._modules.values():
            statements.append(
                (
                    (spec.module != FUTURE_MODULE, spec.module, 0),
                    ast.Import(names=[ast.alias(name=spec.module, asname=spec.asname)]),
                )
            )

        grouped: Dict[str, List[ImportSpec]] = {}
        for spec in self._from_imports.values():
            grouped.setdefault(spec.module, []).append(spec)

        for module, specs in grouped.items():
            names = [
                ast.alias(name=spec.name, asname=spec.asname)
                for spec in sorted(specs, key=lambda s: (s.name, s.asname or ""))
            ]
            statements.append(
                (
                    (module != FUTURE_MODULE, module, 1),
                    ast.ImportFrom(module=module, names=names, level=0),
                )
            )

        statements.sort(key=lambda item: item[0])
        return [statement for _, statement in statements]

    def emit_source(self) -> str:
        """Render the import block as source text."""
        return ast.unparse(ast.Module(body=self.emit(), type_ignores=[]))

    def snapshot(self):
        return (dict(self._modules), dict(self._from_imports), dict(self._bindings))

    def restore(self, state) -> None:
        modules, from_imports, bindings = state
        self._modules = dict(modules)
        self._from_imports = dict(from_imports)
        self._bindings = dict(bindings)
