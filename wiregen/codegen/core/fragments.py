"""
Fragment validation and declaration collection.

Every rendered fragment is parsed as a standalone Python module. Its
top-level statements are classified, the names they introduce are claimed
in the root namespace, and literal imports are handed to the importer.
"""

import ast
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, Tuple

from ...logging_config import get_logger
from .errors import FragmentSyntaxError, GeneratorError, NameCollisionError
from .imports import Importer
from .namespace import Namespace

logger = get_logger(__name__)

# ``type X = ...`` statements, available from Python 3.12
_TYPE_ALIAS = getattr(ast, "TypeAlias", None)


class DeclarationKind(Enum):
    """Kinds of top-level statement a fragment may contain."""

    IMPORT = "import"
    FUNCTION = "function"
    TYPE = "type"
    CONSTANT = "constant"
    VARIABLE = "variable"
    STATEMENT = "statement"


@dataclass(frozen=True)
class Declaration:
    """One top-level statement of an accepted fragment."""

    kind: DeclarationKind
    node: ast.stmt
    names: Tuple[str, ...] = ()


def _target_names(target: ast.expr) -> Iterator[str]:
    if isinstance(target, ast.Name):
        yield target.id
    elif isinstance(target, (ast.Tuple, ast.List)):
        for element in target.elts:
            yield from _target_names(element)
    elif isinstance(target, ast.Starred):
        yield from _target_names(target.value)
    # Attribute and subscript targets bind no new names.


def _is_constant_name(name: str) -> bool:
    return name.isupper()


def classify(node: ast.stmt, source: str = "") -> Declaration:
    """
    Classify one top-level statement.

    Raises:
        FragmentSyntaxError: For statements that are not declarations.
    """
    if isinstance(node, (ast.Import, ast.ImportFrom)):
        return Declaration(DeclarationKind.IMPORT, node)

    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        return Declaration(DeclarationKind.FUNCTION, node, (node.name,))

    if isinstance(node, ast.ClassDef):
        return Declaration(DeclarationKind.TYPE, node, (node.name,))

    if _TYPE_ALIAS is not None and isinstance(node, _TYPE_ALIAS):
        return Declaration(DeclarationKind.TYPE, node, (node.name.id,))

    if isinstance(node, (ast.Assign, ast.AnnAssign)):
        targets = node.targets if isinstance(node, ast.Assign) else [node.target]
        names = tuple(name for target in targets for name in _target_names(target))
        if not names:
            return Declaration(DeclarationKind.STATEMENT, node)
        if all(_is_constant_name(name) for name in names):
            return Declaration(DeclarationKind.CONSTANT, node, names)
        return Declaration(DeclarationKind.VARIABLE, node, names)

    if isinstance(node, ast.Expr):
        return Declaration(DeclarationKind.STATEMENT, node)

    raise FragmentSyntaxError(
        f"unsupported top-level statement {type(node).__name__} at line {node.lineno}",
        source=source,
        lineno=node.lineno,
        offset=node.col_offset,
    )


def parse_fragment(text: str) -> ast.Module:
    """
    Parse rendered text as a standalone Python module.

    Raises:
        FragmentSyntaxError: If the text is not valid Python.
    """
    try:
        return ast.parse(text)
    except SyntaxError as e:
        raise FragmentSyntaxError(
            f"could not parse generated code: {e.msg} (line {e.lineno})",
            source=text,
            lineno=e.lineno,
            offset=e.offset,
        ) from e


class DeclarationCollector:
    """Registers the declarations of accepted fragments."""

    def __init__(self, namespace: Namespace, importer: Importer):
        self.namespace = namespace
        self.importer = importer
        self._handlers: Dict[DeclarationKind, Callable[[Declaration], None]] = {
            DeclarationKind.IMPORT: self._record_import,
            DeclarationKind.FUNCTION: self._reserve_names,
            DeclarationKind.TYPE: self._reserve_names,
            DeclarationKind.CONSTANT: self._reserve_names,
            DeclarationKind.VARIABLE: self._reserve_names,
            DeclarationKind.STATEMENT: self._record_statement,
        }

        missing = set(DeclarationKind) - set(self._handlers)
        if missing:
            raise GeneratorError(f"No handler for declaration kinds: {sorted(k.value for k in missing)}")

    def collect(self, text: str) -> List[Declaration]:
        """
        Validate ``text`` and register everything it declares.

        Returns:
            The fragment's declarations in encounter order, without its
            imports (those move into the unit's import block).

        Raises:
            FragmentSyntaxError: If the fragment is invalid.
            NameCollisionError: If a declared name is already taken.
            DuplicateImportError: If a literal import conflicts.
        """
        module = parse_fragment(text)

        # Classify everything before touching any state.
        declarations = [classify(node, text) for node in module.body]

        for declaration in declarations:
            self._handlers[declaration.kind](declaration)

        return [d for d in declarations if d.kind is not DeclarationKind.IMPORT]

    def _record_import(self, declaration: Declaration) -> None:
        self.importer.add_explicit_import(declaration.node)

    def _reserve_names(self, declaration: Declaration) -> None:
        for name in declaration.names:
            try:
                self.namespace.reserve(name)
            except NameCollisionError as e:
                raise NameCollisionError(
                    name, f"could not declare {declaration.kind.value}: {e.reason}"
                ) from e

    def _record_statement(self, declaration: Declaration) -> None:
        logger.debug("Statement without declared names at line %d", declaration.node.lineno)
