"""
Base generator interface for all code generation targets.

A generator owns the whole state of one compilation unit: the root
namespace, the import registry and the accepted declarations. Templates are
rendered, validated and merged into the unit one fragment at a time, and
the unit is serialized once at the end.
"""

import ast
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, TextIO

from ...logging_config import get_logger
from .config import GeneratorConfig
from .errors import AssemblyError, GeneratorError
from .fragments import Declaration, DeclarationCollector
from .imports import FUTURE_MODULE, Importer
from .namespace import Namespace
from .naming import NameSanitizer
from .schema import Module, StructType, convert_type_model
from .templates import TemplateEngine

logger = get_logger(__name__)


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self.sanitizer = self.create_sanitizer()

        self.namespace = Namespace(self.sanitizer)
        self.importer = Importer(self.namespace)
        self.collector = DeclarationCollector(self.namespace, self.importer)
        self.template_engine = TemplateEngine(
            trim_blocks=self.config.trim_blocks,
            lstrip_blocks=self.config.lstrip_blocks,
            keep_trailing_newline=self.config.keep_trailing_newline,
        )

        self._decls: List[ast.stmt] = []
        self._depth = 0

        self.namespace.reserve_all(self.config.extra_reserved_names)

        if self.config.future_annotations:
            self.importer.add_explicit_import(
                ast.ImportFrom(
                    module=FUTURE_MODULE,
                    names=[ast.alias(name="annotations")],
                    level=0,
                )
            )

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files."""
        pass

    def create_sanitizer(self) -> NameSanitizer:
        """Return the sanitizer holding the target language's naming rules."""
        return NameSanitizer()

    @property
    def declarations(self) -> List[ast.stmt]:
        """Accepted declarations, in acceptance order."""
        return list(self._decls)

    def validate_module(self, module: Module) -> List[str]:
        """
        Check a module for problems that do not stop generation.

        Returns:
            List of warning messages
        """
        warnings = []
        for spec in module.user_types():
            if not isinstance(spec, StructType):
                continue
            seen = set()
            for field in spec.fields:
                if field.id in seen:
                    warnings.append(f"{spec.name}: field id {field.id} is used more than once")
                seen.add(field.id)
            if spec.is_union and any(field.required for field in spec.fields):
                warnings.append(f"{spec.name}: union fields cannot be required")
        return warnings

    # Template helpers

    def template_functions(self, scope: Namespace) -> Dict[str, Callable[..., Any]]:
        """
        Functions available to every template.

        Subclasses extend this with their type and wire hooks.

        Args:
            scope: Child namespace owned by the current render
        """
        return {
            "import_module": self.importer.import_module,
            "new_var": scope.new_name,
            "new_scope": self.namespace.child,
        }

    def render(self, template: str, data: Any = None) -> str:
        """
        Render a template without accepting the result.

        Raises:
            TemplateError: If the template or its data is malformed.
        """
        with self._atomic():
            scope = self.namespace.child()
            return self.template_engine.render_string(
                template, data, self.template_functions(scope)
            )

    def accept(self, text: str) -> List[Declaration]:
        """
        Validate rendered text and merge its declarations into the unit.

        The call is atomic: on error nothing is registered or appended.

        Raises:
            FragmentSyntaxError: If the text is not valid Python.
            NameCollisionError: If it declares a name that is already taken.
            DuplicateImportError: If one of its imports conflicts.
        """
        with self._atomic():
            declarations = self.collector.collect(text)
            self._decls.extend(declaration.node for declaration in declarations)

        logger.debug(
            "Accepted fragment declaring %s",
            ", ".join(name for d in declarations for name in d.names) or "no names",
        )
        return declarations

    def declare_from_template(self, template: str, data: Any = None) -> List[Declaration]:
        """
        Render a template and include all of its declarations in the unit.

        For example::

            generator.declare_from_template(
                "{{ name }} = 42\\n", {"name": "ANSWER"}
            )

        declares ``ANSWER = 42``. The functions listed by
        ``template_functions`` are available to the template.

        Raises:
            TemplateError, FragmentSyntaxError, NameCollisionError,
            DuplicateImportError
        """
        with self._atomic():
            return self.accept(self.render(template, data))

    # State management

    def snapshot(self) -> Dict[str, Any]:
        """Capture everything a failed call must roll back."""
        return {
            "names": self.namespace.snapshot(),
            "imports": self.importer.snapshot(),
            "decl_count": len(self._decls),
        }

    def restore(self, state: Dict[str, Any]) -> None:
        self.namespace.restore(state["names"])
        self.importer.restore(state["imports"])
        del self._decls[state["decl_count"]:]

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        state = self.snapshot()
        self._depth += 1
        try:
            yield
        except Exception as e:
            self.restore(state)
            if self._depth == 1 and isinstance(e, GeneratorError):
                logger.error("Generation failed: %s", e)
            raise
        finally:
            self._depth -= 1

    # Assembly

    def build_module(self) -> ast.Module:
        """Combine the import block and all declarations into one module."""
        return ast.Module(body=self.importer.emit() + self._decls, type_ignores=[])

    def source(self) -> str:
        """
        Serialize the unit through ``ast.unparse``.

        Raises:
            AssemblyError: If the assembled unit is not valid Python. This
                indicates a bug in the generator, not in its input.
        """
        try:
            text = ast.unparse(self.build_module()) + "\n"
            ast.parse(text)
        except (SyntaxError, ValueError, TypeError, AttributeError) as e:
            raise AssemblyError(f"Assembled unit is not valid Python: {e}") from e

        logger.info(
            "Serialized unit with %d imports and %d declarations",
            len(self.importer.imports),
            len(self._decls),
        )
        return text

    def write(self, stream: TextIO) -> None:
        """Write the serialized unit to ``stream``."""
        stream.write(self.source())

    @abstractmethod
    def generate(self, module: Any) -> str:
        """
        Generate the full unit for one IDL module.

        Args:
            module: Type model of the module

        Returns:
            Generated code as a string
        """
        pass


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        code: str,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Optional[Exception] = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, module: Any) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Args:
        generator: A fresh generator; it is spent after this call
        module: Module, or the dict accepted by convert_type_model()

    Returns:
        GenerationResult with code, warnings and metadata, or the error
    """
    try:
        if isinstance(module, dict):
            module = convert_type_model(module)

        warnings = generator.validate_module(module)
        code = generator.generate(module)
    except (GeneratorError, ValueError) as e:
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "module": module.name,
        "import_count": len(generator.importer.imports),
        "declaration_count": len(generator.declarations),
    }
    return GenerationResult(code, warnings, metadata)
