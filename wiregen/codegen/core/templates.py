"""
Template engine wrapper for code generation.

Renders one fragment of target-language source from a Jinja2 template and
a data object. Composition functions are supplied per render so that each
render can carry its own local-variable scope.
"""

import dataclasses
import math
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional

from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError
from jinja2 import UndefinedError

from ...logging_config import get_logger
from .errors import GeneratorError, TemplateError
from .naming import to_camel_case, to_pascal_case, to_snake_case

logger = get_logger(__name__)


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(
        self,
        trim_blocks: bool = True,
        lstrip_blocks: bool = True,
        keep_trailing_newline: bool = True,
    ):
        """
        Initialize template engine.

        Args:
            trim_blocks: Drop the first newline after a block tag
            lstrip_blocks: Strip whitespace before a block tag
            keep_trailing_newline: Keep the final newline of a template
        """
        self._env = Environment(
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
            keep_trailing_newline=keep_trailing_newline,
        )
        self._cache: Dict[str, Template] = {}

        # Add custom filters for code generation
        self._env.filters["snake_case"] = to_snake_case
        self._env.filters["camel_case"] = to_camel_case
        self._env.filters["pascal_case"] = to_pascal_case
        self._env.filters["indent"] = self._indent_filter
        self._env.filters["comment"] = self._comment_filter
        self._env.filters["literal"] = python_literal

    def compile(self, template_string: str) -> Template:
        """Parse a template, reusing earlier parses of the same source."""
        template = self._cache.get(template_string)
        if template is None:
            try:
                template = self._env.from_string(template_string)
            except TemplateSyntaxError as e:
                raise TemplateError(
                    f"Invalid template syntax at line {e.lineno}: {e.message}",
                    template=template_string,
                ) from e
            self._cache[template_string] = template
        return template

    def render_string(
        self,
        template_string: str,
        data: Any = None,
        functions: Optional[Dict[str, Callable[..., Any]]] = None,
    ) -> str:
        """
        Render a template string with the given data and functions.

        Args:
            template_string: Template content as string
            data: Mapping, dataclass or object whose public fields become
                template variables
            functions: Composition functions; these win over data fields
                with the same name

        Returns:
            Rendered content

        Raises:
            TemplateError: On syntax errors, undefined data, wrong-arity
                calls or invalid arguments to composition functions
        """
        template = self.compile(template_string)
        context = self._data_context(data)
        context.update(functions or {})

        try:
            return template.render(context)
        except GeneratorError:
            raise
        except UndefinedError as e:
            raise TemplateError(
                f"Undefined template data: {e.message}", template=template_string
            ) from e
        except Exception as e:
            raise TemplateError(
                f"Failed to render template: {type(e).__name__}: {e}",
                template=template_string,
            ) from e

    @staticmethod
    def _data_context(data: Any) -> Dict[str, Any]:
        """Expose the public fields of ``data`` as template variables."""
        if data is None:
            return {}

        if isinstance(data, Mapping):
            bad_keys = [key for key in data if not isinstance(key, str)]
            if bad_keys:
                raise TemplateError(f"Template data keys must be strings: {bad_keys!r}")
            return dict(data)

        if dataclasses.is_dataclass(data) and not isinstance(data, type):
            return {f.name: getattr(data, f.name) for f in dataclasses.fields(data)}

        if hasattr(data, "__dict__"):
            return {
                key: value
                for key, value in vars(data).items()
                if not key.startswith("_")
            }

        raise TemplateError(f"Unsupported template data type: {type(data).__name__}")

    # Template filters for code generation

    def _indent_filter(self, value: str, spaces: int = 4) -> str:
        """Indent all lines in a string."""
        indent = " " * spaces
        lines = str(value).split("\n")
        return "\n".join(indent + line if line.strip() else line for line in lines)

    def _comment_filter(self, value: str, style: str = "#") -> str:
        """Add comment markers to each line."""
        lines = str(value).split("\n")
        return "\n".join(f"{style} {line}" if line.strip() else line for line in lines)


def python_literal(value: Any) -> str:
    """Python literal for a constant value."""
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(python_literal(v) for v in value) + "]"
    if isinstance(value, (set, frozenset)):
        if not value:
            return "set()"
        return "{" + ", ".join(sorted(python_literal(v) for v in value)) + "}"
    if isinstance(value, dict):
        items = (f"{python_literal(k)}: {python_literal(v)}" for k, v in value.items())
        return "{" + ", ".join(items) + "}"
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "float('nan')"
        return "float('inf')" if value > 0 else "float('-inf')"
    if value is None or isinstance(value, (bool, int, float, str, bytes)):
        return repr(value)
    raise ValueError(f"Cannot render {type(value).__name__} as a literal")
