"""
Generator settings.

Settings come from three layers, later ones winning: dataclass defaults, an
optional JSON file, and explicit overrides. Keys the dataclass does not know
are kept in ``GeneratorConfig.custom``.
"""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, fields, asdict

from ...logging_config import get_logger
from .errors import GeneratorError

logger = get_logger(__name__)


class ConfigError(GeneratorError):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Configuration for one generator instance."""

    # Module every generated wire call goes through
    wire_module: str = "thriftrw.wire"

    # Emit ``from __future__ import annotations`` so annotations may
    # reference declarations that come later in the unit
    future_annotations: bool = True

    # Jinja whitespace handling
    trim_blocks: bool = True
    lstrip_blocks: bool = True
    keep_trailing_newline: bool = True

    # Prefix for generated container helpers
    helper_prefix: str = "_"

    # Names claimed in the root scope before any fragment is accepted
    extra_reserved_names: List[str] = field(default_factory=list)

    # Custom settings
    custom: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        merged = asdict(GeneratorConfig())
        for layer in (
            self._load_config_file(config_file) if config_file else None,
            custom_config,
        ):
            merged.update(layer or {})

        config = self._dict_to_config(merged)

        problems = self.validate_config(config)
        if problems:
            raise ConfigError("Invalid configuration: " + "; ".join(problems))

        return config

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration from %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Build a GeneratorConfig, moving unknown keys into ``custom``."""
        known = {f.name for f in fields(GeneratorConfig)}
        settings = {key: value for key, value in config_dict.items() if key in known}
        extras = {key: value for key, value in config_dict.items() if key not in known}

        if extras:
            settings["custom"] = {**settings.get("custom", {}), **extras}

        return GeneratorConfig(**settings)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        custom = config_dict.pop("custom")
        config_dict.update(custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors
        """
        problems = []

        parts = config.wire_module.replace("/", ".").split(".")
        if not all(part.isidentifier() for part in parts):
            problems.append(f"Invalid wire_module: {config.wire_module!r}")

        if config.helper_prefix and not config.helper_prefix.isidentifier():
            problems.append(f"Invalid helper_prefix: {config.helper_prefix!r}")

        for name in config.extra_reserved_names:
            if not isinstance(name, str) or not name.isidentifier():
                problems.append(f"Invalid reserved name: {name!r}")

        return problems


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    return ConfigManager().get_config(custom_config, config_file)


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "wire_module": "thriftrw.wire",
    "future_annotations": True,
    "helper_prefix": "_",
    "extra_reserved_names": ["main"],
}
