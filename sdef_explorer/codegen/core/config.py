"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    basename: Optional[str] = None
    output_directory: str = "."

    # Model settings
    include_hidden: bool = False
    generate_recursively: bool = False
    standard_definitions_path: Optional[str] = None

    # Output content
    generate_class_names_enum: bool = False
    generate_strongly_typed_extensions: bool = False
    generate_namespace_typealiases: bool = False
    generate_flat_typealiases: bool = False
    bundle_identifier: Optional[str] = None
    add_comments: bool = True

    # Code style settings
    indent_size: int = 4

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


_BASENAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_BUNDLE_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.-]*$")


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["swift"] = {
            "output_directory": ".",
            "include_hidden": False,
            "generate_recursively": False,
            "generate_class_names_enum": False,
            "generate_strongly_typed_extensions": False,
            "generate_namespace_typealiases": False,
            "generate_flat_typealiases": False,
            "bundle_identifier": None,
            "add_comments": True,
            "indent_size": 4,
            "custom": {
                "type_overrides": {},
            },
        }

    def get_config(
        self,
        language: str = "swift",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = json.loads(json.dumps(self._configs.get(language.lower(), {})))

        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)

        if custom_config:
            base_config.update(custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if path.suffix.lower() != ".json":
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

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = set(GeneratorConfig.__dataclass_fields__)

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

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

    def list_languages(self) -> list[str]:
        """Get list of supported languages."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str = "swift") -> list[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings/errors
        """
        warnings = []

        if config.basename is not None and not _BASENAME_PATTERN.match(config.basename):
            warnings.append(
                f"Invalid basename: {config.basename!r} "
                "(use letters, digits and underscores only)"
            )

        if config.indent_size < 1:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if config.bundle_identifier is not None and not _BUNDLE_IDENTIFIER_PATTERN.match(
            config.bundle_identifier
        ):
            warnings.append(f"Invalid bundle_identifier: {config.bundle_identifier!r}")

        if language == "swift":
            overrides = config.custom.get("type_overrides", {})
            if not isinstance(overrides, dict):
                warnings.append("type_overrides must map sdef type names to Swift types")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "swift",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)


EXAMPLE_SWIFT_CONFIG = {
    "basename": "TextEdit",
    "output_directory": "Sources/TextEditScripting",
    "generate_recursively": True,
    "generate_class_names_enum": True,
    "type_overrides": {"picture": "Data"},
}
