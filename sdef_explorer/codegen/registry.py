"""
Generator lookup for the available target languages.

Maps language names and aliases to generator classes and builds configured
generator instances.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from .core.config import GeneratorConfig, load_config
from .core.generator import CodeGenerator

# Alternative names accepted for a language
ALIASES = {"sw": "swift"}


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


def _generators() -> Dict[str, Type[CodeGenerator]]:
    from .languages.swift import SwiftGenerator

    return {"swift": SwiftGenerator}


def resolve_language(language: str) -> str:
    """
    Primary name of a language or alias.

    Raises:
        RegistryError: If language not found
    """
    language_key = language.lower()
    language_key = ALIASES.get(language_key, language_key)
    if language_key not in _generators():
        raise RegistryError(
            f"No generator registered for language: {language}. "
            f"Available: {', '.join(list_supported_languages())}"
        )
    return language_key


def get_generator(
    language: str,
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> CodeGenerator:
    """
    Create generator instance for language.

    Args:
        language: Language name or alias
        config: Configuration as GeneratorConfig, dict, or file path

    Raises:
        RegistryError: If the language is unknown or the configuration fails to load
    """
    language_key = resolve_language(language)

    try:
        if isinstance(config, GeneratorConfig):
            final_config = config
        elif isinstance(config, (str, Path)):
            final_config = load_config(language_key, config_file=config)
        elif isinstance(config, dict):
            final_config = load_config(language_key, custom_config=config)
        elif config is None:
            final_config = load_config(language_key)
        else:
            raise RegistryError(f"Invalid config type: {type(config)}")

        return _generators()[language_key](final_config)

    except RegistryError:
        raise
    except Exception as e:
        raise RegistryError(f"Failed to create {language} generator: {e}") from e


def list_supported_languages() -> List[str]:
    return sorted(_generators())


def is_language_supported(language: str) -> bool:
    language_key = language.lower()
    return ALIASES.get(language_key, language_key) in _generators()


def get_language_info(language: str) -> Dict[str, Any]:
    """Get information about a supported language."""
    language_key = resolve_language(language)
    generator = get_generator(language_key)

    return {
        "name": generator.language_name,
        "class": type(generator).__name__,
        "file_extension": generator.file_extension,
        "aliases": sorted(alias for alias, target in ALIASES.items() if target == language_key),
        "module": type(generator).__module__,
    }
