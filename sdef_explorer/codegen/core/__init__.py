"""
Core code generation components.

Provides base classes and utilities used by all language generators.
"""

from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .errors import GeneratorError, InvalidIdentifierError, InvalidModelError, UnsupportedTypeError
from .generator import CodeGenerator, GenerationResult, generate_code
from .naming import NameSanitizer, NamingCase, decode_four_char_code, encode_four_char_code
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    # Errors
    "GeneratorError",
    "InvalidIdentifierError",
    "InvalidModelError",
    "UnsupportedTypeError",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    "encode_four_char_code",
    "decode_four_char_code",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
