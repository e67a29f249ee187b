"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement and the
typed failures a generator may raise.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...logging_config import get_logger
from ...model import Model
from .errors import (
    GeneratorError,
    InvalidIdentifierError,
    InvalidModelError,
    UnsupportedTypeError,
)
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)

__all__ = [
    "CodeGenerator",
    "GenerationResult",
    "generate_code",
    "GeneratorError",
    "InvalidIdentifierError",
    "InvalidModelError",
    "UnsupportedTypeError",
]


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[Any] = None):
        """Initialize generator with optional configuration."""
        self.config = config
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'swift')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.swift')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, model: Model, basename: str) -> str:
        """
        Generate one source unit for a fully merged model.

        Args:
            model: Merged model (no class-extensions left)
            basename: Prefix for every generated type name

        Returns:
            Generated code as a string
        """
        pass

    def validate_model(self, model: Model) -> List[str]:
        """
        Check a model for structural problems.

        Returns:
            List of warning messages (empty if no issues)

        Raises:
            InvalidModelError: If class-extensions survived the merge pass
        """
        for suite in model.suites:
            for extension in suite.class_extensions:
                raise InvalidModelError(
                    f"unresolved class-extension of '{extension.extends}' in suite '{suite.name}'"
                )

        warnings = []
        for suite in model.suites:
            if not suite.classes and not suite.enumerations and not suite.commands:
                warnings.append(f"Suite '{suite.name}' declares nothing")
            for cls in suite.classes:
                if not cls.name:
                    warnings.append(f"Suite '{suite.name}' has a class without a name")
                if cls.code and len(cls.code) != 4:
                    warnings.append(
                        f"Class '{cls.name}' has a code that is not four characters: '{cls.code}'"
                    )
        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Strips trailing whitespace and collapses runs of blank lines.
        """
        formatted_lines = []
        blank_count = 0

        for line in code.split("\n"):
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
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
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(
    generator: CodeGenerator, model: Model, basename: str
) -> GenerationResult:
    """
    Generate code using the specified generator with error handling.

    Generation failures are reported through the result instead of raised.

    Args:
        generator: Code generator instance
        model: Merged model to generate code for
        basename: Type name prefix

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        warnings = generator.validate_model(model)
        code = generator.generate(model, basename)
        formatted_code = generator.format_code(code)

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "basename": basename,
            "suite_count": len(model.suites),
            "class_count": len(model.all_classes),
            "enumeration_count": len(model.all_enumerations),
            "command_count": len(model.all_commands),
            "include_count": len(model.includes),
            "uses_fallback_definitions": model.uses_fallback_definitions,
        }

        return GenerationResult(formatted_code, warnings, metadata)

    except GeneratorError as e:
        logger.error(f"Code generation failed for {basename}: {e}")
        return GenerationResult.error(str(e), exception=e)
