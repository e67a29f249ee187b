"""
sdef Explorer Code Generation Module

Generates Swift ScriptingBridge bindings from merged sdef models.
"""

import dataclasses
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..logging_config import get_logger
from ..model import Model
from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.generator import CodeGenerator, GenerationResult, generate_code
from .registry import get_generator, list_supported_languages

logger = get_logger(__name__)

ConfigLike = Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]]


def generate_from_model(
    model: Model, basename: str, language: str = "swift", config: ConfigLike = None
) -> GenerationResult:
    """
    Generate code from a merged model.

    Args:
        model: Output of :func:`sdef_explorer.pipeline.build_model`
        basename: Prefix for every generated type name
        language: Target language name
        config: Generator configuration, dict or path

    Returns:
        GenerationResult with generated code
    """
    generator = get_generator(language, config)
    return generate_code(generator, model, basename)


def include_config(config: GeneratorConfig) -> GeneratorConfig:
    """Configuration for an included document: no flat aliases, no application function."""
    return dataclasses.replace(config, generate_flat_typealiases=False, bundle_identifier=None)


def generate_includes(
    model: Model, language: str = "swift", config: ConfigLike = None
) -> Dict[str, GenerationResult]:
    """Generate one result per included document, keyed by the include's basename."""
    base_config = get_generator(language, config).config
    generator = get_generator(language, include_config(base_config))
    return {
        include.basename: generate_code(generator, include.model, include.basename)
        for include in model.includes
    }


def generate_from_file(
    file_path: Union[str, Path],
    basename: Optional[str] = None,
    language: str = "swift",
    config: ConfigLike = None,
    include_hidden: bool = False,
    standard_definitions_path: Optional[Union[str, Path]] = None,
) -> GenerationResult:
    """
    Load, merge and generate an sdef file in one step.

    The basename defaults to the file name without its extension.
    """
    from ..pipeline import load_model

    model = load_model(
        file_path=file_path,
        include_hidden=include_hidden,
        standard_definitions_path=standard_definitions_path,
    )
    return generate_from_model(model, basename or Path(file_path).stem, language, config)


def quick_generate(sdef_xml: Union[str, bytes], basename: str, language: str = "swift", **options) -> str:
    """
    Quick code generation from sdef XML text.

    Args:
        sdef_xml: sdef document as text or bytes
        basename: Type name prefix
        language: Target language
        **options: Generator options

    Returns:
        Generated code string
    """
    from ..pipeline import build_model
    from ..utils import parse_sdef_bytes

    if isinstance(sdef_xml, str):
        sdef_xml = sdef_xml.encode("utf-8")

    model = build_model(
        parse_sdef_bytes(sdef_xml),
        include_hidden=options.get("include_hidden", False),
        standard_definitions_path=options.get("standard_definitions_path"),
    )
    result = generate_from_model(model, basename, language, options)

    if result.success:
        return result.code
    raise RuntimeError(f"Code generation failed: {result.error_message}")


def write_outputs(
    results: Dict[str, GenerationResult],
    output_directory: Union[str, Path],
    file_extension: str = ".swift",
) -> List[Path]:
    """
    Write successful generation results as ``<basename><extension>`` files.

    Args:
        results: Mapping of basename to generation result
        output_directory: Directory receiving the files (created if missing)

    Returns:
        Paths of the files written
    """
    directory = Path(output_directory)
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for basename, result in results.items():
        if not result.success:
            logger.warning(f"Skipping {basename}: {result.error_message}")
            continue
        path = directory / f"{basename}{file_extension}"
        path.write_text(result.code, encoding="utf-8")
        logger.info(f"Wrote {path}")
        written.append(path)
    return written


__all__ = [
    "CodeGenerator",
    "GenerationResult",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "generate_code",
    "generate_from_model",
    "generate_includes",
    "include_config",
    "generate_from_file",
    "quick_generate",
    "write_outputs",
    "get_generator",
    "list_supported_languages",
]
