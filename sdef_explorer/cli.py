"""
Command line interface for generating Swift bindings from sdef files.

Usage:
    sdef-explorer Music.sdef -b Music -o Sources/MusicScripting
    sdef-explorer --url https://example.com/App.sdef -b App --stdout
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .codegen import (
    generate_code,
    get_generator,
    include_config,
    list_supported_languages,
    write_outputs,
)
from .codegen.core.config import ConfigError, GeneratorConfig, get_config_manager, load_config
from .codegen.registry import RegistryError, get_language_info
from .errors import SDEFError
from .logging_config import get_logger, level_from_flags, setup_logging
from .pipeline import load_model

logger = get_logger(__name__)

console = Console()

_BASENAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sdef-explorer",
        description="Generate Swift ScriptingBridge bindings from an sdef scripting definition",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sdef-explorer /Applications/Safari.app/Contents/Resources/Safari.sdef -b Safari
  sdef-explorer Music.sdef --recursive -o Sources/MusicScripting
  sdef-explorer --url https://example.com/App.sdef -b App --stdout
  sdef-explorer --list-languages
        """.strip(),
    )

    input_group = parser.add_mutually_exclusive_group(required=False)
    input_group.add_argument("file", nargs="?", help="sdef file to generate bindings for")
    input_group.add_argument("--url", help="URL to fetch the sdef document from")

    parser.add_argument(
        "--output-directory",
        "-o",
        metavar="DIR",
        help="Directory for the generated files (default: current directory)",
    )
    parser.add_argument(
        "--basename",
        "-b",
        metavar="NAME",
        help="Prefix for generated type names (default: input file name)",
    )
    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")
    parser.add_argument(
        "--stdout", action="store_true", help="Print the generated code instead of writing files"
    )

    model_group = parser.add_argument_group("model options")
    model_group.add_argument(
        "--include-hidden",
        action="store_true",
        help='Keep definitions marked hidden="yes"',
    )
    model_group.add_argument(
        "--recursive",
        action="store_true",
        help="Also generate a file for every included document",
    )
    model_group.add_argument(
        "--standard-definitions",
        metavar="PATH",
        help="Location of CocoaStandard.sdef",
    )

    output_group = parser.add_argument_group("output options")
    output_group.add_argument(
        "--class-names-enum",
        action="store_true",
        help="Generate an enum listing the scripting class names",
    )
    output_group.add_argument(
        "--strongly-typed-extensions",
        action="store_true",
        help="Add typed array accessors for element collections",
    )
    output_group.add_argument(
        "--namespace-typealiases",
        action="store_true",
        help="Add an enum named after the basename with unprefixed type aliases",
    )
    output_group.add_argument(
        "--flat-typealiases",
        action="store_true",
        help="Add unprefixed module-level type aliases (main document only)",
    )
    output_group.add_argument(
        "--bundle-identifier",
        metavar="ID",
        help="Generate an application accessor for this bundle identifier (main document only)",
    )
    output_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't copy descriptions into documentation comments",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )
    info_group.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    info_group.add_argument("--debug", action="store_true", help="Debug output")
    info_group.add_argument("--log-file", metavar="FILE", help="Also write log records to FILE")
    info_group.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge the configuration file (if any) with command line overrides."""
    overrides = {}

    if args.output_directory:
        overrides["output_directory"] = args.output_directory
    if args.basename:
        overrides["basename"] = args.basename
    if args.include_hidden:
        overrides["include_hidden"] = True
    if args.recursive:
        overrides["generate_recursively"] = True
    if args.standard_definitions:
        overrides["standard_definitions_path"] = args.standard_definitions
    if args.class_names_enum:
        overrides["generate_class_names_enum"] = True
    if args.strongly_typed_extensions:
        overrides["generate_strongly_typed_extensions"] = True
    if args.namespace_typealiases:
        overrides["generate_namespace_typealiases"] = True
    if args.flat_typealiases:
        overrides["generate_flat_typealiases"] = True
    if args.bundle_identifier:
        overrides["bundle_identifier"] = args.bundle_identifier
    if args.no_comments:
        overrides["add_comments"] = False

    try:
        config = load_config("swift", custom_config=overrides, config_file=args.config)
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    if config.basename is None:
        if args.file:
            config.basename = Path(args.file).stem
        else:
            raise CLIError("--basename is required when reading from a URL")

    if not _BASENAME_PATTERN.match(config.basename):
        raise CLIError(
            f"Invalid basename '{config.basename}': use letters, digits and underscores only"
        )

    problems = get_config_manager().validate_config(config)
    if problems:
        raise CLIError(f"Configuration error: {'; '.join(problems)}")
    return config


def validate_input_path(file_path: str) -> Path:
    path = Path(file_path)
    if not path.exists():
        raise CLIError(f"File not found: {path}")
    if path.suffix.lower() != ".sdef":
        raise CLIError(f"Not an sdef file: {path}")
    return path


def _list_languages() -> int:
    table = Table(title="Supported Languages", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for language in list_supported_languages():
        info = get_language_info(language)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(language, info["file_extension"], info["class"], aliases)

    console.print(table)
    return 0


def _print_metadata(metadata: dict):
    table = Table(
        title="Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Property", style="bold")
    table.add_column("Value", style="green")
    for key, value in metadata.items():
        table.add_row(key.replace("_", " ").title(), str(value))
    console.print(table)


def run(args: argparse.Namespace) -> int:
    """Generate bindings for the parsed command line arguments."""
    if args.list_languages:
        return _list_languages()

    if not (args.file or args.url):
        raise CLIError("Input source required (sdef file or --url)")

    if args.file:
        validate_input_path(args.file)

    config = build_config(args)
    generator = get_generator("swift", config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=Console(stderr=True),
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Reading scripting definition...", total=None)
        model = load_model(
            file_path=args.file,
            url=args.url,
            include_hidden=config.include_hidden,
            track_includes=config.generate_recursively,
            standard_definitions_path=config.standard_definitions_path,
        )
        progress.update(task, description="[green]Generating Swift code...")

        results = {config.basename: generate_code(generator, model, config.basename)}
        if config.generate_recursively:
            include_generator = get_generator("swift", include_config(config))
            for include in model.includes:
                if include.basename in results:
                    raise CLIError(
                        f"Basename '{include.basename}' clashes with included document "
                        f"{include.href}; choose another --basename"
                    )
                results[include.basename] = generate_code(
                    include_generator, include.model, include.basename
                )

    failed = [result for result in results.values() if not result.success]
    for result in failed:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
    if failed:
        return 1

    for result in results.values():
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")

    if args.stdout:
        for result in results.values():
            sys.stdout.write(result.code)
    else:
        for path in write_outputs(results, config.output_directory, generator.file_extension):
            console.print(f"[green]✓[/green] Generated [cyan]{path}[/cyan]")

    if args.verbose:
        _print_metadata(results[config.basename].metadata)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point of the ``sdef-explorer`` console script."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(level_from_flags(args.verbose, args.debug), log_file=args.log_file)

    try:
        return run(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except FileNotFoundError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except (SDEFError, RegistryError) as e:
        logger.debug("Generation aborted", exc_info=True)
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except OSError as e:
        console.print(f"[red]✗ Failed to write output:[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
