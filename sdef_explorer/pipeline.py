"""Parse, resolve and merge an sdef document in one call."""

from __future__ import annotations

from pathlib import Path

from lxml import etree

from .includes import ResolutionContext, resolve_includes
from .logging_config import get_logger
from .merge import merge_model
from .model import Include, Model
from .parser import SDEFParser
from .utils import load_sdef

logger = get_logger(__name__)


def build_model(
    document: etree._ElementTree | etree._Element | None,
    include_hidden: bool = False,
    track_includes: bool = False,
    standard_definitions_path: str | Path | None = None,
) -> Model:
    """Turn a parsed XML document into a fully merged model.

    Args:
        document: Parsed sdef document
        include_hidden: Keep definitions marked ``hidden="yes"``
        track_includes: Record included documents on the model so that
            they can be generated as separate files
        standard_definitions_path: Location of ``CocoaStandard.sdef``

    Raises:
        SDEFParsingError: If the document has no root element.
    """
    parser = SDEFParser(document, include_hidden=include_hidden)
    root = parser.root_element()
    unmerged = parser.parse()

    context = resolve_includes(
        root,
        unmerged.suites,
        include_hidden=include_hidden,
        track_includes=track_includes,
        standard_definitions_path=standard_definitions_path,
    )
    model = merge_model(unmerged, context)

    # Included documents carry no catalog of their own.
    model.includes = [
        Include(
            href=include.href,
            basename=include.basename,
            model=merge_model(include.model, ResolutionContext()),
        )
        for include in model.includes
    ]

    logger.info(
        f"Found {len(model.all_classes)} classes and "
        f"{len(model.all_enumerations)} enumerations"
    )
    for suite in model.suites:
        logger.debug(f"Suite '{suite.name}' has {len(suite.commands)} commands")
    return model


def load_model(
    file_path: str | Path | None = None,
    url: str | None = None,
    include_hidden: bool = False,
    track_includes: bool = False,
    standard_definitions_path: str | Path | None = None,
    timeout: int = 30,
) -> Model:
    """Load an sdef document from a file or URL and build its merged model."""
    source, tree = load_sdef(file_path=file_path, url=url, timeout=timeout)
    logger.info(f"Parsed SDEF XML from {source}")
    return build_model(
        tree,
        include_hidden=include_hidden,
        track_includes=track_includes,
        standard_definitions_path=standard_definitions_path,
    )
