"""Resolution of inclusion directives and the standard-definitions catalog.

Application dictionaries pull the platform's standard classes in through an
XInclude of ``CocoaStandard.sdef``. The resolver loads that document when
it is available and otherwise falls back to a small built-in catalog, so
merging always has the window, document and application classes to work
with. Failures to read the standard document are logged and never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from lxml import etree

from .errors import SDEFLoaderError, SDEFParsingError
from .logging_config import get_logger
from .model import (
    Element,
    Enumeration,
    Enumerator,
    Include,
    Model,
    Property,
    PropertyType,
    SdefClass,
    Suite,
)
from .parser import SDEFParser
from .utils import load_sdef_from_file

logger = get_logger(__name__)

XINCLUDE_NAMESPACE = "http://www.w3.org/2003/XInclude"
STANDARD_DEFINITIONS_NAME = "CocoaStandard.sdef"
STANDARD_DEFINITIONS_BASENAME = "CocoaStandard"
DEFAULT_STANDARD_DEFINITIONS_PATH = Path(
    "/System/Library/ScriptingDefinitions/CocoaStandard.sdef"
)
STANDARD_DEFINITIONS_HREF = (
    "file://localhost/System/Library/ScriptingDefinitions/CocoaStandard.sdef"
)


@dataclass
class ResolutionContext:
    """Catalog of standard definitions for one document.

    A new context is created for every document; nothing is cached between
    resolution passes.
    """

    standard_classes: Dict[str, SdefClass] = field(default_factory=dict)
    standard_enumerations: Dict[str, Enumeration] = field(default_factory=dict)
    includes: List[Include] = field(default_factory=list)
    uses_fallback: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.standard_classes

    def add_suites(self, suites: Iterable[Suite]):
        """Index classes and enumerations of standard suites by name."""
        for suite in suites:
            for cls in suite.classes:
                self.standard_classes[cls.name] = cls
            for enumeration in suite.enumerations:
                self.standard_enumerations[enumeration.name] = enumeration


def find_include_hrefs(root: etree._Element) -> List[str]:
    """Return the ``href`` of every inclusion directive, namespaced or not."""
    nodes = root.xpath(
        ".//xi:include | .//include", namespaces={"xi": XINCLUDE_NAMESPACE}
    )
    return [node.get("href") for node in nodes if node.get("href")]


def references_standard_definitions(href: str) -> bool:
    return STANDARD_DEFINITIONS_NAME in href


def implies_standard_classes(suites: Iterable[Suite]) -> bool:
    """Whether some suite defines or extends a class named ``application``."""
    for suite in suites:
        if any(cls.name.lower() == "application" for cls in suite.classes):
            return True
        if any(ext.extends.lower() == "application" for ext in suite.class_extensions):
            return True
    return False


class IncludeResolver:
    """Build the :class:`ResolutionContext` for one document."""

    def __init__(
        self,
        include_hidden: bool = False,
        track_includes: bool = False,
        standard_definitions_path: str | Path | None = None,
    ):
        self.include_hidden = include_hidden
        self.track_includes = track_includes
        self.standard_definitions_path = Path(
            standard_definitions_path or DEFAULT_STANDARD_DEFINITIONS_PATH
        )

    def resolve(self, root: etree._Element, suites: List[Suite]) -> ResolutionContext:
        context = ResolutionContext()

        hrefs = [href for href in find_include_hrefs(root) if references_standard_definitions(href)]
        if hrefs:
            logger.debug(f"Found standard definitions include: {hrefs[0]}")
            self.load_standard_definitions(context)

        if context.is_empty and implies_standard_classes(suites):
            logger.debug(
                "No standard classes loaded but the document defines or extends "
                "'application', adding fallback definitions"
            )
            add_fallback_definitions(context)

        return context

    def load_standard_definitions(self, context: ResolutionContext):
        """Load the standard document into ``context``, or fall back to built-ins."""
        path = self.standard_definitions_path
        if not path.exists():
            logger.warning(
                f"{STANDARD_DEFINITIONS_NAME} not found at {path}, adding fallback standard definitions"
            )
            add_fallback_definitions(context)
            return

        try:
            _, tree = load_sdef_from_file(path)
            suites = SDEFParser(tree, include_hidden=self.include_hidden).parse().suites
        except (OSError, SDEFLoaderError, SDEFParsingError) as e:
            logger.warning(
                f"Failed to load {STANDARD_DEFINITIONS_NAME}: {e}, adding fallback definitions"
            )
            add_fallback_definitions(context)
            return

        if self.track_includes:
            context.includes.append(
                Include(
                    href=STANDARD_DEFINITIONS_HREF,
                    basename=STANDARD_DEFINITIONS_BASENAME,
                    model=Model(suites=suites),
                )
            )

        context.add_suites(suites)
        logger.info(
            f"Loaded {len(context.standard_classes)} standard classes and "
            f"{len(context.standard_enumerations)} standard enums"
        )


def resolve_includes(
    root: etree._Element,
    suites: List[Suite],
    include_hidden: bool = False,
    track_includes: bool = False,
    standard_definitions_path: str | Path | None = None,
) -> ResolutionContext:
    resolver = IncludeResolver(include_hidden, track_includes, standard_definitions_path)
    return resolver.resolve(root, suites)


# Built-in standard definitions


def _prop(name: str, code: str, base_type: str, description: str, access: Optional[str]) -> Property:
    return Property(
        name=name,
        code=code,
        type=PropertyType(base_type=base_type),
        description=description,
        access=access,
    )


def fallback_classes() -> List[SdefClass]:
    """Minimal window, document and application classes."""
    window = SdefClass(
        name="window",
        plural_name="windows",
        code="cwin",
        description="A window.",
        properties=[
            _prop("name", "pnam", "text", "The title of the window.", "r"),
            _prop("id", "ID  ", "integer", "The unique identifier of the window.", "r"),
            _prop("index", "pidx", "integer", "The index of the window, ordered front to back.", ""),
            _prop("bounds", "pbnd", "rectangle", "The bounding rectangle of the window.", ""),
            _prop("closeable", "hclb", "boolean", "Does the window have a close button?", "r"),
            _prop("miniaturizable", "ismn", "boolean", "Does the window have a minimize button?", "r"),
            _prop("miniaturized", "pmnd", "boolean", "Is the window minimized right now?", ""),
            _prop("resizable", "prsz", "boolean", "Can the window be resized?", "r"),
            _prop("visible", "pvis", "boolean", "Is the window visible right now?", ""),
            _prop("zoomable", "iszm", "boolean", "Does the window have a zoom button?", "r"),
            _prop("zoomed", "pzum", "boolean", "Is the window zoomed right now?", ""),
            _prop(
                "document",
                "docu",
                "document",
                "The document whose contents are displayed in the window.",
                "r",
            ),
        ],
        responds_to=["close", "print", "save"],
    )

    document = SdefClass(
        name="document",
        plural_name="documents",
        code="docu",
        description="A document.",
        properties=[
            _prop("name", "pnam", "text", "Its name.", "r"),
            _prop("modified", "imod", "boolean", "Has it been modified since the last save?", "r"),
            _prop("file", "file", "file", "Its location on disk, if it has one.", "r"),
        ],
        responds_to=["close", "print", "save"],
    )

    application = SdefClass(
        name="application",
        plural_name="applications",
        code="capp",
        description="The application's top-level scripting object.",
        properties=[
            _prop("name", "pnam", "text", "The name of the application.", "r"),
            _prop("frontmost", "pisf", "boolean", "Is this the active application?", "r"),
            _prop("version", "vers", "text", "The version number of the application.", "r"),
        ],
        elements=[Element(type="document"), Element(type="window")],
        responds_to=["open", "print", "quit"],
    )

    return [window, document, application]


def fallback_enumerations() -> List[Enumeration]:
    """Save-disposition and print-error-handling enumerations."""
    save_options = Enumeration(
        name="save options",
        code="savo",
        description="Save options for documents",
        enumerators=[
            Enumerator(name="yes", code="yes ", description="Save the file."),
            Enumerator(name="no", code="no  ", description="Do not save the file."),
            Enumerator(
                name="ask",
                code="ask ",
                description="Ask the user whether or not to save the file.",
            ),
        ],
    )

    printing_error_handling = Enumeration(
        name="printing error handling",
        code="enum",
        description="How to handle printing errors",
        enumerators=[
            Enumerator(name="standard", code="lwst", description="Standard PostScript error handling"),
            Enumerator(
                name="detailed",
                code="lwdt",
                description="print a detailed report of PostScript errors",
            ),
        ],
    )

    return [save_options, printing_error_handling]


def add_fallback_definitions(context: ResolutionContext):
    for cls in fallback_classes():
        context.standard_classes[cls.name] = cls
    for enumeration in fallback_enumerations():
        context.standard_enumerations[enumeration.name] = enumeration
    context.uses_fallback = True
    logger.info(
        f"Added {len(context.standard_classes)} fallback standard classes and "
        f"{len(context.standard_enumerations)} fallback standard enums"
    )
