"""Parser turning an sdef XML tree into an unmerged :class:`Model`.

Missing attributes never abort parsing: they resolve to an empty string, an
absent optional value or ``False``. Only a document without a root element
is rejected.
"""

from __future__ import annotations

from typing import List, Optional

from lxml import etree

from .errors import SDEFParsingError
from .logging_config import get_logger
from .model import (
    ClassExtension,
    Command,
    Element,
    Enumeration,
    Enumerator,
    Model,
    Parameter,
    Property,
    PropertyType,
    SdefClass,
    Suite,
)

logger = get_logger(__name__)

ANY_TYPE = "Any"


def _attr(node: etree._Element, name: str, default: str = "") -> str:
    value = node.get(name)
    return default if value is None else value


def _optional_attr(node: etree._Element, name: str) -> Optional[str]:
    return node.get(name)


def _is_hidden(node: etree._Element) -> bool:
    return node.get("hidden") == "yes"


class SDEFParser:
    """Extract suites and their definitions from a parsed sdef document.

    Hidden definitions (``hidden="yes"``) are dropped independently at the
    class, property, enumeration and command level unless ``include_hidden``
    is set.
    """

    def __init__(self, document: etree._ElementTree | etree._Element | None, include_hidden: bool = False):
        self.document = document
        self.include_hidden = include_hidden

    def root_element(self) -> etree._Element:
        """Return the document's root element.

        Raises:
            SDEFParsingError: If there is no root element.
        """
        document = self.document
        if document is None:
            raise SDEFParsingError("no root element")
        if isinstance(document, etree._ElementTree):
            root = document.getroot()
        else:
            root = document
        if root is None:
            raise SDEFParsingError("no root element")
        return root

    def parse(self) -> Model:
        """Parse every suite of the document into an unmerged model."""
        root = self.root_element()
        suites = self.parse_suites(root)
        logger.info(f"Extracted {len(suites)} suites")
        return Model(suites=suites)

    def parse_suites(self, root: etree._Element) -> List[Suite]:
        return [self.parse_suite(node) for node in root.iterfind(".//suite")]

    def parse_suite(self, node: etree._Element) -> Suite:
        name = _attr(node, "name")
        suite = Suite(
            name=name,
            code=_attr(node, "code"),
            description=_optional_attr(node, "description"),
        )

        for class_node in node.iterfind(".//class"):
            if self._keep(class_node):
                suite.classes.append(self.parse_class(class_node))

        for record_node in node.iterfind(".//record-type"):
            if self._keep(record_node):
                suite.classes.append(self.parse_record_type(record_node))

        for extension_node in node.iterfind(".//class-extension"):
            suite.class_extensions.append(self.parse_class_extension(extension_node))

        for enum_node in node.iterfind(".//enumeration"):
            if self._keep(enum_node):
                suite.enumerations.append(self.parse_enumeration(enum_node))

        for command_node in node.iterfind("./command"):
            if self._keep(command_node):
                suite.commands.append(self.parse_command(command_node))

        logger.debug(
            f"Suite '{name}': {len(suite.classes)} classes, "
            f"{len(suite.class_extensions)} class-extensions, "
            f"{len(suite.enumerations)} enumerations, {len(suite.commands)} commands"
        )
        return suite

    def parse_class(self, node: etree._Element) -> SdefClass:
        return SdefClass(
            name=_attr(node, "name"),
            plural_name=_optional_attr(node, "plural"),
            code=_attr(node, "code"),
            description=_optional_attr(node, "description"),
            inherits=_optional_attr(node, "inherits"),
            properties=self.parse_properties(node),
            elements=self.parse_elements(node),
            responds_to=self.parse_responds_to(node),
            is_hidden=_is_hidden(node),
        )

    def parse_record_type(self, node: etree._Element) -> SdefClass:
        """Record types become classes without plural name, elements or commands."""
        return SdefClass(
            name=_attr(node, "name"),
            code=_attr(node, "code"),
            description=_optional_attr(node, "description"),
            inherits=_optional_attr(node, "inherits"),
            properties=self.parse_properties(node),
            is_hidden=_is_hidden(node),
        )

    def parse_class_extension(self, node: etree._Element) -> ClassExtension:
        return ClassExtension(
            extends=_attr(node, "extends"),
            properties=self.parse_properties(node),
            elements=self.parse_elements(node),
            responds_to=self.parse_responds_to(node),
        )

    def parse_properties(self, node: etree._Element) -> List[Property]:
        properties = []
        for prop_node in node.iterfind(".//property"):
            if not self._keep(prop_node):
                continue
            cocoa = prop_node.find(".//cocoa")
            properties.append(
                Property(
                    name=_attr(prop_node, "name"),
                    code=_attr(prop_node, "code"),
                    type=self.parse_property_type(prop_node),
                    description=_optional_attr(prop_node, "description"),
                    access=_optional_attr(prop_node, "access"),
                    cocoa_key=cocoa.get("key") if cocoa is not None else None,
                    is_hidden=_is_hidden(prop_node),
                )
            )
        return properties

    def parse_elements(self, node: etree._Element) -> List[Element]:
        return [
            Element(type=_attr(element_node, "type"), cocoa_key=_optional_attr(element_node, "key"))
            for element_node in node.iterfind(".//element")
        ]

    def parse_responds_to(self, node: etree._Element) -> List[str]:
        commands = [_attr(responds_node, "command") for responds_node in node.iterfind(".//responds-to")]
        return [command for command in commands if command]

    def parse_property_type(self, node: etree._Element) -> PropertyType:
        """Type of a property-like node.

        A nested ``type`` element wins over a ``type`` attribute; either way
        the base type defaults to ``Any`` and the type is always optional.
        """
        description = _optional_attr(node, "description")
        type_node = node.find(".//type")
        if type_node is not None:
            return PropertyType(
                base_type=_attr(type_node, "type", ANY_TYPE),
                is_list=type_node.get("list") == "yes",
                is_optional=True,
                description=description,
            )

        return PropertyType(
            base_type=_attr(node, "type", ANY_TYPE),
            is_list=False,
            is_optional=True,
            description=description,
        )

    def parse_enumeration(self, node: etree._Element) -> Enumeration:
        enumerators = []
        for enumerator_node in node.iterfind(".//enumerator"):
            cocoa = enumerator_node.find(".//cocoa")
            enumerators.append(
                Enumerator(
                    name=_attr(enumerator_node, "name"),
                    code=_attr(enumerator_node, "code"),
                    description=_optional_attr(enumerator_node, "description"),
                    string_value=cocoa.get("string-value") if cocoa is not None else None,
                )
            )

        return Enumeration(
            name=_attr(node, "name"),
            code=_attr(node, "code"),
            description=_optional_attr(node, "description"),
            enumerators=enumerators,
            is_hidden=_is_hidden(node),
        )

    def parse_command(self, node: etree._Element) -> Command:
        direct_node = node.find(".//direct-parameter")
        direct_parameter = None
        if direct_node is not None:
            direct_parameter = self.parse_parameter(direct_node, named=False)

        result_node = node.find(".//result")
        result = self.parse_property_type(result_node) if result_node is not None else None

        return Command(
            name=_attr(node, "name"),
            code=_attr(node, "code"),
            description=_optional_attr(node, "description"),
            direct_parameter=direct_parameter,
            parameters=[
                self.parse_parameter(param_node) for param_node in node.iterfind(".//parameter")
            ],
            result=result,
            is_hidden=_is_hidden(node),
        )

    def parse_parameter(self, node: etree._Element, named: bool = True) -> Parameter:
        return Parameter(
            name=_attr(node, "name") if named else None,
            code=_attr(node, "code"),
            type=self.parse_property_type(node),
            description=_optional_attr(node, "description"),
            is_optional=node.get("optional") == "yes",
        )

    def _keep(self, node: etree._Element) -> bool:
        return self.include_hidden or not _is_hidden(node)


def parse_sdef(
    document: etree._ElementTree | etree._Element | None, include_hidden: bool = False
) -> Model:
    """Parse a document into an unmerged model."""
    return SDEFParser(document, include_hidden=include_hidden).parse()
