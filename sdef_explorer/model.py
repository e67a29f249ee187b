"""
In-memory model of a scripting definition (sdef) document.

The parser builds these records once per document, the merge pass
rewrites suites into new records, and the code generators only read them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class PropertyType:
    """Type of a property, parameter or command result."""

    base_type: str = "Any"
    is_list: bool = False
    # The sdef format cannot express a guaranteed-present scalar.
    is_optional: bool = True
    description: Optional[str] = None


@dataclass
class Property:
    name: str
    code: str
    type: PropertyType
    description: Optional[str] = None
    access: Optional[str] = None
    cocoa_key: Optional[str] = None
    is_hidden: bool = False

    @property
    def is_read_only(self) -> bool:
        """Only an access mode of exactly "r" makes a property read-only."""
        return self.access == "r"


@dataclass
class Element:
    """Declaration of a child-object collection on a class."""

    type: str
    cocoa_key: Optional[str] = None


@dataclass
class SdefClass:
    name: str
    code: str = ""
    plural_name: Optional[str] = None
    description: Optional[str] = None
    inherits: Optional[str] = None
    properties: List[Property] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)
    responds_to: List[str] = field(default_factory=list)
    is_hidden: bool = False

    def property_names(self) -> List[str]:
        return [prop.name for prop in self.properties]


@dataclass
class ClassExtension:
    """Fragment adding properties, elements or commands to a class defined elsewhere."""

    extends: str
    properties: List[Property] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)
    responds_to: List[str] = field(default_factory=list)


@dataclass
class Enumerator:
    name: str
    code: str
    description: Optional[str] = None
    string_value: Optional[str] = None


@dataclass
class Enumeration:
    name: str
    code: str
    description: Optional[str] = None
    enumerators: List[Enumerator] = field(default_factory=list)
    is_hidden: bool = False


@dataclass
class Parameter:
    """Command parameter; the direct parameter is the only one without a name."""

    name: Optional[str]
    code: str
    type: PropertyType
    description: Optional[str] = None
    is_optional: bool = False

    @property
    def objc_name(self) -> Optional[str]:
        if self.name is None:
            return None
        return _selector_case(self.name)


@dataclass
class Command:
    name: str
    code: str
    description: Optional[str] = None
    direct_parameter: Optional[Parameter] = None
    parameters: List[Parameter] = field(default_factory=list)
    result: Optional[PropertyType] = None
    is_hidden: bool = False

    @property
    def method_name(self) -> str:
        from .codegen.core.naming import to_camel_case

        return to_camel_case(self.name)

    @property
    def objc_selector(self) -> str:
        """Objective-C selector: method name, one colon for the direct parameter,
        then ``<name>:`` per named parameter."""
        selector = self.method_name
        if self.direct_parameter is not None:
            selector += ":"
        for param in self.parameters:
            if param.objc_name:
                selector += param.objc_name + ":"
        return selector


@dataclass
class Suite:
    name: str
    code: str = ""
    description: Optional[str] = None
    classes: List[SdefClass] = field(default_factory=list)
    enumerations: List[Enumeration] = field(default_factory=list)
    commands: List[Command] = field(default_factory=list)
    class_extensions: List[ClassExtension] = field(default_factory=list)

    def find_class(self, name: str) -> Optional[SdefClass]:
        for cls in self.classes:
            if cls.name == name:
                return cls
        return None


@dataclass
class Include:
    """A nested document pulled in through an inclusion directive."""

    href: str
    basename: str
    model: "Model"


@dataclass
class Model:
    suites: List[Suite] = field(default_factory=list)
    standard_classes: Dict[str, SdefClass] = field(default_factory=dict)
    includes: List[Include] = field(default_factory=list)
    uses_fallback_definitions: bool = False

    @property
    def all_classes(self) -> List[SdefClass]:
        return [cls for suite in self.suites for cls in suite.classes]

    @property
    def all_enumerations(self) -> List[Enumeration]:
        return [enum for suite in self.suites for enum in suite.enumerations]

    @property
    def all_commands(self) -> List[Command]:
        return [cmd for suite in self.suites for cmd in suite.commands]

    def has_class_extensions(self) -> bool:
        return any(suite.class_extensions for suite in self.suites)


def _selector_case(name: str) -> str:
    """First space-separated word lower-cased, later words capitalized."""
    words = name.split(" ")
    words = [word for word in words if word]
    if not words:
        return name
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])
