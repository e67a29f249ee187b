"""
Swift-specific type system for code generation.

Maps sdef base type names to Swift types through a lookup table keyed on the
lower-cased base type. Names missing from the table refer to another
generated class.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from ...core.errors import UnsupportedTypeError
from ....model import PropertyType


@dataclass(frozen=True)
class SwiftType:
    """
    Immutable representation of a Swift type.

    ``name`` is the full spelling used in declarations, ``base_name`` the
    element type without list or optional decoration.
    """

    name: str
    base_name: str = field(default="")
    is_optional: bool = field(default=False)
    is_list: bool = field(default=False)
    is_generated: bool = field(default=False)

    def __post_init__(self):
        if not self.base_name:
            object.__setattr__(self, "base_name", self.name)

    def as_list(self) -> "SwiftType":
        if self.is_list:
            return self
        return SwiftType(
            name=f"[{self.name}]",
            base_name=self.base_name,
            is_optional=False,
            is_list=True,
            is_generated=self.is_generated,
        )

    def as_optional(self) -> "SwiftType":
        if self.is_optional:
            return self
        return SwiftType(
            name=f"{self.name}?",
            base_name=self.base_name,
            is_optional=True,
            is_list=self.is_list,
            is_generated=self.is_generated,
        )


# Lower-cased sdef base type -> Swift type
SWIFT_TYPE_TABLE: Dict[str, str] = {
    "text": "String",
    "string": "String",
    "integer": "Int",
    "int": "Int",
    "double integer": "Int64",
    "real": "Double",
    "double": "Double",
    "boolean": "Bool",
    "bool": "Bool",
    "date": "Date",
    "file": "URL",
    "alias": "URL",
    "record": "[String: Any]",
    "any": "Any",
    "missing value": "NSNull",
    "missing-value": "NSNull",
    "rectangle": "NSRect",
    "point": "NSPoint",
    "size": "NSSize",
    "number": "NSNumber",
    "specifier": "SBObject",
    "location specifier": "SBObject",
    "location-specifier": "SBObject",
    "property": "SBObject",
    "type": "OSType",
    "enum": "OSType",
    "picture": "NSImage",
    "list": "SBElementArray",
    # Legacy icon resource types
    "icn#": "NSData",
    "ics#": "NSData",
    "l8mk": "NSData",
    "il32": "NSData",
    "icl8": "NSData",
    "icl4": "NSData",
    "s8mk": "NSData",
    "is32": "NSData",
    "ics8": "NSData",
    "ics4": "NSData",
}

# Dotted text types ("text.ctxt") refer to a generated class of this name.
DOTTED_TEXT_CLASS = "text"


@dataclass
class SwiftTypeConfig:
    """Configuration for Swift type mapping behavior."""

    type_overrides: Dict[str, str] = field(default_factory=dict)

    def lookup(self, base_type: str) -> Optional[str]:
        key = base_type.lower()
        if key in self.type_overrides:
            return self.type_overrides[key]
        return SWIFT_TYPE_TABLE.get(key)


class SwiftTypeMapper:
    """
    Map sdef property types to Swift types.

    ``class_name`` turns an sdef class name into the generated Swift type name
    so that references to other classes resolve to their interfaces.
    """

    def __init__(self, class_name: Callable[[str], str], config: Optional[SwiftTypeConfig] = None):
        self.class_name = class_name
        self.config = config or SwiftTypeConfig()

    def map_base_type(self, base_type: str) -> SwiftType:
        """
        Map a bare base type name.

        Raises:
            UnsupportedTypeError: If the base type name is empty.
        """
        if not base_type or not base_type.strip():
            raise UnsupportedTypeError(repr(base_type))

        head = base_type.split(".")[0]
        dotted = "." in base_type

        if dotted and head.lower() == DOTTED_TEXT_CLASS:
            return SwiftType(self.class_name(head), is_generated=True)

        mapped = self.config.lookup(head)
        if mapped is not None:
            return SwiftType(mapped)

        return SwiftType(self.class_name(head), is_generated=True)

    def map_type(self, prop_type: PropertyType) -> SwiftType:
        """Map a full property type, applying list and optional wrapping."""
        swift_type = self.map_base_type(prop_type.base_type)
        if prop_type.is_list:
            swift_type = swift_type.as_list()
        if prop_type.is_optional:
            swift_type = swift_type.as_optional()
        return swift_type
