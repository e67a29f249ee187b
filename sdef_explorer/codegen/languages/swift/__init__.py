"""
Swift code generator module.

Generates ScriptingBridge protocols and enumerations from merged sdef models.
"""

from .generator import SwiftGenerator, create_swift_generator
from .naming import create_swift_sanitizer, escape_swift_keyword, setter_suffix
from .types import SWIFT_TYPE_TABLE, SwiftType, SwiftTypeConfig, SwiftTypeMapper

__all__ = [
    "SwiftGenerator",
    "SwiftType",
    "SwiftTypeConfig",
    "SwiftTypeMapper",
    "SWIFT_TYPE_TABLE",
    "create_swift_generator",
    "create_swift_sanitizer",
    "escape_swift_keyword",
    "setter_suffix",
]
