"""
Swift-specific naming utilities and sanitization.

Handles Swift keywords and the setter naming exceptions of the
ScriptingBridge bindings.
"""

import re
from typing import Dict

from ...core.naming import NameSanitizer, capitalize_first, replace_punctuation


# Swift keywords escaped with backticks when used as identifiers
SWIFT_RESERVED_WORDS = {
    "associatedtype",
    "class",
    "deinit",
    "enum",
    "extension",
    "fileprivate",
    "func",
    "import",
    "init",
    "inout",
    "internal",
    "let",
    "open",
    "operator",
    "private",
    "protocol",
    "public",
    "rethrows",
    "static",
    "struct",
    "subscript",
    "typealias",
    "var",
    "break",
    "case",
    "continue",
    "default",
    "defer",
    "do",
    "else",
    "fallthrough",
    "for",
    "guard",
    "if",
    "in",
    "repeat",
    "return",
    "switch",
    "where",
    "while",
    "as",
    "Any",
    "catch",
    "false",
    "is",
    "nil",
    "super",
    "self",
    "Self",
    "throw",
    "throws",
    "true",
    "try",
    "associativity",
    "convenience",
    "dynamic",
    "didSet",
    "final",
    "get",
    "infix",
    "indirect",
    "lazy",
    "left",
    "mutating",
    "none",
    "nonmutating",
    "optional",
    "override",
    "postfix",
    "precedence",
    "prefix",
    "Protocol",
    "required",
    "right",
    "set",
    "Type",
    "unowned",
    "weak",
    "willSet",
}

# Setter names that naive capitalization gets wrong, keyed on the lower-cased
# property name.
SETTER_NAME_OVERRIDES: Dict[str, str] = {
    "current tab": "CurrentTab",
    "url": "URL",
}


def create_swift_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Swift."""
    return NameSanitizer(SWIFT_RESERVED_WORDS, escape_format="`{}`")


def escape_swift_keyword(name: str) -> str:
    if name in SWIFT_RESERVED_WORDS:
        return f"`{name}`"
    return name


def setter_suffix(property_name: str) -> str:
    """
    Name fragment following ``set`` in a property setter.

    >>> setter_suffix("current tab")
    'CurrentTab'
    >>> setter_suffix("bounds")
    'Bounds'
    """
    override = SETTER_NAME_OVERRIDES.get(property_name.lower())
    if override:
        return override

    return re.sub(r"[^\w]|_", "", capitalize_first(replace_punctuation(property_name)))
