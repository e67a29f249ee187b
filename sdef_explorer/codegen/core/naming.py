"""
Naming utilities for safe code generation.

Handles word splitting, acronym-preserving case conversion, punctuation
replacement, reserved word escaping and four-character code literals.
Everything here is plain string manipulation with no dependency on the
sdef model.
"""

import re
from enum import Enum
from typing import Dict, List, Optional, Set

from .errors import InvalidIdentifierError


class NamingCase(Enum):
    """Naming case styles used by the generators."""

    CAMEL_CASE = "camel"  # homeURL
    PASCAL_CASE = "pascal"  # AudioCDTrack


# Words always rendered fully upper-case (except as the leading word of a
# camelCase identifier).
ACRONYMS = frozenset(
    {"CD", "DVD", "URL", "ID", "UUID", "HTTP", "HTTPS", "XML", "HTML", "PDF", "UI", "API"}
)

# Applied before word splitting. An empty replacement deletes the character.
PUNCTUATION_REPLACEMENTS: Dict[str, str] = {
    "#": "Hash",
    "&": "And",
    "+": "Plus",
    "=": "Equals",
    "(": "",
    ")": "",
    "/": "Or",
    "\\": "",
    "*": "Star",
    "?": "",
    "!": "",
    "@": "At",
    "%": "Percent",
    "^": "",
    "~": "",
    "`": "",
    "|": "Or",
}

_WORD_SEPARATORS = re.compile(r"[\s\-_]+")
_INVALID_CHARS = re.compile(r"[^\w\s-]")
_VALID_IDENTIFIER = re.compile(r"^[^\W\d]\w*$")
_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")


def replace_punctuation(name: str) -> str:
    """Replace or delete the fixed punctuation set."""
    for char, replacement in PUNCTUATION_REPLACEMENTS.items():
        name = name.replace(char, replacement)
    return name


def split_words(name: str) -> List[str]:
    """Split a name into words on spaces, hyphens and underscores.

    Punctuation is replaced first; any other character that cannot appear
    in an identifier is treated as a word separator.
    """
    cleaned = _INVALID_CHARS.sub(" ", replace_punctuation(name))
    return [word for word in _WORD_SEPARATORS.split(cleaned) if word]


def capitalize_first(word: str) -> str:
    """Upper-case the first letter and keep the rest as is."""
    if not word:
        return word
    return word[0].upper() + word[1:]


def to_camel_case(name: str) -> str:
    """Convert to camelCase: leading word lower-cased, acronyms upper-cased after it.

    >>> to_camel_case("home URL")
    'homeURL'
    """
    words = split_words(name)
    if not words:
        return ""

    parts = [words[0].lower()]
    for word in words[1:]:
        upper = word.upper()
        parts.append(upper if upper in ACRONYMS else capitalize_first(word))
    return "".join(parts)


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase with acronyms upper-cased in every position."""
    parts = []
    for word in split_words(name):
        upper = word.upper()
        parts.append(upper if upper in ACRONYMS else capitalize_first(word))
    return "".join(parts)


def is_valid_identifier(name: str) -> bool:
    return bool(_VALID_IDENTIFIER.match(name))


def encode_four_char_code(code: str) -> str:
    """
    Encode a four-character code as a 32-bit hexadecimal integer literal.

    Four characters are packed as their two-digit ASCII hex values in order
    (non-ASCII characters encode as ``00``). A code that already looks
    hexadecimal is passed through with a ``0x`` prefix. Anything else is
    returned as a quoted literal.

    >>> encode_four_char_code("yes ")
    '0x79657320'
    """
    if len(code) == 4:
        return "0x" + "".join(
            f"{ord(char):02x}" if ord(char) < 128 else "00" for char in code
        )

    if code[:2].lower() == "0x" and _HEX_DIGITS.match(code[2:]):
        return "0x" + code[2:]
    if _HEX_DIGITS.match(code):
        return "0x" + code

    return f"'{code}'"


def decode_four_char_code(literal: str) -> str:
    """
    Recover the four characters from an encoded code literal.

    Raises:
        ValueError: If the literal is not an eight digit hex value.
    """
    digits = literal[2:] if literal[:2].lower() == "0x" else literal
    if len(digits) != 8 or not _HEX_DIGITS.match(digits):
        raise ValueError(f"Not a four-character code literal: {literal!r}")
    return bytes.fromhex(digits).decode("latin-1")


class NameSanitizer:
    """Handles identifier case conversion and reserved word escaping."""

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        escape_format: str = "`{}`",
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Language keywords that must be escaped (case-sensitive)
            escape_format: Format string wrapping an escaped identifier
        """
        self.reserved_words = reserved_words or set()
        self.escape_format = escape_format
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(
        self, name: str, target_case: NamingCase = NamingCase.CAMEL_CASE, escape: bool = True
    ) -> str:
        """
        Convert a name into a valid identifier of the requested case.

        Raises:
            InvalidIdentifierError: If nothing usable is left of the name.
        """
        cache_key = f"{name}\x00{target_case.value}\x00{escape}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = self._convert_case(name, target_case)
        if converted and converted[0].isdigit():
            converted = f"_{converted}"

        if not is_valid_identifier(converted):
            raise InvalidIdentifierError(name)

        final_name = self.escape(converted) if escape else converted
        self._name_cache[cache_key] = final_name
        return final_name

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        if target_case == NamingCase.PASCAL_CASE:
            return to_pascal_case(name)
        return to_camel_case(name)

    def escape(self, name: str) -> str:
        """Wrap a reserved word in the escape marker."""
        if name in self.reserved_words:
            return self.escape_format.format(name)
        return name

    def camel(self, name: str) -> str:
        return self.sanitize_name(name, NamingCase.CAMEL_CASE)

    def pascal(self, name: str) -> str:
        return self.sanitize_name(name, NamingCase.PASCAL_CASE)
