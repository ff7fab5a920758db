"""
Formatting of literal values: numbers, booleans, strings, enum members.

`PrimitiveFormatter.format_primitive` answers one question: "is this value a
literal, and if so how is it spelled?". A `None` return means "not a
primitive, format it structurally", never an error.
"""

from __future__ import annotations

from enum import Enum

from .options import PrimitiveOptions
from .styled import KEYWORD, NUMBER, PLAIN, STRING, StyledSegment

NULL_LITERAL = "None"


class _NoValue:
    """Result of evaluating a statement, or a call that returned nothing to show."""

    _instance: _NoValue | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_VALUE"

    def __bool__(self) -> bool:
        return False


NO_VALUE = _NoValue()

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}

_OCTAL_DIGITS = frozenset("01234567")


def _escape_code_point(char: str) -> str:
    code = ord(char)
    if code < 0x100:
        return f"\\x{code:02x}"
    if code < 0x10000:
        return f"\\u{code:04x}"
    return f"\\U{code:08x}"


class PrimitiveFormatter:
    null_literal = NULL_LITERAL

    def format_primitive(self, value: object, options: PrimitiveOptions) -> StyledSegment | None:
        if value is None:
            return StyledSegment(self.null_literal, KEYWORD)
        if value is NO_VALUE:
            return StyledSegment("")
        if value is Ellipsis:
            return StyledSegment("Ellipsis", KEYWORD)
        if value is NotImplemented:
            return StyledSegment("NotImplemented", KEYWORD)
        if isinstance(value, bool):
            return StyledSegment("True" if value else "False", KEYWORD)
        if isinstance(value, Enum):
            return StyledSegment(self.format_enum(value), PLAIN)
        if isinstance(value, int):
            return StyledSegment(self.format_int(int(value), options), NUMBER)
        if isinstance(value, float):
            return StyledSegment(self.format_float(float(value), options), NUMBER)
        if isinstance(value, complex):
            return StyledSegment(self.format_complex(complex(value), options), NUMBER)
        if isinstance(value, str):
            return StyledSegment(self.format_string(str(value), options), STRING)
        if isinstance(value, (bytes, bytearray)):
            return StyledSegment(repr(value), STRING)
        return None

    def format_enum(self, member: Enum) -> str:
        # Flag combinations without a name of their own fall back to repr.
        if member.name is None:
            return repr(member)
        return f"{type(member).__name__}.{member.name}"

    def format_int(self, value: int, options: PrimitiveOptions) -> str:
        digits = f"{abs(value):#x}" if options.number_radix == 16 else str(abs(value))
        if value < 0:
            return options.culture.negative_sign + digits
        return digits

    def format_float(self, value: float, options: PrimitiveOptions) -> str:
        return self._localize(float.__repr__(value), options)

    def format_complex(self, value: complex, options: PrimitiveOptions) -> str:
        return self._localize(complex.__repr__(value), options)

    def _localize(self, text: str, options: PrimitiveOptions) -> str:
        culture = options.culture
        if culture.decimal_point != ".":
            text = text.replace(".", culture.decimal_point)
        if culture.negative_sign != "-":
            text = text.replace("-", culture.negative_sign)
        return text

    def format_string(self, text: str, options: PrimitiveOptions) -> str:
        prefix = ""
        if options.include_code_points and len(text) == 1:
            prefix = self.format_int(ord(text), options) + " "

        if not options.quote_strings_and_characters:
            return prefix + text

        parts = [prefix, '"']
        for index, char in enumerate(text):
            escaped = _ESCAPES.get(char)
            if escaped is not None:
                parts.append(escaped)
            elif char == "\0":
                following = text[index + 1 : index + 2]
                parts.append("\\x00" if following in _OCTAL_DIGITS else "\\0")
            elif options.escape_non_printable_characters and not char.isprintable():
                parts.append(_escape_code_point(char))
            else:
                parts.append(char)
        parts.append('"')
        return "".join(parts)
