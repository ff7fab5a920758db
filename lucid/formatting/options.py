"""
Option records and enumerations shared by the formatters.

All records are frozen dataclasses: a print call receives its options, derives
narrower ones (builder options, primitive options) with `dataclasses.replace`,
and never mutates anything a concurrent print could observe.
"""

from __future__ import annotations

import locale
from dataclasses import dataclass, replace
from enum import Enum, IntEnum

SUPPORTED_RADIXES = (10, 16)


class Level(IntEnum):
    """How deep the formatter is in the object graph.

    FIRST_DETAILED and FIRST_SIMPLE are the two flavors of the value being
    printed; every descent into a member or element moves one step towards
    THIRD_PLUS, where it stays.
    """

    FIRST_DETAILED = 0
    FIRST_SIMPLE = 1
    SECOND = 2
    THIRD_PLUS = 3

    def increment(self) -> Level:
        return Level(min(self + 1, Level.THIRD_PLUS))

    @property
    def is_root(self) -> bool:
        return self <= Level.FIRST_SIMPLE


class MemberDisplayMode(Enum):
    """Whether and how the members of an object are shown."""

    HIDDEN = "hidden"
    SINGLE_LINE = "single_line"
    SEPARATE_LINES = "separate_lines"


def _check_radix(radix: int) -> None:
    if radix not in SUPPORTED_RADIXES:
        raise ValueError(f"Unsupported number radix {radix}; expected one of {SUPPORTED_RADIXES}")


@dataclass(frozen=True)
class NumberCulture:
    """Locale-dependent pieces of number formatting."""

    decimal_point: str = "."
    negative_sign: str = "-"

    @classmethod
    def current(cls) -> NumberCulture:
        """Read the decimal point of the process locale (LC_NUMERIC)."""
        conventions = locale.localeconv()
        return cls(decimal_point=str(conventions.get("decimal_point") or "."))


INVARIANT_CULTURE = NumberCulture()


@dataclass(frozen=True)
class PrimitiveOptions:
    number_radix: int = 10
    include_code_points: bool = False
    quote_strings_and_characters: bool = True
    escape_non_printable_characters: bool = True
    culture: NumberCulture = INVARIANT_CULTURE

    def __post_init__(self):
        _check_radix(self.number_radix)


@dataclass(frozen=True)
class TypeNameOptions:
    array_bound_radix: int = 10
    show_namespaces: bool = False
    use_builtin_keywords: bool = True

    def __post_init__(self):
        _check_radix(self.array_bound_radix)


@dataclass(frozen=True)
class BuilderOptions:
    indentation: str = "  "
    new_line: str = "\n"
    ellipsis: str = "..."
    maximum_line_length: int = 120
    maximum_output_length: int = 20_000

    def with_maximum_output_length(self, length: int) -> BuilderOptions:
        return replace(self, maximum_output_length=length)


@dataclass(frozen=True)
class PrintOptions:
    """Everything a single pretty-print call is configured with."""

    member_display_format: MemberDisplayMode = MemberDisplayMode.SINGLE_LINE
    maximum_output_length: int = 20_000
    maximum_line_length: int = 120
    number_radix: int = 10
    escape_non_printable_characters: bool = True
    ellipsis: str = "..."
    indentation: str = "  "
    culture: NumberCulture = INVARIANT_CULTURE

    def __post_init__(self):
        _check_radix(self.number_radix)
        if self.maximum_output_length < 0:
            raise ValueError("maximum_output_length must not be negative")
        if self.maximum_line_length <= 0:
            raise ValueError("maximum_line_length must be positive")

    def builder_options(self) -> BuilderOptions:
        return BuilderOptions(
            indentation=self.indentation,
            ellipsis=self.ellipsis,
            maximum_line_length=self.maximum_line_length,
            maximum_output_length=self.maximum_output_length,
        )

    def primitive_options(self, quote: bool = True) -> PrimitiveOptions:
        return PrimitiveOptions(
            number_radix=self.number_radix,
            quote_strings_and_characters=quote,
            escape_non_printable_characters=self.escape_non_printable_characters,
            culture=self.culture,
        )

    def type_name_options(self) -> TypeNameOptions:
        return TypeNameOptions(array_bound_radix=self.number_radix)
