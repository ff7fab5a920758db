"""
Styled text: the output representation of the pretty-printer.

Every formatter in this package produces a StyledString, an immutable ordered
sequence of (text, style) segments. The style is a *name* (for example
"lucid.number"), not a color. The shared console's Rich theme decides what each
name looks like, so the formatters never know anything about the terminal.

Rich integration:
  StyledString implements `__rich__`, so `console.print(styled)` just works.
  `to_text()` converts explicitly to a `rich.text.Text` when a caller needs to
  combine it with other Rich renderables.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import NamedTuple, Union

from rich.text import Text

# Style names. The console theme (console.py) maps these to colors.
PLAIN = ""
KEYWORD = "lucid.keyword"
NUMBER = "lucid.number"
STRING = "lucid.string"
TYPE_NAME = "lucid.type"
MEMBER_NAME = "lucid.member"
FUNCTION_NAME = "lucid.function"
PUNCTUATION = "lucid.punctuation"
ERROR = "lucid.error"


class StyledSegment(NamedTuple):
    """A run of text rendered with a single style."""

    text: str
    style: str = PLAIN


Styleable = Union["StyledString", StyledSegment, str]


class StyledString:
    """Immutable sequence of StyledSegments.

    Adjacent segments sharing a style are merged and empty segments dropped, so
    two StyledStrings that render identically also compare equal.
    """

    __slots__ = ("_segments", "_plain")

    def __init__(self, segments: Iterable[StyledSegment | str] = ()):
        merged: list[StyledSegment] = []
        for segment in segments:
            if isinstance(segment, str):
                segment = StyledSegment(segment)
            if not segment.text:
                continue
            if merged and merged[-1].style == segment.style:
                merged[-1] = StyledSegment(merged[-1].text + segment.text, segment.style)
            else:
                merged.append(segment)
        self._segments = tuple(merged)
        self._plain = "".join(segment.text for segment in self._segments)

    @classmethod
    def of(cls, text: str, style: str = PLAIN) -> StyledString:
        return cls((StyledSegment(text, style),))

    @classmethod
    def join(cls, separator: Styleable, items: Iterable[Styleable]) -> StyledString:
        parts: list[StyledSegment] = []
        for index, item in enumerate(items):
            if index:
                parts.extend(_segments_of(separator))
            parts.extend(_segments_of(item))
        return cls(parts)

    @property
    def segments(self) -> tuple[StyledSegment, ...]:
        return self._segments

    @property
    def plain(self) -> str:
        """The text without any styling."""
        return self._plain

    def __len__(self) -> int:
        return len(self._plain)

    def __bool__(self) -> bool:
        return bool(self._plain)

    def __iter__(self) -> Iterator[StyledSegment]:
        return iter(self._segments)

    def __str__(self) -> str:
        return self._plain

    def __repr__(self) -> str:
        return f"StyledString({self._plain!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StyledString):
            return self._segments == other._segments
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._segments)

    def __add__(self, other: Styleable) -> StyledString:
        if not isinstance(other, (StyledString, StyledSegment, str)):
            return NotImplemented
        return StyledString(self._segments + tuple(_segments_of(other)))

    def __radd__(self, other: Styleable) -> StyledString:
        if not isinstance(other, (StyledSegment, str)):
            return NotImplemented
        return StyledString(tuple(_segments_of(other)) + self._segments)

    def __getitem__(self, key: slice) -> StyledString:
        """Slice by character range, keeping the styles of the covered text."""
        if not isinstance(key, slice):
            raise TypeError("StyledString indices must be slices")
        start, stop, step = key.indices(len(self._plain))
        if step != 1:
            raise ValueError("StyledString slices do not support a step")

        result: list[StyledSegment] = []
        offset = 0
        for segment in self._segments:
            end = offset + len(segment.text)
            if end > start and offset < stop:
                result.append(
                    StyledSegment(
                        segment.text[max(start - offset, 0) : stop - offset], segment.style
                    )
                )
            offset = end
        return StyledString(result)

    def indent(self, prefix: str) -> StyledString:
        """Insert `prefix` after every line break (the first line is left alone)."""
        if "\n" not in self._plain:
            return self
        return StyledString(
            StyledSegment(segment.text.replace("\n", "\n" + prefix), segment.style)
            for segment in self._segments
        )

    def to_text(self) -> Text:
        """Convert to a Rich Text object."""
        return Text.assemble(*((segment.text, segment.style) for segment in self._segments))

    def __rich__(self) -> Text:
        return self.to_text()


EMPTY = StyledString()


def _segments_of(value: Styleable) -> Iterable[StyledSegment]:
    if isinstance(value, StyledString):
        return value.segments
    if isinstance(value, StyledSegment):
        return (value,)
    return (StyledSegment(value),)
