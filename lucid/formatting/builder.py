"""
Budgeted accumulator for styled output.

The Builder is the only place that enforces the output budget. Formatters
append freely; once the budget runs out the in-flight text is cut to what
still fits, the ellipsis marker is appended once, and every later append is a
no-op. Formatters may consult `remaining` to stop producing work early, but
they never have to: truncation is always handled here.

Member values are formatted into their own builders (created with
`suppress_ellipsis=True`) and copied into the parent afterwards, so a
truncated member never carries its own ellipsis into the middle of the output.
"""

from __future__ import annotations

from .options import BuilderOptions
from .styled import PLAIN, PUNCTUATION, StyledSegment, StyledString


class Builder:
    def __init__(self, options: BuilderOptions, suppress_ellipsis: bool = False):
        self.options = options
        self.suppress_ellipsis = suppress_ellipsis
        self._segments: list[StyledSegment] = []
        self._length = 0
        self._column = 0
        self._truncated = False

    @property
    def remaining(self) -> int:
        return self.options.maximum_output_length - self._length

    @property
    def truncated(self) -> bool:
        """True once an append did not fit into the budget."""
        return self._truncated

    @property
    def column(self) -> int:
        """Number of characters written since the last line break."""
        return self._column

    def __len__(self) -> int:
        return self._length

    def append(self, value: StyledString | StyledSegment | str, style: str = PLAIN) -> None:
        if isinstance(value, StyledString):
            for segment in value.segments:
                self._append_segment(segment.text, segment.style)
        elif isinstance(value, StyledSegment):
            self._append_segment(value.text, value.style)
        else:
            self._append_segment(value, style)

    def _append_segment(self, text: str, style: str) -> None:
        if not text or self._truncated:
            return

        remaining = self.remaining
        if len(text) <= remaining:
            self._write(text, style)
            return

        if remaining > 0:
            self._write(text[:remaining], style)
        self._truncated = True
        if not self.suppress_ellipsis:
            self._write(self.options.ellipsis, PLAIN)

    def _write(self, text: str, style: str) -> None:
        self._segments.append(StyledSegment(text, style))
        self._length += len(text)
        newline = text.rfind("\n")
        if newline < 0:
            self._column += len(text)
        else:
            self._column = len(text) - newline - 1

    def append_group_opening(self) -> None:
        self.append("{", PUNCTUATION)

    def append_group_closing(self, inline: bool) -> None:
        if inline:
            self.append(" ")
        else:
            self.append(self.options.new_line)
        self.append("}", PUNCTUATION)

    def append_collection_item_separator(self, is_first: bool, inline: bool) -> None:
        if is_first:
            self.append(" " if inline else self.options.new_line)
        else:
            self.append(",", PUNCTUATION)
            self.append(" " if inline else self.options.new_line)
        if not inline:
            self.append(self.options.indentation)

    def append_infinite_recursion_marker(self) -> None:
        self.append_group_opening()
        self.append_collection_item_separator(is_first=True, inline=True)
        self.append("...", PUNCTUATION)
        self.append_group_closing(inline=True)

    def to_styled_string(self) -> StyledString:
        return StyledString(self._segments)

    def __str__(self) -> str:
        return "".join(segment.text for segment in self._segments)
