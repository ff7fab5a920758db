"""Tests for styled text (lucid/formatting/styled.py)."""

import pytest
from rich.text import Text

from lucid.formatting.styled import (
    EMPTY,
    NUMBER,
    PLAIN,
    STRING,
    StyledSegment,
    StyledString,
)


class TestStyledString:
    """Construction, equality and concatenation."""

    def test_adjacent_segments_with_same_style_merge(self):
        """Two plain runs become one segment."""
        styled = StyledString(["a", "b", StyledSegment("1", NUMBER)])
        assert styled.segments == (StyledSegment("ab", PLAIN), StyledSegment("1", NUMBER))

    def test_empty_segments_are_dropped(self):
        """Empty text carries no information, whatever its style."""
        styled = StyledString([StyledSegment("", NUMBER), StyledSegment("", STRING)])
        assert styled == EMPTY
        assert not styled
        assert len(styled) == 0

    def test_equal_rendering_compares_equal(self):
        """Strings built differently but rendering the same are equal and hash alike."""
        left = StyledString.of("ab")
        right = StyledString(["a", "b"])
        assert left == right
        assert hash(left) == hash(right)

    def test_style_participates_in_equality(self):
        """Same text in a different style is a different StyledString."""
        assert StyledString.of("1", NUMBER) != StyledString.of("1")

    def test_plain_and_str(self):
        """`plain` and `str()` give the unstyled text."""
        styled = StyledString([StyledSegment("x", NUMBER), StyledSegment("y", STRING)])
        assert styled.plain == "xy"
        assert str(styled) == "xy"
        assert len(styled) == 2

    def test_add_and_radd_with_str(self):
        """Plain str concatenates on either side."""
        styled = StyledString.of("1", NUMBER)
        assert (styled + "x").plain == "1x"
        assert ("x" + styled).plain == "x1"
        assert ("x" + styled).segments[1] == StyledSegment("1", NUMBER)

    def test_add_rejects_other_types(self):
        """Concatenating a non-text value is a TypeError."""
        with pytest.raises(TypeError):
            StyledString.of("1") + 1  # noqa: B018

    def test_join(self):
        """join() places the separator between items only."""
        joined = StyledString.join(", ", ["a", StyledString.of("1", NUMBER), "b"])
        assert joined.plain == "a, 1, b"
        assert StyledString.join(", ", []) == EMPTY


class TestSlicing:
    """Slicing keeps the styles of the covered characters."""

    def test_slice_across_segments(self):
        """A slice spanning two segments keeps both styles."""
        styled = StyledString([StyledSegment("abc", NUMBER), StyledSegment("def", STRING)])
        assert styled[2:4] == StyledString(
            [StyledSegment("c", NUMBER), StyledSegment("d", STRING)]
        )

    def test_open_slices(self):
        """Omitted bounds default to the whole string."""
        styled = StyledString.of("[key]")
        assert styled[1:].plain == "key]"
        assert styled[:-1].plain == "[key"

    def test_integer_index_is_rejected(self):
        """Only slices are supported."""
        with pytest.raises(TypeError):
            StyledString.of("abc")[0]

    def test_step_is_rejected(self):
        """Stepped slices would interleave styles, so they are refused."""
        with pytest.raises(ValueError):
            StyledString.of("abc")[::2]


class TestIndentAndRich:
    """Indentation and conversion to Rich Text."""

    def test_indent_after_line_breaks(self):
        """The prefix goes after every line break, not before the first line."""
        styled = StyledString.of("a\nb\nc")
        assert styled.indent("  ").plain == "a\n  b\n  c"

    def test_indent_single_line_is_identity(self):
        """Single-line text is returned unchanged."""
        styled = StyledString.of("abc", NUMBER)
        assert styled.indent("  ") is styled

    def test_to_text(self):
        """to_text() produces a Rich Text with one span per styled segment."""
        styled = StyledString([StyledSegment("1", NUMBER), StyledSegment(" x")])
        text = styled.to_text()
        assert isinstance(text, Text)
        assert text.plain == "1 x"
        assert [span.style for span in text.spans] == [NUMBER]

    def test_rich_protocol(self):
        """__rich__ lets a console print StyledStrings directly."""
        styled = StyledString.of('"s"', STRING)
        assert styled.__rich__().plain == '"s"'
