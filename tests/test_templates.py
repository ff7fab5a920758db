"""Tests for inline display templates (lucid/formatting/templates.py)."""

import pytest

from lucid.formatting.options import Level
from lucid.formatting.visitor import Visitor


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class Person:
    def __init__(self, name, age):
        self.name = name
        self.age = age
        self.items = [1, 2]
        self.home = Point(1, 2)

    def greet(self):
        return "hi"

    def add(self, other):
        return self.age + other

    @property
    def broken(self):
        raise ValueError("nope")


class Reading:
    class Failure(Exception):
        pass

    @property
    def value(self):
        raise Reading.Failure("sensor offline")


def evaluate(template, value=None, limit=1000):
    if value is None:
        value = Person("Ann", 30)
    result = Visitor().evaluate_to_string(limit, template, value, Level.FIRST_SIMPLE)
    return None if result is None else result.plain


class TestReferences:
    """Member and method references."""

    def test_members(self):
        """Members are formatted like values: strings quoted, numbers plain."""
        assert evaluate("{name} is {age}") == '"Ann" is 30'

    def test_no_quotes_modifier(self):
        """`nq` prints strings raw."""
        assert evaluate("{name,nq} is {age}") == "Ann is 30"
        assert evaluate("{name, nq}") == "Ann"

    def test_whitespace_inside_braces(self):
        """Spaces around the reference are ignored."""
        assert evaluate("{ age }") == "30"

    def test_method_call(self):
        """`()` calls a zero-argument method."""
        assert evaluate("{greet()}") == '"hi"'

    def test_method_without_parentheses(self):
        """A method referenced without `()` is still called."""
        assert evaluate("{greet}") == '"hi"'

    def test_case_insensitive_fallback(self):
        """A reference that does not match exactly matches ignoring case."""
        assert evaluate("{NAME,nq}") == "Ann"

    def test_collection_value(self):
        """Referenced collections still show their elements."""
        assert evaluate("{items}") == "list(2) { 1, 2 }"

    def test_object_value_hides_members(self):
        """Referenced objects are shown by type name only."""
        assert evaluate("{home}") == "Point"


class TestMarkers:
    """Unresolvable references render inline markers."""

    def test_missing_member(self):
        assert evaluate("a {missing} b") == "a !<Member 'missing' not found> b"

    def test_missing_method(self):
        assert evaluate("{missing()}") == "!<Method 'missing' not found>"

    def test_call_of_non_method(self):
        """Only routines can be called."""
        assert evaluate("{name()}") == "!<Method 'name' not found>"

    def test_method_with_required_arguments(self):
        """Methods that need arguments cannot be called from a template."""
        assert evaluate("{add()}") == "!<Method 'add' not found>"

    def test_raising_member(self):
        """A raising property shows the exception type."""
        assert evaluate("<{broken}>") == "<!<ValueError>>"

    def test_raising_member_uses_qualified_name(self):
        """Template markers spell the exception type like member markers do."""
        assert evaluate("{value}", Reading()) == "!<Reading.Failure>"
        printed = Visitor().format_object(Reading(), Level.FIRST_SIMPLE).plain
        assert printed == "Reading { value=!<Reading.Failure> }"

    def test_not_an_identifier(self):
        """Expressions beyond a single name are not supported."""
        assert evaluate("{x.y}") == "!<Member 'x.y' not found>"


class TestScanning:
    """Literal text, escapes and malformed templates."""

    def test_literal_text(self):
        assert evaluate("no references") == "no references"

    def test_escaped_brace(self):
        """A backslash before `{` produces a literal brace."""
        assert evaluate("\\{name}") == "{name}"

    def test_unclosed_brace(self):
        """An unbalanced `{` stops evaluation; the rest is copied."""
        assert evaluate("{age} {name") == "30 {name"

    def test_empty_template(self):
        """No template means no display name."""
        assert evaluate("") is None

    @pytest.mark.parametrize("limit, expected", [(0, ""), (4, "abcd"), (100, "abcdefgh")])
    def test_limit(self, limit, expected):
        """The result is cut at the limit without an ellipsis."""
        assert evaluate("abcdefgh", limit=limit) == expected
