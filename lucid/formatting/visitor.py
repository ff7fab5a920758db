"""
The recursive value formatter.

A Visitor turns one value into a StyledString. It is created for a single
print call and carries all per-call state: the current member display mode,
the quoting override used by display templates, and the set of objects whose
members are being formatted right now (cycle detection).

Formatting a value goes through these steps, the first that applies wins:

  1. Literals (numbers, strings, None, enum members) via PrimitiveFormatter.
  2. Custom formatters for type objects and callables.
  3. Key/value pairs: `{ key, value }`.
  4. Arrays: `int[3] { 1, 2, 3 }`.
  5. A header chosen from the count of a collection (`list(3)`), a display
     template, an overridden repr (`[Point(1, 2)]`) or the bare type name,
     followed by the members unless the header already said everything.

Members, elements and mapping entries are collected into FormattedMember lists
first and written out afterwards, which lets the layout decide between one
line and one member per line. Collection stops shortly after the output budget
is used up; the Builder then cuts the output at the exact limit.

Failures never escape a single member: a raising getter, repr or iterator is
shown as an inline `!<ExceptionType>` marker. The only failure that aborts a
whole print is running out of stack, which `format_object` turns into a fixed
message.
"""

from __future__ import annotations

import collections.abc
import functools
import inspect
import logging
import reprlib
import sys
from enum import Enum
from typing import Any, NamedTuple

from .arrays import array_elements, array_flat_elements, array_lengths, array_type_of, is_array
from .builder import Builder
from .custom import CustomObjectFormatter, default_formatters
from .hints import Browsable, get_display_hint, get_display_proxy
from .members import MemberDescriptor, MemberFilter, list_members, member_sort_key
from .options import Level, MemberDisplayMode, PrimitiveOptions, PrintOptions
from .primitives import PrimitiveFormatter
from .styled import EMPTY, ERROR, MEMBER_NAME, PUNCTUATION, StyledString
from .templates import TemplateEvaluator
from .type_names import TypeNameFormatter

logger = logging.getLogger(__name__)

STACK_OVERFLOW_MESSAGE = "<Stack overflow while evaluating object>"

# Each nesting level costs a handful of Python frames.
_FRAMES_PER_LEVEL = 8

_RECURSIVE_REPR_CODE = reprlib.recursive_repr()(lambda self: "").__code__


class ValueShape(Enum):
    PAIR = "pair"
    ARRAY = "array"
    RECORD = "record"
    MAPPING = "mapping"
    COLLECTION = "collection"
    ITERABLE = "iterable"
    OBJECT = "object"


def _is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and isinstance(getattr(type(value), "_fields", None), tuple)


def classify(value: Any) -> ValueShape:
    """Decide once how a non-primitive value is laid out."""
    if _is_named_tuple(value):
        if type(value)._fields == ("key", "value"):
            return ValueShape.PAIR
        return ValueShape.RECORD
    if is_array(value):
        return ValueShape.ARRAY
    if isinstance(value, collections.abc.Mapping):
        return ValueShape.MAPPING
    # iterators are consumed by iteration, so they are shown as plain objects
    if isinstance(value, collections.abc.Iterator):
        return ValueShape.OBJECT
    if isinstance(value, collections.abc.Iterable):
        if isinstance(value, collections.abc.Sized):
            return ValueShape.COLLECTION
        return ValueShape.ITERABLE
    return ValueShape.OBJECT


def _is_generated_repr(function: Any) -> bool:
    function = inspect.unwrap(function)
    code = getattr(function, "__code__", None)
    if code is None:
        return False
    if code is _RECURSIVE_REPR_CODE:
        # reprlib.recursive_repr keeps the decorated repr in its closure
        for cell in function.__closure__ or ():
            if inspect.isfunction(cell.cell_contents):
                return _is_generated_repr(cell.cell_contents)
        return False
    return code.co_filename == "<string>" or code.co_filename.startswith("<attrs generated")


@functools.lru_cache(maxsize=1024)
def _declares_repr(cls: type) -> bool:
    for klass in cls.__mro__:
        function = vars(klass).get("__repr__")
        if function is None:
            continue
        if klass is object:
            return False
        return not _is_generated_repr(function)
    return False


def has_overridden_repr(cls: type) -> bool:
    """True when the class (or a base other than object) defines its own repr.

    Reprs generated by dataclasses and attrs only list the fields, which the
    member dump shows better, so they do not count.
    """
    try:
        return _declares_repr(cls)
    except TypeError:
        # unhashable metaclass instances cannot be cached
        return _declares_repr.__wrapped__(cls)


class FormattedMember(NamedTuple):
    """A member, element or entry rendered and waiting to be laid out.

    `index` is non-negative for elements, whose name is their `[index]`.
    """

    index: int
    name: StyledString
    value: StyledString

    @property
    def minimal_length(self) -> int:
        # Every rendered member is followed or preceded by at least one separator character.
        return len(self.name) + len(self.value) + 1

    @property
    def display_name(self) -> StyledString:
        if self.name:
            return self.name
        return StyledString.of(f"[{self.index}]", MEMBER_NAME)

    def has_key_name(self) -> bool:
        plain = self.name.plain
        return self.index >= 0 and len(plain) >= 2 and plain[0] == "[" and plain[-1] == "]"

    def collection_entry(self) -> StyledString:
        if self.has_key_name():
            return "{ " + self.name[1 : len(self.name) - 1] + ", " + self.value + " }"
        return self.value

    def named_entry(self, separator: str) -> StyledString:
        return self.display_name + StyledString.of(separator, PUNCTUATION) + self.value


class _MemberCollector:
    """Collects formatted members until the output budget is used up, plus one more.

    The running estimate subtracts each member's minimal length, a lower bound of
    its rendered size, so members are only ever over-collected, never under.
    """

    def __init__(self, visitor: Visitor, limit: int):
        self.members: list[FormattedMember] = []
        self.exhausted = False
        self.truncated = False
        self.error: Exception | None = None
        self._remaining = limit
        self._builder_options = visitor.builder_options

    def builder(self) -> Builder:
        limit = max(self._remaining, 0)
        return Builder(self._builder_options.with_maximum_output_length(limit), suppress_ellipsis=True)

    def add(self, member: FormattedMember, truncated: bool = False) -> bool:
        self.members.append(member)
        self.truncated = self.truncated or truncated
        if self.exhausted:
            return False
        self._remaining -= member.minimal_length
        if self._remaining <= 0:
            self.exhausted = True
        return True


class Visitor:
    def __init__(
        self,
        options: PrintOptions | None = None,
        *,
        primitive_formatter: PrimitiveFormatter | None = None,
        type_name_formatter: TypeNameFormatter | None = None,
        member_filter: MemberFilter | None = None,
        custom_formatters: tuple[CustomObjectFormatter, ...] | None = None,
    ):
        self.options = options or PrintOptions()
        self.builder_options = self.options.builder_options()
        self.type_name_options = self.options.type_name_options()
        self.primitives = primitive_formatter or PrimitiveFormatter()
        self.type_names = type_name_formatter or TypeNameFormatter()
        self.member_filter = member_filter or MemberFilter()
        if custom_formatters is None:
            custom_formatters = default_formatters(self.type_names)
        self.custom_formatters = custom_formatters
        self.templates = TemplateEvaluator(self._format_embedded, self._append_exception_marker)

        self.member_display = self.options.member_display_format
        self._quote = True
        self._primitive_options: dict[bool, PrimitiveOptions] = {}
        self._visited: set[int] = set()
        self._depth = 0
        self._max_depth = max(sys.getrecursionlimit() // _FRAMES_PER_LEVEL, 16)

    # Entry points

    def format_object(self, value: Any, level: Level) -> StyledString:
        if value is None:
            return StyledString((self.primitives.format_primitive(None, self._primitives_for(level)),))

        builder = Builder(self.builder_options)
        try:
            self._format_recursive(builder, value, level)
        except RecursionError:
            logger.debug("Ran out of stack formatting a %s", type(value).__name__)
            return StyledString.of(STACK_OVERFLOW_MESSAGE, ERROR)
        finally:
            self._visited.clear()
            self._depth = 0
        return builder.to_styled_string()

    def evaluate_to_string(
        self, limit: int, template: str | None, value: Any, level: Level
    ) -> StyledString | None:
        if not template:
            return None
        builder = Builder(
            self.builder_options.with_maximum_output_length(max(limit, 0)), suppress_ellipsis=True
        )
        self.templates.evaluate(builder, template, value, level)
        return builder.to_styled_string()

    # Recursion

    def _primitives_for(self, level: Level) -> PrimitiveOptions:
        quote = self._quote and level != Level.FIRST_DETAILED
        options = self._primitive_options.get(quote)
        if options is None:
            options = self._primitive_options[quote] = self.options.primitive_options(quote)
        return options

    def _format_recursive(self, builder: Builder, value: Any, level: Level) -> str | None:
        """Format `value` into `builder`; returns the display name template of its type, if any."""
        saved_mode = self.member_display
        self._depth += 1
        try:
            if self._depth > self._max_depth:
                raise RecursionError("object graph is nested too deeply")
            if level >= Level.SECOND and self.member_display is MemberDisplayMode.SEPARATE_LINES:
                self.member_display = MemberDisplayMode.SINGLE_LINE

            primitive = self.primitives.format_primitive(value, self._primitives_for(level))
            if primitive is not None:
                builder.append(primitive)
                return None

            custom = self._find_custom_formatter(value)
            if custom is not None and custom.is_formatting_exhaustive:
                self._append_custom(builder, custom, value, level)
                return None

            shape = classify(value)
            if shape is ValueShape.PAIR:
                if level == Level.FIRST_DETAILED:
                    builder.append(self._type_name(type(value)))
                    builder.append(" ")
                self._format_pair(builder, value.key, value.value, level)
                return None

            if shape is ValueShape.ARRAY:
                if id(value) in self._visited:
                    builder.append_infinite_recursion_marker()
                    return None
                self._visited.add(id(value))
                try:
                    self._format_array(builder, value, level)
                finally:
                    self._visited.discard(id(value))
                return None

            return self._format_structured(builder, value, shape, custom, level)
        finally:
            self.member_display = saved_mode
            self._depth -= 1

    def _format_structured(
        self,
        builder: Builder,
        value: Any,
        shape: ValueShape,
        custom: CustomObjectFormatter | None,
        level: Level,
    ) -> str | None:
        hint = get_display_hint(type(value))
        display_name = hint.name if hint is not None else None
        is_collection = shape in (ValueShape.MAPPING, ValueShape.COLLECTION)
        suppress_members = False

        if is_collection:
            self._append_collection_header(builder, value)
        elif hint is not None and hint.value:
            if level == Level.FIRST_DETAILED:
                builder.append(self._type_name(type(value)))
                builder.append("(", PUNCTUATION)
            self.templates.evaluate(builder, hint.value, value, level)
            if level == Level.FIRST_DETAILED:
                builder.append(")", PUNCTUATION)
            suppress_members = True
        elif custom is not None:
            self._append_custom(builder, custom, value, level)
            suppress_members = True
        elif shape is ValueShape.RECORD or has_overridden_repr(type(value)):
            self._append_repr(builder, value, bracketed=shape is not ValueShape.RECORD)
            suppress_members = True
        else:
            builder.append(self._type_name(type(value)))

        mode = self.member_display
        if mode is MemberDisplayMode.HIDDEN:
            if not is_collection:
                return display_name
            mode = MemberDisplayMode.SINGLE_LINE

        include_non_public = mode is MemberDisplayMode.SEPARATE_LINES
        inline = mode is MemberDisplayMode.SINGLE_LINE

        proxy = self._make_proxy(value)
        if proxy is not None:
            include_non_public = False
            suppress_members = False

        if not suppress_members:
            self._format_members(builder, value, proxy, shape, include_non_public, inline, level)
        return display_name

    def _format_embedded(self, builder: Builder, value: Any, level: Level, quote: bool) -> None:
        """Format a value referenced from a display template: quoting as requested, members hidden."""
        saved = (self._quote, self.member_display)
        self._quote = quote
        self.member_display = MemberDisplayMode.HIDDEN
        try:
            self._format_recursive(builder, value, level)
        finally:
            self._quote, self.member_display = saved

    # Headers

    def _type_name(self, cls: type) -> StyledString:
        return self.type_names.format_type_name(cls, self.type_name_options)

    def _find_custom_formatter(self, value: Any) -> CustomObjectFormatter | None:
        for formatter in self.custom_formatters:
            if formatter.is_applicable(value):
                return formatter
        return None

    def _append_custom(
        self, builder: Builder, custom: CustomObjectFormatter, value: Any, level: Level
    ) -> None:
        try:
            builder.append(custom.format(value, level))
        except RecursionError:
            raise
        except Exception as exc:
            self._append_exception_marker(builder, exc)

    def _append_collection_header(self, builder: Builder, collection: Any) -> None:
        builder.append(self._type_name(type(collection)))
        try:
            count = len(collection)
        except RecursionError:
            raise
        except Exception:
            return
        builder.append("(", PUNCTUATION)
        builder.append(str(count))
        builder.append(")", PUNCTUATION)

    def _append_repr(self, builder: Builder, value: Any, bracketed: bool) -> None:
        try:
            text = repr(value)
        except RecursionError:
            raise
        except Exception as exc:
            self._append_exception_marker(builder, exc)
            return
        if bracketed:
            builder.append("[" + text + "]")
        else:
            builder.append(text)

    def _append_exception_marker(self, builder: Builder, exc: BaseException) -> None:
        builder.append(f"!<{self._type_name(type(exc)).plain}>", ERROR)

    def _make_proxy(self, value: Any) -> Any | None:
        factory = get_display_proxy(type(value))
        if factory is None:
            return None
        try:
            return factory(value)
        except RecursionError:
            raise
        except Exception:
            logger.debug("Display proxy for %s failed", type(value).__name__, exc_info=True)
            return None

    # Members

    def _collector(self, builder: Builder) -> _MemberCollector:
        # Collect at least a line's worth so the one-line layout decision does not
        # depend on how much budget is left.
        limit = max(builder.remaining, self.builder_options.maximum_line_length + 1)
        return _MemberCollector(self, limit)

    def _format_members(
        self,
        builder: Builder,
        value: Any,
        proxy: Any | None,
        shape: ValueShape,
        include_non_public: bool,
        inline: bool,
        level: Level,
    ) -> None:
        builder.append(" ")
        if id(value) in self._visited:
            builder.append_infinite_recursion_marker()
            return
        if builder.truncated:
            return

        self._visited.add(id(value))
        try:
            if proxy is None and shape is ValueShape.MAPPING:
                self._format_mapping_members(builder, value, inline, level)
            elif proxy is None and shape in (ValueShape.COLLECTION, ValueShape.ITERABLE):
                pairs = isinstance(value, collections.abc.ItemsView)
                self._format_sequence_members(builder, value, inline, level, pairs=pairs)
            else:
                self._format_object_members(
                    builder, value if proxy is None else proxy, value, include_non_public, inline, level
                )
        finally:
            self._visited.discard(id(value))

    def _format_pair(self, builder: Builder, key: Any, value: Any, level: Level) -> None:
        builder.append_group_opening()
        builder.append_collection_item_separator(is_first=True, inline=True)
        self._format_recursive(builder, key, level.increment())
        builder.append_collection_item_separator(is_first=False, inline=True)
        self._format_recursive(builder, value, level.increment())
        builder.append_group_closing(inline=True)

    def _format_mapping_members(self, builder: Builder, mapping: Any, inline: bool, level: Level) -> None:
        collector = self._collector(builder)
        try:
            for index, (key, item) in enumerate(mapping.items()):
                entry = collector.builder()
                self._format_pair(entry, key, item, level)
                formatted = FormattedMember(index, EMPTY, entry.to_styled_string())
                if not collector.add(formatted, entry.truncated):
                    break
        except RecursionError:
            raise
        except Exception as exc:
            collector.error = exc
        self._append_group(builder, collector, inline, collection_format=True)

    def _format_sequence_members(
        self, builder: Builder, sequence: Any, inline: bool, level: Level, pairs: bool = False
    ) -> None:
        collector = self._collector(builder)
        try:
            for index, item in enumerate(sequence):
                entry = collector.builder()
                if pairs and isinstance(item, tuple) and len(item) == 2:
                    self._format_pair(entry, item[0], item[1], level)
                else:
                    self._format_recursive(entry, item, level.increment())
                formatted = FormattedMember(index, EMPTY, entry.to_styled_string())
                if not collector.add(formatted, entry.truncated):
                    break
        except RecursionError:
            raise
        except Exception as exc:
            collector.error = exc
        self._append_group(builder, collector, inline, collection_format=True)

    def _format_array(self, builder: Builder, array: Any, level: Level) -> None:
        try:
            header = self.type_names.format_array_type_name(
                array_type_of(array), array, self.type_name_options
            )
            elements = array_elements(array)
            rank = len(array_lengths(array))
        except RecursionError:
            raise
        except Exception as exc:
            builder.append(self._type_name(type(array)))
            builder.append(" ")
            self._append_exception_marker(builder, exc)
            return

        # Arrays show their elements even when members are hidden.
        inline = self.member_display is not MemberDisplayMode.SEPARATE_LINES
        builder.append(header)
        builder.append(" ")
        self._format_array_dimension(builder, elements, rank, inline, level)

    def _format_array_dimension(
        self, builder: Builder, elements: collections.abc.Iterable, rank: int, inline: bool, level: Level
    ) -> None:
        if rank <= 1:
            self._format_sequence_members(builder, elements, inline, level)
            return
        collector = self._collector(builder)
        try:
            for index, row in enumerate(elements):
                entry = collector.builder()
                self._format_array_dimension(entry, row, rank - 1, True, level)
                formatted = FormattedMember(index, EMPTY, entry.to_styled_string())
                if not collector.add(formatted, entry.truncated):
                    break
        except RecursionError:
            raise
        except Exception as exc:
            collector.error = exc
        self._append_group(builder, collector, inline, collection_format=True)

    def _format_object_members(
        self, builder: Builder, obj: Any, original: Any, include_non_public: bool, inline: bool, level: Level
    ) -> None:
        collector = self._collector(builder)
        self._collect_object_members(collector, obj, include_non_public, level)
        collection_format = isinstance(original, collections.abc.Iterable) and all(
            member.index >= 0 for member in collector.members
        )
        self._append_group(builder, collector, inline, collection_format)

    def _collect_object_members(
        self, collector: _MemberCollector, obj: Any, include_non_public: bool, level: Level
    ) -> bool:
        """Add the members of `obj` to `collector`; False once the budget stopped collection."""
        members = sorted(list_members(obj), key=lambda member: member_sort_key(member.name))
        for member in members:
            if not self.member_filter.include(member):
                continue

            root_hidden = False
            ignore_visibility = False
            if member.browsable is not None:
                if member.browsable is Browsable.NEVER:
                    continue
                ignore_visibility = True
                root_hidden = member.browsable is Browsable.ROOT_HIDDEN

            if not (include_non_public or ignore_visibility or member.is_public):
                continue

            try:
                value = member.getter(obj)
            except RecursionError:
                raise
            except Exception as exc:
                entry = collector.builder()
                self._append_exception_marker(entry, exc)
                if not collector.add(FormattedMember(-1, self._member_name(member), entry.to_styled_string())):
                    return False
                continue

            if root_hidden:
                if not self._collect_root_hidden(collector, member, value, include_non_public, level):
                    return False
                continue

            entry = collector.builder()
            display_name = self._format_recursive(entry, value, level.increment())
            name = None
            if display_name:
                name = self.evaluate_to_string(
                    self.builder_options.maximum_line_length, display_name, value, level.increment()
                )
            if not collector.add(
                FormattedMember(-1, name or self._member_name(member), entry.to_styled_string()),
                entry.truncated,
            ):
                return False
        return True

    def _collect_root_hidden(
        self,
        collector: _MemberCollector,
        member: MemberDescriptor,
        value: Any,
        include_non_public: bool,
        level: Level,
    ) -> bool:
        """Add the elements (or members) of a root-hidden member in its place."""
        if value is None or id(value) in self._visited:
            return True

        shape = classify(value)
        if shape in (ValueShape.ARRAY, ValueShape.COLLECTION, ValueShape.ITERABLE):
            try:
                items = array_flat_elements(value) if shape is ValueShape.ARRAY else value
                for index, item in enumerate(items):
                    entry = collector.builder()
                    display_name = self._format_recursive(entry, item, level.increment())
                    name = self.evaluate_to_string(
                        self.builder_options.maximum_line_length, display_name, item, level
                    )
                    formatted = FormattedMember(index, name or EMPTY, entry.to_styled_string())
                    if not collector.add(formatted, entry.truncated):
                        return False
            except RecursionError:
                raise
            except Exception as exc:
                entry = collector.builder()
                self._append_exception_marker(entry, exc)
                return collector.add(FormattedMember(-1, self._member_name(member), entry.to_styled_string()))
            return True

        if self.primitives.format_primitive(value, self._primitives_for(level)) is not None:
            return True

        self._visited.add(id(value))
        try:
            return self._collect_object_members(collector, value, include_non_public, level)
        finally:
            self._visited.discard(id(value))

    def _member_name(self, member: MemberDescriptor) -> StyledString:
        return StyledString.of(member.name, MEMBER_NAME)

    # Layout

    def _fits_on_one_line(
        self, builder: Builder, collector: _MemberCollector, entries: list[StyledString]
    ) -> bool:
        if collector.exhausted or collector.truncated or collector.error is not None:
            return False
        width = builder.column + len("{ }")
        for entry in entries:
            if "\n" in entry.plain:
                return False
            width += len(entry) + len(", ")
        return width <= self.builder_options.maximum_line_length

    def _append_group(
        self, builder: Builder, collector: _MemberCollector, inline: bool, collection_format: bool
    ) -> None:
        separator = "=" if inline else ": "
        entries = [
            member.collection_entry() if collection_format else member.named_entry(separator)
            for member in collector.members
        ]
        one_line = inline or self._fits_on_one_line(builder, collector, entries)
        indentation = self.builder_options.indentation

        builder.append_group_opening()
        for index, entry in enumerate(entries):
            builder.append_collection_item_separator(is_first=index == 0, inline=one_line)
            builder.append(entry if one_line else entry.indent(indentation))
            if builder.remaining <= 0:
                break

        if collector.error is not None and builder.remaining > 0:
            builder.append_collection_item_separator(is_first=not entries, inline=one_line)
            self._append_exception_marker(builder, collector.error)
            builder.append(" ")
            builder.append(self.builder_options.ellipsis, PUNCTUATION)
        builder.append_group_closing(one_line)
