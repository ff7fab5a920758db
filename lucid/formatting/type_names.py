"""
Type name formatting.

Names follow the way Python spells types in annotations:
  - builtins by their bare name (`int`, `dict`) or, without builtin keywords,
    by their qualified name (`builtins.int`)
  - classes by `__qualname__` so nesting shows up as `Outer.Inner`; with
    namespaces the module is prepended, except for the session module
  - parameterized generics as `dict[str, int]`, unions as `int | None`,
    callables as `Callable[[int], str]`
  - arrays element-type first, then the dimensions: `int[3]`, `float[2, 3]`
"""

from __future__ import annotations

import collections.abc
import types
import typing
from typing import Any

from .arrays import ArrayType, array_lengths, array_lower_bounds
from .options import TypeNameOptions
from .styled import KEYWORD, PUNCTUATION, TYPE_NAME, StyledSegment, StyledString

SESSION_MODULE = "__main__"
BUILTINS_MODULE = "builtins"

_UNION_TYPES: tuple[Any, ...] = (typing.Union, types.UnionType)


def _strip_locals(qualname: str) -> str:
    return ".".join(part for part in qualname.split(".") if part != "<locals>")


class TypeNameFormatter:
    def format_type_name(self, tp: Any, options: TypeNameOptions) -> StyledString:
        return StyledString(self._segments(tp, options))

    def format_array_type_name(
        self, array_type: ArrayType, array: Any | None, options: TypeNameOptions
    ) -> StyledString:
        segments = list(self._segments(array_type.element_type, options))
        segments.append(StyledSegment("[", PUNCTUATION))
        if array is None:
            segments.append(StyledSegment("," * (array_type.rank - 1), PUNCTUATION))
        else:
            lengths = array_lengths(array)
            lower_bounds = array_lower_bounds(array)
            show_bounds = any(lower_bounds)
            for dimension, length in enumerate(lengths):
                if dimension:
                    segments.append(StyledSegment(", ", PUNCTUATION))
                if show_bounds:
                    lower = lower_bounds[dimension]
                    upper = lower + length - 1
                    text = (
                        f"{self._format_bound(lower, options)}.."
                        f"{self._format_bound(upper, options)}"
                    )
                else:
                    text = self._format_bound(length, options)
                segments.append(StyledSegment(text))
        segments.append(StyledSegment("]", PUNCTUATION))
        return StyledString(segments)

    def _format_bound(self, value: int, options: TypeNameOptions) -> str:
        if options.array_bound_radix == 16:
            return f"-{-value:#x}" if value < 0 else f"{value:#x}"
        return str(value)

    def _segments(self, tp: Any, options: TypeNameOptions) -> list[StyledSegment]:
        if tp is None or tp is types.NoneType:
            return [StyledSegment("None", KEYWORD)]
        if tp is Ellipsis:
            return [StyledSegment("...", PUNCTUATION)]
        if isinstance(tp, str):
            return [StyledSegment(tp, TYPE_NAME)]
        if isinstance(tp, typing.TypeVar):
            return [StyledSegment(tp.__name__, TYPE_NAME)]
        if isinstance(tp, typing.ForwardRef):
            return [StyledSegment(tp.__forward_arg__, TYPE_NAME)]
        if isinstance(tp, list):
            return self._bracketed([], tp, options)

        origin = typing.get_origin(tp)
        if origin is not None:
            return self._generic_segments(tp, origin, options)
        if isinstance(tp, type):
            return self._class_segments(tp, options)

        text = repr(tp)
        if not options.show_namespaces:
            text = text.removeprefix("typing.")
        return [StyledSegment(text, TYPE_NAME)]

    def _class_segments(self, cls: type, options: TypeNameOptions) -> list[StyledSegment]:
        module = getattr(cls, "__module__", None)
        name = _strip_locals(getattr(cls, "__qualname__", cls.__name__))
        if module == BUILTINS_MODULE:
            if options.use_builtin_keywords:
                return [StyledSegment(name, KEYWORD)]
            return [StyledSegment(f"{BUILTINS_MODULE}.{name}", TYPE_NAME)]
        if options.show_namespaces and module and module != SESSION_MODULE:
            return [StyledSegment(f"{module}.{name}", TYPE_NAME)]
        return [StyledSegment(name, TYPE_NAME)]

    def _generic_segments(self, tp: Any, origin: Any, options: TypeNameOptions) -> list[StyledSegment]:
        args = typing.get_args(tp)
        if origin in _UNION_TYPES:
            segments: list[StyledSegment] = []
            for index, arg in enumerate(args):
                if index:
                    segments.append(StyledSegment(" | ", PUNCTUATION))
                segments.extend(self._segments(arg, options))
            return segments
        if origin is typing.Annotated:
            return self._segments(args[0], options)
        if origin is typing.Literal:
            return self._bracketed(
                [StyledSegment("Literal", TYPE_NAME)], [repr(arg) for arg in args], options
            )
        if origin is collections.abc.Callable and len(args) == 2 and isinstance(args[0], list):
            return self._bracketed([StyledSegment("Callable", TYPE_NAME)], list(args), options)

        head = self._segments(origin, options)
        if not args:
            return head
        return self._bracketed(head, list(args), options)

    def _bracketed(
        self, head: list[StyledSegment], args: list[Any], options: TypeNameOptions
    ) -> list[StyledSegment]:
        segments = list(head)
        segments.append(StyledSegment("[", PUNCTUATION))
        for index, arg in enumerate(args):
            if index:
                segments.append(StyledSegment(", ", PUNCTUATION))
            segments.extend(self._segments(arg, options))
        segments.append(StyledSegment("]", PUNCTUATION))
        return segments
