"""
Recognizing array-shaped values and reading their dimensions.

Python has no single array type, so three shapes are accepted:
  - `array.array` (always one-dimensional, element type from its typecode)
  - `memoryview` (element type from its struct format, any number of dimensions)
  - nd-array-likes such as NumPy arrays, recognized by duck typing on
    `shape`, `ndim`, `dtype` and `tolist()` so no array library is imported

Elements are read lazily, one index at a time, so formatting a huge array
costs no more than the output budget allows. Only an nd-array-like without
`__getitem__` is converted whole with `tolist()`.

An array may also expose `lower_bounds` (one int per dimension) when its
indices do not start at zero; the type name then shows `lower..upper` ranges.
"""

from __future__ import annotations

import array
from dataclasses import dataclass
from collections.abc import Callable, Iterable, Iterator
from typing import Any

_TYPECODE_TYPES: dict[str, type] = {
    **dict.fromkeys("bBhHiIlLqQ", int),
    **dict.fromkeys("fd", float),
    **dict.fromkeys("uw", str),
}

# memoryview formats use struct codes, which share the integer/float letters.
_STRUCT_TYPES: dict[str, type] = {
    **_TYPECODE_TYPES,
    **dict.fromkeys("nN", int),
    "e": float,
    "?": bool,
    "c": bytes,
}


@dataclass(frozen=True)
class ArrayType:
    """Element type and rank of an array, independent of any instance."""

    element_type: type | str
    rank: int = 1


def is_array(value: object) -> bool:
    if isinstance(value, (array.array, memoryview)):
        return True
    cls = type(value)
    return all(hasattr(cls, name) for name in ("shape", "ndim", "dtype", "tolist"))


def array_type_of(value: Any) -> ArrayType:
    if isinstance(value, array.array):
        return ArrayType(_TYPECODE_TYPES.get(value.typecode, object))
    if isinstance(value, memoryview):
        code = value.format.lstrip("@=<>!")
        return ArrayType(_STRUCT_TYPES.get(code, object), max(value.ndim, 1))
    dtype = getattr(value.dtype, "name", None) or str(value.dtype)
    return ArrayType(dtype, max(int(value.ndim), 1))


def array_lengths(value: Any) -> tuple[int, ...]:
    if isinstance(value, array.array):
        return (len(value),)
    shape = tuple(int(length) for length in value.shape)
    return shape or (1,)


def array_lower_bounds(value: Any) -> tuple[int, ...]:
    bounds = getattr(value, "lower_bounds", None)
    rank = len(array_lengths(value))
    if bounds is None:
        return (0,) * rank
    return tuple(int(bound) for bound in bounds)


def _as_python_scalar(element: Any) -> Any:
    # nd-array scalars (numpy.int64 and friends) carry a dtype of their own
    if hasattr(type(element), "dtype") and hasattr(element, "tolist"):
        return element.tolist()
    return element


def _nested(
    get: Callable[[tuple[int, ...]], Any], lengths: tuple[int, ...], prefix: tuple[int, ...]
) -> Iterator:
    length, rest = lengths[0], lengths[1:]
    for index in range(length):
        if rest:
            yield _nested(get, rest, prefix + (index,))
        else:
            yield get(prefix + (index,))


def array_elements(value: Any) -> Iterable:
    """Elements nested one level per dimension, each level a lazy iterable."""
    if isinstance(value, array.array):
        return value
    if isinstance(value, memoryview):
        if value.ndim == 0:
            return [value[()]]
        if value.ndim == 1:
            return (value[index] for index in range(len(value)))
        return _nested(value.__getitem__, tuple(value.shape), ())
    if int(value.ndim) == 0 or not hasattr(type(value), "__getitem__"):
        elements = value.tolist()
        # zero-dimensional arrays produce a scalar
        return elements if isinstance(elements, list) else [elements]
    return _nested(lambda index: _as_python_scalar(value[index]), array_lengths(value), ())


def array_flat_elements(value: Any) -> Iterator:
    """All elements in row-major order."""
    rank = len(array_lengths(value))

    def flatten(elements: Iterable, depth: int) -> Iterator:
        for element in elements:
            if depth > 1:
                yield from flatten(element, depth - 1)
            else:
                yield element

    return flatten(array_elements(value), rank)
