"""
Formatting of exceptions raised by evaluated code.

Simple output is one line, `TypeName: message`. Detailed output adds the
stack, innermost call last, in the layout Python's own tracebacks use.
Syntax errors never show a stack because it would only point into the
compiler; they render as `(line,column): SyntaxError: message` instead.
"""

from __future__ import annotations

import traceback

from .options import TypeNameOptions
from .styled import ERROR, PLAIN, PUNCTUATION, StyledSegment, StyledString
from .type_names import TypeNameFormatter

_TYPE_NAME_OPTIONS = TypeNameOptions()


def _safe_message(exc: BaseException) -> str:
    try:
        return str(exc)
    except Exception:
        return f"<unprintable {type(exc).__name__} object>"


def format_exception(
    exc: BaseException, detailed: bool, type_names: TypeNameFormatter | None = None
) -> StyledString:
    type_names = type_names or TypeNameFormatter()
    type_name = type_names.format_type_name(type(exc), _TYPE_NAME_OPTIONS)

    if isinstance(exc, SyntaxError):
        location = f"({exc.lineno or 0},{exc.offset or 0}): "
        return StyledString(
            [
                StyledSegment(location, PUNCTUATION),
                *_colored(type_name),
                StyledSegment(f": {exc.msg}", ERROR),
            ]
        )

    segments = list(_colored(type_name))
    message = _safe_message(exc)
    if message:
        segments.append(StyledSegment(f": {message}", ERROR))

    if detailed:
        for note in getattr(exc, "__notes__", None) or ():
            segments.append(StyledSegment(f"\n{note}", PLAIN))
        for frame in traceback.extract_tb(exc.__traceback__):
            location = f'File "{frame.filename}", line {frame.lineno}, in {frame.name}'
            segments.append(StyledSegment(f"\n  {location}"))
            if frame.line:
                segments.append(StyledSegment(f"\n    {frame.line.strip()}", PLAIN))
    return StyledString(segments)


def _colored(type_name: StyledString) -> list[StyledSegment]:
    return [StyledSegment(segment.text, ERROR) for segment in type_name.segments]
