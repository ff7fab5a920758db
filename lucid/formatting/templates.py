"""
Inline display templates.

A template is literal text with embedded member references:

    "{name} is {age} years old"      attribute or property
    "{describe()}"                   zero-argument method
    "{title,nq}"                     value printed without quotes
    "\\{literal braces}"             a backslash escapes an opening brace

References resolve case-sensitively first and case-insensitively second.
Anything that cannot be resolved renders an inline `!<...>` marker; an
unbalanced `{` stops evaluation and the rest of the template is copied as is.
The evaluator is a plain scanner over the template: there is no expression
language beyond a single name.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from .builder import Builder
from .options import Level
from .styled import ERROR

logger = logging.getLogger(__name__)

# (builder, value, level, quote) -> None
ValueFormatter = Callable[[Builder, Any, Level, bool], None]
# (builder, exception) -> None
ErrorMarker = Callable[[Builder, BaseException], None]

NO_QUOTES_MODIFIER = "nq"


class _NotFound(Exception):
    pass


def _find_attribute(value: Any, name: str) -> str:
    try:
        inspect.getattr_static(value, name)
        return name
    except AttributeError:
        pass
    lowered = name.lower()
    for candidate in sorted(dir(value)):
        if candidate.lower() == lowered:
            return candidate
    raise _NotFound(name)


def _is_method(value: Any, name: str) -> bool:
    static = inspect.getattr_static(value, name)
    return inspect.isroutine(static) or isinstance(static, (staticmethod, classmethod))


def _call_without_arguments(method: Any) -> Any:
    try:
        inspect.signature(method).bind()
    except TypeError as exc:
        raise _NotFound(getattr(method, "__name__", "")) from exc
    except ValueError:
        # builtins without an introspectable signature: just try the call
        pass
    return method()


class TemplateEvaluator:
    def __init__(self, format_value: ValueFormatter, append_error: ErrorMarker):
        self._format_value = format_value
        self._append_error = append_error

    def evaluate(self, builder: Builder, template: str, value: Any, level: Level) -> None:
        position = 0
        length = len(template)
        while position < length:
            brace = template.find("{", position)
            if brace < 0:
                builder.append(template[position:])
                return

            if brace > position and template[brace - 1] == "\\":
                builder.append(template[position : brace - 1])
                builder.append("{")
                position = brace + 1
                continue

            builder.append(template[position:brace])
            closing = template.find("}", brace + 1)
            if closing < 0:
                builder.append(template[brace:])
                return

            self._append_expression(builder, template[brace + 1 : closing], value, level)
            position = closing + 1

    def _append_expression(self, builder: Builder, expression: str, value: Any, level: Level) -> None:
        reference, _, modifiers = expression.partition(",")
        quote = NO_QUOTES_MODIFIER not in (modifier.strip() for modifier in modifiers.split(","))

        reference = reference.strip()
        is_call = reference.endswith("()")
        name = reference[:-2].rstrip() if is_call else reference

        try:
            resolved = self._resolve(value, name, is_call)
        except _NotFound:
            kind = "Method" if is_call else "Member"
            builder.append(f"!<{kind} '{name}' not found>", ERROR)
            return
        except RecursionError:
            raise
        except Exception as exc:
            logger.debug("Template reference %r raised %s", name, type(exc).__name__)
            self._append_error(builder, exc)
            return

        self._format_value(builder, resolved, level.increment(), quote)

    def _resolve(self, value: Any, name: str, is_call: bool) -> Any:
        if not name.isidentifier():
            raise _NotFound(name)
        attribute_name = _find_attribute(value, name)
        is_method = _is_method(value, attribute_name)
        if is_call and not is_method:
            raise _NotFound(name)
        attribute = getattr(value, attribute_name)
        if is_method:
            return _call_without_arguments(attribute)
        return attribute
