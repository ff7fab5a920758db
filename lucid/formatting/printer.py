"""
The pretty-printer facade used by the console.

`PrettyPrinter.pretty_print(value, detailed)` is called once for every
evaluation result and every raised exception. It picks the options for the
requested level of detail, handles the few values that bypass structural
formatting (nothing to show, raw strings, exceptions) and hands everything
else to a fresh Visitor.

Nothing raised while formatting reaches the caller: if the visitor itself
fails, the value is shown through `repr` (or, if even that fails, the default
object repr) and the failure is logged.
"""

from __future__ import annotations

import logging
from typing import Any

from .exceptions import format_exception
from .options import Level, MemberDisplayMode, PrintOptions
from .primitives import NO_VALUE
from .styled import EMPTY, ERROR, StyledString
from .type_names import TypeNameFormatter
from .visitor import Visitor

logger = logging.getLogger(__name__)

SUMMARY_OPTIONS = PrintOptions(member_display_format=MemberDisplayMode.SINGLE_LINE)
DETAILED_OPTIONS = PrintOptions(member_display_format=MemberDisplayMode.SEPARATE_LINES)


def _fallback_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return object.__repr__(value)


class PrettyPrinter:
    def __init__(
        self,
        summary_options: PrintOptions = SUMMARY_OPTIONS,
        detailed_options: PrintOptions = DETAILED_OPTIONS,
    ):
        self.summary_options = summary_options
        self.detailed_options = detailed_options
        self.type_names = TypeNameFormatter()

    def pretty_print(self, value: Any, detailed: bool) -> StyledString:
        if value is NO_VALUE:
            return EMPTY
        if isinstance(value, BaseException):
            return self.format_exception(value, detailed)
        if detailed and isinstance(value, str):
            return StyledString.of(value)

        options = self.detailed_options if detailed else self.summary_options
        level = Level.FIRST_DETAILED if detailed else Level.FIRST_SIMPLE
        try:
            return Visitor(options, type_name_formatter=self.type_names).format_object(value, level)
        except Exception:
            logger.exception("Formatting a %s failed, falling back to repr", type(value).__name__)
            return StyledString.of(_fallback_repr(value))

    def format_exception(self, exc: BaseException, detailed: bool) -> StyledString:
        try:
            return format_exception(exc, detailed, self.type_names)
        except Exception:
            logger.exception("Formatting a %s failed", type(exc).__name__)
            return StyledString.of(type(exc).__name__, ERROR)


_default_printer = PrettyPrinter()


def pretty_print(value: Any, detailed: bool = False) -> StyledString:
    """Format `value` with the default options."""
    return _default_printer.pretty_print(value, detailed)
