"""Recursive, budget-bounded, cycle-safe pretty-printing of Python values."""

from .builder import Builder
from .custom import CustomObjectFormatter, FunctionFormatter, TypeFormatter
from .exceptions import format_exception
from .hints import Browsable, browsable, display, display_proxy
from .members import MemberDescriptor, MemberFilter, MemberKind, list_members
from .options import (
    BuilderOptions,
    Level,
    MemberDisplayMode,
    NumberCulture,
    PrimitiveOptions,
    PrintOptions,
    TypeNameOptions,
)
from .primitives import NO_VALUE, PrimitiveFormatter
from .printer import PrettyPrinter, pretty_print
from .styled import StyledSegment, StyledString
from .templates import TemplateEvaluator
from .type_names import TypeNameFormatter
from .visitor import STACK_OVERFLOW_MESSAGE, FormattedMember, ValueShape, Visitor, classify

__all__ = [
    # Output
    "Builder",
    "StyledSegment",
    "StyledString",
    # Options
    "BuilderOptions",
    "Level",
    "MemberDisplayMode",
    "NumberCulture",
    "PrimitiveOptions",
    "PrintOptions",
    "TypeNameOptions",
    # Formatters
    "CustomObjectFormatter",
    "FunctionFormatter",
    "MemberDescriptor",
    "MemberFilter",
    "MemberKind",
    "NO_VALUE",
    "PrimitiveFormatter",
    "TemplateEvaluator",
    "TypeFormatter",
    "TypeNameFormatter",
    "format_exception",
    "list_members",
    # Visitor
    "FormattedMember",
    "STACK_OVERFLOW_MESSAGE",
    "ValueShape",
    "Visitor",
    "classify",
    # Hints
    "Browsable",
    "browsable",
    "display",
    "display_proxy",
    # Printer
    "PrettyPrinter",
    "pretty_print",
]
