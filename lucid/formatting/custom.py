"""
Formatters for values whose own repr is not useful in a console.

Type objects and callables both have a repr (`<class 'int'>`,
`<function f at 0x7f...>`), but a console reader wants `int` and
`def f(x: int) -> str`. These formatters replace the repr entirely; their
output is final and no members are dumped after it.

The amount of detail depends on the level:
  FIRST_DETAILED  namespaces and qualified names (`builtins.int`)
  FIRST_SIMPLE    plain names, full signatures
  SECOND          parameter names dropped where an annotation says enough
  THIRD_PLUS      just the name
"""

from __future__ import annotations

import inspect
import types
import typing
from abc import ABC, abstractmethod
from typing import Any

from .options import Level, TypeNameOptions
from .styled import FUNCTION_NAME, KEYWORD, MEMBER_NAME, PUNCTUATION, StyledSegment, StyledString
from .type_names import TypeNameFormatter


class CustomObjectFormatter(ABC):
    is_formatting_exhaustive = True

    def __init__(self, type_names: TypeNameFormatter | None = None):
        self.type_names = type_names or TypeNameFormatter()

    @abstractmethod
    def is_applicable(self, value: Any) -> bool: ...

    @abstractmethod
    def format(self, value: Any, level: Level) -> StyledString: ...

    def _type_options(self, level: Level) -> TypeNameOptions:
        detailed = level == Level.FIRST_DETAILED
        return TypeNameOptions(show_namespaces=detailed, use_builtin_keywords=not detailed)


class TypeFormatter(CustomObjectFormatter):
    def is_applicable(self, value: Any) -> bool:
        return (
            isinstance(value, (type, types.UnionType, typing.TypeVar))
            or typing.get_origin(value) is not None
        )

    def format(self, value: Any, level: Level) -> StyledString:
        return self.type_names.format_type_name(value, self._type_options(level))


class FunctionFormatter(CustomObjectFormatter):
    def is_applicable(self, value: Any) -> bool:
        return inspect.isroutine(value)

    def format(self, value: Any, level: Level) -> StyledString:
        name = self._name(value, level)
        if level == Level.THIRD_PLUS:
            return StyledString.of(name, FUNCTION_NAME)

        segments: list[StyledSegment] = []
        if level.is_root:
            keyword = "async def " if inspect.iscoroutinefunction(value) else "def "
            segments.append(StyledSegment(keyword, KEYWORD))
        segments.append(StyledSegment(name, FUNCTION_NAME))

        try:
            signature = inspect.signature(value)
        except (TypeError, ValueError):
            segments.append(StyledSegment("(...)", PUNCTUATION))
            return StyledString(segments)

        options = self._type_options(level)
        segments.append(StyledSegment("(", PUNCTUATION))
        for index, parameter in enumerate(signature.parameters.values()):
            if index:
                segments.append(StyledSegment(", ", PUNCTUATION))
            segments.extend(self._parameter(parameter, level, options))
        segments.append(StyledSegment(")", PUNCTUATION))

        if signature.return_annotation is not inspect.Signature.empty:
            segments.append(StyledSegment(" -> ", PUNCTUATION))
            segments.extend(self._annotation(signature.return_annotation, options))
        return StyledString(segments)

    def _name(self, value: Any, level: Level) -> str:
        if level == Level.FIRST_DETAILED:
            return getattr(value, "__qualname__", None) or getattr(value, "__name__", repr(value))
        return getattr(value, "__name__", None) or repr(value)

    def _parameter(
        self, parameter: inspect.Parameter, level: Level, options: TypeNameOptions
    ) -> list[StyledSegment]:
        prefix = {
            inspect.Parameter.VAR_POSITIONAL: "*",
            inspect.Parameter.VAR_KEYWORD: "**",
        }.get(parameter.kind, "")
        annotated = parameter.annotation is not inspect.Parameter.empty

        segments = [StyledSegment(prefix, PUNCTUATION)]
        if level == Level.SECOND and annotated:
            segments.extend(self._annotation(parameter.annotation, options))
            return segments

        segments.append(StyledSegment(parameter.name, MEMBER_NAME))
        if annotated:
            segments.append(StyledSegment(": ", PUNCTUATION))
            segments.extend(self._annotation(parameter.annotation, options))
        if parameter.default is not inspect.Parameter.empty and level.is_root:
            segments.append(StyledSegment("=" if not annotated else " = ", PUNCTUATION))
            segments.append(StyledSegment(repr(parameter.default)))
        return segments

    def _annotation(self, annotation: Any, options: TypeNameOptions) -> list[StyledSegment]:
        return list(self.type_names.format_type_name(annotation, options).segments)


def default_formatters(type_names: TypeNameFormatter | None = None) -> tuple[CustomObjectFormatter, ...]:
    return (TypeFormatter(type_names), FunctionFormatter(type_names))
