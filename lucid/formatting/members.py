"""
Member enumeration: the single place that introspects an object's data members.

`list_members(obj)` returns one MemberDescriptor per readable data member:
  - instance attributes from `obj.__dict__`
  - `__slots__` entries along the MRO
  - properties and `functools.cached_property` along the MRO

Methods, class attributes and C-level descriptors are not data members.
Everything derived from the class alone (slots, properties, hints) is cached per
type with `functools.lru_cache`; only the instance dictionary is read per call.
Getters are never invoked here, so enumeration itself cannot raise on a
misbehaving property.
"""

from __future__ import annotations

import functools
import re
import types
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .hints import Browsable, get_browsable_states

_GENERATED_NAME = re.compile(r"^__\w+__$")
_GENERATED_NAMES = frozenset({"_abc_impl", "_is_protocol"})


class MemberKind(Enum):
    FIELD = "field"
    PROPERTY = "property"


@dataclass(frozen=True)
class MemberDescriptor:
    name: str
    kind: MemberKind
    getter: Callable[[Any], Any]
    is_public: bool
    is_generated: bool
    browsable: Browsable | None = None


def is_generated_name(name: str) -> bool:
    return name in _GENERATED_NAMES or _GENERATED_NAME.match(name) is not None


def member_sort_key(name: str) -> tuple[str, str]:
    """Case-insensitive order, with a case-sensitive tiebreak for a total order."""
    return (name.upper(), name)


class MemberFilter:
    """Drops members that Python or a library synthesized rather than the user."""

    def include(self, member: MemberDescriptor) -> bool:
        return not (member.is_generated or is_generated_name(member.name))


def _instance_field_getter(name: str) -> Callable[[Any], Any]:
    def get(obj: Any) -> Any:
        return vars(obj)[name]

    return get


def _descriptor_getter(descriptor: Any) -> Callable[[Any], Any]:
    def get(obj: Any) -> Any:
        return descriptor.__get__(obj, type(obj))

    return get


def _cached_property_getter(descriptor: functools.cached_property) -> Callable[[Any], Any]:
    # Read the cached value when present; otherwise compute without storing it.
    def get(obj: Any) -> Any:
        instance_dict = getattr(obj, "__dict__", None)
        if instance_dict is not None and descriptor.attrname in instance_dict:
            return instance_dict[descriptor.attrname]
        return descriptor.func(obj)

    return get


def _make_descriptor(
    name: str, kind: MemberKind, getter: Callable[[Any], Any], states: dict[str, Browsable]
) -> MemberDescriptor:
    return MemberDescriptor(
        name=name,
        kind=kind,
        getter=getter,
        is_public=not name.startswith("_"),
        is_generated=is_generated_name(name),
        browsable=states.get(name),
    )


@functools.lru_cache(maxsize=1024)
def _class_members(cls: type) -> tuple[tuple[MemberDescriptor, ...], frozenset[str], dict[str, Browsable]]:
    """Members declared by the class hierarchy, the names of data descriptors, and hints."""
    states = get_browsable_states(cls)
    members: dict[str, MemberDescriptor] = {}
    data_descriptors: set[str] = set()

    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, attribute in vars(klass).items():
            if isinstance(attribute, property):
                data_descriptors.add(name)
                if attribute.fget is None or name in members:
                    continue
                members[name] = _make_descriptor(
                    name, MemberKind.PROPERTY, _descriptor_getter(attribute), states
                )
            elif isinstance(attribute, functools.cached_property):
                if name not in members:
                    members[name] = _make_descriptor(
                        name, MemberKind.PROPERTY, _cached_property_getter(attribute), states
                    )
            elif isinstance(attribute, types.MemberDescriptorType):
                data_descriptors.add(name)
                if name not in members:
                    members[name] = _make_descriptor(
                        name, MemberKind.FIELD, _descriptor_getter(attribute), states
                    )

    return tuple(members.values()), frozenset(data_descriptors | members.keys()), states


def list_members(obj: Any) -> list[MemberDescriptor]:
    """All data members of `obj`, unsorted and unfiltered."""
    cls = type(obj)
    try:
        declared, shadowing, states = _class_members(cls)
    except TypeError:
        # unhashable metaclass instances cannot be cached
        declared, shadowing, states = _class_members.__wrapped__(cls)

    members = list(declared)
    instance_dict = getattr(obj, "__dict__", None)
    if isinstance(instance_dict, dict):
        for name in list(instance_dict):
            if not isinstance(name, str) or name in shadowing:
                continue
            members.append(
                _make_descriptor(name, MemberKind.FIELD, _instance_field_getter(name), states)
            )
    return members
