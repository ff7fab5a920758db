"""
Display hints: how a class can ask to be shown by the pretty-printer.

Three hints are available, all attached to the class so instances carry no
extra state:

  @display("{name} ({age})", name="{key}")
      An inline display template. The printer evaluates it against the
      instance instead of dumping its members. `name` optionally replaces the
      member name under which the instance appears inside another object.

  @browsable(secret=Browsable.NEVER, items=Browsable.ROOT_HIDDEN)
      Per-member visibility. NEVER hides a member, ROOT_HIDDEN shows the
      member's own elements (or members) in its place, COLLAPSED shows it
      normally. A hinted member is shown even when its name is private.
      Dataclass fields can carry the same hint as
      `field(metadata={"browsable": Browsable.NEVER})`.

  @display_proxy(ProxyClass)
      Members are read from `ProxyClass(instance)` instead of the instance.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from enum import Enum
from typing import Any, NamedTuple, TypeVar

T = TypeVar("T", bound=type)

DISPLAY_ATTRIBUTE = "__lucid_display__"
BROWSABLE_ATTRIBUTE = "__lucid_browsable__"
PROXY_ATTRIBUTE = "__lucid_proxy__"
BROWSABLE_METADATA_KEY = "browsable"


class Browsable(Enum):
    NEVER = "never"
    COLLAPSED = "collapsed"
    ROOT_HIDDEN = "root_hidden"


class DisplayHint(NamedTuple):
    value: str | None
    name: str | None = None


def display(value: str | None = None, *, name: str | None = None) -> Callable[[T], T]:
    """Attach an inline display template to a class."""

    def decorate(cls: T) -> T:
        setattr(cls, DISPLAY_ATTRIBUTE, DisplayHint(value, name))
        return cls

    return decorate


def browsable(**states: Browsable) -> Callable[[T], T]:
    """Attach per-member browsable states to a class."""

    def decorate(cls: T) -> T:
        setattr(cls, BROWSABLE_ATTRIBUTE, dict(states))
        return cls

    return decorate


def display_proxy(proxy: Callable[[Any], Any]) -> Callable[[T], T]:
    """Read members of the decorated class's instances from `proxy(instance)`."""

    def decorate(cls: T) -> T:
        setattr(cls, PROXY_ATTRIBUTE, proxy)
        return cls

    return decorate


def get_display_hint(cls: type) -> DisplayHint | None:
    hint = getattr(cls, DISPLAY_ATTRIBUTE, None)
    if isinstance(hint, str):
        return DisplayHint(hint)
    if isinstance(hint, DisplayHint):
        return hint
    return None


def get_browsable_states(cls: type) -> dict[str, Browsable]:
    """Browsable states declared on `cls` and its bases, most derived first."""
    states: dict[str, Browsable] = {}
    for klass in cls.__mro__:
        for name, state in vars(klass).get(BROWSABLE_ATTRIBUTE, {}).items():
            states.setdefault(name, state)
        if dataclasses.is_dataclass(klass):
            for field in vars(klass).get("__dataclass_fields__", {}).values():
                state = field.metadata.get(BROWSABLE_METADATA_KEY)
                if state is not None:
                    states.setdefault(field.name, Browsable(state))
    return states


def get_display_proxy(cls: type) -> Callable[[Any], Any] | None:
    return getattr(cls, PROXY_ATTRIBUTE, None)
