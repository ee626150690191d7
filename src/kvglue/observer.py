"""Observations — callbacks registered against a Glue.

An observation with a keypath caches the value the keypath resolved to and
fires only when a write changes it. An observation without a keypath is a
wildcard and fires on every write.

add_observer() accepts four call shapes, told apart by argument type:

    (callback)
    (context, callback)
    (callback, keypath)
    (context, keypath, callback)

normalize_observer_args() turns any of them into an ObserverSpec.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Optional

from kvglue.computed import is_computed
from kvglue.errors import InvalidArgument
from kvglue.keypath import KeyPath, parse


class Change(NamedTuple):
    """Passed to observer callbacks.

    `keypath` is None for wildcard observers, whose `old_value` is always
    None and whose `new_value` is the value that was written.
    """

    written: KeyPath
    keypath: Optional[KeyPath]
    old_value: Any
    new_value: Any


Callback = Callable[[Change], None]


@dataclass(frozen=True)
class ObserverSpec:
    callback: Callback
    keypath: Optional[KeyPath] = None
    context: Any = None


class Observation:
    """A registered observer and the last value its keypath resolved to."""

    __slots__ = ("context", "keypath", "callback", "cached_value", "computed")

    def __init__(
        self,
        callback: Callback,
        keypath: KeyPath | None = None,
        context: Any = None,
        cached_value: Any = None,
        computed: bool = False,
    ) -> None:
        self.callback = callback
        self.keypath = keypath
        self.context = context
        self.cached_value = cached_value
        self.computed = computed

    @property
    def is_wildcard(self) -> bool:
        return self.keypath is None

    def matches(self, context: Any = None, callback: Any = None, keypath: Any = None) -> bool:
        """Whether this observation fits every criterion that was given."""
        if context is not None and self.context is not context:
            return False
        if callback is not None and not (self.callback is callback or self.callback == callback):
            return False
        if keypath is not None and (
            self.keypath is None or self.keypath.segments != keypath.segments
        ):
            return False
        return True

    def __repr__(self) -> str:
        target = self.keypath.source if self.keypath is not None else "*"
        return f"Observation({target}, cached={self.cached_value!r})"


def normalize_observer_args(*args: Any) -> ObserverSpec:
    """Classify add_observer() arguments into callback, keypath and context."""
    if not 1 <= len(args) <= 3:
        raise InvalidArgument(f"add_observer() takes 1 to 3 arguments ({len(args)} given)")

    callbacks = [arg for arg in args if is_computed(arg)]
    if len(callbacks) != 1:
        raise InvalidArgument(
            f"add_observer() needs exactly one callable argument, got {len(callbacks)}"
        )
    callback = callbacks[0]
    rest = [arg for arg in args if arg is not callback]

    keypath = None
    strings = [i for i, arg in enumerate(rest) if isinstance(arg, str)]
    if strings:
        # A string context must come before the keypath.
        keypath = parse(rest.pop(strings[-1]))

    if len(rest) > 1:
        raise InvalidArgument("add_observer() got more than one context argument")
    context = rest[0] if rest else None
    return ObserverSpec(callback=callback, keypath=keypath, context=context)
