"""Computed leaves — values produced by a function instead of a stored field.

A Computed wraps a function of one argument, the receiver: the container
the leaf lives in. That lets a leaf derive its value from sibling state:

    state = {
        "items": [],
        "count": Computed(lambda receiver: len(receiver["items"])),
    }

Plain callables (functions, lambdas, bound methods) are also computed
leaves. They take no arguments, so they cannot see the receiver.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Computed(Generic[T]):
    """A tagged computed leaf. Invoked with its containing object."""

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[[object], T]) -> None:
        if not callable(fn):
            raise TypeError(f"Computed expects a callable, got {type(fn).__name__}")
        self._fn = fn

    def __call__(self, receiver: object) -> T:
        return self._fn(receiver)

    # Functions are immutable, so snapshots share the leaf.
    def __copy__(self) -> Computed[T]:
        return self

    def __deepcopy__(self, memo: dict) -> Computed[T]:
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Computed):
            return NotImplemented
        return self._fn is other._fn

    def __hash__(self) -> int:
        return hash(self._fn)

    def __repr__(self) -> str:
        name = getattr(self._fn, "__name__", repr(self._fn))
        return f"Computed({name})"


def computed(fn: Callable[[object], T]) -> Computed[T]:
    """Decorator/factory to create a Computed from a function.

    Usage:
        @computed
        def total(cart):
            return sum(item["price"] for item in cart["items"])

        glue = Glue({"items": [], "total": total})
        glue.get("total")  # 0
    """
    return Computed(fn)


def is_computed(value: object) -> bool:
    """Whether a leaf is invoked on resolution rather than returned as is.

    Classes are callable but are treated as literal values.
    """
    if isinstance(value, Computed):
        return True
    return callable(value) and not isinstance(value, type)


def invoke(value: object, receiver: object) -> object:
    """Evaluate a computed leaf found inside `receiver`."""
    if isinstance(value, Computed):
        return value(receiver)
    return value()
