"""Glue — keypath access and change observation over a plain object.

A Glue wraps a nested object by reference. Reads and writes go through
dotted keypaths; every write through set() notifies the observers whose
value it changed.

    state = {"cart": {"items": []}, "count": Computed(lambda s: len(s["cart"]["items"]))}
    glue = Glue(state)
    glue.add_observer(lambda change: print(change.new_value), "count")
    glue.set("cart.items", ["apple"])   # prints 1

Mutating the wrapped object directly bypasses observers; only set() notifies.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from kvglue._dispatch import Equality, dispatch, prime, values_equal
from kvglue.computed import is_computed
from kvglue.errors import InvalidArgument
from kvglue.keypath import PathLike, assign, parse, resolve
from kvglue.observer import Callback, Observation, ObserverSpec, normalize_observer_args

logger = logging.getLogger("kvglue.glue")


class Glue:
    """Keypath-addressed wrapper around a bound object, with observers."""

    def __init__(self, bound_object: object, *, equals: Equality = values_equal) -> None:
        self._bound_object = bound_object
        self._observations: list[Observation] = []
        self._equals = equals

    def get(self, keypath: PathLike) -> Any:
        """Resolve a keypath, invoking computed leaves along the way."""
        return resolve(self._bound_object, keypath)

    def set(self, keypath: PathLike, value: Any) -> Glue:
        """Write a value, then notify affected observers. Returns self."""
        parsed = parse(keypath)
        assign(self._bound_object, parsed, value)
        dispatch(self._observations, self._bound_object, parsed, value, self._equals)
        return self

    def snapshot(self) -> Any:
        """Deep copy of the bound object. Changes to it never reach the Glue."""
        return copy.deepcopy(self._bound_object)

    get_bound_object = snapshot

    @property
    def observers(self) -> tuple[Observation, ...]:
        return tuple(self._observations)

    def add_observer(self, *args: Any) -> Glue:
        """Register an observer from any of the four accepted call shapes.

            glue.add_observer(callback)
            glue.add_observer(context, callback)
            glue.add_observer(callback, "keypath")
            glue.add_observer(context, "keypath", callback)

        Returns self.
        """
        return self._register(normalize_observer_args(*args))

    def observe(
        self,
        callback: Callback,
        keypath: PathLike | None = None,
        context: Any = None,
    ) -> Glue:
        """Register an observer with explicit keyword roles. Returns self."""
        if not is_computed(callback):
            raise InvalidArgument(
                f"observe() needs a callable callback, got {type(callback).__name__}"
            )
        parsed = parse(keypath) if keypath is not None else None
        return self._register(ObserverSpec(callback=callback, keypath=parsed, context=context))

    def remove_observer(
        self,
        context: Any = None,
        callback: Callback | None = None,
        keypath: PathLike | None = None,
    ) -> Glue:
        """Remove observations matching every given criterion. Returns self.

        Context is compared by identity. Called with no criteria, nothing
        is removed.
        """
        if context is None and callback is None and keypath is None:
            return self
        parsed = parse(keypath) if keypath is not None else None
        kept = [
            o for o in self._observations
            if not o.matches(context=context, callback=callback, keypath=parsed)
        ]
        removed = len(self._observations) - len(kept)
        self._observations[:] = kept
        logger.debug("Removed %d observer(s)", removed)
        return self

    def _register(self, spec: ObserverSpec) -> Glue:
        observation = Observation(spec.callback, spec.keypath, spec.context)
        prime(observation, self._bound_object, self._equals)
        self._observations.append(observation)
        logger.debug("Added observer %r", observation)
        return self

    def __repr__(self) -> str:
        return f"Glue({self._bound_object!r}, observers={len(self._observations)})"
