"""Change dispatch — decides which observers a write affects and notifies them.

Runs synchronously after every Glue.set(). Observers are visited in
registration order:

- Wildcard observers always fire.
- Keyed observers are rechecked when their root segment matches the root
  of the written path, or when their keypath went through a computed leaf
  last time (a computed leaf can read any sibling, so the root alone cannot
  rule it out). A recheck fires the callback only if the value changed.

A recheck that raises is logged and treated as "no change". Callback
exceptions propagate to the caller of set().
"""

from __future__ import annotations

import copy
import logging
from typing import Callable, Iterable

from kvglue.keypath import KeyPath, trace
from kvglue.observer import Change, Observation

logger = logging.getLogger("kvglue.dispatch")

Equality = Callable[[object, object], bool]


def values_equal(a: object, b: object) -> bool:
    """Default change test: identical, or equal under ==."""
    return a is b or a == b


def remember(value: object, equals: Equality = values_equal) -> object:
    """What to cache for a resolved value.

    A deep copy when it compares equal to the original, so in-place changes
    are detected later. Otherwise (no __eq__, or not copyable) the reference
    itself, and change detection falls back to identity.
    """
    try:
        snapshot = copy.deepcopy(value)
        if equals(snapshot, value):
            return snapshot
    except Exception:
        logger.debug("Caching %s by reference", type(value).__name__, exc_info=True)
    return value


def prime(
    observation: Observation, root: object, equals: Equality = values_equal
) -> None:
    """Resolve an observation's keypath and cache the result.

    Used at registration, where resolution errors reach the caller.
    """
    if observation.keypath is None:
        return
    value, computed = trace(root, observation.keypath)
    observation.cached_value = remember(value, equals)
    observation.computed = computed


def dispatch(
    observations: Iterable[Observation],
    root: object,
    written: KeyPath,
    value: object,
    equals: Equality = values_equal,
) -> int:
    """Notify every observation affected by a write. Returns how many fired."""
    fired = 0
    # Snapshot: callbacks may register observers or write again.
    for observation in list(observations):
        if observation.keypath is None:
            observation.callback(Change(written, None, None, value))
            fired += 1
            continue

        if observation.keypath.root != written.root and not observation.computed:
            continue

        try:
            candidate, computed = trace(root, observation.keypath)
            unchanged = equals(observation.cached_value, candidate)
        except Exception:
            logger.warning(
                "Recheck of %r after write to %r failed; treating as unchanged",
                observation.keypath.source,
                written.source,
                exc_info=True,
            )
            continue

        if unchanged:
            continue

        old = observation.cached_value
        # Recache before notifying so a nested set() sees the new value.
        observation.cached_value = remember(candidate, equals)
        observation.computed = computed
        logger.debug("Notifying %r: %r -> %r", observation.keypath.source, old, candidate)
        observation.callback(Change(written, observation.keypath, old, candidate))
        fired += 1
    return fired
