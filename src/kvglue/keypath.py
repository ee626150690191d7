"""Keypaths — dotted addresses into a nested object.

A keypath is a dot-separated list of segments: `"user.address.city"`.
A segment written `name()` must resolve to a computed leaf, which is then
invoked. A plain segment `name` (or the cosmetic `(name)`) invokes the leaf
when it is computed and returns it unchanged otherwise, so `"count"`,
`"(count)"` and `"count()"` all yield the same value for a computed count.

Resolution indexes mappings by key, sequences by integer and anything else
by attribute. Missing segments raise NotFound; intermediate containers are
never created.
"""

from __future__ import annotations

import enum
import functools
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from dataclasses import dataclass
from typing import NamedTuple, Union

from kvglue.computed import invoke, is_computed
from kvglue.errors import InvalidKeypath, NotAssignable, NotCallable, NotFound

_TEXT = (str, bytes, bytearray)


class Invocation(enum.Enum):
    MAY_INVOKE = "may"
    MUST_INVOKE = "must"


@dataclass(frozen=True)
class Segment:
    name: str
    invocation: Invocation = Invocation.MAY_INVOKE

    def __str__(self) -> str:
        if self.invocation is Invocation.MUST_INVOKE:
            return f"{self.name}()"
        return self.name


@dataclass(frozen=True)
class KeyPath:
    """A parsed keypath. Always holds at least one segment."""

    segments: tuple[Segment, ...]
    source: str

    @property
    def root(self) -> str:
        """Name of the first segment, used to gate observer rechecks."""
        return self.segments[0].name

    def __str__(self) -> str:
        return self.source


PathLike = Union[str, KeyPath]


class Resolution(NamedTuple):
    value: object
    computed: bool  # True if any segment invoked a computed leaf


def parse(path: PathLike) -> KeyPath:
    """Parse a dotted keypath string. Raises InvalidKeypath on bad syntax."""
    if isinstance(path, KeyPath):
        return path
    if not isinstance(path, str):
        raise InvalidKeypath(f"Keypath must be a string, got {type(path).__name__}")
    return _parse(path)


@functools.lru_cache(maxsize=1024)
def _parse(path: str) -> KeyPath:
    if not path:
        raise InvalidKeypath("Keypath is empty")
    return KeyPath(tuple(_parse_segment(raw, path) for raw in path.split(".")), path)


def _parse_segment(raw: str, path: str) -> Segment:
    name = raw
    invocation = Invocation.MAY_INVOKE
    if name.endswith("()"):
        invocation = Invocation.MUST_INVOKE
        name = name[:-2]
    if name.startswith("(") and name.endswith(")"):
        name = name[1:-1]
    if not name or "(" in name or ")" in name:
        raise InvalidKeypath(f"Invalid segment {raw!r} in keypath {path!r}")
    return Segment(name, invocation)


def resolve(root: object, keypath: PathLike) -> object:
    """Return the value `keypath` addresses inside `root`."""
    return trace(root, keypath).value


def trace(root: object, keypath: PathLike) -> Resolution:
    """Resolve `keypath`, also reporting whether a computed leaf was invoked."""
    keypath = parse(keypath)
    return _walk(root, keypath.segments, keypath)


def assign(root: object, keypath: PathLike, value: object) -> None:
    """Store `value` at `keypath`.

    Every segment but the last is resolved (so intermediate segments may be
    computed). The last segment always names the literal slot to write; its
    invocation marker is ignored.
    """
    keypath = parse(keypath)
    *parents, last = keypath.segments
    container = _walk(root, parents, keypath).value
    _store(container, last.name, value, keypath)


def _walk(root: object, segments, keypath: KeyPath) -> Resolution:
    current = root
    invoked = False
    for segment in segments:
        raw = _lookup(current, segment.name, keypath)
        if is_computed(raw):
            current = invoke(raw, current)
            invoked = True
        elif segment.invocation is Invocation.MUST_INVOKE:
            raise NotCallable(
                f"{segment.name!r} in keypath {keypath.source!r} is not callable "
                f"({type(raw).__name__})"
            )
        else:
            current = raw
    return Resolution(current, invoked)


def _lookup(container: object, name: str, keypath: KeyPath) -> object:
    if isinstance(container, Mapping):
        try:
            return container[name]
        except KeyError:
            raise NotFound(f"{name!r} not found in keypath {keypath.source!r}") from None
    if isinstance(container, Sequence) and not isinstance(container, _TEXT):
        return container[_index(container, name, keypath)]
    try:
        return getattr(container, name)
    except AttributeError:
        raise NotFound(
            f"{type(container).__name__} has no attribute {name!r} "
            f"(keypath {keypath.source!r})"
        ) from None


def _index(container: Sequence, name: str, keypath: KeyPath) -> int:
    try:
        index = int(name)
    except ValueError:
        raise NotFound(
            f"{name!r} is not a valid index in keypath {keypath.source!r}"
        ) from None
    if not -len(container) <= index < len(container):
        raise NotFound(f"Index {index} out of range in keypath {keypath.source!r}")
    return index


def _store(container: object, name: str, value: object, keypath: KeyPath) -> None:
    if isinstance(container, MutableMapping):
        container[name] = value
    elif isinstance(container, MutableSequence) and not isinstance(container, _TEXT):
        container[_index(container, name, keypath)] = value
    elif isinstance(container, (Mapping, Sequence, *_TEXT)):
        raise NotAssignable(
            f"Cannot assign {name!r} on immutable {type(container).__name__} "
            f"(keypath {keypath.source!r})"
        )
    else:
        try:
            setattr(container, name, value)
        except (AttributeError, TypeError) as exc:
            raise NotAssignable(
                f"Cannot assign {name!r} on {type(container).__name__} "
                f"(keypath {keypath.source!r}): {exc}"
            ) from exc
