"""kvglue: keypath access and change observation for plain Python objects."""

from importlib.metadata import version as _version

__version__ = _version("kvglue")

from kvglue.errors import (
    GlueError,
    InvalidArgument,
    InvalidKeypath,
    NotAssignable,
    NotCallable,
    NotFound,
)
from kvglue.computed import Computed, computed, is_computed
from kvglue.keypath import Invocation, KeyPath, Segment, assign, parse, resolve, trace
from kvglue.observer import Change, Observation
from kvglue._dispatch import values_equal
from kvglue.glue import Glue
# textual NOT auto-imported — opt-in only

__all__ = [
    "Glue",
    "Computed",
    "computed",
    "is_computed",
    "KeyPath",
    "Segment",
    "Invocation",
    "parse",
    "resolve",
    "trace",
    "assign",
    "Change",
    "Observation",
    "values_equal",
    "GlueError",
    "InvalidKeypath",
    "NotCallable",
    "NotFound",
    "NotAssignable",
    "InvalidArgument",
]
