"""Errors raised by kvglue.

Each error also derives from the builtin a caller would naturally catch,
so `except KeyError`-style code keeps working around a Glue.
"""


class GlueError(Exception):
    """Base class for every kvglue error."""


class InvalidKeypath(GlueError, ValueError):
    """A keypath string could not be parsed."""


class NotCallable(GlueError, TypeError):
    """A `name()` segment resolved to something that cannot be invoked."""


class NotFound(GlueError, LookupError):
    """A segment names a key, index or attribute the container lacks."""


class NotAssignable(GlueError, TypeError):
    """The final container of an assignment cannot be written to."""


class InvalidArgument(GlueError, TypeError):
    """add_observer() was called with an unrecognised argument shape."""
