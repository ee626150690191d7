"""Textual integration for kvglue. Opt-in — requires textual.

Observers that update widgets can fire while a screen is being rebuilt or
after the app stopped. observe() wraps such callbacks so they are skipped
while the app is not safe to query, and so a widget that is momentarily
missing (NoMatches) does not abort the set() that triggered them.

bind() is the common case: mirror one keypath into one widget attribute.

    ktx.bind(app, glue, "cart.count", "#cart-count", "renderable")
"""

from contextlib import contextmanager

from textual.css.query import NoMatches

# id(app) -> nesting depth of pause() blocks; absent when not paused.
_pause_depth: dict[int, int] = {}


@contextmanager
def pause(app):
    """Suspend guarded observers during widget replacement. Nests."""
    key = id(app)
    _pause_depth[key] = _pause_depth.get(key, 0) + 1
    try:
        yield
    finally:
        depth = _pause_depth.pop(key) - 1
        if depth:
            _pause_depth[key] = depth


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _pause_depth


def observe(app, glue, callback, keypath=None, context=None):
    """Glue.observe() for callbacks that touch Textual widgets.

    The cached value still advances while paused; only the callback is
    skipped. Returns the glue for chaining.
    """

    def _guarded(change):
        if not is_safe(app):
            return
        try:
            callback(change)
        except NoMatches:
            pass

    return glue.observe(_guarded, keypath=keypath, context=context)


def bind(app, glue, keypath, selector, attribute, context=None):
    """Keep `selector`'s widget attribute equal to the value at `keypath`.

    The current value is pushed immediately when the app is safe; later
    changes follow through observe(). Returns the glue.
    """

    def _apply(value):
        setattr(app.query_one(selector), attribute, value)

    if is_safe(app):
        try:
            _apply(glue.get(keypath))
        except NoMatches:
            pass
    return observe(app, glue, lambda change: _apply(change.new_value), keypath, context)
