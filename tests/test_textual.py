"""Tests for kvglue.textual — Textual integration layer."""

from textual.css.query import NoMatches

from kvglue import Glue
from kvglue import textual as ktx


class _MockApp:
    """Minimal mock matching the Textual App interface ktx needs."""

    def __init__(self, *, is_running=True, widgets=None):
        self.is_running = is_running
        self.widgets = widgets or {}

    def query_one(self, selector):
        try:
            return self.widgets[selector]
        except KeyError:
            raise NoMatches(selector) from None


class _Widget:
    renderable = ""


class TestObserve:
    def test_skips_when_not_running(self):
        app = _MockApp(is_running=False)
        g = Glue({"status": "idle"})
        effects = []
        ktx.observe(app, g, lambda c: effects.append(c.new_value), "status")
        g.set("status", "busy")
        assert effects == []

    def test_skips_during_pause(self):
        app = _MockApp()
        g = Glue({"status": "idle"})
        effects = []
        ktx.observe(app, g, lambda c: effects.append(c.new_value), "status")
        with ktx.pause(app):
            g.set("status", "busy")
        assert effects == []

    def test_cache_advances_while_paused(self):
        app = _MockApp()
        g = Glue({"status": "idle"})
        effects = []
        ktx.observe(app, g, lambda c: effects.append(c.new_value), "status")
        with ktx.pause(app):
            g.set("status", "busy")
        g.set("status", "busy")
        assert effects == []
        g.set("status", "done")
        assert effects == ["done"]

    def test_fires_when_safe(self):
        app = _MockApp()
        g = Glue({"status": "idle"})
        effects = []
        ktx.observe(app, g, lambda c: effects.append(c.new_value), "status")
        g.set("status", "busy")
        assert effects == ["busy"]

    def test_wildcard(self):
        app = _MockApp()
        g = Glue({})
        effects = []
        ktx.observe(app, g, lambda c: effects.append(c.written.source))
        g.set("anything", 1)
        assert effects == ["anything"]

    def test_catches_nomatch(self):
        """NoMatches from widget queries are silently swallowed."""
        app = _MockApp()
        g = Glue({"status": "idle"})
        later = []

        def _raise_nomatch(change):
            raise NoMatches("StatusFooter")

        ktx.observe(app, g, _raise_nomatch, "status")
        g.observe(later.append, "status")
        g.set("status", "busy")  # should not raise
        assert len(later) == 1

    def test_returns_glue(self):
        g = Glue({})
        assert ktx.observe(_MockApp(), g, lambda c: None) is g

    def test_context_is_kept(self):
        owner = object()
        g = Glue({"a": 1})
        ktx.observe(_MockApp(), g, lambda c: None, "a", context=owner)
        g.remove_observer(context=owner)
        assert g.observers == ()


class TestPause:
    def test_is_safe(self):
        app = _MockApp()
        assert ktx.is_safe(app)
        with ktx.pause(app):
            assert not ktx.is_safe(app)
        assert ktx.is_safe(app)

    def test_pause_is_per_app(self):
        a, b = _MockApp(), _MockApp()
        with ktx.pause(a):
            assert ktx.is_safe(b)

    def test_pause_released_on_error(self):
        app = _MockApp()
        try:
            with ktx.pause(app):
                raise ValueError
        except ValueError:
            pass
        assert ktx.is_safe(app)

    def test_nested_pause(self):
        app = _MockApp()
        with ktx.pause(app):
            with ktx.pause(app):
                pass
            assert not ktx.is_safe(app)
        assert ktx.is_safe(app)


class TestBind:
    def test_pushes_current_value(self):
        label = _Widget()
        app = _MockApp(widgets={"#count": label})
        ktx.bind(app, Glue({"count": 3}), "count", "#count", "renderable")
        assert label.renderable == 3

    def test_follows_changes(self):
        label = _Widget()
        app = _MockApp(widgets={"#count": label})
        g = Glue({"items": [], "count": lambda: len(g.get("items"))})
        ktx.bind(app, g, "count", "#count", "renderable")
        g.set("items", [1, 2])
        assert label.renderable == 2

    def test_missing_widget_is_ignored(self):
        app = _MockApp()
        g = Glue({"count": 0})
        assert ktx.bind(app, g, "count", "#count", "renderable") is g
        g.set("count", 1)

    def test_no_push_when_not_running(self):
        label = _Widget()
        app = _MockApp(is_running=False, widgets={"#count": label})
        g = Glue({"count": 3})
        ktx.bind(app, g, "count", "#count", "renderable")
        g.set("count", 4)
        assert label.renderable == ""
