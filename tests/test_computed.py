"""Tests for Computed leaves."""

import copy

import pytest

from kvglue import Computed, computed, is_computed
from kvglue.computed import invoke


class TestComputed:
    def test_invoked_with_receiver(self):
        c = Computed(lambda receiver: receiver["x"] * 2)
        assert invoke(c, {"x": 4}) == 8

    def test_plain_callable_takes_no_arguments(self):
        assert invoke(lambda: 7, {"ignored": True}) == 7

    def test_decorator(self):
        @computed
        def total(cart):
            return sum(cart["prices"])

        assert isinstance(total, Computed)
        assert invoke(total, {"prices": [1, 2, 3]}) == 6

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError):
            Computed(3)

    def test_copies_share_the_leaf(self):
        c = Computed(len)
        assert copy.copy(c) is c
        assert copy.deepcopy({"c": c})["c"] is c

    def test_equality_by_function(self):
        fn = lambda o: 1
        assert Computed(fn) == Computed(fn)
        assert Computed(fn) != Computed(lambda o: 1)

    def test_repr(self):
        def doubled(o):
            return 0

        assert repr(Computed(doubled)) == "Computed(doubled)"


class TestIsComputed:
    def test_classification(self):
        assert is_computed(Computed(len))
        assert is_computed(lambda: 1)
        assert is_computed("abc".upper)
        assert not is_computed(3)
        assert not is_computed("foo")
        assert not is_computed(dict)
