"""Unit tests for labeled values."""

import copy
import pickle

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lio import (
    BOT,
    TOP,
    FlowViolationError,
    Labeled,
    label,
    label_of,
    level,
    unsafe_value_of,
    up_label,
)

ALICE = level("Alice")
ALICE_BOB = level("Alice", "Bob")


class TestLabeled:
    @given(st.one_of(st.integers(), st.text(), st.none()))
    def test_round_trip(self, value):
        lv = label(ALICE, value)
        assert lv.get_label() == ALICE
        assert lv.unsafe_get_value() == value

    def test_module_level_accessors(self):
        lv = label(ALICE, "secret")
        assert label_of(lv) == ALICE
        assert unsafe_value_of(lv) == "secret"

    def test_repr_hides_value(self):
        lv = label(ALICE, "secret")
        assert "secret" not in repr(lv)
        assert "secret" not in str(lv)
        assert "Alice" in repr(lv)

    def test_cannot_assign_attributes(self):
        lv = label(ALICE, "secret")
        with pytest.raises(AttributeError):
            lv.value = "other"
        with pytest.raises(AttributeError):
            lv.get_label = lambda: BOT
        assert lv.get_label() == ALICE

    def test_no_structural_access(self):
        lv = label(ALICE, "secret")
        with pytest.raises(TypeError):
            _, value = lv
        with pytest.raises(TypeError):
            lv[1]
        assert not hasattr(lv, "__dict__")

    def test_cannot_pickle_or_copy(self):
        lv = label(ALICE, "secret")
        with pytest.raises(TypeError):
            pickle.dumps(lv)
        with pytest.raises(TypeError):
            copy.copy(lv)

    def test_label_requires_level(self):
        with pytest.raises(TypeError):
            Labeled("Alice", "secret")


class TestUpLabel:
    def test_up_label_to_broader_level(self):
        lv = up_label(ALICE_BOB, label(ALICE, 42))
        assert lv.get_label() == ALICE_BOB
        assert lv.unsafe_get_value() == 42

    def test_up_label_to_top(self):
        assert up_label(TOP, label(ALICE, 1)).get_label() == TOP

    def test_up_label_to_narrower_level_raises(self):
        with pytest.raises(FlowViolationError) as exc:
            up_label(ALICE, label(ALICE_BOB, 42))
        assert exc.value.source == ALICE_BOB
        assert exc.value.target == ALICE
        assert exc.value.operation == "up_label"

    def test_up_label_keeps_original(self):
        original = label(ALICE, 42)
        up_label(ALICE_BOB, original)
        assert original.get_label() == ALICE
