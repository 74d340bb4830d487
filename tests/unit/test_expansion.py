"""Tests for ExpansionState and DetailExpansionController."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from replicaview.matrix.expansion import COLLAPSED, DetailExpansionController, ExpansionState


class TestExpansionState:
    def test_collapsed_default(self):
        assert COLLAPSED.expanded == frozenset()
        assert not COLLAPSED.is_expanded(0)

    def test_toggled_returns_new_state(self):
        state = COLLAPSED.toggled(3)
        assert state.is_expanded(3)
        assert not COLLAPSED.is_expanded(3)
        assert not state.toggled(3).is_expanded(3)

    def test_frozen(self):
        with pytest.raises(ValidationError):
            ExpansionState.of([1]).expanded = frozenset()


class TestDetailExpansionController:
    def test_toggle_is_per_node(self):
        controller = DetailExpansionController()
        controller.toggle(0)
        controller.toggle(2)
        controller.toggle(0)
        assert controller.state.expanded == frozenset({2})

    def test_expand_and_collapse_all(self):
        controller = DetailExpansionController(ExpansionState.of([1]))
        assert controller.expand_all([0, 1, 2]).expanded == frozenset({0, 1, 2})
        assert controller.collapse_all() is COLLAPSED
