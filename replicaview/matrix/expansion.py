"""DetailExpansionController — which node groups show per-peer detail rows.

The rendering function never owns this state.  The controller lives with the
UI (a Streamlit session, a CLI invocation) and hands an immutable
``ExpansionState`` to ``render_model`` on every render.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict


class ExpansionState(BaseModel):
    """Set of node ids whose detail view is expanded.  Collapsed by default."""

    model_config = ConfigDict(frozen=True)

    expanded: frozenset[int] = frozenset()

    def is_expanded(self, node_id: int) -> bool:
        return node_id in self.expanded

    def toggled(self, node_id: int) -> ExpansionState:
        """Return a new state with *node_id* flipped."""
        return ExpansionState(expanded=self.expanded ^ {node_id})

    @classmethod
    def of(cls, node_ids: Iterable[int]) -> ExpansionState:
        return cls(expanded=frozenset(node_ids))


COLLAPSED = ExpansionState()


class DetailExpansionController:
    """Holds the current ``ExpansionState`` and applies user toggles."""

    def __init__(self, initial: ExpansionState | None = None) -> None:
        self._state = initial or COLLAPSED

    @property
    def state(self) -> ExpansionState:
        return self._state

    def toggle(self, node_id: int) -> ExpansionState:
        """Flip *node_id* between collapsed and expanded."""
        self._state = self._state.toggled(node_id)
        return self._state

    def expand_all(self, node_ids: Iterable[int]) -> ExpansionState:
        self._state = ExpansionState.of(node_ids)
        return self._state

    def collapse_all(self) -> ExpansionState:
        self._state = COLLAPSED
        return self._state
