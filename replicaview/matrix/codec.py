"""SequenceCodec — integer state code to display symbol and color class."""

from __future__ import annotations

from replicaview.models.matrix import Cell, CellKind
from replicaview.models.schema import (
    PHASE_SYMBOLS,
    PROFILE_V1,
    UNKNOWN_SYMBOL,
    SchemaProfile,
)


class SequenceCodec:
    """Pure lookup from state code to ``(text, color_class)``.

    The code table comes from a ``SchemaProfile``; codes the profile does
    not know (negative, out of range, unmapped) render as the unknown
    marker instead of failing.

    Parameters
    ----------
    profile:
        The schema profile whose code table to use.  Defaults to ``v1``.
    """

    def __init__(self, profile: SchemaProfile | None = None) -> None:
        self.profile = profile or PROFILE_V1

    def symbol_for(self, code: int) -> tuple[str, str]:
        """Return the display text and color class for *code*.  Never raises."""
        try:
            phase = self.profile.phase_for(code)
        except TypeError:
            phase = None
        if phase is None:
            return UNKNOWN_SYMBOL
        return PHASE_SYMBOLS.get(phase, UNKNOWN_SYMBOL)

    def cell_for(self, code: int) -> Cell:
        """Build a sequence ``Cell`` for *code*."""
        text, color_class = self.symbol_for(code)
        return Cell(kind=CellKind.SEQUENCE, text=text, color_class=color_class, code=code)
