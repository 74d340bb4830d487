"""WatermarkAligner — place every node's window inside the union of windows."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from replicaview.models.matrix import NodeWindow, WatermarkAlignment
from replicaview.models.snapshot import NodeSnapshot

logger = logging.getLogger(__name__)


class WatermarkAligner:
    """Computes the global watermark window and per-node offset/padding.

    ``offset`` is the number of columns before a node's low watermark and
    ``padding`` the number after its high watermark, so every node's row is
    exactly as wide as the global window.
    """

    def align(self, nodes: Sequence[NodeSnapshot]) -> WatermarkAlignment | None:
        """Align *nodes*.

        Returns ``None`` ("nothing to render") when *nodes* is empty or the
        global window is degenerate (``global_high <= global_low``).
        """
        if not nodes:
            return None

        global_low = min(n.state_machine.low_watermark for n in nodes)
        global_high = max(n.state_machine.high_watermark for n in nodes)
        if global_high <= global_low:
            logger.debug(
                "Degenerate watermark window [%d, %d]; nothing to render",
                global_low,
                global_high,
            )
            return None

        per_node = [
            NodeWindow(
                node_id=n.id,
                low_watermark=n.state_machine.low_watermark,
                high_watermark=n.state_machine.high_watermark,
                offset=n.state_machine.low_watermark - global_low,
                padding=global_high - n.state_machine.high_watermark,
            )
            for n in nodes
        ]
        return WatermarkAlignment(
            global_low=global_low,
            global_high=global_high,
            per_node=per_node,
        )
