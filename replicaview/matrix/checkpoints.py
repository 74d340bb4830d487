"""CheckpointSpanCollapser — one checkpoint summary row per node.

Positions without a checkpoint record are not rendered individually; they
widen the next checkpoint cell instead.  Positions after the last checkpoint
are never emitted, so the row can end short of the window: no checkpoint has
been reached there yet.
"""

from __future__ import annotations

from replicaview.models.matrix import (
    CheckpointCell,
    CheckpointRow,
    CheckpointStatus,
    WatermarkAlignment,
)
from replicaview.models.schema import PROFILE_V1, SchemaProfile
from replicaview.models.snapshot import Checkpoint, NodeSnapshot

_STATUS_TEXT: dict[CheckpointStatus, str] = {
    CheckpointStatus.AGREED: "Agreed",
    CheckpointStatus.NETWORK_QUORUM_ONLY: "Net Quorum",
    CheckpointStatus.LOCAL_ONLY: "Local",
}


def classify(checkpoint: Checkpoint) -> CheckpointStatus:
    """Quorum status of *checkpoint*, highest priority first."""
    if checkpoint.local_decision and checkpoint.net_quorum:
        return CheckpointStatus.AGREED
    if checkpoint.net_quorum:
        return CheckpointStatus.NETWORK_QUORUM_ONLY
    if checkpoint.local_decision:
        return CheckpointStatus.LOCAL_ONLY
    return CheckpointStatus.PENDING


class CheckpointSpanCollapser:
    """Collapses runs of checkpoint-less positions into spanning cells.

    Parameters
    ----------
    profile:
        Supplies the rule resolving a checkpoint to a window column.
    """

    def __init__(self, profile: SchemaProfile | None = None) -> None:
        self.profile = profile or PROFILE_V1

    def keyed(self, node: NodeSnapshot) -> dict[int, Checkpoint]:
        """Checkpoints of *node* keyed by resolved column.

        When two records resolve to the same column the later one wins.
        """
        bucket_count = len(node.state_machine.buckets)
        return {
            self.profile.checkpoint_column(cp.seq_no, bucket_count): cp
            for cp in node.state_machine.checkpoints
        }

    def collapse(self, node: NodeSnapshot, alignment: WatermarkAlignment) -> CheckpointRow:
        """Walk the global window left to right and emit spanning cells."""
        by_column = self.keyed(node)
        cells: list[CheckpointCell] = []
        skipped = 0
        for seq in range(alignment.global_low, alignment.global_high + 1):
            checkpoint = by_column.get(seq)
            if checkpoint is None:
                skipped += 1
                continue
            status = classify(checkpoint)
            cells.append(
                CheckpointCell(
                    seq_no=seq,
                    col_span=skipped + 1,
                    status=status,
                    text=_STATUS_TEXT.get(status, str(checkpoint.pending_or_max_agreements)),
                )
            )
            skipped = 0
        return CheckpointRow(node_id=node.id, label="Checkpoints", cells=cells)
