"""render_model — node snapshots in, ``AlignedMatrix`` out.

Synchronous and pure: no I/O, no retained state.  The expansion state is an
argument, so identical inputs always produce identical matrices.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from replicaview.matrix.aligner import WatermarkAligner
from replicaview.matrix.builder import SequenceMatrixBuilder, node_label
from replicaview.matrix.checkpoints import CheckpointSpanCollapser
from replicaview.matrix.codec import SequenceCodec
from replicaview.matrix.expansion import COLLAPSED, ExpansionState
from replicaview.matrix.validation import ensure_valid
from replicaview.models.matrix import AlignedMatrix, NodeRowGroup
from replicaview.models.schema import PROFILE_V1, SchemaProfile
from replicaview.models.snapshot import NodeSnapshot

logger = logging.getLogger(__name__)


class MatrixEngine:
    """Wires the codec, aligner, row builder and checkpoint collapser.

    Parameters
    ----------
    profile:
        Schema profile pinning the state code table and checkpoint key rule.
    """

    def __init__(self, profile: SchemaProfile | None = None) -> None:
        self.profile = profile or PROFILE_V1
        self.aligner = WatermarkAligner()
        self.builder = SequenceMatrixBuilder(SequenceCodec(self.profile))
        self.collapser = CheckpointSpanCollapser(self.profile)

    def render(
        self,
        nodes: Sequence[NodeSnapshot],
        expansion: ExpansionState = COLLAPSED,
    ) -> AlignedMatrix:
        """Build the aligned matrix for *nodes*.

        Raises
        ------
        SnapshotValidationError
            If any node is malformed.
        """
        ensure_valid(nodes)

        alignment = self.aligner.align(nodes)
        if alignment is None:
            return AlignedMatrix.empty()

        groups: list[NodeRowGroup] = []
        for node in nodes:
            window = alignment.for_node(node.id)
            expanded = expansion.is_expanded(node.id)
            groups.append(
                NodeRowGroup(
                    node_id=node.id,
                    label=node_label(node.id),
                    bucket_rows=self.builder.bucket_rows(node, window),
                    checkpoint_row=self.collapser.collapse(node, alignment),
                    expanded=expanded,
                    # collapsed groups never build their peer rows
                    peer_blocks=self.builder.peer_blocks(node, window) if expanded else [],
                )
            )

        logger.debug(
            "Rendered %d node group(s) over window [%d, %d]",
            len(groups),
            alignment.global_low,
            alignment.global_high,
        )
        return AlignedMatrix(
            global_low=alignment.global_low,
            global_high=alignment.global_high,
            columns=list(range(alignment.global_low, alignment.global_high + 1)),
            groups=groups,
        )


def render_model(
    nodes: Sequence[NodeSnapshot],
    expansion: ExpansionState = COLLAPSED,
    profile: SchemaProfile | None = None,
) -> AlignedMatrix:
    """Convenience wrapper around ``MatrixEngine(profile).render``."""
    return MatrixEngine(profile).render(nodes, expansion)
