"""SequenceMatrixBuilder — bucket rows and peer detail rows for one node."""

from __future__ import annotations

from replicaview.matrix.codec import SequenceCodec
from replicaview.models.matrix import (
    BucketRow,
    Cell,
    CellKind,
    GroupHeader,
    NodeWindow,
    PeerDetailBlock,
    PeerRow,
)
from replicaview.models.snapshot import BucketStatus, NodeSnapshot

_OFFSET_CELL = Cell(kind=CellKind.OFFSET, color_class="offset")
_PADDING_CELL = Cell(kind=CellKind.PADDING, color_class="padding")
_BLANK_MARKER = Cell(kind=CellKind.MARKER, color_class="empty")


def node_label(node_id: int) -> str:
    return f"Node-{node_id} State Machine"


def bucket_label(bucket_id: int) -> str:
    return f"Bucket-{bucket_id}"


class SequenceMatrixBuilder:
    """Builds the aligned rows of one node.

    Parameters
    ----------
    codec:
        Translates sequence state codes into cells.
    """

    def __init__(self, codec: SequenceCodec | None = None) -> None:
        self.codec = codec or SequenceCodec()

    def bucket_rows(self, node: NodeSnapshot, window: NodeWindow) -> list[BucketRow]:
        """One row per bucket, in snapshot order.

        The first row carries the node's ``GroupHeader`` spanning all rows.
        """
        buckets = node.state_machine.buckets
        rows: list[BucketRow] = []
        for index, bucket in enumerate(buckets):
            header = None
            if index == 0:
                header = GroupHeader(
                    node_id=node.id,
                    label=node_label(node.id),
                    row_span=len(buckets),
                )
            cells = self._aligned(
                [self.codec.cell_for(code) for code in bucket.sequences], window
            )
            rows.append(
                BucketRow(
                    bucket_id=bucket.id,
                    label=bucket_label(bucket.id),
                    leader=bucket.leader,
                    header=header,
                    cells=cells,
                )
            )
        return rows

    def peer_blocks(self, node: NodeSnapshot, window: NodeWindow) -> list[PeerDetailBlock]:
        """One block per peer, one row per bucket status of that peer."""
        blocks: list[PeerDetailBlock] = []
        for peer in node.state_machine.peers:
            rows = [
                PeerRow(
                    bucket_id=status.bucket_id,
                    label=bucket_label(status.bucket_id),
                    cells=self._aligned(self._markers(status, window), window),
                )
                for status in peer.bucket_statuses
            ]
            blocks.append(PeerDetailBlock(peer_id=peer.id, label=f"Node-{peer.id}", rows=rows))
        return blocks

    @staticmethod
    def _markers(status: BucketStatus, window: NodeWindow) -> list[Cell]:
        cells: list[Cell] = []
        for seq in range(window.low_watermark, window.high_watermark + 1):
            if status.last_checkpoint == seq:
                cells.append(Cell(kind=CellKind.MARKER, text="X", color_class="checkpoint"))
            elif status.last_commit == seq:
                cells.append(Cell(kind=CellKind.MARKER, text="C", color_class="committed"))
            elif status.last_prepare == seq:
                cells.append(Cell(kind=CellKind.MARKER, text="P", color_class="in-progress"))
            else:
                cells.append(_BLANK_MARKER)
        return cells

    @staticmethod
    def _aligned(cells: list[Cell], window: NodeWindow) -> list[Cell]:
        return [_OFFSET_CELL] * window.offset + cells + [_PADDING_CELL] * window.padding
