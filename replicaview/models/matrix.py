"""Aligned matrix models — the serializable output of ``render_model``.

Any rendering layer (Rich table, HTML table) turns an ``AlignedMatrix`` into
a grid.  Every row of a non-empty matrix covers exactly ``width`` sequence
columns once spans are counted, except checkpoint rows, which may end short
when no checkpoint has been reached after the last emitted cell.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class CellKind(str, Enum):
    """What occupies a column position of a row."""

    OFFSET = "offset"
    SEQUENCE = "sequence"
    PADDING = "padding"
    MARKER = "marker"


class CheckpointStatus(str, Enum):
    """Quorum classification of a checkpoint record."""

    AGREED = "agreed"
    NETWORK_QUORUM_ONLY = "network-quorum-only"
    LOCAL_ONLY = "local-only"
    PENDING = "pending"


class Cell(BaseModel):
    """One column of a bucket or peer row."""

    model_config = ConfigDict(frozen=True)

    kind: CellKind
    text: str = ""
    color_class: str = ""
    code: int | None = None


class GroupHeader(BaseModel):
    """Vertical label spanning every bucket row of one node."""

    model_config = ConfigDict(frozen=True)

    node_id: int
    label: str
    row_span: int


class BucketRow(BaseModel):
    """One bucket of one node, aligned to the global window."""

    model_config = ConfigDict(frozen=True)

    bucket_id: int
    label: str
    leader: bool = False
    header: GroupHeader | None = None
    cells: list[Cell] = []


class CheckpointCell(BaseModel):
    """A checkpoint that absorbed the preceding empty positions."""

    model_config = ConfigDict(frozen=True)

    seq_no: int
    col_span: int
    status: CheckpointStatus
    text: str


class CheckpointRow(BaseModel):
    """The collapsed checkpoint summary row of one node."""

    model_config = ConfigDict(frozen=True)

    node_id: int
    label: str
    cells: list[CheckpointCell] = []

    @property
    def covered_width(self) -> int:
        """Columns covered by emitted cells (trailing gaps are not emitted)."""
        return sum(c.col_span for c in self.cells)


class PeerRow(BaseModel):
    """One bucket status of one peer, aligned like the bucket rows."""

    model_config = ConfigDict(frozen=True)

    bucket_id: int
    label: str
    cells: list[Cell] = []


class PeerDetailBlock(BaseModel):
    """Rows describing one peer as seen by the observing node."""

    model_config = ConfigDict(frozen=True)

    peer_id: int
    label: str
    rows: list[PeerRow] = []


class NodeRowGroup(BaseModel):
    """All rows rendered for one node."""

    model_config = ConfigDict(frozen=True)

    node_id: int
    label: str
    bucket_rows: list[BucketRow] = []
    checkpoint_row: CheckpointRow
    expanded: bool = False
    peer_blocks: list[PeerDetailBlock] = []


class NodeWindow(BaseModel):
    """Placement of one node's watermark window inside the global window."""

    model_config = ConfigDict(frozen=True)

    node_id: int
    low_watermark: int
    high_watermark: int
    offset: int
    padding: int

    @property
    def window_size(self) -> int:
        return self.high_watermark - self.low_watermark + 1


class WatermarkAlignment(BaseModel):
    """Global window across all nodes plus each node's offset and padding."""

    model_config = ConfigDict(frozen=True)

    global_low: int
    global_high: int
    per_node: list[NodeWindow]

    @property
    def width(self) -> int:
        """Number of sequence columns in the global window."""
        return self.global_high - self.global_low + 1

    def for_node(self, node_id: int) -> NodeWindow:
        """Return the placement recorded for *node_id*."""
        for window in self.per_node:
            if window.node_id == node_id:
                return window
        raise KeyError(f"No window recorded for node {node_id}")


class AlignedMatrix(BaseModel):
    """Header labels plus one row group per node."""

    model_config = ConfigDict(frozen=True)

    global_low: int | None = None
    global_high: int | None = None
    columns: list[int] = []
    groups: list[NodeRowGroup] = []

    @classmethod
    def empty(cls) -> AlignedMatrix:
        """The "nothing to render" result."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.columns

    @property
    def width(self) -> int:
        return len(self.columns)
