"""replicaview matrix engine — aligned sequence matrix from node snapshots.

The engine is a pure transform.  It never polls, never issues commands and
never keeps UI state between calls.

Modules
-------
codec
    ``SequenceCodec`` maps state codes to display symbols.
aligner
    ``WatermarkAligner`` computes the global window and per-node offsets.
builder
    ``SequenceMatrixBuilder`` builds bucket rows and peer detail rows.
checkpoints
    ``CheckpointSpanCollapser`` builds the collapsed checkpoint row.
expansion
    ``DetailExpansionController`` tracks which node groups are expanded.
validation
    ``parse_status`` and ``SnapshotValidationError``.
engine
    ``render_model`` ties it all together.
"""

from replicaview.matrix.aligner import WatermarkAligner
from replicaview.matrix.builder import SequenceMatrixBuilder
from replicaview.matrix.checkpoints import CheckpointSpanCollapser, classify
from replicaview.matrix.codec import SequenceCodec
from replicaview.matrix.engine import MatrixEngine, render_model
from replicaview.matrix.expansion import (
    COLLAPSED,
    DetailExpansionController,
    ExpansionState,
)
from replicaview.matrix.validation import (
    SnapshotValidationError,
    ValidationIssue,
    parse_status,
)

__all__ = [
    "COLLAPSED",
    "CheckpointSpanCollapser",
    "DetailExpansionController",
    "ExpansionState",
    "MatrixEngine",
    "SequenceCodec",
    "SequenceMatrixBuilder",
    "SnapshotValidationError",
    "ValidationIssue",
    "WatermarkAligner",
    "classify",
    "parse_status",
    "render_model",
]
