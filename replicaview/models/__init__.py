"""replicaview data models — all Pydantic v2, all frozen (immutable)."""

from replicaview.models.matrix import (
    AlignedMatrix,
    BucketRow,
    Cell,
    CellKind,
    CheckpointCell,
    CheckpointRow,
    CheckpointStatus,
    GroupHeader,
    NodeRowGroup,
    NodeWindow,
    PeerDetailBlock,
    PeerRow,
    WatermarkAlignment,
)
from replicaview.models.schema import (
    PROFILE_V1,
    PROFILE_V2,
    SCHEMA_PROFILES,
    CheckpointKeyRule,
    SchemaProfile,
    SequencePhase,
    get_profile,
)
from replicaview.models.snapshot import (
    ActionCounters,
    Bucket,
    BucketStatus,
    Checkpoint,
    LogSummary,
    NodeSnapshot,
    PeerSnapshot,
    StateMachineSnapshot,
)

__all__ = [
    # snapshot
    "ActionCounters",
    "Bucket",
    "BucketStatus",
    "Checkpoint",
    "LogSummary",
    "NodeSnapshot",
    "PeerSnapshot",
    "StateMachineSnapshot",
    # schema
    "CheckpointKeyRule",
    "PROFILE_V1",
    "PROFILE_V2",
    "SCHEMA_PROFILES",
    "SchemaProfile",
    "SequencePhase",
    "get_profile",
    # matrix
    "AlignedMatrix",
    "BucketRow",
    "Cell",
    "CellKind",
    "CheckpointCell",
    "CheckpointRow",
    "CheckpointStatus",
    "GroupHeader",
    "NodeRowGroup",
    "NodeWindow",
    "PeerDetailBlock",
    "PeerRow",
    "WatermarkAlignment",
]
