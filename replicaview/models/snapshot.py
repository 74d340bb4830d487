"""Node status snapshot models — one poll of the ``/status`` endpoint.

Every model is frozen.  A poll result replaces the previous list of
``NodeSnapshot`` objects wholesale; nothing in the rendering engine mutates
them.

Field names accept the three spellings seen across status versions:
PascalCase (``LowWatermark``), camelCase (``lowWatermark``) and snake_case
(``low_watermark``).
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


def _names(snake: str, *others: str) -> AliasChoices:
    """Accept *snake* plus the given camel/Pascal spellings as input keys."""
    return AliasChoices(snake, *others)


class Bucket(BaseModel):
    """One parallel processing lane and the state code of each slot."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(validation_alias=_names("id", "ID", "Id"))
    leader: bool = Field(default=False, validation_alias=_names("leader", "Leader"))
    sequences: list[int] = Field(validation_alias=_names("sequences", "Sequences"))


class Checkpoint(BaseModel):
    """A checkpoint boundary and its quorum state."""

    model_config = ConfigDict(frozen=True)

    seq_no: int = Field(validation_alias=_names("seq_no", "seqNo", "SeqNo"))
    local_decision: bool = Field(
        default=False,
        validation_alias=_names("local_decision", "localDecision", "LocalDecision"),
    )
    net_quorum: bool = Field(
        default=False,
        validation_alias=_names("net_quorum", "netQuorum", "NetQuorum"),
    )
    pending_or_max_agreements: int = Field(
        default=0,
        validation_alias=_names(
            "pending_or_max_agreements",
            "max_agreements",
            "pending_commits",
            "pendingOrMaxAgreements",
            "maxAgreements",
            "pendingCommits",
            "MaxAgreements",
            "PendingCommits",
        ),
    )


class BucketStatus(BaseModel):
    """A peer's last checkpoint/commit/prepare for one bucket."""

    model_config = ConfigDict(frozen=True)

    bucket_id: int = Field(validation_alias=_names("bucket_id", "bucketId", "BucketID"))
    last_checkpoint: int | None = Field(
        default=None,
        validation_alias=_names("last_checkpoint", "lastCheckpoint", "LastCheckpoint"),
    )
    last_commit: int | None = Field(
        default=None,
        validation_alias=_names("last_commit", "lastCommit", "LastCommit"),
    )
    last_prepare: int | None = Field(
        default=None,
        validation_alias=_names("last_prepare", "lastPrepare", "LastPrepare"),
    )


class PeerSnapshot(BaseModel):
    """This replica's view of another replica's progress."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(validation_alias=_names("id", "ID", "Id"))
    bucket_statuses: list[BucketStatus] = Field(
        default_factory=list,
        validation_alias=_names("bucket_statuses", "bucketStatuses", "BucketStatuses"),
    )


class StateMachineSnapshot(BaseModel):
    """The watermark window, buckets, checkpoints and peer views of a replica."""

    model_config = ConfigDict(frozen=True)

    low_watermark: int = Field(
        validation_alias=_names("low_watermark", "lowWatermark", "LowWatermark")
    )
    high_watermark: int = Field(
        validation_alias=_names("high_watermark", "highWatermark", "HighWatermark")
    )
    buckets: list[Bucket] = Field(validation_alias=_names("buckets", "Buckets"))
    checkpoints: list[Checkpoint] = Field(
        default_factory=list, validation_alias=_names("checkpoints", "Checkpoints")
    )
    peers: list[PeerSnapshot] = Field(
        default_factory=list,
        validation_alias=_names("peers", "nodes", "Peers", "Nodes"),
    )

    @model_validator(mode="before")
    @classmethod
    def _null_lists(cls, data: Any) -> Any:
        # Go marshals empty slices as null
        if isinstance(data, dict):
            return {k: ([] if v is None else v) for k, v in data.items()}
        return data

    @property
    def window_size(self) -> int:
        """Number of sequence numbers in ``[low_watermark, high_watermark]``."""
        return self.high_watermark - self.low_watermark + 1


_COUNTER_FIELDS: tuple[str, ...] = (
    "broadcast",
    "unicast",
    "preprocess",
    "digest",
    "validate",
    "commit",
    "checkpoint",
)


class ActionCounters(BaseModel):
    """Outstanding actions a node has not yet processed.

    ``total`` is derived from the named counters when the document omits it.
    """

    model_config = ConfigDict(frozen=True)

    broadcast: int = Field(default=0, ge=0)
    unicast: int = Field(default=0, ge=0)
    preprocess: int = Field(default=0, ge=0)
    digest: int = Field(default=0, ge=0)
    validate_: int = Field(default=0, ge=0, alias="validate")
    commit: int = Field(default=0, ge=0)
    checkpoint: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _derive_total(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "digest" not in data and "process" in data:
            data = dict(data)
            data["digest"] = data.pop("process")
        if data.get("total") is None:
            data = dict(data)
            try:
                data["total"] = sum(int(data.get(name) or 0) for name in _COUNTER_FIELDS)
            except (TypeError, ValueError):
                # leave it to field validation to report the bad counter
                data.pop("total", None)
        return data

    @property
    def counter_sum(self) -> int:
        """Sum of the named counters (excluding ``total``)."""
        return (
            self.broadcast
            + self.unicast
            + self.preprocess
            + self.digest
            + self.validate_
            + self.commit
            + self.checkpoint
        )

    def as_rows(self) -> list[tuple[str, int]]:
        """Display rows in the dashboard's fixed order."""
        return [
            ("Broadcasts", self.broadcast),
            ("Unicasts", self.unicast),
            ("Preprocess", self.preprocess),
            ("Digest", self.digest),
            ("Validate", self.validate_),
            ("Commit", self.commit),
            ("Checkpoint", self.checkpoint),
        ]


class LogSummary(BaseModel):
    """The sample application log attached to each node.

    The demo server marshals this struct to JSON bytes before embedding it,
    so it usually arrives as a base64 string; both forms are accepted.
    """

    model_config = ConfigDict(frozen=True)

    total_bytes: int = Field(
        default=0, validation_alias=_names("total_bytes", "totalBytes", "TotalBytes")
    )
    position: int = Field(default=0, validation_alias=_names("position", "Position"))
    last_bytes: list[int] = Field(
        default_factory=list,
        validation_alias=_names("last_bytes", "lastBytes", "LastBytes"),
    )

    @model_validator(mode="before")
    @classmethod
    def _decode_embedded(cls, data: Any) -> Any:
        if isinstance(data, (str, bytes)):
            try:
                raw = base64.b64decode(data, validate=True)
            except (binascii.Error, ValueError) as exc:
                raise ValueError(f"log is not base64-encoded JSON: {exc}") from exc
            return json.loads(raw)
        return data


class NodeSnapshot(BaseModel):
    """Everything one poll reports about one replica."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(validation_alias=_names("id", "ID", "Id"))
    actions: ActionCounters = Field(validation_alias=_names("actions", "Actions"))
    log: LogSummary | None = None
    state_machine: StateMachineSnapshot = Field(
        validation_alias=_names("state_machine", "stateMachine", "StateMachine")
    )
