"""Versioned schema profiles — how a given status version encodes its log.

Status documents drift between protocol releases: sequence state codes are
renumbered and one release keys checkpoints by ``seq_no / bucket_count``
rather than by the raw sequence number.  A ``SchemaProfile`` pins both rules
so the codec and the checkpoint collapser never assume a universal mapping.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SequencePhase(str, Enum):
    """Protocol phase a sequence slot can be in."""

    EMPTY = "empty"
    QUEUED = "queued"
    DIGESTED = "digested"
    INVALID = "invalid"
    VALIDATED = "validated"
    PREPARED = "prepared"
    COMMITTED = "committed"
    # Later lifecycle names
    ALLOCATED = "allocated"
    PENDING_REQUESTS = "pending_requests"
    READY = "ready"
    PREPREPARED = "preprepared"


class CheckpointKeyRule(str, Enum):
    """How a checkpoint record resolves to a column of the sequence window."""

    ABSOLUTE = "absolute"
    BUCKET_DIVIDED = "bucket_divided"


# Phase -> (display symbol, color class).  Color classes are abstract;
# renderers map them onto Rich styles or CSS.
PHASE_SYMBOLS: dict[SequencePhase, tuple[str, str]] = {
    SequencePhase.EMPTY: ("", "empty"),
    SequencePhase.QUEUED: ("Q", "in-progress"),
    SequencePhase.DIGESTED: ("D", "in-progress"),
    SequencePhase.INVALID: ("I", "invalid"),
    SequencePhase.VALIDATED: ("V", "in-progress"),
    SequencePhase.PREPARED: ("P", "in-progress"),
    SequencePhase.COMMITTED: ("C", "committed"),
    SequencePhase.ALLOCATED: ("A", "in-progress"),
    SequencePhase.PENDING_REQUESTS: ("R", "in-progress"),
    SequencePhase.READY: ("Y", "in-progress"),
    SequencePhase.PREPREPARED: ("Q", "in-progress"),
}

UNKNOWN_SYMBOL: tuple[str, str] = ("?", "unknown")


class SchemaProfile(BaseModel):
    """Pinned encoding rules for one status schema version."""

    model_config = ConfigDict(frozen=True)

    name: str
    phases: dict[int, SequencePhase]
    checkpoint_key: CheckpointKeyRule = CheckpointKeyRule.ABSOLUTE

    def phase_for(self, code: int) -> SequencePhase | None:
        """Return the phase for *code*, or ``None`` when the code is unmapped."""
        if code == 0:
            return SequencePhase.EMPTY
        return self.phases.get(code)

    def checkpoint_column(self, seq_no: int, bucket_count: int) -> int:
        """Resolve a checkpoint's sequence number to a window column key."""
        if self.checkpoint_key is CheckpointKeyRule.BUCKET_DIVIDED:
            return seq_no // max(bucket_count, 1)
        return seq_no


PROFILE_V1 = SchemaProfile(
    name="v1",
    phases={
        1: SequencePhase.QUEUED,
        2: SequencePhase.DIGESTED,
        3: SequencePhase.INVALID,
        4: SequencePhase.VALIDATED,
        5: SequencePhase.PREPARED,
        6: SequencePhase.COMMITTED,
    },
    checkpoint_key=CheckpointKeyRule.ABSOLUTE,
)

PROFILE_V2 = SchemaProfile(
    name="v2",
    phases={
        1: SequencePhase.ALLOCATED,
        2: SequencePhase.PENDING_REQUESTS,
        3: SequencePhase.READY,
        4: SequencePhase.PREPREPARED,
        5: SequencePhase.PREPARED,
        6: SequencePhase.COMMITTED,
    },
    checkpoint_key=CheckpointKeyRule.BUCKET_DIVIDED,
)

SCHEMA_PROFILES: dict[str, SchemaProfile] = {
    PROFILE_V1.name: PROFILE_V1,
    PROFILE_V2.name: PROFILE_V2,
}


def get_profile(name: str) -> SchemaProfile:
    """Look up a built-in profile by name.

    Raises
    ------
    KeyError
        If *name* is not a known profile.
    """
    try:
        return SCHEMA_PROFILES[name]
    except KeyError:
        raise KeyError(
            f"Unknown schema profile {name!r}; "
            f"expected one of {sorted(SCHEMA_PROFILES)}"
        ) from None
