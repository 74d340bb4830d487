"""Shared test fixtures for replicaview."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from replicaview.models.snapshot import NodeSnapshot


def node_payload(
    node_id: int,
    low: int,
    high: int,
    *,
    bucket_count: int = 1,
    code: int = 0,
    sequences: list[int] | None = None,
    checkpoints: list[dict[str, Any]] | None = None,
    peers: list[dict[str, Any]] | None = None,
    actions: dict[str, int] | None = None,
) -> dict[str, Any]:
    """Build one ``/status`` entry the way the demo server marshals it."""
    width = high - low + 1
    buckets = [
        {
            "ID": b,
            "Sequences": list(sequences) if sequences is not None else [code] * width,
        }
        for b in range(bucket_count)
    ]
    return {
        "ID": node_id,
        "actions": actions
        or {
            "broadcast": 0,
            "unicast": 0,
            "preprocess": 0,
            "digest": 0,
            "validate": 0,
            "commit": 0,
            "checkpoint": 0,
            "total": 0,
        },
        "stateMachine": {
            "LowWatermark": low,
            "HighWatermark": high,
            "Buckets": buckets,
            "Checkpoints": checkpoints or [],
            "Nodes": peers or [],
        },
    }


def checkpoint(seq_no: int, local: bool = False, net: bool = False, pending: int = 0) -> dict[str, Any]:
    return {
        "SeqNo": seq_no,
        "LocalDecision": local,
        "NetQuorum": net,
        "MaxAgreements": pending,
    }


# ---------------------------------------------------------------------------
# Node factories shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_node() -> Callable[..., NodeSnapshot]:
    """Factory fixture: build a validated ``NodeSnapshot``."""

    def _factory(node_id: int, low: int, high: int, **kwargs: Any) -> NodeSnapshot:
        return NodeSnapshot.model_validate(node_payload(node_id, low, high, **kwargs))

    return _factory


@pytest.fixture
def four_nodes(make_node: Callable[..., NodeSnapshot]) -> list[NodeSnapshot]:
    """Four replicas with windows [0,10], [2,10], [0,12], [5,10]."""
    return [
        make_node(0, 0, 10, bucket_count=2, code=6),
        make_node(1, 2, 10, bucket_count=2, code=5),
        make_node(2, 0, 12, bucket_count=2, code=1),
        make_node(3, 5, 10, bucket_count=2, code=3),
    ]


@pytest.fixture
def raw_status() -> list[dict[str, Any]]:
    """A small two-node ``/status`` document with checkpoints and peers."""
    peers = [
        {
            "ID": 1,
            "BucketStatuses": [
                {"BucketID": 0, "LastCheckpoint": 0, "LastCommit": 2, "LastPrepare": 3},
                {"BucketID": 1, "LastCheckpoint": 0, "LastCommit": 1, "LastPrepare": 1},
            ],
        }
    ]
    return [
        node_payload(
            0,
            0,
            4,
            bucket_count=2,
            sequences=[6, 6, 5, 1, 0],
            checkpoints=[checkpoint(0, local=True, net=True), checkpoint(3, local=True)],
            peers=peers,
            actions={
                "broadcast": 1,
                "unicast": 0,
                "preprocess": 2,
                "digest": 0,
                "validate": 0,
                "commit": 1,
                "checkpoint": 0,
                "total": 4,
            },
        ),
        node_payload(1, 1, 4, bucket_count=2, sequences=[6, 4, 2, 0]),
    ]
