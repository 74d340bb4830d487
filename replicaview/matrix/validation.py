"""Snapshot validation — malformed status documents are rejected, not drawn.

Parsing collects every problem across every node before raising, so a
single ``SnapshotValidationError`` describes the whole document.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from replicaview.models.snapshot import NodeSnapshot

logger = logging.getLogger(__name__)


class ValidationIssue(BaseModel):
    """One structural problem found in a status document."""

    model_config = ConfigDict(frozen=True)

    index: int
    node_id: int | None = None
    location: str
    message: str

    def __str__(self) -> str:
        who = f"node {self.node_id}" if self.node_id is not None else f"entry {self.index}"
        return f"{who}: {self.location}: {self.message}"


class SnapshotValidationError(ValueError):
    """Raised when one or more node snapshots are malformed."""

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        self.issues = list(issues)
        summary = "; ".join(str(i) for i in self.issues[:5])
        if len(self.issues) > 5:
            summary += f"; ... and {len(self.issues) - 5} more"
        super().__init__(f"Malformed status snapshot: {summary}")


def check_node(node: NodeSnapshot, index: int = 0) -> list[ValidationIssue]:
    """Semantic checks pydantic cannot express field-by-field."""
    issues: list[ValidationIssue] = []
    sm = node.state_machine

    def issue(location: str, message: str) -> None:
        issues.append(
            ValidationIssue(index=index, node_id=node.id, location=location, message=message)
        )

    if sm.high_watermark < sm.low_watermark:
        issue(
            "state_machine.high_watermark",
            f"high watermark {sm.high_watermark} is below low watermark {sm.low_watermark}",
        )
    else:
        for b_index, bucket in enumerate(sm.buckets):
            if len(bucket.sequences) != sm.window_size:
                issue(
                    f"state_machine.buckets.{b_index}.sequences",
                    f"bucket {bucket.id} has {len(bucket.sequences)} sequences, "
                    f"expected {sm.window_size} for window "
                    f"[{sm.low_watermark}, {sm.high_watermark}]",
                )

    if node.actions.total != node.actions.counter_sum:
        issue(
            "actions.total",
            f"total {node.actions.total} does not equal the sum of counters "
            f"({node.actions.counter_sum})",
        )
    return issues


def check_nodes(
    nodes: Sequence[NodeSnapshot], indices: Sequence[int] | None = None
) -> list[ValidationIssue]:
    """Run ``check_node`` over every node, plus duplicate-id detection.

    *indices* gives each node's position in the source document when some
    entries were dropped earlier; defaults to ``range(len(nodes))``.
    """
    issues: list[ValidationIssue] = []
    seen: set[int] = set()
    for index, node in zip(indices or range(len(nodes)), nodes):
        if node.id in seen:
            issues.append(
                ValidationIssue(
                    index=index, node_id=node.id, location="id", message="duplicate node id"
                )
            )
        seen.add(node.id)
        issues.extend(check_node(node, index))
    return issues


def ensure_valid(nodes: Sequence[NodeSnapshot]) -> None:
    """Raise ``SnapshotValidationError`` if any node fails ``check_node``."""
    issues = check_nodes(nodes)
    if issues:
        raise SnapshotValidationError(issues)


def _raw_node_id(raw: Any) -> int | None:
    if isinstance(raw, dict):
        for key in ("ID", "id", "Id"):
            value = raw.get(key)
            if isinstance(value, int):
                return value
    return None


def parse_status(payload: Any) -> list[NodeSnapshot]:
    """Parse a ``/status`` document into validated ``NodeSnapshot`` objects.

    Parameters
    ----------
    payload:
        The decoded JSON list, or the raw JSON text/bytes.

    Raises
    ------
    SnapshotValidationError
        If the document is not a list or any node is malformed.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise SnapshotValidationError(
                [ValidationIssue(index=0, location="$", message=f"invalid JSON: {exc}")]
            ) from exc

    if payload is None:
        return []
    if not isinstance(payload, list):
        raise SnapshotValidationError(
            [
                ValidationIssue(
                    index=0,
                    location="$",
                    message=f"expected a list of node snapshots, got {type(payload).__name__}",
                )
            ]
        )

    nodes: list[NodeSnapshot] = []
    indices: list[int] = []
    issues: list[ValidationIssue] = []
    for index, raw in enumerate(payload):
        try:
            node = NodeSnapshot.model_validate(raw)
        except ValidationError as exc:
            node_id = _raw_node_id(raw)
            for err in exc.errors():
                issues.append(
                    ValidationIssue(
                        index=index,
                        node_id=node_id,
                        location=".".join(str(part) for part in err["loc"]) or "$",
                        message=err["msg"],
                    )
                )
            continue
        nodes.append(node)
        indices.append(index)

    issues.extend(check_nodes(nodes, indices))
    if issues:
        logger.warning("Rejected status document with %d issue(s)", len(issues))
        raise SnapshotValidationError(issues)
    return nodes
