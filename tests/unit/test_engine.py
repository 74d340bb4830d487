"""Tests for render_model — rows, headers, expansion and degenerate input."""

from __future__ import annotations

import pytest

from conftest import node_payload

from replicaview.matrix.builder import SequenceMatrixBuilder
from replicaview.matrix.engine import MatrixEngine, render_model
from replicaview.matrix.expansion import ExpansionState
from replicaview.matrix.validation import SnapshotValidationError, parse_status
from replicaview.models.matrix import CellKind
from replicaview.models.schema import PROFILE_V2


# ---------------------------------------------------------------------------
# Test: bucket rows
# ---------------------------------------------------------------------------


class TestBucketRows:
    def test_header_columns(self, four_nodes):
        matrix = render_model(four_nodes)
        assert matrix.columns == list(range(0, 13))
        assert matrix.global_low == 0
        assert matrix.global_high == 12

    def test_every_row_spans_the_global_window(self, four_nodes):
        matrix = render_model(four_nodes)
        for group in matrix.groups:
            for row in group.bucket_rows:
                assert len(row.cells) == matrix.width

    def test_offset_then_sequences_then_padding(self, four_nodes):
        matrix = render_model(four_nodes)
        cells = matrix.groups[3].bucket_rows[0].cells  # window [5, 10]

        kinds = [c.kind for c in cells]
        assert kinds[:5] == [CellKind.OFFSET] * 5
        assert kinds[5:11] == [CellKind.SEQUENCE] * 6
        assert kinds[11:] == [CellKind.PADDING] * 2
        assert {c.text for c in cells[5:11]} == {"I"}

    def test_group_header_only_on_first_bucket_row(self, four_nodes):
        group = render_model(four_nodes).groups[1]

        assert group.bucket_rows[0].header is not None
        assert group.bucket_rows[0].header.row_span == 2
        assert group.bucket_rows[0].header.label == "Node-1 State Machine"
        assert group.bucket_rows[1].header is None

    def test_bucket_order_is_preserved(self, make_node):
        node = make_node(0, 0, 3, bucket_count=3)
        reordered = node.model_copy(
            update={
                "state_machine": node.state_machine.model_copy(
                    update={"buckets": list(reversed(node.state_machine.buckets))}
                )
            }
        )
        rows = render_model([reordered]).groups[0].bucket_rows
        assert [r.bucket_id for r in rows] == [2, 1, 0]
        assert [r.label for r in rows] == ["Bucket-2", "Bucket-1", "Bucket-0"]

    def test_leader_bucket_is_flagged(self):
        doc = node_payload(0, 0, 3, bucket_count=2)
        doc["stateMachine"]["Buckets"][1]["Leader"] = True
        rows = render_model(parse_status([doc])).groups[0].bucket_rows
        assert [r.leader for r in rows] == [False, True]

    def test_unknown_codes_render_as_marker(self, make_node):
        matrix = render_model([make_node(0, 0, 2, sequences=[6, 99, -3])])
        texts = [c.text for c in matrix.groups[0].bucket_rows[0].cells]
        assert texts == ["C", "?", "?"]

    def test_profile_changes_symbols(self, make_node):
        node = make_node(0, 0, 2, sequences=[1, 2, 3])
        v1 = [c.text for c in render_model([node]).groups[0].bucket_rows[0].cells]
        v2 = [c.text for c in render_model([node], profile=PROFILE_V2).groups[0].bucket_rows[0].cells]
        assert v1 == ["Q", "D", "I"]
        assert v2 == ["A", "R", "Y"]

    def test_one_checkpoint_row_per_node(self, four_nodes):
        matrix = render_model(four_nodes)
        assert [g.checkpoint_row.node_id for g in matrix.groups] == [0, 1, 2, 3]


# ---------------------------------------------------------------------------
# Test: nothing to render
# ---------------------------------------------------------------------------


class TestEmptyResult:
    def test_empty_node_list(self):
        matrix = render_model([])
        assert matrix.is_empty
        assert matrix.groups == []

    def test_degenerate_window(self, make_node):
        matrix = render_model([make_node(0, 5, 5), make_node(1, 5, 5)])
        assert matrix.is_empty

    def test_empty_matrix_serializes(self):
        assert render_model([]).model_dump(mode="json")["columns"] == []


# ---------------------------------------------------------------------------
# Test: peer detail expansion
# ---------------------------------------------------------------------------


class TestPeerDetail:
    def test_collapsed_by_default(self, raw_status):
        matrix = render_model(parse_status(raw_status))
        assert all(not g.expanded and g.peer_blocks == [] for g in matrix.groups)

    def test_collapsed_nodes_never_build_peer_rows(self, raw_status, monkeypatch):
        calls: list[int] = []
        original = SequenceMatrixBuilder.peer_blocks

        def spy(self, node, window):
            calls.append(node.id)
            return original(self, node, window)

        monkeypatch.setattr(SequenceMatrixBuilder, "peer_blocks", spy)
        render_model(parse_status(raw_status), ExpansionState.of([1]))
        assert calls == [1]

    def test_expanded_markers(self, raw_status):
        nodes = parse_status(raw_status)
        matrix = render_model(nodes, ExpansionState.of([0]))
        group = matrix.groups[0]

        assert group.expanded is True
        assert len(group.peer_blocks) == 1
        block = group.peer_blocks[0]
        assert block.peer_id == 1
        assert [r.bucket_id for r in block.rows] == [0, 1]

        # bucket 0: checkpoint at 0, commit at 2, prepare at 3
        assert [c.text for c in block.rows[0].cells] == ["X", "", "C", "P", ""]
        # bucket 1: commit and prepare both at 1, commit wins
        assert [c.text for c in block.rows[1].cells] == ["X", "C", "", "", ""]

    def test_peer_rows_are_aligned(self, raw_status, make_node):
        nodes = parse_status(raw_status) + [make_node(2, 0, 6)]
        matrix = render_model(nodes, ExpansionState.of([0]))
        row = matrix.groups[0].peer_blocks[0].rows[0]

        assert len(row.cells) == matrix.width
        assert [c.kind for c in row.cells[-2:]] == [CellKind.PADDING] * 2


# ---------------------------------------------------------------------------
# Test: validation in the render path
# ---------------------------------------------------------------------------


class TestRenderValidation:
    def test_malformed_bucket_rejected(self, make_node):
        good = make_node(0, 0, 4)
        bad = good.model_copy(
            update={
                "id": 1,
                "state_machine": good.state_machine.model_copy(
                    update={
                        "buckets": [
                            b.model_copy(update={"sequences": [0, 0]})
                            for b in good.state_machine.buckets
                        ]
                    }
                ),
            }
        )
        with pytest.raises(SnapshotValidationError) as excinfo:
            MatrixEngine().render([good, bad])
        assert excinfo.value.issues[0].node_id == 1

    def test_render_is_deterministic(self, four_nodes):
        assert render_model(four_nodes) == render_model(four_nodes)
