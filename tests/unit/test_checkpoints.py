"""Tests for CheckpointSpanCollapser — spans and quorum classification."""

from __future__ import annotations

from conftest import checkpoint

from replicaview.matrix.aligner import WatermarkAligner
from replicaview.matrix.checkpoints import CheckpointSpanCollapser, classify
from replicaview.models.matrix import CheckpointStatus
from replicaview.models.schema import PROFILE_V2
from replicaview.models.snapshot import Checkpoint


def _collapse(nodes, profile=None):
    alignment = WatermarkAligner().align(nodes)
    return CheckpointSpanCollapser(profile).collapse(nodes[0], alignment)


class TestSpanCollapsing:
    def test_spans_accumulate_skipped_positions(self, make_node):
        node = make_node(
            0, 0, 9, checkpoints=[checkpoint(2), checkpoint(3), checkpoint(7)]
        )
        row = _collapse([node])

        assert [c.seq_no for c in row.cells] == [2, 3, 7]
        assert [c.col_span for c in row.cells] == [3, 1, 4]

    def test_trailing_positions_are_not_emitted(self, make_node):
        node = make_node(0, 0, 9, checkpoints=[checkpoint(2), checkpoint(3), checkpoint(7)])
        row = _collapse([node])

        assert row.covered_width == 8
        assert row.cells[-1].seq_no == 7

    def test_no_checkpoints_gives_empty_row(self, make_node):
        row = _collapse([make_node(0, 0, 9)])
        assert row.cells == []
        assert row.node_id == 0

    def test_checkpoint_at_first_column_spans_one(self, make_node):
        row = _collapse([make_node(0, 0, 5, checkpoints=[checkpoint(0)])])
        assert [c.col_span for c in row.cells] == [1]

    def test_walk_covers_global_window_not_node_window(self, make_node):
        # node 0 starts at 4 but the global window starts at 0
        nodes = [
            make_node(0, 4, 9, checkpoints=[checkpoint(5)]),
            make_node(1, 0, 9),
        ]
        row = _collapse(nodes)
        assert [c.col_span for c in row.cells] == [6]

    def test_checkpoints_outside_window_are_ignored(self, make_node):
        node = make_node(0, 0, 4, checkpoints=[checkpoint(10), checkpoint(2)])
        row = _collapse([node])
        assert [c.seq_no for c in row.cells] == [2]

    def test_bucket_divided_keys(self, make_node):
        # two buckets: checkpoint seq 10 resolves to column 5
        node = make_node(0, 0, 9, bucket_count=2, checkpoints=[checkpoint(10, local=True, net=True)])
        row = _collapse([node], PROFILE_V2)

        assert [c.seq_no for c in row.cells] == [5]
        assert [c.col_span for c in row.cells] == [6]


class TestClassification:
    def test_local_only_is_not_agreed(self):
        cp = Checkpoint.model_validate(checkpoint(4, local=True, net=False))
        assert classify(cp) is CheckpointStatus.LOCAL_ONLY

    def test_priority_order(self):
        cases = {
            (True, True): CheckpointStatus.AGREED,
            (False, True): CheckpointStatus.NETWORK_QUORUM_ONLY,
            (True, False): CheckpointStatus.LOCAL_ONLY,
            (False, False): CheckpointStatus.PENDING,
        }
        for (local, net), expected in cases.items():
            cp = Checkpoint.model_validate(checkpoint(1, local=local, net=net))
            assert classify(cp) is expected

    def test_pending_shows_counter(self, make_node):
        node = make_node(0, 0, 3, checkpoints=[checkpoint(1, pending=3)])
        row = _collapse([node])

        assert row.cells[0].status is CheckpointStatus.PENDING
        assert row.cells[0].text == "3"

    def test_single_local_checkpoint_row(self, make_node):
        node = make_node(0, 0, 3, checkpoints=[checkpoint(2, local=True)])
        row = _collapse([node])

        assert row.cells[0].status is CheckpointStatus.LOCAL_ONLY
        assert row.cells[0].text == "Local"
