"""Unit tests for the CLI — Typer command registration and basic behavior."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import checkpoint, node_payload

from replicaview.cli.app import app
from replicaview.cli.commands import node_cmd

runner = CliRunner()


@pytest.fixture
def status_file(tmp_path: Path) -> Path:
    doc = [
        node_payload(0, 0, 2, sequences=[6, 5, 0], checkpoints=[checkpoint(1, local=True, net=True)]),
        node_payload(1, 1, 2, sequences=[4, 0]),
    ]
    path = tmp_path / "status.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("status", "watch", "validate", "process", "propose", "tick", "ui"):
            assert command in result.output

    @pytest.mark.parametrize("command", ["status", "watch", "validate", "process", "propose", "tick"])
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# Test: status / validate
# ---------------------------------------------------------------------------


class TestStatusCommand:
    def test_renders_saved_document(self, status_file):
        result = runner.invoke(app, ["status", "--file", str(status_file)])
        assert result.exit_code == 0, result.output
        assert "Bucket-0" in result.output

    def test_json_output(self, status_file):
        result = runner.invoke(app, ["status", "--file", str(status_file), "--json"])
        assert result.exit_code == 0, result.output
        assert '"columns"' in result.output
        assert '"agreed"' in result.output

    def test_expand_all(self, status_file):
        result = runner.invoke(app, ["status", "--file", str(status_file), "--json", "--expand-all"])
        assert result.exit_code == 0, result.output
        assert '"expanded": false' not in result.output
        assert result.output.count('"expanded": true') == 2

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["status", "--file", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_malformed_document(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([node_payload(0, 0, 4, sequences=[1])]), encoding="utf-8")
        result = runner.invoke(app, ["status", "--file", str(path)])
        assert result.exit_code == 1
        assert "Malformed" in result.output

    def test_unknown_profile(self, status_file):
        result = runner.invoke(app, ["status", "--file", str(status_file), "--profile", "v9"])
        assert result.exit_code == 2

    def test_validate_ok(self, status_file):
        result = runner.invoke(app, ["validate", str(status_file)])
        assert result.exit_code == 0
        assert "valid" in result.output


# ---------------------------------------------------------------------------
# Test: node commands
# ---------------------------------------------------------------------------


class _RecordingDispatcher:
    calls: list[tuple] = []

    def __init__(self, base_url, *, timeout=5.0, **kwargs):
        self.base_url = base_url

    def process(self, node_id):
        self.calls.append(("process", node_id, self.base_url))

    def propose(self, node_id, payload=None):
        self.calls.append(("propose", node_id, payload))

    def tick(self, node_id):
        self.calls.append(("tick", node_id, self.base_url))


class TestNodeCommands:
    @pytest.fixture(autouse=True)
    def _fake_dispatcher(self, monkeypatch):
        _RecordingDispatcher.calls = []
        monkeypatch.setattr(node_cmd, "CommandDispatcher", _RecordingDispatcher)

    def test_process(self):
        result = runner.invoke(app, ["process", "2", "--url", "http://r:1"])
        assert result.exit_code == 0, result.output
        assert _RecordingDispatcher.calls == [("process", 2, "http://r:1")]

    def test_propose_payload(self):
        result = runner.invoke(app, ["propose", "1", "--payload", "abc"])
        assert result.exit_code == 0, result.output
        assert _RecordingDispatcher.calls == [("propose", 1, "abc")]

    def test_tick(self):
        result = runner.invoke(app, ["tick", "0", "--url", "http://r:1"])
        assert result.exit_code == 0, result.output
        assert _RecordingDispatcher.calls == [("tick", 0, "http://r:1")]
