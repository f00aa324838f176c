"""Tests for the click CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from buffer_cycle import __version__
from buffer_cycle.cli import cli
from buffer_cycle.utils.result import ExitCode


@pytest.fixture
def invoke(tmp_path: Path):
    runner = CliRunner()

    def _invoke(*args: str):
        return runner.invoke(
            cli,
            ["--config", str(tmp_path), "--log-level", "error", *args],
        )

    return _invoke


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_run(invoke) -> None:
    result = invoke("run", "--steps", "4")

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["trace"] == ["idle", "bufferring", "computing", "idle", "bufferring"]
    assert data["final_state"] == "bufferring"
    assert data["type_ok"] is True


def test_log_level_option_silences_machine_events(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["--config", str(tmp_path), "--log-level", "error", "run", "--steps", "1"],
    )

    assert result.exit_code == 0, result.output
    assert "state_transition" not in result.output


def test_log_format_option_reaches_machine_events(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["--config", str(tmp_path), "--log-level", "info", "--log-format", "text",
         "run", "--steps", "1"],
    )

    assert result.exit_code == 0, result.output
    event_lines = [line for line in result.output.splitlines() if "state_transition" in line]
    assert event_lines
    assert not any(line.lstrip().startswith("{") for line in event_lines)


def test_configured_log_level_applies(tmp_path: Path) -> None:
    (tmp_path / "defaults.yaml").write_text("logging:\n  level: error\n")

    result = CliRunner().invoke(cli, ["--config", str(tmp_path), "run", "--steps", "2"])

    assert result.exit_code == 0, result.output
    assert "state_transition" not in result.output
    assert json.loads(result.output)["final_state"] == "computing"


def test_run_uses_configured_steps(tmp_path: Path, invoke) -> None:
    (tmp_path / "defaults.yaml").write_text("run:\n  steps: 2\n")

    data = json.loads(invoke("run").output)

    assert data["trace"] == ["idle", "bufferring", "computing"]


def test_step_applied(invoke) -> None:
    result = invoke("step", "end-processing", "--from", "computing")

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["applied"] is True
    assert data["from_state"] == "computing"
    assert data["state"] == "idle"


def test_step_not_applicable(invoke) -> None:
    result = invoke("step", "start-processing")

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["applied"] is False
    assert data["status"] == "not_applicable"
    assert data["state"] == "idle"
    assert data["enabled"] == ["START_BUFFERING"]


def test_step_unknown_action(invoke) -> None:
    result = invoke("step", "reset")
    assert result.exit_code == 2


def test_check(invoke) -> None:
    result = invoke("check")

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["status"] == "success"
    assert data["states"] == ["idle", "bufferring", "computing"]
    assert data["diameter"] == 2
    assert data["invariants"] == {"TypeOK": True}


def test_check_state_limit(invoke) -> None:
    result = invoke("check", "--max-states", "2")

    assert result.exit_code == ExitCode.EXPLORATION_FAILED
    assert json.loads(result.output)["status"] == "error"


def test_graph_to_stdout(invoke) -> None:
    result = invoke("graph")

    assert result.exit_code == 0, result.output
    assert '"computing" -> "idle" [label="END_PROCESSING"];' in result.output


def test_graph_to_file(tmp_path: Path, invoke) -> None:
    target = tmp_path / "graph.dot"

    result = invoke("graph", "--output", str(target))

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["output_path"] == str(target)
    assert target.read_text().startswith("digraph")


def test_invalid_config(tmp_path: Path, invoke) -> None:
    (tmp_path / "defaults.yaml").write_text("run:\n  steps: -3\n")

    result = invoke("run")

    assert result.exit_code == ExitCode.CONFIG_INVALID
    assert "run.steps" in json.loads(result.output)["message"]
