"""Tests for YAML configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from buffer_cycle.config import MachineSettings, load_config


def write_defaults(config_dir: Path, text: str) -> Path:
    path = config_dir / "defaults.yaml"
    path.write_text(text)
    return path


def test_defaults() -> None:
    settings = MachineSettings()
    assert settings.run.steps == 6
    assert settings.explorer.max_states == 1000
    assert settings.logging.level == "info"
    assert settings.logging.format == "json"
    assert settings.validate().is_ok()


def test_load_without_file_uses_defaults(tmp_path: Path) -> None:
    settings = load_config(tmp_path).unwrap()
    assert settings.run.steps == 6
    assert settings.config_dir == tmp_path


def test_load_overrides(tmp_path: Path) -> None:
    write_defaults(tmp_path, "run:\n  steps: 9\nlogging:\n  level: DEBUG\n  format: text\n")

    settings = load_config(tmp_path).unwrap()

    assert settings.run.steps == 9
    assert settings.logging.level == "debug"
    assert settings.logging.format == "text"
    assert settings.explorer.max_states == 1000


def test_empty_file_uses_defaults(tmp_path: Path) -> None:
    write_defaults(tmp_path, "")
    assert load_config(tmp_path).unwrap().run.steps == 6


def test_from_yaml_missing_file(tmp_path: Path) -> None:
    error = MachineSettings.from_yaml(tmp_path / "nope.yaml").unwrap_err()
    assert error.field == "path"


def test_from_yaml_bad_syntax(tmp_path: Path) -> None:
    path = write_defaults(tmp_path, "run: [unclosed\n")
    assert MachineSettings.from_yaml(path).unwrap_err().field == "yaml"


def test_from_yaml_not_a_mapping(tmp_path: Path) -> None:
    path = write_defaults(tmp_path, "- a\n- b\n")
    assert MachineSettings.from_yaml(path).unwrap_err().field == "yaml"


@pytest.mark.parametrize(
    ("data", "field"),
    [
        ({"run": {"steps": "many"}}, "run.steps"),
        ({"run": {"steps": 2.7}}, "run.steps"),
        ({"run": {"steps": True}}, "run.steps"),
        ({"explorer": {"max_states": False}}, "explorer.max_states"),
        ({"explorer": {"max_states": 10.0}}, "explorer.max_states"),
        ({"run": 5}, "run"),
    ],
)
def test_from_dict_rejects_non_integers(data: dict, field: str) -> None:
    error = MachineSettings.from_dict(data).unwrap_err()
    assert error.field == field


def test_from_yaml_rejects_float_steps(tmp_path: Path) -> None:
    path = write_defaults(tmp_path, "run:\n  steps: 2.7\n")
    assert MachineSettings.from_yaml(path).unwrap_err().field == "run.steps"


@pytest.mark.parametrize(
    ("text", "field"),
    [
        ("run:\n  steps: -1\n", "run.steps"),
        ("explorer:\n  max_states: 0\n", "explorer.max_states"),
        ("logging:\n  level: loud\n", "logging.level"),
        ("logging:\n  format: xml\n", "logging.format"),
    ],
)
def test_invalid_values(tmp_path: Path, text: str, field: str) -> None:
    write_defaults(tmp_path, text)

    error = load_config(tmp_path).unwrap_err()

    assert error.field == field
    assert field in str(error)
