"""Centralized configuration for buffer-cycle.

Configuration can be loaded from YAML files and validated at startup.
A missing configuration file means all defaults apply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from buffer_cycle.utils.result import ConfigError, Err, Ok, Result

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")
LOG_FORMATS = ("json", "text")


def _integer(value: Any, field_name: str) -> Result[int, ConfigError]:
    """Accept only real integers; YAML booleans and floats are rejected."""
    if isinstance(value, bool) or not isinstance(value, int):
        return Err(ConfigError(
            field=field_name,
            message=f"Must be an integer, got {value!r}",
        ))
    return Ok(value)


@dataclass
class RunConfig:
    """Settings for running the machine with next()."""

    steps: int = 6


@dataclass
class ExplorerConfig:
    """State-space exploration limits."""

    max_states: int = 1000


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = "json"


@dataclass
class MachineSettings:
    """Complete configuration."""

    run: RunConfig = field(default_factory=RunConfig)
    explorer: ExplorerConfig = field(default_factory=ExplorerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Set at runtime
    config_dir: Optional[Path] = None

    @classmethod
    def from_yaml(cls, path: Path) -> Result["MachineSettings", ConfigError]:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Result with loaded config or error
        """
        path = Path(path)

        if not path.exists():
            return Err(ConfigError(
                field="path",
                message=f"Configuration file not found: {path}",
            ))

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            return Err(ConfigError(
                field="yaml",
                message=f"Failed to parse YAML: {e}",
            ))
        except OSError as e:
            return Err(ConfigError(
                field="file",
                message=f"Failed to read config file: {e}",
            ))

        if not isinstance(data, dict):
            return Err(ConfigError(
                field="yaml",
                message="Top level of the configuration must be a mapping",
            ))

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Result["MachineSettings", ConfigError]:
        """
        Create configuration from a dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Result with loaded config or error
        """
        sections: dict[str, dict[str, Any]] = {}
        for name in ("run", "explorer", "logging"):
            section = data.get(name) or {}
            if not isinstance(section, dict):
                return Err(ConfigError(
                    field=name,
                    message=f"Must be a mapping, got {type(section).__name__}",
                ))
            sections[name] = section

        steps = _integer(sections["run"].get("steps", 6), "run.steps")
        if steps.is_err():
            return steps

        max_states = _integer(
            sections["explorer"].get("max_states", 1000),
            "explorer.max_states",
        )
        if max_states.is_err():
            return max_states

        logging_data = sections["logging"]
        logging_config = LoggingConfig(
            level=str(logging_data.get("level", "info")).lower(),
            format=str(logging_data.get("format", "json")).lower(),
        )

        return Ok(cls(
            run=RunConfig(steps=steps.unwrap()),
            explorer=ExplorerConfig(max_states=max_states.unwrap()),
            logging=logging_config,
        ))

    def validate(self) -> Result[None, ConfigError]:
        """
        Validate configuration values.

        Returns:
            Result indicating success or validation error
        """
        if self.run.steps < 0:
            return Err(ConfigError(
                field="run.steps",
                message=f"Must be at least 0, got {self.run.steps}",
            ))

        if self.explorer.max_states < 1:
            return Err(ConfigError(
                field="explorer.max_states",
                message=f"Must be at least 1, got {self.explorer.max_states}",
            ))

        if self.logging.level not in LOG_LEVELS:
            return Err(ConfigError(
                field="logging.level",
                message=f"Must be one of {', '.join(LOG_LEVELS)}, got {self.logging.level!r}",
            ))

        if self.logging.format not in LOG_FORMATS:
            return Err(ConfigError(
                field="logging.format",
                message=f"Must be one of {', '.join(LOG_FORMATS)}, got {self.logging.format!r}",
            ))

        return Ok(None)


def load_config(config_dir: Path = None) -> Result[MachineSettings, ConfigError]:
    """
    Load configuration from the standard location.

    Loads config/defaults.yaml if present, otherwise uses defaults.

    Args:
        config_dir: Configuration directory (defaults to ./config)

    Returns:
        Result with loaded config or error
    """
    if config_dir is None:
        config_dir = Path("./config")

    config_dir = Path(config_dir)

    defaults_path = config_dir / "defaults.yaml"
    if defaults_path.exists():
        result = MachineSettings.from_yaml(defaults_path)
        if result.is_err():
            return result
        config = result.unwrap()
    else:
        config = MachineSettings()

    config.config_dir = config_dir

    validation_result = config.validate()
    if validation_result.is_err():
        return Err(validation_result.unwrap_err())

    return Ok(config)
