"""Configuration module for buffer-cycle."""

from buffer_cycle.config.settings import MachineSettings, load_config

__all__ = ["MachineSettings", "load_config"]
