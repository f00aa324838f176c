"""buffer-cycle: a three-state buffer/compute cycle machine and its checker."""

__version__ = "0.1.0"
