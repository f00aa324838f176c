"""Model-checking helpers: state-space exploration and graph output."""

from buffer_cycle.checker.explorer import (
    DEFAULT_INVARIANTS,
    Edge,
    Exploration,
    StateExplorer,
    Violation,
    validate_trace,
)
from buffer_cycle.checker.report import GraphRenderer, render_dot

__all__ = [
    "DEFAULT_INVARIANTS",
    "Edge",
    "Exploration",
    "StateExplorer",
    "Violation",
    "validate_trace",
    "GraphRenderer",
    "render_dot",
]
