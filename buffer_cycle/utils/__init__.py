"""Utility modules for buffer-cycle."""

from buffer_cycle.utils.logging import (
    configure_logging,
    get_logger,
    get_run_id,
)
from buffer_cycle.utils.result import Err, Ok, Result, ResultError

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    # Result
    "Ok",
    "Err",
    "Result",
    "ResultError",
]
