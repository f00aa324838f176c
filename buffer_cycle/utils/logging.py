"""Structured JSON logging utility with run ID support.

Module-level loggers are lazy: each call resolves the current structlog
configuration, so `configure_logging()` takes effect for loggers created
at import time as well.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

import structlog

# Context variable for run ID propagation
run_id_var: ContextVar[str] = ContextVar("run_id", default="")

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_run_id() -> str:
    """Get the current run ID, generating one if not set."""
    rid = run_id_var.get()
    if not rid:
        rid = str(uuid.uuid4())[:8]
        run_id_var.set(rid)
    return rid


def add_context_info(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add the run ID to log events."""
    rid = run_id_var.get()
    if rid:
        event_dict["run_id"] = rid
    return event_dict


def add_timestamp(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add ISO format timestamp to log events."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


class _CurrentStderr:
    """Writes to whatever sys.stderr is at write time."""

    def write(self, message: str) -> int:
        return sys.stderr.write(message)

    def flush(self) -> None:
        sys.stderr.flush()


def configure_logging(
    level: str = "info",
    format_type: str = "json",
    stream: Any = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Log level (debug, info, warn, error)
        format_type: Output format ('json' or 'text')
        stream: Output stream (default: the current sys.stderr)
    """
    if stream is None:
        stream = _CurrentStderr()

    log_level = LEVELS.get(level.lower(), logging.INFO)

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        add_timestamp,
        add_context_info,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if format_type == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    # No caching: reconfiguring must reach loggers that already exist
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a lazy logger that follows the current configuration.

    Args:
        name: Optional logger name for context

    Returns:
        structlog logger proxy
    """
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()


# Initialize with defaults on import
configure_logging()
