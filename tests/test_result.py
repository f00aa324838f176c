"""Tests for the Result type and error values."""

from __future__ import annotations

import pytest

from buffer_cycle.processor import Action, ProcessState
from buffer_cycle.utils.result import (
    Err,
    NoTransitionEnabled,
    NotApplicable,
    Ok,
    ResultError,
)


def test_ok() -> None:
    result = Ok(1)
    assert result.is_ok() and not result.is_err()
    assert result.unwrap() == 1
    assert result.map(lambda v: v + 1) == Ok(2)
    assert result.and_then(lambda v: Err("boom")) == Err("boom")
    with pytest.raises(ResultError):
        result.unwrap_err()


def test_err() -> None:
    result = Err("boom")
    assert result.is_err() and not result.is_ok()
    assert result.unwrap_or(5) == 5
    assert result.map(lambda v: v + 1) is result
    with pytest.raises(ResultError):
        result.unwrap()


def test_error_messages() -> None:
    assert str(NotApplicable(Action.START_PROCESSING, ProcessState.IDLE)) == (
        "START_PROCESSING is not applicable in state 'idle'"
    )
    assert str(NoTransitionEnabled(ProcessState.COMPUTING)) == (
        "No transition enabled in state 'computing'"
    )
