"""Result type for explicit error handling.

Guarded operations report whether they applied through a Result instead of
raising, so callers always handle the "not applicable" case explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Generic, NoReturn, TypeVar, Union

if TYPE_CHECKING:
    from buffer_cycle.processor.states import Action, ProcessState

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped type


class ResultError(Exception):
    """Raised when unwrapping a Result fails."""

    pass


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value. Safe to call since this is Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get the success value or a default."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        """Get the error value. Raises since this is Ok."""
        raise ResultError(f"Called unwrap_err on Ok value: {self.value}")

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value."""
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Chain another Result-returning operation."""
        return fn(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents an error result."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Get the success value. Raises since this is Err."""
        raise ResultError(f"Called unwrap on Err value: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Get the success value or a default."""
        return default

    def unwrap_err(self) -> E:
        """Get the error value. Safe to call since this is Err."""
        return self.error

    def map(self, fn: Callable[[T], U]) -> "Err[E]":
        """Transform the success value. No-op for Err."""
        return self

    def and_then(self, fn: Callable[[T], "Result[U, E]"]) -> "Err[E]":
        """Chain another Result-returning operation. No-op for Err."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Union[Ok[T], Err[E]]


# Error values
@dataclass(frozen=True)
class NotApplicable:
    """An action was requested while its guard does not hold."""

    action: Action
    state: ProcessState

    def __str__(self) -> str:
        return (
            f"{self.action.name} is not applicable in state "
            f"{self.state.value!r}"
        )


@dataclass(frozen=True)
class NoTransitionEnabled:
    """No action is enabled in the given state."""

    state: ProcessState

    def __str__(self) -> str:
        return f"No transition enabled in state {self.state.value!r}"


@dataclass(frozen=True)
class TraceError:
    """A state sequence is not a behavior of the machine."""

    index: int
    message: str

    def __str__(self) -> str:
        return f"Invalid trace at step {self.index}: {self.message}"


@dataclass(frozen=True)
class ExplorationError:
    """State-space exploration could not complete."""

    message: str
    states_seen: int = 0

    def __str__(self) -> str:
        return f"Exploration aborted after {self.states_seen} states: {self.message}"


@dataclass(frozen=True)
class ConfigError:
    """Error in configuration."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"Config error in '{self.field}': {self.message}"


# Exit codes
class ExitCode:
    """Exit codes for CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 2

    # Input errors (10-19)
    CONFIG_INVALID = 10

    # Checking errors (20-29)
    INVARIANT_VIOLATED = 20
    EXPLORATION_FAILED = 21
