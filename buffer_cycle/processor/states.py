"""FSM state definitions for the buffer/compute cycle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from buffer_cycle.utils.result import Err, NotApplicable, Ok, Result


class ProcessState(Enum):
    """States of the shared processing variable."""

    IDLE = "idle"
    BUFFERRING = "bufferring"
    COMPUTING = "computing"

    @classmethod
    def parse(cls, label: str) -> ProcessState:
        """Look up a state by its label or member name (case-insensitive)."""
        key = label.strip().lower()
        for state in cls:
            if key in (state.value, state.name.lower()):
                return state
        raise ValueError(f"Unknown state: {label!r}")


class Action(Enum):
    """Actions that move the machine to its next state."""

    START_BUFFERING = auto()
    START_PROCESSING = auto()
    END_PROCESSING = auto()

    @classmethod
    def parse(cls, name: str) -> Action:
        """Look up an action by name, accepting dashes or underscores."""
        key = name.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown action: {name!r}") from None


INITIAL_STATE = ProcessState.IDLE

# Guard state and target state for each action.
# Guards are pairwise distinct, so exactly one action is enabled per state.
TRANSITIONS: dict[Action, tuple[ProcessState, ProcessState]] = {
    Action.START_BUFFERING: (ProcessState.IDLE, ProcessState.BUFFERRING),
    Action.START_PROCESSING: (ProcessState.BUFFERRING, ProcessState.COMPUTING),
    Action.END_PROCESSING: (ProcessState.COMPUTING, ProcessState.IDLE),
}

# Order in which next() tries the actions
ACTION_ORDER: tuple[Action, ...] = (
    Action.START_BUFFERING,
    Action.START_PROCESSING,
    Action.END_PROCESSING,
)


def type_ok(value: object) -> bool:
    """True iff value is one of the enumerated states."""
    return isinstance(value, ProcessState)


def is_enabled(action: Action, state: ProcessState) -> bool:
    """Check whether the guard of action holds in state."""
    guard, _ = TRANSITIONS[action]
    return state == guard


def enabled_actions_in(state: ProcessState) -> list[Action]:
    """All actions whose guard holds in state, in dispatch order."""
    return [action for action in ACTION_ORDER if is_enabled(action, state)]


def successor(state: ProcessState, action: Action) -> Result[ProcessState, NotApplicable]:
    """
    Compute the state reached by applying action in state.

    Args:
        state: Current state
        action: Action to apply

    Returns:
        Ok with the target state, or Err(NotApplicable) if the guard fails
    """
    guard, target = TRANSITIONS[action]
    if state != guard:
        return Err(NotApplicable(action=action, state=state))
    return Ok(target)


@dataclass(frozen=True)
class TransitionRecord:
    """One applied transition."""

    step: int
    action: Action
    from_state: ProcessState
    to_state: ProcessState

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "step": self.step,
            "action": self.action.name,
            "from_state": self.from_state.value,
            "to_state": self.to_state.value,
        }
