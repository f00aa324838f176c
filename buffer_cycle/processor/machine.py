"""FSM machine implementation for the buffer/compute cycle."""

from __future__ import annotations

from buffer_cycle.processor.states import (
    INITIAL_STATE,
    Action,
    ProcessState,
    TransitionRecord,
    enabled_actions_in,
    successor,
    type_ok,
)
from buffer_cycle.utils.logging import get_logger
from buffer_cycle.utils.result import (
    Err,
    NoTransitionEnabled,
    NotApplicable,
    Result,
)

logger = get_logger("processor.machine")


class CycleMachine:
    """
    Finite State Machine holding a single state variable.

    The variable cycles IDLE -> BUFFERRING -> COMPUTING -> IDLE. Each
    transition is guarded by the current state. A transition whose guard
    does not hold leaves the state unchanged and returns Err(NotApplicable).
    Not thread-safe; callers sharing an instance must synchronize.
    """

    def __init__(self) -> None:
        self._state: ProcessState = INITIAL_STATE
        self.history: list[TransitionRecord] = []
        self.stats = MachineStats()

    @property
    def state(self) -> ProcessState:
        """Current state."""
        return self._state

    def initialize(self) -> ProcessState:
        """Reset to IDLE and forget history."""
        self._state = INITIAL_STATE
        self.history = []
        self.stats = MachineStats()
        logger.debug("machine_initialized", state=self._state.value)
        return self._state

    def type_ok(self) -> bool:
        """Check that the current state is one of the enumerated states."""
        return type_ok(self._state)

    def enabled_actions(self) -> list[Action]:
        """Actions whose guard holds in the current state."""
        return enabled_actions_in(self._state)

    def apply(self, action: Action) -> Result[ProcessState, NotApplicable]:
        """
        Apply an action if its guard holds.

        Args:
            action: Action to apply

        Returns:
            Ok with the new state, or Err(NotApplicable) with the state unchanged
        """
        old_state = self._state
        result = successor(old_state, action)

        if result.is_err():
            self.stats.rejected += 1
            logger.debug(
                "transition_rejected",
                action=action.name,
                state=old_state.value,
            )
            return result

        new_state = result.unwrap()
        self._state = new_state
        self.stats.applied += 1
        if new_state == INITIAL_STATE:
            self.stats.cycles += 1

        self.history.append(TransitionRecord(
            step=len(self.history) + 1,
            action=action,
            from_state=old_state,
            to_state=new_state,
        ))

        logger.info(
            "state_transition",
            action=action.name,
            from_state=old_state.value,
            to_state=new_state.value,
        )
        return result

    def start_buffering(self) -> Result[ProcessState, NotApplicable]:
        """IDLE -> BUFFERRING."""
        return self.apply(Action.START_BUFFERING)

    def start_processing(self) -> Result[ProcessState, NotApplicable]:
        """BUFFERRING -> COMPUTING."""
        return self.apply(Action.START_PROCESSING)

    def end_processing(self) -> Result[ProcessState, NotApplicable]:
        """COMPUTING -> IDLE."""
        return self.apply(Action.END_PROCESSING)

    def next(self) -> Result[ProcessState, NoTransitionEnabled]:
        """
        Apply the first enabled action.

        Actions are tried in ACTION_ORDER. At most one can be enabled, so the
        order only fixes which one is tried first.

        Returns:
            Ok with the new state, or Err(NoTransitionEnabled)
        """
        enabled = self.enabled_actions()
        if enabled:
            return self.apply(enabled[0])

        logger.warning("no_transition_enabled", state=self._state.value)
        return Err(NoTransitionEnabled(state=self._state))

    def run(self, steps: int) -> list[ProcessState]:
        """
        Take up to `steps` steps with next().

        Args:
            steps: Number of steps to take

        Returns:
            Visited states, starting with the current one
        """
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")

        trace = [self._state]
        for _ in range(steps):
            result = self.next()
            if result.is_err():
                break
            trace.append(result.unwrap())
        return trace

    def __repr__(self) -> str:
        return f"CycleMachine(state={self._state.value!r})"


class MachineStats:
    """Counters for a machine's lifetime since the last initialize()."""

    def __init__(self) -> None:
        self.applied: int = 0
        self.rejected: int = 0
        self.cycles: int = 0

    @property
    def attempted(self) -> int:
        """Total transitions requested."""
        return self.applied + self.rejected

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "applied": self.applied,
            "rejected": self.rejected,
            "cycles": self.cycles,
        }
