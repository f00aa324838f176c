"""FSM for the buffer/compute cycle.

A single variable moves through three states:

    IDLE -> BUFFERRING -> COMPUTING -> IDLE -> ...

Each transition is guarded by the current state. Exactly one transition is
enabled in every state, and a transition requested from the wrong state
returns Err(NotApplicable) instead of raising.
"""

from buffer_cycle.processor.machine import CycleMachine, MachineStats
from buffer_cycle.processor.states import (
    ACTION_ORDER,
    INITIAL_STATE,
    TRANSITIONS,
    Action,
    ProcessState,
    TransitionRecord,
    enabled_actions_in,
    is_enabled,
    successor,
    type_ok,
)

__all__ = [
    # States
    "ProcessState",
    "Action",
    "TransitionRecord",
    "TRANSITIONS",
    "ACTION_ORDER",
    "INITIAL_STATE",
    "enabled_actions_in",
    "is_enabled",
    "successor",
    "type_ok",
    # Machine
    "CycleMachine",
    "MachineStats",
]
