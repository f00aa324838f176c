"""Exhaustive state-space exploration for the cycle machine.

Starting from the initial states, the explorer follows every enabled action
breadth-first, records each edge of the Next relation, and evaluates a set
of named invariants in every reachable state. A violated invariant is
reported with a shortest counterexample trace from an initial state.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from buffer_cycle.processor.states import (
    INITIAL_STATE,
    Action,
    ProcessState,
    enabled_actions_in,
    successor,
    type_ok,
)
from buffer_cycle.utils.logging import get_logger
from buffer_cycle.utils.result import (
    Err,
    ExplorationError,
    Ok,
    Result,
    TraceError,
)

logger = get_logger("checker.explorer")

Invariant = Callable[[ProcessState], bool]

DEFAULT_INVARIANTS: dict[str, Invariant] = {"TypeOK": type_ok}


@dataclass(frozen=True)
class Edge:
    """One step of the Next relation."""

    from_state: ProcessState
    action: Action
    to_state: ProcessState

    def to_dict(self) -> dict:
        return {
            "from": self.from_state.value,
            "action": self.action.name,
            "to": self.to_state.value,
        }


@dataclass(frozen=True)
class Violation:
    """An invariant that does not hold in a reachable state."""

    invariant: str
    state: ProcessState
    trace: tuple[ProcessState, ...]

    def to_dict(self) -> dict:
        return {
            "invariant": self.invariant,
            "state": self.state.value,
            "trace": [s.value for s in self.trace],
        }


@dataclass
class Exploration:
    """Result of exploring the reachable state space."""

    initial_states: list[ProcessState]
    states: list[ProcessState] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    depth: dict[ProcessState, int] = field(default_factory=dict)
    invariants: list[str] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if every invariant held in every reachable state."""
        return not self.violations

    @property
    def diameter(self) -> int:
        """Longest shortest distance from an initial state."""
        return max(self.depth.values(), default=0)

    def successors(self, state: ProcessState) -> list[ProcessState]:
        """States reachable from state in one step."""
        return [e.to_state for e in self.edges if e.from_state == state]

    def holds(self, invariant: str) -> bool:
        """Check whether a named invariant held everywhere."""
        return all(v.invariant != invariant for v in self.violations)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "initial_states": [s.value for s in self.initial_states],
            "states": [s.value for s in self.states],
            "edges": [e.to_dict() for e in self.edges],
            "diameter": self.diameter,
            "invariants": {name: self.holds(name) for name in self.invariants},
            "violations": [v.to_dict() for v in self.violations],
        }


class StateExplorer:
    """
    Breadth-first explorer over the machine's Next relation.

    Plays the part of a model checker: enumerates the Init states,
    discovers successors, and checks invariants in each reachable state.
    """

    def __init__(
        self,
        invariants: Optional[dict[str, Invariant]] = None,
        max_states: int = 1000,
    ) -> None:
        """
        Initialize the explorer.

        Args:
            invariants: Named state predicates to check (default: TypeOK)
            max_states: Abort exploration after this many distinct states
        """
        self.invariants = dict(invariants) if invariants is not None else dict(DEFAULT_INVARIANTS)
        self.max_states = max_states

    def initial_states(self) -> list[ProcessState]:
        """States satisfying Init."""
        return [INITIAL_STATE]

    def explore(self) -> Result[Exploration, ExplorationError]:
        """
        Explore every reachable state.

        Returns:
            Ok(Exploration), or Err(ExplorationError) if max_states is exceeded
        """
        initial = self.initial_states()
        exploration = Exploration(
            initial_states=initial,
            invariants=list(self.invariants),
        )
        parent: dict[ProcessState, Optional[ProcessState]] = {}
        queue: deque[ProcessState] = deque()

        for state in initial:
            if state not in parent:
                parent[state] = None
                exploration.depth[state] = 0
                queue.append(state)

        while queue:
            state = queue.popleft()
            exploration.states.append(state)
            self._check_state(state, parent, exploration)

            for action in enabled_actions_in(state):
                target = successor(state, action).unwrap()
                exploration.edges.append(Edge(state, action, target))

                if target in parent:
                    continue
                if len(parent) >= self.max_states:
                    logger.warning(
                        "exploration_aborted",
                        states_seen=len(parent),
                        max_states=self.max_states,
                    )
                    return Err(ExplorationError(
                        message=f"state limit of {self.max_states} exceeded",
                        states_seen=len(parent),
                    ))

                parent[target] = state
                exploration.depth[target] = exploration.depth[state] + 1
                queue.append(target)

        logger.info(
            "exploration_completed",
            states=len(exploration.states),
            edges=len(exploration.edges),
            diameter=exploration.diameter,
            violations=len(exploration.violations),
        )
        return Ok(exploration)

    def _check_state(
        self,
        state: ProcessState,
        parent: dict[ProcessState, Optional[ProcessState]],
        exploration: Exploration,
    ) -> None:
        """Evaluate every invariant in state, recording violations."""
        for name, predicate in self.invariants.items():
            if predicate(state):
                continue

            trace = _trace_to(state, parent)
            exploration.violations.append(Violation(
                invariant=name,
                state=state,
                trace=trace,
            ))
            logger.error(
                "invariant_violated",
                invariant=name,
                state=state.value,
                trace=[s.value for s in trace],
            )

    def check_always(self, invariant: Invariant) -> Result[bool, ExplorationError]:
        """
        Check that invariant holds in every reachable state ([] P).

        Args:
            invariant: State predicate

        Returns:
            Ok(True) if it always holds, Ok(False) otherwise
        """
        explorer = StateExplorer(
            invariants={"Always": invariant},
            max_states=self.max_states,
        )
        return explorer.explore().map(lambda exploration: exploration.ok)


def _trace_to(
    state: ProcessState,
    parent: dict[ProcessState, Optional[ProcessState]],
) -> tuple[ProcessState, ...]:
    """Walk parent links back to an initial state."""
    path = [state]
    current = parent.get(state)
    while current is not None:
        path.append(current)
        current = parent.get(current)
    return tuple(reversed(path))


def validate_trace(states: Sequence[object]) -> Result[list[Action], TraceError]:
    """
    Check that a state sequence is a behavior of the machine.

    The first state must satisfy Init and every consecutive pair must be an
    edge of Next.

    Args:
        states: Sequence of states

    Returns:
        Ok with the actions taken between states, or Err(TraceError)
    """
    if not states:
        return Err(TraceError(index=0, message="trace is empty"))

    for index, state in enumerate(states):
        if not type_ok(state):
            return Err(TraceError(index=index, message=f"{state!r} is not a state"))

    if states[0] != INITIAL_STATE:
        return Err(TraceError(
            index=0,
            message=f"trace starts in {states[0].value!r}, not {INITIAL_STATE.value!r}",
        ))

    actions: list[Action] = []
    for index in range(1, len(states)):
        before, after = states[index - 1], states[index]
        step = [
            action for action in enabled_actions_in(before)
            if successor(before, action).unwrap() == after
        ]
        if not step:
            return Err(TraceError(
                index=index,
                message=f"no transition from {before.value!r} to {after.value!r}",
            ))
        actions.append(step[0])

    return Ok(actions)
