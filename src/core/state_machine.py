"""
Vehicle Lifecycle State Machine

Controls the coarse operating mode published to the vehicle controller.

States (published integer code):
  STARTUP                (-1) → Stopped, waiting for a waypoint list
  ACTIVE                  (0) → Driving toward the current waypoint
  SOFT_STOP               (1) → Smooth stop, no shutdown
  SOFT_STOP_AND_SHUTDOWN  (2) → Smooth stop, then shut down
  HARD_STOP_AND_SHUTDOWN  (3) → Immediate stop (hard braking), then shut down

The three stop states are reached only from ACTIVE when the final goal is
reached, and are never left. Which one is used is fixed at construction.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Callable, Dict, List, Optional

from navigation.waypoint_manager import ProgressEvent


class LifecycleState(IntEnum):
    """Vehicle lifecycle states. The value is the published code."""
    STARTUP = -1
    ACTIVE = 0
    SOFT_STOP = 1
    SOFT_STOP_AND_SHUTDOWN = 2
    HARD_STOP_AND_SHUTDOWN = 3


STOP_STATES = (
    LifecycleState.SOFT_STOP,
    LifecycleState.SOFT_STOP_AND_SHUTDOWN,
    LifecycleState.HARD_STOP_AND_SHUTDOWN,
)


class LifecycleEvent(Enum):
    """Events that trigger state transitions."""
    WAYPOINTS_LOADED = auto()
    DRIVING = auto()
    GOAL_REACHED = auto()


@dataclass
class StateTransition:
    """A state transition rule."""
    from_state: LifecycleState
    event: LifecycleEvent
    to_state: LifecycleState


def shutdown_state_for(behavior: int) -> LifecycleState:
    """Stop state for a shutdown behaviour selector. Out of range means 1."""
    if behavior < 1 or behavior > 3:
        behavior = 1
    return LifecycleState(behavior)


class LifecycleStateMachine:
    """
    Finite state machine for the vehicle lifecycle.

    Valid transitions:
        STARTUP ──WAYPOINTS_LOADED──► ACTIVE
        ACTIVE ──WAYPOINTS_LOADED──► ACTIVE
        ACTIVE ──DRIVING──► ACTIVE
        ACTIVE ──GOAL_REACHED──► <shutdown behaviour state>

    Once the final goal has been reached the shutdown condition latches and
    every later update() counts one tick. shutdown_confirmed becomes True
    once more than `confirm_ticks` ticks have been counted.

    Usage:
        sm = LifecycleStateMachine(shutdown_behavior=2)

        sm.on_transition(print_transition)

        sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        print(sm.state)  # LifecycleState.ACTIVE

        # In control loop, after the progress check:
        sm.update(event)
        if sm.shutdown_confirmed:
            break
    """

    CONFIRM_TICKS = 10

    def __init__(self, shutdown_behavior: int = 1, confirm_ticks: int = CONFIRM_TICKS):
        self.shutdown_state = shutdown_state_for(shutdown_behavior)
        self.confirm_ticks = confirm_ticks

        self._state = LifecycleState.STARTUP
        self._previous_state: Optional[LifecycleState] = None
        self._shutdown_count = 0

        # Callbacks
        self._on_enter: Dict[LifecycleState, List[Callable]] = {s: [] for s in LifecycleState}
        self._on_transition: List[Callable[[LifecycleState, LifecycleEvent, LifecycleState], None]] = []

        transitions = [
            StateTransition(LifecycleState.STARTUP, LifecycleEvent.WAYPOINTS_LOADED, LifecycleState.ACTIVE),
            StateTransition(LifecycleState.ACTIVE, LifecycleEvent.WAYPOINTS_LOADED, LifecycleState.ACTIVE),
            StateTransition(LifecycleState.ACTIVE, LifecycleEvent.DRIVING, LifecycleState.ACTIVE),
            StateTransition(LifecycleState.ACTIVE, LifecycleEvent.GOAL_REACHED, self.shutdown_state),
        ]
        self._transition_map: Dict = {(t.from_state, t.event): t for t in transitions}

    @property
    def state(self) -> LifecycleState:
        """Current state."""
        return self._state

    @property
    def previous_state(self) -> Optional[LifecycleState]:
        return self._previous_state

    @property
    def code(self) -> int:
        """Integer code to publish."""
        return int(self._state)

    @property
    def is_startup(self) -> bool:
        return self._state == LifecycleState.STARTUP

    @property
    def is_stopping(self) -> bool:
        """True once the final goal has been reached."""
        return self._state in STOP_STATES

    @property
    def shutdown_count(self) -> int:
        return self._shutdown_count

    @property
    def shutdown_confirmed(self) -> bool:
        return self.is_stopping and self._shutdown_count > self.confirm_ticks

    def handle_event(self, event: LifecycleEvent) -> bool:
        """
        Handle a lifecycle event.

        Args:
            event: The event to handle

        Returns:
            True if a transition occurred, False if the event was ignored
        """
        transition = self._transition_map.get((self._state, event))
        if transition is None:
            return False

        old_state = self._state
        new_state = transition.to_state

        if new_state != old_state:
            self._previous_state = old_state
            self._state = new_state

            for callback in self._on_transition:
                callback(old_state, event, new_state)

            for callback in self._on_enter[new_state]:
                callback()

        return True

    def update(self, progress: ProgressEvent) -> LifecycleState:
        """
        Drive the machine from one progress check.

        Call once per tick in which the progress tracker ran.
        """
        if self.is_stopping:
            self._shutdown_count += 1
        elif progress == ProgressEvent.GOAL_REACHED:
            if self.handle_event(LifecycleEvent.GOAL_REACHED):
                self._shutdown_count += 1
        else:
            self.handle_event(LifecycleEvent.DRIVING)
        return self._state

    def on_enter(self, state: LifecycleState, callback: Callable):
        """Register callback for entering a state."""
        self._on_enter[state].append(callback)

    def on_transition(self, callback: Callable[[LifecycleState, LifecycleEvent, LifecycleState], None]):
        """Register callback for any state change."""
        self._on_transition.append(callback)

    def get_status(self) -> dict:
        """Get state machine status."""
        return {
            "state": self._state.name,
            "code": self.code,
            "previous": self._previous_state.name if self._previous_state else "N/A",
            "shutdown_count": self._shutdown_count,
        }
