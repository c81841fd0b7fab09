"""
Waypoint Manager

Holds the operator's waypoint list and tracks progress along it.

Handles:
- Loading the static list from x/y coordinate lists
- Wholesale replacement when a new list arrives
- Waypoint reached detection (one waypoint per update)
- Final goal detection
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional, Sequence, Tuple


class WaypointConfigError(ValueError):
    """Static waypoint coordinates cannot be turned into a list."""


class ProgressEvent(Enum):
    NO_CHANGE = 0
    WAYPOINT_ADVANCED = 1
    GOAL_REACHED = 2


@dataclass(frozen=True)
class Waypoint:
    """A navigation waypoint."""
    x: float                            # meters (local frame)
    y: float

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, x: float, y: float) -> float:
        return math.sqrt((self.x - x)**2 + (self.y - y)**2)


class WaypointList:
    """
    Ordered waypoints. Duplicate coordinates are allowed.

    The list is never edited in place: load() and replace() swap the whole
    sequence and notify the registered listeners.

    Usage:
        waypoints = WaypointList()
        waypoints.load([0.0, 10.0], [0.0, 5.0])

        waypoints.on_replace(tracker.on_new_waypoint_list)
        waypoints.replace([(3.0, 3.0), (8.0, 1.0)])
    """

    def __init__(self, waypoints: Sequence[Waypoint] = ()):
        self._waypoints: Tuple[Waypoint, ...] = tuple(waypoints)
        self._listeners: List[Callable[[], None]] = []

    @classmethod
    def from_coordinates(cls, xs: Sequence[float], ys: Sequence[float]) -> 'WaypointList':
        """Build a list from parallel x and y coordinate lists."""
        if len(xs) != len(ys):
            raise WaypointConfigError(
                f"{len(xs)} X coordinates were provided for {len(ys)} Y coordinates"
            )
        return cls([Waypoint(float(x), float(y)) for x, y in zip(xs, ys)])

    def load(self, xs: Sequence[float], ys: Sequence[float]) -> bool:
        """
        Load the static list from configuration.

        Mismatched or empty coordinate lists are reported and leave the
        list empty; they are not fatal.

        Returns:
            True if at least one waypoint was loaded
        """
        try:
            loaded = WaypointList.from_coordinates(xs, ys)
        except WaypointConfigError as e:
            print(f"[WARNING] {str(e).upper()}.")
            self._swap(())
            return False

        if not loaded:
            print("[WARNING] NO WAYPOINTS WERE LISTED IN waypoints.x OR waypoints.y.")
            self._swap(())
            return False

        self._swap(loaded._waypoints)
        print(f"[WAYPOINTS] Loaded {len(self)} waypoints from configuration")
        return True

    def replace(self, positions: Sequence[Tuple[float, float]]):
        """Swap in a new list. Progress restarts from index 0."""
        self._swap(tuple(Waypoint(float(x), float(y)) for x, y in positions))

    def _swap(self, waypoints: Tuple[Waypoint, ...]):
        self._waypoints = waypoints
        for callback in self._listeners:
            callback()

    def on_replace(self, callback: Callable[[], None]):
        """Register callback for any load or replace."""
        self._listeners.append(callback)

    def is_last(self, index: int) -> bool:
        return index == len(self._waypoints) - 1

    def positions(self) -> List[Tuple[float, float]]:
        return [wp.position for wp in self._waypoints]

    def __len__(self) -> int:
        return len(self._waypoints)

    def __getitem__(self, index: int) -> Waypoint:
        return self._waypoints[index]

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(self._waypoints)


class WaypointProgressTracker:
    """
    Owns the current waypoint index.

    The index only moves forward, one waypoint per on_pose() call, and goes
    back to 0 only when the waypoint list is replaced. A waypoint counts as
    reached when the distance is strictly below goal_dist.

    Usage:
        tracker = WaypointProgressTracker(waypoints, goal_dist=3.0)

        # In control loop:
        event = tracker.on_pose(pose.x, pose.y)
        if event == ProgressEvent.GOAL_REACHED:
            print("Final goal reached")
    """

    def __init__(self, waypoints: WaypointList, goal_dist: float = 3.0):
        self.waypoints = waypoints
        self.goal_dist = goal_dist
        self._index = 0
        self._goal: Optional[Tuple[float, float]] = None

        waypoints.on_replace(self.on_new_waypoint_list)
        self._update_goal()

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def goal(self) -> Optional[Tuple[float, float]]:
        """Position of the current waypoint, None while the list is empty."""
        return self._goal

    @property
    def on_last_waypoint(self) -> bool:
        return self.waypoints.is_last(self._index)

    def on_new_waypoint_list(self):
        """Restart tracking from the first waypoint of the new list."""
        self._index = 0
        self._update_goal()

    def distance_to_goal(self, x: float, y: float) -> float:
        if self._goal is None:
            return float('inf')
        return self.waypoints[self._index].distance_to(x, y)

    def on_pose(self, x: float, y: float) -> ProgressEvent:
        """
        Check progress against the current goal.

        Args:
            x, y: Current vehicle position

        Returns:
            GOAL_REACHED on the last waypoint within tolerance (index kept),
            WAYPOINT_ADVANCED when an intermediate waypoint was reached,
            NO_CHANGE otherwise
        """
        if self._goal is None:
            return ProgressEvent.NO_CHANGE

        d = self.distance_to_goal(x, y)

        if d >= self.goal_dist:
            return ProgressEvent.NO_CHANGE

        if self.on_last_waypoint:
            return ProgressEvent.GOAL_REACHED

        self._index += 1
        self._update_goal()
        return ProgressEvent.WAYPOINT_ADVANCED

    def _update_goal(self):
        if len(self.waypoints) == 0:
            self._goal = None
        else:
            self._goal = self.waypoints[self._index].position
