"""
Output side of the global path node.

The node only needs "send the most recent value to the rest of the
system". Transports implement IGlobalPathPublisher; RecordingPublisher keeps
everything in memory for the simulator and for tests.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .messages import PathMessage


class IGlobalPathPublisher(ABC):
    """Interface for everything the node publishes."""

    @abstractmethod
    def publish_state(self, state: int):
        """Lifecycle state code (-1 startup, 0 active, 1..3 stop behaviours)."""
        pass

    @abstractmethod
    def publish_path(self, path: PathMessage):
        """Composite path."""
        pass

    @abstractmethod
    def publish_waypoints(self, waypoints: PathMessage):
        """Full waypoint list, passed through."""
        pass

    @abstractmethod
    def publish_current_waypoint(self, index: int):
        pass

    @abstractmethod
    def publish_distance(self, distance: float):
        """Distance from the pose to the current goal."""
        pass


class RecordingPublisher(IGlobalPathPublisher):
    """In-memory publisher: latest value per output plus the state history."""

    def __init__(self, keep_history: bool = True):
        self.keep_history = keep_history

        self.state: Optional[int] = None
        self.path: Optional[PathMessage] = None
        self.waypoints: Optional[PathMessage] = None
        self.current_waypoint: Optional[int] = None
        self.distance: Optional[float] = None

        self.state_history: List[int] = []
        self.waypoint_history: List[int] = []

    def publish_state(self, state: int):
        self.state = state
        if self.keep_history:
            self.state_history.append(state)

    def publish_path(self, path: PathMessage):
        self.path = path

    def publish_waypoints(self, waypoints: PathMessage):
        self.waypoints = waypoints

    def publish_current_waypoint(self, index: int):
        self.current_waypoint = index
        if self.keep_history:
            self.waypoint_history.append(index)

    def publish_distance(self, distance: float):
        self.distance = distance
