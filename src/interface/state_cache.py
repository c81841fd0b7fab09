"""
Latest-value stores for inbound data.

Pose, grids and waypoint lists arrive from the messaging layer, possibly on
other threads. Each value sits behind its own lock and is only ever swapped
as a whole, so the control loop always reads a complete snapshot. The lock
is held for the read or the write of one value only.
"""

import threading
from typing import Dict, Generic, List, Optional, Sequence, TypeVar

from .messages import Pose, GridKind, GridSnapshot, Point


T = TypeVar('T')


class LatestValue(Generic[T]):
    """Single guarded slot: last writer wins."""

    def __init__(self, initial: Optional[T] = None):
        self._value: Optional[T] = initial
        self._lock = threading.Lock()

    def set(self, value: T):
        with self._lock:
            self._value = value

    def get(self) -> Optional[T]:
        with self._lock:
            return self._value

    def take(self) -> Optional[T]:
        """Return the value and clear the slot."""
        with self._lock:
            value = self._value
            self._value = None
            return value


class PoseGridCache:
    """
    Most recent pose and grids.

    Usage:
        cache = PoseGridCache()

        # From the messaging layer:
        cache.update_pose(Pose(1.0, 2.0))
        cache.update_grid(GridKind.OCCUPANCY, grid)

        # In the control loop:
        if cache.pose_received:
            pose = cache.latest_pose()
    """

    def __init__(self):
        self._pose: LatestValue[Pose] = LatestValue()
        self._grids: Dict[GridKind, LatestValue[GridSnapshot]] = {
            kind: LatestValue(GridSnapshot.empty()) for kind in GridKind
        }
        self._pose_received = threading.Event()

    def update_pose(self, pose: Pose):
        """Store the pose. The received flag stays set from then on."""
        self._pose.set(pose)
        self._pose_received.set()

    def update_grid(self, kind: GridKind, grid: GridSnapshot):
        self._grids[kind].set(grid)

    def latest_pose(self) -> Optional[Pose]:
        """Latest pose, or None if none has arrived yet."""
        return self._pose.get()

    def latest_grid(self, kind: GridKind) -> GridSnapshot:
        """Latest grid of that kind, or an empty GridSnapshot placeholder."""
        return self._grids[kind].get()

    @property
    def pose_received(self) -> bool:
        return self._pose_received.is_set()


class WaypointInbox:
    """
    Holds the most recent externally submitted waypoint list until the
    control loop applies it. A newer submission replaces an unapplied one.
    """

    def __init__(self):
        self._pending: LatestValue[List[Point]] = LatestValue()

    def submit(self, points: Sequence[Point]):
        self._pending.set([(float(x), float(y)) for x, y in points])

    def take(self) -> Optional[List[Point]]:
        """Pending list, or None if nothing new arrived since the last take."""
        return self._pending.take()
