"""
Message types exchanged with the rest of the vehicle stack.

Only the fields the global path node actually reads or writes are kept:
- Pose: latest localization estimate (x, y, yaw)
- GridSnapshot: occupancy or segmentation grid, opaque to the node
- Header / PathMessage: what goes out on the path and waypoint outputs
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

import numpy as np


Point = Tuple[float, float]


@dataclass(frozen=True)
class Pose:
    """Vehicle pose in the local frame."""
    x: float                # meters
    y: float
    theta: float = 0.0      # yaw in radians, passed through untouched
    timestamp: float = 0.0

    @property
    def position(self) -> Point:
        return (self.x, self.y)


class GridKind(Enum):
    """Grids the planner may consume."""
    OCCUPANCY = "occupancy"
    SEGMENTATION = "segmentation"


@dataclass(frozen=True)
class GridSnapshot:
    """A whole grid as received. Never merged, never partially updated."""
    data: np.ndarray
    resolution: float = 1.0         # meters per cell
    origin_x: float = 0.0
    origin_y: float = 0.0
    timestamp: float = 0.0

    @classmethod
    def empty(cls) -> 'GridSnapshot':
        """Placeholder handed to the planner before any grid has arrived."""
        return cls(data=np.zeros((0, 0), dtype=np.int8))

    @property
    def is_empty(self) -> bool:
        return self.data.size == 0

    @property
    def width(self) -> int:
        return self.data.shape[1] if self.data.ndim == 2 else 0

    @property
    def height(self) -> int:
        return self.data.shape[0] if self.data.ndim == 2 else 0


@dataclass
class Header:
    """Message header: frame, sequence number and stamp."""
    frame_id: str = "odom"
    seq: int = 0
    stamp: float = field(default_factory=time.time)


@dataclass
class PathMessage:
    """An ordered list of positions in one frame."""
    header: Header = field(default_factory=Header)
    points: List[Point] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)
