"""
Path Planner Adapter

The global path node calls exactly one planning routine per tick:

    plan(occupancy, segmentation, goal, pose) -> [(x, y), ...]

The call blocks the control loop until it returns. An empty or single-point
result means no usable path this tick; the next tick simply tries again.
"""

import math
from abc import ABC, abstractmethod
from typing import Callable, List, Tuple

import numpy as np

from interface.messages import GridSnapshot, Point


PlanFunction = Callable[[GridSnapshot, GridSnapshot, Point, Point], List[Point]]


class IPathPlanner(ABC):
    """Interface for point-to-point planners."""

    @abstractmethod
    def plan(
        self,
        occupancy: GridSnapshot,
        segmentation: GridSnapshot,
        goal: Point,
        position: Point
    ) -> List[Point]:
        """
        Plan from position to goal.

        Args:
            occupancy: Latest occupancy grid (may be an empty placeholder)
            segmentation: Latest segmentation grid (may be an empty placeholder)
            goal: (x, y) of the current waypoint
            position: (x, y) of the vehicle

        Returns:
            Ordered points, closest first
        """
        pass


class CallablePlanner(IPathPlanner):
    """Wraps a plain function with the planner signature."""

    def __init__(self, plan_fn: PlanFunction):
        self._plan_fn = plan_fn

    def plan(self, occupancy, segmentation, goal, position) -> List[Point]:
        return list(self._plan_fn(occupancy, segmentation, goal, position))


class StraightLinePlanner(IPathPlanner):
    """
    Evenly spaced points on the segment from the vehicle to the goal.

    Ignores the grids. The path is cut at `lookahead` meters. A vehicle
    already on the goal gets a single point, i.e. no path.

    Usage:
        planner = StraightLinePlanner(spacing=1.0, lookahead=50.0)
        path = planner.plan(occ, seg, goal=(10, 0), position=(0, 0))
        # path = [(0,0), (1,0), ..., (10,0)]
    """

    def __init__(self, spacing: float = 1.0, lookahead: float = 50.0):
        if spacing <= 0:
            raise ValueError("spacing must be positive")
        self.spacing = spacing
        self.lookahead = lookahead

    def plan(self, occupancy, segmentation, goal, position) -> List[Point]:
        start = np.asarray(position, dtype=float)
        end = np.asarray(goal, dtype=float)

        length = float(np.linalg.norm(end - start))
        if length < 1e-9:
            return [(float(start[0]), float(start[1]))]

        if length > self.lookahead:
            end = start + (end - start) * (self.lookahead / length)
            length = self.lookahead

        n = max(2, int(math.ceil(length / self.spacing)) + 1)
        xs = np.linspace(start[0], end[0], n)
        ys = np.linspace(start[1], end[1], n)
        return [(float(x), float(y)) for x, y in zip(xs, ys)]
