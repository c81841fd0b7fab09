"""
Navigation module for waypoint sequencing and global path output.

Components:
- WaypointList: Ordered waypoint list, loaded or replaced wholesale
- WaypointProgressTracker: Current waypoint index and goal detection
- composite_path: Planner output extended with the remaining waypoints
- IPathPlanner: Planner call boundary (StraightLinePlanner, CallablePlanner)
"""

from .waypoint_manager import (
    Waypoint, WaypointList, WaypointProgressTracker, ProgressEvent, WaypointConfigError
)
from .path_compositor import composite_path
from .planner_adapter import IPathPlanner, CallablePlanner, StraightLinePlanner
