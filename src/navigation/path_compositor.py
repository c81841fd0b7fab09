"""
Path Compositor

Extends the planner's short-horizon path with the straight-line remainder
of the waypoint list, so the local planner sees where the route goes after
the current goal and can transition smoothly between waypoints.
"""

from typing import List, Sequence, Tuple

from .waypoint_manager import WaypointList


def composite_path(
    raw_path: Sequence[Tuple[float, float]],
    waypoints: WaypointList,
    current_index: int
) -> List[Tuple[float, float]]:
    """
    Append every waypoint after current_index to the planner output.

    A raw path with fewer than two points means no path was found this
    tick; it is returned unchanged rather than padded with waypoints.

    Args:
        raw_path: Planner output, closest point first
        waypoints: Current waypoint list
        current_index: Index of the current goal

    Returns:
        New list: raw points, then waypoints in increasing index order
    """
    path = [(float(x), float(y)) for x, y in raw_path]
    if len(path) <= 1:
        return path

    for i in range(current_index + 1, len(waypoints)):
        path.append(waypoints[i].position)

    return path
