#!/usr/bin/env python3
"""
Unit tests for the path compositor.
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from navigation.path_compositor import composite_path
from navigation.waypoint_manager import WaypointList


class TestCompositePath(unittest.TestCase):

    def setUp(self):
        self.waypoints = WaypointList.from_coordinates([0, 5, 9], [0, 5, 9])

    def test_appends_remaining_waypoints(self):
        path = composite_path([(1, 1), (2, 2)], self.waypoints, 0)
        self.assertEqual(path, [(1, 1), (2, 2), (5, 5), (9, 9)])

    def test_middle_index(self):
        path = composite_path([(1, 1), (2, 2)], self.waypoints, 1)
        self.assertEqual(path, [(1, 1), (2, 2), (9, 9)])

    def test_last_index_appends_nothing(self):
        path = composite_path([(1, 1), (2, 2)], self.waypoints, 2)
        self.assertEqual(path, [(1, 1), (2, 2)])

    def test_empty_raw_path_unchanged(self):
        self.assertEqual(composite_path([], self.waypoints, 0), [])

    def test_single_point_raw_path_unchanged(self):
        self.assertEqual(composite_path([(3, 3)], self.waypoints, 0), [(3, 3)])

    def test_idempotent(self):
        raw = [(1, 1), (2, 2)]
        first = composite_path(raw, self.waypoints, 0)
        second = composite_path(raw, self.waypoints, 0)
        self.assertEqual(first, second)

    def test_raw_path_not_modified(self):
        raw = [(1, 1), (2, 2)]
        composite_path(raw, self.waypoints, 0)
        self.assertEqual(raw, [(1, 1), (2, 2)])

    def test_duplicate_waypoints_kept(self):
        waypoints = WaypointList.from_coordinates([0, 4, 4], [0, 4, 4])
        path = composite_path([(0, 0), (1, 1)], waypoints, 0)
        self.assertEqual(path, [(0, 0), (1, 1), (4, 4), (4, 4)])


if __name__ == '__main__':
    unittest.main()
