#!/usr/bin/env python3
"""
Unit tests for the vehicle lifecycle state machine.
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from core.state_machine import (
    LifecycleStateMachine, LifecycleState, LifecycleEvent, shutdown_state_for
)
from navigation.waypoint_manager import ProgressEvent


class TestShutdownBehavior(unittest.TestCase):

    def test_valid_values(self):
        self.assertEqual(shutdown_state_for(1), LifecycleState.SOFT_STOP)
        self.assertEqual(shutdown_state_for(2), LifecycleState.SOFT_STOP_AND_SHUTDOWN)
        self.assertEqual(shutdown_state_for(3), LifecycleState.HARD_STOP_AND_SHUTDOWN)

    def test_out_of_range_clamped(self):
        for value in (0, -1, 4, 99):
            self.assertEqual(shutdown_state_for(value), LifecycleState.SOFT_STOP)

    def test_state_codes(self):
        self.assertEqual(int(LifecycleState.STARTUP), -1)
        self.assertEqual(int(LifecycleState.ACTIVE), 0)
        self.assertEqual(int(LifecycleState.SOFT_STOP), 1)
        self.assertEqual(int(LifecycleState.SOFT_STOP_AND_SHUTDOWN), 2)
        self.assertEqual(int(LifecycleState.HARD_STOP_AND_SHUTDOWN), 3)


class TestLifecycleStateMachine(unittest.TestCase):

    def setUp(self):
        self.sm = LifecycleStateMachine(shutdown_behavior=2)

    def test_starts_in_startup(self):
        self.assertEqual(self.sm.state, LifecycleState.STARTUP)
        self.assertEqual(self.sm.code, -1)
        self.assertTrue(self.sm.is_startup)

    def test_waypoints_loaded_activates(self):
        self.assertTrue(self.sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED))
        self.assertEqual(self.sm.state, LifecycleState.ACTIVE)
        self.assertEqual(self.sm.previous_state, LifecycleState.STARTUP)

    def test_goal_reached_ignored_in_startup(self):
        self.assertFalse(self.sm.handle_event(LifecycleEvent.GOAL_REACHED))
        self.sm.update(ProgressEvent.GOAL_REACHED)
        self.assertEqual(self.sm.state, LifecycleState.STARTUP)

    def test_active_stays_active_while_driving(self):
        self.sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        for event in (ProgressEvent.NO_CHANGE, ProgressEvent.WAYPOINT_ADVANCED):
            self.assertEqual(self.sm.update(event), LifecycleState.ACTIVE)
        self.assertEqual(self.sm.shutdown_count, 0)

    def test_goal_reached_enters_shutdown_state(self):
        self.sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        self.sm.update(ProgressEvent.GOAL_REACHED)
        self.assertEqual(self.sm.state, LifecycleState.SOFT_STOP_AND_SHUTDOWN)
        self.assertTrue(self.sm.is_stopping)
        self.assertEqual(self.sm.shutdown_count, 1)

    def test_debounce_needs_more_than_ten_ticks(self):
        self.sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        for _ in range(10):
            self.sm.update(ProgressEvent.GOAL_REACHED)
            self.assertFalse(self.sm.shutdown_confirmed)
        self.sm.update(ProgressEvent.GOAL_REACHED)
        self.assertTrue(self.sm.shutdown_confirmed)

    def test_shutdown_condition_latches(self):
        self.sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        self.sm.update(ProgressEvent.GOAL_REACHED)
        for _ in range(10):
            self.sm.update(ProgressEvent.NO_CHANGE)
        self.assertEqual(self.sm.state, LifecycleState.SOFT_STOP_AND_SHUTDOWN)
        self.assertTrue(self.sm.shutdown_confirmed)

    def test_no_return_to_active(self):
        self.sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        self.sm.update(ProgressEvent.GOAL_REACHED)
        self.assertFalse(self.sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED))
        self.assertFalse(self.sm.handle_event(LifecycleEvent.DRIVING))
        self.assertEqual(self.sm.state, LifecycleState.SOFT_STOP_AND_SHUTDOWN)

    def test_custom_confirm_ticks(self):
        sm = LifecycleStateMachine(shutdown_behavior=3, confirm_ticks=2)
        sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        sm.update(ProgressEvent.GOAL_REACHED)
        sm.update(ProgressEvent.GOAL_REACHED)
        self.assertFalse(sm.shutdown_confirmed)
        sm.update(ProgressEvent.GOAL_REACHED)
        self.assertTrue(sm.shutdown_confirmed)
        self.assertEqual(sm.code, 3)

    def test_out_of_range_behavior_uses_soft_stop(self):
        sm = LifecycleStateMachine(shutdown_behavior=7)
        sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        sm.update(ProgressEvent.GOAL_REACHED)
        self.assertEqual(sm.state, LifecycleState.SOFT_STOP)

    def test_callbacks(self):
        transitions = []
        entered = []
        self.sm.on_transition(lambda old, ev, new: transitions.append((old, ev, new)))
        self.sm.on_enter(LifecycleState.SOFT_STOP_AND_SHUTDOWN, lambda: entered.append(True))

        self.sm.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        self.sm.update(ProgressEvent.NO_CHANGE)
        self.sm.update(ProgressEvent.GOAL_REACHED)

        self.assertEqual(transitions, [
            (LifecycleState.STARTUP, LifecycleEvent.WAYPOINTS_LOADED, LifecycleState.ACTIVE),
            (LifecycleState.ACTIVE, LifecycleEvent.GOAL_REACHED, LifecycleState.SOFT_STOP_AND_SHUTDOWN),
        ])
        self.assertEqual(entered, [True])

    def test_status(self):
        status = self.sm.get_status()
        self.assertEqual(status["state"], "STARTUP")
        self.assertEqual(status["code"], -1)


if __name__ == '__main__':
    unittest.main()
