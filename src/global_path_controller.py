#!/usr/bin/env python3
"""
Global path controller for Robocar.

Fixed-rate loop that turns the operator's waypoint list into:
- a lifecycle state code (published every tick)
- a composite global path (planner output + remaining waypoints)
- the current waypoint index and the distance to it

Inbound data (pose, grids, new waypoint lists) may be pushed from any
thread through the on_* methods; the loop only ever reads whole values.
"""

import time
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from core import GlobalPathConfig, LifecycleStateMachine, LifecycleState, LifecycleEvent
from interface import (
    IGlobalPathPublisher, RecordingPublisher,
    Pose, GridKind, GridSnapshot, Header, PathMessage,
    PoseGridCache, WaypointInbox
)
from navigation import (
    WaypointList, WaypointProgressTracker, ProgressEvent,
    IPathPlanner, StraightLinePlanner, composite_path
)


@dataclass
class GlobalPathContext:
    """Everything the loop reads and mutates, owned in one place."""
    cache: PoseGridCache = field(default_factory=PoseGridCache)
    inbox: WaypointInbox = field(default_factory=WaypointInbox)
    waypoints: WaypointList = field(default_factory=WaypointList)
    tracker: Optional[WaypointProgressTracker] = None
    lifecycle: Optional[LifecycleStateMachine] = None
    tick: int = 0


class GlobalPathController:
    """
    Waypoint sequencing and lifecycle control loop.

    Usage:
        controller = GlobalPathController(config, planner, publisher)

        # From the messaging layer (any thread):
        controller.on_pose(Pose(x, y, theta))
        controller.on_new_waypoints([(5, 0), (10, 5)])

        # Blocks until the final goal is confirmed or stop() is called
        controller.run()
    """

    def __init__(self,
                 config: Optional[GlobalPathConfig] = None,
                 planner: Optional[IPathPlanner] = None,
                 publisher: Optional[IGlobalPathPublisher] = None,
                 realtime: bool = True):
        """
        Args:
            config: Startup parameters (defaults if None)
            planner: Planning routine (straight line if None)
            publisher: Output sink (in-memory recorder if None)
            realtime: Sleep between ticks to hold the loop rate
        """
        self.config = config or GlobalPathConfig()
        self.planner = planner or StraightLinePlanner(lookahead=self.config.global_lookahead)
        self.publisher = publisher or RecordingPublisher()
        self.realtime = realtime

        ctx = GlobalPathContext()
        ctx.tracker = WaypointProgressTracker(ctx.waypoints, goal_dist=self.config.goal_dist)
        ctx.lifecycle = LifecycleStateMachine(
            shutdown_behavior=self.config.shutdown_behavior,
            confirm_ticks=self.config.shutdown_confirm_ticks
        )
        ctx.lifecycle.on_transition(self._log_transition)
        self.context = ctx

        self._stop_event = threading.Event()
        self._tick_callbacks: List[Callable[[float], None]] = []
        self.start_time = 0.0

        # Static waypoints from configuration
        if ctx.waypoints.load(self.config.waypoints_x, self.config.waypoints_y):
            ctx.lifecycle.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
            self.publisher.publish_state(ctx.lifecycle.code)

    # ------------------------------------------------------------------
    # Inbound data
    # ------------------------------------------------------------------

    def on_pose(self, pose: Pose):
        self.context.cache.update_pose(pose)

    def on_grid(self, kind: GridKind, grid: GridSnapshot):
        self.context.cache.update_grid(kind, grid)

    def on_occupancy_grid(self, grid: GridSnapshot):
        self.on_grid(GridKind.OCCUPANCY, grid)

    def on_segmentation_grid(self, grid: GridSnapshot):
        self.on_grid(GridKind.SEGMENTATION, grid)

    def on_new_waypoints(self, points: Sequence[Tuple[float, float]]):
        """Queue a replacement waypoint list; applied at the next tick."""
        self.context.inbox.submit(points)

    def on_tick(self, callback: Callable[[float], None]):
        """Register callback(dt) run after every tick."""
        self._tick_callbacks.append(callback)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> LifecycleState:
        return self.context.lifecycle.state

    @property
    def tick(self) -> int:
        return self.context.tick

    @property
    def current_waypoint(self) -> int:
        return self.context.tracker.current_index

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def step(self) -> bool:
        """
        Execute one tick.

        Returns:
            False once the debounced shutdown is confirmed, True otherwise
        """
        ctx = self.context
        self.publisher.publish_state(ctx.lifecycle.code)

        new_points = ctx.inbox.take()
        if new_points is not None:
            self._apply_waypoints(new_points)

        if ctx.cache.pose_received and not ctx.lifecycle.is_startup:
            self._plan_and_track()

        ctx.tick += 1
        return not ctx.lifecycle.shutdown_confirmed

    def _apply_waypoints(self, points: List[Tuple[float, float]]):
        ctx = self.context
        if not points:
            print("[WARNING] Received an empty waypoint list, keeping the current one")
            return

        ctx.waypoints.replace(points)
        goal = ctx.tracker.goal
        print(f"[WAYPOINTS] New waypoints! Updated goal {goal[0]:.2f}, {goal[1]:.2f}")

        ctx.lifecycle.handle_event(LifecycleEvent.WAYPOINTS_LOADED)
        self.publisher.publish_state(ctx.lifecycle.code)

    def _plan_and_track(self):
        ctx = self.context
        pose = ctx.cache.latest_pose()
        tracker = ctx.tracker

        raw_path = self.planner.plan(
            ctx.cache.latest_grid(GridKind.OCCUPANCY),
            ctx.cache.latest_grid(GridKind.SEGMENTATION),
            tracker.goal,
            pose.position
        )
        path = composite_path(raw_path, ctx.waypoints, tracker.current_index)

        stamp = time.time()
        self.publisher.publish_path(PathMessage(self._header(stamp), path))
        self.publisher.publish_waypoints(PathMessage(self._header(stamp), ctx.waypoints.positions()))

        d = tracker.distance_to_goal(pose.x, pose.y)
        self.publisher.publish_current_waypoint(tracker.current_index)
        self.publisher.publish_distance(d)

        if ctx.tick % self.config.report_interval == 0:
            print(f"[GLOBAL_PATH] Distance to goal {tracker.current_index} = {d:.2f}")

        event = tracker.on_pose(pose.x, pose.y)
        if event == ProgressEvent.WAYPOINT_ADVANCED:
            print(f"[WAYPOINTS] Waypoint {tracker.current_index - 1} reached, "
                  f"next goal {tracker.current_index}/{len(ctx.waypoints) - 1}")

        ctx.lifecycle.update(event)
        self.publisher.publish_state(ctx.lifecycle.code)

    def _header(self, stamp: float) -> Header:
        return Header(frame_id=self.config.frame_id, seq=self.context.tick, stamp=stamp)

    def _log_transition(self, old: LifecycleState, event: LifecycleEvent, new: LifecycleState):
        print(f"[LIFECYCLE] {old.name} --{event.name}--> {new.name} ({int(new)})")

    def run(self, max_ticks: Optional[int] = None) -> int:
        """
        Run the loop at the configured rate.

        Args:
            max_ticks: Stop after this many ticks (None = no limit)

        Returns:
            0 (exit code)
        """
        dt = 1.0 / self.config.loop_rate
        self._stop_event.clear()
        self.start_time = time.time()

        print(f"[GLOBAL_PATH] Starting at {self.config.loop_rate:.0f} Hz, "
              f"{len(self.context.waypoints)} waypoints, state {self.state.name}")

        try:
            while not self._stop_event.is_set():
                tick_start = time.time()

                running = self.step()
                for callback in self._tick_callbacks:
                    callback(dt)

                if not running:
                    print("[GLOBAL_PATH] Shutdown confirmed")
                    break
                if max_ticks is not None and self.context.tick >= max_ticks:
                    print(f"[GLOBAL_PATH] Tick limit {max_ticks} reached")
                    break

                if self.realtime:
                    self._stop_event.wait(max(0.0, dt - (time.time() - tick_start)))

        except KeyboardInterrupt:
            print("\n[GLOBAL_PATH] User interrupt")

        finally:
            self._print_summary()

        return 0

    def stop(self):
        """External stop: the loop exits at the next tick boundary."""
        self._stop_event.set()

    def _print_summary(self):
        ctx = self.context
        print("\n" + "=" * 50)
        print("   GLOBAL PATH SUMMARY")
        print("=" * 50)
        print(f"Ticks: {ctx.tick}")
        print(f"Elapsed: {time.time() - self.start_time:.1f}s")
        print(f"Final state: {ctx.lifecycle.state.name} ({ctx.lifecycle.code})")
        print(f"Waypoint: {ctx.tracker.current_index}/{max(len(ctx.waypoints) - 1, 0)}")
        print("=" * 50)
