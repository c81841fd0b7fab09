"""
Simulated vehicle for running the global path node on a PC.

Kinematic bicycle model that chases a point on the latest composite path
and reacts to the lifecycle code:
  -1 startup        → hold still
   0 active         → drive
   1, 2 soft stop   → decelerate smoothly
   3 hard stop      → stop immediately
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from interface import Pose, RecordingPublisher
from core import LifecycleState


@dataclass
class VehicleConfig:
    """Simulated vehicle parameters."""
    wheelbase: float = 0.26             # meters
    max_speed: float = 2.0              # m/s
    max_steering: float = 0.5           # radians (~30 deg)
    acceleration: float = 1.0           # m/s^2
    soft_deceleration: float = 1.0      # m/s^2
    pursuit_distance: float = 2.0       # meters ahead on the path


class SimulatedVehicle:
    """
    Follows what the controller publishes and feeds its pose back.

    Usage:
        publisher = RecordingPublisher()
        controller = GlobalPathController(config, publisher=publisher)
        vehicle = SimulatedVehicle(publisher, controller.on_pose)
        vehicle.set_pose(0.0, 0.0, 0.0)
        controller.on_tick(vehicle.update)
        controller.run()
    """

    def __init__(self, publisher: RecordingPublisher, pose_callback=None,
                 config: Optional[VehicleConfig] = None):
        """
        Args:
            publisher: Recorder the controller publishes into
            pose_callback: Called with a Pose after each physics update
            config: Vehicle parameters
        """
        self.publisher = publisher
        self.config = config or VehicleConfig()
        self._pose_callback = pose_callback

        self.x = 0.0
        self.y = 0.0
        self.theta = 0.0
        self.speed = 0.0
        self.sim_time = 0.0

        self.trajectory: List[Tuple[float, float]] = []

    def set_pose(self, x: float, y: float, theta: float):
        """Place the vehicle and report the pose."""
        self.x = x
        self.y = y
        self.theta = theta
        self.trajectory = [(x, y)]
        self._report()

    def update(self, dt: float):
        """
        Advance the vehicle by dt seconds.

        Args:
            dt: Time step in seconds
        """
        self.sim_time += dt
        state = self.publisher.state
        target = self._target_point()

        if state == LifecycleState.HARD_STOP_AND_SHUTDOWN:
            self.speed = 0.0
        elif state in (LifecycleState.SOFT_STOP, LifecycleState.SOFT_STOP_AND_SHUTDOWN):
            self.speed = max(0.0, self.speed - self.config.soft_deceleration * dt)
        elif state == LifecycleState.ACTIVE and target is not None:
            self.speed = min(self.config.max_speed, self.speed + self.config.acceleration * dt)
        else:
            self.speed = 0.0

        delta = self._steering_to(target) if target is not None else 0.0

        # Kinematic bicycle model
        self.x += self.speed * math.cos(self.theta) * dt
        self.y += self.speed * math.sin(self.theta) * dt
        self.theta += (self.speed / self.config.wheelbase) * math.tan(delta) * dt
        self.theta = math.atan2(math.sin(self.theta), math.cos(self.theta))

        self.trajectory.append((self.x, self.y))
        self._report()

    def _target_point(self) -> Optional[Tuple[float, float]]:
        """First path point at least pursuit_distance away, else the last one."""
        path = self.publisher.path
        if path is None or len(path.points) == 0:
            return None

        points = np.asarray(path.points, dtype=float)
        dists = np.hypot(points[:, 0] - self.x, points[:, 1] - self.y)
        far = np.nonzero(dists >= self.config.pursuit_distance)[0]
        idx = int(far[0]) if len(far) else len(points) - 1
        return float(points[idx, 0]), float(points[idx, 1])

    def _steering_to(self, target: Tuple[float, float]) -> float:
        """Pure pursuit steering angle toward target."""
        dx = target[0] - self.x
        dy = target[1] - self.y
        alpha = math.atan2(dy, dx) - self.theta
        alpha = math.atan2(math.sin(alpha), math.cos(alpha))
        ld = max(math.hypot(dx, dy), 1e-6)

        delta = math.atan2(2.0 * self.config.wheelbase * math.sin(alpha), ld)
        return max(-self.config.max_steering, min(self.config.max_steering, delta))

    def _report(self):
        if self._pose_callback:
            self._pose_callback(Pose(self.x, self.y, self.theta, timestamp=self.sim_time))

    @property
    def distance_travelled(self) -> float:
        if len(self.trajectory) < 2:
            return 0.0
        pts = np.asarray(self.trajectory)
        return float(np.sum(np.hypot(np.diff(pts[:, 0]), np.diff(pts[:, 1]))))
