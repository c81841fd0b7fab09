"""
Boundary with the messaging layer.

Inbound values land in latest-value stores; outbound values go through a
publisher interface, so the same node runs against a real transport or the
simulator.
"""

from .messages import (
    Pose,
    GridKind,
    GridSnapshot,
    Header,
    PathMessage,
)

from .state_cache import (
    LatestValue,
    PoseGridCache,
    WaypointInbox,
)

from .publisher import (
    IGlobalPathPublisher,
    RecordingPublisher,
)

__all__ = [
    # Messages
    'Pose',
    'GridKind',
    'GridSnapshot',
    'Header',
    'PathMessage',
    # Inbound stores
    'LatestValue',
    'PoseGridCache',
    'WaypointInbox',
    # Outputs
    'IGlobalPathPublisher',
    'RecordingPublisher',
]
