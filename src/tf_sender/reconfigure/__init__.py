"""Runtime reconfiguration of the published transform.

This module provides the ChangeGroup state machine that keeps translation,
roll/pitch/yaw and quaternion fields consistent, and an in-process server
that plays the role of the reconfiguration channel.
"""

from .controller import Notice, ReconfigurationController, ReconfigureResult
from .schema import Bounds, ChangeGroup, euler_bounds
from .server import ReconfigureServer

__all__ = [
    "Bounds",
    "ChangeGroup",
    "Notice",
    "ReconfigurationController",
    "ReconfigureResult",
    "ReconfigureServer",
    "euler_bounds",
]
