"""
tf_sender: periodically republish one editable rigid-body transform.

The transform between a parent and a child frame is kept consistent across
a translation, roll/pitch/yaw angles and a unit quaternion, may be edited at
runtime through a reconfiguration channel, and is sent to a broadcaster on a
fixed period.
"""

import jax
jax.config.update("jax_enable_x64", True)

from . import transforms
from . import core
from . import reconfigure
from . import io

__version__ = "0.1.0"
__all__ = ["transforms", "core", "reconfigure", "io"]
