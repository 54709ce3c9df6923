"""Core transform state for the transform sender.

This module provides the mutable, lock-protected TransformState and the
immutable StampedTransform snapshot it hands to the publish path.
"""

from .stamped_transform import StampedTransform
from .transform_state import AngleUnits, QuaternionUpdate, TransformState

__all__ = ["AngleUnits", "QuaternionUpdate", "StampedTransform", "TransformState"]
