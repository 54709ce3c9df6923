"""TransformState: the single mutable transform shared by every thread.

The state owns the canonical translation, the unit quaternion, the two frame
names and the angle-unit preference. Every operation takes ``lock`` for its
whole read-modify-write. Callers that chain several operations into one edit
take the same (re-entrant) lock around the chain.
"""

from __future__ import annotations

import logging
import math
import threading
from enum import Enum
from typing import NamedTuple, Optional, Tuple

import jax
import jax.numpy as jnp

from tf_sender.core.stamped_transform import StampedTransform
from tf_sender.exceptions import DegenerateQuaternionError
from tf_sender.transforms.rotation import (
    normalize_quaternion,
    quaternion_from_rpy,
    quaternion_squared_norm,
    rpy_from_quaternion,
    to_degrees,
    to_radians,
)

Array = jax.Array

logger = logging.getLogger(__name__)

# Tolerance on the squared norm before a quaternion is renormalised
NORM_EPSILON = float(jnp.finfo(jnp.float64).eps)


class AngleUnits(str, Enum):
    """Unit in which Euler angles are exchanged with the outside world."""

    RADIANS = "radians"
    DEGREES = "degrees"


class QuaternionUpdate(NamedTuple):
    """Outcome of TransformState.apply_quaternion."""

    quaternion: Array
    renormalized: bool


def _as_radians(angles: Array, units: AngleUnits) -> Array:
    if AngleUnits(units) is AngleUnits.DEGREES:
        return to_radians(angles)
    return jnp.asarray(angles, dtype=jnp.float64)


def _from_radians(angles: Array, units: AngleUnits) -> Array:
    if AngleUnits(units) is AngleUnits.DEGREES:
        return to_degrees(angles)
    return angles


def _checked_quaternion(quaternion: Array) -> Tuple[Array, bool]:
    """Return (unit quaternion, whether it had to be renormalised)."""
    quaternion = jnp.asarray(quaternion, dtype=jnp.float64)
    norm2 = float(quaternion_squared_norm(quaternion))
    if norm2 == 0.0 or not math.isfinite(norm2):
        raise DegenerateQuaternionError(
            f"quaternion {quaternion.tolist()} has squared norm {norm2}"
        )
    if abs(norm2 - 1.0) > NORM_EPSILON:
        return normalize_quaternion(quaternion), True
    return quaternion, False


class TransformState:
    """Canonical transform plus angle-unit preference, guarded by a lock."""

    def __init__(
        self,
        translation: Array,
        rotation: Array,
        stamp: float,
        parent_frame: str,
        child_frame: str,
        angle_units: AngleUnits = AngleUnits.RADIANS,
    ):
        self.lock = threading.RLock()
        self._translation = jnp.asarray(translation, dtype=jnp.float64)
        self._rotation, _ = _checked_quaternion(rotation)
        self._stamp = float(stamp)
        self._parent_frame = parent_frame
        self._child_frame = child_frame
        self._angle_units = AngleUnits(angle_units)

    # Constructors
    @classmethod
    def from_euler(
        cls,
        x: float, y: float, z: float,
        roll: float, pitch: float, yaw: float,
        stamp: float,
        parent_frame: str,
        child_frame: str,
        units: AngleUnits = AngleUnits.RADIANS,
    ) -> "TransformState":
        """Build from a translation and roll/pitch/yaw given in ``units``."""
        roll, pitch, yaw = _as_radians(jnp.array([roll, pitch, yaw]), units)
        return cls(
            jnp.array([x, y, z]),
            quaternion_from_rpy(roll, pitch, yaw),
            stamp,
            parent_frame,
            child_frame,
        )

    @classmethod
    def from_quaternion(
        cls,
        x: float, y: float, z: float,
        qx: float, qy: float, qz: float, qw: float,
        stamp: float,
        parent_frame: str,
        child_frame: str,
    ) -> "TransformState":
        """Build from a translation and a quaternion; the quaternion is normalised."""
        return cls(jnp.array([x, y, z]), jnp.array([qx, qy, qz, qw]), stamp, parent_frame, child_frame)

    # Read-only views
    @property
    def translation(self) -> Array:
        with self.lock:
            return self._translation

    @property
    def rotation(self) -> Array:
        with self.lock:
            return self._rotation

    @property
    def stamp(self) -> float:
        with self.lock:
            return self._stamp

    @property
    def angle_units(self) -> AngleUnits:
        with self.lock:
            return self._angle_units

    @property
    def parent_frame(self) -> str:
        return self._parent_frame

    @property
    def child_frame(self) -> str:
        return self._child_frame

    # Field-group updates
    def apply_translation(self, x: float, y: float, z: float) -> None:
        """Replace the translation. Rotation and stamp are left alone."""
        translation = jnp.array([x, y, z], dtype=jnp.float64)
        with self.lock:
            self._translation = translation

    def apply_euler(
        self, roll: float, pitch: float, yaw: float, units: AngleUnits = AngleUnits.RADIANS
    ) -> Array:
        """Replace the rotation from roll/pitch/yaw in ``units``.

        Returns:
            The quaternion now stored.
        """
        roll, pitch, yaw = _as_radians(jnp.array([roll, pitch, yaw]), units)
        quaternion = quaternion_from_rpy(roll, pitch, yaw)
        with self.lock:
            self._rotation = quaternion
        return quaternion

    def apply_quaternion(self, qx: float, qy: float, qz: float, qw: float) -> QuaternionUpdate:
        """Replace the rotation with a quaternion, normalising if needed.

        Raises:
            DegenerateQuaternionError: The quaternion has zero (or non-finite)
                length. The stored rotation is unchanged.
        """
        quaternion, renormalized = _checked_quaternion(jnp.array([qx, qy, qz, qw]))
        with self.lock:
            self._rotation = quaternion
        return QuaternionUpdate(quaternion, renormalized)

    def set_angle_units(self, units: AngleUnits) -> bool:
        """Switch the angle-unit preference.

        Returns:
            False when ``units`` is already the current preference.
        """
        units = AngleUnits(units)
        with self.lock:
            if units is self._angle_units:
                return False
            self._angle_units = units
        logger.info("Angle units set to %s", units.value)
        return True

    def euler_readback(self, units: Optional[AngleUnits] = None) -> Array:
        """Roll, pitch and yaw of the current rotation.

        Args:
            units: Unit of the result; defaults to the current preference.

        Returns:
            (3,) array of [roll, pitch, yaw]
        """
        with self.lock:
            rotation = self._rotation
            if units is None:
                units = self._angle_units
        return _from_radians(rpy_from_quaternion(rotation), units)

    def snapshot(self, stamp: float) -> StampedTransform:
        """Stamp the transform with ``stamp`` and return an immutable copy."""
        with self.lock:
            self._stamp = float(stamp)
            return StampedTransform(
                parent_frame=self._parent_frame,
                child_frame=self._child_frame,
                translation=self._translation,
                rotation=self._rotation,
                stamp=self._stamp,
            )
