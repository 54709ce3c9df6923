"""Rotation conversion utilities in JAX.

Quaternions are in (x, y, z, w) order. Euler angles are fixed-axis
roll (X), pitch (Y), yaw (Z), composed as R = Rz(yaw) @ Ry(pitch) @ Rx(roll).
quaternion_from_rpy and rpy_from_quaternion are the only pair of functions
that encode this order; every other module goes through them.
"""

import jax
import jax.numpy as jnp
from typing import Union

# Type aliases
Array = jax.Array
Scalar = Union[float, Array]


def quaternion_from_rpy(roll: Scalar, pitch: Scalar, yaw: Scalar) -> Array:
    """
    Build a unit quaternion from roll, pitch and yaw.

    Args:
        roll: rotation about the fixed X axis, radians
        pitch: rotation about the fixed Y axis, radians
        yaw: rotation about the fixed Z axis, radians

    Returns:
        (..., 4) quaternion in (x, y, z, w) format
    """
    half_r = jnp.asarray(roll, dtype=jnp.float64) * 0.5
    half_p = jnp.asarray(pitch, dtype=jnp.float64) * 0.5
    half_y = jnp.asarray(yaw, dtype=jnp.float64) * 0.5

    cr, sr = jnp.cos(half_r), jnp.sin(half_r)
    cp, sp = jnp.cos(half_p), jnp.sin(half_p)
    cy, sy = jnp.cos(half_y), jnp.sin(half_y)

    quaternion = jnp.stack([
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
        cr * cp * cy + sr * sp * sy,
    ], axis=-1)

    return normalize_quaternion(quaternion)


def rpy_from_quaternion(quaternion: Array) -> Array:
    """
    Recover roll, pitch and yaw from a quaternion.

    Inverse of quaternion_from_rpy. Roll and yaw come back in (-pi, pi],
    pitch in [-pi/2, pi/2].

    Args:
        quaternion: (..., 4) quaternion in (x, y, z, w) format

    Returns:
        (..., 3) array of [roll, pitch, yaw] in radians
    """
    x, y, z, w = jnp.moveaxis(normalize_quaternion(quaternion), -1, 0)

    roll = jnp.arctan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + y * y))
    # Clip for numerical stability at the gimbal-lock poles
    sin_pitch = jnp.clip(2.0 * (w * y - z * x), -1.0, 1.0)
    pitch = jnp.arcsin(sin_pitch)
    yaw = jnp.arctan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))

    return jnp.stack([roll, pitch, yaw], axis=-1)


def quaternion_squared_norm(quaternion: Array) -> Array:
    """Squared length of quaternion(s)."""
    quaternion = jnp.asarray(quaternion, dtype=jnp.float64)
    return jnp.sum(quaternion * quaternion, axis=-1)


def normalize_quaternion(quaternion: Array) -> Array:
    """Normalize quaternions to unit length."""
    quaternion = jnp.asarray(quaternion, dtype=jnp.float64)
    return quaternion / jnp.linalg.norm(quaternion, axis=-1, keepdims=True)


def to_degrees(values: Array) -> Array:
    """Convert angles from radians to degrees."""
    return jnp.asarray(values, dtype=jnp.float64) * 180.0 / jnp.pi


def to_radians(values: Array) -> Array:
    """Convert angles from degrees to radians."""
    return jnp.asarray(values, dtype=jnp.float64) / 180.0 * jnp.pi
