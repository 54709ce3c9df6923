"""SO(3) rotation matrix conversions in JAX.

Quaternions here follow the (x, y, z, w) order used by the rest of the
package. All functions are pure and operate on JAX arrays.
"""

import jax
import jax.numpy as jnp

from .rotation import normalize_quaternion

Array = jax.Array


def from_quaternion(quaternions: Array) -> Array:
    """
    Convert quaternions to rotation matrices.

    Args:
        quaternions: (..., 4) array of quaternions in (x, y, z, w) format

    Returns:
        (..., 3, 3) array of rotation matrices
    """
    # Normalize quaternions for numerical stability
    quaternions = normalize_quaternion(quaternions)

    # Unpack quaternion components - preserving batch dimensions
    x, y, z, w = jnp.moveaxis(quaternions, -1, 0)

    xx, yy, zz = x*x, y*y, z*z
    wx, wy, wz = w*x, w*y, w*z
    xy, xz, yz = x*y, x*z, y*z

    matrix = jnp.stack([
        jnp.stack([1 - 2*(yy + zz), 2*(xy - wz), 2*(xz + wy)], axis=-1),
        jnp.stack([2*(xy + wz), 1 - 2*(xx + zz), 2*(yz - wx)], axis=-1),
        jnp.stack([2*(xz - wy), 2*(yz + wx), 1 - 2*(xx + yy)], axis=-1)
    ], axis=-2)

    return matrix


def homogeneous(translation: Array, quaternion: Array) -> Array:
    """
    Build a 4x4 homogeneous transform from a translation and a quaternion.

    Args:
        translation: (3,) translation vector
        quaternion: (4,) quaternion in (x, y, z, w) format

    Returns:
        (4, 4) SE(3) matrix
    """
    translation = jnp.asarray(translation, dtype=jnp.float64)
    m = jnp.eye(4, dtype=jnp.float64)
    m = m.at[:3, :3].set(from_quaternion(quaternion))
    m = m.at[:3, 3].set(translation)
    return m
