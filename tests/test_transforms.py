"""Tests for the transforms module."""

import hypothesis
import jax
import jax.numpy as jnp
import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st

from tf_sender.transforms import rotation, so3

# Use hypothesis profile for CI
hypothesis.settings.register_profile("ci", max_examples=10, deadline=None)


def _rx(a):
    return np.array([[1, 0, 0], [0, np.cos(a), -np.sin(a)], [0, np.sin(a), np.cos(a)]])


def _ry(a):
    return np.array([[np.cos(a), 0, np.sin(a)], [0, 1, 0], [-np.sin(a), 0, np.cos(a)]])


def _rz(a):
    return np.array([[np.cos(a), -np.sin(a), 0], [np.sin(a), np.cos(a), 0], [0, 0, 1]])


# Basic tests
def test_quaternion_from_rpy_identity():
    """Zero angles give the identity quaternion."""
    quat = rotation.quaternion_from_rpy(0.0, 0.0, 0.0)
    np.testing.assert_allclose(quat, [0.0, 0.0, 0.0, 1.0], rtol=1e-12, atol=1e-12)


def test_quaternion_from_rpy_yaw_90():
    """A 90 degree yaw is a rotation about Z."""
    quat = rotation.quaternion_from_rpy(0.0, 0.0, jnp.pi / 2)
    half = np.sqrt(2.0) / 2.0
    np.testing.assert_allclose(quat, [0.0, 0.0, half, half], rtol=1e-12, atol=1e-12)


def test_composition_order_is_fixed_axis_xyz():
    """R(roll, pitch, yaw) == Rz(yaw) @ Ry(pitch) @ Rx(roll)."""
    roll, pitch, yaw = 0.3, -0.7, 2.1
    R = so3.from_quaternion(rotation.quaternion_from_rpy(roll, pitch, yaw))
    expected = _rz(yaw) @ _ry(pitch) @ _rx(roll)
    np.testing.assert_allclose(R, expected, rtol=1e-12, atol=1e-12)


def test_rpy_from_quaternion_gimbal_lock_stays_finite():
    """Pitch of exactly +90 degrees does not produce NaN."""
    quat = rotation.quaternion_from_rpy(0.0, jnp.pi / 2, 0.0)
    rpy = rotation.rpy_from_quaternion(quat)
    assert jnp.all(jnp.isfinite(rpy))
    np.testing.assert_allclose(rpy[1], jnp.pi / 2, atol=1e-6)


def test_rpy_from_quaternion_ignores_scale():
    """Read-back works on non-unit quaternions by normalising first."""
    quat = rotation.quaternion_from_rpy(0.1, 0.2, 0.3)
    np.testing.assert_allclose(
        rotation.rpy_from_quaternion(3.0 * quat), [0.1, 0.2, 0.3], rtol=1e-9, atol=1e-9
    )


def test_quaternion_squared_norm_and_normalize():
    """Squared norm of (2, 0, 0, 0) is 4 and it normalises to (1, 0, 0, 0)."""
    quat = jnp.array([2.0, 0.0, 0.0, 0.0])
    assert float(rotation.quaternion_squared_norm(quat)) == 4.0
    np.testing.assert_allclose(rotation.normalize_quaternion(quat), [1.0, 0.0, 0.0, 0.0])


def test_unit_conversion_known_values():
    np.testing.assert_allclose(rotation.to_degrees(jnp.pi), 180.0, rtol=1e-12)
    np.testing.assert_allclose(rotation.to_radians(-90.0), -jnp.pi / 2, rtol=1e-12)
    np.testing.assert_allclose(
        rotation.to_degrees(jnp.array([0.0, jnp.pi / 2, -jnp.pi])), [0.0, 90.0, -180.0], atol=1e-12
    )


def test_unit_conversion_roundtrip_landmarks():
    """toDegrees(toRadians(v)) == v at 0, +-90 and +-180."""
    values = jnp.array([0.0, 90.0, -90.0, 180.0, -180.0, 45.5])
    np.testing.assert_allclose(rotation.to_degrees(rotation.to_radians(values)), values, atol=1e-12)


@given(st.floats(min_value=-720.0, max_value=720.0, allow_nan=False))
@settings(deadline=None)
def test_unit_conversion_roundtrip(value):
    np.testing.assert_allclose(
        float(rotation.to_degrees(rotation.to_radians(value))), value, rtol=1e-12, atol=1e-9
    )


# Property-based tests with hypothesis
@given(
    st.floats(min_value=-3.1, max_value=3.1),
    st.floats(min_value=-1.5, max_value=1.5),
    st.floats(min_value=-3.1, max_value=3.1),
)
@settings(deadline=None)
def test_rpy_roundtrip(roll, pitch, yaw):
    """rpy -> quaternion -> rpy returns the original angles."""
    quat = rotation.quaternion_from_rpy(roll, pitch, yaw)
    np.testing.assert_allclose(float(jnp.linalg.norm(quat)), 1.0, rtol=1e-12)
    rpy = rotation.rpy_from_quaternion(quat)
    np.testing.assert_allclose(rpy, [roll, pitch, yaw], rtol=1e-7, atol=1e-7)


@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_from_quaternion_is_rotation(seed):
    """Random quaternions map to orthonormal matrices with determinant 1."""
    key = jax.random.PRNGKey(seed)
    quat = jax.random.uniform(key, (4,), minval=-1.0, maxval=1.0, dtype=jnp.float64)

    R = so3.from_quaternion(quat)

    np.testing.assert_allclose(R @ R.T, jnp.eye(3), rtol=1e-9, atol=1e-9)
    np.testing.assert_allclose(jnp.linalg.det(R), 1.0, rtol=1e-9)


def test_from_quaternion_sign_invariant():
    """q and -q give the same matrix."""
    quat = rotation.quaternion_from_rpy(0.4, -0.3, 1.2)
    np.testing.assert_allclose(so3.from_quaternion(quat), so3.from_quaternion(-quat), atol=1e-12)


def test_from_quaternion_180_about_x():
    R = so3.from_quaternion(jnp.array([1.0, 0.0, 0.0, 0.0]))
    np.testing.assert_allclose(R, jnp.diag(jnp.array([1.0, -1.0, -1.0])), atol=1e-12)


def test_homogeneous():
    """Homogeneous matrix rotates then translates a point."""
    half = np.sqrt(2.0) / 2.0
    T = so3.homogeneous(jnp.array([1.0, 2.0, 3.0]), jnp.array([0.0, 0.0, half, half]))
    np.testing.assert_allclose(T[3], [0.0, 0.0, 0.0, 1.0])
    point = T @ jnp.array([1.0, 0.0, 0.0, 1.0])
    np.testing.assert_allclose(point[:3], [1.0, 3.0, 3.0], atol=1e-12)


def test_rotation_functions_jit():
    """The conversions are JIT-compilable."""
    quat = jax.jit(rotation.quaternion_from_rpy)(0.1, -0.2, 0.3)
    rpy = jax.jit(rotation.rpy_from_quaternion)(quat)
    np.testing.assert_allclose(rpy, [0.1, -0.2, 0.3], rtol=1e-9, atol=1e-9)
