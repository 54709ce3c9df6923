"""
JAX-based rotation helpers for the transform sender.

This module provides pure, JIT-compilable implementations of:
- Euler angle / quaternion conversion and unit handling (rotation module)
- SO(3) rotation matrices and homogeneous transforms (so3 module)

All functions are stateless; mutable state lives in tf_sender.core.
"""

from . import rotation
from . import so3

__all__ = [
    "rotation",
    "so3",
]
