"""I/O utilities for seeding the transform from robot description files.

This module provides a reader for joint origins in URDF files.
"""

from .urdf import JointOrigin, load_joint_origin

__all__ = ["JointOrigin", "load_joint_origin"]
