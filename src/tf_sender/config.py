"""Startup configuration of the transform sender.

The transform is given either as translation + yaw/pitch/roll or as
translation + quaternion, together with the two frame names and the publish
period. Validation failures surface as ConfigurationError.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from tf_sender.core.transform_state import TransformState
from tf_sender.exceptions import ConfigurationError
from tf_sender.io.urdf import JointOrigin

USAGE = """\
A command line utility for manually sending a transform.
It will periodically republish the given transform.
Usage: tf-sender x y z yaw pitch roll frame_id child_frame_id period_ms
OR
Usage: tf-sender x y z qx qy qz qw frame_id child_frame_id period_ms
OR
Usage: tf-sender --urdf FILE --joint NAME --period-ms period_ms

This transform is the transform of the coordinate frame from frame_id into
the coordinate frame of the child_frame_id."""

_EULER_ARGS = ("x", "y", "z", "yaw", "pitch", "roll", "parent_frame", "child_frame", "period_ms")
_QUATERNION_ARGS = (
    "x", "y", "z", "qx", "qy", "qz", "qw", "parent_frame", "child_frame", "period_ms"
)


class SenderConfig(BaseModel):
    """Validated construction input for a TransformSender."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    yaw: Optional[float] = None
    pitch: Optional[float] = None
    roll: Optional[float] = None
    qx: Optional[float] = None
    qy: Optional[float] = None
    qz: Optional[float] = None
    qw: Optional[float] = None
    parent_frame: str = Field(min_length=1)
    child_frame: str = Field(min_length=1)
    period_ms: float = Field(gt=0, description="Publish period in milliseconds")

    @model_validator(mode="after")
    def check_transform(self) -> "SenderConfig":
        if self.parent_frame == self.child_frame:
            raise ValueError(
                f"target_frame and source frame are the same ({self.parent_frame}, "
                f"{self.child_frame}) this cannot work"
            )
        euler = (self.yaw, self.pitch, self.roll)
        quaternion = (self.qx, self.qy, self.qz, self.qw)
        has_euler = any(v is not None for v in euler)
        has_quaternion = any(v is not None for v in quaternion)
        if has_euler and has_quaternion:
            raise ValueError("give either yaw/pitch/roll or a quaternion, not both")
        if has_euler and None in euler:
            raise ValueError("yaw, pitch and roll must all be given")
        if has_quaternion:
            if None in quaternion:
                raise ValueError("qx, qy, qz and qw must all be given")
            if math.fsum(v * v for v in quaternion) == 0.0:
                raise ValueError("quaternion length cannot be 0.0")
        return self

    @classmethod
    def create(cls, **values) -> "SenderConfig":
        """Validate ``values``, raising ConfigurationError on failure."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(str(exc))

    @classmethod
    def from_argv(cls, args: Sequence[str]) -> "SenderConfig":
        """Parse the positional command-line forms."""
        if len(args) == len(_EULER_ARGS):
            names = _EULER_ARGS
        elif len(args) == len(_QUATERNION_ARGS):
            names = _QUATERNION_ARGS
        else:
            raise ConfigurationError(
                f"expected {len(_EULER_ARGS)} or {len(_QUATERNION_ARGS)} arguments, "
                f"got {len(args)}"
            )
        return cls.create(**dict(zip(names, args)))

    @classmethod
    def from_joint_origin(cls, origin: JointOrigin, period_ms: float) -> "SenderConfig":
        """Use a URDF joint origin as the initial transform."""
        roll, pitch, yaw = origin.rpy
        x, y, z = origin.xyz
        return cls.create(
            x=x, y=y, z=z, roll=roll, pitch=pitch, yaw=yaw,
            parent_frame=origin.parent_frame, child_frame=origin.child_frame,
            period_ms=period_ms,
        )

    @property
    def period(self) -> float:
        """Publish period in seconds."""
        return self.period_ms / 1000.0

    def build_state(self) -> TransformState:
        """Construct the TransformState, stamped one period ahead of time zero."""
        if self.qw is not None:
            return TransformState.from_quaternion(
                self.x, self.y, self.z, self.qx, self.qy, self.qz, self.qw,
                self.period, self.parent_frame, self.child_frame,
            )
        return TransformState.from_euler(
            self.x, self.y, self.z,
            self.roll or 0.0, self.pitch or 0.0, self.yaw or 0.0,
            self.period, self.parent_frame, self.child_frame,
        )
