"""Field table of the reconfiguration schema.

Each field belongs to exactly one ChangeGroup. Euler field bounds depend on
the active angle unit; every other float field is unbounded.
"""

import math
from enum import Enum
from typing import Any, Dict, NamedTuple

from tf_sender.core.transform_state import AngleUnits


class ChangeGroup(Enum):
    """Which logical field set an edit event modified."""

    ALL = "all"
    TRANSLATION = "translation"
    EULER = "euler"
    QUATERNION = "quaternion"
    UNIT_PREFERENCE = "unit_preference"


class Bounds(NamedTuple):
    """Inclusive lower and upper bound of a numeric field."""

    min: float
    max: float


TRANSLATION_FIELDS = ("x", "y", "z")
EULER_FIELDS = ("roll", "pitch", "yaw")
QUATERNION_FIELDS = ("qx", "qy", "qz", "qw")
USE_QUATERNION = "use_quaternion"
ANGLE_UNITS = "angle_units"

FIELD_GROUPS: Dict[str, ChangeGroup] = {
    **{name: ChangeGroup.TRANSLATION for name in TRANSLATION_FIELDS},
    **{name: ChangeGroup.EULER for name in EULER_FIELDS},
    **{name: ChangeGroup.QUATERNION for name in QUATERNION_FIELDS},
    USE_QUATERNION: ChangeGroup.QUATERNION,
    ANGLE_UNITS: ChangeGroup.UNIT_PREFERENCE,
}

UNBOUNDED = Bounds(-math.inf, math.inf)


def euler_bounds(units: AngleUnits) -> Bounds:
    """Bounds of roll, pitch and yaw for the given unit."""
    if AngleUnits(units) is AngleUnits.DEGREES:
        return Bounds(-180.0, 180.0)
    return Bounds(-math.pi, math.pi)


def group_of(field: str) -> ChangeGroup:
    """ChangeGroup a field belongs to; KeyError for unknown fields."""
    return FIELD_GROUPS[field]


def default_config() -> Dict[str, Any]:
    """Schema defaults: identity transform, radians."""
    config: Dict[str, Any] = {name: 0.0 for name in TRANSLATION_FIELDS + EULER_FIELDS}
    config.update(qx=0.0, qy=0.0, qz=0.0, qw=1.0)
    config[USE_QUATERNION] = False
    config[ANGLE_UNITS] = AngleUnits.RADIANS.value
    return config


def field_bounds(units: AngleUnits) -> Dict[str, Bounds]:
    """Bounds of every float field for the given angle unit."""
    bounds = {name: UNBOUNDED for name in TRANSLATION_FIELDS + QUATERNION_FIELDS}
    bounds.update({name: euler_bounds(units) for name in EULER_FIELDS})
    return bounds
