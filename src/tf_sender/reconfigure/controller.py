"""Dispatch of reconfiguration edits onto the shared TransformState.

An edit arrives as ``(ChangeGroup, field values)``. The controller applies it
to the state and answers with a ReconfigureResult naming the fields the
channel must write back, the new Euler bounds (if any) and any recoverable
conditions it hit. It never touches the channel itself, so it can be driven
without a live reconfiguration server.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from tf_sender.core.transform_state import AngleUnits, TransformState
from tf_sender.exceptions import DegenerateQuaternionError
from tf_sender.reconfigure.schema import (
    ANGLE_UNITS,
    EULER_FIELDS,
    QUATERNION_FIELDS,
    TRANSLATION_FIELDS,
    USE_QUATERNION,
    Bounds,
    ChangeGroup,
    euler_bounds,
)

logger = logging.getLogger(__name__)


class Notice(Enum):
    """Recoverable conditions reported back to whoever made the edit."""

    DEGENERATE_QUATERNION = "quaternion length cannot be 0.0, using previous value"
    RENORMALIZED_QUATERNION = "quaternion is not normalized, normalizing"


@dataclass(frozen=True)
class ReconfigureResult:
    """Write-back produced by one edit.

    Attributes:
        values: Fields the channel must overwrite with these values.
        bounds: New roll/pitch/yaw bounds, or None when unchanged.
        notices: Recoverable conditions met while applying the edit.
    """
    values: Dict[str, Any] = field(default_factory=dict)
    bounds: Optional[Bounds] = None
    notices: Tuple[Notice, ...] = ()


def _floats(names: Tuple[str, ...], values) -> Dict[str, float]:
    return {name: float(value) for name, value in zip(names, values)}


class ReconfigurationController:
    """Translate edit events into TransformState updates and write-backs."""

    def __init__(self, state: TransformState):
        self._state = state
        self._handlers: Dict[ChangeGroup, Callable[[Mapping[str, Any]], ReconfigureResult]] = {
            ChangeGroup.ALL: self._on_all,
            ChangeGroup.TRANSLATION: self._on_translation,
            ChangeGroup.EULER: self._on_euler,
            ChangeGroup.QUATERNION: self._on_quaternion,
            ChangeGroup.UNIT_PREFERENCE: self._on_unit_preference,
        }

    @property
    def angle_units(self) -> AngleUnits:
        """Angle unit currently held by the state."""
        return self._state.angle_units

    def apply(self, group: ChangeGroup, values: Mapping[str, Any]) -> ReconfigureResult:
        """Apply one edit atomically.

        Args:
            group: Field group the edit changed.
            values: Current field values as seen by the channel.

        Returns:
            The write-back for the channel.
        """
        group = ChangeGroup(group)
        logger.debug("Reconfigure group: %s", group.value)

        with self._state.lock:
            result = self._handlers[group](values)

        for notice in result.notices:
            if notice is Notice.DEGENERATE_QUATERNION:
                logger.error("Reconfigure: %s", notice.value)
            else:
                logger.warning("Reconfigure: %s", notice.value)
        return result

    def _euler_values(self, units: Optional[AngleUnits] = None) -> Dict[str, float]:
        return _floats(EULER_FIELDS, self._state.euler_readback(units))

    def _on_all(self, values: Mapping[str, Any]) -> ReconfigureResult:
        written = _floats(TRANSLATION_FIELDS, self._state.translation)
        written.update(self._euler_values())
        written.update(_floats(QUATERNION_FIELDS, self._state.rotation))
        written[ANGLE_UNITS] = self._state.angle_units.value
        return ReconfigureResult(values=written)

    def _on_translation(self, values: Mapping[str, Any]) -> ReconfigureResult:
        self._state.apply_translation(*(values[name] for name in TRANSLATION_FIELDS))
        return ReconfigureResult()

    def _on_euler(self, values: Mapping[str, Any]) -> ReconfigureResult:
        quaternion = self._state.apply_euler(
            *(values[name] for name in EULER_FIELDS), units=self._state.angle_units
        )
        return ReconfigureResult(values=_floats(QUATERNION_FIELDS, quaternion))

    def _on_quaternion(self, values: Mapping[str, Any]) -> ReconfigureResult:
        notices: Tuple[Notice, ...] = ()
        try:
            update = self._state.apply_quaternion(*(values[name] for name in QUATERNION_FIELDS))
            quaternion = update.quaternion
            if update.renormalized:
                notices = (Notice.RENORMALIZED_QUATERNION,)
        except DegenerateQuaternionError:
            quaternion = self._state.rotation
            notices = (Notice.DEGENERATE_QUATERNION,)

        written = _floats(QUATERNION_FIELDS, quaternion)
        written.update(self._euler_values())
        # One-shot toggle: each request applies the quaternion once
        written[USE_QUATERNION] = False
        return ReconfigureResult(values=written, notices=notices)

    def _on_unit_preference(self, values: Mapping[str, Any]) -> ReconfigureResult:
        units = AngleUnits(values[ANGLE_UNITS])
        if not self._state.set_angle_units(units):
            return ReconfigureResult()

        written = self._euler_values(units)
        written[ANGLE_UNITS] = units.value
        return ReconfigureResult(values=written, bounds=euler_bounds(units))
