"""In-process reconfiguration channel.

Holds the schema's current values and bounds, turns raw field edits into
ChangeGroup events for a ReconfigurationController and writes the
controller's answer back into the schema.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import Any, Dict, List, Tuple

from tf_sender.core.transform_state import AngleUnits
from tf_sender.exceptions import ConfigurationError
from tf_sender.reconfigure.controller import Notice, ReconfigurationController, ReconfigureResult
from tf_sender.reconfigure.schema import (
    ANGLE_UNITS,
    EULER_FIELDS,
    FIELD_GROUPS,
    USE_QUATERNION,
    Bounds,
    ChangeGroup,
    default_config,
    field_bounds,
)

logger = logging.getLogger(__name__)

# Order in which the groups of a multi-group edit are dispatched
DISPATCH_ORDER = (
    ChangeGroup.TRANSLATION,
    ChangeGroup.EULER,
    ChangeGroup.QUATERNION,
    ChangeGroup.UNIT_PREFERENCE,
)


class ReconfigureServer:
    """Schema holder that forwards accepted edits to a controller."""

    def __init__(self, controller: ReconfigurationController):
        self._controller = controller
        self._lock = threading.Lock()
        units = controller.angle_units
        self._config: Dict[str, Any] = default_config()
        self._config[ANGLE_UNITS] = units.value
        self._bounds: Dict[str, Bounds] = field_bounds(units)

    @property
    def config(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._config)

    @property
    def min(self) -> Dict[str, float]:
        with self._lock:
            return {name: bounds.min for name, bounds in self._bounds.items()}

    @property
    def max(self) -> Dict[str, float]:
        with self._lock:
            return {name: bounds.max for name, bounds in self._bounds.items()}

    def start(self) -> ReconfigureResult:
        """Send the initial full resynchronisation."""
        with self._lock:
            result = self._controller.apply(ChangeGroup.ALL, dict(self._config))
            self._write_back(result)
            # Bounds follow whatever unit the state reported
            self._bounds = field_bounds(AngleUnits(self._config[ANGLE_UNITS]))
        return result

    def update(self, **fields: Any) -> ReconfigureResult:
        """Apply an edit of one or more fields.

        Raises:
            ConfigurationError: unknown field, non-finite number or unknown
                angle unit. Nothing is applied in that case.
        """
        with self._lock:
            pending = self._validated(fields)
            groups = {FIELD_GROUPS[name] for name in pending}
            # Quaternion components are staged until use_quaternion is set
            if not pending.get(USE_QUATERNION, False):
                groups.discard(ChangeGroup.QUATERNION)
            self._config.update(pending)

            values: Dict[str, Any] = {}
            bounds = None
            notices: List[Notice] = []
            for group in DISPATCH_ORDER:
                if group not in groups:
                    continue
                result = self._controller.apply(group, dict(self._config))
                self._write_back(result)
                values.update(result.values)
                bounds = result.bounds or bounds
                notices.extend(result.notices)

        return ReconfigureResult(values=values, bounds=bounds, notices=tuple(notices))

    def _validated(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        pending: Dict[str, Any] = {}
        for name, value in fields.items():
            if name not in FIELD_GROUPS:
                raise ConfigurationError(f"Unknown reconfigure field '{name}'")
            if name == ANGLE_UNITS:
                try:
                    pending[name] = AngleUnits(value).value
                except ValueError:
                    raise ConfigurationError(f"Unknown angle units '{value}'")
            elif name == USE_QUATERNION:
                if isinstance(value, str):
                    value = value.strip().lower() in ("1", "true", "yes", "on")
                pending[name] = bool(value)
            else:
                pending[name] = self._clamped(name, value)
        return pending

    def _clamped(self, name: str, value: Any) -> float:
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Field '{name}' expects a number, got {value!r}")
        if not math.isfinite(value):
            raise ConfigurationError(f"Field '{name}' must be finite, got {value}")
        bounds = self._bounds[name]
        return min(max(value, bounds.min), bounds.max)

    def _write_back(self, result: ReconfigureResult) -> None:
        if result.bounds is not None:
            for name in EULER_FIELDS:
                self._bounds[name] = result.bounds
        self._config.update(result.values)


def parse_assignment(line: str) -> Tuple[str, str]:
    """Split a ``field=value`` line; ConfigurationError if malformed."""
    name, sep, value = line.partition("=")
    if not sep or not name.strip():
        raise ConfigurationError(f"Expected field=value, got {line!r}")
    return name.strip(), value.strip()
