"""Periodic publication of the current transform.

Each tick takes a snapshot of the TransformState under its lock, stamped one
period in the future so a slow consumer does not treat it as stale, and hands
it to a Broadcaster with the lock released.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Callable, Optional, Protocol, TextIO

from tf_sender.core import StampedTransform, TransformState

logger = logging.getLogger(__name__)


class Broadcaster(Protocol):
    """Anything that can make a stamped transform available to consumers."""

    def publish(self, transform: StampedTransform) -> None:
        ...


class StreamBroadcaster:
    """Write each transform as one JSON line to a text stream."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def publish(self, transform: StampedTransform) -> None:
        self._stream.write(json.dumps(transform.to_dict()) + "\n")
        self._stream.flush()


class TransformSender:
    """Republish a TransformState every ``period`` seconds."""

    def __init__(self, state: TransformState, broadcaster: Broadcaster, period: float):
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        self.state = state
        self.broadcaster = broadcaster
        self.period = period

    def send(self, now: float) -> StampedTransform:
        """Publish one tick; the transform is future-dated by one period."""
        transform = self.state.snapshot(now + self.period)
        self.broadcaster.publish(transform)
        logger.debug(
            "Sending transform from %s with parent %s",
            transform.child_frame, transform.parent_frame,
        )
        return transform

    def run(
        self,
        stop_event: threading.Event,
        clock: Callable[[], float] = time.time,
        max_ticks: Optional[int] = None,
    ) -> int:
        """Publish until ``stop_event`` is set or ``max_ticks`` are sent.

        Returns:
            Number of transforms published.
        """
        ticks = 0
        while not stop_event.is_set():
            if max_ticks is not None and ticks >= max_ticks:
                break
            self.send(clock())
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            stop_event.wait(self.period)
        return ticks
