"""Tests for the periodic TransformSender."""

import io
import json
import threading

import jax.numpy as jnp
import numpy as np
import pytest

from tf_sender.core import TransformState
from tf_sender.reconfigure import ReconfigurationController, ReconfigureServer
from tf_sender.sender import StreamBroadcaster, TransformSender


class RecordingBroadcaster:
    def __init__(self):
        self.published = []

    def publish(self, transform):
        self.published.append(transform)


@pytest.fixture
def state():
    return TransformState.from_quaternion(1.0, 2.0, 3.0, 0.0, 0.0, 0.0, 1.0, 0.1, "world", "sensor")


def test_send_future_dates_by_one_period(state):
    broadcaster = RecordingBroadcaster()
    sender = TransformSender(state, broadcaster, period=0.1)

    transform = sender.send(100.0)

    assert broadcaster.published == [transform]
    assert transform.stamp == pytest.approx(100.1)
    assert state.stamp == pytest.approx(100.1)
    assert transform.parent_frame == "world"
    assert transform.child_frame == "sensor"


def test_run_publishes_once_per_tick(state):
    broadcaster = RecordingBroadcaster()
    sender = TransformSender(state, broadcaster, period=0.001)
    clock = iter([1.0, 2.0, 3.0]).__next__

    ticks = sender.run(threading.Event(), clock=clock, max_ticks=3)

    assert ticks == 3
    assert [t.stamp for t in broadcaster.published] == pytest.approx([1.001, 2.001, 3.001])


def test_run_stops_when_event_is_set(state):
    broadcaster = RecordingBroadcaster()
    sender = TransformSender(state, broadcaster, period=0.001)
    stop_event = threading.Event()
    stop_event.set()

    assert sender.run(stop_event) == 0
    assert broadcaster.published == []


def test_run_stops_from_another_thread(state):
    broadcaster = RecordingBroadcaster()
    sender = TransformSender(state, broadcaster, period=0.005)
    stop_event = threading.Event()

    thread = threading.Thread(target=sender.run, args=(stop_event,))
    thread.start()
    threading.Timer(0.05, stop_event.set).start()
    thread.join(timeout=5.0)

    assert not thread.is_alive()
    assert len(broadcaster.published) >= 1


def test_published_transforms_survive_later_edits(state):
    broadcaster = RecordingBroadcaster()
    sender = TransformSender(state, broadcaster, period=0.1)
    sender.send(0.0)
    state.apply_translation(7.0, 8.0, 9.0)
    sender.send(1.0)

    first, second = broadcaster.published
    np.testing.assert_allclose(first.translation, [1.0, 2.0, 3.0])
    np.testing.assert_allclose(second.translation, [7.0, 8.0, 9.0])


def test_edits_during_publishing(state):
    """Every transform published while edits arrive has a unit quaternion."""
    broadcaster = RecordingBroadcaster()
    sender = TransformSender(state, broadcaster, period=0.0005)
    server = ReconfigureServer(ReconfigurationController(state))
    server.start()
    stop_event = threading.Event()

    def edit():
        for i in range(100):
            server.update(yaw=0.03 * i)
            server.update(qx=float(i), qy=0.0, qz=0.0, qw=1.0, use_quaternion=True)
        stop_event.set()

    editor = threading.Thread(target=edit)
    editor.start()
    sender.run(stop_event)
    editor.join()

    assert broadcaster.published
    for transform in broadcaster.published:
        np.testing.assert_allclose(float(jnp.sum(transform.rotation ** 2)), 1.0, rtol=1e-12)


def test_stream_broadcaster_writes_json_lines(state):
    stream = io.StringIO()
    sender = TransformSender(state, StreamBroadcaster(stream), period=0.5)
    sender.send(10.0)
    sender.send(11.0)

    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    record = json.loads(lines[0])
    assert record["frame_id"] == "world"
    assert record["child_frame_id"] == "sensor"
    assert record["stamp"] == pytest.approx(10.5)
    assert record["translation"] == [1.0, 2.0, 3.0]
    assert record["rotation"] == [0.0, 0.0, 0.0, 1.0]


def test_period_must_be_positive(state):
    with pytest.raises(ValueError):
        TransformSender(state, RecordingBroadcaster(), period=0.0)


def test_run_with_zero_ticks_publishes_nothing(state):
    broadcaster = RecordingBroadcaster()
    sender = TransformSender(state, broadcaster, period=0.001)

    assert sender.run(threading.Event(), max_ticks=0) == 0
    assert broadcaster.published == []
