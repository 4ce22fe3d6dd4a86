from __future__ import annotations

import io
import json
import os
import threading
import time

import pytest

from linaccel.config.sampling import FrequencyTier
from linaccel.core.models import SampleEvent
from linaccel.core.session import AccelerationSession
from linaccel.core.stream_reader import JsonlSensorFeed, parse_record, reader_loop, start_reader


def _build_line(timestamp_ns: int, **channels: float) -> str:
    payload = {"timestamp_ns": timestamp_ns}
    payload.update(channels)
    return json.dumps(payload)


def test_reader_loop_pushes_samples() -> None:
    received: list[SampleEvent] = []
    lines = [
        _build_line(1_000, x=0.1, y=0.2, z=9.7),
        _build_line(2_000, x=0.3, y=0.4),
    ]
    count = reader_loop(lines, received.append)

    assert count == 2
    assert received[0] == SampleEvent((0.1, 0.2, 9.7), 1_000)
    assert received[1] == SampleEvent((0.3, 0.4), 2_000)


def test_reader_loop_ignores_invalid_records() -> None:
    received: list[SampleEvent] = []
    lines = [
        "not-json",
        "",
        "[1, 2, 3]",
        json.dumps({"x": 1.0, "y": 2.0}),  # missing timestamp
        json.dumps({"timestamp_ns": 5, "x": 1.0}),  # missing y
        json.dumps({"timestamp_ns": 6, "x": "not-a-number", "y": 1.0}),
        json.dumps({"t_s": 0.5, "ax": 2.5, "ay": -1.0}),
    ]
    count = reader_loop(lines, received.append)

    assert count == 1
    assert received == [SampleEvent((2.5, -1.0), 500_000_000)]


def test_parse_record_prefers_nanoseconds() -> None:
    event = parse_record({"timestamp_ns": 42, "t_s": 9.0, "x": 1, "y": 2})
    assert event is not None
    assert event.timestamp_ns == 42
    assert event.axes == (1.0, 2.0)


def test_listener_errors_are_contained() -> None:
    def boom(event: SampleEvent) -> None:
        raise RuntimeError("listener failure")

    assert reader_loop([_build_line(1, x=0.0, y=0.0)], boom) == 0


def test_start_reader_background_thread() -> None:
    received: list[SampleEvent] = []
    buffer = io.StringIO(_build_line(3, x=1.5, y=0.5) + "\n")
    handle = start_reader(buffer, received.append)

    timeout = time.time() + 1.0
    while time.time() < timeout and not received:
        time.sleep(0.01)

    handle.stop(join=True, timeout=1.0)
    assert received == [SampleEvent((1.5, 0.5), 3)]
    assert not handle.is_alive()


def test_jsonl_feed_drives_a_session() -> None:
    lines = "\n".join(_build_line(i * 10_000_000, x=1.0, y=-1.0) for i in range(11)) + "\n"
    feed = JsonlSensorFeed(io.StringIO(lines))
    session = AccelerationSession(feed)
    session.start()
    assert feed.tier is FrequencyTier.FAST
    assert feed.wait(timeout=2.0)
    assert not feed.is_registered()

    assert session.current_rate_hz() == pytest.approx(100.0)
    assert session.estimator.sample_count == 10
    session.close()


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_jsonl_feed_reconfigure_keeps_next_line() -> None:
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "r", encoding="utf-8")
    writer = os.fdopen(write_fd, "w", encoding="utf-8")
    received: list[SampleEvent] = []
    feed = JsonlSensorFeed(reader)
    feed.set_listener(received.append)
    try:
        feed.configure(FrequencyTier.FAST)
        writer.write(_build_line(1, x=0.0, y=0.0) + "\n")
        writer.flush()
        assert _wait_for(lambda: len(received) == 1)

        # The reader is now blocked on the pipe waiting for the next line.
        feed.unregister()
        assert not feed.is_registered()
        feed.configure(FrequencyTier.MEDIUM)
        assert feed.is_registered()
        readers = [t for t in threading.enumerate() if t.name == "JsonlSensorFeed" and t.is_alive()]
        assert len(readers) == 1

        for ts in (2, 3, 4):
            writer.write(_build_line(ts, x=0.0, y=0.0) + "\n")
        writer.flush()
    finally:
        writer.close()

    assert feed.wait(timeout=2.0)
    reader.close()
    assert [event.timestamp_ns for event in received] == [1, 2, 3, 4]


def test_jsonl_feed_drops_lines_while_unregistered() -> None:
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "r", encoding="utf-8")
    writer = os.fdopen(write_fd, "w", encoding="utf-8")
    received: list[SampleEvent] = []
    feed = JsonlSensorFeed(reader)
    feed.set_listener(received.append)
    try:
        feed.configure(FrequencyTier.FAST)
        feed.unregister()
        writer.write(_build_line(1, x=0.0, y=0.0) + "\n")
        writer.flush()
    finally:
        writer.close()

    assert feed.wait(timeout=2.0)
    reader.close()
    assert received == []
