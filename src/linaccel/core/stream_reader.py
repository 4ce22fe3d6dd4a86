from __future__ import annotations

"""
Utilities for ingesting JSONL acceleration streams and dispatching each
record to a sample listener, plus a :class:`SensorFeed` built on top.

Accepted record shape::

    {"timestamp_ns": 1234567890, "x": 0.1, "y": -0.2, "z": 9.7}

``t_s`` (seconds) may replace ``timestamp_ns``; ``ax``/``ay``/``az`` may
replace ``x``/``y``/``z``. ``z`` is optional.
"""

import json
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from ..config.sampling import FrequencyTier
from .feed import SampleListener
from .models import NS_PER_SECOND, SampleEvent

logger = logging.getLogger(__name__)

_AXIS_KEYS = (("x", "ax"), ("y", "ay"), ("z", "az"))


def parse_record(record: Mapping[str, Any]) -> Optional[SampleEvent]:
    """Turn one decoded JSON object into a :class:`SampleEvent` (or ``None``)."""
    timestamp_ns = _extract_timestamp_ns(record)
    if timestamp_ns is None:
        logger.debug("Record missing usable timestamp: %r", record)
        return None

    axes: list[float] = []
    for keys in _AXIS_KEYS:
        value = None
        for key in keys:
            if key in record:
                value = _coerce_number(record[key])
                break
        if value is None:
            break
        axes.append(value)

    if len(axes) < 2:
        logger.debug("Record missing x/y channels: %r", record)
        return None
    return SampleEvent(tuple(axes), timestamp_ns)


def reader_loop(
    stream: Iterable[str],
    listener: SampleListener,
    *,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Read JSONL records from a line-oriented stream and push samples.

    This is intended to run in a background thread: it stops when the
    input stream is exhausted or when an optional ``stop_event`` is set.
    Returns the number of samples delivered.
    """
    delivered = 0
    for raw_line in stream:
        if stop_event is not None and stop_event.is_set():
            break

        line = raw_line.strip()
        if not line:
            continue

        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("Dropping malformed JSON line: %s (%s)", line, exc)
            continue

        if not isinstance(record, Mapping):
            logger.debug("Skipping non-object JSON payload: %r", record)
            continue

        event = parse_record(record)
        if event is None:
            continue

        try:
            listener(event)
        except Exception:
            logger.exception("Failed to dispatch record: %r", record)
            continue
        delivered += 1
    return delivered


def _extract_timestamp_ns(record: Mapping[str, Any]) -> Optional[int]:
    ts_ns = record.get("timestamp_ns")
    if ts_ns is not None:
        ns_val = _coerce_number(ts_ns)
        if ns_val is not None:
            return int(ns_val)
    t_raw = record.get("t_s")
    if t_raw is not None:
        ts = _coerce_number(t_raw)
        if ts is not None:
            return int(round(ts * NS_PER_SECOND))
    return None


def _coerce_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class StreamReaderHandle:
    thread: threading.Thread
    stop_event: threading.Event

    def stop(self, *, join: bool = False, timeout: Optional[float] = None) -> None:
        self.stop_event.set()
        if join and self.thread is not threading.current_thread():
            self.thread.join(timeout)

    def is_alive(self) -> bool:
        return self.thread.is_alive()


def start_reader(
    stream: Iterable[str],
    listener: SampleListener,
    *,
    thread_name: Optional[str] = None,
) -> StreamReaderHandle:
    """
    Start a background thread that pushes samples parsed from *stream*.
    """
    stop_event = threading.Event()

    def _target() -> None:
        count = reader_loop(stream, listener, stop_event=stop_event)
        logger.info("Stream reader finished after %d samples", count)

    thread = threading.Thread(
        target=_target,
        name=thread_name or "LinAccelStreamReader",
        daemon=True,
    )
    thread.start()
    return StreamReaderHandle(thread=thread, stop_event=stop_event)


class JsonlSensorFeed:
    """
    :class:`~linaccel.core.feed.SensorFeed` over a JSONL text stream.

    The stream delivers at whatever rate its producer writes, so the tier is
    only recorded. One reader thread owns the stream for the feed's whole
    life; :meth:`configure` and :meth:`unregister` only open and close the
    delivery gate. Lines read while the gate is closed are dropped, so a new
    :meth:`configure` resumes from the next unread line.
    """

    def __init__(self, stream: Iterable[str]) -> None:
        self._stream = stream
        self._listener: Optional[SampleListener] = None
        self._handle: Optional[StreamReaderHandle] = None
        self._tier: Optional[FrequencyTier] = None
        self._lock = threading.Lock()
        # Reentrant so a listener may unregister from the reader thread.
        self._delivery_lock = threading.RLock()
        self._gate = threading.Event()

    @property
    def tier(self) -> Optional[FrequencyTier]:
        return self._tier

    def set_listener(self, listener: Optional[SampleListener]) -> None:
        self._listener = listener

    def _dispatch(self, event: SampleEvent) -> None:
        with self._delivery_lock:
            listener = self._listener
            if listener is not None and self._gate.is_set():
                listener(event)

    def configure(self, tier: FrequencyTier) -> None:
        with self._lock:
            self._close_gate()
            self._tier = tier
            if self._handle is None:
                self._handle = start_reader(
                    self._stream,
                    self._dispatch,
                    thread_name="JsonlSensorFeed",
                )
            self._gate.set()
        logger.info("JSONL feed registered (requested tier %s is advisory)", tier.value)

    def unregister(self) -> None:
        with self._lock:
            self._close_gate()

    def is_registered(self) -> bool:
        handle = self._handle
        return handle is not None and self._gate.is_set() and handle.is_alive()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the stream is exhausted; returns False on timeout."""
        handle = self._handle
        if handle is None:
            return True
        handle.thread.join(timeout)
        return not handle.thread.is_alive()

    def _close_gate(self) -> None:
        self._gate.clear()
        # Wait out a delivery that passed the gate before it closed.
        with self._delivery_lock:
            pass


__all__ = [
    "JsonlSensorFeed",
    "StreamReaderHandle",
    "parse_record",
    "reader_loop",
    "start_reader",
]
