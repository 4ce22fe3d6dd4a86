from __future__ import annotations

import math
import threading

import numpy as np

from .models import NS_PER_SECOND, SampleEvent


def calculate_capacity(window_seconds: float, max_rate_hz: float, *, margin: float = 1.1) -> int:
    """
    Compute how many samples are needed to cover ``window_seconds`` at
    ``max_rate_hz`` with an optional ``margin``.
    """
    samples = window_seconds * max_rate_hz * margin
    return max(1, int(math.ceil(samples)))


class SampleHistory:
    """
    Fixed-size ring of recent samples for plotting.

    Rows are ``(timestamp_ns, x, y, z)`` stored in one preallocated array;
    the oldest rows are overwritten when full. A lock lets the feed thread
    append while the GUI thread takes windows.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._times = np.zeros(self._capacity, dtype=np.int64)
        self._values = np.zeros((self._capacity, 3), dtype=np.float64)
        self._start = 0
        self._size = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, event: SampleEvent) -> None:
        with self._lock:
            idx = (self._start + self._size) % self._capacity
            self._times[idx] = event.timestamp_ns
            self._values[idx] = (event.x, event.y, event.z)
            if self._size < self._capacity:
                self._size += 1
            else:
                self._start = (self._start + 1) % self._capacity

    def clear(self) -> None:
        with self._lock:
            self._start = 0
            self._size = 0

    def __len__(self) -> int:
        with self._lock:
            return self._size

    def latest_timestamp_ns(self) -> int | None:
        """Return the newest timestamp in nanoseconds."""
        with self._lock:
            if self._size == 0:
                return None
            idx = (self._start + self._size - 1) % self._capacity
            return int(self._times[idx])

    def snapshot(self) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(timestamps_ns, values)`` copies in arrival order."""
        with self._lock:
            order = (self._start + np.arange(self._size)) % self._capacity
            return self._times[order].copy(), self._values[order].copy()

    def window(self, seconds: float) -> tuple[np.ndarray, np.ndarray]:
        """
        Return the last ``seconds`` of data.

        Times are in seconds relative to the newest sample (so they end at 0),
        values are an ``(N, 3)`` array.
        """
        times, values = self.snapshot()
        if times.size == 0:
            return np.empty(0, dtype=np.float64), np.empty((0, 3), dtype=np.float64)
        newest = times[-1]
        start_ns = newest - int(seconds * NS_PER_SECOND)
        start_idx = int(np.searchsorted(times, start_ns, side="left"))
        rel = (times[start_idx:] - newest).astype(np.float64) / float(NS_PER_SECOND)
        return rel, values[start_idx:]


__all__ = ["SampleHistory", "calculate_capacity"]
