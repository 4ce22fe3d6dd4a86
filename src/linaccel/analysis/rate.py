from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.models import NS_PER_SECOND, NonFiniteSampleError


@dataclass(frozen=True)
class RateEstimate:
    """Point-in-time view of a :class:`SampleRateEstimator`."""

    hz: float
    period_s: float
    sample_count: int
    elapsed_s: float


class SampleRateEstimator:
    """
    Estimate a sensor's delivery rate from event timestamps.

    Notes
    -----
    - Timestamps are assumed to be in seconds (monotonic increasing).
    - The first event after construction or :meth:`reset` only anchors the
      measurement window; no rate is defined until the second event.
    - The rate is a cumulative average, ``sample_count / (t - start_time)``.
      Individual inter-arrival times jitter a lot on real sensors, so the
      estimate trades responsiveness for a stable readout.
    - Events that do not advance time (``elapsed <= 0``) still count as
      samples but leave the previous rate untouched.

    One thread feeds events; other threads may poll :meth:`current_rate_hz`.
    All state access goes through an internal lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._start_time: Optional[float] = None
        self._last_time: Optional[float] = None
        self._sample_count = 0
        self._current_hz = 0.0

    def reset(self) -> None:
        """Forget the anchor and the sample count; the next event re-anchors."""
        with self._lock:
            self._start_time = None
            self._last_time = None
            self._sample_count = 0
            self._current_hz = 0.0

    def on_event(self, timestamp_s: float) -> None:
        """
        Account for one sensor event.

        Parameters
        ----------
        timestamp_s:
            Event time in seconds on a monotonic clock.
        """
        t = float(timestamp_s)
        if not math.isfinite(t):
            raise NonFiniteSampleError(f"timestamp must be finite, got {timestamp_s!r}")

        with self._lock:
            if self._start_time is None:
                self._start_time = t
                self._last_time = t
                return

            self._sample_count += 1
            self._last_time = t
            elapsed = t - self._start_time
            if elapsed > 0:
                self._current_hz = self._sample_count / elapsed

    def on_event_ns(self, timestamp_ns: int) -> None:
        """Same as :meth:`on_event` for nanosecond timestamps."""
        self.on_event(timestamp_ns / NS_PER_SECOND)

    def feed_times(self, times: Iterable[float]) -> None:
        """Convenience method to bulk-feed timestamps in seconds."""
        for t in times:
            self.on_event(t)

    def current_rate_hz(self) -> float:
        """Return the latest rate in Hz, or ``0.0`` before the first full cycle."""
        with self._lock:
            return self._current_hz

    @property
    def sample_period_s(self) -> float:
        """Mean time between events in seconds (``0.0`` with no rate yet)."""
        hz = self.current_rate_hz()
        if hz <= 0:
            return 0.0
        return 1.0 / hz

    @property
    def sample_count(self) -> int:
        with self._lock:
            return self._sample_count

    @property
    def start_time(self) -> Optional[float]:
        with self._lock:
            return self._start_time

    def snapshot(self) -> RateEstimate:
        """Return rate, period, count and covered span in one consistent read."""
        with self._lock:
            hz = self._current_hz
            count = self._sample_count
            if self._start_time is None or self._last_time is None:
                elapsed = 0.0
            else:
                elapsed = max(0.0, self._last_time - self._start_time)
        return RateEstimate(
            hz=hz,
            period_s=1.0 / hz if hz > 0 else 0.0,
            sample_count=count,
            elapsed_s=elapsed,
        )


def format_rate_hz(hz: float) -> str:
    """Format a rate with at most two decimals and no trailing zeros."""
    text = f"{hz:.2f}".rstrip("0").rstrip(".")
    if text in ("", "-0"):
        return "0"
    return text


__all__ = ["RateEstimate", "SampleRateEstimator", "format_rate_hz"]
