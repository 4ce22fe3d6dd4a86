"""Acceleration session: one feed driving the rate estimator and the gauge."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..analysis.gauge import GRAVITY_EARTH, GaugeFrame, gauge_frame
from ..analysis.rate import RateEstimate, SampleRateEstimator, format_rate_hz
from ..config.prefs import SensorPrefs
from ..config.sampling import FrequencyTier
from .feed import SensorFeed
from .models import NonFiniteSampleError, SampleEvent

logger = logging.getLogger(__name__)

FrameListener = Callable[[SampleEvent, GaugeFrame], None]


class AccelerationSession:
    """
    Owns the estimator state for one listening session.

    Threading contract: the feed calls :meth:`on_sample` from a single
    delivery thread (the only writer). Any other thread may read
    :meth:`current_rate_hz`, :meth:`rate_text` and :meth:`latest_frame`.
    Configuration calls (:meth:`set_tier`, :meth:`close`) unregister the feed
    before touching estimator state, so no late callback can race a reset.
    """

    def __init__(
        self,
        feed: SensorFeed,
        prefs: SensorPrefs | None = None,
        *,
        full_scale: float = GRAVITY_EARTH,
        estimator: SampleRateEstimator | None = None,
    ) -> None:
        if full_scale <= 0:
            raise ValueError(f"full_scale must be positive, got {full_scale}")
        self._feed = feed
        self._prefs = prefs or SensorPrefs()
        self._full_scale = float(full_scale)
        self._estimator = estimator or SampleRateEstimator()

        self._frame_lock = threading.Lock()
        self._latest_frame: Optional[GaugeFrame] = None
        self._latest_event: Optional[SampleEvent] = None
        self._frame_listeners: list[FrameListener] = []
        self._dropped = 0
        self._started = False

    # ------------------------------------------------------------------ props
    @property
    def prefs(self) -> SensorPrefs:
        return self._prefs

    @property
    def tier(self) -> FrequencyTier:
        return self._prefs.frequency

    @property
    def estimator(self) -> SampleRateEstimator:
        return self._estimator

    @property
    def full_scale(self) -> float:
        return self._full_scale

    @property
    def dropped_samples(self) -> int:
        """Number of non-finite samples rejected so far."""
        return self._dropped

    @property
    def is_started(self) -> bool:
        return self._started

    # -------------------------------------------------------------- lifecycle
    def start(self) -> None:
        """Attach to the feed and register at the preferred tier."""
        if self._started:
            return
        self._estimator.reset()
        self._feed.set_listener(self.on_sample)
        self._feed.configure(self._prefs.frequency)
        self._started = True
        logger.info("Session started at tier %s", self._prefs.frequency.value)

    def set_tier(self, tier: FrequencyTier) -> None:
        """Switch delivery tier: unregister, reset the estimate, register again."""
        self._prefs = self._prefs.with_frequency(tier)
        if not self._started:
            self._estimator.reset()
            return
        self._feed.unregister()
        self._estimator.reset()
        self._feed.configure(tier)
        logger.info("Sensor frequency changed to %s", tier.value)

    def set_invert_axes(self, invert: bool) -> None:
        self._prefs = self._prefs.with_invert_axes(invert)

    def close(self) -> SensorPrefs:
        """Stop delivery, then discard estimator state; returns prefs to persist."""
        self._feed.unregister()
        self._feed.set_listener(None)
        self._estimator.reset()
        self._started = False
        if self._dropped:
            logger.warning("Session closed after dropping %d non-finite samples", self._dropped)
        return self._prefs

    def __enter__(self) -> "AccelerationSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------- listeners
    def add_frame_listener(self, listener: FrameListener) -> None:
        """Call ``listener(event, frame)`` from the delivery thread per sample."""
        self._frame_listeners.append(listener)

    def remove_frame_listener(self, listener: FrameListener) -> None:
        try:
            self._frame_listeners.remove(listener)
        except ValueError:
            pass

    # ---------------------------------------------------------------- events
    def on_sample(self, event: SampleEvent) -> Optional[GaugeFrame]:
        """
        Handle one sample from the feed.

        Returns the resulting :class:`GaugeFrame`, or ``None`` when the sample
        is rejected for containing NaN or infinity.
        """
        if self._prefs.invert_axes:
            event = event.inverted()

        try:
            if not event.is_finite():
                raise NonFiniteSampleError(f"axes {event.axes!r}")
            frame = gauge_frame(event.x, event.y, self._full_scale)
            self._estimator.on_event_ns(event.timestamp_ns)
        except NonFiniteSampleError as exc:
            self._dropped += 1
            logger.warning("Dropping non-finite sample at %d ns: %s", event.timestamp_ns, exc)
            return None

        with self._frame_lock:
            self._latest_frame = frame
            self._latest_event = event

        for listener in list(self._frame_listeners):
            try:
                listener(event, frame)
            except Exception:
                logger.exception("Frame listener failed")
        return frame

    # ---------------------------------------------------------------- readers
    def current_rate_hz(self) -> float:
        return self._estimator.current_rate_hz()

    def rate_estimate(self) -> RateEstimate:
        return self._estimator.snapshot()

    def rate_text(self) -> str:
        return format_rate_hz(self._estimator.current_rate_hz())

    def latest_frame(self) -> Optional[GaugeFrame]:
        with self._frame_lock:
            return self._latest_frame

    def latest_event(self) -> Optional[SampleEvent]:
        with self._frame_lock:
            return self._latest_event


__all__ = ["AccelerationSession", "FrameListener"]
