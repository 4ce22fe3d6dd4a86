"""Sensor feeds: push sources of :class:`SampleEvent` values.

A feed is registered at a :class:`FrequencyTier` and calls its listener from
its own delivery thread, one event at a time. Listeners must return quickly.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Optional, Protocol

import numpy as np

from ..config.sampling import FrequencyTier
from .models import SampleEvent

logger = logging.getLogger(__name__)

SampleListener = Callable[[SampleEvent], None]


class SensorFeed(Protocol):
    """Minimal interface a session needs from a sample source."""

    def set_listener(self, listener: Optional[SampleListener]) -> None:
        ...

    def configure(self, tier: FrequencyTier) -> None:
        """Unregister (if needed) and register again at ``tier``."""
        ...

    def unregister(self) -> None:
        """Stop delivery; no listener call may start after this returns."""
        ...

    def is_registered(self) -> bool:
        ...


class SyntheticSensorFeed:
    """
    Simulated linear-acceleration sensor running on a daemon thread.

    Samples follow a slowly rotating vector with Gaussian noise. Delivery
    intervals are the tier's nominal period with multiplicative jitter, the
    way real sensor callbacks drift around the requested rate.
    """

    def __init__(
        self,
        *,
        amplitude: float = 4.0,
        frequency_hz: float = 0.5,
        noise: float = 0.2,
        jitter: float = 0.1,
        seed: int | None = None,
        clock_ns: Callable[[], int] = time.monotonic_ns,
        stop_timeout_s: float = 2.0,
    ) -> None:
        self.amplitude = float(amplitude)
        self.frequency_hz = float(frequency_hz)
        self.noise = float(noise)
        self.jitter = float(jitter)
        self._rng = np.random.default_rng(seed)
        self._clock_ns = clock_ns
        self.stop_timeout_s = float(stop_timeout_s)

        self._listener: Optional[SampleListener] = None
        self._tier: Optional[FrequencyTier] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def tier(self) -> Optional[FrequencyTier]:
        return self._tier

    def set_listener(self, listener: Optional[SampleListener]) -> None:
        self._listener = listener

    def configure(self, tier: FrequencyTier) -> None:
        with self._lock:
            self._stop_locked()
            self._tier = tier
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(tier, self._stop_event),
                name=f"SyntheticSensorFeed({tier.value})",
                daemon=True,
            )
            self._thread.start()
        logger.info(
            "Synthetic feed registered at %s (%s, ~%.0f Hz)",
            tier.value,
            tier.hint.platform_name,
            tier.nominal_hz,
        )

    def unregister(self) -> None:
        with self._lock:
            was_running = self._thread is not None
            self._stop_locked()
        if was_running:
            logger.info("Synthetic feed unregistered")

    def is_registered(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def _stop_locked(self) -> None:
        thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout=self.stop_timeout_s)
            if thread.is_alive():
                logger.warning(
                    "Synthetic feed thread %s still inside its listener after %.1f s",
                    thread.name,
                    self.stop_timeout_s,
                )
        self._thread = None

    def _next_sample(self, t_s: float) -> tuple[float, float, float]:
        phase = 2.0 * math.pi * self.frequency_hz * t_s
        noise = self._rng.normal(0.0, self.noise, size=3) if self.noise > 0 else np.zeros(3)
        x = self.amplitude * math.cos(phase) + noise[0]
        y = self.amplitude * math.sin(phase) + noise[1]
        z = noise[2]
        return float(x), float(y), float(z)

    def _run(self, tier: FrequencyTier, stop_event: threading.Event) -> None:
        period_s = 1.0 / tier.nominal_hz
        start_ns = self._clock_ns()
        while not stop_event.is_set():
            if self.jitter > 0:
                factor = 1.0 + float(self._rng.uniform(-self.jitter, self.jitter))
            else:
                factor = 1.0
            if stop_event.wait(period_s * factor):
                break
            now_ns = self._clock_ns()
            axes = self._next_sample((now_ns - start_ns) / 1e9)
            listener = self._listener
            if listener is None:
                continue
            if stop_event.is_set():
                break
            try:
                listener(SampleEvent(axes, now_ns))
            except Exception:
                logger.exception("Sample listener failed")


__all__ = ["SampleListener", "SensorFeed", "SyntheticSensorFeed"]
