"""Sensor delivery-rate tiers and helpers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryHint:
    """Platform rate request for one tier."""

    platform_name: str
    delay_us: int
    nominal_hz: float
    label: str


class FrequencyTier(Enum):
    """User-facing sensor frequency presets; exactly one is active at a time."""

    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"

    @property
    def hint(self) -> DeliveryHint:
        return DELIVERY_HINTS[self]

    @property
    def label(self) -> str:
        return self.hint.label

    @property
    def nominal_hz(self) -> float:
        return self.hint.nominal_hz

    @classmethod
    def from_value(cls, value: Any, default: "FrequencyTier | None" = None) -> "FrequencyTier":
        """
        Resolve a stored preference value into a tier.

        Matching is case-insensitive and accepts the platform delay names
        (``normal``, ``game``, ``fastest``) and spinner positions (0, 1, 2).
        Unknown values fall back to ``default`` (``FAST`` unless given).
        """
        fallback = default if default is not None else DEFAULT_TIER
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            tiers = list(cls)
            if 0 <= value < len(tiers):
                return tiers[value]
            logger.warning("Unknown frequency tier index %r; using %s", value, fallback.value)
            return fallback

        raw = str(value or "").strip().lower().replace("-", "_")
        raw = _ALIASES.get(raw, raw)
        try:
            return cls(raw)
        except ValueError:
            logger.warning("Unknown frequency tier %r; using %s", value, fallback.value)
            return fallback


DELIVERY_HINTS: Dict[FrequencyTier, DeliveryHint] = {
    FrequencyTier.SLOW: DeliveryHint(
        platform_name="SENSOR_DELAY_NORMAL",
        delay_us=200_000,
        nominal_hz=5.0,
        label="Slow",
    ),
    FrequencyTier.MEDIUM: DeliveryHint(
        platform_name="SENSOR_DELAY_GAME",
        delay_us=20_000,
        nominal_hz=50.0,
        label="Medium",
    ),
    FrequencyTier.FAST: DeliveryHint(
        platform_name="SENSOR_DELAY_FASTEST",
        delay_us=0,
        nominal_hz=200.0,
        label="Fast",
    ),
}

_ALIASES = {
    "normal": "slow",
    "sensor_delay_normal": "slow",
    "game": "medium",
    "sensor_delay_game": "medium",
    "fastest": "fast",
    "sensor_delay_fastest": "fast",
}

DEFAULT_TIER = FrequencyTier.FAST

__all__ = ["DEFAULT_TIER", "DELIVERY_HINTS", "DeliveryHint", "FrequencyTier"]
