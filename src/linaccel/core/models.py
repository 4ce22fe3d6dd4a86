"""Shared dataclasses for LinAccel sessions and samples."""

from __future__ import annotations

import math
from dataclasses import dataclass

NS_PER_SECOND = 1_000_000_000


class NonFiniteSampleError(ValueError):
    """Raised when a sample or timestamp contains NaN or infinity."""


@dataclass(frozen=True)
class SampleEvent:
    """One timestamped linear-acceleration sample (m/s^2)."""

    axes: tuple[float, ...]
    timestamp_ns: int

    def __post_init__(self) -> None:
        if len(self.axes) not in (2, 3):
            raise ValueError(f"expected 2 or 3 axes, got {len(self.axes)}")

    @property
    def x(self) -> float:
        return self.axes[0]

    @property
    def y(self) -> float:
        return self.axes[1]

    @property
    def z(self) -> float:
        return self.axes[2] if len(self.axes) > 2 else 0.0

    @property
    def timestamp_s(self) -> float:
        return self.timestamp_ns / NS_PER_SECOND

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.axes)

    def inverted(self) -> "SampleEvent":
        """Return a copy with every axis negated."""
        return SampleEvent(tuple(-v for v in self.axes), self.timestamp_ns)
