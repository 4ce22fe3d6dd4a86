"""Vector gauge math: raw (x, y) acceleration to bounded gauge geometry.

Gauge space is the unit square used by the renderer, with the origin of the
vector at ``(0.5, 0.5)``. A full-scale reading reaches :data:`GAUGE_EXTENT`
from the centre, which leaves a margin for the arrowhead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..core.models import NonFiniteSampleError

# Standard gravity (m/s^2), the reference maximum for one axis.
GRAVITY_EARTH = 9.80665

# Half of the drawable axis length.
GAUGE_EXTENT = 0.4

# Must stay the reciprocal of GAUGE_EXTENT so a full-scale vector has magnitude 1.
MAGNITUDE_COMPENSATION = 1.0 / GAUGE_EXTENT

ARROW_ARM_LENGTH = 0.05
ARROW_TIP_OFFSET = 0.002

Point = Tuple[float, float]
Segment = Tuple[Point, Point]


@dataclass(frozen=True)
class GaugeVector:
    """Normalized, clamped gauge coordinates, each axis in [-0.4, 0.4]."""

    x: float
    y: float


@dataclass(frozen=True)
class GaugeFrame:
    """Everything a renderer needs to draw one sample."""

    vector: GaugeVector
    magnitude: float
    angle_deg: float
    segments: tuple[Segment, Segment]


def _clamp(value: float, limit: float) -> float:
    if value > limit:
        return limit
    if value < -limit:
        return -limit
    return value


def project(raw_x: float, raw_y: float, full_scale: float = GRAVITY_EARTH) -> GaugeVector:
    """
    Map a raw acceleration sample onto the gauge.

    Each axis is clamped to ``[-full_scale, full_scale]``, normalized to
    ``[-1, 1]`` and scaled by :data:`GAUGE_EXTENT`.
    """
    if full_scale <= 0:
        raise ValueError(f"full_scale must be positive, got {full_scale}")
    if not (math.isfinite(raw_x) and math.isfinite(raw_y)):
        raise NonFiniteSampleError(f"non-finite sample ({raw_x!r}, {raw_y!r})")

    x = (_clamp(raw_x, full_scale) / full_scale) * GAUGE_EXTENT
    y = (_clamp(raw_y, full_scale) / full_scale) * GAUGE_EXTENT
    return GaugeVector(x, y)


def project_array(samples: np.ndarray, full_scale: float = GRAVITY_EARTH) -> np.ndarray:
    """
    Vectorized :func:`project` for an ``(N, 2)`` array of raw (x, y) samples.

    Extra columns (e.g. z) are ignored. Returns an ``(N, 2)`` float64 array.
    """
    if full_scale <= 0:
        raise ValueError(f"full_scale must be positive, got {full_scale}")
    arr = np.asarray(samples, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] < 2:
        raise ValueError(f"expected an (N, 2) array, got shape {arr.shape}")
    xy = arr[:, :2]
    if not np.all(np.isfinite(xy)):
        raise NonFiniteSampleError("samples contain NaN or infinity")
    return (np.clip(xy, -full_scale, full_scale) / full_scale) * GAUGE_EXTENT


def vector_magnitude(vec: GaugeVector) -> float:
    """Length of the vector rescaled so a full-scale single axis is 1."""
    return math.sqrt(vec.x ** 2 + vec.y ** 2) * MAGNITUDE_COMPENSATION


def heading_deg(vec: GaugeVector) -> float:
    """
    Screen rotation for the arrowhead, in degrees.

    ``atan2`` is shifted by 450 (a quarter turn so 0 points along screen +Y,
    plus a full turn so the value is positive) and reduced modulo 360 before
    the sign flip to clockwise. The result lies in ``(-360, 0]``.
    """
    return -((math.degrees(math.atan2(vec.y, vec.x)) + 450.0) % 360.0)


def _rotate(point: Point, pivot: Point, angle_deg: float) -> Point:
    # y grows downwards on screen, so a positive angle turns clockwise
    theta = math.radians(angle_deg)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    dx = point[0] - pivot[0]
    dy = point[1] - pivot[1]
    return (
        pivot[0] + dx * cos_t - dy * sin_t,
        pivot[1] + dx * sin_t + dy * cos_t,
    )


def vector_tip(vec: GaugeVector, center: Point = (0.5, 0.5)) -> Point:
    """Screen position of the vector's head (x is mirrored, y grows down)."""
    return center[0] - vec.x, center[1] + vec.y


def arrowhead_segments(
    vec: GaugeVector,
    center: Point = (0.5, 0.5),
    *,
    magnitude: float | None = None,
    angle_deg: float | None = None,
) -> tuple[Segment, Segment]:
    """
    Return the two arrowhead strokes in unit-square screen coordinates.

    The strokes are laid out pointing along screen +Y from the tip, sized by
    the compensated magnitude, then rotated about the tip by
    :func:`heading_deg`.
    """
    if magnitude is None:
        magnitude = vector_magnitude(vec)
    if angle_deg is None:
        angle_deg = heading_deg(vec)

    tip = vector_tip(vec, center)
    arm = ARROW_ARM_LENGTH * magnitude
    tx, ty = tip

    left: Segment = ((tx + ARROW_TIP_OFFSET, ty), (tx - arm, ty + arm))
    right: Segment = ((tx - ARROW_TIP_OFFSET, ty), (tx + arm, ty + arm))

    return (
        (_rotate(left[0], tip, angle_deg), _rotate(left[1], tip, angle_deg)),
        (_rotate(right[0], tip, angle_deg), _rotate(right[1], tip, angle_deg)),
    )


def gauge_frame(raw_x: float, raw_y: float, full_scale: float = GRAVITY_EARTH) -> GaugeFrame:
    """Project a raw sample and derive magnitude, heading and arrowhead."""
    vec = project(raw_x, raw_y, full_scale)
    magnitude = vector_magnitude(vec)
    angle = heading_deg(vec)
    return GaugeFrame(
        vector=vec,
        magnitude=magnitude,
        angle_deg=angle,
        segments=arrowhead_segments(vec, magnitude=magnitude, angle_deg=angle),
    )


__all__ = [
    "GAUGE_EXTENT",
    "GRAVITY_EARTH",
    "MAGNITUDE_COMPENSATION",
    "GaugeFrame",
    "GaugeVector",
    "arrowhead_segments",
    "gauge_frame",
    "heading_deg",
    "project",
    "project_array",
    "vector_magnitude",
    "vector_tip",
]
