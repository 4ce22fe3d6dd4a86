import math

import numpy as np
import pytest

from linaccel.analysis.gauge import (
    GAUGE_EXTENT,
    GRAVITY_EARTH,
    MAGNITUDE_COMPENSATION,
    GaugeVector,
    arrowhead_segments,
    gauge_frame,
    heading_deg,
    project,
    project_array,
    vector_magnitude,
    vector_tip,
)
from linaccel.core.models import NonFiniteSampleError


def test_project_is_deterministic() -> None:
    assert project(3.3, -7.1) == project(3.3, -7.1)


def test_scale_invariants() -> None:
    assert project(GRAVITY_EARTH, 0.0).x == 0.4
    assert project(0.0, GRAVITY_EARTH).y == 0.4
    assert project(0.0, 0.0) == GaugeVector(0.0, 0.0)
    assert project(-GRAVITY_EARTH, -GRAVITY_EARTH) == GaugeVector(-0.4, -0.4)


def test_each_axis_is_clamped_independently() -> None:
    vec = project(100.0, -2 * GRAVITY_EARTH)
    assert vec.x == 0.4
    assert vec.y == -0.4

    vec = project(-25.0, GRAVITY_EARTH / 2)
    assert vec.x == -0.4
    assert vec.y == pytest.approx(0.2)


def test_custom_full_scale() -> None:
    vec = project(1.0, -4.0, full_scale=2.0)
    assert vec.x == pytest.approx(0.2)
    assert vec.y == -0.4


def test_invalid_inputs() -> None:
    with pytest.raises(ValueError):
        project(1.0, 1.0, full_scale=0.0)
    with pytest.raises(NonFiniteSampleError):
        project(float("nan"), 0.0)
    with pytest.raises(NonFiniteSampleError):
        project(0.0, float("-inf"))


def test_magnitude_compensation_is_reciprocal_of_extent() -> None:
    assert MAGNITUDE_COMPENSATION * GAUGE_EXTENT == pytest.approx(1.0)
    assert vector_magnitude(project(GRAVITY_EARTH, 0.0)) == pytest.approx(1.0)
    assert vector_magnitude(project(GRAVITY_EARTH, GRAVITY_EARTH)) == pytest.approx(math.sqrt(2.0))


def test_heading_follows_shift_then_modulo_then_negate() -> None:
    assert heading_deg(GaugeVector(0.4, 0.0)) == -90.0
    assert heading_deg(GaugeVector(0.0, 0.4)) == pytest.approx(-180.0)
    assert heading_deg(GaugeVector(-0.4, 0.0)) == pytest.approx(-270.0)
    assert heading_deg(GaugeVector(0.0, -0.4)) == pytest.approx(0.0)
    assert heading_deg(GaugeVector(0.4, 0.4)) == pytest.approx(-135.0)
    assert heading_deg(GaugeVector(0.0, 0.0)) == -90.0


def test_heading_range() -> None:
    for deg in range(-179, 181, 7):
        rad = math.radians(deg)
        angle = heading_deg(GaugeVector(0.3 * math.cos(rad), 0.3 * math.sin(rad)))
        assert -360.0 < angle <= 0.0


def test_vector_tip_mirrors_x() -> None:
    assert vector_tip(GaugeVector(0.4, 0.0)) == pytest.approx((0.1, 0.5))
    assert vector_tip(GaugeVector(0.0, 0.4)) == pytest.approx((0.5, 0.9))


def test_arrowhead_segments_for_full_scale_x() -> None:
    (l0, l1), (r0, r1) = arrowhead_segments(GaugeVector(0.4, 0.0))
    assert l0 == pytest.approx((0.1, 0.498), abs=1e-12)
    assert l1 == pytest.approx((0.15, 0.55), abs=1e-12)
    assert r0 == pytest.approx((0.1, 0.502), abs=1e-12)
    assert r1 == pytest.approx((0.15, 0.45), abs=1e-12)


def test_arrowhead_collapses_at_zero_magnitude() -> None:
    (l0, l1), (r0, r1) = arrowhead_segments(GaugeVector(0.0, 0.0))
    assert l1 == pytest.approx((0.5, 0.5))
    assert r1 == pytest.approx((0.5, 0.5))


def test_gauge_frame_bundles_derived_values() -> None:
    frame = gauge_frame(GRAVITY_EARTH, GRAVITY_EARTH)
    assert frame.vector == GaugeVector(0.4, 0.4)
    assert frame.magnitude == pytest.approx(math.sqrt(2.0))
    assert frame.angle_deg == pytest.approx(-135.0)
    assert frame.segments == arrowhead_segments(frame.vector)


def test_project_array_matches_scalar_projection() -> None:
    raw = np.array(
        [
            [0.0, 0.0, 9.8],
            [GRAVITY_EARTH, -GRAVITY_EARTH, 0.0],
            [30.0, -1.5, 0.0],
            [-4.2, 11.0, 1.0],
        ]
    )
    out = project_array(raw)
    assert out.shape == (4, 2)
    for row, (x, y) in zip(raw, out):
        vec = project(row[0], row[1])
        assert x == pytest.approx(vec.x)
        assert y == pytest.approx(vec.y)


def test_project_array_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        project_array(np.zeros(3))
    with pytest.raises(NonFiniteSampleError):
        project_array(np.array([[np.nan, 0.0]]))
