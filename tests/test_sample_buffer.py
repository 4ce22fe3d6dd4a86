import numpy as np
import pytest

from linaccel.core.models import SampleEvent
from linaccel.core.sample_buffer import SampleHistory, calculate_capacity


def _event(i: int) -> SampleEvent:
    return SampleEvent((float(i), -float(i), 0.5), i * 100_000_000)


def test_calculate_capacity_rounds_up() -> None:
    assert calculate_capacity(10.0, 200.0, margin=1.0) == 2000
    assert calculate_capacity(1.0, 0.0) == 1


def test_history_overwrites_oldest() -> None:
    hist = SampleHistory(3)
    for i in range(5):
        hist.append(_event(i))
    assert len(hist) == 3
    times, values = hist.snapshot()
    np.testing.assert_array_equal(times, [200_000_000, 300_000_000, 400_000_000])
    np.testing.assert_array_equal(values[:, 0], [2.0, 3.0, 4.0])
    assert hist.latest_timestamp_ns() == 400_000_000


def test_window_is_relative_to_newest_sample() -> None:
    hist = SampleHistory(100)
    for i in range(20):
        hist.append(_event(i))
    rel, values = hist.window(0.5)
    np.testing.assert_allclose(rel, [-0.5, -0.4, -0.3, -0.2, -0.1, 0.0])
    assert values.shape == (6, 3)
    assert values[-1, 1] == -19.0


def test_empty_history() -> None:
    hist = SampleHistory(4)
    rel, values = hist.window(1.0)
    assert rel.size == 0
    assert values.shape == (0, 3)
    assert hist.latest_timestamp_ns() is None
    hist.append(_event(1))
    hist.clear()
    assert len(hist) == 0


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SampleHistory(0)
