"""Utilities for loading recorded CSV logs and replaying them offline."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence
import io
import logging

import numpy as np

from ..analysis.gauge import GRAVITY_EARTH, MAGNITUDE_COMPENSATION, project_array
from ..analysis.rate import SampleRateEstimator
from ..core.models import NS_PER_SECOND

logger = logging.getLogger(__name__)


def _looks_numeric_csv_line(line: str) -> bool:
    """Heuristically decide if a CSV line is numeric-only (no header)."""
    stripped = line.strip()
    if not stripped:
        return False
    tokens = [t for t in stripped.split(",") if t]
    if not tokens:
        return False
    try:
        for t in tokens:
            float(t)
        return True
    except ValueError:
        return False


def load_csv(path: Path) -> np.ndarray:
    """
    Load a CSV file containing numeric data.

    The file may optionally include a single header row, which will be
    skipped automatically.
    """
    with path.open("r", encoding="utf-8") as f:
        first_line = f.readline()
        rest = f.read()

    # Decide if the first line is header or data
    if _looks_numeric_csv_line(first_line):
        buffer = io.StringIO(first_line + rest)
    else:
        buffer = io.StringIO(rest)

    return np.loadtxt(buffer, delimiter=",", ndmin=2)


def chunk_array(array: np.ndarray, chunk_size: int) -> Iterable[np.ndarray]:
    """Yield fixed-size chunks from an array."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be a positive integer, got {chunk_size}")

    total = array.shape[0]
    for start in range(0, total, chunk_size):
        yield array[start : start + chunk_size]


@dataclass
class SampleLog:
    """Recorded samples: ``timestamps_ns`` (N,) int64 and ``axes`` (N, 2|3)."""

    timestamps_ns: np.ndarray
    axes: np.ndarray

    def __len__(self) -> int:
        return int(self.timestamps_ns.shape[0])

    @property
    def duration_s(self) -> float:
        if len(self) < 2:
            return 0.0
        return float(self.timestamps_ns[-1] - self.timestamps_ns[0]) / NS_PER_SECOND


def load_sample_log(path: Path) -> SampleLog:
    """
    Load a ``timestamp_ns,x,y[,z]`` log as written by
    :func:`~linaccel.dataio.csv_writer.write_sample_log`.
    """
    data = load_csv(Path(path))
    if data.size == 0:
        return SampleLog(np.empty(0, dtype=np.int64), np.empty((0, 3), dtype=np.float64))
    if data.shape[1] < 3:
        raise ValueError(f"{path}: expected at least 3 columns (timestamp_ns, x, y), got {data.shape[1]}")
    timestamps = data[:, 0].astype(np.int64)
    axes = data[:, 1:4].astype(np.float64)
    return SampleLog(timestamps, axes)


def merge_logs(paths: Sequence[Path]) -> SampleLog:
    """Load multiple sample logs and concatenate them in time order."""
    logs: List[SampleLog] = [load_sample_log(path) for path in paths]
    if not logs:
        return SampleLog(np.empty(0, dtype=np.int64), np.empty((0, 3), dtype=np.float64))
    width = min(log.axes.shape[1] for log in logs)
    timestamps = np.concatenate([log.timestamps_ns for log in logs])
    axes = np.concatenate([log.axes[:, :width] for log in logs], axis=0)
    order = np.argsort(timestamps, kind="stable")
    return SampleLog(timestamps[order], axes[order])


@dataclass
class ReplaySummary:
    sample_count: int
    duration_s: float
    rate_hz: float
    period_s: float
    peak_magnitude: float
    clamped_fraction: float


def replay_log(
    log: SampleLog,
    *,
    estimator: Optional[SampleRateEstimator] = None,
    full_scale: float = GRAVITY_EARTH,
) -> ReplaySummary:
    """
    Run a recorded log through the rate estimator and the gauge transform.

    The estimator sees every timestamp in order, exactly as a live session
    would. Gauge statistics use the vectorized projection.
    """
    est = estimator or SampleRateEstimator()
    for ts in log.timestamps_ns:
        est.on_event_ns(int(ts))
    snap = est.snapshot()

    if len(log) == 0:
        peak = 0.0
        clamped = 0.0
    else:
        gauge = project_array(log.axes, full_scale)
        magnitudes = np.hypot(gauge[:, 0], gauge[:, 1]) * MAGNITUDE_COMPENSATION
        peak = float(magnitudes.max())
        over = np.any(np.abs(log.axes[:, :2]) > full_scale, axis=1)
        clamped = float(np.count_nonzero(over)) / len(log)

    logger.debug("Replayed %d samples: %.2f Hz", len(log), snap.hz)
    return ReplaySummary(
        sample_count=len(log),
        duration_s=log.duration_s,
        rate_hz=snap.hz,
        period_s=snap.period_s,
        peak_magnitude=peak,
        clamped_fraction=clamped,
    )
