"""Numeric helpers for the live gauge (rate estimation and vector math).

Modules here stay free of Qt and I/O dependencies so they can be reused in
command-line tools, automated tests, or GUI widgets alike:
- :mod:`rate` turns event timestamps into a smoothed delivery rate.
- :mod:`gauge` turns raw (x, y) acceleration into bounded gauge geometry.
"""

from .gauge import GaugeFrame, GaugeVector, gauge_frame, project
from .rate import RateEstimate, SampleRateEstimator, format_rate_hz

__all__ = [
    "GaugeFrame",
    "GaugeVector",
    "RateEstimate",
    "SampleRateEstimator",
    "format_rate_hz",
    "gauge_frame",
    "project",
]
