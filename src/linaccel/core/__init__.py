"""Core streaming pieces: sample models, sensor feeds, and sessions.

This package sits between the sample sources (simulated sensor, JSONL
streams) and the front ends. Import feeds and sessions from their modules
(:mod:`feed`, :mod:`stream_reader`, :mod:`session`); only the shared models
are re-exported here.
"""

from .models import NS_PER_SECOND, NonFiniteSampleError, SampleEvent

__all__ = ["NS_PER_SECOND", "NonFiniteSampleError", "SampleEvent"]
