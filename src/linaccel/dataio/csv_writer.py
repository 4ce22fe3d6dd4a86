"""CSV writing helpers for recorded acceleration samples."""

import csv
import threading
from pathlib import Path
from typing import Any, Iterable, List, Sequence

from ..core.models import SampleEvent

SAMPLE_LOG_HEADERS = ("timestamp_ns", "x", "y", "z")


def write_rows(path: Path, headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
    """
    Write a header row and all data rows to a CSV file.

    Directories are created as needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(headers)
        writer.writerows(rows)


def write_sample_log(path: Path, events: Iterable[SampleEvent]) -> None:
    """Write samples as ``timestamp_ns,x,y,z`` rows (z is 0 for 2-axis samples)."""
    rows = ((e.timestamp_ns, e.x, e.y, e.z) for e in events)
    write_rows(Path(path), SAMPLE_LOG_HEADERS, rows)


class SampleRecorder:
    """Collects samples from a delivery thread for a later :meth:`save`."""

    def __init__(self) -> None:
        self._events: List[SampleEvent] = []
        self._lock = threading.Lock()

    def __call__(self, event: SampleEvent, *_: Any) -> None:
        with self._lock:
            self._events.append(event)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def events(self) -> List[SampleEvent]:
        with self._lock:
            return list(self._events)

    def save(self, path: Path) -> int:
        events = self.events()
        write_sample_log(Path(path), events)
        return len(events)
