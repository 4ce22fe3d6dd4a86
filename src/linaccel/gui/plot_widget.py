from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QCheckBox, QHBoxLayout, QLabel, QVBoxLayout, QWidget
import pyqtgraph as pg

from ..core.models import SampleEvent
from ..core.sample_buffer import SampleHistory, calculate_capacity

CHANNELS = ("x", "y", "z")
CHANNEL_PENS = {"x": "b", "y": "g", "z": "r"}


class AccelerationPlotWidget(QWidget):
    """
    Rolling plot of the three linear-acceleration axes.

    Samples may be appended from any thread; the plot redraws on its own
    timer from a snapshot of the history buffer.
    """

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        *,
        window_seconds: float = 10.0,
        max_rate_hz: float = 250.0,
        refresh_hz: float = 25.0,
    ) -> None:
        super().__init__(parent)
        self._window_seconds = float(window_seconds)
        self._history = SampleHistory(calculate_capacity(self._window_seconds, max_rate_hz))

        layout = QVBoxLayout(self)

        channel_layout = QHBoxLayout()
        channel_layout.addWidget(QLabel("Axes:"))
        self.channel_checks: dict[str, QCheckBox] = {}
        for ch in CHANNELS:
            cb = QCheckBox(ch)
            cb.setChecked(True)
            cb.stateChanged.connect(self._on_channel_visibility_changed)
            self.channel_checks[ch] = cb
            channel_layout.addWidget(cb)
        channel_layout.addStretch(1)
        layout.addLayout(channel_layout)

        self.plot_widget = pg.PlotWidget()
        self.plot_widget.showGrid(x=True, y=True, alpha=0.3)
        self.plot_widget.setLabel("bottom", "Time", units="s")
        self.plot_widget.setLabel("left", "Acceleration", units="m/s²")
        self.plot_widget.setXRange(-self._window_seconds, 0.0, padding=0.0)
        self.plot_widget.addLegend()
        layout.addWidget(self.plot_widget)

        self._curves: dict[str, pg.PlotDataItem] = {}
        for ch in CHANNELS:
            self._curves[ch] = self.plot_widget.plot([], [], pen=CHANNEL_PENS[ch], name=ch)

        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(round(1000.0 / max(0.5, refresh_hz)))))
        self._timer.timeout.connect(self.refresh)
        self._timer.start()

    def append(self, event: SampleEvent) -> None:
        self._history.append(event)

    def clear(self) -> None:
        self._history.clear()
        for curve in self._curves.values():
            curve.setData([], [])

    def refresh(self) -> None:
        times, values = self._history.window(self._window_seconds)
        if times.size == 0:
            return
        for idx, ch in enumerate(CHANNELS):
            self._curves[ch].setData(times, values[:, idx])

    def _on_channel_visibility_changed(self) -> None:
        for ch, cb in self.channel_checks.items():
            self._curves[ch].setVisible(cb.isChecked())
