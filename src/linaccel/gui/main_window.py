from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot
from PySide6.QtGui import QAction, QCloseEvent
from PySide6.QtWidgets import QLabel, QMainWindow, QMessageBox, QTabWidget, QWidget

from ..analysis.gauge import GaugeFrame
from ..config.runtime import LinAccelConfig
from ..core.models import SampleEvent
from ..core.session import AccelerationSession
from .plot_widget import AccelerationPlotWidget
from .settings_dialog import SensorSettingsDialog
from .vector_view import AccelerationVectorView

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "The gauge shows the device's linear acceleration (gravity removed) in "
    "the x/y plane. Each axis is bounded to one g; the arrow grows with the "
    "vector's magnitude.\n\n"
    "Use Sensor Settings to change how often the sensor delivers samples and "
    "to see the measured delivery rate."
)


class SampleBridge(QObject):
    """Moves samples from the feed thread onto the GUI thread."""

    sample_received = Signal(object)

    def __call__(self, event: SampleEvent, frame: GaugeFrame) -> None:
        self.sample_received.emit(event)


class MainWindow(QMainWindow):
    """Gauge and plot tabs around one :class:`AccelerationSession`."""

    def __init__(
        self,
        session: AccelerationSession,
        config: LinAccelConfig | None = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Linear Acceleration")
        self._session = session
        self._config = (config or LinAccelConfig()).sanitized()
        self._settings_dialog: Optional[SensorSettingsDialog] = None

        self.vector_view = AccelerationVectorView(self)
        self.plot_tab = AccelerationPlotWidget(
            self,
            window_seconds=self._config.plot_window_seconds,
        )
        tabs = QTabWidget(self)
        tabs.addTab(self.vector_view, "Vector")
        tabs.addTab(self.plot_tab, "Plot")
        self.setCentralWidget(tabs)

        self._rate_label = QLabel(self)
        self.statusBar().addPermanentWidget(self._rate_label)

        self._build_menu()

        self._bridge = SampleBridge(self)
        self._bridge.sample_received.connect(self._on_sample)
        self._session.add_frame_listener(self._bridge)

        # The gauge polls the session's latest frame instead of repainting
        # per sample; fast tiers deliver far more often than the screen refreshes.
        self._gauge_timer = QTimer(self)
        self._gauge_timer.setInterval(max(1, int(round(1000.0 / self._config.gauge_refresh_hz))))
        self._gauge_timer.timeout.connect(self._refresh_gauge)
        self._gauge_timer.start()

        self._rate_timer = QTimer(self)
        self._rate_timer.setInterval(self._config.rate_refresh_ms)
        self._rate_timer.timeout.connect(self._refresh_rate)
        self._rate_timer.start()

    def _build_menu(self) -> None:
        menu = self.menuBar().addMenu("&Settings")

        settings_action = QAction("Sensor Settings…", self)
        settings_action.triggered.connect(self.show_sensor_settings)
        menu.addAction(settings_action)

        self._invert_action = QAction("Invert Axes", self)
        self._invert_action.setCheckable(True)
        self._invert_action.setChecked(self._session.prefs.invert_axes)
        self._invert_action.toggled.connect(self._session.set_invert_axes)
        menu.addAction(self._invert_action)

        help_action = QAction("Help", self)
        help_action.triggered.connect(self._show_help)
        self.menuBar().addAction(help_action)

    # ---------------------------------------------------------------- slots
    @Slot(object)
    def _on_sample(self, event: SampleEvent) -> None:
        self.plot_tab.append(event)

    def _refresh_gauge(self) -> None:
        frame = self._session.latest_frame()
        if frame is not None and frame is not self.vector_view.frame():
            self.vector_view.update_frame(frame)

    def _refresh_rate(self) -> None:
        self._rate_label.setText(
            f"{self._session.tier.label}: {self._session.rate_text()} Hz"
        )

    def show_sensor_settings(self) -> None:
        if self._settings_dialog is None:
            self._settings_dialog = SensorSettingsDialog(
                self._session,
                self,
                refresh_ms=self._config.rate_refresh_ms,
            )
            self._settings_dialog.tierChanged.connect(self._on_tier_changed)
        self._settings_dialog.show()
        self._settings_dialog.raise_()

    def _on_tier_changed(self, tier) -> None:
        self.plot_tab.clear()
        logger.info("Tier changed from settings dialog: %s", tier.value)

    def _show_help(self) -> None:
        QMessageBox.information(self, "Help", HELP_TEXT)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt API
        self._gauge_timer.stop()
        self._rate_timer.stop()
        self._session.remove_frame_listener(self._bridge)
        super().closeEvent(event)
