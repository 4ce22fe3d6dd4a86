from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QTimer, Signal
from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QFormLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from ..config.sampling import FrequencyTier
from ..core.session import AccelerationSession

logger = logging.getLogger(__name__)


class SensorSettingsDialog(QDialog):
    """
    Pick the sensor frequency tier and watch the measured delivery rate.

    The rate label is refreshed on a timer from the session's estimator;
    changing the tier re-registers the feed and restarts the estimate.
    """

    tierChanged = Signal(object)

    def __init__(
        self,
        session: AccelerationSession,
        parent: Optional[QWidget] = None,
        refresh_ms: int = 100,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Sensor Frequency")
        self._session = session

        self._combo = QComboBox(self)
        for tier in FrequencyTier:
            self._combo.addItem(tier.label, tier.value)
        self._rate_label = QLabel("0", self)
        self._period_label = QLabel("-", self)

        form = QFormLayout()
        form.addRow("Frequency:", self._combo)
        form.addRow("Sensor frequency (Hz):", self._rate_label)
        form.addRow("Sample period (ms):", self._period_label)

        accept = QPushButton("Accept", self)
        accept.clicked.connect(self.accept)

        layout = QVBoxLayout(self)
        layout.addLayout(form)
        layout.addWidget(accept)

        self._timer = QTimer(self)
        self._timer.setInterval(max(10, int(refresh_ms)))
        self._timer.timeout.connect(self._refresh_rate)

        self._sync_combo()
        self._combo.currentIndexChanged.connect(self._on_tier_selected)

    def _sync_combo(self) -> None:
        idx = self._combo.findData(self._session.tier.value)
        self._combo.blockSignals(True)
        self._combo.setCurrentIndex(max(0, idx))
        self._combo.blockSignals(False)

    def showEvent(self, event) -> None:  # noqa: N802 - Qt API
        self._sync_combo()
        self._refresh_rate()
        self._timer.start()
        super().showEvent(event)

    def hideEvent(self, event) -> None:  # noqa: N802 - Qt API
        self._timer.stop()
        super().hideEvent(event)

    def _on_tier_selected(self, index: int) -> None:
        value = self._combo.itemData(index)
        if value is None:
            return
        tier = FrequencyTier.from_value(value)
        self._session.set_tier(tier)
        self._refresh_rate()
        self.tierChanged.emit(tier)

    def _refresh_rate(self) -> None:
        estimate = self._session.rate_estimate()
        self._rate_label.setText(self._session.rate_text())
        if estimate.period_s > 0:
            self._period_label.setText(f"{estimate.period_s * 1000.0:.2f}")
        else:
            self._period_label.setText("-")
