from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QPointF, QRectF, QSize, Qt
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPaintEvent, QPen, QPixmap, QResizeEvent
from PySide6.QtWidgets import QSizePolicy, QWidget

from ..analysis.gauge import GaugeFrame, gauge_frame, vector_tip

logger = logging.getLogger(__name__)

PREFERRED_SIZE = 300
STROKE_WIDTH = 0.01


def _pen(color: QColor | Qt.GlobalColor) -> QPen:
    pen = QPen(QColor(color))
    pen.setWidthF(STROKE_WIDTH)
    pen.setCapStyle(Qt.RoundCap)
    return pen


class AccelerationVectorView(QWidget):
    """
    Square gauge showing the latest 2-D acceleration vector.

    All drawing happens in unit-square coordinates scaled to the widget
    width. The axes are painted once per size change into a cached pixmap;
    each repaint only draws the component lines and the vector.
    """

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setAttribute(Qt.WA_OpaquePaintEvent, True)

        self._rim = QRectF(0.1, 0.1, 0.8, 0.8)
        self._background: Optional[QPixmap] = None
        self._frame: Optional[GaugeFrame] = None

        self._axis_pen = _pen(Qt.white)
        self._vector_pen = _pen(Qt.red)
        self._x_length_pen = _pen(Qt.blue)
        self._y_length_pen = _pen(Qt.green)

    # ------------------------------------------------------------------ API
    def update_frame(self, frame: Optional[GaugeFrame]) -> None:
        """Show a precomputed frame (``None`` clears the vector)."""
        self._frame = frame
        self.update()

    def update_point(self, x: float, y: float) -> None:
        """Project a raw (x, y) reading in m/s^2 and show it."""
        self.update_frame(gauge_frame(x, y))

    def frame(self) -> Optional[GaugeFrame]:
        return self._frame

    # --------------------------------------------------------------- sizing
    def sizeHint(self) -> QSize:  # noqa: N802 - Qt API
        return QSize(PREFERRED_SIZE, PREFERRED_SIZE)

    def hasHeightForWidth(self) -> bool:  # noqa: N802 - Qt API
        return True

    def heightForWidth(self, width: int) -> int:  # noqa: N802 - Qt API
        return width

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802 - Qt API
        logger.debug("Size changed to %dx%d", event.size().width(), event.size().height())
        self._regenerate_background()
        super().resizeEvent(event)

    # -------------------------------------------------------------- drawing
    def _scale(self) -> float:
        return float(min(self.width(), self.height()))

    def _regenerate_background(self) -> None:
        if self.width() <= 0 or self.height() <= 0:
            self._background = None
            return
        pixmap = QPixmap(self.size())
        pixmap.fill(Qt.black)
        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.Antialiasing, True)
        scale = self._scale()
        painter.scale(scale, scale)
        self._draw_axes(painter)
        painter.end()
        self._background = pixmap

    def _draw_axes(self, painter: QPainter) -> None:
        rim = self._rim
        cx = rim.center().x()
        cy = rim.center().y()
        painter.setPen(self._axis_pen)
        painter.drawLine(QPointF(cx, rim.top()), QPointF(cx, rim.bottom()))
        painter.drawLine(QPointF(rim.left(), cy), QPointF(rim.right(), cy))

        arrows = QPainterPath()
        arrows.moveTo(cx - 0.002, rim.top())
        arrows.lineTo(cx + 0.05, rim.top() + 0.05)
        arrows.moveTo(cx + 0.002, rim.top())
        arrows.lineTo(cx - 0.05, rim.top() + 0.05)
        arrows.moveTo(rim.right(), cy + 0.002)
        arrows.lineTo(rim.right() - 0.05, cy - 0.05)
        arrows.moveTo(rim.right(), cy - 0.002)
        arrows.lineTo(rim.right() - 0.05, cy + 0.05)
        painter.drawPath(arrows)

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802 - Qt API
        painter = QPainter(self)
        if self._background is None:
            self._regenerate_background()
        if self._background is None:
            logger.warning("Background not created")
            painter.fillRect(self.rect(), Qt.black)
        else:
            painter.drawPixmap(0, 0, self._background)

        frame = self._frame
        if frame is None:
            painter.end()
            return

        painter.setRenderHint(QPainter.Antialiasing, True)
        scale = self._scale()
        painter.scale(scale, scale)

        center = (self._rim.center().x(), self._rim.center().y())
        tip_x, tip_y = vector_tip(frame.vector, center)
        origin = QPointF(*center)

        painter.setPen(self._y_length_pen)
        painter.drawLine(origin, QPointF(center[0], tip_y))
        painter.setPen(self._x_length_pen)
        painter.drawLine(origin, QPointF(tip_x, center[1]))

        painter.setPen(self._vector_pen)
        painter.drawLine(origin, QPointF(tip_x, tip_y))
        for start, end in frame.segments:
            painter.drawLine(QPointF(*start), QPointF(*end))
        painter.end()
