"""Full-screen overlay for picking the drawing area and palette swatches."""

import sys

from PyQt6.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QGuiApplication, QPainter, QPen
from PyQt6.QtWidgets import QWidget

from image_processing.utils import area_from_corners, scale_point
from models import MAX_PALETTE_SLOTS, ViewStatus
from ui.styles import FONTS, OverlayColors


class SelectionOverlay(QWidget):
    """Translucent always-on-top layer over the primary screen.

    In AREA mode a left-button drag defines the drawing rectangle. In
    PALETTE mode each left click records one swatch position, in palette
    slot order. A right click leaves either mode.

    Positions are painted in Qt logical coordinates and emitted in the
    device pixels the pointer backend expects.
    """

    area_selected = pyqtSignal(object)  # DrawingArea
    palette_selected = pyqtSignal(object)  # list[tuple[float, float]]
    cancelled = pyqtSignal()

    def __init__(self, mode: ViewStatus, max_slots: int = MAX_PALETTE_SLOTS):
        super().__init__(None)
        if mode is ViewStatus.DEFAULT:
            raise ValueError("Overlay needs AREA or PALETTE mode")
        self.mode = mode
        self.max_slots = max_slots

        self.start_pos: QPointF | None = None
        self.end_pos: QPointF | None = None
        self.positions: "list[tuple[float, float]]" = []

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setCursor(Qt.CursorShape.CrossCursor)

        self.pixel_ratio = 1.0
        screen = QGuiApplication.primaryScreen()
        if screen is not None:
            self.setGeometry(screen.geometry())
            if sys.platform != "darwin":
                self.pixel_ratio = screen.devicePixelRatio()

    # === Mouse Handling ===

    def mousePressEvent(self, a0):
        if a0 is None:
            return
        if a0.button() == Qt.MouseButton.RightButton:
            if self.mode is ViewStatus.PALETTE:
                self._finish_palette()
            else:
                self._cancel()
            return
        if a0.button() != Qt.MouseButton.LeftButton:
            return

        pos = a0.globalPosition()
        if self.mode is ViewStatus.AREA:
            self.start_pos = pos
            self.end_pos = None
        else:
            self.positions.append((pos.x(), pos.y()))
            if len(self.positions) >= self.max_slots:
                self._finish_palette()
                return
        self.update()

    def mouseMoveEvent(self, a0):
        if a0 is None or self.mode is not ViewStatus.AREA or self.start_pos is None:
            return
        if a0.buttons() & Qt.MouseButton.LeftButton:
            self.end_pos = a0.globalPosition()
            self.update()

    def mouseReleaseEvent(self, a0):
        if a0 is None or self.mode is not ViewStatus.AREA:
            return
        if a0.button() != Qt.MouseButton.LeftButton or self.start_pos is None:
            return
        if self.end_pos is None:
            return
        try:
            area = area_from_corners(
                scale_point((self.start_pos.x(), self.start_pos.y()), self.pixel_ratio),
                scale_point((self.end_pos.x(), self.end_pos.y()), self.pixel_ratio),
            )
        except ValueError:
            # Too small, let the user drag again
            self.start_pos = self.end_pos = None
            self.update()
            return
        self.close()
        self.area_selected.emit(area)

    def keyPressEvent(self, a0):
        if a0 is not None and a0.key() == Qt.Key.Key_Escape:
            self._cancel()

    def _finish_palette(self):
        self.close()
        self.palette_selected.emit(
            [scale_point(pos, self.pixel_ratio) for pos in self.positions]
        )

    def _cancel(self):
        self.close()
        self.cancelled.emit()

    # === Painting ===

    def paintEvent(self, a0):
        painter = QPainter(self)
        bounds = QRectF(self.rect())

        if self.mode is ViewStatus.AREA:
            self._paint_area(painter, bounds)
        else:
            self._paint_palette(painter, bounds)
        painter.end()

    def _paint_area(self, painter: QPainter, bounds: QRectF):
        dim = OverlayColors.AREA_DIM if self.start_pos is None else OverlayColors.AREA_DIM_SELECTING
        painter.fillRect(bounds, dim)
        painter.setPen(QPen(OverlayColors.SCREEN_BORDER, 1))
        painter.drawRect(bounds.adjusted(0, 0, -1, -1))

        if self.start_pos is None or self.end_pos is None:
            return

        rect = QRectF(
            self.mapFromGlobal(self.start_pos),
            self.mapFromGlobal(self.end_pos),
        ).normalized()
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
        painter.fillRect(rect, Qt.GlobalColor.transparent)
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)
        painter.setPen(QPen(OverlayColors.SELECTION_BORDER, 1))
        painter.drawRect(rect)

    def _paint_palette(self, painter: QPainter, bounds: QRectF):
        painter.fillRect(bounds, OverlayColors.PALETTE_DIM)
        painter.setFont(FONTS.SWATCH_LABEL)
        painter.setPen(OverlayColors.SWATCH_LABEL)
        metrics = painter.fontMetrics()

        for slot, (x, y) in enumerate(self.positions, start=1):
            label = str(slot)
            local = self.mapFromGlobal(QPointF(x, y))
            width = metrics.horizontalAdvance(label)
            painter.drawText(
                QPointF(local.x() - width / 2, local.y() + metrics.ascent() / 2),
                label,
            )
