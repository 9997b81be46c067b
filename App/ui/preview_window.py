"""Frameless preview of the quantized image."""

from PIL import Image
from PyQt6.QtCore import QPoint, Qt
from PyQt6.QtGui import QImage, QPixmap
from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget


def pil_to_qpixmap(image: Image.Image) -> QPixmap:
    """Convert a PIL image to a QPixmap (RGB888)."""
    rgb = image.convert("RGB")
    width, height = rgb.size
    data = rgb.tobytes("raw", "RGB")
    qimage = QImage(data, width, height, 3 * width, QImage.Format.Format_RGB888)
    # copy() detaches from the Python bytes buffer
    return QPixmap.fromImage(qimage.copy())


class PreviewWindow(QWidget):
    """Borderless window showing the quantized image at 1:1 scale.

    Drag it anywhere with the left mouse button to compare against
    the target canvas.
    """

    def __init__(self, image: Image.Image):
        super().__init__(None)
        self.setWindowFlags(Qt.WindowType.FramelessWindowHint | Qt.WindowType.Tool)
        self.setWindowTitle("Preview")
        self._drag_offset: QPoint | None = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.image_label = QLabel()
        self.image_label.setPixmap(pil_to_qpixmap(image))
        layout.addWidget(self.image_label)

        self.setFixedSize(image.size[0], image.size[1])

    def mousePressEvent(self, a0):
        if a0 is not None and a0.button() == Qt.MouseButton.LeftButton:
            self._drag_offset = a0.globalPosition().toPoint() - self.frameGeometry().topLeft()

    def mouseMoveEvent(self, a0):
        if a0 is not None and self._drag_offset is not None:
            self.move(a0.globalPosition().toPoint() - self._drag_offset)

    def mouseReleaseEvent(self, a0):
        self._drag_offset = None
