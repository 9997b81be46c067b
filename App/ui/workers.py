"""Background threads for image processing and drawing."""

from pathlib import Path

from PyQt6.QtCore import QThread, pyqtSignal

from drawing_executor import CancellationToken, DrawingExecutor
from image_processing import ImageProcessor
from models import DrawingArea, DrawingConfig, StrokePlan


class ProcessingThread(QThread):
    """Background thread for decode, quantize and stroke compilation.

    AIDEV-NOTE: Results go out on result_ready, not QThread.finished.
    The built-in finished signal is left for releasing the thread object
    once run() has fully returned.
    """

    result_ready = pyqtSignal(object)  # ProcessedImage
    error = pyqtSignal(str)  # Error message
    progress = pyqtSignal(int)  # Progress percentage

    def __init__(
        self,
        file_path: str | Path,
        area: DrawingArea,
        config: DrawingConfig,
    ):
        super().__init__()
        self.file_path = file_path
        self.area = area
        self.config = config

    def run(self):
        """Execute image processing in background."""
        try:
            processor = ImageProcessor(self.config)
            self.progress.emit(10)
            result = processor.process(self.file_path, self.area)
            self.progress.emit(100)
            self.result_ready.emit(result)
        except Exception as e:
            self.error.emit(str(e))


class DrawingThread(QThread):
    """Runs a drawing job off the UI thread.

    AIDEV-NOTE: Each job owns a fresh CancellationToken. The Stop button
    and the global cancel key both set the same token.
    """

    result_ready = pyqtSignal(object)  # DrawingResult
    error = pyqtSignal(str)

    def __init__(
        self,
        plan: StrokePlan,
        palette: "list[tuple[int, int, int]]",
        color_coordinates: "dict[tuple[int, int, int], tuple[float, float]]",
        config: DrawingConfig,
    ):
        super().__init__()
        self.plan = plan
        self.palette = palette
        self.executor = DrawingExecutor.from_config(config, color_coordinates)
        self.token = CancellationToken()

    def run(self):
        try:
            result = self.executor.draw(self.plan, self.palette, self.token)
            self.result_ready.emit(result)
        except Exception as e:
            self.error.emit(str(e))

    def stop(self):
        self.token.cancel()
