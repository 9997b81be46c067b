"""Main application window for the Drawing Bot."""

from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QCheckBox,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from config_manager import ConfigManager
from coordinate_store import load_positions, save_positions
from image_processing import ImageProcessor, build_color_coordinates
from models import (
    CoordinateFileError,
    DrawingArea,
    DrawingConfigError,
    DrawingResult,
    ProcessedImage,
    ViewStatus,
)
from ui.console_panel import ConsolePanel
from ui.overlay import SelectionOverlay
from ui.preview_window import PreviewWindow
from ui.styles import FONTS, SIZES, status_stylesheet
from ui.workers import DrawingThread, ProcessingThread


class DrawingBotWindow(QMainWindow):
    """Main window: pick an area, load an image, pick swatches, draw."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Drawing Bot")
        self.resize(*SIZES.WINDOW_DEFAULT)

        # Application state
        self.config_manager = ConfigManager()
        self.config = self.config_manager.load()
        self.view_status = ViewStatus.DEFAULT
        self.area: Optional[DrawingArea] = None
        self.processed: Optional[ProcessedImage] = None
        self.colors_pos: "list[tuple[float, float]]" = []

        self.overlay: Optional[SelectionOverlay] = None
        self.preview_window: Optional[PreviewWindow] = None
        self.processing_thread: Optional[ProcessingThread] = None
        self.drawing_thread: Optional[DrawingThread] = None

        self._setup_ui()
        self._connect_signals()
        self._load_saved_positions()
        self._update_buttons()

    def _setup_ui(self):
        """Initialize the user interface."""
        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setSpacing(10)

        self.area_btn = QPushButton("Select area")
        self.load_btn = QPushButton("Load Image")
        self.palette_btn = QPushButton("Select palette")
        self.draw_btn = QPushButton("Draw image")
        self.stop_btn = QPushButton("Stop")
        self.stop_btn.setToolTip(
            f"Stop drawing (or press '{self.config.cancel_key}' anywhere)"
        )
        for btn in (
            self.area_btn,
            self.load_btn,
            self.palette_btn,
            self.draw_btn,
            self.stop_btn,
        ):
            layout.addWidget(btn)

        self.dither_check = QCheckBox("Dither")
        self.dither_check.setChecked(self.config.dithering)
        layout.addWidget(self.dither_check)

        # Pixel interval
        interval_layout = QHBoxLayout()
        interval_layout.addWidget(QLabel("Pixel interval:"))
        self.interval_slider = QSlider(Qt.Orientation.Horizontal)
        self.interval_slider.setRange(SIZES.INTERVAL_MIN, SIZES.INTERVAL_MAX)
        self.interval_slider.setValue(
            min(max(self.config.pixel_interval, SIZES.INTERVAL_MIN), SIZES.INTERVAL_MAX)
        )
        self.interval_slider.setTickPosition(QSlider.TickPosition.TicksBelow)
        self.interval_slider.setToolTip("Larger values draw fewer, sparser strokes")
        interval_layout.addWidget(self.interval_slider)
        self.interval_label = QLabel(str(self.interval_slider.value()))
        self.interval_label.setMinimumWidth(SIZES.LABEL_MIN_WIDTH)
        interval_layout.addWidget(self.interval_label)
        layout.addLayout(interval_layout)

        # Status line
        status_layout = QHBoxLayout()
        self.status_dot = QLabel("●")
        self.status_dot.setFont(FONTS.STATUS_INDICATOR)
        status_layout.addWidget(self.status_dot)
        self.status_label = QLabel("")
        self.status_label.setWordWrap(True)
        status_layout.addWidget(self.status_label, stretch=1)
        layout.addLayout(status_layout)
        self._set_status("IDLE", "Select an area to begin.")

        self.console_panel = ConsolePanel()
        layout.addWidget(self.console_panel, stretch=1)

        self.setCentralWidget(central)

    def _connect_signals(self):
        """Connect all UI signals to handlers."""
        self.area_btn.clicked.connect(self._on_select_area)
        self.load_btn.clicked.connect(self._on_load_image)
        self.palette_btn.clicked.connect(self._on_select_palette)
        self.draw_btn.clicked.connect(self._on_draw)
        self.stop_btn.clicked.connect(self._on_stop)
        self.dither_check.toggled.connect(self._on_dither_toggled)
        self.interval_slider.valueChanged.connect(self._on_interval_changed)

    def _load_saved_positions(self):
        """Prefill swatch positions from the coordinate file."""
        try:
            self.colors_pos = load_positions(self.config.coordinates_file)
        except (CoordinateFileError, OSError) as e:
            self.colors_pos = []
            self.console_panel.append_error(f"Could not read swatch positions: {e}")
            return
        if self.colors_pos:
            self.console_panel.append(
                f"✓ Loaded {len(self.colors_pos)} swatch positions "
                f"from {self.config.coordinates_file}"
            )

    def _set_status(self, state: str, message: str):
        self.status_dot.setStyleSheet(status_stylesheet(state))
        self.status_label.setText(message)

    def _is_busy(self) -> bool:
        return any(
            thread is not None and thread.isRunning()
            for thread in (self.processing_thread, self.drawing_thread)
        )

    def _update_buttons(self):
        busy = self._is_busy()
        drawing = self.drawing_thread is not None and self.drawing_thread.isRunning()
        self.area_btn.setEnabled(not busy)
        self.load_btn.setEnabled(not busy and self.area is not None)
        self.palette_btn.setEnabled(not busy)
        self.draw_btn.setEnabled(not busy and self.processed is not None)
        self.stop_btn.setEnabled(drawing)

    # === Settings ===

    def _on_dither_toggled(self, checked: bool):
        self.config.dithering = checked
        self._save_config()

    def _on_interval_changed(self, value: int):
        self.config.pixel_interval = value
        self.interval_label.setText(str(value))
        self._save_config()

    def _save_config(self):
        success, error = self.config_manager.save(self.config)
        if not success:
            self.console_panel.append_error(f"Saving config: {error}")

    # === Overlay Modes ===

    def _open_overlay(self, mode: ViewStatus):
        self.view_status = mode
        self.overlay = SelectionOverlay(mode)
        self.overlay.area_selected.connect(self._on_area_selected)
        self.overlay.palette_selected.connect(self._on_palette_selected)
        self.overlay.cancelled.connect(self._return_to_default)
        self.overlay.show()
        self.overlay.activateWindow()

    def _return_to_default(self):
        self.view_status = ViewStatus.DEFAULT
        self.overlay = None
        self._update_buttons()

    def _on_select_area(self):
        self._open_overlay(ViewStatus.AREA)

    def _on_area_selected(self, area: DrawingArea):
        self.area = area
        # A new area invalidates the previous stroke plan
        self.processed = None
        self.console_panel.append(
            f"📐 Area: {area.width}x{area.height} at ({area.x:.0f}, {area.y:.0f})"
        )
        self._set_status("IDLE", "Area selected. Load an image.")
        self._return_to_default()

    def _on_select_palette(self):
        self.colors_pos = []
        self._open_overlay(ViewStatus.PALETTE)

    def _on_palette_selected(self, positions: "list[tuple[float, float]]"):
        self.colors_pos = positions
        try:
            save_positions(self.config.coordinates_file, positions)
        except OSError as e:
            self.console_panel.append_error(f"Could not save swatch positions: {e}")
            QMessageBox.warning(self, "Save Error", str(e))
        else:
            self.console_panel.append(
                f"🎨 Recorded {len(positions)} swatch positions "
                f"({len(self.config.palette)} palette colors)"
            )
        self._return_to_default()

    # === Image Processing ===

    def _on_load_image(self):
        if self.area is None:
            return
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Select Image",
            "",
            "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp);;All Files (*)",
        )
        if not file_path:
            return

        self._start_processing(file_path)

    def _start_processing(self, file_path: str):
        self._set_status("PROCESSING", "Processing image...")
        self.console_panel.append(f"📁 Loading {file_path}")

        self.processing_thread = ProcessingThread(file_path, self.area, self.config)
        self.processing_thread.result_ready.connect(self._on_processing_finished)
        self.processing_thread.error.connect(self._on_processing_error)
        self.processing_thread.progress.connect(self._on_processing_progress)
        self.processing_thread.finished.connect(self._release_processing_thread)
        self.processing_thread.start()
        self._update_buttons()

    def _on_processing_progress(self, percent: int):
        self._set_status("PROCESSING", f"Processing image... {percent}%")

    def _on_processing_finished(self, result: ProcessedImage):
        self.processed = result
        plan = result.plan
        self.console_panel.append(
            f"🖼 Image processed: {plan.stroke_count} strokes "
            f"({plan.orientation.value}), est. {result.estimated_time:.0f}s"
        )
        self._set_status("READY", f"{plan.stroke_count} strokes ready to draw.")
        self._show_preview(result)
        self._update_buttons()

    def _on_processing_error(self, error: str):
        self.console_panel.append_error(error)
        self._set_status("ERROR", "Image processing failed.")
        QMessageBox.critical(self, "Image Error", error)
        self._update_buttons()

    def _show_preview(self, result: ProcessedImage):
        if self.preview_window is not None:
            self.preview_window.close()
        self.preview_window = PreviewWindow(result.image)
        self.preview_window.show()

    def _release_processing_thread(self):
        """Drop the worker once QThread.finished says run() has returned."""
        if self.processing_thread is not None:
            self.processing_thread.wait()
            self.processing_thread = None
        self._update_buttons()

    # === Drawing ===

    def _current_processed(self) -> ProcessedImage:
        """Processed image with a plan for the current pixel interval.

        AIDEV-NOTE: The slider may move after an image was processed; the
        quantized image is kept and only the strokes are recompiled.
        """
        previous = self.processed
        processor = ImageProcessor(self.config)
        self.processed = processor.replan(previous, self.config.pixel_interval)
        if self.processed is not previous:
            self.console_panel.append(
                f"↻ Pixel interval {self.config.pixel_interval}: "
                f"{self.processed.plan.stroke_count} strokes"
            )
        return self.processed

    def _on_draw(self):
        if self.processed is None or self.area is None:
            self._show_config_error("Select an area and load an image first.")
            return

        plan = self._current_processed().plan
        palette = self.config.palette
        coordinates = build_color_coordinates(palette, self.colors_pos)
        thread = DrawingThread(plan, palette, coordinates, self.config)

        # AIDEV-NOTE: Validate up front so configuration problems are
        # reported before any pointer event is sent
        try:
            thread.executor.validate(plan, palette)
        except DrawingConfigError as e:
            self._show_config_error(str(e))
            return

        if self.preview_window is not None:
            self.preview_window.hide()

        self.drawing_thread = thread
        self.drawing_thread.result_ready.connect(self._on_drawing_finished)
        self.drawing_thread.error.connect(self._on_drawing_error)
        self.drawing_thread.finished.connect(self._release_drawing_thread)
        self.drawing_thread.start()

        self._set_status(
            "DRAWING", f"Drawing... press '{self.config.cancel_key}' to stop."
        )
        self.console_panel.append("✏ Drawing started")
        self._update_buttons()

    def _on_stop(self):
        if self.drawing_thread is not None:
            self.drawing_thread.stop()

    def _on_drawing_finished(self, result: DrawingResult):
        if result.cancelled:
            self.console_panel.append(
                f"⏹ Drawing cancelled after {result.segments_drawn} segments"
            )
            self._set_status("READY", "Drawing cancelled.")
        else:
            self.console_panel.append(
                f"✓ Drawing complete: {result.segments_drawn} segments, "
                f"{result.colors_drawn} colors"
            )
            self._set_status("READY", "Drawing complete.")
        self._update_buttons()

    def _on_drawing_error(self, error: str):
        self.console_panel.append_error(error)
        self._set_status("ERROR", "Drawing stopped by an error.")
        QMessageBox.critical(self, "Drawing Error", error)
        self._update_buttons()

    def _release_drawing_thread(self):
        if self.drawing_thread is not None:
            self.drawing_thread.wait()
            self.drawing_thread = None
        self._update_buttons()

    def _show_config_error(self, message: str):
        self.console_panel.append_error(message)
        QMessageBox.warning(self, "Cannot Draw", message)

    # === Application Lifecycle ===

    def closeEvent(self, a0):
        """Stop any running job and wait for workers before closing.

        A segment in progress is always finished, so the drawing thread
        exits within one segment after its token is cancelled.
        """
        if self.drawing_thread is not None:
            self.drawing_thread.stop()
            self.drawing_thread.wait()
        if self.processing_thread is not None:
            self.processing_thread.wait()
        if self.preview_window is not None:
            self.preview_window.close()
        if a0:
            a0.accept()
