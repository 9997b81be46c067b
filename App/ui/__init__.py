"""UI components for the Drawing Bot.

This package contains the main window, the selection overlay, the preview
window and the background worker threads.
"""

from ui.console_panel import ConsolePanel
from ui.main_window import DrawingBotWindow
from ui.overlay import SelectionOverlay
from ui.preview_window import PreviewWindow
from ui.workers import DrawingThread, ProcessingThread

__all__ = [
    "DrawingBotWindow",
    "ConsolePanel",
    "SelectionOverlay",
    "PreviewWindow",
    "ProcessingThread",
    "DrawingThread",
]
