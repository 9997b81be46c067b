"""Centralized styling constants for the Drawing Bot UI.

This module consolidates colors, fonts, and sizes used throughout the application
to ensure consistency and easier maintenance.
"""

from PyQt6.QtGui import QColor, QFont


class StatusColors:
    """Job status indicator colors."""

    IDLE = "gray"
    PROCESSING = "orange"
    READY = "green"
    DRAWING = "dodgerblue"
    ERROR = "red"


class OverlayColors:
    """Colors for the full-screen selection overlay."""

    # AIDEV-NOTE: Alpha values keep the desktop visible underneath
    AREA_DIM = QColor(0, 0, 0, 64)
    AREA_DIM_SELECTING = QColor(0, 0, 0, 128)
    PALETTE_DIM = QColor(0, 0, 0, 16)

    SCREEN_BORDER = QColor(0, 0, 255)
    SELECTION_BORDER = QColor(255, 0, 0)
    SWATCH_LABEL = QColor(255, 0, 0)


class Fonts:
    """Standard application fonts."""

    CONSOLE = QFont("Courier", 9)
    STATUS_INDICATOR = QFont("Arial", 16)
    SWATCH_LABEL = QFont("Serif", 24)


class Sizes:
    """Standard widget sizes and constraints."""

    WINDOW_DEFAULT = (300, 420)
    CONSOLE_MIN_HEIGHT = 100
    LABEL_MIN_WIDTH = 30

    # Pixel interval slider range
    INTERVAL_MIN = 1
    INTERVAL_MAX = 5


FONTS = Fonts
SIZES = Sizes


def status_stylesheet(state: str) -> str:
    """Generate status indicator stylesheet for a job state.

    Args:
        state: One of 'IDLE', 'PROCESSING', 'READY', 'DRAWING', 'ERROR'

    Returns:
        CSS stylesheet string with appropriate color
    """
    color = getattr(StatusColors, state.upper(), StatusColors.IDLE)
    return f"color: {color};"
