"""Data models and constants for the Drawing Bot."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping

# Configuration file path
CONFIG_FILE = Path.home() / ".drawing_bot_config.json"

# Swatch coordinates, one "x y" line per palette slot
COORDINATES_FILE = "colors_pos.txt"

# AIDEV-NOTE: The palette picker stops collecting clicks at this count
MAX_PALETTE_SLOTS = 18

# White is blank canvas and is never drawn
WHITE = (255, 255, 255)

DEFAULT_PALETTE = [
    (0, 0, 0),
    (102, 102, 102),
    (0, 80, 205),
    (255, 255, 255),
    (170, 170, 170),
    (38, 201, 255),
    (1, 116, 32),
    (153, 0, 0),
    (150, 65, 18),
    (17, 176, 60),
    (255, 0, 19),
    (255, 120, 41),
    (176, 112, 28),
    (153, 0, 78),
    (203, 90, 87),
    (255, 193, 38),
    (255, 0, 143),
    (254, 175, 168),
]


class ViewStatus(Enum):
    """Window modes.

    AIDEV-NOTE: Only the UI consumes this; the drawing core never sees it.
    """

    DEFAULT = "default"
    AREA = "area"  # Dragging out the drawing rectangle
    PALETTE = "palette"  # Clicking palette swatches in slot order


class ScanOrientation(Enum):
    """Scan order used when turning the grid into strokes."""

    VERTICAL = "vertical"  # Column-major
    HORIZONTAL = "horizontal"  # Row-major


# --- Errors ---


class ImageLoadError(ValueError):
    """Source image could not be opened or decoded."""


class CoordinateFileError(ValueError):
    """Coordinate file contains a malformed line."""


class DrawingConfigError(ValueError):
    """Drawing job is missing area, image, palette or swatch coordinates."""


class DrawingEnvironmentError(RuntimeError):
    """The OS refused to synthesize input or to attach the key listener."""


@dataclass
class DrawingConfig:
    """User settings for processing and drawing."""

    # Quantization
    dithering: bool = True
    pixel_interval: int = 2  # Sampling stride when scanning for strokes (1-5)

    # Drawing pace
    segment_delay: float = 0.01  # seconds after each segment
    color_delay: float = 0.0  # seconds after each color pass

    # Key that cancels a running drawing job (pynput Key name)
    cancel_key: str = "esc"

    coordinates_file: str = COORDINATES_FILE

    palette: "list[tuple[int, int, int]]" = field(
        default_factory=lambda: list(DEFAULT_PALETTE)
    )


@dataclass
class DrawingArea:
    """Screen rectangle the image is drawn into."""

    x: float
    y: float
    width: int
    height: int

    @property
    def origin(self) -> "tuple[float, float]":
        return (self.x, self.y)

    @property
    def size(self) -> "tuple[int, int]":
        return (self.width, self.height)


@dataclass(frozen=True)
class StrokePlan:
    """Per-color line segments ready to be drawn.

    AIDEV-NOTE: Segments are absolute screen coordinates. White never
    appears as a key. Built once per job and never mutated.
    """

    segments: "Mapping[tuple[int, int, int], tuple]"  # color -> ((x0, y0), (x1, y1)) pairs
    orientation: ScanOrientation
    stroke_count: int

    def colors(self) -> "list[tuple[int, int, int]]":
        return list(self.segments)

    def segments_for(self, color) -> tuple:
        return self.segments.get(tuple(color), ())


@dataclass
class DrawingResult:
    """Outcome of one drawing job."""

    colors_drawn: int = 0
    segments_drawn: int = 0
    cancelled: bool = False


@dataclass
class ProcessedImage:
    """Result of image processing pipeline."""

    # Quantized image (PIL Image, RGB) used for the preview window
    image: object

    plan: StrokePlan
    area: DrawingArea

    # Interval the plan was compiled with
    pixel_interval: int = 1

    # Original image dimensions (pixels)
    original_width: int = 0
    original_height: int = 0

    # Statistics
    total_stroke_length: float = 0.0  # pixels
    estimated_time: float = 0.0  # seconds
