"""Utility functions for drawing areas and stroke plan statistics.

AIDEV-NOTE: Helpers shared by the processing pipeline and the UI. Plan
statistics are estimates for the status display, not guarantees.
"""

import math
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image

from models import WHITE, DrawingArea

if TYPE_CHECKING:
    from models import StrokePlan


def area_from_corners(
    corner_a: "tuple[float, float]", corner_b: "tuple[float, float]"
) -> DrawingArea:
    """Build a drawing area from any two opposite corners.

    Args:
        corner_a: First corner in screen coordinates
        corner_b: Opposite corner in screen coordinates

    Returns:
        DrawingArea with the top-left origin and integer pixel size

    Raises:
        ValueError: If the rectangle is less than one pixel wide or tall
    """
    x0, x1 = sorted((float(corner_a[0]), float(corner_b[0])))
    y0, y1 = sorted((float(corner_a[1]), float(corner_b[1])))
    width = int(x1 - x0)
    height = int(y1 - y0)
    if width < 1 or height < 1:
        raise ValueError(f"Drawing area too small: {width}x{height}")
    return DrawingArea(x=x0, y=y0, width=width, height=height)


def scale_point(
    point: "tuple[float, float]", ratio: float
) -> "tuple[float, float]":
    """Convert a logical screen position to device pixels.

    AIDEV-NOTE: Qt reports device-independent coordinates, pynput moves the
    pointer in device pixels on Windows and X11. Multiply by the screen's
    devicePixelRatio (1.0 on macOS, where both use points).
    """
    return (float(point[0]) * ratio, float(point[1]) * ratio)


def image_to_grid(image) -> np.ndarray:
    """Return an image or array as an (H, W, 3) uint8 RGB array.

    Args:
        image: PIL Image in any mode, or an array-like of RGB(A) pixels

    Raises:
        ValueError: If the array does not have three color channels
    """
    if isinstance(image, Image.Image):
        if image.mode != "RGB":
            image = image.convert("RGB")
        return np.asarray(image, dtype=np.uint8)
    pixels = np.asarray(image, dtype=np.uint8)
    if pixels.ndim != 3 or pixels.shape[2] < 3:
        raise ValueError(f"Expected an RGB grid, got shape {pixels.shape}")
    return pixels[:, :, :3]


def calculate_total_length(plan: "StrokePlan") -> float:
    """Calculate total stroke length in screen pixels."""
    total = 0.0
    for segments in plan.segments.values():
        for (x1, y1), (x2, y2) in segments:
            total += math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)
    return total


def drawable_colors(
    plan: "StrokePlan", palette: "list[tuple[int, int, int]]"
) -> "list[tuple[int, int, int]]":
    """Palette colors that have strokes in the plan, in palette order."""
    colors = []
    for color in palette:
        color = tuple(color)
        if color != WHITE and plan.segments_for(color) and color not in colors:
            colors.append(color)
    return colors


def estimate_drawing_time(
    plan: "StrokePlan",
    palette: "list[tuple[int, int, int]]",
    segment_delay: float,
    color_delay: float = 0.0,
) -> float:
    """Estimate drawing time in seconds from the configured pauses.

    AIDEV-NOTE: Only counts the fixed delays. Pointer event latency on
    the target machine is not modelled.
    """
    colors = drawable_colors(plan, palette)
    segment_total = sum(len(plan.segments_for(color)) for color in colors)
    return segment_total * segment_delay + len(colors) * color_delay
