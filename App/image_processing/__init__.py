"""Image processing pipeline for image-to-stroke conversion.

AIDEV-NOTE: This package handles the pipeline from an image file to a
stroke plan. Organized into modular components:
- processor: Main ImageProcessor orchestrator
- quantization: Palette reduction with optional dithering
- strokes: Run extraction and scan orientation choice
- utils: Drawing area and plan statistics
"""

from .processor import ImageProcessor
from .quantization import quantize
from .strokes import build_color_coordinates, compile_strokes, extract_strokes

__all__ = [
    "ImageProcessor",
    "build_color_coordinates",
    "compile_strokes",
    "extract_strokes",
    "quantize",
]
