"""Main image processor orchestrating the complete pipeline.

AIDEV-NOTE: This module handles the pipeline from an image file to a
stroke plan: load, quantize to the drawing area, then compile strokes
at the area origin.
"""

from dataclasses import replace
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from models import (
    DrawingArea,
    DrawingConfig,
    ImageLoadError,
    ProcessedImage,
    StrokePlan,
)

from .quantization import quantize
from .strokes import compile_strokes
from .utils import calculate_total_length, estimate_drawing_time


class ImageProcessor:
    """Processes images into stroke plans for the drawing executor."""

    def __init__(self, config: DrawingConfig | None = None):
        self.config = config or DrawingConfig()

    def load_image(self, file_path: str | Path) -> Image.Image:
        """Load and decode an image file.

        Args:
            file_path: Path to image file (PNG, JPG, etc.)

        Returns:
            Fully decoded PIL Image

        Raises:
            ImageLoadError: If file cannot be opened or decoded
        """
        try:
            with Image.open(file_path) as image:
                # AIDEV-NOTE: load() forces decoding so truncated files
                # fail here instead of halfway through quantization
                image.load()
                return image.copy()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ImageLoadError(f"Failed to load image: {e}") from e

    def quantize(
        self,
        image: Image.Image,
        size: "tuple[int, int]",
        dithering: bool | None = None,
    ) -> Image.Image:
        """Reduce image to the configured palette at the given size.

        Args:
            image: Input image
            size: Drawing area (width, height) in pixels
            dithering: Uses config default if None

        Returns:
            Quantized image in RGB mode
        """
        if dithering is None:
            dithering = self.config.dithering
        return quantize(image, self.config.palette, size, dithering)

    def compile_strokes(
        self,
        quantized: Image.Image,
        origin: "tuple[float, float]",
        pixel_interval: int | None = None,
    ) -> StrokePlan:
        """Compile the stroke plan for a quantized image."""
        if pixel_interval is None:
            pixel_interval = self.config.pixel_interval
        return compile_strokes(quantized, origin, pixel_interval)

    def process(self, file_path: str | Path, area: DrawingArea) -> ProcessedImage:
        """Execute complete image processing pipeline.

        Args:
            file_path: Path to input image
            area: Screen rectangle to draw into

        Returns:
            ProcessedImage with quantized image, stroke plan and statistics
        """
        print("Starting image processing pipeline...")

        print("Loading image...")
        image = self.load_image(file_path)
        orig_width, orig_height = image.size
        print(f"Loaded image with size: {orig_width}x{orig_height} pixels.")

        mode = "dithered" if self.config.dithering else "nearest color"
        print(
            f"Quantizing to {len(self.config.palette)} colors "
            f"({mode}) within {area.width}x{area.height}..."
        )
        quantized = self.quantize(image, area.size)

        print("Extracting strokes...")
        plan = self.compile_strokes(quantized, area.origin)

        processed = self._with_statistics(
            ProcessedImage(
                image=quantized,
                plan=plan,
                area=area,
                pixel_interval=self.config.pixel_interval,
                original_width=orig_width,
                original_height=orig_height,
            )
        )

        print("Image processing complete.")
        print(
            f"Total strokes: {plan.stroke_count} "
            f"({plan.orientation.value} scan, {len(plan.segments)} colors)"
        )
        print(f"Total stroke length: {processed.total_stroke_length:.0f} px")
        return processed

    def replan(self, processed: ProcessedImage, pixel_interval: int) -> ProcessedImage:
        """Recompile strokes of an already quantized image at a new interval.

        Returns ``processed`` unchanged if it was built with the same interval.
        """
        if processed.pixel_interval == pixel_interval:
            return processed
        print(
            f"Pixel interval changed ({processed.pixel_interval} -> "
            f"{pixel_interval}), recompiling strokes..."
        )
        plan = self.compile_strokes(
            processed.image, processed.area.origin, pixel_interval
        )
        return self._with_statistics(
            replace(processed, plan=plan, pixel_interval=pixel_interval)
        )

    def _with_statistics(self, processed: ProcessedImage) -> ProcessedImage:
        total_length = calculate_total_length(processed.plan)
        estimated_time = estimate_drawing_time(
            processed.plan,
            self.config.palette,
            self.config.segment_delay,
            self.config.color_delay,
        )
        return replace(
            processed,
            total_stroke_length=total_length,
            estimated_time=estimated_time,
        )
