"""Tests for the image processing pipeline and plan statistics."""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from image_processing import ImageProcessor
from image_processing.utils import (
    area_from_corners,
    calculate_total_length,
    drawable_colors,
    estimate_drawing_time,
    image_to_grid,
    scale_point,
)
from image_processing.strokes import compile_strokes
from models import (
    DrawingArea,
    DrawingConfig,
    ImageLoadError,
    ScanOrientation,
)

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
RED = (255, 0, 19)

@pytest.fixture
def config() -> DrawingConfig:
    return DrawingConfig(
        dithering=False,
        pixel_interval=1,
        segment_delay=0.1,
        color_delay=1.0,
        palette=[BLACK, WHITE],
    )

@pytest.fixture
def half_black(tmp_path):
    """4x4 PNG, left two columns black, rest white."""
    image = Image.new("RGB", (4, 4), WHITE)
    for x in range(2):
        for y in range(4):
            image.putpixel((x, y), BLACK)
    path = tmp_path / "half.png"
    image.save(path)
    return path

# ---------------------------------------------------------------------------
# ImageProcessor
# ---------------------------------------------------------------------------

class TestImageProcessor:
    def test_process_builds_plan_at_area_origin(self, config, half_black) -> None:
        area = DrawingArea(x=100.0, y=200.0, width=4, height=4)
        result = ImageProcessor(config).process(half_black, area)

        plan = result.plan
        assert plan.orientation is ScanOrientation.VERTICAL
        assert plan.stroke_count == 2
        assert plan.segments_for(BLACK) == (
            ((100.0, 200.0), (100.0, 203.0)),
            ((101.0, 200.0), (101.0, 203.0)),
        )
        assert result.image.size == (4, 4)
        assert (result.original_width, result.original_height) == (4, 4)
        assert result.total_stroke_length == pytest.approx(6.0)
        assert result.estimated_time == pytest.approx(2 * 0.1 + 1.0)

    def test_pixel_interval_from_config(self, config, half_black) -> None:
        config.pixel_interval = 2
        area = DrawingArea(x=0.0, y=0.0, width=4, height=4)
        plan = ImageProcessor(config).process(half_black, area).plan
        assert plan.stroke_count == 1

    def test_missing_file(self, config, tmp_path) -> None:
        with pytest.raises(ImageLoadError, match="Failed to load image"):
            ImageProcessor(config).load_image(tmp_path / "nope.png")

    def test_undecodable_file(self, config, tmp_path) -> None:
        path = tmp_path / "broken.png"
        path.write_bytes(b"definitely not a png")
        with pytest.raises(ImageLoadError):
            ImageProcessor(config).process(path, DrawingArea(0.0, 0.0, 4, 4))

    def test_load_error_is_value_error(self, config, tmp_path) -> None:
        with pytest.raises(ValueError):
            ImageProcessor(config).load_image(tmp_path / "nope.png")

    def test_default_config(self) -> None:
        assert len(ImageProcessor().config.palette) == 18

    def test_explicit_zero_interval_rejected(self, config) -> None:
        quantized = Image.new("RGB", (4, 4), BLACK)
        with pytest.raises(ValueError, match="Pixel interval"):
            ImageProcessor(config).compile_strokes(quantized, (0.0, 0.0), 0)

    def test_plan_records_interval(self, config, half_black) -> None:
        config.pixel_interval = 3
        area = DrawingArea(x=0.0, y=0.0, width=4, height=4)
        assert ImageProcessor(config).process(half_black, area).pixel_interval == 3

class TestReplan:
    def test_new_interval_recompiles_plan(self, config, tmp_path) -> None:
        path = tmp_path / "black.png"
        Image.new("RGB", (20, 20), BLACK).save(path)
        processor = ImageProcessor(config)
        area = DrawingArea(x=10.0, y=10.0, width=20, height=20)
        processed = processor.process(path, area)
        assert processed.plan.stroke_count == 20

        replanned = processor.replan(processed, 5)

        assert replanned.pixel_interval == 5
        assert replanned.plan.stroke_count == 4
        assert replanned.image is processed.image
        assert replanned.estimated_time == pytest.approx(4 * 0.1 + 1.0)
        assert replanned.total_stroke_length == pytest.approx(4 * 15.0)
        assert processed.plan.stroke_count == 20

    def test_same_interval_keeps_plan(self, config, half_black) -> None:
        processor = ImageProcessor(config)
        processed = processor.process(half_black, DrawingArea(0.0, 0.0, 4, 4))
        assert processor.replan(processed, 1) is processed


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------

class TestAreaFromCorners:
    def test_any_corner_order(self) -> None:
        area = area_from_corners((300.0, 50.0), (100.0, 250.5))
        assert area == DrawingArea(x=100.0, y=50.0, width=200, height=200)
        assert area.origin == (100.0, 50.0)
        assert area.size == (200, 200)

    def test_degenerate_area(self) -> None:
        with pytest.raises(ValueError, match="too small"):
            area_from_corners((10.0, 10.0), (10.5, 80.0))

    def test_scaled_corners_give_device_pixel_area(self) -> None:
        ratio = 1.25
        area = area_from_corners(
            scale_point((80.0, 40.0), ratio), scale_point((240.0, 200.0), ratio)
        )
        assert area == DrawingArea(x=100.0, y=50.0, width=200, height=200)

    def test_unit_ratio_is_identity(self) -> None:
        assert scale_point((3, 4), 1.0) == (3.0, 4.0)

class TestPlanStatistics:
    def test_total_length(self) -> None:
        plan = compile_strokes(
            Image.new("RGB", (5, 1), BLACK), origin=(0.0, 0.0)
        )
        assert calculate_total_length(plan) == pytest.approx(4.0)

    def test_drawable_colors_in_palette_order(self) -> None:
        image = Image.new("RGB", (2, 1), RED)
        image.putpixel((1, 0), BLACK)
        plan = compile_strokes(image)
        assert drawable_colors(plan, [WHITE, BLACK, RED]) == [BLACK, RED]
        assert drawable_colors(plan, [RED]) == [RED]

    def test_estimate_counts_delays(self) -> None:
        image = Image.new("RGB", (2, 1), RED)
        image.putpixel((1, 0), BLACK)
        plan = compile_strokes(image)
        assert estimate_drawing_time(plan, [BLACK, RED], 0.5, 2.0) == pytest.approx(
            2 * 0.5 + 2 * 2.0
        )

class TestImageToGrid:
    def test_palette_mode_image_converted(self) -> None:
        image = Image.new("P", (3, 2))
        grid = image_to_grid(image)
        assert grid.shape == (2, 3, 3)
        assert grid.dtype == np.uint8

    def test_alpha_channel_dropped(self) -> None:
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        assert image_to_grid(pixels).shape == (2, 2, 3)

    def test_grayscale_array_rejected(self) -> None:
        with pytest.raises(ValueError, match="Expected an RGB grid"):
            image_to_grid(np.zeros((2, 2), dtype=np.uint8))
