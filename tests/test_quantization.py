"""Tests for palette quantization and dithering."""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from image_processing import quantization
from image_processing.quantization import (
    KERNEL_FS,
    color_distance,
    dither_to_palette,
    find_nearest_color,
    fit_size,
    map_to_palette,
    quantize,
)

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
RED = (255, 0, 19)
BLUE = (0, 80, 205)


def _random_image(width: int, height: int, seed: int = 0) -> Image.Image:
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
    return Image.fromarray(pixels)


def _colors(image: Image.Image) -> set:
    pixels = np.asarray(image).reshape(-1, 3)
    return {tuple(int(c) for c in px) for px in np.unique(pixels, axis=0)}


# ---------------------------------------------------------------------------
# Nearest color search
# ---------------------------------------------------------------------------


class TestNearestColor:
    def test_distance_is_euclidean(self) -> None:
        assert color_distance((0, 0, 0), (3, 4, 0)) == pytest.approx(5.0)

    def test_exact_match(self) -> None:
        assert find_nearest_color(RED, [BLACK, RED, WHITE]) == RED

    def test_picks_closest(self) -> None:
        assert find_nearest_color((240, 240, 250), [BLACK, RED, WHITE]) == WHITE

    def test_tie_resolves_to_first_entry(self) -> None:
        palette = [(50, 0, 0), (150, 0, 0)]
        assert find_nearest_color((100, 0, 0), palette) == (50, 0, 0)
        assert find_nearest_color((100, 0, 0), palette[::-1]) == (150, 0, 0)

    def test_array_mapping_matches_scalar_search(self) -> None:
        palette = [BLACK, RED, BLUE, WHITE]
        pixels = np.asarray(_random_image(12, 9, seed=3))
        mapped = map_to_palette(pixels, palette)
        for y in range(pixels.shape[0]):
            for x in range(pixels.shape[1]):
                assert tuple(mapped[y, x]) == find_nearest_color(pixels[y, x], palette)

    def test_array_mapping_tie_resolves_to_first_entry(self) -> None:
        pixels = np.full((2, 2, 3), (100, 0, 0), dtype=np.uint8)
        mapped = map_to_palette(pixels, [(50, 0, 0), (150, 0, 0)])
        assert _colors(Image.fromarray(mapped)) == {(50, 0, 0)}


# ---------------------------------------------------------------------------
# quantize()
# ---------------------------------------------------------------------------


class TestQuantize:
    @pytest.mark.parametrize("dithering", [False, True])
    def test_single_color_palette(self, dithering: bool) -> None:
        result = quantize(_random_image(16, 10), [BLUE], (16, 10), dithering)
        assert _colors(result) == {BLUE}

    @pytest.mark.parametrize("dithering", [False, True])
    def test_output_only_contains_palette_colors(self, dithering: bool) -> None:
        palette = [BLACK, RED, BLUE, WHITE]
        result = quantize(_random_image(30, 20, seed=7), palette, (30, 20), dithering)
        assert _colors(result) <= set(palette)

    def test_output_is_rgb(self) -> None:
        result = quantize(_random_image(8, 8), [BLACK, WHITE], (8, 8), False)
        assert result.mode == "RGB"

    def test_resize_keeps_aspect_ratio(self) -> None:
        result = quantize(_random_image(100, 50), [BLACK, WHITE], (40, 40), False)
        assert result.size == (40, 20)

    def test_resize_can_stretch(self) -> None:
        result = quantize(
            _random_image(100, 50), [BLACK, WHITE], (40, 40), False, keep_aspect=False
        )
        assert result.size == (40, 40)

    def test_dithering_mixes_palette_colors(self) -> None:
        grey = Image.new("RGB", (8, 8), (128, 128, 128))
        plain = quantize(grey, [BLACK, WHITE], (8, 8), dithering=False)
        dithered = quantize(grey, [BLACK, WHITE], (8, 8), dithering=True)
        assert _colors(plain) == {WHITE}
        assert _colors(dithered) == {BLACK, WHITE}

    def test_transparent_pixels_become_white(self) -> None:
        clear = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
        result = quantize(clear, [BLACK, WHITE], (4, 4), False)
        assert _colors(result) == {WHITE}

    def test_empty_palette_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one color"):
            quantize(_random_image(4, 4), [], (4, 4), False)

    def test_invalid_size_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid target size"):
            quantize(_random_image(4, 4), [BLACK], (0, 4), False)


class TestFitSize:
    def test_landscape_into_square(self) -> None:
        assert fit_size((200, 100), (50, 50)) == (50, 25)

    def test_upscale(self) -> None:
        assert fit_size((10, 20), (100, 100)) == (50, 100)

    def test_never_zero(self) -> None:
        assert fit_size((1000, 1), (10, 10)) == (10, 1)


# ---------------------------------------------------------------------------
# Error diffusion
# ---------------------------------------------------------------------------


def _reference_dither(pixels: np.ndarray, palette) -> np.ndarray:
    """Plain per-pixel Floyd-Steinberg, no caching or row shortcuts."""
    height, width = pixels.shape[:2]
    work = pixels.astype(np.int32)
    out = np.zeros((height, width, 3), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            old = tuple(int(c) for c in work[y, x])
            new = find_nearest_color(old, palette)
            out[y, x] = new
            for dx, dy, weight in KERNEL_FS:
                nx, ny = x + dx, y + dy
                if 0 <= nx < width and ny < height:
                    for c in range(3):
                        value = int(work[ny, nx, c]) + int((old[c] - new[c]) * weight / 16)
                        work[ny, nx, c] = min(max(value, 0), 255)
    return out


class TestDitherToPalette:
    @pytest.mark.parametrize("seed", [0, 1])
    def test_matches_plain_error_diffusion(self, seed: int) -> None:
        palette = [BLACK, RED, BLUE, WHITE]
        pixels = np.asarray(_random_image(13, 7, seed=seed))
        np.testing.assert_array_equal(
            dither_to_palette(pixels, palette), _reference_dither(pixels, palette)
        )

    def test_single_row_and_column(self) -> None:
        palette = [BLACK, WHITE]
        for shape in ((1, 9, 3), (9, 1, 3)):
            pixels = np.full(shape, 100, dtype=np.uint8)
            np.testing.assert_array_equal(
                dither_to_palette(pixels, palette), _reference_dither(pixels, palette)
            )

    def test_repeated_colors_searched_once(self, monkeypatch) -> None:
        calls = []
        original = quantization.find_nearest_color

        def counting(pixel, palette):
            calls.append(tuple(pixel))
            return original(pixel, palette)

        monkeypatch.setattr(quantization, "find_nearest_color", counting)
        pixels = np.zeros((16, 16, 3), dtype=np.uint8)
        out = dither_to_palette(pixels, [BLACK, WHITE])
        assert calls == [BLACK]
        assert _colors(Image.fromarray(out)) == {BLACK}
