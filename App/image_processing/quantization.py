"""Color quantization against a fixed drawing palette.

AIDEV-NOTE: The palette is the set of swatches available on the target
canvas, so every output pixel must be an exact palette member. Palette
order matters: ties resolve to the earliest entry.
"""

import math

import numpy as np
from PIL import Image

# Error diffusion kernel: Floyd-Steinberg (dx, dy, weight out of 16)
KERNEL_FS = (
    (1, 0, 7),
    (-1, 1, 3),
    (0, 1, 5),
    (1, 1, 1),
)


def color_distance(c1, c2) -> float:
    """Euclidean distance between two RGB colors."""
    r_diff = float(c1[0]) - float(c2[0])
    g_diff = float(c1[1]) - float(c2[1])
    b_diff = float(c1[2]) - float(c2[2])
    return math.sqrt(r_diff * r_diff + g_diff * g_diff + b_diff * b_diff)


def find_nearest_color(
    pixel, palette: "list[tuple[int, int, int]]"
) -> "tuple[int, int, int]":
    """Return the palette color closest to ``pixel`` (first one wins ties)."""
    nearest_color = palette[0]
    nearest_distance = color_distance(pixel, nearest_color)

    for palette_color in palette:
        distance = color_distance(pixel, palette_color)
        if distance < nearest_distance:
            nearest_color = palette_color
            nearest_distance = distance

    return tuple(nearest_color)


def fit_size(
    source_size: "tuple[int, int]", target_size: "tuple[int, int]"
) -> "tuple[int, int]":
    """Largest size with the source aspect ratio that fits in target_size."""
    src_w, src_h = source_size
    dst_w, dst_h = target_size
    scale = min(dst_w / src_w, dst_h / src_h)
    return (max(1, round(src_w * scale)), max(1, round(src_h * scale)))


def flatten_to_rgb(image: Image.Image) -> Image.Image:
    """Convert to RGB, compositing any transparency onto white canvas."""
    if image.mode == "RGB":
        return image
    if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
        rgba = image.convert("RGBA")
        background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        return Image.alpha_composite(background, rgba).convert("RGB")
    return image.convert("RGB")


def map_to_palette(
    pixels: np.ndarray, palette: "list[tuple[int, int, int]]"
) -> np.ndarray:
    """Map every pixel of an (H, W, 3) array to its nearest palette color.

    AIDEV-NOTE: Compares squared distances one palette entry at a time.
    The strict ``<`` keeps the first entry on ties, same as
    find_nearest_color, without allocating an (H, W, P, 3) array.
    """
    work = pixels.astype(np.int32)
    best = np.full(work.shape[:2], np.iinfo(np.int32).max, dtype=np.int64)
    index = np.zeros(work.shape[:2], dtype=np.intp)

    for i, color in enumerate(palette):
        diff = work - np.asarray(color, dtype=np.int32)
        dist = np.einsum("ijk,ijk->ij", diff, diff).astype(np.int64)
        closer = dist < best
        best[closer] = dist[closer]
        index[closer] = i

    pal = np.asarray(palette, dtype=np.uint8)
    return pal[index]


def dither_to_palette(
    pixels: np.ndarray, palette: "list[tuple[int, int, int]]"
) -> np.ndarray:
    """Floyd-Steinberg error diffusion onto the palette.

    Pixels are visited in raster order. Diffused error is truncated to an
    integer and neighbours are clamped to 0-255, so the working buffer
    always holds valid 8-bit colors.

    AIDEV-NOTE: Nearest-color results are cached per distinct working
    color. Diffused images repeat a small set of values, so most pixels
    skip the palette search entirely.
    """
    height, width = pixels.shape[:2]
    work = pixels[..., :3].astype(np.int32).tolist()
    out = [[None] * width for _ in range(height)]
    nearest: "dict[tuple[int, int, int], tuple[int, int, int]]" = {}

    for y in range(height):
        row = work[y]
        out_row = out[y]
        next_row = work[y + 1] if y + 1 < height else None
        for x in range(width):
            old = tuple(row[x])
            new = nearest.get(old)
            if new is None:
                new = nearest[old] = find_nearest_color(old, palette)
            out_row[x] = new

            error = (old[0] - new[0], old[1] - new[1], old[2] - new[2])
            if error == (0, 0, 0):
                continue
            for dx, dy, weight in KERNEL_FS:
                nx = x + dx
                if not 0 <= nx < width:
                    continue
                if dy == 0:
                    neighbour = row[nx]
                elif next_row is not None:
                    neighbour = next_row[nx]
                else:
                    continue
                for c in range(3):
                    value = neighbour[c] + int(error[c] * weight / 16)
                    neighbour[c] = 0 if value < 0 else 255 if value > 255 else value

    return np.array(out, dtype=np.uint8).reshape(height, width, 3)


def quantize(
    image: Image.Image,
    palette: "list[tuple[int, int, int]]",
    target_size: "tuple[int, int]",
    dithering: bool,
    keep_aspect: bool = True,
) -> Image.Image:
    """Resize an image and reduce it to the given palette.

    Args:
        image: Source image (any mode)
        palette: Ordered drawing palette, non-empty
        target_size: (width, height) of the drawing area in pixels
        dithering: Use error diffusion instead of plain nearest color
        keep_aspect: Fit inside target_size keeping the aspect ratio

    Returns:
        Quantized image in RGB mode, every pixel a palette color

    AIDEV-NOTE: Resizing happens before mapping because the grid size
    drives how many strokes get generated downstream.
    """
    if not palette:
        raise ValueError("Palette must contain at least one color")
    width, height = target_size
    if width < 1 or height < 1:
        raise ValueError(f"Invalid target size: {width}x{height}")

    palette = [tuple(int(c) for c in color) for color in palette]

    if keep_aspect:
        size = fit_size(image.size, (int(width), int(height)))
    else:
        size = (int(width), int(height))

    resized = flatten_to_rgb(image).resize(size, resample=Image.Resampling.LANCZOS)
    pixels = np.asarray(resized, dtype=np.uint8)

    if dithering:
        quantized = dither_to_palette(pixels, palette)
    else:
        quantized = map_to_palette(pixels, palette)

    return Image.fromarray(quantized)
