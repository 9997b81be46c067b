"""Turn a quantized pixel grid into same-color line strokes.

AIDEV-NOTE: Every stroke costs one press/move/release on the target canvas,
so the extractor scans the grid both column-major and row-major and keeps
whichever produces fewer non-white strokes. Long vertical bands become one
vertical stroke instead of many short horizontal ones, and vice versa.
"""

from types import MappingProxyType

from models import WHITE, ScanOrientation, StrokePlan

from .utils import image_to_grid


def _grid_rows(grid) -> "list[list[tuple[int, int, int]]]":
    """Grid as nested lists of color tuples, indexed [row][column]."""
    return [[tuple(px) for px in row] for row in image_to_grid(grid).tolist()]


def extract_strokes(
    grid,
    orientation: ScanOrientation,
    origin: "tuple[float, float]" = (0.0, 0.0),
    pixel_interval: int = 1,
) -> "tuple[dict[tuple[int, int, int], list], int]":
    """Collect runs of equal color along one scan orientation.

    Args:
        grid: Quantized image (PIL Image or (H, W, 3) array)
        orientation: VERTICAL scans columns, HORIZONTAL scans rows
        origin: Screen position of the grid's top-left pixel
        pixel_interval: Sampling stride in both directions (>= 1)

    Returns:
        Tuple of (color -> list of ((x0, y0), (x1, y1)) segments,
        number of non-white strokes)
    """
    if pixel_interval < 1:
        raise ValueError(f"Pixel interval must be >= 1, got {pixel_interval}")

    rows = _grid_rows(grid)
    height = len(rows)
    width = len(rows[0]) if rows else 0
    origin_x, origin_y = origin

    vertical = orientation is ScanOrientation.VERTICAL
    outer, inner = (width, height) if vertical else (height, width)

    lines: "dict[tuple[int, int, int], list]" = {}
    stroke_count = 0

    def close_run(color, start, end):
        nonlocal stroke_count
        if color == WHITE:
            return
        stroke_count += 1
        lines.setdefault(color, []).append((start, end))

    for i in range(0, outer, pixel_interval):
        line_color = None
        line_start = line_end = None

        for j in range(0, inner, pixel_interval):
            if vertical:
                pixel = rows[j][i]
                position = (origin_x + i, origin_y + j)
            else:
                pixel = rows[i][j]
                position = (origin_x + j, origin_y + i)

            if line_color is None:
                line_color = pixel
                line_start = position
            elif pixel != line_color:
                close_run(line_color, line_start, line_end)
                line_color = pixel
                line_start = position
            line_end = position

        if line_color is not None:
            close_run(line_color, line_start, line_end)

    return lines, stroke_count


def compile_strokes(
    grid,
    origin: "tuple[float, float]" = (0.0, 0.0),
    pixel_interval: int = 1,
) -> StrokePlan:
    """Build the stroke plan using whichever orientation needs fewer strokes.

    AIDEV-NOTE: On a tie the vertical scan is kept.
    """
    vertical_lines, vertical_count = extract_strokes(
        grid, ScanOrientation.VERTICAL, origin, pixel_interval
    )
    horizontal_lines, horizontal_count = extract_strokes(
        grid, ScanOrientation.HORIZONTAL, origin, pixel_interval
    )

    if vertical_count > horizontal_count:
        lines, count = horizontal_lines, horizontal_count
        orientation = ScanOrientation.HORIZONTAL
    else:
        lines, count = vertical_lines, vertical_count
        orientation = ScanOrientation.VERTICAL

    segments = MappingProxyType({color: tuple(segs) for color, segs in lines.items()})
    return StrokePlan(segments=segments, orientation=orientation, stroke_count=count)


def build_color_coordinates(
    palette: "list[tuple[int, int, int]]",
    positions: "list[tuple[float, float]]",
) -> "dict[tuple[int, int, int], tuple[float, float]]":
    """Pair palette slots with recorded swatch positions, in order.

    Extra entries on either side are ignored.
    """
    return {
        tuple(color): (float(x), float(y)) for color, (x, y) in zip(palette, positions)
    }
