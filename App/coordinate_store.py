"""Persistence of palette swatch coordinates.

The file holds one "x y" line per palette slot, in slot order, with no
header. It is rewritten completely on every save.
"""

from pathlib import Path

from models import CoordinateFileError


def save_positions(
    path: str | Path, positions: "list[tuple[float, float]]"
) -> None:
    """Write swatch positions, replacing any previous file content."""
    with open(path, "w") as f:
        for x, y in positions:
            f.write(f"{float(x)!r} {float(y)!r}\n")


def load_positions(path: str | Path) -> "list[tuple[float, float]]":
    """Read swatch positions in palette slot order.

    Returns an empty list if the file does not exist yet.

    Raises:
        CoordinateFileError: If a line does not hold exactly two numbers
    """
    path = Path(path)
    if not path.exists():
        return []

    positions = []
    with open(path, "r") as f:
        for line_number, line in enumerate(f, start=1):
            tokens = line.split()
            if not tokens:
                continue
            if len(tokens) != 2:
                raise CoordinateFileError(
                    f"{path}:{line_number}: expected 2 values, got {len(tokens)}"
                )
            try:
                x, y = float(tokens[0]), float(tokens[1])
            except ValueError as e:
                raise CoordinateFileError(
                    f"{path}:{line_number}: invalid coordinate value: {e}"
                ) from e
            positions.append((x, y))
    return positions
