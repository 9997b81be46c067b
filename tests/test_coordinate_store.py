"""Tests for swatch coordinate persistence."""

from __future__ import annotations

import pytest

from coordinate_store import load_positions, save_positions
from models import CoordinateFileError


class TestRoundTrip:
    def test_round_trip(self, tmp_path) -> None:
        path = tmp_path / "colors_pos.txt"
        positions = [(10.0, 10.0), (20.5, 33.25), (-4.0, 1e-3), (1919.0, 1079.0)]
        save_positions(path, positions)
        assert load_positions(path) == positions

    def test_integer_input_loads_as_float(self, tmp_path) -> None:
        path = tmp_path / "colors_pos.txt"
        save_positions(path, [(3, 4)])
        assert load_positions(path) == [(3.0, 4.0)]

    def test_file_format(self, tmp_path) -> None:
        path = tmp_path / "colors_pos.txt"
        save_positions(path, [(1.5, 2.0), (3.0, 4.5)])
        assert path.read_text() == "1.5 2.0\n3.0 4.5\n"

    def test_save_overwrites(self, tmp_path) -> None:
        path = tmp_path / "colors_pos.txt"
        save_positions(path, [(1.0, 1.0), (2.0, 2.0), (3.0, 3.0)])
        save_positions(path, [(9.0, 9.0)])
        assert load_positions(path) == [(9.0, 9.0)]


class TestLoad:
    def test_missing_file_means_no_positions(self, tmp_path) -> None:
        assert load_positions(tmp_path / "absent.txt") == []

    def test_blank_lines_skipped(self, tmp_path) -> None:
        path = tmp_path / "colors_pos.txt"
        path.write_text("1 2\n\n3 4\n")
        assert load_positions(path) == [(1.0, 2.0), (3.0, 4.0)]

    def test_extra_whitespace_allowed(self, tmp_path) -> None:
        path = tmp_path / "colors_pos.txt"
        path.write_text("  1\t 2  \n")
        assert load_positions(path) == [(1.0, 2.0)]

    @pytest.mark.parametrize("line", ["1", "1 2 3"])
    def test_wrong_token_count(self, tmp_path, line: str) -> None:
        path = tmp_path / "colors_pos.txt"
        path.write_text(f"5 6\n{line}\n")
        with pytest.raises(CoordinateFileError, match=":2: expected 2 values"):
            load_positions(path)

    def test_non_numeric_value(self, tmp_path) -> None:
        path = tmp_path / "colors_pos.txt"
        path.write_text("1 abc\n")
        with pytest.raises(CoordinateFileError, match="invalid coordinate value"):
            load_positions(path)
