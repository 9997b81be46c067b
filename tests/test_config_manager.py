"""Tests for drawing configuration persistence."""

from __future__ import annotations

import json

from config_manager import ConfigManager
from models import DEFAULT_PALETTE, DrawingConfig


class TestConfigManager:
    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        config = ConfigManager(tmp_path / "config.json").load()
        assert config == DrawingConfig()
        assert len(config.palette) == 18
        assert config.palette == DEFAULT_PALETTE

    def test_save_and_load(self, tmp_path) -> None:
        manager = ConfigManager(tmp_path / "config.json")
        config = DrawingConfig(
            dithering=False,
            pixel_interval=4,
            segment_delay=0.02,
            color_delay=0.5,
            cancel_key="f12",
            coordinates_file="swatches.txt",
            palette=[(0, 0, 0), (255, 255, 255)],
        )
        assert manager.save(config) == (True, None)
        assert manager.load() == config

    def test_partial_file_keeps_defaults(self, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"pixel_interval": 3}))
        config = ConfigManager(path).load()
        assert config.pixel_interval == 3
        assert config.dithering is True
        assert config.palette == DEFAULT_PALETTE

    def test_corrupt_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert ConfigManager(path).load() == DrawingConfig()

    def test_save_error_reported(self, tmp_path) -> None:
        manager = ConfigManager(tmp_path / "missing_dir" / "config.json")
        success, error = manager.save(DrawingConfig())
        assert not success
        assert error
