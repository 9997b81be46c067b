"""Configuration persistence manager for the Drawing Bot.

This module handles loading and saving of drawing settings to/from JSON files.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Tuple

from models import CONFIG_FILE, DrawingConfig


class ConfigManager:
    """Handles loading and saving of drawing configuration."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.drawing_bot_config.json)
        """
        self.config_path = config_path

    def load(self) -> DrawingConfig:
        """Load configuration from file, returning defaults if not found.

        Returns:
            DrawingConfig with loaded or default values
        """
        config = DrawingConfig()

        try:
            if self.config_path.exists():
                with open(self.config_path, "r") as f:
                    data = json.load(f)
                    # Update config with loaded values (fallback to defaults)
                    config.dithering = bool(data.get("dithering", config.dithering))
                    config.pixel_interval = max(
                        1, int(data.get("pixel_interval", config.pixel_interval))
                    )
                    config.segment_delay = float(
                        data.get("segment_delay", config.segment_delay)
                    )
                    config.color_delay = float(data.get("color_delay", config.color_delay))
                    config.cancel_key = str(data.get("cancel_key", config.cancel_key))
                    config.coordinates_file = str(
                        data.get("coordinates_file", config.coordinates_file)
                    )
                    if "palette" in data:
                        config.palette = [
                            tuple(int(c) for c in color) for color in data["palette"]
                        ]
                print(f"✓ Loaded configuration from {self.config_path}")
        except (OSError, ValueError, TypeError) as e:
            print(f"Warning: Could not load config file: {e}")
            config = DrawingConfig()

        return config

    def save(self, config: DrawingConfig) -> Tuple[bool, Optional[str]]:
        """Save configuration to file.

        Args:
            config: DrawingConfig to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        try:
            with open(self.config_path, "w") as f:
                json.dump(asdict(config), f, indent=2)
            return True, None
        except (OSError, TypeError) as e:
            return False, str(e)
