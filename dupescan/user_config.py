"""
User configuration management for DupeScan.

Supports configuration from multiple sources (in order of priority):
1. Runtime parameters (highest priority)
2. User config file (~/.dupescan/config.json)
3. Default values from config.py (lowest priority)

Example config.json:
{
    "workers": 4,
    "max_concurrent_dirs": 10,
    "grid_width": 9,
    "grid_height": 8,
    "max_image_pixels": 500000000,
    "follow_symlinks": false
}

A value of the wrong type or out of range is logged at WARNING and the
default is used instead. "max_image_pixels": 0 disables Pillow's
decompression bomb check.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional
import logging

from .config import (
    CONFIG_DIR,
    DEFAULT_WORKERS,
    MAX_CONCURRENT_DIRS,
    DEFAULT_GRID_WIDTH,
    DEFAULT_GRID_HEIGHT,
    MAX_IMAGE_PIXELS,
)

logger = logging.getLogger(__name__)


class UserConfig:
    """
    Manages user configuration from a JSON file.

    The file is loaded lazily on first access and cached until reload().
    """

    def __init__(self, config_dir: Optional[str | Path] = None):
        self._config_dir = Path(config_dir) if config_dir else Path(CONFIG_DIR)
        self._config_data: Optional[dict] = None
        self._warned_keys: set[str] = set()

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir

    @property
    def config_file_path(self) -> Path:
        """Get the configuration file path."""
        return self.config_dir / 'config.json'

    def _load_config_file(self) -> dict:
        """Load configuration from JSON file."""
        if not self.config_file_path.exists():
            return {}

        try:
            with open(self.config_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load config file {self.config_file_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_file_path}: expected a JSON object")
            return {}

        logger.debug(f"Loaded configuration from {self.config_file_path}")
        return data

    def _get_config_data(self) -> dict:
        """Get cached config data (lazy loading)."""
        if self._config_data is None:
            self._config_data = self._load_config_file()
        return self._config_data

    def reload(self):
        """Reload configuration from file."""
        self._config_data = None
        self._warned_keys.clear()

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the config file, or ``default``.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value
        """
        config_data = self._get_config_data()
        if key in config_data and config_data[key] is not None:
            return config_data[key]
        return default

    def _get_int(self, key: str, default: int, minimum: int) -> int:
        """Integer setting; wrong types and out-of-range values fall back to ``default``."""
        value = self.get(key, default=default)
        if isinstance(value, bool) or not isinstance(value, int):
            self._warn_invalid(key, value, f"expected an integer, using {default}")
            return default
        if value < minimum:
            self._warn_invalid(key, value, f"must be >= {minimum}, using {default}")
            return default
        return value

    def _warn_invalid(self, key: str, value: Any, message: str) -> None:
        # Properties are read repeatedly; warn once per key
        if key in self._warned_keys:
            return
        self._warned_keys.add(key)
        logger.warning(f"Ignoring {key}={value!r} in {self.config_file_path}: {message}")

    @property
    def workers(self) -> int:
        """Number of parallel fingerprinting workers."""
        return self._get_int('workers', DEFAULT_WORKERS, minimum=1)

    @property
    def max_concurrent_dirs(self) -> int:
        """Directories listed at the same time."""
        return self._get_int('max_concurrent_dirs', MAX_CONCURRENT_DIRS, minimum=1)

    @property
    def grid_width(self) -> int:
        """Fingerprint grid width in pixels."""
        return self._get_int('grid_width', DEFAULT_GRID_WIDTH, minimum=2)

    @property
    def grid_height(self) -> int:
        """Fingerprint grid height in pixels."""
        return self._get_int('grid_height', DEFAULT_GRID_HEIGHT, minimum=1)

    @property
    def max_image_pixels(self) -> int:
        """Maximum image size in pixels (decompression bomb limit, 0 disables it)."""
        return self._get_int('max_image_pixels', MAX_IMAGE_PIXELS, minimum=0)

    @property
    def follow_symlinks(self) -> bool:
        """Whether symlinked directories are descended into."""
        value = self.get('follow_symlinks', default=False)
        if not isinstance(value, bool):
            self._warn_invalid('follow_symlinks', value, "expected true or false, using false")
            return False
        return value

    def create_example_config(self) -> bool:
        """Create an example configuration file."""
        example_config = {
            "_comment": "DupeScan User Configuration",
            "workers": DEFAULT_WORKERS,
            "max_concurrent_dirs": MAX_CONCURRENT_DIRS,
            "grid_width": DEFAULT_GRID_WIDTH,
            "grid_height": DEFAULT_GRID_HEIGHT,
            "max_image_pixels": MAX_IMAGE_PIXELS,
            "follow_symlinks": False,
        }

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example_config, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False

        logger.info(f"Created example config file at {self.config_file_path}")
        self.reload()
        return True


# Global instance
_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
