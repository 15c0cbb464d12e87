"""
Configuration management for focusbm
"""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "focusbm"


class Config:
    """Configuration manager for the application"""

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.config_file = self.config_dir / "config.yaml"
        self.bookmarks_file = self.config_dir / "bookmarks.yml"

        # Ensure config directory exists
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configuration
        self.defaults = {
            "logging": {
                "level": "WARNING",
                "file": None,
            },
            "tmux": {
                "timeout": 5.0,
            },
            "restore": {
                "context_delay": 0.0,  # seconds between batch items
            },
            "panel": {
                "width": 560,
                "height": 420,
            },
        }

        self.config = self.load_config()

    def load_config(self) -> dict[str, Any]:
        """Load configuration from file or create default"""
        if self.config_file.exists():
            try:
                with open(self.config_file) as f:
                    config = yaml.safe_load(f)
                    # Merge with defaults to ensure all keys exist
                    return self._merge_config(self.defaults, config or {})
            except (OSError, yaml.YAMLError) as e:
                logger.error("Error loading config: %s", e)
                return self._merge_config(self.defaults, {})
        else:
            # Create default config file
            self.save_config(self.defaults)
            return self._merge_config(self.defaults, {})

    def save_config(self, config: dict[str, Any] | None = None) -> None:
        """Save configuration to file"""
        if config is None:
            config = self.config

        try:
            with open(self.config_file, "w") as f:
                yaml.dump(config, f, default_flow_style=False)
        except OSError as e:
            logger.error("Error saving config: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation"""
        keys = key.split(".")
        config = self.config

        # Navigate to the parent of the target key
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        self.save_config()

    def _merge_config(
        self, defaults: dict[str, Any], user_config: dict[str, Any]
    ) -> dict[str, Any]:
        """Recursively merge user config with defaults"""
        result = {
            key: dict(value) if isinstance(value, dict) else value
            for key, value in defaults.items()
        }

        for key, value in user_config.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result

    @property
    def bookmarks_path(self) -> Path:
        """Path to the YAML bookmark store"""
        return self.bookmarks_file

    @property
    def log_path(self) -> Path | None:
        name = self.get("logging.file")
        if not name:
            return None
        path = Path(name).expanduser()
        return path if path.is_absolute() else self.config_dir / path
