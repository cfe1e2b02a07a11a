"""Configuration management for PadCompat.

This module handles loading, saving, and validating configuration
from JSON files. The default config directory is derived from APPDATA
(or the home directory).
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Default paths
DEFAULT_CONFIG_DIR = Path(os.environ.get("APPDATA", "~")) / "PadCompat"
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_DATA_DIR = "data"
DEFAULT_LOGS_DIR = "logs"
DEFAULT_DATABASE_FILE = "compatibility.json"
DEFAULT_OVERRIDES_FILE = "overrides.txt"

# Controller polling interval bounds (milliseconds)
MIN_CHECK_INTERVAL_MS = 100
MAX_CHECK_INTERVAL_MS = 10000


@dataclass
class DetectionConfig:
    """Configuration for compatibility detection."""

    auto_detect_compatibility: bool = True
    auto_detection_completed: bool = False
    enable_community_database: bool = True  # Reserved, no remote source yet
    ignored_games: list[str] = field(default_factory=list)  # Entry ids or names


@dataclass
class DisplayConfig:
    """Configuration consumed by presentation collaborators."""

    show_controller_status: bool = True
    show_compatibility_warnings: bool = True
    controller_check_interval_ms: int = 1000


@dataclass
class Config:
    """Main configuration container for PadCompat.

    Attributes:
        config_dir: Base directory for all PadCompat data
        data_dir: Directory holding the compatibility database and overrides
        logs_dir: Directory for log files
        database_file: File name of the compatibility database
        overrides_file: File name of the manual override sidecar
        detection: Detection configuration
        display: Display configuration
    """

    config_dir: Path = field(default_factory=lambda: DEFAULT_CONFIG_DIR.expanduser())
    data_dir: Path = field(default_factory=lambda: Path(DEFAULT_DATA_DIR))
    logs_dir: Path = field(default_factory=lambda: Path(DEFAULT_LOGS_DIR))
    database_file: str = DEFAULT_DATABASE_FILE
    overrides_file: str = DEFAULT_OVERRIDES_FILE

    detection: DetectionConfig = field(default_factory=DetectionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def __post_init__(self) -> None:
        """Resolve relative paths to absolute paths."""
        if not self.data_dir.is_absolute():
            self.data_dir = self.config_dir / self.data_dir
        if not self.logs_dir.is_absolute():
            self.logs_dir = self.config_dir / self.logs_dir

    @property
    def database_path(self) -> Path:
        """Path of the compatibility database file."""
        return self.data_dir / self.database_file

    @property
    def overrides_path(self) -> Path:
        """Path of the manual override sidecar file."""
        return self.data_dir / self.overrides_file

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for directory in [self.config_dir, self.data_dir, self.logs_dir]:
            directory.mkdir(parents=True, exist_ok=True)

    def is_ignored(self, entry_id: str, name: str = "") -> bool:
        """Check if a game is on the ignore list, by id or by name."""
        ignored = {g.lower() for g in self.detection.ignored_games}
        return entry_id.lower() in ignored or (bool(name) and name.lower() in ignored)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for JSON serialization."""
        return {
            "config_dir": str(self.config_dir),
            "data_dir": str(self.data_dir),
            "logs_dir": str(self.logs_dir),
            "database_file": self.database_file,
            "overrides_file": self.overrides_file,
            "detection": {
                "auto_detect_compatibility": self.detection.auto_detect_compatibility,
                "auto_detection_completed": self.detection.auto_detection_completed,
                "enable_community_database": self.detection.enable_community_database,
                "ignored_games": list(self.detection.ignored_games),
            },
            "display": {
                "show_controller_status": self.display.show_controller_status,
                "show_compatibility_warnings": self.display.show_compatibility_warnings,
                "controller_check_interval_ms": self.display.controller_check_interval_ms,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        config = cls()

        if "config_dir" in data:
            config.config_dir = Path(data["config_dir"])
        config.data_dir = Path(data.get("data_dir", DEFAULT_DATA_DIR))
        config.logs_dir = Path(data.get("logs_dir", DEFAULT_LOGS_DIR))
        config.database_file = data.get("database_file", DEFAULT_DATABASE_FILE)
        config.overrides_file = data.get("overrides_file", DEFAULT_OVERRIDES_FILE)

        # Load detection config
        if "detection" in data:
            detection_data = data["detection"]
            config.detection = DetectionConfig(
                auto_detect_compatibility=detection_data.get("auto_detect_compatibility", True),
                auto_detection_completed=detection_data.get("auto_detection_completed", False),
                enable_community_database=detection_data.get("enable_community_database", True),
                ignored_games=detection_data.get("ignored_games", []) or [],
            )

        # Load display config
        if "display" in data:
            display_data = data["display"]
            config.display = DisplayConfig(
                show_controller_status=display_data.get("show_controller_status", True),
                show_compatibility_warnings=display_data.get("show_compatibility_warnings", True),
                controller_check_interval_ms=display_data.get("controller_check_interval_ms", 1000),
            )

        # Re-run post_init to resolve paths
        config.__post_init__()

        return config


def validate_config(config: Config) -> list[str]:
    """Validate configuration values.

    Args:
        config: Config object to validate.

    Returns:
        List of error messages. Empty if the configuration is valid.
    """
    errors: list[str] = []

    interval = config.display.controller_check_interval_ms
    if interval < MIN_CHECK_INTERVAL_MS:
        errors.append(f"Controller check interval must be at least {MIN_CHECK_INTERVAL_MS}ms")
    if interval > MAX_CHECK_INTERVAL_MS:
        errors.append("Controller check interval should not exceed 10 seconds")

    if not config.database_file:
        errors.append("Database file name cannot be empty")
    if not config.overrides_file:
        errors.append("Overrides file name cannot be empty")

    return errors


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Config object with loaded settings.

    Raises:
        json.JSONDecodeError: If config file contains invalid JSON.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_DIR.expanduser() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        # Return default config if no config file exists
        return Config()

    with open(config_path, encoding="utf-8") as f:
        data = json.load(f)

    return Config.from_dict(data)


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Config object to save.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = config.config_dir / DEFAULT_CONFIG_FILE

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)


def get_default_config() -> Config:
    """Get the default configuration.

    Returns:
        A new Config object with default settings.
    """
    return Config()
