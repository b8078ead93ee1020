"""Configuration management for the telemetry controller.

This module handles loading, saving, and validating configuration
from JSON files and environment variables.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Default paths
DEFAULT_CONFIG_DIR = Path(os.environ.get("APPDATA", "~")) / "NvTelemetry"
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_LOGS_DIR = "logs"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class ControlConfig:
    """Configuration for OS control calls."""

    command_timeout_seconds: int = 60  # Timeout for each PowerShell invocation
    service_wait_timeout_seconds: int = 30  # WaitForStatus limit for start/stop
    dry_run: bool = False


@dataclass
class Config:
    """Main configuration container.

    Attributes:
        config_dir: Base directory for all controller data
        logs_dir: Directory for log files
        control: OS control configuration
        log_level: Default log level name
    """

    config_dir: Path = field(default_factory=lambda: DEFAULT_CONFIG_DIR.expanduser())
    logs_dir: Path = field(default_factory=lambda: Path(DEFAULT_LOGS_DIR))
    control: ControlConfig = field(default_factory=ControlConfig)
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Resolve relative paths and validate values."""
        if not self.logs_dir.is_absolute():
            self.logs_dir = self.config_dir / self.logs_dir

        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.control.command_timeout_seconds <= 0:
            raise ValueError("command_timeout_seconds must be positive")
        if self.control.service_wait_timeout_seconds <= 0:
            raise ValueError("service_wait_timeout_seconds must be positive")

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        for directory in [self.config_dir, self.logs_dir]:
            directory.mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for JSON serialization."""
        return {
            "config_dir": str(self.config_dir),
            "logs_dir": str(self.logs_dir),
            "log_level": self.log_level,
            "control": {
                "command_timeout_seconds": self.control.command_timeout_seconds,
                "service_wait_timeout_seconds": self.control.service_wait_timeout_seconds,
                "dry_run": self.control.dry_run,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        control_data = data.get("control", {})
        control = ControlConfig(
            command_timeout_seconds=control_data.get("command_timeout_seconds", 60),
            service_wait_timeout_seconds=control_data.get("service_wait_timeout_seconds", 30),
            dry_run=control_data.get("dry_run", False),
        )

        config_dir = Path(data["config_dir"]) if "config_dir" in data else DEFAULT_CONFIG_DIR.expanduser()
        logs_dir = Path(data.get("logs_dir", DEFAULT_LOGS_DIR))

        return cls(
            config_dir=config_dir,
            logs_dir=logs_dir,
            control=control,
            log_level=data.get("log_level", "INFO"),
        )


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Config object with loaded settings.

    Raises:
        json.JSONDecodeError: If config file contains invalid JSON.
        ValueError: If a setting is out of range.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_DIR.expanduser() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        # Return default config if no config file exists
        return Config()

    with open(config_path, encoding="utf-8") as f:
        data = json.load(f)

    return Config.from_dict(data)


def save_config(config: Config, config_path: Path | None = None) -> Path:
    """Save configuration to file.

    Args:
        config: Config object to save.
        config_path: Path to config file. If None, uses default location.

    Returns:
        The path the configuration was written to.
    """
    if config_path is None:
        config_path = config.config_dir / DEFAULT_CONFIG_FILE

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)

    return config_path


def get_default_config() -> Config:
    """Get the default configuration.

    Returns:
        A new Config object with default settings.
    """
    return Config()
