"""Logging configuration for the telemetry controller.

This module sets up logging with file rotation and a separate log for
state transitions (main, actions).
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Log format constants
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DETAILED_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
SIMPLE_FORMAT = "%(levelname)s: %(message)s"
ACTION_FORMAT = "%(asctime)s | %(levelname)-8s | ACTION | %(message)s"

ROOT_LOGGER_NAME = "nvtelemetry"

# Default settings
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
DEFAULT_BACKUP_COUNT = 3


class TelemetryLogger:
    """Centralized logger management.

    Manages two log files:
        - main.log: Everything under the "nvtelemetry" logger tree
        - actions.log: Transition results only
    """

    _instance: Optional["TelemetryLogger"] = None
    _initialized: bool = False

    def __new__(cls) -> "TelemetryLogger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return

        self.logs_dir: Path | None = None
        self.log_level: int = DEFAULT_LOG_LEVEL
        self.loggers: dict[str, logging.Logger] = {}
        self._initialized = True

    def setup(
        self,
        logs_dir: Path,
        log_level: int = DEFAULT_LOG_LEVEL,
        console_output: bool = True,
    ) -> None:
        """Initialize logging with specified configuration.

        Args:
            logs_dir: Directory for log files.
            log_level: Logging level (e.g., logging.INFO).
            console_output: Whether to also log to console.
        """
        self.logs_dir = logs_dir
        self.log_level = log_level

        logs_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(log_level)
        self._reset_handlers(root_logger)

        root_logger.addHandler(self._create_file_handler(logs_dir / "main.log", DETAILED_FORMAT))

        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
            root_logger.addHandler(console_handler)

        self.loggers["main"] = root_logger
        self._setup_action_logger(logs_dir)

    def _reset_handlers(self, logger: logging.Logger) -> None:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def _create_file_handler(
        self,
        log_path: Path,
        format_string: str,
        max_bytes: int = DEFAULT_MAX_BYTES,
        backup_count: int = DEFAULT_BACKUP_COUNT,
    ) -> RotatingFileHandler:
        """Create a rotating file handler.

        Args:
            log_path: Path to the log file.
            format_string: Log format string.
            max_bytes: Maximum file size before rotation.
            backup_count: Number of backup files to keep.

        Returns:
            Configured RotatingFileHandler.
        """
        handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        handler.setLevel(self.log_level)
        handler.setFormatter(logging.Formatter(format_string))
        return handler

    def _setup_action_logger(self, logs_dir: Path) -> None:
        """Setup the transition results logger."""
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.actions")
        logger.setLevel(self.log_level)
        self._reset_handlers(logger)

        logger.addHandler(self._create_file_handler(logs_dir / "actions.log", ACTION_FORMAT))
        self.loggers["actions"] = logger

    def get_logger(self, name: str = "main") -> logging.Logger:
        """Get a logger by name.

        Args:
            name: Logger name ("main", "actions", or any child name).

        Returns:
            The requested logger.
        """
        if name in self.loggers:
            return self.loggers[name]

        if name == "main":
            return logging.getLogger(ROOT_LOGGER_NAME)
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# Global logger instance
_logger_manager = TelemetryLogger()


def setup_logging(
    logs_dir: Path,
    log_level: int = DEFAULT_LOG_LEVEL,
    console_output: bool = True,
) -> None:
    """Initialize the logging system.

    This should be called once at application startup.

    Args:
        logs_dir: Directory for log files.
        log_level: Logging level (default: INFO).
        console_output: Whether to also log to console (default: True).
    """
    _logger_manager.setup(logs_dir, log_level, console_output)


def get_logger(name: str = "main") -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name. Options:
            - "main": General application logging
            - "actions": Enable/disable transition logging
            - "discovery": Catalog resolution logging

    Returns:
        Logger instance.
    """
    return _logger_manager.get_logger(name)


def get_log_level(verbose: int, default: str = "INFO") -> int:
    """Get logging level from a verbosity count.

    Args:
        verbose: Number of -v flags given on the command line.
        default: Level name used when no -v flag is given.

    Returns:
        A logging level constant.
    """
    if verbose >= 1:
        return logging.DEBUG
    return logging.getLevelName(default.upper())
