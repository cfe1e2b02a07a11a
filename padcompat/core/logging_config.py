"""Logging configuration for PadCompat.

This module sets up structured logging with file rotation,
separate logs for different concerns (main, detection, database).
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

# Default settings
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5


class PadCompatLogger:
    """Centralized logger management for PadCompat.

    Manages multiple log files for different concerns:
        - main.log: General application logging
        - detection.log: One line per classification verdict
        - database.log: One line per compatibility database write
    """

    _instance: Optional["PadCompatLogger"] = None
    _initialized: bool = False

    def __new__(cls) -> "PadCompatLogger":
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

        root_logger = logging.getLogger("padcompat")
        root_logger.setLevel(log_level)

        # Calling setup twice must not duplicate output
        for handler in list(root_logger.handlers):
            handler.close()
        root_logger.handlers.clear()

        main_handler = self._create_file_handler(
            logs_dir / "main.log",
            DETAILED_FORMAT,
        )
        root_logger.addHandler(main_handler)

        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(log_level)
            console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
            root_logger.addHandler(console_handler)

        self.loggers["main"] = root_logger

        self._setup_detection_logger(logs_dir)
        self._setup_database_logger(logs_dir)

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

    def _setup_dedicated_logger(self, key: str, logs_dir: Path, tag: str) -> None:
        logger = logging.getLogger(f"padcompat.{key}")
        logger.setLevel(self.log_level)
        logger.propagate = False  # Don't also log to main

        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

        handler = self._create_file_handler(
            logs_dir / f"{key}.log",
            f"%(asctime)s | %(levelname)-8s | {tag} | %(message)s",
        )
        logger.addHandler(handler)
        self.loggers[key] = logger

    def _setup_detection_logger(self, logs_dir: Path) -> None:
        """Setup the classification verdict logger."""
        self._setup_dedicated_logger("detection", logs_dir, "DETECT")

    def _setup_database_logger(self, logs_dir: Path) -> None:
        """Setup the database write logger."""
        self._setup_dedicated_logger("database", logs_dir, "DB")

    def get_logger(self, name: str = "main") -> logging.Logger:
        """Get a logger by name.

        Args:
            name: Logger name ("main", "detection", "database").

        Returns:
            The requested logger, or a child of the main logger.
        """
        if name in self.loggers:
            return self.loggers[name]

        if name == "main":
            return logging.getLogger("padcompat")
        return logging.getLogger(f"padcompat.{name}")


# Global logger instance
_logger_manager = PadCompatLogger()


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
            - "detection": Classification verdicts
            - "database": Database writes

    Returns:
        Logger instance.
    """
    return _logger_manager.get_logger(name)


def log_detection(
    game_name: str,
    support_level: str,
    scores: dict[str, float],
) -> None:
    """Log a classification verdict.

    Args:
        game_name: Name of the classified game.
        support_level: Final support level.
        scores: Summed confidence per support level.
    """
    logger = get_logger("detection")
    score_text = ", ".join(f"{level}={score:.2f}" for level, score in scores.items())
    logger.info(f"{game_name} | {support_level} | {score_text or 'no signal'}")


def log_database_write(
    key: str,
    support_level: str,
    source: str,
    success: bool,
) -> None:
    """Log a compatibility database write.

    Args:
        key: Derived game key.
        support_level: Stored support level.
        source: Provenance of the stored level.
        success: Whether the write reached disk.
    """
    logger = get_logger("database")
    status = "SAVED" if success else "NOT SAVED"
    message = f"{key} | {support_level} | {source} | {status}"

    if success:
        logger.info(message)
    else:
        logger.error(message)
