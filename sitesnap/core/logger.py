"""Structured logging with rotation for the sitesnap service.

This module provides a configured logger with a console handler and an optional
rotating file handler. Logs are human-readable with timestamp, level, module,
and message.

Examples:
    >>> from sitesnap.core.logger import get_logger
    >>> logger = get_logger("sitesnap")
    >>> logger.info("Archive started")
    2026-01-14 23:45:00,123 | INFO | sitesnap | Archive started
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Rotating file handler limits (100MB max file size, 5 backup files)
MAX_LOG_SIZE_BYTES = 100 * 1024 * 1024
BACKUP_COUNT = 5


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Path | None = None,
) -> logging.Logger:
    """Create and configure a logger with console and optional file handlers.

    Configuring the package logger (``"sitesnap"``) once at startup makes every
    module logger obtained with ``logging.getLogger(__name__)`` inherit its
    handlers.

    Args:
        name: Logger name (typically "sitesnap")
        log_level: Logging level as string (DEBUG, INFO, WARNING, ERROR,
            CRITICAL). Controls both the logger and the console handler.
        log_file: Optional path to a rotating log file. Parent directories
            are created automatically. The file handler captures DEBUG.

    Returns:
        Configured logging.Logger instance. Calling again replaces the
        previous handlers.

    Raises:
        ValueError: If log_level is not a valid logging level name.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if log_file is not None else level)

    # Clear existing handlers to allow reconfiguration
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE_BYTES,
            backupCount=BACKUP_COUNT,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
