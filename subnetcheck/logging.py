"""Logging configuration for the subnetcheck package."""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO

from .config import Config, LoggingSettings

def setup_logger(name: str = "subnetcheck", level: Optional[int] = None,
                 settings: Optional[LoggingSettings] = None,
                 stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Set up a logger with the specified name and log level.

    Args:
        name: The name of the logger
        level: The logging level (default: from settings or LOG_LEVEL)
        settings: Optional logging settings adding a rotating log file
        stream: Console stream (default: sys.stdout)

    Returns:
        Configured logger instance
    """
    if level is None:
        level_name = settings.level if settings else Config.LOG_LEVEL
        level = getattr(logging, level_name.upper(), logging.INFO)
    stream = stream or sys.stdout

    logger = logging.getLogger(name)
    logger.setLevel(level)
    formatter = logging.Formatter(Config.LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    # Streams get swapped between CLI invocations; replace the console handler
    for handler in [h for h in logger.handlers if type(h) is logging.StreamHandler]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    if settings and settings.file and not any(
        isinstance(h, RotatingFileHandler) for h in logger.handlers
    ):
        log_file = Path(settings.file).expanduser().absolute()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_file}")

    return logger
