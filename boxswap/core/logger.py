"""
Logging configuration for the annotation converter.

Provides centralized logging setup and utilities for consistent logging
throughout the application. All loggers hang below the ``boxswap`` logger,
so configuring it once (from the CLI or a test) affects every module.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .constants import LOG_FORMAT, LOG_DATE_FORMAT, DEFAULT_LOG_LEVEL, LOGGER_NAME


_loggers: dict[str, logging.Logger] = {}


def _qualified(name: str) -> str:
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return name
    return f"{LOGGER_NAME}.{name}"


def setup_logger(
    name: str = LOGGER_NAME,
    level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Set up a logger with consistent formatting.

    Calling it again for the same name replaces the handlers, so the CLI can
    reconfigure the root ``boxswap`` logger after loading its config file.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        console: Whether to log to console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(_qualified(name))
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    _loggers[logger.name] = logger
    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get a logger in the ``boxswap`` hierarchy.

    Child loggers carry no handlers of their own and propagate to the
    ``boxswap`` logger configured by :func:`setup_logger`.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    qualified = _qualified(name)
    if qualified not in _loggers:
        _loggers[qualified] = logging.getLogger(qualified)
    return _loggers[qualified]


class LoggerMixin:
    """
    Mixin class to add logging capability to any class.

    Usage:
        class MyParser(LoggerMixin):
            def init(self, path):
                self.logger.debug("Opening %s", path)
    """

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class."""
        if not hasattr(self, '_logger'):
            self._logger = get_logger(f"{self.__class__.__module__}.{self.__class__.__name__}")
        return self._logger
