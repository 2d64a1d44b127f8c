"""Package-wide logging setup.

Every module logger is a child of the ``docforge`` logger, which owns the
single console handler. ``configure_logging`` sets the level for all of them.
"""

import logging
import os
import sys
from typing import Optional

PACKAGE_LOGGER = "docforge"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Optional[str]) -> int:
    """Map a level name to its numeric value; unknown names mean INFO."""
    resolved = logging.getLevelName((level or "INFO").upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach the console handler once and set the package log level.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to
            the ``LOG_LEVEL`` environment variable, then INFO.

    Returns:
        logging.Logger: The ``docforge`` package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolve_level(level or os.getenv("LOG_LEVEL")))

    if not package_logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        package_logger.addHandler(console_handler)

    return package_logger


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a logger under the ``docforge`` package logger.

    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Optional per-logger level override

    Returns:
        logging.Logger: Configured logger instance
    """
    if not logging.getLogger(PACKAGE_LOGGER).handlers:
        configure_logging()

    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"

    logger = logging.getLogger(name)
    if level:
        logger.setLevel(resolve_level(level))
    return logger
