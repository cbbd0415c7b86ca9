"""Centralized logging configuration."""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "illustration_ai"

_default_level = "INFO"


def configure_logging(level: str) -> None:
    """Set the level for every package logger, including ones created later.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    global _default_level
    _default_level = level.upper()

    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith(PACKAGE_LOGGER) and isinstance(logger, logging.Logger):
            _apply_level(logger, _default_level)


def _apply_level(logger: logging.Logger, level: str) -> None:
    logger.setLevel(getattr(logging, level))
    for handler in logger.handlers:
        handler.setLevel(getattr(logging, level))


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Optional log level override; defaults to the level set by
            ``configure_logging``

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(console_handler)

    _apply_level(logger, (level or _default_level).upper())
    return logger
