"""Logging setup for the ray tracer."""

import logging
from typing import Optional

from raytrace.config import LOG_FORMAT, LOG_LEVEL


def get_logger(name: str = "raytrace", level: Optional[str] = None) -> logging.Logger:
    """
    Return a logger with a console handler attached.

    Calling this repeatedly for the same name does not stack handlers.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    if level is None:
        level = LOG_LEVEL

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


__all__ = ["get_logger"]
