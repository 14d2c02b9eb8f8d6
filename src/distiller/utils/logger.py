"""Minimal logging utilities for Distiller.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from distiller.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Distilling document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "distiller." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'distiller.mymodule'
    """
    if not (name == "distiller" or name.startswith("distiller.")):
        name = f"distiller.{name}"
    return logging.getLogger(name)
