"""Minimal logging utilities for FTML.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from ftml.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Parsed %d paragraphs", 3)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "ftml." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'ftml.mymodule'
    """
    if not (name == "ftml" or name.startswith("ftml.")):
        name = f"ftml.{name}"
    return logging.getLogger(name)
