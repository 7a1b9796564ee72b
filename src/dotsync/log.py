"""Logging setup for dotsync.

Usage:
    from dotsync.log import get_logger

    logger = get_logger(__name__)
"""

import logging
import sys


def setup_logging(level: str = "WARNING") -> None:
    """Configure the root logger with a single stderr handler.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger, typically for ``__name__``."""
    return logging.getLogger(name)
