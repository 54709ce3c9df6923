"""Logging setup for the transform sender command line."""

import logging
import sys


def setup_logging(level: int = logging.INFO) -> None:
    """Send log records to stderr with a timestamped console format.

    Args:
        level: Logging level
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(console_handler)


__all__ = ["setup_logging"]
