"""Logging configuration for the S3 bucket tester."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "s3tester"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a Rich handler to the package logger.

    Args:
        verbose: Log at DEBUG (request/response details, canonical
            strings) instead of WARNING.

    Returns:
        The configured package logger.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True, legacy_windows=True),
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    logger.addHandler(handler)
    logger.propagate = False
    return logger
