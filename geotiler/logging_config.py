"""
Logging configuration for the geotiler package.

All modules log under the ``geotiler`` logger hierarchy
(``geotiler.rendering.tile``, ``geotiler.calculations.isobands``, ...).
:func:`setup_logging` attaches a console handler on stdout and, optionally,
a file handler that records everything down to DEBUG regardless of the
console verbosity.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional


LOGGER_NAME = "geotiler"

# Default log format with timestamp and level
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s: %(message)s"

_VERBOSITY_LEVELS = {
    1: logging.DEBUG,
    0: logging.INFO,
    -1: logging.WARNING,
    -2: logging.ERROR,
}

_ENV_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _resolve_level(verbosity: int) -> int:
    """Console level for a verbosity, overridden by GEOTILER_LOG_LEVEL."""
    env_level = os.environ.get("GEOTILER_LOG_LEVEL", "").upper()
    if env_level in _ENV_LEVELS:
        return getattr(logging, env_level)
    return _VERBOSITY_LEVELS[max(-2, min(1, verbosity))]


def _handler(handler: logging.Handler, level: int, format_string: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string))
    return handler


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Configure logging for the geotiler package.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        verbosity: Verbosity level (0=INFO, 1=DEBUG, -1=WARNING, -2=ERROR)
        log_file: Optional path to a log file; it always receives DEBUG records
        format_string: Optional custom format string for console messages

    Environment Variables:
        GEOTILER_LOG_LEVEL: Override console level (DEBUG, INFO, WARNING, ERROR)

    Example:
        >>> setup_logging(verbosity=1)  # Enable DEBUG logging
        >>> setup_logging(-1, log_file="tiles.log")  # Quiet console, full file log
    """
    level = _resolve_level(verbosity)
    if format_string is None:
        format_string = DEFAULT_FORMAT if verbosity >= 0 else SIMPLE_FORMAT

    # Third-party libraries (matplotlib, shapely) only report warnings
    logging.root.setLevel(logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level, format_string))
    logger.setLevel(level)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode='a')
        except OSError as e:
            logger.warning(f"Failed to create log file {log_file}: {e}")
        else:
            logger.addHandler(_handler(file_handler, logging.DEBUG, DEFAULT_FORMAT))
            logger.setLevel(logging.DEBUG)
            logger.info(f"Logging to file: {log_file}")

    logger.debug(f"Logging configured: level={logging.getLevelName(level)}")
