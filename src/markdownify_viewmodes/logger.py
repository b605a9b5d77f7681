"""Logging configuration for markdownify-viewmodes with custom verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Between DEBUG (10) and INFO (20) - shows each resolution tier as it is checked
CHECKS_LEVEL = 15

logging.addLevelName(CHECKS_LEVEL, "CHECKS")

LOGGER_NAME = "markdownify_viewmodes"

# Verbosity level constants for external use
VERBOSITY_SILENT = 0  # Only errors
VERBOSITY_WARNINGS = 1  # Misconfiguration warnings
VERBOSITY_CHECKS = 2  # Show every tier considered
VERBOSITY_DEBUG = 3  # Full debug output


class ViewModesLogger(logging.Logger):
    """Logger with a semantic method for the CHECKS verbosity level."""

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log checks (verbosity level 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> ViewModesLogger:
    """Get the package logger instance (singleton).

    Returns the same logger instance on every call. Use setup_logger()
    to configure it for command-line output.

    Returns:
        The package logger singleton instance
    """
    previous = logging.getLoggerClass()
    logging.setLoggerClass(ViewModesLogger)
    try:
        logger = logging.getLogger(LOGGER_NAME)
    finally:
        logging.setLoggerClass(previous)
    assert isinstance(logger, ViewModesLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the package logger with a verbosity level.

    Can be called multiple times to reconfigure the logger.

    Args:
        verbosity: 0=silent (errors only), 1=warnings, 2=checks, 3=debug
        stream: Optional output stream (defaults to sys.stderr, useful for testing)
    """
    logger = get_logger()

    logger.handlers.clear()

    level_map = {
        0: logging.ERROR,
        1: logging.WARNING,
        2: CHECKS_LEVEL,
        3: logging.DEBUG,
    }
    logger.setLevel(level_map.get(verbosity, logging.ERROR))

    output_stream = stream if stream is not None else sys.stderr

    handler = logging.StreamHandler(output_stream)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Reset the logger to its unconfigured state.

    Useful for testing to ensure clean state between tests.
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def checks_enabled() -> bool:
    """Check if checks-level logging is enabled (verbosity >= 2)."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)
