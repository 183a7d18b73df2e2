"""
Centralized logging configuration for the melee_census package.

This module provides consistent logging setup across the scraping and
checkpointing components, plus a timing helper for long-running steps.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path

PACKAGE_LOGGER = "melee_census"


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    format_style: str = "detailed",
    include_timestamp: bool = True,
) -> logging.Logger:
    """Set up centralized logging for the melee_census package.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to logging.INFO.
        log_file: Optional file to write logs to. Defaults to None.
        format_style: Format style: "simple", "detailed", or "json". Defaults to "detailed".
        include_timestamp: Whether to include timestamps in log messages. Defaults to True.

    Returns:
        Configured logger instance.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    logger.handlers.clear()

    if format_style == "simple":
        format_string = "%(levelname)s: %(message)s"
    elif format_style == "json":
        format_string = '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        if include_timestamp:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    # stderr keeps the tqdm bar on stdout readable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


@contextmanager
def log_timing(
    logger: logging.Logger, operation: str, level: int = logging.INFO
):
    """Context manager to log the timing of operations.

    Args:
        logger: Logger to use for timing messages.
        operation: Description of the operation being timed.
        level: Logging level for timing messages. Defaults to logging.INFO.

    Examples:
        >>> logger = logging.getLogger(__name__)
        >>> with log_timing(logger, "harvesting 2019-2"):
        ...     row = harvester.process_month(2019, 2)
    """
    start_time = time.time()
    logger.log(level, f"Starting {operation}")

    try:
        yield
        elapsed_time = time.time() - start_time
        logger.log(level, f"Completed {operation} in {elapsed_time:.2f}s")
    except Exception as exception:
        elapsed_time = time.time() - start_time
        logger.error(
            f"Failed {operation} after {elapsed_time:.2f}s: {exception}"
        )
        raise
