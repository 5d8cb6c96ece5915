"""
Logging Infrastructure

Provides logging setup and timed step banners.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "spotgenre"

_logger = None


def setup_logging(log_dir: Path, log_level: str = "INFO") -> logging.Logger:
    """
    Set up structured logging for the application.

    Args:
        log_dir: Directory for log files
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    global _logger

    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Avoid duplicate handlers; a bare console handler from get_logger() is replaced
    if any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        _logger = logger
        return logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    log_file = log_dir / f"spotgenre_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    # Keep spotipy's HTTP error logging out of the console
    logging.getLogger("spotipy").setLevel(logging.WARNING)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance."""
    global _logger
    if _logger is None:
        _logger = logging.getLogger(LOGGER_NAME)
        if not _logger.handlers:
            # Default console handler if not configured
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            _logger.addHandler(handler)
            _logger.setLevel(logging.INFO)
    return _logger


def log_step_banner(step_name: str, width: int = 60) -> None:
    """Log a demarcation banner for a pipeline step."""
    logger = get_logger()
    sep = "=" * width
    logger.info(sep)
    logger.info(f"  {step_name}")
    logger.info(sep)


@contextmanager
def timed_step(step_name: str):
    """Context manager to time and log execution of a step."""
    logger = get_logger()
    log_step_banner(step_name)
    start_time = time.time()
    logger.info(f"[START] {step_name}")
    try:
        yield
    finally:
        elapsed = time.time() - start_time
        logger.info(f"[END] {step_name} (took {elapsed:.2f}s)")
