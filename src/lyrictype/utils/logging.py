"""Logging configuration for LyricType.

Everything logs under the ``lyrictype`` namespace. Console output goes to
stderr so CLI results printed on stdout stay machine-readable.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union

ROOT_LOGGER = "lyrictype"
BRIEF_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[Path] = None,
    verbose: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the package logger, replacing any handlers set up earlier.

    Args:
        level: Level name or number
        log_file: Optional file that receives the same records
        verbose: Include timestamps and logger names
        stream: Console stream, stderr by default
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(_resolve_level(level))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(VERBOSE_FORMAT if verbose else BRIEF_FORMAT)

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
