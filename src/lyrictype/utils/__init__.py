"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    validate_duration,
    validate_playback_time,
    validate_line_order,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_duration",
    "validate_playback_time",
    "validate_line_order",
]
