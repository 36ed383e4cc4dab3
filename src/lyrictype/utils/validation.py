"""Validation utilities."""

import logging

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_duration(duration: float) -> float:
    """Validate a media duration in seconds."""
    if duration <= 0:
        raise ValidationError(f"Duration must be positive, got {duration}")
    return duration


def validate_playback_time(current_time: float) -> float:
    """Validate a playback position."""
    if current_time < 0:
        raise ValidationError(f"Playback time cannot be negative, got {current_time}")
    return current_time


def validate_line_order(lines) -> None:
    """Validate that lines are ordered, non-overlapping and have positive durations."""
    prev = None
    for idx, line in enumerate(lines):
        start = line.start_time
        end = line.end_time
        if start < 0:
            raise ValidationError(f"Line {idx + 1} starts before zero ({start:.2f}s)")
        if end <= start:
            raise ValidationError(
                f"Line {idx + 1} has end before start ({start:.2f}s -> {end:.2f}s)"
            )
        if prev is not None:
            if start < prev.start_time:
                raise ValidationError(
                    f"Line {idx + 1} starts before previous line "
                    f"({start:.2f}s < {prev.start_time:.2f}s)"
                )
            if start < prev.end_time:
                raise ValidationError(
                    f"Line {idx + 1} overlaps previous line "
                    f"({start:.2f}s < {prev.end_time:.2f}s)"
                )
        prev = line
