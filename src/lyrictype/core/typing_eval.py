"""Typing evaluation: errors, WPM and accuracy for a typed buffer."""

import math
import time
from typing import List, Optional

from ..config import CHARS_PER_WORD
from .models import CharState, TypingStats


def _round(value: float) -> int:
    """Round half up, as typing tests usually report."""
    return int(math.floor(value + 0.5))


def count_errors(target: str, typed: str) -> int:
    """Count mismatched positions plus every character typed past the target.

    Always computed from scratch so the count cannot drift from the buffer.
    """
    overlap = min(len(typed), len(target))
    errors = sum(1 for i in range(overlap) if typed[i] != target[i])
    if len(typed) > len(target):
        errors += len(typed) - len(target)
    return errors


def char_states(target: str, typed: str) -> List[CharState]:
    """Per-character state over ``max(len(target), len(typed))`` positions."""
    states: List[CharState] = []
    for i in range(max(len(target), len(typed))):
        if i >= len(typed):
            states.append(CharState.PENDING)
        elif i >= len(target):
            states.append(CharState.EXTRA)
        elif typed[i] == target[i]:
            states.append(CharState.CORRECT)
        else:
            states.append(CharState.INCORRECT)
    return states


def calculate_wpm(typed_chars: int, minutes: float, errors: int = 0) -> int:
    """Net words per minute, 5 characters per word, never below zero."""
    if minutes <= 0:
        return 0
    words = typed_chars / CHARS_PER_WORD
    gross = words / minutes
    net = max(0.0, gross - errors / minutes)
    return _round(net)


def calculate_raw_wpm(typed_chars: int, minutes: float) -> int:
    """Gross words per minute without the error penalty."""
    if minutes <= 0:
        return 0
    return _round((typed_chars / CHARS_PER_WORD) / minutes)


def calculate_accuracy(errors: int, total_chars: int) -> int:
    """Percentage of typed characters that are correct, 0-100."""
    if total_chars == 0:
        return 100
    correct = max(0, total_chars - errors)
    accuracy = correct / total_chars * 100
    return min(100, max(0, _round(accuracy)))


def calculate_error_rate(errors: int, total_chars: int) -> int:
    if total_chars == 0:
        return 0
    return _round(errors / total_chars * 100)


_GRADES = [
    (98, "S"),
    (95, "A+"),
    (90, "A"),
    (85, "B+"),
    (80, "B"),
    (75, "C+"),
    (70, "C"),
    (65, "D+"),
    (60, "D"),
]


def grade_for_accuracy(accuracy: float) -> str:
    """Letter grade for an accuracy percentage."""
    for threshold, grade in _GRADES:
        if accuracy >= threshold:
            return grade
    return "F"


def format_clock(seconds: float) -> str:
    """Format seconds as ``m:ss``."""
    seconds = max(0.0, seconds)
    minutes = int(seconds // 60)
    return f"{minutes}:{int(seconds % 60):02d}"


def evaluate_typing(
    target: str,
    typed: str,
    started_at: Optional[float],
    now: Optional[float] = None,
) -> TypingStats:
    """Evaluate ``typed`` against ``target``.

    Args:
        target: Concatenated lyric text
        typed: Everything the user has typed so far
        started_at: Wall-clock time of the first keystroke, or None
        now: Evaluation time (defaults to ``time.time()``)

    Returns:
        TypingStats with errors, net WPM, accuracy and the completion flag.
        WPM is 0 until typing has started and some time has elapsed.
    """
    errors = count_errors(target, typed)
    accuracy = calculate_accuracy(errors, len(typed))

    wpm = 0
    if started_at is not None and typed:
        if now is None:
            now = time.time()
        minutes = (now - started_at) / 60.0
        wpm = calculate_wpm(len(typed), minutes, errors)

    completed = bool(target) and len(typed) >= len(target)
    return TypingStats(
        errors=errors,
        wpm=wpm,
        accuracy=accuracy,
        completed=completed,
        typed_length=len(typed),
        target_length=len(target),
    )
