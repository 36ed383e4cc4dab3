"""Fit provisional lyric timing to the real media duration."""

import math
from typing import List, Optional, Tuple

from ..config import END_OFFSET, PHRASE_GAP, START_OFFSET
from ..utils.logging import get_logger
from .models import LyricLine, LyricSequence

logger = get_logger(__name__)

_PHRASE_END_CHARS = (".", "!", "?")


def _ends_phrase(text: str) -> bool:
    return text.rstrip().endswith(_PHRASE_END_CHARS)


def _usable_offset(name: str, value: float) -> float:
    if value is None or not math.isfinite(value) or value < 0:
        logger.warning(f"Ignoring invalid {name} {value}; using 0s")
        return 0.0
    return value


def _slot_bounds(start_offset: float, per_line: float, count: int, latest_end: float) -> List[float]:
    """Rounded slot boundaries; slot i spans ``bounds[i]`` to ``bounds[i + 1]``."""
    return [
        min(round(start_offset + idx * per_line, 1), latest_end)
        for idx in range(count + 1)
    ]


def normalize_timing(
    sequence: LyricSequence,
    duration: float,
    start_offset: Optional[float] = None,
    end_offset: Optional[float] = None,
    gap: float = PHRASE_GAP,
) -> LyricSequence:
    """Spread lines evenly across ``duration`` keeping their order.

    ``start_offset`` and ``end_offset`` reserve silence before the first and
    after the last line. When the media is too short for them, both are
    reduced to a tenth of the duration. Lines whose text ends a phrase
    (``.``, ``!``, ``?``) finish ``gap`` seconds early. Times are rounded to
    one decimal place, and each line ends where the next one's rounded start
    begins. Consecutive lines whose rounded slot collapses to nothing are
    merged, which leaves the joined target text unchanged.

    Args:
        sequence: Lines with provisional timing
        duration: Authoritative media duration in seconds
        start_offset: Seconds before the first line (default from config)
        end_offset: Seconds after the last line (default from config)
        gap: Pause after phrase-ending lines

    Returns:
        A new LyricSequence; the input is returned unchanged if it is empty
        or the duration leaves no room for lines.
    """
    if start_offset is None:
        start_offset = START_OFFSET
    if end_offset is None:
        end_offset = END_OFFSET
    start_offset = _usable_offset("start offset", start_offset)
    end_offset = _usable_offset("end offset", end_offset)

    if sequence.is_empty:
        return sequence

    if duration is None or not math.isfinite(duration) or duration <= 0:
        logger.warning(f"Cannot normalize timing to invalid duration {duration}")
        return sequence

    available = duration - start_offset - end_offset
    if available <= 0:
        reduced = float(math.floor(duration / 10))
        if reduced == start_offset and reduced == end_offset:
            logger.warning(
                f"Duration {duration:.1f}s leaves no room for lyrics; keeping timing"
            )
            return sequence
        logger.debug(
            f"Duration {duration:.1f}s too short for offsets "
            f"{start_offset:.1f}/{end_offset:.1f}s, retrying with {reduced:.0f}s"
        )
        return normalize_timing(sequence, duration, reduced, reduced, gap)

    per_line = available / len(sequence)
    latest_end = math.floor(duration * 10 + 1e-9) / 10
    bounds = _slot_bounds(start_offset, per_line, len(sequence), latest_end)

    slots: List[Tuple[float, float, List[str]]] = []
    pending: List[str] = []
    slot_start = bounds[0]
    for idx, line in enumerate(sequence):
        pending.append(line.text)
        slot_end = bounds[idx + 1]
        if slot_end > slot_start:
            slots.append((slot_start, slot_end, pending))
            slot_start = slot_end
            pending = []
    if pending:
        if not slots:
            logger.warning(
                f"Duration {duration:.2f}s is too short to time {len(sequence)} lines; keeping timing"
            )
            return sequence
        start, end, texts = slots[-1]
        slots[-1] = (start, end, texts + pending)

    merged = len(sequence) - len(slots)
    if merged:
        logger.warning(f"Merged {merged} lines whose slots were shorter than 0.1s")

    lines: List[LyricLine] = []
    for start, end, texts in slots:
        text = " ".join(texts)
        if _ends_phrase(text):
            with_gap = round(end - gap, 1)
            if with_gap > start:
                end = with_gap
        lines.append(LyricLine(text=text, start_time=start, end_time=end))

    logger.debug(
        f"Normalized {len(lines)} lines to {duration:.1f}s ({per_line:.2f}s per line)"
    )
    return LyricSequence.from_lines(lines)
