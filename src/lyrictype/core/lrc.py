"""Lyric text parsing and LyricLine creation.

This module handles:
- Timestamp parsing for ``[mm:ss.xx]``, ``(mm:ss.xx)`` and bare ``mm:ss.xx`` prefixes
- Default spacing for lines without timing
- Cleaning provider noise out of raw lyric dumps
- Rendering timestamps back to LRC form
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ..config import (
    DEFAULT_LINE_SPACING,
    LINE_ORDER_NUDGE,
    LONG_CLOSING_LINE_DURATION,
    SHORT_CLOSING_LINE_DURATION,
    SHORT_LINE_MAX_CHARS,
)
from ..utils.logging import get_logger
from .models import LyricLine, LyricSequence

logger = get_logger(__name__)

# ----------------------
# Timestamp regexes
# ----------------------
# Order matters: the first pattern that matches wins. The bare fractional form
# must be tried before bare mm:ss since the latter is a prefix of the former.
_TIMESTAMP_PATTERNS = [
    ("bracket", re.compile(r"^\[(?P<min>\d+):(?P<sec>\d+)(?:\.(?P<frac>\d+))?\](?P<text>.*)$")),
    ("paren", re.compile(r"^\((?P<min>\d+):(?P<sec>\d+)(?:\.(?P<frac>\d+))?\)(?P<text>.*)$")),
    ("bare_frac", re.compile(r"^(?P<min>\d+):(?P<sec>\d+)\.(?P<frac>\d+)\s+(?P<text>.*)$")),
    ("bare", re.compile(r"^(?P<min>\d+):(?P<sec>\d+)\s+(?P<text>.*)$")),
]


# ----------------------
# Noise filtering
# ----------------------

_DISCLAIMER_PATTERNS = [
    re.compile(r"\.{3}\d+ Usage of Musixmatch content.*", re.DOTALL),
    re.compile(r"\*{3}This Lyrics is NOT for Commercial use\*{3}", re.IGNORECASE),
    re.compile(r"This lyrics is NOT for Commercial use.*", re.IGNORECASE),
    re.compile(r"\d+ Usage of Musixmatch content"),
    re.compile(r"\*{3,}"),
]

_METADATA_PATTERNS = [
    re.compile(r"^lyrics by .*", re.IGNORECASE),
    re.compile(r"^written by .*", re.IGNORECASE),
    re.compile(r"^composed by .*", re.IGNORECASE),
    re.compile(r"^produced by .*", re.IGNORECASE),
    re.compile(r"^published by .*", re.IGNORECASE),
    re.compile(r"^copyright .*", re.IGNORECASE),
    re.compile(r"^embed$", re.IGNORECASE),
    re.compile(r"^submit corrections$", re.IGNORECASE),
    re.compile(r"^.*?lyrics are property and copyright .*", re.IGNORECASE),
]

_SECTION_MARKER_RE = re.compile(r"^\[[^\]]*\]$")
_LONE_TIMESTAMP_RE = re.compile(r"^[\d:]+$")
_TRAILING_ASTERISKS_RE = re.compile(r"\s*\*+\s*$")


def _is_metadata_line(text: str) -> bool:
    """Check if line is credits/copyright boilerplate."""
    return any(pattern.match(text) for pattern in _METADATA_PATTERNS)


def _is_noise_line(text: str) -> bool:
    """Check if line carries no typeable lyric content."""
    if not text or text == "..." or set(text) == {"*"}:
        return True
    if _SECTION_MARKER_RE.match(text):
        return True
    if _LONE_TIMESTAMP_RE.match(text):
        return True
    return _is_metadata_line(text)


def clean_lyrics(raw_text: str) -> str:
    """Strip provider disclaimers, section markers and credits from raw lyrics.

    Timestamped lines are kept so ``parse_lyrics`` can still read their timing.
    Consecutive duplicate lines are collapsed.
    """
    if not raw_text:
        return ""

    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    for pattern in _DISCLAIMER_PATTERNS:
        text = pattern.sub("", text)

    kept: List[str] = []
    for raw_line in text.split("\n"):
        line = _TRAILING_ASTERISKS_RE.sub("", raw_line.strip()).strip()
        if _is_noise_line(line):
            continue
        if kept and kept[-1] == line:
            continue
        kept.append(line)

    removed = len([l for l in text.split("\n") if l.strip()]) - len(kept)
    if removed > 0:
        logger.debug(f"Cleaned {removed} non-lyric lines")
    return "\n".join(kept)


# ----------------------
# Timestamp parsing
# ----------------------


def _fraction_to_ms(frac: Optional[str]) -> int:
    """Right-pad the fractional digits to milliseconds and truncate."""
    if not frac:
        return 0
    return int(frac.ljust(3, "0")[:3])


def parse_timestamp_line(line: str) -> Tuple[Optional[float], str]:
    """Split one trimmed line into (start_time, text).

    Returns ``(None, line)`` when the line carries no timestamp.
    """
    for _name, pattern in _TIMESTAMP_PATTERNS:
        match = pattern.match(line)
        if not match:
            continue
        minutes = int(match.group("min"))
        seconds = int(match.group("sec"))
        ms = _fraction_to_ms(match.groupdict().get("frac"))
        start_time = minutes * 60 + seconds + ms / 1000
        return start_time, match.group("text").strip()
    return None, line


def has_timestamps(raw_text: str) -> bool:
    """Check if any line of the text carries a timestamp."""
    for raw_line in (raw_text or "").splitlines():
        start_time, _text = parse_timestamp_line(raw_line.strip())
        if start_time is not None:
            return True
    return False


def format_timestamp(seconds: float, brackets: bool = True) -> str:
    """Render seconds as ``[mm:ss.mmm]``."""
    total_ms = int(round(max(seconds, 0.0) * 1000))
    minutes, rem_ms = divmod(total_ms, 60_000)
    secs, ms = divmod(rem_ms, 1000)
    stamp = f"{minutes:02d}:{secs:02d}.{ms:03d}"
    return f"[{stamp}]" if brackets else stamp


def closing_line_duration(text: str) -> float:
    """Display window for the final line, shorter for short closing lines."""
    if len(text) > SHORT_LINE_MAX_CHARS:
        return LONG_CLOSING_LINE_DURATION
    return SHORT_CLOSING_LINE_DURATION


def fix_start_order(starts: List[Tuple[float, str]]) -> List[Tuple[float, str]]:
    """Order lines by start time, then shift ties so every start strictly exceeds the previous one.

    The sort is stable, so lines sharing a timestamp keep their file order.
    """
    ordered = sorted(starts, key=lambda pair: pair[0])
    if ordered != list(starts):
        logger.warning("Lyric timestamps out of order; sorting lines by start time")

    fixed: List[Tuple[float, str]] = []
    prev_start: Optional[float] = None
    for idx, (start, text) in enumerate(ordered):
        if prev_start is not None and start <= prev_start:
            shifted = round(prev_start + LINE_ORDER_NUDGE, 3)
            logger.warning(
                "Line %d starts at or before previous line (%.2fs <= %.2fs), moving to %.2fs",
                idx + 1,
                start,
                prev_start,
                shifted,
            )
            start = shifted
        fixed.append((start, text))
        prev_start = start
    return fixed


def build_sequence(starts: Sequence[Tuple[float, str]]) -> LyricSequence:
    """Create lines from (start_time, text) pairs in time order, chaining end times."""
    ordered = fix_start_order(list(starts))
    lines: List[LyricLine] = []
    for idx, (start, text) in enumerate(ordered):
        if idx + 1 < len(ordered):
            end = ordered[idx + 1][0]
        else:
            end = start + closing_line_duration(text)
        lines.append(LyricLine(text=text, start_time=start, end_time=end))
    return LyricSequence.from_lines(lines)


def parse_lyrics(raw_text: str) -> LyricSequence:
    """Parse raw lyric text into a LyricSequence with best-effort timing.

    Lines may carry ``[mm:ss.xx]``, ``(mm:ss.xx)`` or bare ``mm:ss.xx``
    timestamps. Untimed lines are placed a fixed spacing after the previous
    line. Input that yields no lines gives an empty sequence.
    """
    if not raw_text:
        return LyricSequence()

    starts: List[Tuple[float, str]] = []
    timed = 0
    for raw_line in raw_text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        start_time, text = parse_timestamp_line(line)
        if start_time is None:
            start_time = starts[-1][0] + DEFAULT_LINE_SPACING if starts else 0.0
        else:
            if not text:
                continue
            timed += 1
        starts.append((start_time, text))

    sequence = build_sequence(starts)
    logger.debug(f"Parsed {len(sequence)} lyric lines ({timed} timestamped)")
    return sequence


TimedHint = Union[Tuple[float, str], Tuple[float, float, str]]


def parse_timed_lines(hints: Iterable[TimedHint]) -> LyricSequence:
    """Build a sequence from structured timing hints supplied by a lyric source.

    Each hint is ``(start, text)`` or ``(start, end, text)``. Explicit end
    times are kept when they fall inside the gap before the next line;
    otherwise lines are chained like parsed text.
    """
    entries = []
    for hint in hints:
        if len(hint) == 3:
            start, end, text = hint  # type: ignore[misc]
        else:
            start, text = hint  # type: ignore[misc]
            end = None
        text = " ".join(str(text).split())
        if not text:
            continue
        entries.append((max(float(start), 0.0), end, text))

    if not entries:
        return LyricSequence()

    # Sorted here so the chained lines below stay aligned with their hints.
    entries.sort(key=lambda entry: entry[0])

    chained = build_sequence([(start, text) for start, _end, text in entries])
    lines: List[LyricLine] = []
    for line, (_start, end, _text) in zip(chained.lines, entries):
        if end is not None and line.start_time < float(end) <= line.end_time:
            line = LyricLine(text=line.text, start_time=line.start_time, end_time=float(end))
        lines.append(line)
    return LyricSequence.from_lines(lines)


def render_lrc(sequence: LyricSequence) -> str:
    """Render a sequence back to LRC text, one ``[mm:ss.mmm]text`` per line."""
    return "\n".join(f"{format_timestamp(line.start_time)}{line.text}" for line in sequence)
