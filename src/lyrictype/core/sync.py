"""Playback-to-lyric synchronization: decide which line is being sung."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import SyncConfig
from ..utils.logging import get_logger
from .models import LyricLine, LyricSequence, SyncState

logger = get_logger(__name__)

NO_ACTIVE_LINE = -1


def sync_to_time(
    sequence: LyricSequence,
    current_time: float,
    prior_index: int = NO_ACTIVE_LINE,
    config: Optional[SyncConfig] = None,
) -> int:
    """Return the index of the active line at ``current_time`` or -1.

    The whole sequence is scanned on every call, so backward seeks need no
    special handling. ``prior_index`` only feeds transition logging.
    """
    config = config or SyncConfig()
    lines = sequence.lines
    if not lines:
        return NO_ACTIVE_LINE

    index = _find_active_index(lines, current_time, config)
    if index != prior_index:
        logger.debug(
            f"Active line {prior_index} -> {index} at {current_time:.2f}s"
        )
    return index


def _find_active_index(
    lines: Tuple[LyricLine, ...], current_time: float, config: SyncConfig
) -> int:
    for idx, line in enumerate(lines):
        if line.contains(current_time):
            return idx

    for idx in range(len(lines) - 1):
        line = lines[idx]
        next_line = lines[idx + 1]
        if line.end_time <= current_time < next_line.start_time:
            if next_line.start_time - current_time <= config.gap_lookahead:
                return idx + 1
            return idx

    first = lines[0]
    if current_time < first.start_time:
        if first.start_time - current_time < config.intro_lookahead:
            return 0

    return NO_ACTIVE_LINE


def upcoming_lines(
    sequence: LyricSequence, current_time: float, count: int = 3
) -> List[LyricLine]:
    """Next ``count`` lines starting after ``current_time``."""
    return [line for line in sequence if line.start_time > current_time][:count]


@dataclass
class LyricSynchronizer:
    """Tracks the active line and the sync lifecycle across time samples.

    NO_SEQUENCE -> PENDING when lyrics arrive, PENDING -> SYNCED on the first
    sample that finds a line. While media plays without a match the unsynced
    time accumulates; once it passes the stall timeout the state becomes
    FAILED until a new sequence is loaded. Time before the first line's
    start does not count as unsynced.
    """

    config: SyncConfig = field(default_factory=SyncConfig)
    sequence: LyricSequence = field(default_factory=LyricSequence)
    state: SyncState = SyncState.NO_SEQUENCE
    active_index: int = NO_ACTIVE_LINE
    unsynced_since: Optional[float] = None

    def load(self, sequence: LyricSequence) -> None:
        """Replace the sequence and restart synchronization."""
        self.sequence = sequence
        self.active_index = NO_ACTIVE_LINE
        self.unsynced_since = None
        self.state = SyncState.NO_SEQUENCE if sequence.is_empty else SyncState.PENDING
        logger.debug(f"Synchronizer loaded {len(sequence)} lines, state {self.state.value}")

    def retime(self, sequence: LyricSequence) -> None:
        """Swap in re-timed lines for the same text without restarting sync."""
        self.sequence = sequence
        self.active_index = NO_ACTIVE_LINE

    def stalled_for(self, now: float) -> float:
        """Seconds of playback spent without establishing sync."""
        if self.unsynced_since is None:
            return 0.0
        return max(0.0, now - self.unsynced_since)

    def update(self, current_time: float, now: float, playing: bool = True) -> int:
        """Process one playback sample and return the active line index."""
        prior = self.active_index
        self.active_index = sync_to_time(self.sequence, current_time, prior, self.config)

        if self.state == SyncState.FAILED:
            return self.active_index

        if self.active_index != NO_ACTIVE_LINE:
            if self.state != SyncState.SYNCED:
                logger.info(f"Lyrics synced at {current_time:.2f}s (line {self.active_index})")
            self.state = SyncState.SYNCED
            self.unsynced_since = None
            return self.active_index

        if self.state == SyncState.SYNCED:
            # Sync was established; a gap or the outro is not a stall.
            return self.active_index

        waiting_for_intro = (
            not self.sequence.is_empty and current_time < self.sequence.start_time
        )
        if not playing or waiting_for_intro:
            self.unsynced_since = None
            return self.active_index

        if self.unsynced_since is None:
            self.unsynced_since = now
        elif self.stalled_for(now) > self.config.stall_timeout:
            logger.warning(
                f"No lyric sync after {self.stalled_for(now):.1f}s of playback "
                f"({self.state.value}); marking failed"
            )
            self.state = SyncState.FAILED
        return self.active_index

    def mark_failed(self) -> None:
        self.state = SyncState.FAILED
