"""Typing game coordinator.

``TypingGame`` owns the lyric sequence, the typing session and the active
line index. Each external event (lyrics arriving, duration known, playback
tick, keystroke, reset) goes through one method that updates all three
under a single lock, so an observer never sees a reset session paired with
the old lyrics or the reverse.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import SyncConfig
from ..utils.logging import get_logger
from .lrc import clean_lyrics, has_timestamps, parse_lyrics, parse_timed_lines
from .models import (
    ForceAdvance,
    LyricSequence,
    NoAction,
    ReconcileAction,
    ScoreRecord,
    SignalStall,
    SyncState,
    TypingSession,
    TypingStats,
)
from .reconcile import advance_buffer, reconcile
from .scores import ScoreSink
from .sources import LyricPayload, LyricSource
from .sync import LyricSynchronizer
from .timing import normalize_timing
from .typing_eval import evaluate_typing

logger = get_logger(__name__)


@dataclass(frozen=True)
class GameSnapshot:
    """Consistent read-only view of the game for presentation."""

    song_id: Optional[str]
    sequence: LyricSequence
    active_index: int
    sync_state: SyncState
    typed: str
    stats: TypingStats
    duration: Optional[float]

    @property
    def target(self) -> str:
        return self.sequence.text


class TypingGame:
    """Single-threaded-style event coordinator for one player.

    Args:
        config: Synchronization and reconciliation thresholds
        score_sink: Receives one ScoreRecord when a session completes
        on_stall: Called with the song id when lyrics fail to sync; the
            collaborator should refetch lyrics and call ``load_lyrics`` again
        clock: Wall-clock source in seconds
        clean: Run ``clean_lyrics`` over raw text before parsing
    """

    def __init__(
        self,
        config: Optional[SyncConfig] = None,
        score_sink: Optional[ScoreSink] = None,
        on_stall: Optional[Callable[[Optional[str]], None]] = None,
        clock: Callable[[], float] = time.time,
        clean: bool = True,
    ):
        self.config = config or SyncConfig()
        self.score_sink = score_sink
        self.on_stall = on_stall
        self.clock = clock
        self.clean = clean

        self._lock = threading.RLock()
        self._song_id: Optional[str] = None
        self._sequence = LyricSequence()
        self._session = TypingSession()
        self._sync = LyricSynchronizer(config=self.config)
        self._duration: Optional[float] = None
        self._needs_retiming = False
        self._stall_signalled = False

    # ------------------------------------------------------------------
    # Song lifecycle
    # ------------------------------------------------------------------

    def select_song(self, song_id: str) -> None:
        """Start a new song; lyrics for any other song id are ignored from now on."""
        with self._lock:
            logger.info(f"Selected song {song_id}")
            self._song_id = song_id
            self._duration = None
            self._install(LyricSequence(), needs_retiming=False)

    def load_lyrics(
        self,
        song_id: str,
        payload: Optional[LyricPayload],
        duration: Optional[float] = None,
    ) -> bool:
        """Install lyrics fetched for ``song_id``.

        Returns False when the result is stale (a newer song was selected).
        Raw text is parsed; a list of ``(start, end, text)`` hints is used
        as-is. Untimed text is re-timed once the media duration is known.
        """
        with self._lock:
            if song_id != self._song_id:
                logger.info(f"Discarding stale lyrics for {song_id} (current: {self._song_id})")
                return False

            if isinstance(payload, str):
                text = clean_lyrics(payload) if self.clean else payload
                sequence = parse_lyrics(text)
                needs_retiming = not has_timestamps(text)
            elif payload:
                sequence = parse_timed_lines(payload)
                needs_retiming = False
            else:
                sequence = LyricSequence()
                needs_retiming = False

            if duration is not None:
                self._duration = duration
            self._install(sequence, needs_retiming)
            if self._needs_retiming and self._duration:
                self._retime(self._duration)
            logger.info(f"Loaded {len(sequence)} lyric lines for {song_id}")
            return True

    def load_from_source(self, song_id: str, source: LyricSource) -> bool:
        """Select ``song_id`` and load whatever ``source`` returns for it."""
        self.select_song(song_id)
        try:
            payload = source.fetch(song_id)
        except Exception as e:
            logger.warning(f"Lyric source failed for {song_id}: {e}")
            payload = None
        return self.load_lyrics(song_id, payload)

    def set_duration(self, song_id: str, duration: float) -> bool:
        """Record the media duration, re-timing untimed lyrics to fit it."""
        with self._lock:
            if song_id != self._song_id:
                return False
            if duration is None or duration <= 0:
                logger.warning(f"Ignoring invalid duration {duration} for {song_id}")
                return False
            self._duration = duration
            if self._needs_retiming:
                self._retime(duration)
            return True

    def _install(self, sequence: LyricSequence, needs_retiming: bool) -> None:
        self._sequence = sequence
        self._needs_retiming = needs_retiming
        self._stall_signalled = False
        self._session.reset()
        self._sync.load(sequence)

    def _retime(self, duration: float) -> None:
        retimed = normalize_timing(
            self._sequence,
            duration,
            self.config.start_offset,
            self.config.end_offset,
        )
        # Same text, so typing progress carries over.
        self._sequence = retimed
        self._sync.retime(retimed)
        self._needs_retiming = False

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def on_playback_tick(self, current_time: float, playing: bool = True) -> ReconcileAction:
        """Process one playback-time sample and apply the reconciliation result."""
        with self._lock:
            now = self.clock()
            active = self._sync.update(current_time, now, playing)
            if not playing:
                return NoAction()

            action = reconcile(
                self._sequence,
                active,
                len(self._session.typed),
                current_time,
                stalled_for=self._sync.stalled_for(now),
                config=self.config,
            )

            if isinstance(action, SignalStall):
                if self._stall_signalled:
                    return NoAction()
                self._handle_stall()
            elif isinstance(action, ForceAdvance):
                if self._session.completed:
                    return NoAction()
                self._force_advance(action.to_position, now)
            return action

    def _handle_stall(self) -> None:
        logger.warning(f"Lyrics for {self._song_id} failed to sync; requesting retry")
        self._stall_signalled = True
        self._sync.mark_failed()
        self._session.reset()
        if self.on_stall is not None:
            try:
                self.on_stall(self._song_id)
            except Exception as e:
                logger.error(f"Stall handler failed: {e}")

    def _force_advance(self, to_position: int, now: float) -> None:
        typed = advance_buffer(self._sequence, self._session.typed, to_position)
        logger.info(
            f"Catching up typing from {len(self._session.typed)} to {len(typed)} chars"
        )
        if self._session.started_at is None:
            self._session.started_at = now
        self._apply_buffer(typed, now)

    # ------------------------------------------------------------------
    # Typing
    # ------------------------------------------------------------------

    def on_input(self, buffer: str) -> TypingStats:
        """Replace the typed buffer with the current contents of the input box."""
        with self._lock:
            now = self.clock()
            target = self._sequence.text
            if not target or self._session.completed:
                return self._stats(now)
            if buffer == self._session.typed:
                return self._stats(now)
            if self._session.started_at is None and buffer:
                self._session.started_at = now
            return self._apply_buffer(buffer, now)

    def type_char(self, char: str) -> TypingStats:
        with self._lock:
            return self.on_input(self._session.typed + char)

    def backspace(self) -> TypingStats:
        with self._lock:
            return self.on_input(self._session.typed[:-1])

    def reset(self) -> None:
        """Clear typing progress, keeping the current lyrics."""
        with self._lock:
            logger.debug("Typing session reset")
            self._session.reset()

    def _apply_buffer(self, buffer: str, now: float) -> TypingStats:
        session = self._session
        target = self._sequence.text
        session.typed = buffer
        stats = evaluate_typing(target, buffer, session.started_at, now)
        session.errors = stats.errors
        session.wpm = stats.wpm
        session.accuracy = stats.accuracy
        if stats.completed and not session.completed:
            session.completed = True
            self._emit_score(stats, now)
        return self._stats(now)

    def _emit_score(self, stats: TypingStats, now: float) -> None:
        target = self._sequence.text
        record = ScoreRecord(
            wpm=stats.wpm,
            accuracy=stats.accuracy,
            errors=stats.errors,
            timestamp=now,
            song_title=target[:20] + "...",
        )
        logger.info(
            f"Session complete: {record.wpm} WPM, {record.accuracy}% accuracy, "
            f"{record.errors} errors"
        )
        if self.score_sink is None:
            return
        try:
            self.score_sink.record(record)
        except Exception as e:
            logger.error(f"Failed to record score: {e}")

    def _stats(self, now: float) -> TypingStats:
        session = self._session
        target = self._sequence.text
        if session.completed:
            # Frozen at completion.
            return TypingStats(
                errors=session.errors,
                wpm=session.wpm,
                accuracy=session.accuracy,
                completed=True,
                typed_length=len(session.typed),
                target_length=len(target),
            )
        return evaluate_typing(target, session.typed, session.started_at, now)

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        with self._lock:
            return GameSnapshot(
                song_id=self._song_id,
                sequence=self._sequence,
                active_index=self._sync.active_index,
                sync_state=self._sync.state,
                typed=self._session.typed,
                stats=self._stats(self.clock()),
                duration=self._duration,
            )
