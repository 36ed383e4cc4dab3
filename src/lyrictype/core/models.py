"""Data models for lyric timing, typing stats and reconciliation."""

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union


@dataclass(frozen=True)
class LyricLine:
    """A single lyric line the user must type, with its display window."""

    text: str
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def contains(self, current_time: float) -> bool:
        """Half-open interval test: the end instant belongs to the next line."""
        return self.start_time <= current_time < self.end_time


@dataclass(frozen=True)
class LyricSequence:
    """Ordered lyric lines plus the concatenated target text."""

    lines: Tuple[LyricLine, ...] = ()

    @classmethod
    def from_lines(cls, lines: Iterable[LyricLine]) -> "LyricSequence":
        return cls(lines=tuple(lines))

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def __getitem__(self, index: int) -> LyricLine:
        return self.lines[index]

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def text(self) -> str:
        """Target text: every line joined by a single space."""
        return " ".join(line.text for line in self.lines)

    @property
    def start_time(self) -> float:
        return self.lines[0].start_time if self.lines else 0.0

    @property
    def end_time(self) -> float:
        return self.lines[-1].end_time if self.lines else 0.0

    def line_offsets(self) -> List[int]:
        """Character offset of each line's text inside ``text``."""
        offsets: List[int] = []
        pos = 0
        for line in self.lines:
            offsets.append(pos)
            pos += len(line.text) + 1
        return offsets

    def offset_of(self, index: int) -> int:
        return self.line_offsets()[index]

    def line_at_position(self, position: int) -> int:
        """Map a global character position back to a line index (-1 if empty).

        The joining space after a line belongs to that line; positions past
        the end map to the last line.
        """
        if not self.lines:
            return -1
        offsets = self.line_offsets()
        return max(0, bisect_right(offsets, max(position, 0)) - 1)


class CharState(str, Enum):
    """Per-character comparison result for presentation."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    PENDING = "pending"
    EXTRA = "extra"


@dataclass(frozen=True)
class TypingStats:
    """Derived statistics for one evaluation of the typed buffer."""

    errors: int = 0
    wpm: int = 0
    accuracy: int = 100
    completed: bool = False
    typed_length: int = 0
    target_length: int = 0

    @property
    def progress(self) -> float:
        """Fraction of the target typed, 0.0-1.0."""
        if self.target_length == 0:
            return 0.0
        return min(1.0, self.typed_length / self.target_length)


@dataclass(frozen=True)
class ScoreRecord:
    """Final result emitted once when a session completes."""

    wpm: int
    accuracy: int
    errors: int
    timestamp: float
    mode: str = "lyrics"
    song_title: str = ""


@dataclass
class TypingSession:
    """Mutable typing progress against the current target text."""

    typed: str = ""
    started_at: Optional[float] = None
    errors: int = 0
    wpm: int = 0
    accuracy: int = 100
    completed: bool = False

    def reset(self) -> None:
        self.typed = ""
        self.started_at = None
        self.errors = 0
        self.wpm = 0
        self.accuracy = 100
        self.completed = False


class SyncState(str, Enum):
    """Synchronizer lifecycle."""

    NO_SEQUENCE = "no_sequence"
    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


@dataclass(frozen=True)
class NoAction:
    """Typed position and playback agree well enough."""

    kind: str = field(default="none", init=False)


@dataclass(frozen=True)
class ForceAdvance:
    """Move the typed position forward to keep up with the music."""

    to_position: int
    kind: str = field(default="force_advance", init=False)


@dataclass(frozen=True)
class SignalStall:
    """Synchronization could not be established; lyrics should be refetched."""

    kind: str = field(default="signal_stall", init=False)


ReconcileAction = Union[NoAction, ForceAdvance, SignalStall]
