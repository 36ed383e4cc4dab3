"""Core lyric timing and typing engine."""

from .models import (
    CharState,
    ForceAdvance,
    LyricLine,
    LyricSequence,
    NoAction,
    ScoreRecord,
    SignalStall,
    SyncState,
    TypingSession,
    TypingStats,
)
from .lrc import clean_lyrics, format_timestamp, parse_lyrics, parse_timed_lines
from .timing import normalize_timing
from .sync import LyricSynchronizer, sync_to_time, upcoming_lines
from .typing_eval import evaluate_typing
from .reconcile import reconcile
from .session import GameSnapshot, TypingGame

__all__ = [
    "CharState",
    "ForceAdvance",
    "LyricLine",
    "LyricSequence",
    "NoAction",
    "ScoreRecord",
    "SignalStall",
    "SyncState",
    "TypingSession",
    "TypingStats",
    "clean_lyrics",
    "format_timestamp",
    "parse_lyrics",
    "parse_timed_lines",
    "normalize_timing",
    "LyricSynchronizer",
    "sync_to_time",
    "upcoming_lines",
    "evaluate_typing",
    "reconcile",
    "GameSnapshot",
    "TypingGame",
]
