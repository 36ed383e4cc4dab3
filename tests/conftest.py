"""Test configuration and fixtures.

Provides reusable fixtures for:
- Sample lyric texts and parsed sequences
- A controllable wall clock for the game coordinator
- In-memory collaborators (score sink, stall handler)
"""

import logging

import pytest

from lyrictype.config import SyncConfig
from lyrictype.core.lrc import parse_lyrics
from lyrictype.core.models import LyricLine, LyricSequence
from lyrictype.core.scores import HighScoreTable
from lyrictype.core.session import TypingGame


# =============================================================================
# Lyric Fixtures
# =============================================================================


@pytest.fixture
def sample_lrc_text():
    """Timestamped lyrics in the three supported formats."""
    return (
        "[00:01.00]First line of the song\n"
        "(00:05.50)Second line here\n"
        "00:09.25 Third line arrives\n"
        "00:14 Last one\n"
    )


@pytest.fixture
def plain_lyrics_text():
    """Lyrics with no timing at all."""
    return "Hello darkness my old friend.\nI've come to talk with you again\nBecause a vision softly creeping!\n"


@pytest.fixture
def gapped_sequence():
    """Three lines with a one-second gap between the first two."""
    return LyricSequence.from_lines(
        [
            LyricLine(text="one two three", start_time=10.0, end_time=12.0),
            LyricLine(text="four five", start_time=13.0, end_time=15.0),
            LyricLine(text="six", start_time=15.0, end_time=16.0),
        ]
    )


@pytest.fixture
def long_sequence():
    """Ten lines of 28 characters each, four seconds apart starting at 0."""
    text = "\n".join(f"line number {i} of the song ok" for i in range(10))
    return parse_lyrics(text)


# =============================================================================
# Game Fixtures
# =============================================================================


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def score_table():
    return HighScoreTable()


@pytest.fixture
def stall_calls():
    return []


@pytest.fixture
def game(clock, score_table, stall_calls):
    """A TypingGame wired to in-memory collaborators and the fake clock."""
    return TypingGame(
        config=SyncConfig(),
        score_sink=score_table,
        on_stall=stall_calls.append,
        clock=clock,
    )


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers that CLI tests attach to the package logger."""
    yield
    logger = logging.getLogger("lyrictype")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
