"""Lyric source collaborators.

The engine only needs text (or timed hints) for a song id. These sources
cover the offline cases: a static table of demo songs, a placeholder
generator so there is always something to type, and a chain that tries
sources in order.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, Union

from ..utils.logging import get_logger

logger = get_logger(__name__)

TimedLines = List[Tuple[float, float, str]]
LyricPayload = Union[str, TimedLines]

_YOUTUBE_PREFIX_RE = re.compile(
    r"^(https?://)?(www\.)?(youtube\.com/watch\?v=|youtu\.be/)", re.IGNORECASE
)


def normalize_song_id(song_id: str) -> str:
    """Reduce a pasted YouTube URL to its video id."""
    cleaned = _YOUTUBE_PREFIX_RE.sub("", song_id.strip())
    return cleaned.split("&")[0]


class LyricSource(Protocol):
    def fetch(self, song_id: str) -> Optional[LyricPayload]:
        ...


DEMO_SONGS: Dict[str, Dict[str, object]] = {
    "dQw4w9WgXcQ": {
        "title": "Never Gonna Give You Up",
        "artist": "Rick Astley",
        "lyrics": [
            (18.0, 21.0, "We're no strangers to love"),
            (21.5, 25.0, "You know the rules and so do I"),
            (25.5, 29.0, "A full commitment's what I'm thinking of"),
            (29.5, 33.0, "You wouldn't get this from any other guy"),
            (33.5, 37.0, "I just wanna tell you how I'm feeling"),
            (37.5, 42.0, "Gotta make you understand"),
            (42.5, 45.0, "Never gonna give you up"),
            (45.5, 48.0, "Never gonna let you down"),
            (48.5, 52.0, "Never gonna run around and desert you"),
            (52.5, 55.0, "Never gonna make you cry"),
            (55.5, 58.0, "Never gonna say goodbye"),
            (58.5, 62.0, "Never gonna tell a lie and hurt you"),
        ],
    },
    "fJ9rUzIMcZQ": {
        "title": "Bohemian Rhapsody",
        "artist": "Queen",
        "lyrics": [
            (5.0, 8.0, "Is this the real life?"),
            (8.5, 11.0, "Is this just fantasy?"),
            (11.5, 14.0, "Caught in a landslide"),
            (14.5, 19.0, "No escape from reality"),
            (19.5, 22.0, "Open your eyes"),
            (22.5, 27.0, "Look up to the skies and see"),
            (27.5, 32.0, "I'm just a poor boy, I need no sympathy"),
            (32.5, 35.0, "Because I'm easy come, easy go"),
            (35.5, 38.0, "Little high, little low"),
            (38.5, 49.0, "Any way the wind blows doesn't really matter to me, to me"),
        ],
    },
}


@dataclass
class StaticLyricSource:
    """Lyrics from an in-memory table keyed by video id."""

    songs: Dict[str, Dict[str, object]] = field(default_factory=lambda: dict(DEMO_SONGS))

    def fetch(self, song_id: str) -> Optional[LyricPayload]:
        key = normalize_song_id(song_id)
        song = self.songs.get(key)
        if song is None:
            return None
        logger.debug(f"Found demo song: {song.get('title')}")
        return list(song["lyrics"])  # type: ignore[arg-type]


PLACEHOLDER_LINES = [
    "Welcome to LyricType! Practice your typing skills with this song.",
    "Focus on accuracy first, then speed will naturally follow.",
    "Keep your fingers on the home row for better typing efficiency.",
    "The quick brown fox jumps over the lazy dog.",
    "Pack my box with five dozen liquor jugs.",
    "How vexingly quick daft zebras jump!",
    "Maintaining good posture helps prevent strain while typing.",
    "Try to look at the screen instead of your keyboard while typing.",
    "Regular short breaks help maintain focus and prevent fatigue.",
    "Rhythm is important in typing, just like in music.",
    "Practice with different songs to improve your versatility.",
    "Challenge yourself to beat your previous typing speed record.",
]


@dataclass
class PlaceholderLyricSource:
    """Typing tips spaced evenly, used when no real lyrics exist."""

    lines: Sequence[str] = tuple(PLACEHOLDER_LINES)
    spacing: float = 2.5
    overlap: float = 0.1

    def fetch(self, song_id: str) -> Optional[LyricPayload]:
        logger.info(f"Using placeholder lyrics for {normalize_song_id(song_id)}")
        return [
            (idx * self.spacing, (idx + 1) * self.spacing - self.overlap, text)
            for idx, text in enumerate(self.lines)
        ]


@dataclass
class ChainedLyricSource:
    """Try each source in order; the first one with content wins.

    A source that raises is logged and skipped.
    """

    sources: Sequence[LyricSource]

    def fetch(self, song_id: str) -> Optional[LyricPayload]:
        for source in self.sources:
            try:
                payload = source.fetch(song_id)
            except Exception as e:
                logger.warning(f"{type(source).__name__} failed for {song_id}: {e}")
                continue
            if payload:
                return payload
        return None


def default_source() -> ChainedLyricSource:
    return ChainedLyricSource([StaticLyricSource(), PlaceholderLyricSource()])
