"""High-score sink for completed typing sessions."""

import threading
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from ..config import HIGH_SCORE_LIMIT
from ..utils.logging import get_logger
from .models import ScoreRecord

logger = get_logger(__name__)


class ScoreSink(Protocol):
    def record(self, score: ScoreRecord) -> None:
        ...


@dataclass
class HighScoreTable:
    """Keeps the best scores by WPM in memory.

    Persisting the table is left to the application.
    """

    limit: int = HIGH_SCORE_LIMIT
    scores: List[ScoreRecord] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, score: ScoreRecord) -> None:
        with self._lock:
            # sorted() is stable, so earlier entries win ties.
            self.scores = sorted(self.scores + [score], key=lambda s: -s.wpm)[: self.limit]
        logger.info(f"Recorded score: {score.wpm} WPM, {score.accuracy}% accuracy")

    def best(self) -> Optional[ScoreRecord]:
        with self._lock:
            return self.scores[0] if self.scores else None
