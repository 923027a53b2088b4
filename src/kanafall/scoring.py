"""Points per match and high-score bookkeeping."""

from __future__ import annotations

import logging
import math
from typing import Protocol

from kanafall.config import FIELD_BOTTOM, MAX_AWARD, MIN_AWARD, SPEED_BONUS

logger = logging.getLogger(__name__)


def award(y: float, speed_multiplier: float) -> int:
    """Points for a match with the word at height ``y`` (0 top, 100 bottom).

    Earlier matches and faster settings pay more; never less than MIN_AWARD.
    """
    raw = MAX_AWARD * (1 - y / FIELD_BOTTOM) * (1 + speed_multiplier * SPEED_BONUS)
    return max(MIN_AWARD, math.ceil(raw))


class ScoreStore(Protocol):
    def read(self) -> int: ...
    def write(self, value: int) -> None: ...


class MemoryScoreStore:
    """Non-durable store, used when the home directory is not writable."""

    def __init__(self, value: int = 0) -> None:
        self.value = value

    def read(self) -> int:
        return self.value

    def write(self, value: int) -> None:
        self.value = value


class HighScoreKeeper:
    """Tracks the best score seen and writes qualifying scores through to a store."""

    def __init__(self, store: ScoreStore) -> None:
        self._store = store
        self.best = max(0, store.read())

    def submit(self, score: int) -> bool:
        """Offer a final score. Returns True when it beats the previous best."""
        is_record = score > self.best
        if score >= self.best:
            try:
                self._store.write(score)
            except OSError as exc:
                logger.warning("Could not persist high score %d: %s", score, exc)
            self.best = score
        return is_record
