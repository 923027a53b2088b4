"""Named game cues and the bus that delivers them to subscribers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class Cue(Enum):
    KEY_TYPED = "keyTyped"
    CORRECT_MATCH = "correctMatch"
    MISS = "miss"
    STAGE_CLEAR = "stageClear"
    ALL_CLEAR = "allClear"
    GAME_OVER = "gameOver"


CueListener = Callable[[Cue], None]


class CueBus:
    """Fan-out of cues. A failing listener is logged and never reaches the engine."""

    def __init__(self) -> None:
        self._listeners: list[CueListener] = []

    def subscribe(self, listener: CueListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: CueListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, cue: Cue) -> None:
        for listener in list(self._listeners):
            try:
                listener(cue)
            except Exception as exc:
                logger.warning("Cue listener failed on %s: %s", cue.value, exc)
