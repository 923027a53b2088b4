"""Picks the next prompt and creates its falling word."""

from __future__ import annotations

import itertools
import random

from kanafall.config import (
    BASE_FALL_SPEED,
    FALL_SPEED_JITTER,
    HOME_ROW_INTERVAL,
    HOME_ROW_KEYS,
    HOME_ROW_STAGE,
    SPAWN_X_MIN,
    SPAWN_X_SPAN,
    SPAWN_Y,
)
from kanafall.models import ActiveWord
from kanafall.stages import characters_for


def is_home_row_slot(stage: int, question_index: int) -> bool:
    """True when the question at ``question_index`` must be a home-row drill key."""
    if stage == HOME_ROW_STAGE:
        return True
    return question_index > 0 and question_index % HOME_ROW_INTERVAL == HOME_ROW_INTERVAL - 1


def candidate_pool(characters: list[str] | tuple[str, ...], last_prompt: str) -> list[str]:
    """Filter out the home-row keys and, when possible, the previous prompt."""
    without_home = [c for c in characters if c not in HOME_ROW_KEYS]
    candidates = [c for c in without_home if c != last_prompt]
    return candidates or without_home


class WordSpawner:
    """Creates ActiveWords; the RNG is injectable so spawns are reproducible."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()
        self._ids = itertools.count(1)

    def choose_prompt(
        self,
        stage: int,
        question_index: int,
        pool: list[str] | tuple[str, ...],
        last_prompt: str,
        is_random_mode: bool,
    ) -> str:
        if is_home_row_slot(stage, question_index):
            return self.rng.choice(HOME_ROW_KEYS)

        source = pool if is_random_mode else characters_for(stage)
        candidates = candidate_pool(source, last_prompt)
        if not candidates:
            # A pool of nothing but home-row keys still has to produce a word
            return self.rng.choice(HOME_ROW_KEYS)
        return self.rng.choice(candidates)

    def spawn(
        self,
        stage: int,
        question_index: int,
        pool: list[str] | tuple[str, ...],
        last_prompt: str,
        is_random_mode: bool,
        speed_multiplier: float = 1.0,
        now: float = 0.0,
    ) -> ActiveWord:
        prompt = self.choose_prompt(stage, question_index, pool, last_prompt, is_random_mode)
        return ActiveWord(
            id=next(self._ids),
            prompt=prompt,
            x=SPAWN_X_MIN + self.rng.random() * SPAWN_X_SPAN,
            y=SPAWN_Y,
            fall_speed=(BASE_FALL_SPEED + self.rng.random() * FALL_SPEED_JITTER) * speed_multiplier,
            spawn_time=now,
        )
