"""Stage progression rules, kept free of engine state so they can be tested alone."""

from __future__ import annotations

import random

from kanafall.models import RoundState, Settings
from kanafall.stages import BACKGROUNDS, get_stage


def is_final_stage(state: RoundState, settings: Settings) -> bool:
    """Decide whether the stage just finished ends the round.

    Random mode counts completed stages against ``num_stages``; sequential mode
    compares the already-advanced stage pointer with the selected stage list.
    """
    if settings.is_random_mode:
        return state.stages_completed + 1 >= settings.num_stages
    return state.stage_pointer >= len(settings.selected_stages)


def random_background(rng: random.Random) -> str:
    return rng.choice(BACKGROUNDS)


def select_next_stage(
    state: RoundState, settings: Settings, rng: random.Random
) -> tuple[int, str]:
    """Return (stage_id, background) for the stage that follows the current one."""
    if settings.is_random_mode:
        stage_id = rng.choice(settings.selected_stages)
        return stage_id, random_background(rng)

    stages = settings.selected_stages
    pointer = min(state.stage_pointer, len(stages) - 1)
    stage_id = stages[pointer]
    return stage_id, get_stage(stage_id).background


def first_stage(settings: Settings, rng: random.Random) -> tuple[int, str]:
    stage_id = settings.selected_stages[0]
    if settings.is_random_mode:
        return stage_id, random_background(rng)
    return stage_id, get_stage(stage_id).background
