"""Core data models shared across the engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto

from kanafall.config import (
    HOME_ROW_STAGE,
    MAX_LIVES,
    NUM_STAGES_MAX,
    SCALE_MAX,
    SCALE_MIN,
    SPEED_MAX,
    SPEED_MIN,
)


class GamePhase(Enum):
    START = auto()
    COUNTDOWN = auto()
    PLAYING = auto()
    STAGE_CLEAR = auto()
    GAME_OVER = auto()
    CLEAR = auto()


class KeyOutcome(Enum):
    NOOP = auto()
    MISS = auto()
    PARTIAL = auto()
    COMPLETE = auto()


class EffectKind(Enum):
    PARTICLE = auto()
    SCORE_POPUP = auto()
    SHAKE = auto()
    FLASH = auto()


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class Settings:
    """Snapshot produced by the settings editor and consumed on reset."""

    selected_stages: tuple[int, ...] = tuple(range(1, 29))
    speed: int = 2
    is_random_mode: bool = False
    num_stages: int = 3
    show_hands: bool = True
    window_scale: float = 1.0

    def normalized(self, known_stages: tuple[int, ...] | None = None) -> Settings:
        """Return a copy with out-of-range values clamped and unknown stages dropped."""
        if known_stages is None:
            from kanafall.stages import STAGE_IDS
            known_stages = STAGE_IDS

        stages: list[int] = []
        for stage_id in self.selected_stages:
            if stage_id in known_stages and stage_id not in stages:
                stages.append(stage_id)
        # The home-row drill cannot be drawn at random
        if self.is_random_mode and len(stages) > 1 and HOME_ROW_STAGE in stages:
            stages.remove(HOME_ROW_STAGE)
        if not stages:
            stages = list(known_stages)

        return replace(
            self,
            selected_stages=tuple(stages),
            speed=int(_clamp(self.speed, SPEED_MIN, SPEED_MAX)),
            num_stages=int(_clamp(self.num_stages, 1, NUM_STAGES_MAX)),
            window_scale=float(_clamp(self.window_scale, SCALE_MIN, SCALE_MAX)),
        )


@dataclass(frozen=True)
class Stage:
    id: int
    label: str
    characters: tuple[str, ...]
    background: str


@dataclass
class ActiveWord:
    """The single prompt currently falling through the field."""

    id: int
    prompt: str
    x: float  # 0-100, percent of field width
    y: float  # percent of field height, starts above the top edge
    fall_speed: float  # field units per fall tick
    spawn_time: float  # engine clock seconds


@dataclass
class VisualEffect:
    kind: EffectKind
    x: float
    y: float
    expires_at: float
    value: int = 0
    color: tuple[int, int, int] = (255, 255, 255)


@dataclass
class RoundState:
    current_stage: int = 1
    stage_pointer: int = 0
    questions_answered: int = 0
    stages_completed: int = 0
    score: int = 0
    lives: int = MAX_LIVES
    high_score: int = 0
    input_buffer: str = ""
    last_prompt: str = ""
    phase: GamePhase = GamePhase.START
    countdown: int | None = None
    background: str = ""
    generation: int = 0
    is_new_record: bool = False


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of everything the renderer needs for one frame."""

    state: RoundState
    word: ActiveWord | None
    effects: tuple[VisualEffect, ...]
    settings: Settings
    transitioning: bool
    clock: float
    recent_rounds: tuple[dict, ...] = ()


@dataclass
class RoundSummary:
    score: int
    stages_completed: int
    questions_answered: int
    outcome: str  # "gameover" or "clear"
    stage_ids: list[int] = field(default_factory=list)
