"""Game engine — round state machine, fall loop, input handling and scoring.

The engine owns one RoundState and is the only thing that mutates it. All
time flows in through ``update(dt)`` and all keys through ``on_key``; the
renderer and the audio layer only see ``snapshot()`` and cues.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace

from kanafall.config import (
    COUNTDOWN_START,
    COUNTDOWN_STEP_S,
    EFFECT_LIFETIME_S,
    FALL_TICK_S,
    FIELD_BOTTOM,
    FLASH_LIFETIME_S,
    MAX_LIVES,
    PARTICLE_COUNT,
    QUESTIONS_PER_STAGE,
    RECENT_ROUNDS,
    SHAKE_LIFETIME_S,
    STAGE_TRANSITION_S,
)
from kanafall.cues import Cue, CueBus
from kanafall.matcher import InputMatcher
from kanafall.models import (
    ActiveWord,
    EffectKind,
    GamePhase,
    GameSnapshot,
    KeyOutcome,
    RoundState,
    RoundSummary,
    Settings,
    VisualEffect,
)
from kanafall.progress import RoundHistory
from kanafall.progression import first_stage, is_final_stage, select_next_stage
from kanafall.scoring import HighScoreKeeper, MemoryScoreStore, ScoreStore, award
from kanafall.spawner import WordSpawner
from kanafall.stages import pool_for
from kanafall.timers import Scheduler

logger = logging.getLogger(__name__)

PARTICLE_COLORS = [(96, 165, 250), (52, 211, 153), (251, 191, 36)]

_COUNTDOWN_TIMER = "countdown"
_FALL_TIMER = "fall"
_TRANSITION_TIMER = "transition"


class InvariantViolation(RuntimeError):
    """Raised when round state has become inconsistent."""


class GameEngine:
    def __init__(
        self,
        settings: Settings | None = None,
        score_store: ScoreStore | None = None,
        history: RoundHistory | None = None,
        rng: random.Random | None = None,
        cues: CueBus | None = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.cues = cues or CueBus()
        self.scheduler = Scheduler()
        self.spawner = WordSpawner(self.rng)
        self.matcher = InputMatcher()
        self.high_scores = HighScoreKeeper(score_store or MemoryScoreStore())
        self.history = history

        self.state = RoundState(high_score=self.high_scores.best)
        self.word: ActiveWord | None = None
        self.effects: list[VisualEffect] = []
        self.settings = Settings()
        self.pool: list[str] = []
        self.speed_multiplier = 1
        self._transitioning = False
        self._played_stages: list[int] = []
        self.recent_rounds: list[dict] = self._load_recent_rounds()
        self.apply_settings(settings or Settings())

    # -- external triggers ------------------------------------------------

    def apply_settings(self, settings: Settings) -> None:
        """Adopt a new settings snapshot and point back at the first configured stage."""
        self.settings = settings.normalized()
        self.pool = pool_for(self.settings.selected_stages)
        self.state.stage_pointer = 0
        self.state.current_stage, self.state.background = first_stage(self.settings, self.rng)
        if self.state.phase not in (GamePhase.COUNTDOWN, GamePhase.PLAYING):
            self.speed_multiplier = self.settings.speed
        logger.debug("Settings applied: %s", self.settings)

    def start(self) -> None:
        if self.state.phase == GamePhase.START:
            self.reset()

    def reset(self) -> None:
        """Throw away the current round and count down into a fresh one."""
        generation = self.scheduler.new_generation()
        self.word = None
        self.effects.clear()
        self.matcher.reset()
        self._transitioning = False
        self.speed_multiplier = self.settings.speed
        stage_id, background = first_stage(self.settings, self.rng)
        self._played_stages = [stage_id]
        self.state = RoundState(
            current_stage=stage_id,
            background=background,
            high_score=self.high_scores.best,
            generation=generation,
        )
        self._enter_countdown()

    def advance(self) -> None:
        """Leave STAGE_CLEAR for the next stage after a short transition."""
        if self.state.phase != GamePhase.STAGE_CLEAR or self._transitioning:
            return
        self._transitioning = True
        self.scheduler.call_later(_TRANSITION_TIMER, STAGE_TRANSITION_S, self._begin_next_stage)

    def on_key(self, raw_key: str, composing: bool = False) -> KeyOutcome:
        if self.state.phase != GamePhase.PLAYING or self.word is None:
            return KeyOutcome.NOOP
        try:
            outcome = self._handle_key(raw_key, composing)
            self._check_invariants()
        except InvariantViolation:
            logger.exception("Round halted after key %r", raw_key)
            self._halt_round()
            return KeyOutcome.NOOP
        return outcome

    def update(self, dt: float) -> None:
        try:
            self.scheduler.advance(dt)
            self._check_invariants()
        except InvariantViolation:
            logger.exception("Round halted during update")
            self._halt_round()
        now = self.scheduler.now
        self.effects = [e for e in self.effects if e.expires_at > now]

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            state=replace(self.state),
            word=replace(self.word) if self.word else None,
            effects=tuple(replace(e) for e in self.effects),
            settings=self.settings,
            transitioning=self._transitioning,
            clock=self.scheduler.now,
            recent_rounds=tuple(self.recent_rounds),
        )

    # -- phase transitions ------------------------------------------------

    def _enter_countdown(self) -> None:
        self.state.phase = GamePhase.COUNTDOWN
        self.state.countdown = COUNTDOWN_START
        self.scheduler.cancel(_FALL_TIMER)
        self.scheduler.call_every(_COUNTDOWN_TIMER, COUNTDOWN_STEP_S, self._tick_countdown)
        logger.debug("Countdown for stage %d", self.state.current_stage)

    def _tick_countdown(self) -> None:
        if self.state.phase != GamePhase.COUNTDOWN:
            self.scheduler.cancel(_COUNTDOWN_TIMER)
            return
        if self.state.countdown is None or self.state.countdown <= 1:
            self.scheduler.cancel(_COUNTDOWN_TIMER)
            self._enter_playing()
        else:
            self.state.countdown -= 1

    def _enter_playing(self) -> None:
        self.state.phase = GamePhase.PLAYING
        self.state.countdown = None
        self._spawn_word()
        self.scheduler.call_every(_FALL_TIMER, FALL_TICK_S, self._tick_fall)
        logger.debug("Playing stage %d", self.state.current_stage)

    def _tick_fall(self) -> None:
        if self.state.phase != GamePhase.PLAYING:
            self.scheduler.cancel(_FALL_TIMER)
            return
        if self.word is None:
            raise InvariantViolation("fall tick with no active word")
        self.word.y += self.word.fall_speed
        if self.word.y > FIELD_BOTTOM:
            logger.debug("Word %r reached the bottom", self.word.prompt)
            self._game_over()

    def _game_over(self) -> None:
        self._leave_playing(GamePhase.GAME_OVER)
        self._submit_score()
        self._record_round("gameover")
        self.cues.emit(Cue.GAME_OVER)

    def _enter_clear(self) -> None:
        self._leave_playing(GamePhase.CLEAR)
        self._submit_score()
        self._record_round("clear")
        self.cues.emit(Cue.ALL_CLEAR)

    def _enter_stage_clear(self) -> None:
        self._leave_playing(GamePhase.STAGE_CLEAR)
        self.cues.emit(Cue.STAGE_CLEAR)

    def _leave_playing(self, phase: GamePhase) -> None:
        self.state.generation = self.scheduler.new_generation()
        self.state.phase = phase
        self.word = None
        logger.debug("Entered %s with score %d", phase.name, self.state.score)

    def _begin_next_stage(self) -> None:
        if self.state.phase != GamePhase.STAGE_CLEAR:
            return
        stage_id, background = select_next_stage(self.state, self.settings, self.rng)
        self.state.current_stage = stage_id
        self.state.background = background
        self.state.questions_answered = 0
        self.state.input_buffer = ""
        self.state.last_prompt = ""
        self.state.stages_completed += 1
        self.matcher.reset()
        self.word = None
        self.speed_multiplier = self.settings.speed
        self._transitioning = False
        self._played_stages.append(stage_id)
        self._enter_countdown()

    def _halt_round(self) -> None:
        self.state.generation = self.scheduler.new_generation()
        self._transitioning = False
        self.word = None
        self.state.lives = max(0, min(MAX_LIVES, self.state.lives))
        self.state.phase = GamePhase.GAME_OVER

    # -- gameplay ---------------------------------------------------------

    def _spawn_word(self) -> None:
        self.word = self.spawner.spawn(
            stage=self.state.current_stage,
            question_index=self.state.questions_answered,
            pool=self.pool,
            last_prompt=self.state.last_prompt,
            is_random_mode=self.settings.is_random_mode,
            speed_multiplier=self.speed_multiplier,
            now=self.scheduler.now,
        )
        self.state.last_prompt = self.word.prompt

    def _handle_key(self, raw_key: str, composing: bool) -> KeyOutcome:
        word = self.word
        outcome = self.matcher.feed(word.prompt, raw_key, composing)
        self.state.input_buffer = self.matcher.buffer

        if outcome == KeyOutcome.MISS:
            self._on_miss()
        elif outcome == KeyOutcome.PARTIAL:
            self.cues.emit(Cue.KEY_TYPED)
        elif outcome == KeyOutcome.COMPLETE:
            self.cues.emit(Cue.KEY_TYPED)
            self._on_match(word)
        return outcome

    def _on_miss(self) -> None:
        self.state.lives = max(0, self.state.lives - 1)
        self.cues.emit(Cue.MISS)
        self._add_effect(EffectKind.SHAKE, 50.0, 50.0, SHAKE_LIFETIME_S)
        if self.state.lives == 0:
            self._game_over()

    def _on_match(self, word: ActiveWord) -> None:
        points = award(word.y, self.speed_multiplier)
        self.state.score += points
        self.state.questions_answered += 1
        self.cues.emit(Cue.CORRECT_MATCH)

        for _ in range(PARTICLE_COUNT):
            self._add_effect(
                EffectKind.PARTICLE, word.x, word.y, EFFECT_LIFETIME_S,
                color=self.rng.choice(PARTICLE_COLORS),
            )
        self._add_effect(EffectKind.SCORE_POPUP, word.x, word.y, EFFECT_LIFETIME_S, value=points)
        self._add_effect(EffectKind.FLASH, word.x, word.y, FLASH_LIFETIME_S)

        self.word = None
        if not self._check_stage_clear():
            self._spawn_word()

    def _check_stage_clear(self) -> bool:
        if self.state.questions_answered < QUESTIONS_PER_STAGE:
            return False
        self.state.stage_pointer += 1
        if is_final_stage(self.state, self.settings):
            self._enter_clear()
        else:
            self._enter_stage_clear()
        return True

    def _add_effect(
        self,
        kind: EffectKind,
        x: float,
        y: float,
        lifetime: float,
        value: int = 0,
        color: tuple[int, int, int] = (255, 255, 255),
    ) -> None:
        self.effects.append(VisualEffect(
            kind=kind, x=x, y=y,
            expires_at=self.scheduler.now + lifetime,
            value=value, color=color,
        ))

    def _submit_score(self) -> None:
        self.state.is_new_record = self.high_scores.submit(self.state.score)
        self.state.high_score = self.high_scores.best

    def _record_round(self, outcome: str) -> None:
        if self.history is None:
            return
        summary = RoundSummary(
            score=self.state.score,
            stages_completed=self.state.stages_completed,
            questions_answered=self.state.questions_answered,
            outcome=outcome,
            stage_ids=list(self._played_stages),
        )
        try:
            self.history.save_round(summary)
        except Exception as exc:
            logger.warning("Could not record round history: %s", exc)
            return
        self.recent_rounds = self._load_recent_rounds()

    def _load_recent_rounds(self) -> list[dict]:
        if self.history is None:
            return []
        try:
            return self.history.get_history(limit=RECENT_ROUNDS)
        except Exception as exc:
            logger.warning("Could not read round history: %s", exc)
            return []

    def _check_invariants(self) -> None:
        s = self.state
        if not 0 <= s.lives <= MAX_LIVES:
            raise InvariantViolation(f"lives out of range: {s.lives}")
        if not 0 <= s.questions_answered <= QUESTIONS_PER_STAGE:
            raise InvariantViolation(f"question count out of range: {s.questions_answered}")
        if self.word is not None and s.phase != GamePhase.PLAYING:
            raise InvariantViolation(f"active word outside play in phase {s.phase.name}")
