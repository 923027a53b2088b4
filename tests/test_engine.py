"""Tests for the round state machine, fall loop and input handling."""

import random

from kanafall.config import HOME_ROW_KEYS, MAX_LIVES, QUESTIONS_PER_STAGE
from kanafall.cues import Cue
from kanafall.engine import GameEngine
from kanafall.models import EffectKind, GamePhase, KeyOutcome, Settings
from kanafall.romaji import accepted_sequences
from kanafall.scoring import MemoryScoreStore
from kanafall.stages import characters_for, pool_for


def make_engine(store=None, seed=0, **settings):
    settings.setdefault("speed", 1)
    engine = GameEngine(
        settings=Settings(**settings),
        score_store=store or MemoryScoreStore(),
        rng=random.Random(seed),
    )
    cues = []
    engine.cues.subscribe(cues.append)
    return engine, cues


def count_down(engine):
    for _ in range(3):
        engine.update(1.0)


def start_playing(engine):
    engine.start()
    count_down(engine)
    assert engine.state.phase == GamePhase.PLAYING


def type_word(engine):
    outcome = KeyOutcome.NOOP
    for key in accepted_sequences(engine.word.prompt)[0]:
        outcome = engine.on_key(key.lower())
    assert outcome == KeyOutcome.COMPLETE
    return outcome


def clear_stage(engine):
    for _ in range(QUESTIONS_PER_STAGE):
        type_word(engine)


def miss_key(engine):
    """A key no prompt in the kana stages starts with."""
    return engine.on_key("q")


def test_countdown_runs_three_seconds():
    engine, _ = make_engine(selected_stages=(2,))
    assert engine.state.phase == GamePhase.START
    engine.start()
    assert engine.state.phase == GamePhase.COUNTDOWN
    assert engine.state.countdown == 3
    engine.update(1.0)
    assert engine.state.countdown == 2
    engine.update(1.0)
    assert engine.state.countdown == 1
    assert engine.word is None
    engine.update(1.0)
    assert engine.state.phase == GamePhase.PLAYING
    assert engine.state.countdown is None
    assert engine.word is not None


def test_keys_ignored_outside_play():
    engine, _ = make_engine(selected_stages=(2,))
    assert engine.on_key("a") == KeyOutcome.NOOP
    engine.start()
    assert engine.on_key("a") == KeyOutcome.NOOP
    assert engine.state.lives == MAX_LIVES


def test_sequential_single_stage_goes_straight_to_clear():
    store = MemoryScoreStore(100)
    engine, cues = make_engine(store=store, selected_stages=(2,))
    start_playing(engine)

    allowed = set(characters_for(2)) | set(HOME_ROW_KEYS)
    for i in range(QUESTIONS_PER_STAGE):
        assert engine.word.prompt in allowed
        assert engine.state.questions_answered == i
        type_word(engine)

    assert engine.state.phase == GamePhase.CLEAR
    assert engine.state.questions_answered == QUESTIONS_PER_STAGE
    assert engine.state.stages_completed == 0
    assert engine.word is None
    # Every word was answered at the spawn height
    assert engine.state.score == 20 * 11
    assert store.value == 220
    assert engine.state.high_score == 220
    assert engine.state.is_new_record
    assert Cue.ALL_CLEAR in cues
    assert Cue.STAGE_CLEAR not in cues


def test_sequential_stages_walk_in_order():
    engine, cues = make_engine(selected_stages=(2, 3))
    start_playing(engine)
    assert engine.state.current_stage == 2
    clear_stage(engine)
    assert engine.state.phase == GamePhase.STAGE_CLEAR
    assert cues[-1] == Cue.STAGE_CLEAR

    engine.advance()
    assert engine.snapshot().transitioning
    engine.update(0.5)
    assert engine.state.phase == GamePhase.COUNTDOWN
    assert engine.state.current_stage == 3
    assert engine.state.questions_answered == 0
    assert engine.state.stages_completed == 1
    assert engine.state.input_buffer == ""

    count_down(engine)
    assert engine.word.prompt in set(characters_for(3)) | set(HOME_ROW_KEYS)
    clear_stage(engine)
    assert engine.state.phase == GamePhase.CLEAR


def test_random_mode_stage_count():
    engine, _ = make_engine(selected_stages=(2, 3, 4), is_random_mode=True, num_stages=2)
    start_playing(engine)
    clear_stage(engine)
    # stages_completed + 1 (= 1) < 2
    assert engine.state.phase == GamePhase.STAGE_CLEAR

    engine.advance()
    engine.update(0.5)
    assert engine.state.current_stage in (2, 3, 4)
    count_down(engine)
    clear_stage(engine)
    assert engine.state.phase == GamePhase.CLEAR
    assert engine.state.stages_completed == 1


def test_random_mode_draws_from_all_selected_stages():
    engine, _ = make_engine(selected_stages=(2, 3), is_random_mode=True, num_stages=5)
    start_playing(engine)
    pool = set(pool_for((2, 3))) | set(HOME_ROW_KEYS)
    for _ in range(QUESTIONS_PER_STAGE):
        assert engine.word.prompt in pool
        type_word(engine)


def test_score_accumulates_across_stages():
    engine, _ = make_engine(selected_stages=(2, 3))
    start_playing(engine)
    clear_stage(engine)
    first = engine.state.score
    engine.advance()
    engine.update(0.5)
    count_down(engine)
    type_word(engine)
    assert engine.state.score > first


def test_home_row_questions_in_stage():
    engine, _ = make_engine(selected_stages=(5,))
    start_playing(engine)
    for i in range(12):
        if i % 4 == 3:
            assert engine.word.prompt in HOME_ROW_KEYS
        else:
            assert engine.word.prompt in characters_for(5)
        type_word(engine)


def test_partial_input_keeps_buffer():
    engine, cues = make_engine(selected_stages=(4,))
    start_playing(engine)
    assert engine.on_key("s") == KeyOutcome.PARTIAL
    assert engine.state.input_buffer == "S"
    assert engine.state.score == 0
    assert cues == [Cue.KEY_TYPED]


def test_miss_costs_one_life_and_clears_buffer():
    engine, cues = make_engine(selected_stages=(4,))
    start_playing(engine)
    engine.on_key("s")
    assert engine.on_key("q") == KeyOutcome.MISS
    assert engine.state.lives == MAX_LIVES - 1
    assert engine.state.input_buffer == ""
    assert cues[-1] == Cue.MISS
    assert any(e.kind == EffectKind.SHAKE for e in engine.effects)


def test_losing_every_life_ends_the_round():
    store = MemoryScoreStore()
    engine, cues = make_engine(store=store, selected_stages=(2,))
    start_playing(engine)
    type_word(engine)
    scored = engine.state.score
    for i in range(MAX_LIVES):
        assert engine.state.phase == GamePhase.PLAYING
        miss_key(engine)
        assert engine.state.lives == MAX_LIVES - 1 - i
    assert engine.state.phase == GamePhase.GAME_OVER
    assert engine.state.lives == 0
    assert engine.word is None
    assert store.value == scored
    assert cues[-1] == Cue.GAME_OVER
    assert miss_key(engine) == KeyOutcome.NOOP
    assert engine.state.lives == 0


def test_word_falls_each_tick():
    engine, _ = make_engine(selected_stages=(2,))
    start_playing(engine)
    start_y = engine.word.y
    speed = engine.word.fall_speed
    engine.update(0.05)
    assert engine.word.y == start_y + speed
    engine.update(0.52)
    assert abs(engine.word.y - (start_y + 11 * speed)) < 1e-9


def test_reaching_bottom_is_game_over_with_lives_left():
    engine, cues = make_engine(selected_stages=(2,))
    start_playing(engine)
    engine.update(30.0)
    assert engine.state.phase == GamePhase.GAME_OVER
    assert engine.state.lives == MAX_LIVES
    assert engine.word is None
    assert Cue.GAME_OVER in cues


def test_faster_speed_scores_more():
    slow, _ = make_engine(selected_stages=(2,), speed=1)
    fast, _ = make_engine(selected_stages=(2,), speed=5)
    for engine in (slow, fast):
        start_playing(engine)
        type_word(engine)
    assert fast.state.score > slow.state.score


def test_reset_restores_fresh_round():
    engine, _ = make_engine(selected_stages=(2, 3))
    start_playing(engine)
    type_word(engine)
    miss_key(engine)
    engine.update(20.0)
    assert engine.state.phase == GamePhase.GAME_OVER

    engine.reset()
    state = engine.state
    assert state.phase == GamePhase.COUNTDOWN
    assert state.countdown == 3
    assert state.score == 0
    assert state.lives == MAX_LIVES
    assert state.stage_pointer == 0
    assert state.questions_answered == 0
    assert state.stages_completed == 0
    assert state.current_stage == 2
    assert state.last_prompt == ""


def test_reset_discards_stale_timers():
    engine, _ = make_engine(selected_stages=(2,))
    engine.start()
    engine.update(0.6)
    engine.reset()
    engine.update(0.6)
    # The first countdown's one-second tick would have landed here
    assert engine.state.countdown == 3
    engine.update(0.5)
    assert engine.state.countdown == 2


def test_reset_during_play_stops_the_fall_loop():
    engine, _ = make_engine(selected_stages=(2,))
    start_playing(engine)
    engine.reset()
    assert engine.word is None
    engine.update(0.9)
    assert engine.state.phase == GamePhase.COUNTDOWN
    assert engine.word is None


def test_reset_during_stage_transition_cancels_it():
    engine, _ = make_engine(selected_stages=(2, 3))
    start_playing(engine)
    clear_stage(engine)
    engine.advance()
    engine.reset()
    engine.update(0.5)
    assert engine.state.current_stage == 2
    assert engine.state.stages_completed == 0


def test_advance_only_from_stage_clear():
    engine, _ = make_engine(selected_stages=(2, 3))
    engine.advance()
    assert engine.state.phase == GamePhase.START
    start_playing(engine)
    engine.advance()
    engine.update(0.5)
    assert engine.state.phase == GamePhase.PLAYING


def test_apply_settings_is_idempotent():
    engine, _ = make_engine(selected_stages=(3, 2))
    settings = Settings(selected_stages=(4, 6), speed=3)
    engine.apply_settings(settings)
    pool, pointer, stage = list(engine.pool), engine.state.stage_pointer, engine.state.current_stage
    engine.apply_settings(settings)
    assert engine.pool == pool
    assert engine.state.stage_pointer == pointer == 0
    assert engine.state.current_stage == stage == 4


def test_apply_settings_ignores_invalid_stages():
    engine, _ = make_engine()
    engine.apply_settings(Settings(selected_stages=(77, 5)))
    assert engine.settings.selected_stages == (5,)
    assert engine.pool == list(characters_for(5))


def test_composing_input_is_ignored():
    engine, _ = make_engine(selected_stages=(2,))
    start_playing(engine)
    assert engine.on_key("q", composing=True) == KeyOutcome.NOOP
    assert engine.state.lives == MAX_LIVES


def test_match_creates_effects_that_expire():
    engine, _ = make_engine(selected_stages=(2,))
    start_playing(engine)
    type_word(engine)
    kinds = [e.kind for e in engine.effects]
    assert kinds.count(EffectKind.PARTICLE) == 10
    assert EffectKind.SCORE_POPUP in kinds
    engine.update(1.01)
    assert not engine.effects


def test_snapshot_is_detached():
    engine, _ = make_engine(selected_stages=(2,))
    start_playing(engine)
    snap = engine.snapshot()
    engine.update(0.05)
    assert snap.word.y != engine.word.y
    assert snap.state.phase == GamePhase.PLAYING


def test_invariant_violation_halts_round():
    engine, _ = make_engine(selected_stages=(2,))
    start_playing(engine)
    engine.state.lives = MAX_LIVES + 5
    engine.update(0.05)
    assert engine.state.phase == GamePhase.GAME_OVER
    assert engine.word is None
    assert engine.state.lives == MAX_LIVES
    engine.update(1.0)
    assert engine.state.phase == GamePhase.GAME_OVER


def test_failing_cue_listener_does_not_break_play():
    engine, _ = make_engine(selected_stages=(2,))

    def broken(cue):
        raise RuntimeError("no audio device")

    engine.cues.subscribe(broken)
    start_playing(engine)
    type_word(engine)
    assert engine.state.questions_answered == 1


def test_high_score_loaded_from_store():
    engine, _ = make_engine(store=MemoryScoreStore(500), selected_stages=(2,))
    assert engine.state.high_score == 500
    start_playing(engine)
    engine.update(30.0)
    assert engine.state.phase == GamePhase.GAME_OVER
    assert not engine.state.is_new_record
    assert engine.state.high_score == 500
