"""Key routing and drawing of the game view, on a headless display."""

import os
import random

import pygame
import pytest

from kanafall.config import QUESTIONS_PER_STAGE, WINDOW_HEIGHT, WINDOW_WIDTH
from kanafall.engine import GameEngine
from kanafall.models import GamePhase, Settings
from kanafall.renderer.fonts import get_font
from kanafall.romaji import accepted_sequences
from kanafall.views import BUILTIN_VIEWS, GameView, ViewContext, ViewManager


@pytest.fixture(scope="module", autouse=True)
def headless_display():
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    pygame.init()
    pygame.display.set_mode((1, 1))
    yield
    get_font.cache_clear()
    pygame.quit()


class FakeAudio:
    def __init__(self):
        self.muted = False
        self.flushed = 0

    def toggle_mute(self):
        self.muted = not self.muted
        return self.muted

    def flush(self):
        self.flushed += 1

    def all_notes_off(self):
        pass


def make_view(audio=None, **settings):
    settings.setdefault("speed", 1)
    engine = GameEngine(settings=Settings(**settings), rng=random.Random(3))
    view = GameView()
    view.on_enter(ViewContext((WINDOW_WIDTH, WINDOW_HEIGHT), engine, audio=audio))
    return view, engine


def keydown(key, text=""):
    return pygame.event.Event(pygame.KEYDOWN, key=key, unicode=text, mod=0)


def type_text(view, text):
    for ch in text.lower():
        view.handle_event(keydown(pygame.K_a, ch))


def type_word(view, engine):
    type_text(view, accepted_sequences(engine.word.prompt)[0])


def begin(view, engine):
    view.handle_event(keydown(pygame.K_SPACE, " "))
    for _ in range(3):
        view.update(1.0)
    assert engine.state.phase == GamePhase.PLAYING


def test_space_starts_round():
    view, engine = make_view(selected_stages=(2,))
    view.handle_event(keydown(pygame.K_SPACE, " "))
    assert engine.state.phase == GamePhase.COUNTDOWN


def test_v_opens_settings_only_before_start():
    view, engine = make_view(selected_stages=(2,))
    action = view.handle_event(keydown(pygame.K_v, "v"))
    assert action.kind == "push"
    assert action.target == "settings"

    begin(view, engine)
    assert view.handle_event(keydown(pygame.K_v, "v")) is None


def test_typed_keys_reach_the_engine():
    view, engine = make_view(selected_stages=(2,))
    begin(view, engine)
    type_word(view, engine)
    assert engine.state.questions_answered == 1


def test_composition_holds_back_keys():
    view, engine = make_view(selected_stages=(2,))
    begin(view, engine)

    view.handle_event(pygame.event.Event(pygame.TEXTEDITING, text="k", start=1, length=0))
    view.handle_event(keydown(pygame.K_q, "q"))
    assert engine.state.lives == 10

    view.handle_event(pygame.event.Event(pygame.TEXTINPUT, text="か"))
    view.handle_event(keydown(pygame.K_q, "q"))
    assert engine.state.lives == 9


def test_emptied_composition_releases_keys():
    view, engine = make_view(selected_stages=(2,))
    begin(view, engine)
    view.handle_event(pygame.event.Event(pygame.TEXTEDITING, text="k", start=1, length=0))
    view.handle_event(pygame.event.Event(pygame.TEXTEDITING, text="", start=0, length=0))
    view.handle_event(keydown(pygame.K_q, "q"))
    assert engine.state.lives == 9


def test_space_advances_after_stage_clear():
    view, engine = make_view(selected_stages=(2, 3))
    begin(view, engine)
    for _ in range(QUESTIONS_PER_STAGE):
        type_word(view, engine)
    assert engine.state.phase == GamePhase.STAGE_CLEAR

    view.handle_event(keydown(pygame.K_SPACE, " "))
    assert engine.snapshot().transitioning
    view.update(0.5)
    assert engine.state.phase == GamePhase.COUNTDOWN
    assert engine.state.current_stage == 3


@pytest.mark.parametrize("key", [pygame.K_SPACE, pygame.K_RETURN])
def test_reset_from_game_over(key):
    view, engine = make_view(selected_stages=(2,))
    begin(view, engine)
    view.update(30.0)
    assert engine.state.phase == GamePhase.GAME_OVER
    view.handle_event(keydown(key))
    assert engine.state.phase == GamePhase.COUNTDOWN
    assert engine.state.lives == 10


def test_reset_from_clear():
    view, engine = make_view(selected_stages=(2,))
    begin(view, engine)
    for _ in range(QUESTIONS_PER_STAGE):
        type_word(view, engine)
    assert engine.state.phase == GamePhase.CLEAR
    view.handle_event(keydown(pygame.K_RETURN, "\r"))
    assert engine.state.phase == GamePhase.COUNTDOWN
    assert engine.state.score == 0


def test_escape_quits():
    view, _ = make_view(selected_stages=(2,))
    assert view.handle_event(keydown(pygame.K_ESCAPE)).kind == "quit"


def test_f2_toggles_mute_and_update_flushes_audio():
    audio = FakeAudio()
    view, engine = make_view(audio=audio, selected_stages=(2,))
    begin(view, engine)
    view.handle_event(keydown(pygame.K_F2))
    assert audio.muted
    assert engine.state.lives == 10
    assert audio.flushed == 3


def test_f2_without_audio_is_harmless():
    view, engine = make_view(selected_stages=(2,))
    view.handle_event(keydown(pygame.K_F2))
    assert engine.state.phase == GamePhase.START


def test_frames_reuse_fonts():
    view, engine = make_view(selected_stages=(2,))
    surface = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT))
    view.draw(surface)
    begin(view, engine)
    view.draw(surface)
    misses = get_font.cache_info().misses
    for _ in range(3):
        view.update(0.05)
        view.draw(surface)
    assert get_font.cache_info().misses == misses


def test_settings_view_pushes_and_pops():
    engine = GameEngine(settings=Settings(selected_stages=(2,)))
    manager = ViewManager(ViewContext((WINDOW_WIDTH, WINDOW_HEIGHT), engine))
    for view_cls in BUILTIN_VIEWS:
        manager.register(view_cls)
    manager.push("game")

    assert manager.handle_event(keydown(pygame.K_v, "v"))
    assert manager.active_view.name == "settings"
    assert manager.handle_event(keydown(pygame.K_ESCAPE))
    assert manager.active_view.name == "game"
    assert not manager.handle_event(keydown(pygame.K_ESCAPE))
