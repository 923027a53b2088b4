"""Top-level application: initializes pygame, wires the engine to its collaborators, runs the loop."""

from __future__ import annotations

import logging
from pathlib import Path

import pygame

from kanafall.config import FPS, WINDOW_HEIGHT, WINDOW_TITLE, WINDOW_WIDTH
from kanafall.engine import GameEngine
from kanafall.models import Settings
from kanafall.scoring import MemoryScoreStore
from kanafall.settings_store import SETTINGS_PATH
from kanafall.views import BUILTIN_VIEWS, ViewContext, ViewManager

logger = logging.getLogger(__name__)


def _window_size(scale: float) -> tuple[int, int]:
    return int(WINDOW_WIDTH * scale), int(WINDOW_HEIGHT * scale)


class App:
    def __init__(
        self,
        settings: Settings,
        soundfont: str | None = None,
        settings_path: Path | None = SETTINGS_PATH,
    ) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode(_window_size(settings.window_scale))
        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()

        # Optional subsystems gracefully degrade
        self._audio = self._try_audio(soundfont)
        self._history = self._try_history()
        store = self._try_score_store()

        self.engine = GameEngine(settings=settings, score_store=store, history=self._history)
        if self._audio:
            self.engine.cues.subscribe(self._audio.on_cue)

        context = ViewContext(
            screen_size=(WINDOW_WIDTH, WINDOW_HEIGHT),
            engine=self.engine,
            audio=self._audio,
            settings_path=settings_path,
        )
        self.views = ViewManager(context)
        for view_cls in BUILTIN_VIEWS:
            self.views.register(view_cls)
        self.views.push("game")

    def run(self) -> None:
        running = True
        while running:
            dt = self.clock.tick(FPS) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif not self.views.handle_event(event):
                    running = False
            if running:
                if not self.views.update(dt):
                    running = False
            self._sync_window_size()
            self.views.draw(self.screen)
            pygame.display.flip()

        self._cleanup()
        pygame.quit()

    def _sync_window_size(self) -> None:
        size = _window_size(self.engine.settings.window_scale)
        if self.screen.get_size() != size:
            self.screen = pygame.display.set_mode(size)

    def _cleanup(self) -> None:
        while self.views.active_view:
            self.views.pop()
        if self._audio:
            self._audio.shutdown()
        if self._history:
            self._history.close()

    @staticmethod
    def _try_audio(soundfont: str | None):
        try:
            from kanafall.audio import CuePlayer
            return CuePlayer(soundfont)
        except Exception as exc:
            logger.info("Audio disabled: %s", exc)
            return None

    @staticmethod
    def _try_history():
        try:
            from kanafall.progress import RoundHistory
            return RoundHistory()
        except Exception as exc:
            logger.info("Round history disabled: %s", exc)
            return None

    @staticmethod
    def _try_score_store():
        try:
            from kanafall.progress import HighScoreStore
            store = HighScoreStore()
            store.path.parent.mkdir(parents=True, exist_ok=True)
            return store
        except OSError as exc:
            logger.info("High score kept in memory only: %s", exc)
            return MemoryScoreStore()
