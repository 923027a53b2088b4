"""Main game view. Routes keyboard input into the engine and draws its snapshot."""

from __future__ import annotations

import pygame

from kanafall.config import WINDOW_HEIGHT, WINDOW_WIDTH
from kanafall.models import GamePhase
from kanafall.renderer import colors as colors_mod
from kanafall.renderer.field import render_field
from kanafall.renderer.hands import render_hands
from kanafall.renderer.hud import render_hud
from kanafall.views.base import ViewAction, ViewContext, layout_regions


class GameView:
    name = "game"

    def __init__(self) -> None:
        self._context: ViewContext | None = None
        self._composing = False
        self._canvas = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT))
        self._font: pygame.font.Font | None = None

    def on_enter(self, context: ViewContext) -> None:
        self._context = context
        self._composing = False
        self._font = pygame.font.SysFont("monospace", 16)
        pygame.key.start_text_input()

    def on_exit(self) -> None:
        if self._context and self._context.audio:
            self._context.audio.all_notes_off()

    def handle_event(self, event: pygame.event.Event) -> ViewAction | None:
        if self._context is None:
            return None
        engine = self._context.engine

        # IME composition arrives as TEXTEDITING until it is committed
        if event.type == pygame.TEXTEDITING:
            self._composing = bool(event.text)
            return None
        if event.type == pygame.TEXTINPUT:
            self._composing = False
            return None
        if event.type != pygame.KEYDOWN:
            return None

        phase = engine.state.phase
        if event.key == pygame.K_ESCAPE:
            return ViewAction(kind="quit")
        if event.key == pygame.K_F2 and self._context.audio:
            self._context.audio.toggle_mute()
            return None

        if phase == GamePhase.PLAYING:
            engine.on_key(event.unicode, composing=self._composing)
        elif phase == GamePhase.START:
            if event.key == pygame.K_SPACE:
                engine.start()
            elif event.key == pygame.K_v:
                return ViewAction(kind="push", target="settings")
        elif phase == GamePhase.STAGE_CLEAR:
            if event.key == pygame.K_SPACE:
                engine.advance()
        elif phase in (GamePhase.GAME_OVER, GamePhase.CLEAR):
            if event.key in (pygame.K_SPACE, pygame.K_RETURN):
                engine.reset()

        return None

    def update(self, dt: float) -> ViewAction | None:
        if self._context is None:
            return None
        self._context.engine.update(dt)
        if self._context.audio:
            self._context.audio.flush()
        return None

    def draw(self, surface: pygame.Surface) -> None:
        if self._context is None:
            return
        snap = self._context.engine.snapshot()
        canvas = self._canvas
        canvas.fill(colors_mod.BG)

        regions = layout_regions(
            canvas.get_rect().inflate(-40, -40),
            [("hud", "top", 64), ("footer", "bottom", 28)],
        )
        pygame.draw.rect(canvas, colors_mod.PANEL, regions["hud"], border_radius=8)
        render_hud(canvas, snap, regions["hud"])
        render_field(canvas, snap, regions["center"])

        if snap.settings.show_hands and snap.word is not None:
            render_hands(canvas, snap.word.prompt, snap.state.input_buffer, regions["center"])

        if self._font:
            muted = self._context.audio is not None and self._context.audio.muted
            hint = "Esc: quit | F2: " + ("unmute" if muted else "mute")
            rendered = self._font.render(hint, True, colors_mod.HUD_DIM)
            canvas.blit(rendered, (regions["footer"].x, regions["footer"].y + 6))

        # The window follows window_scale; the canvas is always drawn at base size
        if surface.get_size() == canvas.get_size():
            surface.blit(canvas, (0, 0))
        else:
            surface.blit(pygame.transform.smoothscale(canvas, surface.get_size()), (0, 0))
