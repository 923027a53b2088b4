"""Heads-up display — stage, remaining questions, lives, score."""

from __future__ import annotations

import pygame

from kanafall.config import QUESTIONS_PER_STAGE
from kanafall.models import GamePhase, GameSnapshot
from kanafall.renderer.colors import HUD_DIM, HUD_TEXT, LIFE
from kanafall.renderer.fonts import get_font


def render_hud(surface: pygame.Surface, snap: GameSnapshot, rect: pygame.Rect) -> None:
    font = get_font(20)
    small = get_font(16)
    state = snap.state

    stage_text = font.render(f"Stage {state.stages_completed + 1}", True, HUD_TEXT)
    surface.blit(stage_text, (rect.x + 10, rect.y + 8))
    if state.phase == GamePhase.PLAYING:
        left = small.render(
            f"{QUESTIONS_PER_STAGE - state.questions_answered} left", True, HUD_DIM
        )
        surface.blit(left, (rect.x + 10, rect.y + 34))

    # One pip per remaining life
    pip_x = rect.centerx - 5 * 14
    for i in range(state.lives):
        pygame.draw.circle(surface, LIFE, (pip_x + i * 14, rect.y + 22), 5)

    score = font.render(f"Score: {state.score}", True, HUD_TEXT)
    best = small.render(f"High score: {state.high_score}", True, HUD_DIM)
    surface.blit(score, (rect.right - score.get_width() - 10, rect.y + 8))
    surface.blit(best, (rect.right - best.get_width() - 10, rect.y + 34))
