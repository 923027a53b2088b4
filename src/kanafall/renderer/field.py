"""Draws the play field, the falling word, effects and phase overlays."""

from __future__ import annotations

import math

import pygame

from kanafall.config import HOME_ROW_STAGE, QUESTIONS_PER_STAGE
from kanafall.models import EffectKind, GamePhase, GameSnapshot
from kanafall.renderer import colors as colors_mod
from kanafall.renderer.fonts import get_font
from kanafall.romaji import display_romaji



def _gradient(surface: pygame.Surface, rect: pygame.Rect, top, bottom) -> None:
    for i in range(rect.h):
        t = i / max(1, rect.h - 1)
        color = tuple(int(a + (b - a) * t) for a, b in zip(top, bottom))
        pygame.draw.line(surface, color, (rect.x, rect.y + i), (rect.right - 1, rect.y + i))


def _to_screen(rect: pygame.Rect, x: float, y: float) -> tuple[int, int]:
    return int(rect.x + rect.w * x / 100.0), int(rect.y + rect.h * y / 100.0)


def shake_offset(snap: GameSnapshot) -> int:
    for effect in snap.effects:
        if effect.kind == EffectKind.SHAKE:
            remaining = effect.expires_at - snap.clock
            return int(math.sin(remaining * 60) * 8 * remaining * 2)
    return 0


def render_field(surface: pygame.Surface, snap: GameSnapshot, rect: pygame.Rect) -> None:
    rect = rect.move(shake_offset(snap), 0)
    top, bottom = colors_mod.BACKGROUNDS.get(snap.state.background, colors_mod.BACKGROUNDS["sky"])
    _gradient(surface, rect, top, bottom)

    clip = surface.get_clip()
    surface.set_clip(rect)
    if snap.word is not None:
        _draw_word(surface, snap, rect)
    _draw_effects(surface, snap, rect)
    surface.set_clip(clip)

    render_overlay(surface, snap, rect)


def _draw_word(surface: pygame.Surface, snap: GameSnapshot, rect: pygame.Rect) -> None:
    word = snap.word
    big = get_font(40, bold=True)
    small = get_font(18)

    cx, top = _to_screen(rect, word.x, word.y)
    prompt = big.render(word.prompt, True, colors_mod.WORD_TEXT)
    lines = [prompt]
    if snap.state.current_stage != HOME_ROW_STAGE:
        hint = display_romaji(word.prompt)
        typed = snap.state.input_buffer
        lines.append(small.render(hint, True, colors_mod.ROMAJI_HINT))
        if typed:
            lines.append(small.render(typed, True, colors_mod.TYPED))

    w = max(s.get_width() for s in lines) + 24
    h = sum(s.get_height() for s in lines) + 12
    box = pygame.Surface((w, h), pygame.SRCALPHA)
    box.fill((*colors_mod.WORD_BOX, 50))
    # A slight sway while falling
    angle = math.sin(word.y / 10) * 5
    y = 6
    for line in lines:
        box.blit(line, ((w - line.get_width()) // 2, y))
        y += line.get_height()
    rotated = pygame.transform.rotate(box, -angle)
    surface.blit(rotated, (cx - rotated.get_width() // 2, top))


def _draw_effects(surface: pygame.Surface, snap: GameSnapshot, rect: pygame.Rect) -> None:
    font = get_font(28, bold=True)
    for i, effect in enumerate(snap.effects):
        remaining = max(0.0, effect.expires_at - snap.clock)
        x, y = _to_screen(rect, effect.x, effect.y)
        if effect.kind == EffectKind.PARTICLE:
            # Spread particles outward as they age
            angle = i * 2 * math.pi / 10
            spread = (1.0 - remaining) * 60
            pos = (int(x + math.cos(angle) * spread), int(y + math.sin(angle) * spread))
            pygame.draw.circle(surface, effect.color, pos, 4)
        elif effect.kind == EffectKind.SCORE_POPUP:
            text = font.render(f"+{effect.value}", True, colors_mod.POPUP)
            surface.blit(text, (x - text.get_width() // 2, int(y - (1.0 - remaining) * 40)))
        elif effect.kind == EffectKind.FLASH:
            radius = int(64 * (1.0 - remaining * 2) + 16)
            pygame.draw.circle(surface, colors_mod.WORD_BOX, (x, y), max(radius, 1), width=4)


def render_overlay(surface: pygame.Surface, snap: GameSnapshot, rect: pygame.Rect) -> None:
    """Draw the full-field panel for every phase that is not plain gameplay."""
    state = snap.state
    title_font = get_font(44, bold=True)
    font = get_font(22)

    if state.phase == GamePhase.COUNTDOWN:
        if state.countdown is not None:
            text = get_font(120, bold=True).render(
                str(state.countdown), True, colors_mod.OVERLAY_TEXT
            )
            surface.blit(text, text.get_rect(center=rect.center))
        return

    if state.phase == GamePhase.START:
        gradient = colors_mod.OVERLAY_START
        lines = [
            ("タイピングTARO", title_font),
            (f"High score: {state.high_score}", font),
            (f"Speed: {snap.settings.speed}", font),
        ]
        small = get_font(18)
        for row in snap.recent_rounds:
            result = "clear" if row["outcome"] == "clear" else "game over"
            lines.append((f"{row['score']} pts, {result}", small))
        lines.append(("Space: start   V: settings", font))
    elif state.phase == GamePhase.STAGE_CLEAR:
        gradient = colors_mod.OVERLAY_STAGE_CLEAR
        lines = [
            ("Stage clear!", title_font),
            (f"Score: {state.score}", font),
            ("Space: next stage" if not snap.transitioning else "...", font),
        ]
    elif state.phase == GamePhase.GAME_OVER:
        gradient = colors_mod.OVERLAY_GAME_OVER
        lines = [
            ("Game over", title_font),
            (f"Final score: {state.score}", font),
            (f"Stage {state.stages_completed + 1} - {state.questions_answered}/{QUESTIONS_PER_STAGE}", font),
        ]
        if state.is_new_record:
            lines.append(("New high score!", font))
        lines.append(("Space: try again", font))
    elif state.phase == GamePhase.CLEAR:
        gradient = colors_mod.OVERLAY_CLEAR
        lines = [
            ("All stages clear!", title_font),
            (f"Final score: {state.score}", font),
        ]
        if state.is_new_record:
            lines.append(("New high score!", font))
        lines.append(("Space: play again", font))
    else:
        return

    _gradient(surface, rect, *gradient)
    total = sum(f.get_linesize() + 8 for _, f in lines)
    y = rect.centery - total // 2
    for text, f in lines:
        rendered = f.render(text, True, colors_mod.OVERLAY_TEXT)
        surface.blit(rendered, (rect.centerx - rendered.get_width() // 2, y))
        y += f.get_linesize() + 8
