"""Settings (admin) view: stage selection, mode, speed, hands and window scale."""

from __future__ import annotations

import logging
from dataclasses import replace

import pygame

from kanafall.config import HOME_ROW_STAGE, NUM_STAGES_MAX, SCALE_MAX, SCALE_MIN, SPEED_MAX, SPEED_MIN
from kanafall.models import Settings
from kanafall.renderer import colors as colors_mod
from kanafall.settings_store import save_settings
from kanafall.stages import STAGE_IDS, get_stage
from kanafall.views.base import ViewAction, ViewContext

logger = logging.getLogger(__name__)

# Rows after the stage grid
_OPTION_ROWS = ("random", "num_stages", "show_hands", "speed", "window_scale")
_GRID_COLUMNS = 4


class SettingsView:
    name = "settings"

    def __init__(self) -> None:
        self._context: ViewContext | None = None
        self._selected: list[int] = []
        self._settings = Settings()
        self._cursor = 0
        self._warning = False
        self._font: pygame.font.Font | None = None
        self._title_font: pygame.font.Font | None = None

    def on_enter(self, context: ViewContext) -> None:
        self._context = context
        self._settings = context.engine.settings
        self._selected = list(self._settings.selected_stages)
        self._cursor = 0
        self._warning = False
        self._font = pygame.font.SysFont("notosanscjkjp,msgothic,monospace", 18)
        self._title_font = pygame.font.SysFont("notosanscjkjp,msgothic,monospace", 30)

    def on_exit(self) -> None:
        pass

    @property
    def _row_count(self) -> int:
        return len(STAGE_IDS) + len(_OPTION_ROWS)

    def handle_event(self, event: pygame.event.Event) -> ViewAction | None:
        if event.type != pygame.KEYDOWN:
            return None

        if event.key == pygame.K_ESCAPE:
            if not self._selected:
                self._warning = True
                return None
            return ViewAction(kind="pop")

        if event.key == pygame.K_UP:
            self._cursor = (self._cursor - 1) % self._row_count
        elif event.key == pygame.K_DOWN:
            self._cursor = (self._cursor + 1) % self._row_count
        elif event.key in (pygame.K_SPACE, pygame.K_RETURN):
            self._toggle()
        elif event.key == pygame.K_LEFT:
            self._adjust(-1)
        elif event.key == pygame.K_RIGHT:
            self._adjust(1)
        elif event.key == pygame.K_a:
            self._selected = [
                s for s in STAGE_IDS
                if not (self._settings.is_random_mode and s == HOME_ROW_STAGE)
            ]
            self._commit()
        elif event.key == pygame.K_c:
            self._selected = []
            self._warning = False

        return None

    def _toggle(self) -> None:
        if self._cursor < len(STAGE_IDS):
            stage_id = STAGE_IDS[self._cursor]
            if self._settings.is_random_mode and stage_id == HOME_ROW_STAGE:
                return
            if stage_id in self._selected:
                self._selected.remove(stage_id)
            else:
                self._selected.append(stage_id)
            self._warning = False
            self._commit()
            return

        option = _OPTION_ROWS[self._cursor - len(STAGE_IDS)]
        if option == "random":
            random_mode = not self._settings.is_random_mode
            if random_mode and HOME_ROW_STAGE in self._selected:
                self._selected.remove(HOME_ROW_STAGE)
            self._settings = replace(self._settings, is_random_mode=random_mode)
            self._commit()
        elif option == "show_hands":
            self._settings = replace(self._settings, show_hands=not self._settings.show_hands)
            self._commit()

    def _adjust(self, step: int) -> None:
        if self._cursor < len(STAGE_IDS):
            return
        option = _OPTION_ROWS[self._cursor - len(STAGE_IDS)]
        s = self._settings
        if option == "speed":
            self._settings = replace(s, speed=max(SPEED_MIN, min(SPEED_MAX, s.speed + step)))
        elif option == "num_stages":
            self._settings = replace(s, num_stages=max(1, min(NUM_STAGES_MAX, s.num_stages + step)))
        elif option == "window_scale":
            scale = round(s.window_scale + step * 0.1, 1)
            self._settings = replace(s, window_scale=max(SCALE_MIN, min(SCALE_MAX, scale)))
        else:
            return
        self._commit()

    def _commit(self) -> None:
        """Push the edited settings to the engine; an empty selection is never applied."""
        if not self._selected or self._context is None:
            return
        self._settings = replace(self._settings, selected_stages=tuple(sorted(self._selected)))
        self._context.engine.apply_settings(self._settings)
        if self._context.settings_path is not None:
            try:
                save_settings(self._context.engine.settings, self._context.settings_path)
            except OSError as exc:
                logger.warning("Could not save settings: %s", exc)

    def update(self, dt: float) -> ViewAction | None:
        return None

    def draw(self, surface: pygame.Surface) -> None:
        if not self._font or not self._title_font:
            return

        surface.fill(colors_mod.PANEL)
        w, h = surface.get_size()

        title = self._title_font.render("Settings", True, colors_mod.HUD_TEXT)
        surface.blit(title, (40, 24))

        if self._warning:
            warn = self._font.render("Select at least one stage", True, colors_mod.LIFE)
            surface.blit(warn, (w - warn.get_width() - 40, 34))

        col_w = (w - 80) // _GRID_COLUMNS
        for i, stage_id in enumerate(STAGE_IDS):
            row, col = divmod(i, _GRID_COLUMNS)
            x, y = 40 + col * col_w, 80 + row * 30
            disabled = self._settings.is_random_mode and stage_id == HOME_ROW_STAGE
            mark = "[x]" if stage_id in self._selected else "[ ]"
            color = colors_mod.HUD_DIM if disabled else colors_mod.HUD_TEXT
            if i == self._cursor:
                color = colors_mod.FINGER_ACTIVE
            text = self._font.render(f"{mark} {get_stage(stage_id).label}", True, color)
            surface.blit(text, (x, y))

        s = self._settings
        values = {
            "random": f"Random order: {'ON' if s.is_random_mode else 'OFF'}",
            "num_stages": f"Stages per round (random): < {s.num_stages} >",
            "show_hands": f"Finger guide: {'ON' if s.show_hands else 'OFF'}",
            "speed": f"Fall speed (1 slow - 5 fast): < {s.speed} >",
            "window_scale": f"Window scale: < {s.window_scale:.1f} >",
        }
        y = 80 + ((len(STAGE_IDS) + _GRID_COLUMNS - 1) // _GRID_COLUMNS) * 30 + 20
        for j, option in enumerate(_OPTION_ROWS):
            selected = self._cursor == len(STAGE_IDS) + j
            color = colors_mod.FINGER_ACTIVE if selected else colors_mod.HUD_TEXT
            surface.blit(self._font.render(values[option], True, color), (40, y))
            y += 30

        legend = self._font.render(
            "Up/Down: move | Space: toggle | Left/Right: adjust | A: all | C: clear | Esc: back",
            True, colors_mod.HUD_DIM,
        )
        surface.blit(legend, (40, h - 40))
