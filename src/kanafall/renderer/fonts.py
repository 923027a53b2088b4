"""Font lookup shared by the renderer modules."""

from __future__ import annotations

from functools import lru_cache

import pygame

# Japanese-capable faces first, monospace as the last resort
FONT_NAMES = "notosanscjkjp,notosansjp,ipagothic,msgothic,hiraginosans,monospace"


@lru_cache(maxsize=None)
def get_font(size: int, bold: bool = False) -> pygame.font.Font:
    return pygame.font.SysFont(FONT_NAMES, size, bold=bold)
