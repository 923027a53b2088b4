"""Finger guide highlighting the finger for the next key."""

from __future__ import annotations

from typing import Literal

import pygame

from kanafall.renderer.colors import FINGER, FINGER_ACTIVE
from kanafall.romaji import guide_key

# Key -> (hand, finger); finger 0 = index ... 3 = little
FINGER_MAP: dict[str, tuple[Literal["left", "right"], int]] = {
    "Q": ("left", 3), "W": ("left", 2), "E": ("left", 1), "R": ("left", 0), "T": ("left", 0),
    "Y": ("right", 0), "U": ("right", 0), "I": ("right", 1), "O": ("right", 2), "P": ("right", 3),
    "A": ("left", 3), "S": ("left", 2), "D": ("left", 1), "F": ("left", 0), "G": ("left", 0),
    "H": ("right", 0), "J": ("right", 0), "K": ("right", 1), "L": ("right", 2), ";": ("right", 3),
    "Z": ("left", 3), "X": ("left", 2), "C": ("left", 1), "V": ("left", 0), "B": ("left", 0),
    "N": ("right", 0), "M": ("right", 0), ",": ("right", 1), ".": ("right", 2), "/": ("right", 3),
}

_FINGER_HEIGHTS = {0: 30, 1: 36, 2: 30, 3: 24}


def finger_for(prompt: str, typed: str) -> tuple[str, int] | None:
    key = guide_key(prompt, typed)
    if key is None:
        return None
    return FINGER_MAP.get(key)


def render_hands(surface: pygame.Surface, prompt: str, typed: str, rect: pygame.Rect) -> None:
    """Draw both hands along the bottom of ``rect``."""
    active = finger_for(prompt, typed)
    base_y = rect.bottom - 16
    gap = 8

    for hand, fingers, x0 in (
        ("left", (3, 2, 1, 0), rect.centerx - 24 - 4 * (32 + gap)),
        ("right", (0, 1, 2, 3), rect.centerx + 24),
    ):
        x = x0
        for finger in fingers:
            w = 24 if finger == 3 else 32
            h = _FINGER_HEIGHTS[finger]
            color = FINGER_ACTIVE if active == (hand, finger) else FINGER
            pygame.draw.rect(
                surface, color, pygame.Rect(x, base_y - h, w, h),
                border_top_left_radius=w // 2, border_top_right_radius=w // 2,
            )
            x += w + gap
