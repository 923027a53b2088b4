"""Color palette."""

# RGB tuples
BG = (226, 232, 240)
PANEL = (241, 245, 249)
HUD_TEXT = (30, 41, 59)
HUD_DIM = (100, 116, 139)
WORD_TEXT = (255, 255, 255)
WORD_BOX = (255, 255, 255)
ROMAJI_HINT = (226, 232, 240)
TYPED = (250, 204, 21)
LIFE = (239, 68, 68)
POPUP = (253, 224, 71)
FINGER = (203, 213, 225)
FINGER_ACTIVE = (59, 130, 246)
OVERLAY_TEXT = (255, 255, 255)

# Background tag -> (top, bottom) gradient
BACKGROUNDS = {
    "sky": ((125, 211, 252), (37, 99, 235)),
    "meadow": ((134, 239, 172), (22, 163, 74)),
    "sunset": ((253, 186, 116), (219, 39, 119)),
    "ocean": ((103, 232, 249), (14, 116, 144)),
    "forest": ((74, 222, 128), (20, 83, 45)),
    "dusk": ((165, 180, 252), (49, 46, 129)),
    "sakura": ((251, 207, 232), (219, 39, 119)),
    "lavender": ((216, 180, 254), (107, 33, 168)),
}

# Phase overlays
OVERLAY_START = ((59, 130, 246), (29, 78, 216))
OVERLAY_STAGE_CLEAR = ((110, 231, 183), (16, 185, 129))
OVERLAY_GAME_OVER = ((71, 85, 105), (30, 41, 59))
OVERLAY_CLEAR = ((253, 224, 71), (245, 158, 11))
