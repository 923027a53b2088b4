"""Global constants and default settings."""

from pathlib import Path

WINDOW_WIDTH = 960
WINDOW_HEIGHT = 720
FPS = 60
WINDOW_TITLE = "KanaFall"

# Round rules
MAX_LIVES = 10
QUESTIONS_PER_STAGE = 20
HOME_ROW_KEYS = ("F", "J")
HOME_ROW_STAGE = 1
HOME_ROW_INTERVAL = 4  # every 4th question is a home-row drill

# Timers (seconds)
FALL_TICK_S = 0.05
COUNTDOWN_START = 3
COUNTDOWN_STEP_S = 1.0
STAGE_TRANSITION_S = 0.5

# Play field, 0-100 on both axes
FIELD_BOTTOM = 100.0
SPAWN_Y = -10.0
SPAWN_X_MIN = 10.0
SPAWN_X_SPAN = 80.0
BASE_FALL_SPEED = 0.6
FALL_SPEED_JITTER = 0.09

# Scoring
MAX_AWARD = 8
MIN_AWARD = 1
SPEED_BONUS = 0.2

# Settings bounds
SPEED_MIN = 1
SPEED_MAX = 5
NUM_STAGES_MAX = 100
SCALE_MIN = 0.5
SCALE_MAX = 2.0

# Visual effect lifetimes
PARTICLE_COUNT = 10
EFFECT_LIFETIME_S = 1.0
SHAKE_LIFETIME_S = 0.5
FLASH_LIFETIME_S = 0.5

# Finished rounds listed on the start screen
RECENT_ROUNDS = 3

DATA_DIR = Path.home() / ".kanafall"
