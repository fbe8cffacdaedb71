"""
constants.py: Centralized tuning for the arena, entities, scoring and timing.
"""

import math

# -------- Arena Config --------
SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
RENDER_FPS = 60

# Motion is expressed per 60 fps frame; elapsed time is normalized against this.
FRAME_MS_BASELINE = 1000.0 / 60.0

# -------- Paddle Config (fractions of the arena) --------
PADDLE_WIDTH_RATIO = 0.2
PADDLE_HEIGHT_RATIO = 0.02
PADDLE_Y_OFFSET = 0.1           # Paddle top sits 10% above the bottom edge
PADDLE_KEY_SPEED = 0.9          # Keyboard paddle speed (arena widths/second)

# -------- Ball Config --------
BALL_RADIUS_RATIO = 0.015       # Relative to arena width
BALL_SPEED_BASE = 0.005         # Pixels per frame, relative to arena height
BALL_PADDLE_GAP = 2.0           # Gap between resting ball and paddle top
MAX_BOUNCE_ANGLE = math.pi / 3  # 60 degrees either side of straight up
LAUNCH_ANGLE_SPREAD = 1.0       # Radians, centred on straight up

# -------- Block Grid Config --------
BLOCK_ROWS = 5
BLOCK_COLS = 8
BLOCK_HEIGHT_RATIO = 0.03
BLOCK_TOP_MARGIN = 80.0         # Leaves room for the HUD
REINFORCED_CHANCE = 0.2         # Only from level 2 onwards

NORMAL_BLOCK = 1
REINFORCED_BLOCK = 2

# -------- Session Config --------
STARTING_LIVES = 3
LEVEL_SPEED_MULTIPLIER = 1.1

# -------- Scoring --------
NORMAL_POINTS = 100
REINFORCED_POINTS = 250
COMBO_BONUS = 50

# -------- Feedback --------
SHAKE_FRAMES = 5.0
PARTICLE_BURST = 10
PARTICLE_LIFE = 30.0
PARTICLE_SPEED = 5.0
PARTICLE_SIZE = 4

# -------- Colors --------
BACKGROUND_COLOR = (15, 23, 42)
PADDLE_COLOR = (56, 189, 248)
BALL_COLOR = (255, 255, 255)
BLOCK_COLORS = [
    (239, 68, 68),    # red
    (249, 115, 22),   # orange
    (234, 179, 8),    # yellow
    (34, 197, 94),    # green
]
TEXT_COLOR = (255, 255, 255)
