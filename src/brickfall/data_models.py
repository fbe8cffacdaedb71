"""
data_models.py: Data structures for the entities and the session state.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .constants import (
    BALL_SPEED_BASE, BLOCK_COLS, BLOCK_ROWS, LEVEL_SPEED_MULTIPLIER,
    NORMAL_BLOCK, NORMAL_POINTS, REINFORCED_BLOCK, REINFORCED_CHANCE,
    REINFORCED_POINTS, STARTING_LIVES, BLOCK_COLORS
)

Color = Tuple[int, int, int]


class GameState(Enum):
    INIT = "INIT"
    PLAYING = "PLAYING"
    LEVEL_COMPLETE = "LEVEL_COMPLETE"
    GAME_OVER = "GAME_OVER"
    VICTORY = "VICTORY"


@dataclass
class Ball:
    """The ball. `speed` is the conserved magnitude; vx/vy carry the direction."""
    x: float
    y: float
    radius: float
    vx: float = 0.0
    vy: float = 0.0
    speed: float = 0.0

    def stop(self):
        self.vx = 0.0
        self.vy = 0.0
        self.speed = 0.0


@dataclass
class Paddle:
    """Paddle positioned by its horizontal center and its top edge."""
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Paddle needs a positive size, got {self.width}x{self.height}")

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def set_position_x(self, x: float):
        """Direct assignment; clamping to the arena is the caller's job."""
        self.x = x


@dataclass
class Block:
    """A destructible block. `health` starts at `block_type` (1 normal, 2 reinforced)."""
    x: float
    y: float
    width: float
    height: float
    color: Color = BLOCK_COLORS[0]
    block_type: int = NORMAL_BLOCK
    health: int = field(init=False)
    active: bool = field(default=True, init=False)

    def __post_init__(self):
        self.health = self.block_type

    @property
    def reinforced(self) -> bool:
        return self.block_type == REINFORCED_BLOCK

    @property
    def points(self) -> int:
        return REINFORCED_POINTS if self.reinforced else NORMAL_POINTS

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def hit(self) -> bool:
        """Takes one hit. Returns True when this hit destroys the block."""
        self.health -= 1
        if self.health <= 0:
            self.active = False
            return True
        return False


@dataclass
class Particle:
    """Cosmetic debris spawned when a block breaks."""
    x: float
    y: float
    vx: float
    vy: float
    life: float
    color: Color


@dataclass(frozen=True)
class SessionConfig:
    """Per-session tuning. Level init reads the current speed ratio from SessionStats."""
    ball_speed_ratio: float = BALL_SPEED_BASE
    level_speed_multiplier: float = LEVEL_SPEED_MULTIPLIER
    starting_lives: int = STARTING_LIVES
    reinforced_chance: float = REINFORCED_CHANCE
    block_rows: int = BLOCK_ROWS
    block_cols: int = BLOCK_COLS
    max_level: Optional[int] = None


@dataclass
class SessionStats:
    score: int = 0
    lives: int = STARTING_LIVES
    level: int = 1
    combo: int = 0
    ball_speed_ratio: float = BALL_SPEED_BASE

    @classmethod
    def from_config(cls, config: SessionConfig) -> "SessionStats":
        return cls(lives=config.starting_lives,
                   ball_speed_ratio=config.ball_speed_ratio)


@dataclass(frozen=True)
class RenderSnapshot:
    """Everything a render sink needs for one frame, detached from the live entities."""
    width: float
    height: float
    state: GameState
    paddle: Paddle
    ball: Ball
    blocks: List[Block]
    particles: List[Particle]
    score: int
    lives: int
    level: int
    combo: int
    shake: float

    @classmethod
    def capture(cls, width, height, state, paddle, ball, blocks, particles,
                stats: SessionStats, shake: float) -> "RenderSnapshot":
        return cls(
            width=width,
            height=height,
            state=state,
            paddle=copy.deepcopy(paddle),
            ball=copy.deepcopy(ball),
            blocks=copy.deepcopy(blocks),
            particles=copy.deepcopy(particles),
            score=stats.score,
            lives=stats.lives,
            level=stats.level,
            combo=stats.combo,
            shake=shake,
        )

    def to_hud_state(self):
        """Prepares a minimal dictionary for text overlays."""
        return {
            "score": self.score,
            "lives": self.lives,
            "level": self.level,
            "state": self.state.value,
        }
