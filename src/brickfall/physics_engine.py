"""
physics_engine.py: The per-frame world simulation for one level.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional

from .constants import (
    BALL_PADDLE_GAP, BALL_RADIUS_RATIO, BLOCK_COLORS, BLOCK_HEIGHT_RATIO,
    BLOCK_TOP_MARGIN, COMBO_BONUS, LAUNCH_ANGLE_SPREAD, NORMAL_BLOCK,
    PADDLE_HEIGHT_RATIO, PADDLE_WIDTH_RATIO, PADDLE_Y_OFFSET, PARTICLE_BURST,
    PARTICLE_LIFE, PARTICLE_SPEED, REINFORCED_BLOCK, SCREEN_HEIGHT, SCREEN_WIDTH
)
from .data_models import Ball, Block, Paddle, Particle, SessionConfig, SessionStats
from .physics_core import PhysicsCore

logger = logging.getLogger(__name__)


def combo_points(block: Block, combo: int) -> int:
    """Points for destroying `block` when it brings the combo to `combo`."""
    points = block.points
    if combo > 1:
        points += COMBO_BONUS * (combo - 1)
    return points


@dataclass
class FrameReport:
    """What happened during one simulation step."""
    shake: bool = False
    life_lost: bool = False
    level_cleared: bool = False
    points: int = 0
    destroyed: Optional[Block] = None


@dataclass
class SimulationEngine(PhysicsCore):
    """
    Owns the entities of the current level and advances them frame by frame.
    Inherits the collision tests and resolutions from PhysicsCore.
    """
    width: float = SCREEN_WIDTH
    height: float = SCREEN_HEIGHT
    rng: random.Random = field(default_factory=random.Random)
    paddle: Paddle = field(init=False)
    ball: Ball = field(init=False)
    blocks: List[Block] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Arena needs a positive size, got {self.width}x{self.height}")
        self._place_paddle_and_ball()

    # ----------------------------
    # Level setup
    # ----------------------------

    def _place_paddle_and_ball(self):
        self.paddle = Paddle(
            x=self.width / 2,
            y=self.height * (1 - PADDLE_Y_OFFSET),
            width=self.width * PADDLE_WIDTH_RATIO,
            height=self.height * PADDLE_HEIGHT_RATIO,
        )
        self.ball = Ball(x=self.paddle.x, y=0.0, radius=self.width * BALL_RADIUS_RATIO)
        self.reset_ball()

    def build_level(self, level: int, config: SessionConfig):
        """Fresh paddle, ball and block grid for `level`."""
        self._place_paddle_and_ball()
        self.particles = []
        self.blocks = []

        block_w = self.width / config.block_cols
        block_h = self.height * BLOCK_HEIGHT_RATIO
        for row in range(config.block_rows):
            color = BLOCK_COLORS[row % len(BLOCK_COLORS)]
            for col in range(config.block_cols):
                block_type = NORMAL_BLOCK
                if level > 1 and self.rng.random() < config.reinforced_chance:
                    block_type = REINFORCED_BLOCK
                self.blocks.append(Block(
                    x=col * block_w,
                    y=row * block_h + BLOCK_TOP_MARGIN,
                    width=block_w,
                    height=block_h,
                    color=color,
                    block_type=block_type,
                ))

        reinforced = sum(1 for b in self.blocks if b.reinforced)
        logger.debug("Built level %d: %d blocks (%d reinforced)",
                     level, len(self.blocks), reinforced)

    def reset_ball(self):
        """Parks the ball, motionless, on top of the paddle."""
        self.ball.x = self.paddle.x
        self.ball.y = self.paddle.y - self.ball.radius - BALL_PADDLE_GAP
        self.ball.stop()

    def launch_ball(self, stats: SessionStats):
        """Gives the parked ball its level speed at a random angle around straight up."""
        speed = self.height * stats.ball_speed_ratio
        angle = -math.pi / 2 + (self.rng.random() - 0.5) * LAUNCH_ANGLE_SPREAD
        self.ball.speed = speed
        self.ball.vx = speed * math.cos(angle)
        self.ball.vy = speed * math.sin(angle)
        logger.debug("Launch: speed=%.3f angle=%.3f vx=%.3f vy=%.3f",
                     speed, angle, self.ball.vx, self.ball.vy)

    def move_paddle(self, delta_x: float, ball_follows: bool = False) -> float:
        """Shifts the paddle, keeping it fully inside the arena."""
        half = self.paddle.width / 2
        new_x = max(half, min(self.width - half, self.paddle.x + delta_x))
        self.paddle.set_position_x(new_x)
        if ball_follows:
            self.ball.x = new_x
        return new_x

    def active_blocks(self) -> List[Block]:
        return [b for b in self.blocks if b.active]

    # ----------------------------
    # Per-frame simulation
    # ----------------------------

    def step(self, stats: SessionStats, time_scale: float) -> FrameReport:
        """
        The main simulation step for a ball in play.
        Mutates the entities and the score/combo in `stats`.
        """
        report = FrameReport()
        ball = self.ball

        # 1. Move
        self.integrate(ball, time_scale)

        # 2. Walls; falling out ends the frame
        walls = self.wall_collision(ball, self.width, self.height)
        report.shake = walls.hit_side
        if walls.crossed_bottom:
            report.life_lost = True
            return report

        # 3. Paddle
        if self.paddle_collision(ball, self.paddle):
            stats.combo = 0
            report.shake = True
            self.resolve_paddle_bounce(ball, self.paddle)

        # 4. Blocks: the first hit wins
        for block in self.blocks:
            if not block.active:
                continue
            if not self.block_collision(ball, block).collided:
                continue

            if block.hit():
                stats.combo += 1
                points = combo_points(block, stats.combo)
                stats.score += points
                report.points = points
                report.destroyed = block
                report.level_cleared = not any(b.active for b in self.blocks)
                self.spawn_particles(block)
            else:
                stats.combo = 0
                report.shake = True

            self.resolve_block_bounce(ball, block)
            break

        self.ensure_finite(ball)
        return report

    # ----------------------------
    # Particles
    # ----------------------------

    def spawn_particles(self, block: Block):
        x, y = block.center
        for _ in range(PARTICLE_BURST):
            self.particles.append(Particle(
                x=x,
                y=y,
                vx=(self.rng.random() - 0.5) * PARTICLE_SPEED,
                vy=(self.rng.random() - 0.5) * PARTICLE_SPEED,
                life=PARTICLE_LIFE,
                color=block.color,
            ))

    def update_particles(self, time_scale: float):
        for p in self.particles:
            p.x += p.vx * time_scale
            p.y += p.vy * time_scale
            p.life -= time_scale
        self.particles = [p for p in self.particles if p.life > 0]

    # ----------------------------
    # Arena resize
    # ----------------------------

    def rescale(self, new_width: float, new_height: float):
        """Maps every entity onto a resized arena with the same per-axis factors."""
        if new_width <= 0 or new_height <= 0:
            raise ValueError(f"Arena needs a positive size, got {new_width}x{new_height}")
        if new_width == self.width and new_height == self.height:
            return

        sx = new_width / self.width
        sy = new_height / self.height

        paddle = self.paddle
        paddle.x *= sx
        paddle.y *= sy
        paddle.width *= sx
        paddle.height *= sy

        ball = self.ball
        ball.x *= sx
        ball.y *= sy
        ball.radius *= sx
        ball.vx *= sx
        ball.vy *= sy
        ball.speed = math.hypot(ball.vx, ball.vy)

        for block in self.blocks:
            block.x *= sx
            block.y *= sy
            block.width *= sx
            block.height *= sy

        for p in self.particles:
            p.x *= sx
            p.y *= sy
            p.vx *= sx
            p.vy *= sy

        self.width = new_width
        self.height = new_height
        logger.debug("Rescaled arena to %sx%s (sx=%.3f sy=%.3f)", new_width, new_height, sx, sy)
