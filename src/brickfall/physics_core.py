"""
physics_core.py: Ball motion plus circle-vs-wall, paddle and block tests and their bounce resolution.
"""

import logging
import math
from dataclasses import dataclass

from .constants import FRAME_MS_BASELINE, MAX_BOUNCE_ANGLE
from .data_models import Ball, Block, Paddle

logger = logging.getLogger(__name__)


class SimulationError(RuntimeError):
    """Raised when the simulation produces a value it can never recover from."""


@dataclass
class WallCollision:
    hit_side: bool = False        # Left, right or top wall touched
    crossed_bottom: bool = False  # Ball fully below the arena


@dataclass
class BlockContact:
    collided: bool = False
    contact_x: float = 0.0
    contact_y: float = 0.0


class PhysicsCore:
    """
    Stateless collision tests and resolutions shared by the simulation engine.
    Resolution methods mutate the ball they are given; tests never do.
    """

    FRAME_MS = FRAME_MS_BASELINE
    MAX_BOUNCE_ANGLE = MAX_BOUNCE_ANGLE

    def time_scale(self, elapsed_ms: float) -> float:
        """Converts elapsed wall time into a multiple of one 60 fps frame."""
        if elapsed_ms < 0:
            raise ValueError(f"Elapsed time cannot be negative: {elapsed_ms}")
        return elapsed_ms / self.FRAME_MS

    def integrate(self, ball: Ball, time_scale: float):
        """Single explicit Euler step. Fast, small balls can tunnel through thin blocks."""
        ball.x += ball.vx * time_scale
        ball.y += ball.vy * time_scale
        self.ensure_finite(ball)

    def ensure_finite(self, ball: Ball):
        if all(math.isfinite(v) for v in (ball.x, ball.y, ball.vx, ball.vy)):
            return
        logger.error("Ball state is not finite: %s", ball)
        raise SimulationError(f"Ball state is not finite: {ball}")

    def wall_collision(self, ball: Ball, width: float, height: float) -> WallCollision:
        """
        Reflects the ball off the left, right and top walls, clamping it back inside.
        The bottom edge is open: it only reports that the ball left the arena.
        """
        result = WallCollision()

        # 1. Left / Right
        if ball.x - ball.radius < 0:
            ball.x = ball.radius
            ball.vx = -ball.vx
            result.hit_side = True
        if ball.x + ball.radius > width:
            ball.x = width - ball.radius
            ball.vx = -ball.vx
            result.hit_side = True

        # 2. Ceiling
        if ball.y - ball.radius < 0:
            ball.y = ball.radius
            ball.vy = -ball.vy
            result.hit_side = True

        # 3. Floor is handled by the session (life loss)
        result.crossed_bottom = ball.y - ball.radius > height
        return result

    def paddle_collision(self, ball: Ball, paddle: Paddle) -> bool:
        """True only for a downward-moving ball whose center is over the paddle."""
        if ball.vy <= 0:
            return False
        return (ball.y + ball.radius >= paddle.y
                and ball.y - ball.radius <= paddle.bottom
                and paddle.left <= ball.x <= paddle.right)

    def resolve_paddle_bounce(self, ball: Ball, paddle: Paddle):
        """
        Redirects the ball by where it struck the paddle: the center sends it
        straight up, the edges at MAX_BOUNCE_ANGLE. Incoming direction is ignored.
        """
        offset = (ball.x - paddle.x) / (paddle.width / 2)
        offset = max(-1.0, min(1.0, offset))
        angle = offset * self.MAX_BOUNCE_ANGLE

        ball.vx = ball.speed * math.sin(angle)
        ball.vy = -ball.speed * math.cos(angle)

    def block_collision(self, ball: Ball, block: Block) -> BlockContact:
        """Circle vs rectangle using the closest point on the block to the ball center."""
        closest_x = max(block.x, min(ball.x, block.x + block.width))
        closest_y = max(block.y, min(ball.y, block.y + block.height))

        dx = ball.x - closest_x
        dy = ball.y - closest_y

        if dx * dx + dy * dy < ball.radius * ball.radius:
            return BlockContact(True, closest_x, closest_y)
        return BlockContact()

    def resolve_block_bounce(self, ball: Ball, block: Block):
        """
        Reflects along the axis of least penetration and pushes the ball out on it.
        Only one axis is corrected, so a corner hit can pick the other side.
        """
        center_x, center_y = block.center
        overlap_x = ball.radius + block.width / 2 - abs(ball.x - center_x)
        overlap_y = ball.radius + block.height / 2 - abs(ball.y - center_y)

        if overlap_x < overlap_y:
            ball.vx = -ball.vx
            if ball.x < center_x:
                ball.x -= overlap_x
            else:
                ball.x += overlap_x
        else:
            ball.vy = -ball.vy
            if ball.y < center_y:
                ball.y -= overlap_y
            else:
                ball.y += overlap_y
