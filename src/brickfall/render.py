"""
render.py: Draws render snapshots. The simulation never calls back into here.
"""

import random
from typing import Protocol

import pygame

from .constants import (
    BACKGROUND_COLOR, BALL_COLOR, PADDLE_COLOR, PARTICLE_LIFE, PARTICLE_SIZE, TEXT_COLOR
)
from .data_models import GameState, RenderSnapshot

SHAKE_PIXELS = 10
BLOCK_OUTLINE = 2


class RenderSink(Protocol):
    def draw(self, snapshot: RenderSnapshot) -> None:
        ...


class PygameRenderer:
    """Render sink that paints snapshots onto a pygame surface."""

    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        self.font = pygame.font.Font(None, 28)
        self.large_font = pygame.font.Font(None, 48)

    def draw(self, snapshot: RenderSnapshot) -> None:
        surface = self.surface
        surface.fill(BACKGROUND_COLOR)

        ox, oy = 0, 0
        if snapshot.shake > 0:
            ox = int((random.random() - 0.5) * SHAKE_PIXELS)
            oy = int((random.random() - 0.5) * SHAKE_PIXELS)

        # Paddle
        paddle = snapshot.paddle
        pygame.draw.rect(surface, PADDLE_COLOR,
                         (paddle.left + ox, paddle.y + oy, paddle.width, paddle.height))

        # Ball
        ball = snapshot.ball
        pygame.draw.circle(surface, BALL_COLOR,
                           (int(ball.x + ox), int(ball.y + oy)), max(1, int(ball.radius)))

        # Blocks
        for block in snapshot.blocks:
            if not block.active:
                continue
            rect = pygame.Rect(block.x + ox, block.y + oy, block.width, block.height)
            pygame.draw.rect(surface, block.color, rect)
            pygame.draw.rect(surface, BACKGROUND_COLOR, rect, BLOCK_OUTLINE)
            if block.reinforced and block.health > 1:
                pygame.draw.rect(surface, TEXT_COLOR, rect.inflate(-6, -6), 1)

        # Particles fade out with their remaining life
        for p in snapshot.particles:
            alpha = max(0, min(255, int(255 * p.life / PARTICLE_LIFE)))
            dot = pygame.Surface((PARTICLE_SIZE, PARTICLE_SIZE), pygame.SRCALPHA)
            dot.fill((*p.color, alpha))
            surface.blit(dot, (p.x + ox, p.y + oy))

        self._draw_hud(snapshot)

    def _draw_hud(self, snapshot: RenderSnapshot):
        surface = self.surface
        width, height = surface.get_size()
        hud = snapshot.to_hud_state()

        score = self.font.render(f"Score: {hud['score']}", True, TEXT_COLOR)
        surface.blit(score, (20, 15))
        level = self.font.render(f"Level: {hud['level']}", True, TEXT_COLOR)
        surface.blit(level, (20, 45))
        lives = self.font.render(f"Lives: {hud['lives']}", True, TEXT_COLOR)
        surface.blit(lives, (width - lives.get_width() - 20, 15))

        overlay = self.overlay_lines(hud)
        if overlay:
            self._overlay(*overlay)

    @staticmethod
    def overlay_lines(hud):
        """Shade alpha and text lines for the state overlay, or None while playing."""
        state = hud["state"]
        if state == GameState.INIT.value:
            return 128, ["TAP TO START"]
        if state == GameState.GAME_OVER.value:
            return 180, ["GAME OVER", f"Final Score: {hud['score']}", "Tap to Restart"]
        if state == GameState.VICTORY.value:
            return 180, ["YOU WIN!", f"Final Score: {hud['score']}", "Tap to Restart"]
        if state == GameState.LEVEL_COMPLETE.value:
            return 128, ["LEVEL COMPLETE!", "Tap for Next Level"]
        return None

    def _overlay(self, alpha: int, lines):
        surface = self.surface
        width, height = surface.get_size()
        shade = pygame.Surface((width, height), pygame.SRCALPHA)
        shade.fill((0, 0, 0, alpha))
        surface.blit(shade, (0, 0))

        y = height // 2 - 30
        for i, line in enumerate(lines):
            font = self.large_font if i == 0 else self.font
            text = font.render(line, True, TEXT_COLOR)
            surface.blit(text, (width // 2 - text.get_width() // 2, y))
            y += text.get_height() + 16
