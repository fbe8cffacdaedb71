#!/usr/bin/env python3
"""
client.py

Pygame frame driver for a local game: translates mouse, touch and keyboard
input into session calls, forwards window resizes and renders snapshots.
"""

import argparse
import logging
from typing import Optional

import pygame

from .constants import PADDLE_KEY_SPEED, RENDER_FPS, SCREEN_HEIGHT, SCREEN_WIDTH
from .data_models import SessionConfig
from .game_state import GameSession
from .render import PygameRenderer

logger = logging.getLogger(__name__)


class PointerInput:
    """
    Collects one frame of pointer/keyboard input into a single paddle delta
    and at most one primary action.

    SDL mirrors touches as mouse events flagged with `touch`; those are
    dropped so a finger drag is counted once, through the FINGER* events.
    """

    def __init__(self):
        self.dragging = False
        self.pending_dx = 0.0
        self.pending_action = False

    def handle_event(self, event: pygame.event.Event, window_width: int):
        if event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION):
            if getattr(event, "touch", False):
                return

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.dragging = True
            self.pending_action = True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False
        elif event.type == pygame.MOUSEMOTION and self.dragging:
            self.pending_dx += event.rel[0]
        elif event.type == pygame.FINGERDOWN:
            self.pending_action = True
        elif event.type == pygame.FINGERMOTION:
            # Touch deltas are normalized to the window size
            self.pending_dx += event.dx * window_width
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
            self.pending_action = True

    def apply_keyboard(self, pressed, elapsed_ms: float, window_width: int):
        direction = 0
        if pressed[pygame.K_LEFT] or pressed[pygame.K_a]:
            direction -= 1
        if pressed[pygame.K_RIGHT] or pressed[pygame.K_d]:
            direction += 1
        if direction:
            step = PADDLE_KEY_SPEED * window_width * elapsed_ms / 1000.0
            self.pending_dx += direction * step

    def flush(self, session: GameSession):
        """Hands the session one resolved delta and at most one action."""
        if self.pending_dx:
            session.move_paddle(self.pending_dx)
            self.pending_dx = 0.0
        if self.pending_action:
            session.on_primary_action()
            self.pending_action = False


class BrickfallClient:
    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT,
                 config: Optional[SessionConfig] = None, seed: Optional[int] = None):
        pygame.init()
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption("Brickfall")

        self.session = GameSession(width, height, config=config, seed=seed)
        self.renderer = PygameRenderer(self.screen)
        self.clock = pygame.time.Clock()
        self.input = PointerInput()

    def run(self):
        """The main client execution loop."""
        print("Drag / arrow keys = Move | Click / Space = Launch | Esc = Quit")

        running = True
        while running:
            elapsed_ms = self.clock.tick(RENDER_FPS)
            window_width = self.screen.get_width()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    self._resize(event.w, event.h)
                else:
                    self.input.handle_event(event, window_width)

            self.input.apply_keyboard(pygame.key.get_pressed(), elapsed_ms, window_width)
            self.input.flush(self.session)

            self.session.update(elapsed_ms)
            self.renderer.draw(self.session.snapshot())
            pygame.display.flip()

        print(f"Final score: {self.session.stats.score} (level {self.session.stats.level})")
        pygame.quit()

    def _resize(self, width: int, height: int):
        old_w, old_h = self.session.engine.width, self.session.engine.height
        if width <= 0 or height <= 0:
            return
        self.screen = pygame.display.get_surface()
        self.renderer.surface = self.screen
        self.session.rescale(old_w, old_h, width, height)
        logger.info("Window resized %sx%s -> %sx%s", old_w, old_h, width, height)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Brickfall: break every block.")
    parser.add_argument("--width", type=int, default=SCREEN_WIDTH)
    parser.add_argument("--height", type=int, default=SCREEN_HEIGHT)
    parser.add_argument("--seed", type=int, default=None, help="Seed for layouts and launches")
    parser.add_argument("--max-level", type=int, default=None,
                        help="Win after clearing this level (default: endless)")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    client = BrickfallClient(args.width, args.height,
                             config=SessionConfig(max_level=args.max_level), seed=args.seed)
    client.run()


if __name__ == "__main__":
    main()
