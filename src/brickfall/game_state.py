"""
game_state.py: The session state machine and the entry points used by the
frame driver, the input source and the resize notifier.
"""

import logging
import random
from typing import Optional

from .constants import SCREEN_HEIGHT, SCREEN_WIDTH, SHAKE_FRAMES
from .data_models import GameState, RenderSnapshot, SessionConfig, SessionStats
from .physics_engine import FrameReport, SimulationEngine

logger = logging.getLogger(__name__)


class GameSession:
    """
    One player's game: INIT -> PLAYING -> (LEVEL_COMPLETE | GAME_OVER) and back.

    Everything runs synchronously on the caller's thread. The driver calls
    `update` then reads `snapshot` once per frame; input and resize calls are
    expected between frames.
    """

    def __init__(self, width: float = SCREEN_WIDTH, height: float = SCREEN_HEIGHT,
                 config: Optional[SessionConfig] = None, seed: Optional[int] = None):
        self.config = config or SessionConfig()
        self.rng = random.Random(seed)
        self.engine = SimulationEngine(width=width, height=height, rng=self.rng)
        self.stats = SessionStats.from_config(self.config)
        self.state = GameState.INIT
        self.shake = 0.0
        self.engine.build_level(self.stats.level, self.config)

    # Convenience accessors for collaborators and tests
    @property
    def ball(self):
        return self.engine.ball

    @property
    def paddle(self):
        return self.engine.paddle

    @property
    def blocks(self):
        return self.engine.blocks

    @property
    def particles(self):
        return self.engine.particles

    # ----------------------------
    # Frame driver
    # ----------------------------

    def update(self, elapsed_ms: float) -> Optional[FrameReport]:
        """Advances the session by `elapsed_ms`. Returns the frame report while playing."""
        time_scale = self.engine.time_scale(elapsed_ms)

        self.engine.update_particles(time_scale)
        if self.shake > 0:
            self.shake = max(0.0, self.shake - time_scale)

        if self.state is not GameState.PLAYING:
            return None

        report = self.engine.step(self.stats, time_scale)
        if report.shake:
            self.shake = SHAKE_FRAMES

        if report.life_lost:
            self._lose_life()
        elif report.level_cleared:
            self._complete_level()
        return report

    def snapshot(self) -> RenderSnapshot:
        engine = self.engine
        return RenderSnapshot.capture(
            engine.width, engine.height, self.state, engine.paddle, engine.ball,
            engine.blocks, engine.particles, self.stats, self.shake)

    # ----------------------------
    # Input source
    # ----------------------------

    def move_paddle(self, delta_x: float):
        """Relative paddle movement. Ignored outside INIT and PLAYING."""
        if self.state not in (GameState.INIT, GameState.PLAYING):
            return
        self.engine.move_paddle(delta_x, ball_follows=self.state is GameState.INIT)

    def place_paddle(self, x: float):
        """Absolute paddle placement for pointer devices."""
        self.move_paddle(x - self.engine.paddle.x)

    def on_primary_action(self):
        """Tap / click / space: launch, advance or restart depending on the state."""
        if self.state is GameState.INIT:
            self._launch()
        elif self.state is GameState.LEVEL_COMPLETE:
            self._next_level()
        elif self.state in (GameState.GAME_OVER, GameState.VICTORY):
            self._restart()
        else:
            logger.debug("Primary action ignored in state %s", self.state.value)

    # ----------------------------
    # Resize notifier
    # ----------------------------

    def rescale(self, old_width: float, old_height: float, new_width: float, new_height: float):
        if old_width <= 0 or old_height <= 0:
            raise ValueError(f"Previous arena size must be positive, got {old_width}x{old_height}")
        # Entities are laid out in the engine's own size; scale from that.
        if (old_width, old_height) != (self.engine.width, self.engine.height):
            logger.warning("Rescale from %sx%s but arena is %sx%s; using the arena size",
                           old_width, old_height, self.engine.width, self.engine.height)
        self.engine.rescale(new_width, new_height)

    # ----------------------------
    # Transitions
    # ----------------------------

    def _set_state(self, state: GameState):
        logger.info("%s -> %s (score=%d lives=%d level=%d)", self.state.value, state.value,
                    self.stats.score, self.stats.lives, self.stats.level)
        self.state = state

    def _launch(self):
        self.engine.launch_ball(self.stats)
        self._set_state(GameState.PLAYING)

    def _lose_life(self):
        self.stats.lives -= 1
        self.stats.combo = 0
        if self.stats.lives > 0:
            self.engine.reset_ball()
            self._set_state(GameState.INIT)
        else:
            self._set_state(GameState.GAME_OVER)

    def _complete_level(self):
        max_level = self.config.max_level
        if max_level is not None and self.stats.level >= max_level:
            self._set_state(GameState.VICTORY)
        else:
            self._set_state(GameState.LEVEL_COMPLETE)

    def _next_level(self):
        self.stats.level += 1
        self.stats.combo = 0
        self.stats.ball_speed_ratio *= self.config.level_speed_multiplier
        self.engine.build_level(self.stats.level, self.config)
        self._set_state(GameState.INIT)

    def _restart(self):
        self.stats = SessionStats.from_config(self.config)
        self.shake = 0.0
        self.engine.build_level(self.stats.level, self.config)
        self._set_state(GameState.INIT)
