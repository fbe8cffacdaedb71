"""Brickfall: a brick-breaker physics engine and game state machine."""

from .data_models import (
    Ball, Block, GameState, Paddle, Particle, RenderSnapshot, SessionConfig, SessionStats
)
from .game_state import GameSession
from .physics_core import BlockContact, PhysicsCore, SimulationError, WallCollision
from .physics_engine import FrameReport, SimulationEngine

__all__ = [
    'Ball', 'Block', 'BlockContact', 'FrameReport', 'GameSession', 'GameState',
    'Paddle', 'Particle', 'PhysicsCore', 'RenderSnapshot', 'SessionConfig',
    'SessionStats', 'SimulationEngine', 'SimulationError', 'WallCollision',
]
