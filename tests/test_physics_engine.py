import copy
import math
import random

import pytest

from brickfall.constants import REINFORCED_BLOCK
from brickfall.data_models import Ball, Block, SessionConfig, SessionStats
from brickfall.physics_engine import SimulationEngine, combo_points


@pytest.fixture
def engine():
    engine = SimulationEngine(width=800, height=600, rng=random.Random(7))
    engine.build_level(1, SessionConfig())
    return engine


@pytest.fixture
def stats():
    return SessionStats()


def park_ball_in(engine, block):
    x, y = block.center
    engine.ball.x, engine.ball.y = x, y
    engine.ball.stop()


# ----------------------------
# Level layout
# ----------------------------

def test_level_one_layout(engine):
    assert len(engine.blocks) == 40
    assert all(b.active and not b.reinforced for b in engine.blocks)

    first, second = engine.blocks[0], engine.blocks[1]
    assert (first.x, first.y) == (0, 80)
    assert first.width == 100
    assert first.height == pytest.approx(18)
    # Row-major order
    assert second.y == first.y
    assert second.x == 100
    assert engine.blocks[8].y == pytest.approx(98)


def test_paddle_and_ball_start_position(engine):
    assert engine.paddle.x == 400
    assert engine.paddle.y == pytest.approx(540)
    assert engine.paddle.width == pytest.approx(160)
    assert engine.ball.radius == pytest.approx(12)
    assert engine.ball.x == 400
    assert engine.ball.y == pytest.approx(540 - 12 - 2)
    assert (engine.ball.vx, engine.ball.vy, engine.ball.speed) == (0, 0, 0)


@pytest.mark.parametrize("chance,expected", [(0.0, 0), (1.0, 40)])
def test_reinforced_blocks_from_level_two(engine, chance, expected):
    engine.build_level(2, SessionConfig(reinforced_chance=chance))
    assert sum(b.reinforced for b in engine.blocks) == expected


def test_level_one_is_never_reinforced(engine):
    engine.build_level(1, SessionConfig(reinforced_chance=1.0))
    assert not any(b.reinforced for b in engine.blocks)


def test_rebuild_replaces_blocks_and_particles(engine):
    engine.blocks[0].hit()
    engine.spawn_particles(engine.blocks[0])
    engine.build_level(1, SessionConfig())
    assert all(b.active for b in engine.blocks)
    assert engine.particles == []


def test_zero_sized_arena_is_rejected():
    with pytest.raises(ValueError):
        SimulationEngine(width=0, height=600)


# ----------------------------
# Launch and paddle movement
# ----------------------------

def test_launch_uses_level_speed_near_vertical(engine, stats):
    engine.launch_ball(stats)
    ball = engine.ball
    assert ball.speed == pytest.approx(3.0)
    assert math.hypot(ball.vx, ball.vy) == pytest.approx(3.0)
    assert ball.vy < 0
    assert abs(math.atan2(ball.vx, -ball.vy)) <= 0.5 + 1e-9


def test_move_paddle_is_clamped_to_arena(engine):
    assert engine.move_paddle(-1000) == pytest.approx(80)
    assert engine.move_paddle(5000) == pytest.approx(720)
    assert engine.paddle.x == pytest.approx(720)


def test_ball_follows_paddle_only_when_asked(engine):
    engine.move_paddle(50)
    assert engine.ball.x == 400
    engine.move_paddle(50, ball_follows=True)
    assert engine.ball.x == 500


# ----------------------------
# Simulation step
# ----------------------------

def test_combo_points():
    normal = Block(0, 0, 10, 5)
    assert [combo_points(normal, c) for c in (1, 2, 3)] == [100, 150, 200]
    assert combo_points(Block(0, 0, 10, 5, block_type=REINFORCED_BLOCK), 1) == 250
    assert combo_points(Block(0, 0, 10, 5, block_type=REINFORCED_BLOCK), 2) == 300


def test_three_consecutive_destroys_score_450(engine, stats):
    engine.blocks = [Block(100, 100, 50, 20), Block(300, 100, 50, 20), Block(500, 100, 50, 20)]
    reports = []
    for block in list(engine.blocks):
        park_ball_in(engine, block)
        reports.append(engine.step(stats, 1.0))

    assert [r.points for r in reports] == [100, 150, 200]
    assert stats.score == 450
    assert stats.combo == 3
    assert [r.level_cleared for r in reports] == [False, False, True]


def test_only_first_colliding_block_is_resolved(engine, stats):
    first = Block(100, 100, 50, 20)
    second = Block(100, 115, 50, 20)
    engine.blocks = [first, second]
    engine.ball.x, engine.ball.y = 125, 117
    engine.ball.stop()

    report = engine.step(stats, 1.0)
    assert report.destroyed is first
    assert not first.active
    assert second.active
    assert stats.score == 100
    assert not report.level_cleared


def test_destroy_spawns_particle_burst(engine, stats):
    block = Block(100, 100, 50, 20)
    engine.blocks = [block]
    park_ball_in(engine, block)
    engine.step(stats, 1.0)

    assert len(engine.particles) == 10
    assert all(p.color == block.color for p in engine.particles)
    assert all((p.x, p.y) == block.center for p in engine.particles)


def test_non_destroying_hit_resets_combo(engine, stats):
    block = Block(100, 100, 50, 20, block_type=REINFORCED_BLOCK)
    engine.blocks = [block]
    stats.combo = 2
    park_ball_in(engine, block)

    report = engine.step(stats, 1.0)
    assert report.shake
    assert report.points == 0
    assert stats.combo == 0
    assert block.health == 1
    assert block.active
    assert engine.particles == []


def test_inactive_blocks_are_skipped(engine, stats):
    block = Block(100, 100, 50, 20)
    block.hit()
    engine.blocks = [block]
    park_ball_in(engine, block)

    report = engine.step(stats, 1.0)
    assert report.destroyed is None
    assert stats.score == 0


def test_paddle_bounce_resets_combo(engine, stats):
    engine.blocks = []
    stats.combo = 4
    ball = engine.ball
    ball.x, ball.y = 400, 525
    ball.vx, ball.vy, ball.speed = 0, 5, 5

    report = engine.step(stats, 1.0)
    assert report.shake
    assert stats.combo == 0
    assert ball.vx == 0
    assert ball.vy == -5


def test_falling_out_skips_remaining_checks(engine, stats):
    block = Block(100, 650, 50, 20)
    engine.blocks = [block]
    ball = engine.ball
    ball.x, ball.y = 125, 655
    ball.vx, ball.vy, ball.speed = 0, 5, 5

    report = engine.step(stats, 1.0)
    assert report.life_lost
    assert block.active
    assert stats.score == 0


def test_speed_is_conserved_over_many_frames(engine, stats):
    engine.launch_ball(stats)
    for _ in range(500):
        report = engine.step(stats, 1.0)
        if report.life_lost or not engine.active_blocks():
            break
        assert math.hypot(engine.ball.vx, engine.ball.vy) == pytest.approx(engine.ball.speed)


# ----------------------------
# Particles
# ----------------------------

def test_particles_age_and_expire(engine):
    engine.spawn_particles(Block(100, 100, 50, 20))
    engine.update_particles(1.0)
    assert len(engine.particles) == 10
    assert all(p.life == 29 for p in engine.particles)

    engine.update_particles(29.0)
    assert engine.particles == []


# ----------------------------
# Rescale
# ----------------------------

def test_rescale_to_same_size_is_a_no_op(engine, stats):
    engine.launch_ball(stats)
    engine.spawn_particles(engine.blocks[3])
    before = copy.deepcopy((engine.paddle, engine.ball, engine.blocks, engine.particles))

    engine.rescale(800, 600)
    assert (engine.paddle, engine.ball, engine.blocks, engine.particles) == before


def test_rescale_applies_per_axis_factors(engine, stats):
    engine.launch_ball(stats)
    vx, vy = engine.ball.vx, engine.ball.vy
    block = engine.blocks[9]
    bx, by, bw, bh = block.x, block.y, block.width, block.height

    engine.rescale(1600, 300)

    assert (engine.width, engine.height) == (1600, 300)
    assert engine.paddle.x == 800
    assert engine.paddle.width == pytest.approx(320)
    assert engine.paddle.y == pytest.approx(270)
    assert engine.ball.radius == pytest.approx(24)
    assert engine.ball.vx == pytest.approx(vx * 2)
    assert engine.ball.vy == pytest.approx(vy * 0.5)
    assert engine.ball.speed == pytest.approx(math.hypot(engine.ball.vx, engine.ball.vy))
    assert (block.x, block.y) == pytest.approx((bx * 2, by * 0.5))
    assert (block.width, block.height) == pytest.approx((bw * 2, bh * 0.5))


def test_rescale_rejects_empty_arena(engine):
    with pytest.raises(ValueError):
        engine.rescale(0, 600)
