from __future__ import annotations

import math

from panda3d.core import LVector3f

from mazeshot.sim.arena import FLOOR, BlockSpec, make_block, make_enemy
from mazeshot.sim.collision_world import CollisionWorld
from mazeshot.sim.input import InputCommand
from mazeshot.sim.player import MoveOutcome, PlayerController
from mazeshot.sim.tuning import SimTuning

# Wall in front of the spawn (+Y); with the margin its near face sits at y=1.3.
_FRONT_WALL = BlockSpec(center=(0.0, 2.0, 2.5), size=(10.0, 1.0, 5.0))
# Wall to the right of the spawn (+X); near face at x=1.3.
_RIGHT_WALL = BlockSpec(center=(2.0, 0.0, 2.5), size=(1.0, 10.0, 5.0))


def _controller(*specs: BlockSpec, spawn: LVector3f | None = None) -> PlayerController:
    tuning = SimTuning()
    world = CollisionWorld([make_block(s, margin=tuning.collision_margin) for s in specs])
    return PlayerController(tuning=tuning, world=world, spawn=spawn)


def test_spawn_defaults_to_eye_height_at_origin() -> None:
    pc = _controller()
    assert math.isclose(pc.eye.x, 0.0, abs_tol=1e-6)
    assert math.isclose(pc.eye.z, 1.8, abs_tol=1e-5)
    assert pc.state.on_ground


def test_standing_on_floor_stays_put() -> None:
    pc = _controller(FLOOR)
    for _ in range(30):
        assert pc.tick() == MoveOutcome.IDLE
    assert pc.state.on_ground
    assert pc.state.vertical_velocity == 0.0
    assert math.isclose(pc.eye.z, 1.8, abs_tol=1e-5)


def test_jump_only_from_ground_and_lands_again() -> None:
    pc = _controller(FLOOR)
    assert pc.jump()
    assert math.isclose(pc.state.vertical_velocity, 0.30, abs_tol=1e-9)
    assert not pc.jump()

    peak = pc.eye.z
    for _ in range(10):
        pc.tick()
        peak = max(peak, pc.eye.z)
    assert peak > 3.0

    for _ in range(60):
        pc.tick()
    # The ground probe catches the player while the feet are within reach of the floor slab.
    assert pc.state.on_ground
    assert pc.state.vertical_velocity == 0.0
    assert 1.8 - 1e-5 <= pc.eye.z <= 2.55 + 1e-5


def test_height_is_clamped_to_floor_and_ceiling() -> None:
    pc = _controller()
    pc.state.eye = LVector3f(0.0, 0.0, 0.5)
    pc.state.vertical_velocity = -1.0
    pc.state.on_ground = False
    pc.tick()
    assert math.isclose(pc.eye.z, 1.8, abs_tol=1e-5)
    assert pc.state.vertical_velocity == 0.0
    assert pc.state.on_ground

    pc.state.eye = LVector3f(0.0, 0.0, 9.9)
    pc.state.vertical_velocity = 1.0
    pc.tick()
    assert math.isclose(pc.eye.z, 10.0, abs_tol=1e-5)
    assert pc.state.vertical_velocity == 0.0


def test_wall_stops_forward_movement() -> None:
    pc = _controller(_FRONT_WALL)
    pc.apply_input(InputCommand(move_forward=1))
    outcomes = [pc.tick() for _ in range(20)]

    assert outcomes[:5] == [MoveOutcome.MOVED] * 5
    assert MoveOutcome.MOVED not in outcomes[5:]
    assert math.isclose(pc.eye.y, 0.75, abs_tol=1e-4)
    assert pc.eye.y + pc.tuning.player_radius < 1.3


def test_diagonal_into_front_wall_slides_along_x() -> None:
    pc = _controller(_FRONT_WALL, spawn=LVector3f(0.0, 0.75, 1.8))
    pc.apply_input(InputCommand(move_forward=1, move_right=1))

    assert pc.tick() == MoveOutcome.SLID_X
    assert math.isclose(pc.eye.x, 0.15 / math.sqrt(2.0), abs_tol=1e-4)
    assert math.isclose(pc.eye.y, 0.75, abs_tol=1e-5)


def test_diagonal_into_side_wall_slides_along_y() -> None:
    pc = _controller(_RIGHT_WALL, spawn=LVector3f(0.75, 0.0, 1.8))
    pc.apply_input(InputCommand(move_forward=1, move_right=1))

    assert pc.tick() == MoveOutcome.SLID_Y
    assert math.isclose(pc.eye.x, 0.75, abs_tol=1e-5)
    assert math.isclose(pc.eye.y, 0.15 / math.sqrt(2.0), abs_tol=1e-4)


def test_corner_blocks_both_axes() -> None:
    pc = _controller(_FRONT_WALL, _RIGHT_WALL, spawn=LVector3f(0.75, 0.75, 1.8))
    pc.apply_input(InputCommand(move_forward=1, move_right=1))

    assert pc.tick() == MoveOutcome.BLOCKED
    assert math.isclose(pc.eye.x, 0.75, abs_tol=1e-5)
    assert math.isclose(pc.eye.y, 0.75, abs_tol=1e-5)


def test_walking_into_enemy_pushes_player_back() -> None:
    tuning = SimTuning()
    world = CollisionWorld([make_enemy(position=LVector3f(0.0, 1.5, 1.0), tuning=tuning)])
    pc = PlayerController(tuning=tuning, world=world, spawn=LVector3f(0.0, 0.2, 1.8))
    pc.apply_input(InputCommand(move_forward=1))

    assert pc.tick() == MoveOutcome.PUSHED
    assert pc.eye.y < 0.2
    assert math.isclose(pc.eye.x, 0.0, abs_tol=1e-6)


def test_look_input_wraps_yaw_and_clamps_pitch() -> None:
    pc = _controller()
    pc.apply_input(InputCommand(look_dyaw=-30.0, look_dpitch=120.0))
    assert math.isclose(pc.state.yaw, 330.0, abs_tol=1e-9)
    assert pc.state.pitch == 89.0

    pc.apply_input(InputCommand(look_dpitch=-500.0))
    assert pc.state.pitch == -89.0


def test_turned_player_walks_along_view_direction() -> None:
    pc = _controller()
    # Positive yaw turns left, so +90 makes "forward" point down -X.
    pc.apply_input(InputCommand(move_forward=1, look_dyaw=90.0))
    pc.tick()
    assert math.isclose(pc.eye.x, -0.15, abs_tol=1e-5)
    assert math.isclose(pc.eye.y, 0.0, abs_tol=1e-5)
