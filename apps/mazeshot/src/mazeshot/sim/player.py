from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from panda3d.core import LVector3f

from mazeshot.sim.collision_world import CollidableKind, CollisionWorld
from mazeshot.sim.input import InputCommand
from mazeshot.sim.tuning import SimTuning
from mazeshot.sim.view import clamp_pitch, horizontal_basis, wrap_yaw

# Horizontal movement passes through the held weapon and the floor/ceiling slabs.
_MOVE_IGNORE = (CollidableKind.PLAYER_GUN, CollidableKind.FLOOR, CollidableKind.CEILING)


class MoveOutcome(str, Enum):
    IDLE = "idle"
    MOVED = "moved"
    PUSHED = "pushed"
    SLID_X = "slid_x"
    SLID_Y = "slid_y"
    BLOCKED = "blocked"


@dataclass
class PlayerState:
    eye: LVector3f
    vertical_velocity: float = 0.0
    on_ground: bool = True
    yaw: float = 0.0
    pitch: float = 0.0
    move_forward: bool = False
    move_backward: bool = False
    move_left: bool = False
    move_right: bool = False
    last_outcome: MoveOutcome = field(default=MoveOutcome.IDLE)


class PlayerController:
    """Kinematic first-person mover: gravity, floor probe, wall sliding, enemy push-back."""

    def __init__(self, *, tuning: SimTuning, world: CollisionWorld, spawn: LVector3f | None = None) -> None:
        self.tuning = tuning
        self.world = world
        start = LVector3f(spawn) if spawn is not None else LVector3f(0.0, 0.0, float(tuning.player_height))
        self.state = PlayerState(eye=start)

    @property
    def eye(self) -> LVector3f:
        return self.state.eye

    def apply_input(self, cmd: InputCommand) -> None:
        st = self.state
        st.move_forward = int(cmd.move_forward) > 0
        st.move_backward = int(cmd.move_forward) < 0
        st.move_right = int(cmd.move_right) > 0
        st.move_left = int(cmd.move_right) < 0
        st.yaw = wrap_yaw(st.yaw + float(cmd.look_dyaw))
        st.pitch = clamp_pitch(st.pitch + float(cmd.look_dpitch))

    def jump(self) -> bool:
        st = self.state
        if not st.on_ground:
            return False
        st.vertical_velocity = float(self.tuning.jump_speed)
        st.on_ground = False
        return True

    def tick(self) -> MoveOutcome:
        self._apply_gravity()
        self._probe_ground()
        self.state.eye.z += float(self.state.vertical_velocity)
        outcome = self._move_horizontal()
        self._clamp_height()
        self.state.last_outcome = outcome
        return outcome

    def _apply_gravity(self) -> None:
        self.state.vertical_velocity -= float(self.tuning.gravity)

    def _probe_ground(self) -> None:
        st = self.state
        feet = LVector3f(st.eye.x, st.eye.y, st.eye.z - float(self.tuning.player_height))
        floor = self.world.touching_kind(feet, float(self.tuning.player_radius), kind=CollidableKind.FLOOR)
        st.on_ground = floor is not None
        if st.on_ground and st.vertical_velocity < 0.0:
            st.vertical_velocity = 0.0

    def wish_direction(self) -> LVector3f:
        st = self.state
        move_x = int(st.move_right) - int(st.move_left)
        move_y = int(st.move_forward) - int(st.move_backward)
        if move_x == 0 and move_y == 0:
            return LVector3f(0.0, 0.0, 0.0)
        forward, right = horizontal_basis(yaw_deg=st.yaw)
        wish = forward * float(move_y) + right * float(move_x)
        if wish.lengthSquared() > 1e-12:
            wish.normalize()
        return wish

    def _blocked(self, pos: LVector3f):
        return self.world.check_collision(pos, float(self.tuning.player_radius), ignore_kinds=_MOVE_IGNORE)

    def _move_horizontal(self) -> MoveOutcome:
        wish = self.wish_direction()
        if wish.lengthSquared() <= 1e-12:
            return MoveOutcome.IDLE

        st = self.state
        speed = float(self.tuning.move_speed)
        candidate = LVector3f(st.eye + wish * speed)
        hit = self._blocked(candidate)
        if hit is None:
            st.eye = candidate
            return MoveOutcome.MOVED

        if hit.kind == CollidableKind.ENEMY:
            away = LVector3f(st.eye - hit.center)
            if away.lengthSquared() > 1e-12:
                away.normalize()
            st.eye = LVector3f(st.eye + away * float(self.tuning.enemy_pushback))
            return MoveOutcome.PUSHED

        # Slide: try each horizontal axis on its own, x first.
        x_only = LVector3f(st.eye + LVector3f(wish.x, 0.0, 0.0) * speed)
        if self._blocked(x_only) is None:
            st.eye = x_only
            return MoveOutcome.SLID_X
        y_only = LVector3f(st.eye + LVector3f(0.0, wish.y, 0.0) * speed)
        if self._blocked(y_only) is None:
            st.eye = y_only
            return MoveOutcome.SLID_Y
        return MoveOutcome.BLOCKED

    def _clamp_height(self) -> None:
        st = self.state
        floor_z = float(self.tuning.player_height)
        ceiling_z = float(self.tuning.ceiling_height)
        if st.eye.z < floor_z:
            st.eye.z = floor_z
            st.vertical_velocity = 0.0
            st.on_ground = True
        elif st.eye.z > ceiling_z:
            st.eye.z = ceiling_z
            st.vertical_velocity = 0.0


__all__ = ["MoveOutcome", "PlayerController", "PlayerState"]
