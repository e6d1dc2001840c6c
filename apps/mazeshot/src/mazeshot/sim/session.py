from __future__ import annotations

import random
from dataclasses import dataclass

from panda3d.core import LVector3f

from mazeshot.common.error_log import ErrorLog
from mazeshot.sim import combat as _combat
from mazeshot.sim.arena import build_static_world, spawn_enemies
from mazeshot.sim.collision_world import Collidable, CollidableKind
from mazeshot.sim.input import IDLE, InputCommand
from mazeshot.sim.player import MoveOutcome, PlayerController
from mazeshot.sim.tuning import SimTuning
from mazeshot.sim.view import ViewBasis, view_basis

# Upper bound on simulated time per advance() so a long stall cannot trigger a tick storm.
MAX_FRAME_BACKLOG_S = 0.25


@dataclass(frozen=True)
class TickReport:
    tick: int
    fired: bool = False
    jumped: bool = False
    outcome: MoveOutcome = MoveOutcome.IDLE
    impacts: tuple[_combat.BulletImpact, ...] = ()
    expired: int = 0


@dataclass
class SessionStats:
    ticks: int = 0
    active_ticks: int = 0
    jumps: int = 0


class GameSession:
    """
    One arena run: the collision world, the player, live bullets and the score.

    Nothing moves while the session is inactive (the "pointer not captured" state), but
    bullet lifetimes keep counting down and the held gun keeps tracking the view.
    """

    def __init__(
        self,
        *,
        tuning: SimTuning | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
        error_log: ErrorLog | None = None,
        with_enemies: bool = True,
    ) -> None:
        self.tuning = tuning if tuning is not None else SimTuning()
        self.rng = rng if rng is not None else random.Random(seed)
        self.error_log = error_log if error_log is not None else ErrorLog()
        self.world = build_static_world(tuning=self.tuning)
        self.gun = self.world.add(_combat.make_gun(tuning=self.tuning))
        self.player = PlayerController(tuning=self.tuning, world=self.world)
        self.combat = _combat.CombatRuntimeState()
        self.enemies: list[Collidable] = []
        if with_enemies:
            self.enemies = spawn_enemies(self.world, tuning=self.tuning, rng=self.rng)
        self.active = False
        self.stats = SessionStats()
        self._accumulator = 0.0
        self._sync_gun()

    @property
    def score(self) -> int:
        return int(self.combat.score)

    @property
    def fixed_dt(self) -> float:
        return float(self.tuning.tick_dt)

    def set_active(self, active: bool) -> None:
        self.active = bool(active)

    def view(self) -> ViewBasis:
        st = self.player.state
        return view_basis(yaw_deg=st.yaw, pitch_deg=st.pitch)

    def enemies_alive(self) -> list[Collidable]:
        return self.world.objects_of_kind(CollidableKind.ENEMY)

    def shoot(self) -> _combat.Bullet:
        return _combat.fire(
            self.combat,
            self.world,
            origin=LVector3f(self.player.eye),
            direction=self.view().forward,
            tuning=self.tuning,
        )

    def step(self, cmd: InputCommand = IDLE) -> TickReport:
        fired = False
        jumped = False
        outcome = MoveOutcome.IDLE
        impacts: list[_combat.BulletImpact] = []
        if self.active:
            self.player.apply_input(cmd)
            if cmd.jump_pressed:
                jumped = self.player.jump()
            if cmd.fire_pressed:
                self.shoot()
                fired = True
            impacts = _combat.move_bullets(self.combat, self.world, tuning=self.tuning)
            outcome = self.player.tick()
            self.stats.active_ticks += 1
        expired = _combat.expire_bullets(self.combat, self.world, dt=self.fixed_dt, tuning=self.tuning)
        self._sync_gun()

        self.stats.ticks += 1
        if jumped:
            self.stats.jumps += 1
        return TickReport(
            tick=self.stats.ticks,
            fired=fired,
            jumped=jumped,
            outcome=outcome,
            impacts=tuple(impacts),
            expired=expired,
        )

    def advance(self, frame_dt: float, cmd: InputCommand = IDLE) -> int:
        """Run as many fixed ticks as the elapsed frame time covers. Edges fire on the first tick only."""

        self._accumulator = min(MAX_FRAME_BACKLOG_S, self._accumulator + max(0.0, float(frame_dt)))
        ran = 0
        pending = cmd
        while self._accumulator >= self.fixed_dt:
            self.safe_call("sim.step", lambda c=pending: self.step(c))
            self._accumulator -= self.fixed_dt
            ran += 1
            pending = InputCommand(move_forward=cmd.move_forward, move_right=cmd.move_right)
        return ran

    def safe_call(self, context: str, fn) -> None:
        try:
            fn()
        except Exception as exc:
            self.error_log.log_exception(context=context, exc=exc)

    def _sync_gun(self) -> None:
        _combat.update_gun(self.gun, eye=self.player.eye, basis=self.view(), tuning=self.tuning)

    def snapshot(self) -> dict:
        st = self.player.state
        return {
            "tick": int(self.stats.ticks),
            "active": bool(self.active),
            "score": int(self.combat.score),
            "kills": int(self.combat.kills),
            "shots_fired": int(self.combat.shots_fired),
            "bullets_live": len(self.combat.bullets),
            "enemies_alive": len(self.enemies_alive()),
            "player": {
                "eye": [round(float(st.eye.x), 4), round(float(st.eye.y), 4), round(float(st.eye.z), 4)],
                "vertical_velocity": round(float(st.vertical_velocity), 4),
                "on_ground": bool(st.on_ground),
                "yaw": round(float(st.yaw), 3),
                "pitch": round(float(st.pitch), 3),
            },
        }


__all__ = ["GameSession", "MAX_FRAME_BACKLOG_S", "SessionStats", "TickReport"]
