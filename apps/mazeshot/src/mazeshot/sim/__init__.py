"""Headless arena simulation: collision world, player mover, bullets and enemies."""

from mazeshot.sim.collision_world import Collidable, CollidableKind, CollisionWorld
from mazeshot.sim.input import InputCommand
from mazeshot.sim.player import MoveOutcome, PlayerController, PlayerState
from mazeshot.sim.session import GameSession, TickReport
from mazeshot.sim.tuning import SimTuning

__all__ = [
    "Collidable",
    "CollidableKind",
    "CollisionWorld",
    "GameSession",
    "InputCommand",
    "MoveOutcome",
    "PlayerController",
    "PlayerState",
    "SimTuning",
    "TickReport",
]
