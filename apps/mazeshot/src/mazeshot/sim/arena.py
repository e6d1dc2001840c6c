from __future__ import annotations

import random
from dataclasses import dataclass

from panda3d.core import LVector3f

from mazeshot.common.aabb import AABB
from mazeshot.sim.collision_world import Collidable, CollidableKind, CollisionWorld
from mazeshot.sim.tuning import SimTuning


@dataclass(frozen=True)
class BlockSpec:
    center: tuple[float, float, float]
    size: tuple[float, float, float]
    kind: CollidableKind = CollidableKind.WALL
    visible: bool = True


# Interior maze: a "+" of long arms plus four shorter offset segments.
MAZE_WALLS: tuple[BlockSpec, ...] = (
    BlockSpec(center=(10.0, 0.0, 2.5), size=(10.0, 1.0, 5.0)),
    BlockSpec(center=(0.0, -10.0, 2.5), size=(1.0, 10.0, 5.0)),
    BlockSpec(center=(-10.0, 0.0, 2.5), size=(10.0, 1.0, 5.0)),
    BlockSpec(center=(0.0, 10.0, 2.5), size=(1.0, 10.0, 5.0)),
    BlockSpec(center=(5.0, -5.0, 2.5), size=(10.0, 0.5, 5.0)),
    BlockSpec(center=(-5.0, -5.0, 2.5), size=(10.0, 0.5, 5.0)),
    BlockSpec(center=(5.0, 5.0, 2.5), size=(10.0, 0.5, 5.0)),
    BlockSpec(center=(-5.0, 5.0, 2.5), size=(10.0, 0.5, 5.0)),
)

FLOOR = BlockSpec(center=(0.0, 0.0, 0.0), size=(50.0, 50.0, 0.1), kind=CollidableKind.FLOOR, visible=False)
CEILING = BlockSpec(center=(0.0, 0.0, 10.0), size=(50.0, 50.0, 0.1), kind=CollidableKind.CEILING, visible=False)

BOUNDARY_WALLS: tuple[BlockSpec, ...] = (
    BlockSpec(center=(0.0, 25.0, 6.25), size=(50.0, 1.0, 12.5)),
    BlockSpec(center=(0.0, -25.0, 6.25), size=(50.0, 1.0, 12.5)),
    BlockSpec(center=(-25.0, 0.0, 6.25), size=(1.0, 52.0, 12.5)),
    BlockSpec(center=(25.0, 0.0, 6.25), size=(1.0, 52.0, 12.5)),
)

# Enemy placement only has to avoid solid scenery and other enemies.
_SPAWN_IGNORE = (
    CollidableKind.FLOOR,
    CollidableKind.CEILING,
    CollidableKind.PLAYER_GUN,
    CollidableKind.BULLET,
)


def make_block(spec: BlockSpec, *, margin: float) -> Collidable:
    center = LVector3f(*spec.center)
    box = AABB.from_center_size(center=center, size=LVector3f(*spec.size)).expanded(margin)
    return Collidable(kind=spec.kind, box=box, center=center, visible=bool(spec.visible))


def build_static_world(*, tuning: SimTuning) -> CollisionWorld:
    """Maze walls, floor, ceiling and boundary walls, in that order."""

    world = CollisionWorld()
    margin = float(tuning.collision_margin)
    for spec in MAZE_WALLS:
        world.add(make_block(spec, margin=margin))
    world.add(make_block(FLOOR, margin=margin))
    world.add(make_block(CEILING, margin=margin))
    for spec in BOUNDARY_WALLS:
        world.add(make_block(spec, margin=margin))
    return world


def make_enemy(*, position: LVector3f, tuning: SimTuning) -> Collidable:
    size = LVector3f(float(tuning.enemy_width), float(tuning.enemy_depth), float(tuning.enemy_height))
    box = AABB.from_center_size(center=position, size=size).expanded(float(tuning.collision_margin))
    return Collidable(
        kind=CollidableKind.ENEMY,
        box=box,
        center=LVector3f(position),
        health=int(tuning.enemy_health),
    )


def spawn_enemies(world: CollisionWorld, *, tuning: SimTuning, rng: random.Random) -> list[Collidable]:
    """
    Scatter enemies over the arena floor.

    Each enemy gets a bounded number of random tries; one that never finds a free spot
    is skipped, so fewer than `enemy_count` enemies may spawn.
    """

    spread = float(tuning.enemy_spawn_range)
    center_z = float(tuning.enemy_height) * 0.5
    spawned: list[Collidable] = []
    for _ in range(max(0, int(tuning.enemy_count))):
        for _attempt in range(max(1, int(tuning.enemy_spawn_attempts))):
            pos = LVector3f(
                rng.random() * (2.0 * spread) - spread,
                rng.random() * (2.0 * spread) - spread,
                center_z,
            )
            blocked = world.check_collision(
                pos,
                float(tuning.enemy_spawn_clearance),
                ignore_kinds=_SPAWN_IGNORE,
            )
            if blocked is None:
                spawned.append(world.add(make_enemy(position=pos, tuning=tuning)))
                break
    return spawned


__all__ = [
    "BOUNDARY_WALLS",
    "BlockSpec",
    "CEILING",
    "FLOOR",
    "MAZE_WALLS",
    "build_static_world",
    "make_block",
    "make_enemy",
    "spawn_enemies",
]
