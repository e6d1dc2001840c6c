from __future__ import annotations

import math
import random

from mazeshot.sim.arena import BlockSpec, build_static_world, make_block, spawn_enemies
from mazeshot.sim.collision_world import CollidableKind, CollisionWorld
from mazeshot.sim.tuning import SimTuning


def test_static_world_layout() -> None:
    world = build_static_world(tuning=SimTuning())

    walls = world.objects_of_kind(CollidableKind.WALL)
    floors = world.objects_of_kind(CollidableKind.FLOOR)
    ceilings = world.objects_of_kind(CollidableKind.CEILING)
    assert len(walls) == 12
    assert len(floors) == 1
    assert len(ceilings) == 1
    assert len(world) == 14

    floor = floors[0]
    assert not floor.visible
    assert math.isclose(floor.box.maximum.z, 0.25, abs_tol=1e-5)
    assert math.isclose(ceilings[0].box.minimum.z, 9.75, abs_tol=1e-5)


def test_static_world_objects_keep_insertion_order() -> None:
    kinds = [o.kind for o in build_static_world(tuning=SimTuning())]
    assert kinds[:8] == [CollidableKind.WALL] * 8
    assert kinds[8:10] == [CollidableKind.FLOOR, CollidableKind.CEILING]
    assert kinds[10:] == [CollidableKind.WALL] * 4


def test_seeded_spawn_is_deterministic_and_clear_of_walls() -> None:
    tuning = SimTuning()
    a = spawn_enemies(build_static_world(tuning=tuning), tuning=tuning, rng=random.Random(7))
    b_world = build_static_world(tuning=tuning)
    b = spawn_enemies(b_world, tuning=tuning, rng=random.Random(7))

    assert len(a) == tuning.enemy_count
    assert [(e.center.x, e.center.y) for e in a] == [(e.center.x, e.center.y) for e in b]

    for enemy in b:
        assert enemy.kind == CollidableKind.ENEMY
        assert enemy.health == 100
        assert math.isclose(enemy.center.z, 1.0, abs_tol=1e-6)
        assert abs(enemy.center.x) <= tuning.enemy_spawn_range
        assert abs(enemy.center.y) <= tuning.enemy_spawn_range
        for wall in b_world.objects_of_kind(CollidableKind.WALL):
            assert not wall.box.intersects_sphere(enemy.center, tuning.enemy_spawn_clearance)


def test_spawn_gives_up_when_there_is_no_room() -> None:
    tuning = SimTuning(enemy_spawn_attempts=3)
    world = CollisionWorld([make_block(BlockSpec(center=(0.0, 0.0, 1.0), size=(60.0, 60.0, 4.0)), margin=0.2)])

    assert spawn_enemies(world, tuning=tuning, rng=random.Random(1)) == []
    assert world.objects_of_kind(CollidableKind.ENEMY) == []
