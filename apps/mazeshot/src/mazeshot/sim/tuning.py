from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SimTuning:
    # Movement is integrated per tick (not per second): one tick moves `move_speed` units.
    tick_rate_hz: int = 60
    move_speed: float = 0.15
    jump_speed: float = 0.30
    gravity: float = 0.02

    # Player collision is a sphere around the eye; the ground probe is a sphere at the feet.
    player_height: float = 1.8
    player_radius: float = 0.5
    ceiling_height: float = 10.0

    # Walls, floor, ceiling and enemies are inflated by this margin on every side.
    collision_margin: float = 0.2

    bullet_speed: float = 0.5
    bullet_radius: float = 0.1
    bullet_hit_radius: float = 0.2
    bullet_damage: int = 10
    bullet_lifetime_s: float = 3.0
    bullet_spawn_distance: float = 1.0

    enemy_count: int = 5
    enemy_health: int = 100
    enemy_width: float = 1.0
    enemy_depth: float = 1.0
    enemy_height: float = 2.0
    enemy_spawn_range: float = 20.0
    enemy_spawn_clearance: float = 1.5
    enemy_spawn_attempts: int = 50
    enemy_pushback: float = 0.1

    # View-space gun placement: right / up / forward.
    gun_offset_right: float = 0.3
    gun_offset_up: float = -0.4
    gun_offset_forward: float = 0.5
    gun_width: float = 0.2
    gun_height: float = 0.1
    gun_length: float = 0.5

    @property
    def tick_dt(self) -> float:
        return 1.0 / float(max(1, int(self.tick_rate_hz)))
