from __future__ import annotations

from dataclasses import dataclass, field

from panda3d.core import LVector3f

from mazeshot.common.aabb import AABB
from mazeshot.sim.collision_world import Collidable, CollidableKind, CollisionWorld
from mazeshot.sim.tuning import SimTuning
from mazeshot.sim.view import ViewBasis

PLAYER_OWNER = "player"


@dataclass(eq=False)
class Bullet:
    body: Collidable
    velocity: LVector3f
    age_s: float = 0.0

    @property
    def position(self) -> LVector3f:
        return self.body.center


@dataclass
class CombatRuntimeState:
    bullets: list[Bullet] = field(default_factory=list)
    score: int = 0
    kills: int = 0
    shots_fired: int = 0
    hits: int = 0


@dataclass(frozen=True)
class BulletImpact:
    target_kind: CollidableKind
    position: LVector3f
    damage_dealt: int
    killed: bool


def _bullet_box(center: LVector3f, *, radius: float) -> AABB:
    r = float(radius)
    return AABB.from_center_size(center=center, size=LVector3f(2.0 * r, 2.0 * r, 2.0 * r))


def make_gun(*, tuning: SimTuning, owner: str = PLAYER_OWNER) -> Collidable:
    origin = LVector3f(0.0, 0.0, 0.0)
    return Collidable(
        kind=CollidableKind.PLAYER_GUN,
        box=AABB(minimum=LVector3f(origin), maximum=LVector3f(origin)),
        center=origin,
        owner=str(owner),
    )


def update_gun(gun: Collidable, *, eye: LVector3f, basis: ViewBasis, tuning: SimTuning) -> None:
    """Keep the held weapon at its view-space offset (lower right, slightly ahead)."""

    center = LVector3f(
        eye
        + basis.right * float(tuning.gun_offset_right)
        + basis.up * float(tuning.gun_offset_up)
        + basis.forward * float(tuning.gun_offset_forward)
    )
    half = LVector3f(float(tuning.gun_width), float(tuning.gun_length), float(tuning.gun_height)) * 0.5
    gun.center = center
    gun.box = AABB.from_oriented_box(
        center=center,
        axes=(basis.right, basis.forward, basis.up),
        half_extents=half,
    )


def fire(
    st: CombatRuntimeState,
    world: CollisionWorld,
    *,
    origin: LVector3f,
    direction: LVector3f,
    tuning: SimTuning,
    owner: str = PLAYER_OWNER,
) -> Bullet:
    aim = LVector3f(direction)
    if aim.lengthSquared() > 1e-12:
        aim.normalize()
    start = LVector3f(origin + aim * float(tuning.bullet_spawn_distance))
    body = Collidable(
        kind=CollidableKind.BULLET,
        box=_bullet_box(start, radius=float(tuning.bullet_radius)),
        center=start,
        owner=str(owner),
        damage=int(tuning.bullet_damage),
    )
    bullet = Bullet(body=body, velocity=LVector3f(aim * float(tuning.bullet_speed)))
    world.add(body)
    st.bullets.append(bullet)
    st.shots_fired += 1
    return bullet


def remove_bullet(st: CombatRuntimeState, world: CollisionWorld, bullet: Bullet) -> None:
    for i, b in enumerate(st.bullets):
        if b is bullet:
            del st.bullets[i]
            break
    world.remove(bullet.body)


def _resolve_hit(st: CombatRuntimeState, world: CollisionWorld, *, bullet: Bullet, target: Collidable) -> BulletImpact:
    if target.kind != CollidableKind.ENEMY or bullet.body.owner != PLAYER_OWNER:
        return BulletImpact(
            target_kind=target.kind,
            position=LVector3f(bullet.position),
            damage_dealt=0,
            killed=False,
        )
    damage = int(bullet.body.damage)
    target.health = int(target.health or 0) - damage
    st.hits += 1
    killed = target.health <= 0
    if killed:
        world.remove(target)
        st.kills += 1
        st.score += 1
    return BulletImpact(
        target_kind=target.kind,
        position=LVector3f(bullet.position),
        damage_dealt=damage,
        killed=killed,
    )


def move_bullets(st: CombatRuntimeState, world: CollisionWorld, *, tuning: SimTuning) -> list[BulletImpact]:
    """
    Advance every bullet one tick and resolve what it hits.

    Newest bullets are processed first. A bullet disappears on any contact; only the
    player's bullets damage enemies. A bullet never collides with other bullets or with
    the gun of whoever fired it.
    """

    impacts: list[BulletImpact] = []
    for bullet in reversed(list(st.bullets)):
        new_pos = LVector3f(bullet.position + bullet.velocity)
        bullet.body.center = new_pos
        bullet.body.box = _bullet_box(new_pos, radius=float(tuning.bullet_radius))

        own_guns = [g for g in world.objects_of_kind(CollidableKind.PLAYER_GUN) if g.owner == bullet.body.owner]
        target = world.check_collision(
            new_pos,
            float(tuning.bullet_hit_radius),
            ignore_kinds=(CollidableKind.BULLET,),
            ignore=own_guns,
        )
        if target is None:
            continue
        impacts.append(_resolve_hit(st, world, bullet=bullet, target=target))
        remove_bullet(st, world, bullet)
    return impacts


def expire_bullets(st: CombatRuntimeState, world: CollisionWorld, *, dt: float, tuning: SimTuning) -> int:
    lifetime = float(tuning.bullet_lifetime_s)
    expired = 0
    for bullet in list(st.bullets):
        bullet.age_s += max(0.0, float(dt))
        if bullet.age_s >= lifetime:
            remove_bullet(st, world, bullet)
            expired += 1
    return expired


def status_fragment(st: CombatRuntimeState) -> str:
    return f"score: {int(st.score)} kills: {int(st.kills)} shots: {int(st.shots_fired)} live: {len(st.bullets)}"


__all__ = [
    "Bullet",
    "BulletImpact",
    "CombatRuntimeState",
    "PLAYER_OWNER",
    "expire_bullets",
    "fire",
    "make_gun",
    "move_bullets",
    "remove_bullet",
    "status_fragment",
    "update_gun",
]
