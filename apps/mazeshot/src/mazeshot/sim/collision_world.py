from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from panda3d.core import LVector3f

from mazeshot.common.aabb import AABB


class CollidableKind(str, Enum):
    WALL = "wall"
    FLOOR = "floor"
    CEILING = "ceiling"
    ENEMY = "enemy"
    BULLET = "bullet"
    PLAYER_GUN = "player_gun"


# Compared by identity: two walls with identical boxes are still distinct objects.
@dataclass(eq=False)
class Collidable:
    kind: CollidableKind
    box: AABB
    center: LVector3f
    health: int | None = None
    owner: str | None = None
    damage: int = 0
    visible: bool = True


class CollisionWorld:
    """Flat list of collidables, queried by linear scan in insertion order."""

    def __init__(self, objects: Iterable[Collidable] | None = None) -> None:
        self._objects: list[Collidable] = list(objects or [])

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self):
        return iter(list(self._objects))

    def __contains__(self, obj: object) -> bool:
        return any(o is obj for o in self._objects)

    def add(self, obj: Collidable) -> Collidable:
        self._objects.append(obj)
        return obj

    def remove(self, obj: Collidable) -> bool:
        for i, o in enumerate(self._objects):
            if o is obj:
                del self._objects[i]
                return True
        return False

    def objects_of_kind(self, kind: CollidableKind) -> list[Collidable]:
        return [o for o in self._objects if o.kind == kind]

    def check_collision(
        self,
        position: LVector3f,
        radius: float,
        *,
        ignore_kinds: Iterable[CollidableKind] = (),
        ignore: Iterable[Collidable] = (),
    ) -> Collidable | None:
        """Return the first object whose box touches the sphere, or None."""

        skip_kinds = frozenset(ignore_kinds)
        skip_ids = {id(o) for o in ignore}
        for obj in self._objects:
            if obj.kind in skip_kinds or id(obj) in skip_ids:
                continue
            if obj.box.intersects_sphere(position, radius):
                return obj
        return None

    def touching_kind(self, position: LVector3f, radius: float, *, kind: CollidableKind) -> Collidable | None:
        for obj in self._objects:
            if obj.kind != kind:
                continue
            if obj.box.intersects_sphere(position, radius):
                return obj
        return None


__all__ = ["Collidable", "CollidableKind", "CollisionWorld"]
