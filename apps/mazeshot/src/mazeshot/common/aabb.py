from __future__ import annotations

from dataclasses import dataclass

from panda3d.core import LVector3f


@dataclass(frozen=True)
class AABB:
    minimum: LVector3f
    maximum: LVector3f

    @classmethod
    def from_center_size(cls, *, center: LVector3f, size: LVector3f) -> "AABB":
        half = LVector3f(size) * 0.5
        return cls(minimum=LVector3f(center - half), maximum=LVector3f(center + half))

    @classmethod
    def from_oriented_box(
        cls,
        *,
        center: LVector3f,
        axes: tuple[LVector3f, LVector3f, LVector3f],
        half_extents: LVector3f,
    ) -> "AABB":
        """World-space bounds of a box whose local x/y/z run along `axes`."""

        halves = (float(half_extents.x), float(half_extents.y), float(half_extents.z))
        ax, ay, az = (LVector3f(a) * h for a, h in zip(axes, halves))
        corners = [
            center + ax * sx + ay * sy + az * sz
            for sx in (-1.0, 1.0)
            for sy in (-1.0, 1.0)
            for sz in (-1.0, 1.0)
        ]
        return cls(
            minimum=LVector3f(
                min(float(c.x) for c in corners),
                min(float(c.y) for c in corners),
                min(float(c.z) for c in corners),
            ),
            maximum=LVector3f(
                max(float(c.x) for c in corners),
                max(float(c.y) for c in corners),
                max(float(c.z) for c in corners),
            ),
        )

    def center(self) -> LVector3f:
        return LVector3f((self.minimum + self.maximum) * 0.5)

    def expanded(self, margin: float) -> "AABB":
        m = float(margin)
        pad = LVector3f(m, m, m)
        return AABB(minimum=LVector3f(self.minimum - pad), maximum=LVector3f(self.maximum + pad))

    def closest_point(self, point: LVector3f) -> LVector3f:
        return LVector3f(
            min(max(float(point.x), float(self.minimum.x)), float(self.maximum.x)),
            min(max(float(point.y), float(self.minimum.y)), float(self.maximum.y)),
            min(max(float(point.z), float(self.minimum.z)), float(self.maximum.z)),
        )

    def intersects_sphere(self, center: LVector3f, radius: float) -> bool:
        # Touching counts as intersecting.
        delta = self.closest_point(center) - center
        r = float(radius)
        return float(delta.lengthSquared()) <= r * r
