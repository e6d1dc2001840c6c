from __future__ import annotations

import math
from dataclasses import dataclass

from panda3d.core import LVector3f

PITCH_LIMIT_DEG = 89.0


@dataclass(frozen=True)
class ViewBasis:
    forward: LVector3f
    right: LVector3f
    up: LVector3f


def clamp_pitch(pitch_deg: float) -> float:
    return max(-PITCH_LIMIT_DEG, min(PITCH_LIMIT_DEG, float(pitch_deg)))


def wrap_yaw(yaw_deg: float) -> float:
    y = math.fmod(float(yaw_deg), 360.0)
    return y + 360.0 if y < 0.0 else y


def view_basis(*, yaw_deg: float, pitch_deg: float) -> ViewBasis:
    """Camera axes for a yaw/pitch view. Yaw 0 looks down +Y, positive yaw turns left."""

    h = math.radians(float(yaw_deg))
    p = math.radians(clamp_pitch(pitch_deg))
    sh, ch = math.sin(h), math.cos(h)
    sp, cp = math.sin(p), math.cos(p)
    forward = LVector3f(-sh * cp, ch * cp, sp)
    right = LVector3f(ch, sh, 0.0)
    up = LVector3f(sh * sp, -ch * sp, cp)
    return ViewBasis(forward=forward, right=right, up=up)


def horizontal_basis(*, yaw_deg: float) -> tuple[LVector3f, LVector3f]:
    """Forward/right flattened onto the ground plane (unit length)."""

    h = math.radians(float(yaw_deg))
    return (LVector3f(-math.sin(h), math.cos(h), 0.0), LVector3f(math.cos(h), math.sin(h), 0.0))
