from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InputCommand:
    """Input for one simulation tick.

    Move axes are held-key state (-1, 0, 1); `*_pressed` fields are edges and fire once.
    Look deltas are in degrees.
    """

    move_forward: int = 0
    move_right: int = 0
    jump_pressed: bool = False
    fire_pressed: bool = False
    look_dyaw: float = 0.0
    look_dpitch: float = 0.0

    @classmethod
    def from_keys(
        cls,
        *,
        forward: bool = False,
        backward: bool = False,
        left: bool = False,
        right: bool = False,
        jump: bool = False,
        fire: bool = False,
    ) -> "InputCommand":
        return cls(
            move_forward=int(bool(forward)) - int(bool(backward)),
            move_right=int(bool(right)) - int(bool(left)),
            jump_pressed=bool(jump),
            fire_pressed=bool(fire),
        )


IDLE = InputCommand()
