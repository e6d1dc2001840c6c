from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from mazeshot.common.error_log import ErrorLog
from mazeshot.sim.input import IDLE, InputCommand
from mazeshot.sim.session import GameSession
from mazeshot.sim.tuning import SimTuning

SCRIPT_FORMAT_VERSION = 1


class ScriptFormatError(ValueError):
    pass


@dataclass(frozen=True)
class RunSummary:
    seed: int | None
    ticks: int
    score: int
    kills: int
    shots_fired: int
    enemies_spawned: int
    enemies_left: int
    errors: list[str] = field(default_factory=list)
    final_state: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def _as_int_axis(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(-1, min(1, int(value)))


def _as_float(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def frame_from_payload(raw: dict) -> InputCommand:
    return InputCommand(
        move_forward=_as_int_axis(raw.get("mf", 0)),
        move_right=_as_int_axis(raw.get("mr", 0)),
        jump_pressed=bool(raw.get("jp", False)),
        fire_pressed=bool(raw.get("fp", False)),
        look_dyaw=_as_float(raw.get("dy", 0.0)),
        look_dpitch=_as_float(raw.get("dp", 0.0)),
    )


def frame_to_payload(cmd: InputCommand) -> dict:
    return {
        "mf": int(cmd.move_forward),
        "mr": int(cmd.move_right),
        "jp": bool(cmd.jump_pressed),
        "fp": bool(cmd.fire_pressed),
        "dy": float(cmd.look_dyaw),
        "dp": float(cmd.look_dpitch),
    }


def load_script(path: Path) -> list[InputCommand]:
    """Read an input script: `{"format_version": 1, "frames": [{...}, ...]}`, one frame per tick."""

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ScriptFormatError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(payload, dict):
        raise ScriptFormatError(f"{path}: expected a JSON object")
    version = payload.get("format_version")
    if version != SCRIPT_FORMAT_VERSION:
        raise ScriptFormatError(f"{path}: unsupported format_version {version!r}")
    frames = payload.get("frames")
    if not isinstance(frames, list):
        raise ScriptFormatError(f"{path}: 'frames' must be a list")
    return [frame_from_payload(f) if isinstance(f, dict) else IDLE for f in frames]


def save_script(path: Path, frames: list[InputCommand]) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "format_version": SCRIPT_FORMAT_VERSION,
        "frames": [frame_to_payload(f) for f in frames],
    }
    out.write_text(json.dumps(payload, ensure_ascii=True, separators=(",", ":")) + "\n", encoding="utf-8")
    return out


def patrol_frames(ticks: int) -> Iterator[InputCommand]:
    """Built-in input: walk forward while sweeping the view, firing and hopping periodically."""

    for t in range(max(0, int(ticks))):
        phase = t % 240
        yield InputCommand(
            move_forward=1 if phase < 150 else -1 if phase < 180 else 0,
            move_right=1 if 180 <= phase < 210 else 0,
            jump_pressed=(t % 90) == 45,
            fire_pressed=(t % 8) == 0,
            look_dyaw=1.5,
            look_dpitch=0.0,
        )


def run_headless(
    *,
    ticks: int | None = None,
    seed: int | None = None,
    frames: list[InputCommand] | None = None,
    tuning: SimTuning | None = None,
    error_log: ErrorLog | None = None,
) -> RunSummary:
    """Run one arena session without a window and report how it went."""

    log = error_log if error_log is not None else ErrorLog()
    session = GameSession(tuning=tuning, seed=seed, error_log=log)
    session.set_active(True)

    if frames is not None:
        total = int(ticks) if ticks is not None else len(frames)
        source: Iterator[InputCommand] = iter(frames)
    else:
        total = int(ticks) if ticks is not None else 600
        source = patrol_frames(total)

    for _ in range(max(0, total)):
        cmd = next(source, IDLE)
        session.safe_call("sim.step", lambda c=cmd: session.step(c))

    return RunSummary(
        seed=seed,
        ticks=int(session.stats.ticks),
        score=int(session.score),
        kills=int(session.combat.kills),
        shots_fired=int(session.combat.shots_fired),
        enemies_spawned=len(session.enemies),
        enemies_left=len(session.enemies_alive()),
        errors=[it.summary_line() for it in log.items()],
        final_state=session.snapshot(),
    )


__all__ = [
    "RunSummary",
    "SCRIPT_FORMAT_VERSION",
    "ScriptFormatError",
    "frame_from_payload",
    "frame_to_payload",
    "load_script",
    "patrol_frames",
    "run_headless",
    "save_script",
]
