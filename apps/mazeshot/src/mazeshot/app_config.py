from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from mazeshot.paths import app_root
from mazeshot.scores.store import scores_path

PORT_ENV = "PORT"
STATIC_DIR_ENV = "MAZESHOT_STATIC_DIR"
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class RunConfig:
    # Number of fixed ticks to simulate. None: length of the input script, or the built-in patrol length.
    ticks: int | None = None
    # Seed for enemy placement. None: nondeterministic.
    seed: int | None = None
    # Optional input script (see mazeshot.sim.script). None: built-in patrol input.
    script: str | None = None
    # Smoke mode fails the process when the simulation logged any error.
    smoke: bool = False
    # Optional append-only file for simulation errors.
    error_log_path: str | None = None
    # Base URL of a score server to submit the final score to, e.g. http://127.0.0.1:3000
    submit_to: str | None = None
    # Player name used for the submission. Blank names are not submitted.
    player_name: str = ""


@dataclass(frozen=True)
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    scores_file: Path | None = None
    # Directory with the game client's static files. None: API only.
    static_dir: Path | None = None

    @classmethod
    def from_env(
        cls,
        *,
        host: str | None = None,
        port: int | None = None,
        scores_file: str | None = None,
        static_dir: str | None = None,
    ) -> "ServerConfig":
        """Explicit arguments win over environment variables, which win over defaults."""

        resolved_port = port
        if resolved_port is None:
            raw = os.environ.get(PORT_ENV, "").strip()
            resolved_port = int(raw) if raw.isdigit() else DEFAULT_PORT

        static = static_dir or os.environ.get(STATIC_DIR_ENV) or None
        if static is None:
            bundled = app_root() / "web"
            static_path = bundled if bundled.is_dir() else None
        else:
            static_path = Path(static)

        return cls(
            host=str(host) if host else cls.host,
            port=int(resolved_port),
            scores_file=Path(scores_file) if scores_file else scores_path(),
            static_dir=static_path,
        )
