from __future__ import annotations

import json
import logging
import math
import os
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from mazeshot.paths import app_root

logger = logging.getLogger(__name__)

SCORES_FILE_ENV = "MAZESHOT_SCORES_FILE"


class ScoreValidationError(ValueError):
    """Submission did not carry a string `name` and a numeric `score`."""


class ScoreStoreError(RuntimeError):
    """The score file could not be written."""


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int | float
    date: str

    def to_json(self) -> dict:
        return {"name": self.name, "score": self.score, "date": self.date}


def iso_timestamp(now: datetime | None = None) -> str:
    """UTC timestamp with millisecond precision and a trailing `Z`, e.g. 2024-05-01T12:00:00.250Z."""

    t = now if now is not None else datetime.now(timezone.utc)
    if t.tzinfo is not None:
        t = t.astimezone(timezone.utc)
    return t.strftime("%Y-%m-%dT%H:%M:%S.") + f"{t.microsecond // 1000:03d}Z"


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        # JSON integers are unbounded; anything past the float range is not a usable score.
        return False


def validate_submission(payload: object) -> tuple[str, int | float]:
    if not isinstance(payload, dict):
        raise ScoreValidationError("Invalid input")
    name = payload.get("name")
    score = payload.get("score")
    if not isinstance(name, str) or not _is_number(score):
        raise ScoreValidationError("Invalid input")
    return (name, score)


def scores_path() -> Path:
    """
    Location of the flat score file.

    Override for tests/deployments via `MAZESHOT_SCORES_FILE`.
    """

    override = os.environ.get(SCORES_FILE_ENV)
    if override:
        return Path(override)
    return app_root() / "scores.json"


def _entry_from_payload(raw: object) -> ScoreEntry | None:
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    score = raw.get("score")
    date = raw.get("date")
    if not isinstance(name, str) or not _is_number(score):
        return None
    return ScoreEntry(name=name, score=score, date=str(date) if isinstance(date, str) else "")


def read_scores_file(path: Path) -> list[ScoreEntry]:
    """Read persisted entries. A missing file is empty; a corrupt one is logged and treated as empty."""

    p = Path(path)
    if not p.exists():
        return []
    try:
        payload = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error("Failed to read scores file %s: %s", p, exc)
        return []
    if not isinstance(payload, list):
        logger.error("Failed to read scores file %s: expected a JSON array", p)
        return []

    entries: list[ScoreEntry] = []
    for raw in payload:
        entry = _entry_from_payload(raw)
        if entry is None:
            logger.warning("Skipping malformed score entry in %s: %r", p, raw)
            continue
        entries.append(entry)
    return entries


def write_scores_file(path: Path, entries: list[ScoreEntry]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    # Unique tmp name so concurrent writers never share a partial file.
    tmp = p.with_name(f"{p.name}.{os.getpid()}.{secrets.token_hex(6)}.tmp")
    try:
        tmp.write_text(json.dumps([e.to_json() for e in entries], indent=2) + "\n", encoding="utf-8")
        tmp.replace(p)
    finally:
        if tmp.exists():
            tmp.unlink()


class ScoreStore:
    """
    Append-only high-score list backed by a JSON file.

    Entries are never reordered, updated or removed. Every accepted submission rewrites
    the whole file; submissions are serialized so writes from concurrent requests cannot
    interleave.
    """

    def __init__(
        self,
        *,
        path: Path,
        entries: list[ScoreEntry] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.path = Path(path)
        self._entries: list[ScoreEntry] = list(entries or [])
        self._clock = clock
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: Path | None = None, *, clock: Callable[[], datetime] | None = None) -> "ScoreStore":
        p = Path(path) if path is not None else scores_path()
        entries = read_scores_file(p)
        logger.info("Loaded %d score entries from %s", len(entries), p)
        return cls(path=p, entries=entries, clock=clock)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def entries(self) -> list[ScoreEntry]:
        with self._lock:
            return list(self._entries)

    def as_payload(self) -> list[dict]:
        return [e.to_json() for e in self.entries()]

    def submit(self, payload: object) -> ScoreEntry:
        name, score = validate_submission(payload)
        now = self._clock() if self._clock is not None else None
        entry = ScoreEntry(name=name, score=score, date=iso_timestamp(now))
        with self._lock:
            self._entries.append(entry)
            try:
                write_scores_file(self.path, self._entries)
            except OSError as exc:
                self._entries.pop()
                logger.error("Failed to write scores file %s: %s", self.path, exc)
                raise ScoreStoreError(f"could not write {self.path}") from exc
        logger.info("Recorded score %s for %r", score, name)
        return entry

    def leaderboard(self, *, limit: int = 10) -> list[ScoreEntry]:
        """Highest scores first; ties keep submission order."""

        ranked = sorted(self.entries(), key=lambda e: -float(e.score))
        return ranked[: max(0, int(limit))]


__all__ = [
    "SCORES_FILE_ENV",
    "ScoreEntry",
    "ScoreStore",
    "ScoreStoreError",
    "ScoreValidationError",
    "iso_timestamp",
    "read_scores_file",
    "scores_path",
    "validate_submission",
    "write_scores_file",
]
