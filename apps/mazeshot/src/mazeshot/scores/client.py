from __future__ import annotations

import json
import logging
from urllib.error import URLError
from urllib.request import Request, urlopen

from mazeshot.scores.server import SCORES_ROUTE
from mazeshot.scores.store import ScoreEntry

logger = logging.getLogger(__name__)


def _scores_url(base_url: str) -> str:
    return str(base_url).rstrip("/") + SCORES_ROUTE


def submit_score(base_url: str, *, name: str, score: int, timeout: float = 5.0) -> ScoreEntry | None:
    """
    Post the player's score. Returns the stored entry, or None when nothing was stored.

    A blank name is not submitted. Network and server failures are logged and swallowed:
    losing a high score must never take the game down with it.
    """

    clean = str(name or "").strip()
    if not clean:
        return None
    body = json.dumps({"name": clean, "score": score}).encode("utf-8")
    req = Request(
        _scores_url(base_url),
        data=body,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urlopen(req, timeout=float(timeout)) as resp:
            payload = json.loads(resp.read().decode("utf-8"))
    except (URLError, OSError, ValueError) as exc:
        logger.error("Failed to submit score: %s", exc)
        return None
    if not isinstance(payload, dict):
        logger.error("Failed to submit score: unexpected response %r", payload)
        return None
    return ScoreEntry(
        name=str(payload.get("name", clean)),
        score=payload.get("score", score),
        date=str(payload.get("date", "")),
    )


def fetch_scores(base_url: str, *, timeout: float = 5.0) -> list[dict]:
    with urlopen(_scores_url(base_url), timeout=float(timeout)) as resp:
        payload = json.loads(resp.read().decode("utf-8"))
    if not isinstance(payload, list):
        raise ValueError("score list response is not a JSON array")
    return payload


__all__ = ["fetch_scores", "submit_score"]
