"""High-score persistence: flat JSON store, HTTP API and submit client."""

from mazeshot.scores.store import ScoreEntry, ScoreStore, ScoreStoreError, ScoreValidationError
from mazeshot.scores.client import fetch_scores, submit_score
from mazeshot.scores.server import ScoreServer, run_server

__all__ = [
    "ScoreEntry",
    "ScoreServer",
    "ScoreStore",
    "ScoreStoreError",
    "ScoreValidationError",
    "fetch_scores",
    "run_server",
    "submit_score",
]
