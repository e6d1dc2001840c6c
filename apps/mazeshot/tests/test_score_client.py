from __future__ import annotations

import logging
import socket
from pathlib import Path

import pytest

from mazeshot.scores.client import fetch_scores, submit_score
from mazeshot.scores.server import ScoreServer
from mazeshot.scores.store import ScoreStore


@pytest.fixture
def server(tmp_path: Path):
    srv = ScoreServer(store=ScoreStore.load(tmp_path / "scores.json"), host="127.0.0.1", port=0)
    srv.start()
    try:
        yield srv
    finally:
        srv.close()


def _closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return int(s.getsockname()[1])


def test_submit_score_round_trip(server: ScoreServer) -> None:
    entry = submit_score(server.url, name="  ada  ", score=7)

    assert entry is not None
    assert entry.name == "ada"
    assert entry.score == 7
    assert entry.date.endswith("Z")
    assert fetch_scores(server.url + "/") == [entry.to_json()]


def test_blank_name_is_not_submitted(server: ScoreServer) -> None:
    assert submit_score(server.url, name="   ", score=3) is None
    assert server.store.entries() == []


def test_unreachable_server_is_logged_not_raised(caplog) -> None:
    url = f"http://127.0.0.1:{_closed_port()}"
    with caplog.at_level(logging.ERROR, logger="mazeshot.scores.client"):
        assert submit_score(url, name="ada", score=1, timeout=1.0) is None
    assert any("Failed to submit score" in r.getMessage() for r in caplog.records)
