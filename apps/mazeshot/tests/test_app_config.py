from __future__ import annotations

from pathlib import Path

import pytest

from mazeshot import app_config
from mazeshot.app_config import RunConfig, ServerConfig


def test_run_config_defaults() -> None:
    cfg = RunConfig()
    assert cfg.ticks is None
    assert cfg.script is None
    assert not cfg.smoke
    assert cfg.player_name == ""


def test_server_config_reads_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    web = tmp_path / "web"
    web.mkdir()
    monkeypatch.setenv(app_config.PORT_ENV, "8080")
    monkeypatch.setenv(app_config.STATIC_DIR_ENV, str(web))
    monkeypatch.setenv("MAZESHOT_SCORES_FILE", str(tmp_path / "s.json"))

    cfg = ServerConfig.from_env()

    assert cfg.host == "0.0.0.0"
    assert cfg.port == 8080
    assert cfg.static_dir == web
    assert cfg.scores_file == tmp_path / "s.json"


def test_explicit_arguments_win(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(app_config.PORT_ENV, "8080")
    cfg = ServerConfig.from_env(
        host="127.0.0.1",
        port=5050,
        scores_file=str(tmp_path / "mine.json"),
        static_dir=str(tmp_path),
    )
    assert cfg.host == "127.0.0.1"
    assert cfg.port == 5050
    assert cfg.scores_file == tmp_path / "mine.json"
    assert cfg.static_dir == tmp_path


def test_bad_port_env_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(app_config.PORT_ENV, "not-a-port")
    assert ServerConfig.from_env().port == app_config.DEFAULT_PORT
