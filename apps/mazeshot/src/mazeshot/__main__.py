from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from mazeshot.app_config import RunConfig, ServerConfig
from mazeshot.common.error_log import ErrorLog
from mazeshot.scores import ScoreStore, run_server, submit_score
from mazeshot.sim.script import RunSummary, load_script, run_headless


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def _print_summary(summary: RunSummary) -> None:
    print(f"seed: {summary.seed}")
    print(f"ticks: {summary.ticks}")
    print(f"score: {summary.score} (kills: {summary.kills}, shots: {summary.shots_fired})")
    print(f"enemies: {summary.enemies_left} left of {summary.enemies_spawned}")
    eye = summary.final_state.get("player", {}).get("eye")
    if eye:
        print(f"player eye: {eye[0]:.2f} {eye[1]:.2f} {eye[2]:.2f}")
    for line in summary.errors:
        print(f"error: {line}")


def run_game(cfg: RunConfig) -> RunSummary:
    frames = load_script(Path(cfg.script)) if cfg.script else None
    error_log = ErrorLog(persist_path=Path(cfg.error_log_path) if cfg.error_log_path else None)
    summary = run_headless(ticks=cfg.ticks, seed=cfg.seed, frames=frames, error_log=error_log)
    submitted = None
    if cfg.submit_to and cfg.player_name.strip():
        submitted = submit_score(cfg.submit_to, name=cfg.player_name, score=summary.score)
        if submitted is None:
            error_log.log_message(context="scores.submit", message=f"score not stored by {cfg.submit_to}")
            summary = replace(summary, errors=[it.summary_line() for it in error_log.items()])
    _print_summary(summary)
    if submitted is not None:
        print(f"submitted: {submitted.name} {submitted.score} at {submitted.date}")
    return summary


def print_leaderboard(*, scores_file: str | None, limit: int) -> None:
    cfg = ServerConfig.from_env(scores_file=scores_file)
    store = ScoreStore.load(cfg.scores_file)
    for rank, entry in enumerate(store.leaderboard(limit=limit), start=1):
        print(f"{rank:>3}. {entry.name:<20} {entry.score:>8} {entry.date}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="mazeshot", description="MAZESHOT arena simulation and score server")
    parser.add_argument(
        "--smoke",
        action="store_true",
        help="Exit non-zero if the run logged any error (a plain run only prints them).",
    )
    parser.add_argument("--ticks", type=int, default=None, help="Number of fixed ticks to simulate.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for enemy placement.")
    parser.add_argument(
        "--script",
        default=None,
        help="Input script JSON ({format_version: 1, frames: [...]}). Default: built-in patrol input.",
    )
    parser.add_argument("--error-log", default=None, help="Optional file that collects simulation errors.")
    parser.add_argument(
        "--submit-to",
        default=None,
        help="Score server base URL to submit the final score to, e.g. http://127.0.0.1:3000",
    )
    parser.add_argument("--name", default="", help="Player name for score submission.")
    parser.add_argument("--serve", action="store_true", help="Run the score server.")
    parser.add_argument("--host", default=None, help="Score server bind host (default: 0.0.0.0).")
    parser.add_argument("--port", type=int, default=None, help="Score server port (default: $PORT or 3000).")
    parser.add_argument(
        "--scores-file",
        default=None,
        help="Score JSON file (default: $MAZESHOT_SCORES_FILE or apps/mazeshot/scores.json).",
    )
    parser.add_argument(
        "--static-dir",
        default=None,
        help="Directory with the game client files to serve (default: $MAZESHOT_STATIC_DIR or apps/mazeshot/web).",
    )
    parser.add_argument(
        "--leaderboard",
        type=int,
        default=None,
        metavar="N",
        help="Print the top N entries of the score file and exit.",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug-level logging.")
    args = parser.parse_args(argv)
    _configure_logging(verbose=bool(args.verbose))

    if args.leaderboard is not None:
        print_leaderboard(scores_file=args.scores_file, limit=int(args.leaderboard))
        return

    if args.serve:
        run_server(
            ServerConfig.from_env(
                host=args.host,
                port=args.port,
                scores_file=args.scores_file,
                static_dir=args.static_dir,
            )
        )
        return

    cfg = RunConfig(
        ticks=args.ticks,
        seed=args.seed,
        script=args.script,
        smoke=bool(args.smoke),
        error_log_path=args.error_log,
        submit_to=args.submit_to,
        player_name=str(args.name or ""),
    )
    summary = run_game(cfg)
    if cfg.smoke and not summary.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
