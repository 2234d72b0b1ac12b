"""Module entry point for `python -m sokoban`."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console

from sokoban.app import configure_logging, resolve_rules, run_game, run_headless
from sokoban.db.replay_log import RUN_LOG_NAME
from sokoban.render.replay_reader import read_step_payloads
from sokoban.render.viewer import render_step
from sokoban.sim.world_loader import ResourceUnavailable

DEFAULT_REPLAY_DIR = Path("replay")


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Sokoban in the terminal.")
    parser.add_argument(
        "--levels-dir",
        type=Path,
        default=None,
        help="Directory holding level JSON files and maps (default: levels).",
    )
    parser.add_argument(
        "--level",
        default=None,
        help="Level to start from (default: level1).",
    )
    parser.add_argument(
        "--rules",
        type=Path,
        default=None,
        help="JSON file with a custom block/goal kind table.",
    )
    parser.add_argument(
        "--moves",
        default=None,
        help="Run headless with a move script (U, D, L, R, X=restart).",
    )
    parser.add_argument(
        "--replay",
        type=Path,
        default=None,
        help="Print every step of a recorded run folder.",
    )
    parser.add_argument(
        "--replay-dir",
        type=Path,
        default=DEFAULT_REPLAY_DIR,
        help="Base directory for new run logs.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    )
    args = parser.parse_args()

    if args.replay is not None:
        configure_logging(args.log_level)
        _replay_run(args.replay, rules_path=args.rules)
        return

    try:
        if args.moves is not None:
            configure_logging(args.log_level)
            _run_moves(args)
            return
        created_run = run_game(
            args.replay_dir,
            levels_dir=args.levels_dir,
            level_id=args.level,
            rules_path=args.rules,
            log_level=args.log_level,
        )
    except ResourceUnavailable as exc:
        raise SystemExit(f"Fatal: cannot read level data ({exc}).") from exc
    print(f"Run saved to {created_run}")


def _run_moves(args: argparse.Namespace) -> None:
    try:
        run = run_headless(
            args.replay_dir,
            args.moves,
            levels_dir=args.levels_dir,
            level_id=args.level,
            rules_path=args.rules,
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    console = Console()
    console.print(render_step(run.last_payload, rules=run.session.rules))
    console.print(f"Run saved to {run.run_dir}")


def _replay_run(run_folder: Path, *, rules_path: Path | None) -> None:
    console = Console()
    rules = resolve_rules(rules_path)
    log_path = run_folder / RUN_LOG_NAME
    if not log_path.exists():
        raise SystemExit(f"No run log found in {run_folder}.")
    for payload in read_step_payloads(log_path):
        console.print(render_step(payload, rules=rules))


if __name__ == "__main__":
    main()
