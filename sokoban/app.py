"""Application entry for running a game session."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from rich.logging import RichHandler

from sokoban.db.replay_log import ReplayRecorder, create_run_folder, write_header
from sokoban.render.textual_app import run_app
from sokoban.sim.contracts import Command, StepPayload
from sokoban.sim.events import EventBus
from sokoban.sim.rules import DEFAULT_RULES, RulesConfig, load_rules
from sokoban.sim.session import GameSession
from sokoban.sim.world_loader import JsonLevelLoader, LevelPaths

DEFAULT_LEVELS_DIR = Path("levels")
DEFAULT_START_LEVEL = "level1"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FILE_NAME = "session.log"

MOVE_LETTERS: dict[str, Command] = {
    "U": Command.UP,
    "D": Command.DOWN,
    "L": Command.LEFT,
    "R": Command.RIGHT,
    "X": Command.RESTART,
}


@dataclass(frozen=True)
class HeadlessRun:
    run_dir: Path
    session: GameSession
    last_payload: StepPayload


def run_game(
    replay_dir: Path,
    *,
    levels_dir: Path | None = None,
    level_id: str | None = None,
    rules_path: Path | None = None,
    log_level: str | None = None,
) -> Path:
    run_dir, log_path = create_run_folder(replay_dir)
    # The terminal belongs to Textual, so logs go next to the run log.
    configure_logging(log_level, log_file=run_dir / LOG_FILE_NAME)
    session, recorder, start_level = _prepare_session(
        log_path,
        levels_dir=levels_dir,
        level_id=level_id,
        rules_path=rules_path,
        metadata={"run_id": run_dir.name, "mode": "interactive"},
    )
    _start(session, start_level)
    recorder.record(session)
    run_app(session, recorder=recorder)
    return run_dir


def run_headless(
    replay_dir: Path,
    moves: str,
    *,
    levels_dir: Path | None = None,
    level_id: str | None = None,
    rules_path: Path | None = None,
) -> HeadlessRun:
    commands = parse_moves(moves)
    run_dir, log_path = create_run_folder(replay_dir)
    session, recorder, start_level = _prepare_session(
        log_path,
        levels_dir=levels_dir,
        level_id=level_id,
        rules_path=rules_path,
        metadata={"run_id": run_dir.name, "mode": "headless", "moves": moves},
    )
    _start(session, start_level)
    payload = recorder.record(session)
    for command in commands:
        result = session.handle(command)
        payload = recorder.record(session, command=command, result=result)
    return HeadlessRun(run_dir=run_dir, session=session, last_payload=payload)


def parse_moves(script: str) -> list[Command]:
    commands: list[Command] = []
    for letter in script.upper():
        if letter.isspace() or letter == ",":
            continue
        command = MOVE_LETTERS.get(letter)
        if command is None:
            raise ValueError(f"Unknown move {letter!r}; use U, D, L, R or X.")
        commands.append(command)
    return commands


def configure_logging(level: str | None = None, *, log_file: Path | None = None) -> None:
    resolved = (
        level or os.getenv("SOKOBAN_LOG_LEVEL") or DEFAULT_LOG_LEVEL
    ).upper()
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    else:
        handler = RichHandler(show_path=False)
    logging.basicConfig(level=resolved, handlers=[handler], force=True)


def resolve_rules(rules_path: Path | None) -> RulesConfig:
    path = rules_path or _env_path("SOKOBAN_RULES")
    if path is None:
        return DEFAULT_RULES
    return load_rules(path)


def resolve_levels_dir(levels_dir: Path | None) -> Path:
    return levels_dir or _env_path("SOKOBAN_LEVELS_DIR") or DEFAULT_LEVELS_DIR


def resolve_start_level(level_id: str | None) -> str:
    return level_id or os.getenv("SOKOBAN_START_LEVEL") or DEFAULT_START_LEVEL


def _prepare_session(
    log_path: Path,
    *,
    levels_dir: Path | None,
    level_id: str | None,
    rules_path: Path | None,
    metadata: dict,
) -> tuple[GameSession, ReplayRecorder, str]:
    base_dir = resolve_levels_dir(levels_dir)
    start_level = resolve_start_level(level_id)
    rules = resolve_rules(rules_path)
    write_header(
        log_path,
        metadata={
            **metadata,
            "levels_dir": str(base_dir),
            "start_level": start_level,
            "goal_kinds": {str(key): value for key, value in rules.goal_kinds.items()},
        },
    )
    bus = EventBus()
    recorder = ReplayRecorder(log_path)
    bus.subscribe(recorder.on_event)
    session = GameSession(
        JsonLevelLoader(LevelPaths(base_dir=base_dir)), bus=bus, rules=rules
    )
    return session, recorder, start_level


def _start(session: GameSession, level_id: str) -> None:
    if not session.start(level_id):
        raise SystemExit(f"Could not load starting level {level_id}; see the log.")


def _env_path(name: str) -> Path | None:
    value = os.getenv(name)
    return Path(value) if value else None
