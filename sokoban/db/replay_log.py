"""Run logging helpers (JSONL)."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sokoban.sim.contracts import Command, Event, StepPayload
from sokoban.sim.movement import MoveResult
from sokoban.sim.session import GameSession

SCHEMA_VERSION = 1
RUN_LOG_NAME = "run.jsonl"


def create_run_folder(
    base_dir: Path, *, timestamp: str | None = None
) -> tuple[Path, Path]:
    run_id = timestamp or _format_timestamp(datetime.now(timezone.utc))
    run_dir = base_dir / run_id
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir, run_dir / RUN_LOG_NAME


def write_header(path: Path, metadata: dict[str, Any]) -> None:
    record: dict[str, Any] = {
        "type": "header",
        "schema_version": SCHEMA_VERSION,
        "metadata": metadata,
    }
    _append_record(path, record)


def append_step_payload(path: Path, payload: StepPayload) -> None:
    record: dict[str, Any] = {
        "type": "step",
        "schema_version": SCHEMA_VERSION,
        "payload": payload.model_dump(mode="json"),
    }
    _append_record(path, record)


class ReplayRecorder:
    """Write one step record per handled command.

    Subscribe ``on_event`` to the session bus so events published during a
    command end up in that command's record.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.step = 0
        self._pending: list[Event] = []

    def on_event(self, event: Event) -> None:
        self._pending.append(event)

    def record(
        self,
        session: GameSession,
        *,
        command: Command | None = None,
        result: MoveResult | None = None,
    ) -> StepPayload:
        payload = StepPayload(
            step=self.step,
            command=command,
            outcome=result.outcome if result else None,
            session_state=session.state.value,
            snapshot=session.snapshot(),
            events=list(self._pending) or None,
        )
        append_step_payload(self.path, payload)
        self.step += 1
        self._pending = []
        return payload


def _append_record(path: Path, record: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(json.dumps(record))
        handle.write("\n")


def _format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H-%M-%SZ")
