"""Read run logs back: the header metadata and the recorded steps."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from sokoban.sim.contracts import StepPayload


def read_step_payloads(path: Path) -> Iterator[StepPayload]:
    for record in _iter_records(path, "step"):
        payload = record.get("payload")
        if payload is not None:
            yield StepPayload.model_validate(payload)


def read_header(path: Path) -> dict | None:
    for record in _iter_records(path, "header"):
        return record.get("metadata", {})
    return None


def _iter_records(path: Path, record_type: str) -> Iterator[dict[str, Any]]:
    # Lines that are not JSON objects (a torn final write, stray text) are skipped.
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(record, dict) and record.get("type") == record_type:
                yield record
