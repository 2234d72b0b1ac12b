"""Rich viewer rendering for StepPayload."""

from __future__ import annotations

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sokoban.render.board import render_board_lines
from sokoban.sim.contracts import LevelSnapshot, StepPayload
from sokoban.sim.rules import DEFAULT_RULES, RulesConfig


def render_step(
    payload: StepPayload, *, rules: RulesConfig = DEFAULT_RULES
) -> RenderableType:
    header = Text(f"Step {payload.step}", style="bold")
    board = render_board(payload.snapshot, rules=rules)
    status = _render_status(payload)
    events = _render_events(payload)
    return Columns([Panel(Group(header, board), title="Board"), Group(status, events)])


def render_board(
    snapshot: LevelSnapshot | None, *, rules: RulesConfig = DEFAULT_RULES
) -> RenderableType:
    if snapshot is None:
        return Text("No level loaded.")
    return Group(*render_board_lines(snapshot, rules))


def _render_status(payload: StepPayload) -> RenderableType:
    table = Table(title="Status", show_header=False)
    table.add_column("Field")
    table.add_column("Value")
    snapshot = payload.snapshot
    table.add_row("Level", snapshot.level_id if snapshot else "-")
    table.add_row(
        "Next", (snapshot.next_level_id or "final level") if snapshot else "-"
    )
    table.add_row("Moves", str(snapshot.moves) if snapshot else "0")
    table.add_row("Command", payload.command.value if payload.command else "-")
    table.add_row("Outcome", payload.outcome.value if payload.outcome else "-")
    table.add_row("Session", payload.session_state)
    return table


def _render_events(payload: StepPayload) -> RenderableType:
    table = Table(title="Events", show_header=True, header_style="bold")
    table.add_column("Kind")
    table.add_column("Detail")
    for event in payload.events or []:
        table.add_row(event.kind.value, _format_payload(event.payload))
    if not payload.events:
        table.add_row("-", "None")
    return table


def _format_payload(payload: dict) -> str:
    if not payload:
        return "-"
    return ", ".join(f"{key}={value}" for key, value in payload.items())
