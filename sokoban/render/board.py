"""Shared helpers for rendering a level board."""

from __future__ import annotations

from rich.text import Text

from sokoban.sim.contracts import LevelSnapshot
from sokoban.sim.rules import DEFAULT_RULES, RulesConfig, expected_goal_kind

WALL = "#"
FLOOR = " "
GOAL = "."
AGENT = "@"
AGENT_ON_GOAL = "+"
BLOCK = "$"
BLOCK_ON_GOAL = "*"

TILE_STYLES = {
    WALL: "grey50",
    FLOOR: "grey70",
    GOAL: "bold",
    AGENT: "bold bright_cyan",
    AGENT_ON_GOAL: "bold bright_cyan",
}

KIND_PALETTE = ["bright_yellow", "bright_red", "bright_blue", "bright_green", "magenta"]
PLACED_STYLE = "reverse"


def board_glyphs(
    snapshot: LevelSnapshot, rules: RulesConfig = DEFAULT_RULES
) -> list[str]:
    """Plain-text board, one string per row."""
    grid, _ = _build_grid(snapshot, rules)
    return ["".join(row) for row in grid]


def render_board_lines(
    snapshot: LevelSnapshot, rules: RulesConfig = DEFAULT_RULES
) -> list[Text]:
    grid, styles = _build_grid(snapshot, rules)
    lines: list[Text] = []
    for row, row_styles in zip(grid, styles):
        line = Text()
        for ch, style in zip(row, row_styles):
            line.append(ch, style=style)
        lines.append(line)
    return lines


def kind_style(kind_id: int) -> str:
    return KIND_PALETTE[kind_id % len(KIND_PALETTE)]


def _build_grid(
    snapshot: LevelSnapshot, rules: RulesConfig
) -> tuple[list[list[str]], list[list[str]]]:
    width, height = snapshot.width, snapshot.height
    grid = [[FLOOR] * width for _ in range(height)]
    styles = [[TILE_STYLES[FLOOR]] * width for _ in range(height)]

    def _put(x: int, y: int, ch: str, style: str) -> None:
        if 0 <= y < height and 0 <= x < width:
            grid[y][x] = ch
            styles[y][x] = style

    for x, y in snapshot.walls:
        _put(x, y, WALL, TILE_STYLES[WALL])

    goal_styles: dict[int, str] = {}
    for block_kind, goal_kind in rules.goal_kinds.items():
        goal_styles.setdefault(goal_kind, kind_style(block_kind))
    goal_kinds: dict[tuple[int, int], int] = {}
    for goal in snapshot.goals:
        goal_kinds[(goal.x, goal.y)] = goal.kind_id
        style = goal_styles.get(goal.kind_id)
        _put(
            goal.x,
            goal.y,
            GOAL,
            f"{TILE_STYLES[GOAL]} {style}" if style else TILE_STYLES[GOAL],
        )

    for block in snapshot.blocks:
        goal_kind = goal_kinds.get((block.x, block.y))
        matched = goal_kind is not None and goal_kind == expected_goal_kind(
            block.kind_id, rules
        )
        style = kind_style(block.kind_id)
        if matched:
            _put(block.x, block.y, BLOCK_ON_GOAL, f"{style} {PLACED_STYLE}")
        else:
            _put(block.x, block.y, BLOCK, style)

    agent = snapshot.agent
    on_goal = (agent.x, agent.y) in goal_kinds
    glyph = AGENT_ON_GOAL if on_goal else AGENT
    _put(agent.x, agent.y, glyph, TILE_STYLES[glyph])
    return grid, styles
