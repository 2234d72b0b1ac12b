"""Shared tile definitions for ASCII wall maps."""

from __future__ import annotations

from sokoban.sim.contracts import Position

WALL_TILES: set[str] = {
    "#",
}


def parse_wall_lines(lines: list[str]) -> tuple[int, int, set[Position]]:
    """Return width, height and blocked cells of an ASCII wall map."""
    width = max((len(line) for line in lines), default=0)
    walls: set[Position] = set()
    for y, line in enumerate(lines):
        for x, ch in enumerate(line):
            if ch in WALL_TILES:
                walls.add((x, y))
    return width, len(lines), walls
