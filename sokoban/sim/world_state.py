"""World state for a single loaded level."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from sokoban.sim.contracts import EntitySnapshot, LevelSnapshot, Position


@dataclass(frozen=True)
class WallGrid:
    width: int
    height: int
    walls: frozenset[Position] = frozenset()

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_wall(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return True
        return (x, y) in self.walls


@dataclass
class Agent:
    position: Position
    kind_id: int = 0


@dataclass(eq=False)
class Block:
    """A pushable block; two blocks are only equal if they are the same object."""

    block_id: int
    position: Position
    kind_id: int


@dataclass(frozen=True)
class Goal:
    goal_id: int
    position: Position
    kind_id: int


class LevelView(Protocol):
    """What the movement rules are allowed to see of a level."""

    def is_wall(self, pos: Position) -> bool: ...

    def block_at(self, pos: Position) -> Block | None: ...

    def goal_at(self, pos: Position) -> Goal | None: ...


@dataclass
class WorldState:
    grid: WallGrid
    agent: Agent
    blocks: list[Block] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    current_level_id: str = ""
    next_level_id: str | None = None
    moves: int = 0

    def is_wall(self, pos: Position) -> bool:
        return self.grid.is_wall(*pos)

    def block_at(self, pos: Position) -> Block | None:
        for block in self.blocks:
            if block.position == pos:
                return block
        return None

    def goal_at(self, pos: Position) -> Goal | None:
        for goal in self.goals:
            if goal.position == pos:
                return goal
        return None

    def set_block_position(self, block: Block, pos: Position) -> None:
        block.position = pos

    def set_agent_position(self, pos: Position) -> None:
        self.agent.position = pos

    def occupied_positions(self) -> list[Position]:
        return [self.agent.position] + [block.position for block in self.blocks]

    def snapshot(self) -> LevelSnapshot:
        return LevelSnapshot(
            level_id=self.current_level_id,
            next_level_id=self.next_level_id,
            width=self.grid.width,
            height=self.grid.height,
            walls=sorted(self.grid.walls, key=lambda pos: (pos[1], pos[0])),
            agent=EntitySnapshot(
                x=self.agent.position[0],
                y=self.agent.position[1],
                kind_id=self.agent.kind_id,
            ),
            blocks=[
                EntitySnapshot(
                    x=block.position[0],
                    y=block.position[1],
                    kind_id=block.kind_id,
                    entity_id=block.block_id,
                )
                for block in self.blocks
            ],
            goals=[
                EntitySnapshot(
                    x=goal.position[0],
                    y=goal.position[1],
                    kind_id=goal.kind_id,
                    entity_id=goal.goal_id,
                )
                for goal in self.goals
            ],
            moves=self.moves,
        )
