"""Move resolution for the agent, including chained block pushes."""

from __future__ import annotations

from dataclasses import dataclass, field

from sokoban.sim.contracts import Direction, Event, EventKind, MoveOutcome, Position
from sokoban.sim.rules import (
    DEFAULT_RULES,
    RulesConfig,
    block_matches_goal,
    is_level_completed,
)
from sokoban.sim.world_state import Block, LevelView, WorldState


@dataclass(frozen=True)
class MoveResult:
    outcome: MoveOutcome
    direction: Direction
    moved_blocks: tuple[Block, ...] = ()
    events: list[Event] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return self.outcome == MoveOutcome.BLOCKED

    def has_event(self, kind: EventKind) -> bool:
        return any(event.kind == kind for event in self.events)


def resolve_push_chain(
    view: LevelView, start: Position, direction: Direction
) -> list[Block] | None:
    """Collect the blocks in line from ``start`` and check they can all shift.

    Returns the chain ordered nearest first, an empty list when ``start`` holds
    no block, or None when the farthest block would hit a wall.
    """
    chain: list[Block] = []
    cursor = start
    while True:
        block = view.block_at(cursor)
        if block is None:
            break
        chain.append(block)
        cursor = direction.step(cursor)
    if chain and view.is_wall(cursor):
        return None
    return chain


def attempt_move(
    world: WorldState, direction: Direction, rules: RulesConfig = DEFAULT_RULES
) -> MoveResult:
    target = direction.step(world.agent.position)
    if world.is_wall(target):
        return MoveResult(outcome=MoveOutcome.BLOCKED, direction=direction)

    chain = resolve_push_chain(world, target, direction)
    if chain is None:
        return MoveResult(outcome=MoveOutcome.BLOCKED, direction=direction)

    for block in reversed(chain):
        world.set_block_position(block, direction.step(block.position))
    world.set_agent_position(target)
    world.moves += 1

    events: list[Event] = []
    placed = [
        block.block_id
        for block in chain
        if block_matches_goal(block, world.goal_at(block.position), rules)
    ]
    if placed:
        events.append(Event(kind=EventKind.BLOCK_PLACED, payload={"blocks": placed}))
    if is_level_completed(world, rules):
        events.append(
            Event(
                kind=EventKind.LEVEL_COMPLETED,
                payload={"level_id": world.current_level_id, "moves": world.moves},
            )
        )
    return MoveResult(
        outcome=MoveOutcome.PUSHED if chain else MoveOutcome.MOVED,
        direction=direction,
        moved_blocks=tuple(chain),
        events=events,
    )
