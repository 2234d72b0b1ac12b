from sokoban.sim.contracts import Direction, EventKind, MoveOutcome, Position
from sokoban.sim.movement import attempt_move, resolve_push_chain
from sokoban.sim.world_state import Agent, Block, Goal, WallGrid, WorldState


def test_push_single_block_onto_matching_goal() -> None:
    world = _corridor(
        width=3,
        agent=(0, 0),
        blocks=[((1, 0), 2)],
        goals=[((2, 0), 26)],
    )

    result = attempt_move(world, Direction.RIGHT)

    assert result.outcome == MoveOutcome.PUSHED
    assert world.agent.position == (1, 0)
    assert world.blocks[0].position == (2, 0)
    assert [event.kind for event in result.events] == [
        EventKind.BLOCK_PLACED,
        EventKind.LEVEL_COMPLETED,
    ]
    assert result.events[0].payload["blocks"] == [0]


def test_push_into_wall_is_blocked_without_events() -> None:
    world = _corridor(
        width=3,
        agent=(0, 0),
        blocks=[((1, 0), 2)],
        goals=[((2, 0), 26)],
        walls={(2, 0)},
    )

    result = attempt_move(world, Direction.RIGHT)

    assert result.outcome == MoveOutcome.BLOCKED
    assert result.blocked
    assert result.events == []
    assert world.agent.position == (0, 0)
    assert world.blocks[0].position == (1, 0)
    assert world.moves == 0


def test_chain_push_moves_every_block() -> None:
    world = _corridor(
        width=5,
        agent=(0, 0),
        blocks=[((1, 0), 2), ((2, 0), 3)],
        goals=[((4, 0), 26)],
    )

    result = attempt_move(world, Direction.RIGHT)

    assert result.outcome == MoveOutcome.PUSHED
    assert world.agent.position == (1, 0)
    assert [block.position for block in world.blocks] == [(2, 0), (3, 0)]
    assert len(result.moved_blocks) == 2
    assert not result.has_event(EventKind.BLOCK_PLACED)


def test_chain_push_places_only_the_leading_block() -> None:
    world = _corridor(
        width=5,
        agent=(0, 0),
        blocks=[((1, 0), 2), ((2, 0), 3)],
        goals=[((3, 0), 39), ((0, 1), 26)],
        height=2,
    )

    result = attempt_move(world, Direction.RIGHT)

    placed = [event for event in result.events if event.kind == EventKind.BLOCK_PLACED]
    assert len(placed) == 1
    assert placed[0].payload["blocks"] == [1]
    assert not result.has_event(EventKind.LEVEL_COMPLETED)


def test_chain_against_wall_fails_atomically() -> None:
    for length in (2, 3):
        blocks = [((x, 0), 2) for x in range(1, length + 1)]
        world = _corridor(
            width=length + 3,
            agent=(0, 0),
            blocks=blocks,
            walls={(length + 1, 0)},
        )
        world_before = world.snapshot()

        result = attempt_move(world, Direction.RIGHT)

        assert result.outcome == MoveOutcome.BLOCKED
        assert world.snapshot() == world_before


def test_chain_stopped_by_out_of_bounds() -> None:
    world = _corridor(width=3, agent=(0, 0), blocks=[((1, 0), 2), ((2, 0), 2)])

    result = attempt_move(world, Direction.RIGHT)

    assert result.outcome == MoveOutcome.BLOCKED
    assert world.agent.position == (0, 0)


def test_blocked_move_is_idempotent() -> None:
    world = _corridor(width=2, agent=(0, 0), blocks=[((1, 0), 2)])

    first = attempt_move(world, Direction.RIGHT)
    snapshot = world.snapshot()
    second = attempt_move(world, Direction.RIGHT)

    assert first.outcome == second.outcome == MoveOutcome.BLOCKED
    assert world.snapshot() == snapshot


def test_walking_never_emits_block_placed() -> None:
    world = _corridor(
        width=4,
        height=2,
        agent=(0, 0),
        blocks=[((2, 1), 2)],
        goals=[((1, 0), 26)],
    )

    result = attempt_move(world, Direction.RIGHT)

    assert result.outcome == MoveOutcome.MOVED
    assert result.events == []
    assert world.agent.position == (1, 0)
    assert world.moves == 1


def test_vertical_moves_use_downward_y() -> None:
    world = _corridor(width=1, height=3, agent=(0, 2), blocks=[((0, 1), 2)])

    result = attempt_move(world, Direction.UP)

    assert result.outcome == MoveOutcome.PUSHED
    assert world.agent.position == (0, 1)
    assert world.blocks[0].position == (0, 0)
    assert attempt_move(world, Direction.UP).blocked


def test_occupancy_invariant_holds_across_moves() -> None:
    world = _corridor(
        width=5,
        height=3,
        agent=(0, 1),
        blocks=[((1, 1), 2), ((2, 1), 3), ((3, 0), 4)],
    )
    script = [
        Direction.RIGHT,
        Direction.RIGHT,
        Direction.UP,
        Direction.RIGHT,
        Direction.DOWN,
        Direction.LEFT,
        Direction.DOWN,
        Direction.RIGHT,
        Direction.UP,
    ]
    for direction in script:
        attempt_move(world, direction)
        positions = world.occupied_positions()
        assert len(positions) == len(set(positions))
        assert not any(world.is_wall(pos) for pos in positions)


def test_resolve_push_chain_on_a_fake_view() -> None:
    view = _FakeView(walls={(4, 0)}, blocks={(1, 0): 2, (2, 0): 3})

    chain = resolve_push_chain(view, (1, 0), Direction.RIGHT)
    assert chain is not None
    assert [block.position for block in chain] == [(1, 0), (2, 0)]

    assert resolve_push_chain(view, (5, 0), Direction.RIGHT) == []

    view.walls.add((3, 0))
    assert resolve_push_chain(view, (1, 0), Direction.RIGHT) is None


def test_long_corridor_of_blocks_resolves_without_recursion() -> None:
    length = 1000
    world = _corridor(
        width=length + 2,
        agent=(0, 0),
        blocks=[((x, 0), 2) for x in range(1, length + 1)],
    )

    result = attempt_move(world, Direction.RIGHT)

    assert result.outcome == MoveOutcome.PUSHED
    assert world.blocks[-1].position == (length + 1, 0)


class _FakeView:
    def __init__(self, *, walls: set[Position], blocks: dict[Position, int]) -> None:
        self.walls = walls
        self.blocks = {
            pos: Block(block_id=index, position=pos, kind_id=kind)
            for index, (pos, kind) in enumerate(blocks.items())
        }

    def is_wall(self, pos: Position) -> bool:
        return pos in self.walls

    def block_at(self, pos: Position) -> Block | None:
        return self.blocks.get(pos)

    def goal_at(self, pos: Position) -> Goal | None:
        return None


def _corridor(
    *,
    width: int,
    agent: Position,
    blocks: list[tuple[Position, int]] | None = None,
    goals: list[tuple[Position, int]] | None = None,
    walls: set[Position] | None = None,
    height: int = 1,
) -> WorldState:
    return WorldState(
        grid=WallGrid(width=width, height=height, walls=frozenset(walls or set())),
        agent=Agent(position=agent),
        blocks=[
            Block(block_id=index, position=pos, kind_id=kind)
            for index, (pos, kind) in enumerate(blocks or [])
        ],
        goals=[
            Goal(goal_id=index, position=pos, kind_id=kind)
            for index, (pos, kind) in enumerate(goals or [])
        ],
        current_level_id="corridor",
    )
