"""Game session: level loading, move commands and level progression."""

from __future__ import annotations

import logging
from enum import Enum

from sokoban.sim.contracts import (
    Command,
    Direction,
    Event,
    EventKind,
    LevelSnapshot,
)
from sokoban.sim.events import EventBus
from sokoban.sim.movement import MoveResult, attempt_move
from sokoban.sim.rules import DEFAULT_RULES, RulesConfig
from sokoban.sim.world_loader import (
    LevelConfigError,
    LevelLoader,
    build_world_state,
)
from sokoban.sim.world_state import WorldState

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    LOADING = "LOADING"
    PLAYING = "PLAYING"
    LEVEL_CLEARED = "LEVEL_CLEARED"
    FINISHED = "FINISHED"


class GameSession:
    """Owns the world state and drives it from commands.

    Presentation code reads ``world`` (or ``snapshot()``) and listens on the
    bus; it never mutates the world. While ``modal_open`` is set, moves and
    restarts are ignored.
    """

    def __init__(
        self,
        loader: LevelLoader,
        *,
        bus: EventBus | None = None,
        rules: RulesConfig = DEFAULT_RULES,
    ) -> None:
        self.loader = loader
        self.bus = bus or EventBus()
        self.rules = rules
        self.world: WorldState | None = None
        self.state = SessionState.LOADING
        self.modal_open = False

    @property
    def accepts_moves(self) -> bool:
        return (
            self.state == SessionState.PLAYING
            and not self.modal_open
            and self.world is not None
        )

    @property
    def current_level_id(self) -> str | None:
        return self.world.current_level_id if self.world else None

    def start(self, level_id: str) -> bool:
        return self.load(level_id)

    def load(self, level_id: str) -> bool:
        """Replace the world with a fresh copy of ``level_id``.

        Configuration errors leave the previous world in place and return
        False. ``ResourceUnavailable`` is not caught.
        """
        previous_state = self.state
        self.state = SessionState.LOADING
        try:
            description = self.loader.load_level(level_id)
            world = build_world_state(description)
        except LevelConfigError as exc:
            logger.error("Could not load level %s: %s", level_id, exc)
            if self.world is not None:
                self.state = previous_state
            self.bus.publish(
                Event(
                    kind=EventKind.LEVEL_LOAD_FAILED,
                    payload={"level_id": level_id, "error": str(exc)},
                )
            )
            return False

        self.world = world
        self.state = SessionState.PLAYING
        logger.info("Loaded level %s", world.current_level_id)
        self.bus.publish(
            Event(
                kind=EventKind.LEVEL_LOADED,
                payload={"level_id": world.current_level_id},
            )
        )
        return True

    def restart(self) -> bool:
        if self.world is None or self.modal_open:
            return False
        if self.state not in {SessionState.PLAYING, SessionState.LEVEL_CLEARED}:
            return False
        return self.load(self.world.current_level_id)

    def move(self, direction: Direction) -> MoveResult | None:
        if not self.accepts_moves or self.world is None:
            return None
        result = attempt_move(self.world, direction, self.rules)
        self.bus.publish_all(result.events)
        if result.has_event(EventKind.LEVEL_COMPLETED):
            self._advance()
        return result

    def handle(self, command: Command) -> MoveResult | None:
        direction = command.direction
        if direction is not None:
            return self.move(direction)
        if command == Command.RESTART:
            self.restart()
        # Help, About, Dismiss and Quit belong to the presentation layer.
        return None

    def open_modal(self) -> None:
        self.modal_open = True

    def close_modal(self) -> None:
        self.modal_open = False

    def snapshot(self) -> LevelSnapshot | None:
        return self.world.snapshot() if self.world else None

    def _advance(self) -> None:
        if self.world is None:
            return
        self.state = SessionState.LEVEL_CLEARED
        next_level = self.world.next_level_id
        if next_level:
            logger.info(
                "Level %s completed, loading %s",
                self.world.current_level_id,
                next_level,
            )
            self.load(next_level)
            return
        logger.info("Level %s completed, no levels left", self.world.current_level_id)
        self.state = SessionState.FINISHED
        self.bus.publish(
            Event(
                kind=EventKind.ALL_LEVELS_COMPLETED,
                payload={"level_id": self.world.current_level_id},
            )
        )
