"""Core data contracts shared by the engine and its collaborators."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

Position = tuple[int, int]


class Direction(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def delta(self) -> Position:
        return _DELTAS[self]

    def step(self, position: Position) -> Position:
        dx, dy = self.delta
        return position[0] + dx, position[1] + dy


_DELTAS: dict[Direction, Position] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class Command(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    RESTART = "RESTART"
    SHOW_HELP = "SHOW_HELP"
    SHOW_ABOUT = "SHOW_ABOUT"
    QUIT = "QUIT"
    DISMISS = "DISMISS"

    @property
    def direction(self) -> Direction | None:
        try:
            return Direction(self.value)
        except ValueError:
            return None


class MoveOutcome(str, Enum):
    MOVED = "MOVED"
    PUSHED = "PUSHED"
    BLOCKED = "BLOCKED"


class EventKind(str, Enum):
    LEVEL_LOADED = "LEVEL_LOADED"
    LEVEL_LOAD_FAILED = "LEVEL_LOAD_FAILED"
    BLOCK_PLACED = "BLOCK_PLACED"
    LEVEL_COMPLETED = "LEVEL_COMPLETED"
    ALL_LEVELS_COMPLETED = "ALL_LEVELS_COMPLETED"


class Event(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: EventKind
    payload: dict[str, Any] = Field(default_factory=dict)


class Placement(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    x: int
    y: int
    kind_id: int

    @property
    def position(self) -> Position:
        return self.x, self.y


class LevelDescription(BaseModel):
    """Everything a loader collaborator hands to the core for one level."""

    model_config = ConfigDict(extra="forbid")

    level_id: str
    width: int = Field(ge=0)
    height: int = Field(ge=0)
    walls: set[Position] = Field(default_factory=set)
    goals: list[Placement] = Field(default_factory=list)
    blocks: list[Placement] = Field(default_factory=list)
    agent: Placement
    next_level_id: str | None = None

    @model_validator(mode="after")
    def validate_next_level(self) -> "LevelDescription":
        if self.next_level_id is not None and not self.next_level_id.strip():
            raise ValueError("next_level_id must be non-empty when present")
        return self


class EntitySnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    x: int
    y: int
    kind_id: int
    entity_id: int | None = None


class LevelSnapshot(BaseModel):
    """Read-only copy of a world state for renderers and the run log."""

    model_config = ConfigDict(extra="forbid")

    level_id: str
    next_level_id: str | None = None
    width: int
    height: int
    walls: list[Position] = Field(default_factory=list)
    agent: EntitySnapshot
    blocks: list[EntitySnapshot] = Field(default_factory=list)
    goals: list[EntitySnapshot] = Field(default_factory=list)
    moves: int = 0


class StepPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    step: int
    command: Command | None = None
    outcome: MoveOutcome | None = None
    session_state: str
    snapshot: LevelSnapshot | None = None
    events: list[Event] | None = None
