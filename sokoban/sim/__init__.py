"""Level simulation and rules engine."""

from sokoban.sim.contracts import (
    Command,
    Direction,
    Event,
    EventKind,
    LevelDescription,
    LevelSnapshot,
    MoveOutcome,
    Placement,
    StepPayload,
)
from sokoban.sim.events import EventBus
from sokoban.sim.movement import MoveResult, attempt_move, resolve_push_chain
from sokoban.sim.rules import (
    RulesConfig,
    block_matches_goal,
    expected_goal_kind,
    is_level_completed,
    load_rules,
)
from sokoban.sim.session import GameSession, SessionState
from sokoban.sim.world_loader import (
    JsonLevelLoader,
    LevelConfigError,
    LevelLoadError,
    LevelPaths,
    MissingAgentStart,
    MissingWallLayer,
    ResourceUnavailable,
    StaticLevelLoader,
    UnsupportedInfiniteMap,
    build_world_state,
)
from sokoban.sim.world_state import Agent, Block, Goal, LevelView, WallGrid, WorldState

__all__ = [
    "Agent",
    "Block",
    "Command",
    "Direction",
    "Event",
    "EventBus",
    "EventKind",
    "GameSession",
    "Goal",
    "JsonLevelLoader",
    "LevelConfigError",
    "LevelDescription",
    "LevelLoadError",
    "LevelPaths",
    "LevelSnapshot",
    "LevelView",
    "MissingAgentStart",
    "MissingWallLayer",
    "MoveOutcome",
    "MoveResult",
    "Placement",
    "ResourceUnavailable",
    "RulesConfig",
    "SessionState",
    "StaticLevelLoader",
    "StepPayload",
    "UnsupportedInfiniteMap",
    "WallGrid",
    "WorldState",
    "attempt_move",
    "block_matches_goal",
    "build_world_state",
    "expected_goal_kind",
    "is_level_completed",
    "load_rules",
    "resolve_push_chain",
]
