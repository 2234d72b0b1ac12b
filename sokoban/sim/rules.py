"""Block/goal matching and the win condition."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sokoban.sim.world_state import Block, Goal, WorldState

NO_MATCH = -1

DEFAULT_GOAL_KINDS: dict[int, int] = {
    2: 26,
    3: 39,
    4: 52,
    5: 65,
    6: 78,
}


class RulesConfig(BaseModel):
    """Maps every block kind to the single goal kind it must cover."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    goal_kinds: dict[int, int] = Field(
        default_factory=lambda: dict(DEFAULT_GOAL_KINDS)
    )


DEFAULT_RULES = RulesConfig()


def load_rules(path: Path) -> RulesConfig:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise FileNotFoundError(f"Missing rules file: {path}") from exc
    try:
        return RulesConfig.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"Invalid rules file {path}: {exc}") from exc


def expected_goal_kind(block_kind: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    return rules.goal_kinds.get(block_kind, NO_MATCH)


def block_matches_goal(
    block: Block | None, goal: Goal | None, rules: RulesConfig = DEFAULT_RULES
) -> bool:
    if block is None or goal is None:
        return False
    expected = expected_goal_kind(block.kind_id, rules)
    return expected != NO_MATCH and goal.kind_id == expected


def is_level_completed(world: WorldState, rules: RulesConfig = DEFAULT_RULES) -> bool:
    """True when every goal holds a matching block. A level without goals never is."""
    if not world.goals:
        return False
    for goal in world.goals:
        if not block_matches_goal(world.block_at(goal.position), goal, rules):
            return False
    return True
