"""Load levels from JSON + ASCII wall maps and build world state from them."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Protocol

from pydantic import ValidationError

from sokoban.sim.contracts import LevelDescription, Placement, Position
from sokoban.sim.world_state import Agent, Block, Goal, WallGrid, WorldState
from sokoban.sim.world_tiles import parse_wall_lines

logger = logging.getLogger(__name__)


class LevelLoadError(Exception):
    """Base class for anything that stops a level from loading."""

    def __init__(self, level_id: str, message: str) -> None:
        super().__init__(f"{level_id}: {message}")
        self.level_id = level_id


class LevelConfigError(LevelLoadError):
    """The level data is present but unusable. The session recovers from it."""


class MissingWallLayer(LevelConfigError):
    pass


class UnsupportedInfiniteMap(LevelConfigError):
    pass


class MissingAgentStart(LevelConfigError):
    pass


class OverlappingPlacement(LevelConfigError):
    pass


class ResourceUnavailable(LevelLoadError):
    """The backing asset cannot be read. Not recoverable."""


class LevelLoader(Protocol):
    def load_level(self, level_id: str) -> LevelDescription: ...


@dataclass(frozen=True)
class LevelPaths:
    base_dir: Path = Path("levels")

    def level_json(self, level_id: str) -> Path:
        return self.base_dir / f"{normalize_level_id(level_id)}.json"


def normalize_level_id(level_id: str) -> str:
    return level_id[: -len(".json")] if level_id.endswith(".json") else level_id


class JsonLevelLoader:
    """Reads ``<base_dir>/<level_id>.json`` and the ASCII map it points to."""

    def __init__(self, paths: LevelPaths | None = None) -> None:
        self.paths = paths or LevelPaths()

    def load_level(self, level_id: str) -> LevelDescription:
        level_id = normalize_level_id(level_id)
        path = self.paths.level_json(level_id)
        data = _load_json(level_id, path)

        map_file = data.get("map_file")
        if not map_file:
            raise MissingWallLayer(level_id, "no wall map ('map_file') defined")
        if not isinstance(map_file, str):
            raise ResourceUnavailable(level_id, "map_file must be a path string")
        infinite = data.get("infinite", False)
        if not isinstance(infinite, bool):
            raise ResourceUnavailable(level_id, "infinite must be true or false")
        if infinite:
            raise UnsupportedInfiniteMap(level_id, "infinite maps are not supported")

        lines = _load_map_lines(level_id, self.paths.base_dir / map_file)
        width, height, walls = parse_wall_lines(lines)

        next_level = data.get("next_level") or None
        if next_level is None:
            logger.info("Level %s has no next level (final level).", level_id)

        agent_raw = data.get("agent")
        if isinstance(agent_raw, list):
            agent_raw = agent_raw[0] if agent_raw else None
        if not agent_raw:
            raise MissingAgentStart(level_id, "no agent start position")

        goals_raw = data.get("goals") or []
        blocks_raw = data.get("blocks") or []
        if not goals_raw:
            logger.warning(
                "Level %s has no goals; it can never be completed.", level_id
            )
        if not blocks_raw:
            logger.warning("Level %s has no blocks.", level_id)

        try:
            return LevelDescription(
                level_id=level_id,
                width=width,
                height=height,
                walls=walls,
                goals=[Placement.model_validate(goal) for goal in goals_raw],
                blocks=[Placement.model_validate(block) for block in blocks_raw],
                agent=Placement.model_validate(agent_raw),
                next_level_id=next_level,
            )
        except ValidationError as exc:
            raise ResourceUnavailable(level_id, f"malformed level data: {exc}") from exc


class StaticLevelLoader:
    """Serve level descriptions that are already in memory."""

    def __init__(self, descriptions: Mapping[str, LevelDescription]) -> None:
        self._descriptions = dict(descriptions)

    def load_level(self, level_id: str) -> LevelDescription:
        description = self._descriptions.get(level_id)
        if description is None:
            raise ResourceUnavailable(level_id, "unknown level")
        return description.model_copy(deep=True)


def build_world_state(description: LevelDescription) -> WorldState:
    grid = WallGrid(
        width=description.width,
        height=description.height,
        walls=frozenset(description.walls),
    )
    occupied: set[Position] = set()
    for placement in [description.agent, *description.blocks]:
        position = placement.position
        if grid.is_wall(*position):
            raise OverlappingPlacement(
                description.level_id, f"entity placed inside a wall at {position}"
            )
        if position in occupied:
            raise OverlappingPlacement(
                description.level_id, f"two entities share position {position}"
            )
        occupied.add(position)

    goal_cells: set[Position] = set()
    for goal in description.goals:
        position = goal.position
        if grid.is_wall(*position):
            raise OverlappingPlacement(
                description.level_id, f"goal placed inside a wall at {position}"
            )
        if position in goal_cells:
            raise OverlappingPlacement(
                description.level_id, f"two goals share position {position}"
            )
        goal_cells.add(position)

    return WorldState(
        grid=grid,
        agent=Agent(
            position=description.agent.position, kind_id=description.agent.kind_id
        ),
        blocks=[
            Block(block_id=index, position=block.position, kind_id=block.kind_id)
            for index, block in enumerate(description.blocks)
        ],
        goals=[
            Goal(goal_id=index, position=goal.position, kind_id=goal.kind_id)
            for index, goal in enumerate(description.goals)
        ],
        current_level_id=description.level_id,
        next_level_id=description.next_level_id,
    )


def _load_json(level_id: str, path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ResourceUnavailable(level_id, f"missing level file: {path}") from exc
    except UnicodeDecodeError as exc:
        raise ResourceUnavailable(level_id, f"level file {path} is not UTF-8") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ResourceUnavailable(level_id, f"invalid JSON in {path}") from exc
    if not isinstance(data, dict):
        raise ResourceUnavailable(level_id, f"level file {path} is not an object")
    return data


def _load_map_lines(level_id: str, path: Path) -> list[str]:
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise ResourceUnavailable(level_id, f"missing map file: {path}") from exc
    except UnicodeDecodeError as exc:
        raise ResourceUnavailable(level_id, f"map file {path} is not UTF-8") from exc
