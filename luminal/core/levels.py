from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from luminal.core.errors import InvalidArgumentError
from luminal.core.graph import find_path, generate_pattern
from luminal.core.models import Difficulty, Node, NodeType

DAILY_CHALLENGE_LEVEL = 999

_QUICK_PLAY_TITLES = {
    Difficulty.EASY: "Training",
    Difficulty.MEDIUM: "Challenge",
    Difficulty.HARD: "Trial",
    Difficulty.EXPERT: "Mastery",
}

_QUICK_PLAY_DESCRIPTIONS = {
    Difficulty.EASY: "Great start for beginners",
    Difficulty.MEDIUM: "Test your skills",
    Difficulty.HARD: "For experienced players only",
    Difficulty.EXPERT: "Extreme challenge",
}


@dataclass(frozen=True)
class Level:
    number: int
    title: str
    description: str
    difficulty: Difficulty
    target_score: int
    time_limit: Optional[float]
    nodes: Tuple[Node, ...]
    _index: Dict[str, Node] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "_index", {node.id: node for node in self.nodes})

    def node(self, node_id: str) -> Node:
        """Look up a node of this level, raising InvalidArgumentError if it is foreign."""
        try:
            return self._index[node_id]
        except KeyError:
            raise InvalidArgumentError(
                f"node {node_id!r} is not part of level {self.number}"
            ) from None

    def has_node(self, node_id: str) -> bool:
        return node_id in self._index

    @property
    def start_node(self) -> Node:
        return next(n for n in self.nodes if n.node_type is NodeType.START)

    @property
    def goal_node(self) -> Node:
        return next(n for n in self.nodes if n.node_type is NodeType.GOAL)

    @property
    def has_time_limit(self) -> bool:
        return self.time_limit is not None

    def is_unlocked(self, highest_unlocked: int) -> bool:
        return self.number <= highest_unlocked


def generate_level(
    difficulty: Difficulty,
    number: int = 1,
    rng: Optional[random.Random] = None,
) -> Level:
    """Build a quick-play level sized by the difficulty's parameter table."""
    difficulty = Difficulty(difficulty)
    time_limit, complexity, target_score = difficulty.parameters
    return Level(
        number=number,
        title=f"{_QUICK_PLAY_TITLES[difficulty]} {number}",
        description=_QUICK_PLAY_DESCRIPTIONS[difficulty],
        difficulty=difficulty,
        target_score=target_score,
        time_limit=time_limit,
        nodes=tuple(generate_pattern(complexity, difficulty, rng)),
    )


def default_catalog(rng: Optional[random.Random] = None) -> List[Level]:
    """Return the 20-level campaign: a tutorial followed by four tiers of five."""
    rng = rng or random.Random()
    levels = [
        Level(
            number=1,
            title="First Contact",
            description="Begin your journey into the Luminal Dimension",
            difficulty=Difficulty.EASY,
            target_score=100,
            time_limit=None,
            nodes=tuple(generate_pattern(3, Difficulty.EASY, rng)),
        )
    ]

    # (first, last, difficulty, title, description, complexity offset, target step, time limit)
    tiers = [
        (2, 5, Difficulty.EASY, "Gateway", "Navigate through the dimensional gateways", 3, 100, 120.0),
        (6, 10, Difficulty.MEDIUM, "Nexus", "Master the dimensional nexus points", 5, 150, 90.0),
        (11, 15, Difficulty.HARD, "Rift", "Challenge the dimensional rifts", 8, 200, 60.0),
        (16, 20, Difficulty.EXPERT, "Singularity", "Face the ultimate dimensional challenge", 12, 300, 45.0),
    ]
    for first, last, difficulty, title, description, offset, step, time_limit in tiers:
        for number in range(first, last + 1):
            levels.append(
                Level(
                    number=number,
                    title=f"{title} {number - first + 1}",
                    description=description,
                    difficulty=difficulty,
                    target_score=step * number,
                    time_limit=time_limit,
                    nodes=tuple(generate_pattern(offset + number, difficulty, rng)),
                )
            )
    return levels


def level_to_dict(level: Level) -> dict:
    return {
        "number": level.number,
        "title": level.title,
        "description": level.description,
        "difficulty": level.difficulty.value,
        "target_score": level.target_score,
        "time_limit": level.time_limit,
        "nodes": [node.to_dict() for node in level.nodes],
    }


def check_playable(level: Level) -> None:
    """Raise ValueError unless the level's graph can be won from its start node."""
    ids = [node.id for node in level.nodes]
    if len(set(ids)) != len(ids):
        raise ValueError(f"level {level.number} has duplicate node ids")
    for node_type in (NodeType.START, NodeType.GOAL):
        count = sum(1 for node in level.nodes if node.node_type is node_type)
        if count != 1:
            raise ValueError(f"level {level.number} has {count} {node_type.value} nodes, expected 1")
    known = set(ids)
    for node in level.nodes:
        dangling = [c for c in node.connections if c not in known]
        if dangling:
            raise ValueError(f"level {level.number}: node {node.id!r} connects to unknown {dangling[0]!r}")
    if find_path(level.nodes, level.start_node.id, level.goal_node.id) is None:
        raise ValueError(f"level {level.number} has no path from start to goal")


def level_from_dict(raw: dict) -> Level:
    """Rebuild a stored level, rejecting graphs that cannot be played."""
    time_limit = raw.get("time_limit")
    level = Level(
        number=int(raw["number"]),
        title=str(raw.get("title", "")),
        description=str(raw.get("description", "")),
        difficulty=Difficulty(raw["difficulty"]),
        target_score=int(raw["target_score"]),
        time_limit=float(time_limit) if time_limit is not None else None,
        nodes=tuple(Node.from_dict(n) for n in raw.get("nodes", [])),
    )
    check_playable(level)
    return level
