"""Puzzle graph primitives shared by the generator, levels and sessions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def obstacle_probability(self) -> float:
        """Chance that an intermediate node is drawn as an obstacle."""
        return _OBSTACLE_PROBABILITIES[self]

    @property
    def parameters(self) -> Tuple[float, int, int]:
        """Return (time_limit, complexity, target_score) for quick-play levels."""
        return _PARAMETERS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_OBSTACLE_PROBABILITIES = {
    Difficulty.EASY: 0.10,
    Difficulty.MEDIUM: 0.20,
    Difficulty.HARD: 0.30,
    Difficulty.EXPERT: 0.40,
}

_PARAMETERS = {
    Difficulty.EASY: (180.0, 5, 200),
    Difficulty.MEDIUM: (120.0, 7, 350),
    Difficulty.HARD: (90.0, 9, 500),
    Difficulty.EXPERT: (60.0, 12, 800),
}


class NodeType(str, Enum):
    START = "start"
    CHECKPOINT = "checkpoint"
    OBSTACLE = "obstacle"
    GOAL = "goal"
    POWERUP = "powerup"


@dataclass(frozen=True)
class Node:
    """A point in a puzzle graph.

    Positions are normalized to [0, 1]. ``connections`` holds the ids of the
    nodes reachable in one tap; the nodes themselves live in the owning level.
    """

    id: str
    x: float
    y: float
    node_type: NodeType
    value: int = 0
    connections: Tuple[str, ...] = ()

    def connects_to(self, node_id: str) -> bool:
        return node_id in self.connections

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "type": self.node_type.value,
            "value": self.value,
            "connections": list(self.connections),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "Node":
        return cls(
            id=str(raw["id"]),
            x=float(raw["x"]),
            y=float(raw["y"]),
            node_type=NodeType(raw["type"]),
            value=int(raw.get("value", 0)),
            connections=tuple(str(c) for c in raw.get("connections", [])),
        )
