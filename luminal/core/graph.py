"""Layered puzzle graph generation.

A pattern is a list of nodes ordered top to bottom: a start node, ``complexity - 1``
intermediate nodes spread over evenly spaced rows, and a goal node. Every node
links to its successor, so the start can always reach the goal; extra edges add
shortcuts and, on larger graphs, lateral side paths.
"""

from __future__ import annotations

import logging
import math
import random
import uuid
from collections import deque
from typing import Dict, List, Optional, Sequence

from luminal.core.errors import InvalidParameterError
from luminal.core.models import Difficulty, Node, NodeType

logger = logging.getLogger(__name__)

START_POSITION = (0.5, 0.1)
GOAL_POSITION = (0.5, 0.9)
GOAL_VALUE = 100
POWERUP_PROBABILITY = 0.15

VALUE_RANGES = {
    NodeType.CHECKPOINT: (20, 50),
    NodeType.OBSTACLE: (30, 60),
    NodeType.POWERUP: (40, 80),
}

SKIP_DISTANCE = 0.5
SIDE_PATH_MIN_COMPLEXITY = 5
SIDE_PATH_MAX_DY = 0.15
SIDE_PATH_MIN_DX = 0.2


def _node_id(rng: random.Random) -> str:
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def _pick_type(rng: random.Random, difficulty: Difficulty) -> NodeType:
    roll = rng.random()
    obstacle = difficulty.obstacle_probability
    if roll < obstacle:
        return NodeType.OBSTACLE
    if roll < obstacle + POWERUP_PROBABILITY:
        return NodeType.POWERUP
    return NodeType.CHECKPOINT


def generate_pattern(
    complexity: int,
    difficulty: Difficulty = Difficulty.EASY,
    rng: Optional[random.Random] = None,
) -> List[Node]:
    """Build a puzzle graph of ``complexity + 1`` nodes.

    The same seeded ``rng`` always yields the same graph, ids included.
    Raises InvalidParameterError when ``complexity`` is below 2.
    """
    if isinstance(complexity, bool) or not isinstance(complexity, int) or complexity < 2:
        raise InvalidParameterError(f"complexity must be an integer >= 2, got {complexity!r}")
    rng = rng or random.Random()
    difficulty = Difficulty(difficulty)

    # (id, x, y, type, value) before connections are known
    drafts = [(_node_id(rng), START_POSITION[0], START_POSITION[1], NodeType.START, 0)]
    for i in range(1, complexity):
        x = rng.uniform(0.2, 0.8)
        y = 0.1 + (i / complexity) * 0.7
        node_type = _pick_type(rng, difficulty)
        low, high = VALUE_RANGES[node_type]
        drafts.append((_node_id(rng), x, y, node_type, rng.randint(low, high)))
    drafts.append((_node_id(rng), GOAL_POSITION[0], GOAL_POSITION[1], NodeType.GOAL, GOAL_VALUE))

    count = len(drafts)
    nodes: List[Node] = []
    for i, (node_id, x, y, node_type, value) in enumerate(drafts):
        connections: List[str] = []
        if i < count - 1:
            connections.append(drafts[i + 1][0])

            if i < count - 2:
                nx, ny = drafts[i + 2][1], drafts[i + 2][2]
                if math.hypot(x - nx, y - ny) < SKIP_DISTANCE:
                    connections.append(drafts[i + 2][0])

            if complexity > SIDE_PATH_MIN_COMPLEXITY and i > 0:
                for j in range(i + 2, count):
                    other_id, ox, oy = drafts[j][0], drafts[j][1], drafts[j][2]
                    if (
                        abs(y - oy) < SIDE_PATH_MAX_DY
                        and abs(x - ox) > SIDE_PATH_MIN_DX
                        and other_id not in connections
                    ):
                        connections.append(other_id)

        nodes.append(
            Node(
                id=node_id,
                x=x,
                y=y,
                node_type=node_type,
                value=value,
                connections=tuple(connections),
            )
        )

    logger.debug(
        "Generated %d-node %s pattern with %d edges",
        len(nodes),
        difficulty.value,
        sum(len(n.connections) for n in nodes),
    )
    return nodes


def find_path(nodes: Sequence[Node], source_id: str, target_id: str) -> Optional[List[str]]:
    """Return one shortest list of ids leading from source to target, or None."""
    index: Dict[str, Node] = {node.id: node for node in nodes}
    if source_id not in index or target_id not in index:
        return None

    parents: Dict[str, Optional[str]] = {source_id: None}
    queue = deque([source_id])
    while queue:
        current = queue.popleft()
        if current == target_id:
            path = [current]
            while parents[path[-1]] is not None:
                path.append(parents[path[-1]])
            return list(reversed(path))
        for nxt in index[current].connections:
            if nxt in index and nxt not in parents:
                parents[nxt] = current
                queue.append(nxt)
    return None
