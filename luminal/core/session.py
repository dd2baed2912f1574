from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from luminal.core.levels import Level
from luminal.core.models import Node, NodeType

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

SWIPE_MIN_DISTANCE = 50.0
SWIPE_POINTS_DIVISOR = 10
POWERUP_TIME_BONUS = 10.0
DEFEAT_TIME_UP = "Time's up!"


class SessionState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    FINISHED = "finished"


class SessionResult(str, Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"


class TapResult(str, Enum):
    """How the session handled a tap.

    ``REJECTED`` is an invalid move the player should be told about;
    ``IGNORED`` means the session was not accepting input at all.
    """

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Outcome:
    """Terminal result of a session."""

    result: SessionResult
    score: int
    elapsed: float
    stars: int = 0
    reason: Optional[str] = None

    @property
    def is_victory(self) -> bool:
        return self.result is SessionResult.VICTORY


def calculate_stars(score: int, target_score: int) -> int:
    """0-3 stars from the score-to-target ratio (1.0, 1.2 and 1.5 thresholds)."""
    if target_score <= 0:
        return 3
    ratio = score / target_score
    if ratio >= 1.5:
        return 3
    if ratio >= 1.2:
        return 2
    if ratio >= 1.0:
        return 1
    return 0


class TraversalSession:
    """Plays one level at a time: validates taps, keeps score and combo, runs the clock.

    The session never schedules anything itself. Callers feed it taps, swipes
    and ``tick`` calls from a single thread and read the state back through
    the properties. Calls made outside the state they belong to are ignored.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._state = SessionState.IDLE
        self._level: Optional[Level] = None
        self._score = 0
        self._combo = 0
        self._path: List[str] = []
        self._time_remaining: Optional[float] = None
        self._outcome: Optional[Outcome] = None
        self._started_at = 0.0
        self._paused_at: Optional[float] = None
        self._paused_total = 0.0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def level(self) -> Optional[Level]:
        return self._level

    @property
    def score(self) -> int:
        return self._score

    @property
    def combo(self) -> int:
        return self._combo

    @property
    def path(self) -> List[str]:
        """Ids of the nodes visited so far, in tap order."""
        return list(self._path)

    @property
    def time_remaining(self) -> Optional[float]:
        """Seconds left, or None when the level has no time limit."""
        return self._time_remaining

    @property
    def outcome(self) -> Optional[Outcome]:
        return self._outcome

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    @property
    def elapsed(self) -> float:
        """Play time since ``start``, excluding paused spans."""
        if self._state is SessionState.IDLE:
            return 0.0
        if self._outcome is not None:
            return self._outcome.elapsed
        now = self._paused_at if self._paused_at is not None else self._clock()
        return max(0.0, now - self._started_at - self._paused_total)

    def start(self, level: Level) -> None:
        """Begin (or restart) a level; allowed from any state."""
        self._level = level
        self._score = 0
        self._combo = 0
        self._path = []
        self._time_remaining = level.time_limit
        self._outcome = None
        self._started_at = self._clock()
        self._paused_at = None
        self._paused_total = 0.0
        self._state = SessionState.ACTIVE
        logger.info(
            "Starting level %d (%s, target %d, %d nodes)",
            level.number,
            level.difficulty.value,
            level.target_score,
            len(level.nodes),
        )

    def restart(self) -> None:
        if self._level is not None:
            self.start(self._level)

    def exit(self) -> None:
        """Abandon the current level without producing an outcome."""
        self._state = SessionState.IDLE
        self._level = None
        self._score = 0
        self._combo = 0
        self._path = []
        self._time_remaining = None
        self._outcome = None
        self._paused_at = None

    def pause(self) -> None:
        if self._state is not SessionState.ACTIVE:
            return
        self._paused_at = self._clock()
        self._state = SessionState.PAUSED

    def resume(self) -> None:
        if self._state is not SessionState.PAUSED:
            return
        if self._paused_at is not None:
            self._paused_total += self._clock() - self._paused_at
        self._paused_at = None
        self._state = SessionState.ACTIVE

    def tick(self, dt: float = 1.0) -> Optional[Outcome]:
        """Advance the level clock; returns the outcome if time ran out."""
        if self._state is not SessionState.ACTIVE or self._time_remaining is None:
            return None
        self._time_remaining = max(0.0, self._time_remaining - dt)
        if self._time_remaining <= 0:
            return self._finish(SessionResult.DEFEAT, reason=DEFEAT_TIME_UP)
        return None

    def tap_node(self, node_id: str) -> TapResult:
        """Try to extend the path with ``node_id``.

        Raises InvalidArgumentError if the node does not belong to the level
        being played.
        """
        if self._state is not SessionState.ACTIVE or self._level is None:
            return TapResult.IGNORED
        node = self._level.node(node_id)

        if not self._path:
            if node.node_type is not NodeType.START:
                return self._reject(node, "first tap must be the start node")
            self._path.append(node.id)
            return TapResult.ACCEPTED

        last = self._level.node(self._path[-1])
        if node.id in self._path:
            return self._reject(node, "already visited")
        if not last.connects_to(node.id):
            return self._reject(node, "not connected")

        self._path.append(node.id)
        self._apply(node)
        return TapResult.ACCEPTED

    def swipe(self, start: Point, end: Point) -> bool:
        """Score a long swipe; returns True when it was counted."""
        if self._state is not SessionState.ACTIVE:
            return False
        distance = math.hypot(end[0] - start[0], end[1] - start[1])
        if distance <= SWIPE_MIN_DISTANCE:
            return False
        self._score += int(distance // SWIPE_POINTS_DIVISOR)
        self._combo += 1
        return True

    def _apply(self, node: Node) -> None:
        if node.node_type is NodeType.CHECKPOINT:
            self._score += node.value * (self._combo + 1)
            self._combo += 1
        elif node.node_type is NodeType.OBSTACLE:
            self._score = max(0, self._score - node.value)
            self._combo = 0
        elif node.node_type is NodeType.POWERUP:
            self._score += node.value * 2
            self._combo += 2
            if self._time_remaining is not None:
                self._time_remaining += POWERUP_TIME_BONUS
        elif node.node_type is NodeType.GOAL:
            self._score += node.value * (self._combo + 1)
            self._finish(SessionResult.VICTORY)

    def _reject(self, node: Node, reason: str) -> TapResult:
        logger.debug("Rejected tap on %s node %s: %s", node.node_type.value, node.id, reason)
        self._combo = 0
        return TapResult.REJECTED

    def _finish(self, result: SessionResult, reason: Optional[str] = None) -> Outcome:
        elapsed = self.elapsed
        stars = 0
        if result is SessionResult.VICTORY and self._level is not None:
            stars = calculate_stars(self._score, self._level.target_score)
        self._outcome = Outcome(
            result=result,
            score=self._score,
            elapsed=elapsed,
            stars=stars,
            reason=reason,
        )
        self._state = SessionState.FINISHED
        logger.info(
            "Level %s finished: %s with %d points in %.1fs",
            self._level.number if self._level else "?",
            result.value,
            self._score,
            elapsed,
        )
        return self._outcome
