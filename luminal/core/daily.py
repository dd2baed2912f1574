"""The once-a-day challenge level."""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from luminal.core.levels import DAILY_CHALLENGE_LEVEL, Level, generate_level
from luminal.core.models import Difficulty

TITLES = (
    "Speed Run",
    "Perfect Path",
    "Time Master",
    "Combo King",
    "Flawless Victory",
)

DESCRIPTIONS = (
    "Complete without hitting obstacles",
    "Finish under target time",
    "Get max combo",
    "Score above target",
    "Collect all power-ups",
)


@dataclass(frozen=True)
class DailyChallenge:
    day: date
    title: str
    description: str
    difficulty: Difficulty
    target_score: int
    time_limit: float
    reward: int
    completed: bool = False

    def is_for(self, today: date) -> bool:
        return self.day == today

    def to_dict(self) -> dict:
        return {
            "day": self.day.isoformat(),
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "target_score": self.target_score,
            "time_limit": self.time_limit,
            "reward": self.reward,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "DailyChallenge":
        return cls(
            day=date.fromisoformat(raw["day"]),
            title=str(raw["title"]),
            description=str(raw.get("description", "")),
            difficulty=Difficulty(raw["difficulty"]),
            target_score=int(raw["target_score"]),
            time_limit=float(raw["time_limit"]),
            reward=int(raw["reward"]),
            completed=bool(raw.get("completed", False)),
        )


def generate_daily(rng: Optional[random.Random] = None, today: Optional[date] = None) -> DailyChallenge:
    rng = rng or random.Random()
    return DailyChallenge(
        day=today or date.today(),
        title=rng.choice(TITLES),
        description=rng.choice(DESCRIPTIONS),
        difficulty=rng.choice(list(Difficulty)),
        target_score=rng.randint(300, 800),
        time_limit=float(rng.randint(60, 180)),
        reward=rng.randint(50, 200),
    )


def challenge_level(challenge: DailyChallenge, rng: Optional[random.Random] = None) -> Level:
    """Build the playable level for a challenge, numbered outside the campaign."""
    level = generate_level(challenge.difficulty, DAILY_CHALLENGE_LEVEL, rng)
    return replace(
        level,
        title=challenge.title,
        description=challenge.description,
        target_score=challenge.target_score,
        time_limit=challenge.time_limit,
    )
