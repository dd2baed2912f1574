from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional

import yaml

DEFAULT_ACHIEVEMENTS_PATH = Path(__file__).resolve().parent.parent / "data" / "achievements.yaml"


class RequirementKind(str, Enum):
    COMPLETE_LEVELS = "complete_levels"
    REACH_SCORE = "reach_score"
    COMPLETE_IN_TIME = "complete_in_time"
    PERFECT_STREAK = "perfect_streak"
    PLAY_DAYS = "play_days"


@dataclass(frozen=True)
class Requirement:
    kind: RequirementKind
    amount: float

    def describe(self) -> str:
        amount = int(self.amount)
        if self.kind is RequirementKind.COMPLETE_LEVELS:
            return f"Complete {amount} levels"
        if self.kind is RequirementKind.REACH_SCORE:
            return f"Reach a total score of {amount}"
        if self.kind is RequirementKind.COMPLETE_IN_TIME:
            return f"Complete a level in under {amount} seconds"
        if self.kind is RequirementKind.PERFECT_STREAK:
            return f"Get {amount} perfect scores in a row"
        return f"Play for {amount} consecutive days"


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    requirement: Requirement


def load_achievements(path: Optional[Path] = None) -> List[Achievement]:
    """Read the achievement catalog from YAML, validating every entry."""
    path = path or DEFAULT_ACHIEVEMENTS_PATH
    if not path.exists():
        raise FileNotFoundError(f"Achievement catalog not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, list):
        raise ValueError(f"{path.name}: expected a YAML list of achievements")

    achievements: List[Achievement] = []
    seen = set()
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValueError(f"{path.name}: entry {position} is not a mapping")
        achievement_id = entry.get("id")
        title = entry.get("title")
        if not achievement_id or not isinstance(achievement_id, str):
            raise ValueError(f"{path.name}: entry {position} has missing or invalid 'id'")
        if achievement_id in seen:
            raise ValueError(f"{path.name}: duplicate id '{achievement_id}'")
        if not title or not isinstance(title, str):
            raise ValueError(f"{path.name}: '{achievement_id}' has missing or invalid 'title'")

        requirement = entry.get("requirement")
        if not isinstance(requirement, dict):
            raise ValueError(f"{path.name}: '{achievement_id}' is missing 'requirement'")
        try:
            kind = RequirementKind(requirement.get("kind"))
        except ValueError:
            raise ValueError(
                f"{path.name}: '{achievement_id}' has unknown requirement kind {requirement.get('kind')!r}"
            ) from None
        amount = requirement.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
            raise ValueError(f"{path.name}: '{achievement_id}' needs a positive 'amount'")

        rule = Requirement(kind=kind, amount=amount)
        achievements.append(
            Achievement(
                id=achievement_id,
                title=title.strip(),
                description=str(entry.get("description") or rule.describe()).strip(),
                icon=str(entry.get("icon", "star")),
                requirement=rule,
            )
        )
        seen.add(achievement_id)
    return achievements
