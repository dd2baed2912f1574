"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from luminal.core.levels import Level
from luminal.core.progress import LevelStats, UserProgress


@dataclass
class LevelState:
    """UI state for a single level: best stats, unlock status, and selection."""

    level: Level
    unlocked: bool
    stats: Optional[LevelStats] = None
    is_current: bool = False

    @property
    def stars(self) -> int:
        return self.stats.stars if self.stats else 0

    @property
    def completed(self) -> bool:
        return self.stats is not None


def build_level_states(levels: Sequence[Level], progress: UserProgress) -> List[LevelState]:
    """Pair each level with its stats; unlocking is derived from the progress pointer."""
    return [
        LevelState(
            level=level,
            unlocked=level.is_unlocked(progress.highest_unlocked),
            stats=progress.completed_levels.get(level.number),
            is_current=level.number == progress.current_level,
        )
        for level in levels
    ]
