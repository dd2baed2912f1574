"""Turns finished sessions into persistent progress, coins and achievements."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, NamedTuple, Optional, Sequence

from luminal.core.achievements import Achievement, Requirement, RequirementKind
from luminal.core.levels import DAILY_CHALLENGE_LEVEL, Level
from luminal.core.progress import LeaderboardEntry, LevelStats, ProgressStore, UserProgress
from luminal.core.session import Outcome

logger = logging.getLogger(__name__)

COINS_PER_STAR = 25
SCORE_PER_COIN = 10


class AppliedOutcome(NamedTuple):
    progress: UserProgress
    coins_earned: int
    unlocked: List[Achievement]


def coins_for(score: int, stars: int) -> int:
    return stars * COINS_PER_STAR + score // SCORE_PER_COIN


def is_satisfied(requirement: Requirement, progress: UserProgress) -> bool:
    kind = requirement.kind
    if kind is RequirementKind.COMPLETE_LEVELS:
        return progress.completed_count >= requirement.amount
    if kind is RequirementKind.REACH_SCORE:
        return progress.total_score >= requirement.amount
    if kind is RequirementKind.COMPLETE_IN_TIME:
        fastest = progress.fastest_time
        return fastest is not None and fastest <= requirement.amount
    if kind is RequirementKind.PERFECT_STREAK:
        return progress.perfect_count >= requirement.amount
    # consecutive days are approximated by games played
    return progress.games_played >= requirement.amount


def evaluate_achievements(
    progress: UserProgress,
    achievements: Sequence[Achievement],
    now: Optional[datetime] = None,
) -> List[Achievement]:
    """Unlock every satisfied achievement not unlocked yet; returns the new ones."""
    now = now or datetime.now()
    unlocked = []
    for achievement in achievements:
        if progress.has_achievement(achievement.id):
            continue
        if is_satisfied(achievement.requirement, progress):
            progress.achievements[achievement.id] = now
            unlocked.append(achievement)
    return unlocked


def _merge_stats(existing: Optional[LevelStats], level: Level, outcome: Outcome, now: datetime) -> LevelStats:
    if existing is None:
        return LevelStats(
            level_number=level.number,
            best_score=outcome.score,
            best_time=outcome.elapsed,
            attempts=1,
            stars=outcome.stars,
            completed_date=now,
        )
    return LevelStats(
        level_number=level.number,
        best_score=max(existing.best_score, outcome.score),
        best_time=min(existing.best_time, outcome.elapsed),
        attempts=existing.attempts + 1,
        stars=max(existing.stars, outcome.stars),
        completed_date=now,
    )


def apply_outcome(
    level: Level,
    outcome: Outcome,
    progress: UserProgress,
    achievements: Sequence[Achievement] = (),
    now: Optional[datetime] = None,
) -> AppliedOutcome:
    """Fold a finished session into a copy of ``progress``.

    Victories on campaign levels update the level's best stats, unlock the next
    level and earn coins. The daily challenge level only counts towards totals.
    Defeats only count as a game played.
    """
    now = now or datetime.now()
    updated = progress.copy()
    updated.games_played += 1
    updated.total_play_time += outcome.elapsed
    updated.last_played = now

    if not outcome.is_victory:
        return AppliedOutcome(updated, 0, [])

    updated.total_score += outcome.score
    coins = 0
    if level.number != DAILY_CHALLENGE_LEVEL:
        updated.completed_levels[level.number] = _merge_stats(
            updated.completed_levels.get(level.number), level, outcome, now
        )
        if level.number >= updated.highest_unlocked:
            updated.highest_unlocked = level.number + 1
        updated.current_level = level.number + 1
        coins = coins_for(outcome.score, outcome.stars)

    unlocked = evaluate_achievements(updated, achievements, now)
    return AppliedOutcome(updated, coins, unlocked)


class ProgressionUpdater:
    """Runs the load, apply and save cycle against a progress store."""

    def __init__(self, store: ProgressStore, player_name: str = "Player") -> None:
        self._store = store
        self._player_name = player_name

    def record(
        self,
        level: Level,
        outcome: Outcome,
        now: Optional[datetime] = None,
        today: Optional[date] = None,
    ) -> AppliedOutcome:
        applied = apply_outcome(level, outcome, self._store.load(), self._store.achievements(), now)
        self._store.save(applied.progress)

        if not outcome.is_victory:
            logger.info("Level %d lost: %s", level.number, outcome.reason or "defeat")
            return applied

        if level.number == DAILY_CHALLENGE_LEVEL:
            applied = applied._replace(coins_earned=self._store.complete_daily_challenge(today))
        elif applied.coins_earned:
            self._store.add_coins(applied.coins_earned)

        self._store.add_leaderboard_entry(
            LeaderboardEntry(
                player_name=self._player_name,
                score=outcome.score,
                level=level.number,
                difficulty=level.difficulty.label,
                date=now or datetime.now(),
            )
        )
        for achievement in applied.unlocked:
            logger.info("Achievement unlocked: %s", achievement.title)
        logger.info(
            "Level %d won with %d points, %d stars, %d coins",
            level.number,
            outcome.score,
            outcome.stars,
            applied.coins_earned,
        )
        return applied
