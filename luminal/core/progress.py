from __future__ import annotations

import copy
import json
import logging
import random
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

from luminal.core.achievements import Achievement, load_achievements
from luminal.core.daily import DailyChallenge, generate_daily
from luminal.core.levels import Level, default_catalog, level_from_dict, level_to_dict
from luminal.core.themes import Theme, load_themes

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 100


@dataclass
class LevelStats:
    level_number: int
    best_score: int
    best_time: float
    attempts: int = 1
    stars: int = 0
    completed_date: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "level_number": self.level_number,
            "best_score": self.best_score,
            "best_time": self.best_time,
            "attempts": self.attempts,
            "stars": self.stars,
            "completed_date": self.completed_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "LevelStats":
        return cls(
            level_number=int(raw["level_number"]),
            best_score=int(raw.get("best_score", 0)),
            best_time=float(raw.get("best_time", 0.0)),
            attempts=int(raw.get("attempts", 1)),
            stars=int(raw.get("stars", 0)),
            completed_date=_parse_datetime(raw.get("completed_date")) or datetime.now(),
        )


@dataclass
class UserProgress:
    current_level: int = 1
    highest_unlocked: int = 1
    total_score: int = 0
    completed_levels: Dict[int, LevelStats] = field(default_factory=dict)
    achievements: Dict[str, datetime] = field(default_factory=dict)
    games_played: int = 0
    total_play_time: float = 0.0
    last_played: Optional[datetime] = None

    @property
    def completed_count(self) -> int:
        return len(self.completed_levels)

    @property
    def perfect_count(self) -> int:
        """Number of levels finished with three stars."""
        return sum(1 for stats in self.completed_levels.values() if stats.stars == 3)

    @property
    def fastest_time(self) -> Optional[float]:
        if not self.completed_levels:
            return None
        return min(stats.best_time for stats in self.completed_levels.values())

    def has_achievement(self, achievement_id: str) -> bool:
        return achievement_id in self.achievements

    def copy(self) -> "UserProgress":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        return {
            "current_level": self.current_level,
            "highest_unlocked": self.highest_unlocked,
            "total_score": self.total_score,
            "completed_levels": {
                str(number): stats.to_dict() for number, stats in self.completed_levels.items()
            },
            "achievements": {key: when.isoformat() for key, when in self.achievements.items()},
            "games_played": self.games_played,
            "total_play_time": self.total_play_time,
            "last_played": self.last_played.isoformat() if self.last_played else None,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "UserProgress":
        completed = {
            int(number): LevelStats.from_dict(value)
            for number, value in raw.get("completed_levels", {}).items()
        }
        achievements = {}
        for key, when in raw.get("achievements", {}).items():
            achievements[str(key)] = _parse_datetime(when) or datetime.now()
        return cls(
            current_level=int(raw.get("current_level", 1)),
            highest_unlocked=int(raw.get("highest_unlocked", 1)),
            total_score=int(raw.get("total_score", 0)),
            completed_levels=completed,
            achievements=achievements,
            games_played=int(raw.get("games_played", 0)),
            total_play_time=float(raw.get("total_play_time", 0.0)),
            last_played=_parse_datetime(raw.get("last_played")),
        )


@dataclass(frozen=True)
class LeaderboardEntry:
    player_name: str
    score: int
    level: int
    difficulty: str
    date: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "player_name": self.player_name,
            "score": self.score,
            "level": self.level,
            "difficulty": self.difficulty,
            "date": self.date.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "LeaderboardEntry":
        return cls(
            player_name=str(raw.get("player_name", "Player")),
            score=int(raw["score"]),
            level=int(raw.get("level", 0)),
            difficulty=str(raw.get("difficulty", "")),
            date=_parse_datetime(raw.get("date")) or datetime.now(),
        )


def _parse_datetime(value) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


class ProgressStore:
    """Keeps progress, the level catalog, coins, leaderboard, themes and the daily
    challenge in one JSON file (default ~/.luminal/progress.json).

    Every mutation rewrites the whole file; the last writer wins. Anything that
    cannot be read back falls back to its default instead of failing.
    """

    def __init__(
        self,
        file_path: Optional[Path] = None,
        achievements: Optional[List[Achievement]] = None,
        themes: Optional[List[Theme]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._file_path = file_path or Path.home() / ".luminal" / "progress.json"
        self._achievements = list(achievements) if achievements is not None else load_achievements()
        self._themes = list(themes) if themes is not None else load_themes()
        self._rng = rng or random.Random()
        self._payload = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    # -- user progress -------------------------------------------------------

    def load(self) -> UserProgress:
        raw = self._payload.get("progress")
        if not isinstance(raw, dict):
            return UserProgress()
        try:
            return UserProgress.from_dict(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Discarding unreadable progress in %s: %s", self._file_path, e)
            return UserProgress()

    def save(self, progress: UserProgress) -> None:
        self._payload["progress"] = progress.to_dict()
        self._save()

    def reset_progress(self) -> None:
        self._payload.pop("progress", None)
        self._save()

    # -- level catalog -------------------------------------------------------

    def load_level_catalog(self) -> List[Level]:
        """Return the saved campaign, generating and saving a fresh one if needed."""
        raw = self._payload.get("catalog")
        if isinstance(raw, list) and raw:
            try:
                return [level_from_dict(item) for item in raw]
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Regenerating unreadable level catalog in %s: %s", self._file_path, e)
        levels = default_catalog(self._rng)
        self.save_level_catalog(levels)
        return levels

    def save_level_catalog(self, levels: List[Level]) -> None:
        self._payload["catalog"] = [level_to_dict(level) for level in levels]
        self._save()

    # -- coins ---------------------------------------------------------------

    def get_coins(self) -> int:
        try:
            return max(0, int(self._payload.get("coins", 0)))
        except (TypeError, ValueError):
            return 0

    def add_coins(self, amount: int) -> None:
        self._payload["coins"] = self.get_coins() + amount
        self._save()

    def spend_coins(self, amount: int) -> bool:
        current = self.get_coins()
        if current < amount:
            return False
        self._payload["coins"] = current - amount
        self._save()
        return True

    # -- achievements --------------------------------------------------------

    def achievements(self) -> List[Achievement]:
        """The static achievement catalog."""
        return list(self._achievements)

    # -- leaderboard ---------------------------------------------------------

    def get_leaderboard(self) -> List[LeaderboardEntry]:
        entries: List[LeaderboardEntry] = []
        for raw in self._payload.get("leaderboard", []) or []:
            try:
                entries.append(LeaderboardEntry.from_dict(raw))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping unreadable leaderboard entry: %s", e)
        return sorted(entries, key=lambda entry: entry.score, reverse=True)

    def add_leaderboard_entry(self, entry: LeaderboardEntry) -> None:
        entries = self.get_leaderboard()
        entries.append(entry)
        entries.sort(key=lambda item: item.score, reverse=True)
        self._payload["leaderboard"] = [item.to_dict() for item in entries[:LEADERBOARD_SIZE]]
        self._save()

    # -- themes --------------------------------------------------------------

    def themes(self) -> List[Theme]:
        return list(self._themes)

    def purchased_themes(self) -> List[str]:
        stored = self._payload.get("themes", {})
        purchased = stored.get("purchased", []) if isinstance(stored, dict) else []
        names = {theme.name for theme in self._themes if theme.is_free}
        names.update(str(name) for name in purchased)
        return [theme.name for theme in self._themes if theme.name in names]

    def purchase_theme(self, name: str) -> bool:
        """Buy a theme with coins; True if the theme is owned afterwards."""
        theme = self._find_theme(name)
        if theme is None:
            return False
        if theme.name in self.purchased_themes():
            return True
        if not self.spend_coins(theme.price):
            return False
        themes = self._theme_section()
        themes["purchased"] = sorted(set(themes.get("purchased", [])) | {theme.name})
        self._save()
        logger.info("Purchased theme %s for %d coins", theme.name, theme.price)
        return True

    def selected_theme(self) -> Theme:
        selected = self._theme_section().get("selected")
        if selected in self.purchased_themes():
            theme = self._find_theme(selected)
            if theme is not None:
                return theme
        return self._themes[0]

    def select_theme(self, name: str) -> bool:
        if name not in self.purchased_themes():
            return False
        self._theme_section()["selected"] = name
        self._save()
        return True

    def _find_theme(self, name: str) -> Optional[Theme]:
        return next((theme for theme in self._themes if theme.name == name), None)

    def _theme_section(self) -> dict:
        section = self._payload.get("themes")
        if not isinstance(section, dict):
            section = {}
            self._payload["themes"] = section
        return section

    # -- daily challenge -----------------------------------------------------

    def get_daily_challenge(self, today: Optional[date] = None) -> DailyChallenge:
        """Today's challenge, generating a new one once the stored one is stale."""
        today = today or date.today()
        raw = self._payload.get("daily")
        if isinstance(raw, dict):
            try:
                challenge = DailyChallenge.from_dict(raw)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Discarding unreadable daily challenge: %s", e)
            else:
                if challenge.is_for(today):
                    return challenge
        challenge = generate_daily(self._rng, today)
        self._payload["daily"] = challenge.to_dict()
        self._save()
        return challenge

    def complete_daily_challenge(self, today: Optional[date] = None) -> int:
        """Mark today's challenge done and credit its reward; returns coins credited."""
        challenge = self.get_daily_challenge(today)
        if challenge.completed:
            return 0
        self._payload["daily"] = dict(challenge.to_dict(), completed=True)
        self._payload["coins"] = self.get_coins() + challenge.reward
        self._save()
        return challenge.reward

    # -- housekeeping --------------------------------------------------------

    def reset(self) -> None:
        """Clear everything except the level catalog."""
        catalog = self._payload.get("catalog")
        self._payload = {}
        if catalog is not None:
            self._payload["catalog"] = catalog
        self._save()

    def _load(self) -> dict:
        if not self._file_path.exists():
            return {}
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (ValueError, OSError) as e:
            # ValueError covers both JSONDecodeError and UnicodeDecodeError
            logger.warning("Could not load progress from %s: %s", self._file_path, e)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring progress in %s: expected a JSON object", self._file_path)
            return {}
        return payload

    def _save(self) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(self._payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self._file_path, e)
