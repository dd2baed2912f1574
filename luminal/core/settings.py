from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from luminal.core.models import Difficulty

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "LUMINAL_HOME"
SETTINGS_FILE = "settings.yaml"


def default_data_dir() -> Path:
    """Directory holding settings and progress; ``$LUMINAL_HOME`` wins over ~/.luminal."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".luminal"


@dataclass
class Settings:
    data_dir: Path = field(default_factory=default_data_dir)
    player_name: str = "Player"
    difficulty_preference: Difficulty = Difficulty.MEDIUM
    sound_enabled: bool = True
    haptics_enabled: bool = True
    reduced_motion: bool = False
    seed: Optional[int] = None

    @property
    def progress_file(self) -> Path:
        return self.data_dir / "progress.json"

    @property
    def settings_file(self) -> Path:
        return self.data_dir / SETTINGS_FILE


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read settings from YAML, keeping defaults for anything missing or malformed."""
    settings = Settings()
    path = path or settings.settings_file
    if not path.exists():
        return settings
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Could not load settings from %s: %s", path, e)
        return settings
    if raw is None:
        return settings
    if not isinstance(raw, dict):
        logger.warning("Ignoring settings in %s: expected a mapping", path)
        return settings

    known = {f.name for f in fields(Settings)}
    for key, value in raw.items():
        if key not in known:
            logger.warning("Unknown setting %r in %s", key, path)
            continue
        try:
            setattr(settings, key, _coerce(key, value))
        except (TypeError, ValueError) as e:
            logger.warning("Invalid value for %r in %s: %s", key, path, e)
    return settings


def save_settings(settings: Settings, path: Optional[Path] = None) -> None:
    path = path or settings.settings_file
    payload = asdict(settings)
    payload["data_dir"] = str(settings.data_dir)
    payload["difficulty_preference"] = settings.difficulty_preference.value
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    except OSError as e:
        logger.warning("Could not save settings to %s: %s", path, e)


def _coerce(key: str, value):
    if key == "data_dir":
        return Path(str(value)).expanduser()
    if key == "difficulty_preference":
        return Difficulty(str(value).lower())
    if key == "player_name":
        name = str(value).strip()
        if not name:
            raise ValueError("player_name must not be empty")
        return name
    if key == "seed":
        return None if value is None else int(value)
    if not isinstance(value, bool):
        raise TypeError(f"expected true/false, got {value!r}")
    return value
