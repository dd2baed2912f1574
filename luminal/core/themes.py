from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import yaml

DEFAULT_THEMES_PATH = Path(__file__).resolve().parent.parent / "data" / "themes.yaml"

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class Theme:
    name: str
    background: str
    accent: str
    price: int
    icon: str = "palette"

    @property
    def is_free(self) -> bool:
        return self.price <= 0


def load_themes(path: Optional[Path] = None) -> List[Theme]:
    path = path or DEFAULT_THEMES_PATH
    if not path.exists():
        raise FileNotFoundError(f"Theme catalog not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, list):
        raise ValueError(f"{path.name}: expected a YAML list of themes")

    themes: List[Theme] = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ValueError(f"{path.name}: entry {position} is not a mapping")
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise ValueError(f"{path.name}: entry {position} has missing or invalid 'name'")
        for key in ("background", "accent"):
            if not _HEX_COLOR.match(str(entry.get(key, ""))):
                raise ValueError(f"{path.name}: theme '{name}' has invalid '{key}' color")
        themes.append(
            Theme(
                name=name.strip(),
                background=str(entry["background"]).upper(),
                accent=str(entry["accent"]).upper(),
                price=int(entry.get("price", 0)),
                icon=str(entry.get("icon", "palette")),
            )
        )
    return themes
