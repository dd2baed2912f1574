"""Board palettes and color utilities for the UI."""

from __future__ import annotations

from dataclasses import dataclass

from luminal.core.models import NodeType
from luminal.core.themes import Theme


class BoardColors:
    """Fallback palette (the free Midnight theme)."""

    BACKGROUND = "#1D1F30"
    ACCENT = "#FE284A"

    TEXT_PRIMARY = "#FFFFFF"
    TEXT_MUTED = "#8A8FA8"

    EDGE = "#3A3E5C"
    EDGE_ACTIVE = "#FE284A"
    INVALID_FLASH = "#FF1744"


NODE_COLORS = {
    NodeType.START: "#4CAF50",
    NodeType.CHECKPOINT: "#29B6F6",
    NodeType.OBSTACLE: "#EF5350",
    NodeType.GOAL: "#FFD60A",
    NodeType.POWERUP: "#AB47BC",
}


@dataclass(frozen=True)
class ThemePalette:
    background: str
    surface: str
    accent: str
    edge: str
    edge_active: str
    text: str
    text_muted: str


def palette_for(theme: Theme) -> ThemePalette:
    """Derive the full board palette from a theme's two base colors."""
    return ThemePalette(
        background=theme.background,
        surface=blend_hex(theme.background, "#FFFFFF", 0.08),
        accent=theme.accent,
        edge=blend_hex(theme.background, "#FFFFFF", 0.22),
        edge_active=theme.accent,
        text=BoardColors.TEXT_PRIMARY,
        text_muted=blend_hex(theme.background, "#FFFFFF", 0.55),
    )


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    a = a.strip()
    b = b.strip()
    if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
        return a
    try:
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
    except ValueError:
        return a
    t = max(0.0, min(1.0, float(t)))
    r = int(ar + (br - ar) * t)
    g = int(ag + (bg - ag) * t)
    bl = int(ab + (bb - ab) * t)
    return f"#{r:02X}{g:02X}{bl:02X}"
