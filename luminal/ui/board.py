"""Puzzle board: paints a level's graph and turns mouse input into taps and swipes."""

from __future__ import annotations

import math
from typing import Callable, List, Optional, Tuple

from PySide6.QtCore import QPointF, Qt, QTimer
from PySide6.QtGui import QBrush, QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from luminal.core.levels import Level
from luminal.core.models import Node, NodeType
from luminal.ui.colors import NODE_COLORS, BoardColors, ThemePalette

Point = Tuple[float, float]

_NODE_ICONS = {
    NodeType.START: "▶",
    NodeType.GOAL: "★",
    NodeType.POWERUP: "⚡",
    NodeType.OBSTACLE: "✖",
}


class PuzzleBoardWidget(QWidget):
    """Draws nodes at their normalized positions scaled to the widget size.

    A press and release on the same node is a tap; any other drag is reported
    as a swipe in widget pixels.
    """

    TAP_SLOP = 12.0

    def __init__(
        self,
        *,
        on_node_tapped: Callable[[str], None],
        on_swipe: Callable[[Point, Point], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._on_node_tapped = on_node_tapped
        self._on_swipe = on_swipe
        self._level: Optional[Level] = None
        self._path: List[str] = []
        self._palette: Optional[ThemePalette] = None
        self._press_pos: Optional[QPointF] = None
        self._flash = False
        self.setMinimumSize(320, 420)
        self.setCursor(Qt.PointingHandCursor)

    def set_level(self, level: Optional[Level]) -> None:
        self._level = level
        self._path = []
        self.update()

    def set_path(self, path: List[str]) -> None:
        self._path = list(path)
        self.update()

    def set_palette(self, palette: ThemePalette) -> None:
        self._palette = palette
        self.update()

    def flash_invalid(self, duration_ms: int = 200) -> None:
        self._flash = True
        self.update()
        QTimer.singleShot(duration_ms, self._clear_flash)

    def _clear_flash(self) -> None:
        self._flash = False
        self.update()

    def _radius(self) -> float:
        return max(14.0, min(self.width(), self.height()) * 0.045)

    def _to_pixels(self, node: Node) -> QPointF:
        margin = self._radius() * 1.5
        width = max(1.0, self.width() - 2 * margin)
        height = max(1.0, self.height() - 2 * margin)
        return QPointF(margin + node.x * width, margin + node.y * height)

    def node_at(self, pos: QPointF) -> Optional[Node]:
        if self._level is None:
            return None
        radius = self._radius()
        for node in self._level.nodes:
            center = self._to_pixels(node)
            if math.hypot(center.x() - pos.x(), center.y() - pos.y()) <= radius:
                return node
        return None

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self._press_pos = event.position()
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        if event.button() != Qt.LeftButton or self._press_pos is None:
            super().mouseReleaseEvent(event)
            return
        start, end = self._press_pos, event.position()
        self._press_pos = None
        moved = math.hypot(end.x() - start.x(), end.y() - start.y())
        pressed = self.node_at(start)
        if pressed is not None and moved <= self.TAP_SLOP:
            self._on_node_tapped(pressed.id)
        elif moved > self.TAP_SLOP:
            self._on_swipe((start.x(), start.y()), (end.x(), end.y()))
        super().mouseReleaseEvent(event)

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)

        background = self._palette.background if self._palette else BoardColors.BACKGROUND
        edge_color = self._palette.edge if self._palette else BoardColors.EDGE
        active_color = self._palette.edge_active if self._palette else BoardColors.EDGE_ACTIVE
        painter.fillRect(self.rect(), QColor(BoardColors.INVALID_FLASH if self._flash else background))
        if self._level is None:
            return

        visited = set(self._path)
        walked = set(zip(self._path, self._path[1:]))
        for node in self._level.nodes:
            origin = self._to_pixels(node)
            for target_id in node.connections:
                if not self._level.has_node(target_id):
                    continue
                active = (node.id, target_id) in walked
                painter.setPen(QPen(QColor(active_color if active else edge_color), 4 if active else 2))
                painter.drawLine(origin, self._to_pixels(self._level.node(target_id)))

        radius = self._radius()
        last = self._path[-1] if self._path else None
        for node in self._level.nodes:
            center = self._to_pixels(node)
            fill = QColor(NODE_COLORS[node.node_type])
            if node.id not in visited:
                fill.setAlpha(170)
            border = QColor(BoardColors.TEXT_PRIMARY if node.id == last else fill.darker(140))
            painter.setPen(QPen(border, 3 if node.id == last else 1.5))
            painter.setBrush(QBrush(fill))
            painter.drawEllipse(center, radius, radius)

            painter.setPen(QColor(BoardColors.TEXT_PRIMARY))
            font = painter.font()
            font.setPointSize(max(8, int(radius * 0.55)))
            font.setBold(True)
            painter.setFont(font)
            label = _NODE_ICONS.get(node.node_type, str(node.value))
            painter.drawText(
                int(center.x() - radius),
                int(center.y() - radius),
                int(radius * 2),
                int(radius * 2),
                Qt.AlignCenter,
                label,
            )
