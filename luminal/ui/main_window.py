from __future__ import annotations

import logging
import random
from typing import Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from luminal.core.daily import challenge_level
from luminal.core.levels import Level, generate_level
from luminal.core.models import Difficulty
from luminal.core.progress import ProgressStore
from luminal.core.progression import ProgressionUpdater
from luminal.core.session import Outcome, SessionState, TapResult, TraversalSession
from luminal.core.settings import Settings
from luminal.ui.board import Point, PuzzleBoardWidget
from luminal.ui.colors import palette_for
from luminal.ui.models import build_level_states

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class MainWindow(QMainWindow):
    def __init__(self, progress_store: ProgressStore, settings: Settings) -> None:
        super().__init__()
        self._store = progress_store
        self._settings = settings
        self._rng = random.Random(settings.seed)
        self._session = TraversalSession()
        self._updater = ProgressionUpdater(progress_store, player_name=settings.player_name)
        self._levels = progress_store.load_level_catalog()

        self._timer = QTimer(self)
        self._timer.setInterval(TICK_INTERVAL_MS)
        self._timer.timeout.connect(self._on_tick)

        self.setWindowTitle("Luminal Quest")
        self._build_ui()
        self._apply_theme()
        self._refresh_home()

    def _build_ui(self) -> None:
        self._pages = QStackedWidget()
        self.setCentralWidget(self._pages)

        # Home
        home = QWidget()
        home_layout = QVBoxLayout(home)
        self._summary = QLabel("")
        self._summary.setObjectName("summary")
        home_layout.addWidget(self._summary)

        self._level_list = QListWidget()
        self._level_list.itemActivated.connect(self._on_level_activated)
        home_layout.addWidget(self._level_list, 1)

        quick_row = QHBoxLayout()
        for difficulty in Difficulty:
            button = QPushButton(f"Quick {difficulty.label}")
            button.clicked.connect(lambda _=False, d=difficulty: self._start_quick_play(d))
            quick_row.addWidget(button)
        home_layout.addLayout(quick_row)

        self._daily_button = QPushButton("")
        self._daily_button.clicked.connect(self._start_daily)
        home_layout.addWidget(self._daily_button)

        self._leaderboard = QLabel("")
        self._leaderboard.setWordWrap(True)
        home_layout.addWidget(self._leaderboard)
        self._pages.addWidget(home)

        # Game
        game = QWidget()
        game_layout = QVBoxLayout(game)
        hud = QHBoxLayout()
        self._title_label = QLabel("")
        self._score_label = QLabel("")
        self._combo_label = QLabel("")
        self._time_label = QLabel("")
        for label in (self._title_label, self._score_label, self._combo_label, self._time_label):
            hud.addWidget(label)
        game_layout.addLayout(hud)

        self._board = PuzzleBoardWidget(on_node_tapped=self._on_node_tapped, on_swipe=self._on_swipe)
        game_layout.addWidget(self._board, 1)

        controls = QHBoxLayout()
        self._pause_button = QPushButton("Pause")
        self._pause_button.clicked.connect(self._toggle_pause)
        restart_button = QPushButton("Restart")
        restart_button.clicked.connect(self._restart)
        exit_button = QPushButton("Exit")
        exit_button.clicked.connect(self._exit_game)
        for button in (self._pause_button, restart_button, exit_button):
            controls.addWidget(button)
        game_layout.addLayout(controls)
        self._pages.addWidget(game)

    def _apply_theme(self) -> None:
        palette = palette_for(self._store.selected_theme())
        self._board.set_palette(palette)
        self.setStyleSheet(
            f"""
            QMainWindow, QWidget {{ background: {palette.background}; color: {palette.text}; }}
            QPushButton {{
                background: {palette.surface};
                border: 1px solid {palette.accent};
                border-radius: 8px;
                padding: 8px 14px;
            }}
            QListWidget {{ background: {palette.surface}; border-radius: 8px; }}
            QLabel#summary {{ font-size: 16px; font-weight: 700; }}
            """
        )

    # -- home ----------------------------------------------------------------

    def _refresh_home(self) -> None:
        progress = self._store.load()
        self._summary.setText(
            f"Score {progress.total_score}  •  Coins {self._store.get_coins()}  •  "
            f"Achievements {len(progress.achievements)}/{len(self._store.achievements())}"
        )

        self._level_list.clear()
        for state in build_level_states(self._levels, progress):
            stars = "★" * state.stars + "☆" * (3 - state.stars)
            lock = "" if state.unlocked else "🔒 "
            item = QListWidgetItem(
                f"{lock}{state.level.number}. {state.level.title}  [{state.level.difficulty.label}]  {stars}"
            )
            item.setData(Qt.UserRole, state.level.number)
            if not state.unlocked:
                item.setFlags(item.flags() & ~Qt.ItemIsEnabled)
            self._level_list.addItem(item)
            if state.is_current:
                self._level_list.setCurrentItem(item)

        challenge = self._store.get_daily_challenge()
        status = "done" if challenge.completed else f"{challenge.reward} coins"
        self._daily_button.setText(f"Daily: {challenge.title} ({challenge.difficulty.label}, {status})")

        top = self._store.get_leaderboard()[:5]
        self._leaderboard.setText(
            "Top scores: " + ", ".join(f"{e.score} (L{e.level})" for e in top) if top else "No scores yet"
        )

    def _on_level_activated(self, item: QListWidgetItem) -> None:
        number = item.data(Qt.UserRole)
        level = next((lv for lv in self._levels if lv.number == number), None)
        if level is not None:
            self._start_level(level)

    def _start_quick_play(self, difficulty: Difficulty) -> None:
        self._start_level(generate_level(difficulty, self._store.load().current_level, self._rng))

    def _start_daily(self) -> None:
        self._start_level(challenge_level(self._store.get_daily_challenge(), self._rng))

    # -- game ----------------------------------------------------------------

    def _start_level(self, level: Level) -> None:
        self._session.start(level)
        self._board.set_level(level)
        self._title_label.setText(f"{level.title} • target {level.target_score}")
        self._pause_button.setText("Pause")
        self._pages.setCurrentIndex(1)
        if level.has_time_limit:
            self._timer.start()
        self._refresh_hud()

    def _refresh_hud(self) -> None:
        self._score_label.setText(f"Score {self._session.score}")
        self._combo_label.setText(f"Combo x{self._session.combo}")
        remaining = self._session.time_remaining
        self._time_label.setText(f"{int(remaining)}s" if remaining is not None else "∞")
        self._board.set_path(self._session.path)

    def _on_node_tapped(self, node_id: str) -> None:
        result = self._session.tap_node(node_id)
        if result is TapResult.REJECTED:
            self._board.flash_invalid()
        self._after_input()

    def _on_swipe(self, start: Point, end: Point) -> None:
        self._session.swipe(start, end)
        self._after_input()

    def _on_tick(self) -> None:
        self._session.tick(TICK_INTERVAL_MS / 1000)
        self._after_input()

    def _after_input(self) -> None:
        self._refresh_hud()
        if self._session.state is SessionState.FINISHED and self._session.outcome is not None:
            self._finish(self._session.outcome)

    def _finish(self, outcome: Outcome) -> None:
        self._timer.stop()
        level = self._session.level
        if level is None:
            return
        applied = self._updater.record(level, outcome)
        if outcome.is_victory:
            text = (
                f"Score {outcome.score} in {outcome.elapsed:.0f}s\n"
                f"{'★' * outcome.stars}{'☆' * (3 - outcome.stars)}\n"
                f"+{applied.coins_earned} coins"
            )
            if applied.unlocked:
                text += "\nUnlocked: " + ", ".join(a.title for a in applied.unlocked)
            QMessageBox.information(self, "Victory", text)
        else:
            QMessageBox.information(self, "Defeat", f"{outcome.reason}\nScore {outcome.score}")
        self._exit_game()

    def _toggle_pause(self) -> None:
        if self._session.state is SessionState.ACTIVE:
            self._session.pause()
            self._timer.stop()
            self._pause_button.setText("Resume")
        elif self._session.state is SessionState.PAUSED:
            self._session.resume()
            if self._session.time_remaining is not None:
                self._timer.start()
            self._pause_button.setText("Pause")

    def _restart(self) -> None:
        level: Optional[Level] = self._session.level
        if level is not None:
            self._timer.stop()
            self._start_level(level)

    def _exit_game(self) -> None:
        self._timer.stop()
        self._session.exit()
        self._board.set_level(None)
        self._pages.setCurrentIndex(0)
        self._refresh_home()

    def closeEvent(self, event: QCloseEvent) -> None:
        self._timer.stop()
        self._session.exit()
        super().closeEvent(event)
