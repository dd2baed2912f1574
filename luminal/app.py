"""Application entry point and setup for Luminal Quest."""

import logging
import random
import sys

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from luminal.core.progress import ProgressStore
from luminal.core.settings import load_settings, save_settings
from luminal.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Load settings and progress, then open the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Luminal Quest")
    app.setApplicationDisplayName("Luminal Quest")

    settings = load_settings()
    if not settings.settings_file.exists():
        save_settings(settings)
    progress_store = ProgressStore(settings.progress_file, rng=random.Random(settings.seed))
    logging.info("Using data directory %s", settings.data_dir)

    window = MainWindow(progress_store=progress_store, settings=settings)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.resize(min(900, geometry.width()), min(1000, geometry.height()))
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
