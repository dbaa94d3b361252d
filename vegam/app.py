"""Application entry point and setup for the Vegam typing test."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from vegam.core.config import SettingsStore
from vegam.core.results import ResultStore
from vegam.ui.typing_window import TypingWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Initialize the application and show the typing test window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Vegam")
    app.setApplicationDisplayName("Vegam")

    settings = SettingsStore()
    results = ResultStore()
    logging.info("Storing results in %s", results.file_path)

    window = TypingWindow(settings=settings, results=results)
    window.resize(1000, 600)
    window.show()
    window.setFocus()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
