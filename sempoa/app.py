"""Application entry point and setup for the Sempoa learning journey."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from sempoa.core.journey import LearningJourney
from sempoa.core.levels import LevelRepository
from sempoa.core.policy import MasteryPolicy
from sempoa.storage import ProgressFile
from sempoa.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_journey(progress_file: ProgressFile, policy: MasteryPolicy) -> LearningJourney:
    """Load saved progress into a journey that uses the given policy."""
    levels = LevelRepository(gate_mixed_operation=policy.gate_mixed_operation)
    store = progress_file.load(levels)
    return LearningJourney(levels, store, policy)


def run() -> None:
    """Initialize the application, load progress, and start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Sempoa")
    app.setApplicationDisplayName("Sempoa")

    policy = MasteryPolicy.load()
    logging.info(
        "Mastery policy: %d questions at %.0f%% accuracy",
        policy.min_attempts,
        policy.mastery_ratio * 100,
    )
    progress_file = ProgressFile()
    journey = build_journey(progress_file, policy)

    window = MainWindow(journey, on_progress_changed=lambda: progress_file.save(journey.store))
    window.resize(1100, 760)
    window.show()

    exit_code = app.exec()
    progress_file.save(journey.store)
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
