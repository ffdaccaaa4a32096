from __future__ import annotations

import logging
from typing import Callable, Optional, Set

from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from sempoa.core.curriculum import ComplementTechnique, Operation, complement_section_label
from sempoa.core.errors import LevelLocked
from sempoa.core.journey import LearningJourney
from sempoa.core.session import PracticeSession, format_seconds
from sempoa.ui.colors import JourneyColors
from sempoa.ui.level_cards import LevelButton, ProgressCard, SectionHeader
from sempoa.ui.models import LevelButtonModel, SectionHeaderModel

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Learning journey on the left, practice panel on the right.

    Answers are self-reported: the learner works the question on a physical
    abacus and marks it correct or missed. Every change is passed to
    ``on_progress_changed`` so the caller can save it.
    """

    def __init__(
        self,
        journey: LearningJourney,
        on_progress_changed: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__()
        self._journey = journey
        self._on_progress_changed = on_progress_changed
        self._session: Optional[PracticeSession] = None
        self._expanded: Set[str] = set()

        self.setWindowTitle("Sempoa Learning Journey")

        self._journey_layout = QVBoxLayout()
        self._journey_layout.setContentsMargins(12, 12, 12, 12)
        self._journey_layout.setSpacing(6)
        journey_container = QWidget()
        journey_container.setLayout(self._journey_layout)
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(journey_container)
        scroll.setMinimumWidth(360)

        self._progress_card = ProgressCard()
        self._level_title = QLabel("")
        self._level_title.setWordWrap(True)
        self._level_title.setStyleSheet(f"color: {JourneyColors.TEXT_PRIMARY}; font-size: 18px; font-weight: 700;")
        self._level_range = QLabel("")
        self._level_range.setStyleSheet(f"color: {JourneyColors.TEXT_SECONDARY};")
        self._timer_label = QLabel("0:00.0")
        self._timer_label.setStyleSheet(f"color: {JourneyColors.PRIMARY}; font-size: 28px; font-family: monospace;")
        self._session_label = QLabel("")
        self._session_label.setStyleSheet(f"color: {JourneyColors.TEXT_SECONDARY};")
        self._feedback_label = QLabel("")
        self._feedback_label.setWordWrap(True)

        self._correct_button = QPushButton("✓ Correct")
        self._missed_button = QPushButton("✗ Missed")
        self._correct_button.clicked.connect(lambda: self._record_answer(True))
        self._missed_button.clicked.connect(lambda: self._record_answer(False))
        answer_row = QHBoxLayout()
        answer_row.addWidget(self._correct_button)
        answer_row.addWidget(self._missed_button)

        reset_button = QPushButton("Reset progress")
        reset_button.clicked.connect(self._confirm_reset)

        side = QVBoxLayout()
        side.setContentsMargins(16, 16, 16, 16)
        side.setSpacing(10)
        side.addWidget(self._progress_card)
        side.addWidget(self._level_title)
        side.addWidget(self._level_range)
        side.addWidget(self._timer_label, 0, Qt.AlignHCenter)
        side.addLayout(answer_row)
        side.addWidget(self._session_label)
        side.addWidget(self._feedback_label)
        side.addStretch(1)
        side.addWidget(reset_button)
        side_widget = QWidget()
        side_widget.setLayout(side)

        root = QHBoxLayout()
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(scroll, 3)
        root.addWidget(side_widget, 2)
        central = QWidget()
        central.setLayout(root)
        central.setStyleSheet(
            f"background: qlineargradient(x1:0, y1:0, x2:0, y2:1, "
            f"stop:0 {JourneyColors.BG_TOP}, stop:1 {JourneyColors.BG_BOTTOM});"
        )
        self.setCentralWidget(central)

        self._tick = QTimer(self)
        self._tick.setInterval(100)
        self._tick.timeout.connect(self._update_timer)
        self._tick.start()

        current = self._journey.current_level() or self._journey.next_target()
        if current is not None:
            self._expanded.update({current.operation.value, f"{current.operation.value}-{current.complement.value}"})
            if self._journey.current_level() is None:
                self._journey.select_level(current.key)
            self._start_session(current.key)
        self._refresh()

    def _refresh(self) -> None:
        """Rebuild the journey tree and the practice panel from the engine's current views."""
        while self._journey_layout.count():
            item = self._journey_layout.takeAt(0)
            w = item.widget()
            if w is not None:
                w.setParent(None)
                w.deleteLater()

        summary = self._journey.summary()
        states = {state.key: state for state in self._journey.level_states()}
        policy = self._journey.policy

        for operation in Operation:
            op_key = operation.value
            header = SectionHeader(
                SectionHeaderModel.from_progress(
                    f"{operation.icon} {operation.label}", summary.operation_progress(operation)
                ),
                on_toggle=lambda k=op_key: self._toggle(k),
                bold=True,
            )
            self._journey_layout.addWidget(header)
            if op_key not in self._expanded:
                continue
            for complement in ComplementTechnique:
                section_key = f"{op_key}-{complement.value}"
                section = SectionHeader(
                    SectionHeaderModel.from_progress(
                        complement_section_label(complement, operation),
                        summary.section_progress(operation, complement),
                    ),
                    on_toggle=lambda k=section_key: self._toggle(k),
                )
                section.setContentsMargins(16, 0, 0, 0)
                self._journey_layout.addWidget(section)
                if section_key not in self._expanded:
                    continue
                for level in self._journey.levels.section(operation, complement):
                    button = LevelButton(
                        LevelButtonModel.from_state(states[level.key], policy),
                        on_click=self._select_level,
                    )
                    button.setContentsMargins(32, 0, 0, 0)
                    self._journey_layout.addWidget(button)
        self._journey_layout.addStretch(1)

        snapshot = self._journey.snapshot()
        self._progress_card.set_progress(summary.overall_percentage(), snapshot.total_score, snapshot.best_streak)

        level = self._journey.current_level()
        has_level = level is not None
        self._correct_button.setEnabled(has_level)
        self._missed_button.setEnabled(has_level)
        if level is None:
            self._level_title.setText("All levels completed!" if summary.completed_count else "Pick a level")
            self._level_range.setText("")
        else:
            low, high = level.number_range
            self._level_title.setText(
                f"{level.operation.label} · {complement_section_label(level.complement, level.operation)} · {level.name}"
            )
            self._level_range.setText(f"Numbers from {low} to {high}")
        self._update_session_label()

    def _toggle(self, section_key: str) -> None:
        if section_key in self._expanded:
            self._expanded.discard(section_key)
        else:
            self._expanded.add(section_key)
        # Defer so the clicked header is not deleted inside its own event handler.
        QTimer.singleShot(0, self._refresh)

    def _select_level(self, level_key: str) -> None:
        try:
            self._journey.select_level(level_key)
        except LevelLocked:
            self._feedback_label.setText("That level is still locked.")
            return
        self._start_session(level_key)
        self._feedback_label.setText("")
        self._changed()

    def _start_session(self, level_key: str) -> None:
        self._session = PracticeSession(level_key)

    def _record_answer(self, correct: bool) -> None:
        level = self._journey.current_level()
        if level is None:
            return
        if self._session is None or self._session.level_key != level.key:
            self._start_session(level.key)
        record = self._session.answer(correct)
        outcome = self._journey.record_answer(level.key, correct)

        message = f"{'Correct' if correct else 'Missed'} in {format_seconds(record.seconds)}"
        if outcome.newly_completed:
            message = f"Level completed! {message}"
            if outcome.current_level_id is not None:
                self._start_session(outcome.current_level_id)
                nxt = self._journey.levels.get(outcome.current_level_id)
                self._expanded.update({nxt.operation.value, f"{nxt.operation.value}-{nxt.complement.value}"})
        self._feedback_label.setText(message)
        self._changed()

    def _confirm_reset(self) -> None:
        answer = QMessageBox.question(self, "Reset progress", "Clear all progress and start again?")
        if answer != QMessageBox.StandardButton.Yes:
            return
        self._journey.reset()
        self._session = None
        self._feedback_label.setText("")
        logger.info("Progress reset by user")
        self._changed()

    def _changed(self) -> None:
        if self._on_progress_changed is not None:
            self._on_progress_changed()
        QTimer.singleShot(0, self._refresh)

    def _update_timer(self) -> None:
        if self._session is None:
            self._timer_label.setText(format_seconds(0.0))
            return
        self._timer_label.setText(format_seconds(self._session.elapsed()))

    def _update_session_label(self) -> None:
        s = self._session
        if s is None or not s.answered:
            self._session_label.setText("")
            return
        self._session_label.setText(
            f"This session: {s.correct}/{s.answered} correct ({s.accuracy():.0f}%), "
            f"average {format_seconds(s.average_seconds())}"
        )
