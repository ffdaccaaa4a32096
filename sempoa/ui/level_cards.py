"""Learning journey widgets: level buttons, section headers and the progress card."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from sempoa.ui.colors import JourneyColors, blend_hex, progress_color
from sempoa.ui.models import LevelButtonModel, SectionHeaderModel


class LevelButton(QPushButton):
    """A level row: digit range title, status badge and accuracy."""

    def __init__(
        self,
        model: LevelButtonModel,
        *,
        on_click: Callable[[str], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._on_click = on_click
        self._key = ""
        self.setObjectName("levelButton")
        self.setCursor(Qt.PointingHandCursor)
        self.clicked.connect(self._handle_click)
        self.set_model(model)

    def set_model(self, model: LevelButtonModel) -> None:
        self._key = model.key
        text = f"{model.badge}  {model.title}" if model.badge else model.title
        if model.detail:
            text = f"{text}    {model.detail}"
        self.setText(text)
        self.setToolTip(model.tooltip)
        self.setEnabled(model.enabled)

        if model.completed:
            bg, fg = blend_hex(JourneyColors.SUCCESS, "#FFFFFF", 0.82), JourneyColors.SUCCESS
        elif model.is_current:
            bg, fg = blend_hex(JourneyColors.CURRENT, "#FFFFFF", 0.75), JourneyColors.TEXT_PRIMARY
        elif model.enabled:
            bg, fg = "#FFFFFF", JourneyColors.TEXT_PRIMARY
        else:
            bg, fg = blend_hex(JourneyColors.LOCKED, "#FFFFFF", 0.8), JourneyColors.TEXT_MUTED
        border = JourneyColors.CURRENT if model.is_current else "rgba(0, 0, 0, 0.08)"
        self.setStyleSheet(
            f"""
            QPushButton#levelButton {{
                text-align: left;
                padding: 6px 10px;
                border-radius: 8px;
                border: 1px solid {border};
                background: {bg};
                color: {fg};
                font-size: 13px;
            }}
            QPushButton#levelButton:hover {{
                background: {blend_hex(bg, JourneyColors.PRIMARY_LIGHT, 0.15)};
            }}
            """
        )

    def _handle_click(self) -> None:
        if self.isEnabled() and self._key:
            self._on_click(self._key)


class SectionHeader(QWidget):
    """Clickable section title with a `completed/total` counter and a thin progress bar."""

    def __init__(
        self,
        model: SectionHeaderModel,
        *,
        on_toggle: Optional[Callable[[], None]] = None,
        bold: bool = False,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._on_toggle = on_toggle
        self.setCursor(Qt.PointingHandCursor if on_toggle else Qt.ArrowCursor)

        self._title = QLabel("")
        self._count = QLabel("")
        self._count.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        weight = 800 if bold else 600
        self._title.setStyleSheet(f"color: {JourneyColors.TEXT_PRIMARY}; font-weight: {weight};")
        self._count.setStyleSheet(f"color: {JourneyColors.TEXT_SECONDARY}; font-size: 11px;")

        self._bar = QProgressBar()
        self._bar.setTextVisible(False)
        self._bar.setFixedHeight(4)
        self._bar.setRange(0, 100)

        row = QHBoxLayout()
        row.setContentsMargins(0, 0, 0, 0)
        row.addWidget(self._title, 1)
        row.addWidget(self._count, 0)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 4, 0, 2)
        layout.setSpacing(3)
        layout.addLayout(row)
        layout.addWidget(self._bar)

        self.set_model(model)

    def set_model(self, model: SectionHeaderModel) -> None:
        self._title.setText(model.title)
        self._count.setText(model.progress_text)
        self._bar.setValue(model.percentage)
        self._bar.setAccessibleName(f"{model.title} progress: {model.percentage}%")
        self._bar.setStyleSheet(
            f"""
            QProgressBar {{ border: none; border-radius: 2px; background: {JourneyColors.SECTION_TRACK}; }}
            QProgressBar::chunk {{ border-radius: 2px; background: {progress_color(model.percentage / 100.0)}; }}
            """
        )

    def mousePressEvent(self, event) -> None:
        if self._on_toggle is not None:
            self._on_toggle()
        super().mousePressEvent(event)


class ProgressCard(QWidget):
    """Overall completion percentage and score."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("progressCard")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        title = QLabel("Progress")
        title.setStyleSheet(f"color: {JourneyColors.PRIMARY_DARK}; font-weight: 700;")
        self._percent = QLabel("0%")
        self._percent.setStyleSheet(f"color: {JourneyColors.PRIMARY}; font-size: 24px; font-family: monospace;")
        self._bar = QProgressBar()
        self._bar.setTextVisible(False)
        self._bar.setFixedHeight(8)
        self._bar.setRange(0, 100)
        self._score = QLabel("Score: 0")
        self._score.setStyleSheet(f"color: {JourneyColors.PRIMARY}; font-size: 12px;")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(14, 12, 14, 12)
        layout.setSpacing(6)
        layout.addWidget(title)
        layout.addWidget(self._percent)
        layout.addWidget(self._bar)
        layout.addWidget(self._score)

        self.setStyleSheet(
            f"""
            QWidget#progressCard {{ background: {JourneyColors.PROGRESS_CARD_BG}; border-radius: 10px; }}
            QProgressBar {{ border: none; border-radius: 4px; background: {JourneyColors.PROGRESS_TRACK}; }}
            QProgressBar::chunk {{ border-radius: 4px; background: {JourneyColors.PROGRESS_FILL}; }}
            """
        )

    def set_progress(self, percentage: float, total_score: int, best_streak: int) -> None:
        rounded = int(round(percentage))
        self._percent.setText(f"{rounded}%")
        self._bar.setValue(rounded)
        self._bar.setAccessibleName(f"Progress: {rounded}%")
        self._score.setText(f"Score: {total_score}    Best streak: {best_streak}")
