"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sempoa.core.curriculum import complement_section_label
from sempoa.core.journey import LevelState
from sempoa.core.policy import MasteryPolicy
from sempoa.core.stats import SectionProgress


@dataclass
class LevelButtonModel:
    """Display data for one level button: text, badge and whether it can be clicked."""

    key: str
    title: str
    badge: str
    detail: str
    tooltip: str
    enabled: bool
    completed: bool
    is_current: bool

    @classmethod
    def from_state(cls, state: LevelState, policy: Optional[MasteryPolicy] = None) -> "LevelButtonModel":
        policy = policy or MasteryPolicy()
        stats = state.stats
        low, high = state.level.number_range
        title = state.level.name
        if state.completed:
            badge = "✓"
        elif not state.unlocked:
            badge = "\U0001f512"
        elif state.is_current:
            badge = "▶"
        else:
            badge = ""

        if stats.questions_completed:
            detail = f"{stats.correct_answers}/{stats.questions_completed} · {stats.accuracy * 100:.0f}%"
        else:
            detail = ""

        if not state.unlocked:
            tooltip = f"{title} ({low}–{high})\nLocked"
        else:
            remaining = max(0, policy.min_attempts - stats.questions_completed)
            tooltip = (
                f"{title} ({low}–{high})\n"
                f"Answered: {stats.questions_completed}, correct: {stats.correct_answers}\n"
                f"Goal: {policy.mastery_ratio * 100:.0f}% over at least {policy.min_attempts} questions"
            )
            if remaining and not state.completed:
                tooltip += f" ({remaining} to go)"

        return cls(
            key=state.key,
            title=title,
            badge=badge,
            detail=detail,
            tooltip=tooltip,
            enabled=state.unlocked,
            completed=state.completed,
            is_current=state.is_current,
        )


@dataclass
class SectionHeaderModel:
    title: str
    progress_text: str
    percentage: int

    @classmethod
    def from_progress(cls, title: str, progress: SectionProgress) -> "SectionHeaderModel":
        return cls(
            title=title,
            progress_text=f"{progress.completed}/{progress.total}",
            percentage=int(round(progress.percentage)),
        )


def section_title(state: LevelState) -> str:
    return complement_section_label(state.level.complement, state.level.operation)
