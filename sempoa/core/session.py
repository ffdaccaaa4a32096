from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional


@dataclass(frozen=True)
class AnswerRecord:
    """Outcome of one answered question."""

    correct: bool
    seconds: float
    answered_at: float


class PracticeSession:
    """Tracks a timed practice run on a single level.

    Each question is timed from ``start_question()`` (or from the previous
    answer) until ``answer()``. The session only measures; the level
    statistics themselves live in the progress store.
    """

    def __init__(self, level_key: str, clock: Callable[[], float] = time.time) -> None:
        """Start a session for the given level; ``clock`` returns seconds."""
        self._level_key = level_key
        self._clock = clock
        self._start_time = clock()
        self._question_started = self._start_time
        self._records: List[AnswerRecord] = []

    @property
    def level_key(self) -> str:
        return self._level_key

    @property
    def start_time(self) -> float:
        """Timestamp when the session started."""
        return self._start_time

    @property
    def records(self) -> List[AnswerRecord]:
        return list(self._records)

    @property
    def answered(self) -> int:
        return len(self._records)

    @property
    def correct(self) -> int:
        return sum(1 for r in self._records if r.correct)

    def start_question(self) -> None:
        """Restart the timer for the question now on screen."""
        self._question_started = self._clock()

    def elapsed(self) -> float:
        """Seconds spent on the current question so far."""
        return max(0.0, self._clock() - self._question_started)

    def answer(self, correct: bool) -> AnswerRecord:
        """Record the outcome of the current question and start timing the next one."""
        now = self._clock()
        record = AnswerRecord(
            correct=bool(correct),
            seconds=max(0.0, now - self._question_started),
            answered_at=now,
        )
        self._records.append(record)
        self._question_started = now
        return record

    def accuracy(self) -> float:
        """Correct answers as a percentage of answered questions."""
        if not self._records:
            return 0.0
        return self.correct / len(self._records) * 100.0

    def average_seconds(self) -> float:
        if not self._records:
            return 0.0
        return sum(r.seconds for r in self._records) / len(self._records)

    def fastest(self) -> Optional[AnswerRecord]:
        """Quickest correct answer, if any."""
        correct = [r for r in self._records if r.correct]
        if not correct:
            return None
        return min(correct, key=lambda r: r.seconds)


def format_seconds(seconds: float) -> str:
    """Format a duration as ``m:ss.t``, the way the question timer shows it."""
    seconds = max(0.0, seconds)
    minutes = int(seconds // 60)
    rest = seconds - minutes * 60
    return f"{minutes}:{rest:04.1f}"
