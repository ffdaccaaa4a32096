"""Errors raised by the progression engine."""

from __future__ import annotations


class SempoaError(Exception):
    """Base class for progression engine errors."""


class UnknownLevel(SempoaError, KeyError):
    """A level key that the curriculum does not define was used."""

    def __init__(self, level_key: object) -> None:
        super().__init__(level_key)
        self.level_key = level_key

    def __str__(self) -> str:
        return f"Unknown level: {self.level_key!r}"


class LevelLocked(SempoaError):
    """The selected level has not been unlocked yet."""

    def __init__(self, level_key: str) -> None:
        super().__init__(level_key)
        self.level_key = level_key

    def __str__(self) -> str:
        return f"Level is locked: {self.level_key}"


class InvalidStatistics(SempoaError, ValueError):
    """Level statistics would break 0 <= correct_answers <= questions_completed."""

    def __init__(self, level_key: str, questions_completed: int, correct_answers: int) -> None:
        super().__init__(level_key, questions_completed, correct_answers)
        self.level_key = level_key
        self.questions_completed = questions_completed
        self.correct_answers = correct_answers

    def __str__(self) -> str:
        return (
            f"{self.level_key}: invalid statistics "
            f"(questions_completed={self.questions_completed}, correct_answers={self.correct_answers})"
        )
