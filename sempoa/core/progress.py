from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple

from sempoa.core.errors import InvalidStatistics, LevelLocked, UnknownLevel
from sempoa.core.levels import LevelRepository

if TYPE_CHECKING:
    from sempoa.core.unlock import UnlockEngine

logger = logging.getLogger(__name__)

RECORD_VERSION = 1


@dataclass(frozen=True)
class LevelStats:
    questions_completed: int = 0
    correct_answers: int = 0

    @property
    def accuracy(self) -> float:
        """Share of correct answers in [0, 1]; 0.0 before the first attempt."""
        if self.questions_completed == 0:
            return 0.0
        return self.correct_answers / self.questions_completed


@dataclass(frozen=True)
class ProgressSnapshot:
    """Read-only view of a learner's progress at one store revision."""

    revision: int
    current_level_id: Optional[str]
    levels: Mapping[str, LevelStats]
    total_score: int = 0
    current_streak: int = 0
    best_streak: int = 0

    def stats(self, level_key: str) -> LevelStats:
        try:
            return self.levels[level_key]
        except KeyError:
            raise UnknownLevel(level_key) from None


def _default_gamification() -> Dict[str, int]:
    return {"total_score": 0, "current_streak": 0, "best_streak": 0}


def _check_counts(level_key: str, questions_completed: Any, correct_answers: Any) -> Tuple[int, int]:
    for value in (questions_completed, correct_answers):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidStatistics(level_key, questions_completed, correct_answers)
    if questions_completed < 0 or correct_answers < 0 or correct_answers > questions_completed:
        raise InvalidStatistics(level_key, questions_completed, correct_answers)
    return questions_completed, correct_answers


class ProgressStore:
    """Owns a learner's per-level statistics and current level.

    This is the only object that mutates progress. Every other part of the
    engine works from ``snapshot()``. Unlock and completion flags are not
    stored here; they are recomputed from the counters on each read.
    """

    def __init__(self, levels: LevelRepository) -> None:
        self._levels = levels
        self._lock = threading.RLock()
        self._stats: Dict[str, LevelStats] = {key: LevelStats() for key in levels.keys()}
        self._current_level_id: Optional[str] = None
        self._gamification = _default_gamification()
        self._revision = 0

    @property
    def revision(self) -> int:
        """Incremented on every mutation."""
        return self._revision

    @property
    def current_level_id(self) -> Optional[str]:
        return self._current_level_id

    def get_level_stats(self, level_key: str) -> LevelStats:
        self._require_known(level_key)
        return self._stats[level_key]

    def get_gamification(self) -> Tuple[int, int, int]:
        """Return (total_score, current_streak, best_streak)."""
        g = self._gamification
        return g["total_score"], g["current_streak"], g["best_streak"]

    def record_answer(self, level_key: str, was_correct: bool) -> LevelStats:
        """Count one answered question for the level and return its new statistics."""
        self._require_known(level_key)
        with self._lock:
            current = self._stats[level_key]
            updated = LevelStats(
                questions_completed=current.questions_completed + 1,
                correct_answers=current.correct_answers + (1 if was_correct else 0),
            )
            self._stats[level_key] = updated
            g = self._gamification
            if was_correct:
                g["total_score"] += 1
                g["current_streak"] += 1
                g["best_streak"] = max(g["best_streak"], g["current_streak"])
            else:
                g["current_streak"] = 0
            self._revision += 1
        logger.debug(
            "Recorded %s answer on %s (%d/%d)",
            "correct" if was_correct else "incorrect",
            level_key,
            updated.correct_answers,
            updated.questions_completed,
        )
        return updated

    def set_current_level(self, level_key: str, engine: "UnlockEngine") -> None:
        """Select a level if ``engine`` reports it unlocked for the store's current state."""
        self._require_known(level_key)
        with self._lock:
            if not engine.unlocked(self.snapshot()).get(level_key, False):
                raise LevelLocked(level_key)
            self._current_level_id = level_key
            self._revision += 1

    def clear_current_level(self) -> None:
        with self._lock:
            self._current_level_id = None
            self._revision += 1

    def restore_level(self, level_key: str, questions_completed: int, correct_answers: int) -> None:
        """Replace a level's counters, e.g. when loading saved progress."""
        self._require_known(level_key)
        completed, correct = _check_counts(level_key, questions_completed, correct_answers)
        with self._lock:
            self._stats[level_key] = LevelStats(completed, correct)
            self._revision += 1

    def reset_level(self, level_key: str) -> None:
        """Clear progress for a single level (e.g. before restart)."""
        self._require_known(level_key)
        with self._lock:
            self._stats[level_key] = LevelStats()
            self._revision += 1

    def reset(self) -> None:
        """Clear all progress. Only called when the learner resets their journey."""
        with self._lock:
            self._stats = {key: LevelStats() for key in self._levels.keys()}
            self._current_level_id = None
            self._gamification = _default_gamification()
            self._revision += 1

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            total_score, current_streak, best_streak = self.get_gamification()
            return ProgressSnapshot(
                revision=self._revision,
                current_level_id=self._current_level_id,
                levels=MappingProxyType(dict(self._stats)),
                total_score=total_score,
                current_streak=current_streak,
                best_streak=best_streak,
            )

    def to_record(self) -> Dict[str, Any]:
        """Serializable record of the raw counters. Derived flags are never included."""
        with self._lock:
            return {
                "version": RECORD_VERSION,
                "current_level_id": self._current_level_id,
                "levels": {
                    key: {
                        "questions_completed": stats.questions_completed,
                        "correct_answers": stats.correct_answers,
                    }
                    for key, stats in self._stats.items()
                    if stats != LevelStats()
                },
                "gamification": dict(self._gamification),
            }

    @classmethod
    def from_record(cls, levels: LevelRepository, record: Mapping[str, Any]) -> "ProgressStore":
        """Build a store from ``to_record()`` output. Raises on any invalid entry."""
        if not isinstance(record, Mapping):
            raise ValueError("progress record must be a mapping")
        version = record.get("version", RECORD_VERSION)
        if isinstance(version, bool) or version != RECORD_VERSION:
            raise ValueError(f"unsupported progress record version: {version!r}")
        store = cls(levels)

        raw_levels = record.get("levels", {})
        if not isinstance(raw_levels, Mapping):
            raise ValueError("progress record 'levels' must be a mapping")
        stats: Dict[str, LevelStats] = {}
        for key, value in raw_levels.items():
            if key not in levels:
                raise UnknownLevel(key)
            if not isinstance(value, Mapping):
                raise InvalidStatistics(key, value, value)
            completed, correct = _check_counts(
                key,
                value.get("questions_completed", 0),
                value.get("correct_answers", 0),
            )
            stats[key] = LevelStats(completed, correct)

        current = record.get("current_level_id")
        if current is not None and current not in levels:
            raise UnknownLevel(current)

        gamification = _default_gamification()
        g = record.get("gamification", {})
        if not isinstance(g, Mapping):
            raise ValueError("progress record 'gamification' must be a mapping")
        for name in gamification:
            value = g.get(name, 0)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"progress record gamification '{name}' must be a non-negative integer, got {value!r}")
            gamification[name] = value

        store._stats.update(stats)
        store._current_level_id = current
        store._gamification = gamification
        return store

    def _require_known(self, level_key: str) -> None:
        if level_key not in self._levels:
            raise UnknownLevel(level_key)
