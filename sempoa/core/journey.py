from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from sempoa.core.levels import Level, LevelRepository
from sempoa.core.policy import MasteryPolicy
from sempoa.core.progress import LevelStats, ProgressSnapshot, ProgressStore
from sempoa.core.stats import ProgressSummary
from sempoa.core.unlock import UnlockEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelState:
    """Derived view of one level for the presentation layer."""

    level: Level
    stats: LevelStats
    unlocked: bool
    completed: bool
    is_current: bool = False

    @property
    def key(self) -> str:
        return self.level.key


@dataclass(frozen=True)
class AnswerOutcome:
    level_key: str
    stats: LevelStats
    newly_completed: bool
    newly_unlocked: Tuple[str, ...]
    current_level_id: Optional[str]


class LearningJourney:
    """Wires the level registry, the progress store and the unlock engine together.

    All reads go through a fresh snapshot of the store, so unlock flags and
    summaries always reflect the latest recorded answer.
    """

    def __init__(
        self,
        levels: LevelRepository,
        store: ProgressStore,
        policy: Optional[MasteryPolicy] = None,
    ) -> None:
        self._policy = policy or MasteryPolicy()
        if levels.gate_mixed_operation != self._policy.gate_mixed_operation:
            raise ValueError("LevelRepository and MasteryPolicy disagree on gate_mixed_operation")
        self._levels = levels
        self._store = store
        self._engine = UnlockEngine(levels, self._policy)
        self._drop_locked_current_level()

    @property
    def levels(self) -> LevelRepository:
        return self._levels

    @property
    def store(self) -> ProgressStore:
        return self._store

    @property
    def policy(self) -> MasteryPolicy:
        return self._policy

    def snapshot(self) -> ProgressSnapshot:
        return self._store.snapshot()

    def unlocked(self) -> Mapping[str, bool]:
        return self._engine.unlocked(self._store.snapshot())

    def completed(self) -> Mapping[str, bool]:
        return self._engine.completed(self._store.snapshot())

    def is_unlocked(self, level_key: str) -> bool:
        self._levels.get(level_key)
        return self.unlocked()[level_key]

    def is_completed(self, level_key: str) -> bool:
        self._levels.get(level_key)
        return self.completed()[level_key]

    def can_select(self, level_key: str) -> bool:
        return level_key in self._levels and self.unlocked()[level_key]

    def select_level(self, level_key: str) -> Level:
        level = self._levels.get(level_key)
        self._store.set_current_level(level_key, self._engine)
        logger.info("Selected level %s", level_key)
        return level

    def current_level(self) -> Optional[Level]:
        key = self._store.current_level_id
        if key is None:
            return None
        return self._levels.get(key)

    def next_target(self) -> Optional[Level]:
        """First unlocked level that is not completed yet, in curriculum order."""
        unlocked, completed = self._engine.status(self._store.snapshot())
        for level in self._levels.all():
            if unlocked[level.key] and not completed[level.key]:
                return level
        return None

    def record_answer(self, level_key: str, was_correct: bool) -> AnswerOutcome:
        """Record an answer; moves the current level forward when it becomes completed."""
        before_unlocked, before_completed = self._engine.status(self._store.snapshot())
        stats = self._store.record_answer(level_key, was_correct)
        unlocked, completed = self._engine.status(self._store.snapshot())

        newly_completed = completed[level_key] and not before_completed[level_key]
        newly_unlocked = tuple(
            level.key
            for level in self._levels.all()
            if unlocked[level.key] and not before_unlocked[level.key]
        )
        if newly_completed:
            logger.info("Level %s completed (%d/%d correct)", level_key, stats.correct_answers, stats.questions_completed)
            if self._store.current_level_id == level_key:
                self._advance_from(self._levels.get(level_key), unlocked)
        for key in newly_unlocked:
            logger.info("Unlocked level %s", key)
        self._retarget_locked_current_level()

        return AnswerOutcome(
            level_key=level_key,
            stats=stats,
            newly_completed=newly_completed,
            newly_unlocked=newly_unlocked,
            current_level_id=self._store.current_level_id,
        )

    def level_states(self) -> List[LevelState]:
        snapshot = self._store.snapshot()
        unlocked, completed = self._engine.status(snapshot)
        return [
            LevelState(
                level=level,
                stats=snapshot.stats(level.key),
                unlocked=unlocked[level.key],
                completed=completed[level.key],
                is_current=level.key == snapshot.current_level_id,
            )
            for level in self._levels.all()
        ]

    def summary(self) -> ProgressSummary:
        return ProgressSummary(self._levels, self.completed())

    def restart_level(self, level_key: str) -> None:
        """Clear one level's statistics; levels after it lock again until it is re-mastered."""
        self._store.reset_level(level_key)
        self._drop_locked_current_level()

    def reset(self) -> None:
        self._store.reset()

    def _advance_from(self, level: Level, unlocked: Mapping[str, bool]) -> None:
        following = self._levels.next_level(level)
        if following is None:
            logger.info("Finished the %s curriculum", level.operation.value)
            self._store.clear_current_level()
        elif unlocked[following.key]:
            self._store.set_current_level(following.key, self._engine)

    def _drop_locked_current_level(self) -> None:
        key = self._store.current_level_id
        if key is None:
            return
        if not self.unlocked()[key]:
            logger.warning("Current level %s is locked; clearing selection", key)
            self._store.clear_current_level()

    def _retarget_locked_current_level(self) -> None:
        """Move a current level that lost its unlock back to the next target."""
        key = self._store.current_level_id
        if key is None or self.unlocked()[key]:
            return
        target = self.next_target()
        if target is None:
            logger.warning("Current level %s is locked; clearing selection", key)
            self._store.clear_current_level()
        else:
            logger.warning("Current level %s is locked again; moving to %s", key, target.key)
            self._store.set_current_level(target.key, self._engine)
