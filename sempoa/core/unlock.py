"""Unlock decisions derived from a progress snapshot.

A level is unlocked when it has no prerequisite, or when its prerequisite is
completed in the same snapshot. A level only counts as completed while it is
itself unlocked, so a completed level is always an unlocked one.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from sempoa.core.levels import LevelRepository
from sempoa.core.policy import MasteryPolicy
from sempoa.core.progress import LevelStats, ProgressSnapshot

logger = logging.getLogger(__name__)


def meets_mastery(stats: LevelStats, policy: MasteryPolicy) -> bool:
    """True once the counters alone cross the mastery threshold."""
    if stats.questions_completed < policy.min_attempts:
        return False
    return stats.correct_answers / stats.questions_completed >= policy.mastery_ratio


def compute_status(
    levels: LevelRepository,
    snapshot: ProgressSnapshot,
    policy: MasteryPolicy,
) -> Tuple[Mapping[str, bool], Mapping[str, bool]]:
    """Return read-only (unlocked, completed) maps keyed by level key."""
    unlocked: Dict[str, bool] = {}
    completed: Dict[str, bool] = {}
    # Registry order lists every prerequisite before the levels that depend on it.
    for level in levels.all():
        key = level.key
        if policy.unlock_all:
            is_unlocked = True
        else:
            required = levels.gate_requirements(level)
            prerequisite = levels.prerequisite_of(level)
            if prerequisite is not None:
                required = required + (prerequisite,)
            is_unlocked = all(completed[r.key] for r in required)
        unlocked[key] = is_unlocked
        completed[key] = is_unlocked and meets_mastery(snapshot.stats(key), policy)
    return MappingProxyType(unlocked), MappingProxyType(completed)


def compute_unlocked(
    levels: LevelRepository,
    snapshot: ProgressSnapshot,
    policy: MasteryPolicy,
) -> Mapping[str, bool]:
    unlocked, _ = compute_status(levels, snapshot, policy)
    return unlocked


def compute_completed(
    levels: LevelRepository,
    snapshot: ProgressSnapshot,
    policy: MasteryPolicy,
) -> Mapping[str, bool]:
    _, completed = compute_status(levels, snapshot, policy)
    return completed


class UnlockEngine:
    """Caches the unlock/completion maps for the most recent snapshot revision."""

    def __init__(self, levels: LevelRepository, policy: MasteryPolicy) -> None:
        self._levels = levels
        self._policy = policy
        self._lock = threading.Lock()
        self._cached_revision: Optional[int] = None
        self._cached: Optional[Tuple[Mapping[str, bool], Mapping[str, bool]]] = None

    @property
    def policy(self) -> MasteryPolicy:
        return self._policy

    def status(self, snapshot: ProgressSnapshot) -> Tuple[Mapping[str, bool], Mapping[str, bool]]:
        with self._lock:
            if self._cached is not None and self._cached_revision == snapshot.revision:
                return self._cached
            result = compute_status(self._levels, snapshot, self._policy)
            self._cached_revision = snapshot.revision
            self._cached = result
            return result

    def unlocked(self, snapshot: ProgressSnapshot) -> Mapping[str, bool]:
        return self.status(snapshot)[0]

    def completed(self, snapshot: ProgressSnapshot) -> Mapping[str, bool]:
        return self.status(snapshot)[1]
