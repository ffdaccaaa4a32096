from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Tuple

from sempoa.core.curriculum import ComplementTechnique, Operation
from sempoa.core.errors import UnknownLevel
from sempoa.core.levels import Level, LevelRepository


@dataclass(frozen=True)
class LevelProgress:
    completed: bool


@dataclass(frozen=True)
class SectionProgress:
    completed: int
    total: int

    @property
    def percentage(self) -> float:
        """Completed share in [0, 100]; 0.0 for an empty section."""
        if self.total == 0:
            return 0.0
        return self.completed / self.total * 100.0


class ProgressSummary:
    """Completion counts for a level, a complement section, an operation, or the whole curriculum.

    Built from the completion map of one snapshot and never updated; build a
    new summary after the store changes.
    """

    def __init__(self, levels: LevelRepository, completed: Mapping[str, bool]) -> None:
        self._levels = levels
        self._completed = completed

    def level_progress(self, level_key: str) -> LevelProgress:
        if level_key not in self._levels:
            raise UnknownLevel(level_key)
        return LevelProgress(completed=bool(self._completed[level_key]))

    def section_progress(self, operation: Operation, complement: ComplementTechnique) -> SectionProgress:
        return self._count(self._levels.section(operation, complement))

    def operation_progress(self, operation: Operation) -> SectionProgress:
        return self._count(self._levels.for_operation(operation))

    @property
    def completed_count(self) -> int:
        return sum(1 for level in self._levels.all() if self._completed[level.key])

    @property
    def total_count(self) -> int:
        return len(self._levels)

    def overall_percentage(self) -> float:
        """Unrounded percentage of completed levels across the curriculum."""
        if self.total_count == 0:
            return 0.0
        return self.completed_count / self.total_count * 100.0

    def _count(self, levels: Tuple[Level, ...]) -> SectionProgress:
        done = sum(1 for level in levels if self._completed[level.key])
        return SectionProgress(completed=done, total=len(levels))
