from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from sempoa.core.curriculum import ComplementTechnique, DigitLevel, Operation
from sempoa.core.errors import UnknownLevel

KEY_SEPARATOR = "-"


def level_key(operation: Operation, complement: ComplementTechnique, digit: DigitLevel) -> str:
    """Stable key for a level, e.g. ``addition-smallFriend-double``."""
    return KEY_SEPARATOR.join((operation.value, complement.value, digit.value))


def parse_level_key(key: str) -> Tuple[Operation, ComplementTechnique, DigitLevel]:
    """Rebuild the (operation, complement, digit) triple from a level key."""
    if not isinstance(key, str):
        raise UnknownLevel(key)
    parts = key.split(KEY_SEPARATOR)
    if len(parts) != 3:
        raise UnknownLevel(key)
    try:
        return Operation(parts[0]), ComplementTechnique(parts[1]), DigitLevel(parts[2])
    except ValueError:
        raise UnknownLevel(key) from None


@dataclass(frozen=True)
class Level:
    operation: Operation
    complement: ComplementTechnique
    digit: DigitLevel

    @property
    def key(self) -> str:
        return level_key(self.operation, self.complement, self.digit)

    @property
    def name(self) -> str:
        return self.digit.label

    @property
    def number_range(self) -> Tuple[int, int]:
        return self.digit.number_range

    @property
    def is_entry_point(self) -> bool:
        return self.complement is ComplementTechnique.first() and self.digit is DigitLevel.first()

    @property
    def is_final(self) -> bool:
        """Last level of its operation's chain."""
        return self.complement is ComplementTechnique.last() and self.digit is DigitLevel.last()

    @classmethod
    def from_key(cls, key: str) -> "Level":
        return cls(*parse_level_key(key))


class LevelRepository:
    """The full curriculum: one level per (operation, complement, digit).

    Within an operation the levels form a single chain, digits inner and
    complements outer, so each level's prerequisite is the one listed just
    before it. Operations are independent chains unless ``gate_mixed_operation``
    is set, in which case the mixed chain waits for the end of both the
    addition and subtraction chains.
    """

    def __init__(self, gate_mixed_operation: bool = False) -> None:
        self._gate_mixed_operation = gate_mixed_operation
        self._levels = self._build_levels()

    @property
    def gate_mixed_operation(self) -> bool:
        return self._gate_mixed_operation

    @staticmethod
    def build_levels() -> Tuple[Level, ...]:
        """Cross-product of the three axes, operation outer and digit inner."""
        return tuple(
            Level(operation, complement, digit)
            for operation in Operation
            for complement in ComplementTechnique
            for digit in DigitLevel
        )

    def all(self) -> Tuple[Level, ...]:
        return tuple(self._levels.values())

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._levels)

    def get(self, key: str) -> Level:
        try:
            return self._levels[key]
        except (KeyError, TypeError):
            raise UnknownLevel(key) from None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in self._levels

    def __len__(self) -> int:
        return len(self._levels)

    def prerequisite_of(self, level: Level) -> Optional[Level]:
        """Level that must be completed before ``level`` unlocks, None for entry points."""
        previous_digit = level.digit.previous()
        if previous_digit is not None:
            return self._levels[level_key(level.operation, level.complement, previous_digit)]
        previous_complement = level.complement.previous()
        if previous_complement is not None:
            return self._levels[level_key(level.operation, previous_complement, DigitLevel.last())]
        return None

    def next_level(self, level: Level) -> Optional[Level]:
        """Level whose prerequisite is ``level``, None at the end of a chain."""
        next_digit = level.digit.next()
        if next_digit is not None:
            return self._levels[level_key(level.operation, level.complement, next_digit)]
        next_complement = level.complement.next()
        if next_complement is not None:
            return self._levels[level_key(level.operation, next_complement, DigitLevel.first())]
        return None

    def gate_requirements(self, level: Level) -> Tuple[Level, ...]:
        """Cross-operation levels that must also be completed; empty unless the mixed gate is on."""
        if not (self._gate_mixed_operation and level.operation is Operation.MIXED and level.is_entry_point):
            return ()
        return tuple(
            self._levels[level_key(op, ComplementTechnique.last(), DigitLevel.last())]
            for op in Operation
            if op is not Operation.MIXED
        )

    def entry_points(self) -> Tuple[Level, ...]:
        return tuple(level for level in self._levels.values() if level.is_entry_point)

    def section(self, operation: Operation, complement: ComplementTechnique) -> Tuple[Level, ...]:
        return tuple(
            level
            for level in self._levels.values()
            if level.operation is operation and level.complement is complement
        )

    def for_operation(self, operation: Operation) -> Tuple[Level, ...]:
        return tuple(level for level in self._levels.values() if level.operation is operation)

    def _build_levels(self) -> Dict[str, Level]:
        levels: Dict[str, Level] = {}
        for level in self.build_levels():
            if level.key in levels:
                raise ValueError(f"Duplicate level key: {level.key}")
            levels[level.key] = level
        return levels
