"""Curriculum axes: operation, complement technique and digit level.

Member order on each enum is the curriculum order. Values are the string
names used in level keys and in the saved progress file.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple


class _OrderedAxis(Enum):
    """Enum whose declaration order doubles as difficulty order."""

    @property
    def order(self) -> int:
        return list(type(self)).index(self)

    def previous(self):
        """Return the member declared just before this one, or None for the first."""
        members = list(type(self))
        idx = members.index(self)
        return members[idx - 1] if idx > 0 else None

    def next(self):
        """Return the member declared just after this one, or None for the last."""
        members = list(type(self))
        idx = members.index(self)
        return members[idx + 1] if idx + 1 < len(members) else None

    @classmethod
    def first(cls):
        return next(iter(cls))

    @classmethod
    def last(cls):
        return list(cls)[-1]


class Operation(_OrderedAxis):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MIXED = "mixed"

    @property
    def label(self) -> str:
        return _OPERATION_LABELS[self]

    @property
    def icon(self) -> str:
        return _OPERATION_ICONS[self]


class ComplementTechnique(_OrderedAxis):
    NONE = "none"
    SMALL_FRIEND = "smallFriend"
    BIG_FRIEND = "bigFriend"
    FAMILY = "family"
    MIXED = "mixed"

    @property
    def label(self) -> str:
        return _COMPLEMENT_LABELS[self]


class DigitLevel(_OrderedAxis):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    FOUR = "four"
    FIVE = "five"

    @property
    def label(self) -> str:
        return _DIGIT_LABELS[self]

    @property
    def digit_count(self) -> int:
        return self.order + 1

    @property
    def number_range(self) -> Tuple[int, int]:
        """Closed operand range, e.g. (10, 99) for two digits."""
        count = self.digit_count
        low = 1 if count == 1 else 10 ** (count - 1)
        return (low, 10**count - 1)


_OPERATION_LABELS: Dict[Operation, str] = {
    Operation.ADDITION: "Addition",
    Operation.SUBTRACTION: "Subtraction",
    Operation.MIXED: "Mixed Operations",
}

_OPERATION_ICONS: Dict[Operation, str] = {
    Operation.ADDITION: "➕",
    Operation.SUBTRACTION: "➖",
    Operation.MIXED: "\U0001f504",
}

_COMPLEMENT_LABELS: Dict[ComplementTechnique, str] = {
    ComplementTechnique.NONE: "Simple",
    ComplementTechnique.SMALL_FRIEND: "Small Friend",
    ComplementTechnique.BIG_FRIEND: "Big Friend",
    ComplementTechnique.FAMILY: "Family",
    ComplementTechnique.MIXED: "Mixed Friends",
}

_DIGIT_LABELS: Dict[DigitLevel, str] = {
    DigitLevel.SINGLE: "Single Digit",
    DigitLevel.DOUBLE: "Double Digit",
    DigitLevel.TRIPLE: "Triple Digit",
    DigitLevel.FOUR: "Four Digit",
    DigitLevel.FIVE: "Five Digit",
}


def complement_section_label(complement: ComplementTechnique, operation: Optional[Operation] = None) -> str:
    """Heading for a complement section, e.g. "Simple Addition" for the no-complement block."""
    if complement is ComplementTechnique.NONE and operation is not None:
        suffix = "Mixed" if operation is Operation.MIXED else operation.label
        return f"{complement.label} {suffix}"
    return complement.label
