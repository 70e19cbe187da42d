"""Shared constants and enumerations for the tile puzzle generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class BonusType(str, Enum):
    """Bonus tags a board cell can carry."""

    NONE = "NONE"
    DL = "DL"
    TL = "TL"
    DW = "DW"
    TW = "TW"
    START = "START"


class Direction(str, Enum):
    """Word directions supported by the board."""

    ACROSS = "ACROSS"
    DOWN = "DOWN"

    @property
    def step(self) -> Tuple[int, int]:
        return (0, 1) if self is Direction.ACROSS else (1, 0)

    @property
    def perpendicular(self) -> "Direction":
        return Direction.DOWN if self is Direction.ACROSS else Direction.ACROSS


class Archetype(str, Enum):
    """Board shape families."""

    DIAMOND = "DIAMOND"
    CORRIDOR = "CORRIDOR"
    SCATTERED = "SCATTERED"
    OPEN = "OPEN"


ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

VOWELS = frozenset("AEIOU")

LETTER_POINTS: Dict[str, int] = {
    "A": 1, "B": 3, "C": 3, "D": 2, "E": 1, "F": 4, "G": 2, "H": 4, "I": 1,
    "J": 8, "K": 5, "L": 1, "M": 3, "N": 1, "O": 1, "P": 3, "Q": 10, "R": 1,
    "S": 1, "T": 1, "U": 1, "V": 4, "W": 4, "X": 8, "Y": 4, "Z": 10,
}

# Relative draw weights, Scrabble-like.
LETTER_DISTRIBUTION: Dict[str, int] = {
    "A": 9, "B": 2, "C": 2, "D": 4, "E": 12, "F": 2, "G": 3, "H": 2, "I": 9,
    "J": 1, "K": 1, "L": 4, "M": 2, "N": 6, "O": 8, "P": 2, "Q": 1, "R": 6,
    "S": 4, "T": 6, "U": 4, "V": 2, "W": 2, "X": 1, "Y": 2, "Z": 1,
}

# (letter multiplier, word multiplier)
BONUS_MULTIPLIERS: Dict[BonusType, Tuple[int, int]] = {
    BonusType.NONE: (1, 1),
    BonusType.DL: (2, 1),
    BonusType.TL: (3, 1),
    BonusType.DW: (1, 2),
    BonusType.TW: (1, 3),
    BonusType.START: (1, 2),
}

# Scarcest tiers are placed first so they get first pick of cells.
BONUS_PRIORITY: Tuple[BonusType, ...] = (
    BonusType.TW,
    BonusType.DW,
    BonusType.TL,
    BonusType.DL,
)


@dataclass(frozen=True)
class Bounds:
    """Simple square bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


def manhattan(row: int, col: int, other_row: int, other_col: int) -> int:
    return abs(row - other_row) + abs(col - other_col)


def is_vowel(letter: str) -> bool:
    return letter.upper() in VOWELS
