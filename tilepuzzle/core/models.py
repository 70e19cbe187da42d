"""Data models supporting the puzzle generator."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, Tuple, TypeVar

from .constants import BonusType, Direction

T = TypeVar("T")


@dataclass(frozen=True)
class Cell:
    """Represents a board cell with its bonus tag and committed letter."""

    row: int
    col: int
    playable: bool = True
    bonus: BonusType = BonusType.NONE
    letter: Optional[str] = None
    locked: bool = False

    def is_empty(self) -> bool:
        return self.playable and self.letter is None


@dataclass(frozen=True)
class PlacedTile:
    """A letter the player intends to put on a cell this turn."""

    row: int
    col: int
    letter: str

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)


@dataclass(frozen=True)
class ScoredWord:
    """A word formed by a placement along with its score."""

    text: str
    start: Tuple[int, int]
    direction: Direction
    cells: Tuple[Tuple[int, int], ...]
    score: int


@dataclass(frozen=True)
class PlacementResult:
    ok: bool
    words: Tuple[ScoredWord, ...] = ()
    score: int = 0
    error: Optional[str] = None

    @property
    def main_word(self) -> Optional[str]:
        return self.words[0].text if self.words else None


@dataclass(frozen=True)
class DifficultyThresholds:
    """Star thresholds derived from an achievability estimate."""

    estimate: int
    good: int
    great: int
    excellent: int

    @classmethod
    def from_estimate(
        cls,
        estimate: int,
        fractions: Tuple[float, float, float] = (0.28, 0.52, 0.78),
    ) -> "DifficultyThresholds":
        # Half-up rounding.
        good, great, excellent = (int(math.floor(estimate * fraction + 0.5)) for fraction in fractions)
        return cls(estimate=estimate, good=good, great=great, excellent=excellent)

    def to_jsonable(self) -> dict:
        return {
            "estimate": self.estimate,
            "good": self.good,
            "great": self.great,
            "excellent": self.excellent,
        }


class AttemptStatus(str, Enum):
    SUCCESS = "SUCCESS"
    RETRY = "RETRY"
    FAIL = "FAIL"


@dataclass(frozen=True)
class AttemptOutcome(Generic[T]):
    """Tagged result of one generation attempt."""

    status: AttemptStatus
    value: Optional[T] = None
    reason: str = ""

    @classmethod
    def success(cls, value: T) -> "AttemptOutcome[T]":
        return cls(status=AttemptStatus.SUCCESS, value=value)

    @classmethod
    def retry(cls, reason: str) -> "AttemptOutcome[T]":
        return cls(status=AttemptStatus.RETRY, reason=reason)

    @classmethod
    def fail(cls, reason: str) -> "AttemptOutcome[T]":
        return cls(status=AttemptStatus.FAIL, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status is AttemptStatus.SUCCESS


@dataclass(frozen=True)
class PuzzleStats:
    """Summary numbers shown next to a generated puzzle."""

    playable_cells: int
    bonus_cells: int
    vowels: int
    consonants: int
    high_value_letters: Tuple[str, ...] = field(default_factory=tuple)
    difficulty: str = "medium"

    def to_jsonable(self) -> dict:
        return {
            "playable_cells": self.playable_cells,
            "bonus_cells": self.bonus_cells,
            "vowels": self.vowels,
            "consonants": self.consonants,
            "high_value_letters": list(self.high_value_letters),
            "difficulty": self.difficulty,
        }
