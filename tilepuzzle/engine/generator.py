"""Main puzzle generator orchestration.

One attempt runs the whole pipeline:
  1. Shape: carve a symmetric connected board for a random archetype.
  2. Bonuses: tag bonus cells tier by tier.
  3. Letters: draw a constrained letter pool.
  4. Estimate: beam-search the board and gate the estimate into a band.

Failed attempts are retried with a fresh derived seed; when the attempts
or the time budget run out a hand-authored fallback puzzle is returned.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, cast

from ..core.constants import LETTER_POINTS, Archetype, BonusType, is_vowel
from ..core.exceptions import ConfigError
from ..core.models import AttemptOutcome, AttemptStatus, DifficultyThresholds, PuzzleStats
from ..core.rng import Seed, create_rng, derive_seed
from ..data.dictionary import WordDictionary
from ..utils.logger import get_logger
from .board import Board
from .bonus import BonusConfig, BonusPlacer
from .letters import LetterPoolConfig, LetterPoolGenerator
from .scoring import PlacementValidator, ScoringConfig
from .shape import BoardShapeGenerator, ShapeConfig
from .solver import BeamSearchSolver, SolverConfig


LOGGER = get_logger(__name__)


FALLBACK_LAYOUT: Tuple[str, ...] = (
    "#..T....#",
    ".d...t...",
    ".D.....d.",
    "...d...t.",
    "....*....",
    ".t...D...",
    ".d.....D.",
    "...t.....",
    "#....T..#",
)


@dataclass
class GeneratorConfig:
    seed: Seed = None
    shape: ShapeConfig = field(default_factory=ShapeConfig)
    bonuses: BonusConfig = field(default_factory=BonusConfig)
    letters: LetterPoolConfig = field(default_factory=LetterPoolConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    min_estimate: int = 60
    max_estimate: int = 200
    threshold_fractions: Tuple[float, float, float] = (0.28, 0.52, 0.78)
    max_attempts: int = 25
    time_budget_seconds: Optional[float] = None

    @property
    def size(self) -> int:
        return self.shape.size

    def validate(self) -> None:
        self.shape.validate()
        self.bonuses.validate()
        self.letters.validate()
        self.solver.validate()
        if self.min_estimate > self.max_estimate:
            raise ConfigError(
                f"Estimate band is inverted: {self.min_estimate} > {self.max_estimate}"
            )
        if self.max_attempts < 1:
            raise ConfigError("max_attempts must be at least 1")
        if self.time_budget_seconds is not None and self.time_budget_seconds <= 0:
            raise ConfigError("time_budget_seconds must be positive")


@dataclass(frozen=True)
class Puzzle:
    id: str
    seed: int
    board: Board
    letters: Tuple[str, ...]
    archetype: Optional[Archetype]
    thresholds: DifficultyThresholds
    words: Tuple[str, ...]
    stats: PuzzleStats
    is_fallback: bool = False

    @property
    def estimate(self) -> int:
        return self.thresholds.estimate

    def to_jsonable(self) -> dict:
        return {
            "id": self.id,
            "seed": self.seed,
            "archetype": self.archetype.value if self.archetype else None,
            "letters": list(self.letters),
            "board": self.board.to_jsonable(),
            "thresholds": self.thresholds.to_jsonable(),
            "estimate": self.estimate,
            "words": list(self.words),
            "stats": self.stats.to_jsonable(),
            "is_fallback": self.is_fallback,
        }


def accept_estimate(estimate: int, min_estimate: int, max_estimate: int) -> bool:
    """Whether an achievability estimate falls inside the inclusive band."""

    return min_estimate <= estimate <= max_estimate


def puzzle_stats(board: Board, letters: Tuple[str, ...]) -> PuzzleStats:
    vowels = sum(1 for letter in letters if is_vowel(letter))
    high_value = tuple(letter for letter in letters if LETTER_POINTS.get(letter, 0) >= 4)
    if high_value and vowels < 5:
        difficulty = "hard"
    elif vowels >= 5:
        difficulty = "easy"
    else:
        difficulty = "medium"
    bonus_cells = sum(
        count for tier, count in board.bonus_counts().items() if tier is not BonusType.START
    )
    return PuzzleStats(
        playable_cells=board.playable_count(),
        bonus_cells=bonus_cells,
        vowels=vowels,
        consonants=len(letters) - vowels,
        high_value_letters=high_value,
        difficulty=difficulty,
    )


class PuzzleGenerator:
    """High-level orchestrator: shape, bonuses, letters, then estimate and gate."""

    def __init__(
        self,
        config: GeneratorConfig,
        dictionary: WordDictionary,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        config.validate()
        self.config = config
        self.dictionary = dictionary
        self.clock = clock
        self.rng = create_rng(config.seed)
        self.validator = PlacementValidator(dictionary, config.scoring)
        self.solver = BeamSearchSolver(dictionary, self.validator, config.solver)

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def generate(self) -> Puzzle:
        started = self.clock()
        for attempt in range(1, self.config.max_attempts + 1):
            outcome = self._next_attempt(attempt, started)
            if outcome.ok:
                puzzle = cast(Puzzle, outcome.value)
                LOGGER.info(
                    "Accepted puzzle %s (estimate %s) on attempt %s",
                    puzzle.id, puzzle.estimate, attempt,
                )
                return puzzle
            if outcome.status is AttemptStatus.FAIL:
                LOGGER.warning("Stopping generation: %s", outcome.reason)
                break
            LOGGER.warning("Generation attempt failed: %s", outcome.reason)
        LOGGER.warning("Falling back to the hand-authored puzzle")
        return self.fallback_puzzle()

    def _next_attempt(self, attempt: int, started: float) -> AttemptOutcome[Puzzle]:
        budget = self.config.time_budget_seconds
        if budget is not None and self.clock() - started >= budget:
            return AttemptOutcome.fail(f"time budget of {budget}s exhausted")
        LOGGER.info("Generation attempt %s/%s", attempt, self.config.max_attempts)
        return self.attempt(derive_seed(self.rng))

    def attempt(self, seed: int) -> AttemptOutcome[Puzzle]:
        """Run the pipeline once with a generator seeded from ``seed``."""

        rng = create_rng(seed)
        shape = BoardShapeGenerator(self.config.shape, rng).generate()
        layout = BonusPlacer(self.config.bonuses, rng).place(shape.playable)
        missing = layout.shortfall(self.config.bonuses.counts)
        if missing:
            summary = ", ".join(f"{tier.value} x{count}" for tier, count in missing.items())
            return AttemptOutcome.retry(f"{shape.archetype.value} board has no room for {summary}")

        pool = LetterPoolGenerator(self.config.letters, self.dictionary, rng).generate()
        board = Board.from_layout(shape.playable, layout.bonuses)
        solved = self.solver.solve(board, pool.letters)
        if not accept_estimate(solved.estimate, self.config.min_estimate, self.config.max_estimate):
            return AttemptOutcome.retry(
                f"estimate {solved.estimate} outside "
                f"[{self.config.min_estimate}, {self.config.max_estimate}]"
            )
        return AttemptOutcome.success(
            self._build_puzzle(rng, seed, board, pool.letters, shape.archetype, solved.estimate, solved.words)
        )

    def fallback_puzzle(self) -> Puzzle:
        """Hand-authored board with a vetted letter set; its estimate is still computed."""

        seed = derive_seed(self.rng)
        rng = create_rng(seed)
        if self.config.size == len(FALLBACK_LAYOUT):
            board = Board.from_rows(FALLBACK_LAYOUT)
        else:
            mask = [[True] * self.config.size for _ in range(self.config.size)]
            board = Board.from_layout(mask, BonusPlacer(self.config.bonuses, rng).place(mask).bonuses)
        pool = LetterPoolGenerator(self.config.letters, self.dictionary, rng).fallback_pool()
        solved = self.solver.solve(board, pool.letters)
        return self._build_puzzle(
            rng, seed, board, pool.letters, None, solved.estimate, solved.words, is_fallback=True
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _build_puzzle(
        self,
        rng: random.Random,
        seed: int,
        board: Board,
        letters: Tuple[str, ...],
        archetype: Optional[Archetype],
        estimate: int,
        words: Tuple[str, ...],
        is_fallback: bool = False,
    ) -> Puzzle:
        return Puzzle(
            id=f"{rng.getrandbits(64):016x}",
            seed=seed,
            board=board,
            letters=letters,
            archetype=archetype,
            thresholds=DifficultyThresholds.from_estimate(estimate, self.config.threshold_fractions),
            words=words,
            stats=puzzle_stats(board, letters),
            is_fallback=is_fallback,
        )
