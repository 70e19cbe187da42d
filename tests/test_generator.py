import itertools
import unittest
from unittest import mock

from tilepuzzle.core.exceptions import ConfigError
from tilepuzzle.core.models import AttemptOutcome, DifficultyThresholds
from tilepuzzle.engine.board import Board
from tilepuzzle.engine.generator import (
    FALLBACK_LAYOUT,
    GeneratorConfig,
    PuzzleGenerator,
    accept_estimate,
    puzzle_stats,
)
from tilepuzzle.engine.letters import FALLBACK_SETS, sort_letters
from tilepuzzle.engine.shape import ShapeConfig
from tilepuzzle.engine.solver import SolverConfig

from sample_words import sample_dictionary

PUZZLE_KEYS = {
    "id",
    "seed",
    "archetype",
    "letters",
    "board",
    "thresholds",
    "estimate",
    "words",
    "stats",
    "is_fallback",
}


def small_config(**overrides) -> GeneratorConfig:
    options = dict(
        seed="2026-10-19",
        solver=SolverConfig(turns=1, beam_width=3, fan_out=3),
        min_estimate=0,
        max_estimate=100_000,
        max_attempts=3,
    )
    options.update(overrides)
    return GeneratorConfig(**options)


class PuzzleGeneratorTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.dictionary = sample_dictionary()

    def test_same_seed_same_puzzle(self) -> None:
        first = PuzzleGenerator(small_config(), self.dictionary).generate()
        second = PuzzleGenerator(small_config(), self.dictionary).generate()
        self.assertEqual(first.to_jsonable(), second.to_jsonable())

    def test_accepted_puzzle_shape(self) -> None:
        puzzle = PuzzleGenerator(small_config(), self.dictionary).generate()
        payload = puzzle.to_jsonable()
        self.assertEqual(set(payload), PUZZLE_KEYS)
        self.assertEqual(len(puzzle.id), 16)
        int(puzzle.id, 16)
        self.assertEqual(len(puzzle.letters), 14)
        self.assertTrue(puzzle.board.is_symmetric())
        self.assertTrue(puzzle.board.is_connected())
        self.assertEqual(payload["board"]["size"], 9)
        self.assertEqual(len(payload["board"]["cells"]), 81)
        self.assertEqual(payload["stats"]["playable_cells"], puzzle.board.playable_count())
        self.assertEqual(
            puzzle.thresholds,
            DifficultyThresholds.from_estimate(puzzle.estimate),
        )

    def test_impossible_band_falls_back(self) -> None:
        config = small_config(min_estimate=10_000, max_estimate=20_000, max_attempts=2)
        puzzle = PuzzleGenerator(config, self.dictionary).generate()
        self.assertTrue(puzzle.is_fallback)
        self.assertIsNone(puzzle.archetype)
        self.assertEqual(puzzle.board.to_rows(), list(FALLBACK_LAYOUT))
        self.assertIn(puzzle.letters, {sort_letters(letters) for letters in FALLBACK_SETS[14]})
        self.assertGreater(puzzle.estimate, 0)
        self.assertIsNone(puzzle.to_jsonable()["archetype"])

    def test_successful_attempt_is_returned(self) -> None:
        generator = PuzzleGenerator(small_config(), self.dictionary)
        expected = generator.fallback_puzzle()
        with mock.patch.object(
            PuzzleGenerator, "attempt", return_value=AttemptOutcome.success(expected)
        ) as attempt:
            self.assertIs(generator.generate(), expected)
        self.assertEqual(attempt.call_count, 1)

    def test_retries_until_attempts_run_out(self) -> None:
        generator = PuzzleGenerator(small_config(max_attempts=3), self.dictionary)
        with mock.patch.object(
            PuzzleGenerator, "attempt", return_value=AttemptOutcome.retry("estimate too low")
        ) as attempt:
            puzzle = generator.generate()
        self.assertEqual(attempt.call_count, 3)
        self.assertTrue(puzzle.is_fallback)

    def test_fail_outcome_stops_immediately(self) -> None:
        generator = PuzzleGenerator(small_config(max_attempts=5), self.dictionary)
        with mock.patch.object(
            PuzzleGenerator, "attempt", return_value=AttemptOutcome.fail("broken")
        ) as attempt:
            puzzle = generator.generate()
        self.assertEqual(attempt.call_count, 1)
        self.assertTrue(puzzle.is_fallback)

    def test_exhausted_time_budget_skips_attempts(self) -> None:
        clock = itertools.count(0, 100).__next__
        config = small_config(time_budget_seconds=1.0)
        generator = PuzzleGenerator(config, self.dictionary, clock=clock)
        with mock.patch.object(PuzzleGenerator, "attempt") as attempt:
            puzzle = generator.generate()
        attempt.assert_not_called()
        self.assertTrue(puzzle.is_fallback)

    def test_fallback_for_other_sizes_is_open(self) -> None:
        config = small_config(shape=ShapeConfig(size=7))
        puzzle = PuzzleGenerator(config, self.dictionary).fallback_puzzle()
        self.assertEqual(puzzle.board.size, 7)
        self.assertEqual(puzzle.board.playable_count(), 49)
        self.assertTrue(puzzle.is_fallback)

    def test_invalid_config(self) -> None:
        with self.assertRaises(ConfigError):
            PuzzleGenerator(small_config(min_estimate=50, max_estimate=10), self.dictionary)
        with self.assertRaises(ConfigError):
            PuzzleGenerator(small_config(max_attempts=0), self.dictionary)


class GateAndStatsTests(unittest.TestCase):
    def test_band_is_inclusive(self) -> None:
        self.assertTrue(accept_estimate(60, 60, 200))
        self.assertTrue(accept_estimate(200, 60, 200))
        self.assertFalse(accept_estimate(59, 60, 200))
        self.assertFalse(accept_estimate(201, 60, 200))

    def test_thresholds_from_estimate(self) -> None:
        thresholds = DifficultyThresholds.from_estimate(100)
        self.assertEqual((thresholds.good, thresholds.great, thresholds.excellent), (28, 52, 78))
        self.assertEqual(DifficultyThresholds.from_estimate(0).excellent, 0)

    def test_puzzle_stats(self) -> None:
        board = Board.from_rows(FALLBACK_LAYOUT)
        easy = puzzle_stats(board, tuple("AEIOUBCDGLNRST"))
        self.assertEqual(easy.playable_cells, 77)
        self.assertEqual(easy.bonus_cells, 13)
        self.assertEqual((easy.vowels, easy.consonants), (5, 9))
        self.assertEqual(easy.high_value_letters, ())
        self.assertEqual(easy.difficulty, "easy")

        hard = puzzle_stats(board, tuple("AEIOCDFHLMNRST"))
        self.assertEqual(hard.high_value_letters, ("F", "H"))
        self.assertEqual(hard.difficulty, "hard")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
