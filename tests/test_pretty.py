import io
import unittest

from tilepuzzle.core.models import PlacedTile
from tilepuzzle.engine.board import Board
from tilepuzzle.engine.generator import FALLBACK_LAYOUT, GeneratorConfig, PuzzleGenerator
from tilepuzzle.engine.solver import SolverConfig
from tilepuzzle.utils.pretty import format_board, print_puzzle_stats

from sample_words import sample_dictionary


class PrettyTests(unittest.TestCase):
    def test_format_board_marks_dead_bonus_and_letters(self) -> None:
        board = Board.from_rows(FALLBACK_LAYOUT).with_placement([PlacedTile(4, 4, "a")])
        rendered = format_board(board)
        lines = rendered.splitlines()
        self.assertEqual(len(lines), 11)
        self.assertIn("TW", lines[2])
        self.assertTrue(lines[2].endswith(" #"))
        self.assertIn(" A", lines[6])

    def test_print_puzzle_stats_for_fallback(self) -> None:
        config = GeneratorConfig(seed=1, solver=SolverConfig(turns=1, beam_width=2, fan_out=2))
        puzzle = PuzzleGenerator(config, sample_dictionary()).fallback_puzzle()
        stream = io.StringIO()
        print_puzzle_stats(puzzle, stream=stream)
        output = stream.getvalue()
        self.assertIn("Archetype:     FALLBACK", output)
        self.assertIn("Fallback puzzle", output)
        self.assertIn(f"Id: {puzzle.id}", output)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
