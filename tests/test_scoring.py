import unittest

from tilepuzzle.core.constants import Direction
from tilepuzzle.core.models import PlacedTile
from tilepuzzle.engine.board import Board
from tilepuzzle.engine.scoring import PlacementValidator

from sample_words import sample_dictionary


def tiles(*specs):
    return [PlacedTile(row=row, col=col, letter=letter) for row, col, letter in specs]


CAT_ACROSS = tiles((4, 3, "C"), (4, 4, "A"), (4, 5, "T"))


class PlacementValidatorTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.dictionary = sample_dictionary()

    def setUp(self) -> None:
        self.validator = PlacementValidator(self.dictionary)
        self.board = Board.empty(9)

    def _with_cat(self) -> Board:
        result = self.validator.validate(self.board, CAT_ACROSS)
        self.assertTrue(result.ok, result.error)
        return self.board.with_placement(CAT_ACROSS)

    def test_first_word_through_start_doubles(self) -> None:
        result = self.validator.validate(self.board, CAT_ACROSS)
        self.assertTrue(result.ok)
        self.assertEqual(result.main_word, "CAT")
        self.assertEqual(result.score, 10)
        self.assertIs(result.words[0].direction, Direction.ACROSS)
        self.assertEqual(result.words[0].cells, ((4, 3), (4, 4), (4, 5)))

    def test_first_word_must_cover_start(self) -> None:
        result = self.validator.validate(self.board, tiles((0, 0, "C"), (0, 1, "A"), (0, 2, "T")))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "First word must cover the start square")

    def test_tiles_must_share_a_line(self) -> None:
        result = self.validator.validate(self.board, tiles((4, 4, "A"), (5, 5, "T")))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "Tiles must be in a line")

    def test_tiles_must_be_contiguous(self) -> None:
        result = self.validator.validate(self.board, tiles((4, 2, "C"), (4, 4, "A"), (4, 6, "T")))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "Tiles must be contiguous")

    def test_single_tile_forms_no_word(self) -> None:
        result = self.validator.validate(self.board, tiles((4, 4, "A")))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "No words formed")

    def test_unknown_word_rejected(self) -> None:
        result = self.validator.validate(self.board, tiles((4, 3, "C"), (4, 4, "T"), (4, 5, "A")))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, '"CTA" is not a valid word')

    def test_empty_placement_rejected(self) -> None:
        self.assertEqual(self.validator.validate(self.board, []).error, "No tiles placed")

    def test_dead_cell_rejected(self) -> None:
        board = Board.from_rows(["#....", ".....", "..*..", ".....", "....#"])
        result = self.validator.validate(board, tiles((0, 0, "A"), (0, 1, "T")))
        self.assertFalse(result.ok)
        self.assertIn("invalid square", result.error)

    def test_occupied_cell_rejected(self) -> None:
        board = self._with_cat()
        result = self.validator.validate(board, tiles((4, 4, "O")))
        self.assertFalse(result.ok)
        self.assertIn("already occupied", result.error)

    def test_later_word_must_connect(self) -> None:
        board = self._with_cat()
        result = self.validator.validate(board, tiles((0, 0, "A"), (0, 1, "T")))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, "Word must connect to existing tiles")

    def test_extending_a_word_skips_spent_bonuses(self) -> None:
        board = self._with_cat()
        result = self.validator.validate(board, tiles((4, 6, "S")))
        self.assertTrue(result.ok)
        self.assertEqual(result.main_word, "CATS")
        self.assertEqual(result.score, 6)

    def test_word_through_existing_letter(self) -> None:
        board = self._with_cat()
        result = self.validator.validate(board, tiles((3, 4, "O"), (5, 4, "T")))
        self.assertTrue(result.ok, result.error)
        self.assertEqual([word.text for word in result.words], ["OAT"])
        self.assertIs(result.words[0].direction, Direction.DOWN)
        self.assertEqual(result.score, 3)

    def test_cross_words_are_scored(self) -> None:
        board = self._with_cat()
        result = self.validator.validate(board, tiles((5, 5, "A"), (5, 6, "T")))
        self.assertTrue(result.ok, result.error)
        self.assertEqual([word.text for word in result.words], ["AT", "TA"])
        self.assertEqual(result.score, 4)

    def test_invalid_cross_word_rejects_placement(self) -> None:
        board = self._with_cat()
        result = self.validator.validate(board, tiles((5, 3, "T"), (5, 4, "O")))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, '"CT" is not a valid word')

    def test_letter_and_word_multipliers(self) -> None:
        board = Board.from_rows([".....", ".....", ".d*D.", ".....", "....."])
        placed = tiles((2, 1, "C"), (2, 2, "A"), (2, 3, "T"))
        result = self.validator.validate(board, placed)
        self.assertTrue(result.ok, result.error)
        # (C 3x2 + A 1 + T 1) doubled by the start and again by DW.
        self.assertEqual(result.score, 32)

        extended = self.validator.validate(board.with_placement(placed), tiles((2, 4, "S")))
        self.assertEqual(extended.score, 6)

    def test_validation_does_not_touch_the_board(self) -> None:
        snapshot = Board.empty(9)
        first = self.validator.validate(self.board, CAT_ACROSS)
        second = self.validator.validate(self.board, CAT_ACROSS)
        self.assertEqual(first, second)
        self.assertEqual(self.board, snapshot)
        self.assertFalse(self.board.has_letters())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
