import unittest

from tilepuzzle.core.constants import Archetype, manhattan
from tilepuzzle.core.exceptions import ConfigError
from tilepuzzle.core.rng import create_rng
from tilepuzzle.engine.board import Board, flood_fill, mirror
from tilepuzzle.engine.shape import (
    BoardShapeGenerator,
    ShapeConfig,
    enforce_connectivity,
    generate_shape,
)


class ShapeTests(unittest.TestCase):
    def _assert_valid_shape(self, mask, size, radius=2) -> None:
        center = size // 2
        for r in range(size):
            for c in range(size):
                mr, mc = mirror(size, r, c)
                self.assertEqual(mask[r][c], mask[mr][mc], f"asymmetric at ({r},{c})")
                if manhattan(r, c, center, center) < radius:
                    self.assertTrue(mask[r][c], f"protected cell ({r},{c}) was carved")
        playable = sum(1 for row in mask for alive in row if alive)
        self.assertEqual(len(flood_fill(mask, (center, center))), playable)

    def test_every_archetype_is_symmetric_and_connected(self) -> None:
        for size in (7, 8, 9, 10, 11):
            for archetype in Archetype:
                for seed in range(15):
                    config = ShapeConfig(size=size, archetype=archetype)
                    result = BoardShapeGenerator(config, create_rng(f"{archetype.value}-{seed}")).generate()
                    with self.subTest(size=size, archetype=archetype, seed=seed):
                        self.assertIs(result.archetype, archetype)
                        self._assert_valid_shape(result.playable, size)

    def test_even_sizes_keep_the_center_pair_playable(self) -> None:
        for seed in range(60):
            config = ShapeConfig(size=8, archetype=Archetype.SCATTERED)
            mask = BoardShapeGenerator(config, create_rng(seed)).generate().playable
            with self.subTest(seed=seed):
                self.assertTrue(mask[4][4])
                self.assertTrue(mask[3][3])
                self.assertTrue(Board.from_layout(mask).is_symmetric())

    def test_enforce_connectivity_on_even_size_stays_symmetric(self) -> None:
        mask = [[True] * 6 for _ in range(6)]
        for r, c in ((0, 1), (1, 0), (5, 4), (4, 5)):
            mask[r][c] = False
        enforce_connectivity(mask)
        self.assertFalse(mask[0][0])
        self.assertFalse(mask[5][5])
        self.assertTrue(mask[2][2])
        self.assertTrue(mask[3][3])
        self.assertTrue(Board.from_layout(mask).is_symmetric())
        self.assertTrue(Board.from_layout(mask).is_connected())

    def test_carving_removes_cells(self) -> None:
        carved = [
            generate_shape(create_rng(seed), ShapeConfig(archetype=Archetype.DIAMOND)).playable_count
            for seed in range(10)
        ]
        self.assertTrue(all(count < 81 for count in carved))

    def test_same_seed_same_shape(self) -> None:
        first = generate_shape(create_rng("test-1"))
        second = generate_shape(create_rng("test-1"))
        self.assertEqual(first.playable, second.playable)
        self.assertIs(first.archetype, second.archetype)

    def test_board_reports_shape_properties(self) -> None:
        result = generate_shape(create_rng(11))
        board = Board.from_layout(result.playable)
        self.assertTrue(board.is_symmetric())
        self.assertTrue(board.is_connected())
        self.assertEqual(board.playable_count(), result.playable_count)

    def test_enforce_connectivity_drops_islands_with_their_mirror(self) -> None:
        mask = [[True] * 5 for _ in range(5)]
        # Wall off the top-left corner cell and its mirror.
        for r, c in ((0, 1), (1, 0), (4, 3), (3, 4)):
            mask[r][c] = False
        enforce_connectivity(mask)
        self.assertFalse(mask[0][0])
        self.assertFalse(mask[4][4])
        self.assertTrue(mask[0][4])
        self.assertTrue(mask[2][2])

    def test_invalid_config(self) -> None:
        with self.assertRaises(ConfigError):
            ShapeConfig(size=2).validate()
        with self.assertRaises(ConfigError):
            ShapeConfig(archetype_weights={archetype: 0 for archetype in Archetype}).validate()


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
