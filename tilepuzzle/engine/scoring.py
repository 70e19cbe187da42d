"""Placement validation, word extraction and scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..core.constants import BONUS_MULTIPLIERS, LETTER_POINTS, BonusType, Direction
from ..core.exceptions import PlacementError
from ..core.models import PlacedTile, PlacementResult, ScoredWord
from ..data.dictionary import WordDictionary
from .board import Board, Position


@dataclass
class ScoringConfig:
    letter_points: Dict[str, int] = field(default_factory=lambda: dict(LETTER_POINTS))
    multipliers: Dict[BonusType, Tuple[int, int]] = field(
        default_factory=lambda: dict(BONUS_MULTIPLIERS)
    )
    min_word_length: int = 2


@dataclass(frozen=True)
class _Run:
    start: Position
    direction: Direction
    cells: Tuple[Position, ...]
    text: str


class PlacementValidator:
    """Checks a tentative placement against the board and scores the words it forms.

    ``validate`` is a pure function of the board and the tiles: it never
    mutates the board and returns the same result for the same input.
    """

    def __init__(self, dictionary: WordDictionary, config: Optional[ScoringConfig] = None) -> None:
        self.dictionary = dictionary
        self.config = config or ScoringConfig()

    def validate(
        self,
        board: Board,
        tiles: Sequence[PlacedTile],
        first_move: Optional[bool] = None,
    ) -> PlacementResult:
        if first_move is None:
            first_move = not board.has_letters()
        try:
            self._check_tiles(board, tiles)
            direction = self._check_line(tiles)
            self._check_contiguous(board, tiles, direction)
            self._check_connected(board, tiles, first_move)
            runs = self._extract_runs(board, tiles, direction)
            if not runs:
                raise PlacementError("No words formed")
            self._check_words(runs)
        except PlacementError as exc:
            return PlacementResult(ok=False, error=str(exc))

        placed = {(tile.row, tile.col) for tile in tiles}
        words = tuple(
            ScoredWord(
                text=run.text,
                start=run.start,
                direction=run.direction,
                cells=run.cells,
                score=self.score_run(board, run.cells, run.text, placed),
            )
            for run in runs
        )
        return PlacementResult(ok=True, words=words, score=sum(word.score for word in words))

    # ------------------------------------------------------------------
    # Rule checks
    # ------------------------------------------------------------------
    def _check_tiles(self, board: Board, tiles: Sequence[PlacedTile]) -> None:
        if not tiles:
            raise PlacementError("No tiles placed")
        seen: Set[Position] = set()
        for tile in tiles:
            if not board.is_playable(tile.row, tile.col):
                raise PlacementError(f"Tile placed on invalid square ({tile.row},{tile.col})")
            if board.letter_at(tile.row, tile.col) is not None:
                raise PlacementError(f"Square ({tile.row},{tile.col}) already occupied")
            if tile.position in seen:
                raise PlacementError(f"Two tiles placed on ({tile.row},{tile.col})")
            if len(tile.letter) != 1 or not tile.letter.isalpha():
                raise PlacementError(f"Invalid tile letter {tile.letter!r}")
            seen.add(tile.position)

    @staticmethod
    def _check_line(tiles: Sequence[PlacedTile]) -> Direction:
        rows = {tile.row for tile in tiles}
        cols = {tile.col for tile in tiles}
        if len(rows) == 1:
            # A single tile reads across first.
            return Direction.ACROSS
        if len(cols) == 1:
            return Direction.DOWN
        raise PlacementError("Tiles must be in a line")

    @staticmethod
    def _check_contiguous(board: Board, tiles: Sequence[PlacedTile], direction: Direction) -> None:
        if len(tiles) < 2:
            return
        placed = {tile.position for tile in tiles}
        if direction is Direction.ACROSS:
            row = tiles[0].row
            cols = [tile.col for tile in tiles]
            span = [(row, col) for col in range(min(cols), max(cols) + 1)]
        else:
            col = tiles[0].col
            rows = [tile.row for tile in tiles]
            span = [(row, col) for row in range(min(rows), max(rows) + 1)]
        for row, col in span:
            if (row, col) in placed:
                continue
            if not board.is_playable(row, col) or board.letter_at(row, col) is None:
                raise PlacementError("Tiles must be contiguous")

    @staticmethod
    def _check_connected(board: Board, tiles: Sequence[PlacedTile], first_move: bool) -> None:
        if first_move:
            if board.center not in {tile.position for tile in tiles}:
                raise PlacementError("First word must cover the start square")
            return
        for tile in tiles:
            for neighbor in board.neighbors(tile.row, tile.col):
                if neighbor.letter is not None and neighbor.locked:
                    return
        raise PlacementError("Word must connect to existing tiles")

    def _check_words(self, runs: Sequence[_Run]) -> None:
        for run in runs:
            if not self.dictionary.contains(run.text):
                raise PlacementError(f'"{run.text}" is not a valid word')

    # ------------------------------------------------------------------
    # Extraction & scoring
    # ------------------------------------------------------------------
    def _extract_runs(
        self,
        board: Board,
        tiles: Sequence[PlacedTile],
        direction: Direction,
    ) -> List[_Run]:
        pending = {tile.position: tile.letter.upper() for tile in tiles}
        runs: List[_Run] = []
        seen: Set[Tuple[Position, Direction]] = set()

        def collect(run: Optional[_Run]) -> None:
            if run is None or (run.start, run.direction) in seen:
                return
            seen.add((run.start, run.direction))
            runs.append(run)

        first = tiles[0]
        collect(self._run_through(board, pending, first.row, first.col, direction))
        cross = direction.perpendicular
        for tile in tiles:
            collect(self._run_through(board, pending, tile.row, tile.col, cross))
        return runs

    def _run_through(
        self,
        board: Board,
        pending: Dict[Position, str],
        row: int,
        col: int,
        direction: Direction,
    ) -> Optional[_Run]:
        dr, dc = direction.step

        def letter(r: int, c: int) -> Optional[str]:
            if not board.is_playable(r, c):
                return None
            return pending.get((r, c)) or board.letter_at(r, c)

        while letter(row - dr, col - dc) is not None:
            row, col = row - dr, col - dc
        start = (row, col)
        cells: List[Position] = []
        text: List[str] = []
        while True:
            char = letter(row, col)
            if char is None:
                break
            cells.append((row, col))
            text.append(char)
            row, col = row + dr, col + dc
        if len(cells) < self.config.min_word_length:
            return None
        return _Run(start=start, direction=direction, cells=tuple(cells), text="".join(text))

    def score_run(
        self,
        board: Board,
        cells: Sequence[Position],
        text: str,
        placed: Set[Position],
    ) -> int:
        """Letter sum times word multiplier; bonuses count only under new tiles."""

        total = 0
        word_multiplier = 1
        for (row, col), char in zip(cells, text):
            points = self.config.letter_points.get(char, 0)
            if (row, col) in placed:
                letter_mult, word_mult = self.config.multipliers.get(board.cell(row, col).bonus, (1, 1))
                total += points * letter_mult
                word_multiplier *= word_mult
            else:
                total += points
        return total * word_multiplier
