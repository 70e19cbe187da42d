"""Beam-search estimator of a realistic high score.

The solver does not look for the optimal line of play. Each turn it expands
only the best ``fan_out`` moves of every surviving state and keeps the best
``beam_width`` states overall, so the result approximates what a strong
player could reach within the turn limit.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from string import ascii_uppercase
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Set, Tuple

from ..core.constants import Direction
from ..core.exceptions import ConfigError
from ..core.models import PlacedTile
from ..data.dictionary import WordDictionary
from ..utils.logger import get_logger
from .board import Board, Position
from .scoring import PlacementValidator


LOGGER = get_logger(__name__)

TileKey = Tuple[Tuple[int, int, str], ...]


def tile_key(tiles: Sequence[PlacedTile]) -> TileKey:
    return tuple(sorted((tile.row, tile.col, tile.letter) for tile in tiles))


@dataclass
class SolverConfig:
    turns: int = 4
    beam_width: int = 50
    fan_out: int = 20

    def validate(self) -> None:
        if self.turns < 1 or self.beam_width < 1 or self.fan_out < 1:
            raise ConfigError(
                f"Solver limits must be positive (turns={self.turns}, "
                f"beam_width={self.beam_width}, fan_out={self.fan_out})"
            )


@dataclass(frozen=True)
class Move:
    tiles: Tuple[PlacedTile, ...]
    word: str
    score: int
    direction: Direction

    def key(self) -> TileKey:
        return tile_key(self.tiles)


@dataclass(frozen=True)
class SolverState:
    board: Board
    letters: Tuple[str, ...]
    score: int = 0
    turns_used: int = 0
    words: Tuple[str, ...] = ()

    def apply(self, move: Move) -> "SolverState":
        return SolverState(
            board=self.board.with_placement(move.tiles),
            letters=remaining_after(self.letters, [tile.letter for tile in move.tiles]),
            score=self.score + move.score,
            turns_used=self.turns_used + 1,
            words=self.words + (move.word,),
        )

    def passed(self) -> "SolverState":
        return SolverState(
            board=self.board,
            letters=self.letters,
            score=self.score,
            turns_used=self.turns_used + 1,
            words=self.words,
        )


@dataclass
class SolveResult:
    best: SolverState
    states: List[SolverState] = field(default_factory=list)

    @property
    def estimate(self) -> int:
        return self.best.score

    @property
    def words(self) -> Tuple[str, ...]:
        return self.best.words


class BeamSearchSolver:
    """Estimates the achievable score of a board and letter pool."""

    def __init__(
        self,
        dictionary: WordDictionary,
        validator: Optional[PlacementValidator] = None,
        config: Optional[SolverConfig] = None,
    ) -> None:
        self.config = config or SolverConfig()
        self.config.validate()
        self.dictionary = dictionary
        self.validator = validator or PlacementValidator(dictionary)
        self._formable_cache: Dict[str, Dict[int, List[str]]] = {}
        self._cross_cache: Dict[Tuple[str, str], FrozenSet[str]] = {}

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def solve(self, board: Board, letters: Sequence[str]) -> SolveResult:
        # Memos are scoped to a single search.
        self._formable_cache.clear()
        self._cross_cache.clear()
        states = [SolverState(board=board, letters=tuple(letter.upper() for letter in letters))]
        for turn in range(1, self.config.turns + 1):
            pool: List[SolverState] = []
            for state in states:
                moves = self.generate_moves(state.board, state.letters)
                moves.sort(key=lambda move: move.score, reverse=True)
                for move in moves[: self.config.fan_out]:
                    pool.append(state.apply(move))
            # Passing is always allowed, so a stuck state still competes.
            pool.extend(state.passed() for state in states)
            pool.sort(key=lambda state: state.score, reverse=True)
            states = pool[: self.config.beam_width]
            if not states:
                break
            LOGGER.debug(
                "Turn %s/%s: kept %s states, best %s",
                turn, self.config.turns, len(states), states[0].score,
            )
        return SolveResult(best=states[0], states=states)

    # ------------------------------------------------------------------
    # Move generation
    # ------------------------------------------------------------------
    def generate_moves(self, board: Board, letters: Sequence[str]) -> List[Move]:
        """Every validated move for ``letters`` on ``board``, deduplicated by tile set.

        Candidate words come only from the remaining letters, so the tiles a
        move consumes are always a sub-multiset of the rack.
        """

        words_by_length = self.formable_words(letters)
        if not words_by_length:
            return []
        first_move = not board.has_letters()
        moves: List[Move] = []
        seen: Set[TileKey] = set()
        for direction in (Direction.ACROSS, Direction.DOWN):
            cross = {} if first_move else self._cross_checks(board, direction)
            for cells, fixed in self._windows(board, direction, first_move, max(words_by_length)):
                for word in words_by_length.get(len(cells), ()):
                    if any(word[offset] != letter for offset, letter in fixed):
                        continue
                    tiles: List[PlacedTile] = []
                    fits = True
                    for offset, (row, col) in enumerate(cells):
                        if board.letter_at(row, col) is not None:
                            continue
                        allowed = cross.get((row, col))
                        if allowed is not None and word[offset] not in allowed:
                            fits = False
                            break
                        tiles.append(PlacedTile(row=row, col=col, letter=word[offset]))
                    if not fits or not tiles:
                        continue
                    key = tile_key(tiles)
                    if key in seen:
                        continue
                    seen.add(key)
                    result = self.validator.validate(board, tiles, first_move=first_move)
                    if not result.ok:
                        continue
                    moves.append(
                        Move(
                            tiles=tuple(tiles),
                            word=result.main_word or word,
                            score=result.score,
                            direction=direction,
                        )
                    )
        return moves

    def formable_words(self, letters: Sequence[str]) -> Dict[int, List[str]]:
        """Formable words grouped by length, memoized per letter multiset."""

        key = "".join(sorted(letters))
        cached = self._formable_cache.get(key)
        if cached is None:
            grouped: Dict[int, List[str]] = defaultdict(list)
            for word in self.dictionary.formable_words(letters, min_length=2):
                grouped[len(word)].append(word)
            cached = dict(grouped)
            self._formable_cache[key] = cached
        return cached

    def _windows(
        self,
        board: Board,
        direction: Direction,
        first_move: bool,
        max_length: int,
    ) -> Iterator[Tuple[List[Position], List[Tuple[int, str]]]]:
        """Yield playable line segments a word could occupy.

        On an empty board a segment must cover the start cell; otherwise it
        must contain an empty cell orthogonally next to a committed letter.
        """

        dr, dc = direction.step
        size = board.size
        center = board.center
        if not first_move:
            starts = [(r, c) for r in range(size) for c in range(size)]
        elif direction is Direction.ACROSS:
            starts = [(center[0], c) for c in range(size)]
        else:
            starts = [(r, center[1]) for r in range(size)]

        for start_row, start_col in starts:
            cells: List[Position] = []
            fixed: List[Tuple[int, str]] = []
            anchored = False
            row, col = start_row, start_col
            while len(cells) < max_length and board.is_playable(row, col):
                letter = board.letter_at(row, col)
                if letter is not None:
                    fixed.append((len(cells), letter))
                elif first_move:
                    anchored = anchored or (row, col) == center
                else:
                    anchored = anchored or board.touches_letter(row, col)
                cells.append((row, col))
                if len(cells) >= 2 and anchored and len(fixed) < len(cells):
                    yield list(cells), list(fixed)
                row, col = row + dr, col + dc

    def _cross_checks(self, board: Board, direction: Direction) -> Dict[Position, FrozenSet[str]]:
        """Letters allowed on each empty cell by the perpendicular word through it.

        Cells without perpendicular neighbors are absent (any letter fits).
        """

        pr, pc = direction.perpendicular.step
        checks: Dict[Position, FrozenSet[str]] = {}
        for cell in board.iter_cells():
            if not cell.is_empty():
                continue
            before = self._read(board, cell.row - pr, cell.col - pc, -pr, -pc)[::-1]
            after = self._read(board, cell.row + pr, cell.col + pc, pr, pc)
            if not before and not after:
                continue
            cache_key = (before, after)
            allowed = self._cross_cache.get(cache_key)
            if allowed is None:
                allowed = frozenset(
                    letter
                    for letter in ascii_uppercase
                    if self.dictionary.contains(before + letter + after)
                )
                self._cross_cache[cache_key] = allowed
            checks[(cell.row, cell.col)] = allowed
        return checks

    @staticmethod
    def _read(board: Board, row: int, col: int, dr: int, dc: int) -> str:
        letters: List[str] = []
        while board.is_playable(row, col):
            letter = board.letter_at(row, col)
            if letter is None:
                break
            letters.append(letter)
            row, col = row + dr, col + dc
        return "".join(letters)


def remaining_after(letters: Sequence[str], used: Sequence[str]) -> Tuple[str, ...]:
    """Remove one occurrence of each used letter."""

    remaining = Counter(letters)
    remaining.subtract(used)
    ordered: List[str] = []
    for letter in letters:
        if remaining[letter] > 0:
            ordered.append(letter)
            remaining[letter] -= 1
    return tuple(ordered)
