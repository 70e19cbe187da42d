"""Immutable board model shared by the generator, scorer and solver."""

from __future__ import annotations

from collections import Counter, deque
from dataclasses import replace
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from ..core.constants import ORTHOGONAL_STEPS, BonusType, Bounds
from ..core.exceptions import ConfigError
from ..core.models import Cell, PlacedTile

Mask = List[List[bool]]
Position = Tuple[int, int]

LAYOUT_SYMBOLS: Dict[str, BonusType] = {
    ".": BonusType.NONE,
    "d": BonusType.DL,
    "t": BonusType.TL,
    "D": BonusType.DW,
    "T": BonusType.TW,
    "*": BonusType.START,
}
DEAD_SYMBOL = "#"


def mirror(size: int, row: int, col: int) -> Position:
    """Return the partner of ``(row, col)`` under 180 degree rotation."""

    return size - 1 - row, size - 1 - col


def flood_fill(mask: Sequence[Sequence[bool]], start: Position) -> Set[Position]:
    """Return every playable cell orthogonally reachable from ``start``."""

    size = len(mask)
    bounds = Bounds(size, size)
    row, col = start
    if not bounds.contains(row, col) or not mask[row][col]:
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        r, c = queue.popleft()
        for dr, dc in ORTHOGONAL_STEPS:
            nr, nc = r + dr, c + dc
            if bounds.contains(nr, nc) and mask[nr][nc] and (nr, nc) not in seen:
                seen.add((nr, nc))
                queue.append((nr, nc))
    return seen


class Board:
    """Square board of cells. Placing tiles returns a new board."""

    def __init__(self, size: int, cells: Sequence[Sequence[Cell]]) -> None:
        if size < 3:
            raise ConfigError(f"Board size must be at least 3, got {size}")
        self.size = size
        self.bounds = Bounds(size, size)
        self._cells: Tuple[Tuple[Cell, ...], ...] = tuple(tuple(row) for row in cells)
        self._has_letters = any(cell.letter is not None for row in self._cells for cell in row)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def empty(cls, size: int) -> "Board":
        """Fully playable board with only the start cell tagged."""

        center = size // 2
        return cls.from_layout(
            [[True] * size for _ in range(size)],
            {(center, center): BonusType.START},
        )

    @classmethod
    def from_layout(
        cls,
        playable: Sequence[Sequence[bool]],
        bonuses: Optional[Mapping[Position, BonusType]] = None,
    ) -> "Board":
        size = len(playable)
        bonuses = bonuses or {}
        cells = [
            [
                Cell(
                    row=r,
                    col=c,
                    playable=bool(playable[r][c]),
                    bonus=bonuses.get((r, c), BonusType.NONE) if playable[r][c] else BonusType.NONE,
                )
                for c in range(size)
            ]
            for r in range(size)
        ]
        return cls(size, cells)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Board":
        """Parse a text layout (``#`` dead, ``.`` plain, ``dtDT`` bonuses, ``*`` start)."""

        size = len(rows)
        if any(len(line) != size for line in rows):
            raise ConfigError("Board layout must be square")
        playable: Mask = []
        bonuses: Dict[Position, BonusType] = {}
        for r, line in enumerate(rows):
            mask_row = []
            for c, symbol in enumerate(line):
                if symbol == DEAD_SYMBOL:
                    mask_row.append(False)
                    continue
                if symbol not in LAYOUT_SYMBOLS:
                    raise ConfigError(f"Unknown layout symbol {symbol!r} at ({r},{c})")
                mask_row.append(True)
                if LAYOUT_SYMBOLS[symbol] is not BonusType.NONE:
                    bonuses[(r, c)] = LAYOUT_SYMBOLS[symbol]
            playable.append(mask_row)
        return cls.from_layout(playable, bonuses)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def center(self) -> Position:
        return self.size // 2, self.size // 2

    def cell(self, row: int, col: int) -> Cell:
        return self._cells[row][col]

    def iter_cells(self) -> Iterator[Cell]:
        for row in self._cells:
            yield from row

    def is_playable(self, row: int, col: int) -> bool:
        return self.bounds.contains(row, col) and self._cells[row][col].playable

    def letter_at(self, row: int, col: int) -> Optional[str]:
        if not self.bounds.contains(row, col):
            return None
        return self._cells[row][col].letter

    def has_letters(self) -> bool:
        return self._has_letters

    def neighbors(self, row: int, col: int) -> Iterator[Cell]:
        for dr, dc in ORTHOGONAL_STEPS:
            nr, nc = row + dr, col + dc
            if self.bounds.contains(nr, nc):
                yield self._cells[nr][nc]

    def touches_letter(self, row: int, col: int) -> bool:
        return any(neighbor.letter is not None for neighbor in self.neighbors(row, col))

    def playable_mask(self) -> Mask:
        return [[cell.playable for cell in row] for row in self._cells]

    def playable_count(self) -> int:
        return sum(1 for cell in self.iter_cells() if cell.playable)

    def bonus_counts(self) -> Dict[BonusType, int]:
        counts = Counter(cell.bonus for cell in self.iter_cells() if cell.playable)
        counts.pop(BonusType.NONE, None)
        return dict(counts)

    def is_symmetric(self) -> bool:
        for cell in self.iter_cells():
            mr, mc = mirror(self.size, cell.row, cell.col)
            if self._cells[mr][mc].playable != cell.playable:
                return False
        return True

    def is_connected(self) -> bool:
        reachable = flood_fill(self.playable_mask(), self.center)
        return len(reachable) == self.playable_count()

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def with_placement(self, tiles: Iterable[PlacedTile]) -> "Board":
        """Return a copy of the board with ``tiles`` committed and locked."""

        rows = [list(row) for row in self._cells]
        for tile in tiles:
            current = rows[tile.row][tile.col]
            rows[tile.row][tile.col] = replace(current, letter=tile.letter.upper(), locked=True)
        return Board(self.size, rows)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def to_rows(self) -> List[str]:
        symbol_for = {bonus: symbol for symbol, bonus in LAYOUT_SYMBOLS.items()}
        lines = []
        for row in self._cells:
            line = []
            for cell in row:
                if not cell.playable:
                    line.append(DEAD_SYMBOL)
                else:
                    line.append(symbol_for[cell.bonus])
            lines.append("".join(line))
        return lines

    def to_jsonable(self) -> dict:
        return {
            "size": self.size,
            "cells": [
                {
                    "row": cell.row,
                    "col": cell.col,
                    "playable": cell.playable,
                    "bonus": cell.bonus.value,
                    "letter": cell.letter,
                }
                for cell in self.iter_cells()
            ],
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self._cells == other._cells

    def __hash__(self) -> int:
        return hash((self.size, self._cells))
