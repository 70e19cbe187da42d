"""Pretty-print helpers for puzzle boards."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from ..core.constants import BonusType

if TYPE_CHECKING:
    from ..engine.board import Board
    from ..engine.generator import Puzzle


SYMBOLS = {
    BonusType.NONE: ".",
    BonusType.DL: "dl",
    BonusType.TL: "tl",
    BonusType.DW: "DW",
    BonusType.TW: "TW",
    BonusType.START: "*",
}


def cell_symbol(cell) -> str:
    if not cell.playable:
        return "#"
    if cell.letter:
        return cell.letter
    return SYMBOLS.get(cell.bonus, ".")


def format_board(board: Board) -> str:
    width = board.size
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r in range(width):
        row_cells = [cell_symbol(board.cell(r, c)) for c in range(width)]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def print_puzzle_stats(puzzle: Puzzle, *, stream=None) -> None:
    """Print board + summary stats for a generated puzzle."""

    stream = stream or sys.stdout
    print(format_board(puzzle.board), file=stream)

    stats = puzzle.stats
    archetype = puzzle.archetype.value if puzzle.archetype else "FALLBACK"
    print(file=stream)
    print("--- Board ---", file=stream)
    print(f"  Archetype:     {archetype}", file=stream)
    print(f"  Playable:      {stats.playable_cells} of {puzzle.board.size ** 2} cells", file=stream)
    print(f"  Bonus cells:   {stats.bonus_cells}", file=stream)

    print(file=stream)
    print("--- Letters ---", file=stream)
    print(f"  Pool:          {' '.join(puzzle.letters)}", file=stream)
    print(f"  Vowels:        {stats.vowels} / consonants {stats.consonants}", file=stream)
    if stats.high_value_letters:
        print(f"  High value:    {' '.join(stats.high_value_letters)}", file=stream)
    print(f"  Difficulty:    {stats.difficulty}", file=stream)

    thresholds = puzzle.thresholds
    print(file=stream)
    print("--- Scores ---", file=stream)
    print(f"  Estimate:      {thresholds.estimate}", file=stream)
    print(
        f"  Stars:         {thresholds.good} / {thresholds.great} / {thresholds.excellent}",
        file=stream,
    )
    if puzzle.words:
        print(f"  Best line:     {' -> '.join(puzzle.words)}", file=stream)

    if puzzle.is_fallback:
        print(file=stream)
        print("Fallback puzzle (no generated board passed the gate)", file=stream)
    print(file=stream)
    print(f"Seed: {puzzle.seed}  Id: {puzzle.id}", file=stream)
