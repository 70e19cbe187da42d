"""Daily word-tile puzzle generator.

This package exposes the public API surface via:

- ``tilepuzzle.engine.generator.PuzzleGenerator``: orchestrates board, bonus
  and letter generation and gates each attempt on a score estimate.
- ``tilepuzzle.engine.solver.BeamSearchSolver``: estimates a realistic high score.
- ``tilepuzzle.data.dictionary.WordDictionary``: loads and queries the word list.
"""

from .engine.generator import GeneratorConfig, Puzzle, PuzzleGenerator
from .engine.solver import BeamSearchSolver, SolverConfig
from .data.dictionary import WordDictionary, DictionaryConfig

__all__ = [
    "PuzzleGenerator",
    "GeneratorConfig",
    "Puzzle",
    "BeamSearchSolver",
    "SolverConfig",
    "WordDictionary",
    "DictionaryConfig",
]

__version__ = "0.1.0"
