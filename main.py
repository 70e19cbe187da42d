"""CLI entrypoint for the daily word-tile puzzle generator."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from tilepuzzle.core.exceptions import PuzzleError
from tilepuzzle.data.dictionary import DictionaryConfig, WordDictionary
from tilepuzzle.engine.generator import GeneratorConfig, PuzzleGenerator
from tilepuzzle.engine.letters import LetterPoolConfig
from tilepuzzle.engine.shape import ShapeConfig
from tilepuzzle.engine.solver import SolverConfig
from tilepuzzle.io.wordlist_client import WordListClient
from tilepuzzle.utils.logger import configure_logging, parse_level
from tilepuzzle.utils.pretty import print_puzzle_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a daily word-tile puzzle and estimate its achievable score",
    )
    parser.add_argument(
        "--seed",
        type=str,
        default=None,
        help="Seed for reproducibility (e.g. a date such as 2026-10-19)",
    )
    parser.add_argument("--size", type=int, default=9, help="Board size in cells")
    parser.add_argument("--letters", type=int, default=14, help="Letter pool size")
    parser.add_argument("--turns", type=int, default=4, help="Turns the estimator plays")
    parser.add_argument("--beam-width", type=int, default=50, help="States kept per turn")
    parser.add_argument("--fan-out", type=int, default=20, help="Moves expanded per state")
    parser.add_argument(
        "--min-estimate", type=int, default=60, help="Lowest acceptable score estimate"
    )
    parser.add_argument(
        "--max-estimate", type=int, default=200, help="Highest acceptable score estimate"
    )
    parser.add_argument(
        "--max-attempts", type=int, default=25, help="Generation attempts before falling back"
    )
    parser.add_argument(
        "--time-budget",
        type=float,
        default=None,
        help="Wall-clock seconds allowed for generation (checked between attempts)",
    )
    parser.add_argument(
        "--dictionary",
        type=Path,
        default=Path("local_db/words.txt"),
        help="Path to a newline separated word list",
    )
    parser.add_argument(
        "--dictionary-url",
        type=str,
        default=None,
        help="Download the word list from this URL into --dictionary first",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Print the board and stats to stderr as well",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    return GeneratorConfig(
        seed=args.seed,
        shape=ShapeConfig(size=args.size),
        letters=LetterPoolConfig(size=args.letters),
        solver=SolverConfig(
            turns=args.turns,
            beam_width=args.beam_width,
            fan_out=args.fan_out,
        ),
        min_estimate=args.min_estimate,
        max_estimate=args.max_estimate,
        max_attempts=args.max_attempts,
        time_budget_seconds=args.time_budget,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        level = parse_level(args.log_level)
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(level)

    try:
        config = build_config(args)
        if args.dictionary_url:
            WordListClient().download(args.dictionary_url, args.dictionary)
        dictionary = WordDictionary(DictionaryConfig(path=args.dictionary))
        puzzle = PuzzleGenerator(config, dictionary).generate()
    except PuzzleError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.pretty:
        print_puzzle_stats(puzzle, stream=sys.stderr)

    output_text = json.dumps(puzzle.to_jsonable(), ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
