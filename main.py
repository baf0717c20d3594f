"""CLI entrypoint for the vocabulary crossword generator."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from lexigrid.core.exceptions import WordListError
from lexigrid.core.models import Word
from lexigrid.data.word_banks import sample_words
from lexigrid.data.wordlist import load_words, parse_word_entries
from lexigrid.engine.generator import GenerationReport, GeneratorConfig, PuzzleGenerator
from lexigrid.utils.logger import configure_logging
from lexigrid.utils.pretty import print_generation_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate connected crossword puzzles from a vocabulary list",
    )
    parser.add_argument(
        "--words",
        nargs="+",
        metavar="WORD",
        help="Explicit words (format: WORD or WORD:Clue)",
    )
    parser.add_argument(
        "--words-file",
        type=Path,
        metavar="FILE",
        help="File with one WORD or WORD:Clue entry per line, or a .json list of {id, term, clue}",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Use N words from the bundled Spanish vocabulary",
    )
    parser.add_argument("--max-grid-size", type=int, default=16, help="Largest grid side (default 16)")
    parser.add_argument("--min-grid-size", type=int, default=10, help="Smallest grid side (default 10)")
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=10_000,
        help="Wall-clock budget for the whole job in milliseconds",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Print the puzzles as text grids with clue lists instead of JSON",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def collect_words(args: argparse.Namespace, parser: argparse.ArgumentParser) -> List[Word]:
    words: List[Word] = []
    if args.words:
        words.extend(parse_word_entries(args.words, id_prefix="arg"))
    if args.words_file:
        try:
            words.extend(load_words(args.words_file))
        except WordListError as exc:
            parser.error(str(exc))
    if args.sample is not None:
        if args.sample <= 0:
            parser.error("--sample must be positive")
        words.extend(sample_words(args.sample, seed=args.seed))
    return words


def build_payload(report: GenerationReport) -> Dict[str, Any]:
    return {
        "puzzles": [puzzle.to_dict() for puzzle in report.puzzles],
        "summary": {
            "totalWords": report.total_words,
            "placedWords": report.placed_count,
            "coverage": round(report.coverage, 4),
            "unplacedWords": [{"id": word.id, "term": word.term} for word in report.unplaced_words],
            "elapsedMs": round(report.elapsed_seconds * 1000),
            "timedOut": report.timed_out,
            "cancelled": report.cancelled,
        },
    }


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if not (args.words or args.words_file or args.sample is not None):
        parser.error("provide --words, --words-file or --sample")

    words = collect_words(args, parser)
    try:
        config = GeneratorConfig(
            max_grid_size=args.max_grid_size,
            min_grid_size=args.min_grid_size,
            timeout_ms=args.timeout_ms,
            seed=args.seed,
        )
    except ValueError as exc:
        parser.error(str(exc))

    report = PuzzleGenerator(config).generate(words)

    output_text = json.dumps(build_payload(report), ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    if args.pretty:
        print_generation_stats(report)
    elif not args.output:
        print(output_text)


if __name__ == "__main__":  # pragma: no cover
    main()
