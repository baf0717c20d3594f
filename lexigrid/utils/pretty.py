"""Pretty-print helpers for generated puzzles."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..core.constants import Direction

if TYPE_CHECKING:
    from ..core.models import Puzzle
    from ..engine.generator import GenerationReport


EMPTY_SYMBOL = "."


def format_rows(rows: Sequence[Sequence[Optional[str]]]) -> str:
    width = len(rows[0]) if rows else 0
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * max(0, 3 * width - 1))
    for y, row in enumerate(rows):
        row_render = " ".join(f"{letter or EMPTY_SYMBOL:>2}" for letter in row)
        lines.append(f"{y:>2} | {row_render}")
    return "\n".join(lines)


def format_puzzle(puzzle: Puzzle) -> str:
    return format_rows(puzzle.grid)


def format_clues(puzzle: Puzzle) -> str:
    lines: List[str] = []
    for direction, title in ((Direction.HORIZONTAL, "Across"), (Direction.VERTICAL, "Down")):
        words = sorted(
            (word for word in puzzle.placed_words if word.direction is direction),
            key=lambda word: word.number,
        )
        if not words:
            continue
        lines.append(f"{title}:")
        for word in words:
            clue = word.clue or "(no clue)"
            lines.append(f"  {word.number:>2}. {clue} ({word.length})")
    return "\n".join(lines)


def pretty_print_puzzle(puzzle: Puzzle, *, label: str | None = None, stream=None) -> None:
    """Print the puzzle grid followed by its numbered clues."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_puzzle(puzzle), file=stream)
    print(file=stream)
    print(format_clues(puzzle), file=stream)


def print_generation_stats(report: GenerationReport, *, stream=None) -> None:
    """Print every puzzle of ``report`` and a summary of the job."""

    stream = stream or sys.stdout
    for index, puzzle in enumerate(report.puzzles, start=1):
        pretty_print_puzzle(
            puzzle,
            label=f"=== Puzzle {index}/{len(report.puzzles)} ({puzzle.grid_size}x{puzzle.grid_size}) ===",
            stream=stream,
        )
        print(file=stream)

    lengths = [word.length for puzzle in report.puzzles for word in puzzle.placed_words]
    print("--- Summary ---", file=stream)
    print(f"  Puzzles:       {len(report.puzzles)}", file=stream)
    print(
        f"  Placed words:  {report.placed_count}/{report.total_words} ({report.coverage * 100:.1f}%)",
        file=stream,
    )
    if lengths:
        dist_parts = [f"{l}:{c}" for l, c in sorted(Counter(lengths).items())]
        print(f"  Length range:  {min(lengths)}-{max(lengths)} (avg {sum(lengths) / len(lengths):.1f})", file=stream)
        print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)
    print(f"  Elapsed:       {report.elapsed_seconds * 1000:.0f}ms", file=stream)
    if report.timed_out:
        print("  Stopped early: time budget exhausted", file=stream)
    if report.cancelled:
        print("  Stopped early: cancelled", file=stream)

    if report.unplaced_words:
        print(file=stream)
        print("--- Unplaced ---", file=stream)
        for word in report.unplaced_words:
            print(f"  {word.id}: {word.term or '(empty)'}", file=stream)
