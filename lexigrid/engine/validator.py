"""Connectivity and integrity validation for generated grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Set

from ..core.exceptions import ValidationError
from ..core.models import PlacedWord
from .grid import CrosswordGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


@dataclass
class ConnectivityStats:
    is_fully_connected: bool
    total_words: int
    island_count: int
    largest_island_size: int
    average_crossings_per_word: float


def build_word_graph(placed_words: Iterable[PlacedWord]) -> Dict[str, Set[str]]:
    """Undirected adjacency between word ids, one edge per recorded crossing."""

    words = list(placed_words)
    graph: Dict[str, Set[str]] = {word.id: set() for word in words}
    for word in words:
        for crossing in word.crossings:
            if crossing.other_word_id not in graph:
                continue
            graph[word.id].add(crossing.other_word_id)
            graph[crossing.other_word_id].add(word.id)
    return graph


def reachable_from(start: str, graph: Dict[str, Set[str]]) -> Set[str]:
    visited: Set[str] = {start}
    stack = [start]
    while stack:
        current = stack.pop()
        for neighbor in graph.get(current, ()):
            if neighbor not in visited:
                visited.add(neighbor)
                stack.append(neighbor)
    return visited


def is_connected(grid: CrosswordGrid) -> bool:
    """True iff every placed word can be reached from every other one."""

    placed_words = grid.placed_words
    if len(placed_words) <= 1:
        return True
    graph = build_word_graph(placed_words)
    return len(reachable_from(placed_words[0].id, graph)) == len(placed_words)


def find_islands(grid: CrosswordGrid) -> List[List[str]]:
    """All connected components as lists of word ids, in placement order."""

    placed_words = grid.placed_words
    graph = build_word_graph(placed_words)
    visited: Set[str] = set()
    islands: List[List[str]] = []
    for word in placed_words:
        if word.id in visited:
            continue
        component = reachable_from(word.id, graph)
        visited |= component
        islands.append([other.id for other in placed_words if other.id in component])
    return islands


def validate_after_placement(grid: CrosswordGrid, word_id: str) -> bool:
    """Cheap check used right after placing ``word_id``."""

    if len(grid) <= 2:
        return True
    placed = grid.get_placed_word(word_id)
    if placed is None or not placed.crossings:
        return False
    return is_connected(grid)


def connectivity_stats(grid: CrosswordGrid) -> ConnectivityStats:
    placed_words = grid.placed_words
    islands = find_islands(grid)
    total = len(placed_words)
    # Every crossing is stored on both words.
    unique_crossings = sum(len(word.crossings) for word in placed_words) / 2
    return ConnectivityStats(
        is_fully_connected=len(islands) <= 1,
        total_words=total,
        island_count=len(islands),
        largest_island_size=max((len(island) for island in islands), default=0),
        average_crossings_per_word=unique_crossings / total if total else 0.0,
    )


class GridValidator:
    """Runs deterministic integrity checks over a finished grid."""

    def validate(self, grid: CrosswordGrid) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_bounds(grid)
            self._check_letters(grid)
            self._check_crossing_symmetry(grid)
            self._check_adjacency(grid)
            self._check_connectivity(grid)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.warning("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_bounds(self, grid: CrosswordGrid) -> None:
        for word in grid.placed_words:
            end_x, end_y = word.end
            if not grid.in_bounds(word.x, word.y) or not grid.in_bounds(end_x, end_y):
                raise ValidationError(f"Word {word.id} ({word.word}) leaves the grid")

    def _check_letters(self, grid: CrosswordGrid) -> None:
        for word in grid.placed_words:
            for index, (x, y) in enumerate(word.cells):
                cell = grid.cell(x, y)
                if cell.letter != word.word[index] or word.id not in cell.word_ids:
                    raise ValidationError(
                        f"Cell ({x},{y}) holds {cell.letter!r}, expected {word.word[index]!r} of {word.id}"
                    )

    def _check_crossing_symmetry(self, grid: CrosswordGrid) -> None:
        for word in grid.placed_words:
            for crossing in word.crossings:
                other = grid.get_placed_word(crossing.other_word_id)
                if other is None:
                    raise ValidationError(
                        f"Word {word.id} crosses unknown word {crossing.other_word_id}"
                    )
                if crossing.mirrored(word.id) not in other.crossings:
                    raise ValidationError(
                        f"Crossing {word.id}->{other.id} at {crossing.position} is not mirrored"
                    )

    def _check_adjacency(self, grid: CrosswordGrid) -> None:
        conflicts = grid.stray_adjacencies()
        if conflicts:
            x, y, direction = conflicts[0]
            raise ValidationError(
                f"Letters at ({x},{y}) touch a {direction.value} neighbour outside any word"
            )

    def _check_connectivity(self, grid: CrosswordGrid) -> None:
        if not is_connected(grid):
            islands = find_islands(grid)
            raise ValidationError(f"Grid has {len(islands)} disconnected components")
