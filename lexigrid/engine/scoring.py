"""Weighted heuristic used to rank candidate placements.

score = crossing_count * crossings
      + density * clustering of the candidate around filled cells
      + letter_rarity * rarity of the crossing letters
      + center_proximity * closeness of the candidate midpoint to the center
      - bounding_box_penalty * growth of the occupied rectangle

The weights are hand-tuned defaults; callers may pass their own
:class:`ScoringWeights`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import LETTER_RARITY, MAX_LETTER_RARITY, Direction
from ..core.models import PlacementOption
from .grid import CrosswordGrid
from .placement import crossing_letters


@dataclass(frozen=True)
class ScoringWeights:
    crossing_count: float = 100.0
    density: float = 50.0
    letter_rarity: float = 10.0
    center_proximity: float = 25.0
    bounding_box_penalty: float = 15.0


DEFAULT_WEIGHTS = ScoringWeights()


def letter_rarity(letter: str) -> int:
    return LETTER_RARITY.get(letter.upper(), 1)


@dataclass
class _GridSnapshot:
    """Per-step view of the grid shared by every candidate being scored."""

    size: int
    filled_x: np.ndarray
    filled_y: np.ndarray
    used_bounds: Optional[Tuple[int, int, int, int]]

    @classmethod
    def of(cls, grid: CrosswordGrid) -> "_GridSnapshot":
        filled = grid.filled_cells()
        coords = np.array(filled, dtype=np.int64).reshape(-1, 2)
        return cls(
            size=grid.size,
            filled_x=coords[:, 0],
            filled_y=coords[:, 1],
            used_bounds=grid.used_bounds(),
        )


@dataclass(frozen=True)
class ScoreBreakdown:
    """Weighted terms of one option's score; ``total`` subtracts the penalty."""

    option: PlacementOption
    crossings: float
    density: float
    rarity: float
    center: float
    bounding_box_penalty: float

    @property
    def total(self) -> float:
        return self.crossings + self.density + self.rarity + self.center - self.bounding_box_penalty


class PlacementScorer:
    """Scores placement options against a grid and picks the best one."""

    def __init__(self, weights: ScoringWeights = DEFAULT_WEIGHTS) -> None:
        self.weights = weights

    def score(self, option: PlacementOption, grid: CrosswordGrid) -> float:
        return self._score(option, grid, _GridSnapshot.of(grid))

    def best_placement(
        self, options: Sequence[PlacementOption], grid: CrosswordGrid
    ) -> Optional[PlacementOption]:
        """Score ``options`` in place and return the highest scoring one."""

        ranked = self.rank(options, grid)
        return ranked[0] if ranked else None

    def rank(self, options: Sequence[PlacementOption], grid: CrosswordGrid) -> List[PlacementOption]:
        """Score ``options`` in place; highest first, ties keep input order."""

        snapshot = _GridSnapshot.of(grid)
        for option in options:
            option.score = self._score(option, grid, snapshot)
        return sorted(options, key=lambda option: option.score, reverse=True)

    def analyze(self, options: Sequence[PlacementOption], grid: CrosswordGrid) -> List[ScoreBreakdown]:
        """Per-term breakdown of every option, in input order."""

        snapshot = _GridSnapshot.of(grid)
        return [self._breakdown(option, grid, snapshot) for option in options]

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------
    def _score(self, option: PlacementOption, grid: CrosswordGrid, snapshot: _GridSnapshot) -> float:
        return self._breakdown(option, grid, snapshot).total

    def _breakdown(
        self, option: PlacementOption, grid: CrosswordGrid, snapshot: _GridSnapshot
    ) -> ScoreBreakdown:
        letters = crossing_letters(option, grid)
        weights = self.weights
        return ScoreBreakdown(
            option=option,
            crossings=weights.crossing_count * len(letters),
            density=weights.density * density_score(option, snapshot),
            rarity=weights.letter_rarity * rarity_score(letters),
            center=weights.center_proximity * center_score(option, snapshot.size),
            bounding_box_penalty=weights.bounding_box_penalty
            * bounding_box_penalty(option, snapshot.used_bounds),
        )


def density_score(option: PlacementOption, snapshot: _GridSnapshot) -> float:
    """1 minus the mean distance of filled cells to the candidate, over grid size."""

    if snapshot.filled_x.size == 0:
        return 0.0
    length = len(option.word.term)
    # Manhattan distance from each filled cell to the nearest cell of the run.
    if option.direction is Direction.HORIZONTAL:
        along = np.maximum(0, np.maximum(option.x - snapshot.filled_x, snapshot.filled_x - (option.x + length - 1)))
        across = np.abs(snapshot.filled_y - option.y)
    else:
        along = np.maximum(0, np.maximum(option.y - snapshot.filled_y, snapshot.filled_y - (option.y + length - 1)))
        across = np.abs(snapshot.filled_x - option.x)
    avg_distance = float(np.mean(along + across))
    return max(0.0, 1.0 - avg_distance / snapshot.size)


def rarity_score(letters: List[str]) -> float:
    if not letters:
        return 0.0
    average = sum(letter_rarity(letter) for letter in letters) / len(letters)
    return average / MAX_LETTER_RARITY


def center_score(option: PlacementOption, size: int) -> float:
    center = size / 2
    half_length = len(option.word.term) / 2
    if option.direction is Direction.HORIZONTAL:
        mid_x, mid_y = option.x + half_length, float(option.y)
    else:
        mid_x, mid_y = float(option.x), option.y + half_length
    distance = math.hypot(mid_x - center, mid_y - center)
    max_distance = math.sqrt(2 * (size / 2) ** 2)
    return max(0.0, 1.0 - distance / max_distance)


def bounding_box_penalty(
    option: PlacementOption, used_bounds: Optional[Tuple[int, int, int, int]]
) -> float:
    """Fractional growth of the occupied rectangle caused by ``option``."""

    if used_bounds is None:
        return 0.0
    min_x, min_y, max_x, max_y = used_bounds
    dx, dy = option.direction.step
    length = len(option.word.term)
    end_x = option.x + dx * (length - 1)
    end_y = option.y + dy * (length - 1)

    width = max_x - min_x + 1
    height = max_y - min_y + 1
    new_width = max(max_x, end_x) - min(min_x, option.x) + 1
    new_height = max(max_y, end_y) - min(min_y, option.y) + 1
    return max(0.0, (new_width - width) / width, (new_height - height) / height)


def get_best_placement(
    options: Sequence[PlacementOption],
    grid: CrosswordGrid,
    weights: Optional[ScoringWeights] = None,
) -> Optional[PlacementOption]:
    return PlacementScorer(weights or DEFAULT_WEIGHTS).best_placement(options, grid)


def rank_placements(
    options: Sequence[PlacementOption],
    grid: CrosswordGrid,
    weights: Optional[ScoringWeights] = None,
) -> List[PlacementOption]:
    return PlacementScorer(weights or DEFAULT_WEIGHTS).rank(options, grid)


def analyze_placements(
    options: Sequence[PlacementOption],
    grid: CrosswordGrid,
    weights: Optional[ScoringWeights] = None,
) -> List[ScoreBreakdown]:
    """Score breakdown per option, for inspecting why one placement wins."""

    return PlacementScorer(weights or DEFAULT_WEIGHTS).analyze(options, grid)
