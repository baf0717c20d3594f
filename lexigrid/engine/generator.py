"""Main puzzle generator orchestration.

Pipeline for a word collection:
  1. Cluster the words into letter-compatible groups sized for one puzzle.
  2. For each cluster, run several seeded word orderings, each on a fresh
     grid, keep the attempt that placed the most words, optionally backtrack,
     then crop it into a :class:`Puzzle`.
  3. Push every unplaced word into the clusters not processed yet; words left
     over at the end are re-clustered into small groups and retried.
"""

from __future__ import annotations

import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..core.exceptions import PlacementError
from ..core.models import PlacedWord, Puzzle, Word
from ..utils.logger import get_logger
from .clustering import ClusterConfig, WordClusterer, clustering_stats
from .grid import CrosswordGrid, GridConfig
from .placement import count_crossings, find_placements
from .scoring import PlacementScorer, ScoringWeights
from .validator import GridValidator, is_connected


LOGGER = get_logger(__name__)


def _retry_cluster_config() -> ClusterConfig:
    return ClusterConfig(min_cluster_size=3, max_cluster_size=8, target_cluster_size=6)


@dataclass
class GeneratorConfig:
    max_grid_size: int = 16
    min_grid_size: int = 10
    timeout_ms: Optional[int] = 10_000
    min_crossings_per_word: int = 1
    max_attempts_per_word: int = 100
    seed: Optional[Union[int, str]] = None
    max_attempts: int = 30
    backtrack_depth: int = 3
    backtrack_max_failed: int = 3
    min_acceptable_ratio: float = 0.8
    max_retry_rounds: int = 3
    min_puzzle_words: int = 1
    strict: bool = False
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    cluster_config: ClusterConfig = field(default_factory=ClusterConfig)
    retry_cluster_config: ClusterConfig = field(default_factory=_retry_cluster_config)

    def __post_init__(self) -> None:
        if self.min_grid_size < 1:
            raise ValueError(f"min_grid_size must be positive, got {self.min_grid_size}")
        if self.max_grid_size < self.min_grid_size:
            raise ValueError(
                f"max_grid_size ({self.max_grid_size}) is below min_grid_size ({self.min_grid_size})"
            )
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive or None")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def grid_size_for(self, longest: int) -> int:
        return max(self.min_grid_size, min(self.max_grid_size, longest * 2))

    def to_grid_config(self, longest: int) -> GridConfig:
        return GridConfig(size=self.grid_size_for(longest))


@dataclass
class GenerationResult:
    """Outcome of generating a single puzzle from one word group."""

    success: bool
    puzzle: Optional[Puzzle]
    placed_words: List[PlacedWord]
    unplaced_words: List[Word]
    grid_size: int
    elapsed_seconds: float
    attempts_made: int
    connected: bool = True
    backtracked: bool = False
    density: float = 0.0


@dataclass
class GenerationReport:
    """Outcome of a full multi-puzzle generation job."""

    puzzles: List[Puzzle]
    unplaced_words: List[Word]
    total_words: int
    elapsed_seconds: float
    timed_out: bool = False
    cancelled: bool = False

    @property
    def placed_count(self) -> int:
        return sum(len(puzzle.placed_words) for puzzle in self.puzzles)

    @property
    def coverage(self) -> float:
        return self.placed_count / self.total_words if self.total_words else 1.0


@dataclass
class _Budget:
    """Wall-clock deadline plus optional cooperative cancellation flag."""

    deadline: Optional[float]
    cancel_event: Optional[threading.Event] = None
    timed_out: bool = False
    cancelled: bool = False

    def exhausted(self) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.cancelled = True
            return True
        if self.deadline is not None and time.monotonic() >= self.deadline:
            self.timed_out = True
            return True
        return False


@dataclass
class _Attempt:
    grid: CrosswordGrid
    failed: List[Word]

    @property
    def placed_count(self) -> int:
        return len(self.grid)


def can_form_puzzle(words: Sequence[Word]) -> bool:
    """Cheap check that at least two words share a letter."""

    if not words:
        return False
    if len(words) == 1:
        return True
    seen: Dict[str, int] = {}
    for word in words:
        for letter in set(word.term):
            seen[letter] = seen.get(letter, 0) + 1
            if seen[letter] >= 2:
                return True
    return False


class PuzzleGenerator:
    """High-level orchestrator: clustering, placement attempts, assembly.

    One generator owns its random source; it must not be shared between
    threads. Run independent jobs on independent generators.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None, rng: Optional[random.Random] = None) -> None:
        self.config = config or GeneratorConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.scorer = PlacementScorer(self.config.weights)
        self.validator = GridValidator()

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def generate_puzzles(
        self, words: Iterable[Word], cancel_event: Optional[threading.Event] = None
    ) -> List[Puzzle]:
        return self.generate(words, cancel_event).puzzles

    def generate(
        self, words: Iterable[Word], cancel_event: Optional[threading.Event] = None
    ) -> GenerationReport:
        started = time.monotonic()
        budget = self._start_budget(cancel_event)
        usable, unplaced = self._prepare_words(words)
        total = len(usable) + len(unplaced)
        if not usable:
            return GenerationReport([], unplaced, total, time.monotonic() - started)

        LOGGER.info("Generating puzzles for %d words", len(usable))
        clusterer = WordClusterer(self.config.cluster_config)
        clusters = clusterer.cluster(usable)
        stats = clustering_stats(clusters)
        LOGGER.info(
            "Created %d clusters - avg size %.1f, avg compatibility %.1f, difficulty %dE/%dM/%dH",
            stats.total_clusters,
            stats.avg_cluster_size,
            stats.avg_score,
            stats.difficulty_breakdown["easy"],
            stats.difficulty_breakdown["medium"],
            stats.difficulty_breakdown["hard"],
        )

        puzzles: List[Puzzle] = []
        leftovers: List[Word] = []
        for index, cluster in enumerate(clusters):
            if budget.exhausted():
                for pending in clusters[index:]:
                    unplaced.extend(pending.words)
                LOGGER.info("Stopping before cluster %d/%d: budget exhausted", index + 1, len(clusters))
                break

            LOGGER.info(
                "Puzzle %d/%d: %d words (%s)",
                index + 1,
                len(clusters),
                len(cluster),
                cluster.difficulty.value,
            )
            result = self._solve_cluster(cluster.words, budget, allow_backtracking=index > 0)
            if result.puzzle is None:
                LOGGER.warning("Failed to place any word of cluster %d", index + 1)
                leftovers.extend(cluster.words)
                continue

            puzzles.append(result.puzzle)
            if not result.unplaced_words:
                continue
            LOGGER.info(
                "%d words not placed: %s",
                len(result.unplaced_words),
                ", ".join(word.term for word in result.unplaced_words),
            )
            later = clusters[index + 1:]
            if later:
                clusterer.redistribute_failed_words(result.unplaced_words, later)
            else:
                leftovers.extend(result.unplaced_words)

        unplaced.extend(self._retry_leftovers(leftovers, budget, puzzles))
        puzzles = self._drop_small_puzzles(puzzles, usable, unplaced)

        report = GenerationReport(
            puzzles=puzzles,
            unplaced_words=unplaced,
            total_words=total,
            elapsed_seconds=time.monotonic() - started,
            timed_out=budget.timed_out,
            cancelled=budget.cancelled,
        )
        LOGGER.info(
            "Generated %d puzzles - %d/%d words (%.1f%% coverage) in %.0fms",
            len(report.puzzles),
            report.placed_count,
            report.total_words,
            report.coverage * 100,
            report.elapsed_seconds * 1000,
        )
        return report

    def generate_puzzle(
        self, words: Iterable[Word], cancel_event: Optional[threading.Event] = None
    ) -> Optional[Puzzle]:
        """Build one puzzle from ``words`` without clustering."""

        return self.generate_with_stats(words, cancel_event).puzzle

    def generate_with_stats(
        self, words: Iterable[Word], cancel_event: Optional[threading.Event] = None
    ) -> GenerationResult:
        budget = self._start_budget(cancel_event)
        usable, rejected = self._prepare_words(words)
        if not usable:
            return GenerationResult(
                success=False,
                puzzle=None,
                placed_words=[],
                unplaced_words=rejected,
                grid_size=0,
                elapsed_seconds=0.0,
                attempts_made=0,
            )
        result = self._solve_cluster(usable, budget, allow_backtracking=False)
        result.unplaced_words.extend(rejected)
        return result

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------
    def _start_budget(self, cancel_event: Optional[threading.Event]) -> _Budget:
        timeout_ms = self.config.timeout_ms
        deadline = time.monotonic() + timeout_ms / 1000 if timeout_ms is not None else None
        return _Budget(deadline=deadline, cancel_event=cancel_event)

    def _prepare_words(self, words: Iterable[Word]) -> Tuple[List[Word], List[Word]]:
        usable: List[Word] = []
        rejected: List[Word] = []
        seen = set()
        for word in words:
            if word.id in seen:
                LOGGER.warning("Ignoring duplicate word id %s (%s)", word.id, word.term)
                continue
            seen.add(word.id)
            if not word.term:
                LOGGER.warning("Word %s has no letters after normalization", word.id)
                rejected.append(word)
            elif len(word.term) > self.config.max_grid_size:
                LOGGER.warning(
                    "Word %s (%d letters) cannot fit a %dx%d grid",
                    word.term,
                    len(word.term),
                    self.config.max_grid_size,
                    self.config.max_grid_size,
                )
                rejected.append(word)
            else:
                usable.append(word)
        return usable, rejected

    # ------------------------------------------------------------------
    # Single cluster
    # ------------------------------------------------------------------
    def _solve_cluster(self, words: Sequence[Word], budget: _Budget, allow_backtracking: bool) -> GenerationResult:
        started = time.monotonic()
        best, attempts = self._run_attempts(words, budget)

        if best.placed_count == 0:
            LOGGER.error("Failed to place any words after %d attempts", attempts)
            return GenerationResult(
                success=False,
                puzzle=None,
                placed_words=[],
                unplaced_words=list(words),
                grid_size=0,
                elapsed_seconds=time.monotonic() - started,
                attempts_made=attempts,
            )

        backtracked = False
        if (
            allow_backtracking
            and 0 < len(best.failed) <= self.config.backtrack_max_failed
            and not budget.exhausted()
        ):
            LOGGER.debug("Backtracking for %d failed words", len(best.failed))
            improved = self._backtrack(best, budget)
            if improved is not None and improved.placed_count > best.placed_count:
                LOGGER.info(
                    "Backtracking improved placement: %d/%d words", improved.placed_count, len(words)
                )
                best = improved
                backtracked = True

        acceptable = max(1, int(len(words) * self.config.min_acceptable_ratio))
        if best.placed_count < acceptable:
            LOGGER.info(
                "Best attempt placed %d/%d words, below the acceptable %d",
                best.placed_count,
                len(words),
                acceptable,
            )

        validation = self.validator.validate(best.grid)
        if not validation.ok:
            LOGGER.warning("Generated puzzle failed validation: %s", "; ".join(validation.messages))
        connected = is_connected(best.grid)
        uncropped_size = best.grid.size
        filled = best.grid.filled_count
        puzzle = self._to_puzzle(best.grid)
        placed_ids = puzzle.word_ids
        elapsed = time.monotonic() - started
        density = filled / (puzzle.grid_size * puzzle.grid_size)
        LOGGER.info(
            "Generated puzzle in %.0fms - %d/%d words - %dx%d grid (cropped from %d, %.0f%% filled) - %s",
            elapsed * 1000,
            len(placed_ids),
            len(words),
            puzzle.grid_size,
            puzzle.grid_size,
            uncropped_size,
            density * 100,
            "connected" if connected else "disconnected",
        )
        return GenerationResult(
            success=True,
            puzzle=puzzle,
            placed_words=list(puzzle.placed_words),
            unplaced_words=[word for word in words if word.id not in placed_ids],
            grid_size=puzzle.grid_size,
            elapsed_seconds=elapsed,
            attempts_made=attempts,
            connected=connected,
            backtracked=backtracked,
            density=density,
        )

    def _run_attempts(self, words: Sequence[Word], budget: _Budget) -> Tuple[_Attempt, int]:
        baseline = sorted(words, key=lambda word: len(word.term), reverse=True)
        # The first attempt always runs, even on an exhausted budget.
        best = self._build_attempt(baseline, budget)
        attempts = 1
        self._log_attempt(attempts, best, len(words))
        while attempts < self.config.max_attempts and best.placed_count < len(words):
            if budget.exhausted():
                LOGGER.debug("Budget exhausted after %d attempts", attempts)
                break
            rest = baseline[1:]
            self.rng.shuffle(rest)
            outcome = self._build_attempt([baseline[0], *rest], budget)
            attempts += 1
            self._log_attempt(attempts, outcome, len(words))
            if outcome.placed_count > best.placed_count:
                best = outcome
        return best, attempts

    def _log_attempt(self, number: int, outcome: _Attempt, total: int) -> None:
        LOGGER.debug(
            "Attempt %d/%d placed %d/%d words",
            number,
            self.config.max_attempts,
            outcome.placed_count,
            total,
        )

    def _build_attempt(
        self, ordered: Sequence[Word], budget: _Budget, grid: Optional[CrosswordGrid] = None
    ) -> _Attempt:
        if grid is None:
            longest = max(len(word.term) for word in ordered)
            grid = CrosswordGrid(self.config.to_grid_config(longest))
        failed: List[Word] = []
        consecutive_failures = 0
        failure_limit = self.config.max_attempts_per_word * len(ordered)

        for position, word in enumerate(ordered):
            if len(grid) > 0 and budget.exhausted():
                failed.extend(ordered[position:])
                break
            if consecutive_failures > failure_limit:
                LOGGER.debug("Too many consecutive failures, abandoning attempt")
                failed.extend(ordered[position:])
                break
            if self._place_next(grid, word):
                consecutive_failures = 0
            else:
                failed.append(word)
                consecutive_failures += 1
        return _Attempt(grid=grid, failed=failed)

    def _place_next(self, grid: CrosswordGrid, word: Word) -> bool:
        options = find_placements(word, grid)
        minimum = self.config.min_crossings_per_word
        if len(grid) > 0 and minimum > 1:
            options = [option for option in options if count_crossings(option, grid) >= minimum]
        best = self.scorer.best_placement(options, grid)
        if best is None:
            return False
        try:
            placed = grid.place(word, best.x, best.y, best.direction)
        except PlacementError:
            if self.config.strict:
                raise
            LOGGER.exception("Skipping inconsistent placement of %s", word.term)
            return False
        return placed is not None

    def _backtrack(self, best: _Attempt, budget: _Budget) -> Optional[_Attempt]:
        """Undo the last placements on a copy and retry with failed words first."""

        order = [placed.id for placed in best.grid.placed_words]
        depth = min(self.config.backtrack_depth, len(order))
        if depth == 0:
            return None

        base = best.grid.clone()
        removed: List[Word] = []
        for word_id in order[-depth:]:
            placed = base.get_placed_word(word_id)
            if placed is None:
                continue
            removed.append(Word(id=placed.id, term=placed.word, clue=placed.clue))
            base.remove(word_id)
        if base.stray_adjacencies():
            LOGGER.debug("Removing the last %d words leaves stray letters, skipping backtrack", depth)
            return None

        improved: Optional[_Attempt] = None
        best_count = best.placed_count
        for failed_word in best.failed:
            shuffled = list(removed)
            self.rng.shuffle(shuffled)
            orderings = (
                [failed_word, *removed],
                [*removed, failed_word],
                [failed_word, *shuffled],
            )
            others = [word for word in best.failed if word.id != failed_word.id]
            for ordering in orderings:
                if budget.exhausted():
                    return improved
                trial = self._build_attempt(ordering, budget, grid=base.clone())
                if trial.placed_count <= best_count:
                    continue
                best_count = trial.placed_count
                improved = _Attempt(grid=trial.grid, failed=trial.failed + others)
                if failed_word.id in trial.grid:
                    return improved
        return improved

    # ------------------------------------------------------------------
    # Multi-puzzle helpers
    # ------------------------------------------------------------------
    def _retry_leftovers(self, pool: List[Word], budget: _Budget, puzzles: List[Puzzle]) -> List[Word]:
        """Retry leftover words in small clusters until the pool stops shrinking."""

        rounds = 0
        while pool and rounds < self.config.max_retry_rounds and not budget.exhausted():
            rounds += 1
            LOGGER.info("Retry round %d: %d unplaced words", rounds, len(pool))
            next_pool: List[Word] = []
            for cluster in WordClusterer(self.config.retry_cluster_config).cluster(pool):
                if budget.exhausted():
                    next_pool.extend(cluster.words)
                    continue
                result = self._solve_cluster(cluster.words, budget, allow_backtracking=False)
                if result.puzzle is None:
                    next_pool.extend(cluster.words)
                    continue
                puzzles.append(result.puzzle)
                next_pool.extend(result.unplaced_words)
            progressed = len(next_pool) < len(pool)
            pool = next_pool
            if not progressed:
                break
        if pool:
            LOGGER.info(
                "%d words left unplaced: %s", len(pool), ", ".join(word.term for word in pool)
            )
        return pool

    def _drop_small_puzzles(
        self, puzzles: List[Puzzle], words: Sequence[Word], unplaced: List[Word]
    ) -> List[Puzzle]:
        minimum = self.config.min_puzzle_words
        if minimum <= 1:
            return puzzles
        by_id = {word.id: word for word in words}
        kept: List[Puzzle] = []
        for puzzle in puzzles:
            if len(puzzle.placed_words) >= minimum:
                kept.append(puzzle)
                continue
            unplaced.extend(by_id[placed.id] for placed in puzzle.placed_words)
        if len(kept) < len(puzzles):
            LOGGER.info("Filtered out %d puzzle(s) with fewer than %d words", len(puzzles) - len(kept), minimum)
        return kept

    def _to_puzzle(self, grid: CrosswordGrid) -> Puzzle:
        grid.renumber()
        cropped = grid.crop()
        return Puzzle(
            id=f"puzzle-{uuid.UUID(int=self.rng.getrandbits(128), version=4)}",
            grid_size=cropped.size,
            placed_words=tuple(cropped.placed_words),
            grid=tuple(tuple(row) for row in cropped.rows),
        )
