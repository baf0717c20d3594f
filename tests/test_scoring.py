import unittest

from lexigrid.core.constants import Direction
from lexigrid.core.models import PlacementOption, Word
from lexigrid.engine.grid import CrosswordGrid, GridConfig
from lexigrid.engine.placement import find_placements
from lexigrid.engine.scoring import (
    PlacementScorer,
    ScoringWeights,
    _GridSnapshot,
    analyze_placements,
    bounding_box_penalty,
    center_score,
    density_score,
    get_best_placement,
    letter_rarity,
    rarity_score,
    rank_placements,
)


def grid_with_hello() -> CrosswordGrid:
    grid = CrosswordGrid(GridConfig(size=10))
    grid.place(Word("w1", "HELLO"), 2, 5, Direction.HORIZONTAL)
    return grid


class LetterRarityTests(unittest.TestCase):
    def test_table_values(self) -> None:
        self.assertEqual(letter_rarity("E"), 1)
        self.assertEqual(letter_rarity("d"), 2)
        self.assertEqual(letter_rarity("K"), 3)
        self.assertEqual(letter_rarity("Q"), 5)
        self.assertEqual(letter_rarity("?"), 1)

    def test_rarity_score_normalized(self) -> None:
        self.assertEqual(rarity_score([]), 0.0)
        self.assertEqual(rarity_score(["Q"]), 1.0)
        self.assertAlmostEqual(rarity_score(["E", "Z"]), 0.6)


class ComponentTests(unittest.TestCase):
    def test_density_matches_mean_manhattan_distance(self) -> None:
        snapshot = _GridSnapshot.of(grid_with_hello())
        option = PlacementOption(word=Word("w2", "AB"), x=3, y=3, direction=Direction.HORIZONTAL)
        # HELLO fills (2..6, 5); the run covers (3,3) and (4,3).
        # Distances: 1+2, 0+2, 0+2, 1+2, 2+2 -> mean 2.8 over a size 10 grid.
        self.assertAlmostEqual(density_score(option, snapshot), 1 - 2.8 / 10)

    def test_density_vertical_run(self) -> None:
        snapshot = _GridSnapshot.of(grid_with_hello())
        option = PlacementOption(word=Word("w2", "AB"), x=4, y=6, direction=Direction.VERTICAL)
        # Run covers (4,6) and (4,7); distances 1+2, 1+1, 1+0, 1+1, 1+2.
        self.assertAlmostEqual(density_score(option, snapshot), 1 - 2.2 / 10)

    def test_tighter_candidate_scores_higher(self) -> None:
        snapshot = _GridSnapshot.of(grid_with_hello())
        word = Word("w2", "AB")
        near = PlacementOption(word=word, x=3, y=3, direction=Direction.HORIZONTAL)
        far = PlacementOption(word=word, x=3, y=0, direction=Direction.HORIZONTAL)
        self.assertAlmostEqual(density_score(far, snapshot), 1 - 5.8 / 10)
        self.assertGreater(density_score(near, snapshot), density_score(far, snapshot))

    def test_density_zero_on_empty_grid(self) -> None:
        snapshot = _GridSnapshot.of(CrosswordGrid(GridConfig(size=10)))
        option = PlacementOption(word=Word("w1", "HELLO"), x=2, y=5, direction=Direction.HORIZONTAL)
        self.assertEqual(density_score(option, snapshot), 0.0)

    def test_center_prefers_middle(self) -> None:
        word = Word("w1", "HELLO")
        middle = PlacementOption(word=word, x=2, y=5, direction=Direction.HORIZONTAL)
        corner = PlacementOption(word=word, x=0, y=0, direction=Direction.HORIZONTAL)
        self.assertGreater(center_score(middle, 10), center_score(corner, 10))
        self.assertLessEqual(center_score(middle, 10), 1.0)

    def test_bounding_box_growth(self) -> None:
        grid = grid_with_hello()
        option = PlacementOption(word=Word("w2", "WORLD"), x=4, y=2, direction=Direction.VERTICAL)
        # Height grows from 1 to 5 rows.
        self.assertEqual(bounding_box_penalty(option, grid.used_bounds()), 4.0)
        self.assertEqual(bounding_box_penalty(option, None), 0.0)

    def test_contained_option_has_no_penalty(self) -> None:
        option = PlacementOption(word=Word("w2", "AB"), x=3, y=3, direction=Direction.HORIZONTAL)
        self.assertEqual(bounding_box_penalty(option, (0, 0, 9, 9)), 0.0)


class PlacementScorerTests(unittest.TestCase):
    def test_crossing_weight_only(self) -> None:
        grid = grid_with_hello()
        weights = ScoringWeights(
            crossing_count=1, density=0, letter_rarity=0, center_proximity=0, bounding_box_penalty=0
        )
        scorer = PlacementScorer(weights)
        for option in find_placements(Word("w2", "WORLD"), grid):
            self.assertEqual(scorer.score(option, grid), 1.0)

    def test_best_placement_picks_maximum(self) -> None:
        grid = grid_with_hello()
        options = find_placements(Word("w2", "WORLD"), grid)
        best = PlacementScorer().best_placement(options, grid)
        self.assertIsNotNone(best)
        self.assertEqual(best.score, max(option.score for option in options))

    def test_empty_options(self) -> None:
        self.assertIsNone(get_best_placement([], grid_with_hello()))

    def test_first_word_scores_without_filled_cells(self) -> None:
        grid = CrosswordGrid(GridConfig(size=10))
        options = find_placements(Word("w1", "HELLO"), grid)
        best = get_best_placement(options, grid)
        self.assertIn(best.direction, (Direction.HORIZONTAL, Direction.VERTICAL))
        self.assertGreater(best.score, 0.0)

    def test_rank_orders_descending(self) -> None:
        grid = grid_with_hello()
        options = find_placements(Word("w2", "WORLD"), grid)
        ranked = rank_placements(options, grid)
        scores = [option.score for option in ranked]
        self.assertEqual(scores, sorted(scores, reverse=True))
        self.assertEqual(len(ranked), len(options))

    def test_analyze_breaks_down_score(self) -> None:
        grid = grid_with_hello()
        options = find_placements(Word("w2", "WORLD"), grid)
        breakdowns = analyze_placements(options, grid)
        self.assertEqual([entry.option for entry in breakdowns], options)
        scorer = PlacementScorer()
        for entry in breakdowns:
            self.assertEqual(entry.crossings, 100.0)
            self.assertGreater(entry.density, 0.0)
            self.assertAlmostEqual(entry.total, scorer.score(entry.option, grid))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
