import unittest

from lexigrid.core.constants import Direction
from lexigrid.core.models import Word
from lexigrid.engine.grid import CrosswordGrid, GridConfig
from lexigrid.engine.validator import (
    GridValidator,
    build_word_graph,
    connectivity_stats,
    find_islands,
    is_connected,
    validate_after_placement,
)


def connected_grid() -> CrosswordGrid:
    grid = CrosswordGrid(GridConfig(size=10))
    grid.place(Word("w1", "HELLO"), 2, 5, Direction.HORIZONTAL)
    grid.place(Word("w2", "WORLD"), 4, 2, Direction.VERTICAL)
    return grid


def split_grid() -> CrosswordGrid:
    grid = CrosswordGrid(GridConfig(size=10))
    grid.place(Word("w1", "HELLO"), 0, 0, Direction.HORIZONTAL)
    grid.place(Word("w2", "WORLD"), 0, 8, Direction.HORIZONTAL)
    return grid


class ConnectivityTests(unittest.TestCase):
    def test_crossing_words_are_connected(self) -> None:
        grid = connected_grid()
        self.assertTrue(is_connected(grid))
        self.assertEqual(find_islands(grid), [["w1", "w2"]])
        self.assertEqual(build_word_graph(grid.placed_words), {"w1": {"w2"}, "w2": {"w1"}})

    def test_far_apart_words_form_two_islands(self) -> None:
        grid = split_grid()
        self.assertFalse(is_connected(grid))
        self.assertEqual(find_islands(grid), [["w1"], ["w2"]])

    def test_trivial_grids_are_connected(self) -> None:
        grid = CrosswordGrid(GridConfig(size=10))
        self.assertTrue(is_connected(grid))
        grid.place(Word("w1", "HELLO"), 2, 5, Direction.HORIZONTAL)
        self.assertTrue(is_connected(grid))

    def test_stats(self) -> None:
        stats = connectivity_stats(split_grid())
        self.assertFalse(stats.is_fully_connected)
        self.assertEqual(stats.island_count, 2)
        self.assertEqual(stats.largest_island_size, 1)
        self.assertEqual(stats.average_crossings_per_word, 0.0)

        stats = connectivity_stats(connected_grid())
        self.assertTrue(stats.is_fully_connected)
        self.assertEqual(stats.average_crossings_per_word, 0.5)


class ValidateAfterPlacementTests(unittest.TestCase):
    def test_small_grids_pass(self) -> None:
        self.assertTrue(validate_after_placement(split_grid(), "w2"))

    def test_isolated_third_word_fails(self) -> None:
        grid = connected_grid()
        grid.place(Word("w3", "ZAP"), 0, 0, Direction.HORIZONTAL)
        self.assertFalse(validate_after_placement(grid, "w3"))

    def test_crossing_third_word_passes(self) -> None:
        grid = connected_grid()
        self.assertIsNotNone(grid.place(Word("w3", "TOP"), 3, 3, Direction.HORIZONTAL))
        self.assertTrue(validate_after_placement(grid, "w3"))


class GridValidatorTests(unittest.TestCase):
    def test_valid_grid(self) -> None:
        result = GridValidator().validate(connected_grid())
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])

    def test_disconnected_grid_reported(self) -> None:
        with self.assertLogs("lexigrid.engine.validator", level="WARNING"):
            result = GridValidator().validate(split_grid())
        self.assertFalse(result.ok)
        self.assertIn("disconnected", result.messages[0])

    def test_asymmetric_crossing_reported(self) -> None:
        grid = connected_grid()
        grid.get_placed_word("w2").crossings.clear()
        with self.assertLogs("lexigrid.engine.validator", level="WARNING"):
            result = GridValidator().validate(grid)
        self.assertFalse(result.ok)
        self.assertIn("not mirrored", result.messages[0])

    def test_letter_mismatch_reported(self) -> None:
        grid = connected_grid()
        grid.cell(2, 5).letter = "X"
        with self.assertLogs("lexigrid.engine.validator", level="WARNING"):
            result = GridValidator().validate(grid)
        self.assertFalse(result.ok)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
