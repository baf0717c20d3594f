"""Candidate placement enumeration for a single word."""

from __future__ import annotations

from typing import List

from ..core.constants import Direction
from ..core.models import Crossing, PlacedWord, PlacementOption, Word
from .grid import CrosswordGrid


def find_placements(word: Word, grid: CrosswordGrid) -> List[PlacementOption]:
    """Enumerate every legal placement of ``word`` against the current grid.

    An empty grid only offers the centered anchors. Otherwise each letter of
    ``word`` is tried against each matching letter of each placed word, in
    the perpendicular orientation. Duplicate anchors reached through
    different crossings are kept. An empty result is the normal signal that
    the word does not fit right now.
    """

    placed_words = grid.placed_words
    if not placed_words:
        return first_word_placements(word, grid)

    options: List[PlacementOption] = []
    for placed in placed_words:
        options.extend(crossing_placements(word, placed, grid))
    return options


def first_word_placements(word: Word, grid: CrosswordGrid) -> List[PlacementOption]:
    middle = grid.size // 2
    start = (grid.size - len(word.term)) // 2
    options: List[PlacementOption] = []
    if grid.can_place(word, start, middle, Direction.HORIZONTAL):
        options.append(PlacementOption(word=word, x=start, y=middle, direction=Direction.HORIZONTAL))
    if grid.can_place(word, middle, start, Direction.VERTICAL):
        options.append(PlacementOption(word=word, x=middle, y=start, direction=Direction.VERTICAL))
    return options


def crossing_placements(word: Word, placed: PlacedWord, grid: CrosswordGrid) -> List[PlacementOption]:
    options: List[PlacementOption] = []
    direction = placed.direction.perpendicular()
    dx, dy = direction.step
    placed_cells = placed.cells
    for index, letter in enumerate(word.term):
        for placed_index, placed_letter in enumerate(placed.word):
            if placed_letter != letter:
                continue
            cross_x, cross_y = placed_cells[placed_index]
            start_x = cross_x - dx * index
            start_y = cross_y - dy * index
            if not grid.can_place(word, start_x, start_y, direction):
                continue
            options.append(
                PlacementOption(
                    word=word,
                    x=start_x,
                    y=start_y,
                    direction=direction,
                    crossings=[
                        Crossing(position=index, other_word_id=placed.id, other_position=placed_index)
                    ],
                )
            )
    return options


def crossing_letters(option: PlacementOption, grid: CrosswordGrid) -> List[str]:
    """Letters of ``option`` that would land on already filled cells."""

    letters: List[str] = []
    for cx, cy in option.cells:
        letter = grid.letter_at(cx, cy)
        if letter is not None:
            letters.append(letter)
    return letters


def count_crossings(option: PlacementOption, grid: CrosswordGrid) -> int:
    """Number of crossings ``option`` would record once placed."""

    return len(crossing_letters(option, grid))
