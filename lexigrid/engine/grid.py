"""Grid representation and placement helpers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Tuple

from ..core.constants import Bounds, Direction
from ..core.exceptions import PlacementError
from ..core.models import Cell, Crossing, PlacedWord, Word, run_cells
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class GridConfig:
    """Configuration values driving the grid layout."""

    size: int

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Grid size must be positive, got {self.size}")

    def bounds(self) -> Bounds:
        return Bounds(size=self.size)


@dataclass
class CroppedGrid:
    """Minimal bounding square of a grid with re-based word coordinates."""

    size: int
    placed_words: List[PlacedWord]
    rows: List[List[Optional[str]]]
    offset: Tuple[int, int]


class CrosswordGrid:
    """Encapsulates the square letter grid and the placed-word arena.

    Placed words are stored by id in placement order. Crossings reference
    their partner by id only and are always recorded on both words.
    """

    def __init__(self, config: GridConfig) -> None:
        self.config = config
        self.bounds = config.bounds()
        self.cells: List[List[Cell]] = [
            [Cell() for _ in range(self.bounds.size)] for _ in range(self.bounds.size)
        ]
        self.placed: Dict[str, PlacedWord] = {}
        self._next_number = 1

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        return self.bounds.size

    @property
    def placed_words(self) -> List[PlacedWord]:
        return list(self.placed.values())

    def __len__(self) -> int:
        return len(self.placed)

    def __contains__(self, word_id: object) -> bool:
        return word_id in self.placed

    def get_placed_word(self, word_id: str) -> Optional[PlacedWord]:
        return self.placed.get(word_id)

    def in_bounds(self, x: int, y: int) -> bool:
        return self.bounds.contains(x, y)

    def cell(self, x: int, y: int) -> Cell:
        return self.cells[y][x]

    def letter_at(self, x: int, y: int) -> Optional[str]:
        if not self.bounds.contains(x, y):
            return None
        return self.cells[y][x].letter

    def iter_cells(self) -> Iterator[Tuple[int, int, Cell]]:
        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                yield x, y, cell

    def filled_cells(self) -> List[Tuple[int, int]]:
        return [(x, y) for x, y, cell in self.iter_cells() if cell.letter is not None]

    @property
    def filled_count(self) -> int:
        return sum(1 for _, _, cell in self.iter_cells() if cell.letter is not None)

    @property
    def density(self) -> float:
        """Fraction of cells holding a letter."""
        return self.filled_count / (self.size * self.size)

    def used_bounds(self) -> Optional[Tuple[int, int, int, int]]:
        """Return ``(min_x, min_y, max_x, max_y)`` over placed words, or ``None``."""

        if not self.placed:
            return None
        min_x = min_y = self.size
        max_x = max_y = -1
        for placed in self.placed.values():
            end_x, end_y = placed.end
            min_x = min(min_x, placed.x)
            min_y = min(min_y, placed.y)
            max_x = max(max_x, end_x)
            max_y = max(max_y, end_y)
        return min_x, min_y, max_x, max_y

    # ------------------------------------------------------------------
    # Placement legality
    # ------------------------------------------------------------------
    def can_place(self, word: Word, x: int, y: int, direction: Direction) -> bool:
        """Return whether ``word`` fits at ``(x, y)`` without breaking grid rules."""

        term = word.term
        length = len(term)
        if length == 0 or word.id in self.placed:
            return False
        dx, dy = direction.step
        end_x, end_y = x + dx * (length - 1), y + dy * (length - 1)
        if not self.bounds.contains(x, y) or not self.bounds.contains(end_x, end_y):
            return False

        for index, (cx, cy) in enumerate(run_cells(x, y, direction, length)):
            cell = self.cells[cy][cx]
            if cell.is_blocked:
                return False
            if cell.is_empty():
                # An empty cell next to a parallel letter would spell an extra word.
                if not self._perpendicular_clear(cx, cy, direction):
                    return False
                continue
            if cell.letter != term[index]:
                return False
            if self._used_in_direction(cell, direction):
                return False

        # Words may only meet by crossing, never end-to-end.
        if self.letter_at(x - dx, y - dy) is not None:
            return False
        if self.letter_at(end_x + dx, end_y + dy) is not None:
            return False
        return True

    def _perpendicular_clear(self, x: int, y: int, direction: Direction) -> bool:
        px, py = direction.perpendicular().step
        return self.letter_at(x - px, y - py) is None and self.letter_at(x + px, y + py) is None

    def _used_in_direction(self, cell: Cell, direction: Direction) -> bool:
        for word_id in cell.word_ids:
            occupant = self.placed.get(word_id)
            if occupant is not None and occupant.direction is direction:
                return True
        return False

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def place(self, word: Word, x: int, y: int, direction: Direction) -> Optional[PlacedWord]:
        """Commit ``word`` to the grid, returning its record or ``None`` if illegal."""

        if not self.can_place(word, x, y, direction):
            LOGGER.debug("Rejected %s at (%s,%s) %s", word.term, x, y, direction.value)
            return None

        cells = run_cells(x, y, direction, len(word.term))
        for cx, cy in cells:
            if not self.bounds.contains(cx, cy):
                raise PlacementError(
                    f"Validated placement of {word.term} addresses cell {(cx, cy)} "
                    f"outside the {self.size}x{self.size} grid"
                )

        # All checks passed, mutate grid
        crossings: List[Crossing] = []
        for index, (cx, cy) in enumerate(cells):
            cell = self.cells[cy][cx]
            letter = word.term[index]
            if cell.letter == letter:
                for other_id in sorted(cell.word_ids):
                    other = self.placed.get(other_id)
                    if other is None:
                        continue
                    crossing = Crossing(
                        position=index,
                        other_word_id=other_id,
                        other_position=other.position_of(cx, cy),
                    )
                    crossings.append(crossing)
                    other.crossings.append(crossing.mirrored(word.id))
            cell.letter = letter
            cell.word_ids.add(word.id)

        placed = PlacedWord(
            id=word.id,
            word=word.term,
            clue=word.clue,
            x=x,
            y=y,
            direction=direction,
            number=self._next_number,
            crossings=crossings,
        )
        self._next_number += 1
        self.placed[word.id] = placed
        return placed

    def remove(self, word_id: str) -> bool:
        """Undo a placement; letters shared with a crossing word stay."""

        placed = self.placed.get(word_id)
        if placed is None:
            return False
        for cx, cy in placed.cells:
            if not self.bounds.contains(cx, cy):
                LOGGER.error("Cell (%s,%s) of %s is out of bounds during removal", cx, cy, word_id)
                continue
            cell = self.cells[cy][cx]
            cell.word_ids.discard(word_id)
            if not cell.word_ids:
                cell.letter = None

        for crossing in placed.crossings:
            other = self.placed.get(crossing.other_word_id)
            if other is not None:
                other.crossings = [c for c in other.crossings if c.other_word_id != word_id]

        del self.placed[word_id]
        return True

    def renumber(self) -> None:
        """Reassign clue numbers 1..n in placement order."""

        for number, placed in enumerate(self.placed.values(), start=1):
            placed.number = number
        self._next_number = len(self.placed) + 1

    def clone(self) -> "CrosswordGrid":
        """Independent copy; mutating it never touches this grid."""

        twin = CrosswordGrid(self.config)
        for x, y, cell in self.iter_cells():
            twin.cells[y][x] = Cell(
                letter=cell.letter,
                word_ids=set(cell.word_ids),
                is_blocked=cell.is_blocked,
            )
        twin.placed = {
            word_id: replace(placed, crossings=list(placed.crossings))
            for word_id, placed in self.placed.items()
        }
        twin._next_number = self._next_number
        return twin

    def stray_adjacencies(self) -> List[Tuple[int, int, Direction]]:
        """Neighbouring letter pairs that no single word spans.

        Each entry is the first cell of the pair and the axis it lies on.
        A grid built only through :meth:`place` has none; removals can
        leave some behind.
        """

        conflicts: List[Tuple[int, int, Direction]] = []
        for x, y, cell in self.iter_cells():
            if cell.is_empty():
                continue
            for direction in Direction:
                dx, dy = direction.step
                if self.letter_at(x + dx, y + dy) is None:
                    continue
                neighbour = self.cells[y + dy][x + dx]
                spanning = [
                    word_id
                    for word_id in cell.word_ids & neighbour.word_ids
                    if word_id in self.placed and self.placed[word_id].direction is direction
                ]
                if not spanning:
                    conflicts.append((x, y, direction))
        return conflicts

    # ------------------------------------------------------------------
    # Export helpers
    # ------------------------------------------------------------------
    def export_grid(self) -> List[List[Optional[str]]]:
        return [[cell.letter for cell in row] for row in self.cells]

    def crop(self) -> CroppedGrid:
        """Cut the grid down to the smallest square holding every letter.

        The square side is ``max(width, height)`` of the used area; the
        content is centered along the shorter axis.
        """

        used = self.used_bounds()
        if used is None:
            return CroppedGrid(size=0, placed_words=[], rows=[], offset=(0, 0))

        min_x, min_y, max_x, max_y = used
        width = max_x - min_x + 1
        height = max_y - min_y + 1
        size = max(width, height)
        dx = (size - width) // 2 - min_x
        dy = (size - height) // 2 - min_y

        rows: List[List[Optional[str]]] = [[None] * size for _ in range(size)]
        for y in range(min_y, max_y + 1):
            for x in range(min_x, max_x + 1):
                letter = self.cells[y][x].letter
                if letter is not None:
                    rows[y + dy][x + dx] = letter

        words = [placed.shifted(dx, dy) for placed in self.placed.values()]
        return CroppedGrid(size=size, placed_words=words, rows=rows, offset=(dx, dy))
