"""Data models supporting the puzzle generator."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Set, Tuple

from ..data.normalization import clean_term
from .constants import Difficulty, Direction


def run_cells(x: int, y: int, direction: Direction, length: int) -> List[Tuple[int, int]]:
    """Return the ``(x, y)`` cells covered by a run starting at ``(x, y)``."""

    dx, dy = direction.step
    return [(x + dx * i, y + dy * i) for i in range(length)]


@dataclass(frozen=True)
class Word:
    """A vocabulary entry to be placed. ``term`` is normalized on creation."""

    id: str
    term: str
    clue: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "term", clean_term(self.term))

    def __len__(self) -> int:
        return len(self.term)


@dataclass
class Cell:
    """Represents a grid cell with occupancy metadata."""

    letter: Optional[str] = None
    word_ids: Set[str] = field(default_factory=set)
    is_blocked: bool = False

    def is_empty(self) -> bool:
        return self.letter is None


@dataclass(frozen=True)
class Crossing:
    """A shared cell seen from one word: its index, the other word, its index there."""

    position: int
    other_word_id: str
    other_position: int

    def mirrored(self, word_id: str) -> "Crossing":
        return Crossing(
            position=self.other_position,
            other_word_id=word_id,
            other_position=self.position,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "otherWordId": self.other_word_id,
            "otherWordPosition": self.other_position,
        }


@dataclass
class PlacedWord:
    """A word committed to the grid."""

    id: str
    word: str
    clue: str
    x: int
    y: int
    direction: Direction
    number: int
    crossings: List[Crossing] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.word)

    @property
    def cells(self) -> List[Tuple[int, int]]:
        return run_cells(self.x, self.y, self.direction, self.length)

    @property
    def end(self) -> Tuple[int, int]:
        dx, dy = self.direction.step
        return self.x + dx * (self.length - 1), self.y + dy * (self.length - 1)

    def position_of(self, x: int, y: int) -> int:
        """Index of cell ``(x, y)`` inside this word."""
        return x - self.x if self.direction is Direction.HORIZONTAL else y - self.y

    def shifted(self, dx: int, dy: int) -> "PlacedWord":
        return replace(self, x=self.x + dx, y=self.y + dy, crossings=list(self.crossings))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "word": self.word,
            "clue": self.clue,
            "x": self.x,
            "y": self.y,
            "orientation": self.direction.value,
            "clueNumber": self.number,
            "crossings": [crossing.to_dict() for crossing in self.crossings],
        }


@dataclass
class PlacementOption:
    """Candidate placement for one word, scored by the placement scorer."""

    word: Word
    x: int
    y: int
    direction: Direction
    crossings: List[Crossing] = field(default_factory=list)
    score: float = 0.0

    @property
    def cells(self) -> List[Tuple[int, int]]:
        return run_cells(self.x, self.y, self.direction, len(self.word.term))

    @property
    def key(self) -> Tuple[int, int, Direction]:
        return self.x, self.y, self.direction


@dataclass
class WordCluster:
    """A subset of the input words destined for one puzzle."""

    words: List[Word]
    score: float = 0.0
    avg_letter_overlap: float = 0.0
    difficulty: Difficulty = Difficulty.EASY

    def __len__(self) -> int:
        return len(self.words)

    @property
    def word_ids(self) -> Set[str]:
        return {word.id for word in self.words}


@dataclass(frozen=True)
class Puzzle:
    """Final, cropped crossword puzzle."""

    id: str
    grid_size: int
    placed_words: Tuple[PlacedWord, ...]
    grid: Tuple[Tuple[Optional[str], ...], ...]

    @property
    def word_ids(self) -> Set[str]:
        return {word.id for word in self.placed_words}

    def get(self, word_id: str) -> Optional[PlacedWord]:
        for word in self.placed_words:
            if word.id == word_id:
                return word
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "gridSize": self.grid_size,
            "placedWords": [word.to_dict() for word in self.placed_words],
            "grid": [list(row) for row in self.grid],
        }
