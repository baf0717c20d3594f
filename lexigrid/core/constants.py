"""Shared constants and enumerations for the puzzle generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple


class Difficulty(str, Enum):
    """Coarse difficulty label attached to a word cluster."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Direction(str, Enum):
    """Word orientations supported by the grid."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def step(self) -> Tuple[int, int]:
        """Unit ``(dx, dy)`` step along the word."""
        return (1, 0) if self is Direction.HORIZONTAL else (0, 1)

    def perpendicular(self) -> "Direction":
        return Direction.VERTICAL if self is Direction.HORIZONTAL else Direction.HORIZONTAL


# Scrabble-like rarity weights; letters missing from the table count as common.
LETTER_RARITY: Dict[str, int] = {
    **dict.fromkeys("ETAOINSHR", 1),
    **dict.fromkeys("DLCUMWFGYPB", 2),
    **dict.fromkeys("VK", 3),
    **dict.fromkeys("JXQZ", 5),
}
MAX_LETTER_RARITY = 5

RARE_LETTERS: FrozenSet[str] = frozenset("QXZJK")


@dataclass(frozen=True)
class Bounds:
    """Square grid bounds helper."""

    size: int

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size
