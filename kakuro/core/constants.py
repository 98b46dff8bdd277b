"""Shared constants and enumerations for the Kakuro engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple


class Difficulty(str, Enum):
    """Puzzle difficulty tiers."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class CellType(str, Enum):
    """The two cell variants of a Kakuro board."""

    BLOCK = "BLOCK"
    PLAYABLE = "PLAYABLE"


class Direction(str, Enum):
    """Run directions supported by the grid."""

    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"


MIN_DIGIT = 1
MAX_DIGIT = 9
DIGITS: FrozenSet[int] = frozenset(range(MIN_DIGIT, MAX_DIGIT + 1))

MIN_RUN_LENGTH = 2
MAX_RUN_LENGTH = 9

# Grid sizes per tier: (levels 1-5, levels 6+).
TIER_SIZES = {
    Difficulty.EASY: ((5, 5), (6, 6)),
    Difficulty.MEDIUM: ((8, 8), (10, 10)),
    Difficulty.HARD: ((12, 12), (15, 15)),
}

LEVELS_PER_SIZE = 5


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols


def grid_size(difficulty: Difficulty, level: int) -> Tuple[int, int]:
    """Return ``(rows, cols)`` for a tier; early levels use the smaller board."""

    small, large = TIER_SIZES[Difficulty(difficulty)]
    return small if level <= LEVELS_PER_SIZE else large
