"""Data models supporting the Kakuro engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .constants import CellType, Direction


# Structural skeleton of a puzzle: True marks a block, False a playable cell.
Template = List[List[bool]]


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based grid coordinate, ordered by ``(row, col)``."""

    row: int
    col: int

    @property
    def id(self) -> str:
        return f"{self.row}-{self.col}"

    def offset(self, dr: int, dc: int) -> "Position":
        return Position(self.row + dr, self.col + dc)

    @classmethod
    def from_id(cls, key: str) -> "Position":
        row, col = key.split("-")
        return cls(int(row), int(col))


@dataclass
class Block:
    """Opaque cell; may host the clue of the run to its right and/or below."""

    position: Position
    horizontal_sum: Optional[int] = None
    vertical_sum: Optional[int] = None

    type = CellType.BLOCK

    def is_playable(self) -> bool:
        return False

    def sum_for(self, direction: Direction) -> Optional[int]:
        if direction == Direction.HORIZONTAL:
            return self.horizontal_sum
        return self.vertical_sum


@dataclass
class Playable:
    """A cell holding a digit 1..9 or nothing."""

    position: Position
    value: Optional[int] = None

    type = CellType.PLAYABLE

    def is_playable(self) -> bool:
        return True


Cell = Union[Block, Playable]


@dataclass
class Run:
    """A maximal stretch of playable cells in one direction.

    ``id`` indexes the run inside its :class:`~kakuro.engine.runs.RunIndex`.
    ``sum`` is only a cache; the target lives in the anchor block.
    """

    id: int
    direction: Direction
    positions: Tuple[Position, ...]
    sum: Optional[int] = None

    @property
    def length(self) -> int:
        return len(self.positions)

    @property
    def anchor(self) -> Position:
        first = self.positions[0]
        if self.direction == Direction.HORIZONTAL:
            return first.offset(0, -1)
        return first.offset(-1, 0)

    def __contains__(self, position: object) -> bool:
        return position in self.positions
