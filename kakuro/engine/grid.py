"""Grid representation and helper utilities."""

from __future__ import annotations

import copy
from typing import Dict, Iterator, List, Optional, Sequence

from ..core.constants import DIGITS, Bounds, CellType, Direction
from ..core.exceptions import OutOfRangeDigitError, TemplateError
from ..core.models import Block, Cell, Playable, Position, Template
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class KakuroGrid:
    """Encapsulates the board cells with read/write helpers.

    The grid is mutated in two places only: the solver writes and undoes
    digits while searching, and the sum assigner writes clue fields.
    """

    def __init__(self, cells: List[List[Cell]]) -> None:
        if not cells or not cells[0]:
            raise TemplateError("Grid must have at least one cell")
        width = len(cells[0])
        if any(len(row) != width for row in cells):
            raise TemplateError("Grid rows must all have the same length")
        self.cells = cells
        self.bounds = Bounds(rows=len(cells), cols=width)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_template(cls, template: Sequence[Sequence[bool]]) -> "KakuroGrid":
        """Build a grid of empty playables and clue-less blocks."""

        cells: List[List[Cell]] = []
        for r, row in enumerate(template):
            current: List[Cell] = []
            for c, is_block in enumerate(row):
                position = Position(r, c)
                if is_block:
                    current.append(Block(position))
                else:
                    current.append(Playable(position))
            cells.append(current)
        grid = cls(cells)
        LOGGER.debug("Built %sx%s grid from template", grid.rows, grid.cols)
        return grid

    def to_template(self) -> Template:
        return [[not cell.is_playable() for cell in row] for row in self.cells]

    def copy(self) -> "KakuroGrid":
        return KakuroGrid(copy.deepcopy(self.cells))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def rows(self) -> int:
        return self.bounds.rows

    @property
    def cols(self) -> int:
        return self.bounds.cols

    def contains(self, position: Position) -> bool:
        return self.bounds.contains(position.row, position.col)

    def cell(self, position: Position) -> Cell:
        return self.cells[position.row][position.col]

    def is_playable(self, position: Position) -> bool:
        return self.contains(position) and self.cell(position).is_playable()

    def playable_positions(self) -> List[Position]:
        """Playable positions in row-major order."""

        return [cell.position for row in self.cells for cell in row if cell.is_playable()]

    def blocks(self) -> Iterator[Block]:
        for row in self.cells:
            for cell in row:
                if isinstance(cell, Block):
                    yield cell

    def value_at(self, position: Position) -> Optional[int]:
        cell = self.cell(position)
        if isinstance(cell, Playable):
            return cell.value
        return None

    def values(self) -> Dict[Position, int]:
        """Digits currently written into playable cells."""

        return {
            cell.position: cell.value
            for row in self.cells
            for cell in row
            if isinstance(cell, Playable) and cell.value is not None
        }

    def clue_for(self, anchor: Position, direction: Direction) -> Optional[int]:
        if not self.contains(anchor):
            return None
        cell = self.cell(anchor)
        if isinstance(cell, Block):
            return cell.sum_for(direction)
        return None

    def count(self, cell_type: CellType) -> int:
        return sum(1 for row in self.cells for cell in row if cell.type == cell_type)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set_value(self, position: Position, value: Optional[int]) -> None:
        cell = self.cell(position)
        if not isinstance(cell, Playable):
            return
        if value is not None and (isinstance(value, bool) or value not in DIGITS):
            raise OutOfRangeDigitError(f"Digit {value!r} outside 1..9")
        cell.value = value

    def set_block_sum(
        self,
        position: Position,
        horizontal: Optional[int] = None,
        vertical: Optional[int] = None,
    ) -> None:
        """Update the given clue fields of a block, keeping the others."""

        cell = self.cell(position)
        if not isinstance(cell, Block):
            return
        if horizontal is not None:
            cell.horizontal_sum = horizontal
        if vertical is not None:
            cell.vertical_sum = vertical

    def clear_playable_values(self) -> None:
        for row in self.cells:
            for cell in row:
                if isinstance(cell, Playable):
                    cell.value = None

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> List[List[dict]]:
        serialized: List[List[dict]] = []
        for row in self.cells:
            serialized_row: List[dict] = []
            for cell in row:
                if isinstance(cell, Block):
                    serialized_row.append(
                        {
                            "type": cell.type.value,
                            "horizontal_sum": cell.horizontal_sum,
                            "vertical_sum": cell.vertical_sum,
                        }
                    )
                else:
                    serialized_row.append({"type": cell.type.value, "value": cell.value})
            serialized.append(serialized_row)
        return serialized

    @classmethod
    def from_jsonable(cls, rows: Sequence[Sequence[dict]]) -> "KakuroGrid":
        cells: List[List[Cell]] = []
        for r, row in enumerate(rows):
            current: List[Cell] = []
            for c, payload in enumerate(row):
                position = Position(r, c)
                cell_type = CellType(payload["type"])
                if cell_type == CellType.BLOCK:
                    current.append(
                        Block(
                            position,
                            horizontal_sum=payload.get("horizontal_sum"),
                            vertical_sum=payload.get("vertical_sum"),
                        )
                    )
                else:
                    value = payload.get("value")
                    if value is not None and value not in DIGITS:
                        raise TemplateError(f"Digit {value} at {position} outside 1..9")
                    current.append(Playable(position, value=value))
            cells.append(current)
        return cls(cells)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KakuroGrid):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self) -> str:
        return f"KakuroGrid(rows={self.rows}, cols={self.cols})"
