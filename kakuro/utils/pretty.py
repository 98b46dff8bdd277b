"""Pretty-print helpers for Kakuro puzzles."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, Mapping, Optional

from ..core.constants import CellType, Direction
from ..core.models import Block, Position

if TYPE_CHECKING:
    from ..engine.builder import Puzzle
    from ..engine.grid import KakuroGrid


CELL_WIDTH = 5


def _clue_text(block: Block) -> str:
    if block.horizontal_sum is None and block.vertical_sum is None:
        return "#"
    vertical = "" if block.vertical_sum is None else str(block.vertical_sum)
    horizontal = "" if block.horizontal_sum is None else str(block.horizontal_sum)
    return f"{vertical}\\{horizontal}"


def cell_symbol(grid: KakuroGrid, position: Position, values: Optional[Mapping[Position, int]] = None) -> str:
    cell = grid.cell(position)
    if isinstance(cell, Block):
        return _clue_text(cell)
    digit = (values or {}).get(position, cell.value)
    return "." if digit is None else str(digit)


def format_grid(grid: KakuroGrid, values: Optional[Mapping[Position, int]] = None) -> str:
    """Render the grid with ``vertical\\horizontal`` clues in the blocks."""

    header_cells = [f"{c:>{CELL_WIDTH}}" for c in range(grid.cols)]
    lines = ["   " + " ".join(header_cells)]
    lines.append("   " + "-" * ((CELL_WIDTH + 1) * grid.cols - 1))
    for r in range(grid.rows):
        row_cells = [cell_symbol(grid, Position(r, c), values) for c in range(grid.cols)]
        row_render = " ".join(f"{symbol:>{CELL_WIDTH}}" for symbol in row_cells)
        lines.append(f"{r:>2}|{row_render}")
    return "\n".join(lines)


def print_puzzle_stats(puzzle: Puzzle, *, show_solution: bool = False, score: Optional[int] = None, stream=None) -> None:
    """Print the puzzle grid followed by geometry and run statistics."""

    stream = stream or sys.stdout
    grid = puzzle.grid
    print(format_grid(grid), file=stream)
    if show_solution:
        print(file=stream)
        print(format_grid(grid, puzzle.solution), file=stream)

    # --- Grid geometry ---
    total_cells = grid.rows * grid.cols
    playable = grid.count(CellType.PLAYABLE)
    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {grid.rows} x {grid.cols} ({total_cells} cells)", file=stream)
    print(f"  Playable:      {playable} ({playable / total_cells * 100:.0f}%)", file=stream)
    print(f"  Blocks:        {total_cells - playable}", file=stream)

    # --- Run stats ---
    runs = puzzle.runs
    lengths = [run.length for run in runs]
    length_dist = Counter(lengths)
    print(file=stream)
    print("--- Runs ---", file=stream)
    print(f"  Horizontal:    {len(puzzle.index.by_direction(Direction.HORIZONTAL))}", file=stream)
    print(f"  Vertical:      {len(puzzle.index.by_direction(Direction.VERTICAL))}", file=stream)
    if lengths:
        print(f"  Length range:  {min(lengths)}-{max(lengths)} (avg {sum(lengths) / len(lengths):.1f})", file=stream)
        dist_parts = [f"{l}:{c}" for l, c in sorted(length_dist.items())]
        print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)

    if score is not None:
        print(file=stream)
        print(f"Difficulty score: {score}", file=stream)
