"""Run extraction and position -> run lookup tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.constants import MAX_RUN_LENGTH, MIN_RUN_LENGTH, Direction
from ..core.models import Position, Run
from ..utils.logger import get_logger
from .grid import KakuroGrid
from .validator import ValidationResult


LOGGER = get_logger(__name__)


@dataclass
class RunIndex:
    """Arena of runs plus one position -> run id map per direction."""

    runs: List[Run] = field(default_factory=list)
    horizontal: Dict[Position, int] = field(default_factory=dict)
    vertical: Dict[Position, int] = field(default_factory=dict)

    def run(self, run_id: int) -> Run:
        return self.runs[run_id]

    def run_for(self, position: Position, direction: Direction) -> Optional[Run]:
        lookup = self.horizontal if direction == Direction.HORIZONTAL else self.vertical
        run_id = lookup.get(position)
        return None if run_id is None else self.runs[run_id]

    def runs_containing(self, position: Position) -> List[Run]:
        found = []
        for direction in (Direction.HORIZONTAL, Direction.VERTICAL):
            run = self.run_for(position, direction)
            if run is not None:
                found.append(run)
        return found

    def by_direction(self, direction: Direction) -> List[Run]:
        return [run for run in self.runs if run.direction == direction]


def _scan_line(grid: KakuroGrid, positions: List[Position]) -> List[List[Position]]:
    segments: List[List[Position]] = []
    current: List[Position] = []
    for position in positions:
        if grid.cell(position).is_playable():
            current.append(position)
            continue
        if len(current) >= MIN_RUN_LENGTH:
            segments.append(current)
        current = []
    if len(current) >= MIN_RUN_LENGTH:
        segments.append(current)
    return segments


def extract_runs(grid: KakuroGrid) -> RunIndex:
    """Scan rows then columns and index every run of two or more cells."""

    index = RunIndex()

    def emit(direction: Direction, positions: List[Position]) -> None:
        index.runs.append(Run(id=len(index.runs), direction=direction, positions=tuple(positions)))

    for r in range(grid.rows):
        for segment in _scan_line(grid, [Position(r, c) for c in range(grid.cols)]):
            emit(Direction.HORIZONTAL, segment)
    for c in range(grid.cols):
        for segment in _scan_line(grid, [Position(r, c) for r in range(grid.rows)]):
            emit(Direction.VERTICAL, segment)

    for run in index.runs:
        lookup = index.horizontal if run.direction == Direction.HORIZONTAL else index.vertical
        for position in run.positions:
            lookup[position] = run.id

    LOGGER.debug(
        "Extracted %d horizontal and %d vertical runs",
        len(index.by_direction(Direction.HORIZONTAL)),
        len(index.by_direction(Direction.VERTICAL)),
    )
    return index


def check_structure(grid: KakuroGrid, index: RunIndex) -> ValidationResult:
    """Verify run lengths and that no playable cell is orphaned on either axis."""

    messages: List[str] = []
    for run in index.runs:
        if not MIN_RUN_LENGTH <= run.length <= MAX_RUN_LENGTH:
            messages.append(
                f"Invalid run length {run.length} ({run.direction.value}) at {run.positions[0]}"
            )
    for position in grid.playable_positions():
        has_h = position in index.horizontal
        has_v = position in index.vertical
        if not (has_h and has_v):
            messages.append(f"Orphan cell {position}: horizontal={has_h} vertical={has_v}")
    return ValidationResult(ok=not messages, messages=messages)
