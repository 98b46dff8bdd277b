"""CP-SAT solution counting for puzzles built by this package.

The builder only guarantees that at least one solution exists. This module
reports whether a built puzzle's clues admit more than one, so callers can
flag or discard ambiguous levels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from ortools.sat.python import cp_model

from ..core.models import Position
from ..utils.logger import get_logger
from .grid import KakuroGrid
from .runs import RunIndex

LOGGER = get_logger(__name__)


@dataclass
class SolutionCount:
    count: int
    exhaustive: bool
    status: str

    @property
    def unique(self) -> bool:
        return self.count == 1 and self.exhaustive


class _SolutionLimiter(cp_model.CpSolverSolutionCallback):
    """Counts solutions and stops the search once ``limit`` are seen."""

    def __init__(self, limit: int) -> None:
        super().__init__()
        self.limit = limit
        self.count = 0

    def on_solution_callback(self) -> None:
        self.count += 1
        if self.count >= self.limit:
            self.stop_search()


def count_solutions(
    grid: KakuroGrid,
    index: RunIndex,
    limit: int = 2,
    timeout: float = 10.0,
) -> SolutionCount:
    """Count digit assignments matching the grid's clues, up to ``limit``.

    Runs whose anchor has no clue only get the all-different constraint.
    """

    model = cp_model.CpModel()

    # ------------------------------------------------------------------
    # Step 1: one variable per playable cell
    # ------------------------------------------------------------------
    cell_vars: Dict[Position, cp_model.IntVar] = {
        position: model.new_int_var(1, 9, f"x_{position.row}_{position.col}")
        for position in grid.playable_positions()
    }

    # ------------------------------------------------------------------
    # Step 2: run constraints
    # ------------------------------------------------------------------
    for run in index.runs:
        run_vars = [cell_vars[position] for position in run.positions]
        model.add_all_different(run_vars)
        target = grid.clue_for(run.anchor, run.direction)
        if target is not None:
            model.add(sum(run_vars) == target)

    # ------------------------------------------------------------------
    # Step 3: enumerate
    # ------------------------------------------------------------------
    solver = cp_model.CpSolver()
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1
    solver.parameters.max_time_in_seconds = timeout
    limiter = _SolutionLimiter(limit)

    status = solver.solve(model, limiter)
    status_name = solver.status_name(status)
    # OPTIMAL after enumeration means the whole search space was covered.
    exhaustive = status in (cp_model.OPTIMAL, cp_model.INFEASIBLE)
    LOGGER.info(
        "CP-SAT: %d solution(s) found (limit=%d, status=%s, %.2fs)",
        limiter.count,
        limit,
        status_name,
        solver.wall_time,
    )
    return SolutionCount(count=limiter.count, exhaustive=exhaustive, status=status_name)
