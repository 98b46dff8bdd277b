"""Backtracking fill of a Kakuro layout.

No clue sums exist while the solver runs: it only has to find one digit
assignment with no repeated digit inside any run. The clues are derived
from whatever assignment it finds.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..core.models import Position
from ..utils.logger import get_logger
from .constraints import free_digits
from .grid import KakuroGrid
from .runs import RunIndex


LOGGER = get_logger(__name__)


@dataclass
class SolverConfig:
    # None searches exhaustively; an int caps the number of visited nodes.
    max_nodes: Optional[int] = None


@dataclass
class SolveResult:
    ok: bool
    solution: Dict[Position, int] = field(default_factory=dict)
    nodes: int = 0
    messages: List[str] = field(default_factory=list)


class SolutionSolver:
    """Fills every playable cell using a most-constrained-cell search.

    The next cell is the one with the fewest digits not yet used by its two
    runs; ties go to the first cell in the remaining list. Candidate digits
    are tried in an order shuffled by ``rng``, so a fixed seed reproduces the
    same solution.
    """

    def __init__(
        self,
        grid: KakuroGrid,
        index: RunIndex,
        rng: Optional[random.Random] = None,
        config: Optional[SolverConfig] = None,
    ) -> None:
        self.grid = grid
        self.index = index
        self.rng = rng or random.Random()
        self.config = config or SolverConfig()
        self.used_in_run: Dict[int, Set[int]] = {}
        self.nodes = 0
        self._budget_exhausted = False

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def solve(self) -> SolveResult:
        self.nodes = 0
        self._budget_exhausted = False
        self.used_in_run = {run.id: set() for run in self.index.runs}

        remaining: List[Position] = []
        for position in self.grid.playable_positions():
            value = self.grid.value_at(position)
            if value is None:
                remaining.append(position)
                continue
            for run in self.index.runs_containing(position):
                self.used_in_run[run.id].add(value)

        LOGGER.debug("Solving %d empty cells across %d runs", len(remaining), len(self.index.runs))
        if not self._backtrack(remaining):
            reason = "node budget exhausted" if self._budget_exhausted else "search exhausted"
            LOGGER.info("Solver failed after %d nodes (%s)", self.nodes, reason)
            return SolveResult(ok=False, nodes=self.nodes, messages=[f"Unsolvable: {reason}"])

        solution = self.grid.values()
        LOGGER.debug("Solver succeeded after %d nodes", self.nodes)
        return SolveResult(ok=True, solution=solution, nodes=self.nodes)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def _run_ids(self, position: Position) -> Optional[Tuple[int, int]]:
        h_id = self.index.horizontal.get(position)
        v_id = self.index.vertical.get(position)
        if h_id is None or v_id is None:
            return None
        return h_id, v_id

    def legal_digits(self, position: Position) -> List[int]:
        run_ids = self._run_ids(position)
        if run_ids is None:
            return []
        h_id, v_id = run_ids
        return free_digits(self.used_in_run[h_id], self.used_in_run[v_id])

    def _pick_next(self, remaining: List[Position]) -> Optional[Tuple[Position, List[int]]]:
        best: Optional[Position] = None
        best_options: List[int] = []
        for position in remaining:
            options = self.legal_digits(position)
            if not options:
                return None
            if best is None or len(options) < len(best_options):
                best, best_options = position, options
                if len(options) == 1:
                    break
        if best is None:
            return None
        return best, best_options

    def _apply(self, position: Position, run_ids: Tuple[int, int], digit: int) -> None:
        for run_id in run_ids:
            self.used_in_run[run_id].add(digit)
        self.grid.set_value(position, digit)

    def _undo(self, position: Position, run_ids: Tuple[int, int], digit: int) -> None:
        for run_id in run_ids:
            self.used_in_run[run_id].discard(digit)
        self.grid.set_value(position, None)

    def _backtrack(self, remaining: List[Position]) -> bool:
        if not remaining:
            return True
        self.nodes += 1
        if self.config.max_nodes is not None and self.nodes > self.config.max_nodes:
            self._budget_exhausted = True
            return False

        picked = self._pick_next(remaining)
        if picked is None:
            return False
        position, options = picked
        run_ids = self._run_ids(position)
        if run_ids is None:
            return False
        rest = [other for other in remaining if other != position]

        self.rng.shuffle(options)
        for digit in options:
            self._apply(position, run_ids, digit)
            if self._backtrack(rest):
                return True
            self._undo(position, run_ids, digit)
            if self._budget_exhausted:
                break
        return False


def solve_grid(
    grid: KakuroGrid,
    index: RunIndex,
    rng: Optional[random.Random] = None,
    config: Optional[SolverConfig] = None,
) -> SolveResult:
    return SolutionSolver(grid, index, rng=rng, config=config).solve()
