"""Rule enforcement over a partially filled board.

The engine never mutates the board. It reads digits from a ``values`` mapping
(the player's progress, or the solver's tentative assignment) and the target
sums from the anchor blocks of the grid.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Mapping, Optional, Set, Tuple

from ..core.constants import DIGITS
from ..core.models import Position, Run
from ..utils.logger import get_logger
from .grid import KakuroGrid
from .runs import RunIndex


LOGGER = get_logger(__name__)


def free_digits(*used_sets: AbstractSet[int]) -> List[int]:
    """Digits 1..9 absent from every given set, ascending."""

    return [digit for digit in sorted(DIGITS) if not any(digit in used for used in used_sets)]


def achievable_range(available: Iterable[int], slots: int) -> Optional[Tuple[int, int]]:
    """Smallest and largest total of ``slots`` distinct digits from ``available``."""

    ordered = sorted(available)
    if len(ordered) < slots:
        return None
    if slots == 0:
        return 0, 0
    return sum(ordered[:slots]), sum(ordered[-slots:])


def is_candidate_feasible(
    target: int,
    used: AbstractSet[int],
    used_sum: int,
    empties: int,
    candidate: int,
) -> bool:
    """Whether placing ``candidate`` still lets the run reach ``target``.

    ``empties`` counts the empty cells of the run including the one being
    filled with ``candidate``.
    """

    if candidate in used:
        return False
    slots_left = empties - 1
    needed_after = target - used_sum - candidate
    if slots_left == 0:
        return needed_after == 0
    bounds = achievable_range((d for d in DIGITS if d not in used and d != candidate), slots_left)
    if bounds is None:
        return False
    low, high = bounds
    return low <= needed_after <= high


class ConstraintEngine:
    """Answers legality queries for one puzzle."""

    def __init__(self, grid: KakuroGrid, index: RunIndex, values: Mapping[Position, int]) -> None:
        self.grid = grid
        self.index = index
        self.values = values

    def target_sum(self, run: Run) -> Optional[int]:
        return self.grid.clue_for(run.anchor, run.direction)

    def _run_digits(self, run: Run, skip: Optional[Position] = None) -> List[int]:
        return [
            self.values[position]
            for position in run.positions
            if position != skip and position in self.values
        ]

    # ------------------------------------------------------------------
    # Candidate digits
    # ------------------------------------------------------------------
    def allowed_digits(self, position: Position) -> Set[int]:
        """Digits that can go at ``position`` without breaking either run.

        The queried cell is treated as empty even if it currently holds a
        digit, so the answer does not depend on its own value.
        """

        runs = self.index.runs_containing(position)
        if len(runs) != 2:
            LOGGER.debug("Position %s is not covered by two runs", position)
            return set()

        forbidden: Set[int] = set()
        for run in runs:
            forbidden.update(self._run_digits(run, skip=position))
        remaining = set(DIGITS) - forbidden

        for run in runs:
            target = self.target_sum(run)
            if target is None:
                continue
            used_digits = self._run_digits(run, skip=position)
            used = set(used_digits)
            used_sum = sum(used_digits)
            empties = sum(
                1 for cell in run.positions if cell == position or cell not in self.values
            )
            if empties == 0:
                continue
            remaining = {
                candidate
                for candidate in remaining
                if is_candidate_feasible(target, used, used_sum, empties, candidate)
            }
        return remaining

    # ------------------------------------------------------------------
    # Derived predicates
    # ------------------------------------------------------------------
    def has_conflict(self, position: Position) -> bool:
        value = self.values.get(position)
        if value is None:
            return False
        for run in self.index.runs_containing(position):
            digits = self._run_digits(run)
            if digits.count(value) > 1:
                return True
            target = self.target_sum(run)
            if target is not None and sum(digits) > target:
                return True
        return False

    def is_run_completed(self, run: Run) -> bool:
        target = self.target_sum(run)
        if target is None:
            return False
        digits = self._run_digits(run)
        if len(digits) != run.length:
            return False
        if len(set(digits)) != len(digits):
            return False
        return sum(digits) == target

    def is_in_completed_run(self, position: Position) -> bool:
        return any(self.is_run_completed(run) for run in self.index.runs_containing(position))
