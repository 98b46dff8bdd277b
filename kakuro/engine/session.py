"""Player session: the command/query surface over one puzzle.

A session owns its progress map and is updated only through explicit
commands. It is single-writer: callers must not drive one session from
several threads at once.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Set

from ..core.constants import DIGITS, Difficulty
from ..core.exceptions import KakuroError, OutOfRangeDigitError
from ..core.models import Position, Run
from ..utils.logger import get_logger
from .builder import Puzzle, PuzzleFactory
from .constraints import ConstraintEngine
from .scoring import ScoringPolicy, difficulty_score


LOGGER = get_logger(__name__)


class GameSession:
    """Progress, selection and completion tracking for one puzzle."""

    def __init__(
        self,
        puzzle: Puzzle,
        difficulty: Difficulty = Difficulty.EASY,
        level: int = 1,
        progress: Optional[Mapping[Position, int]] = None,
        is_completed: bool = False,
        completed_levels: Optional[Dict[Difficulty, Set[int]]] = None,
        factory: Optional[PuzzleFactory] = None,
    ) -> None:
        self.factory = factory
        self.progress: Dict[Position, int] = {}
        self.completed_levels: Dict[Difficulty, Set[int]] = {
            Difficulty(key): set(levels) for key, levels in (completed_levels or {}).items()
        }
        self.selected: Optional[Position] = None
        self._load(puzzle, difficulty, level)
        if progress:
            self.restore_progress(progress)
        self.is_completed = is_completed

    # ------------------------------------------------------------------
    # Puzzle lifecycle
    # ------------------------------------------------------------------
    def _load(self, puzzle: Puzzle, difficulty: Difficulty, level: int) -> None:
        self.puzzle = puzzle
        self.difficulty = Difficulty(difficulty)
        self.level = level
        self.progress.clear()
        self.selected = None
        self.is_completed = False
        self.engine = ConstraintEngine(puzzle.grid, puzzle.index, self.progress)

    def load_puzzle(self, puzzle: Puzzle, difficulty: Difficulty, level: int) -> None:
        self._load(puzzle, difficulty, level)

    def set_difficulty(self, difficulty: Difficulty) -> None:
        self._load(self._require_factory().generate(difficulty, self.level), difficulty, self.level)

    def set_level(self, level: int) -> None:
        self._load(self._require_factory().generate(self.difficulty, level), self.difficulty, level)

    def restore_progress(self, progress: Mapping[Position, int]) -> None:
        """Replace all progress at once; only used when resuming a saved game."""

        staged: Dict[Position, int] = {}
        for position, digit in progress.items():
            self._check_digit(digit)
            if self.puzzle.grid.is_playable(position):
                staged[position] = digit
        self.progress.clear()
        self.progress.update(staged)

    def _require_factory(self) -> PuzzleFactory:
        if self.factory is None:
            raise KakuroError("Session has no puzzle factory to switch levels")
        return self.factory

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def select(self, position: Optional[Position]) -> None:
        if position is not None and not self.puzzle.grid.contains(position):
            position = None
        self.selected = position

    def is_in_selected_run(self, position: Position) -> bool:
        if self.selected is None or not self.puzzle.grid.is_playable(self.selected):
            return False
        return any(position in run for run in self.puzzle.index.runs_containing(self.selected))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    @staticmethod
    def _check_digit(digit: int) -> None:
        if isinstance(digit, bool) or not isinstance(digit, int) or digit not in DIGITS:
            raise OutOfRangeDigitError(f"Digit {digit!r} outside 1..9")

    def _target(self, position: Optional[Position]) -> Optional[Position]:
        target = position if position is not None else self.selected
        if target is None or not self.puzzle.grid.is_playable(target):
            return None
        return target

    def set_value(self, digit: int, position: Optional[Position] = None) -> bool:
        """Enter ``digit`` at ``position`` (or the selection) if it is empty.

        Returns False without changing anything when there is no playable
        target or the cell already holds a digit.
        """

        self._check_digit(digit)
        target = self._target(position)
        if target is None or target in self.progress:
            LOGGER.debug("Ignoring set_value(%s) on %s", digit, position or self.selected)
            return False
        self.progress[target] = digit
        if self.is_puzzle_complete():
            self.is_completed = True
            self.completed_levels.setdefault(self.difficulty, set()).add(self.level)
            LOGGER.info("Puzzle completed: %s level %s", self.difficulty.value, self.level)
        return True

    def clear_value(self, position: Optional[Position] = None) -> bool:
        target = self._target(position)
        if target is None or target not in self.progress:
            return False
        del self.progress[target]
        if self.is_completed and not self.is_puzzle_complete():
            self.is_completed = False
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def allowed_digits(self, position: Optional[Position] = None) -> Set[int]:
        target = self._target(position)
        if target is None:
            return set()
        return self.engine.allowed_digits(target)

    def has_conflict(self, position: Position) -> bool:
        return self.engine.has_conflict(position)

    def is_run_completed(self, run: Run) -> bool:
        return self.engine.is_run_completed(run)

    def is_in_completed_run(self, position: Position) -> bool:
        return self.engine.is_in_completed_run(position)

    def is_puzzle_complete(self) -> bool:
        solution = self.puzzle.solution
        return len(self.progress) == len(solution) and all(
            solution.get(position) == digit for position, digit in self.progress.items()
        )

    def difficulty_score(self, policy: Optional[ScoringPolicy] = None) -> int:
        return difficulty_score(self.puzzle.index, self.puzzle.solution, policy)
