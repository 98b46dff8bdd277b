"""Puzzle setup pipeline.

validate template -> extract runs -> solve -> assign clue sums -> clear the
playable cells. Failures come back as :class:`PuzzleBuildResult` values;
:class:`PuzzleFactory` logs them and retries with another template.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from ..core.constants import Difficulty
from ..core.exceptions import PuzzleGenerationError
from ..core.models import Position, Run, Template
from ..utils.logger import get_logger
from .generator import TemplateGenerator, TemplateGeneratorConfig
from .grid import KakuroGrid
from .library import TemplateLibrary
from .runs import RunIndex, check_structure, extract_runs
from .solver import SolutionSolver, SolverConfig
from .sums import assign_run_sums
from .templates import copy_template
from .validator import validate_template


LOGGER = get_logger(__name__)


class BuildError(str, Enum):
    STRUCTURAL_INVALID_TEMPLATE = "StructuralInvalidTemplate"
    UNSOLVABLE = "Unsolvable"


@dataclass
class Puzzle:
    """A clued grid ready for play plus the assignment it was built from."""

    grid: KakuroGrid
    index: RunIndex
    solution: Dict[Position, int]
    template: Template

    @property
    def runs(self) -> List[Run]:
        return self.index.runs


@dataclass
class PuzzleBuildResult:
    puzzle: Optional[Puzzle] = None
    error: Optional[BuildError] = None
    messages: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.puzzle is not None


def build_puzzle(
    template: Sequence[Sequence[bool]],
    rng: Optional[random.Random] = None,
    solver_config: Optional[SolverConfig] = None,
) -> PuzzleBuildResult:
    """Turn a template into a clued puzzle and its solution."""

    validation = validate_template(template)
    if not validation.ok:
        return PuzzleBuildResult(
            error=BuildError.STRUCTURAL_INVALID_TEMPLATE, messages=validation.messages
        )

    grid = KakuroGrid.from_template(template)
    index = extract_runs(grid)
    structure = check_structure(grid, index)
    if not structure.ok:
        return PuzzleBuildResult(
            error=BuildError.STRUCTURAL_INVALID_TEMPLATE, messages=structure.messages
        )

    grid.clear_playable_values()
    solved = SolutionSolver(grid, index, rng=rng, config=solver_config).solve()
    if not solved.ok:
        return PuzzleBuildResult(error=BuildError.UNSOLVABLE, messages=solved.messages)

    assign_run_sums(grid, index)
    grid.clear_playable_values()
    LOGGER.info(
        "Built %dx%d puzzle: %d runs, %d playable cells (%d solver nodes)",
        grid.rows,
        grid.cols,
        len(index.runs),
        len(solved.solution),
        solved.nodes,
    )
    return PuzzleBuildResult(
        puzzle=Puzzle(
            grid=grid,
            index=index,
            solution=solved.solution,
            template=copy_template(template),
        )
    )


@dataclass
class FactoryConfig:
    seed: Optional[int] = None
    retry_limit: int = 5
    solver_max_nodes: Optional[int] = 200_000
    fallback_attempts: int = 20_000


class PuzzleFactory:
    """Builds puzzles for a tier and level, retrying on failure."""

    def __init__(
        self,
        config: Optional[FactoryConfig] = None,
        library: Optional[TemplateLibrary] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or FactoryConfig()
        self.library = library or TemplateLibrary()
        self.rng = rng or random.Random(self.config.seed)

    def generate(self, difficulty: Difficulty, level: int) -> Puzzle:
        difficulty = Difficulty(difficulty)
        template = self.library.template_for(difficulty, level)
        solver_config = SolverConfig(max_nodes=self.config.solver_max_nodes)
        for attempt in range(1, self.config.retry_limit + 1):
            LOGGER.info(
                "Build attempt %s/%s (%s level %s)", attempt, self.config.retry_limit, difficulty.value, level
            )
            result = build_puzzle(template, rng=self.rng, solver_config=solver_config)
            if result.puzzle is not None:
                return result.puzzle
            LOGGER.warning(
                "Build attempt failed: %s %s",
                result.error.value if result.error else "unknown",
                result.messages,
            )
            replacement = self._fresh_template(difficulty, level)
            if replacement is not None:
                template = replacement
        raise PuzzleGenerationError(
            f"Unable to build a {difficulty.value} level {level} puzzle after retries"
        )

    def _fresh_template(self, difficulty: Difficulty, level: int) -> Optional[Template]:
        config = TemplateGeneratorConfig.for_tier(
            difficulty, level, max_attempts=self.config.fallback_attempts
        )
        found = TemplateGenerator(config, rng=self.rng).generate(1)
        return found[0] if found else None
