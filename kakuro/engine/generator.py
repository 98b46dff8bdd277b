"""Randomized template generation.

Two strategies produce new layouts without reference to any solution:

  1. Islands: block the border, seed stride-spaced separators, repair the
     structure, then drop small block islands one validated mutation at a time.
  2. Mutation: toggle random interior cells of a known-valid base, keeping
     only the toggles the validator accepts.

Both deduplicate accepted layouts by canonical key against a seen-set that
lives as long as the generator.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

from ..core.constants import (LEVELS_PER_SIZE, MAX_RUN_LENGTH, MIN_RUN_LENGTH, Difficulty,
                              grid_size)
from ..core.models import Template
from ..utils.logger import get_logger
from .templates import blank_template, copy_template, template_key
from .validator import TemplateValidator, playable_segments


LOGGER = get_logger(__name__)


# Island count ranges per tier: (levels 1-5, levels 6+).
TIER_ISLANDS = {
    Difficulty.EASY: ((0, 1), (1, 2)),
    Difficulty.MEDIUM: ((2, 6), (4, 10)),
    Difficulty.HARD: ((6, 14), (10, 22)),
}

ISLAND_SHAPES: Tuple[Tuple[Tuple[int, int], ...], ...] = (
    ((0, 0), (0, 1), (1, 0), (1, 1)),  # 2x2 block
    ((0, 0), (1, 0)),  # vertical domino
    ((0, 0), (0, 1)),  # horizontal domino
)


@dataclass
class TemplateGeneratorConfig:
    rows: int
    cols: int
    min_islands: int = 0
    max_islands: int = 0
    separator_start: int = 3
    separator_stride: int = 4
    separator_probability: float = 0.5
    island_attempts: int = 30
    max_attempts: int = 200_000
    min_playable_cells: int = 4
    repair_structure: bool = True
    seed: Optional[int] = None

    @classmethod
    def for_tier(
        cls, difficulty: Difficulty, level: int, seed: Optional[int] = None, **overrides
    ) -> "TemplateGeneratorConfig":
        difficulty = Difficulty(difficulty)
        rows, cols = grid_size(difficulty, level)
        small, large = TIER_ISLANDS[difficulty]
        min_islands, max_islands = small if level <= LEVELS_PER_SIZE else large
        return cls(
            rows=rows,
            cols=cols,
            min_islands=min_islands,
            max_islands=max_islands,
            seed=seed,
            **overrides,
        )


class TemplateGenerator:
    """Produces unique, structurally valid templates."""

    def __init__(
        self,
        config: TemplateGeneratorConfig,
        rng: Optional[random.Random] = None,
        validator: Optional[TemplateValidator] = None,
    ) -> None:
        self.config = config
        self.rng = rng or random.Random(config.seed)
        self.validator = validator or TemplateValidator()
        self.seen: Set[str] = set()

    # ------------------------------------------------------------------
    # Public entrypoints
    # ------------------------------------------------------------------
    def generate(self, count: int) -> List[Template]:
        """Return up to ``count`` new layouts never returned before."""

        results: List[Template] = []
        attempts = 0
        while len(results) < count and attempts < self.config.max_attempts:
            attempts += 1
            template = self._build_candidate()
            if self._accept(template):
                results.append(template)
        self._report(results, count, attempts)
        return results

    def generate_from_base(
        self, base: Sequence[Sequence[bool]], count: int, mutations: int
    ) -> List[Template]:
        """Return up to ``count`` unique valid mutations of ``base``."""

        results: List[Template] = []
        attempts = 0
        while len(results) < count and attempts < self.config.max_attempts:
            attempts += 1
            mutated = self.mutate_from_base(base, mutations)
            if self._accept(mutated):
                results.append(mutated)
        self._report(results, count, attempts)
        return results

    def mutate_from_base(self, base: Sequence[Sequence[bool]], mutations: int) -> Template:
        template = copy_template(base)
        rows, cols = len(template), len(template[0])
        if rows < 3 or cols < 3:
            return template
        for _ in range(mutations):
            r = self.rng.randint(1, rows - 2)
            c = self.rng.randint(1, cols - 2)
            template[r][c] = not template[r][c]
            if not self.validator.is_valid(template):
                template[r][c] = not template[r][c]
        return template

    # ------------------------------------------------------------------
    # Island strategy
    # ------------------------------------------------------------------
    def _build_candidate(self) -> Template:
        template = blank_template(self.config.rows, self.config.cols)
        self.seed_structure(template)
        if self.config.repair_structure:
            self.repair_structure(template)
        islands = self.rng.randint(self.config.min_islands, self.config.max_islands)
        for _ in range(islands):
            self.place_island(template)
        return template

    def seed_structure(self, template: Template) -> None:
        """Scatter blocks along stride-spaced columns, then rows."""

        rows, cols = len(template), len(template[0])
        start, stride = self.config.separator_start, self.config.separator_stride
        for c in range(start, cols - 2, stride):
            for r in range(1, rows - 1):
                if self.rng.random() < self.config.separator_probability:
                    template[r][c] = True
        for r in range(start, rows - 2, stride):
            for c in range(1, cols - 1):
                if self.rng.random() < self.config.separator_probability:
                    template[r][c] = True

    def place_island(self, template: Template) -> bool:
        """Try to drop one island; keep it only if the layout stays valid."""

        rows, cols = len(template), len(template[0])
        if rows < 4 or cols < 4:
            return False
        for _ in range(self.config.island_attempts):
            r = self.rng.randint(1, rows - 3)
            c = self.rng.randint(1, cols - 3)
            shape = ISLAND_SHAPES[self.rng.randint(0, len(ISLAND_SHAPES) - 1)]
            backup = copy_template(template)
            for dr, dc in shape:
                template[r + dr][c + dc] = True
            if self.validator.is_valid(template):
                return True
            template[:] = backup
        return False

    def repair_structure(self, template: Template, max_passes: int = 30) -> None:
        """Block isolated playables and split over-long runs until stable."""

        for _ in range(max_passes):
            changed = self._heal_isolated_cells(template)
            changed = self._partition_long_runs(template) or changed
            if not changed:
                return

    @staticmethod
    def _heal_isolated_cells(template: Template) -> bool:
        changed = False
        while True:
            isolated = set()
            for r, row in enumerate(template):
                for start, length in playable_segments(row):
                    if length < MIN_RUN_LENGTH:
                        isolated.add((r, start))
            for c, column in enumerate(zip(*template)):
                for start, length in playable_segments(column):
                    if length < MIN_RUN_LENGTH:
                        isolated.add((start, c))
            if not isolated:
                return changed
            for r, c in isolated:
                template[r][c] = True
            changed = True

    @staticmethod
    def _split_offset(length: int) -> int:
        # Middle cell, nudged so both remaining pieces keep at least two cells.
        mid = length // 2
        return min(max(mid, MIN_RUN_LENGTH), length - MIN_RUN_LENGTH - 1)

    def _partition_long_runs(self, template: Template) -> bool:
        changed = False
        for r, row in enumerate(template):
            for start, length in list(playable_segments(row)):
                if length > MAX_RUN_LENGTH:
                    template[r][start + self._split_offset(length)] = True
                    changed = True
        for c in range(len(template[0])):
            column = [row[c] for row in template]
            for start, length in list(playable_segments(column)):
                if length > MAX_RUN_LENGTH:
                    template[start + self._split_offset(length)][c] = True
                    changed = True
        return changed

    # ------------------------------------------------------------------
    # Acceptance
    # ------------------------------------------------------------------
    def _accept(self, template: Template) -> bool:
        if not self.validator.is_valid(template):
            return False
        playable = sum(1 for row in template for is_block in row if not is_block)
        if playable < self.config.min_playable_cells:
            return False
        key = template_key(template)
        if key in self.seen:
            return False
        self.seen.add(key)
        return True

    def _report(self, results: List[Template], count: int, attempts: int) -> None:
        if len(results) < count:
            LOGGER.warning(
                "Generated %d/%d %dx%d templates before the %d attempt budget ran out",
                len(results),
                count,
                self.config.rows,
                self.config.cols,
                self.config.max_attempts,
            )
        else:
            LOGGER.info(
                "Generated %d %dx%d templates in %d attempts",
                len(results),
                self.config.rows,
                self.config.cols,
                attempts,
            )
