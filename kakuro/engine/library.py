"""Per-tier template sets, generated deterministically and cached."""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

from ..core.constants import LEVELS_PER_SIZE, Difficulty, grid_size
from ..core.exceptions import PuzzleGenerationError
from ..core.models import Template
from ..utils.logger import get_logger
from .generator import TemplateGenerator, TemplateGeneratorConfig
from .templates import (EASY_5X5_BASE, EASY_6X6_BASE, HARD_15X15_BASE, MEDIUM_8X8_BASE,
                        copy_template, mirror_horizontal, mirror_vertical, rotate_180)
from .validator import TemplateValidator


LOGGER = get_logger(__name__)

_TIER_ORDER = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)

# Known-valid layouts used to top up a generated set by mutation.
BASE_TEMPLATES: Dict[Tuple[int, int], Template] = {
    (6, 6): EASY_6X6_BASE,
    (8, 8): MEDIUM_8X8_BASE,
    (15, 15): HARD_15X15_BASE,
}

EASY_5X5_BASE_SIZE = (len(EASY_5X5_BASE), len(EASY_5X5_BASE[0]))


def size_seed(rows: int, cols: int, difficulty: Difficulty) -> int:
    return rows * 1000 + cols * 10 + _TIER_ORDER.index(Difficulty(difficulty))


class TemplateLibrary:
    """Maps ``(difficulty, level)`` to a template.

    Each tier size holds ``LEVELS_PER_SIZE`` templates; the set is generated
    from a seed derived from the board size, so every process sees the same
    levels.
    """

    def __init__(
        self,
        max_attempts: int = 20_000,
        mutations: int = 60,
        validator: Optional[TemplateValidator] = None,
    ) -> None:
        self.max_attempts = max_attempts
        self.mutations = mutations
        self.validator = validator or TemplateValidator()
        self._sets: Dict[Tuple[Difficulty, int, int], List[Template]] = {}

    def template_for(self, difficulty: Difficulty, level: int) -> Template:
        templates = self.templates_for(difficulty, level)
        return copy_template(templates[(max(level, 1) - 1) % len(templates)])

    def templates_for(self, difficulty: Difficulty, level: int) -> List[Template]:
        difficulty = Difficulty(difficulty)
        rows, cols = grid_size(difficulty, level)
        key = (difficulty, rows, cols)
        if key not in self._sets:
            self._sets[key] = self._build_set(difficulty, level, rows, cols)
        return self._sets[key]

    def _build_set(self, difficulty: Difficulty, level: int, rows: int, cols: int) -> List[Template]:
        if (rows, cols) == EASY_5X5_BASE_SIZE:
            # The 5x5 board admits a single open layout; levels differ only
            # by symmetry, which leaves it unchanged.
            base = EASY_5X5_BASE
            templates = [
                base,
                mirror_horizontal(base),
                mirror_vertical(base),
                rotate_180(base),
                mirror_horizontal(mirror_vertical(base)),
            ]
        else:
            config = TemplateGeneratorConfig.for_tier(
                difficulty, level, seed=size_seed(rows, cols, difficulty), max_attempts=self.max_attempts
            )
            generator = TemplateGenerator(config, rng=random.Random(config.seed), validator=self.validator)
            templates = generator.generate(LEVELS_PER_SIZE)
            base = BASE_TEMPLATES.get((rows, cols))
            if len(templates) < LEVELS_PER_SIZE and base is not None:
                templates.extend(
                    generator.generate_from_base(base, LEVELS_PER_SIZE - len(templates), self.mutations)
                )

        templates = [t for t in templates if self.validator.is_valid(t)]
        if not templates:
            raise PuzzleGenerationError(f"No valid {rows}x{cols} templates for {difficulty.value}")
        LOGGER.info("Template set ready: %s %dx%d (%d templates)", difficulty.value, rows, cols, len(templates))
        return templates

