"""Kakuro puzzle core: templates, solving, clue assignment and play sessions.

This package exposes the public API surface via:

- ``kakuro.engine.builder.build_puzzle`` / ``PuzzleFactory``: turn a template
  into a clued puzzle and its solution.
- ``kakuro.engine.generator.TemplateGenerator``: produce unique valid layouts.
- ``kakuro.engine.session.GameSession``: the player's command/query surface.
- ``kakuro.io.codec``: JSON persistence of a session.
"""

from .core.constants import Difficulty, Direction
from .engine.builder import BuildError, Puzzle, PuzzleBuildResult, PuzzleFactory, build_puzzle
from .engine.generator import TemplateGenerator, TemplateGeneratorConfig
from .engine.session import GameSession
from .engine.validator import TemplateValidator, validate_template

__all__ = [
    "BuildError",
    "Difficulty",
    "Direction",
    "GameSession",
    "Puzzle",
    "PuzzleBuildResult",
    "PuzzleFactory",
    "TemplateGenerator",
    "TemplateGeneratorConfig",
    "TemplateValidator",
    "build_puzzle",
    "validate_template",
]

__version__ = "0.1.0"
