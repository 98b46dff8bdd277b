"""Logging for the Kakuro engine.

Every module logs through ``get_logger(__name__)`` under the ``kakuro``
namespace. Levels are used consistently: validator rejections, solver node
counts and run extraction go to DEBUG; finished template sets, built
puzzles, failed solves and completed games go to INFO; exhausted attempt
budgets and clue runs without an anchor go to WARNING.
"""

from __future__ import annotations

import logging
from typing import Optional


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging with a sensible formatter.

    Template generation and solving perform many speculative attempts, so the
    engine logs those at DEBUG and keeps INFO for pipeline milestones. Callers
    may reconfigure before building puzzles.
    """

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults if needed."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "kakuro")
