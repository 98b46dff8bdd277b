"""Heuristic difficulty score of a built puzzle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..core.models import Position, Run
from .runs import RunIndex


@dataclass(frozen=True)
class ScoringPolicy:
    """Weights of the run score.

    A run earns ``short_run_length - length`` points (never negative) plus
    ``high_sum_bonus`` when its total exceeds ``high_sum_threshold``.
    """

    short_run_length: int = 6
    high_sum_threshold: int = 20
    high_sum_bonus: int = 2


DEFAULT_POLICY = ScoringPolicy()


def run_difficulty_score(
    run: Run, solution: Mapping[Position, int], policy: Optional[ScoringPolicy] = None
) -> int:
    policy = policy or DEFAULT_POLICY
    length_score = max(0, policy.short_run_length - run.length)
    total = sum(solution.get(position, 0) for position in run.positions)
    sum_score = policy.high_sum_bonus if total > policy.high_sum_threshold else 0
    return length_score + sum_score


def difficulty_score(
    index: RunIndex, solution: Mapping[Position, int], policy: Optional[ScoringPolicy] = None
) -> int:
    return sum(run_difficulty_score(run, solution, policy) for run in index.runs)
