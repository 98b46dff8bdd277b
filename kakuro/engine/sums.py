"""Clue derivation from a solved grid."""

from __future__ import annotations

from ..core.constants import Direction
from ..utils.logger import get_logger
from .grid import KakuroGrid
from .runs import RunIndex


LOGGER = get_logger(__name__)


def assign_run_sums(grid: KakuroGrid, index: RunIndex) -> None:
    """Write each run's digit total into its anchor block.

    Horizontal totals go to the block left of the run, vertical totals to the
    block above it; the block's other clue field is left alone. Running this
    twice on the same solved grid writes the same clues.
    """

    for run in index.runs:
        total = sum(grid.value_at(position) or 0 for position in run.positions)
        anchor = run.anchor
        if not grid.contains(anchor):
            LOGGER.warning("Run %d has no anchor inside the grid", run.id)
            continue
        if run.direction == Direction.HORIZONTAL:
            grid.set_block_sum(anchor, horizontal=total)
        else:
            grid.set_block_sum(anchor, vertical=total)
        run.sum = total
    LOGGER.debug("Assigned clues for %d runs", len(index.runs))
