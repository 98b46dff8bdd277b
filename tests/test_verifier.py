import random
import unittest

from kakuro.core.models import Position
from kakuro.engine.builder import build_puzzle
from kakuro.engine.grid import KakuroGrid
from kakuro.engine.runs import extract_runs
from kakuro.engine.templates import EASY_5X5_BASE, parse_template
from kakuro.engine.verifier import count_solutions


def clued_grid(clues):
    grid = KakuroGrid.from_template(parse_template("###\n#..\n#.."))
    for position, (horizontal, vertical) in clues.items():
        grid.set_block_sum(position, horizontal=horizontal, vertical=vertical)
    return grid, extract_runs(grid)


class SolutionCountTests(unittest.TestCase):
    def test_forced_clues_have_one_solution(self) -> None:
        # a + b = 3, c + d = 7, a + c = 4, b + d = 6 only fits a=1 b=2 c=3 d=4.
        grid, index = clued_grid(
            {
                Position(1, 0): (3, None),
                Position(2, 0): (7, None),
                Position(0, 1): (None, 4),
                Position(0, 2): (None, 6),
            }
        )
        counted = count_solutions(grid, index)
        self.assertEqual(counted.count, 1)
        self.assertTrue(counted.exhaustive)
        self.assertTrue(counted.unique)

    def test_unclued_grid_stops_at_limit(self) -> None:
        grid, index = clued_grid({})
        counted = count_solutions(grid, index, limit=2)
        self.assertEqual(counted.count, 2)
        self.assertFalse(counted.unique)

    def test_contradictory_clues_have_no_solution(self) -> None:
        grid, index = clued_grid({Position(1, 0): (2, None)})
        counted = count_solutions(grid, index)
        self.assertEqual(counted.count, 0)
        self.assertTrue(counted.exhaustive)
        self.assertFalse(counted.unique)

    def test_built_puzzle_admits_its_solution(self) -> None:
        puzzle = build_puzzle(EASY_5X5_BASE, rng=random.Random(12)).puzzle
        assert puzzle is not None
        counted = count_solutions(puzzle.grid, puzzle.index, limit=2)
        self.assertGreaterEqual(counted.count, 1)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
