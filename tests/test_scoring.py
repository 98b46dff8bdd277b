import unittest

from kakuro.core.constants import Direction
from kakuro.core.models import Position, Run
from kakuro.engine.runs import RunIndex
from kakuro.engine.scoring import ScoringPolicy, difficulty_score, run_difficulty_score


def horizontal_run(run_id, digits):
    positions = tuple(Position(1, c) for c in range(1, len(digits) + 1))
    return Run(id=run_id, direction=Direction.HORIZONTAL, positions=positions), dict(zip(positions, digits))


class ScoringTests(unittest.TestCase):
    def test_short_low_sum_run(self) -> None:
        run, solution = horizontal_run(0, [1, 2, 3])
        self.assertEqual(run_difficulty_score(run, solution), 3)

    def test_high_sum_bonus(self) -> None:
        run, solution = horizontal_run(0, [7, 8, 9])
        self.assertEqual(run_difficulty_score(run, solution), 5)

    def test_long_runs_earn_no_length_points(self) -> None:
        run, solution = horizontal_run(0, [1, 2, 3, 4, 5, 6, 7, 8, 9])
        self.assertEqual(run_difficulty_score(run, solution), 2)

    def test_sum_at_threshold_earns_no_bonus(self) -> None:
        run, solution = horizontal_run(0, [3, 8, 9])
        self.assertEqual(run_difficulty_score(run, solution), 3)

    def test_custom_policy(self) -> None:
        policy = ScoringPolicy(short_run_length=4, high_sum_threshold=5, high_sum_bonus=10)
        run, solution = horizontal_run(0, [1, 2, 3])
        self.assertEqual(run_difficulty_score(run, solution, policy), 11)

    def test_puzzle_score_sums_runs(self) -> None:
        low, low_solution = horizontal_run(0, [1, 2])
        high_positions = (Position(1, 1), Position(2, 1))
        high = Run(id=1, direction=Direction.VERTICAL, positions=high_positions)
        solution = dict(low_solution)
        solution[Position(2, 1)] = 9
        index = RunIndex(runs=[low, high])
        # low: 4 + 0, high: 4 + 0 (1 + 9 = 10)
        self.assertEqual(difficulty_score(index, solution), 8)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
