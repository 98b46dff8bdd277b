import random
import unittest

from kakuro.core.models import Position
from kakuro.engine.builder import build_puzzle
from kakuro.engine.constraints import (
    ConstraintEngine,
    achievable_range,
    free_digits,
    is_candidate_feasible,
)
from kakuro.engine.grid import KakuroGrid
from kakuro.engine.runs import extract_runs
from kakuro.engine.templates import EASY_6X6_BASE, parse_template


def make_engine(text: str, clues, values):
    grid = KakuroGrid.from_template(parse_template(text))
    for position, (horizontal, vertical) in clues.items():
        grid.set_block_sum(position, horizontal=horizontal, vertical=vertical)
    return ConstraintEngine(grid, extract_runs(grid), values)


class FeasibilityHelperTests(unittest.TestCase):
    def test_free_digits_excludes_every_used_set(self) -> None:
        self.assertEqual(free_digits({1, 2}, {9}), [3, 4, 5, 6, 7, 8])

    def test_achievable_range(self) -> None:
        self.assertEqual(achievable_range([1, 2, 3, 9], 2), (3, 12))
        self.assertEqual(achievable_range([4], 0), (0, 0))
        self.assertIsNone(achievable_range([4], 2))

    def test_last_slot_must_hit_target_exactly(self) -> None:
        self.assertTrue(is_candidate_feasible(6, {1}, 1, 1, 5))
        self.assertFalse(is_candidate_feasible(6, {1}, 1, 1, 4))

    def test_candidate_already_used_is_rejected(self) -> None:
        self.assertFalse(is_candidate_feasible(10, {3}, 3, 2, 3))

    def test_remaining_slots_must_reach_target(self) -> None:
        # Two empties summing to 3 can only be {1, 2}.
        self.assertTrue(is_candidate_feasible(3, set(), 0, 2, 1))
        self.assertFalse(is_candidate_feasible(3, set(), 0, 2, 3))


class AllowedDigitsTests(unittest.TestCase):
    def test_pair_with_one_filled_leaves_complement(self) -> None:
        engine = make_engine(
            """
            ###
            #..
            #..
            """,
            {Position(1, 0): (6, None)},
            {Position(1, 1): 1},
        )
        self.assertEqual(engine.allowed_digits(Position(1, 2)), {5})

    def test_full_length_run_leaves_missing_digit(self) -> None:
        text = "\n".join(["#" * 10, "#" + "." * 9, "#" + "." * 9])
        values = {}
        digits = [1, 2, 3, 4, 5, 6, 8, 9]
        for col, digit in enumerate(digits, start=1):
            values[Position(1, col)] = digit
        engine = make_engine(text, {Position(1, 0): (45, None)}, values)
        self.assertEqual(engine.allowed_digits(Position(1, 9)), {7})

    def test_queried_cell_value_is_ignored(self) -> None:
        engine = make_engine(
            """
            ###
            #..
            #..
            """,
            {Position(1, 0): (6, None)},
            {Position(1, 1): 1, Position(1, 2): 2},
        )
        self.assertEqual(engine.allowed_digits(Position(1, 2)), {5})

    def test_cell_outside_two_runs_has_no_digits(self) -> None:
        engine = make_engine(
            """
            ###
            #..
            #..
            """,
            {},
            {},
        )
        self.assertEqual(engine.allowed_digits(Position(0, 0)), set())

    def test_without_clues_only_distinctness_applies(self) -> None:
        engine = make_engine(
            """
            ###
            #..
            #..
            """,
            {},
            {Position(1, 1): 4, Position(2, 2): 7},
        )
        self.assertEqual(engine.allowed_digits(Position(1, 2)), {1, 2, 3, 5, 6, 8, 9})


class ConflictTests(unittest.TestCase):
    def setUp(self) -> None:
        self.values = {}
        self.engine = make_engine(
            """
            ###
            #..
            #..
            """,
            {Position(1, 0): (6, None), Position(0, 1): (None, 9)},
            self.values,
        )

    def test_duplicate_digit_is_a_conflict(self) -> None:
        self.values.update({Position(1, 1): 3, Position(1, 2): 3})
        self.assertTrue(self.engine.has_conflict(Position(1, 2)))

    def test_exceeding_target_is_a_conflict(self) -> None:
        self.values.update({Position(1, 1): 4, Position(1, 2): 5})
        self.assertTrue(self.engine.has_conflict(Position(1, 1)))

    def test_empty_cell_has_no_conflict(self) -> None:
        self.assertFalse(self.engine.has_conflict(Position(2, 2)))

    def test_run_completion(self) -> None:
        horizontal = self.engine.index.run_for(Position(1, 1), self.engine.index.run(0).direction)
        self.values.update({Position(1, 1): 2, Position(1, 2): 4})
        self.assertTrue(self.engine.is_run_completed(horizontal))
        self.assertTrue(self.engine.is_in_completed_run(Position(1, 2)))
        self.values[Position(1, 2)] = 3
        self.assertFalse(self.engine.is_run_completed(horizontal))

    def test_run_without_clue_never_completes(self) -> None:
        bottom = self.engine.index.run(1)
        self.values.update({Position(2, 1): 1, Position(2, 2): 2})
        self.assertFalse(self.engine.is_run_completed(bottom))


class SoundnessTests(unittest.TestCase):
    def test_allowed_digits_never_cause_conflict(self) -> None:
        rng = random.Random(5)
        puzzle = build_puzzle(EASY_6X6_BASE, rng=random.Random(3)).puzzle
        self.assertIsNotNone(puzzle)
        assert puzzle is not None
        positions = list(puzzle.solution)
        for _ in range(20):
            filled = rng.sample(positions, rng.randint(0, len(positions) - 1))
            progress = {position: puzzle.solution[position] for position in filled}
            engine = ConstraintEngine(puzzle.grid, puzzle.index, progress)
            for position in positions:
                if position in progress:
                    continue
                allowed = engine.allowed_digits(position)
                self.assertIn(puzzle.solution[position], allowed)
                for digit in allowed:
                    progress[position] = digit
                    self.assertFalse(engine.has_conflict(position))
                    del progress[position]


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
