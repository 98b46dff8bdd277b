import json
import random
import unittest

from kakuro.core.constants import Difficulty
from kakuro.core.exceptions import SessionDecodeError
from kakuro.core.models import Position
from kakuro.engine.builder import build_puzzle
from kakuro.engine.session import GameSession
from kakuro.engine.templates import MEDIUM_8X8_BASE
from kakuro.io.codec import FORMAT_VERSION, dumps, loads, session_from_jsonable, session_to_jsonable


def make_session() -> GameSession:
    puzzle = build_puzzle(MEDIUM_8X8_BASE, rng=random.Random(10)).puzzle
    assert puzzle is not None
    session = GameSession(
        puzzle,
        difficulty=Difficulty.MEDIUM,
        level=4,
        completed_levels={Difficulty.EASY: {1, 2}, Difficulty.MEDIUM: {3}},
    )
    for position in sorted(puzzle.solution)[:5]:
        session.set_value(puzzle.solution[position], position)
    return session


class SessionCodecTests(unittest.TestCase):
    def test_round_trip_reproduces_session(self) -> None:
        session = make_session()
        restored = loads(dumps(session))
        self.assertEqual(restored.puzzle.grid, session.puzzle.grid)
        self.assertEqual(restored.puzzle.solution, session.puzzle.solution)
        self.assertEqual(restored.puzzle.template, session.puzzle.template)
        self.assertEqual(restored.progress, session.progress)
        self.assertEqual(restored.difficulty, Difficulty.MEDIUM)
        self.assertEqual(restored.level, 4)
        self.assertEqual(restored.completed_levels, session.completed_levels)
        self.assertFalse(restored.is_completed)

    def test_runs_are_rebuilt_on_load(self) -> None:
        session = make_session()
        restored = session_from_jsonable(session_to_jsonable(session))
        self.assertEqual(
            [run.positions for run in restored.puzzle.runs],
            [run.positions for run in session.puzzle.runs],
        )
        position = next(iter(restored.puzzle.solution))
        self.assertEqual(
            restored.allowed_digits(position), session.allowed_digits(position)
        )

    def test_document_layout(self) -> None:
        payload = session_to_jsonable(make_session())
        self.assertEqual(payload["version"], FORMAT_VERSION)
        self.assertEqual(payload["difficulty"], "medium")
        self.assertEqual(payload["completed_levels"], {"easy": [1, 2], "medium": [3]})
        self.assertTrue(all("-" in key for key in payload["progress"]))
        json.dumps(payload)

    def test_completion_flag_survives(self) -> None:
        session = make_session()
        for position, digit in session.puzzle.solution.items():
            session.set_value(digit, position)
        self.assertTrue(session.is_completed)
        restored = loads(dumps(session))
        self.assertTrue(restored.is_completed)
        self.assertTrue(restored.is_puzzle_complete())


class SessionDecodeErrorTests(unittest.TestCase):
    def test_invalid_json(self) -> None:
        with self.assertRaises(SessionDecodeError):
            loads("{not json")

    def test_non_object_document(self) -> None:
        with self.assertRaises(SessionDecodeError):
            loads("[1, 2]")

    def test_missing_fields(self) -> None:
        payload = session_to_jsonable(make_session())
        del payload["solution"]
        with self.assertRaises(SessionDecodeError):
            session_from_jsonable(payload)

    def test_bad_progress_digit(self) -> None:
        payload = session_to_jsonable(make_session())
        payload["progress"] = {"1-1": 12}
        with self.assertRaises(SessionDecodeError):
            session_from_jsonable(payload)

    def test_bad_position_key(self) -> None:
        payload = session_to_jsonable(make_session())
        payload["progress"] = {"one-two": 3}
        with self.assertRaises(SessionDecodeError):
            session_from_jsonable(payload)

    def test_solution_digit_out_of_range(self) -> None:
        payload = session_to_jsonable(make_session())
        key = next(iter(payload["solution"]))
        payload["solution"][key] = 42
        with self.assertRaises(SessionDecodeError):
            session_from_jsonable(payload)

    def test_non_integer_digits_are_rejected(self) -> None:
        for digit in (3.9, True, "4"):
            payload = session_to_jsonable(make_session())
            payload["progress"] = {"1-1": digit}
            with self.subTest(digit=digit), self.assertRaises(SessionDecodeError):
                session_from_jsonable(payload)

    def test_solution_on_block_cell(self) -> None:
        payload = session_to_jsonable(make_session())
        payload["solution"]["1-3"] = 5
        with self.assertRaises(SessionDecodeError):
            session_from_jsonable(payload)

    def test_progress_on_block_or_outside_grid(self) -> None:
        for key in ("0-0", "20-20"):
            payload = session_to_jsonable(make_session())
            payload["progress"] = {key: 5}
            with self.subTest(key=key), self.assertRaises(SessionDecodeError):
                session_from_jsonable(payload)

    def test_solution_must_be_an_object(self) -> None:
        payload = session_to_jsonable(make_session())
        payload["solution"] = [[1, 1, 5]]
        with self.assertRaises(SessionDecodeError):
            session_from_jsonable(payload)

    def test_unknown_difficulty(self) -> None:
        payload = session_to_jsonable(make_session())
        payload["difficulty"] = "impossible"
        with self.assertRaises(SessionDecodeError):
            session_from_jsonable(payload)

    def test_unsupported_version(self) -> None:
        payload = session_to_jsonable(make_session())
        payload["version"] = FORMAT_VERSION + 1
        with self.assertRaises(SessionDecodeError):
            session_from_jsonable(payload)

    def test_loaded_position_keys(self) -> None:
        restored = loads(dumps(make_session()))
        self.assertTrue(all(isinstance(key, Position) for key in restored.progress))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
