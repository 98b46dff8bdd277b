"""JSON persistence of a game session.

Documents carry the clued grid, the solution, the player's progress and
the level bookkeeping; runs are rebuilt from the grid on load.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..core.constants import DIGITS, Difficulty
from ..core.exceptions import KakuroError, SessionDecodeError
from ..core.models import Position
from ..engine.builder import Puzzle, PuzzleFactory
from ..engine.grid import KakuroGrid
from ..engine.runs import extract_runs
from ..engine.session import GameSession
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

FORMAT_VERSION = 1


def _positions_to_jsonable(values: Dict[Position, int]) -> Dict[str, int]:
    return {position.id: digit for position, digit in sorted(values.items())}


def _positions_from_jsonable(payload: Any, grid: KakuroGrid, field: str) -> Dict[Position, int]:
    if not isinstance(payload, dict):
        raise SessionDecodeError(f"'{field}' must be an object of \"r-c\" keys")
    values: Dict[Position, int] = {}
    for key, digit in payload.items():
        position = Position.from_id(key)
        if not grid.is_playable(position):
            raise SessionDecodeError(f"'{field}' entry {key} is not a playable cell")
        if isinstance(digit, bool) or not isinstance(digit, int) or digit not in DIGITS:
            raise SessionDecodeError(f"'{field}' entry {key} holds {digit!r}, not a digit 1..9")
        values[position] = digit
    return values


def session_to_jsonable(session: GameSession) -> Dict[str, Any]:
    puzzle = session.puzzle
    return {
        "version": FORMAT_VERSION,
        "difficulty": session.difficulty.value,
        "level": session.level,
        "is_completed": session.is_completed,
        "completed_levels": {
            difficulty.value: sorted(levels)
            for difficulty, levels in session.completed_levels.items()
        },
        "template": [[bool(flag) for flag in row] for row in puzzle.template],
        "grid": puzzle.grid.to_jsonable(),
        "solution": _positions_to_jsonable(puzzle.solution),
        "progress": _positions_to_jsonable(session.progress),
    }


def session_from_jsonable(
    payload: Dict[str, Any], factory: Optional[PuzzleFactory] = None
) -> GameSession:
    try:
        version = payload.get("version", FORMAT_VERSION)
        if version != FORMAT_VERSION:
            raise SessionDecodeError(f"Unsupported session format version {version}")
        grid = KakuroGrid.from_jsonable(payload["grid"])
        template = payload.get("template") or grid.to_template()
        puzzle = Puzzle(
            grid=grid,
            index=extract_runs(grid),
            solution=_positions_from_jsonable(payload["solution"], grid, "solution"),
            template=[[bool(flag) for flag in row] for row in template],
        )
        completed_levels = {
            Difficulty(key): {int(level) for level in levels}
            for key, levels in payload.get("completed_levels", {}).items()
        }
        session = GameSession(
            puzzle,
            difficulty=Difficulty(payload["difficulty"]),
            level=int(payload["level"]),
            progress=_positions_from_jsonable(payload.get("progress", {}), grid, "progress"),
            is_completed=bool(payload.get("is_completed", False)),
            completed_levels=completed_levels,
            factory=factory,
        )
    except SessionDecodeError:
        raise
    except (KakuroError, KeyError, TypeError, ValueError, AttributeError) as exc:
        raise SessionDecodeError(f"Invalid session document: {exc}") from exc
    LOGGER.debug("Restored session %s level %s", session.difficulty.value, session.level)
    return session


def dumps(session: GameSession, indent: Optional[int] = None) -> str:
    return json.dumps(session_to_jsonable(session), ensure_ascii=False, indent=indent)


def loads(text: str, factory: Optional[PuzzleFactory] = None) -> GameSession:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SessionDecodeError(f"Session is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise SessionDecodeError("Session document must be a JSON object")
    return session_from_jsonable(payload, factory=factory)
