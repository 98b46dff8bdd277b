"""CLI entrypoint for the Kakuro puzzle generator."""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Any, Dict, List

from kakuro.core.constants import Difficulty, grid_size
from kakuro.core.exceptions import KakuroError
from kakuro.engine.builder import FactoryConfig, Puzzle, PuzzleFactory, build_puzzle
from kakuro.engine.generator import TemplateGenerator, TemplateGeneratorConfig
from kakuro.engine.scoring import difficulty_score
from kakuro.engine.solver import SolverConfig
from kakuro.engine.templates import format_template, parse_template
from kakuro.engine.verifier import count_solutions
from kakuro.utils.logger import configure_logging, get_logger
from kakuro.utils.pretty import print_puzzle_stats


LOGGER = get_logger("kakuro.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate Kakuro templates and puzzles")
    parser.add_argument(
        "mode",
        choices=["puzzle", "templates"],
        nargs="?",
        default="puzzle",
        help="Build one puzzle, or generate a set of unique templates",
    )
    parser.add_argument(
        "--difficulty",
        type=str,
        choices=[d.value for d in Difficulty],
        default=Difficulty.EASY.value,
        help="Difficulty tier",
    )
    parser.add_argument("--level", type=int, default=1, help="Level within the tier (1-based)")
    parser.add_argument("--rows", type=int, help="Override template height (templates mode)")
    parser.add_argument("--cols", type=int, help="Override template width (templates mode)")
    parser.add_argument("--count", type=int, default=5, help="Number of templates to generate")
    parser.add_argument(
        "--template",
        type=Path,
        metavar="FILE",
        help="Build from a template file ('#' block, '.' playable, one row per line)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--check-unique",
        action="store_true",
        help="Count solutions of the built puzzle with CP-SAT (up to two)",
    )
    parser.add_argument("--pretty", action="store_true", help="Print a text rendering instead of JSON")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def puzzle_payload(puzzle: Puzzle, difficulty: str, level: int) -> Dict[str, Any]:
    return {
        "difficulty": difficulty,
        "level": level,
        "template": format_template(puzzle.template).splitlines(),
        "grid": puzzle.grid.to_jsonable(),
        "runs": [
            {
                "id": run.id,
                "direction": run.direction.value,
                "cells": [position.id for position in run.positions],
                "sum": run.sum,
            }
            for run in puzzle.runs
        ],
        "solution": {position.id: digit for position, digit in sorted(puzzle.solution.items())},
        "difficulty_score": difficulty_score(puzzle.index, puzzle.solution),
    }


def run_puzzle(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Dict[str, Any]:
    if args.template:
        template = parse_template(args.template.read_text(encoding="utf-8"))
        result = build_puzzle(
            template,
            rng=random.Random(args.seed),
            solver_config=SolverConfig(max_nodes=FactoryConfig().solver_max_nodes),
        )
        if result.puzzle is None:
            parser.exit(
                1,
                f"Build failed: {result.error.value if result.error else 'unknown'} {result.messages}\n",
            )
        puzzle = result.puzzle
    else:
        factory = PuzzleFactory(FactoryConfig(seed=args.seed))
        puzzle = factory.generate(Difficulty(args.difficulty), args.level)

    payload = puzzle_payload(puzzle, args.difficulty, args.level)
    if args.check_unique:
        counted = count_solutions(puzzle.grid, puzzle.index)
        payload["solution_count"] = {
            "count": counted.count,
            "exhaustive": counted.exhaustive,
            "unique": counted.unique,
        }
        if not counted.unique:
            LOGGER.warning("Puzzle clues admit more than one solution (or the count timed out)")

    if args.pretty:
        print_puzzle_stats(puzzle, show_solution=True, score=payload["difficulty_score"])
    return payload


def run_templates(args: argparse.Namespace) -> Dict[str, Any]:
    difficulty = Difficulty(args.difficulty)
    config = TemplateGeneratorConfig.for_tier(difficulty, args.level, seed=args.seed)
    rows, cols = grid_size(difficulty, args.level)
    config.rows = args.rows or rows
    config.cols = args.cols or cols
    templates = TemplateGenerator(config).generate(args.count)

    if args.pretty:
        for number, template in enumerate(templates, start=1):
            print(f"Template {number}:")
            print(format_template(template))
            print()
    texts: List[List[str]] = [format_template(t).splitlines() for t in templates]
    return {
        "difficulty": difficulty.value,
        "rows": config.rows,
        "cols": config.cols,
        "templates": texts,
    }


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.level < 1:
        parser.error("--level must be at least 1")
    if args.count < 1:
        parser.error("--count must be at least 1")
    if args.mode == "templates" and args.template:
        parser.error("--template only applies to puzzle mode")

    try:
        if args.mode == "templates":
            payload = run_templates(args)
        else:
            payload = run_puzzle(args, parser)
    except KakuroError as exc:
        LOGGER.error("%s", exc)
        sys.exit(1)

    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    elif not args.pretty:
        print(output_text)


if __name__ == "__main__":  # pragma: no cover
    main()
