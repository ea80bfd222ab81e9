"""CLI entrypoint for the fortress sudoku generator."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from fortress.core.exceptions import FortressError, InvariantViolationError
from fortress.engine.generator import GeneratorConfig, PuzzleGenerator
from fortress.utils.logger import configure_logging, get_logger
from fortress.utils.pretty import print_puzzle_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate uniquely solvable fortress sudoku puzzles",
    )
    parser.add_argument("--size", type=int, default=6, help="Grid side length")
    parser.add_argument("--box-width", type=int, default=3, help="Box width in cells")
    parser.add_argument("--box-height", type=int, default=2, help="Box height in cells")
    parser.add_argument("--circles", type=int, default=0, help="Number of circled cells to place")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--retries", type=int, default=3, help="Generation attempts before giving up")
    parser.add_argument(
        "--solve-step-budget",
        type=int,
        default=20_000,
        help="Search steps allowed when filling the empty grid",
    )
    parser.add_argument(
        "--reduce-step-budget",
        type=int,
        default=None,
        help="Search steps allowed per clue check during reduction (default: unbounded)",
    )
    parser.add_argument(
        "--max-rounds",
        type=int,
        default=None,
        help="Maximum number of reduction rounds (default: until minimal)",
    )
    parser.add_argument(
        "--numbers-only",
        action="store_true",
        help="Plain Latin-square puzzle without shadings",
    )
    parser.add_argument(
        "--cross-check",
        action="store_true",
        help="Confirm uniqueness with OR-Tools CP-SAT (grids without circles only)",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument("--pretty", action="store_true", help="Print the puzzle and solution grids")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colours in --pretty output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.numbers_only and args.circles:
        parser.error("--numbers-only cannot be combined with --circles")
    if args.cross_check and args.circles:
        parser.error("--cross-check does not support circles")

    config = GeneratorConfig(
        size=args.size,
        box_width=args.box_width,
        box_height=args.box_height,
        circle_count=args.circles,
        seed=args.seed,
        retry_limit=args.retries,
        solve_step_budget=args.solve_step_budget,
        reduce_max_rounds=args.max_rounds,
        reduce_step_budget=args.reduce_step_budget,
        branch_shadings=not args.numbers_only,
        cross_check=args.cross_check,
    )

    try:
        result = PuzzleGenerator(config).generate()
    except InvariantViolationError as exc:
        get_logger().critical("NON UNIQUE: %s", exc)
        return 2
    except FortressError as exc:
        get_logger().error("%s", exc)
        return 1

    if args.pretty:
        print_puzzle_stats(result, color=not args.no_color, stream=sys.stderr)

    payload: Dict[str, Any] = {
        "puzzle": result.puzzle.to_jsonable(),
        "solution": result.solution.to_jsonable(),
        "removed_clues": [
            {"index": clue.index, "attribute": clue.attribute.value} for clue in result.report.removed
        ],
        "rounds": result.report.rounds,
        "seed": result.seed,
        "elapsed_seconds": round(result.elapsed_seconds, 3),
        "validation": result.validation_messages,
    }

    output_text = json.dumps(payload, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
