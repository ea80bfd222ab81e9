"""Puzzle generation orchestration.

Three-phase approach:
  1. Fill: solve an empty grid (with randomly placed circles) using randomized
     tie-breaking to obtain a full assignment.
  2. Reduce: strip clues from a copy of the solution while it stays unique.
  3. Verify: re-solve the reduced puzzle with ``limit=2`` (and optionally
     CP-SAT) and validate the solution.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import List, Optional

from ..core.exceptions import FortressError, GenerationError, InvariantViolationError
from ..utils.logger import get_logger
from .grid import FortressGrid
from .reducer import ReduceOptions, ReduceReport, reduce
from .solver import SolveOptions, solve
from .validator import GridValidator


LOGGER = get_logger(__name__)


@dataclass
class GeneratorConfig:
    size: int = 6
    box_width: int = 3
    box_height: int = 2
    circle_count: int = 0
    seed: Optional[int] = None
    retry_limit: int = 3
    solve_step_budget: Optional[int] = 20_000
    reduce_max_rounds: Optional[int] = None
    reduce_step_budget: Optional[int] = None
    verify_step_budget: Optional[int] = None
    branch_numbers: bool = True
    branch_shadings: bool = True
    cross_check: bool = False

    def to_solve_options(self, seed_override: Optional[int] = None) -> SolveOptions:
        return SolveOptions(
            limit=1,
            randomize=True,
            branch_numbers=self.branch_numbers,
            branch_shadings=self.branch_shadings,
            step_budget=self.solve_step_budget,
            seed=seed_override if seed_override is not None else self.seed,
        )

    def to_reduce_options(self) -> ReduceOptions:
        return ReduceOptions(
            max_rounds=self.reduce_max_rounds,
            branch_numbers=self.branch_numbers,
            branch_shadings=self.branch_shadings,
            step_budget=self.reduce_step_budget,
        )

    def to_verify_options(self) -> SolveOptions:
        return SolveOptions(
            limit=2,
            branch_numbers=self.branch_numbers,
            branch_shadings=self.branch_shadings,
            step_budget=self.verify_step_budget,
        )


@dataclass
class PuzzleResult:
    puzzle: FortressGrid
    solution: FortressGrid
    report: ReduceReport
    seed: Optional[int] = None
    validation_messages: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0


class PuzzleGenerator:
    """High-level orchestrator: randomized fill, clue reduction, uniqueness check."""

    def __init__(self, config: GeneratorConfig, validator: Optional[GridValidator] = None) -> None:
        if config.circle_count > config.size * config.size:
            raise GenerationError(
                f"Cannot place {config.circle_count} circles on a {config.size}x{config.size} grid"
            )
        self.config = config
        self.rng = random.Random(config.seed)
        self.validator = validator or GridValidator()

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def generate(self) -> PuzzleResult:
        for attempt in range(1, self.config.retry_limit + 1):
            LOGGER.info("Generation attempt %s/%s", attempt, self.config.retry_limit)
            started = time.perf_counter()
            try:
                solution = self._fill(self._empty_grid())
                puzzle = solution.clone()
                report = reduce(puzzle, self.config.to_reduce_options(), self.rng)
                self._verify(puzzle, solution)
                validation = self.validator.validate(
                    solution,
                    require_numbers=self.config.branch_numbers,
                    require_shadings=self.config.branch_shadings,
                )
                if not validation.ok:
                    raise InvariantViolationError(f"Generated solution is invalid: {validation.messages}")
            except InvariantViolationError:
                raise
            except FortressError as exc:
                LOGGER.warning("Generation attempt failed: %s", exc)
                continue
            elapsed = time.perf_counter() - started
            LOGGER.info(
                "Puzzle generated with %d clue(s) in %.2fs",
                report.remaining_clues,
                elapsed,
            )
            return PuzzleResult(
                puzzle=puzzle,
                solution=solution,
                report=report,
                seed=self.config.seed,
                validation_messages=validation.messages,
                elapsed_seconds=elapsed,
            )
        raise GenerationError("Unable to generate puzzle after retries")

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------
    def _empty_grid(self) -> FortressGrid:
        cell_count = self.config.size * self.config.size
        circled = set(self.rng.sample(range(cell_count), self.config.circle_count))
        LOGGER.debug("Placing circles at %s", sorted(circled))
        return FortressGrid(
            self.config.size,
            self.config.box_width,
            self.config.box_height,
            circles=[index in circled for index in range(cell_count)],
        )

    def _fill(self, grid: FortressGrid) -> FortressGrid:
        seed = self.rng.randint(0, 1_000_000)
        result = solve(grid, self.config.to_solve_options(seed_override=seed))
        if not result.solutions:
            reason = "budget exceeded" if result.incomplete else "no valid assignment"
            raise GenerationError(f"Could not fill grid ({reason}, {result.steps} steps)")
        LOGGER.info("Filled grid in %d search steps", result.steps)
        return result.solutions[0]

    def _verify(self, puzzle: FortressGrid, solution: FortressGrid) -> None:
        result = solve(puzzle, self.config.to_verify_options())
        if result.count > 1:
            raise InvariantViolationError(
                f"Reduced puzzle has {result.count} solutions, expected exactly 1"
            )
        if result.incomplete:
            raise GenerationError("Uniqueness verification exceeded its step budget")
        if result.count != 1:
            raise InvariantViolationError(
                f"Reduced puzzle has {result.count} solution(s), expected exactly 1"
            )
        if result.solutions[0] != solution:
            raise InvariantViolationError("Reduced puzzle solves to a different grid")
        if self.config.cross_check and not any(puzzle.circles):
            from .cpsat import count_solutions_cpsat

            independent = count_solutions_cpsat(
                puzzle,
                limit=2,
                branch_numbers=self.config.branch_numbers,
                branch_shadings=self.config.branch_shadings,
            )
            if independent.exhaustive and independent.count != 1:
                raise InvariantViolationError(
                    f"CP-SAT found {independent.count} solution(s) for the reduced puzzle"
                )
