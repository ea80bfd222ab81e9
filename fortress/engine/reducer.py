"""Clue minimization that keeps a puzzle uniquely solvable.

The search engine is used as a feasibility oracle: a clue may only be removed
once every alternative value at its cell is proven to have no solution. A
budget-exceeded search never licenses a removal.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from ..core.constants import Attribute
from ..core.models import Clue
from ..utils.logger import get_logger
from .checker import ConstraintChecker
from .domains import possibilities
from .grid import FortressGrid
from .solver import SolveOptions, solve


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ReduceOptions:
    """Switches for :func:`reduce`. ``branch_*`` selects which clue kinds may be removed."""

    max_rounds: Optional[int] = None
    branch_numbers: bool = True
    branch_shadings: bool = True
    step_budget: Optional[int] = None

    def attributes(self) -> Tuple[Attribute, ...]:
        selected = []
        if self.branch_numbers:
            selected.append(Attribute.NUMBER)
        if self.branch_shadings:
            selected.append(Attribute.SHADING)
        return tuple(selected)

    def oracle_options(self) -> SolveOptions:
        return SolveOptions(
            limit=1,
            branch_numbers=self.branch_numbers,
            branch_shadings=self.branch_shadings,
            step_budget=self.step_budget,
        )


@dataclass
class ReduceReport:
    removed: List[Clue] = field(default_factory=list)
    required: Set[Clue] = field(default_factory=set)
    rounds: int = 0
    remaining_clues: int = 0


def is_needed(
    grid: FortressGrid,
    index: int,
    step_budget: Optional[int] = None,
    attribute: Attribute = Attribute.NUMBER,
    options: Optional[ReduceOptions] = None,
    rng: Optional[random.Random] = None,
) -> bool:
    """Return whether the clue at ``index`` is required for a unique solution.

    Assumes the grid currently has exactly one solution. The grid is restored
    before returning.
    """

    options = options or ReduceOptions(step_budget=step_budget)
    if step_budget is None:
        step_budget = options.step_budget
    oracle = options.oracle_options().with_changes(step_budget=step_budget)
    checker = ConstraintChecker(grid)
    current = grid.get(index, attribute)

    if len(possibilities(checker, index, attribute, limit=2)) == 1:
        return False

    for alternative in possibilities(checker, index, attribute):
        if alternative == current:
            continue
        with grid.trial(index, attribute, alternative):
            result = solve(grid, oracle, rng)
        if result.solutions:
            LOGGER.debug("Clue %s@%d needed: %r also solves", attribute.value, index, alternative)
            return True
        if result.incomplete:
            LOGGER.debug("Clue %s@%d kept: search for %r exceeded budget", attribute.value, index, alternative)
            return True
    return False


class Reducer:
    """Removes clues one at a time, cheapest-to-verify first."""

    def __init__(
        self,
        grid: FortressGrid,
        options: Optional[ReduceOptions] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.grid = grid
        self.options = options or ReduceOptions()
        self.rng = rng
        self.checker = ConstraintChecker(grid)
        self.required: Set[Clue] = set()

    def reduce(self) -> ReduceReport:
        report = ReduceReport()
        attributes = self.options.attributes()
        LOGGER.info(
            "Reducing %d clue(s) (max_rounds=%s, step_budget=%s)",
            len(self.grid.clues(attributes)),
            self.options.max_rounds,
            self.options.step_budget,
        )
        while self.options.max_rounds is None or report.rounds < self.options.max_rounds:
            report.rounds += 1
            removed = self._reduce_round(attributes)
            if removed is None:
                break
            report.removed.append(removed)

        report.required = set(self.required)
        report.remaining_clues = len(self.grid.clues())
        LOGGER.info(
            "Reduction finished after %d round(s): removed %d, %d clue(s) remain",
            report.rounds,
            len(report.removed),
            report.remaining_clues,
        )
        return report

    def _reduce_round(self, attributes: Tuple[Attribute, ...]) -> Optional[Clue]:
        scored = []
        for clue in self.grid.clues(attributes):
            if clue in self.required:
                continue
            score = len(possibilities(self.checker, clue.index, clue.attribute))
            scored.append((score, clue.index, attributes.index(clue.attribute), clue))
        scored.sort(key=lambda item: item[:3])

        for _, _, _, clue in scored:
            if is_needed(
                self.grid,
                clue.index,
                self.options.step_budget,
                attribute=clue.attribute,
                options=self.options,
                rng=self.rng,
            ):
                self.required.add(clue)
                continue
            LOGGER.debug("Removing %s clue at cell %d", clue.attribute.value, clue.index)
            self.grid.set(clue.index, clue.attribute, None)
            return clue
        return None


def reduce(
    grid: FortressGrid,
    options: Optional[ReduceOptions] = None,
    rng: Optional[random.Random] = None,
) -> ReduceReport:
    """Minimize the clues of ``grid`` in place, preserving its unique solution."""

    return Reducer(grid, options, rng).reduce()
