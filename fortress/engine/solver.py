"""Budgeted depth-first search over numbers and shadings.

Each search node scans every cell once, pruning on any local inconsistency,
and picks the decision with the fewest options (MRV). Ties inside a family are
broken by :class:`ReservoirSelector`; across families the precedence is
number, then coordinate, then shading. When no cell is forced, a
(line, value) pass looks for a value with fewer candidate cells than the best
cell has candidate values.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from ..core.constants import BRANCH_PRECEDENCE, BranchKind, SolveStatus
from ..core.models import Branch
from ..utils.logger import get_logger
from .checker import ConstraintChecker
from .domains import coordinate_possibilities, number_possibilities, shading_possibilities
from .grid import FortressGrid
from .selector import ReservoirSelector


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class SolveOptions:
    """Per-call search switches. ``None`` budgets and limits are unbounded.

    ``explore_any`` stops preferring the tightest cell: every score is capped
    at 1, or at 2 with ``chase_one`` so that forced cells still go first.
    ``shading_lookahead`` drops shadings that leave a nearby cell without any
    number.
    """

    limit: Optional[int] = None
    randomize: bool = False
    branch_numbers: bool = True
    branch_shadings: bool = True
    depth_budget: Optional[int] = None
    step_budget: Optional[int] = None
    seed: Optional[int] = None
    explore_any: bool = False
    chase_one: bool = True
    shading_lookahead: bool = False

    def with_changes(self, **changes) -> "SolveOptions":
        return replace(self, **changes)


@dataclass
class SolveResult:
    solutions: List[FortressGrid] = field(default_factory=list)
    status: SolveStatus = SolveStatus.COMPLETE
    steps: int = 0

    @property
    def incomplete(self) -> bool:
        """True when the budget ran out before the solution list was final."""
        return self.status == SolveStatus.BUDGET_EXCEEDED

    @property
    def count(self) -> int:
        return len(self.solutions)


class _Search:
    def __init__(self, grid: FortressGrid, options: SolveOptions, rng: random.Random) -> None:
        self.grid = grid
        self.checker = ConstraintChecker(grid)
        self.options = options
        self.rng = rng
        self.limit = math.inf if options.limit is None else options.limit
        self.solutions: List[FortressGrid] = []
        self.budget_exceeded = False

    def run(self) -> SolveResult:
        depth_budget = math.inf if self.options.depth_budget is None else self.options.depth_budget
        step_budget = math.inf if self.options.step_budget is None else self.options.step_budget
        steps = self._search(depth_budget, step_budget)
        status = SolveStatus.BUDGET_EXCEEDED if self.budget_exceeded else SolveStatus.COMPLETE
        return SolveResult(solutions=self.solutions, status=status, steps=steps)

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------
    def _search(self, depth_budget: float, step_budget: float) -> int:
        if len(self.solutions) >= self.limit:
            return 0
        if depth_budget <= 0 or step_budget < 1:
            self.budget_exceeded = True
            return 0

        steps = 1
        consistent, branch = self._scan()
        if not consistent:
            return steps
        if branch is None:
            self.solutions.append(self.grid.clone())
            return steps

        if self.options.randomize:
            self.rng.shuffle(branch.options)
        for index, attribute, value in branch.moves():
            with self.grid.trial(index, attribute, value):
                steps += self._search(depth_budget - 1, step_budget - steps)
            if len(self.solutions) >= self.limit:
                break
        return steps

    # ------------------------------------------------------------------
    # Candidate selection
    # ------------------------------------------------------------------
    def _scan(self) -> Tuple[bool, Optional[Branch]]:
        """Return ``(consistent, branch)``; ``branch`` is None once nothing is left to decide."""

        grid = self.grid
        checker = self.checker
        best_number: ReservoirSelector[Branch] = ReservoirSelector(self.options.randomize, self.rng)
        best_shading: ReservoirSelector[Branch] = ReservoirSelector(self.options.randomize, self.rng)

        for index in range(grid.cell_count):
            if not checker.check(index):
                return False, None

            if self.options.branch_numbers and grid.numbers[index] is None:
                options = number_possibilities(checker, index, self._bound(best_number))
                if not options:
                    return False, None
                score = self._capped(len(options))
                best_number.consider(Branch(BranchKind.NUMBER, score, options, index=index), score)

            if self.options.branch_shadings and grid.shadings[index] is None:
                options = shading_possibilities(
                    checker,
                    index,
                    self._bound(best_shading),
                    lookahead=self.options.shading_lookahead,
                )
                if not options:
                    return False, None
                if self.options.explore_any:
                    score = self._capped(len(options))
                elif self._is_interesting(index):
                    score = len(options)
                else:
                    score = (len(options) - 1) * grid.size + 1
                best_shading.consider(Branch(BranchKind.SHADING, score, options, index=index), score)

        candidates = [selector.value for selector in (best_number, best_shading) if not selector.empty]
        if not candidates:
            return True, None

        best_score = min(candidate.score for candidate in candidates)
        if self.options.branch_numbers and best_score > 1:
            coordinate = self._scan_coordinates(int(best_score))
            if coordinate is not None:
                candidates.append(coordinate)

        chosen = min(
            candidates,
            key=lambda candidate: (candidate.score, BRANCH_PRECEDENCE.index(candidate.kind)),
        )
        return True, chosen

    def _scan_coordinates(self, threshold: int) -> Optional[Branch]:
        grid = self.grid
        for line in grid.lines():
            for value in range(1, grid.size + 1):
                positions = coordinate_possibilities(self.checker, line, value, threshold)
                if len(positions) == 1 and grid.numbers[positions[0]] == value:
                    continue
                if len(positions) < threshold:
                    return Branch(BranchKind.COORDINATE, len(positions), positions, value=value)
        return None

    def _bound(self, selector: ReservoirSelector[Branch]) -> Optional[int]:
        # Capped scores can tie with a truncated list, so enumerate in full.
        if selector.empty or self.options.explore_any:
            return None
        return len(selector.value.options) + 1

    def _capped(self, count: int) -> int:
        if not self.options.explore_any:
            return count
        return min(2 if self.options.chase_one else 1, count)

    def _is_interesting(self, index: int) -> bool:
        grid = self.grid
        if grid.numbers[index] is not None:
            return True
        return any(grid.circles[neighbour] for neighbour in grid.neighbours(index))


def solve(
    grid: FortressGrid,
    options: Optional[SolveOptions] = None,
    rng: Optional[random.Random] = None,
) -> SolveResult:
    """Search ``grid`` for up to ``options.limit`` solutions.

    The grid is mutated during the search and restored before returning.
    A ``BUDGET_EXCEEDED`` result means the returned list is not authoritative;
    a ``COMPLETE`` result with no solutions means the grid is unsatisfiable.
    """

    options = options or SolveOptions()
    rng = rng or random.Random(options.seed)
    result = _Search(grid, options, rng).run()
    LOGGER.debug(
        "Search finished: %d solution(s), status=%s, steps=%d",
        result.count,
        result.status.value,
        result.steps,
    )
    return result
