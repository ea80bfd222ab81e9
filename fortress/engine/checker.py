"""Per-cell constraint checking for fortress sudoku grids."""

from __future__ import annotations

from collections import deque
from typing import Callable, List, Optional

from .grid import FortressGrid


ShadingPredicate = Callable[[Optional[bool]], bool]


def _is_unshaded(shading: Optional[bool]) -> bool:
    return shading is False


def _may_be_shaded(shading: Optional[bool]) -> bool:
    return shading is not False


class ConstraintChecker:
    """Validates every constraint that can involve a single cell.

    A passing check means the cell is locally consistent with its current
    surroundings; it is not a proof that the grid can be completed.
    """

    def __init__(self, grid: FortressGrid) -> None:
        self.grid = grid

    def check(self, index: int) -> bool:
        return (
            self.latin_ok(index)
            and self.shading_order_ok(index)
            and self.circle_ok(index)
            and self.fortress_ok(index)
            and self.downstream_ok(index)
        )

    # ------------------------------------------------------------------
    # Individual rules
    # ------------------------------------------------------------------
    def latin_ok(self, index: int) -> bool:
        numbers = self.grid.numbers
        number = numbers[index]
        if number is None:
            return True
        return all(numbers[peer] != number for peer in self.grid.peers(index))

    def shading_order_ok(self, index: int) -> bool:
        """Shaded cells must exceed their unshaded neighbours, and vice versa."""

        grid = self.grid
        number = grid.numbers[index]
        shading = grid.shadings[index]
        if number is None or shading is None:
            return True
        for neighbour in grid.neighbours(index):
            neighbour_number = grid.numbers[neighbour]
            neighbour_shading = grid.shadings[neighbour]
            if neighbour_number is None or neighbour_shading is None or neighbour_shading == shading:
                continue
            if (number > neighbour_number) != shading:
                return False
        return True

    def circle_ok(self, index: int) -> bool:
        return not (self.grid.circles[index] and self.grid.shadings[index] is True)

    def fortress_ok(self, index: int) -> bool:
        """A circled number must lie between the guaranteed and the possible reach."""

        grid = self.grid
        number = grid.numbers[index]
        if not grid.circles[index] or number is None:
            return True
        if self.reach(index, _is_unshaded) > number:
            return False
        return number <= self.reach(index, _may_be_shaded)

    def downstream_ok(self, index: int) -> bool:
        """Re-check the circles that a shaded path from ``index`` leads to."""

        grid = self.grid
        if grid.circles[index] or grid.shadings[index] is None:
            return True
        return all(self.fortress_ok(circle) for circle in self.circles_on_shaded_path(index))

    # ------------------------------------------------------------------
    # Flood fills
    # ------------------------------------------------------------------
    def reach(self, start: int, predicate: ShadingPredicate) -> int:
        """Size of the region connected to ``start`` through cells matching ``predicate``.

        ``start`` itself is not counted.
        """

        shadings = self.grid.shadings
        visited = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbour in self.grid.neighbours(current):
                if neighbour in visited or not predicate(shadings[neighbour]):
                    continue
                visited.add(neighbour)
                queue.append(neighbour)
        return len(visited) - 1

    def circles_on_shaded_path(self, start: int) -> List[int]:
        grid = self.grid
        visited = {start}
        queue = deque([start])
        found: List[int] = []
        while queue:
            current = queue.popleft()
            for neighbour in grid.neighbours(current):
                if neighbour in visited:
                    continue
                if grid.circles[neighbour]:
                    visited.add(neighbour)
                    found.append(neighbour)
                elif grid.shadings[neighbour] is True:
                    visited.add(neighbour)
                    queue.append(neighbour)
        return found
