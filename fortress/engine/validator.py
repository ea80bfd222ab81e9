"""Deterministic rule validation for finished fortress sudoku grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..core.exceptions import ValidationError
from .checker import ConstraintChecker
from .grid import FortressGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class GridValidator:
    """Runs deterministic validation over a fully assigned grid."""

    def validate(
        self,
        grid: FortressGrid,
        require_numbers: bool = True,
        require_shadings: bool = True,
    ) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_complete(grid, require_numbers, require_shadings)
            self._check_cells(grid)
        except ValidationError as exc:
            messages.append(str(exc))
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    def _check_complete(self, grid: FortressGrid, require_numbers: bool, require_shadings: bool) -> None:
        for index in range(grid.cell_count):
            if require_numbers and grid.numbers[index] is None:
                raise ValidationError(f"Missing number at {self._label(grid, index)}")
            if require_shadings and grid.shadings[index] is None:
                raise ValidationError(f"Missing shading at {self._label(grid, index)}")

    def _check_cells(self, grid: FortressGrid) -> None:
        checker = ConstraintChecker(grid)
        rules = (
            (checker.latin_ok, "Repeated number"),
            (checker.shading_order_ok, "Shading order violation"),
            (checker.circle_ok, "Shaded circle"),
            (checker.fortress_ok, "Fortress size violation"),
        )
        for index in range(grid.cell_count):
            for rule, message in rules:
                if not rule(index):
                    raise ValidationError(f"{message} at {self._label(grid, index)}")

    @staticmethod
    def _label(grid: FortressGrid, index: int) -> str:
        return f"({grid.row(index)},{grid.col(index)})"
