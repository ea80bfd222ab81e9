"""Possibility enumeration for cells and for (line, value) pairs.

Every enumerator trial-assigns candidates through ``FortressGrid.trial`` so
the grid is left exactly as it was found.
"""

from __future__ import annotations

from typing import List, Optional

from ..core.constants import SHADING_VALUES, Attribute
from ..core.models import Line
from .checker import ConstraintChecker


def _reached(found: List, limit: Optional[int]) -> bool:
    return limit is not None and len(found) >= limit


def number_possibilities(checker: ConstraintChecker, index: int, limit: Optional[int] = None) -> List[int]:
    """Numbers 1..N that ``index`` could hold, in ascending order."""

    grid = checker.grid
    possibilities: List[int] = []
    if _reached(possibilities, limit):
        return possibilities
    for number in range(1, grid.size + 1):
        with grid.trial(index, Attribute.NUMBER, number):
            if checker.check(index):
                possibilities.append(number)
        if _reached(possibilities, limit):
            break
    return possibilities


def shading_possibilities(
    checker: ConstraintChecker,
    index: int,
    limit: Optional[int] = None,
    lookahead: bool = False,
) -> List[bool]:
    """Shadings ``index`` could take, shaded first.

    With ``lookahead`` a shading that passes the checker is also dropped when
    it leaves some affected cell without any number: the cell itself when its
    number is unset, otherwise each neighbour whose number is unset.
    """

    grid = checker.grid
    possibilities: List[bool] = []
    if _reached(possibilities, limit):
        return possibilities
    for shading in SHADING_VALUES:
        with grid.trial(index, Attribute.SHADING, shading):
            if checker.check(index) and (not lookahead or _numbers_remain(checker, index)):
                possibilities.append(shading)
        if _reached(possibilities, limit):
            break
    return possibilities


def _numbers_remain(checker: ConstraintChecker, index: int) -> bool:
    grid = checker.grid
    if grid.numbers[index] is None:
        return bool(number_possibilities(checker, index, limit=1))
    return all(
        number_possibilities(checker, neighbour, limit=1)
        for neighbour in grid.neighbours(index)
        if grid.numbers[neighbour] is None
    )


def possibilities(checker: ConstraintChecker, index: int, attribute: Attribute, limit: Optional[int] = None) -> List:
    """Dispatch to the number or shading enumerator (without look-ahead)."""

    if attribute == Attribute.NUMBER:
        return number_possibilities(checker, index, limit)
    return shading_possibilities(checker, index, limit)


def coordinate_possibilities(
    checker: ConstraintChecker,
    line: Line,
    value: int,
    limit: Optional[int] = None,
) -> List[int]:
    """Cells on ``line`` that could hold ``value``.

    If ``value`` is already placed on the line, that cell is returned alone.
    """

    grid = checker.grid
    cells = grid.line_cells(line)
    for cell in cells:
        if grid.numbers[cell] == value:
            return [cell]

    positions: List[int] = []
    if _reached(positions, limit):
        return positions
    for cell in cells:
        if grid.numbers[cell] is not None:
            continue
        with grid.trial(cell, Attribute.NUMBER, value):
            if checker.check(cell):
                positions.append(cell)
        if _reached(positions, limit):
            break
    return positions
