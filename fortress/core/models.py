"""Data models supporting the fortress sudoku engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from .constants import Attribute, BranchKind, LineKind

CellValue = Union[int, bool]


@dataclass(frozen=True)
class Line:
    """A row, column or box of the grid."""

    kind: LineKind
    index: int


@dataclass(frozen=True)
class Clue:
    """A given attribute value at one cell."""

    index: int
    attribute: Attribute


@dataclass
class Branch:
    """A decision the search can branch on.

    Number and shading branches try each option at ``index``; a coordinate
    branch places ``value`` at each candidate cell listed in ``options``.
    """

    kind: BranchKind
    score: float
    options: List = field(default_factory=list)
    index: Optional[int] = None
    value: Optional[int] = None

    def moves(self) -> Iterator[Tuple[int, Attribute, CellValue]]:
        if self.kind == BranchKind.NUMBER:
            for number in self.options:
                yield self.index, Attribute.NUMBER, number
        elif self.kind == BranchKind.COORDINATE:
            for cell in self.options:
                yield cell, Attribute.NUMBER, self.value
        else:
            for shading in self.options:
                yield self.index, Attribute.SHADING, shading
