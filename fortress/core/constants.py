"""Shared constants and enumerations for the fortress sudoku engine."""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class Attribute(str, Enum):
    """Per-cell decision variables."""

    NUMBER = "NUMBER"
    SHADING = "SHADING"


class LineKind(str, Enum):
    """Line families sharing the Latin-square constraint."""

    ROW = "ROW"
    COLUMN = "COLUMN"
    BOX = "BOX"


class BranchKind(str, Enum):
    """Candidate families considered at a search node, in tie precedence order."""

    NUMBER = "NUMBER"
    COORDINATE = "COORDINATE"
    SHADING = "SHADING"


class SolveStatus(str, Enum):
    """Outcome tag of a search run."""

    COMPLETE = "COMPLETE"
    BUDGET_EXCEEDED = "BUDGET_EXCEEDED"


BRANCH_PRECEDENCE: Tuple[BranchKind, ...] = (
    BranchKind.NUMBER,
    BranchKind.COORDINATE,
    BranchKind.SHADING,
)

# Natural trial order for shadings: shaded before unshaded.
SHADING_VALUES: Tuple[bool, ...] = (True, False)
