"""Grid representation and coordinate helpers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

from ..core.constants import Attribute, LineKind
from ..core.exceptions import InvalidConfigurationError
from ..core.models import CellValue, Clue, Line
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class FortressGrid:
    """Square grid holding numbers, shadings and fixed circle markers.

    ``numbers`` and ``shadings`` are the decision variables; ``None`` marks an
    unset cell. ``circles`` is fixed at construction and stored as a tuple.
    Boxes are numbered box-major by column band:
    ``row // box_height + (col // box_width) * box_width``.
    """

    def __init__(
        self,
        size: int,
        box_width: int,
        box_height: int,
        numbers: Optional[Sequence[Optional[int]]] = None,
        shadings: Optional[Sequence[Optional[bool]]] = None,
        circles: Optional[Sequence[bool]] = None,
    ) -> None:
        if size < 1 or box_width < 1 or box_height < 1:
            raise InvalidConfigurationError(
                f"Grid dimensions must be positive (size={size}, box={box_width}x{box_height})"
            )
        if box_width * box_height != size:
            raise InvalidConfigurationError(
                f"Box {box_width}x{box_height} does not partition a grid of size {size}"
            )
        self.size = size
        self.box_width = box_width
        self.box_height = box_height
        self.cell_count = size * size

        self.numbers: List[Optional[int]] = self._load_numbers(numbers or [])
        self.shadings: List[Optional[bool]] = self._load_shadings(shadings or [])
        self.circles: Tuple[bool, ...] = tuple(
            bool(self._entry(circles or [], index)) for index in range(self.cell_count)
        )

        self._rows = [index // size for index in range(self.cell_count)]
        self._cols = [index % size for index in range(self.cell_count)]
        self._boxes = [
            self._rows[index] // box_height + (self._cols[index] // box_width) * box_width
            for index in range(self.cell_count)
        ]
        self._neighbours = [tuple(self._compute_neighbours(index)) for index in range(self.cell_count)]
        self._peers = [tuple(self._compute_peers(index)) for index in range(self.cell_count)]
        self._line_cells = {line: tuple(self._compute_line_cells(line)) for line in self.lines()}
        LOGGER.debug("Built %sx%s grid with %sx%s boxes", size, size, box_width, box_height)

    # ------------------------------------------------------------------
    # Initialization helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _entry(values: Sequence, index: int):
        return values[index] if index < len(values) else None

    def _load_numbers(self, numbers: Sequence[Optional[int]]) -> List[Optional[int]]:
        loaded: List[Optional[int]] = []
        for index in range(self.cell_count):
            number = self._entry(numbers, index)
            if not number:
                loaded.append(None)
                continue
            if not 1 <= number <= self.size:
                raise InvalidConfigurationError(
                    f"Number {number} at cell {index} outside 1..{self.size}"
                )
            loaded.append(int(number))
        return loaded

    def _load_shadings(self, shadings: Sequence[Optional[bool]]) -> List[Optional[bool]]:
        loaded: List[Optional[bool]] = []
        for index in range(self.cell_count):
            shading = self._entry(shadings, index)
            if shading is not None and not isinstance(shading, bool):
                raise InvalidConfigurationError(
                    f"Shading {shading!r} at cell {index} must be True, False or None"
                )
            loaded.append(shading)
        return loaded

    def _compute_neighbours(self, index: int) -> Iterator[int]:
        for offset in (-1, 1, self.size, -self.size):
            neighbour = index + offset
            if neighbour < 0 or neighbour >= self.cell_count:
                continue
            if offset == -1 and index % self.size == 0:
                continue
            if offset == 1 and index % self.size == self.size - 1:
                continue
            yield neighbour

    def _compute_peers(self, index: int) -> Iterator[int]:
        row, col, box = self.coordinates(index)
        for other in range(self.cell_count):
            if other == index:
                continue
            if self._rows[other] == row or self._cols[other] == col or self._boxes[other] == box:
                yield other

    def _compute_line_cells(self, line: Line) -> Iterator[int]:
        if line.kind == LineKind.ROW:
            lookup = self._rows
        elif line.kind == LineKind.COLUMN:
            lookup = self._cols
        else:
            lookup = self._boxes
        return (index for index in range(self.cell_count) if lookup[index] == line.index)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def row(self, index: int) -> int:
        return self._rows[index]

    def col(self, index: int) -> int:
        return self._cols[index]

    def box(self, index: int) -> int:
        return self._boxes[index]

    def coordinates(self, index: int) -> Tuple[int, int, int]:
        return self._rows[index], self._cols[index], self._boxes[index]

    def neighbours(self, index: int) -> Tuple[int, ...]:
        return self._neighbours[index]

    def peers(self, index: int) -> Tuple[int, ...]:
        """Cells sharing a row, column or box with ``index``."""

        return self._peers[index]

    def lines(self) -> Iterator[Line]:
        for kind in (LineKind.ROW, LineKind.COLUMN, LineKind.BOX):
            for line_index in range(self.size):
                yield Line(kind, line_index)

    def line_cells(self, line: Line) -> Tuple[int, ...]:
        return self._line_cells[line]

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def get(self, index: int, attribute: Attribute) -> Optional[CellValue]:
        if attribute == Attribute.NUMBER:
            return self.numbers[index]
        return self.shadings[index]

    def set(self, index: int, attribute: Attribute, value: Optional[CellValue]) -> None:
        if attribute == Attribute.NUMBER:
            self.numbers[index] = value
        else:
            self.shadings[index] = value

    @contextmanager
    def trial(self, index: int, attribute: Attribute, value: Optional[CellValue]):
        """Assign ``value`` for the duration of the block, restoring the prior value on exit."""

        previous = self.get(index, attribute)
        self.set(index, attribute, value)
        try:
            yield self
        finally:
            self.set(index, attribute, previous)

    def clues(self, attributes: Sequence[Attribute] = (Attribute.NUMBER, Attribute.SHADING)) -> List[Clue]:
        return [
            Clue(index, attribute)
            for index in range(self.cell_count)
            for attribute in attributes
            if self.get(index, attribute) is not None
        ]

    def unset_count(self) -> int:
        return self.numbers.count(None) + self.shadings.count(None)

    def is_complete(self) -> bool:
        return self.unset_count() == 0

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def clone(self) -> "FortressGrid":
        copy = FortressGrid.__new__(FortressGrid)
        copy.__dict__.update(self.__dict__)
        copy.numbers = list(self.numbers)
        copy.shadings = list(self.shadings)
        return copy

    def fingerprint(self) -> int:
        """Positional hash of every number then every shading."""

        value = 0
        for number in self.numbers:
            value = value * (self.size + 1) + (number or 0)
        for shading in self.shadings:
            value = value * 3 + (0 if shading is None else 1 if shading else 2)
        return value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FortressGrid):
            return NotImplemented
        return (
            (self.size, self.box_width, self.box_height) == (other.size, other.box_width, other.box_height)
            and self.numbers == other.numbers
            and self.shadings == other.shadings
            and self.circles == other.circles
        )

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"FortressGrid(size={self.size}, box={self.box_width}x{self.box_height}, "
            f"unset={self.unset_count()})"
        )

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> dict:
        return {
            "size": self.size,
            "box_width": self.box_width,
            "box_height": self.box_height,
            "numbers": list(self.numbers),
            "shadings": list(self.shadings),
            "circles": list(self.circles),
        }
