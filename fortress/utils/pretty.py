"""Pretty-print helpers for fortress sudoku grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine.generator import PuzzleResult
    from ..engine.grid import FortressGrid


SHADED = "\u001b[44m"
UNSHADED = "\u001b[41m"
RESET = "\u001b[0m"


def cell_symbol(grid: FortressGrid, index: int, color: bool = True) -> str:
    number = grid.numbers[index]
    text = str(number) if number is not None else "-"
    text = f"({text})" if grid.circles[index] else f" {text} "
    shading = grid.shadings[index]
    if not color or shading is None:
        return text
    return f"{SHADED if shading else UNSHADED}{text}{RESET}"


def format_grid(grid: FortressGrid, color: bool = True) -> str:
    width = max(1, len(str(grid.size))) + 2
    lines = []
    for row in range(grid.size):
        cells = []
        for col in range(grid.size):
            symbol = cell_symbol(grid, row * grid.size + col, color)
            # Pad on the visible text so ANSI codes do not skew alignment.
            visible = cell_symbol(grid, row * grid.size + col, False)
            cells.append(symbol + " " * (width - len(visible)))
        lines.append("".join(cells).rstrip())
    return "\n".join(lines)


def pretty_print_grid(grid: FortressGrid, *, label: str | None = None, color: bool = True, stream=None) -> None:
    """Print the grid row by row, colouring shaded cells blue and unshaded cells red."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid, color), file=stream)


def print_puzzle_stats(result: PuzzleResult, *, color: bool = True, stream=None) -> None:
    """Print puzzle, solution and reduction stats for a generated puzzle."""

    stream = stream or sys.stdout
    puzzle = result.puzzle
    pretty_print_grid(puzzle, label="--- Puzzle ---", color=color, stream=stream)
    print(file=stream)
    pretty_print_grid(result.solution, label="--- Solution ---", color=color, stream=stream)

    number_clues = sum(1 for number in puzzle.numbers if number is not None)
    shading_clues = sum(1 for shading in puzzle.shadings if shading is not None)
    print(file=stream)
    print("--- Clues ---", file=stream)
    print(f"  Size:          {puzzle.size} x {puzzle.size} ({puzzle.cell_count} cells)", file=stream)
    print(f"  Boxes:         {puzzle.box_width} x {puzzle.box_height}", file=stream)
    print(f"  Circles:       {sum(puzzle.circles)}", file=stream)
    print(f"  Number clues:  {number_clues}", file=stream)
    print(f"  Shading clues: {shading_clues}", file=stream)
    print(f"  Removed:       {len(result.report.removed)} in {result.report.rounds} round(s)", file=stream)
    print(f"  Elapsed:       {result.elapsed_seconds:.2f}s", file=stream)

    if result.validation_messages:
        print(file=stream)
        print("--- Validation ---", file=stream)
        for msg in result.validation_messages:
            print(f"  {msg}", file=stream)

    if result.seed is not None:
        print(file=stream)
        print(f"Seed: {result.seed}", file=stream)
