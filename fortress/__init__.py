"""Fortress sudoku engine: Latin-square placement with shading and circle rules.

This package exposes the public API surface via:

- ``fortress.engine.grid.FortressGrid``: the puzzle grid and its geometry.
- ``fortress.engine.solver.solve``: budgeted backtracking search.
- ``fortress.engine.reducer.reduce``: clue minimization preserving uniqueness.
- ``fortress.engine.generator.PuzzleGenerator``: end-to-end puzzle generation.
"""

from .engine.generator import GeneratorConfig, PuzzleGenerator, PuzzleResult
from .engine.grid import FortressGrid
from .engine.reducer import ReduceOptions, ReduceReport, is_needed, reduce
from .engine.solver import SolveOptions, SolveResult, solve

__all__ = [
    "FortressGrid",
    "GeneratorConfig",
    "PuzzleGenerator",
    "PuzzleResult",
    "ReduceOptions",
    "ReduceReport",
    "SolveOptions",
    "SolveResult",
    "is_needed",
    "reduce",
    "solve",
]

__version__ = "0.1.0"
