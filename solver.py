"""Top-level solve interface.

Expose `solve_puzzle(puzzle)` that accepts either a pre-built Puzzle object or a
raw puzzle dictionary compatible with `src.zebra.parser.parse_puzzle`.
"""

from typing import Any, Optional

from src.zebra import solver_core
from src.zebra.backend import SatBackend
from src.zebra.model import Puzzle
from src.zebra.parser import parse_puzzle
from src.zebra.solver_core import Solution


def solve_puzzle(puzzle: Any, backend: Optional[SatBackend] = None, explain_unsat: bool = False) -> Solution:
    """
    Solve a puzzle and return its decoded grid.
    Accepts:
      - Puzzle instances (used directly)
      - Raw puzzle dictionaries (parsed via `parse_puzzle`)
    """
    if isinstance(puzzle, Puzzle):
        parsed = puzzle
    elif isinstance(puzzle, dict):
        parsed = parse_puzzle(puzzle)
    else:
        raise TypeError("solve_puzzle expects a Puzzle instance or puzzle dictionary")

    return solver_core.solve(parsed, backend=backend, track_clues=explain_unsat)


__all__ = ["solve_puzzle"]
