"""Logic grid puzzles compiled to CNF, solved with PySAT, and decoded."""

from .model import Category, Clue, ClueKind, Puzzle, Value
from .solver_core import EncodingSession, Solution, count_solutions, solve
from .parser import parse_puzzle

__all__ = [
    "Category",
    "Clue",
    "ClueKind",
    "Puzzle",
    "Value",
    "EncodingSession",
    "Solution",
    "count_solutions",
    "solve",
    "parse_puzzle",
]
