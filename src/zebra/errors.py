"""Exception hierarchy for puzzle encoding, solving, and decoding."""

from typing import List, Optional


class ZebraError(Exception):
    """Base class for every error raised by the encoder pipeline."""


class ConfigurationError(ZebraError, ValueError):
    """Caller misuse: bad positions, unknown values, malformed puzzles."""


class SolverError(ZebraError):
    """The SAT backend did not produce a usable model."""


class UnsatisfiableError(SolverError):
    """
    The clause set has no model.

    For a well-posed puzzle this means the encoded clues contradict each other.
    When clue tracking is enabled, `core` lists the descriptions of the clues
    the solver blamed for the conflict.
    """

    def __init__(self, message: str, core: Optional[List[str]] = None):
        super().__init__(message)
        self.core: List[str] = list(core or [])


class SolverUnknownError(SolverError):
    """The solver gave up (e.g. conflict budget exhausted)."""


class DecodeInconsistencyError(ZebraError):
    """A reported model breaks the one-value-per-position invariants."""
