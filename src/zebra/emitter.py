"""Append-only clause stream handed to the SAT backend."""

from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, List, Optional

from pysat.formula import CNF

from .allocator import LiteralAllocator
from .errors import ConfigurationError

ClauseSink = Callable[[List[int]], None]


class ClauseEmitter:
    """
    Collects clauses into a `pysat.formula.CNF` and counts them.

    `emit` takes a whole clause; `emit_literal` builds one literal at a time and
    closes the clause on 0, mirroring the solver-side `add(lit)` protocol.
    Clause and variable counts are diagnostics only.
    """

    def __init__(self, allocator: LiteralAllocator, sink: Optional[ClauseSink] = None):
        self.allocator = allocator
        self.sink = sink
        self.cnf = CNF()
        self.num_clauses = 0
        self.guard: Optional[int] = None
        self._pending: List[int] = []

    @property
    def num_vars(self) -> int:
        return self.allocator.count

    @property
    def clauses(self) -> List[List[int]]:
        return self.cnf.clauses

    @property
    def pending(self) -> bool:
        """True while an incremental clause is open (no terminating 0 yet)."""
        return bool(self._pending)

    def emit(self, literals: Iterable[int]) -> None:
        clause = [int(lit) for lit in literals]
        for lit in clause:
            self._check_literal(lit)
        if not clause:
            raise ConfigurationError("Refusing to emit an empty clause")
        self._commit(clause)

    def emit_literal(self, lit: int) -> None:
        lit = int(lit)
        if lit == 0:
            if not self._pending:
                raise ConfigurationError("Clause terminator with no pending literals")
            clause, self._pending = self._pending, []
            self._commit(clause)
            return
        self._check_literal(lit)
        self._pending.append(lit)

    @contextmanager
    def guarded(self, selector: int) -> Iterator[None]:
        """Append -selector to every clause emitted inside the block."""
        if self.guard is not None:
            raise ConfigurationError("Clause guards cannot be nested")
        self._check_literal(selector)
        self.guard = selector
        try:
            yield
        finally:
            self.guard = None

    def _check_literal(self, lit: int) -> None:
        if lit == 0:
            raise ConfigurationError("Literal 0 is reserved as the clause terminator")
        if abs(lit) > self.allocator.count:
            raise ConfigurationError(
                f"Literal {lit} refers to an unallocated variable (highest id {self.allocator.count})"
            )

    def _commit(self, clause: List[int]) -> None:
        if self.guard is not None:
            clause = clause + [-self.guard]
        self.cnf.append(clause)
        self.num_clauses += 1
        if self.sink is not None:
            self.sink(clause)
