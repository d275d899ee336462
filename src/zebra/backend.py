"""PySAT adapter: the external solver the encoder hands its clauses to."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, Optional, Sequence, Set

from pysat.formula import CNF
from pysat.solvers import NoSuchSolverError, Solver

from src.utils.logging_utils import get_logger

from .config import DEFAULT_CONF_BUDGET, DEFAULT_SOLVER_NAME
from .errors import ConfigurationError, SolverError, SolverUnknownError

logger = get_logger("backend")


class SolveStatus(IntEnum):
    # SAT-competition exit codes.
    UNKNOWN = 0
    SATISFIABLE = 10
    UNSATISFIABLE = 20


@dataclass
class SolveResult:
    status: SolveStatus
    model: Optional[List[int]] = None
    core: List[int] = field(default_factory=list)
    _true: Set[int] = field(init=False, repr=False, default_factory=set)

    def __post_init__(self) -> None:
        self._true = {lit for lit in (self.model or []) if lit > 0}

    @property
    def satisfiable(self) -> bool:
        return self.status == SolveStatus.SATISFIABLE

    def value(self, lit: int) -> bool:
        """Truth value of a literal in the model; only valid for satisfiable results."""
        if not self.satisfiable:
            raise SolverError(f"No model available for a {self.status.name} result")
        if lit > 0:
            return lit in self._true
        return -lit not in self._true


class SatBackend:
    """
    Thin wrapper over `pysat.solvers.Solver`.

    A fresh solver is created per call and bootstrapped with the whole clause
    set; the call blocks until the solver answers (or the conflict budget, if
    any, runs out).
    """

    def __init__(self, solver_name: str = DEFAULT_SOLVER_NAME, conf_budget: Optional[int] = DEFAULT_CONF_BUDGET):
        self.solver_name = solver_name
        self.conf_budget = conf_budget

    def _open(self, cnf: CNF) -> Solver:
        try:
            return Solver(name=self.solver_name, bootstrap_with=cnf.clauses)
        except NoSuchSolverError:
            raise ConfigurationError(f"Unknown SAT solver {self.solver_name!r}") from None

    def _run(self, solver: Solver, assumptions: Sequence[int] = ()) -> Optional[bool]:
        if self.conf_budget is not None:
            solver.conf_budget(self.conf_budget)
            return solver.solve_limited(assumptions=list(assumptions))
        return solver.solve(assumptions=list(assumptions))

    def solve(self, cnf: CNF, assumptions: Sequence[int] = ()) -> SolveResult:
        with self._open(cnf) as solver:
            outcome = self._run(solver, assumptions)

            if outcome is None:
                logger.info("Solver %s gave up after %s conflicts", self.solver_name, self.conf_budget)
                return SolveResult(SolveStatus.UNKNOWN)
            if not outcome:
                core = solver.get_core() if assumptions else None
                return SolveResult(SolveStatus.UNSATISFIABLE, core=list(core or []))
            return SolveResult(SolveStatus.SATISFIABLE, model=solver.get_model())

    def iter_models(self, cnf: CNF, projection: Sequence[int], limit: Optional[int] = None) -> Iterator[SolveResult]:
        """
        Yield distinct models, blocking each one over the `projection` variables
        before asking for the next. Raises SolverUnknownError if the conflict
        budget runs out before the enumeration is complete.
        """
        projection = list(projection)
        found = 0
        with self._open(cnf) as solver:
            while limit is None or found < limit:
                outcome = self._run(solver)
                if outcome is None:
                    raise SolverUnknownError(
                        f"Solver {self.solver_name!r} could not finish enumerating within {self.conf_budget} conflicts"
                    )
                if not outcome:
                    return
                result = SolveResult(SolveStatus.SATISFIABLE, model=solver.get_model())
                yield result
                found += 1
                if not projection:
                    return
                solver.add_clause([-v if result.value(v) else v for v in projection])
