"""Encoding session and the encode -> solve -> decode pipeline."""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from src.utils.logging_utils import get_logger
from src.utils.trace import Tracer, get_tracer

from .allocator import LiteralAllocator
from .backend import SatBackend, SolveResult, SolveStatus
from .decoder import decode_category
from .emitter import ClauseEmitter, ClauseSink
from .encoders import (
    encode_distance,
    encode_excluded_position,
    encode_forced_position,
    encode_immediate_proximity,
    encode_implication,
    encode_left_of,
    encode_linked,
    encode_not_linked,
    encode_somewhere_left_of,
)
from .errors import (
    ConfigurationError,
    DecodeInconsistencyError,
    SolverUnknownError,
    UnsatisfiableError,
)
from .model import Category, Clue, ClueKind, Puzzle, Value
from .registry import RegistryView, VariableRegistry

logger = get_logger("solver")

Grid = Dict[str, List[str]]
ClueEncoder = Callable[[RegistryView, ClauseEmitter, Clue], None]


def _require(clue: Clue, *names: str) -> None:
    missing = [n for n in names if getattr(clue, n) is None]
    if missing:
        raise ConfigurationError(f"{clue.kind.value} clue {clue.description!r} is missing {', '.join(missing)}")


def _forced(view: RegistryView, emitter: ClauseEmitter, clue: Clue) -> None:
    _require(clue, "position")
    encode_forced_position(view, emitter, clue.a, clue.position)


def _excluded(view: RegistryView, emitter: ClauseEmitter, clue: Clue) -> None:
    _require(clue, "position")
    encode_excluded_position(view, emitter, clue.a, clue.position)


def _implies(view: RegistryView, emitter: ClauseEmitter, clue: Clue) -> None:
    _require(clue, "b", "position", "other_position")
    encode_implication(view, emitter, clue.a, clue.position, clue.b, clue.other_position)


def _distance(view: RegistryView, emitter: ClauseEmitter, clue: Clue) -> None:
    _require(clue, "b", "distance")
    encode_distance(view, emitter, clue.a, clue.b, clue.distance)


def _pair(encoder: Callable[[RegistryView, ClauseEmitter, Value, Value], None]) -> ClueEncoder:
    def _encode(view: RegistryView, emitter: ClauseEmitter, clue: Clue) -> None:
        _require(clue, "b")
        encoder(view, emitter, clue.a, clue.b)

    return _encode


CLUE_ENCODERS: Dict[ClueKind, ClueEncoder] = {
    ClueKind.LINKED: _pair(encode_linked),
    ClueKind.NOT_LINKED: _pair(encode_not_linked),
    ClueKind.LEFT_OF: _pair(encode_left_of),
    ClueKind.NEXT_TO: _pair(encode_immediate_proximity),
    ClueKind.SOMEWHERE_LEFT_OF: _pair(encode_somewhere_left_of),
    ClueKind.FORCED: _forced,
    ClueKind.EXCLUDED: _excluded,
    ClueKind.IMPLIES: _implies,
    ClueKind.DISTANCE: _distance,
}


class EncodingSession:
    """
    Owns one puzzle's allocator, emitter and registry.

    Construction registers every category and seals the registry; clues are
    then added one by one. With `track_clues=True` each clue's clauses are
    guarded by a selector literal so an unsatisfiable result can name the
    clues involved.
    """

    def __init__(
        self,
        categories: Sequence[Category],
        tracer: Optional[Tracer] = None,
        track_clues: bool = False,
        sink: Optional[ClauseSink] = None,
    ):
        if not categories:
            raise ConfigurationError("Cannot encode a puzzle without categories")
        self.tracer = tracer or get_tracer()
        self.track_clues = track_clues
        self.allocator = LiteralAllocator()
        self.emitter = ClauseEmitter(self.allocator, sink=sink)
        self.registry = VariableRegistry(len(categories[0]), self.allocator, self.emitter)
        self.selectors: Dict[int, Clue] = {}

        for category in categories:
            vars_before, clauses_before = self.num_vars, self.num_clauses
            self.registry.register(category)
            self.tracer.log_register(
                category.name,
                variables_added=self.num_vars - vars_before,
                clauses_added=self.num_clauses - clauses_before,
            )

        clauses_before = self.num_clauses
        self.view = self.registry.seal()
        self.tracer.log_seal(clauses_added=self.num_clauses - clauses_before)

    @property
    def num_clauses(self) -> int:
        return self.emitter.num_clauses

    @property
    def num_vars(self) -> int:
        return self.emitter.num_vars

    def add(self, clue: Clue) -> None:
        try:
            encoder = CLUE_ENCODERS[clue.kind]
        except KeyError:
            raise ConfigurationError(f"Unsupported clue kind {clue.kind!r}") from None

        vars_before, clauses_before = self.num_vars, self.num_clauses
        if self.track_clues:
            selector = self.allocator.next()
            self.selectors[selector] = clue
            with self.emitter.guarded(selector):
                encoder(self.view, self.emitter, clue)
        else:
            encoder(self.view, self.emitter, clue)

        added = self.num_clauses - clauses_before
        logger.debug("%s -> %d clauses (%s)", clue.kind.value, added, clue.description)
        self.tracer.log_clue(
            clue.description,
            clue.kind.value,
            clauses_added=added,
            variables_added=self.num_vars - vars_before,
        )

    def add_all(self, clues: Iterable[Clue]) -> None:
        for clue in clues:
            self.add(clue)

    def grid_variables(self) -> List[int]:
        return [
            lit
            for category in self.view.categories
            for value in category.values
            for lit in self.view.literals(value)
        ]

    def solve(self, backend: SatBackend) -> SolveResult:
        """Run the backend once; anything but SATISFIABLE raises."""
        if self.emitter.pending:
            raise ConfigurationError("An incremental clause was never terminated")

        result = backend.solve(self.emitter.cnf, assumptions=list(self.selectors))
        self.tracer.log_solve(result.status.name, self.num_clauses, self.num_vars)

        if result.status == SolveStatus.UNSATISFIABLE:
            core = [self.selectors[lit].description for lit in result.core if lit in self.selectors]
            raise UnsatisfiableError(
                f"Not satisfiable ({self.num_clauses} clauses, {self.num_vars} variables)", core=core
            )
        if result.status == SolveStatus.UNKNOWN:
            raise SolverUnknownError(
                f"Solver {backend.solver_name!r} could not decide within {backend.conf_budget} conflicts"
            )

        logger.info(
            "SATISFIABLE with a total of %d clauses and %d variables", self.num_clauses, self.num_vars
        )
        return result

    def decode(self, result: SolveResult) -> Grid:
        grid: Grid = {}
        for category in self.view.categories:
            try:
                values = decode_category(self.view, category, result.value)
            except DecodeInconsistencyError as exc:
                self.tracer.log_decode(category.name, status="inconsistent", reason=str(exc))
                raise
            self.tracer.log_decode(category.name)
            grid[category.name] = [value.label for value in values]
        return grid


@dataclass
class Solution:
    puzzle_id: str
    grid: Grid
    num_clauses: int
    num_vars: int
    status: SolveStatus = SolveStatus.SATISFIABLE

    def house_of(self, label: str) -> Optional[int]:
        """0-based position of a value label, searched across all categories."""
        for labels in self.grid.values():
            if label in labels:
                return labels.index(label)
        return None


def encode(puzzle: Puzzle, tracer: Optional[Tracer] = None, track_clues: bool = False) -> EncodingSession:
    session = EncodingSession(puzzle.categories, tracer=tracer, track_clues=track_clues)
    session.add_all(puzzle.clues)
    return session


def solve(
    puzzle: Puzzle,
    backend: Optional[SatBackend] = None,
    tracer: Optional[Tracer] = None,
    track_clues: bool = False,
) -> Solution:
    """Encode a puzzle, solve it once, and decode the model into a grid."""
    backend = backend or SatBackend()
    session = encode(puzzle, tracer=tracer, track_clues=track_clues)
    result = session.solve(backend)
    return Solution(
        puzzle_id=puzzle.id,
        grid=session.decode(result),
        num_clauses=session.num_clauses,
        num_vars=session.num_vars,
        status=result.status,
    )


def count_solutions(puzzle: Puzzle, limit: int = 2, backend: Optional[SatBackend] = None) -> int:
    """Count distinct grids, stopping at `limit`."""
    backend = backend or SatBackend()
    session = encode(puzzle, tracer=Tracer(enabled=False))
    models = backend.iter_models(session.emitter.cnf, session.grid_variables(), limit=limit)
    return sum(1 for _ in models)
