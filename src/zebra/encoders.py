"""Constraint encoders: declarative clue kinds -> CNF clauses.

Every encoder reads literals through a `RegistryView` and pushes clauses
through a `ClauseEmitter`. None of them return anything; invalid positions
raise `ConfigurationError` before any clause is emitted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from .emitter import ClauseEmitter
from .errors import ConfigurationError
from .model import Value

if TYPE_CHECKING:
    from .registry import RegistryView


def encode_at_most_one(emitter: ClauseEmitter, lits: Sequence[int], exactly: bool = False) -> None:
    """
    Pairwise at-most-one: C(k,2) binary clauses {-x_i, -x_j}.
    With `exactly=True`, one extra at-least-one clause over all of `lits`.
    """
    lits = list(lits)
    for i in range(len(lits)):
        for j in range(i + 1, len(lits)):
            emitter.emit([-lits[i], -lits[j]])
    if exactly:
        emitter.emit(lits)


def encode_double_implication(emitter: ClauseEmitter, lit1: int, lit2: int) -> None:
    """lit1 <=> lit2."""
    emitter.emit([lit1, -lit2])
    emitter.emit([-lit1, lit2])


def encode_linked(view: RegistryView, emitter: ClauseEmitter, a: Value, b: Value) -> None:
    """a and b always occupy the same position."""
    for i in range(view.size):
        encode_double_implication(emitter, view.lookup(a, i), view.lookup(b, i))


def encode_left_of(view: RegistryView, emitter: ClauseEmitter, a: Value, b: Value) -> None:
    """a sits immediately to the left of b."""
    for i in range(view.size - 1):
        encode_double_implication(emitter, view.lookup(a, i), view.lookup(b, i + 1))


def encode_forced_position(view: RegistryView, emitter: ClauseEmitter, value: Value, position: int) -> None:
    emitter.emit([view.lookup(value, position)])


def encode_implication(
    view: RegistryView,
    emitter: ClauseEmitter,
    a: Value,
    position_a: int,
    b: Value,
    position_b: int,
) -> None:
    """a at position_a forces b at position_b (one direction only)."""
    lit_a = view.lookup(a, position_a)
    lit_b = view.lookup(b, position_b)
    emitter.emit([-lit_a, lit_b])


def encode_between(view: RegistryView, emitter: ClauseEmitter, a: Value, b: Value, position: int) -> None:
    """
    For an interior position p: a at p puts b at p-1 or p+1, and b on both
    sides of p would put a at p.
    """
    if not 0 < position < view.size - 1:
        raise ConfigurationError(
            f"Between needs an interior position in (0, {view.size - 1}), got {position}"
        )
    lit = view.lookup(a, position)
    left = view.lookup(b, position - 1)
    right = view.lookup(b, position + 1)
    emitter.emit([-left, lit, -right])
    emitter.emit([left, -lit, right])


def encode_immediate_proximity(view: RegistryView, emitter: ClauseEmitter, a: Value, b: Value) -> None:
    """a and b are neighbours, in either order."""
    last = view.size - 1
    if last < 1:
        raise ConfigurationError("Adjacency needs at least two positions")
    # The two end positions each have a single neighbour.
    encode_implication(view, emitter, a, 0, b, 1)
    encode_implication(view, emitter, a, last, b, last - 1)
    for position in range(1, last):
        encode_between(view, emitter, a, b, position)


def encode_not_linked(view: RegistryView, emitter: ClauseEmitter, a: Value, b: Value) -> None:
    for i in range(view.size):
        emitter.emit([-view.lookup(a, i), -view.lookup(b, i)])


def encode_excluded_position(view: RegistryView, emitter: ClauseEmitter, value: Value, position: int) -> None:
    emitter.emit([-view.lookup(value, position)])


def encode_somewhere_left_of(view: RegistryView, emitter: ClauseEmitter, a: Value, b: Value) -> None:
    """a sits anywhere to the left of b."""
    for i in range(view.size):
        emitter.emit([-view.lookup(a, i)] + [view.lookup(b, j) for j in range(i + 1, view.size)])


def encode_distance(view: RegistryView, emitter: ClauseEmitter, a: Value, b: Value, distance: int) -> None:
    """a and b are exactly `distance` positions apart, in either order."""
    if distance < 1:
        raise ConfigurationError(f"Distance must be at least 1, got {distance}")
    for i in range(view.size):
        partners = [view.lookup(b, j) for j in (i - distance, i + distance) if 0 <= j < view.size]
        emitter.emit([-view.lookup(a, i)] + partners)
