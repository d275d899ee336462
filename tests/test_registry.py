"""Unit tests for the literal allocator and variable registry."""

import pytest

from src.zebra.allocator import LiteralAllocator
from src.zebra.emitter import ClauseEmitter
from src.zebra.errors import ConfigurationError
from src.zebra.model import Category, Value
from src.zebra.registry import VariableRegistry

COLORS = Category("Color", ("Red", "Green", "Blue"))
PETS = Category("Pet", ("Cat", "Dog", "Fish"))


def _make_registry(size=3):
    allocator = LiteralAllocator()
    emitter = ClauseEmitter(allocator)
    return VariableRegistry(size, allocator, emitter), allocator, emitter


def test_allocator_is_strictly_increasing_from_one():
    allocator = LiteralAllocator()
    assert allocator.count == 0
    ids = [allocator.next() for _ in range(5)]
    assert ids == [1, 2, 3, 4, 5]
    assert allocator.count == 5


def test_independent_allocators_do_not_share_state():
    first, second = LiteralAllocator(), LiteralAllocator()
    first.next()
    first.next()
    assert second.next() == 1


def test_register_allocates_n_squared_distinct_variables():
    registry, allocator, emitter = _make_registry()
    registry.register(COLORS)

    ids = {registry.lookup(value, pos) for value in COLORS.values for pos in range(3)}
    assert len(ids) == 9
    assert allocator.count == 9
    # Exactly-one per value: C(3,2) exclusions + 1 at-least-one, for 3 values.
    assert emitter.num_clauses == 3 * 4


def test_values_get_position_ordered_literals():
    registry, _, _ = _make_registry()
    registry.register(COLORS)
    red = Value("Color", "Red")
    assert [registry.lookup(red, p) for p in range(3)] == [1, 2, 3]


def test_seal_emits_exactly_one_per_category_and_position():
    registry, _, emitter = _make_registry()
    registry.register(COLORS)
    registry.register(PETS)
    before = emitter.num_clauses

    view = registry.seal()

    assert emitter.num_clauses - before == 2 * 3 * 4
    assert view.size == 3
    assert [c.name for c in view.categories] == ["Color", "Pet"]


def test_reregistering_a_category_is_rejected():
    registry, allocator, _ = _make_registry()
    registry.register(COLORS)
    with pytest.raises(ConfigurationError):
        registry.register(COLORS)
    assert allocator.count == 9


def test_category_of_wrong_size_is_rejected():
    registry, _, _ = _make_registry(size=4)
    with pytest.raises(ConfigurationError):
        registry.register(COLORS)


def test_lookup_rejects_unknown_value_and_bad_position():
    registry, _, _ = _make_registry()
    registry.register(COLORS)
    with pytest.raises(ConfigurationError):
        registry.lookup(Value("Color", "Purple"), 0)
    with pytest.raises(ConfigurationError):
        registry.lookup(Value("Color", "Red"), 3)
    with pytest.raises(ConfigurationError):
        registry.lookup(Value("Color", "Red"), -1)


def test_registry_is_frozen_after_seal():
    registry, _, _ = _make_registry()
    registry.register(COLORS)
    registry.seal()
    with pytest.raises(ConfigurationError):
        registry.register(PETS)
    with pytest.raises(ConfigurationError):
        registry.seal()


def test_view_is_read_only_and_describes_variables():
    registry, _, _ = _make_registry()
    registry.register(COLORS)
    view = registry.seal()

    green = Value("Color", "Green")
    lits = view.literals(green)
    assert isinstance(lits, tuple)
    assert view.describe(lits[2]) == (green, 2)
    assert view.describe(-lits[2]) == (green, 2)
    assert view.describe(999) is None
    with pytest.raises(ConfigurationError):
        view.lookup(green, 5)
