import pytest

from src.zebra.allocator import LiteralAllocator
from src.zebra.decoder import decode, decode_category
from src.zebra.emitter import ClauseEmitter
from src.zebra.errors import DecodeInconsistencyError
from src.zebra.model import Category, Value
from src.zebra.registry import VariableRegistry

COLORS = Category("Color", ("Red", "Green", "Blue"))
PETS = Category("Pet", ("Cat", "Dog", "Fish"))


def _view():
    allocator = LiteralAllocator()
    registry = VariableRegistry(3, allocator, ClauseEmitter(allocator))
    registry.register(COLORS)
    registry.register(PETS)
    return registry.seal()


def _assignment(view, placements):
    """placements: {(category, label): position} -> predicate over variable ids."""
    true_vars = {
        view.lookup(Value(category, label), position)
        for (category, label), position in placements.items()
    }
    return lambda var: var in true_vars


def test_decode_orders_values_by_position():
    view = _view()
    assignment = _assignment(view, {
        ("Color", "Red"): 2,
        ("Color", "Green"): 0,
        ("Color", "Blue"): 1,
        ("Pet", "Cat"): 0,
        ("Pet", "Dog"): 1,
        ("Pet", "Fish"): 2,
    })

    assert decode(view, assignment) == {
        "Color": ["Green", "Blue", "Red"],
        "Pet": ["Cat", "Dog", "Fish"],
    }
    assert decode_category(view, COLORS, assignment)[0] == Value("Color", "Green")


def test_two_values_at_one_position_is_inconsistent():
    view = _view()
    assignment = _assignment(view, {
        ("Color", "Red"): 0,
        ("Color", "Green"): 0,
        ("Color", "Blue"): 2,
    })
    with pytest.raises(DecodeInconsistencyError):
        decode_category(view, COLORS, assignment)


def test_value_without_position_is_inconsistent():
    view = _view()
    assignment = _assignment(view, {
        ("Color", "Red"): 0,
        ("Color", "Green"): 1,
    })
    with pytest.raises(DecodeInconsistencyError):
        decode_category(view, COLORS, assignment)


def test_value_in_two_positions_is_inconsistent():
    view = _view()
    red = Value("Color", "Red")
    true_vars = {view.lookup(red, 0), view.lookup(red, 1)}
    with pytest.raises(DecodeInconsistencyError):
        decode_category(view, COLORS, lambda var: var in true_vars)
