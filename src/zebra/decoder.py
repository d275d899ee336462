"""Turn a SAT model back into category -> ordered values."""

from typing import Callable, Dict, List, Optional

from .errors import DecodeInconsistencyError
from .model import Category, Value
from .registry import RegistryView

Assignment = Callable[[int], bool]


def decode_category(view: RegistryView, category: Category, assignment: Assignment) -> List[Value]:
    """
    Return the category's values ordered by position.

    Raises DecodeInconsistencyError if a value is placed zero or several times,
    or if two values land on the same position.
    """
    placed: List[Optional[Value]] = [None] * view.size
    for value in category.values:
        positions = [i for i, lit in enumerate(view.literals(value)) if assignment(lit)]
        if len(positions) != 1:
            raise DecodeInconsistencyError(
                f"{category.name} value {value.label!r} is true at positions {positions}, expected exactly one"
            )
        position = positions[0]
        if placed[position] is not None:
            raise DecodeInconsistencyError(
                f"{category.name} position {position} holds both "
                f"{placed[position].label!r} and {value.label!r}"
            )
        placed[position] = value

    # N values each in a distinct position out of N fills every slot.
    return [v for v in placed if v is not None]


def decode(view: RegistryView, assignment: Assignment) -> Dict[str, List[str]]:
    """Decode every registered category, keyed by category name, in registration order."""
    return {
        category.name: [value.label for value in decode_category(view, category, assignment)]
        for category in view.categories
    }
