"""Value/position variable registry and its read-only view."""

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .allocator import LiteralAllocator
from .emitter import ClauseEmitter
from .encoders import encode_at_most_one
from .errors import ConfigurationError
from .model import Category, Value


class RegistryView:
    """Read-only access to a sealed registry; the only thing encoders see."""

    def __init__(self, size: int, categories: Tuple[Category, ...], table: Mapping[Value, Tuple[int, ...]]):
        self._size = size
        self._categories = categories
        self._table = table
        self._meaning: Dict[int, Tuple[Value, int]] = {
            var: (value, position)
            for value, lits in table.items()
            for position, var in enumerate(lits)
        }

    @property
    def size(self) -> int:
        return self._size

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self._categories

    def literals(self, value: Value) -> Tuple[int, ...]:
        try:
            return self._table[value]
        except KeyError:
            raise ConfigurationError(f"Value {value!r} was never registered") from None

    def lookup(self, value: Value, position: int) -> int:
        lits = self.literals(value)
        if not 0 <= position < self._size:
            raise ConfigurationError(
                f"Position {position} for {value.label!r} is outside [0, {self._size})"
            )
        return lits[position]

    def describe(self, var: int) -> Optional[Tuple[Value, int]]:
        """Map a variable id back to (value, position), or None for non-grid ids."""
        return self._meaning.get(abs(var))


class VariableRegistry:
    """
    Owns the (value, position) -> variable mapping.

    Categories are registered once each; `seal` then emits the per-position
    exactly-one constraints and returns a `RegistryView`. Nothing can be
    registered after sealing.
    """

    def __init__(self, size: int, allocator: LiteralAllocator, emitter: ClauseEmitter):
        if size < 1:
            raise ConfigurationError(f"Puzzle size must be at least 1, got {size}")
        self.size = size
        self.allocator = allocator
        self.emitter = emitter
        self._categories: List[Category] = []
        self._table: Dict[Value, Tuple[int, ...]] = {}
        self._view: Optional[RegistryView] = None

    @property
    def sealed(self) -> bool:
        return self._view is not None

    @property
    def categories(self) -> Tuple[Category, ...]:
        return tuple(self._categories)

    def register(self, category: Category) -> None:
        if self.sealed:
            raise ConfigurationError(f"Cannot register {category.name!r}: registry is sealed")
        if any(c.name == category.name for c in self._categories):
            raise ConfigurationError(f"Category {category.name!r} is already registered")
        if len(category) != self.size:
            raise ConfigurationError(
                f"Category {category.name!r} has {len(category)} values, expected {self.size}"
            )

        for value in category.values:
            lits = tuple(self.allocator.next() for _ in range(self.size))
            self._table[value] = lits
            # A value cannot sit in two positions at once, and must sit somewhere.
            encode_at_most_one(self.emitter, lits, exactly=True)
        self._categories.append(category)

    def lookup(self, value: Value, position: int) -> int:
        if value not in self._table:
            raise ConfigurationError(f"Value {value!r} was never registered")
        if not 0 <= position < self.size:
            raise ConfigurationError(f"Position {position} is outside [0, {self.size})")
        return self._table[value][position]

    def seal(self) -> RegistryView:
        """Emit exactly-one value per (category, position) and freeze the mapping."""
        if self.sealed:
            raise ConfigurationError("Registry is already sealed")
        for category in self._categories:
            for position in range(self.size):
                encode_at_most_one(
                    self.emitter,
                    [self._table[value][position] for value in category.values],
                    exactly=True,
                )
        self._view = RegistryView(
            self.size, tuple(self._categories), MappingProxyType(dict(self._table))
        )
        return self._view

    @property
    def view(self) -> RegistryView:
        if self._view is None:
            raise ConfigurationError("Registry must be sealed before it is read")
        return self._view
