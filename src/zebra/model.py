"""Puzzle data structures: categories, values, clues."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ConfigurationError


@dataclass(frozen=True)
class Value:
    category: str
    label: str

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class Category:
    """A named group of N values distributed one-to-one over N positions."""

    name: str
    labels: Tuple[str, ...]

    def __post_init__(self) -> None:
        # Accept any iterable of labels but store an immutable tuple.
        object.__setattr__(self, "labels", tuple(self.labels))
        if not self.name:
            raise ConfigurationError("Category name must be non-empty")
        if not self.labels:
            raise ConfigurationError(f"Category {self.name!r} has no values")
        if len(set(self.labels)) != len(self.labels):
            raise ConfigurationError(f"Category {self.name!r} has duplicate values")

    @property
    def values(self) -> Tuple[Value, ...]:
        return tuple(Value(self.name, label) for label in self.labels)

    def __len__(self) -> int:
        return len(self.labels)


class ClueKind(str, Enum):
    LINKED = "linked"
    NOT_LINKED = "not_linked"
    LEFT_OF = "left_of"
    FORCED = "forced"
    EXCLUDED = "excluded"
    IMPLIES = "implies"
    NEXT_TO = "next_to"
    SOMEWHERE_LEFT_OF = "somewhere_left_of"
    DISTANCE = "distance"


@dataclass(frozen=True)
class Clue:
    """
    One declarative constraint over puzzle values.

    Use the classmethod constructors rather than filling fields by hand; each
    kind only reads the fields it needs. Positions are 0-based.
    """

    kind: ClueKind
    a: Value
    b: Optional[Value] = None
    position: Optional[int] = None
    other_position: Optional[int] = None
    distance: Optional[int] = None
    description: str = ""

    @classmethod
    def linked(cls, a: Value, b: Value, description: str = "") -> "Clue":
        return cls(ClueKind.LINKED, a, b, description=description or f"{a} is with {b}")

    @classmethod
    def not_linked(cls, a: Value, b: Value, description: str = "") -> "Clue":
        return cls(ClueKind.NOT_LINKED, a, b, description=description or f"{a} is not with {b}")

    @classmethod
    def left_of(cls, a: Value, b: Value, description: str = "") -> "Clue":
        return cls(
            ClueKind.LEFT_OF, a, b, description=description or f"{a} is directly left of {b}"
        )

    @classmethod
    def forced(cls, value: Value, position: int, description: str = "") -> "Clue":
        return cls(
            ClueKind.FORCED,
            value,
            position=position,
            description=description or f"{value} is at position {position}",
        )

    @classmethod
    def excluded(cls, value: Value, position: int, description: str = "") -> "Clue":
        return cls(
            ClueKind.EXCLUDED,
            value,
            position=position,
            description=description or f"{value} is not at position {position}",
        )

    @classmethod
    def implies(
        cls, a: Value, position: int, b: Value, other_position: int, description: str = ""
    ) -> "Clue":
        desc = description or f"{a}@{position} implies {b}@{other_position}"
        return cls(
            ClueKind.IMPLIES, a, b, position=position, other_position=other_position, description=desc
        )

    @classmethod
    def next_to(cls, a: Value, b: Value, description: str = "") -> "Clue":
        return cls(ClueKind.NEXT_TO, a, b, description=description or f"{a} is next to {b}")

    @classmethod
    def somewhere_left_of(cls, a: Value, b: Value, description: str = "") -> "Clue":
        return cls(
            ClueKind.SOMEWHERE_LEFT_OF,
            a,
            b,
            description=description or f"{a} is somewhere left of {b}",
        )

    @classmethod
    def at_distance(cls, a: Value, b: Value, distance: int, description: str = "") -> "Clue":
        return cls(
            ClueKind.DISTANCE,
            a,
            b,
            distance=distance,
            description=description or f"{a} and {b} are {distance} apart",
        )

    def values(self) -> List[Value]:
        return [v for v in (self.a, self.b) if v is not None]


@dataclass
class Puzzle:
    categories: List[Category]
    clues: List[Clue] = field(default_factory=list)
    id: str = "puzzle"

    def __post_init__(self) -> None:
        if not self.categories:
            raise ConfigurationError("A puzzle needs at least one category")
        names = [c.name for c in self.categories]
        if len(set(names)) != len(names):
            raise ConfigurationError("Category names must be unique")
        sizes = {len(c) for c in self.categories}
        if len(sizes) != 1:
            raise ConfigurationError(f"All categories must have the same size, got {sorted(sizes)}")

        self._by_name: Dict[str, Category] = {c.name: c for c in self.categories}
        # Lower-cased label -> every value carrying that label, for lookup by text.
        self._by_label: Dict[str, List[Value]] = {}
        for category in self.categories:
            for value in category.values:
                self._by_label.setdefault(value.label.lower(), []).append(value)

        for clue in self.clues:
            self._check_clue(clue)

    @property
    def size(self) -> int:
        return len(self.categories[0])

    def category(self, name: str) -> Category:
        try:
            return self._by_name[name]
        except KeyError:
            raise ConfigurationError(f"Unknown category {name!r}") from None

    def value(self, label: str, category: Optional[str] = None) -> Value:
        """Resolve a label (case-insensitive) to a Value, optionally within one category."""
        candidates = self._by_label.get(str(label).strip().lower(), [])
        if category is not None:
            candidates = [v for v in candidates if v.category == category]
        if not candidates:
            raise ConfigurationError(f"Unknown value {label!r}")
        if len(candidates) > 1:
            cats = ", ".join(v.category for v in candidates)
            raise ConfigurationError(f"Value {label!r} is ambiguous between categories: {cats}")
        return candidates[0]

    def add_clue(self, clue: Clue) -> None:
        self._check_clue(clue)
        self.clues.append(clue)

    def extend(self, clues: Iterable[Clue]) -> None:
        for clue in clues:
            self.add_clue(clue)

    def _check_clue(self, clue: Clue) -> None:
        for value in clue.values():
            category = self.category(value.category)
            if value.label not in category.labels:
                raise ConfigurationError(
                    f"Clue {clue.description!r} names {value.label!r}, "
                    f"which is not a {category.name} value"
                )
