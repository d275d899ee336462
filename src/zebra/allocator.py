"""Fresh propositional variable ids."""


class LiteralAllocator:
    """
    Hands out 1-based variable ids, strictly increasing, never reused.

    One allocator belongs to one encoding session; every id that reaches the
    solver (value/position variables and clue selectors alike) comes from it,
    so the ids form the dense range [1, count].
    """

    def __init__(self) -> None:
        self._last = 0

    def next(self) -> int:
        self._last += 1
        return self._last

    @property
    def count(self) -> int:
        """Highest id issued so far (0 before the first call)."""
        return self._last
