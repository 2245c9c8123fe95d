"""LocationMemory — an ant's short-term memory of visited cells."""

from __future__ import annotations

from dataclasses import dataclass, field

from formicarium.world.grid import Position


@dataclass
class LocationMemory:
    """Fixed-capacity ring buffer of recently visited positions.

    The newest entry overwrites the oldest once the buffer is full.  A
    zero capacity remembers nothing.

    Attributes:
        capacity: Maximum number of remembered positions.
    """

    capacity: int
    _slots: list[Position | None] = field(init=False, repr=False)
    _next: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        self._slots = [None] * self.capacity

    def insert(self, position: Position) -> None:
        """Record ``position`` in place of the oldest entry."""
        if self.capacity == 0:
            return
        self._slots[self._next] = position
        self._next = (self._next + 1) % self.capacity

    def __contains__(self, position: object) -> bool:
        return position in self._slots

    def __len__(self) -> int:
        return sum(1 for slot in self._slots if slot is not None)

    def clear(self) -> None:
        """Forget every position."""
        self._slots = [None] * self.capacity
        self._next = 0
