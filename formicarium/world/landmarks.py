"""Landmarks — the Nest and the Morsels of food.

Landmarks never move.  The Nest collects delivered food; each Morsel
holds a finite stock that foraging ants take one unit at a time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from formicarium.world.grid import Position

if TYPE_CHECKING:
    from formicarium.world.grid import Grid


@dataclass
class Nest:
    """The single colony nest.

    Attributes:
        entity_id: Grid id of the nest.
        x: Column position.
        y: Row position.
        accumulated: Units of food delivered so far (never decreases).
    """

    entity_id: int
    x: int
    y: int
    accumulated: int = 0

    @property
    def position(self) -> Position:
        """Return the nest position."""
        return Position(self.x, self.y)

    def store(self) -> None:
        """Add one delivered unit of food."""
        self.accumulated += 1


@dataclass
class Morsel:
    """A fixed food source.

    Attributes:
        entity_id: Grid id of the morsel.
        x: Column position.
        y: Row position.
        remaining: Units of food left (never negative).
    """

    entity_id: int
    x: int
    y: int
    remaining: int

    @property
    def position(self) -> Position:
        """Return the morsel position."""
        return Position(self.x, self.y)

    @property
    def is_depleted(self) -> bool:
        """Return True once all the food has been taken."""
        return self.remaining <= 0

    def take(self) -> bool:
        """Take one unit of food.

        Returns:
            True if a unit was taken, False if the morsel was already empty.
        """
        if self.is_depleted:
            return False
        self.remaining -= 1
        return True


@dataclass
class Landmarks:
    """The Nest plus every Morsel, indexed by grid id.

    Attributes:
        nest: The colony nest.
        morsels: All morsels, including depleted ones.
    """

    nest: Nest
    morsels: list[Morsel] = field(default_factory=list)
    _by_id: dict[int, Nest | Morsel] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Build the id lookup table."""
        self._by_id = {self.nest.entity_id: self.nest}
        for morsel in self.morsels:
            self._by_id[morsel.entity_id] = morsel

    def place(self, grid: Grid) -> None:
        """Register every landmark on the grid."""
        for landmark in self._by_id.values():
            grid.place(landmark.entity_id, landmark.position)

    def get(self, entity_id: int) -> Nest | Morsel | None:
        """Return the landmark with the given id, or None for other entities."""
        return self._by_id.get(entity_id)

    def at(self, grid: Grid, position: Position) -> list[Nest | Morsel]:
        """Return the landmarks standing at ``position``, in id order."""
        found = []
        for entity_id in sorted(grid.occupants_at(position)):
            landmark = self._by_id.get(entity_id)
            if landmark is not None:
                found.append(landmark)
        return found

    @property
    def total_remaining(self) -> int:
        """Return the food still stored in all morsels."""
        return sum(m.remaining for m in self.morsels)
