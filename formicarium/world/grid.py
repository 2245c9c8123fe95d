"""Grid — fixed-size positional index for every entity in the simulation.

The Grid maps entity ids to coordinates and coordinates back to the set
of entities standing there.  It owns no behaviour: ants, landmarks and
the trace field address cells through it, and only the simulation's
apply phase moves anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


class Position(NamedTuple):
    """An integer grid coordinate (``x`` = column, ``y`` = row)."""

    x: int
    y: int


@dataclass
class Grid:
    """A 2D grid of ``width`` x ``height`` cells, without wrap-around.

    Any number of entities may occupy the same cell.

    Attributes:
        width: Number of columns in the grid.
        height: Number of rows in the grid.
    """

    width: int
    height: int
    _positions: dict[int, Position] = field(init=False, repr=False)
    _occupants: dict[Position, set[int]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Start with an empty index."""
        self._positions = {}
        self._occupants = {}

    def contains(self, position: Position) -> bool:
        """Return True if ``position`` lies inside the grid."""
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def clamp(self, position: Position) -> Position:
        """Return the in-bounds position closest to ``position``."""
        return Position(
            min(max(position.x, 0), self.width - 1),
            min(max(position.y, 0), self.height - 1),
        )

    def place(self, entity_id: int, position: Position) -> None:
        """Register a new entity at ``position``.

        Args:
            entity_id: Unique id of the entity.
            position: Where the entity starts.

        Raises:
            IndexError: If the position is outside the grid.
            KeyError: If the entity is already registered.
        """
        if not self.contains(position):
            msg = f"{position} out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        if entity_id in self._positions:
            msg = f"entity {entity_id} already placed"
            raise KeyError(msg)
        self._positions[entity_id] = position
        self._occupants.setdefault(position, set()).add(entity_id)

    def move(self, entity_id: int, position: Position) -> Position:
        """Move a registered entity, clamping the target to the grid.

        Returns:
            The position the entity actually ended up in.
        """
        target = self.clamp(position)
        current = self._positions[entity_id]
        if target == current:
            return current
        occupants = self._occupants[current]
        occupants.discard(entity_id)
        if not occupants:
            del self._occupants[current]
        self._positions[entity_id] = target
        self._occupants.setdefault(target, set()).add(entity_id)
        return target

    def position_of(self, entity_id: int) -> Position:
        """Return the position of a registered entity."""
        return self._positions[entity_id]

    def occupants_at(self, position: Position) -> frozenset[int]:
        """Return the ids of every entity standing at ``position``."""
        return frozenset(self._occupants.get(position, ()))

    def neighborhood(
        self,
        position: Position,
        radius: int,
        *,
        include_center: bool = True,
    ) -> list[Position]:
        """Return the positions within Chebyshev distance ``radius``.

        The square is clipped to the grid bounds, so a cell near a wall
        or corner simply has fewer neighbours.  Positions are listed in
        row-major order.

        Args:
            position: Centre of the neighbourhood.
            radius: Moore radius; values below zero behave like zero.
            include_center: Whether ``position`` itself is listed.

        Returns:
            In-bounds positions around ``position``.
        """
        radius = max(radius, 0)
        x_lo = max(position.x - radius, 0)
        x_hi = min(position.x + radius, self.width - 1)
        y_lo = max(position.y - radius, 0)
        y_hi = min(position.y + radius, self.height - 1)

        result: list[Position] = []
        for y in range(y_lo, y_hi + 1):
            for x in range(x_lo, x_hi + 1):
                if not include_center and x == position.x and y == position.y:
                    continue
                result.append(Position(x, y))
        return result


def chebyshev(a: Position, b: Position) -> int:
    """Return the Moore (king-move) distance between two positions."""
    return max(abs(a.x - b.x), abs(a.y - b.y))


def step_towards(origin: Position, target: Position) -> Position:
    """Return the single Moore step from ``origin`` that heads to ``target``."""
    dx = (target.x > origin.x) - (target.x < origin.x)
    dy = (target.y > origin.y) - (target.y < origin.y)
    return Position(origin.x + dx, origin.y + dy)
