"""TraceField — two-kind pheromone grid.

Each trace kind (home-bound, food-bound) is stored as a separate NumPy 2D
array.  The field provides deposit/read operations and delegates the
per-generation decay to ``evaporation.py``.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, auto

import numpy as np
from numpy.typing import NDArray

from formicarium.pheromones.evaporation import DecayLaw, evaporate
from formicarium.world.grid import Position


class TraceKind(Enum):
    """Distinct trace channels, each with its own layer."""

    HOME_BOUND = auto()
    FOOD_BOUND = auto()


@dataclass
class TraceLayer:
    """A single trace channel stored as a 2D NumPy array.

    Attributes:
        kind: Which trace this layer represents.
        grid: Concentration values (≥ 0, ≤ the field maximum).
        touched: True for every cell that has ever received a deposit.
    """

    kind: TraceKind
    grid: NDArray[np.float64]
    touched: NDArray[np.bool_]


@dataclass
class TraceField:
    """All trace layers for a grid.

    Attributes:
        width: Grid columns (must match Grid).
        height: Grid rows (must match Grid).
        max_concentration: Cap applied on every deposit.
        decay_law: How ``decay_all`` reduces concentrations.
        layers: Mapping from TraceKind to its layer.
    """

    width: int
    height: int
    max_concentration: float = 5.0
    decay_law: DecayLaw = DecayLaw.MULTIPLICATIVE
    layers: dict[TraceKind, TraceLayer] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Create one layer per trace kind, all zeroed."""
        self.layers = {}
        for kind in TraceKind:
            self.layers[kind] = TraceLayer(
                kind=kind,
                grid=np.zeros((self.height, self.width), dtype=np.float64),
                touched=np.zeros((self.height, self.width), dtype=np.bool_),
            )

    def deposit(self, position: Position, kind: TraceKind, amount: float) -> None:
        """Add trace at a cell, capped at ``max_concentration``.

        Deposits made within one generation simply accumulate; decay is a
        separate end-of-generation pass.

        Args:
            position: Cell receiving the deposit.
            kind: Which trace to deposit.
            amount: Quantity to add (must be ≥ 0).
        """
        layer = self.layers[kind]
        x, y = position
        layer.grid[y, x] = min(layer.grid[y, x] + amount, self.max_concentration)
        layer.touched[y, x] = True

    def concentration_at(self, position: Position, kind: TraceKind) -> float:
        """Read trace concentration at a cell (0.0 if never deposited)."""
        x, y = position
        return float(self.layers[kind].grid[y, x])

    def clear(self, position: Position, kind: TraceKind) -> None:
        """Drop the concentration at a cell to zero.

        The cell stays registered, so it is still listed by ``cells``.
        """
        x, y = position
        self.layers[kind].grid[y, x] = 0.0

    def decay_all(self, evaporation_rate: float) -> None:
        """Evaporate every layer once using the field's decay law.

        Args:
            evaporation_rate: Fraction (multiplicative law) or absolute
                amount (linear law) lost per generation.
        """
        for layer in self.layers.values():
            evaporate(layer.grid, evaporation_rate, self.decay_law)

    def cells(self) -> Iterator[tuple[Position, TraceKind, float]]:
        """Yield every cell that has ever received a deposit.

        Yields:
            ``(position, kind, concentration)`` tuples, layer by layer in
            row-major order.
        """
        for kind, layer in self.layers.items():
            ys, xs = np.nonzero(layer.touched)
            for y, x in zip(ys.tolist(), xs.tolist(), strict=True):
                yield Position(x, y), kind, float(layer.grid[y, x])

    def layer(self, kind: TraceKind) -> NDArray[np.float64]:
        """Return the raw NumPy array for a trace layer.

        Args:
            kind: Which trace kind.

        Returns:
            2D array of concentration values indexed ``[y, x]``.
        """
        return self.layers[kind].grid
