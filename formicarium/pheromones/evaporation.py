"""Evaporation logic for trace layers.

Operates on the raw NumPy arrays inside ``TraceLayer`` objects.
Separated from ``fields.py`` so the decay law can be swapped
independently of storage.
"""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy.typing import NDArray


class DecayLaw(Enum):
    """How concentrations shrink at the end of each generation."""

    MULTIPLICATIVE = "multiplicative"
    LINEAR = "linear"


def evaporate(
    grid: NDArray[np.float64],
    rate: float,
    law: DecayLaw = DecayLaw.MULTIPLICATIVE,
) -> None:
    """Reduce concentrations in-place, never below zero.

    - ``MULTIPLICATIVE``: ``grid *= (1 - rate)``
    - ``LINEAR``: ``grid -= rate``, floored at zero

    Args:
        grid: The layer array to evaporate.
        rate: Evaporation rate for the chosen law.
        law: Decay law to apply.
    """
    match law:
        case DecayLaw.MULTIPLICATIVE:
            grid *= 1.0 - rate
        case DecayLaw.LINEAR:
            grid -= rate
    np.maximum(grid, 0.0, out=grid)
