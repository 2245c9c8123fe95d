"""Reinforcement — how much trace an ant lays as its trip gets longer.

An ant lays its strongest trace right after touching a landmark and
weaker trace the further it wanders.  Short paths therefore end up
carrying more trace than long ones and win out over many generations.
"""

from __future__ import annotations

from enum import Enum


class DepositLaw(Enum):
    """Shape of the deposit-versus-trip-length curve."""

    CONSTANT = "constant"
    LINEAR = "linear"
    INVERSE = "inverse"


def deposit_strength(
    law: DepositLaw,
    amount: float,
    steps: int,
    decrease: float = 0.0,
) -> float:
    """Return the deposit for an ant ``steps`` moves away from a landmark.

    - ``CONSTANT``: always ``amount``
    - ``LINEAR``: ``amount - decrease * steps``, floored at zero
    - ``INVERSE``: ``amount / (1 + steps)``

    Args:
        law: Deposit law to apply.
        amount: Deposit made on the first step after a landmark.
        steps: Moves since the ant last touched a landmark.
        decrease: Per-step reduction for the linear law.

    Returns:
        A non-negative deposit amount.
    """
    match law:
        case DepositLaw.CONSTANT:
            return amount
        case DepositLaw.LINEAR:
            return max(0.0, amount - decrease * steps)
        case DepositLaw.INVERSE:
            return amount / (1 + steps)
