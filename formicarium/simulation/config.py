"""Config — load simulation parameters from YAML files.

All tunable constants (grid size, population, food, trace dynamics)
live in YAML and are parsed into a typed dataclass here.  This keeps the
simulation core data-driven and easy to experiment with.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from formicarium.colony.reinforcement import DepositLaw
from formicarium.pheromones.evaporation import DecayLaw
from formicarium.simulation.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        width: Number of grid columns.
        height: Number of grid rows.
        nest: Nest ``(x, y)``; None places it at the grid centre.
        agents: Ant population (fixed for the run).
        morsels: Number of randomly placed morsels.
        morsel_food: Units of food in each morsel.
        morsel_positions: Explicit morsel ``(x, y)`` positions.  When
            given, these replace random placement and ``morsels``.
        sensing_radius: Moore radius an ant can sense.
        memory_span: Positions kept in each ant's short-term memory.
        evaporation_rate: Trace lost per generation (fraction for the
            multiplicative law, absolute amount for the linear law).
        decay_law: ``"multiplicative"`` or ``"linear"``.
        deposit_amount: Trace laid on the first step after a landmark.
        deposit_law: ``"linear"``, ``"inverse"`` or ``"constant"``.
        deposit_decrease: Per-step reduction for the linear deposit law.
        reinforcement_ratio: Fraction of existing home-bound trace added
            when a foraging ant walks over it again.
        max_concentration: Cap on any trace cell.
        trace_threshold: Concentrations at or below this are ignored.
        suppress_misleading_trails: Clear dead-end trace peaks.
        workers: Threads used for the decision phase.
    """

    seed: int = 42
    width: int = 30
    height: int = 30
    nest: tuple[int, int] | None = None
    agents: int = 10

    # Food
    morsels: int = 20
    morsel_food: int = 30
    morsel_positions: list[tuple[int, int]] = field(default_factory=list)

    # Ant senses
    sensing_radius: int = 1
    memory_span: int = 30

    # Trace dynamics
    evaporation_rate: float = 0.01
    decay_law: DecayLaw = DecayLaw.MULTIPLICATIVE
    deposit_amount: float = 1.0
    deposit_law: DepositLaw = DepositLaw.LINEAR
    deposit_decrease: float = 0.01
    reinforcement_ratio: float = 0.1
    max_concentration: float = 5.0
    trace_threshold: float = 1e-3
    suppress_misleading_trails: bool = True

    workers: int = 1

    def __post_init__(self) -> None:
        """Normalise YAML-friendly values into their typed forms."""
        try:
            self.decay_law = DecayLaw(self.decay_law)
            self.deposit_law = DepositLaw(self.deposit_law)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        if self.nest is not None:
            self.nest = _pair(self.nest, "nest")
        self.morsel_positions = [
            _pair(p, "morsel_positions") for p in self.morsel_positions
        ]

    @property
    def nest_position(self) -> tuple[int, int]:
        """Return the configured nest, defaulting to the grid centre."""
        if self.nest is None:
            return self.width // 2, self.height // 2
        return self.nest

    @property
    def morsel_count(self) -> int:
        """Return how many morsels the run will have."""
        if self.morsel_positions:
            return len(self.morsel_positions)
        return self.morsels

    @property
    def total_food(self) -> int:
        """Return the food initially stored in all morsels."""
        return self.morsel_count * self.morsel_food

    def validate(self) -> None:
        """Check every parameter.

        Raises:
            ConfigurationError: On the first invalid parameter found.
        """
        integers = {
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "agents": self.agents,
            "morsels": self.morsels,
            "morsel_food": self.morsel_food,
            "sensing_radius": self.sensing_radius,
            "memory_span": self.memory_span,
            "workers": self.workers,
        }
        for name, value in integers.items():
            if not _is_int(value):
                msg = f"{name} must be an integer, got {value!r}"
                raise ConfigurationError(msg)

        reals = {
            "evaporation_rate": self.evaporation_rate,
            "deposit_amount": self.deposit_amount,
            "deposit_decrease": self.deposit_decrease,
            "reinforcement_ratio": self.reinforcement_ratio,
            "max_concentration": self.max_concentration,
            "trace_threshold": self.trace_threshold,
        }
        for name, value in reals.items():
            if not (_is_int(value) or isinstance(value, float)):
                msg = f"{name} must be a number, got {value!r}"
                raise ConfigurationError(msg)

        if self.seed < 0:
            msg = f"seed must be >= 0, got {self.seed}"
            raise ConfigurationError(msg)
        if self.width <= 0 or self.height <= 0:
            msg = f"grid must be non-empty, got {self.width}x{self.height}"
            raise ConfigurationError(msg)
        if self.agents <= 0:
            msg = f"need at least one agent, got {self.agents}"
            raise ConfigurationError(msg)

        non_negative = {
            "morsels": self.morsels,
            "morsel_food": self.morsel_food,
            "sensing_radius": self.sensing_radius,
            "memory_span": self.memory_span,
            "evaporation_rate": self.evaporation_rate,
            "deposit_amount": self.deposit_amount,
            "deposit_decrease": self.deposit_decrease,
            "reinforcement_ratio": self.reinforcement_ratio,
            "trace_threshold": self.trace_threshold,
        }
        for name, value in non_negative.items():
            if value < 0:
                msg = f"{name} must be >= 0, got {value}"
                raise ConfigurationError(msg)

        if self.decay_law is DecayLaw.MULTIPLICATIVE and self.evaporation_rate > 1:
            msg = f"evaporation_rate must be <= 1, got {self.evaporation_rate}"
            raise ConfigurationError(msg)
        if self.max_concentration <= 0:
            msg = f"max_concentration must be > 0, got {self.max_concentration}"
            raise ConfigurationError(msg)
        if self.workers < 1:
            msg = f"workers must be >= 1, got {self.workers}"
            raise ConfigurationError(msg)

        for name, (x, y) in [("nest", self.nest_position)] + [
            ("morsel", p) for p in self.morsel_positions
        ]:
            if not (0 <= x < self.width and 0 <= y < self.height):
                msg = f"{name} ({x}, {y}) outside {self.width}x{self.height} grid"
                raise ConfigurationError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load and validate configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ConfigurationError: If a key is unknown or a value is invalid.
        """
        path = Path(path)
        with path.open("r") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            msg = f"{path}: expected a mapping at the top level"
            raise ConfigurationError(msg)

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"{path}: unknown option(s) {', '.join(unknown)}"
            raise ConfigurationError(msg)

        config = cls(**data)
        config.validate()
        if (
            "morsels" in data
            and config.morsel_positions
            and config.morsels != len(config.morsel_positions)
        ):
            logger.warning(
                "%s: morsels=%d ignored, %d morsel_positions given",
                path,
                config.morsels,
                len(config.morsel_positions),
            )
        return config


def _is_int(value: Any) -> bool:
    """True for real integers; ``bool`` does not count."""
    return isinstance(value, int) and not isinstance(value, bool)


def _pair(value: Any, name: str) -> tuple[int, int]:
    """Coerce a YAML list or tuple into an ``(x, y)`` pair."""
    try:
        x, y = value
        return int(x), int(y)
    except (TypeError, ValueError) as exc:
        msg = f"{name} entries must be (x, y) pairs, got {value!r}"
        raise ConfigurationError(msg) from exc
