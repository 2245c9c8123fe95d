"""Simulation — the main generation loop.

Owns all top-level simulation state and advances it in the canonical
generation order:

1. Decide: every ant picks a move and a deposit from the state at the
   start of the generation.  Nothing is written yet, so no ant sees
   another ant's move from the same generation.
2. Apply: trail suppressions, deposits, moves, then landmark contact
   (pick-ups and deliveries), in ant order.
3. Decay: one evaporation pass over the whole trace field.
4. Bookkeeping: bump the generation counter, check for termination.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from formicarium.colony.ant import Ant, Intent, WorldView
from formicarium.pheromones.fields import TraceField
from formicarium.simulation.config import SimulationConfig
from formicarium.simulation.errors import SimulationOverError
from formicarium.simulation.snapshot import (
    AntView,
    EntityView,
    MorselView,
    NestView,
    TraceView,
)
from formicarium.world.grid import Grid
from formicarium.world.landmarks import Landmarks, Morsel, Nest

logger = logging.getLogger(__name__)


@dataclass
class Simulation:
    """Drives the simulation forward generation by generation.

    The engine has no built-in generation ceiling: if food is unreachable
    it runs forever, and callers are expected to impose their own limit.

    Attributes:
        config: Validated simulation configuration.
        grid: Positional index of every entity.
        traces: Home-bound and food-bound trace layers.
        landmarks: The nest and the morsels.
        ants: The fixed ant population, in decision order.
        total_food: Food stored in all morsels at construction.
    """

    config: SimulationConfig
    grid: Grid = field(init=False)
    traces: TraceField = field(init=False)
    landmarks: Landmarks = field(init=False)
    ants: list[Ant] = field(init=False, default_factory=list)
    total_food: int = field(init=False, default=0)
    _generation: int = field(init=False, default=0)
    _rngs: list[Generator] = field(init=False, repr=False)
    _view: WorldView = field(init=False, repr=False)
    _executor: ThreadPoolExecutor | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        """Build grid, landmarks, ants, trace field and RNGs from config.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        cfg = self.config
        cfg.validate()

        # One child stream for placement, one per ant: draws never depend
        # on the order ants are processed in.
        placement_seq, *ant_seqs = np.random.SeedSequence(cfg.seed).spawn(
            1 + cfg.agents,
        )
        placement_rng = np.random.default_rng(placement_seq)

        self.grid = Grid(width=cfg.width, height=cfg.height)
        nest_x, nest_y = cfg.nest_position
        nest = Nest(entity_id=0, x=nest_x, y=nest_y)

        morsels = [
            Morsel(entity_id=1 + i, x=x, y=y, remaining=cfg.morsel_food)
            for i, (x, y) in enumerate(self._morsel_positions(placement_rng))
        ]
        self.landmarks = Landmarks(nest=nest, morsels=morsels)
        self.landmarks.place(self.grid)
        self.total_food = self.landmarks.total_remaining

        first_ant_id = 1 + len(morsels)
        for i in range(cfg.agents):
            ant = Ant.at_nest(first_ant_id + i, nest, cfg.memory_span)
            self.grid.place(ant.entity_id, ant.position)
            self.ants.append(ant)
        self._rngs = [np.random.default_rng(seq) for seq in ant_seqs]

        self.traces = TraceField(
            width=cfg.width,
            height=cfg.height,
            max_concentration=cfg.max_concentration,
            decay_law=cfg.decay_law,
        )
        self._view = WorldView(
            grid=self.grid,
            traces=self.traces,
            landmarks=self.landmarks,
            config=cfg,
        )
        logger.info(
            "Simulation ready: %dx%d grid, %d ants, %d morsels, %d food",
            cfg.width,
            cfg.height,
            cfg.agents,
            len(morsels),
            self.total_food,
        )

    def _morsel_positions(self, rng: Generator) -> list[tuple[int, int]]:
        """Return configured morsel positions, or scatter them at random."""
        cfg = self.config
        if cfg.morsel_positions:
            return list(cfg.morsel_positions)
        return [
            (int(rng.integers(0, cfg.width)), int(rng.integers(0, cfg.height)))
            for _ in range(cfg.morsels)
        ]

    # -- Queries --

    @property
    def generation(self) -> int:
        """Return the number of completed generations."""
        return self._generation

    @property
    def nest(self) -> Nest:
        """Return the colony nest."""
        return self.landmarks.nest

    @property
    def morsels(self) -> list[Morsel]:
        """Return every morsel, depleted ones included."""
        return self.landmarks.morsels

    def food_in_transit(self) -> int:
        """Return the number of food units currently carried by ants."""
        return sum(1 for ant in self.ants if ant.is_carrying)

    def is_simulation_over(self) -> bool:
        """Return True once every unit of food has reached the nest."""
        return self.landmarks.total_remaining == 0 and self.food_in_transit() == 0

    def entities(self) -> Iterator[EntityView]:
        """Yield read-only views of the nest, live morsels, ants and traces."""
        nest = self.landmarks.nest
        yield NestView(position=nest.position, accumulated=nest.accumulated)
        for morsel in self.landmarks.morsels:
            if not morsel.is_depleted:
                yield MorselView(position=morsel.position, remaining=morsel.remaining)
        for ant in self.ants:
            yield AntView(entity_id=ant.entity_id, position=ant.position, task=ant.task)
        for position, kind, value in self.traces.cells():
            yield TraceView(position=position, kind=kind, concentration=value)

    # -- Stepping --

    def nextgen(self) -> int:
        """Advance the simulation by exactly one generation.

        Returns:
            The new generation counter.

        Raises:
            SimulationOverError: If the simulation had already ended.
        """
        if self.is_simulation_over():
            msg = f"simulation already over after {self._generation} generations"
            raise SimulationOverError(msg)

        intents = self._decide()
        self._apply(intents)
        self.traces.decay_all(self.config.evaporation_rate)

        self._generation += 1
        if self.is_simulation_over():
            logger.info(
                "Simulation over after %d generations (%d/%d food collected)",
                self._generation,
                self.nest.accumulated,
                self.total_food,
            )
        return self._generation

    def run(self, max_generations: int | None = None) -> int:
        """Advance until the simulation is over or a ceiling is reached.

        Args:
            max_generations: Caller-imposed limit on the generation
                counter; None means no limit.

        Returns:
            The generation counter when the loop stopped.
        """
        while not self.is_simulation_over():
            if max_generations is not None and self._generation >= max_generations:
                break
            self.nextgen()
        return self._generation

    def close(self) -> None:
        """Shut down the decision thread pool, if one was started."""
        if self._executor is not None:
            self._executor.shutdown()
            self._executor = None

    def __enter__(self) -> Simulation:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _decide(self) -> list[Intent]:
        """Collect every ant's intent from the unchanged world state."""
        pairs = list(zip(self.ants, self._rngs, strict=True))
        if self.config.workers == 1:
            return [ant.decide(self._view, rng) for ant, rng in pairs]

        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.workers,
                thread_name_prefix="formicarium-decide",
            )
        return list(
            self._executor.map(lambda pair: pair[0].decide(self._view, pair[1]), pairs),
        )

    def _apply(self, intents: list[Intent]) -> None:
        """Write every intent back to the world.

        Suppressions go first so they never erase trace laid in the same
        generation.  Deposits are additive, so their order is irrelevant.
        Landmark contact is resolved in ant order: when two ants reach a
        morsel holding one unit, the first one in the list takes it.
        """
        for intent in intents:
            if intent.suppress is not None:
                self.traces.clear(*intent.suppress)

        for intent in intents:
            if intent.deposit is not None:
                deposit = intent.deposit
                self.traces.deposit(deposit.position, deposit.kind, deposit.amount)

        for ant, intent in zip(self.ants, intents, strict=True):
            ant.advance(self.grid.move(ant.entity_id, intent.destination))
            pickups, deliveries = ant.pickups, ant.deliveries
            ant.assess(self.landmarks.at(self.grid, ant.position))
            if ant.pickups != pickups:
                logger.debug(
                    "gen %d: ant %d picked up food at %s",
                    self._generation,
                    ant.entity_id,
                    ant.position,
                )
            if ant.deliveries != deliveries:
                logger.debug(
                    "gen %d: ant %d delivered food (%d/%d)",
                    self._generation,
                    ant.entity_id,
                    self.nest.accumulated,
                    self.total_food,
                )
