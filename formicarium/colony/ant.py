"""Ant -- individual forager with local, trace-driven decision-making.

Ants never talk to each other.  Each one reads the trace field around
it, picks a single step, and lays trace behind it; every interaction is
mediated by the field.

Key movement model:

- **Landmark first**: an ant that can sense its goal (a morsel with food
  while foraging, the nest while carrying) heads straight for it.
- **Trail following**: otherwise it climbs the trace that leads to its
  goal -- food-bound trace while foraging, home-bound trace while
  carrying -- skipping cells it remembers visiting.
- **Fallback**: with no usable signal, carrying ants home in on the nest
  with jitter that shrinks as they get closer; foraging ants take a
  random step, or head home too once their own trail has run dry.

Deciding is side-effect free: ``decide`` returns an ``Intent`` and the
simulation applies every intent of a generation together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from formicarium.colony.memory import LocationMemory
from formicarium.colony.reinforcement import deposit_strength
from formicarium.pheromones.fields import TraceKind
from formicarium.world.grid import Position, chebyshev, step_towards
from formicarium.world.landmarks import Morsel, Nest

if TYPE_CHECKING:
    from numpy.random import Generator

    from formicarium.pheromones.fields import TraceField
    from formicarium.simulation.config import SimulationConfig
    from formicarium.world.grid import Grid
    from formicarium.world.landmarks import Landmarks


class Task(Enum):
    """What an ant is currently trying to reach."""

    FORAGING = auto()
    CARRYING = auto()

    @property
    def laid_trace(self) -> TraceKind:
        """Trace left behind: the way back to where the ant came from."""
        match self:
            case Task.FORAGING:
                return TraceKind.HOME_BOUND
            case Task.CARRYING:
                return TraceKind.FOOD_BOUND

    @property
    def followed_trace(self) -> TraceKind:
        """Trace that leads toward the current goal."""
        match self:
            case Task.FORAGING:
                return TraceKind.FOOD_BOUND
            case Task.CARRYING:
                return TraceKind.HOME_BOUND


@dataclass(frozen=True)
class Deposit:
    """A pending trace deposit."""

    position: Position
    kind: TraceKind
    amount: float


@dataclass(frozen=True)
class Intent:
    """Everything one ant wants to do in a generation.

    Attributes:
        entity_id: Grid id of the ant.
        origin: Where the ant stands when deciding.
        destination: The in-bounds cell it steps to (may equal origin).
        deposit: Trace laid at ``origin``, if any.
        suppress: A misleading trace cell to clear, if any.
    """

    entity_id: int
    origin: Position
    destination: Position
    deposit: Deposit | None = None
    suppress: tuple[Position, TraceKind] | None = None


@dataclass(frozen=True)
class WorldView:
    """Read-only bundle of the state an ant senses while deciding."""

    grid: Grid
    traces: TraceField
    landmarks: Landmarks
    config: SimulationConfig


@dataclass
class Ant:
    """A single forager.

    Attributes:
        entity_id: Grid id of the ant.
        x: Current column position.
        y: Current row position.
        nest_x: Column of the nest (the ant always knows its way home).
        nest_y: Row of the nest.
        memory: Recently visited positions.
        task: Current goal.
        steps: Moves since the ant last touched a landmark.
        pickups: Units of food taken from morsels.
        deliveries: Units of food dropped at the nest.
    """

    entity_id: int
    x: int
    y: int
    nest_x: int
    nest_y: int
    memory: LocationMemory = field(default_factory=lambda: LocationMemory(0))
    task: Task = Task.FORAGING
    steps: int = 0
    pickups: int = 0
    deliveries: int = 0

    @classmethod
    def at_nest(cls, entity_id: int, nest: Nest, memory_span: int) -> Ant:
        """Create a foraging ant standing on the nest.

        Args:
            entity_id: Grid id for the new ant.
            nest: The colony nest.
            memory_span: Capacity of the ant's location memory.

        Returns:
            A new Ant with empty memory.
        """
        return cls(
            entity_id=entity_id,
            x=nest.x,
            y=nest.y,
            nest_x=nest.x,
            nest_y=nest.y,
            memory=LocationMemory(memory_span),
        )

    @property
    def position(self) -> Position:
        """Return the current position."""
        return Position(self.x, self.y)

    @property
    def nest_position(self) -> Position:
        """Return the nest position."""
        return Position(self.nest_x, self.nest_y)

    @property
    def is_carrying(self) -> bool:
        """Return True if the ant holds a unit of food."""
        return self.task is Task.CARRYING

    # -- Decision phase --

    def decide(self, view: WorldView, rng: Generator) -> Intent:
        """Choose this generation's step and trace without mutating anything.

        Decision order:

        1. A target landmark in sensing range is the destination.
        2. Otherwise the strongest followed trace in range, ignoring
           remembered cells.
        3. Otherwise head for the nest (carrying or lost) or take a
           random step (foraging).

        The ant then moves one Moore step toward the destination.

        Args:
            view: Start-of-generation world state.
            rng: This ant's own seeded generator.

        Returns:
            The ant's intent for the apply phase.
        """
        origin = self.position
        destination = self._landmark_destination(view, rng)
        landmark_in_range = destination is not None

        if destination is None:
            destination = self._trail_destination(view, rng)
        if destination is None:
            if self.task is Task.CARRYING or self._is_lost(view):
                destination = self._nest_destination(view, rng)
            else:
                destination = self._random_destination(view, rng)

        suppress = None
        if view.config.suppress_misleading_trails and not landmark_in_range:
            suppress = self._misleading_trace(view)

        return Intent(
            entity_id=self.entity_id,
            origin=origin,
            destination=view.grid.clamp(step_towards(origin, destination)),
            deposit=self._deposit(view),
            suppress=suppress,
        )

    def _landmark_destination(
        self,
        view: WorldView,
        rng: Generator,
    ) -> Position | None:
        """Return the nearest goal landmark in sensing range, if any."""
        found: list[Position] = []
        for position in view.grid.neighborhood(
            self.position,
            view.config.sensing_radius,
        ):
            for landmark in view.landmarks.at(view.grid, position):
                if self._is_goal(landmark):
                    found.append(position)
                    break
        if not found:
            return None

        nearest = min(chebyshev(self.position, p) for p in found)
        closest = [p for p in found if chebyshev(self.position, p) == nearest]
        return _pick(closest, rng)

    def _is_goal(self, landmark: Nest | Morsel) -> bool:
        match landmark:
            case Nest():
                return self.task is Task.CARRYING
            case Morsel():
                return self.task is Task.FORAGING and not landmark.is_depleted

    def _trail_destination(
        self,
        view: WorldView,
        rng: Generator,
    ) -> Position | None:
        """Return the unvisited cell with the most followed trace, if any.

        Returns None if every candidate is at or below the negligible
        trace threshold.
        """
        kind = self.task.followed_trace
        best_value = view.config.trace_threshold
        best: list[Position] = []
        for position in view.grid.neighborhood(
            self.position,
            view.config.sensing_radius,
            include_center=False,
        ):
            if position in self.memory:
                continue
            value = view.traces.concentration_at(position, kind)
            if value > best_value:
                best_value = value
                best = [position]
            elif value == best_value and best:
                best.append(position)
        if not best:
            return None
        return _pick(best, rng)

    def _is_lost(self, view: WorldView) -> bool:
        """True if the ant can no longer lay trace and stands on none."""
        cfg = view.config
        strength = deposit_strength(
            cfg.deposit_law,
            cfg.deposit_amount,
            self.steps,
            cfg.deposit_decrease,
        )
        if strength > 0:
            return False
        return all(
            view.traces.concentration_at(self.position, kind) <= cfg.trace_threshold
            for kind in TraceKind
        )

    def _nest_destination(self, view: WorldView, rng: Generator) -> Position:
        """Aim at a point near the nest; the aim sharpens as the ant closes in.

        The jitter radius is drawn from ``[0, distance)`` so the ant always
        aims somewhere closer to the nest than itself.
        """
        nest = self.nest_position
        distance = chebyshev(self.position, nest)
        if distance == 0:
            return nest
        radius = int(rng.integers(0, distance))
        if radius == 0:
            return nest
        ring = [
            Position(nest.x + dx, nest.y + dy)
            for dy in range(-radius, radius + 1)
            for dx in range(-radius, radius + 1)
            if max(abs(dx), abs(dy)) == radius
        ]
        return view.grid.clamp(ring[int(rng.integers(len(ring)))])

    def _random_destination(self, view: WorldView, rng: Generator) -> Position:
        """Pick a random adjacent cell, preferring ones not in memory."""
        neighbours = view.grid.neighborhood(self.position, 1, include_center=False)
        if not neighbours:
            return self.position
        order = rng.permutation(len(neighbours))
        for index in order:
            candidate = neighbours[int(index)]
            if candidate not in self.memory:
                return candidate
        return neighbours[int(order[0])]

    def _deposit(self, view: WorldView) -> Deposit | None:
        """Trace laid at the current cell before stepping away.

        Foraging ants strengthen home-bound trace that is already there,
        so well-used paths back to the nest keep growing.
        """
        cfg = view.config
        kind = self.task.laid_trace
        amount = deposit_strength(
            cfg.deposit_law,
            cfg.deposit_amount,
            self.steps,
            cfg.deposit_decrease,
        )
        if self.task is Task.FORAGING:
            existing = view.traces.concentration_at(self.position, kind)
            if existing > 0:
                amount += existing * cfg.reinforcement_ratio
        if amount <= 0:
            return None
        return Deposit(position=self.position, kind=kind, amount=amount)

    def _misleading_trace(self, view: WorldView) -> tuple[Position, TraceKind] | None:
        """Flag the current cell if it is a dead-end peak of followed trace.

        With no goal in sight, standing on more trace than any neighbour
        means the trail leads nowhere.
        """
        kind = self.task.followed_trace
        here = view.traces.concentration_at(self.position, kind)
        if here <= 0:
            return None
        around = [
            view.traces.concentration_at(p, kind)
            for p in view.grid.neighborhood(
                self.position,
                view.config.sensing_radius,
                include_center=False,
            )
        ]
        if here > max(around, default=0.0):
            return self.position, kind
        return None

    # -- Apply phase --

    def advance(self, destination: Position) -> None:
        """Remember the current cell, then move to ``destination``."""
        self.memory.insert(self.position)
        self.x, self.y = destination
        self.steps += 1

    def assess(self, landmarks: list[Nest | Morsel]) -> None:
        """React to the landmarks under the ant, nest first.

        A carrying ant on the nest drops its food; a foraging ant on a
        morsel with food takes one unit.  Either switch clears memory.
        Touching the nest or a morsel with food restarts the trail at full
        strength; a depleted morsel is no longer a landmark.
        """
        for landmark in sorted(landmarks, key=lambda lm: not isinstance(lm, Nest)):
            match landmark:
                case Nest():
                    if self.task is Task.CARRYING:
                        landmark.store()
                        self.deliveries += 1
                        self._switch(Task.FORAGING)
                case Morsel():
                    if landmark.is_depleted:
                        continue
                    if self.task is Task.FORAGING and landmark.take():
                        self.pickups += 1
                        self._switch(Task.CARRYING)
            self.steps = 0

    def _switch(self, task: Task) -> None:
        self.task = task
        self.memory.clear()


def _pick(positions: list[Position], rng: Generator) -> Position:
    """Return the only candidate, or draw one to break a tie."""
    if len(positions) == 1:
        return positions[0]
    return positions[int(rng.integers(len(positions)))]
