"""Snapshot — read-only views of every entity, for drawing and inspection.

The set of entity kinds is closed: a view is exactly one of
``NestView``, ``MorselView``, ``AntView`` or ``TraceView``.  Consumers
dispatch with ``match`` over these classes.
"""

from __future__ import annotations

from dataclasses import dataclass

from formicarium.colony.ant import Task
from formicarium.pheromones.fields import TraceKind
from formicarium.world.grid import Position


@dataclass(frozen=True)
class NestView:
    """The nest and the food delivered so far."""

    position: Position
    accumulated: int


@dataclass(frozen=True)
class MorselView:
    """A morsel that still holds food."""

    position: Position
    remaining: int


@dataclass(frozen=True)
class AntView:
    """An ant and what it is doing."""

    entity_id: int
    position: Position
    task: Task


@dataclass(frozen=True)
class TraceView:
    """One trace cell (possibly evaporated down to zero)."""

    position: Position
    kind: TraceKind
    concentration: float


EntityView = NestView | MorselView | AntView | TraceView
