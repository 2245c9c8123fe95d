"""Shared fixtures for the Formicarium test suite."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
import pytest
from numpy.random import Generator

from formicarium.colony.ant import WorldView
from formicarium.pheromones.fields import TraceField
from formicarium.simulation.config import SimulationConfig
from formicarium.world.grid import Grid
from formicarium.world.landmarks import Landmarks, Morsel, Nest


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_grid() -> Grid:
    """A small 8x8 grid for fast tests."""
    return Grid(width=8, height=8)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def small_trace_field() -> TraceField:
    """An 8x8 trace field for fast tests."""
    return TraceField(width=8, height=8)


@pytest.fixture
def adjacent_config() -> SimulationConfig:
    """5x5 grid, one ant, a one-unit morsel right next to the nest."""
    return SimulationConfig(
        seed=7,
        width=5,
        height=5,
        nest=(2, 2),
        agents=1,
        morsel_positions=[(3, 2)],
        morsel_food=1,
        sensing_radius=1,
    )


@pytest.fixture
def small_config() -> SimulationConfig:
    """10x10 grid with two morsels away from the nest and a few ants."""
    return SimulationConfig(
        seed=2024,
        width=10,
        height=10,
        nest=(5, 5),
        agents=5,
        morsel_positions=[(1, 1), (8, 2)],
        morsel_food=3,
    )


ViewFactory = Callable[..., WorldView]


@pytest.fixture
def make_view() -> ViewFactory:
    """Build a WorldView on an 8x8 grid with the nest at (6, 6).

    Keyword arguments:
        morsels: ``[(x, y, remaining), ...]`` to place.
        config: A SimulationConfig; defaults to an 8x8 config.
    """

    def factory(
        morsels: list[tuple[int, int, int]] | None = None,
        config: SimulationConfig | None = None,
    ) -> WorldView:
        config = config or SimulationConfig(width=8, height=8, nest=(6, 6))
        grid = Grid(width=config.width, height=config.height)
        nest_x, nest_y = config.nest_position
        landmarks = Landmarks(
            nest=Nest(entity_id=0, x=nest_x, y=nest_y),
            morsels=[
                Morsel(entity_id=1 + i, x=x, y=y, remaining=remaining)
                for i, (x, y, remaining) in enumerate(morsels or [])
            ],
        )
        landmarks.place(grid)
        traces = TraceField(
            width=config.width,
            height=config.height,
            max_concentration=config.max_concentration,
            decay_law=config.decay_law,
        )
        return WorldView(grid=grid, traces=traces, landmarks=landmarks, config=config)

    return factory
