"""Tests for formicarium.pheromones — trace field and evaporation."""

import numpy as np
import pytest

from formicarium.pheromones.evaporation import DecayLaw, evaporate
from formicarium.pheromones.fields import TraceField, TraceKind
from formicarium.world.grid import Position


class TestTraceField:
    """Tests for TraceField setup and basic operations."""

    def test_all_layers_created(self, small_trace_field: TraceField) -> None:
        for kind in TraceKind:
            assert kind in small_trace_field.layers

    def test_initial_concentrations_zero(
        self,
        small_trace_field: TraceField,
    ) -> None:
        for layer in small_trace_field.layers.values():
            assert np.all(layer.grid == 0.0)
        assert list(small_trace_field.cells()) == []

    def test_deposit_and_read(self, small_trace_field: TraceField) -> None:
        small_trace_field.deposit(Position(3, 4), TraceKind.HOME_BOUND, 1.5)
        assert small_trace_field.concentration_at(
            Position(3, 4),
            TraceKind.HOME_BOUND,
        ) == 1.5
        # The other kind is untouched
        assert small_trace_field.concentration_at(
            Position(3, 4),
            TraceKind.FOOD_BOUND,
        ) == 0.0

    def test_deposit_accumulates(self, small_trace_field: TraceField) -> None:
        small_trace_field.deposit(Position(1, 1), TraceKind.FOOD_BOUND, 1.0)
        small_trace_field.deposit(Position(1, 1), TraceKind.FOOD_BOUND, 0.5)
        assert small_trace_field.concentration_at(
            Position(1, 1),
            TraceKind.FOOD_BOUND,
        ) == 1.5

    def test_deposit_capped(self) -> None:
        field = TraceField(width=4, height=4, max_concentration=2.0)
        for _ in range(5):
            field.deposit(Position(0, 0), TraceKind.HOME_BOUND, 0.9)
        assert field.concentration_at(Position(0, 0), TraceKind.HOME_BOUND) == 2.0

    def test_layer_indexed_y_x(self, small_trace_field: TraceField) -> None:
        small_trace_field.deposit(Position(2, 5), TraceKind.HOME_BOUND, 1.0)
        assert small_trace_field.layer(TraceKind.HOME_BOUND)[5, 2] == 1.0

    def test_cells_lists_touched_cells(self, small_trace_field: TraceField) -> None:
        small_trace_field.deposit(Position(2, 1), TraceKind.HOME_BOUND, 1.0)
        small_trace_field.deposit(Position(0, 3), TraceKind.FOOD_BOUND, 0.5)
        cells = list(small_trace_field.cells())
        assert (Position(2, 1), TraceKind.HOME_BOUND, 1.0) in cells
        assert (Position(0, 3), TraceKind.FOOD_BOUND, 0.5) in cells
        assert len(cells) == 2

    def test_cleared_cell_persists(self, small_trace_field: TraceField) -> None:
        small_trace_field.deposit(Position(2, 1), TraceKind.HOME_BOUND, 1.0)
        small_trace_field.clear(Position(2, 1), TraceKind.HOME_BOUND)
        assert list(small_trace_field.cells()) == [
            (Position(2, 1), TraceKind.HOME_BOUND, 0.0),
        ]

    def test_decay_all(self, small_trace_field: TraceField) -> None:
        small_trace_field.deposit(Position(1, 1), TraceKind.HOME_BOUND, 2.0)
        small_trace_field.deposit(Position(1, 1), TraceKind.FOOD_BOUND, 1.0)
        small_trace_field.decay_all(0.5)
        assert small_trace_field.concentration_at(
            Position(1, 1),
            TraceKind.HOME_BOUND,
        ) == pytest.approx(1.0)
        assert small_trace_field.concentration_at(
            Position(1, 1),
            TraceKind.FOOD_BOUND,
        ) == pytest.approx(0.5)

    def test_linear_decay_floors_at_zero(self) -> None:
        field = TraceField(width=4, height=4, decay_law=DecayLaw.LINEAR)
        field.deposit(Position(0, 0), TraceKind.FOOD_BOUND, 0.25)
        field.decay_all(0.1)
        assert field.concentration_at(
            Position(0, 0),
            TraceKind.FOOD_BOUND,
        ) == pytest.approx(0.15)
        for _ in range(5):
            field.decay_all(0.1)
        assert field.concentration_at(Position(0, 0), TraceKind.FOOD_BOUND) == 0.0


class TestEvaporation:
    """Tests for the evaporation laws."""

    def test_evaporation_reduces_concentration(self) -> None:
        grid = np.ones((4, 4), dtype=np.float64)
        evaporate(grid, 0.1)
        assert np.allclose(grid, 0.9)

    def test_zero_evaporation(self) -> None:
        grid = np.ones((4, 4), dtype=np.float64)
        evaporate(grid, 0.0)
        assert np.allclose(grid, 1.0)

    def test_full_evaporation(self) -> None:
        grid = np.full((4, 4), 3.0)
        evaporate(grid, 1.0)
        assert np.all(grid == 0.0)

    def test_linear_law(self) -> None:
        grid = np.array([[0.5, 2.0]])
        evaporate(grid, 1.0, DecayLaw.LINEAR)
        assert grid.tolist() == [[0.0, 1.0]]

    def test_never_negative(self) -> None:
        grid = np.array([[0.0, 1e-9, 5.0]])
        for _ in range(100):
            evaporate(grid, 0.3, DecayLaw.LINEAR)
            assert np.all(grid >= 0.0)
