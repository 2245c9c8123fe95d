"""Tests for formicarium.world.grid and formicarium.world.landmarks."""

import pytest

from formicarium.world.grid import Grid, Position, chebyshev, step_towards
from formicarium.world.landmarks import Landmarks, Morsel, Nest


class TestGrid:
    """Tests for the Grid positional index."""

    def test_dimensions(self, small_grid: Grid) -> None:
        assert small_grid.width == 8
        assert small_grid.height == 8

    def test_contains(self, small_grid: Grid) -> None:
        assert small_grid.contains(Position(0, 0))
        assert small_grid.contains(Position(7, 7))
        assert not small_grid.contains(Position(8, 0))
        assert not small_grid.contains(Position(0, -1))

    def test_clamp(self, small_grid: Grid) -> None:
        assert small_grid.clamp(Position(-3, 9)) == Position(0, 7)
        assert small_grid.clamp(Position(4, 5)) == Position(4, 5)

    def test_place_and_lookup(self, small_grid: Grid) -> None:
        small_grid.place(1, Position(3, 5))
        small_grid.place(2, Position(3, 5))
        assert small_grid.position_of(1) == Position(3, 5)
        assert small_grid.occupants_at(Position(3, 5)) == {1, 2}
        assert small_grid.occupants_at(Position(0, 0)) == frozenset()

    def test_place_out_of_bounds(self, small_grid: Grid) -> None:
        with pytest.raises(IndexError):
            small_grid.place(1, Position(8, 0))

    def test_place_twice(self, small_grid: Grid) -> None:
        small_grid.place(1, Position(0, 0))
        with pytest.raises(KeyError):
            small_grid.place(1, Position(1, 1))

    def test_move_updates_occupancy(self, small_grid: Grid) -> None:
        small_grid.place(1, Position(3, 3))
        small_grid.move(1, Position(4, 3))
        assert small_grid.position_of(1) == Position(4, 3)
        assert 1 in small_grid.occupants_at(Position(4, 3))
        assert 1 not in small_grid.occupants_at(Position(3, 3))

    def test_move_clamps(self, small_grid: Grid) -> None:
        small_grid.place(1, Position(7, 0))
        assert small_grid.move(1, Position(8, -1)) == Position(7, 0)
        assert small_grid.position_of(1) == Position(7, 0)

    def test_neighborhood_center(self, small_grid: Grid) -> None:
        cells = small_grid.neighborhood(Position(3, 3), 1)
        assert len(cells) == 9
        assert Position(3, 3) in cells

    def test_neighborhood_without_center(self, small_grid: Grid) -> None:
        cells = small_grid.neighborhood(Position(3, 3), 1, include_center=False)
        assert len(cells) == 8
        assert Position(3, 3) not in cells

    def test_neighborhood_corner_clipped(self, small_grid: Grid) -> None:
        # Top-left corner: 3 neighbours plus the cell itself
        assert len(small_grid.neighborhood(Position(0, 0), 1)) == 4
        assert len(
            small_grid.neighborhood(Position(0, 0), 1, include_center=False),
        ) == 3

    def test_neighborhood_radius_two(self, small_grid: Grid) -> None:
        cells = small_grid.neighborhood(Position(4, 4), 2)
        assert len(cells) == 25
        assert all(chebyshev(Position(4, 4), c) <= 2 for c in cells)

    def test_neighborhood_zero_and_negative_radius(self, small_grid: Grid) -> None:
        assert small_grid.neighborhood(Position(2, 2), 0) == [Position(2, 2)]
        assert small_grid.neighborhood(Position(2, 2), -4) == [Position(2, 2)]

    def test_neighborhood_huge_radius_clips(self, small_grid: Grid) -> None:
        assert len(small_grid.neighborhood(Position(2, 2), 100)) == 64

    def test_neighborhood_row_major(self, small_grid: Grid) -> None:
        cells = small_grid.neighborhood(Position(1, 1), 1)
        assert cells[0] == Position(0, 0)
        assert cells[1] == Position(1, 0)
        assert cells[-1] == Position(2, 2)


class TestGeometry:
    """Tests for the distance and step helpers."""

    def test_chebyshev(self) -> None:
        assert chebyshev(Position(0, 0), Position(3, 1)) == 3
        assert chebyshev(Position(2, 2), Position(2, 2)) == 0

    def test_step_towards_diagonal(self) -> None:
        assert step_towards(Position(0, 0), Position(5, 3)) == Position(1, 1)

    def test_step_towards_straight(self) -> None:
        assert step_towards(Position(4, 4), Position(4, 0)) == Position(4, 3)

    def test_step_towards_self(self) -> None:
        assert step_towards(Position(4, 4), Position(4, 4)) == Position(4, 4)


class TestLandmarks:
    """Tests for Nest, Morsel and the Landmarks index."""

    def test_nest_store(self) -> None:
        nest = Nest(entity_id=0, x=1, y=1)
        nest.store()
        nest.store()
        assert nest.accumulated == 2

    def test_morsel_take(self) -> None:
        morsel = Morsel(entity_id=1, x=0, y=0, remaining=2)
        assert morsel.take()
        assert morsel.take()
        assert morsel.is_depleted
        assert not morsel.take()
        assert morsel.remaining == 0

    def test_at_finds_landmarks(self, small_grid: Grid) -> None:
        nest = Nest(entity_id=0, x=2, y=2)
        morsel = Morsel(entity_id=1, x=5, y=5, remaining=3)
        landmarks = Landmarks(nest=nest, morsels=[morsel])
        landmarks.place(small_grid)
        small_grid.place(9, Position(5, 5))  # an ant on the morsel

        assert landmarks.at(small_grid, Position(2, 2)) == [nest]
        assert landmarks.at(small_grid, Position(5, 5)) == [morsel]
        assert landmarks.at(small_grid, Position(0, 0)) == []
        assert landmarks.get(9) is None

    def test_total_remaining(self) -> None:
        landmarks = Landmarks(
            nest=Nest(entity_id=0, x=0, y=0),
            morsels=[
                Morsel(entity_id=1, x=1, y=1, remaining=3),
                Morsel(entity_id=2, x=2, y=2, remaining=4),
            ],
        )
        assert landmarks.total_remaining == 7
