"""Tests for tile addressing and presentation-space mapping."""
import math
import pytest
from engine.grid import (are_adjacent, board_from_point, neighbors, tile_key,
                         tile_to_world, within_bounds)
from engine.model import GRID_COLS, GRID_ROWS, TILE_SIZE, Tile


def test_within_bounds():
    assert within_bounds(0, 0)
    assert within_bounds(GRID_ROWS - 1, GRID_COLS - 1)
    assert not within_bounds(-1, 0)
    assert not within_bounds(0, -1)
    assert not within_bounds(GRID_ROWS, 0)
    assert not within_bounds(0, GRID_COLS)


def test_tile_key_is_structural():
    """Equal tiles share a key regardless of identity."""
    assert tile_key(Tile(3, 7)) == "3:7"
    assert tile_key(Tile(3, 7)) == tile_key(Tile(3, 7))


def test_adjacency():
    assert are_adjacent(Tile(0, 0), Tile(0, 1))
    assert are_adjacent(Tile(4, 4), Tile(5, 4))
    assert not are_adjacent(Tile(0, 0), Tile(1, 1))
    assert not are_adjacent(Tile(2, 2), Tile(2, 2))


def test_neighbors_order_and_bounds():
    """Neighbours follow +row, -row, +col, -col and stay on the board."""
    assert list(neighbors(Tile(4, 4))) == [Tile(5, 4), Tile(3, 4), Tile(4, 5), Tile(4, 3)]
    assert list(neighbors(Tile(0, 0))) == [Tile(1, 0), Tile(0, 1)]


def test_board_from_point_corners():
    """Canvas hit points map to board coordinates."""
    half_width = (GRID_COLS * TILE_SIZE) / 2
    half_height = (GRID_ROWS * TILE_SIZE) / 2

    assert board_from_point((-half_width, 0.0, half_height)) == Tile(0, 0)
    assert board_from_point((half_width - 0.01, 0.0, -half_height + 0.01)) == Tile(GRID_ROWS - 1, GRID_COLS - 1)
    assert board_from_point((half_width + 1, 0.0, 0.0)) is None
    assert board_from_point((0.0, 0.0, half_height + 0.5)) is None


def test_tile_to_world_is_point_symmetric():
    world = tile_to_world(Tile(0, 0))
    mirrored = tile_to_world(Tile(GRID_ROWS - 1, GRID_COLS - 1))

    assert world[1] == 0
    assert mirrored[0] == pytest.approx(-world[0])
    assert mirrored[2] == pytest.approx(-world[2])


def test_rows_move_toward_viewer():
    """Increasing row decreases z; increasing col increases x."""
    assert tile_to_world(Tile(5, 5))[2] < tile_to_world(Tile(4, 5))[2]
    assert tile_to_world(Tile(4, 6))[0] > tile_to_world(Tile(4, 5))[0]


@pytest.mark.parametrize("rows,cols,tile_size", [(10, 10, 1.0), (6, 9, 1.0), (7, 4, 2.5)])
def test_board_from_point_inverts_tile_to_world(rows, cols, tile_size):
    for row in range(rows):
        for col in range(cols):
            tile = Tile(row, col)
            point = tile_to_world(tile, rows, cols, tile_size)
            assert board_from_point(point, rows, cols, tile_size) == tile


@pytest.mark.parametrize("point", [
    (math.inf, 0.0, 0.0),
    (-math.inf, 0.0, 0.0),
    (0.0, 0.0, math.inf),
    (math.nan, 0.0, 0.0),
    (0.0, 0.0, math.nan),
])
def test_board_from_point_non_finite_is_off_board(point):
    assert board_from_point(point) is None
