"""Tile addressing and the mapping between tiles and presentation space.

Rows grow toward the viewer and columns grow to the right. In presentation
space the board lies on the x/z plane, centred on the origin, with y up.
"""
import math
from typing import Iterator, Optional, Tuple
from .model import GRID_COLS, GRID_ROWS, TILE_SIZE, Point, Tile

# Neighbour exploration order, shared by every search so results stay deterministic.
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))

def within_bounds(row: int, col: int, rows: int = GRID_ROWS, cols: int = GRID_COLS) -> bool:
    """True iff (row, col) lies on a rows x cols board."""
    return 0 <= row < rows and 0 <= col < cols

def tile_key(tile: Tile) -> str:
    """Canonical "row:col" identity used for visited and blocked sets."""
    return f"{tile.row}:{tile.col}"

def are_adjacent(a: Tile, b: Tile) -> bool:
    """4-adjacency: exactly one step along a row or a column."""
    return abs(a.row - b.row) + abs(a.col - b.col) == 1

def neighbors(tile: Tile, rows: int = GRID_ROWS, cols: int = GRID_COLS) -> Iterator[Tile]:
    """Yield in-bounds 4-neighbours of tile in DIRECTIONS order."""
    for dr, dc in DIRECTIONS:
        row, col = tile.row + dr, tile.col + dc
        if within_bounds(row, col, rows, cols):
            yield Tile(row, col)

def tile_to_world(tile: Tile, rows: int = GRID_ROWS, cols: int = GRID_COLS,
                  tile_size: float = TILE_SIZE) -> Point:
    """Centre of a tile in presentation space."""
    x = (tile.col - (cols - 1) / 2) * tile_size
    z = ((rows - 1) / 2 - tile.row) * tile_size
    return (x, 0.0, z)

def board_from_point(point: Point, rows: int = GRID_ROWS, cols: int = GRID_COLS,
                     tile_size: float = TILE_SIZE) -> Optional[Tile]:
    """Tile under a presentation-space point, or None when off the board.

    Exact inverse of tile_to_world for tile centres; y is ignored.
    """
    if not (math.isfinite(point[0]) and math.isfinite(point[2])):
        return None
    half_width = (cols * tile_size) / 2
    half_height = (rows * tile_size) / 2
    col = math.floor((point[0] + half_width) / tile_size)
    row = math.floor((half_height - point[2]) / tile_size)
    if not within_bounds(row, col, rows, cols):
        return None
    return Tile(row, col)
