"""Movement planning: plain moves, flanking approaches and per-turn step slices."""
from typing import List, Optional
from .grid import DIRECTIONS, are_adjacent, tile_key, within_bounds
from .model import GRID_COLS, GRID_ROWS, MOVE_RANGE, Tile
from .pathfinding import find_path

def compute_movement_path(start: Tile, target: Optional[Tile], enemy: Optional[Tile],
                          rows: int = GRID_ROWS, cols: int = GRID_COLS) -> Optional[List[Tile]]:
    """
    Path from start toward target with the enemy tile treated as impassable.

    When target is the enemy tile the path ends on the nearest reachable tile
    4-adjacent to it, and an empty list means the unit is already in melee reach.
    Returns None when nothing suitable can be reached.
    """
    if target is None:
        return None
    blocked = {tile_key(enemy)} if enemy is not None else set()

    if enemy is None or target != enemy:
        return find_path(start, target, blocked, rows, cols)

    if are_adjacent(start, enemy):
        return []

    best: Optional[List[Tile]] = None
    for dr, dc in DIRECTIONS:
        candidate = Tile(enemy.row + dr, enemy.col + dc)
        if not within_bounds(candidate.row, candidate.col, rows, cols):
            continue
        if candidate == start:
            return [start, candidate]
        if candidate == enemy:
            continue
        path = find_path(start, candidate, blocked, rows, cols)
        # strict comparison keeps the earliest direction on ties
        if path and (best is None or len(path) < len(best)):
            best = path
    return best

def step_slice(path: Optional[List[Tile]], move_range: int = MOVE_RANGE) -> List[Tile]:
    """Tiles actually traversed this turn: up to move_range tiles after the start."""
    if not path:
        return []
    return path[1:move_range + 1]
