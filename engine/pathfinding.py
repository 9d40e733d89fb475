"""Breadth-first shortest paths on the 4-connected board."""
from collections import deque
from typing import AbstractSet, Dict, List, Optional
from .grid import neighbors, tile_key, within_bounds
from .model import GRID_COLS, GRID_ROWS, Tile

def find_path(start: Tile, goal: Tile, blocked: AbstractSet[str] = frozenset(),
              rows: int = GRID_ROWS, cols: int = GRID_COLS) -> Optional[List[Tile]]:
    """
    Shortest path from start to goal, both ends included.
    blocked holds tile keys that are never entered; start itself is not checked.
    Returns None if goal is off the board or unreachable.
    """
    if not within_bounds(goal.row, goal.col, rows, cols):
        return None

    queue = deque([start])
    visited = {tile_key(start)}
    parents: Dict[str, Tile] = {}

    while queue:
        current = queue.popleft()
        if current == goal:
            path = [current]
            parent = parents.get(tile_key(current))
            while parent is not None:
                path.append(parent)
                parent = parents.get(tile_key(parent))
            path.reverse()
            return path

        for nxt in neighbors(current, rows, cols):
            key = tile_key(nxt)
            if key in blocked or key in visited:
                continue
            visited.add(key)
            parents[key] = current
            queue.append(nxt)

    return None
