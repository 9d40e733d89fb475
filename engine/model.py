from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple
from enum import Enum

UnitId = Literal["player", "enemy"]
Point = Tuple[float, float, float]  # (x, y, z) in presentation space
DamageRange = Tuple[int, int]  # inclusive

GRID_ROWS = 10
GRID_COLS = 10
TILE_SIZE = 1.0
MOVE_RANGE = 3
STEP_DURATION = 260  # ms
LOG_CAPACITY = 8

class Turn(Enum):
    """Who may act next. DEFEATED is terminal."""
    PLAYER = "player"
    ENEMY = "enemy"
    DEFEATED = "defeated"

@dataclass(frozen=True)
class Tile:
    row: int
    col: int

@dataclass
class Unit:
    row: int
    col: int
    hp: int
    max_hp: int

    @property
    def tile(self) -> Tile:
        return Tile(self.row, self.col)

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

@dataclass(frozen=True)
class MatchConfig:
    """Match constants, fixed for the lifetime of a session."""
    grid_rows: int = GRID_ROWS
    grid_cols: int = GRID_COLS
    tile_size: float = TILE_SIZE
    move_range: int = MOVE_RANGE
    step_duration_ms: int = STEP_DURATION
    log_capacity: int = LOG_CAPACITY
    hero_name: str = "Hero"
    enemy_name: str = "Grim Raider"
    player_start: Optional[Tile] = None  # defaults to (rows - 2, cols // 2)
    enemy_start: Optional[Tile] = None  # defaults to (1, cols // 2 + 1)
    player_hp: int = 14
    enemy_hp: int = 12
    player_melee: DamageRange = (3, 5)
    enemy_strike: DamageRange = (2, 4)
    enemy_bite: DamageRange = (2, 3)

    def __post_init__(self):
        if self.grid_rows <= 0 or self.grid_cols <= 0:
            raise ValueError("grid dimensions must be positive")
        if self.tile_size <= 0:
            raise ValueError("tile_size must be positive")
        if self.move_range < 0 or self.step_duration_ms < 0:
            raise ValueError("move_range and step_duration_ms must not be negative")
        if self.log_capacity <= 0:
            raise ValueError("log_capacity must be positive")
        if self.player_hp <= 0 or self.enemy_hp <= 0:
            raise ValueError("starting hp must be positive")
        for name in ("player_melee", "enemy_strike", "enemy_bite"):
            low, high = getattr(self, name)
            if low < 0 or high < low:
                raise ValueError(f"{name} must be an inclusive (low, high) range, got {(low, high)}")
        player, enemy = self.player_tile, self.enemy_tile
        for tile in (player, enemy):
            if not (0 <= tile.row < self.grid_rows and 0 <= tile.col < self.grid_cols):
                raise ValueError(f"start tile {tile} is outside the grid")
        if player == enemy:
            raise ValueError("player and enemy cannot start on the same tile")

    @property
    def player_tile(self) -> Tile:
        return self.player_start or Tile(self.grid_rows - 2, self.grid_cols // 2)

    @property
    def enemy_tile(self) -> Tile:
        return self.enemy_start or Tile(1, self.grid_cols // 2 + 1)

@dataclass
class Event:
    kind: str
    ts_ms: int
    data: Dict

@dataclass
class State:
    units: Dict[str, Optional[Unit]] = field(default_factory=dict)
    turn: Turn = Turn.PLAYER
    log: List[str] = field(default_factory=list)
    planned_path: List[Tile] = field(default_factory=list)
    hover_tile: Optional[Tile] = None
    ts_ms: int = 0
