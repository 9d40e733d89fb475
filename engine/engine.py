import copy
from dataclasses import dataclass
from typing import List, Optional
from .combatlog import append_log, clamp_log
from .grid import are_adjacent, within_bounds
from .model import DamageRange, Event, MatchConfig, State, Tile, Turn, Unit
from .movement import compute_movement_path, step_slice
from .rng import DRNG

@dataclass
class PlayerMove:
    """A validated player command: tiles to walk this turn and whether it is an attack."""
    target: Tile
    steps: List[Tile]
    targeting_enemy: bool

class Engine:
    """Pure, deterministic turn rules for one hero against one enemy.

    The engine never waits; callers sequence its mutators and decide when
    time passes (see runtime.session.CombatSession).
    """

    def __init__(self, config: MatchConfig, rng=None, seed: Optional[int] = None):
        self.config = config
        self._rng = rng if rng is not None else DRNG(seed)
        self.state = self._make_initial_state()

    def _make_initial_state(self) -> State:
        cfg = self.config
        player, enemy = cfg.player_tile, cfg.enemy_tile
        units = {
            "player": Unit(row=player.row, col=player.col, hp=cfg.player_hp, max_hp=cfg.player_hp),
            "enemy": Unit(row=enemy.row, col=enemy.col, hp=cfg.enemy_hp, max_hp=cfg.enemy_hp),
        }
        log = clamp_log([
            "Commander, issue orders with a click.",
            f"Each hero may stride up to {cfg.move_range} tiles per turn.",
        ], cfg.log_capacity)
        return State(units=units, turn=Turn.PLAYER, log=log)

    @property
    def player(self) -> Unit:
        return self.state.units["player"]

    @property
    def enemy(self) -> Optional[Unit]:
        return self.state.units.get("enemy")

    def accepts_input(self) -> bool:
        """Player's turn and the hero still standing."""
        return self.state.turn == Turn.PLAYER and self.player.is_alive

    def _movement_path(self, start: Tile, target: Optional[Tile], enemy: Optional[Tile]):
        return compute_movement_path(start, target, enemy,
                                     self.config.grid_rows, self.config.grid_cols)

    def preview(self, tile: Optional[Tile], allowed: bool = True) -> List[Tile]:
        """Store the hover tile and the step slice a click there would walk."""
        self.state.hover_tile = tile
        self.state.planned_path = []
        if tile is None or not allowed or not self.accepts_input():
            return []
        enemy = self.enemy
        path = self._movement_path(self.player.tile, tile, enemy.tile if enemy else None)
        if path and len(path) > 1:
            self.state.planned_path = step_slice(path, self.config.move_range)
        return list(self.state.planned_path)

    def clear_preview(self) -> None:
        self.state.planned_path = []

    def plan_player_move(self, tile: Optional[Tile]) -> Optional[PlayerMove]:
        """Validate a click. None means the click changes nothing."""
        if tile is None or not self.accepts_input():
            return None
        player, enemy = self.player, self.enemy
        enemy_tile = enemy.tile if enemy else None
        path = self._movement_path(player.tile, tile, enemy_tile)
        steps = step_slice(path, self.config.move_range)
        targeting_enemy = enemy_tile is not None and tile == enemy_tile
        if not steps and not (targeting_enemy and are_adjacent(player.tile, enemy_tile)):
            return None
        return PlayerMove(target=tile, steps=steps, targeting_enemy=targeting_enemy)

    def plan_enemy_advance(self) -> List[Tile]:
        """Steps the enemy walks toward the hero this turn."""
        enemy = self.enemy
        if enemy is None:
            return []
        player = self.player.tile
        path = self._movement_path(enemy.tile, player, player)
        return step_slice(path, self.config.move_range)

    def step_unit(self, unit_id: str, tile: Tile) -> None:
        """Move a unit by exactly one tile."""
        unit = self.state.units[unit_id]
        assert unit is not None, f"{unit_id} is not on the board"
        assert within_bounds(tile.row, tile.col, self.config.grid_rows, self.config.grid_cols), \
            f"{unit_id} stepped off the board to {tile}"
        assert are_adjacent(unit.tile, tile), f"{unit_id} jumped from {unit.tile} to {tile}"
        unit.row, unit.col = tile.row, tile.col

    def unit_moved(self, unit_id: str, origin: Tile, steps: List[Tile]) -> List[Event]:
        path = [origin, *steps]
        return [Event("UnitMoved", self.state.ts_ms,
                      {"unit_id": unit_id, "path": [[t.row, t.col] for t in path]})]

    def in_melee(self) -> bool:
        enemy = self.enemy
        return enemy is not None and are_adjacent(self.player.tile, enemy.tile)

    def strike(self, attacker_id: str, target_id: str, damage: DamageRange, message: str) -> List[Event]:
        """Roll damage in the inclusive range, log it and apply it to the target."""
        target = self.state.units[target_id]
        assert target is not None, f"{target_id} is not on the board"
        dmg = self._rng.roll(*damage)
        assert damage[0] <= dmg <= damage[1], f"roll {dmg} outside {damage}"
        self.push_log(message.format(hero=self.config.hero_name, enemy=self.config.enemy_name, dmg=dmg))
        target.hp = max(0, target.hp - dmg)
        assert 0 <= target.hp <= target.max_hp
        return [Event("Attack", self.state.ts_ms,
                      {"attacker": attacker_id, "target": target_id, "dmg": dmg, "hp": target.hp})]

    def remove_enemy(self) -> List[Event]:
        self.state.units["enemy"] = None
        self.push_log("Enemy defeated. The path is clear.")
        return [Event("Destroyed", self.state.ts_ms, {"unit_id": "enemy", "killer": "player"})]

    def player_falls(self) -> List[Event]:
        self.push_log(f"{self.config.hero_name} falls. Retreat!")
        evts = self.set_turn(Turn.DEFEATED)
        evts.append(Event("Defeated", self.state.ts_ms, {"unit_id": "player"}))
        return evts

    def set_turn(self, turn: Turn) -> List[Event]:
        if self.state.turn == turn:
            return []
        previous = self.state.turn
        self.state.turn = turn
        return [Event("TurnChanged", self.state.ts_ms, {"from": previous.value, "to": turn.value})]

    def push_log(self, entry: str) -> None:
        self.state.log = append_log(self.state.log, entry, self.config.log_capacity)

    def advance(self, dt_ms: int) -> None:
        """Advance the logical animation clock."""
        self.state.ts_ms += dt_ms

    def snapshot(self) -> State:
        """Return a detached copy of the current state."""
        return copy.deepcopy(self.state)
