import asyncio
import logging
from typing import Awaitable, Callable, List, Optional
from engine.engine import Engine, PlayerMove
from engine.grid import board_from_point
from engine.model import Event, MatchConfig, Point, State, Tile, Turn
from .eventlog import EventLog

log = logging.getLogger("session")

class CombatSession:
    """Async driver for one match: animates turns tile by tile behind a single latch.

    Every "wait" is an awaited sleep on the running event loop. While a turn
    resolution is in flight the latch is held and clicks and hover previews are
    ignored; the resolution always runs to one of its terminal points.
    """

    def __init__(self, config: Optional[MatchConfig] = None, rng=None, seed: Optional[int] = None,
                 sleep: Callable[[float], Awaitable] = asyncio.sleep, time_compression: float = 1.0):
        self.config = config or MatchConfig()
        self.engine: Engine | None = None
        self.events = EventLog()
        self._rng = rng
        self._seed = seed
        self._sleep = sleep
        self._resolving = False
        self._closed = False
        self._task: asyncio.Task | None = None
        self.set_time_compression(time_compression)

    def init(self) -> "CombatSession":
        """Place both units on their starting tiles and open the match for input."""
        if self.engine is not None:
            raise RuntimeError("session already initialised")
        self.engine = Engine(self.config, rng=self._rng, seed=self._seed)
        log.info("Match started: %s vs %s", self.config.hero_name, self.config.enemy_name)
        return self

    async def teardown(self):
        """Let any in-flight resolution finish, then refuse further input."""
        await self.wait_idle()
        self._closed = True
        log.info("Match closed")

    async def wait_idle(self):
        """Wait until no turn resolution is in flight."""
        if self._task:
            await self._task

    @property
    def is_resolving(self) -> bool:
        return self._resolving

    @property
    def is_open(self) -> bool:
        return self.engine is not None and not self._closed

    def set_time_compression(self, time_compression: float):
        """Update playback speed (1.0 = real-time, higher = faster)."""
        self.time_compression = max(0.1, min(1000.0, time_compression))
        self.sleep_s = (self.config.step_duration_ms / 1000.0) / max(1.0, self.time_compression)

    def snapshot(self) -> State:
        if self.engine is None:
            raise RuntimeError("session not initialised")
        return self.engine.snapshot()

    def on_tile_hover(self, point: Optional[Point]) -> List[Tile]:
        tile = self._tile_at(point)
        return self.hover(tile)

    def on_tile_click(self, point: Optional[Point]) -> Optional[asyncio.Task]:
        tile = self._tile_at(point)
        return self.submit_player_move(tile)

    def _tile_at(self, point: Optional[Point]) -> Optional[Tile]:
        if point is None:
            return None
        cfg = self.config
        return board_from_point(point, cfg.grid_rows, cfg.grid_cols, cfg.tile_size)

    def hover(self, tile: Optional[Tile]) -> List[Tile]:
        """Recompute the preview path; cleared whenever a click would be ignored."""
        if not self.is_open:
            return []
        return self.engine.preview(tile, allowed=not self._resolving)

    def submit_player_move(self, tile: Optional[Tile]) -> Optional[asyncio.Task]:
        """
        Start resolving a player command toward tile.
        Returns the resolution task, or None if the click was ignored
        (out of turn, already animating, unreachable or no movement).
        Must be called from a running event loop.
        """
        if not self.is_open or self._resolving:
            log.debug("Ignoring click on %s: input locked", tile)
            return None
        move = self.engine.plan_player_move(tile)
        if move is None:
            log.debug("Ignoring click on %s: no legal action", tile)
            return None

        self._resolving = True
        self.engine.clear_preview()
        log.info("Player order accepted: %d step(s) toward %s%s", len(move.steps), move.target,
                 " (attack)" if move.targeting_enemy else "")
        self._task = asyncio.create_task(self._resolve_player_turn(move))
        self._task.add_done_callback(self._report_failure)
        return self._task

    def _report_failure(self, task: asyncio.Task):
        if task.cancelled() or task.exception() is None:
            return
        log.error("Turn resolution failed", exc_info=task.exception())

    def _emit(self, evts: List[Event]):
        if evts:
            self.events.append_many(evts)

    async def _pause(self):
        self.engine.advance(self.config.step_duration_ms)
        await self._sleep(self.sleep_s)

    async def _move_unit(self, unit_id: str, steps: List[Tile]):
        origin = self.engine.state.units[unit_id].tile
        for step in steps:
            self.engine.step_unit(unit_id, step)
            await self._pause()
        self._emit(self.engine.unit_moved(unit_id, origin, steps))

    async def _resolve_player_turn(self, move: PlayerMove):
        eng = self.engine
        try:
            if move.steps:
                await self._move_unit("player", move.steps)

            if move.targeting_enemy and eng.in_melee():
                self._emit(eng.strike("player", "enemy", self.config.player_melee,
                                      "{hero} strikes for {dmg} damage!"))
                await self._pause()
                if not eng.enemy.is_alive:
                    self._emit(eng.remove_enemy())
                    # the hero keeps the initiative after a kill
                    self._emit(eng.set_turn(Turn.PLAYER))
                    log.info("Enemy defeated")
                    return

            self._emit(eng.set_turn(Turn.ENEMY))
            await self._resolve_enemy_turn()
        finally:
            if eng.state.turn == Turn.ENEMY:
                # an aborted enemy phase hands the turn back
                self._emit(eng.set_turn(Turn.PLAYER if eng.player.is_alive else Turn.DEFEATED))
            self._resolving = False

    async def _resolve_enemy_turn(self):
        eng = self.engine
        if not eng.player.is_alive or eng.enemy is None:
            self._emit(eng.set_turn(Turn.PLAYER if eng.player.is_alive else Turn.DEFEATED))
            return

        await self._pause()

        if eng.in_melee():
            self._emit(eng.strike("enemy", "player", self.config.enemy_strike,
                                  "Enemy strikes {hero} for {dmg} damage!"))
            await self._pause()
            if self._player_fell():
                return
        else:
            steps = eng.plan_enemy_advance()
            if steps:
                await self._move_unit("enemy", steps)
            if eng.in_melee():
                self._emit(eng.strike("enemy", "player", self.config.enemy_bite,
                                      "Enemy slashes {hero} for {dmg} damage!"))
                await self._pause()
                if self._player_fell():
                    return

        self._emit(eng.set_turn(Turn.PLAYER))

    def _player_fell(self) -> bool:
        if self.engine.player.is_alive:
            return False
        self._emit(self.engine.player_falls())
        log.info("%s defeated, match over", self.config.hero_name)
        return True
