import logging
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from engine.model import MatchConfig, Tile
from runtime.session import CombatSession
from .schemas import EventsResponse, HoverResponse, PointIn, StartRequest, TileOut

log = logging.getLogger("api")

app = FastAPI(title="Hellmarch Tactics API")
session: CombatSession | None = None

# Enable CORS for development (the board renders in a Vite dev server)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:5174", "http://localhost:5175"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _tile_out(tile: Tile | None) -> TileOut | None:
    return TileOut(row=tile.row, col=tile.col) if tile else None

def _require_session() -> CombatSession:
    if not session:
        raise HTTPException(400, "Match not started")
    return session

@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Hellmarch Tactics API",
        "docs": "/docs",
        "version": "1.0"
    }

@app.on_event("startup")
async def startup():
    """Open a default match on app startup."""
    global session
    session = CombatSession(MatchConfig(), seed=42).init()

@app.on_event("shutdown")
async def shutdown():
    """Close the running match on app shutdown."""
    global session
    if session:
        await session.teardown()
        session = None

@app.post("/match/start")
async def start_match(req: StartRequest):
    """Start a new match, closing any previous one."""
    await shutdown()
    global session
    config = MatchConfig(hero_name=req.hero_name)
    session = CombatSession(config, seed=req.seed, time_compression=req.time_compression).init()
    log.info("Started match with seed %s", req.seed)
    return {"match_id": "local"}

@app.get("/match/local/state")
async def get_state():
    """Get current match state snapshot."""
    s = _require_session()
    state = s.snapshot()
    return {
        "ts_ms": state.ts_ms,
        "turn": state.turn.value,
        "resolving": s.is_resolving,
        "units": {
            uid: ({"row": u.row, "col": u.col, "hp": u.hp, "max_hp": u.max_hp} if u else None)
            for uid, u in state.units.items()
        },
        "planned_path": [_tile_out(t) for t in state.planned_path],
        "hover_tile": _tile_out(state.hover_tile),
        "log": state.log,
    }

@app.post("/match/local/hover", response_model=HoverResponse)
async def hover(point: PointIn):
    """Preview the path a click at this point would take."""
    s = _require_session()
    planned = s.on_tile_hover(point.as_point())
    return HoverResponse(
        tile=_tile_out(s.snapshot().hover_tile),
        planned_path=[_tile_out(t) for t in planned],
    )

@app.post("/match/local/click")
async def click(point: PointIn):
    """Issue a player order; the turn animates in the background."""
    s = _require_session()
    task = s.on_tile_click(point.as_point())
    return {"accepted": task is not None}

@app.get("/match/local/events")
async def get_events(since: int = 0, limit: int = 500):
    """Get events since offset."""
    s = _require_session()
    evts, next_offset = s.events.since(since, limit)
    return EventsResponse(
        next_offset=next_offset,
        total=len(s.events),
        events=[{"kind": e.kind, "ts_ms": e.ts_ms, "data": e.data} for e in evts]
    )

@app.post("/match/local/time-control")
async def set_time_control(time_compression: float = Query(gt=0)):
    """Set playback speed (1.0 = real-time, higher = faster)."""
    s = _require_session()
    s.set_time_compression(time_compression)
    return {"time_compression": s.time_compression}

@app.get("/match/local/time-control")
async def get_time_control():
    """Get current playback speed."""
    s = _require_session()
    return {"time_compression": s.time_compression}
