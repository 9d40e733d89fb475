"""Test the FastAPI endpoints."""
import pytest
from httpx import ASGITransport, AsyncClient
import api.app as app_module
from api.app import app
from engine.grid import tile_to_world
from engine.model import Tile


def point(row: int, col: int) -> dict:
    x, y, z = tile_to_world(Tile(row, col))
    return {"x": x, "y": y, "z": z}


def client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_start_match():
    async with client() as ac:
        response = await ac.post("/match/start", json={"seed": 123})
    assert response.status_code == 200
    assert response.json() == {"match_id": "local"}


@pytest.mark.asyncio
async def test_get_state():
    async with client() as ac:
        await ac.post("/match/start", json={"seed": 42, "hero_name": "Aldric"})
        response = await ac.get("/match/local/state")

    assert response.status_code == 200
    data = response.json()
    assert data["turn"] == "player"
    assert data["resolving"] is False
    assert data["units"]["player"] == {"row": 8, "col": 5, "hp": 14, "max_hp": 14}
    assert data["units"]["enemy"] == {"row": 1, "col": 6, "hp": 12, "max_hp": 12}
    assert len(data["log"]) == 2


@pytest.mark.asyncio
async def test_hover_returns_preview():
    async with client() as ac:
        await ac.post("/match/start", json={"seed": 42})
        response = await ac.post("/match/local/hover", json=point(6, 5))

    assert response.status_code == 200
    assert response.json() == {
        "tile": {"row": 6, "col": 5},
        "planned_path": [{"row": 7, "col": 5}, {"row": 6, "col": 5}],
    }


@pytest.mark.asyncio
async def test_hover_off_board():
    async with client() as ac:
        await ac.post("/match/start", json={"seed": 42})
        response = await ac.post("/match/local/hover", json={"x": 50.0, "z": 50.0})

    assert response.json() == {"tile": None, "planned_path": []}


@pytest.mark.asyncio
async def test_click_runs_turn():
    async with client() as ac:
        await ac.post("/match/start", json={"seed": 42, "time_compression": 1000})
        response = await ac.post("/match/local/click", json=point(7, 5))
        assert response.json() == {"accepted": True}

        await app_module.session.wait_idle()
        state = (await ac.get("/match/local/state")).json()
        events = (await ac.get("/match/local/events?since=0")).json()

    assert state["units"]["player"]["row"] == 7
    assert state["turn"] == "player"
    assert events["next_offset"] == len(events["events"]) == 4
    assert events["total"] == 4
    assert events["events"][0]["kind"] == "UnitMoved"


@pytest.mark.asyncio
async def test_ignored_click():
    async with client() as ac:
        await ac.post("/match/start", json={"seed": 42})
        response = await ac.post("/match/local/click", json=point(8, 5))

    assert response.json() == {"accepted": False}


@pytest.mark.asyncio
async def test_time_control():
    async with client() as ac:
        await ac.post("/match/start", json={"seed": 42})
        response = await ac.post("/match/local/time-control?time_compression=20")
        assert response.json() == {"time_compression": 20.0}
        response = await ac.get("/match/local/time-control")
        assert response.json() == {"time_compression": 20.0}
        response = await ac.post("/match/local/time-control?time_compression=0")
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_requests_before_start_rejected():
    await app_module.shutdown()
    async with client() as ac:
        response = await ac.get("/match/local/state")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_non_finite_points_are_ignored():
    async with client() as ac:
        await ac.post("/match/start", json={"seed": 42})
        hover = await ac.post("/match/local/hover", content='{"x": 1e999, "z": 0}',
                              headers={"content-type": "application/json"})
        click = await ac.post("/match/local/click", content='{"x": 0, "z": -1e999}',
                              headers={"content-type": "application/json"})

    assert hover.status_code == 200
    assert hover.json() == {"tile": None, "planned_path": []}
    assert click.json() == {"accepted": False}
