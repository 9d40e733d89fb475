from typing import Optional
from pydantic import BaseModel, Field

class StartRequest(BaseModel):
    """Match start request schema."""
    seed: Optional[int] = 42
    hero_name: str = "Hero"
    time_compression: float = Field(default=1.0, gt=0)

class PointIn(BaseModel):
    """Pointer position in presentation space."""
    x: float
    y: float = 0.0
    z: float

    def as_point(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

class TileOut(BaseModel):
    row: int
    col: int

class HoverResponse(BaseModel):
    tile: Optional[TileOut]
    planned_path: list[TileOut]

class EventsResponse(BaseModel):
    """Events response schema."""
    next_offset: int
    total: int
    events: list[dict]
