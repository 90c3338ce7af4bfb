from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from neowatch.health import HealthStatus
from neowatch.risk import RiskTier
from neowatch.simulator import BodyKind
from neowatch.sorting import SortDirection, SortKey


# --- NEO feed views ---

class NeoRow(BaseModel):
    id: str
    name: str
    display_name: str
    diameter_min_km: float
    diameter_max_km: float
    hazardous: bool
    risk: RiskTier = Field(description="Recomputed on every read")
    approach_date: str
    miss_distance_km: float
    miss_distance_au: float
    miss_distance_lunar: float
    velocity_km_s: float
    velocity_km_h: float
    orbiting_body: str
    nasa_jpl_url: str


class NeoListResponse(BaseModel):
    status: str = Field(description="idle | loading | ready | error")
    error: str | None = None
    sort_key: SortKey
    sort_direction: SortDirection
    query: str | None = None
    total: int = Field(description="Records in the feed before filtering")
    count: int
    start_date: date | None = None
    end_date: date | None = None
    last_updated: datetime | None = None
    items: list[NeoRow] = []


class StatsResponse(BaseModel):
    total: int
    hazardous: int
    nearest_approach_mkm: float
    avg_velocity_km_h: float
    tiers: dict[str, int]
    alert: str


# --- Health ---

class HealthSampleModel(BaseModel):
    status: HealthStatus
    latency_ms: int | None = None
    grade: str = "unknown"


class HealthResponse(BaseModel):
    status: str = "ok"
    api: HealthSampleModel


# --- Simulation ---

class BodyPositionModel(BaseModel):
    name: str
    kind: BodyKind
    x: float
    y: float
    z: float
    size: float
    color: str
    moon: list[float] | None = None
    rings: list[float] | None = None


class SimulationFrame(BaseModel):
    frame: int
    animating: bool
    camera_resets: int
    bodies: list[BodyPositionModel]


class BodySnapshotModel(BaseModel):
    name: str
    details: dict[str, str]


class OrbitPathModel(BaseModel):
    name: str
    points: list[list[float]]


class AnimatingRequest(BaseModel):
    animating: bool


class RegenerateRequest(BaseModel):
    seed: int | None = None
