"""Pydantic models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class PathPointSchema(_FromAttributes):
    x: float
    y: float
    timestamp: int


class DetectedBoxSchema(_FromAttributes):
    x: float
    y: float
    width: float
    height: float
    confidence: float


class TrackSchema(_FromAttributes):
    """Tracked person payload."""

    id: str
    path: list[PathPointSchema]
    active: bool
    last_seen: int
    bbox: DetectedBoxSchema | None = None
    space: str


class GridCellSchema(_FromAttributes):
    x: int
    y: int


class MappedPointSchema(_FromAttributes):
    x: float
    y: float
    timestamp: int
    walkable: bool
    cell: GridCellSchema


class MappedTrackSchema(TrackSchema):
    floor_map_path: list[MappedPointSchema]


class HeatmapPointSchema(_FromAttributes):
    x: float
    y: float
    value: float = Field(ge=0.0, le=1.0)


class FloorMapSchema(_FromAttributes):
    """Walkable (1) / obstacle (0) grid payload."""

    grid: list[list[int]]
    width: int
    height: int


class HighTrafficAreaSchema(_FromAttributes):
    center: GridCellSchema
    traffic: int
    cells: list[GridCellSchema]

    @field_validator("cells", mode="before")
    @classmethod
    def _sort_cells(cls, v):
        # Cells arrive as a frozenset; emit them in row-major order.
        return sorted(v, key=lambda c: (c.y, c.x) if hasattr(c, "y") else (c["y"], c["x"]))


class BottleneckSchema(_FromAttributes):
    position: GridCellSchema
    traffic: int
    obstacle_count: int


class InsightsSchema(_FromAttributes):
    high_traffic_areas: list[HighTrafficAreaSchema]
    bottlenecks: list[BottleneckSchema]
    suggestions: list[str]


class StoreAreaSchema(_FromAttributes):
    id: str
    type: str
    x: int
    y: int
    width: int
    height: int
    color: str | None = None


class StoreLayoutSchema(BaseModel):
    """Recognized store areas plus heat-distribution insights."""

    areas: list[StoreAreaSchema]
    walkable: list[list[bool]]
    resolution: int
    insights: list[str]
    recommendations: list[str]
    area_stats: list[dict]


class StatsSchema(_FromAttributes):
    """High-level visitor analytics payload."""

    total_visitors: int
    average_time_seconds: int
    average_distance: int
    total_distance: int
    popular_area: str
    peak_period: str
    active_tracks: int = 0
    error: str | None = None


class ProcessingSchema(BaseModel):
    processing: bool
    frame_id: int
    tracks: int
    active_tracks: int
    error: str | None = None


class ConfigSchema(BaseModel):
    """Runtime configuration payload."""

    detection_source: str
    video_path: str | None = None
    model_name: str
    confidence: float = Field(ge=0.0, le=1.0)
    frame_width: int = Field(gt=0)
    frame_height: int = Field(gt=0)
    gating_distance_px: float = Field(gt=0.0)
    stale_after_ms: int = Field(ge=0)
    process_interval_ms: int = Field(gt=0)
    heatmap_grid_px: int = Field(gt=0)
    floor_heatmap_cell: float = Field(gt=0.0, le=1.0)
    floor_map_resolution: int = Field(gt=0)
    walkable_threshold: float = Field(ge=0.0, le=255.0)
    smoothing_window: int = Field(ge=0)
    demo_people: int = Field(ge=0)
    demo_points_per_person: int = Field(ge=1)
    random_max_people: int = Field(ge=0)
    random_seed: int | None = None

    @field_validator("detection_source")
    @classmethod
    def _validate_source(cls, v: str) -> str:
        if v not in {"random", "yolo"}:
            raise ValueError("detection_source must be random|yolo")
        return v
