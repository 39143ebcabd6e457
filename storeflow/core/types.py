"""Shared type definitions used across the analytics core.

Coordinate spaces are kept explicit: `PixelPoint` is video pixel space,
`UnitPoint` is normalized [0, 1] space and `GridCell` is an integer cell index
in some grid. Track paths carry plain `PathPoint`s and record their space on
the owning `Track`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

import numpy as np

Frame = np.ndarray

CoordinateSpace = Literal["unit", "pixel"]


@dataclass(frozen=True)
class PixelPoint:
    """A point in video pixel coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class UnitPoint:
    """A point in normalized [0, 1] coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class GridCell:
    """An integer (column, row) cell index."""

    x: int
    y: int


@dataclass(frozen=True)
class FrameSize:
    """Video frame dimensions in pixels."""

    width: int
    height: int


@dataclass(frozen=True)
class PathPoint:
    """One observed position of a tracked person (timestamp in milliseconds)."""

    x: float
    y: float
    timestamp: int


@dataclass(frozen=True)
class DetectedBox:
    """Raw detector output in pixel coordinates (top-left corner + size)."""

    x: float
    y: float
    width: float
    height: float
    confidence: float


@dataclass
class Track:
    """Persistent, append-only record of one person's positions."""

    id: str
    path: list[PathPoint]
    active: bool = True
    last_seen: int = 0
    bbox: DetectedBox | None = None
    space: CoordinateSpace = "unit"


@dataclass(frozen=True)
class HeatmapPoint:
    """Density sample at a cell center; `value` is normalized to [0, 1]."""

    x: float
    y: float
    value: float


@dataclass(frozen=True)
class MappedPoint:
    """A path point snapped onto the floor-map grid (unit space)."""

    x: float
    y: float
    timestamp: int
    walkable: bool
    cell: GridCell


@dataclass
class MappedTrack(Track):
    """A unit-space track together with its floor-map-aligned path."""

    floor_map_path: list[MappedPoint] = field(default_factory=list)


@dataclass(frozen=True)
class HighTrafficArea:
    """A 4-connected cluster of above-threshold traffic cells."""

    center: GridCell
    traffic: int
    cells: frozenset[GridCell]


@dataclass(frozen=True)
class Bottleneck:
    """A visited walkable cell mostly surrounded by obstacles."""

    position: GridCell
    traffic: int
    obstacle_count: int


@dataclass
class FloorMapInsights:
    """Spatial insight results for one floor map."""

    high_traffic_areas: list[HighTrafficArea]
    bottlenecks: list[Bottleneck]
    suggestions: list[str]


@dataclass(frozen=True)
class AnalyticsSummary:
    """Aggregate metrics over a set of tracks."""

    total_visitors: int
    average_time_seconds: int
    average_distance: int
    total_distance: int
    popular_area: str = "Not enough data"
    peak_period: str = "No data"
