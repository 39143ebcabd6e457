"""Spatial insights over mapped tracks: high-traffic clusters and bottlenecks."""

from __future__ import annotations

from collections import deque

import numpy as np

from storeflow.core.floormap.mapping import map_to_floor_map
from storeflow.core.floormap.matrix import FloorMapMatrix
from storeflow.core.types import (
    Bottleneck,
    FloorMapInsights,
    GridCell,
    HighTrafficArea,
    MappedTrack,
    Track,
)

HIGH_TRAFFIC_FACTOR = 1.5
MIN_AREA_CELLS = 2
BOTTLENECK_MIN_OBSTACLES = 5
BOTTLENECK_MAX_WALKABLE = 3

_NEIGHBORS_4 = ((0, -1), (0, 1), (-1, 0), (1, 0))
_NEIGHBORS_8 = ((-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))

GENERAL_REMINDER = "Monitor traffic patterns over time to identify changes"
NO_ISSUES_MESSAGE = "Customer flow looks balanced; no congestion hotspots or narrow passages detected"


def traffic_grid(mapped_tracks: list[MappedTrack], matrix: FloorMapMatrix) -> np.ndarray:
    """Count mapped-point visits per floor-map cell (shape: height x width)."""

    grid = np.zeros((matrix.height, matrix.width), dtype=np.int64)
    for track in mapped_tracks:
        for p in track.floor_map_path:
            if matrix.in_bounds(p.cell):
                grid[p.cell.y, p.cell.x] += 1
    return grid


def find_high_traffic_areas(traffic: np.ndarray) -> list[HighTrafficArea]:
    """Group above-threshold cells into 4-connected areas.

    The threshold is 1.5x the mean count of visited cells. Areas smaller than
    two cells are ignored. Results are sorted by total traffic, busiest first.
    """

    visited_counts = traffic[traffic > 0]
    if visited_counts.size == 0:
        return []
    threshold = float(visited_counts.mean()) * HIGH_TRAFFIC_FACTOR
    hot = traffic > threshold
    height, width = traffic.shape
    seen = np.zeros_like(hot, dtype=bool)

    areas: list[HighTrafficArea] = []
    for y in range(height):
        for x in range(width):
            if not hot[y, x] or seen[y, x]:
                continue
            cells: list[GridCell] = []
            queue = deque([(x, y)])
            seen[y, x] = True
            while queue:
                cx, cy = queue.popleft()
                cells.append(GridCell(cx, cy))
                for dx, dy in _NEIGHBORS_4:
                    nx, ny = cx + dx, cy + dy
                    if 0 <= nx < width and 0 <= ny < height and hot[ny, nx] and not seen[ny, nx]:
                        seen[ny, nx] = True
                        queue.append((nx, ny))
            if len(cells) < MIN_AREA_CELLS:
                continue
            mx = sum(c.x for c in cells) / len(cells)
            my = sum(c.y for c in cells) / len(cells)
            center = min(cells, key=lambda c: ((c.x - mx) ** 2 + (c.y - my) ** 2, c.y, c.x))
            areas.append(
                HighTrafficArea(
                    center=center,
                    traffic=int(sum(int(traffic[c.y, c.x]) for c in cells)),
                    cells=frozenset(cells),
                )
            )
    areas.sort(key=lambda a: a.traffic, reverse=True)
    return areas


def count_obstacle_neighbors(matrix: FloorMapMatrix, cell: GridCell) -> int:
    """Count Moore neighbours that are obstacles or fall outside the map."""

    return sum(
        1
        for dx, dy in _NEIGHBORS_8
        if not matrix.is_walkable(GridCell(cell.x + dx, cell.y + dy))
    )


def find_bottlenecks(traffic: np.ndarray, matrix: FloorMapMatrix) -> list[Bottleneck]:
    """Return visited walkable cells hemmed in by obstacles, in row-major order."""

    out: list[Bottleneck] = []
    for y in range(matrix.height):
        for x in range(matrix.width):
            cell = GridCell(x, y)
            if not matrix.is_walkable(cell):
                continue
            visits = int(traffic[y, x])
            if visits < 1:
                continue
            obstacles = count_obstacle_neighbors(matrix, cell)
            walkable = len(_NEIGHBORS_8) - obstacles
            if obstacles >= BOTTLENECK_MIN_OBSTACLES and walkable <= BOTTLENECK_MAX_WALKABLE:
                out.append(Bottleneck(position=cell, traffic=visits, obstacle_count=obstacles))
    return out


def generate_recommendations(
    high_traffic_areas: list[HighTrafficArea], bottlenecks: list[Bottleneck]
) -> list[str]:
    """Turn detected areas and bottlenecks into layout suggestions."""

    suggestions: list[str] = []
    if high_traffic_areas:
        busiest = high_traffic_areas[0].center
        suggestions.append(
            f"Place promotional or high-margin products in the {len(high_traffic_areas)} "
            "high-traffic area(s) to capitalize on customer flow"
        )
        suggestions.append(
            f"Add staff or checkout capacity near the busiest area around cell "
            f"({busiest.x}, {busiest.y})"
        )
    if bottlenecks:
        worst = max(bottlenecks, key=lambda b: b.traffic).position
        suggestions.append(
            f"Widen the {len(bottlenecks)} narrow passage(s) where customers squeeze "
            "between obstacles"
        )
        suggestions.append(
            f"Relocate displays blocking movement near cell ({worst.x}, {worst.y}) "
            "to ease congestion"
        )
    if not high_traffic_areas and not bottlenecks:
        suggestions.append(NO_ISSUES_MESSAGE)
    suggestions.append(GENERAL_REMINDER)
    return suggestions


def generate_floor_map_insights(tracks: list[Track], matrix: FloorMapMatrix) -> FloorMapInsights:
    """Map unit-space tracks onto the floor map and derive spatial insights."""

    if not tracks:
        return FloorMapInsights(high_traffic_areas=[], bottlenecks=[], suggestions=[])
    mapped = map_to_floor_map(tracks, matrix)
    traffic = traffic_grid(mapped, matrix)
    areas = find_high_traffic_areas(traffic)
    bottlenecks = find_bottlenecks(traffic, matrix)
    return FloorMapInsights(
        high_traffic_areas=areas,
        bottlenecks=bottlenecks,
        suggestions=generate_recommendations(areas, bottlenecks),
    )
