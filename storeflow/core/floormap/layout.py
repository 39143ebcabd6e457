"""Store layout recognition from a floor-plan image.

Classifies square pixel cells by brightness and colour into walkways, shelves,
counters and cashiers, adds entrances/exits on the walkable border and merges
touching cells of the same type into rectangles. Like the floor-map matrix,
this is a colour heuristic and only approximates the real layout.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

import numpy as np

from storeflow.core.types import HeatmapPoint

WALKWAY_MIN = 200
WALL_MAX = 50
SHELF_RANGE = (50, 150)
COUNTER_RANGE = (100, 180)
CASHIER_RED_MARGIN = 20
LAYOUT_SAMPLE_STRIDE = 2

_FLOW_TYPES_EXCLUDED = ("entrance", "exit")


@dataclass(frozen=True)
class StoreArea:
    """A rectangular region of the floor plan in pixel coordinates."""

    id: str
    type: str
    x: int
    y: int
    width: int
    height: int
    color: str | None = None


@dataclass
class StoreFeatures:
    """Recognized areas plus a per-cell walkability mask."""

    areas: list[StoreArea]
    walkable: list[list[bool]]
    resolution: int


@dataclass
class AreaHeat:
    count: int = 0
    max_value: float = 0.0


@dataclass
class StoreInsights:
    insights: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    area_stats: list[dict] = field(default_factory=list)


def _cell_colour(rgb: np.ndarray, gx: int, gy: int, resolution: int) -> tuple[float, float, float, float]:
    """Return (brightness, red, green, blue) averages for one grid cell."""

    h, w = rgb.shape[:2]
    y0, y1 = gy * resolution, min((gy + 1) * resolution, h)
    x0, x1 = gx * resolution, min((gx + 1) * resolution, w)
    samples = rgb[y0:y1:LAYOUT_SAMPLE_STRIDE, x0:x1:LAYOUT_SAMPLE_STRIDE].reshape(-1, 3)
    if samples.size == 0:
        return 0.0, 0.0, 0.0, 0.0
    r, g, b = (float(v) for v in samples.mean(axis=0))
    return (r + g + b) / 3.0, r, g, b


def _classify(brightness: float, r: float, g: float, b: float) -> tuple[str | None, bool]:
    """Map a cell colour to (area type or None, walkable)."""

    if brightness > WALKWAY_MIN:
        return "walkway", True
    if brightness < WALL_MAX:
        return None, False
    if SHELF_RANGE[0] < brightness < SHELF_RANGE[1]:
        return "shelf", False
    if COUNTER_RANGE[0] < brightness < COUNTER_RANGE[1]:
        if r > b + CASHIER_RED_MARGIN and r > g + CASHIER_RED_MARGIN:
            return "cashier", True
        return "counter", False
    return None, False


def _border_areas(walkable: list[list[bool]], resolution: int) -> list[StoreArea]:
    """Walkable border cells become entrances (left/top) or exits (right/bottom)."""

    height = len(walkable)
    width = len(walkable[0]) if height else 0
    out: list[StoreArea] = []
    for y in range(height):
        if walkable[y][0]:
            out.append(StoreArea(f"entrance-left-{y}", "entrance", 0, y * resolution, resolution, resolution))
        if walkable[y][width - 1]:
            out.append(
                StoreArea(
                    f"exit-right-{y}", "exit", (width - 1) * resolution, y * resolution, resolution, resolution
                )
            )
    for x in range(width):
        if walkable[0][x]:
            out.append(StoreArea(f"entrance-top-{x}", "entrance", x * resolution, 0, resolution, resolution))
        if walkable[height - 1][x]:
            out.append(
                StoreArea(
                    f"exit-bottom-{x}", "exit", x * resolution, (height - 1) * resolution, resolution, resolution
                )
            )
    return out


def areas_adjacent(a: StoreArea, b: StoreArea, resolution: int) -> bool:
    """Return True when two areas share (or nearly share) an edge."""

    tolerance = resolution / 2.0
    a_right, a_bottom = a.x + a.width, a.y + a.height
    b_right, b_bottom = b.x + b.width, b.y + b.height
    horizontal = (abs(a_right - b.x) <= tolerance or abs(a.x - b_right) <= tolerance) and (
        a.y < b_bottom and a_bottom > b.y
    )
    vertical = (abs(a_bottom - b.y) <= tolerance or abs(a.y - b_bottom) <= tolerance) and (
        a.x < b_right and a_right > b.x
    )
    return horizontal or vertical


def _union(a: StoreArea, b: StoreArea) -> StoreArea:
    x1, y1 = min(a.x, b.x), min(a.y, b.y)
    x2 = max(a.x + a.width, b.x + b.width)
    y2 = max(a.y + a.height, b.y + b.height)
    return replace(a, x=x1, y=y1, width=x2 - x1, height=y2 - y1)


def merge_adjacent_areas(areas: list[StoreArea], resolution: int) -> list[StoreArea]:
    """Merge touching areas of the same type into bounding rectangles.

    The first area of each merged group keeps its id and colour.
    """

    by_type: dict[str, list[StoreArea]] = {}
    for area in areas:
        by_type.setdefault(area.type, []).append(area)

    merged_all: list[StoreArea] = []
    for typed in by_type.values():
        processed = [False] * len(typed)
        for i, base in enumerate(typed):
            if processed[i]:
                continue
            processed[i] = True
            merged = base
            changed = True
            while changed:
                changed = False
                for j, candidate in enumerate(typed):
                    if processed[j]:
                        continue
                    if areas_adjacent(merged, candidate, resolution):
                        merged = _union(merged, candidate)
                        processed[j] = True
                        changed = True
            merged_all.append(merged)
    return merged_all


def analyze_store_layout(image: np.ndarray, resolution: int = 20) -> StoreFeatures:
    """Recognize store areas on a floor-plan image using `resolution`-pixel cells.

    The image is expected in RGB channel order (grayscale is accepted).
    """

    if image is None or not isinstance(image, np.ndarray) or image.size == 0:
        raise ValueError("floor plan image is empty")
    if resolution <= 0:
        raise ValueError("resolution must be > 0")
    if image.ndim == 2:
        rgb = image[:, :, None].repeat(3, axis=2)
    elif image.ndim == 3 and image.shape[2] >= 3:
        rgb = image[:, :, :3]
    else:
        raise ValueError(f"unsupported image shape {image.shape}")
    rgb = rgb.astype(np.float64)

    h, w = rgb.shape[:2]
    grid_w = math.ceil(w / resolution)
    grid_h = math.ceil(h / resolution)
    walkable = [[False] * grid_w for _ in range(grid_h)]
    areas: list[StoreArea] = []

    for gy in range(grid_h):
        for gx in range(grid_w):
            brightness, r, g, b = _cell_colour(rgb, gx, gy, resolution)
            area_type, is_walkable = _classify(brightness, r, g, b)
            walkable[gy][gx] = is_walkable
            if area_type is None:
                continue
            areas.append(
                StoreArea(
                    id=f"area-{len(areas)}",
                    type=area_type,
                    x=gx * resolution,
                    y=gy * resolution,
                    width=resolution,
                    height=resolution,
                    color=f"rgb({round(r)}, {round(g)}, {round(b)})",
                )
            )

    areas.extend(_border_areas(walkable, resolution))
    return StoreFeatures(
        areas=merge_adjacent_areas(areas, resolution),
        walkable=walkable,
        resolution=resolution,
    )


def store_insights(features: StoreFeatures, heatmap: list[HeatmapPoint]) -> StoreInsights:
    """Summarize where heat points fall across recognized area types.

    `heatmap` must be in the same pixel space as the floor-plan image.
    """

    heat: dict[str, AreaHeat] = {}
    for area in features.areas:
        heat.setdefault(area.type, AreaHeat())

    for point in heatmap:
        for area in features.areas:
            if area.x <= point.x <= area.x + area.width and area.y <= point.y <= area.y + area.height:
                stats = heat[area.type]
                stats.count += 1
                stats.max_value = max(stats.max_value, point.value)

    result = StoreInsights()
    if heat.get("walkway", AreaHeat()).count > 0:
        result.insights.append(f"Main walkways have {heat['walkway'].count} traffic points")
    if heat.get("shelf", AreaHeat()).count > 0:
        result.insights.append(f"Shelves attract {heat['shelf'].count} customer interactions")
    if heat.get("counter", AreaHeat()).count > 0:
        result.insights.append(f"Service counters see {heat['counter'].count} customer visits")
    if heat.get("cashier", AreaHeat()).count > 0:
        result.insights.append(f"Checkout areas have {heat['cashier'].count} customer stops")

    most, least = "", ""
    max_count, min_count = 0, math.inf
    for area_type, stats in heat.items():
        if area_type in _FLOW_TYPES_EXCLUDED:
            continue
        if stats.count > max_count:
            max_count, most = stats.count, area_type
        if 0 < stats.count < min_count:
            min_count, least = stats.count, area_type

    if most:
        result.recommendations.append(
            f"Consider adding more products to {most} areas to capitalize on high traffic"
        )
    if least:
        result.recommendations.append(
            f"{least} areas need attention - consider rearranging or adding promotions"
        )
    entrance, walkway = heat.get("entrance"), heat.get("walkway")
    if entrance and walkway and entrance.max_value > 0.7 and walkway.max_value < 0.5:
        result.recommendations.append(
            "Entrance areas are congested - consider widening the entrance or improving flow"
        )

    result.area_stats = [
        {"type": area_type, "visits": stats.count, "heat_level": stats.max_value}
        for area_type, stats in heat.items()
    ]
    return result
