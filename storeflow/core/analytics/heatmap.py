"""Density heatmap aggregation.

Bins track points into a fixed grid, counts visits per cell and normalizes by
the densest cell. Both functions are pure: the same tracks always produce the
same samples, ordered row-major.
"""

from __future__ import annotations

import math

import numpy as np

from storeflow.core.types import HeatmapPoint, MappedTrack, Track

DEFAULT_GRID_SIZE = 20
DEFAULT_CELL_FRACTION = 0.05


def _normalized_points(
    counts: np.ndarray, cell_w: float, cell_h: float
) -> list[HeatmapPoint]:
    """Emit one sample per non-zero cell at the cell center."""

    max_value = float(counts.max()) if counts.size else 0.0
    out: list[HeatmapPoint] = []
    rows, cols = np.nonzero(counts)
    for j, i in zip(rows.tolist(), cols.tolist(), strict=True):
        out.append(
            HeatmapPoint(
                x=i * cell_w + cell_w / 2.0,
                y=j * cell_h + cell_h / 2.0,
                value=float(counts[j, i]) / max_value if max_value > 0 else 0.0,
            )
        )
    return out


def generate_heatmap(
    tracks: list[Track],
    width: float,
    height: float,
    grid_size: float = DEFAULT_GRID_SIZE,
) -> list[HeatmapPoint]:
    """Aggregate track points into `grid_size` cells over a `width x height` plane.

    Points whose cell falls outside the `ceil(width / grid_size)` by
    `ceil(height / grid_size)` grid are dropped; points exactly on the far edge
    of the plane fall into the last cell. Coordinates are returned in the same
    space as the tracks.
    """

    if grid_size <= 0:
        raise ValueError("grid_size must be > 0")
    gx = int(math.ceil(width / grid_size)) if width > 0 else 0
    gy = int(math.ceil(height / grid_size)) if height > 0 else 0
    if gx == 0 or gy == 0:
        return []

    coords = [(p.x, p.y) for track in tracks for p in track.path]
    counts = np.zeros((gy, gx), dtype=np.int64)
    if coords:
        pts = np.asarray(coords, dtype=np.float64)
        i = np.floor_divide(pts[:, 0], grid_size).astype(np.int64)
        j = np.floor_divide(pts[:, 1], grid_size).astype(np.int64)
        i[pts[:, 0] == width] = gx - 1
        j[pts[:, 1] == height] = gy - 1
        ok = (i >= 0) & (i < gx) & (j >= 0) & (j < gy)
        idx = j[ok] * gx + i[ok]
        counts = np.bincount(idx, minlength=gx * gy).reshape(gy, gx)

    return _normalized_points(counts, float(grid_size), float(grid_size))


def generate_floor_heatmap(
    mapped_tracks: list[MappedTrack],
    cell_fraction: float = DEFAULT_CELL_FRACTION,
) -> list[HeatmapPoint]:
    """Aggregate walkable floor-map points into a unit-space heatmap.

    Non-walkable points are excluded from the counts entirely.
    """

    if not 0.0 < cell_fraction <= 1.0:
        raise ValueError("cell_fraction must be in (0, 1]")
    # Guard against float noise such as 1 / 0.05 == 20.000000000000004.
    n = int(math.ceil(round(1.0 / cell_fraction, 9)))

    coords = [
        (p.x, p.y)
        for track in mapped_tracks
        for p in track.floor_map_path
        if p.walkable
    ]
    counts = np.zeros((n, n), dtype=np.int64)
    if coords:
        pts = np.asarray(coords, dtype=np.float64)
        # Snapped floor-map coordinates sit exactly on cell boundaries.
        i = np.floor(np.round(pts[:, 0] / cell_fraction, 9)).astype(np.int64)
        j = np.floor(np.round(pts[:, 1] / cell_fraction, 9)).astype(np.int64)
        ok = (i >= 0) & (i < n) & (j >= 0) & (j < n)
        idx = j[ok] * n + i[ok]
        counts = np.bincount(idx, minlength=n * n).reshape(n, n)

    return _normalized_points(counts, cell_fraction, cell_fraction)
