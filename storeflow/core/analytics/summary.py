"""Aggregate visitor metrics computed from tracks."""

from __future__ import annotations

import math

import numpy as np

from storeflow.core.types import AnalyticsSummary, Track

AREA_LABELS = (
    ("Top Left", "Top Center", "Top Right"),
    ("Middle Left", "Center", "Middle Right"),
    ("Bottom Left", "Bottom Center", "Bottom Right"),
)
PERIOD_LABELS = ("Beginning", "Middle", "End")
NO_AREA = "Not enough data"
NO_PERIOD = "No data"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""

    return int(math.floor(value + 0.5))


def path_length(track: Track) -> float:
    """Sum of Euclidean segment lengths along a track's path."""

    if len(track.path) < 2:
        return 0.0
    pts = np.asarray([(p.x, p.y) for p in track.path], dtype=np.float64)
    return float(np.hypot(*np.diff(pts, axis=0).T).sum())


def popular_area(tracks: list[Track]) -> str:
    """Return the label of the densest cell of a 3x3 grid over unit-space points.

    Ties resolve to the first maximum in row-major order.
    """

    if not tracks:
        return NO_AREA
    grid = [[0, 0, 0] for _ in range(3)]
    for track in tracks:
        for p in track.path:
            gx = math.floor(p.x * 3)
            gy = math.floor(p.y * 3)
            if 0 <= gx < 3 and 0 <= gy < 3:
                grid[gy][gx] += 1

    max_count = 0
    best = (0, 0)
    for y in range(3):
        for x in range(3):
            if grid[y][x] > max_count:
                max_count = grid[y][x]
                best = (x, y)
    return AREA_LABELS[best[1]][best[0]]


def peak_period(tracks: list[Track]) -> str:
    """Return which third of the observed time range saw the most points."""

    stamps = [p.timestamp for track in tracks for p in track.path]
    if not stamps:
        return NO_PERIOD
    start, end = min(stamps), max(stamps)
    if end <= start:
        return NO_PERIOD
    span = float(end - start)
    counts = [0, 0, 0]
    for ts in stamps:
        counts[min(2, math.floor((ts - start) / span * 3))] += 1
    best = 0
    for i in range(1, 3):
        if counts[i] > counts[best]:
            best = i
    return PERIOD_LABELS[best]


def calculate_analytics(tracks: list[Track], area_tracks: list[Track] | None = None) -> AnalyticsSummary:
    """Compute visitor count, dwell time, distances, popular area and peak period.

    The average dwell time divides by the total number of tracks, including
    single-point tracks that contribute no time. Distances are measured in
    whatever space `tracks` is in. `area_tracks` supplies unit-space tracks
    for the popular-area grid when `tracks` is in pixel space.
    """

    total_visitors = len(tracks)

    total_time = 0
    for track in tracks:
        if len(track.path) >= 2:
            total_time += track.path[-1].timestamp - track.path[0].timestamp
    average_time_ms = total_time / total_visitors if total_visitors > 0 else 0.0

    total_distance = sum(path_length(t) for t in tracks)
    average_distance = total_distance / total_visitors if total_visitors > 0 else 0.0

    if area_tracks is None:
        area_tracks = [t for t in tracks if t.space == "unit"]

    return AnalyticsSummary(
        total_visitors=total_visitors,
        average_time_seconds=round_half_up(average_time_ms / 1000.0),
        average_distance=round_half_up(average_distance),
        total_distance=round_half_up(total_distance),
        popular_area=popular_area(area_tracks) if tracks else NO_AREA,
        peak_period=peak_period(tracks),
    )
