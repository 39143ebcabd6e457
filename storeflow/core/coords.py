"""Conversions between pixel, unit and grid coordinate spaces."""

from __future__ import annotations

import math
from dataclasses import replace

from storeflow.core.types import (
    DetectedBox,
    FrameSize,
    GridCell,
    PathPoint,
    PixelPoint,
    Track,
    UnitPoint,
)


def _check_frame(frame: FrameSize) -> None:
    if frame.width <= 0 or frame.height <= 0:
        raise ValueError(f"frame size must be positive, got {frame.width}x{frame.height}")


def box_center(box: DetectedBox) -> PixelPoint:
    """Return the geometric center of a detection box."""

    return PixelPoint(box.x + box.width / 2.0, box.y + box.height / 2.0)


def to_unit(point: PixelPoint, frame: FrameSize) -> UnitPoint:
    """Scale a pixel point into [0, 1] space using the frame dimensions."""

    _check_frame(frame)
    return UnitPoint(point.x / float(frame.width), point.y / float(frame.height))


def to_pixel(point: UnitPoint, frame: FrameSize) -> PixelPoint:
    """Scale a unit point back into pixel space."""

    _check_frame(frame)
    return PixelPoint(point.x * float(frame.width), point.y * float(frame.height))


def unit_to_cell(point: UnitPoint, grid_width: int, grid_height: int) -> GridCell:
    """Return the grid cell containing a unit point, clamped to the grid."""

    if grid_width <= 0 or grid_height <= 0:
        raise ValueError("grid dimensions must be > 0")
    gx = math.floor(point.x * grid_width)
    gy = math.floor(point.y * grid_height)
    return GridCell(
        max(0, min(grid_width - 1, gx)),
        max(0, min(grid_height - 1, gy)),
    )


def cell_origin(cell: GridCell, grid_width: int, grid_height: int) -> UnitPoint:
    """Return the top-left corner of a grid cell in unit space."""

    return UnitPoint(cell.x / float(grid_width), cell.y / float(grid_height))


def _convert_track(track: Track, fx: float, fy: float, space) -> Track:
    path = [PathPoint(p.x * fx, p.y * fy, p.timestamp) for p in track.path]
    return replace(track, path=path, space=space)


def denormalize_tracks(tracks: list[Track], frame: FrameSize) -> list[Track]:
    """Return copies of unit-space tracks with their paths in pixel space."""

    _check_frame(frame)
    out = []
    for track in tracks:
        if track.space == "pixel":
            out.append(replace(track, path=list(track.path)))
            continue
        out.append(_convert_track(track, float(frame.width), float(frame.height), "pixel"))
    return out


def normalize_tracks(tracks: list[Track], frame: FrameSize) -> list[Track]:
    """Return copies of pixel-space tracks with their paths in unit space."""

    _check_frame(frame)
    out = []
    for track in tracks:
        if track.space == "unit":
            out.append(replace(track, path=list(track.path)))
            continue
        out.append(
            _convert_track(track, 1.0 / float(frame.width), 1.0 / float(frame.height), "unit")
        )
    return out
