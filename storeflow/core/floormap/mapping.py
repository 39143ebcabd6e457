"""Projection of unit-space tracks onto a floor-map grid."""

from __future__ import annotations

from storeflow.core.coords import cell_origin, unit_to_cell
from storeflow.core.floormap.matrix import FloorMapMatrix
from storeflow.core.types import MappedPoint, MappedTrack, Track, UnitPoint


def map_to_floor_map(tracks: list[Track], matrix: FloorMapMatrix) -> list[MappedTrack]:
    """Snap every path point to its floor-map cell and flag walkability.

    Points are clamped into the grid and re-expressed as the top-left corner of
    their cell in unit space, so mapped paths have the resolution of the floor
    map.
    """

    mapped: list[MappedTrack] = []
    for track in tracks:
        if track.space != "unit":
            raise ValueError(f"track {track.id} must be in unit space to map onto the floor map")
        floor_path = []
        for p in track.path:
            cell = unit_to_cell(UnitPoint(p.x, p.y), matrix.width, matrix.height)
            origin = cell_origin(cell, matrix.width, matrix.height)
            floor_path.append(
                MappedPoint(
                    x=origin.x,
                    y=origin.y,
                    timestamp=p.timestamp,
                    walkable=matrix.is_walkable(cell),
                    cell=cell,
                )
            )
        mapped.append(
            MappedTrack(
                id=track.id,
                path=list(track.path),
                active=track.active,
                last_seen=track.last_seen,
                bbox=track.bbox,
                space=track.space,
                floor_map_path=floor_path,
            )
        )
    return mapped
