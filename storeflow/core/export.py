"""JSON export/import of tracking data for offline analysis."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from storeflow.core.types import DetectedBox, PathPoint, Track


def track_to_dict(track: Track) -> dict[str, Any]:
    return asdict(track)


def tracks_to_json(tracks: list[Track], indent: int | None = 2) -> str:
    """Serialize tracks as a JSON array."""

    return json.dumps([track_to_dict(t) for t in tracks], indent=indent)


def track_from_dict(data: dict[str, Any]) -> Track:
    """Rebuild a track from its exported dict form."""

    path = [PathPoint(float(p["x"]), float(p["y"]), int(p["timestamp"])) for p in data["path"]]
    if not path:
        raise ValueError(f"track {data.get('id')!r} has an empty path")
    bbox = data.get("bbox")
    space = data.get("space", "unit")
    if space not in ("unit", "pixel"):
        raise ValueError(f"unknown coordinate space {space!r}")
    return Track(
        id=str(data["id"]),
        path=path,
        active=bool(data.get("active", False)),
        last_seen=int(data.get("last_seen", path[-1].timestamp)),
        bbox=DetectedBox(**bbox) if bbox else None,
        space=space,
    )


def tracks_from_json(text: str) -> list[Track]:
    """Parse a JSON array produced by `tracks_to_json`."""

    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("tracking export must be a JSON array")
    return [track_from_dict(item) for item in data]
