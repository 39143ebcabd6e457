"""Track listing, demo data and export endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from storeflow.api.schemas.models import TrackSchema
from storeflow.api.services.engine import TrackingEngine
from storeflow.api.services.state import get_engine
from storeflow.core.export import tracks_to_json

router = APIRouter(prefix="/tracks", tags=["tracks"])


@router.get("", response_model=list[TrackSchema])
def list_tracks(smooth: bool = False, engine: TrackingEngine = Depends(get_engine)) -> list[TrackSchema]:
    """Return all tracks in video pixel coordinates.

    Args:
        smooth: Apply moving-average smoothing to each path (display only).
    """

    return [TrackSchema.model_validate(t) for t in engine.pixel_tracks(smooth=smooth)]


@router.delete("", status_code=204)
def clear_tracks(engine: TrackingEngine = Depends(get_engine)) -> Response:
    engine.reset()
    return Response(status_code=204)


@router.post("/demo", response_model=list[TrackSchema])
def load_demo(engine: TrackingEngine = Depends(get_engine)) -> list[TrackSchema]:
    """Replace current tracks with synthetic visitors."""

    engine.load_demo()
    return [TrackSchema.model_validate(t) for t in engine.pixel_tracks()]


@router.get("/export")
def export_tracks(engine: TrackingEngine = Depends(get_engine)) -> Response:
    """Download all tracks (pixel space) as a JSON file."""

    payload = tracks_to_json(engine.pixel_tracks())
    return Response(
        content=payload,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="tracking-data.json"'},
    )
