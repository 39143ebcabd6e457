"""Stats endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from storeflow.api.schemas.models import StatsSchema
from storeflow.api.services.engine import TrackingEngine
from storeflow.api.services.state import get_engine

router = APIRouter()


@router.get("/stats", response_model=StatsSchema)
def stats(engine: TrackingEngine = Depends(get_engine)) -> StatsSchema:
    """Return visitor analytics over all tracks."""

    summary = engine.analytics()
    return StatsSchema(
        total_visitors=summary.total_visitors,
        average_time_seconds=summary.average_time_seconds,
        average_distance=summary.average_distance,
        total_distance=summary.total_distance,
        popular_area=summary.popular_area,
        peak_period=summary.peak_period,
        active_tracks=sum(1 for t in engine.tracks() if t.active),
        error=engine.last_error,
    )
