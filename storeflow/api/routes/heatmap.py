"""Pixel-space heatmap endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from storeflow.api.schemas.models import HeatmapPointSchema
from storeflow.api.services.engine import TrackingEngine
from storeflow.api.services.state import get_engine

router = APIRouter()


@router.get("/heatmap", response_model=list[HeatmapPointSchema])
def heatmap(
    grid_size: int | None = Query(None, gt=0),
    engine: TrackingEngine = Depends(get_engine),
) -> list[HeatmapPointSchema]:
    """Return normalized visit density over the video frame.

    Only cells with at least one visit are returned.
    """

    return [HeatmapPointSchema.model_validate(p) for p in engine.heatmap(grid_size)]
