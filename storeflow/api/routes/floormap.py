"""Floor map endpoints.

A floor plan is uploaded as a raw image request body (`image/png`,
`image/jpeg`, ...). Uploading rebuilds both the walkable matrix and the
recognized store layout; a failed upload leaves the current map untouched.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from storeflow.api.schemas.models import (
    FloorMapSchema,
    HeatmapPointSchema,
    InsightsSchema,
    MappedTrackSchema,
    StoreAreaSchema,
    StoreLayoutSchema,
)
from storeflow.api.services.engine import TrackingEngine
from storeflow.api.services.state import get_engine
from storeflow.core.floormap.matrix import FloorMapMatrix, decode_floor_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/floormap", tags=["floormap"])


def _floor_map_payload(matrix: FloorMapMatrix) -> FloorMapSchema:
    return FloorMapSchema(grid=matrix.to_lists(), width=matrix.width, height=matrix.height)


def _layout_payload(engine: TrackingEngine) -> StoreLayoutSchema:
    features = engine.store_features
    insights = engine.layout_insights()
    if features is None or insights is None:
        raise HTTPException(status_code=404, detail="No floor plan uploaded")
    return StoreLayoutSchema(
        areas=[StoreAreaSchema.model_validate(a) for a in features.areas],
        walkable=features.walkable,
        resolution=features.resolution,
        insights=insights.insights,
        recommendations=insights.recommendations,
        area_stats=insights.area_stats,
    )


async def _apply_upload(request: Request, engine: TrackingEngine) -> FloorMapMatrix:
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=415, detail="Floor plan must be an image")
    data = await request.body()
    try:
        image = await asyncio.to_thread(decode_floor_plan, data)
        return await asyncio.to_thread(engine.use_floor_plan, image)
    except ValueError as exc:
        logger.warning("Rejected floor plan upload: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from None


@router.get("", response_model=FloorMapSchema)
def get_floor_map(engine: TrackingEngine = Depends(get_engine)) -> FloorMapSchema:
    return _floor_map_payload(engine.floor_map)


@router.post("/default", response_model=FloorMapSchema)
def use_default(engine: TrackingEngine = Depends(get_engine)) -> FloorMapSchema:
    """Reset to the built-in 10x10 store layout."""

    return _floor_map_payload(engine.use_default_floor_map())


@router.post("/image", response_model=FloorMapSchema)
async def upload_floor_plan(
    request: Request, engine: TrackingEngine = Depends(get_engine)
) -> FloorMapSchema:
    """Build the floor map from an uploaded floor-plan image."""

    return _floor_map_payload(await _apply_upload(request, engine))


@router.get("/tracks", response_model=list[MappedTrackSchema])
def mapped_tracks(engine: TrackingEngine = Depends(get_engine)) -> list[MappedTrackSchema]:
    """Return tracks snapped onto floor-map cells (normalized coordinates)."""

    return [MappedTrackSchema.model_validate(t) for t in engine.mapped_tracks()]


@router.get("/heatmap", response_model=list[HeatmapPointSchema])
def floor_heatmap(engine: TrackingEngine = Depends(get_engine)) -> list[HeatmapPointSchema]:
    return [HeatmapPointSchema.model_validate(p) for p in engine.floor_heatmap()]


@router.get("/insights", response_model=InsightsSchema)
def insights(engine: TrackingEngine = Depends(get_engine)) -> InsightsSchema:
    """Return high-traffic areas, bottlenecks and layout suggestions."""

    return InsightsSchema.model_validate(engine.insights())


@router.get("/layout", response_model=StoreLayoutSchema)
def get_layout(engine: TrackingEngine = Depends(get_engine)) -> StoreLayoutSchema:
    return _layout_payload(engine)


@router.post("/layout", response_model=StoreLayoutSchema)
async def recognize_layout(
    request: Request, engine: TrackingEngine = Depends(get_engine)
) -> StoreLayoutSchema:
    """Upload a floor plan and return the recognized store areas."""

    await _apply_upload(request, engine)
    return _layout_payload(engine)
