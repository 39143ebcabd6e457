"""Liveness endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from storeflow.api.services.engine import TrackingEngine
from storeflow.api.services.state import get_engine

router = APIRouter()


@router.get("/health")
def health(engine: TrackingEngine = Depends(get_engine)) -> dict[str, object]:
    """Report liveness plus whether the tracking loop is running."""

    return {
        "status": "ok",
        "processing": engine.processing,
        "tracks": len(engine.tracks()),
    }
