"""Start/stop control for the tracking loop."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from storeflow.api.schemas.models import ProcessingSchema
from storeflow.api.services.engine import TrackingEngine
from storeflow.api.services.state import get_engine

router = APIRouter(prefix="/processing", tags=["processing"])


def _status(engine: TrackingEngine) -> ProcessingSchema:
    tracks = engine.tracks()
    result = engine.latest_result
    return ProcessingSchema(
        processing=engine.processing,
        frame_id=result.frame_id if result else 0,
        tracks=len(tracks),
        active_tracks=sum(1 for t in tracks if t.active),
        error=engine.last_error,
    )


@router.get("", response_model=ProcessingSchema)
def processing_status(engine: TrackingEngine = Depends(get_engine)) -> ProcessingSchema:
    return _status(engine)


@router.post("/start", response_model=ProcessingSchema)
async def start_processing(engine: TrackingEngine = Depends(get_engine)) -> ProcessingSchema:
    """Start the periodic detect/associate loop."""

    if not engine.processing and not engine.start():
        raise HTTPException(status_code=503, detail=engine.last_error or "Failed to start")
    return _status(engine)


@router.post("/stop", response_model=ProcessingSchema)
async def stop_processing(engine: TrackingEngine = Depends(get_engine)) -> ProcessingSchema:
    engine.stop()
    return _status(engine)
