"""Process-wide settings and tracking engine.

Routes resolve the engine through `get_engine` (a FastAPI dependency). The
engine is created lazily and is never started implicitly; processing begins
only via `POST /processing/start`.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any

from storeflow.api.services.engine import TrackingEngine
from storeflow.core.config.settings import StoreflowSettings, load_settings, settings_to_dict

logger = logging.getLogger(__name__)

_settings: StoreflowSettings | None = None
_engine: TrackingEngine | None = None
_lock = RLock()


def get_settings() -> StoreflowSettings:
    """Return cached settings, loading them on first use."""

    global _settings
    with _lock:
        if _settings is None:
            _settings = load_settings()
        return _settings


def _carry_over(old: TrackingEngine, new: TrackingEngine) -> None:
    """Move collected tracks and the active floor map onto a new engine."""

    new.load_tracks(old.tracks())
    new.floor_map = old.floor_map
    new.store_features = old.store_features
    new.floor_plan_size = old.floor_plan_size


def reload_settings(patch: dict[str, Any] | None = None) -> StoreflowSettings:
    """Re-read settings (YAML + env), apply `patch` and rebuild the engine.

    Tracks and the floor map survive the rebuild. A running processing loop is
    stopped and has to be started again by the client.
    """

    global _settings, _engine
    with _lock:
        merged = settings_to_dict(load_settings())
        merged.update(patch or {})
        settings = StoreflowSettings(**merged)
        _settings = settings
        if _engine is not None:
            previous = _engine
            previous.close()
            _engine = TrackingEngine(settings)
            _carry_over(previous, _engine)
            logger.info("Engine rebuilt with new settings (%d tracks kept)", len(_engine.tracks()))
        return settings


def get_engine() -> TrackingEngine:
    """FastAPI dependency returning the shared engine."""

    global _engine
    with _lock:
        if _engine is None:
            _engine = TrackingEngine(get_settings())
        return _engine


def stop_engine() -> None:
    """Stop processing and drop the shared engine, if any."""

    global _engine
    with _lock:
        engine, _engine = _engine, None
    if engine is not None:
        engine.close()
