"""Configuration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from storeflow.api.schemas.models import ConfigSchema
from storeflow.api.services.state import get_settings, reload_settings
from storeflow.core.config.settings import settings_to_dict

router = APIRouter()


@router.get("/config", response_model=ConfigSchema)
def get_config() -> ConfigSchema:
    """Return the current effective configuration."""

    settings = get_settings()
    return ConfigSchema(**settings_to_dict(settings))


@router.post("/config", response_model=ConfigSchema)
def update_config(cfg: ConfigSchema) -> ConfigSchema:
    """Update in-memory settings and replace the engine.

    This endpoint updates runtime configuration only. Persist configuration via
    environment variables or the YAML config file.
    """

    try:
        settings = reload_settings(cfg.model_dump())
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None
    return ConfigSchema(**settings_to_dict(settings))
