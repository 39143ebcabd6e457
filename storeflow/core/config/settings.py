"""Backend configuration.

Settings are loaded from YAML defaults and overridden by environment variables
prefixed with `SFA_`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from storeflow.core.types import FrameSize


class StoreflowSettings(BaseSettings):
    """Runtime configuration loaded from YAML defaults and `SFA_` env overrides."""

    model_config = SettingsConfigDict(env_prefix="SFA_", validate_assignment=True)

    detection_source: str = Field("random", description="random|yolo")
    video_path: str | None = None
    model_name: str = "yolo11n.pt"
    # Boxes below this confidence never reach the associator.
    confidence: float = 0.6
    # Used when the source does not report its own frame size (random demo).
    frame_width: int = 800
    frame_height: int = 600

    gating_distance_px: float = 100.0
    stale_after_ms: int = 2000
    process_interval_ms: int = 100

    heatmap_grid_px: int = 20
    floor_heatmap_cell: float = 0.05
    floor_map_resolution: int = 20
    # Mean luminance above which a floor-plan cell counts as walkable.
    walkable_threshold: float = 100.0
    smoothing_window: int = 5

    demo_people: int = 15
    demo_points_per_person: int = 150
    random_max_people: int = 10
    random_seed: int | None = None

    @field_validator("detection_source")
    @classmethod
    def _validate_source(cls, v: str) -> str:
        if v not in {"random", "yolo"}:
            raise ValueError("detection_source must be random|yolo")
        return v

    @field_validator("confidence")
    @classmethod
    def _validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("confidence must be in [0, 1]")
        return v

    @field_validator(
        "frame_width",
        "frame_height",
        "heatmap_grid_px",
        "floor_map_resolution",
        "process_interval_ms",
    )
    @classmethod
    def _validate_positive_int(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be > 0")
        return v

    @field_validator("gating_distance_px")
    @classmethod
    def _validate_gating(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("gating_distance_px must be > 0")
        return float(v)

    @field_validator("stale_after_ms", "smoothing_window", "demo_people", "random_max_people")
    @classmethod
    def _validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @field_validator("demo_points_per_person")
    @classmethod
    def _validate_demo_points(cls, v: int) -> int:
        if v < 1:
            raise ValueError("demo_points_per_person must be >= 1")
        return v

    @field_validator("floor_heatmap_cell")
    @classmethod
    def _validate_floor_cell(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("floor_heatmap_cell must be in (0, 1]")
        return float(v)

    @field_validator("walkable_threshold")
    @classmethod
    def _validate_threshold(cls, v: float) -> float:
        if not 0.0 <= v <= 255.0:
            raise ValueError("walkable_threshold must be in [0, 255]")
        return float(v)


def settings_to_dict(settings: StoreflowSettings) -> dict[str, Any]:
    """Convert settings to a plain dict."""

    return settings.model_dump()


def frame_size_from_settings(settings: StoreflowSettings) -> FrameSize:
    return FrameSize(settings.frame_width, settings.frame_height)


def _config_path() -> Path:
    """Return the YAML configuration path (defaults to config/storeflow.config.yml)."""

    return Path(os.getenv("SFA_CONFIG", "config/storeflow.config.yml"))


def load_settings() -> StoreflowSettings:
    """Load settings from YAML and environment variables.

    YAML provides defaults; environment variables override.
    """

    data: dict[str, Any] = {}
    path = _config_path()
    if path.exists():
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    env_settings = StoreflowSettings()
    env_overrides = {name: getattr(env_settings, name) for name in env_settings.model_fields_set}

    merged = {**data, **env_overrides}
    return StoreflowSettings(**merged)
