from pathlib import Path

import pytest

from storeflow.core.config import settings as cfg
from storeflow.core.types import FrameSize


def test_load_settings_reads_yaml_file(tmp_path: Path, monkeypatch):
    conf_path = tmp_path / "config.yml"
    conf_path.write_text("confidence: 0.7\nfloor_map_resolution: 10\n", encoding="utf-8")
    monkeypatch.setenv("SFA_CONFIG", str(conf_path))

    settings = cfg.load_settings()
    assert settings.confidence == 0.7
    assert settings.floor_map_resolution == 10
    assert settings.gating_distance_px == 100.0


def test_env_overrides_yaml(tmp_path: Path, monkeypatch):
    conf_path = tmp_path / "config.yml"
    conf_path.write_text("confidence: 0.7\n", encoding="utf-8")
    monkeypatch.setenv("SFA_CONFIG", str(conf_path))
    monkeypatch.setenv("SFA_CONFIDENCE", "0.8")

    assert cfg.load_settings().confidence == 0.8


def test_missing_file_uses_defaults(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("SFA_CONFIG", str(tmp_path / "missing.yml"))

    settings = cfg.load_settings()
    assert settings.detection_source == "random"
    assert cfg.frame_size_from_settings(settings) == FrameSize(800, 600)


@pytest.mark.parametrize(
    "field, value",
    [
        ("detection_source", "webcam"),
        ("confidence", 1.2),
        ("gating_distance_px", 0),
        ("floor_heatmap_cell", 0.0),
        ("walkable_threshold", 300),
        ("demo_points_per_person", 0),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValueError):
        cfg.StoreflowSettings(**{field: value})
