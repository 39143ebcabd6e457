import json

import pytest

from storeflow.core.export import tracks_from_json, tracks_to_json
from storeflow.core.types import DetectedBox, PathPoint, Track


def test_export_is_a_json_array_of_tracks():
    track = Track(
        id="person_0",
        path=[PathPoint(1.0, 2.0, 10), PathPoint(3.0, 4.0, 20)],
        active=False,
        last_seen=20,
        bbox=DetectedBox(0, 0, 5, 5, 0.8),
        space="pixel",
    )
    text = tracks_to_json([track])
    data = json.loads(text)

    assert data[0]["id"] == "person_0"
    assert data[0]["path"][1] == {"x": 3.0, "y": 4.0, "timestamp": 20}
    assert tracks_from_json(text) == [track]


def test_import_rejects_malformed_payloads():
    with pytest.raises(ValueError):
        tracks_from_json('{"id": "x"}')
    with pytest.raises(ValueError):
        tracks_from_json('[{"id": "x", "path": []}]')
    with pytest.raises(ValueError):
        tracks_from_json('[{"id": "x", "path": [{"x": 0, "y": 0, "timestamp": 0}], "space": "grid"}]')
