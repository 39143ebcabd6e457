import numpy as np

import storeflow.core.detectors.yolo as yolo
from storeflow.core.types import DetectedBox


class _Boxes:
    def __init__(self, data):
        self.data = np.asarray(data, dtype=np.float32)

    def __len__(self):
        return len(self.data)


class _Result:
    def __init__(self, data):
        self.boxes = _Boxes(data)


class _FakeYOLO:
    rows: list = []

    def __init__(self, model_name):
        self.model_name = model_name
        self.calls = []

    def predict(self, frame, **kwargs):
        self.calls.append(kwargs)
        return [_Result(self.rows)] if self.rows else []


def test_detect_converts_xyxy_to_corner_and_size(monkeypatch):
    _FakeYOLO.rows = [[10, 20, 50, 120, 0.75, 0]]
    monkeypatch.setattr(yolo, "YOLO", _FakeYOLO)

    detector = yolo.YoloPersonDetector("person.onnx", conf=0.4)
    boxes = detector.detect(np.zeros((200, 200, 3), dtype=np.uint8))

    assert boxes == [DetectedBox(10.0, 20.0, 40.0, 100.0, 0.75)]
    assert detector.model.calls[0]["classes"] == [0]
    assert detector.model.calls[0]["conf"] == 0.4


def test_detect_without_results_is_empty(monkeypatch):
    _FakeYOLO.rows = []
    monkeypatch.setattr(yolo, "YOLO", _FakeYOLO)

    detector = yolo.YoloPersonDetector("person.onnx")
    assert detector.detect(np.zeros((10, 10, 3), dtype=np.uint8)) == []
