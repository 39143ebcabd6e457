"""Ultralytics YOLO person detection source."""

from __future__ import annotations

import importlib
from contextlib import nullcontext
from typing import Any

import numpy as np
from ultralytics import YOLO

from storeflow.core.types import DetectedBox

DEFAULT_MODEL = "yolo11n.pt"


class YoloPersonDetector:
    """Person detector wrapper around Ultralytics YOLO.

    Emits `DetectedBox` values (top-left corner + size) for COCO class 0 only.
    Supports Torch `.pt` models and ONNX exports, on CPU.
    """

    def __init__(self, model_name: str = DEFAULT_MODEL, conf: float = 0.3) -> None:
        """Create a detector.

        Args:
            model_name: Model path/name understood by Ultralytics.
            conf: Confidence threshold applied inside the Ultralytics predictor.
                Tracking-level filtering happens separately via
                `filter_detections`.
        """

        self.model_name = model_name
        self.is_onnx = model_name.lower().endswith(".onnx")
        self.device = "cpu"
        self._torch_inference_mode: Any | None = None
        if not self.is_onnx:
            try:
                torch = importlib.import_module("torch")
                self._torch_inference_mode = torch.inference_mode
            except ImportError:
                self._torch_inference_mode = None
        self.model = YOLO(model_name)
        self.conf = conf
        self._predict_kwargs = {
            "conf": self.conf,
            "verbose": False,
            "classes": [0],
            "device": self.device,
        }

    def detect(self, frame: np.ndarray) -> list[DetectedBox]:
        """Run inference on a single frame and return person boxes."""

        infer_ctx = (
            self._torch_inference_mode()
            if self._torch_inference_mode is not None
            else nullcontext()
        )
        with infer_ctx:
            results = self.model.predict(frame, **self._predict_kwargs)

        if not results:
            return []
        boxes = getattr(results[0], "boxes", None)
        if boxes is None or len(boxes) == 0:
            return []

        data = boxes.data
        if hasattr(data, "cpu"):
            data = data.cpu()
        data_np = data.numpy() if hasattr(data, "numpy") else np.asarray(data)
        # Ultralytics Boxes.data = (x1,y1,x2,y2,conf,cls)
        if data_np.ndim != 2 or data_np.shape[1] < 5:
            return []

        out: list[DetectedBox] = []
        for x1, y1, x2, y2, conf_v in data_np[:, :5]:
            out.append(
                DetectedBox(
                    x=float(x1),
                    y=float(y1),
                    width=float(x2 - x1),
                    height=float(y2 - y1),
                    confidence=float(conf_v),
                )
            )
        return out
