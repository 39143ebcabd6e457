"""Detection sources.

Anything with a `detect(frame) -> list[DetectedBox]` method can feed the
tracking pipeline: the Ultralytics detector, the random demo source used when
no model is available, or a fixed replay for deterministic tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

import numpy as np

from storeflow.core.types import DetectedBox, Frame

DEFAULT_MIN_CONFIDENCE = 0.6


class DetectionSource(Protocol):
    """Minimal detector interface expected by `TrackingPipeline`."""

    def detect(self, frame: Frame) -> list[DetectedBox]:
        """Return person boxes for one frame in pixel coordinates."""


def filter_detections(
    boxes: Iterable[DetectedBox], min_confidence: float = DEFAULT_MIN_CONFIDENCE
) -> list[DetectedBox]:
    """Drop low-confidence boxes before they reach the associator."""

    return [b for b in boxes if b.confidence >= min_confidence]


class ReplayDetectionSource:
    """Return a fixed sequence of per-frame detections, then nothing."""

    def __init__(self, frames: Sequence[Sequence[DetectedBox]]) -> None:
        self._frames = [list(f) for f in frames]
        self.calls = 0

    def detect(self, frame: Frame) -> list[DetectedBox]:
        i = self.calls
        self.calls += 1
        if i >= len(self._frames):
            return []
        return list(self._frames[i])


class RandomDetectionSource:
    """Synthetic people wandering around the frame.

    Each call nudges every simulated person by up to `step_px` pixels and may
    spawn a new one. Useful for demos without a model; pass `seed` for
    reproducible output.
    """

    def __init__(
        self,
        max_people: int = 10,
        spawn_probability: float = 0.05,
        step_px: float = 20.0,
        box_size: tuple[float, float] = (40.0, 100.0),
        seed: int | None = None,
    ) -> None:
        self.max_people = max_people
        self.spawn_probability = spawn_probability
        self.step_px = step_px
        self.box_size = box_size
        self._rng = np.random.default_rng(seed)
        self._positions: list[tuple[float, float]] = []

    def detect(self, frame: Frame) -> list[DetectedBox]:
        h, w = frame.shape[:2]
        moved = []
        for x, y in self._positions:
            dx, dy = (self._rng.random(2) - 0.5) * self.step_px
            moved.append((min(float(w), max(0.0, x + dx)), min(float(h), max(0.0, y + dy))))
        self._positions = moved

        if len(self._positions) < self.max_people and (
            not self._positions or self._rng.random() < self.spawn_probability
        ):
            self._positions.append((float(self._rng.random() * w), float(self._rng.random() * h)))

        bw, bh = self.box_size
        return [
            DetectedBox(
                x=x - bw / 2.0,
                y=y - bh / 2.0,
                width=bw,
                height=bh,
                confidence=float(self._rng.uniform(0.5, 1.0)),
            )
            for x, y in self._positions
        ]
