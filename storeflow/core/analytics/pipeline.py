"""Tracking pipeline orchestration.

Ties detection, confidence filtering and track association into a per-frame
step. Detection and association are exposed separately so an async caller can
await the detector and then apply the result synchronously.
"""

from __future__ import annotations

from dataclasses import dataclass

from storeflow.core.detectors.base import (
    DEFAULT_MIN_CONFIDENCE,
    DetectionSource,
    filter_detections,
)
from storeflow.core.trackers.associator import TrackAssociator
from storeflow.core.types import DetectedBox, Frame, Track


@dataclass
class FrameResult:
    """Outcome of one processed frame."""

    frame_id: int
    timestamp: int
    detections: int
    tracks: list[Track]

    @property
    def active_tracks(self) -> int:
        return sum(1 for t in self.tracks if t.active)


class TrackingPipeline:
    """End-to-end per-frame tracking.

    Responsibilities:
    - run the detection source
    - drop boxes below `min_confidence`
    - associate the remaining boxes with the tracker's tracks
    """

    def __init__(
        self,
        detector: DetectionSource,
        associator: TrackAssociator,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    ) -> None:
        self.detector = detector
        self.associator = associator
        self.min_confidence = min_confidence
        self.frame_id = 0

    def detect(self, frame: Frame) -> list[DetectedBox]:
        """Run the detector and keep only confident boxes."""

        return filter_detections(self.detector.detect(frame), self.min_confidence)

    def apply(self, detections: list[DetectedBox], timestamp: int) -> FrameResult:
        """Associate already-filtered detections and return the frame result."""

        self.frame_id += 1
        tracks = self.associator.update(detections, timestamp)
        return FrameResult(
            frame_id=self.frame_id,
            timestamp=int(timestamp),
            detections=len(detections),
            tracks=tracks,
        )

    def process(self, frame: Frame, timestamp: int) -> FrameResult:
        """Detect, filter and associate one frame."""

        return self.apply(self.detect(frame), timestamp)
