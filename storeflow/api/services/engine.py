"""Tracking engine: owns live tracking state and the processing loop used by the API."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

import cv2
import numpy as np

from storeflow.core.analytics.demo import generate_demo_tracks
from storeflow.core.analytics.heatmap import generate_floor_heatmap, generate_heatmap
from storeflow.core.analytics.paths import smooth_path
from storeflow.core.analytics.pipeline import FrameResult, TrackingPipeline
from storeflow.core.analytics.summary import calculate_analytics
from storeflow.core.config.settings import StoreflowSettings, frame_size_from_settings
from storeflow.core.coords import denormalize_tracks, normalize_tracks
from storeflow.core.detectors.base import DetectionSource, RandomDetectionSource
from storeflow.core.detectors.yolo import YoloPersonDetector
from storeflow.core.floormap.insights import generate_floor_map_insights
from storeflow.core.floormap.layout import (
    StoreFeatures,
    StoreInsights,
    analyze_store_layout,
    store_insights,
)
from storeflow.core.floormap.mapping import map_to_floor_map
from storeflow.core.floormap.matrix import (
    FloorMapMatrix,
    default_floor_map,
    floor_map_from_image,
)
from storeflow.core.trackers.associator import TrackAssociator
from storeflow.core.types import (
    AnalyticsSummary,
    FloorMapInsights,
    FrameSize,
    HeatmapPoint,
    MappedTrack,
    Track,
)
from storeflow.core.video_sources.base import BlankSource, FileSource, VideoSource

logger = logging.getLogger(__name__)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class TrackingEngine:
    """Owns the canonical tracking state and drives the processing loop.

    The loop is cooperative and single-threaded: every `process_interval_ms`
    it reads a frame, awaits the detector (run in a worker thread, the only
    suspension point) and then associates the result synchronously. Results
    that arrive after `stop()` are discarded.
    """

    def __init__(
        self,
        settings: StoreflowSettings,
        detector: DetectionSource | None = None,
        source: VideoSource | None = None,
        clock: Callable[[], int] = _wall_clock_ms,
    ) -> None:
        self.settings = settings
        self._detector = detector
        self._source = source
        self._clock = clock
        self.frame_size: FrameSize = (
            source.frame_size() if source is not None else frame_size_from_settings(settings)
        )
        self.associator = TrackAssociator(
            self.frame_size,
            gating_distance=settings.gating_distance_px,
            stale_after_ms=settings.stale_after_ms,
        )
        self.pipeline: TrackingPipeline | None = None
        self.floor_map: FloorMapMatrix = default_floor_map()
        self.store_features: StoreFeatures | None = None
        self.floor_plan_size: FrameSize | None = None
        self.processing = False
        self.last_error: str | None = None
        self.latest_result: FrameResult | None = None
        self._task: asyncio.Task | None = None

    def _make_detector(self) -> DetectionSource:
        """Instantiate the configured detection source."""

        if self.settings.detection_source == "yolo":
            return YoloPersonDetector(self.settings.model_name, conf=self.settings.confidence)
        return RandomDetectionSource(
            max_people=self.settings.random_max_people, seed=self.settings.random_seed
        )

    def _make_source(self) -> VideoSource:
        """Instantiate the configured `VideoSource`."""

        if self.settings.video_path:
            return FileSource(self.settings.video_path)
        return BlankSource(frame_size_from_settings(self.settings))

    def _ensure_pipeline(self) -> TrackingPipeline:
        if self.pipeline is None:
            if self._detector is None:
                self._detector = self._make_detector()
            self.pipeline = TrackingPipeline(
                self._detector, self.associator, min_confidence=self.settings.confidence
            )
        return self.pipeline

    # Processing loop

    def start(self) -> bool:
        """Start the processing loop on the running event loop.

        Returns False when already running or when the source cannot be opened.
        """

        if self.processing:
            return False
        try:
            self._ensure_pipeline()
            if self._source is None:
                self._source = self._make_source()
        except Exception:
            self.last_error = "Failed to initialize detection or video source"
            logger.exception(self.last_error)
            return False

        self.frame_size = self._source.frame_size()
        self.associator.frame = self.frame_size
        self.processing = True
        self.last_error = None
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Processing started (%dx%d)", self.frame_size.width, self.frame_size.height)
        return True

    def stop(self) -> None:
        """Stop processing; an in-flight detection result will be discarded."""

        self.processing = False
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        logger.info("Processing stopped")

    def close(self) -> None:
        self.stop()
        if self._source is not None:
            self._source.close()
            self._source = None

    async def _run(self) -> None:
        interval = self.settings.process_interval_ms / 1000.0
        logger.debug("Process loop started")
        try:
            while self.processing and self._source is not None:
                try:
                    frame = await asyncio.to_thread(self._source.read)
                    if frame is None:
                        logger.info("Video source exhausted")
                        break
                    await self.step(frame)
                except Exception:
                    self.last_error = "Processing tick failed"
                    logger.exception(self.last_error)
                await asyncio.sleep(interval)
        finally:
            # A task replaced by stop() + start() must not clear the new run.
            if self._task is asyncio.current_task():
                self.processing = False

    async def step(self, frame: np.ndarray) -> FrameResult | None:
        """Run one detect + associate tick.

        A failing detector only skips this frame; the next tick retries.
        """

        pipeline = self._ensure_pipeline()
        timestamp = self._clock()
        try:
            detections = await asyncio.to_thread(pipeline.detect, frame)
        except Exception:
            self.last_error = "Detection failed"
            logger.exception(self.last_error)
            return None
        if not self.processing:
            return None
        try:
            result = pipeline.apply(detections, timestamp)
        except ValueError:
            self.last_error = "Track association failed"
            logger.exception(self.last_error)
            return None
        self.latest_result = result
        self.last_error = None
        return result

    # Track state

    def tracks(self) -> list[Track]:
        """Unit-space snapshot of all tracks."""

        return self.associator.tracks

    def pixel_tracks(self, smooth: bool = False) -> list[Track]:
        """Pixel-space snapshot, optionally smoothed for display."""

        tracks = denormalize_tracks(self.tracks(), self.frame_size)
        if smooth:
            window = self.settings.smoothing_window
            for track in tracks:
                track.path = smooth_path(track.path, window)
        return tracks

    def load_demo(self) -> list[Track]:
        """Replace the tracks with synthetic demo data."""

        points = self.settings.demo_points_per_person
        # Demo paths end at the current clock reading.
        demo = generate_demo_tracks(
            self.frame_size.width,
            self.frame_size.height,
            num_people=self.settings.demo_people,
            points_per_person=points,
            seed=self.settings.random_seed,
            start_ms=self._clock() - (points - 1) * 1000,
        )
        self.associator.load(normalize_tracks(demo, self.frame_size))
        return self.tracks()

    def load_tracks(self, tracks: list[Track]) -> None:
        self.associator.load(normalize_tracks(tracks, self.frame_size))

    def reset(self) -> None:
        self.associator.reset()
        self.latest_result = None

    # Derived views

    def heatmap(self, grid_size: int | None = None) -> list[HeatmapPoint]:
        return generate_heatmap(
            self.pixel_tracks(),
            self.frame_size.width,
            self.frame_size.height,
            grid_size or self.settings.heatmap_grid_px,
        )

    def mapped_tracks(self) -> list[MappedTrack]:
        return map_to_floor_map(self.tracks(), self.floor_map)

    def floor_heatmap(self) -> list[HeatmapPoint]:
        return generate_floor_heatmap(self.mapped_tracks(), self.settings.floor_heatmap_cell)

    def insights(self) -> FloorMapInsights:
        return generate_floor_map_insights(self.tracks(), self.floor_map)

    def analytics(self) -> AnalyticsSummary:
        return calculate_analytics(self.pixel_tracks(), area_tracks=self.tracks())

    # Floor map

    def use_default_floor_map(self) -> FloorMapMatrix:
        self.floor_map = default_floor_map()
        self.store_features = None
        self.floor_plan_size = None
        return self.floor_map

    def use_floor_plan(self, image_bgr: np.ndarray) -> FloorMapMatrix:
        """Rebuild the floor map (and recognized layout) from a floor-plan image."""

        matrix = floor_map_from_image(
            image_bgr,
            resolution=self.settings.floor_map_resolution,
            threshold=self.settings.walkable_threshold,
        )
        rgb = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB) if image_bgr.ndim == 3 else image_bgr
        self.store_features = analyze_store_layout(rgb)
        self.floor_map = matrix
        self.floor_plan_size = FrameSize(image_bgr.shape[1], image_bgr.shape[0])
        logger.info("Floor map rebuilt from image (%dx%d)", matrix.width, matrix.height)
        return matrix

    def layout_insights(self) -> StoreInsights | None:
        """Relate current traffic to the recognized store areas.

        Returns None until a floor plan has been uploaded. Tracks are projected
        onto the floor-plan image so heat points share the areas' pixel space.
        """

        if self.store_features is None or self.floor_plan_size is None:
            return None
        size = self.floor_plan_size
        heat = generate_heatmap(
            denormalize_tracks(self.tracks(), size),
            size.width,
            size.height,
            self.store_features.resolution,
        )
        return store_insights(self.store_features, heat)
