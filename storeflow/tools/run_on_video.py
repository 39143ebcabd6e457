"""Offline tracking over a video file (or the synthetic demo feed).

Writes the resulting tracks, in video pixel coordinates, together with the
visitor analytics to a JSON file.
"""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path

from storeflow.core.analytics.pipeline import TrackingPipeline
from storeflow.core.analytics.summary import calculate_analytics
from storeflow.core.coords import denormalize_tracks
from storeflow.core.detectors.base import DetectionSource, RandomDetectionSource
from storeflow.core.detectors.yolo import YoloPersonDetector
from storeflow.core.export import track_to_dict
from storeflow.core.trackers.associator import TrackAssociator
from storeflow.core.types import FrameSize
from storeflow.core.video_sources.base import BlankSource, FileSource, VideoSource


def _make_source(args) -> VideoSource:
    if args.input:
        return FileSource(args.input)
    return BlankSource(FrameSize(args.frame_width, args.frame_height))


def _make_detector(args) -> DetectionSource:
    if args.mock or not args.input:
        return RandomDetectionSource(seed=args.seed)
    return YoloPersonDetector(args.model, conf=args.conf)


def run(args) -> dict:
    try:
        source = _make_source(args)
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from None
    size = source.frame_size()
    associator = TrackAssociator(size, gating_distance=args.gating_distance)
    pipeline = TrackingPipeline(_make_detector(args), associator, min_confidence=args.min_confidence)

    frames = 0
    try:
        while True:
            frame = source.read()
            if frame is None:
                break
            pipeline.process(frame, timestamp=frames * args.frame_interval_ms)
            frames += 1
            if args.max_frames and frames >= args.max_frames:
                break
    finally:
        source.close()

    tracks = associator.tracks
    pixel_tracks = denormalize_tracks(tracks, size)
    output = {
        "frames": frames,
        "frame_size": [size.width, size.height],
        "tracks": [track_to_dict(t) for t in pixel_tracks],
        "analytics": asdict(calculate_analytics(pixel_tracks, area_tracks=tracks)),
    }
    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(output, f, indent=2)
    print(f"Wrote {len(pixel_tracks)} tracks from {frames} frames to {out_path}")
    return output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Track shoppers in a video and summarize their paths")
    parser.add_argument("--input", default=None, help="Path to video file (omit for the synthetic feed)")
    parser.add_argument("--output", required=True, help="Where to save JSON output")
    parser.add_argument("--model", default="yolo11n.pt")
    parser.add_argument("--conf", type=float, default=0.3, help="Detector confidence")
    parser.add_argument("--min-confidence", type=float, default=0.6, help="Association threshold")
    parser.add_argument("--gating-distance", type=float, default=100.0, help="Max match distance in px")
    parser.add_argument("--frame-interval-ms", type=int, default=100, help="Timestamp step per frame")
    parser.add_argument("--frame-width", type=int, default=800)
    parser.add_argument("--frame-height", type=int, default=600)
    parser.add_argument("--max-frames", type=int, default=0, help="Limit frames for quick tests")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the synthetic feed")
    parser.add_argument(
        "--mock", action="store_true", help="Use the synthetic detector (no model download)"
    )
    return parser


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args()
    if not args.input and not args.max_frames:
        raise SystemExit("--max-frames is required without --input")
    run(args)


if __name__ == "__main__":
    main()
