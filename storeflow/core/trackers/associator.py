"""Frame-to-frame association of person detections into persistent tracks.

Matching is greedy and order dependent: each detection takes the nearest
active track within the gating distance that no earlier detection of the same
frame has claimed. Paths are stored in unit space.
"""

from __future__ import annotations

import math
from dataclasses import replace

import numpy as np

from storeflow.core.coords import box_center, to_unit
from storeflow.core.types import DetectedBox, FrameSize, PathPoint, Track

DEFAULT_GATING_DISTANCE = 100.0
DEFAULT_STALE_AFTER_MS = 2000
CLAIMED_DISTANCE = math.inf


def _next_track_id(taken: set[str], start: int) -> tuple[str, int]:
    """Return the first free `person_<n>` id at or after `start`."""

    n = start
    while f"person_{n}" in taken:
        n += 1
    return f"person_{n}", n + 1


def associate(
    detections: list[DetectedBox],
    prior_tracks: list[Track],
    timestamp: int,
    frame: FrameSize,
    gating_distance: float = DEFAULT_GATING_DISTANCE,
    stale_after_ms: int = DEFAULT_STALE_AFTER_MS,
) -> list[Track]:
    """Assign detections to tracks and return the updated track list.

    Detections are matched greedily in iteration order to the nearest active,
    not yet claimed prior track whose last point lies within `gating_distance`
    pixels. Track paths are stored in unit space; distances are measured in
    pixel space. Inputs are never mutated.
    """

    detections_list = detections if isinstance(detections, list) else list(detections)
    for track in prior_tracks:
        if timestamp < track.last_seen:
            raise ValueError(
                f"timestamp {timestamp} is earlier than last update of track {track.id}"
            )

    tracks = [replace(t, path=list(t.path)) for t in prior_tracks]
    taken = {t.id for t in tracks}
    id_counter = len(tracks)
    matched: set[int] = set()

    candidates = [i for i, t in enumerate(tracks) if t.active and t.space == "unit"]

    distances = None
    if candidates and detections_list:
        fw, fh = float(frame.width), float(frame.height)
        last = np.array(
            [(tracks[i].path[-1].x * fw, tracks[i].path[-1].y * fh) for i in candidates],
            dtype=np.float64,
        )
        centers = np.array(
            [(c.x, c.y) for c in (box_center(d) for d in detections_list)], dtype=np.float64
        )
        distances = np.hypot(
            centers[:, None, 0] - last[None, :, 0], centers[:, None, 1] - last[None, :, 1]
        )

    new_tracks: list[Track] = []
    for di, det in enumerate(detections_list):
        unit = to_unit(box_center(det), frame)
        point = PathPoint(unit.x, unit.y, int(timestamp))

        if distances is not None:
            row = distances[di]
            ci = int(row.argmin())
            if row[ci] < gating_distance:
                ti = candidates[ci]
                track = tracks[ti]
                track.path.append(point)
                track.last_seen = int(timestamp)
                track.bbox = det
                track.active = True
                matched.add(ti)
                # One detection per track per frame.
                distances[:, ci] = CLAIMED_DISTANCE
                continue

        track_id, id_counter = _next_track_id(taken, id_counter)
        taken.add(track_id)
        new_tracks.append(
            Track(
                id=track_id,
                path=[point],
                active=True,
                last_seen=int(timestamp),
                bbox=det,
                space="unit",
            )
        )

    for ti, track in enumerate(tracks):
        if ti in matched:
            continue
        if timestamp - track.last_seen > stale_after_ms:
            track.active = False

    return tracks + new_tracks


class TrackAssociator:
    """Owner of the canonical track list.

    Threads its tracks through `associate` once per processed frame. Consumers
    read snapshots via `tracks`.
    """

    def __init__(
        self,
        frame: FrameSize,
        gating_distance: float = DEFAULT_GATING_DISTANCE,
        stale_after_ms: int = DEFAULT_STALE_AFTER_MS,
    ) -> None:
        self.frame = frame
        self.gating_distance = gating_distance
        self.stale_after_ms = stale_after_ms
        self._tracks: list[Track] = []

    @property
    def tracks(self) -> list[Track]:
        """Return a shallow snapshot of the current tracks."""

        return list(self._tracks)

    def update(self, detections: list[DetectedBox], timestamp: int) -> list[Track]:
        """Associate one frame of detections and return the new track list."""

        self._tracks = associate(
            detections,
            self._tracks,
            timestamp,
            self.frame,
            gating_distance=self.gating_distance,
            stale_after_ms=self.stale_after_ms,
        )
        return self.tracks

    def load(self, tracks: list[Track]) -> None:
        """Replace the current tracks wholesale (e.g. demo data)."""

        self._tracks = list(tracks)

    def prune_inactive(self) -> int:
        """Drop inactive tracks and return how many were removed."""

        before = len(self._tracks)
        self._tracks = [t for t in self._tracks if t.active]
        return before - len(self._tracks)

    def reset(self) -> None:
        self._tracks = []
