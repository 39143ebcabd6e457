"""Synthetic demonstration tracks."""

from __future__ import annotations

import time

import numpy as np

from storeflow.core.types import PathPoint, Track


def generate_demo_tracks(
    width: float,
    height: float,
    num_people: int = 10,
    points_per_person: int = 100,
    seed: int | None = None,
    start_ms: int | None = None,
) -> list[Track]:
    """Generate pixel-space tracks of people wandering between attraction points.

    Most people enter from the left edge, the rest from the top. Every 20th
    step picks a new random target; each step moves 10% of the way there plus
    jitter. Points are one second apart.
    """

    rng = np.random.default_rng(seed)
    now = int(time.time() * 1000) if start_ms is None else int(start_ms)
    tracks: list[Track] = []

    for i in range(num_people):
        if rng.random() < 0.7:
            x, y = 0.0, float(height * rng.random())
        else:
            x, y = float(width * rng.random()), 0.0

        path: list[PathPoint] = []
        target_x, target_y = x, y
        for j in range(points_per_person):
            if j % 20 == 0:
                target_x, target_y = float(width * rng.random()), float(height * rng.random())
            x += (target_x - x) * 0.1 + (rng.random() - 0.5) * 10
            y += (target_y - y) * 0.1 + (rng.random() - 0.5) * 10
            x = max(0.0, min(float(width), x))
            y = max(0.0, min(float(height), y))
            path.append(PathPoint(x, y, now + j * 1000))

        tracks.append(
            Track(
                id=f"person-{i}",
                path=path,
                active=bool(rng.random() > 0.3),
                last_seen=path[-1].timestamp if path else now,
                space="pixel",
            )
        )
    return tracks
