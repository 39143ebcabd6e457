"""Path post-processing for display."""

from __future__ import annotations

from storeflow.core.types import PathPoint

DEFAULT_WINDOW_SIZE = 5


def smooth_path(path: list[PathPoint], window_size: int = DEFAULT_WINDOW_SIZE) -> list[PathPoint]:
    """Reduce jitter with a symmetric moving average.

    Paths no longer than `window_size` are returned unchanged. Otherwise the
    first and last points are kept verbatim and only the interior indices
    `[window_size, len - window_size)` are emitted, each replaced by the mean
    of the `2 * window_size + 1` points around it. The output is therefore
    shorter than the input.
    """

    if window_size < 0:
        raise ValueError("window_size must be >= 0")
    if len(path) <= window_size:
        return list(path)

    span = 2 * window_size + 1
    smoothed = [path[0]]
    for i in range(window_size, len(path) - window_size):
        window = path[i - window_size : i + window_size + 1]
        smoothed.append(
            PathPoint(
                x=sum(p.x for p in window) / span,
                y=sum(p.y for p in window) / span,
                timestamp=path[i].timestamp,
            )
        )
    smoothed.append(path[-1])
    return smoothed
