"""Floor-map matrices: walkable/obstacle grids describing a store layout.

Matrices built from images use a coarse brightness heuristic (light cells are
floor, dark cells are shelves or walls). The result is an approximation for
visualization, not a ground-truth floor-area detection.
"""

from __future__ import annotations

from dataclasses import dataclass

import cv2
import numpy as np

from storeflow.core.types import GridCell

OBSTACLE = 0
WALKABLE = 1

DEFAULT_RESOLUTION = 20
DEFAULT_WALKABLE_THRESHOLD = 100.0
DEFAULT_SAMPLE_STRIDE = 4

_DEFAULT_LAYOUT = (
    (0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
    (0, 1, 1, 1, 1, 1, 1, 1, 1, 0),
    (0, 1, 0, 0, 1, 1, 0, 0, 1, 0),
    (0, 1, 0, 0, 1, 1, 0, 0, 1, 0),
    (0, 1, 1, 1, 1, 1, 1, 1, 1, 0),
    (0, 1, 1, 1, 1, 1, 1, 1, 1, 0),
    (0, 1, 0, 0, 1, 1, 0, 0, 1, 0),
    (0, 1, 0, 0, 1, 1, 0, 0, 1, 0),
    (0, 1, 1, 1, 1, 1, 1, 1, 1, 0),
    (0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
)


@dataclass(frozen=True)
class FloorMapMatrix:
    """Rectangular grid of 0 (obstacle) / 1 (walkable) cells, row-major."""

    grid: tuple[tuple[int, ...], ...]
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("floor map dimensions must be > 0")
        if len(self.grid) != self.height:
            raise ValueError(f"expected {self.height} rows, got {len(self.grid)}")
        for row in self.grid:
            if len(row) != self.width:
                raise ValueError(f"every row must have {self.width} cells")
            if any(v not in (OBSTACLE, WALKABLE) for v in row):
                raise ValueError("floor map cells must be 0 or 1")

    @classmethod
    def from_rows(cls, rows) -> FloorMapMatrix:
        """Build a matrix from any nested sequence (lists, tuples or a 2D array)."""

        grid = tuple(tuple(int(v) for v in row) for row in rows)
        if not grid:
            raise ValueError("floor map must have at least one row")
        return cls(grid=grid, width=len(grid[0]), height=len(grid))

    def in_bounds(self, cell: GridCell) -> bool:
        return 0 <= cell.x < self.width and 0 <= cell.y < self.height

    def is_walkable(self, cell: GridCell) -> bool:
        """Return True for in-bounds walkable cells."""

        return self.in_bounds(cell) and self.grid[cell.y][cell.x] == WALKABLE

    def to_array(self) -> np.ndarray:
        return np.asarray(self.grid, dtype=np.uint8)

    def to_lists(self) -> list[list[int]]:
        return [list(row) for row in self.grid]


def default_floor_map() -> FloorMapMatrix:
    """Return the built-in 10x10 layout of a generic rectangular store."""

    return FloorMapMatrix(grid=_DEFAULT_LAYOUT, width=10, height=10)


def _as_rgb(image: np.ndarray) -> np.ndarray:
    """Return an `H x W x 3` view of an 8-bit grayscale, RGB or RGBA image."""

    if image.ndim == 2:
        return image[:, :, None].repeat(3, axis=2)
    if image.ndim == 3 and image.shape[2] >= 3:
        return image[:, :, :3]
    raise ValueError(f"unsupported image shape {image.shape}")


def floor_map_from_image(
    image: np.ndarray,
    resolution: int = DEFAULT_RESOLUTION,
    threshold: float = DEFAULT_WALKABLE_THRESHOLD,
    stride: int = DEFAULT_SAMPLE_STRIDE,
) -> FloorMapMatrix:
    """Derive a `resolution x resolution` walkable grid from a floor-plan image.

    Each cell samples every `stride`-th pixel of its region and compares the
    mean luminance `(R + G + B) / 3` against `threshold`; brighter cells are
    walkable. Cells too small to contain a sample are obstacles. Channel
    order does not matter, so OpenCV BGR arrays work as-is.
    """

    if image is None or not isinstance(image, np.ndarray) or image.size == 0:
        raise ValueError("floor plan image is empty")
    if resolution <= 0:
        raise ValueError("resolution must be > 0")
    if stride <= 0:
        raise ValueError("stride must be > 0")

    rgb = _as_rgb(image).astype(np.float64)
    h, w = rgb.shape[:2]

    grid = []
    for y in range(resolution):
        y0 = (y * h) // resolution
        y1 = ((y + 1) * h) // resolution
        row = []
        for x in range(resolution):
            x0 = (x * w) // resolution
            x1 = ((x + 1) * w) // resolution
            samples = rgb[y0:y1:stride, x0:x1:stride]
            brightness = float(samples.mean()) if samples.size else 0.0
            row.append(WALKABLE if brightness > threshold else OBSTACLE)
        grid.append(tuple(row))

    return FloorMapMatrix(grid=tuple(grid), width=resolution, height=resolution)


def decode_floor_plan(data: bytes) -> np.ndarray:
    """Decode an encoded image (PNG, JPEG, ...) into a BGR array."""

    if not data:
        raise ValueError("floor plan upload is empty")
    buf = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("floor plan upload is not a decodable image")
    return image
