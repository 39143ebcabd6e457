import cv2
import numpy as np
import pytest

from storeflow.core.floormap.matrix import (
    FloorMapMatrix,
    decode_floor_plan,
    default_floor_map,
    floor_map_from_image,
)
from storeflow.core.types import GridCell


def test_default_floor_map_has_walls_and_corridor():
    matrix = default_floor_map()

    assert (matrix.width, matrix.height) == (10, 10)
    assert all(v == 0 for v in matrix.grid[0])
    assert all(v == 1 for v in matrix.grid[1][1:9])
    assert matrix.is_walkable(GridCell(1, 1))
    assert not matrix.is_walkable(GridCell(0, 0))
    assert not matrix.is_walkable(GridCell(10, 1))


def test_matrix_must_be_rectangular_and_binary():
    with pytest.raises(ValueError):
        FloorMapMatrix.from_rows([[1, 0], [1]])
    with pytest.raises(ValueError):
        FloorMapMatrix.from_rows([[1, 2]])
    with pytest.raises(ValueError):
        FloorMapMatrix.from_rows([])


def test_bright_cells_become_walkable():
    image = np.zeros((100, 100, 3), dtype=np.uint8)
    image[:, :50] = 255
    matrix = floor_map_from_image(image, resolution=2)

    assert matrix.to_lists() == [[1, 0], [1, 0]]


def test_threshold_is_strict_and_grayscale_is_accepted():
    gray = np.full((40, 40), 100, dtype=np.uint8)
    assert floor_map_from_image(gray, resolution=4).to_array().sum() == 0
    assert floor_map_from_image(gray, resolution=4, threshold=99).to_array().sum() == 16


def test_invalid_images_are_rejected():
    with pytest.raises(ValueError):
        floor_map_from_image(np.zeros((0, 0, 3), dtype=np.uint8))
    with pytest.raises(ValueError):
        floor_map_from_image(np.zeros((10, 10, 3), dtype=np.uint8), resolution=0)


def test_decode_floor_plan_roundtrips_png():
    image = np.full((30, 40, 3), 200, dtype=np.uint8)
    ok, buf = cv2.imencode(".png", image)
    assert ok

    decoded = decode_floor_plan(buf.tobytes())
    assert decoded.shape == (30, 40, 3)


def test_decode_floor_plan_rejects_garbage():
    with pytest.raises(ValueError):
        decode_floor_plan(b"")
    with pytest.raises(ValueError):
        decode_floor_plan(b"not an image")
