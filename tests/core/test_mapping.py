import pytest

from storeflow.core.floormap.mapping import map_to_floor_map
from storeflow.core.floormap.matrix import default_floor_map
from storeflow.core.types import GridCell, PathPoint, Track


def test_points_snap_to_clamped_cell_corners():
    track = Track(
        id="a",
        path=[
            PathPoint(0.0, 0.0, 0),
            PathPoint(0.15, 0.15, 1),
            PathPoint(0.999, 0.5, 2),
            PathPoint(1.5, -0.2, 3),
        ],
    )
    [mapped] = map_to_floor_map([track], default_floor_map())
    cells = [p.cell for p in mapped.floor_map_path]

    assert cells == [GridCell(0, 0), GridCell(1, 1), GridCell(9, 5), GridCell(9, 0)]
    assert [p.walkable for p in mapped.floor_map_path] == [False, True, False, False]
    assert (mapped.floor_map_path[1].x, mapped.floor_map_path[1].y) == (0.1, 0.1)
    assert (mapped.floor_map_path[0].x, mapped.floor_map_path[0].y) == (0.0, 0.0)
    assert (mapped.floor_map_path[2].x, mapped.floor_map_path[2].y) == (0.9, 0.5)
    assert [p.timestamp for p in mapped.floor_map_path] == [0, 1, 2, 3]
    assert mapped.path == track.path


def test_pixel_tracks_are_rejected():
    track = Track(id="p", path=[PathPoint(10, 10, 0)], space="pixel")
    with pytest.raises(ValueError):
        map_to_floor_map([track], default_floor_map())
