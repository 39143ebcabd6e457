import pytest

from storeflow.core.analytics.heatmap import generate_floor_heatmap, generate_heatmap
from storeflow.core.floormap.mapping import map_to_floor_map
from storeflow.core.floormap.matrix import default_floor_map
from storeflow.core.types import GridCell, HeatmapPoint, MappedPoint, MappedTrack, PathPoint, Track


def _pixel_track(points) -> Track:
    return Track(
        id="t",
        path=[PathPoint(x, y, i) for i, (x, y) in enumerate(points)],
        space="pixel",
    )


def test_counts_are_normalized_by_densest_cell():
    tracks = [_pixel_track([(0, 0), (0, 0), (100, 100)])]
    heat = generate_heatmap(tracks, 100, 100, 50)

    assert heat == [HeatmapPoint(25.0, 25.0, 1.0), HeatmapPoint(75.0, 75.0, 0.5)]


def test_points_outside_the_plane_are_dropped():
    tracks = [_pixel_track([(-5, 10), (150, 10), (10, 101)])]
    assert generate_heatmap(tracks, 100, 100, 50) == []


def test_empty_tracks_give_empty_heatmap():
    assert generate_heatmap([], 100, 100) == []


def test_heatmap_is_deterministic_and_bounded():
    tracks = [_pixel_track([(5, 5), (45, 90), (33, 12), (99, 1)]), _pixel_track([(5, 6), (80, 80)])]
    first = generate_heatmap(tracks, 100, 100, 20)
    second = generate_heatmap(tracks, 100, 100, 20)

    assert first == second
    assert max(p.value for p in first) == 1.0
    assert all(0.0 < p.value <= 1.0 for p in first)
    assert all(0 <= p.x <= 100 and 0 <= p.y <= 100 for p in first)


def test_grid_size_must_be_positive():
    with pytest.raises(ValueError):
        generate_heatmap([], 100, 100, 0)


def _mapped(points) -> MappedTrack:
    return MappedTrack(
        id="m",
        path=[],
        floor_map_path=[
            MappedPoint(x, y, i, walkable, GridCell(0, 0)) for i, (x, y, walkable) in enumerate(points)
        ],
    )


def test_floor_heatmap_counts_walkable_points_only():
    track = _mapped([(0.51, 0.51, True), (0.52, 0.53, True), (0.01, 0.01, False)])
    heat = generate_floor_heatmap([track], 0.05)

    assert len(heat) == 1
    assert heat[0].x == pytest.approx(0.525)
    assert heat[0].y == pytest.approx(0.525)
    assert heat[0].value == 1.0


def test_floor_heatmap_rejects_bad_cell_fraction():
    with pytest.raises(ValueError):
        generate_floor_heatmap([], 0.0)


def test_points_beyond_plane_but_inside_grid_are_kept():
    # width 110 with grid 50 gives three columns, the last one covering [100, 150)
    heat = generate_heatmap([_pixel_track([(120, 10)])], 110, 40, 50)
    assert heat == [HeatmapPoint(125.0, 25.0, 1.0)]


def test_snapped_floor_points_bin_into_their_own_cells():
    corridor = Track(id="c", path=[PathPoint((x + 0.5) / 10, 0.15, x) for x in range(1, 9)])
    [mapped] = map_to_floor_map([corridor], default_floor_map())

    heat = generate_floor_heatmap([mapped], 0.05)

    assert [p.x for p in heat] == pytest.approx([0.1 * x + 0.025 for x in range(1, 9)])
    assert all(p.y == pytest.approx(0.125) for p in heat)
    assert all(p.value == 1.0 for p in heat)
