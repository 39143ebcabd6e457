import numpy as np

from storeflow.core.floormap.insights import (
    GENERAL_REMINDER,
    NO_ISSUES_MESSAGE,
    count_obstacle_neighbors,
    find_bottlenecks,
    find_high_traffic_areas,
    generate_floor_map_insights,
    generate_recommendations,
)
from storeflow.core.floormap.matrix import FloorMapMatrix, default_floor_map
from storeflow.core.types import Bottleneck, GridCell, PathPoint, Track


def test_high_traffic_cells_are_grouped_into_areas():
    traffic = np.zeros((5, 5), dtype=np.int64)
    traffic[1, 1] = 10
    traffic[1, 2] = 10
    traffic[4, 4] = 1
    traffic[4, 0] = 1
    traffic[0, 4] = 1

    [area] = find_high_traffic_areas(traffic)

    assert area.traffic == 20
    assert area.cells == frozenset({GridCell(1, 1), GridCell(2, 1)})
    assert area.center == GridCell(1, 1)


def test_single_hot_cells_are_ignored():
    traffic = np.zeros((5, 5), dtype=np.int64)
    traffic[2, 2] = 10
    traffic[0, 0] = traffic[0, 4] = traffic[4, 0] = traffic[4, 4] = 1

    assert find_high_traffic_areas(traffic) == []
    assert find_high_traffic_areas(np.zeros((3, 3), dtype=np.int64)) == []


def test_enclosed_visited_cell_is_a_bottleneck():
    matrix = FloorMapMatrix.from_rows([[0, 0, 0], [0, 1, 0], [0, 0, 0]])
    traffic = np.zeros((3, 3), dtype=np.int64)

    assert find_bottlenecks(traffic, matrix) == []

    traffic[1, 1] = 3
    assert find_bottlenecks(traffic, matrix) == [Bottleneck(GridCell(1, 1), 3, 8)]


def test_out_of_bounds_neighbors_count_as_obstacles():
    matrix = FloorMapMatrix.from_rows([[1, 1], [1, 1]])
    assert count_obstacle_neighbors(matrix, GridCell(0, 0)) == 5
    assert count_obstacle_neighbors(default_floor_map(), GridCell(1, 1)) == 6


def test_recommendations_without_findings():
    assert generate_recommendations([], []) == [NO_ISSUES_MESSAGE, GENERAL_REMINDER]


def test_recommendations_cover_areas_and_bottlenecks():
    traffic = np.zeros((5, 5), dtype=np.int64)
    traffic[1, 1] = traffic[1, 2] = 10
    traffic[4, 4] = traffic[4, 0] = traffic[0, 4] = 1
    areas = find_high_traffic_areas(traffic)
    bottlenecks = [Bottleneck(GridCell(3, 3), 4, 6), Bottleneck(GridCell(1, 3), 9, 5)]

    suggestions = generate_recommendations(areas, bottlenecks)

    assert len(suggestions) == 5
    assert "1 high-traffic area(s)" in suggestions[0]
    assert "(1, 1)" in suggestions[1]
    assert "2 narrow passage(s)" in suggestions[2]
    assert "(1, 3)" in suggestions[3]
    assert suggestions[-1] == GENERAL_REMINDER


def test_insights_for_no_tracks_are_empty():
    insights = generate_floor_map_insights([], default_floor_map())
    assert insights.high_traffic_areas == []
    assert insights.bottlenecks == []
    assert insights.suggestions == []


def test_insights_from_tracks_in_the_corridor():
    busy = [PathPoint(0.15, 0.15, i) for i in range(10)] + [PathPoint(0.25, 0.15, 10 + i) for i in range(10)]
    quiet = [PathPoint(0.55, 0.45, 0), PathPoint(0.65, 0.45, 1), PathPoint(0.85, 0.85, 2)]
    tracks = [Track(id="a", path=busy), Track(id="b", path=quiet)]

    insights = generate_floor_map_insights(tracks, default_floor_map())

    [area] = insights.high_traffic_areas
    assert area.cells == frozenset({GridCell(1, 1), GridCell(2, 1)})
    assert GridCell(1, 1) in {b.position for b in insights.bottlenecks}
    assert insights.suggestions[-1] == GENERAL_REMINDER
