from storeflow.core.analytics.summary import (
    calculate_analytics,
    path_length,
    peak_period,
    popular_area,
    round_half_up,
)
from storeflow.core.types import AnalyticsSummary, PathPoint, Track


def test_no_tracks_gives_zero_summary():
    assert calculate_analytics([]) == AnalyticsSummary(
        total_visitors=0,
        average_time_seconds=0,
        average_distance=0,
        total_distance=0,
        popular_area="Not enough data",
        peak_period="No data",
    )


def test_averages_divide_by_all_tracks_including_single_point_ones():
    moving = Track(id="a", path=[PathPoint(0.0, 0.0, 0), PathPoint(0.3, 0.4, 3000)])
    still = Track(id="b", path=[PathPoint(0.5, 0.5, 1000)])

    summary = calculate_analytics([moving, still])

    assert summary.total_visitors == 2
    # 3000 ms over two visitors = 1.5 s
    assert summary.average_time_seconds == 2
    assert summary.total_distance == 1
    assert summary.average_distance == 0
    assert summary.popular_area == "Top Left"
    assert summary.peak_period == "Beginning"


def test_pixel_distances_round_half_up():
    track = Track(id="a", path=[PathPoint(0, 0, 0), PathPoint(3, 4, 500)], space="pixel")
    other = Track(id="b", path=[PathPoint(10, 10, 0)], space="pixel")

    summary = calculate_analytics([track, other])

    assert path_length(track) == 5.0
    assert summary.total_distance == 5
    assert summary.average_distance == 3
    assert summary.average_time_seconds == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(1.4999) == 1


def test_popular_area_uses_three_by_three_grid():
    tracks = [
        Track(id="a", path=[PathPoint(0.9, 0.9, 0), PathPoint(0.95, 0.8, 1)]),
        Track(id="b", path=[PathPoint(0.5, 0.1, 0)]),
    ]
    assert popular_area(tracks) == "Bottom Right"
    assert popular_area([]) == "Not enough data"


def test_area_tracks_override_for_pixel_tracks():
    pixel = [Track(id="a", path=[PathPoint(400, 300, 0)], space="pixel")]
    unit = [Track(id="a", path=[PathPoint(0.5, 0.5, 0)])]

    assert calculate_analytics(pixel, area_tracks=unit).popular_area == "Center"


def test_peak_period_picks_busiest_third():
    track = Track(
        id="a",
        path=[PathPoint(0, 0, ts) for ts in (0, 100, 900, 950, 1000)],
    )
    assert peak_period([track]) == "End"
    assert peak_period([Track(id="b", path=[PathPoint(0, 0, 5)])]) == "No data"
