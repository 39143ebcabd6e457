import numpy as np
import pytest

from storeflow.core.floormap.layout import (
    StoreArea,
    StoreFeatures,
    analyze_store_layout,
    merge_adjacent_areas,
    store_insights,
)
from storeflow.core.types import HeatmapPoint


def _plan() -> np.ndarray:
    image = np.zeros((40, 40, 3), dtype=np.uint8)
    image[:20, :20] = 255  # walkway
    image[:20, 20:] = 100  # shelf
    image[20:, 20:] = (230, 120, 120)  # cashier (RGB)
    return image


def test_cells_are_classified_by_colour():
    features = analyze_store_layout(_plan(), resolution=20)

    assert features.walkable == [[True, False], [False, True]]
    assert features.resolution == 20
    types = {a.type for a in features.areas}
    assert types == {"walkway", "shelf", "cashier", "entrance", "exit"}
    shelf = next(a for a in features.areas if a.type == "shelf")
    assert (shelf.x, shelf.y, shelf.width, shelf.height) == (20, 0, 20, 20)


def test_adjacent_same_type_areas_merge():
    areas = [
        StoreArea("a", "shelf", 0, 0, 20, 20),
        StoreArea("b", "shelf", 20, 0, 20, 20),
        StoreArea("c", "counter", 40, 0, 20, 20),
    ]
    merged = merge_adjacent_areas(areas, 20)

    assert StoreArea("a", "shelf", 0, 0, 40, 20) in merged
    assert len(merged) == 2


def test_store_insights_count_heat_per_area_type():
    features = StoreFeatures(
        areas=[StoreArea("w", "walkway", 0, 0, 20, 20), StoreArea("s", "shelf", 20, 0, 20, 20)],
        walkable=[[True, False]],
        resolution=20,
    )
    heat = [HeatmapPoint(10, 10, 1.0), HeatmapPoint(30, 10, 0.5), HeatmapPoint(35, 5, 0.2)]

    result = store_insights(features, heat)

    assert result.insights == [
        "Main walkways have 1 traffic points",
        "Shelves attract 2 customer interactions",
    ]
    assert result.recommendations[0].startswith("Consider adding more products to shelf areas")
    assert result.recommendations[1].startswith("walkway areas need attention")
    assert result.area_stats == [
        {"type": "walkway", "visits": 1, "heat_level": 1.0},
        {"type": "shelf", "visits": 2, "heat_level": 0.5},
    ]


def test_empty_image_is_rejected():
    with pytest.raises(ValueError):
        analyze_store_layout(np.zeros((0, 0, 3), dtype=np.uint8))
