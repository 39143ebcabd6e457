from storeflow.core.analytics.demo import generate_demo_tracks


def test_demo_tracks_shape_and_bounds():
    tracks = generate_demo_tracks(800, 600, num_people=4, points_per_person=30, seed=3, start_ms=1000)

    assert [t.id for t in tracks] == ["person-0", "person-1", "person-2", "person-3"]
    for track in tracks:
        assert track.space == "pixel"
        assert len(track.path) == 30
        assert [p.timestamp for p in track.path] == [1000 + i * 1000 for i in range(30)]
        assert track.last_seen == track.path[-1].timestamp
        assert all(0 <= p.x <= 800 and 0 <= p.y <= 600 for p in track.path)


def test_demo_tracks_are_reproducible_with_seed():
    a = generate_demo_tracks(100, 100, num_people=2, points_per_person=5, seed=11, start_ms=0)
    b = generate_demo_tracks(100, 100, num_people=2, points_per_person=5, seed=11, start_ms=0)
    assert a == b
