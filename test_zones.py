"""Tests for the zone layout."""

import pytest

from garden_generator import Zone, ZoneKind, ZoneLayout, create_zones, distance_influence


def test_default_layout():
    zones = create_zones(120, 60)
    assert len(zones) == 15
    kinds = [zone.kind for zone in zones]
    assert kinds.count(ZoneKind.GRAVEL_GARDEN) == 2
    assert kinds.count(ZoneKind.FOCAL_POINT) == 2
    assert kinds.count(ZoneKind.FLOW) == 2
    assert kinds.count(ZoneKind.CENTER) == 1
    assert kinds.count(ZoneKind.EDGE) == 4
    assert kinds.count(ZoneKind.CORNER) == 4


def test_every_zone_has_size_at_minimum_dimensions():
    for zone in create_zones(12, 12):
        assert zone.width > 0
        assert zone.height > 0


def test_center_zone_center_resolves_to_center():
    layout = ZoneLayout.default(120, 60)
    center = next(zone for zone in layout if zone.kind == ZoneKind.CENTER)
    assert (center.start_row, center.start_col, center.width, center.height) == (20, 40, 40, 20)
    assert (center.center_row, center.center_col) == (30, 60)
    assert layout.zone_kind(30, 60) == ZoneKind.CENTER


def test_gravel_garden_zone_wins_over_nothing():
    layout = ZoneLayout.default(120, 60)
    # First gravel garden: rows 30-36, cols 30-44
    assert layout.zone_kind(32, 35) == ZoneKind.GRAVEL_GARDEN


def test_highest_influence_wins():
    layout = ZoneLayout([
        Zone(ZoneKind.EDGE, 0, 0, 10, 10, 0.8),
        Zone(ZoneKind.FOCAL_POINT, 0, 0, 10, 10, 1.8),
    ])
    assert layout.zone_kind(5, 5) == ZoneKind.FOCAL_POINT


def test_ties_keep_first_declared_zone():
    layout = ZoneLayout([
        Zone(ZoneKind.CORNER, 0, 0, 10, 10, 1.0),
        Zone(ZoneKind.FLOW, 0, 0, 10, 10, 1.0),
    ])
    assert layout.zone_kind(3, 3) == ZoneKind.CORNER


def test_uncovered_cell_falls_back_to_nearest_center():
    layout = ZoneLayout([
        Zone(ZoneKind.CORNER, 0, 0, 4, 4, 1.0),
        Zone(ZoneKind.CENTER, 20, 20, 4, 4, 1.0),
    ])
    assert layout.containing(18, 18) == []
    assert layout.zone_kind(18, 18) == ZoneKind.CENTER
    assert layout.zone_kind(6, 6) == ZoneKind.CORNER


def test_dominant_zone_is_deterministic():
    first = ZoneLayout.default(60, 30)
    second = ZoneLayout.default(60, 30)
    for row in range(30):
        for col in range(60):
            assert first.zone_kind(row, col) == second.zone_kind(row, col)


def test_distance_influence_bounds():
    zone = Zone(ZoneKind.CENTER, 0, 0, 10, 10, 1.0)
    assert distance_influence(zone, 5, 5) == 1.0
    assert distance_influence(zone, 50, 50) == 0.1
    assert 0.1 <= distance_influence(zone, 2, 7) <= 1.0


def test_empty_layout_is_rejected():
    with pytest.raises(ValueError):
        ZoneLayout([])
