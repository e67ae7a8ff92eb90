"""Tests for element predicates, probabilities and effects on hand-built grids."""

import numpy as np

from garden_generator import ELEMENT_BEHAVIORS, ElementKind, PlacementContext, WaterPath, Zone, ZoneKind, ZoneLayout
from garden_generator.constants import EMPTY
from garden_generator.elements import _create_river, has_clear_space, passes_shared_rules


def empty_grid(height=30, width=30):
    return np.full((height, width), EMPTY, dtype="<U1")


def single_zone(kind=ZoneKind.CENTER, height=30, width=30):
    return ZoneLayout([Zone(kind, 0, 0, width, height, 1.0)])


CENTER = Zone(ZoneKind.CENTER, 0, 0, 30, 30, 1.0)
GRAVEL_GARDEN = Zone(ZoneKind.GRAVEL_GARDEN, 0, 0, 30, 30, 1.0)


def test_has_clear_space():
    grid = empty_grid(10, 10)
    grid[2, 2] = "#"
    assert has_clear_space(grid, 6, 6, 2)
    assert not has_clear_space(grid, 4, 4, 2)


def test_has_clear_space_ignores_own_cell():
    grid = empty_grid(10, 10)
    grid[5, 5] = "#"
    assert has_clear_space(grid, 5, 5, 1)


def test_gravel_counts_as_clear():
    grid = np.full((10, 10), ".", dtype="<U1")
    assert has_clear_space(grid, 5, 5, 3)
    grid[5, 7] = "-"
    assert not has_clear_space(grid, 5, 5, 3)


def test_forbidden_zone_rejects():
    grid = empty_grid()
    context = PlacementContext()
    assert passes_shared_rules(ElementKind.LARGE_ROCKS, 15, 15, CENTER, grid, context)
    assert not passes_shared_rules(ElementKind.LARGE_ROCKS, 15, 15, GRAVEL_GARDEN, grid, context)
    assert passes_shared_rules(ElementKind.FINE_GRAVEL, 15, 15, GRAVEL_GARDEN, grid, context)


def test_edge_buffer_rejects():
    grid = empty_grid()
    context = PlacementContext()
    assert not passes_shared_rules(ElementKind.LARGE_ROCKS, 4, 15, CENTER, grid, context)
    assert passes_shared_rules(ElementKind.LARGE_ROCKS, 5, 15, CENTER, grid, context)
    assert not passes_shared_rules(ElementKind.LARGE_ROCKS, 15, 25, CENTER, grid, context)
    # Bridge buffer is wider on columns than on rows
    assert passes_shared_rules(ElementKind.BRIDGE_PATH, 3, 15, CENTER, grid, context)
    assert not passes_shared_rules(ElementKind.BRIDGE_PATH, 15, 9, CENTER, grid, context)


def test_count_cap_rejects():
    grid = empty_grid(60, 60)
    context = PlacementContext()
    zone = Zone(ZoneKind.CENTER, 0, 0, 60, 60, 1.0)
    for row, col in [(5, 5), (5, 30), (5, 54)]:
        context.record(ElementKind.LARGE_ROCKS, row, col)
    assert not passes_shared_rules(ElementKind.LARGE_ROCKS, 40, 30, zone, grid, context)


def test_same_kind_spacing_rejects():
    grid = empty_grid()
    context = PlacementContext()
    context.record(ElementKind.LARGE_ROCKS, 10, 10)
    assert not passes_shared_rules(ElementKind.LARGE_ROCKS, 18, 18, CENTER, grid, context)
    assert passes_shared_rules(ElementKind.LARGE_ROCKS, 19, 10, CENTER, grid, context)


def test_medium_rock_keeps_away_from_large_rock():
    grid = empty_grid()
    context = PlacementContext()
    context.record(ElementKind.LARGE_ROCKS, 15, 15)
    medium = ELEMENT_BEHAVIORS[ElementKind.MEDIUM_ROCKS]
    assert not medium.can_place(15, 17, CENTER, grid, context)
    assert medium.can_place(15, 20, CENTER, grid, context)


def test_only_one_bridge():
    grid = empty_grid()
    context = PlacementContext()
    bridge = ELEMENT_BEHAVIORS[ElementKind.BRIDGE_PATH]
    assert bridge.can_place(15, 15, CENTER, grid, context)
    context.record(ElementKind.BRIDGE_PATH, 5, 12)
    assert not bridge.can_place(15, 15, CENTER, grid, context)
    assert bridge.probability(15, 15, CENTER, context) == 0.0


def test_moss_needs_support():
    grid = empty_grid()
    context = PlacementContext()
    moss = ELEMENT_BEHAVIORS[ElementKind.MOSS]
    assert not moss.can_place(15, 15, CENTER, grid, context)
    # Near the border
    assert moss.can_place(2, 15, CENTER, grid, context)
    # Near a large rock
    context.record(ElementKind.LARGE_ROCKS, 12, 15)
    assert moss.can_place(15, 15, CENTER, grid, context)


def test_lantern_avoids_water():
    grid = empty_grid()
    context = PlacementContext()
    lantern = ELEMENT_BEHAVIORS[ElementKind.STONE_LANTERN]
    focal = Zone(ZoneKind.FOCAL_POINT, 0, 0, 30, 30, 1.8)
    assert lantern.can_place(15, 15, focal, grid, context)
    context.record(ElementKind.WATER_FEATURE, 20, 20)
    assert not lantern.can_place(15, 15, focal, grid, context)


def test_lantern_forbidden_in_flow():
    grid = empty_grid()
    lantern = ELEMENT_BEHAVIORS[ElementKind.STONE_LANTERN]
    flow = Zone(ZoneKind.FLOW, 0, 0, 30, 30, 1.0)
    assert not lantern.can_place(15, 15, flow, grid, PlacementContext())


def test_raking_only_starts_on_open_ground():
    grid = np.full((30, 30), ".", dtype="<U1")
    grid[15, 15] = "o"
    raked = ELEMENT_BEHAVIORS[ElementKind.HORIZONTAL_RAKED]
    assert raked.can_place(10, 10, CENTER, grid, PlacementContext())
    assert not raked.can_place(15, 15, CENTER, grid, PlacementContext())


def test_large_rock_probability_drops_with_each_rock():
    context = PlacementContext()
    focal = Zone(ZoneKind.FOCAL_POINT, 0, 0, 30, 30, 1.8)
    large = ELEMENT_BEHAVIORS[ElementKind.LARGE_ROCKS]
    first = large.probability(15, 15, focal, context)
    assert first == 0.02 * 4.0
    context.record(ElementKind.LARGE_ROCKS, 1, 1)
    assert large.probability(15, 15, focal, context) < first


def test_single_cell_effect_paints_and_records():
    grid = empty_grid()
    context = PlacementContext()
    rng = np.random.RandomState(0)
    ELEMENT_BEHAVIORS[ElementKind.SMALL_STONES].place(7, 8, grid, context, single_zone(), rng)
    assert grid[7, 8] == "o"
    assert context.placements(ElementKind.SMALL_STONES) == [(7, 8)]


def test_gravel_effect_is_not_recorded():
    grid = empty_grid()
    context = PlacementContext()
    ELEMENT_BEHAVIORS[ElementKind.FINE_GRAVEL].place(3, 3, grid, context, single_zone(), np.random.RandomState(0))
    assert grid[3, 3] == "."
    assert context.count(ElementKind.FINE_GRAVEL) == 0


def test_horizontal_raking_stops_at_obstacle():
    grid = empty_grid(10, 20)
    grid[2, 2] = "#"
    context = PlacementContext()
    ELEMENT_BEHAVIORS[ElementKind.HORIZONTAL_RAKED].place(2, 0, grid, context, single_zone(height=10, width=20),
                                                         np.random.RandomState(1))
    assert grid[2, 0] == "-"
    assert grid[2, 1] == "-"
    assert grid[2, 2] == "#"
    assert context.count(ElementKind.HORIZONTAL_RAKED) == 2


def test_vertical_raking_length():
    grid = empty_grid()
    context = PlacementContext()
    ELEMENT_BEHAVIORS[ElementKind.VERTICAL_RAKED].place(5, 5, grid, context, single_zone(), np.random.RandomState(3))
    painted = context.placements(ElementKind.VERTICAL_RAKED)
    assert 3 <= len(painted) <= 6
    assert all(col == 5 for _, col in painted)
    assert all(grid[row, col] == "|" for row, col in painted)


def test_water_effect_records_path():
    for seed in range(5):
        grid = empty_grid()
        context = PlacementContext()
        ELEMENT_BEHAVIORS[ElementKind.WATER_FEATURE].place(15, 15, grid, context, single_zone(),
                                                          np.random.RandomState(seed))
        assert context.count(ElementKind.WATER_FEATURE) == 1
        assert len(context.water_paths) == 1
        path = context.water_paths[0]
        assert path.contains(15, 15)
        assert all(grid[row, col] == "+" for row, col in path.points)


def test_water_effect_never_paints_gravel_garden():
    zones = ZoneLayout([
        Zone(ZoneKind.CENTER, 0, 0, 30, 30, 1.0),
        Zone(ZoneKind.GRAVEL_GARDEN, 13, 16, 10, 5, 2.0),
    ])
    for seed in range(5):
        grid = empty_grid()
        context = PlacementContext()
        ELEMENT_BEHAVIORS[ElementKind.WATER_FEATURE].place(15, 15, grid, context, zones, np.random.RandomState(seed))
        for row, col in np.argwhere(grid == "+"):
            assert zones.zone_kind(row, col) != ZoneKind.GRAVEL_GARDEN


def test_bridge_effect():
    grid = empty_grid()
    context = PlacementContext()
    ELEMENT_BEHAVIORS[ElementKind.BRIDGE_PATH].place(12, 12, grid, context, single_zone(), np.random.RandomState(7))
    assert context.bridge_placed
    painted = context.placements(ElementKind.BRIDGE_PATH)
    assert 5 <= len(painted) <= 12
    assert all(grid[row, col] == "=" for row, col in painted)


def test_bridge_crosses_water():
    grid = empty_grid()
    context = PlacementContext()
    path = WaterPath()
    for row in range(30):
        for col in (14, 15):
            grid[row, col] = "+"
            path.add_point(row, col)
    context.record_water_path(path)

    # Rows stay fixed for a horizontal bridge and cols for a vertical one
    ELEMENT_BEHAVIORS[ElementKind.BRIDGE_PATH].place(12, 12, grid, context, single_zone(), np.random.RandomState(2))
    painted = context.placements(ElementKind.BRIDGE_PATH)
    assert painted
    assert all(grid[row, col] == "=" for row, col in painted)


def test_moss_cluster_stays_under_cap():
    grid = empty_grid()
    context = PlacementContext()
    for i in range(14):
        context.record(ElementKind.MOSS, 0, i)
    ELEMENT_BEHAVIORS[ElementKind.MOSS].place(15, 15, grid, context, single_zone(), np.random.RandomState(4))
    assert context.count(ElementKind.MOSS) == 15


def test_curved_raking_stops_at_obstacle():
    grid = np.full((10, 20), ".", dtype="<U1")
    grid[2, 3] = "#"
    context = PlacementContext()
    ELEMENT_BEHAVIORS[ElementKind.CURVED_RAKED].place(2, 2, grid, context, single_zone(height=10, width=20),
                                                     np.random.RandomState(0))
    assert context.placements(ElementKind.CURVED_RAKED) == [(2, 2)]
    assert (grid == "~").sum() == 1


def test_curved_raking_stops_at_border():
    grid = np.full((10, 20), ".", dtype="<U1")
    context = PlacementContext()
    ELEMENT_BEHAVIORS[ElementKind.CURVED_RAKED].place(5, 19, grid, context, single_zone(height=10, width=20),
                                                     np.random.RandomState(0))
    assert context.placements(ElementKind.CURVED_RAKED) == [(5, 19)]


def test_river_stops_at_existing_water():
    grid = empty_grid()
    context = PlacementContext()
    # Recorded water on every neighbor; the grid cells themselves stay open
    ring = WaterPath(points=[(15 + dr, 15 + dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if dr or dc])
    context.record_water_path(ring)

    for seed in range(5):
        path = WaterPath()
        _create_river(15, 15, grid, context, single_zone(), np.random.RandomState(seed), path)
        assert path.points == [(15, 15)]
    assert not (grid == "+").any()


def test_river_stops_at_obstacle():
    grid = empty_grid()
    grid[14:17, 14:17] = "#"
    grid[15, 15] = EMPTY

    for seed in range(5):
        path = WaterPath()
        _create_river(15, 15, grid, PlacementContext(), single_zone(), np.random.RandomState(seed), path)
        assert path.points == [(15, 15)]
    assert not (grid == "+").any()


def test_river_stops_before_border():
    # Only the center cell is at least one cell away from every border
    grid = empty_grid(3, 3)
    path = WaterPath()
    _create_river(1, 1, grid, PlacementContext(), single_zone(height=3, width=3), np.random.RandomState(0), path)
    assert path.points == [(1, 1)]


def test_river_keeps_off_border_rows_and_cols():
    for seed in range(10):
        grid = empty_grid(8, 8)
        path = WaterPath()
        _create_river(4, 4, grid, PlacementContext(), single_zone(height=8, width=8), np.random.RandomState(seed), path)
        for row, col in path.points[1:]:
            assert 1 <= row <= 6
            assert 1 <= col <= 6
            assert grid[row, col] == "+"


def test_bridge_over_water_is_clamped_near_border():
    grid = empty_grid()
    context = PlacementContext()
    # Water right of and below the start, so either orientation crosses it
    water = WaterPath(points=[(24, 25), (25, 24)])
    for row, col in water.points:
        grid[row, col] = "+"
    context.record_water_path(water)

    ELEMENT_BEHAVIORS[ElementKind.BRIDGE_PATH].place(24, 24, grid, context, single_zone(), np.random.RandomState(5))
    painted = context.placements(ElementKind.BRIDGE_PATH)
    # Every bridge is at least 5 long; the clamp cuts it to 30 - 24 - 2 cells
    assert len(painted) == 4
    assert painted[0] == (24, 24)
    assert painted[-1] in [(24, 27), (27, 24)]
    assert all(grid[row, col] == "=" for row, col in painted)
