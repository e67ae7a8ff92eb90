"""
Element behaviors: placement predicate, probability and effect per element kind.

Every kind is resolved through ELEMENT_BEHAVIORS. Predicates share one rule
evaluator driven by the zone restriction and limit tables (forbidden zones,
edge buffer, count cap, same-kind spacing); each kind adds its own extra rule
on top. Effects receive the run's random state explicitly.
"""

from dataclasses import dataclass
from typing import Callable, Dict

import numpy as np

from .constants import (
    BASE_PROBABILITY,
    EMPTY,
    GRAVEL,
    OPEN_SYMBOLS,
    SYMBOLS,
    limits,
    zone_restrictions,
    zone_weight,
)
from .context import PlacementContext
from .schema import ElementKind, WaterPath, Zone, ZoneKind
from .zones import ZoneLayout, distance_influence

RuleFn = Callable[[int, int, Zone, np.ndarray, PlacementContext], bool]
ProbabilityFn = Callable[[int, int, Zone, PlacementContext], float]
EffectFn = Callable[[int, int, np.ndarray, PlacementContext, ZoneLayout, np.random.RandomState], None]

POND_CHANCE = 0.6
HORIZONTAL_BRIDGE_CHANCE = 0.6


# ---------------------------------------------------------------------------
# Grid helpers
# ---------------------------------------------------------------------------

def in_bounds(grid: np.ndarray, row: int, col: int) -> bool:
    height, width = grid.shape
    return 0 <= row < height and 0 <= col < width


def is_open(grid: np.ndarray, row: int, col: int) -> bool:
    """Background cell: still empty or fine gravel."""
    return grid[row, col] in OPEN_SYMBOLS


def has_clear_space(grid: np.ndarray, row: int, col: int, radius: int) -> bool:
    """Every cell of the box around (row, col), the point itself excluded, is background."""
    r0, c0 = max(0, row - radius), max(0, col - radius)
    window = grid[r0:row + radius + 1, c0:col + radius + 1]
    clear = np.isin(window, list(OPEN_SYMBOLS))
    clear[row - r0, col - c0] = True
    return bool(clear.all())


def near_border(grid: np.ndarray, row: int, col: int, distance: int) -> bool:
    height, width = grid.shape
    return row < distance or row >= height - distance or col < distance or col >= width - distance


def _paintable(grid: np.ndarray, zones: ZoneLayout, row: int, col: int) -> bool:
    """Open cell in bounds whose dominant zone allows features."""
    return (in_bounds(grid, row, col) and is_open(grid, row, col) and
            zones.zone_kind(row, col) != ZoneKind.GRAVEL_GARDEN)


def _paint(kind: ElementKind, row: int, col: int, grid: np.ndarray, context: PlacementContext) -> None:
    grid[row, col] = SYMBOLS[kind]
    context.record(kind, row, col)


# ---------------------------------------------------------------------------
# Shared rule evaluator
# ---------------------------------------------------------------------------

def passes_shared_rules(kind: ElementKind, row: int, col: int, zone: Zone,
                        grid: np.ndarray, context: PlacementContext) -> bool:
    """Zone, border, count and spacing rules common to every element kind."""
    restrictions = zone_restrictions(kind)
    if zone.kind in restrictions.forbidden:
        return False

    row_buffer, col_buffer = restrictions.edge_buffer
    height, width = grid.shape
    if row < row_buffer or row >= height - row_buffer or col < col_buffer or col >= width - col_buffer:
        return False

    element_limits = limits(kind)
    if element_limits.max_count is not None and context.count(kind) >= element_limits.max_count:
        return False
    if element_limits.min_distance > 0 and context.is_near(kind, row, col, element_limits.min_distance):
        return False

    return True


# ---------------------------------------------------------------------------
# Kind-specific rules
# ---------------------------------------------------------------------------

def _no_extra_rule(row, col, zone, grid, context) -> bool:
    return True


def _large_rocks_rule(row, col, zone, grid, context) -> bool:
    return has_clear_space(grid, row, col, 4)


def _medium_rocks_rule(row, col, zone, grid, context) -> bool:
    if context.is_near(ElementKind.LARGE_ROCKS, row, col, 2):
        return False
    return has_clear_space(grid, row, col, 2)


def _water_rule(row, col, zone, grid, context) -> bool:
    return has_clear_space(grid, row, col, 6)


def _bridge_rule(row, col, zone, grid, context) -> bool:
    if context.bridge_placed:
        return False
    return not context.is_near(ElementKind.STONE_LANTERN, row, col, 8)


def _gravel_rule(row, col, zone, grid, context) -> bool:
    return grid[row, col] == EMPTY


def _raked_rule(large_gap: int, medium_gap: int, lantern_gap: int) -> RuleFn:
    """Raking starts on open ground away from rocks and lanterns."""
    def rule(row, col, zone, grid, context) -> bool:
        if not is_open(grid, row, col):
            return False
        return not (context.is_near(ElementKind.LARGE_ROCKS, row, col, large_gap) or
                    context.is_near(ElementKind.MEDIUM_ROCKS, row, col, medium_gap) or
                    context.is_near(ElementKind.STONE_LANTERN, row, col, lantern_gap))
    return rule


def _moss_rule(row, col, zone, grid, context) -> bool:
    if not is_open(grid, row, col):
        return False
    near_rock = (context.is_near(ElementKind.LARGE_ROCKS, row, col, 3) or
                 context.is_near(ElementKind.MEDIUM_ROCKS, row, col, 2) or
                 context.is_near(ElementKind.SMALL_STONES, row, col, 2))
    return near_rock or context.is_near_water(row, col, 3) or near_border(grid, row, col, 5)


def _lantern_rule(row, col, zone, grid, context) -> bool:
    if not is_open(grid, row, col):
        return False
    if (context.is_near(ElementKind.WATER_FEATURE, row, col, 8) or
            context.is_near(ElementKind.BRIDGE_PATH, row, col, 8)):
        return False
    return has_clear_space(grid, row, col, 6)


# ---------------------------------------------------------------------------
# Probabilities
# ---------------------------------------------------------------------------

def _zone_probability(kind: ElementKind, zone: Zone) -> float:
    return BASE_PROBABILITY[kind] * zone_weight(kind, zone.kind)


def _large_rocks_probability(row, col, zone, context) -> float:
    kind = ElementKind.LARGE_ROCKS
    probability = _zone_probability(kind, zone)
    # Each existing large rock makes the next one rarer
    probability *= 0.3 ** context.count(kind)
    return probability * distance_influence(zone, row, col)


def _medium_rocks_probability(row, col, zone, context) -> float:
    probability = _zone_probability(ElementKind.MEDIUM_ROCKS, zone)
    distance = context.nearest_distance(ElementKind.LARGE_ROCKS, row, col)
    if 3 < distance < 8:
        probability *= 1.5
    return probability * distance_influence(zone, row, col)


def _small_stones_probability(row, col, zone, context) -> float:
    probability = _zone_probability(ElementKind.SMALL_STONES, zone)
    if (context.nearest_distance(ElementKind.LARGE_ROCKS, row, col) < 6 or
            context.nearest_distance(ElementKind.MEDIUM_ROCKS, row, col) < 4):
        probability *= 1.8
    return probability * distance_influence(zone, row, col)


def _water_probability(row, col, zone, context) -> float:
    return _zone_probability(ElementKind.WATER_FEATURE, zone) * distance_influence(zone, row, col)


def _bridge_probability(row, col, zone, context) -> float:
    if context.bridge_placed:
        return 0.0
    probability = _zone_probability(ElementKind.BRIDGE_PATH, zone)
    if context.water_paths:
        probability *= 2.0
    return probability * distance_influence(zone, row, col)


def _gravel_probability(row, col, zone, context) -> float:
    return 1.0


def _horizontal_raked_probability(row, col, zone, context) -> float:
    probability = _zone_probability(ElementKind.HORIZONTAL_RAKED, zone)
    return float(probability * (1.0 + np.sin(row * 0.3) * 0.4))


def _vertical_raked_probability(row, col, zone, context) -> float:
    probability = _zone_probability(ElementKind.VERTICAL_RAKED, zone)
    return float(probability * (1.0 + np.sin(col * 0.4) * 0.3))


def _curved_raked_probability(row, col, zone, context) -> float:
    probability = _zone_probability(ElementKind.CURVED_RAKED, zone)
    wave = np.sin(row * 0.2) * np.cos(col * 0.15)
    return float(probability * (1.0 + wave * 0.5))


def _moss_probability(row, col, zone, context) -> float:
    probability = _zone_probability(ElementKind.MOSS, zone)
    if context.is_near(ElementKind.LARGE_ROCKS, row, col, 4):
        probability *= 2.0
    if context.is_near_water(row, col, 4):
        probability *= 1.8
    return probability * distance_influence(zone, row, col)


def _lantern_probability(row, col, zone, context) -> float:
    probability = _zone_probability(ElementKind.STONE_LANTERN, zone)
    if context.count(ElementKind.STONE_LANTERN) > 0:
        probability *= 0.1
    return probability * distance_influence(zone, row, col)


# ---------------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------------

def _single_cell(kind: ElementKind) -> EffectFn:
    def place(row, col, grid, context, zones, rng) -> None:
        _paint(kind, row, col, grid, context)
    return place


def _place_gravel(row, col, grid, context, zones, rng) -> None:
    # Ground cover is not tracked in the placement history
    if grid[row, col] == EMPTY:
        grid[row, col] = GRAVEL


def _place_moss(row, col, grid, context, zones, rng) -> None:
    kind = ElementKind.MOSS
    max_count = limits(kind).max_count
    _paint(kind, row, col, grid, context)

    cluster_size = rng.randint(1, 4)
    for _ in range(cluster_size):
        r = row + rng.randint(-2, 3)
        c = col + rng.randint(-2, 3)
        if _paintable(grid, zones, r, c) and context.count(kind) < max_count:
            _paint(kind, r, c, grid, context)


def _place_horizontal_raked(row, col, grid, context, zones, rng) -> None:
    length = rng.randint(3, 9)
    width = grid.shape[1]
    for c in range(col, min(col + length, width)):
        if not is_open(grid, row, c):
            break
        _paint(ElementKind.HORIZONTAL_RAKED, row, c, grid, context)


def _place_vertical_raked(row, col, grid, context, zones, rng) -> None:
    length = rng.randint(3, 7)
    height = grid.shape[0]
    for r in range(row, min(row + length, height)):
        if not is_open(grid, r, col):
            break
        _paint(ElementKind.VERTICAL_RAKED, r, col, grid, context)


def _place_curved_raked(row, col, grid, context, zones, rng) -> None:
    length = rng.randint(2, 6)
    for i in range(length):
        r = row + int(np.sin(i * 0.5) * 2)
        c = col + i
        if not in_bounds(grid, r, c) or not is_open(grid, r, c):
            break
        _paint(ElementKind.CURVED_RAKED, r, c, grid, context)


def _create_pond(row, col, grid, zones, rng, path: WaterPath) -> None:
    path.is_pond = True
    path.add_point(row, col)
    radius = rng.randint(1, 3)
    for r in range(row - radius, row + radius + 1):
        for c in range(col - radius, col + radius + 1):
            if np.hypot(r - row, c - col) <= radius and _paintable(grid, zones, r, c):
                grid[r, c] = SYMBOLS[ElementKind.WATER_FEATURE]
                path.add_point(r, c)


def _create_river(row, col, grid, context, zones, rng, path: WaterPath) -> None:
    """Random walk with a slowly drifting heading."""
    path.add_point(row, col)
    height, width = grid.shape
    steps = rng.randint(8, 20)
    heading = rng.random_sample() * 2 * np.pi

    current_row, current_col = row, col
    for _ in range(steps):
        heading += (rng.random_sample() - 0.5) * 0.8
        next_row = current_row + int(round(np.sin(heading)))
        next_col = current_col + int(round(np.cos(heading)))

        if next_row < 1 or next_row >= height - 1 or next_col < 1 or next_col >= width - 1:
            break
        if any(existing.contains(next_row, next_col) for existing in context.water_paths):
            break
        if not _paintable(grid, zones, next_row, next_col):
            break

        grid[next_row, next_col] = SYMBOLS[ElementKind.WATER_FEATURE]
        path.add_point(next_row, next_col)
        current_row, current_col = next_row, next_col


def _place_water(row, col, grid, context, zones, rng) -> None:
    _paint(ElementKind.WATER_FEATURE, row, col, grid, context)
    path = WaterPath()
    if rng.random_sample() < POND_CHANCE:
        _create_pond(row, col, grid, zones, rng, path)
    else:
        _create_river(row, col, grid, context, zones, rng, path)
    context.record_water_path(path)


def _place_bridge(row, col, grid, context, zones, rng) -> None:
    height, width = grid.shape
    length = rng.randint(5, 13)
    horizontal = rng.random_sample() < HORIZONTAL_BRIDGE_CHANCE

    # Stretch across the water, but stop short of the far border
    if context.would_cross_water(row, col, length, horizontal):
        length = min(length, width - col - 2 if horizontal else height - row - 2)

    water = SYMBOLS[ElementKind.WATER_FEATURE]
    for i in range(length):
        r, c = (row, col + i) if horizontal else (row + i, col)
        if not in_bounds(grid, r, c):
            continue
        if zones.zone_kind(r, c) == ZoneKind.GRAVEL_GARDEN:
            continue
        if is_open(grid, r, c) or grid[r, c] == water:
            _paint(ElementKind.BRIDGE_PATH, r, c, grid, context)


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ElementBehavior:
    """Placement behavior of one element kind."""
    kind: ElementKind
    rule: RuleFn
    probability: ProbabilityFn
    place: EffectFn

    def can_place(self, row: int, col: int, zone: Zone, grid: np.ndarray,
                  context: PlacementContext) -> bool:
        return (passes_shared_rules(self.kind, row, col, zone, grid, context) and
                self.rule(row, col, zone, grid, context))


ELEMENT_BEHAVIORS: Dict[ElementKind, ElementBehavior] = {
    behavior.kind: behavior for behavior in [
        ElementBehavior(ElementKind.LARGE_ROCKS, _large_rocks_rule,
                        _large_rocks_probability, _single_cell(ElementKind.LARGE_ROCKS)),
        ElementBehavior(ElementKind.MEDIUM_ROCKS, _medium_rocks_rule,
                        _medium_rocks_probability, _single_cell(ElementKind.MEDIUM_ROCKS)),
        ElementBehavior(ElementKind.SMALL_STONES, _no_extra_rule,
                        _small_stones_probability, _single_cell(ElementKind.SMALL_STONES)),
        ElementBehavior(ElementKind.WATER_FEATURE, _water_rule,
                        _water_probability, _place_water),
        ElementBehavior(ElementKind.BRIDGE_PATH, _bridge_rule,
                        _bridge_probability, _place_bridge),
        ElementBehavior(ElementKind.FINE_GRAVEL, _gravel_rule,
                        _gravel_probability, _place_gravel),
        ElementBehavior(ElementKind.HORIZONTAL_RAKED, _raked_rule(3, 2, 5),
                        _horizontal_raked_probability, _place_horizontal_raked),
        ElementBehavior(ElementKind.VERTICAL_RAKED, _raked_rule(3, 2, 5),
                        _vertical_raked_probability, _place_vertical_raked),
        ElementBehavior(ElementKind.CURVED_RAKED, _raked_rule(4, 3, 6),
                        _curved_raked_probability, _place_curved_raked),
        ElementBehavior(ElementKind.MOSS, _moss_rule,
                        _moss_probability, _place_moss),
        ElementBehavior(ElementKind.STONE_LANTERN, _lantern_rule,
                        _lantern_probability, _single_cell(ElementKind.STONE_LANTERN)),
    ]
}


def behavior(kind: ElementKind) -> ElementBehavior:
    return ELEMENT_BEHAVIORS[kind]
