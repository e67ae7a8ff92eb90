"""
Refinement passes applied to the finished grid.

Passes run in order, each scanning the grid in row-major order and mutating
it in place, so later cells see earlier edits:
    extend_lines → flow_around_obstacles → cleanup_unsupported → rebalance_density
"""

from typing import Tuple

import numpy as np

from .constants import CLEAR_SYMBOLS, GRAVEL, ROCK_SYMBOLS, visual_density

LINE_EXTENSION_CHANCE = 0.4
FLOW_CHANCE = 0.2
CURVED_FLOW_CHANCE = 0.5
UNSUPPORTED_REMOVAL_CHANCE = 0.3
DENSITY_REMOVAL_CHANCE = 0.1

# Density rebalancing thresholds
DENSE_SYMBOL_RANK = 6
DENSE_NEIGHBORHOOD_SUM = 15

LANTERN_CLEAR_RATIO = 0.7

_NEIGHBORS_4: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def extend_lines(grid: np.ndarray, rng: np.random.RandomState) -> None:
    """Grow isolated raked line cells into the gravel on either side."""
    height, width = grid.shape

    for row in range(height):
        for col in range(1, width - 1):
            if grid[row, col] == "-" and grid[row, col - 1] == GRAVEL and grid[row, col + 1] == GRAVEL:
                if rng.random_sample() < LINE_EXTENSION_CHANCE:
                    grid[row, col - 1] = "-"
                if rng.random_sample() < LINE_EXTENSION_CHANCE:
                    grid[row, col + 1] = "-"

    for col in range(width):
        for row in range(1, height - 1):
            if grid[row, col] == "|" and grid[row - 1, col] == GRAVEL and grid[row + 1, col] == GRAVEL:
                if rng.random_sample() < LINE_EXTENSION_CHANCE:
                    grid[row - 1, col] = "|"
                if rng.random_sample() < LINE_EXTENSION_CHANCE:
                    grid[row + 1, col] = "|"


def _flow_symbol(dr: int, dc: int, rng: np.random.RandomState):
    """Raking direction for an offset from an obstacle; None leaves the cell alone."""
    if abs(dc) > abs(dr):
        return "-"
    if abs(dr) > abs(dc):
        return "|"
    if rng.random_sample() < CURVED_FLOW_CHANCE:
        return "~"
    return None


def flow_around_obstacles(grid: np.ndarray, rng: np.random.RandomState) -> None:
    """Rake gravel around interior rocks and stones."""
    height, width = grid.shape
    for row in range(1, height - 1):
        for col in range(1, width - 1):
            if grid[row, col] not in ROCK_SYMBOLS:
                continue
            for dr in range(-2, 3):
                for dc in range(-2, 3):
                    r, c = row + dr, col + dc
                    if not (0 <= r < height and 0 <= c < width):
                        continue
                    if grid[r, c] != GRAVEL or rng.random_sample() >= FLOW_CHANCE:
                        continue
                    symbol = _flow_symbol(dr, dc, rng)
                    if symbol is not None:
                        grid[r, c] = symbol


def _window(grid: np.ndarray, row: int, col: int, radius: int) -> np.ndarray:
    return grid[max(0, row - radius):row + radius + 1, max(0, col - radius):col + radius + 1]


def has_nearby_rock(grid: np.ndarray, row: int, col: int) -> bool:
    """Large rock within 3 cells, or a medium rock or small stone within 2."""
    return (bool(np.any(_window(grid, row, col, 3) == "#")) or
            bool(np.any(np.isin(_window(grid, row, col, 2), ["@", "o"]))))


def is_near_edge(grid: np.ndarray, row: int, col: int, distance: int) -> bool:
    height, width = grid.shape
    return row < distance or row >= height - distance or col < distance or col >= width - distance


def has_open_surroundings(grid: np.ndarray, row: int, col: int, radius: int) -> bool:
    """At least LANTERN_CLEAR_RATIO of the neighborhood is gravel or raking."""
    window = _window(grid, row, col, radius)
    total = window.size - 1
    if total <= 0:
        return False
    clear = int(np.isin(window, list(CLEAR_SYMBOLS)).sum())
    # The lantern cell itself is never a clear symbol
    return clear / total >= LANTERN_CLEAR_RATIO


def touches_path_or_water(grid: np.ndarray, row: int, col: int) -> bool:
    height, width = grid.shape
    for dr, dc in _NEIGHBORS_4:
        r, c = row + dr, col + dc
        if 0 <= r < height and 0 <= c < width and grid[r, c] in ("=", "+"):
            return True
    return False


def is_supported(grid: np.ndarray, row: int, col: int) -> bool:
    symbol = grid[row, col]
    if symbol == "^":
        return has_nearby_rock(grid, row, col) or is_near_edge(grid, row, col, 5)
    if symbol == "*":
        return has_open_surroundings(grid, row, col, 4)
    if symbol == "=":
        return touches_path_or_water(grid, row, col)
    return True


def cleanup_unsupported(grid: np.ndarray, rng: np.random.RandomState) -> None:
    """Return some moss, lanterns and path cells without support to gravel."""
    height, width = grid.shape
    for row in range(1, height - 1):
        for col in range(1, width - 1):
            if grid[row, col] not in ("^", "*", "=", "+"):
                continue
            if not is_supported(grid, row, col) and rng.random_sample() < UNSUPPORTED_REMOVAL_CHANCE:
                grid[row, col] = GRAVEL


def surrounding_density(grid: np.ndarray, row: int, col: int) -> int:
    """Sum of visual density over the 8-neighborhood (clipped at the border)."""
    height, width = grid.shape
    total = 0
    for r in range(max(0, row - 1), min(height, row + 2)):
        for c in range(max(0, col - 1), min(width, col + 2)):
            if r != row or c != col:
                total += visual_density(grid[r, c])
    return total


def rebalance_density(grid: np.ndarray, rng: np.random.RandomState) -> None:
    """Thin out heavy symbols sitting in crowded neighborhoods."""
    height, width = grid.shape
    for row in range(height):
        for col in range(width):
            if visual_density(grid[row, col]) <= DENSE_SYMBOL_RANK:
                continue
            if surrounding_density(grid, row, col) > DENSE_NEIGHBORHOOD_SUM:
                if rng.random_sample() < DENSITY_REMOVAL_CHANCE:
                    grid[row, col] = GRAVEL


REFINEMENT_PASSES = [
    ("extend_lines", extend_lines),
    ("flow_around_obstacles", flow_around_obstacles),
    ("cleanup_unsupported", cleanup_unsupported),
    ("rebalance_density", rebalance_density),
]
