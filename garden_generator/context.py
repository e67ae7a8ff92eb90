"""Run-scoped placement state: history per element, water paths and the bridge flag."""

import math
from typing import Dict, List

from .schema import ElementKind, Point, WaterPath


class PlacementContext:
    """
    Placement history for one generation run.

    Created empty at the start of a run, written only by placement effects,
    read by placement predicates. Never shared between runs.
    """

    def __init__(self):
        self._placements: Dict[ElementKind, List[Point]] = {}
        self._water_paths: List[WaterPath] = []
        self._bridge_placed = False

    @property
    def bridge_placed(self) -> bool:
        return self._bridge_placed

    @property
    def water_paths(self) -> List[WaterPath]:
        return list(self._water_paths)

    def record(self, kind: ElementKind, row: int, col: int) -> None:
        self._placements.setdefault(kind, []).append((row, col))
        if kind == ElementKind.BRIDGE_PATH:
            self._bridge_placed = True

    def record_water_path(self, path: WaterPath) -> None:
        self._water_paths.append(path)

    def placements(self, kind: ElementKind) -> List[Point]:
        return self._placements.get(kind, [])

    def count(self, kind: ElementKind) -> int:
        return len(self.placements(kind))

    def is_near(self, kind: ElementKind, row: int, col: int, distance: int) -> bool:
        """Box test: any recorded point within `distance` on both axes."""
        return any(abs(r - row) <= distance and abs(c - col) <= distance
                   for r, c in self.placements(kind))

    def nearest_distance(self, kind: ElementKind, row: int, col: int) -> float:
        """Euclidean distance to the closest recorded point, inf if none."""
        points = self.placements(kind)
        if not points:
            return math.inf
        return min(math.hypot(r - row, c - col) for r, c in points)

    def is_near_water(self, row: int, col: int, distance: int) -> bool:
        return any(abs(r - row) <= distance and abs(c - col) <= distance
                   for path in self._water_paths for r, c in path.points)

    def would_cross_water(self, row: int, col: int, length: int, horizontal: bool) -> bool:
        """Whether a straight segment starting at (row, col) touches recorded water."""
        for path in self._water_paths:
            for i in range(length):
                r, c = (row, col + i) if horizontal else (row + i, col)
                if path.contains(r, c):
                    return True
        return False

    def history(self) -> Dict[ElementKind, List[Point]]:
        """Copy of every recorded point, keyed by element kind."""
        return {kind: list(points) for kind, points in self._placements.items()}
