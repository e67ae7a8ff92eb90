"""
Zone model: fixed rectangular regions that steer placement.

Each grid cell resolves to one dominant zone. Containing zones compete on
influence (first declared wins ties); a cell outside every zone falls back
to the zone with the nearest center.
"""

from typing import List, Optional

from .schema import Zone, ZoneKind


def create_zones(width: int, height: int) -> List[Zone]:
    """Default garden layout. Declaration order is the tie-break order."""
    return [
        # Pure gravel areas
        Zone(ZoneKind.GRAVEL_GARDEN, height // 2, width // 4, width // 8, height // 8, 1.0),
        Zone(ZoneKind.GRAVEL_GARDEN, height // 4, width * 3 // 4, width // 10, height // 10, 1.0),

        # Focal points for rocks and lanterns
        Zone(ZoneKind.FOCAL_POINT, height // 5, width // 6, width // 8, height // 6, 1.8),
        Zone(ZoneKind.FOCAL_POINT, height * 3 // 5, width * 2 // 3, width // 10, height // 8, 1.5),

        # Flow bands for paths and raking
        Zone(ZoneKind.FLOW, height // 3, width // 8, width * 3 // 4, height // 8, 1.2),
        Zone(ZoneKind.FLOW, height // 8, width // 2, width // 6, height * 2 // 3, 1.0),

        # Open center for water
        Zone(ZoneKind.CENTER, height // 3, width // 3, width // 3, height // 3, 1.3),

        # Border strips
        Zone(ZoneKind.EDGE, 0, 0, width, height // 12, 0.8),
        Zone(ZoneKind.EDGE, height * 11 // 12, 0, width, height // 12, 0.8),
        Zone(ZoneKind.EDGE, 0, 0, width // 12, height, 0.8),
        Zone(ZoneKind.EDGE, 0, width * 11 // 12, width // 12, height, 0.8),

        # Corners
        Zone(ZoneKind.CORNER, 0, 0, width // 10, height // 10, 1.0),
        Zone(ZoneKind.CORNER, 0, width * 9 // 10, width // 10, height // 10, 1.0),
        Zone(ZoneKind.CORNER, height * 9 // 10, 0, width // 10, height // 10, 1.0),
        Zone(ZoneKind.CORNER, height * 9 // 10, width * 9 // 10, width // 10, height // 10, 1.0),
    ]


def distance_influence(zone: Zone, row: int, col: int) -> float:
    """Falls off linearly from 1 at the zone center, floored at 0.1."""
    max_distance = max(zone.width, zone.height) / 2.0
    if max_distance <= 0:
        return 0.1
    return max(0.1, 1.0 - zone.center_distance(row, col) / max_distance)


class ZoneLayout:
    """
    Ordered collection of zones with point queries.

    Usage:
        layout = ZoneLayout.default(width=120, height=60)
        zone = layout.dominant_zone(30, 60)
    """

    def __init__(self, zones: List[Zone]):
        if not zones:
            raise ValueError("A zone layout needs at least one zone")
        self.zones = list(zones)

    @classmethod
    def default(cls, width: int, height: int) -> "ZoneLayout":
        return cls(create_zones(width, height))

    def containing(self, row: int, col: int) -> List[Zone]:
        return [zone for zone in self.zones if zone.contains(row, col)]

    def dominant_zone(self, row: int, col: int) -> Zone:
        """Highest-influence containing zone, else the nearest zone center."""
        best: Optional[Zone] = None
        for zone in self.zones:
            # Strict comparison keeps the first declared zone on ties
            if zone.contains(row, col) and (best is None or zone.influence > best.influence):
                best = zone
        if best is not None:
            return best
        return min(self.zones, key=lambda z: z.center_distance(row, col))

    def zone_kind(self, row: int, col: int) -> ZoneKind:
        return self.dominant_zone(row, col).kind

    def __iter__(self):
        return iter(self.zones)
