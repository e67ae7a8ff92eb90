"""Data structures for garden generation: kinds, zones, water paths and results."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, FrozenSet, List, Optional, Set, Tuple
import numpy as np


class ZoneKind(str, Enum):
    """Kinds of garden zones."""
    FOCAL_POINT = "focal_point"      # Draws attention (rocks, lanterns)
    CENTER = "center"                # Open central area (water)
    EDGE = "edge"                    # Border strips (moss, stones)
    CORNER = "corner"                # Corner squares (rocks, moss)
    FLOW = "flow"                    # Movement areas (paths, raking)
    GRAVEL_GARDEN = "gravel_garden"  # Pure gravel, nothing else allowed


class ElementKind(str, Enum):
    """Closed set of garden elements."""
    LARGE_ROCKS = "large_rocks"
    MEDIUM_ROCKS = "medium_rocks"
    SMALL_STONES = "small_stones"
    WATER_FEATURE = "water_feature"
    BRIDGE_PATH = "bridge_path"
    FINE_GRAVEL = "fine_gravel"
    HORIZONTAL_RAKED = "horizontal_raked"
    VERTICAL_RAKED = "vertical_raked"
    CURVED_RAKED = "curved_raked"
    MOSS = "moss"
    STONE_LANTERN = "stone_lantern"


class GenerationPhase(IntEnum):
    """Ordered generation phases."""
    TERRAIN = 1
    WATER = 2
    INFRASTRUCTURE = 3
    GRAVEL_GARDEN = 4
    FLOW_PATTERNS = 5
    DECORATION = 6


class ElementCategory(str, Enum):
    TERRAIN = "terrain"
    WATER = "water"
    STRUCTURE = "structure"
    SURFACE = "surface"
    PATTERN = "pattern"
    DECORATION = "decoration"


Point = Tuple[int, int]


@dataclass(frozen=True)
class PlacementLimits:
    """Per-element placement limits."""
    min_count: int
    max_count: Optional[int]  # None = unbounded
    min_distance: int


@dataclass(frozen=True)
class ZoneRestrictions:
    """Zone rules for one element kind."""
    forbidden: FrozenSet[ZoneKind]
    edge_buffer: Tuple[int, int]  # (rows, cols) kept clear from the garden border


@dataclass
class Zone:
    """Rectangular garden region with a placement influence weight."""
    kind: ZoneKind
    start_row: int
    start_col: int
    width: int
    height: int
    influence: float = 1.0

    @property
    def center_row(self) -> int:
        return self.start_row + self.height // 2

    @property
    def center_col(self) -> int:
        return self.start_col + self.width // 2

    def contains(self, row: int, col: int) -> bool:
        return (self.start_row <= row < self.start_row + self.height and
                self.start_col <= col < self.start_col + self.width)

    def center_distance(self, row: int, col: int) -> float:
        return float(np.hypot(row - self.center_row, col - self.center_col))


@dataclass
class WaterPath:
    """Cells of one pond or river, in the order they were added."""
    points: List[Point] = field(default_factory=list)
    is_pond: bool = False
    _lookup: Set[Point] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._lookup = set(self.points)

    def add_point(self, row: int, col: int) -> None:
        self.points.append((row, col))
        self._lookup.add((row, col))

    def contains(self, row: int, col: int) -> bool:
        return (row, col) in self._lookup

    def intersects(self, other: "WaterPath") -> bool:
        return any(other.contains(row, col) for row, col in self.points)

    def to_dict(self) -> dict:
        return {"is_pond": self.is_pond, "points": [list(p) for p in self.points]}


@dataclass(frozen=True)
class ElementInfo:
    """Read-only element metadata for legends."""
    symbol: str
    name: str
    meaning: str
    phase: int
    category: str
    density: int

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "meaning": self.meaning,
            "phase": self.phase,
            "category": self.category,
            "density": self.density,
        }


@dataclass(frozen=True)
class SoftConstraintUnmet:
    """An element ended below its minimum count after the forced pass."""
    kind: ElementKind
    placed: int
    minimum: int

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "placed": self.placed, "minimum": self.minimum}


@dataclass
class GardenResult:
    """Finished garden with placement statistics."""
    grid: np.ndarray  # (height, width) array of one-character symbols
    seed: Optional[int]
    placements: Dict[ElementKind, int]  # Accepted placement attempts per kind
    history: Dict[ElementKind, List[Point]]  # Every recorded cell per kind
    water_paths: List[WaterPath]
    bridge_placed: bool
    warnings: List[SoftConstraintUnmet] = field(default_factory=list)

    @property
    def height(self) -> int:
        return int(self.grid.shape[0])

    @property
    def width(self) -> int:
        return int(self.grid.shape[1])

    def rows(self) -> List[str]:
        return ["".join(row) for row in self.grid.tolist()]

    def to_text(self) -> str:
        return "\n".join(self.rows())

    def symbol_counts(self) -> Dict[str, int]:
        symbols, counts = np.unique(self.grid, return_counts=True)
        return {str(s): int(c) for s, c in zip(symbols, counts)}

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "rows": self.rows(),
            "placements": {kind.value: count for kind, count in self.placements.items()},
            "symbol_counts": self.symbol_counts(),
            "water_paths": [path.to_dict() for path in self.water_paths],
            "bridge_placed": self.bridge_placed,
            "warnings": [w.to_dict() for w in self.warnings],
        }
