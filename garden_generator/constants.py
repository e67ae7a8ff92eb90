"""Constants for garden generation: symbols, phases, limits, zone rules and probability weights."""

from typing import Dict, FrozenSet, List, Optional, Tuple

from .schema import (
    ElementCategory,
    ElementInfo,
    ElementKind,
    GenerationPhase,
    PlacementLimits,
    ZoneKind,
    ZoneRestrictions,
)

# Empty sentinel: never a visible symbol
EMPTY: str = ""

SYMBOLS: Dict[ElementKind, str] = {
    ElementKind.LARGE_ROCKS: "#",
    ElementKind.MEDIUM_ROCKS: "@",
    ElementKind.SMALL_STONES: "o",
    ElementKind.WATER_FEATURE: "+",
    ElementKind.BRIDGE_PATH: "=",
    ElementKind.FINE_GRAVEL: ".",
    ElementKind.HORIZONTAL_RAKED: "-",
    ElementKind.VERTICAL_RAKED: "|",
    ElementKind.CURVED_RAKED: "~",
    ElementKind.MOSS: "^",
    ElementKind.STONE_LANTERN: "*",
}

# Full output alphabet
VALID_SYMBOLS: FrozenSet[str] = frozenset(SYMBOLS.values())

GRAVEL: str = SYMBOLS[ElementKind.FINE_GRAVEL]

# Cells that count as background ("open ground")
OPEN_SYMBOLS: FrozenSet[str] = frozenset({EMPTY, GRAVEL})

ROCK_SYMBOLS: FrozenSet[str] = frozenset({"#", "@", "o"})

# Symbols that leave a lantern's surroundings feeling open
CLEAR_SYMBOLS: FrozenSet[str] = frozenset({".", "-", "|", "~"})

# Visual weight of each symbol, lightest (0) to darkest (9)
VISUAL_DENSITY: Dict[str, int] = {
    "#": 9,  # Large rocks
    "@": 8,  # Medium rocks
    "*": 7,  # Stone lantern
    "o": 6,  # Small stones
    "+": 5,  # Water
    "=": 4,  # Bridge/path
    "^": 3,  # Moss
    "~": 2,  # Curved raking
    "|": 1,  # Vertical raking
    "-": 1,  # Horizontal raking
    ".": 0,  # Fine gravel
}

PHASES: Dict[ElementKind, GenerationPhase] = {
    ElementKind.LARGE_ROCKS: GenerationPhase.TERRAIN,
    ElementKind.MEDIUM_ROCKS: GenerationPhase.TERRAIN,
    ElementKind.SMALL_STONES: GenerationPhase.TERRAIN,
    ElementKind.WATER_FEATURE: GenerationPhase.WATER,
    ElementKind.BRIDGE_PATH: GenerationPhase.INFRASTRUCTURE,
    ElementKind.FINE_GRAVEL: GenerationPhase.GRAVEL_GARDEN,
    ElementKind.HORIZONTAL_RAKED: GenerationPhase.FLOW_PATTERNS,
    ElementKind.VERTICAL_RAKED: GenerationPhase.FLOW_PATTERNS,
    ElementKind.CURVED_RAKED: GenerationPhase.FLOW_PATTERNS,
    ElementKind.MOSS: GenerationPhase.DECORATION,
    ElementKind.STONE_LANTERN: GenerationPhase.DECORATION,
}

# Declaration order doubles as the element order inside a phase
ELEMENT_ORDER: List[ElementKind] = list(SYMBOLS.keys())

# Placement limits: (min, max, min_distance); max None = unbounded
UNBOUNDED_LIMITS = PlacementLimits(0, None, 0)

PLACEMENT_LIMITS: Dict[ElementKind, PlacementLimits] = {
    ElementKind.LARGE_ROCKS: PlacementLimits(1, 3, 8),
    ElementKind.MEDIUM_ROCKS: PlacementLimits(2, 8, 4),
    ElementKind.SMALL_STONES: PlacementLimits(5, 20, 2),
    ElementKind.WATER_FEATURE: PlacementLimits(0, 3, 12),
    ElementKind.BRIDGE_PATH: PlacementLimits(0, 1, 0),  # One bridge per garden
    ElementKind.STONE_LANTERN: PlacementLimits(0, 2, 20),
    ElementKind.MOSS: PlacementLimits(3, 15, 1),
}

# Zone probability multipliers: (per-zone weights, default weight)
ZONE_WEIGHTS: Dict[ElementKind, Tuple[Dict[ZoneKind, float], float]] = {
    ElementKind.LARGE_ROCKS: ({ZoneKind.FOCAL_POINT: 4.0, ZoneKind.CORNER: 3.0, ZoneKind.EDGE: 0.5}, 0.1),
    ElementKind.MEDIUM_ROCKS: ({ZoneKind.FOCAL_POINT: 3.0, ZoneKind.EDGE: 2.5, ZoneKind.CORNER: 2.0}, 0.7),
    ElementKind.SMALL_STONES: ({ZoneKind.EDGE: 2.5, ZoneKind.CORNER: 2.0, ZoneKind.FOCAL_POINT: 1.5}, 1.0),
    ElementKind.WATER_FEATURE: ({ZoneKind.CENTER: 5.0, ZoneKind.FOCAL_POINT: 4.0}, 0.2),
    ElementKind.BRIDGE_PATH: ({ZoneKind.FLOW: 4.0, ZoneKind.CENTER: 3.0, ZoneKind.FOCAL_POINT: 2.0}, 0.5),
    ElementKind.FINE_GRAVEL: ({}, 1.0),
    ElementKind.HORIZONTAL_RAKED: ({ZoneKind.FLOW: 4.0, ZoneKind.CENTER: 2.5}, 0.5),
    ElementKind.VERTICAL_RAKED: ({ZoneKind.FLOW: 3.5, ZoneKind.EDGE: 2.0}, 0.7),
    ElementKind.CURVED_RAKED: ({ZoneKind.FLOW: 3.0, ZoneKind.CENTER: 2.0}, 0.8),
    ElementKind.MOSS: ({ZoneKind.CORNER: 3.5, ZoneKind.EDGE: 2.8, ZoneKind.FOCAL_POINT: 1.5}, 0.5),
    ElementKind.STONE_LANTERN: ({ZoneKind.FOCAL_POINT: 20.0}, 0.1),
}

BASE_PROBABILITY: Dict[ElementKind, float] = {
    ElementKind.LARGE_ROCKS: 0.02,
    ElementKind.MEDIUM_ROCKS: 0.03,
    ElementKind.SMALL_STONES: 0.04,
    ElementKind.WATER_FEATURE: 0.01,
    ElementKind.BRIDGE_PATH: 0.015,
    ElementKind.FINE_GRAVEL: 1.0,
    ElementKind.HORIZONTAL_RAKED: 0.08,
    ElementKind.VERTICAL_RAKED: 0.05,
    ElementKind.CURVED_RAKED: 0.06,
    ElementKind.MOSS: 0.03,
    ElementKind.STONE_LANTERN: 0.001,  # Very rare
}

# Forbidden zones and (row, col) edge buffers; consulted by the shared rule evaluator
_FORBIDDEN_ZONES: Dict[ElementKind, FrozenSet[ZoneKind]] = {
    ElementKind.LARGE_ROCKS: frozenset({ZoneKind.GRAVEL_GARDEN}),
    ElementKind.MEDIUM_ROCKS: frozenset({ZoneKind.GRAVEL_GARDEN}),
    ElementKind.SMALL_STONES: frozenset({ZoneKind.GRAVEL_GARDEN}),
    ElementKind.WATER_FEATURE: frozenset({ZoneKind.GRAVEL_GARDEN, ZoneKind.CORNER}),
    ElementKind.BRIDGE_PATH: frozenset({ZoneKind.GRAVEL_GARDEN}),
    ElementKind.FINE_GRAVEL: frozenset(),
    ElementKind.HORIZONTAL_RAKED: frozenset({ZoneKind.GRAVEL_GARDEN}),
    ElementKind.VERTICAL_RAKED: frozenset({ZoneKind.GRAVEL_GARDEN}),
    ElementKind.CURVED_RAKED: frozenset({ZoneKind.GRAVEL_GARDEN}),
    ElementKind.MOSS: frozenset({ZoneKind.GRAVEL_GARDEN}),
    ElementKind.STONE_LANTERN: frozenset({ZoneKind.GRAVEL_GARDEN, ZoneKind.FLOW}),
}

_EDGE_BUFFERS: Dict[ElementKind, Tuple[int, int]] = {
    ElementKind.LARGE_ROCKS: (5, 5),
    ElementKind.MEDIUM_ROCKS: (3, 3),
    ElementKind.SMALL_STONES: (2, 2),
    ElementKind.WATER_FEATURE: (8, 8),
    ElementKind.BRIDGE_PATH: (3, 10),
    ElementKind.STONE_LANTERN: (10, 10),
}


ZONE_RESTRICTIONS: Dict[ElementKind, ZoneRestrictions] = {
    kind: ZoneRestrictions(
        forbidden=_FORBIDDEN_ZONES[kind],
        edge_buffer=_EDGE_BUFFERS.get(kind, (0, 0)),
    )
    for kind in ElementKind
}

_METADATA: Dict[ElementKind, Tuple[str, str, ElementCategory]] = {
    ElementKind.LARGE_ROCKS: ("Large Rocks", "Mountains, islands, strength, stability", ElementCategory.TERRAIN),
    ElementKind.MEDIUM_ROCKS: ("Medium Rocks", "Natural rock formations, endurance", ElementCategory.TERRAIN),
    ElementKind.SMALL_STONES: ("Small Stones", "Diverse elements of nature, harmony", ElementCategory.TERRAIN),
    ElementKind.WATER_FEATURE: ("Water Feature", "Purity, flow of life, intersection", ElementCategory.WATER),
    ElementKind.BRIDGE_PATH: ("Bridge/Path", "Transition, journey, enlightenment", ElementCategory.STRUCTURE),
    ElementKind.FINE_GRAVEL: ("Fine Gravel", "Calm water, tranquil seas", ElementCategory.SURFACE),
    ElementKind.HORIZONTAL_RAKED: ("Horizontal Raked", "Water currents, waves, flow", ElementCategory.PATTERN),
    ElementKind.VERTICAL_RAKED: ("Vertical Raked", "Flowing rivers, streams", ElementCategory.PATTERN),
    ElementKind.CURVED_RAKED: ("Curved Raked", "Ocean waves, natural water movement", ElementCategory.PATTERN),
    ElementKind.MOSS: ("Moss", "Life, growth, endurance, harmony", ElementCategory.DECORATION),
    ElementKind.STONE_LANTERN: ("Stone Lantern", "Enlightenment, peace, meditation", ElementCategory.DECORATION),
}

ELEMENT_INFO: Dict[str, ElementInfo] = {
    SYMBOLS[kind]: ElementInfo(
        symbol=SYMBOLS[kind],
        name=name,
        meaning=meaning,
        phase=int(PHASES[kind]),
        category=category.value,
        density=VISUAL_DENSITY[SYMBOLS[kind]],
    )
    for kind, (name, meaning, category) in _METADATA.items()
}

# Garden size
MIN_DIMENSION: int = 12  # Every zone needs a non-zero size
DEFAULT_WIDTH: int = 120
DEFAULT_HEIGHT: int = 60


def visual_density(symbol: str) -> int:
    """Visual weight of a symbol; unknown symbols and the empty sentinel weigh 0."""
    return VISUAL_DENSITY.get(symbol, 0)


def limits(kind: ElementKind) -> PlacementLimits:
    return PLACEMENT_LIMITS.get(kind, UNBOUNDED_LIMITS)


def zone_restrictions(kind: ElementKind) -> ZoneRestrictions:
    return ZONE_RESTRICTIONS[kind]


def zone_weight(kind: ElementKind, zone_kind: ZoneKind) -> float:
    weights, default = ZONE_WEIGHTS[kind]
    return weights.get(zone_kind, default)


def phase_elements(phase: GenerationPhase) -> List[ElementKind]:
    """Elements of a phase in declaration order."""
    return [kind for kind in ELEMENT_ORDER if PHASES[kind] == phase]


def element_info(symbol: str) -> Optional[ElementInfo]:
    return ELEMENT_INFO.get(symbol)


def legend() -> Dict[str, ElementInfo]:
    """Symbol -> metadata for every element, darkest first."""
    ordered = sorted(ELEMENT_INFO.values(), key=lambda info: (-info.density, info.symbol))
    return {info.symbol: info for info in ordered}
