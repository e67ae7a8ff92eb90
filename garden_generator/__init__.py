"""
Garden Generator Module

Procedurally generates karesansui (dry landscape) rock gardens as 2-D grids
of symbols, following ordered placement rules: zones, element limits,
spacing and probability.

Design:
    Zones → phased stochastic placement (terrain, water, bridge, gravel, raking, decoration) → refinement

Components:
    - schema: Data structures (kinds, zones, water paths, results)
    - constants: Rule tables (symbols, density, phases, limits, zone rules, metadata)
    - zones: Zone layout and dominant-zone resolution
    - context: Run-scoped placement history and spatial queries
    - elements: Per-element predicate, probability and effect dispatch table
    - solver: Bounded rejection sampling and forced minimum placement
    - refinement: Post-generation grid passes
    - validator: Dimension and grid validation
    - generator: Phase pipeline and generate() entry point
"""

from .schema import (
    ElementKind,
    ZoneKind,
    GenerationPhase,
    ElementCategory,
    Zone,
    WaterPath,
    PlacementLimits,
    ZoneRestrictions,
    ElementInfo,
    SoftConstraintUnmet,
    GardenResult,
)
from .constants import (
    SYMBOLS,
    VALID_SYMBOLS,
    visual_density,
    limits,
    zone_restrictions,
    element_info,
    legend,
)
from .config import GeneratorConfig
from .zones import ZoneLayout, create_zones, distance_influence
from .context import PlacementContext
from .elements import ELEMENT_BEHAVIORS, ElementBehavior
from .validator import validate_dimensions, validate_garden, InvalidDimensionsError
from .generator import (
    GardenGenerator,
    GenerationCancelled,
    GenerationError,
    generate,
    generate_batch,
)

__all__ = [
    # Schema
    "ElementKind",
    "ZoneKind",
    "GenerationPhase",
    "ElementCategory",
    "Zone",
    "WaterPath",
    "PlacementLimits",
    "ZoneRestrictions",
    "ElementInfo",
    "SoftConstraintUnmet",
    "GardenResult",
    # Rule tables
    "SYMBOLS",
    "VALID_SYMBOLS",
    "visual_density",
    "limits",
    "zone_restrictions",
    "element_info",
    "legend",
    # Configuration
    "GeneratorConfig",
    # Zones and placement
    "ZoneLayout",
    "create_zones",
    "distance_influence",
    "PlacementContext",
    "ELEMENT_BEHAVIORS",
    "ElementBehavior",
    # Validation
    "validate_dimensions",
    "validate_garden",
    "InvalidDimensionsError",
    # Generation
    "GardenGenerator",
    "GenerationCancelled",
    "GenerationError",
    "generate",
    "generate_batch",
]
