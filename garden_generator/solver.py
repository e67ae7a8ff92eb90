"""
Placement solver using bounded rejection sampling.

Core algorithm:
1. Sample a random cell → resolve its dominant zone
2. Check the element's placement rules → accept with the element's probability
3. Repeat until the element's maximum is reached or the attempt budget runs out
4. Top up unmet minimums with a forced pass that ignores probability

Loops are generators: they yield at regular attempt intervals so the caller
can report progress and honor cancellation between attempts.
"""

import logging
from typing import Dict, Iterator, List

import numpy as np

from .config import GeneratorConfig
from .constants import EMPTY, limits
from .context import PlacementContext
from .elements import ElementBehavior, behavior
from .schema import ElementKind, SoftConstraintUnmet
from .zones import ZoneLayout

logger = logging.getLogger(__name__)


class PlacementSolver:
    """
    Places elements on one grid for one run.

    The solver owns no state beyond the run: grid, context, zones and the
    random state are handed in by the generator.
    """

    def __init__(
        self,
        grid: np.ndarray,
        context: PlacementContext,
        zones: ZoneLayout,
        rng: np.random.RandomState,
        config: GeneratorConfig
    ):
        self.grid = grid
        self.context = context
        self.zones = zones
        self.rng = rng
        self.config = config
        self.placements: Dict[ElementKind, int] = {}
        self.warnings: List[SoftConstraintUnmet] = []

    def _sample_cell(self):
        height, width = self.grid.shape
        row = self.rng.randint(height)
        col = self.rng.randint(width)
        return row, col, self.zones.dominant_zone(row, col)

    def _try_place(self, element: ElementBehavior, use_probability: bool) -> bool:
        """One sampling attempt: sample → validate → accept/reject."""
        row, col, zone = self._sample_cell()
        if not element.can_place(row, col, zone, self.grid, self.context):
            return False
        if use_probability:
            probability = element.probability(row, col, zone, self.context)
            if self.rng.random_sample() > probability:
                return False
        element.place(row, col, self.grid, self.context, self.zones, self.rng)
        return True

    def place_with_limits(self, kind: ElementKind) -> Iterator[None]:
        """Bounded stochastic placement followed by a forced pass if below minimum."""
        element = behavior(kind)
        element_limits = limits(kind)
        max_count = element_limits.max_count
        max_attempts = self.config.attempts_per_max * max_count

        placed = 0
        attempts = 0
        while placed < max_count and attempts < max_attempts:
            attempts += 1
            if self._try_place(element, use_probability=True):
                placed += 1
            if attempts % self.config.yield_interval == 0:
                yield

        logger.debug(f"{kind.value}: {placed} placed in {attempts} attempts")

        if placed < element_limits.min_count:
            forced = yield from self._force_minimum(element, element_limits.min_count - placed)
            placed += forced

        self.placements[kind] = placed

        if placed < element_limits.min_count:
            warning = SoftConstraintUnmet(kind=kind, placed=placed, minimum=element_limits.min_count)
            self.warnings.append(warning)
            logger.warning(f"{kind.value}: only {placed} of minimum {element_limits.min_count} placed")

    def _force_minimum(self, element: ElementBehavior, needed: int):
        """Place on any cell that passes the rules, ignoring probability."""
        placed = 0
        attempts = 0
        while placed < needed and attempts < self.config.forced_attempts:
            attempts += 1
            if self._try_place(element, use_probability=False):
                placed += 1
            if attempts % self.config.yield_interval == 0:
                yield

        logger.debug(f"{element.kind.value}: forced {placed} of {needed} in {attempts} attempts")
        return placed

    def place_pattern(self, kind: ElementKind) -> Iterator[None]:
        """Single-pass probability sampling with a fixed budget and no limits."""
        element = behavior(kind)
        placed = 0
        for attempt in range(1, self.config.pattern_attempts + 1):
            if self._try_place(element, use_probability=True):
                placed += 1
            if attempt % self.config.pattern_yield_interval == 0:
                yield

        self.placements[kind] = placed
        logger.debug(f"{kind.value}: {placed} pattern runs")

    def fill_background(self, kind: ElementKind, rows_per_yield: int = 10) -> Iterator[None]:
        """Deterministic sweep placing the base element on every empty cell."""
        element = behavior(kind)
        height, width = self.grid.shape
        filled = 0
        for row in range(height):
            for col in range(width):
                if self.grid[row, col] != EMPTY:
                    continue
                zone = self.zones.dominant_zone(row, col)
                if element.can_place(row, col, zone, self.grid, self.context):
                    element.place(row, col, self.grid, self.context, self.zones, self.rng)
                    filled += 1
            if row % rows_per_yield == 0:
                yield

        self.placements[kind] = filled
        logger.debug(f"{kind.value}: filled {filled} cells")
