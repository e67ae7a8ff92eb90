"""Garden generator: phased element placement followed by grid refinement."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterator, List, Optional

import numpy as np

from .config import GeneratorConfig
from .constants import EMPTY, PHASES, SYMBOLS, phase_elements, visual_density
from .context import PlacementContext
from .refinement import REFINEMENT_PASSES
from .schema import ElementKind, GardenResult, GenerationPhase
from .solver import PlacementSolver
from .validator import validate_dimensions, validate_garden
from .zones import ZoneLayout

logger = logging.getLogger(__name__)

ProgressSink = Callable[[int], None]

# Progress milestones (percent)
ZONES_READY = 5
GRID_READY = 10
PHASES_DONE = 90
REFINEMENT_MILESTONES = [91, 92, 95, 98]


class GenerationCancelled(Exception):
    """Raised when a run is cancelled or times out; the partial garden is discarded."""
    pass


class GenerationError(Exception):
    """Raised when a finished garden fails validation."""
    pass


def phase_progress(phase: GenerationPhase) -> int:
    """Progress reported once a phase completes."""
    phases = len(GenerationPhase)
    return GRID_READY + (PHASES_DONE - GRID_READY) * int(phase) // phases


def _density(kind: ElementKind) -> int:
    return visual_density(SYMBOLS[kind])


def ordered_phase_elements(phase: GenerationPhase) -> List[ElementKind]:
    """Terrain goes darkest first, decoration lightest first."""
    kinds = phase_elements(phase)
    if phase == GenerationPhase.TERRAIN:
        return sorted(kinds, key=_density, reverse=True)
    if phase == GenerationPhase.DECORATION:
        return sorted(kinds, key=_density)
    return kinds


class GardenGenerator:
    """
    Main garden generator.

    `steps` is the core: a generator that builds one garden and yields
    progress checkpoints (percent) between phases and inside every attempt
    loop. It takes no callbacks. `run` drives it, forwarding progress and
    checking cancellation at each checkpoint.

    Usage:
        generator = GardenGenerator(seed=42)
        result = generator.run(width=120, height=60)
        print(result.to_text())
    """

    def __init__(self, seed: Optional[int] = None, config: Optional[GeneratorConfig] = None):
        """
        Initialize garden generator.

        Args:
            seed: Random seed; equal seeds produce identical gardens
            config: Budgets and checkpoint cadence
        """
        self.seed = seed
        self.config = config or GeneratorConfig()

    def steps(self, width: int, height: int) -> Iterator[int]:
        """Build a garden, yielding progress percentages; returns a GardenResult."""
        validate_dimensions(width, height)
        rng = np.random.RandomState(self.seed)

        zones = ZoneLayout.default(width, height)
        yield ZONES_READY

        grid = np.full((height, width), EMPTY, dtype="<U1")
        context = PlacementContext()
        solver = PlacementSolver(grid, context, zones, rng, self.config)
        yield GRID_READY

        progress = GRID_READY
        for phase in GenerationPhase:
            # Phase boundary checkpoint
            yield progress
            for kind in ordered_phase_elements(phase):
                for _ in self._place(solver, phase, kind):
                    yield progress
            progress = phase_progress(phase)
            logger.debug(f"Phase {phase.name.lower()} done")
            yield progress

        for (name, refine), milestone in zip(REFINEMENT_PASSES, REFINEMENT_MILESTONES):
            refine(grid, rng)
            logger.debug(f"Refinement pass {name} done")
            yield milestone

        is_valid, error = validate_garden(grid)
        if not is_valid:
            raise GenerationError(error)

        yield 100
        return GardenResult(
            grid=grid,
            seed=self.seed,
            placements=dict(solver.placements),
            history=context.history(),
            water_paths=context.water_paths,
            bridge_placed=context.bridge_placed,
            warnings=list(solver.warnings),
        )

    def _place(self, solver: PlacementSolver, phase: GenerationPhase, kind: ElementKind) -> Iterator[None]:
        if phase == GenerationPhase.GRAVEL_GARDEN:
            return solver.fill_background(kind)
        if phase == GenerationPhase.FLOW_PATTERNS:
            return solver.place_pattern(kind)
        return solver.place_with_limits(kind)

    def run(
        self,
        width: int,
        height: int,
        progress: Optional[ProgressSink] = None,
        cancel=None
    ) -> GardenResult:
        """
        Generate one garden.

        Args:
            width: Garden width in cells
            height: Garden height in cells
            progress: Called with non-decreasing percentages, ending at 100
            cancel: Object with an is_set() method (e.g. threading.Event)

        Returns:
            Finished garden

        Raises:
            InvalidDimensionsError: If the size is invalid (before any work)
            GenerationCancelled: If cancelled or timed out at a checkpoint
        """
        validate_dimensions(width, height)
        logger.info(f"Generating {width}x{height} garden (seed={self.seed})")

        deadline = None
        if self.config.timeout is not None:
            deadline = time.monotonic() + self.config.timeout

        steps = self.steps(width, height)
        reported = 0
        while True:
            try:
                percent = next(steps)
            except StopIteration as finished:
                result = finished.value
                break

            if cancel is not None and cancel.is_set():
                steps.close()
                logger.warning(f"Generation cancelled at {reported}%")
                raise GenerationCancelled(f"Cancelled at {reported}%")
            if deadline is not None and time.monotonic() > deadline:
                steps.close()
                logger.warning(f"Generation timed out after {self.config.timeout}s at {reported}%")
                raise GenerationCancelled(f"Timed out after {self.config.timeout}s")

            if percent > reported:
                reported = percent
                if progress is not None:
                    progress(percent)

        summary = ", ".join(f"{kind.value}={count}" for kind, count in result.placements.items()
                            if PHASES[kind] != GenerationPhase.GRAVEL_GARDEN)
        logger.info(f"Garden complete: {summary}")
        if result.warnings:
            logger.info(f"{len(result.warnings)} element minimums not met")
        return result


def generate(
    width: int,
    height: int,
    seed: Optional[int] = None,
    progress: Optional[ProgressSink] = None,
    cancel=None,
    config: Optional[GeneratorConfig] = None
) -> GardenResult:
    """Generate a garden (convenience wrapper around GardenGenerator.run)."""
    return GardenGenerator(seed=seed, config=config).run(width, height, progress=progress, cancel=cancel)


def generate_batch(
    seeds: List[int],
    width: int,
    height: int,
    config: Optional[GeneratorConfig] = None,
    threads: int = 4
) -> Dict[int, GardenResult]:
    """
    Generate one independent garden per seed.

    Runs never share a grid, context or random state, so they can be solved
    in a thread pool.

    Args:
        seeds: One seed per garden
        width: Garden width in cells
        height: Garden height in cells
        config: Shared generation config
        threads: Number of worker threads

    Returns:
        Mapping of seed to finished garden
    """
    with ThreadPoolExecutor(max_workers=threads) as pool:
        futures = {seed: pool.submit(generate, width, height, seed, None, None, config) for seed in seeds}
        return {seed: future.result() for seed, future in futures.items()}
