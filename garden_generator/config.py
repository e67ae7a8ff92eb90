"""Configuration for garden generation."""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any


@dataclass
class GeneratorConfig:
    """
    Generation budgets and checkpoint cadence.

    Attributes:
        attempts_per_max: Sampling attempts per allowed placement (budget = attempts_per_max * max_count)
        forced_attempts: Attempts of the forced pass that tops up unmet minimums
        pattern_attempts: Sampling attempts per raked pattern element
        yield_interval: Attempts between checkpoints in placement loops
        pattern_yield_interval: Attempts between checkpoints in the pattern phase
        timeout: Seconds before a run is abandoned (None = no limit)
    """
    attempts_per_max: int = 1000
    forced_attempts: int = 2000
    pattern_attempts: int = 1000
    yield_interval: int = 100
    pattern_yield_interval: int = 50
    timeout: Optional[float] = None

    def __post_init__(self):
        """Validate configuration values."""
        for name in ("attempts_per_max", "forced_attempts", "pattern_attempts",
                     "yield_interval", "pattern_yield_interval"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive or None, got {self.timeout!r}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GeneratorConfig":
        """Build from a mapping, rejecting unknown keys."""
        data = data or {}
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
