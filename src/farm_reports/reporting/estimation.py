"""Estimation policies for values substituted when source data is missing.

Yield estimates for fields without harvest data and the monthly productivity
score are placeholders rather than modeled uncertainty. The policy decides how
they vary: the fixed policy returns the midpoint so reports are reproducible,
the seeded policy jitters within the dashboard's historical ranges.
"""

import random
from typing import Protocol

from farm_reports.sources.interfaces import FieldRecord

# Jitter ranges applied by the seeded policy
YIELD_FACTOR_RANGE = (0.8, 1.2)
PRODUCTIVITY_RANGE = (50.0, 100.0)


class EstimationPolicy(Protocol):
    """Supplies the variation applied to fallback estimates."""

    def yield_factor(self, field: FieldRecord) -> float:
        """Multiplier in [0.8, 1.2] applied to a field's base yield estimate."""
        ...

    def productivity_factor(self, month_index: int) -> float:
        """Per-activity productivity score in [50, 100] for a calendar month (0-11)."""
        ...


class FixedEstimationPolicy:
    """Deterministic policy returning the midpoint of each range."""

    def __init__(self, factor: float = 1.0, productivity: float = 75.0):
        low, high = YIELD_FACTOR_RANGE
        if not low <= factor <= high:
            raise ValueError(f"Yield factor must be within {YIELD_FACTOR_RANGE}: {factor}")
        self.factor = factor
        self.productivity = productivity

    def yield_factor(self, field: FieldRecord) -> float:
        return self.factor

    def productivity_factor(self, month_index: int) -> float:
        return self.productivity


class SeededEstimationPolicy:
    """Uniform jitter keyed by seed and field (or month).

    Each value comes from a generator seeded with the policy seed and the
    field id or month index, so a field gets the same factor across reports
    and within one report. Without a seed, one is drawn at construction.
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed if seed is not None else random.randrange(2**32)

    def yield_factor(self, field: FieldRecord) -> float:
        rng = random.Random(f"{self.seed}:field:{field.field_id}")
        return rng.uniform(*YIELD_FACTOR_RANGE)

    def productivity_factor(self, month_index: int) -> float:
        rng = random.Random(f"{self.seed}:month:{month_index}")
        return rng.uniform(*PRODUCTIVITY_RANGE)


def make_policy(name: str, seed: int | None = None) -> EstimationPolicy:
    """Create an estimation policy by name.

    Args:
        name: "fixed" or "seeded".
        seed: Seed for the seeded policy.

    Returns:
        Policy instance.

    Raises:
        ValueError: If the name is unknown.
    """
    if name == "fixed":
        return FixedEstimationPolicy()
    if name == "seeded":
        return SeededEstimationPolicy(seed)
    raise ValueError(f"Unknown estimation policy: {name}")
