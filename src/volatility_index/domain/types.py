"""Core value objects for the volatility index.

These types are shared between the feed layer and the rolling statistics.
All types are immutable so a snapshot handed to a reader can never change
underneath it.
"""

from __future__ import annotations

import math

from pydantic import field_validator
from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class Tick:
    """A single price observation.

    Timestamps are integer milliseconds. Ticks must be delivered in
    non-decreasing time order; two ticks with the same time belong to the
    same bucket.
    """

    time: int
    value: float

    @field_validator("value")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Ensure price is positive and finite (log-returns need it)."""
        if not math.isfinite(v) or v <= 0:
            raise ValueError("Tick value must be a positive finite number")
        return v

    def __repr__(self) -> str:
        return f"Tick({self.time}, {self.value})"


@dataclass(frozen=True)
class SeriesPoint:
    """A point of an output series (price or volatility) for plotting."""

    time: int
    value: float


@dataclass(frozen=True)
class MomentSummary:
    """Read-only snapshot of the rolling moments.

    Attributes:
        mean: Mean of the samples in the window
        d_squared: Sum of squared deviations from the mean
        population_variance: d_squared / n
        sample_variance: d_squared / (n - 1), or 0 with fewer than two samples
        population_stdev: Square root of population_variance
        sample_stdev: Square root of sample_variance
    """

    mean: float
    d_squared: float
    population_variance: float
    sample_variance: float
    population_stdev: float
    sample_stdev: float
