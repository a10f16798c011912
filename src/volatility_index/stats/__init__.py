"""Rolling statistics components.

Provides the overwrite buffer and the windowed volatility estimator built
on top of it.
"""

from volatility_index.stats.estimator import (
    MILLISECONDS_PER_YEAR,
    EstimatorSnapshot,
    EstimatorState,
    Moments,
    WindowedVolatilityEstimator,
    fold_moments,
    plan_update,
)
from volatility_index.stats.ring_window import RingWindow

__all__ = [
    "MILLISECONDS_PER_YEAR",
    "EstimatorSnapshot",
    "EstimatorState",
    "Moments",
    "RingWindow",
    "WindowedVolatilityEstimator",
    "fold_moments",
    "plan_update",
]
