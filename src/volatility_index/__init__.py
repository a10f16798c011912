"""Rolling volatility index.

Online fixed-window volatility estimation over bucketed log-returns.
"""

from volatility_index.domain.types import Tick
from volatility_index.stats.estimator import WindowedVolatilityEstimator
from volatility_index.stats.ring_window import RingWindow

__all__ = [
    "RingWindow",
    "Tick",
    "WindowedVolatilityEstimator",
]
