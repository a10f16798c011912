"""Volatility index handler.

Drives a WindowedVolatilityEstimator from feed messages: the seed history
defines the bucket width and warms the window, live observations keep it
rolling. Every folded tick is published as a price point and, once the
estimator is ready, a volatility point.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from volatility_index.core.config import EstimatorConfig, FeedConfig
from volatility_index.domain.errors import OutOfOrderTickError
from volatility_index.domain.types import SeriesPoint, Tick
from volatility_index.feed.normalizer import (
    DeribitNormalizer,
    PriceIndexUpdate,
    SeedData,
    bucket_duration_ms,
    seed_ticks,
)
from volatility_index.stats.estimator import WindowedVolatilityEstimator

logger = logging.getLogger(__name__)

PointCallback = Callable[[SeriesPoint], None]


class VolatilityIndexHandler:
    """Routes feed messages into a rolling volatility estimator.

    Not thread-safe; feed messages must be processed one at a time.
    """

    def __init__(
        self,
        estimator_config: EstimatorConfig | None = None,
        feed_config: FeedConfig | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            estimator_config: Lookback and default bucket width
            feed_config: Channel and seed request settings
        """
        self.estimator_config = estimator_config or EstimatorConfig()
        self.normalizer = DeribitNormalizer(feed_config)
        self._bucket_ms = self.estimator_config.default_bucket_ms
        self._estimator: WindowedVolatilityEstimator | None = None
        self._latest_volatility: SeriesPoint | None = None
        self._price_callbacks: list[PointCallback] = []
        self._volatility_callbacks: list[PointCallback] = []

    @property
    def estimator(self) -> WindowedVolatilityEstimator | None:
        """Return the estimator, or None before the seed arrived."""
        return self._estimator

    @property
    def bucket_duration_ms(self) -> int:
        """Return the bucket width in milliseconds."""
        return self._bucket_ms

    @property
    def is_seeded(self) -> bool:
        """Check if seed history has been processed."""
        return self._estimator is not None

    @property
    def latest_volatility(self) -> SeriesPoint | None:
        """Return the most recent volatility point, if any."""
        return self._latest_volatility

    def on_price(self, callback: PointCallback) -> None:
        """Register a callback for price points.

        Args:
            callback: Called with each folded tick as a SeriesPoint
        """
        self._price_callbacks.append(callback)

    def on_volatility(self, callback: PointCallback) -> None:
        """Register a callback for volatility points.

        Args:
            callback: Called with each volatility value once ready
        """
        self._volatility_callbacks.append(callback)

    def process_message(self, payload: Any) -> None:
        """Process a decoded feed message.

        Args:
            payload: Decoded JSON message

        Raises:
            MalformedMessageError: If a seed or price message has the wrong shape
            SeedDataError: If the seed cannot define a bucket width
            InvalidCapacityError: If the seed bucket is wider than the lookback
        """
        message = self.normalizer.classify(payload)

        if isinstance(message, SeedData):
            self.process_seed(message)
        elif isinstance(message, PriceIndexUpdate):
            self.process_price(message)

    def process_seed(self, seed: SeedData) -> None:
        """Build the estimator from seed history and warm it up.

        A second seed replaces the estimator and starts over. If the new
        seed is unusable the current estimator and bucket width are kept.

        Args:
            seed: Seed history

        Raises:
            SeedDataError: If the seed cannot define a bucket width
            InvalidCapacityError: If the bucket is wider than the lookback
        """
        bucket_ms = bucket_duration_ms(seed)
        window_length = self.estimator_config.lookback_ms // bucket_ms
        ticks = seed_ticks(seed)
        estimator = WindowedVolatilityEstimator(window_length)

        if self._estimator is not None:
            logger.warning("Seed received again, rebuilding estimator")

        self._bucket_ms = bucket_ms
        self._estimator = estimator
        self._latest_volatility = None

        logger.info(
            f"Seeding with {len(ticks)} ticks: bucket={bucket_ms}ms, "
            f"window={window_length} buckets"
        )

        for tick in ticks:
            self._fold(estimator, tick)

        if not estimator.is_ready():
            logger.info(
                f"Window not full after seed "
                f"({estimator.count}/{window_length} buckets)"
            )

    def process_price(self, update: PriceIndexUpdate) -> None:
        """Fold a live observation into the estimator.

        Args:
            update: Live observation
        """
        if self._estimator is None:
            logger.warning(
                f"Dropping price at {update.timestamp}: no seed data yet"
            )
            return

        self._fold(self._estimator, self.normalizer.to_tick(update, self._bucket_ms))

    def _fold(self, estimator: WindowedVolatilityEstimator, tick: Tick) -> None:
        """Update the estimator and publish the resulting points."""
        try:
            estimator.update(tick)
        except OutOfOrderTickError as e:
            logger.warning(f"Dropping tick: {e}")
            return

        volatility = estimator.volatility(self._bucket_ms)
        if volatility is not None:
            point = SeriesPoint(time=tick.time, value=volatility)
            self._latest_volatility = point
            for callback in self._volatility_callbacks:
                callback(point)

        price_point = SeriesPoint(time=tick.time, value=tick.value)
        for callback in self._price_callbacks:
            callback(price_point)
