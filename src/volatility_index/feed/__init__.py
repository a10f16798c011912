"""Feed adaptation: message classification, replay loading and the handler
that drives the estimator."""

from volatility_index.feed.handler import VolatilityIndexHandler
from volatility_index.feed.loader import FeedRecordingLoader
from volatility_index.feed.normalizer import (
    DeribitNormalizer,
    PriceIndexUpdate,
    SeedData,
    bucket_duration_ms,
    round_up_to_bucket,
    seed_ticks,
)

__all__ = [
    "DeribitNormalizer",
    "FeedRecordingLoader",
    "PriceIndexUpdate",
    "SeedData",
    "VolatilityIndexHandler",
    "bucket_duration_ms",
    "round_up_to_bucket",
    "seed_ticks",
]
