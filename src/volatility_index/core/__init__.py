"""Core application components."""

from volatility_index.core.config import (
    AppConfig,
    EstimatorConfig,
    FeedConfig,
    load_config,
)

__all__ = [
    "AppConfig",
    "EstimatorConfig",
    "FeedConfig",
    "load_config",
]
