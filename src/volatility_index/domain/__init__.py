"""Domain models for the volatility index.

This package contains the value objects and errors shared by every layer.
"""

from volatility_index.domain.errors import (
    ConfigurationError,
    InvalidBucketDurationError,
    InvalidCapacityError,
    MalformedMessageError,
    OutOfOrderTickError,
    SeedDataError,
    VolatilityIndexError,
)
from volatility_index.domain.types import MomentSummary, SeriesPoint, Tick

__all__ = [
    # Types
    "MomentSummary",
    "SeriesPoint",
    "Tick",
    # Errors
    "ConfigurationError",
    "InvalidBucketDurationError",
    "InvalidCapacityError",
    "MalformedMessageError",
    "OutOfOrderTickError",
    "SeedDataError",
    "VolatilityIndexError",
]
