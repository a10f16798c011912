"""Exception hierarchy for volatility index errors.

All errors inherit from VolatilityIndexError, allowing code to catch
broad categories of errors. Each error type includes relevant context for
debugging and logging.

Error categories:
- InvalidCapacityError: Rolling window constructed with a bad length
- InvalidBucketDurationError: Volatility annualized over a bad bucket width
- OutOfOrderTickError: Tick older than the last one entered
- MalformedMessageError: Feed message with an unexpected shape
- SeedDataError: Seed history that cannot define a bucket width
- ConfigurationError: Invalid configuration
"""

from __future__ import annotations

from typing import Any


class VolatilityIndexError(Exception):
    """Base exception for all volatility index errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize with message and optional context.

        Args:
            message: Human-readable error description
            context: Additional structured data for logging/debugging
        """
        super().__init__(message)
        self.context = context or {}


class InvalidCapacityError(VolatilityIndexError):
    """Window length is not a positive finite integer.

    Raised synchronously at construction; no window or estimator is produced.
    """

    def __init__(self, capacity: Any, context: dict[str, Any] | None = None) -> None:
        """Initialize with the rejected capacity.

        Args:
            capacity: The value that was passed as capacity
            context: Additional structured data
        """
        super().__init__(
            f"Capacity must be a positive integer, got {capacity!r}", context
        )
        self.capacity = capacity


class OutOfOrderTickError(VolatilityIndexError):
    """Tick timestamp is earlier than the last entered tick."""

    def __init__(
        self,
        time: int,
        last_time: int,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the offending timestamps.

        Args:
            time: Timestamp of the rejected tick
            last_time: Timestamp of the last entered tick
            context: Additional structured data
        """
        super().__init__(
            f"Tick at {time} is older than last entered tick at {last_time}",
            context,
        )
        self.time = time
        self.last_time = last_time


class MalformedMessageError(VolatilityIndexError):
    """Feed message claims a known kind but has the wrong shape."""

    def __init__(
        self,
        message: str,
        payload: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the offending payload.

        Args:
            message: Human-readable error description
            payload: The raw decoded message, if available
            context: Additional structured data
        """
        super().__init__(message, context)
        self.payload = payload


class InvalidBucketDurationError(VolatilityIndexError):
    """Bucket duration is not a positive finite number of milliseconds."""

    def __init__(
        self,
        bucket_duration_ms: Any,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the rejected duration.

        Args:
            bucket_duration_ms: The value passed as bucket duration
            context: Additional structured data
        """
        super().__init__(
            f"Bucket duration must be positive, got {bucket_duration_ms!r}", context
        )
        self.bucket_duration_ms = bucket_duration_ms


class SeedDataError(VolatilityIndexError):
    """Seed history is unusable.

    Raised when:
    - Fewer than two entries are present
    - The first two entries are not strictly increasing in time
    """


class ConfigurationError(VolatilityIndexError):
    """Invalid configuration."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with field information.

        Args:
            message: Human-readable error description
            field: Name of the configuration field with the issue
            context: Additional structured data
        """
        super().__init__(message, context)
        self.field = field
