"""Windowed volatility estimator.

Maintains the mean and sum of squared deviations of the last N bucket
log-returns using Welford's method adapted to a sliding window. Each update
costs O(1); the window is never rescanned.

The estimator state is an immutable EstimatorState. Each update is computed
by two pure functions:

    plan_update(state, tick)                       -> PlannedUpdate
    fold_moments(moments, sample, evicted, count)  -> Moments

and the estimator object only owns the ring window and swaps in the new
state. Replaying the same ticks always produces the same sequence of states.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from volatility_index.domain.errors import (
    InvalidBucketDurationError,
    OutOfOrderTickError,
)
from volatility_index.domain.types import MomentSummary, Tick
from volatility_index.stats.ring_window import RingWindow

logger = logging.getLogger(__name__)

MILLISECONDS_PER_YEAR = 365 * 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class Moments:
    """Running mean and sum of squared deviations (D²) of a window.

    Attributes:
        mean: Mean of the samples in the window
        d_squared: Sum of squared deviations from the mean
        count: Number of samples in the window
    """

    mean: float = 0.0
    d_squared: float = 0.0
    count: int = 0

    def variance(self, sample: bool = False) -> float:
        """Return the population or sample variance.

        An empty window has zero variance, and so does a single-sample
        window when the sample variance is requested.
        """
        if sample:
            if self.count <= 1:
                return 0.0
            return self.d_squared / (self.count - 1)
        if self.count == 0:
            return 0.0
        return self.d_squared / self.count

    def standard_deviation(self, sample: bool = False) -> float:
        """Return the square root of the corresponding variance."""
        # Rounding can leave D² a hair below zero after many evictions.
        return math.sqrt(max(self.variance(sample), 0.0))


@dataclass(frozen=True)
class PlannedUpdate:
    """Outcome of classifying a tick against the current state.

    Attributes:
        sample: Log-return to store in the window
        replace_top: True if the tick revises the open bucket
        last_finalized: Tick the return was measured against
        last_entered: The tick itself
    """

    sample: float
    replace_top: bool
    last_finalized: Tick | None
    last_entered: Tick


@dataclass(frozen=True)
class EstimatorState:
    """Immutable estimator state between two updates."""

    last_finalized: Tick | None = None
    last_entered: Tick | None = None
    moments: Moments = field(default_factory=Moments)
    is_ready: bool = False


@dataclass(frozen=True)
class EstimatorSnapshot:
    """Estimator state together with the window contents (oldest first)."""

    state: EstimatorState
    window: tuple[float, ...]


def log_return(tick: Tick, reference: Tick | None) -> float:
    """Return ln(tick) - ln(reference), or 0 when there is no reference."""
    if reference is None:
        return 0.0
    return math.log(tick.value) - math.log(reference.value)


def plan_update(state: EstimatorState, tick: Tick) -> PlannedUpdate:
    """Decide how a tick folds into the window.

    A tick with the same time as the last entered tick revises the open
    bucket. Otherwise the last entered tick becomes the finalized reference
    and the tick opens a new bucket.

    Args:
        state: Current estimator state
        tick: Incoming tick

    Returns:
        The planned update

    Raises:
        OutOfOrderTickError: If the tick is older than the last entered tick
    """
    last_entered = state.last_entered

    if last_entered is not None and tick.time < last_entered.time:
        raise OutOfOrderTickError(tick.time, last_entered.time)

    replace_top = last_entered is not None and tick.time == last_entered.time
    last_finalized = state.last_finalized if replace_top else last_entered

    return PlannedUpdate(
        sample=log_return(tick, last_finalized),
        replace_top=replace_top,
        last_finalized=last_finalized,
        last_entered=tick,
    )


def fold_moments(
    moments: Moments,
    sample: float,
    evicted: float | None,
    count: int,
) -> Moments:
    """Fold a sample into the running moments.

    Args:
        moments: Moments before the window was written
        sample: Value just written into the window
        evicted: Value the write overwrote, or None if the slot was empty
        count: Number of samples in the window after the write

    Returns:
        Moments consistent with the window after the write
    """
    if count == 1 and evicted is None:
        return Moments(mean=sample, d_squared=0.0, count=1)

    if evicted is None:
        # Window still filling: plain Welford insertion
        mean_delta = (sample - moments.mean) / count
        new_mean = moments.mean + mean_delta
        d_squared = moments.d_squared + (sample - new_mean) * (sample - moments.mean)
        return Moments(mean=new_mean, d_squared=d_squared, count=count)

    # Slot overwritten: remove evicted and insert sample in one step
    mean_delta = (sample - evicted) / count
    new_mean = moments.mean + mean_delta
    d_squared = moments.d_squared + (sample - evicted) * (
        sample - new_mean + evicted - moments.mean
    )
    return Moments(mean=new_mean, d_squared=d_squared, count=count)


class WindowedVolatilityEstimator:
    """Rolling volatility over the last N bucket log-returns.

    Not thread-safe: callers sharing an estimator between threads or tasks
    must serialize access themselves.
    """

    def __init__(self, window_length: int) -> None:
        """Initialize the estimator.

        Args:
            window_length: Number of buckets to retain

        Raises:
            InvalidCapacityError: If window_length is not a positive integer
        """
        self._window = RingWindow(window_length)
        self._state = EstimatorState()

    @property
    def window_length(self) -> int:
        """Return the number of buckets retained."""
        return self._window.capacity

    @property
    def count(self) -> int:
        """Return the number of samples currently in the window."""
        return self._window.length

    @property
    def state(self) -> EstimatorState:
        """Return the current immutable state."""
        return self._state

    @property
    def mean(self) -> float:
        """Return the mean log-return in the window."""
        return self._state.moments.mean

    @property
    def d_squared(self) -> float:
        """Return the sum of squared deviations in the window."""
        return self._state.moments.d_squared

    def is_ready(self) -> bool:
        """Check if the window has been filled at least once.

        Returns:
            True after N bucket insertions, and forever after
        """
        return self._state.is_ready

    def update(self, tick: Tick) -> EstimatorState:
        """Fold a tick into the rolling statistics.

        Args:
            tick: Price observation, not older than the previous one

        Returns:
            The new estimator state

        Raises:
            OutOfOrderTickError: If the tick is older than the last entered
                tick. The estimator is left unchanged.
        """
        planned = plan_update(self._state, tick)

        evicted = self._window.append(planned.sample, replace_top=planned.replace_top)
        count = self._window.length

        is_ready = self._state.is_ready
        if not is_ready and not planned.replace_top and self._window.is_full:
            is_ready = True
            logger.debug(
                "Volatility window filled with %d samples at %d",
                count,
                tick.time,
            )

        self._state = EstimatorState(
            last_finalized=planned.last_finalized,
            last_entered=planned.last_entered,
            moments=fold_moments(self._state.moments, planned.sample, evicted, count),
            is_ready=is_ready,
        )
        return self._state

    def update_many(self, ticks: Iterable[Tick]) -> EstimatorState:
        """Fold several ticks in order.

        Args:
            ticks: Ticks in non-decreasing time order

        Returns:
            The state after the last tick
        """
        for tick in ticks:
            self.update(tick)
        return self._state

    def variance(self, sample: bool = False) -> float:
        """Return the population (default) or sample variance of the window."""
        return self._state.moments.variance(sample)

    def standard_deviation(self, sample: bool = False) -> float:
        """Return the population (default) or sample standard deviation."""
        return self._state.moments.standard_deviation(sample)

    def volatility(self, bucket_duration_ms: float) -> float | None:
        """Return the annualized volatility.

        Args:
            bucket_duration_ms: Width of one bucket in milliseconds

        Returns:
            Population stdev scaled by sqrt(buckets per year), or None until
            the window has been filled

        Raises:
            InvalidBucketDurationError: If bucket_duration_ms is not positive
                and finite
        """
        if not math.isfinite(bucket_duration_ms) or bucket_duration_ms <= 0:
            raise InvalidBucketDurationError(bucket_duration_ms)
        if not self._state.is_ready:
            return None
        buckets_per_year = MILLISECONDS_PER_YEAR / bucket_duration_ms
        return self.standard_deviation() * math.sqrt(buckets_per_year)

    def summary(self) -> MomentSummary:
        """Return a snapshot of the current moments."""
        moments = self._state.moments
        return MomentSummary(
            mean=moments.mean,
            d_squared=moments.d_squared,
            population_variance=moments.variance(),
            sample_variance=moments.variance(sample=True),
            population_stdev=moments.standard_deviation(),
            sample_stdev=moments.standard_deviation(sample=True),
        )

    def snapshot(self) -> EstimatorSnapshot:
        """Return the state together with the window contents."""
        return EstimatorSnapshot(state=self._state, window=tuple(self._window.items()))

    def __repr__(self) -> str:
        return (
            f"WindowedVolatilityEstimator(window_length={self.window_length}, "
            f"count={self.count}, ready={self._state.is_ready})"
        )
