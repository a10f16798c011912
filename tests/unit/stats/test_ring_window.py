"""Tests for RingWindow."""

import math

import pytest

from volatility_index.domain.errors import InvalidCapacityError
from volatility_index.stats.ring_window import RingWindow


class TestRingWindowConstruction:
    """Tests for capacity validation."""

    @pytest.mark.parametrize(
        "capacity",
        [0, -1, 1.5, math.nan, math.inf, "3", None, True],
    )
    def test_invalid_capacity(self, capacity: object) -> None:
        """Non-positive, non-integral or non-numeric capacity is rejected."""
        with pytest.raises(InvalidCapacityError) as exc_info:
            RingWindow(capacity)
        assert exc_info.value.capacity is capacity

    def test_integral_float_accepted(self) -> None:
        """A float with no fractional part is a valid capacity."""
        window = RingWindow(3.0)
        assert window.capacity == 3

    def test_starts_empty(self) -> None:
        """New window has no values."""
        window = RingWindow(3)
        assert len(window) == 0
        assert window.items() == []
        assert window.top is None
        assert not window.is_full


class TestRingWindowAppend:
    """Tests for append and eviction reporting."""

    def test_no_eviction_while_filling(self) -> None:
        """Appends into unwritten slots report no eviction."""
        window = RingWindow(3)
        assert window.append(1.0) is None
        assert window.append(2.0) is None
        assert window.append(3.0) is None
        assert window.is_full

    def test_eviction_after_full(self) -> None:
        """Appending to a full window evicts the oldest value."""
        window = RingWindow(3)
        for value in (1.0, 2.0, 3.0):
            window.append(value)

        assert window.append(4.0) == 1.0
        assert window.append(5.0) == 2.0
        assert window.items() == [3.0, 4.0, 5.0]
        assert len(window) == 3

    def test_length_bounded_by_capacity(self) -> None:
        """Length equals min(insertions, capacity) at every point."""
        window = RingWindow(3)
        for i in range(10):
            window.append(float(i))
            assert len(window) == min(i + 1, 3)

    def test_replace_top_while_filling(self) -> None:
        """Replacing the top overwrites the newest slot and returns it."""
        window = RingWindow(3)
        window.append(1.0)
        window.append(2.0)

        assert window.append(5.0, replace_top=True) == 2.0
        assert window.items() == [1.0, 5.0]
        assert len(window) == 2

    def test_replace_top_after_wrap(self) -> None:
        """Replacing the top after wrapping leaves older slots alone."""
        window = RingWindow(2)
        for value in (1.0, 2.0, 3.0):
            window.append(value)

        assert window.append(9.0, replace_top=True) == 3.0
        assert window.items() == [2.0, 9.0]
        assert window.top == 9.0

    def test_replace_top_on_empty_window(self) -> None:
        """Replacing the top of an empty window writes the first slot."""
        window = RingWindow(3)
        assert window.append(7.0, replace_top=True) is None
        assert window.items() == [7.0]
        assert len(window) == 1

    def test_capacity_one(self) -> None:
        """Single-slot window evicts on every append after the first."""
        window = RingWindow(1)
        assert window.append(1.0) is None
        assert window.append(2.0) == 1.0
        assert window.items() == [2.0]
