"""Fixed-capacity overwrite buffer for rolling statistics.

Values are addressed by a circular cursor. Appending past capacity
overwrites the oldest slot and hands the overwritten value back to the
caller so running moments can be adjusted without rescanning the window.
"""

from __future__ import annotations

import math
import numbers
from typing import Any

from volatility_index.domain.errors import InvalidCapacityError


def validate_capacity(capacity: Any) -> int:
    """Coerce a window length to a positive int.

    Args:
        capacity: Requested number of slots

    Returns:
        The capacity as an int

    Raises:
        InvalidCapacityError: If capacity is not a positive finite integer
    """
    if isinstance(capacity, bool):
        raise InvalidCapacityError(capacity)

    if isinstance(capacity, numbers.Integral):
        value = int(capacity)
    elif isinstance(capacity, numbers.Real):
        as_float = float(capacity)
        if not math.isfinite(as_float) or not as_float.is_integer():
            raise InvalidCapacityError(capacity)
        value = int(as_float)
    else:
        raise InvalidCapacityError(capacity)

    if value <= 0:
        raise InvalidCapacityError(capacity)
    return value


class RingWindow:
    """Circular buffer of floats with cursor-based insertion.

    The cursor always points at the most recently written slot. A normal
    append advances the cursor first; a top replacement rewrites the slot
    under the cursor in place.
    """

    def __init__(self, capacity: Any) -> None:
        """Initialize an empty window.

        Args:
            capacity: Number of slots (positive integer)

        Raises:
            InvalidCapacityError: If capacity is invalid
        """
        self._capacity = validate_capacity(capacity)
        self._buffer: list[float | None] = [None] * self._capacity
        self._cursor = -1
        self._length = 0

    @property
    def capacity(self) -> int:
        """Return the maximum number of slots."""
        return self._capacity

    @property
    def length(self) -> int:
        """Return the number of slots ever written (saturates at capacity)."""
        return self._length

    @property
    def is_full(self) -> bool:
        """Return True once every slot has been written."""
        return self._length == self._capacity

    @property
    def top(self) -> float | None:
        """Return the most recently written value, or None if empty."""
        if self._length == 0:
            return None
        return self._buffer[self._cursor]

    def __len__(self) -> int:
        return self._length

    def append(self, value: float, replace_top: bool = False) -> float | None:
        """Write a value into the window.

        Args:
            value: Value to store
            replace_top: If True, overwrite the slot under the cursor instead
                of advancing to the next slot

        Returns:
            The value previously held in the written slot, or None if the
            slot had never been written
        """
        if not replace_top:
            self._cursor = (self._cursor + 1) % self._capacity
        elif self._cursor < 0:
            self._cursor = 0

        previous = self._buffer[self._cursor]
        self._buffer[self._cursor] = value

        if previous is None:
            self._length += 1

        return previous

    def items(self) -> list[float]:
        """Return the stored values, oldest first."""
        if not self.is_full:
            return [v for v in self._buffer[: self._length] if v is not None]

        start = (self._cursor + 1) % self._capacity
        ordered = self._buffer[start:] + self._buffer[:start]
        return [v for v in ordered if v is not None]

    def __repr__(self) -> str:
        return f"RingWindow(capacity={self._capacity}, length={self._length})"
