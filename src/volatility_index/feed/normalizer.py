"""Deribit price index feed normalizer.

Classifies decoded JSON-RPC messages and converts them to domain ticks.

Deribit sends:
- A one-off response to public/get_index_chart_data, tagged with the id we
  sent, whose result is a list of [timestamp_ms, price] pairs
- Subscription notifications on deribit_price_index.<index>, carrying
  {index_name, price, timestamp}
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError

from volatility_index.core.config import FeedConfig
from volatility_index.domain.errors import MalformedMessageError, SeedDataError
from volatility_index.domain.types import Tick


class SeedData(BaseModel):
    """Historical index prices used to warm up the window."""

    entries: list[tuple[int, float]]


class PriceIndexUpdate(BaseModel):
    """A single live index price observation."""

    index_name: str
    price: float
    timestamp: int


FeedMessage = SeedData | PriceIndexUpdate


def round_up_to_bucket(timestamp_ms: int, bucket_ms: int) -> int:
    """Round a timestamp up to the next bucket boundary.

    Args:
        timestamp_ms: Timestamp in milliseconds
        bucket_ms: Bucket width in milliseconds

    Returns:
        Smallest multiple of bucket_ms not below timestamp_ms
    """
    return -(-timestamp_ms // bucket_ms) * bucket_ms


def bucket_duration_ms(seed: SeedData) -> int:
    """Return the bucket width implied by the seed history.

    Args:
        seed: Seed history

    Returns:
        Spacing between the first two entries in milliseconds

    Raises:
        SeedDataError: If the spacing cannot be determined
    """
    if len(seed.entries) < 2:
        raise SeedDataError(
            "Seed data needs at least two entries",
            context={"entries": len(seed.entries)},
        )

    duration = seed.entries[1][0] - seed.entries[0][0]
    if duration <= 0:
        raise SeedDataError(
            "Seed entries must be increasing in time",
            context={"first": seed.entries[0][0], "second": seed.entries[1][0]},
        )
    return duration


def seed_ticks(seed: SeedData) -> list[Tick]:
    """Convert seed history to ticks.

    The last entry is the bucket that is still open; it is left out and
    arrives again through the live feed.

    Args:
        seed: Seed history

    Returns:
        Ticks for every closed bucket, in order

    Raises:
        MalformedMessageError: If an entry has a non-positive price
    """
    try:
        return [Tick(time=ts, value=price) for ts, price in seed.entries[:-1]]
    except ValidationError as e:
        raise MalformedMessageError(f"Invalid seed entry: {e}") from e


class DeribitNormalizer:
    """Converts Deribit messages to feed messages and ticks."""

    def __init__(self, config: FeedConfig | None = None) -> None:
        """Initialize the normalizer.

        Args:
            config: Feed settings (channel and seed request id)
        """
        self.config = config or FeedConfig()

    def is_seed_data(self, payload: Any) -> bool:
        """Check if a payload answers our seed request."""
        return isinstance(payload, dict) and payload.get("id") == self.config.seed_request_id

    def is_price_index_data(self, payload: Any) -> bool:
        """Check if a payload is a notification on our channel."""
        if not isinstance(payload, dict):
            return False
        params = payload.get("params")
        return isinstance(params, dict) and params.get("channel") == self.config.channel

    def classify(self, payload: Any) -> FeedMessage | None:
        """Classify a decoded message.

        Args:
            payload: Decoded JSON message

        Returns:
            SeedData, PriceIndexUpdate, or None for irrelevant messages
            (subscription acks, heartbeats, other channels)

        Raises:
            MalformedMessageError: If a seed or price message has the wrong shape
        """
        if self.is_seed_data(payload):
            return self.normalize_seed(payload)
        if self.is_price_index_data(payload):
            return self.normalize_price_index(payload)
        return None

    def normalize_seed(self, payload: dict[str, Any]) -> SeedData:
        """Convert a seed response to SeedData.

        Args:
            payload: JSON-RPC response with a result list

        Returns:
            SeedData

        Raises:
            MalformedMessageError: If the result is not a list of pairs
        """
        try:
            return SeedData(entries=payload.get("result"))
        except ValidationError as e:
            raise MalformedMessageError(
                f"Invalid seed data: {e.error_count()} errors", payload
            ) from e

    def normalize_price_index(self, payload: dict[str, Any]) -> PriceIndexUpdate:
        """Convert a channel notification to PriceIndexUpdate.

        Args:
            payload: JSON-RPC notification

        Returns:
            PriceIndexUpdate

        Raises:
            MalformedMessageError: If params.data is missing or invalid
        """
        try:
            return PriceIndexUpdate.model_validate(payload["params"].get("data"))
        except ValidationError as e:
            raise MalformedMessageError(
                f"Invalid price index data: {e.error_count()} errors", payload
            ) from e

    def to_tick(self, update: PriceIndexUpdate, bucket_ms: int) -> Tick:
        """Convert a live observation to a bucketed tick.

        Args:
            update: Live observation
            bucket_ms: Bucket width in milliseconds

        Returns:
            Tick stamped with the end of its bucket

        Raises:
            MalformedMessageError: If the price is not positive
        """
        try:
            return Tick(
                time=round_up_to_bucket(update.timestamp, bucket_ms),
                value=update.price,
            )
        except ValidationError as e:
            raise MalformedMessageError(f"Invalid index price: {update.price}") from e

    def seed_request(self) -> dict[str, Any]:
        """Build the JSON-RPC request for seed history."""
        return {
            "jsonrpc": "2.0",
            "id": self.config.seed_request_id,
            "method": "public/get_index_chart_data",
            "params": {
                "index_name": self.config.index_name,
                "range": self.config.seed_range,
            },
        }

    def subscribe_request(self) -> dict[str, Any]:
        """Build the JSON-RPC request subscribing to the price channel."""
        return {
            "jsonrpc": "2.0",
            "id": self.config.subscribe_request_id,
            "method": "public/subscribe",
            "params": {"channels": [self.config.channel]},
        }
