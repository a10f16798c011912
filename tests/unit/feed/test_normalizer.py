"""Tests for the Deribit feed normalizer."""

import pytest

from volatility_index.core.config import FeedConfig
from volatility_index.domain.errors import MalformedMessageError, SeedDataError
from volatility_index.domain.types import Tick
from volatility_index.feed.normalizer import (
    DeribitNormalizer,
    PriceIndexUpdate,
    SeedData,
    bucket_duration_ms,
    round_up_to_bucket,
    seed_ticks,
)

SIX_HOURS_MS = 6 * 60 * 60 * 1000


class TestRounding:
    """Tests for bucket rounding."""

    @pytest.mark.parametrize(
        ("timestamp", "expected"),
        [(0, 0), (1, 1000), (999, 1000), (1000, 1000), (1001, 2000)],
    )
    def test_round_up_to_bucket(self, timestamp: int, expected: int) -> None:
        """Timestamps round up to the end of their bucket."""
        assert round_up_to_bucket(timestamp, 1000) == expected


class TestSeedHelpers:
    """Tests for seed history helpers."""

    def test_bucket_duration(self) -> None:
        """Bucket width is the spacing of the first two entries."""
        seed = SeedData(entries=[(0, 1.0), (SIX_HOURS_MS, 2.0), (3 * SIX_HOURS_MS, 3.0)])
        assert bucket_duration_ms(seed) == SIX_HOURS_MS

    def test_bucket_duration_needs_two_entries(self) -> None:
        """A single entry cannot define a bucket width."""
        with pytest.raises(SeedDataError) as exc_info:
            bucket_duration_ms(SeedData(entries=[(0, 1.0)]))
        assert exc_info.value.context == {"entries": 1}

    def test_bucket_duration_must_increase(self) -> None:
        """Non-increasing timestamps are rejected."""
        with pytest.raises(SeedDataError):
            bucket_duration_ms(SeedData(entries=[(1000, 1.0), (1000, 2.0)]))

    def test_seed_ticks_drop_open_bucket(self) -> None:
        """The last seed entry is left for the live feed."""
        seed = SeedData(entries=[(0, 1.0), (10, 2.0), (20, 3.0)])
        assert seed_ticks(seed) == [Tick(time=0, value=1.0), Tick(time=10, value=2.0)]

    def test_seed_ticks_reject_bad_price(self) -> None:
        """Non-positive seed prices are malformed."""
        seed = SeedData(entries=[(0, 1.0), (10, 0.0), (20, 3.0)])
        with pytest.raises(MalformedMessageError):
            seed_ticks(seed)


class TestClassify:
    """Tests for message classification."""

    @pytest.fixture
    def normalizer(self) -> DeribitNormalizer:
        """Create normalizer with default feed settings."""
        return DeribitNormalizer()

    def test_classify_seed(
        self, normalizer: DeribitNormalizer, sample_seed_message: dict
    ) -> None:
        """Response tagged with the seed id is seed data."""
        message = normalizer.classify(sample_seed_message)
        assert isinstance(message, SeedData)
        assert len(message.entries) == 6
        assert message.entries[1] == (SIX_HOURS_MS, 101.0)

    def test_classify_price(
        self, normalizer: DeribitNormalizer, sample_price_message: dict
    ) -> None:
        """Notification on the channel is a price update."""
        message = normalizer.classify(sample_price_message)
        assert message == PriceIndexUpdate(
            index_name="btc_usd",
            price=104.25,
            timestamp=5 * SIX_HOURS_MS - 1500,
        )

    def test_classify_irrelevant(
        self, normalizer: DeribitNormalizer, subscription_ack_message: dict
    ) -> None:
        """Acks, other channels and non-objects are ignored."""
        assert normalizer.classify(subscription_ack_message) is None
        assert normalizer.classify({"params": {"channel": "other"}}) is None
        assert normalizer.classify([1, 2, 3]) is None
        assert normalizer.classify("heartbeat") is None

    def test_custom_channel(self, sample_price_message: dict) -> None:
        """Classification follows the configured channel."""
        normalizer = DeribitNormalizer(FeedConfig(channel="deribit_price_index.eth_usd"))
        assert normalizer.classify(sample_price_message) is None

    def test_malformed_seed(self, normalizer: DeribitNormalizer) -> None:
        """Seed id with an error body is malformed."""
        payload = {"id": "seed", "error": {"code": 10001, "message": "error"}}
        with pytest.raises(MalformedMessageError) as exc_info:
            normalizer.classify(payload)
        assert exc_info.value.payload is payload

    def test_malformed_price(self, normalizer: DeribitNormalizer) -> None:
        """Channel notification without data is malformed."""
        payload = {"params": {"channel": "deribit_price_index.btc_usd"}}
        with pytest.raises(MalformedMessageError):
            normalizer.classify(payload)


class TestToTick:
    """Tests for live tick conversion."""

    def test_to_tick_rounds_up(self) -> None:
        """Live observations are stamped with their bucket end."""
        update = PriceIndexUpdate(index_name="btc_usd", price=50.0, timestamp=1234)
        tick = DeribitNormalizer().to_tick(update, 1000)
        assert tick == Tick(time=2000, value=50.0)

    def test_to_tick_rejects_zero_price(self) -> None:
        """A zero price cannot produce a log-return."""
        update = PriceIndexUpdate(index_name="btc_usd", price=0.0, timestamp=1234)
        with pytest.raises(MalformedMessageError):
            DeribitNormalizer().to_tick(update, 1000)


class TestRequests:
    """Tests for JSON-RPC request builders."""

    def test_seed_request(self) -> None:
        """Seed request asks for index chart data."""
        request = DeribitNormalizer().seed_request()
        assert request == {
            "jsonrpc": "2.0",
            "id": "seed",
            "method": "public/get_index_chart_data",
            "params": {"index_name": "btc_usd", "range": "1y"},
        }

    def test_subscribe_request(self) -> None:
        """Subscribe request names the configured channel."""
        request = DeribitNormalizer().subscribe_request()
        assert request["method"] == "public/subscribe"
        assert request["params"] == {"channels": ["deribit_price_index.btc_usd"]}
