"""Pytest configuration and shared fixtures."""

import pytest

from volatility_index.core.config import EstimatorConfig

HOUR_MS = 60 * 60 * 1000
SIX_HOURS_MS = 6 * HOUR_MS


@pytest.fixture
def sample_seed_message() -> dict:
    """Seed response from Deribit public/get_index_chart_data (6h buckets)."""
    return {
        "jsonrpc": "2.0",
        "id": "seed",
        "result": [
            [0, 100.0],
            [SIX_HOURS_MS, 101.0],
            [2 * SIX_HOURS_MS, 99.5],
            [3 * SIX_HOURS_MS, 102.0],
            [4 * SIX_HOURS_MS, 103.5],
            [5 * SIX_HOURS_MS, 104.0],
        ],
        "usIn": 1705500000000000,
        "usOut": 1705500000001000,
        "usDiff": 1000,
        "testnet": False,
    }


@pytest.fixture
def sample_price_message() -> dict:
    """Price index notification from the Deribit subscription."""
    return {
        "jsonrpc": "2.0",
        "method": "subscription",
        "params": {
            "channel": "deribit_price_index.btc_usd",
            "data": {
                "index_name": "btc_usd",
                "price": 104.25,
                "timestamp": 5 * SIX_HOURS_MS - 1500,
            },
        },
    }


@pytest.fixture
def subscription_ack_message() -> dict:
    """Response to public/subscribe."""
    return {
        "jsonrpc": "2.0",
        "id": 1,
        "result": ["deribit_price_index.btc_usd"],
    }


@pytest.fixture
def one_day_config() -> EstimatorConfig:
    """One-day lookback: four 6h buckets."""
    return EstimatorConfig(lookback_days=1)
