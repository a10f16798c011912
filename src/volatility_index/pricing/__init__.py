"""Option pricing helpers."""

from volatility_index.pricing.greeks import (
    GreeksCalculator,
    NormalDistribution,
    OptionContract,
    OptionType,
    PortfolioGreeks,
    portfolio_greeks,
)

__all__ = [
    "GreeksCalculator",
    "NormalDistribution",
    "OptionContract",
    "OptionType",
    "PortfolioGreeks",
    "portfolio_greeks",
]
